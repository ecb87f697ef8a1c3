"""Alliance membership rules."""

from __future__ import annotations

import time
from uuid import uuid4

from energyclash.domain.enums import ErrorKind
from energyclash.domain.models import Alliance, AllianceID, Player
from energyclash.domain.results import ActionResult
from energyclash.domain.rules_config import DEFAULT_RULES, RulesConfig


def create_alliance(
    leader: Player,
    name: str,
    *,
    now: float | None = None,
    alliance_id: AllianceID | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> ActionResult[Alliance]:
    """Found a new alliance led by ``leader``, paying the creation cost."""

    name = name.strip()
    limits = rules.alliance
    if not limits.min_name_length <= len(name) <= limits.max_name_length:
        return ActionResult.failure(
            ErrorKind.INVALID_ALLIANCE,
            f"Alliance names must be {limits.min_name_length}-{limits.max_name_length} characters",
        )
    if leader.alliance_id is not None:
        return ActionResult.failure(ErrorKind.INVALID_ALLIANCE, "Leave your alliance first")
    if leader.energy_balance < limits.creation_cost:
        return ActionResult.failure(
            ErrorKind.INSUFFICIENT_ENERGY,
            f"Founding an alliance costs {limits.creation_cost:g} energy",
        )

    alliance = Alliance(
        id=alliance_id or AllianceID(uuid4().hex),
        name=name,
        leader=leader.address,
        members=[leader.address],
        created_at=time.time() if now is None else now,
    )
    leader.energy_balance -= limits.creation_cost
    leader.alliance_id = alliance.id
    _absorb(alliance, leader)
    return ActionResult.success(alliance)


def join_alliance(
    player: Player, alliance: Alliance, *, rules: RulesConfig = DEFAULT_RULES
) -> ActionResult[Alliance]:
    if player.alliance_id is not None:
        return ActionResult.failure(ErrorKind.INVALID_ALLIANCE, "Leave your alliance first")
    if len(alliance.members) >= rules.alliance.max_members:
        return ActionResult.failure(
            ErrorKind.ALLIANCE_FULL, f"{alliance.name} has {rules.alliance.max_members} members"
        )

    alliance.members.append(player.address)
    player.alliance_id = alliance.id
    _absorb(alliance, player)
    return ActionResult.success(alliance)


def leave_alliance(player: Player, alliance: Alliance) -> ActionResult[Alliance]:
    """Remove ``player``; leadership passes to the longest-standing member."""

    if player.alliance_id != alliance.id or player.address not in alliance.members:
        return ActionResult.failure(ErrorKind.NOT_FOUND, f"Not a member of {alliance.name}")

    alliance.members.remove(player.address)
    player.alliance_id = None
    alliance.territories = max(0, alliance.territories - len(player.territories))
    alliance.total_power = max(0.0, alliance.total_power - player.power_score)
    if alliance.leader == player.address and alliance.members:
        alliance.leader = alliance.members[0]
    return ActionResult.success(alliance)


def _absorb(alliance: Alliance, player: Player) -> None:
    alliance.territories += len(player.territories)
    alliance.total_power += player.power_score
