"""Attack resolution rules.

The outcome is deterministic: the attacker's power scaled by the attack
multiplier is compared against the target's aggregated building defense
scaled by the defense multiplier. Ownership transfer after a victory is
settled on chain, not here.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from energyclash.domain.buildings import total_defense
from energyclash.domain.enums import BattleOutcome, ErrorKind
from energyclash.domain.models import Battle, BattleID, Player, Territory
from energyclash.domain.results import ActionResult, GameError
from energyclash.domain.rules_config import DEFAULT_RULES, RulesConfig
from energyclash.utils.hex_math import hex_distance


@dataclass(slots=True)
class AttackPowers:
    """Effective strengths on both sides of an attack."""

    attack: float
    defense: float

    @property
    def attacker_wins(self) -> bool:
        return self.attack > self.defense


def effective_powers(
    attacker_power: float, target: Territory, *, rules: RulesConfig = DEFAULT_RULES
) -> AttackPowers:
    return AttackPowers(
        attack=attacker_power * rules.combat.attack_multiplier,
        defense=total_defense(target) * rules.combat.defense_multiplier,
    )


def distance_to_target(attacker: Player, target: Territory) -> int | None:
    """Hex distance from the attacker's closest territory, ``None`` if it holds none."""

    distances = [hex_distance(t.coordinates, target.coordinates) for t in attacker.territories]
    return min(distances) if distances else None


def cooldown_remaining(
    attacker: Player, *, now: float, rules: RulesConfig = DEFAULT_RULES
) -> float:
    if attacker.last_attack_at is None:
        return 0.0
    return max(0.0, rules.combat.cooldown_seconds - (now - attacker.last_attack_at))


def check_attack(
    attacker: Player,
    target: Territory,
    *,
    now: float,
    rules: RulesConfig = DEFAULT_RULES,
) -> GameError | None:
    """Return the reason the attack may not proceed, or ``None``."""

    if target.owner == attacker.address:
        return GameError(ErrorKind.INVALID_TARGET, "Cannot attack your own territory")
    distance = distance_to_target(attacker, target)
    if distance is None or distance > rules.combat.max_attack_range:
        return GameError(
            ErrorKind.OUT_OF_RANGE,
            f"Targets must be within {rules.combat.max_attack_range} hexes of your territory",
        )
    remaining = cooldown_remaining(attacker, now=now, rules=rules)
    if remaining > 0:
        return GameError(ErrorKind.COOLDOWN, f"Next attack possible in {remaining:.0f}s")
    return None


def resolve_attack(
    attacker: Player,
    target: Territory,
    *,
    attacker_power: float | None = None,
    now: float | None = None,
    battle_id: BattleID | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> ActionResult[Battle]:
    """Resolve an attack on ``target`` and start the attacker's cooldown.

    ``attacker_power`` defaults to the attacker's power score.
    """

    timestamp = time.time() if now is None else now
    error = check_attack(attacker, target, now=timestamp, rules=rules)
    if error is not None:
        return ActionResult(error=error)

    power = attacker.power_score if attacker_power is None else attacker_power
    powers = effective_powers(power, target, rules=rules)
    battle = Battle(
        id=battle_id or BattleID(f"{attacker.address}:{int(target.token_id)}:{timestamp:.0f}"),
        attacker=attacker.address,
        defender=target.owner,
        target_territory_id=target.token_id,
        attack_power=powers.attack,
        defense_power=powers.defense,
        timestamp=timestamp,
        result=BattleOutcome.VICTORY if powers.attacker_wins else BattleOutcome.DEFEAT,
    )
    attacker.last_attack_at = timestamp
    return ActionResult.success(battle)
