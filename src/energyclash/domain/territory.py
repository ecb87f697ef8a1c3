"""Territory and building rules.

Every operation validates first and mutates only once all checks have
passed, so a failed action leaves the player, the territory and the registry
exactly as they were.
"""

from __future__ import annotations

import time

from energyclash.domain.buildings import BUILDING_STATS, total_generation
from energyclash.domain.enums import BuildingType, ErrorKind
from energyclash.domain.models import (
    Building,
    BuildingID,
    Player,
    Territory,
    TerritoryID,
    TerritoryRegistry,
)
from energyclash.domain.results import ActionResult, GameError
from energyclash.domain.rules_config import DEFAULT_RULES, RulesConfig
from energyclash.utils.hex_math import HexCoord, hex_to_key

# Building placement offsets inside a hex, in hex-size units, by slot index.
BUILDING_SLOTS: tuple[tuple[float, float], ...] = (
    (0.0, 0.0),
    (0.4, 0.0),
    (-0.4, 0.0),
    (0.0, 0.4),
    (0.0, -0.4),
)

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400


def _now(now: float | None) -> float:
    return time.time() if now is None else now


def check_claim(
    registry: TerritoryRegistry,
    player: Player,
    coord: HexCoord,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> GameError | None:
    """Return the reason ``player`` may not claim ``coord``, or ``None``."""

    owner = registry.owner_of(coord)
    if owner is not None:
        return GameError(ErrorKind.ALREADY_OWNED, f"Hex {hex_to_key(coord)} is owned by {owner}")
    cost = rules.territory.claim_cost
    if player.energy_balance < cost:
        return GameError(
            ErrorKind.INSUFFICIENT_ENERGY,
            f"Claiming costs {cost:g} energy, balance is {player.energy_balance:g}",
        )
    if len(player.territories) >= rules.territory.max_per_player:
        return GameError(
            ErrorKind.TERRITORY_LIMIT,
            f"Players may hold at most {rules.territory.max_per_player} territories",
        )
    return None


def claim_territory(
    registry: TerritoryRegistry,
    player: Player,
    coord: HexCoord,
    *,
    now: float | None = None,
    token_id: TerritoryID | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> ActionResult[Territory]:
    """Claim an unowned hex for ``player``.

    Debits the claim cost, registers the new territory map-wide and appends it
    to the player's holdings. ``token_id`` is the NFT id minted on chain; when
    omitted the registry allocates the next free id.
    """

    error = check_claim(registry, player, coord, rules=rules)
    if error is not None:
        return ActionResult(error=error)

    timestamp = _now(now)
    territory = Territory(
        token_id=token_id if token_id is not None else registry.next_token_id(),
        owner=player.address,
        coordinates=coord,
        claimed_at=timestamp,
        last_energy_collected=timestamp,
    )
    player.energy_balance -= rules.territory.claim_cost
    registry.register(territory)
    player.territories.append(territory)
    return ActionResult.success(territory)


def check_build(
    player: Player,
    territory: Territory,
    building_type: BuildingType,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> GameError | None:
    """Return the reason ``building_type`` may not be built, or ``None``."""

    if territory.owner != player.address:
        return GameError(ErrorKind.NOT_FOUND, f"Territory {territory.token_id} is not yours")
    limit = rules.territory.max_buildings_per_territory
    if len(territory.buildings) >= limit:
        return GameError(
            ErrorKind.TERRITORY_FULL,
            f"Territory {territory.token_id} already has {limit} buildings",
        )
    cost = BUILDING_STATS[building_type].base_cost
    if player.energy_balance < cost:
        return GameError(
            ErrorKind.INSUFFICIENT_ENERGY,
            f"{BUILDING_STATS[building_type].name} costs {cost:g} energy",
        )
    return None


def build_structure(
    player: Player,
    territory: Territory,
    building_type: BuildingType,
    *,
    now: float | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> ActionResult[Building]:
    """Place a level 1 building in the next free slot of ``territory``."""

    error = check_build(player, territory, building_type, rules=rules)
    if error is not None:
        return ActionResult(error=error)

    slot = len(territory.buildings)
    building = Building(
        id=BuildingID(f"{int(territory.token_id)}-{slot + 1}"),
        type=building_type,
        level=1,
        territory_id=territory.token_id,
        position=BUILDING_SLOTS[slot % len(BUILDING_SLOTS)],
        built_at=_now(now),
    )
    player.energy_balance -= BUILDING_STATS[building_type].base_cost
    territory.buildings.append(building)
    return ActionResult.success(building)


def find_building(territory: Territory, building_id: str) -> Building | None:
    for building in territory.buildings:
        if building.id == building_id:
            return building
    return None


def check_upgrade(
    player: Player, territory: Territory, building_id: str
) -> GameError | None:
    """Return the reason the building may not be upgraded, or ``None``."""

    if territory.owner != player.address:
        return GameError(ErrorKind.NOT_FOUND, f"Territory {territory.token_id} is not yours")
    building = find_building(territory, building_id)
    if building is None:
        return GameError(ErrorKind.NOT_FOUND, f"Building {building_id} not found")
    stats = BUILDING_STATS[building.type]
    if building.level >= stats.max_level:
        return GameError(
            ErrorKind.MAX_LEVEL_REACHED,
            f"{stats.name} is already at max level {stats.max_level}",
        )
    cost = stats.upgrade_cost(building.level)
    if player.energy_balance < cost:
        return GameError(
            ErrorKind.INSUFFICIENT_ENERGY,
            f"Upgrade costs {cost:g} energy, balance is {player.energy_balance:g}",
        )
    return None


def upgrade_building(
    player: Player, territory: Territory, building_id: str
) -> ActionResult[Building]:
    """Raise a building by one level, paying the level-dependent cost."""

    error = check_upgrade(player, territory, building_id)
    if error is not None:
        return ActionResult(error=error)
    building = find_building(territory, building_id)
    if building is None:
        return ActionResult.failure(ErrorKind.NOT_FOUND, f"Building {building_id} not found")

    player.energy_balance -= BUILDING_STATS[building.type].upgrade_cost(building.level)
    building.level += 1
    return ActionResult.success(building)


def elapsed_blocks(
    territory: Territory, *, now: float | None = None, rules: RulesConfig = DEFAULT_RULES
) -> float:
    """Blocks produced since the last collection; fractional, never negative."""

    elapsed = max(0.0, _now(now) - territory.last_energy_collected)
    return elapsed / rules.energy.block_time_seconds


def pending_energy(
    territory: Territory, *, now: float | None = None, rules: RulesConfig = DEFAULT_RULES
) -> float:
    """Energy that :func:`collect_energy` would pay out at ``now``."""

    blocks = elapsed_blocks(territory, now=now, rules=rules)
    return total_generation(territory) * blocks * rules.energy.base_rate


def collection_ready(
    territory: Territory, *, now: float | None = None, rules: RulesConfig = DEFAULT_RULES
) -> bool:
    """Whether a full collection interval has passed since the last collection."""

    return seconds_since_collection(territory, now=now) >= rules.energy.collection_interval_seconds


def collect_energy(
    player: Player,
    territory: Territory,
    *,
    now: float | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> ActionResult[float]:
    """Credit the energy generated since the last collection.

    Always succeeds; collecting twice at the same instant yields zero.
    """

    timestamp = _now(now)
    amount = pending_energy(territory, now=timestamp, rules=rules)
    player.energy_balance += amount
    territory.last_energy_collected = timestamp
    return ActionResult.success(amount)


def seconds_since_claim(territory: Territory, *, now: float | None = None) -> int:
    return max(0, int(_now(now) - territory.claimed_at))


def seconds_since_collection(territory: Territory, *, now: float | None = None) -> int:
    return max(0, int(_now(now) - territory.last_energy_collected))


def format_elapsed(seconds: int) -> str:
    """Render an age as ``"42s ago"``, ``"3m ago"``, ``"2h ago"`` or ``"1d ago"``."""

    if seconds < SECONDS_PER_MINUTE:
        return f"{seconds}s ago"
    if seconds < SECONDS_PER_HOUR:
        return f"{seconds // SECONDS_PER_MINUTE}m ago"
    if seconds < SECONDS_PER_DAY:
        return f"{seconds // SECONDS_PER_HOUR}h ago"
    return f"{seconds // SECONDS_PER_DAY}d ago"
