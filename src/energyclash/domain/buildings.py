"""Building catalog and the economy formulas derived from it.

Each :class:`BuildingType` maps to one :class:`BuildingStats` record. Costs
grow geometrically with level; defensive structures use steeper growth
factors than economic ones so that late-game defense gets expensive.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from energyclash.domain.enums import BuildingType
from energyclash.domain.models import Territory


@dataclass(frozen=True, slots=True)
class BuildingStats:
    """Static configuration for one building type."""

    type: BuildingType
    name: str
    description: str
    base_cost: float
    growth_factor: float
    max_level: int
    energy_generation: float | None = None  # per block, per level
    defense: float | None = None  # per level
    storage: float | None = None  # per level

    def upgrade_cost(self, level: int) -> float:
        """Energy needed to upgrade a building currently at ``level``."""

        return self.base_cost * self.growth_factor**level


BUILDING_STATS: MappingProxyType[BuildingType, BuildingStats] = MappingProxyType(
    {
        BuildingType.SOLAR_PANEL: BuildingStats(
            type=BuildingType.SOLAR_PANEL,
            name="Solar Panel",
            description="Generates clean energy from sunlight. Low cost, steady output.",
            base_cost=100,
            growth_factor=1.5,
            max_level=10,
            energy_generation=10,
        ),
        BuildingType.WIND_TURBINE: BuildingStats(
            type=BuildingType.WIND_TURBINE,
            name="Wind Turbine",
            description="Harnesses wind power. Medium cost, good efficiency.",
            base_cost=250,
            growth_factor=1.5,
            max_level=10,
            energy_generation=25,
        ),
        BuildingType.HYDRO_DAM: BuildingStats(
            type=BuildingType.HYDRO_DAM,
            name="Hydro Dam",
            description="Uses water flow for maximum power. High cost, highest output.",
            base_cost=500,
            growth_factor=1.5,
            max_level=10,
            energy_generation=50,
        ),
        BuildingType.DEFENSE_TOWER: BuildingStats(
            type=BuildingType.DEFENSE_TOWER,
            name="Defense Tower",
            description="Protects your territory from attacks.",
            base_cost=300,
            growth_factor=1.6,
            max_level=8,
            defense=50,
        ),
        BuildingType.SHIELD_GENERATOR: BuildingStats(
            type=BuildingType.SHIELD_GENERATOR,
            name="Shield Generator",
            description="Creates a temporary protective shield.",
            base_cost=400,
            growth_factor=1.7,
            max_level=5,
            defense=100,
        ),
        BuildingType.STORAGE: BuildingStats(
            type=BuildingType.STORAGE,
            name="Energy Storage",
            description="Increases your energy storage capacity.",
            base_cost=150,
            growth_factor=1.4,
            max_level=15,
            storage=1000,
        ),
    }
)

# Canonical on-chain ordering of building types.
BUILDING_TYPE_ORDER: tuple[BuildingType, ...] = tuple(BuildingType)


def get_stats(building_type: BuildingType) -> BuildingStats:
    return BUILDING_STATS[building_type]


def base_cost(building_type: BuildingType) -> float:
    return BUILDING_STATS[building_type].base_cost


def max_level(building_type: BuildingType) -> int:
    return BUILDING_STATS[building_type].max_level


def upgrade_cost(building_type: BuildingType, level: int) -> float:
    """Cost to take a ``building_type`` building from ``level`` to ``level + 1``."""

    return BUILDING_STATS[building_type].upgrade_cost(level)


def building_type_index(building_type: BuildingType) -> int:
    """Return the ``uint8`` used to encode ``building_type`` on chain."""

    return BUILDING_TYPE_ORDER.index(building_type)


def building_type_from_index(index: int) -> BuildingType:
    """Decode an on-chain ``uint8`` building type.

    Raises:
        ValueError: If the index is outside the catalog
    """

    if not 0 <= index < len(BUILDING_TYPE_ORDER):
        raise ValueError(f"Unknown building type index {index}")
    return BUILDING_TYPE_ORDER[index]


def total_generation(territory: Territory) -> float:
    """Energy produced per block by every building on ``territory``."""

    total = 0.0
    for building in territory.buildings:
        generation = BUILDING_STATS[building.type].energy_generation or 0
        total += generation * building.level
    return total


def total_defense(territory: Territory) -> float:
    total = 0.0
    for building in territory.buildings:
        defense = BUILDING_STATS[building.type].defense or 0
        total += defense * building.level
    return total


def total_storage(territory: Territory) -> float:
    total = 0.0
    for building in territory.buildings:
        storage = BUILDING_STATS[building.type].storage or 0
        total += storage * building.level
    return total
