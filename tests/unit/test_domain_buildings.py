"""Tests for the building catalog and economy formulas."""

from __future__ import annotations

import pytest

from energyclash.domain import buildings
from energyclash.domain.enums import BuildingType
from energyclash.domain.models import (
    Address,
    Building,
    BuildingID,
    Territory,
    TerritoryID,
)
from energyclash.utils.hex_math import ORIGIN


def _territory(*specs: tuple[BuildingType, int]) -> Territory:
    territory = Territory(
        token_id=TerritoryID(7),
        owner=Address("0xa11ce"),
        coordinates=ORIGIN,
        claimed_at=0.0,
        last_energy_collected=0.0,
    )
    for index, (building_type, level) in enumerate(specs):
        territory.buildings.append(
            Building(
                id=BuildingID(f"7-{index + 1}"),
                type=building_type,
                level=level,
                territory_id=territory.token_id,
                position=(0.0, 0.0),
                built_at=0.0,
            )
        )
    return territory


def test_catalog_covers_every_type():
    assert set(buildings.BUILDING_STATS) == set(BuildingType)


def test_on_chain_ordering_is_fixed():
    assert [buildings.building_type_index(t) for t in BuildingType] == list(range(6))
    assert buildings.building_type_from_index(0) is BuildingType.SOLAR_PANEL
    assert buildings.building_type_from_index(3) is BuildingType.DEFENSE_TOWER
    assert buildings.building_type_from_index(5) is BuildingType.STORAGE


@pytest.mark.parametrize("index", [-1, 6, 255])
def test_unknown_index_rejected(index):
    with pytest.raises(ValueError):
        buildings.building_type_from_index(index)


@pytest.mark.parametrize(
    ("building_type", "level", "expected"),
    [
        (BuildingType.SOLAR_PANEL, 0, 100.0),
        (BuildingType.SOLAR_PANEL, 1, 150.0),
        (BuildingType.SOLAR_PANEL, 2, 225.0),
        (BuildingType.DEFENSE_TOWER, 2, 300.0 * 1.6**2),
        (BuildingType.SHIELD_GENERATOR, 1, 680.0),
        (BuildingType.STORAGE, 3, 150.0 * 1.4**3),
    ],
)
def test_upgrade_cost(building_type, level, expected):
    assert buildings.upgrade_cost(building_type, level) == pytest.approx(expected)


def test_costs_grow_with_level():
    for building_type in BuildingType:
        costs = [
            buildings.upgrade_cost(building_type, level)
            for level in range(buildings.max_level(building_type))
        ]
        assert costs == sorted(costs)
        assert costs[0] == buildings.base_cost(building_type)


def test_totals_scale_with_level():
    territory = _territory(
        (BuildingType.SOLAR_PANEL, 3),
        (BuildingType.WIND_TURBINE, 1),
        (BuildingType.DEFENSE_TOWER, 2),
        (BuildingType.SHIELD_GENERATOR, 1),
        (BuildingType.STORAGE, 2),
    )
    assert buildings.total_generation(territory) == 55.0
    assert buildings.total_defense(territory) == 200.0
    assert buildings.total_storage(territory) == 2000.0


def test_empty_territory_totals():
    territory = _territory()
    assert buildings.total_generation(territory) == 0.0
    assert buildings.total_defense(territory) == 0.0
    assert buildings.total_storage(territory) == 0.0


def test_get_stats():
    stats = buildings.get_stats(BuildingType.HYDRO_DAM)
    assert stats.name == "Hydro Dam"
    assert stats.energy_generation == 50
    assert stats.defense is None
