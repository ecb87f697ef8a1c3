"""Tests for the runtime helpers backing the HTTP API."""

from __future__ import annotations

import pytest

from energyclash.api.runtime import (
    SessionManager,
    building_stats_list,
    building_to_dict,
    session_key,
    territory_to_dict,
)
from energyclash.domain.enums import BuildingType
from energyclash.domain.models import (
    Address,
    Building,
    BuildingID,
    Territory,
    TerritoryID,
    TerritoryRegistry,
)
from energyclash.domain.session import ViewportSnapshot
from energyclash.repository import JsonViewportRepository
from energyclash.utils.hex_math import HexCoord


def _territory() -> Territory:
    territory = Territory(
        token_id=TerritoryID(3),
        owner=Address("0xa11ce"),
        coordinates=HexCoord(x=1, y=-1),
        claimed_at=0.0,
        last_energy_collected=0.0,
    )
    territory.buildings.append(
        Building(
            id=BuildingID("3-1"),
            type=BuildingType.SHIELD_GENERATOR,
            level=5,
            territory_id=territory.token_id,
            position=(0.0, 0.0),
            built_at=0.0,
        )
    )
    return territory


def test_session_key_is_case_insensitive():
    assert session_key("0xAbC") == session_key("0xabc")


def test_building_at_max_level_has_no_upgrade_cost():
    payload = building_to_dict(_territory().buildings[0])
    assert payload["level"] == 5
    assert payload["upgrade_cost"] is None


def test_territory_view():
    payload = territory_to_dict(_territory(), now=120.0)
    assert payload["coordinates"] == {"x": 1, "y": -1}
    assert payload["total_defense"] == 500.0
    assert payload["total_generation"] == 0.0
    assert payload["claimed_ago"] == "2m ago"
    assert payload["collection_ready"] is False


def test_stats_list_is_in_chain_order():
    assert [entry["type"] for entry in building_stats_list()] == [str(t) for t in BuildingType]


@pytest.mark.asyncio
async def test_manager_restores_viewport(tmp_path, fake_chain):
    viewports = JsonViewportRepository(tmp_path)
    viewports.save("0xa11ce", ViewportSnapshot(viewport_center=HexCoord(x=9, y=9), zoom_level=2.0))
    manager = SessionManager(fake_chain, viewports, registry=TerritoryRegistry())

    (await manager.connect("0xA11CE")).unwrap()

    service = manager.get("0xa11ce")
    assert service.session.viewport_center == HexCoord(x=9, y=9)
    assert service.session.zoom_level == 2.0
    assert len(manager) == 1

    assert manager.disconnect("0xA11CE")
    assert not manager.disconnect("0xA11CE")
    assert len(manager) == 0
