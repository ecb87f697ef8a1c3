"""Tests for the chain interface helpers and the web3 gateway error handling."""

from __future__ import annotations

import asyncio

import aiohttp
import pytest
from web3.exceptions import ContractLogicError

from energyclash.chain import Web3ChainGateway
from energyclash.chain.abi import BATTLE_ABI, BUILDING_ABI, ENERGY_TOKEN_ABI, TERRITORY_NFT_ABI
from energyclash.config import Settings
from energyclash.interfaces.chain import (
    BuildingRecord,
    CollaboratorUnavailableError,
    ContractRejectedError,
    from_base_units,
    to_base_units,
)


def _gateway(tmp_path, timeout: float = 30.0) -> Web3ChainGateway:
    settings = Settings(data_dir=tmp_path, rpc_timeout_seconds=timeout)
    return Web3ChainGateway(settings)


def _names(abi) -> set[str]:
    return {entry["name"] for entry in abi}


def test_base_unit_conversion():
    assert to_base_units(1.0) == 10**18
    assert to_base_units(0.5) == 5 * 10**17
    assert from_base_units(1234 * 10**18) == 1234.0
    assert from_base_units(0) == 0.0
    assert from_base_units(to_base_units(77.25)) == 77.25


def test_abis_expose_only_called_functions():
    assert _names(TERRITORY_NFT_ABI) == {"claimTerritory", "getTerritory", "getTerritoriesByOwner"}
    assert _names(ENERGY_TOKEN_ABI) == {"balanceOf"}
    assert _names(BUILDING_ABI) == {
        "buildBuilding",
        "upgradeBuilding",
        "collectEnergy",
        "getTerritoryBuildings",
    }
    assert _names(BATTLE_ABI) == {"attack"}


@pytest.mark.asyncio
async def test_guard_reports_reverts_as_rejections(tmp_path):
    gateway = _gateway(tmp_path)

    async def reverted() -> int:
        raise ContractLogicError("execution reverted: Territory already claimed")

    with pytest.raises(ContractRejectedError) as excinfo:
        await gateway._guard("claimTerritory", reverted())

    assert "Territory already claimed" in excinfo.value.reason
    assert excinfo.value.operation == "claimTerritory"
    assert not isinstance(excinfo.value, CollaboratorUnavailableError)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [aiohttp.ClientConnectionError("connection refused"), OSError("network is unreachable")],
)
async def test_guard_reports_transport_errors_as_unavailable(tmp_path, error):
    gateway = _gateway(tmp_path)

    async def unreachable() -> int:
        raise error

    with pytest.raises(CollaboratorUnavailableError):
        await gateway._guard("balanceOf", unreachable())


@pytest.mark.asyncio
async def test_guard_times_out(tmp_path):
    gateway = _gateway(tmp_path, timeout=0.01)

    async def slow() -> int:
        await asyncio.sleep(5)
        return 1

    with pytest.raises(CollaboratorUnavailableError):
        await gateway._guard("balanceOf", slow())


@pytest.mark.asyncio
async def test_guard_passes_values_through(tmp_path):
    gateway = _gateway(tmp_path)

    async def fine() -> int:
        return 42

    assert await gateway._guard("balanceOf", fine()) == 42


class _StubCall:
    def __init__(self, value) -> None:
        self.value = value

    async def call(self):
        return self.value


class _StubFunctions:
    def __init__(self, entries) -> None:
        self.entries = entries

    def getTerritoryBuildings(self, token_id):  # noqa: N802
        return _StubCall(self.entries)


class _StubContract:
    def __init__(self, entries) -> None:
        self.functions = _StubFunctions(entries)


@pytest.mark.asyncio
async def test_territory_buildings_are_decoded(tmp_path):
    gateway = _gateway(tmp_path)
    gateway._building = _StubContract([(2, 3, 1_700_000_000), (4, 1, 1_700_000_100)])

    records = await gateway.get_territory_buildings(5)

    assert records == [
        BuildingRecord(building_type=2, level=3, built_at=1_700_000_000),
        BuildingRecord(building_type=4, level=1, built_at=1_700_000_100),
    ]
