"""Pytest configuration shared by the unit and integration suites.

This adds the `src/` directory to `sys.path` so tests can import the
`energyclash` package without requiring an editable install in CI, and
provides an in-memory stand-in for the blockchain collaborator.
"""

import sys
from dataclasses import replace
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from energyclash.interfaces.chain import (  # noqa: E402
    BuildingRecord,
    ChainReceipt,
    CollaboratorUnavailableError,
    ContractRejectedError,
    TerritoryRecord,
    to_base_units,
)


class FakeChain:
    """Protocol-compatible fake of the territory, energy and building contracts.

    Set ``fail`` to simulate an unreachable node, or ``revert_reason`` to make
    every call revert with that message.
    """

    def __init__(self) -> None:
        self.balances: dict[str, int] = {}
        self.owners: dict[int, str] = {}
        self.records: dict[int, TerritoryRecord] = {}
        self.buildings: dict[int, list[BuildingRecord]] = {}
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self.fail = False
        self.revert_reason: str | None = None
        self.now = 0
        self._next_token = 1
        self._tx_count = 0

    def fund(self, address: str, energy: float) -> None:
        self.balances[address.lower()] = to_base_units(energy)

    def seed_territory(self, owner: str, x: int, y: int, *, claimed_at: int = 0) -> int:
        token_id = self._next_token
        self._next_token += 1
        self.owners[token_id] = owner
        self.records[token_id] = TerritoryRecord(
            x=x, y=y, claimed_at=claimed_at, last_energy_collected=claimed_at
        )
        self.buildings[token_id] = []
        return token_id

    def _receipt(self, result: object = None) -> ChainReceipt:
        self._tx_count += 1
        return ChainReceipt(tx_hash=f"0x{self._tx_count:064x}", result=result)

    def _check(self, name: str, *args: object) -> None:
        self.calls.append((name, args))
        if self.fail:
            raise CollaboratorUnavailableError(f"{name} failed: node unreachable")
        if self.revert_reason is not None:
            raise ContractRejectedError(name, self.revert_reason)

    async def claim_territory(self, player: str, x: int, y: int) -> ChainReceipt:
        self._check("claimTerritory", player, x, y)
        if any(record.x == x and record.y == y for record in self.records.values()):
            raise ContractRejectedError("claimTerritory", "Territory already claimed")
        token_id = self.seed_territory(player, x, y, claimed_at=self.now)
        return self._receipt(token_id)

    async def build_building(
        self, player: str, territory_id: int, building_type_index: int
    ) -> ChainReceipt:
        self._check("buildBuilding", player, territory_id, building_type_index)
        self.buildings.setdefault(territory_id, []).append(
            BuildingRecord(building_type=building_type_index, level=1, built_at=self.now)
        )
        return self._receipt()

    async def upgrade_building(
        self, player: str, territory_id: int, building_index: int
    ) -> ChainReceipt:
        self._check("upgradeBuilding", player, territory_id, building_index)
        entries = self.buildings[territory_id]
        entries[building_index] = replace(
            entries[building_index], level=entries[building_index].level + 1
        )
        return self._receipt()

    async def collect_energy(self, player: str, territory_id: int) -> ChainReceipt:
        self._check("collectEnergy", player, territory_id)
        self.records[territory_id] = replace(
            self.records[territory_id], last_energy_collected=self.now
        )
        return self._receipt()

    async def attack_territory(
        self, player: str, territory_id: int, attack_power: int
    ) -> ChainReceipt:
        self._check("attack", player, territory_id, attack_power)
        return self._receipt(True)

    async def get_territories_by_owner(self, address: str) -> list[int]:
        self._check("getTerritoriesByOwner", address)
        return [tid for tid, owner in self.owners.items() if owner.lower() == address.lower()]

    async def get_territory(self, token_id: int) -> TerritoryRecord:
        self._check("getTerritory", token_id)
        return self.records[token_id]

    async def get_territory_buildings(self, token_id: int) -> list[BuildingRecord]:
        self._check("getTerritoryBuildings", token_id)
        return list(self.buildings.get(token_id, []))

    async def balance_of(self, address: str) -> int:
        self._check("balanceOf", address)
        return self.balances.get(address.lower(), 0)


@pytest.fixture
def fake_chain() -> FakeChain:
    return FakeChain()
