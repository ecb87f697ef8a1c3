"""Blockchain Gateway Protocol Interface.

This module defines the contract between the game core and the external
blockchain collaborator (territory NFT, energy token and building
contracts). Every call suspends until the node answers. Transport errors
and timeouts surface as :class:`CollaboratorUnavailableError`; a contract
revert surfaces as :class:`ContractRejectedError` carrying its reason.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol

ENERGY_DECIMALS = 18
_ENERGY_SCALE = Decimal(10) ** ENERGY_DECIMALS


class CollaboratorUnavailableError(RuntimeError):
    """The chain could not be reached or did not answer in time."""


class ContractRejectedError(RuntimeError):
    """A contract reverted the call; ``reason`` is the revert message."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"{operation} reverted: {reason}")
        self.operation = operation
        self.reason = reason


@dataclass(frozen=True, slots=True)
class TerritoryRecord:
    """Territory fields stored by the territory NFT contract."""

    x: int
    y: int
    claimed_at: int
    last_energy_collected: int


@dataclass(frozen=True, slots=True)
class BuildingRecord:
    """One entry of a territory's building list as stored on chain."""

    building_type: int  # ordinal of BuildingType
    level: int
    built_at: int


@dataclass(frozen=True, slots=True)
class ChainReceipt:
    """Hash of a submitted write plus the value its simulation returned."""

    tx_hash: str
    result: Any = None


def from_base_units(amount: int) -> float:
    """Convert an 18-decimal token amount to a human-readable float."""

    return float(Decimal(amount) / _ENERGY_SCALE)


def to_base_units(amount: float) -> int:
    return int(Decimal(str(amount)) * _ENERGY_SCALE)


class IChainGateway(Protocol):
    """Protocol defining the reads and writes the game needs from the chain."""

    async def claim_territory(self, player: str, x: int, y: int) -> ChainReceipt:
        """Mint the territory NFT at (x, y) to ``player``.

        Returns:
            Receipt whose ``result`` is the minted token id
        """
        ...

    async def build_building(
        self, player: str, territory_id: int, building_type_index: int
    ) -> ChainReceipt:
        """Construct a building; ``building_type_index`` is the ordinal encoding."""
        ...

    async def upgrade_building(
        self, player: str, territory_id: int, building_index: int
    ) -> ChainReceipt:
        """Upgrade the building at ``building_index`` (build order) by one level."""
        ...

    async def collect_energy(self, player: str, territory_id: int) -> ChainReceipt: ...

    async def attack_territory(
        self, player: str, territory_id: int, attack_power: int
    ) -> ChainReceipt: ...

    async def get_territories_by_owner(self, address: str) -> list[int]:
        """Token ids of every territory owned by ``address``."""
        ...

    async def get_territory(self, token_id: int) -> TerritoryRecord: ...

    async def get_territory_buildings(self, token_id: int) -> list[BuildingRecord]:
        """Buildings on ``token_id`` in build order."""
        ...

    async def balance_of(self, address: str) -> int:
        """Energy token balance in base units."""
        ...
