"""Dataclasses describing every Energy Clash game entity.

These are plain in-memory records. The chain gateway hydrates them from
contract reads, the rule functions in :mod:`energyclash.domain.territory`
and :mod:`energyclash.domain.combat` mutate them, and the API layer turns
them into JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType

from energyclash.domain.enums import (
    BattleOutcome,
    BuildingType,
    TransactionStatus,
    TransactionType,
)
from energyclash.utils.hex_math import HexCoord, hex_to_key

# --- Strongly typed identifiers -------------------------------------------------

Address = NewType("Address", str)
TerritoryID = NewType("TerritoryID", int)
BuildingID = NewType("BuildingID", str)
AllianceID = NewType("AllianceID", str)
BattleID = NewType("BattleID", str)


# --- Core dataclasses -----------------------------------------------------------


@dataclass(slots=True)
class Building:
    """Leveled structure standing on a territory."""

    id: BuildingID
    type: BuildingType
    level: int
    territory_id: TerritoryID
    position: tuple[float, float]
    built_at: float


@dataclass(slots=True)
class Territory:
    """A claimed hex cell, backed by a territory NFT."""

    token_id: TerritoryID
    owner: Address
    coordinates: HexCoord
    claimed_at: float
    last_energy_collected: float
    buildings: list[Building] = field(default_factory=list)

    @property
    def key(self) -> str:
        return hex_to_key(self.coordinates)


@dataclass(slots=True)
class Player:
    """Wallet-backed player."""

    address: Address
    username: str | None = None
    territories: list[Territory] = field(default_factory=list)
    energy_balance: float = 0.0
    power_score: float = 0.0
    alliance_id: AllianceID | None = None
    last_attack_at: float | None = None

    def find_territory(self, token_id: TerritoryID) -> Territory | None:
        for territory in self.territories:
            if territory.token_id == token_id:
                return territory
        return None


@dataclass(slots=True)
class Alliance:
    """Group of players sharing a banner."""

    id: AllianceID
    name: str
    leader: Address
    members: list[Address]
    created_at: float
    territories: int = 0
    total_power: float = 0.0


@dataclass(slots=True)
class Battle:
    """Record of a resolved (or submitted) attack."""

    id: BattleID
    attacker: Address
    defender: Address
    target_territory_id: TerritoryID
    attack_power: float
    defense_power: float
    timestamp: float
    result: BattleOutcome = BattleOutcome.PENDING


@dataclass(slots=True)
class Transaction:
    """Chain write submitted on behalf of a player."""

    hash: str
    type: TransactionType
    sender: Address
    timestamp: float
    status: TransactionStatus = TransactionStatus.PENDING
    to: Address | None = None
    amount: float | None = None
    territory_id: TerritoryID | None = None


@dataclass(slots=True)
class TerritoryRegistry:
    """Map-wide index of claimed territories keyed by hex key."""

    territories: dict[str, Territory] = field(default_factory=dict)

    def owner_of(self, coord: HexCoord) -> Address | None:
        territory = self.territories.get(hex_to_key(coord))
        return territory.owner if territory is not None else None

    def at(self, coord: HexCoord) -> Territory | None:
        return self.territories.get(hex_to_key(coord))

    def get(self, token_id: TerritoryID) -> Territory | None:
        for territory in self.territories.values():
            if territory.token_id == token_id:
                return territory
        return None

    def register(self, territory: Territory) -> None:
        self.territories[territory.key] = territory

    def owned_by(self, owner: Address) -> list[Territory]:
        return [t for t in self.territories.values() if t.owner == owner]

    def next_token_id(self) -> TerritoryID:
        if not self.territories:
            return TerritoryID(1)
        return TerritoryID(max(int(t.token_id) for t in self.territories.values()) + 1)
