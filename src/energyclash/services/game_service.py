"""Game action service for Energy Clash.

This module drives a single :class:`~energyclash.domain.session.GameSession`:
it validates player intents against the domain rules, submits them to the
blockchain collaborator, and applies the domain mutation only after the
chain has accepted the write. A failed or abandoned chain call leaves the
session untouched apart from its error field.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from energyclash.domain import combat
from energyclash.domain import territory as territory_rules
from energyclash.domain.buildings import building_type_from_index, building_type_index
from energyclash.domain.enums import (
    BuildingType,
    ErrorKind,
    TransactionStatus,
    TransactionType,
)
from energyclash.domain.models import (
    Address,
    Battle,
    Building,
    BuildingID,
    Player,
    Territory,
    TerritoryID,
    TerritoryRegistry,
    Transaction,
)
from energyclash.domain.results import ActionResult, GameError
from energyclash.domain.rules_config import DEFAULT_RULES, RulesConfig
from energyclash.domain.session import GameSession
from energyclash.interfaces.chain import (
    BuildingRecord,
    ChainReceipt,
    CollaboratorUnavailableError,
    ContractRejectedError,
    IChainGateway,
    TerritoryRecord,
    from_base_units,
)
from energyclash.utils.hex_math import HexCoord

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NO_PLAYER = GameError(ErrorKind.NO_PLAYER, "Connect a wallet first")

# Revert message fragments (lowercase) and the rule each one reports.
_REVERT_KINDS: tuple[tuple[str, ErrorKind], ...] = (
    ("already claimed", ErrorKind.ALREADY_OWNED),
    ("already owned", ErrorKind.ALREADY_OWNED),
    ("insufficient", ErrorKind.INSUFFICIENT_ENERGY),
    ("max level", ErrorKind.MAX_LEVEL_REACHED),
    ("max buildings", ErrorKind.TERRITORY_FULL),
    ("territory full", ErrorKind.TERRITORY_FULL),
    ("cooldown", ErrorKind.COOLDOWN),
    ("out of range", ErrorKind.OUT_OF_RANGE),
    ("not owner", ErrorKind.NOT_FOUND),
    ("not the owner", ErrorKind.NOT_FOUND),
    ("nonexistent", ErrorKind.NOT_FOUND),
)


def error_kind_for_revert(reason: str) -> ErrorKind:
    """Classify a contract revert message; unknown reasons are ``REJECTED``."""

    lowered = reason.lower()
    for fragment, kind in _REVERT_KINDS:
        if fragment in lowered:
            return kind
    return ErrorKind.REJECTED


def territory_from_record(
    token_id: int,
    owner: str,
    record: TerritoryRecord,
    buildings: list[BuildingRecord] | None = None,
) -> Territory:
    """Build a domain territory from the fields stored on chain."""

    territory = Territory(
        token_id=TerritoryID(token_id),
        owner=Address(owner),
        coordinates=HexCoord(x=record.x, y=record.y),
        claimed_at=float(record.claimed_at),
        last_energy_collected=float(record.last_energy_collected),
    )
    territory.buildings = buildings_from_records(territory.token_id, buildings or [])
    return territory


def buildings_from_records(
    territory_id: TerritoryID, records: list[BuildingRecord]
) -> list[Building]:
    """Decode a territory's on-chain building list, keeping build order.

    Entries with a type index outside the catalog are skipped with a warning.
    """

    slots = territory_rules.BUILDING_SLOTS
    buildings = []
    for slot, record in enumerate(records):
        try:
            building_type = building_type_from_index(record.building_type)
        except ValueError:
            logger.warning(
                "Skipping building %d on territory %d: unknown type index %d",
                slot,
                int(territory_id),
                record.building_type,
            )
            continue
        buildings.append(
            Building(
                id=BuildingID(f"{int(territory_id)}-{slot + 1}"),
                type=building_type,
                level=record.level,
                territory_id=territory_id,
                position=slots[slot % len(slots)],
                built_at=float(record.built_at),
            )
        )
    return buildings


class GameService:
    """Service executing player actions for one session."""

    def __init__(
        self,
        session: GameSession,
        chain: IChainGateway,
        *,
        registry: TerritoryRegistry | None = None,
        rules: RulesConfig = DEFAULT_RULES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.session = session
        self.chain = chain
        self.registry = registry if registry is not None else TerritoryRegistry()
        self.rules = rules
        self.clock = clock
        self.transactions: list[Transaction] = []
        self.battles: list[Battle] = []

    # --- connection and refresh -------------------------------------------------

    async def connect(self, address: str, *, username: str | None = None) -> ActionResult[Player]:
        """Load ``address``'s balance and territories and make it the current player."""

        self.session.set_loading(True)
        try:
            balance = await self.chain.balance_of(address)
            token_ids = await self.chain.get_territories_by_owner(address)
            territories = []
            for token_id in token_ids:
                known = self.registry.get(TerritoryID(token_id))
                if known is None:
                    # Only territories this process has not seen are rebuilt from chain.
                    record = await self.chain.get_territory(token_id)
                    buildings = await self.chain.get_territory_buildings(token_id)
                    known = territory_from_record(token_id, address, record, buildings)
                territories.append(known)
        except (CollaboratorUnavailableError, ContractRejectedError) as exc:
            return self._chain_failure(exc)
        finally:
            self.session.set_loading(False)

        for territory in territories:
            if self.registry.get(territory.token_id) is None:
                self.registry.register(territory)

        player = Player(
            address=Address(address),
            username=username,
            territories=territories,
            energy_balance=from_base_units(balance),
        )
        self.session.set_current_player(player)
        self.session.clear_error()
        logger.info("Connected %s with %d territories", address, len(territories))
        return ActionResult.success(player)

    def disconnect(self) -> None:
        self.session.disconnect()

    async def refresh_balance(self) -> ActionResult[float]:
        player = self.session.current_player
        if player is None:
            return self._reject(_NO_PLAYER)

        self.session.set_loading(True)
        try:
            balance = await self.chain.balance_of(player.address)
        except (CollaboratorUnavailableError, ContractRejectedError) as exc:
            return self._chain_failure(exc)
        finally:
            self.session.set_loading(False)

        self.session.set_player_energy(from_base_units(balance))
        return ActionResult.success(player.energy_balance)

    # --- actions ----------------------------------------------------------------

    async def claim(self, coord: HexCoord) -> ActionResult[Territory]:
        player = self.session.current_player
        if player is None:
            return self._reject(_NO_PLAYER)

        def apply(receipt: ChainReceipt) -> ActionResult[Territory]:
            token_id = TerritoryID(receipt.result) if isinstance(receipt.result, int) else None
            return territory_rules.claim_territory(
                self.registry, player, coord, now=self.clock(), token_id=token_id, rules=self.rules
            )

        return await self._execute(
            TransactionType.CLAIM,
            territory_rules.check_claim(self.registry, player, coord, rules=self.rules),
            lambda: self.chain.claim_territory(player.address, coord.x, coord.y),
            apply,
            amount=self.rules.territory.claim_cost,
        )

    async def build(
        self, territory_id: TerritoryID, building_type: BuildingType
    ) -> ActionResult[Building]:
        player = self.session.current_player
        if player is None:
            return self._reject(_NO_PLAYER)
        target = player.find_territory(territory_id)
        if target is None:
            return self._reject(self._missing_territory(territory_id))

        return await self._execute(
            TransactionType.BUILD,
            territory_rules.check_build(player, target, building_type, rules=self.rules),
            lambda: self.chain.build_building(
                player.address, int(territory_id), building_type_index(building_type)
            ),
            lambda _receipt: territory_rules.build_structure(
                player, target, building_type, now=self.clock(), rules=self.rules
            ),
            territory_id=territory_id,
        )

    async def upgrade(self, territory_id: TerritoryID, building_id: str) -> ActionResult[Building]:
        player = self.session.current_player
        if player is None:
            return self._reject(_NO_PLAYER)
        target = player.find_territory(territory_id)
        if target is None:
            return self._reject(self._missing_territory(territory_id))

        error = territory_rules.check_upgrade(player, target, building_id)
        index = next(
            (i for i, building in enumerate(target.buildings) if building.id == building_id), -1
        )
        return await self._execute(
            TransactionType.BUILD,
            error,
            lambda: self.chain.upgrade_building(player.address, int(territory_id), index),
            lambda _receipt: territory_rules.upgrade_building(player, target, building_id),
            territory_id=territory_id,
        )

    async def collect(self, territory_id: TerritoryID) -> ActionResult[float]:
        player = self.session.current_player
        if player is None:
            return self._reject(_NO_PLAYER)
        target = player.find_territory(territory_id)
        if target is None:
            return self._reject(self._missing_territory(territory_id))

        return await self._execute(
            TransactionType.COLLECT,
            None,
            lambda: self.chain.collect_energy(player.address, int(territory_id)),
            lambda _receipt: territory_rules.collect_energy(
                player, target, now=self.clock(), rules=self.rules
            ),
            territory_id=territory_id,
        )

    async def attack(
        self, territory_id: TerritoryID, *, attacker_power: float | None = None
    ) -> ActionResult[Battle]:
        player = self.session.current_player
        if player is None:
            return self._reject(_NO_PLAYER)
        target = self.registry.get(territory_id)
        if target is None:
            return self._reject(self._missing_territory(territory_id))

        power = player.power_score if attacker_power is None else attacker_power

        def apply(_receipt: ChainReceipt) -> ActionResult[Battle]:
            result = combat.resolve_attack(
                player, target, attacker_power=power, now=self.clock(), rules=self.rules
            )
            if result.ok:
                self.battles.append(result.unwrap())
            return result

        return await self._execute(
            TransactionType.ATTACK,
            combat.check_attack(player, target, now=self.clock(), rules=self.rules),
            lambda: self.chain.attack_territory(player.address, int(territory_id), round(power)),
            apply,
            territory_id=territory_id,
            to=target.owner,
        )

    # --- plumbing ---------------------------------------------------------------

    async def _execute(
        self,
        tx_type: TransactionType,
        precheck: GameError | None,
        submit: Callable[[], Awaitable[ChainReceipt]],
        apply: Callable[[ChainReceipt], ActionResult[T]],
        *,
        territory_id: TerritoryID | None = None,
        to: Address | None = None,
        amount: float | None = None,
    ) -> ActionResult[T]:
        if precheck is not None:
            return self._reject(precheck)

        self.session.set_loading(True)
        try:
            receipt = await submit()
        except (CollaboratorUnavailableError, ContractRejectedError) as exc:
            return self._chain_failure(exc)
        finally:
            self.session.set_loading(False)

        result = apply(receipt)
        player = self.session.current_player
        self.transactions.append(
            Transaction(
                hash=receipt.tx_hash,
                type=tx_type,
                sender=player.address if player is not None else Address(""),
                timestamp=self.clock(),
                status=TransactionStatus.SUCCESS if result.ok else TransactionStatus.FAILED,
                to=to,
                amount=amount,
                territory_id=territory_id,
            )
        )
        if result.error is not None:
            # The chain accepted a write the local rules now reject; local state is stale.
            logger.warning(
                "%s %s accepted on chain but rejected locally: %s",
                tx_type,
                receipt.tx_hash,
                result.error.message,
            )
            self.session.set_error(result.error)
        else:
            self.session.clear_error()
        return result

    def _reject(self, error: GameError) -> ActionResult[T]:
        self.session.set_error(error)
        return ActionResult(error=error)

    def _chain_failure(
        self, exc: CollaboratorUnavailableError | ContractRejectedError
    ) -> ActionResult[T]:
        if isinstance(exc, ContractRejectedError):
            logger.warning("Chain rejected %s: %s", exc.operation, exc.reason)
            return self._reject(GameError(error_kind_for_revert(exc.reason), exc.reason))
        logger.error("Chain collaborator unavailable: %s", exc)
        return self._reject(GameError(ErrorKind.COLLABORATOR_UNAVAILABLE, str(exc)))

    @staticmethod
    def _missing_territory(territory_id: TerritoryID) -> GameError:
        return GameError(ErrorKind.NOT_FOUND, f"Territory {int(territory_id)} not found")
