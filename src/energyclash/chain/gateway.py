"""web3-backed implementation of :class:`~energyclash.interfaces.IChainGateway`."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

import aiohttp
from web3 import AsyncWeb3
from web3.exceptions import ContractLogicError, Web3Exception

from energyclash.chain.abi import BATTLE_ABI, BUILDING_ABI, ENERGY_TOKEN_ABI, TERRITORY_NFT_ABI
from energyclash.config import Settings
from energyclash.interfaces.chain import (
    BuildingRecord,
    ChainReceipt,
    CollaboratorUnavailableError,
    ContractRejectedError,
    TerritoryRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Web3ChainGateway:
    """Talks to the game contracts over HTTP JSON-RPC.

    Writes are simulated with ``call`` first so that reverts surface before a
    transaction is sent and so the simulated return value (the minted token
    id for claims) can be handed back to the caller. Transactions are sent
    from the player's address, which the node must manage.
    """

    def __init__(self, settings: Settings, *, w3: AsyncWeb3 | None = None) -> None:
        self._timeout = settings.rpc_timeout_seconds
        self._w3 = w3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(settings.active_rpc_url))
        self._territory_nft = self._contract(settings.territory_nft_address, TERRITORY_NFT_ABI)
        self._energy_token = self._contract(settings.energy_token_address, ENERGY_TOKEN_ABI)
        self._building = self._contract(settings.building_address, BUILDING_ABI)
        self._battle = self._contract(settings.battle_address, BATTLE_ABI)

    def _contract(self, address: str, abi: list[dict[str, Any]]) -> Any:
        return self._w3.eth.contract(address=AsyncWeb3.to_checksum_address(address), abi=abi)

    async def _guard(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except ContractLogicError as exc:
            reason = exc.message or str(exc)
            logger.info("Chain call %s reverted: %s", operation, reason)
            raise ContractRejectedError(operation, reason) from exc
        except (Web3Exception, aiohttp.ClientError, OSError, TimeoutError) as exc:
            logger.warning("Chain call %s failed: %s", operation, exc)
            raise CollaboratorUnavailableError(f"{operation} failed: {exc}") from exc

    async def _submit(self, operation: str, function: Any, sender: str) -> ChainReceipt:
        tx_params = {"from": AsyncWeb3.to_checksum_address(sender)}
        result = await self._guard(f"{operation} (simulate)", function.call(tx_params))
        tx_hash = await self._guard(operation, function.transact(tx_params))
        receipt = ChainReceipt(tx_hash=AsyncWeb3.to_hex(tx_hash), result=result)
        logger.info("Submitted %s from %s: %s", operation, sender, receipt.tx_hash)
        return receipt

    # --- writes -----------------------------------------------------------------

    async def claim_territory(self, player: str, x: int, y: int) -> ChainReceipt:
        function = self._territory_nft.functions.claimTerritory(
            AsyncWeb3.to_checksum_address(player), x, y
        )
        return await self._submit("claimTerritory", function, player)

    async def build_building(
        self, player: str, territory_id: int, building_type_index: int
    ) -> ChainReceipt:
        function = self._building.functions.buildBuilding(territory_id, building_type_index)
        return await self._submit("buildBuilding", function, player)

    async def upgrade_building(
        self, player: str, territory_id: int, building_index: int
    ) -> ChainReceipt:
        function = self._building.functions.upgradeBuilding(territory_id, building_index)
        return await self._submit("upgradeBuilding", function, player)

    async def collect_energy(self, player: str, territory_id: int) -> ChainReceipt:
        function = self._building.functions.collectEnergy(territory_id)
        return await self._submit("collectEnergy", function, player)

    async def attack_territory(
        self, player: str, territory_id: int, attack_power: int
    ) -> ChainReceipt:
        function = self._battle.functions.attack(territory_id, attack_power)
        return await self._submit("attack", function, player)

    # --- reads ------------------------------------------------------------------

    async def get_territories_by_owner(self, address: str) -> list[int]:
        function = self._territory_nft.functions.getTerritoriesByOwner(
            AsyncWeb3.to_checksum_address(address)
        )
        token_ids = await self._guard("getTerritoriesByOwner", function.call())
        return [int(token_id) for token_id in token_ids]

    async def get_territory(self, token_id: int) -> TerritoryRecord:
        data = await self._guard(
            "getTerritory", self._territory_nft.functions.getTerritory(token_id).call()
        )
        return TerritoryRecord(
            x=int(data[0]),
            y=int(data[1]),
            claimed_at=int(data[2]),
            last_energy_collected=int(data[3]),
        )

    async def get_territory_buildings(self, token_id: int) -> list[BuildingRecord]:
        entries = await self._guard(
            "getTerritoryBuildings",
            self._building.functions.getTerritoryBuildings(token_id).call(),
        )
        return [
            BuildingRecord(
                building_type=int(entry[0]), level=int(entry[1]), built_at=int(entry[2])
            )
            for entry in entries
        ]

    async def balance_of(self, address: str) -> int:
        function = self._energy_token.functions.balanceOf(AsyncWeb3.to_checksum_address(address))
        return int(await self._guard("balanceOf", function.call()))
