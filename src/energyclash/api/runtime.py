"""Runtime primitives backing the Energy Clash HTTP API."""

from __future__ import annotations

import logging
import time

from energyclash.chain import Web3ChainGateway
from energyclash.config import Settings, get_settings
from energyclash.domain import territory as territory_rules
from energyclash.domain.buildings import (
    BUILDING_STATS,
    building_type_index,
    total_defense,
    total_generation,
    total_storage,
)
from energyclash.domain.models import Battle, Building, Player, Territory, TerritoryRegistry
from energyclash.domain.results import ActionResult
from energyclash.domain.rules_config import DEFAULT_RULES, RulesConfig
from energyclash.domain.session import GameSession
from energyclash.interfaces.chain import IChainGateway
from energyclash.repository import JsonViewportRepository
from energyclash.services.game_service import GameService

logger = logging.getLogger(__name__)


def session_key(address: str) -> str:
    return address.lower()


class SessionManager:
    """Owns one :class:`GameService` per connected wallet."""

    def __init__(
        self,
        chain: IChainGateway,
        viewports: JsonViewportRepository,
        *,
        registry: TerritoryRegistry,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> None:
        self._chain = chain
        self._viewports = viewports
        self._registry = registry
        self._rules = rules
        self._services: dict[str, GameService] = {}

    def get(self, address: str) -> GameService | None:
        return self._services.get(session_key(address))

    async def connect(self, address: str, *, username: str | None = None) -> ActionResult[Player]:
        """Open (or reopen) the session for ``address`` and load its player."""

        key = session_key(address)
        service = self._services.get(key)
        if service is None:
            session = GameSession.from_snapshot(self._viewports.load(key))
            service = GameService(session, self._chain, registry=self._registry, rules=self._rules)
        result = await service.connect(address, username=username)
        if result.ok:
            self._services[key] = service
        return result

    def disconnect(self, address: str) -> bool:
        service = self._services.pop(session_key(address), None)
        if service is None:
            return False
        self.save_viewport(address, service.session)
        service.disconnect()
        logger.info("Disconnected %s", address)
        return True

    def save_viewport(self, address: str, session: GameSession) -> None:
        self._viewports.save(session_key(address), session.snapshot())

    def __len__(self) -> int:
        return len(self._services)


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        chain: IChainGateway | None = None,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules
        self.chain = chain if chain is not None else Web3ChainGateway(self.settings)
        self.registry = TerritoryRegistry()
        self.viewports = JsonViewportRepository(self.settings.data_dir)
        self.sessions = SessionManager(
            self.chain, self.viewports, registry=self.registry, rules=rules
        )

    async def shutdown(self) -> None:
        logger.info("Shutting down with %d open sessions", len(self.sessions))


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()


# --- JSON views -------------------------------------------------------------------


def building_stats_list() -> list[dict[str, object]]:
    return [
        {
            "index": building_type_index(stats.type),
            "type": str(stats.type),
            "name": stats.name,
            "description": stats.description,
            "base_cost": stats.base_cost,
            "growth_factor": stats.growth_factor,
            "max_level": stats.max_level,
            "energy_generation": stats.energy_generation,
            "defense": stats.defense,
            "storage": stats.storage,
        }
        for stats in BUILDING_STATS.values()
    ]


def building_to_dict(building: Building) -> dict[str, object]:
    stats = BUILDING_STATS[building.type]
    return {
        "id": str(building.id),
        "type": str(building.type),
        "level": building.level,
        "territory_id": int(building.territory_id),
        "position": list(building.position),
        "built_at": building.built_at,
        "upgrade_cost": (
            stats.upgrade_cost(building.level) if building.level < stats.max_level else None
        ),
    }


def territory_to_dict(
    territory: Territory, *, now: float | None = None, rules: RulesConfig = DEFAULT_RULES
) -> dict[str, object]:
    now = time.time() if now is None else now
    return {
        "token_id": int(territory.token_id),
        "owner": str(territory.owner),
        "coordinates": {"x": territory.coordinates.x, "y": territory.coordinates.y},
        "claimed_at": territory.claimed_at,
        "last_energy_collected": territory.last_energy_collected,
        "claimed_ago": territory_rules.format_elapsed(
            territory_rules.seconds_since_claim(territory, now=now)
        ),
        "collected_ago": territory_rules.format_elapsed(
            territory_rules.seconds_since_collection(territory, now=now)
        ),
        "buildings": [building_to_dict(b) for b in territory.buildings],
        "total_generation": total_generation(territory),
        "total_defense": total_defense(territory),
        "total_storage": total_storage(territory),
        "pending_energy": territory_rules.pending_energy(territory, now=now, rules=rules),
        "collection_ready": territory_rules.collection_ready(territory, now=now, rules=rules),
    }


def player_to_dict(player: Player, *, rules: RulesConfig = DEFAULT_RULES) -> dict[str, object]:
    return {
        "address": str(player.address),
        "username": player.username,
        "energy_balance": player.energy_balance,
        "power_score": player.power_score,
        "alliance_id": player.alliance_id,
        "territories": [territory_to_dict(t, rules=rules) for t in player.territories],
    }


def session_to_dict(service: GameService) -> dict[str, object]:
    session = service.session
    player = session.current_player
    selected = session.selected_territory
    error = session.error
    return {
        "player": player_to_dict(player, rules=service.rules) if player is not None else None,
        "selected_territory_id": int(selected.token_id) if selected is not None else None,
        "viewport_center": {"x": session.viewport_center.x, "y": session.viewport_center.y},
        "zoom_level": session.zoom_level,
        "is_loading": session.is_loading,
        "error": {"kind": str(error.kind), "message": error.message} if error else None,
    }


def battle_to_dict(battle: Battle) -> dict[str, object]:
    return {
        "id": str(battle.id),
        "attacker": str(battle.attacker),
        "defender": str(battle.defender),
        "target_territory_id": int(battle.target_territory_id),
        "attack_power": battle.attack_power,
        "defense_power": battle.defense_power,
        "timestamp": battle.timestamp,
        "result": str(battle.result),
    }
