"""Enumerations for the Energy Clash domain."""

from __future__ import annotations

from enum import StrEnum


class BuildingType(StrEnum):
    """Structures that can be placed on a territory.

    Declaration order is the on-chain ``uint8`` encoding used by the building
    contract. Never reorder or insert members; append only.
    """

    SOLAR_PANEL = "solar_panel"
    WIND_TURBINE = "wind_turbine"
    HYDRO_DAM = "hydro_dam"
    DEFENSE_TOWER = "defense_tower"
    SHIELD_GENERATOR = "shield_generator"
    STORAGE = "storage"


class ErrorKind(StrEnum):
    """Typed failure reasons reported by domain operations."""

    INVALID_COORDINATE = "invalid_coordinate"
    ALREADY_OWNED = "already_owned"
    INSUFFICIENT_ENERGY = "insufficient_energy"
    TERRITORY_FULL = "territory_full"
    TERRITORY_LIMIT = "territory_limit"
    MAX_LEVEL_REACHED = "max_level_reached"
    NOT_FOUND = "not_found"
    COOLDOWN = "cooldown"
    OUT_OF_RANGE = "out_of_range"
    INVALID_TARGET = "invalid_target"
    NO_PLAYER = "no_player"
    INVALID_ALLIANCE = "invalid_alliance"
    ALLIANCE_FULL = "alliance_full"
    REJECTED = "rejected"
    COLLABORATOR_UNAVAILABLE = "collaborator_unavailable"


class BattleOutcome(StrEnum):
    """Result recorded on a battle."""

    VICTORY = "victory"
    DEFEAT = "defeat"
    PENDING = "pending"


class TransactionType(StrEnum):
    """Kinds of chain writes a player can submit."""

    CLAIM = "claim"
    BUILD = "build"
    ATTACK = "attack"
    COLLECT = "collect"


class TransactionStatus(StrEnum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
