"""Declarative rule configuration for the Energy Clash domain."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EnergyRules:
    """Energy production timing."""

    base_rate: float = 1.0
    block_time_seconds: float = 7.5  # X1 EcoChain block time
    collection_interval_seconds: float = 3600.0


@dataclass(frozen=True, slots=True)
class CombatRules:
    """Attack resolution constants."""

    attack_multiplier: float = 1.2
    defense_multiplier: float = 1.0
    cooldown_seconds: float = 300.0
    max_attack_range: int = 3  # hexes


@dataclass(frozen=True, slots=True)
class TerritoryRules:
    """Claiming and building limits."""

    max_per_player: int = 100
    claim_cost: float = 50.0
    max_buildings_per_territory: int = 5


@dataclass(frozen=True, slots=True)
class AllianceRules:
    max_members: int = 50
    creation_cost: float = 1000.0
    min_name_length: int = 3
    max_name_length: int = 30


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Aggregate of every rule group."""

    energy: EnergyRules = EnergyRules()
    combat: CombatRules = CombatRules()
    territory: TerritoryRules = TerritoryRules()
    alliance: AllianceRules = AllianceRules()


DEFAULT_RULES = RulesConfig()
