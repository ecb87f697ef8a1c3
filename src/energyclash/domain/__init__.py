"""Domain model for Energy Clash.

This package hosts every game rule. It exposes:

* Dataclasses describing the game entities (see :mod:`models`).
* Enumerations, including the on-chain building type ordering.
* Rule configuration objects (see :mod:`rules_config`).
* The building catalog and economy formulas (see :mod:`buildings`).
* Pure rule functions for territories, combat and alliances.
* The per-wallet session state (see :mod:`session`).

Everything here operates purely in memory; chain access lives behind
:mod:`energyclash.interfaces`.
"""

from . import (
    alliance,
    buildings,
    combat,
    enums,
    models,
    results,
    rules_config,
    session,
    territory,
)

__all__ = [
    "alliance",
    "buildings",
    "combat",
    "enums",
    "models",
    "results",
    "rules_config",
    "session",
    "territory",
]
