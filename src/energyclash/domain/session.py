"""Per-wallet game session state.

A :class:`GameSession` is owned by exactly one connection. Every mutator
runs synchronously and completely; the last write wins. Only the viewport
(center and zoom) survives a reload, through :class:`ViewportSnapshot`.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from energyclash.domain.models import Player, Territory, TerritoryID
from energyclash.domain.results import GameError
from energyclash.utils.hex_math import ORIGIN, HexCoord

MIN_ZOOM = 0.5
MAX_ZOOM = 3.0
DEFAULT_ZOOM = 1.0

_TERRITORY_FIELDS = frozenset(f.name for f in fields(Territory))


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


@dataclass(frozen=True, slots=True)
class ViewportSnapshot:
    """The persisted subset of a session."""

    viewport_center: HexCoord = ORIGIN
    zoom_level: float = DEFAULT_ZOOM


@dataclass(slots=True)
class GameSession:
    """Mutable view of the game for the connected player."""

    current_player: Player | None = None
    selected_territory: Territory | None = None
    viewport_center: HexCoord = ORIGIN
    zoom_level: float = DEFAULT_ZOOM
    is_loading: bool = False
    error: GameError | None = None

    # --- player -----------------------------------------------------------------

    def set_current_player(self, player: Player | None) -> None:
        self.current_player = player

    def update_player_energy(self, delta: float) -> None:
        """Add ``delta`` to the held player's balance, never going below zero."""

        if self.current_player is not None:
            self.current_player.energy_balance = max(
                0.0, self.current_player.energy_balance + delta
            )

    def set_player_energy(self, balance: float) -> None:
        """Overwrite the balance with an externally reported value."""

        if self.current_player is not None:
            self.current_player.energy_balance = max(0.0, balance)

    def add_territory(self, territory: Territory) -> None:
        if self.current_player is not None:
            self.current_player.territories.append(territory)

    def remove_territory(self, territory_id: TerritoryID) -> None:
        if self.current_player is None:
            return
        self.current_player.territories = [
            t for t in self.current_player.territories if t.token_id != territory_id
        ]
        if self.selected_territory is not None and self.selected_territory.token_id == territory_id:
            self.selected_territory = None

    def update_territory(self, territory_id: TerritoryID, **updates: Any) -> None:
        """Apply field updates to one of the held player's territories.

        Raises:
            ValueError: If ``updates`` names a field Territory does not have
        """

        unknown = set(updates) - _TERRITORY_FIELDS
        if unknown:
            raise ValueError(f"Unknown territory fields: {sorted(unknown)}")
        if self.current_player is None:
            return
        territory = self.current_player.find_territory(territory_id)
        if territory is None:
            return
        for name, value in updates.items():
            setattr(territory, name, value)

    # --- selection and viewport -------------------------------------------------

    def select_territory(self, territory: Territory | None) -> None:
        self.selected_territory = territory

    def deselect_territory(self) -> None:
        self.selected_territory = None

    def set_viewport_center(self, center: HexCoord) -> None:
        self.viewport_center = center

    def set_zoom_level(self, zoom: float) -> None:
        self.zoom_level = clamp_zoom(zoom)

    # --- flags ------------------------------------------------------------------

    def set_loading(self, loading: bool) -> None:
        self.is_loading = loading

    def set_error(self, error: GameError | None) -> None:
        self.error = error

    def clear_error(self) -> None:
        self.error = None

    # --- lifecycle --------------------------------------------------------------

    def reset(self) -> None:
        """Return every field, the viewport included, to its initial value."""

        self.current_player = None
        self.selected_territory = None
        self.viewport_center = ORIGIN
        self.zoom_level = DEFAULT_ZOOM
        self.is_loading = False
        self.error = None

    def disconnect(self) -> None:
        self.reset()

    def snapshot(self) -> ViewportSnapshot:
        return ViewportSnapshot(viewport_center=self.viewport_center, zoom_level=self.zoom_level)

    def restore(self, snapshot: ViewportSnapshot) -> None:
        self.viewport_center = snapshot.viewport_center
        self.zoom_level = clamp_zoom(snapshot.zoom_level)

    @classmethod
    def from_snapshot(cls, snapshot: ViewportSnapshot) -> GameSession:
        session = cls()
        session.restore(snapshot)
        return session
