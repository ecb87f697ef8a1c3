"""JSON-based repository for persisted session viewports."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import TypeAdapter

from energyclash.domain.session import ViewportSnapshot

_SAFE_KEY = re.compile(r"[^A-Za-z0-9_-]")


class JsonViewportRepository:
    """Persist each wallet's viewport (center and zoom) as a JSON file."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._adapter: TypeAdapter[ViewportSnapshot] = TypeAdapter(ViewportSnapshot)

    def _path_for(self, session_key: str) -> Path:
        return self.base_path / f"viewport_{_SAFE_KEY.sub('_', session_key.lower())}.json"

    def save(self, session_key: str, snapshot: ViewportSnapshot) -> Path:
        """Serialize a snapshot to disk and return its path."""

        path = self._path_for(session_key)
        path.write_bytes(self._adapter.dump_json(snapshot, indent=2))
        return path

    def load(self, session_key: str) -> ViewportSnapshot:
        """Return the stored snapshot, or the default viewport if none exists."""

        path = self._path_for(session_key)
        if not path.exists():
            return ViewportSnapshot()
        return self._adapter.validate_json(path.read_bytes())

    def delete(self, session_key: str) -> None:
        path = self._path_for(session_key)
        if path.exists():
            path.unlink()
