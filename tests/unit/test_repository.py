"""Tests for the JSON viewport repository."""

from __future__ import annotations

from energyclash.domain.session import ViewportSnapshot
from energyclash.repository import JsonViewportRepository
from energyclash.utils.hex_math import ORIGIN, HexCoord


def test_save_and_load_viewport(tmp_path):
    repo = JsonViewportRepository(tmp_path)
    snapshot = ViewportSnapshot(viewport_center=HexCoord(x=3, y=-9), zoom_level=2.25)

    path = repo.save("0xABCdef", snapshot)
    assert path.exists()
    assert path.parent == tmp_path

    assert repo.load("0xabcdef") == snapshot


def test_missing_viewport_defaults(tmp_path):
    repo = JsonViewportRepository(tmp_path)
    snapshot = repo.load("0xnobody")
    assert snapshot.viewport_center == ORIGIN
    assert snapshot.zoom_level == 1.0


def test_delete(tmp_path):
    repo = JsonViewportRepository(tmp_path)
    path = repo.save("0x1", ViewportSnapshot())

    repo.delete("0x1")
    repo.delete("0x1")

    assert not path.exists()


def test_keys_are_sanitised(tmp_path):
    repo = JsonViewportRepository(tmp_path / "nested")
    path = repo.save("../../etc/passwd", ViewportSnapshot())
    assert path.parent == tmp_path / "nested"
