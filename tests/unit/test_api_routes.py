"""Tests for the FastAPI routes."""

from __future__ import annotations

import math

import pytest
from httpx import ASGITransport, AsyncClient

from energyclash.api.app import create_app
from energyclash.api.runtime import ApiState
from energyclash.config import Settings

ALICE = "0xa11ce"


def _make_app(tmp_path, chain):
    def factory() -> ApiState:
        return ApiState(settings=Settings(data_dir=tmp_path), chain=chain)

    app = create_app(state_factory=factory)
    return app, ASGITransport(app=app)


@pytest.mark.asyncio
async def test_health_and_catalog(tmp_path, fake_chain):
    app, transport = _make_app(tmp_path, fake_chain)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            health = await client.get("/health")
            assert health.status_code == 200
            assert health.json()["status"] == "ok"
            assert health.json()["sessions"] == 0

            catalog = (await client.get("/buildings")).json()
            assert [entry["index"] for entry in catalog] == list(range(6))
            assert catalog[0]["type"] == "solar_panel"
            assert catalog[0]["base_cost"] == 100


@pytest.mark.asyncio
async def test_hex_geometry_routes(tmp_path, fake_chain):
    app, transport = _make_app(tmp_path, fake_chain)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            neighbors = (await client.get("/hex/neighbors", params={"x": 0, "y": 0})).json()
            assert neighbors[0] == {"x": 1, "y": 0}
            assert len(neighbors) == 6

            area = await client.get("/hex/area", params={"x": 0, "y": 0, "radius": 2})
            assert len(area.json()) == 19

            ring = await client.get("/hex/ring", params={"x": 0, "y": 0, "radius": 3})
            assert len(ring.json()) == 18

            line = await client.get("/hex/line", params={"ax": 0, "ay": 0, "bx": 3, "by": 0})
            assert line.json()[-1] == {"x": 3, "y": 0}

            distance = await client.get(
                "/hex/distance", params={"ax": 0, "ay": 0, "bx": 2, "by": 1}
            )
            assert distance.json() == {"distance": 3}

            pixel = (await client.get("/hex/pixel", params={"x": 1, "y": 0})).json()
            assert pixel["px"] == pytest.approx(math.sqrt(3))
            assert pixel["py"] == pytest.approx(0.0)

            located = await client.get("/hex/locate", params={"px": pixel["px"], "py": 0.1})
            assert located.json() == {"x": 1, "y": 0}


@pytest.mark.asyncio
async def test_negative_radius_is_rejected(tmp_path, fake_chain):
    app, transport = _make_app(tmp_path, fake_chain)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/hex/area", params={"x": 0, "y": 0, "radius": -1})
            assert response.status_code == 422
            assert response.json()["detail"]["kind"] == "invalid_coordinate"


@pytest.mark.asyncio
async def test_unknown_session(tmp_path, fake_chain):
    app, transport = _make_app(tmp_path, fake_chain)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get(f"/sessions/{ALICE}")).status_code == 404
            assert (await client.delete(f"/sessions/{ALICE}")).status_code == 404
            claim = await client.post(f"/sessions/{ALICE}/claim", json={"x": 0, "y": 0})
            assert claim.status_code == 404


@pytest.mark.asyncio
async def test_connect_failure_maps_to_503(tmp_path, fake_chain):
    fake_chain.fail = True
    app, transport = _make_app(tmp_path, fake_chain)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/sessions", json={"address": ALICE})
            assert response.status_code == 503
            assert response.json()["detail"]["kind"] == "collaborator_unavailable"
            assert (await client.get("/health")).json()["sessions"] == 0


@pytest.mark.asyncio
async def test_claim_errors_map_to_status(tmp_path, fake_chain):
    fake_chain.fund(ALICE, 60.0)
    app, transport = _make_app(tmp_path, fake_chain)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.post("/sessions", json={"address": ALICE})).status_code == 201

            first = await client.post(f"/sessions/{ALICE}/claim", json={"x": 0, "y": 0})
            assert first.status_code == 201
            assert first.json()["coordinates"] == {"x": 0, "y": 0}

            again = await client.post(f"/sessions/{ALICE}/claim", json={"x": 0, "y": 0})
            assert again.status_code == 409
            assert again.json()["detail"]["kind"] == "already_owned"

            broke = await client.post(f"/sessions/{ALICE}/claim", json={"x": 1, "y": 0})
            assert broke.status_code == 409
            assert broke.json()["detail"]["kind"] == "insufficient_energy"

            session = (await client.get(f"/sessions/{ALICE}")).json()
            assert session["error"]["kind"] == "insufficient_energy"
            assert session["player"]["energy_balance"] == pytest.approx(10.0)


@pytest.mark.asyncio
async def test_claim_reverted_on_chain_is_conflict(tmp_path, fake_chain):
    fake_chain.seed_territory("0xb0b", 2, -1)
    fake_chain.fund(ALICE, 100.0)
    app, transport = _make_app(tmp_path, fake_chain)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.post("/sessions", json={"address": ALICE})).status_code == 201

            taken = await client.post(f"/sessions/{ALICE}/claim", json={"x": 2, "y": -1})
            assert taken.status_code == 409
            assert taken.json()["detail"]["kind"] == "already_owned"

            fake_chain.revert_reason = "Pausable: paused"
            paused = await client.post(f"/sessions/{ALICE}/claim", json={"x": 0, "y": 0})
            assert paused.status_code == 409
            assert paused.json()["detail"]["kind"] == "rejected"


@pytest.mark.asyncio
async def test_viewport_is_clamped_and_persisted(tmp_path, fake_chain):
    app, transport = _make_app(tmp_path, fake_chain)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.post("/sessions", json={"address": ALICE})
            response = await client.put(
                f"/sessions/{ALICE}/viewport", json={"x": 4, "y": -3, "zoom": 8.0}
            )
            assert response.status_code == 200
            assert response.json()["viewport_center"] == {"x": 4, "y": -3}
            assert response.json()["zoom_level"] == 3.0

            assert (await client.delete(f"/sessions/{ALICE}")).status_code == 204

            reconnected = (await client.post("/sessions", json={"address": ALICE})).json()
            assert reconnected["viewport_center"] == {"x": 4, "y": -3}
            assert reconnected["zoom_level"] == 3.0
            assert reconnected["selected_territory_id"] is None


@pytest.mark.asyncio
async def test_select_territory(tmp_path, fake_chain):
    fake_chain.fund(ALICE, 100.0)
    app, transport = _make_app(tmp_path, fake_chain)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.post("/sessions", json={"address": ALICE})
            token_id = (
                await client.post(f"/sessions/{ALICE}/claim", json={"x": 2, "y": 2})
            ).json()["token_id"]

            selected = await client.post(
                f"/sessions/{ALICE}/select", json={"territory_id": token_id}
            )
            assert selected.json()["selected_territory_id"] == token_id

            missing = await client.post(f"/sessions/{ALICE}/select", json={"territory_id": 999})
            assert missing.status_code == 404

            cleared = await client.post(f"/sessions/{ALICE}/select", json={"territory_id": None})
            assert cleared.json()["selected_territory_id"] is None


@pytest.mark.asyncio
async def test_invalid_building_type_is_422(tmp_path, fake_chain):
    fake_chain.fund(ALICE, 1000.0)
    app, transport = _make_app(tmp_path, fake_chain)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            await client.post("/sessions", json={"address": ALICE})
            response = await client.post(
                f"/sessions/{ALICE}/build", json={"territory_id": 1, "building_type": "castle"}
            )
            assert response.status_code == 422
