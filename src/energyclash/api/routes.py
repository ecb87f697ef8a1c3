"""HTTP routes for the Energy Clash API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from pydantic import BaseModel, Field

from energyclash.api.runtime import (
    ApiState,
    battle_to_dict,
    building_stats_list,
    building_to_dict,
    session_to_dict,
    territory_to_dict,
)
from energyclash.domain.enums import BuildingType, ErrorKind
from energyclash.domain.models import TerritoryID
from energyclash.domain.results import ActionResult, GameError
from energyclash.services.game_service import GameService
from energyclash.utils import hex_math
from energyclash.utils.hex_math import HexCoord, InvalidCoordinateError

router = APIRouter()

_ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.NO_PLAYER: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_OWNED: status.HTTP_409_CONFLICT,
    ErrorKind.INSUFFICIENT_ENERGY: status.HTTP_409_CONFLICT,
    ErrorKind.TERRITORY_FULL: status.HTTP_409_CONFLICT,
    ErrorKind.TERRITORY_LIMIT: status.HTTP_409_CONFLICT,
    ErrorKind.MAX_LEVEL_REACHED: status.HTTP_409_CONFLICT,
    ErrorKind.ALLIANCE_FULL: status.HTTP_409_CONFLICT,
    ErrorKind.REJECTED: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_COORDINATE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.INVALID_TARGET: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.INVALID_ALLIANCE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.OUT_OF_RANGE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.COOLDOWN: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.COLLABORATOR_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


def _http_error(error: GameError) -> HTTPException:
    return HTTPException(
        status_code=_ERROR_STATUS.get(error.kind, status.HTTP_400_BAD_REQUEST),
        detail={"kind": str(error.kind), "message": error.message},
    )


def _unwrap(result: ActionResult):
    if result.error is not None:
        raise _http_error(result.error)
    return result.value


def _service(state: ApiState, address: str) -> GameService:
    service = state.sessions.get(address)
    if service is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="session not found")
    return service


# --- models -----------------------------------------------------------------------


class HexPayload(BaseModel):
    x: int
    y: int


class PixelPayload(BaseModel):
    px: float
    py: float


class DistancePayload(BaseModel):
    distance: int


class ConnectRequest(BaseModel):
    address: str = Field(min_length=1)
    username: str | None = None


class ViewportRequest(BaseModel):
    x: int
    y: int
    zoom: float = Field(default=1.0, gt=0.0)


class SelectRequest(BaseModel):
    territory_id: int | None = None


class ClaimRequest(BaseModel):
    x: int
    y: int


class BuildRequest(BaseModel):
    territory_id: int
    building_type: BuildingType


class UpgradeRequest(BaseModel):
    territory_id: int
    building_id: str


class CollectRequest(BaseModel):
    territory_id: int


class AttackRequest(BaseModel):
    territory_id: int
    attacker_power: float | None = Field(default=None, ge=0.0)


class CollectResponse(BaseModel):
    amount: float
    energy_balance: float


def _hexes(coords: list[HexCoord]) -> list[HexPayload]:
    return [HexPayload(x=c.x, y=c.y) for c in coords]


# --- static data and geometry -----------------------------------------------------


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "chain_id": state.settings.chain_id,
        "use_testnet": state.settings.use_testnet,
        "sessions": len(state.sessions),
    }


@router.get("/buildings")
async def list_buildings() -> list[dict[str, object]]:
    return building_stats_list()


@router.get("/hex/neighbors", response_model=list[HexPayload])
async def neighbors(x: int, y: int) -> list[HexPayload]:
    return _hexes(hex_math.hex_neighbors(HexCoord(x=x, y=y)))


@router.get("/hex/ring", response_model=list[HexPayload])
async def ring(x: int, y: int, radius: int) -> list[HexPayload]:
    try:
        return _hexes(hex_math.hex_ring(HexCoord(x=x, y=y), radius))
    except InvalidCoordinateError as exc:
        raise _http_error(GameError(ErrorKind.INVALID_COORDINATE, str(exc))) from exc


@router.get("/hex/area", response_model=list[HexPayload])
async def area(x: int, y: int, radius: int) -> list[HexPayload]:
    try:
        return _hexes(hex_math.hexes_in_range(HexCoord(x=x, y=y), radius))
    except InvalidCoordinateError as exc:
        raise _http_error(GameError(ErrorKind.INVALID_COORDINATE, str(exc))) from exc


@router.get("/hex/line", response_model=list[HexPayload])
async def line(ax: int, ay: int, bx: int, by: int) -> list[HexPayload]:
    return _hexes(hex_math.hex_line(HexCoord(x=ax, y=ay), HexCoord(x=bx, y=by)))


@router.get("/hex/distance", response_model=DistancePayload)
async def distance(ax: int, ay: int, bx: int, by: int) -> DistancePayload:
    return DistancePayload(
        distance=hex_math.hex_distance(HexCoord(x=ax, y=ay), HexCoord(x=bx, y=by))
    )


@router.get("/hex/pixel", response_model=PixelPayload)
async def to_pixel(x: int, y: int) -> PixelPayload:
    px, py = hex_math.axial_to_pixel(HexCoord(x=x, y=y))
    return PixelPayload(px=px, py=py)


@router.get("/hex/locate", response_model=HexPayload)
async def locate(
    px: Annotated[float, Query()], py: Annotated[float, Query()]
) -> HexPayload:
    coord = hex_math.pixel_to_axial(px, py)
    return HexPayload(x=coord.x, y=coord.y)


@router.get("/territories")
async def list_territories(state: ApiStateDep) -> list[dict[str, object]]:
    territories = sorted(state.registry.territories.values(), key=lambda t: int(t.token_id))
    return [territory_to_dict(t, rules=state.rules) for t in territories]


# --- sessions ---------------------------------------------------------------------


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def connect(request: ConnectRequest, state: ApiStateDep) -> dict[str, object]:
    _unwrap(await state.sessions.connect(request.address, username=request.username))
    return session_to_dict(_service(state, request.address))


@router.get("/sessions/{address}")
async def get_session(address: str, state: ApiStateDep) -> dict[str, object]:
    return session_to_dict(_service(state, address))


@router.delete("/sessions/{address}", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect(address: str, state: ApiStateDep) -> Response:
    if not state.sessions.disconnect(address):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="session not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/sessions/{address}/viewport")
async def update_viewport(
    address: str, request: ViewportRequest, state: ApiStateDep
) -> dict[str, object]:
    service = _service(state, address)
    service.session.set_viewport_center(HexCoord(x=request.x, y=request.y))
    service.session.set_zoom_level(request.zoom)
    state.sessions.save_viewport(address, service.session)
    return session_to_dict(service)


@router.post("/sessions/{address}/select")
async def select_territory(
    address: str, request: SelectRequest, state: ApiStateDep
) -> dict[str, object]:
    service = _service(state, address)
    if request.territory_id is None:
        service.session.deselect_territory()
        return session_to_dict(service)

    territory = state.registry.get(TerritoryID(request.territory_id))
    if territory is None:
        raise _http_error(
            GameError(ErrorKind.NOT_FOUND, f"Territory {request.territory_id} not found")
        )
    service.session.select_territory(territory)
    return session_to_dict(service)


@router.post("/sessions/{address}/claim", status_code=status.HTTP_201_CREATED)
async def claim(address: str, request: ClaimRequest, state: ApiStateDep) -> dict[str, object]:
    service = _service(state, address)
    territory = _unwrap(await service.claim(HexCoord(x=request.x, y=request.y)))
    return territory_to_dict(territory, rules=state.rules)


@router.post("/sessions/{address}/build", status_code=status.HTTP_201_CREATED)
async def build(address: str, request: BuildRequest, state: ApiStateDep) -> dict[str, object]:
    service = _service(state, address)
    building = _unwrap(
        await service.build(TerritoryID(request.territory_id), request.building_type)
    )
    return building_to_dict(building)


@router.post("/sessions/{address}/upgrade")
async def upgrade(address: str, request: UpgradeRequest, state: ApiStateDep) -> dict[str, object]:
    service = _service(state, address)
    building = _unwrap(
        await service.upgrade(TerritoryID(request.territory_id), request.building_id)
    )
    return building_to_dict(building)


@router.post("/sessions/{address}/collect", response_model=CollectResponse)
async def collect(address: str, request: CollectRequest, state: ApiStateDep) -> CollectResponse:
    service = _service(state, address)
    amount = _unwrap(await service.collect(TerritoryID(request.territory_id)))
    player = service.session.current_player
    balance = player.energy_balance if player is not None else 0.0
    return CollectResponse(amount=amount, energy_balance=balance)


@router.post("/sessions/{address}/attack")
async def attack(address: str, request: AttackRequest, state: ApiStateDep) -> dict[str, object]:
    service = _service(state, address)
    battle = _unwrap(
        await service.attack(
            TerritoryID(request.territory_id), attacker_power=request.attacker_power
        )
    )
    return battle_to_dict(battle)
