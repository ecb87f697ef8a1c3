"""
Hexagonal coordinate system mathematics for Energy Clash.

This module implements every piece of hex-grid geometry the game map needs.
It supports:
- Conversion between hex cells and 2D pixel (world) positions
- Distance calculations between hexes
- Finding adjacent hexes, rings, filled areas and straight lines
- Rounding fractional coordinates back onto the grid
- A canonical string key for using hexes as map keys

Coordinate Systems:
-------------------
We use two coordinate systems:

1. Axial Coordinates (x, y) - for storage and representation
   - x: column coordinate
   - y: diagonal row coordinate
   - Used in the HexCoord dataclass and on-chain as (int256, int256)

2. Cube Coordinates (cx, cy, cz) - for rounding and interpolation
   - constraint cx + cy + cz = 0
   - Conversion: cx = x, cz = y, cy = -x - y

Hexes are laid out pointy-top with a fixed size of 1 world unit.

References:
-----------
Based on the guide at: https://www.redblobgames.com/grids/hexagons/
"""

import math
from dataclasses import dataclass

HEX_SIZE = 1.0

_SQRT3 = math.sqrt(3)

# Offset applied to line endpoints so samples that land exactly on a cell
# edge always fall to the same side.
_LINE_EPSILON_Q = 1e-6
_LINE_EPSILON_R = -2e-6


class InvalidCoordinateError(ValueError):
    """Raised for inputs that do not describe a valid hex or hex query."""

    kind = "invalid_coordinate"


@dataclass(frozen=True)
class HexCoord:
    """
    A hexagonal cell in axial coordinates.

    Attributes:
        x: Column coordinate
        y: Diagonal row coordinate

    Instances are immutable and hashable so they can be used directly as
    dictionary keys and set members.

    Example:
        >>> origin = HexCoord(x=0, y=0)
        >>> hex_distance(origin, HexCoord(x=1, y=0))
        1
    """

    x: int
    y: int

    def __add__(self, other: "HexCoord") -> "HexCoord":
        return HexCoord(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: "HexCoord") -> "HexCoord":
        return HexCoord(x=self.x - other.x, y=self.y - other.y)


ORIGIN = HexCoord(x=0, y=0)

# Unit direction vectors in axial coordinates. The order is part of the
# public contract: neighbor lists and ring walks depend on it.
HEX_DIRECTIONS: tuple[HexCoord, ...] = (
    HexCoord(x=1, y=0),  # East
    HexCoord(x=1, y=-1),  # Northeast
    HexCoord(x=0, y=-1),  # Northwest
    HexCoord(x=-1, y=0),  # West
    HexCoord(x=-1, y=1),  # Southwest
    HexCoord(x=0, y=1),  # Southeast
)

# Ring walk turns, starting from the east-most cell of the ring.
_RING_DIRECTIONS: tuple[HexCoord, ...] = (
    HexCoord(x=-1, y=1),
    HexCoord(x=-1, y=0),
    HexCoord(x=0, y=-1),
    HexCoord(x=1, y=-1),
    HexCoord(x=1, y=0),
    HexCoord(x=0, y=1),
)


def axial_to_cube(coord: HexCoord) -> tuple[int, int, int]:
    """
    Convert axial coordinates (x, y) to cube coordinates (cx, cy, cz).

    Example:
        >>> axial_to_cube(HexCoord(x=1, y=2))
        (1, -3, 2)
    """
    cx = coord.x
    cz = coord.y
    cy = -cx - cz
    return cx, cy, cz


def cube_to_axial(cx: int, cy: int, cz: int) -> HexCoord:  # noqa: ARG001
    """
    Convert cube coordinates back to axial.

    The cy component is redundant (cy = -cx - cz) and is accepted only so that
    callers can pass a cube triple unchanged.
    """
    return HexCoord(x=cx, y=cz)


def axial_to_pixel(coord: HexCoord) -> tuple[float, float]:
    """
    Convert a hex to the world-space position of its center.

    The transform is:
        px = size * (sqrt(3) * x + sqrt(3)/2 * y)
        py = size * (3/2 * y)

    Args:
        coord: Hex to convert

    Returns:
        A (px, py) tuple

    Example:
        >>> axial_to_pixel(HexCoord(x=1, y=0))
        (1.7320508075688772, 0.0)
    """
    px = HEX_SIZE * (_SQRT3 * coord.x + (_SQRT3 / 2) * coord.y)
    py = HEX_SIZE * (1.5 * coord.y)
    return px, py


def pixel_to_axial(px: float, py: float) -> HexCoord:
    """
    Find the hex containing a world-space point.

    Applies the inverse of :func:`axial_to_pixel` and snaps the fractional
    result onto the grid with :func:`axial_round`.
    """
    q = ((_SQRT3 / 3) * px - (1 / 3) * py) / HEX_SIZE
    r = ((2 / 3) * py) / HEX_SIZE
    return axial_round(q, r)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def axial_round(q: float, r: float) -> HexCoord:
    """
    Round fractional axial coordinates to the nearest hex.

    Rounding each axial component on its own can land on the wrong cell near
    borders. Instead the implied third cube component is tracked as well, all
    three are rounded, and the component with the largest rounding error is
    recomputed from the other two. The result always satisfies
    cx + cy + cz == 0.

    Args:
        q: Fractional x (column) coordinate
        r: Fractional y (row) coordinate

    Returns:
        The nearest HexCoord

    Example:
        >>> axial_round(0.9, 0.1)
        HexCoord(x=1, y=0)
    """
    fx = q
    fz = r
    fy = -fx - fz

    rx = _round_half_up(fx)
    ry = _round_half_up(fy)
    rz = _round_half_up(fz)

    x_diff = abs(rx - fx)
    y_diff = abs(ry - fy)
    z_diff = abs(rz - fz)

    if x_diff > y_diff and x_diff > z_diff:
        rx = -ry - rz
    elif y_diff > z_diff:
        ry = -rx - rz
    else:
        rz = -rx - ry

    return HexCoord(x=rx, y=rz)


def hex_equals(a: HexCoord, b: HexCoord) -> bool:
    return a.x == b.x and a.y == b.y


def hex_neighbors(coord: HexCoord) -> list[HexCoord]:
    """
    Return the 6 adjacent hexes in the fixed order of :data:`HEX_DIRECTIONS`.

    Example:
        >>> hex_neighbors(ORIGIN)[0]
        HexCoord(x=1, y=0)
    """
    return [coord + direction for direction in HEX_DIRECTIONS]


def hex_distance(a: HexCoord, b: HexCoord) -> int:
    """
    Calculate the number of single-step moves between two hexes.

    With dx = a.x - b.x and dy = a.y - b.y:
        distance = (|dx| + |dx + dy| + |dy|) / 2

    Example:
        >>> hex_distance(ORIGIN, HexCoord(x=2, y=1))
        3
    """
    dx = a.x - b.x
    dy = a.y - b.y
    return (abs(dx) + abs(dx + dy) + abs(dy)) // 2


def _check_radius(radius: int) -> None:
    if radius < 0:
        msg = f"Radius must be non-negative, got {radius}"
        raise InvalidCoordinateError(msg)


def hexes_in_range(center: HexCoord, radius: int) -> list[HexCoord]:
    """
    Find all hexes within ``radius`` steps of ``center`` (inclusive).

    The number of hexes returned is 3 * radius^2 + 3 * radius + 1.

    Args:
        center: The center hex
        radius: Maximum distance from the center

    Returns:
        A list of HexCoord objects, column by column

    Raises:
        InvalidCoordinateError: If radius is negative

    Example:
        >>> len(hexes_in_range(ORIGIN, 1))
        7
    """
    _check_radius(radius)

    hexes = []
    for dx in range(-radius, radius + 1):
        min_dy = max(-radius, -dx - radius)
        max_dy = min(radius, -dx + radius)
        for dy in range(min_dy, max_dy + 1):
            hexes.append(HexCoord(x=center.x + dx, y=center.y + dy))
    return hexes


def hex_ring(center: HexCoord, radius: int) -> list[HexCoord]:
    """
    Find the hexes exactly ``radius`` steps away from ``center``.

    The ring is walked as 6 straight segments of ``radius`` cells each,
    starting from ``center + (radius, 0)``. A radius of 0 yields only the
    center itself.

    Raises:
        InvalidCoordinateError: If radius is negative
    """
    _check_radius(radius)
    if radius == 0:
        return [center]

    results = []
    current = HexCoord(x=center.x + radius, y=center.y)
    for direction in _RING_DIRECTIONS:
        for _ in range(radius):
            results.append(current)
            current = current + direction
    return results


def hex_line(a: HexCoord, b: HexCoord) -> list[HexCoord]:
    """
    Draw a straight line of hexes from ``a`` to ``b``.

    The segment is sampled at ``n + 1`` evenly spaced points, where ``n`` is
    the hex distance, and each sample is rounded onto the grid. The first
    element is ``a``, the last is ``b`` and consecutive elements are always
    neighbors.

    Example:
        >>> hex_line(ORIGIN, HexCoord(x=2, y=0))
        [HexCoord(x=0, y=0), HexCoord(x=1, y=0), HexCoord(x=2, y=0)]
    """
    n = hex_distance(a, b)
    if n == 0:
        return [a]

    ax = a.x + _LINE_EPSILON_Q
    ay = a.y + _LINE_EPSILON_R
    bx = b.x + _LINE_EPSILON_Q
    by = b.y + _LINE_EPSILON_R

    results = []
    for i in range(n + 1):
        t = i / n
        results.append(axial_round(ax + (bx - ax) * t, ay + (by - ay) * t))
    return results


def hex_to_key(coord: HexCoord) -> str:
    """Encode a hex as its canonical ``"x,y"`` map key."""
    return f"{coord.x},{coord.y}"


def key_to_hex(key: str) -> HexCoord:
    """
    Parse a key produced by :func:`hex_to_key`.

    Raises:
        InvalidCoordinateError: If the key is not two comma-separated integers
    """
    parts = key.split(",")
    if len(parts) != 2:
        msg = f"Malformed hex key: {key!r}"
        raise InvalidCoordinateError(msg)
    try:
        return HexCoord(x=int(parts[0]), y=int(parts[1]))
    except ValueError as exc:
        msg = f"Malformed hex key: {key!r}"
        raise InvalidCoordinateError(msg) from exc


def hex_vertices(coord: HexCoord) -> list[tuple[float, float]]:
    """Return the 6 corner positions of a pointy-top hex, clockwise from upper right."""
    cx, cy = axial_to_pixel(coord)
    vertices = []
    for i in range(6):
        angle = math.radians(60 * i - 30)
        vertices.append((cx + HEX_SIZE * math.cos(angle), cy + HEX_SIZE * math.sin(angle)))
    return vertices


def is_point_in_hex(px: float, py: float, coord: HexCoord) -> bool:
    return hex_equals(pixel_to_axial(px, py), coord)
