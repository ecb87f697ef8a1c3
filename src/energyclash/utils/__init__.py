"""Utility functions for the Energy Clash game system."""

from energyclash.utils.hex_math import (
    HexCoord,
    InvalidCoordinateError,
    axial_round,
    axial_to_pixel,
    hex_distance,
    hex_line,
    hex_neighbors,
    hex_ring,
    hex_to_key,
    hexes_in_range,
    key_to_hex,
    pixel_to_axial,
)

__all__ = [
    "HexCoord",
    "InvalidCoordinateError",
    "axial_round",
    "axial_to_pixel",
    "hex_distance",
    "hex_line",
    "hex_neighbors",
    "hex_ring",
    "hex_to_key",
    "hexes_in_range",
    "key_to_hex",
    "pixel_to_axial",
]
