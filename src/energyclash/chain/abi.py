"""Contract ABIs used by the game (trimmed to the functions we call)."""

from __future__ import annotations

from typing import Any


def _fn(
    name: str,
    inputs: list[tuple[str, str]],
    outputs: list[tuple[str, str]],
    mutability: str,
) -> dict[str, Any]:
    return {
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "name": name,
        "outputs": [{"name": n, "type": t} for n, t in outputs],
        "stateMutability": mutability,
        "type": "function",
    }


TERRITORY_NFT_ABI: list[dict[str, Any]] = [
    _fn(
        "claimTerritory",
        [("to", "address"), ("x", "int256"), ("y", "int256")],
        [("", "uint256")],
        "nonpayable",
    ),
    _fn(
        "getTerritory",
        [("tokenId", "uint256")],
        [
            ("x", "int256"),
            ("y", "int256"),
            ("claimedAt", "uint256"),
            ("lastEnergyCollected", "uint256"),
        ],
        "view",
    ),
    _fn("getTerritoriesByOwner", [("owner", "address")], [("", "uint256[]")], "view"),
]

ENERGY_TOKEN_ABI: list[dict[str, Any]] = [
    _fn("balanceOf", [("account", "address")], [("", "uint256")], "view"),
]

BUILDING_ABI: list[dict[str, Any]] = [
    _fn(
        "buildBuilding",
        [("territoryId", "uint256"), ("buildingType", "uint8")],
        [("", "uint256")],
        "nonpayable",
    ),
    _fn(
        "upgradeBuilding",
        [("territoryId", "uint256"), ("buildingIndex", "uint256")],
        [],
        "nonpayable",
    ),
    _fn("collectEnergy", [("territoryId", "uint256")], [], "nonpayable"),
    {
        "inputs": [{"name": "territoryId", "type": "uint256"}],
        "name": "getTerritoryBuildings",
        "outputs": [
            {
                "name": "",
                "type": "tuple[]",
                "components": [
                    {"name": "buildingType", "type": "uint8"},
                    {"name": "level", "type": "uint256"},
                    {"name": "builtAt", "type": "uint256"},
                ],
            }
        ],
        "stateMutability": "view",
        "type": "function",
    },
]

BATTLE_ABI: list[dict[str, Any]] = [
    _fn(
        "attack",
        [("territoryId", "uint256"), ("attackPower", "uint256")],
        [("", "bool")],
        "nonpayable",
    ),
]
