"""Protocol-based interfaces for Energy Clash collaborators.

This module exports the protocol for the external blockchain collaborator,
providing a clear contract for gateway implementations and enabling
dependency injection and testing.
"""

from energyclash.interfaces.chain import (
    BuildingRecord,
    ChainReceipt,
    CollaboratorUnavailableError,
    ContractRejectedError,
    IChainGateway,
    TerritoryRecord,
    from_base_units,
    to_base_units,
)

__all__ = [
    "BuildingRecord",
    "ChainReceipt",
    "CollaboratorUnavailableError",
    "ContractRejectedError",
    "IChainGateway",
    "TerritoryRecord",
    "from_base_units",
    "to_base_units",
]
