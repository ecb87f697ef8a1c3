"""Blockchain adapters for Energy Clash."""

from energyclash.chain.gateway import Web3ChainGateway

__all__ = ["Web3ChainGateway"]
