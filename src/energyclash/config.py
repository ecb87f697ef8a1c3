"""Lightweight configuration for the Energy Clash services."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class Settings(BaseSettings):
    """Application settings, read from the environment and ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="ENERGYCLASH_"
    )

    data_dir: Path = Field(default=Path("sessions"), description="Where viewport snapshots live")
    rpc_url: str = Field(
        default="https://204005.rpc.thirdweb.com", description="X1 EcoChain JSON-RPC endpoint"
    )
    testnet_rpc_url: str = Field(default="https://x1-testnet.xen.network")
    use_testnet: bool = False
    chain_id: int = Field(default=204005, description="Chain id of the main network")
    rpc_timeout_seconds: float = Field(default=30.0, gt=0.0)
    territory_nft_address: str = ZERO_ADDRESS
    energy_token_address: str = ZERO_ADDRESS
    building_address: str = ZERO_ADDRESS
    battle_address: str = ZERO_ADDRESS
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins allowed to call the HTTP API",
    )

    @property
    def active_rpc_url(self) -> str:
        return self.testnet_rpc_url if self.use_testnet else self.rpc_url


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    settings = Settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return settings
