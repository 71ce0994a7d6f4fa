"""
Configuration management for solcontrib.

Supports configuration via environment variables and .env files.
"""

from enum import Enum
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Cluster(str, Enum):
    """Solana clusters known to the explorer link helpers."""
    MAINNET_BETA = "mainnet-beta"
    DEVNET = "devnet"
    TESTNET = "testnet"
    LOCALNET = "localnet"


class ExplorerType(str, Enum):
    """Block explorers a receipt can link to."""
    SOLANA_EXPLORER = "solana-explorer"
    SOLSCAN = "solscan"


class ContribConfig(BaseSettings):
    """
    Configuration settings for transaction signing and confirmation.

    All settings can be configured via environment variables with the SOLCONTRIB_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="SOLCONTRIB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Network settings
    cluster: Cluster = Field(
        default=Cluster.MAINNET_BETA,
        description="Cluster used when generating explorer links"
    )
    explorer: ExplorerType = Field(
        default=ExplorerType.SOLANA_EXPLORER,
        description="Default block explorer for receipt links"
    )

    # Provider defaults
    preflight_commitment: str = Field(
        default="recent",
        description="Commitment used for blockhash fetches and preflight"
    )
    commitment: str = Field(
        default="recent",
        description="Commitment used for reads and send confirmation"
    )

    # Confirmation settings
    wait_commitment: str = Field(
        default="confirmed",
        description="Default commitment when waiting on a pending transaction"
    )
    use_websocket: bool = Field(
        default=True,
        description="Await a confirmation notification before fetching the receipt"
    )
    confirm_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Upper bound for confirmations without a blockhash expiry"
    )
    confirm_poll_interval_seconds: float = Field(
        default=0.5,
        gt=0,
        description="Delay between signature status checks while confirming"
    )

    # Receipt polling (retry) settings
    poll_retries: int = Field(
        default=5,
        ge=0,
        description="Retries after the first receipt lookup"
    )
    poll_min_timeout_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Minimum delay between receipt lookups"
    )
    poll_factor: float = Field(
        default=2.0,
        ge=1,
        description="Exponential backoff growth factor"
    )
    poll_max_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Maximum delay between receipt lookups (unbounded if unset)"
    )
    poll_randomize: bool = Field(
        default=False,
        description="Apply random jitter to the backoff delay"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )


# Global config instance
_config: Optional[ContribConfig] = None


def get_config() -> ContribConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = ContribConfig()
    return _config


def set_config(config: Optional[ContribConfig]) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
