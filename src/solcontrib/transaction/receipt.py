"""
Transaction receipt.

The queryable record of a confirmed transaction, as returned by
getTransaction for its signature.
"""

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Union

import structlog

from solcontrib.config import Cluster, ExplorerType, get_config

logger = structlog.get_logger(__name__)

_COMPUTE_UNITS_RE = re.compile(r"^Program \S+ consumed (\d+) of (\d+) compute units$")


def generate_explorer_link(
    signature: str,
    explorer_type: Union[ExplorerType, str] = ExplorerType.SOLANA_EXPLORER,
    cluster: Union[Cluster, str] = Cluster.MAINNET_BETA,
) -> str:
    """
    Build a block explorer URL for a transaction signature.

    Args:
        signature: Transaction signature
        explorer_type: Which explorer to link to
        cluster: Cluster the transaction was sent to

    Returns:
        Explorer URL
    """
    explorer_type = ExplorerType(explorer_type)
    cluster = Cluster(cluster)

    if explorer_type == ExplorerType.SOLANA_EXPLORER:
        base = f"https://explorer.solana.com/tx/{signature}"
        if cluster == Cluster.MAINNET_BETA:
            return base
        if cluster == Cluster.LOCALNET:
            return f"{base}?cluster=custom&customUrl=http%3A%2F%2Flocalhost%3A8899"
        return f"{base}?cluster={cluster.value}"

    if cluster == Cluster.LOCALNET:
        raise ValueError("Solscan does not support localnet transactions")
    base = f"https://solscan.io/tx/{signature}"
    if cluster == Cluster.MAINNET_BETA:
        return base
    return f"{base}?cluster={cluster.value}"


@dataclass(frozen=True)
class TransactionReceipt:
    """
    A transaction that has been processed by the cluster.

    Attributes:
        signature: Signature of the transaction
        response: Raw getTransaction result for that signature
    """

    signature: str
    response: Any

    def __hash__(self) -> int:
        # response is an unhashable dict
        return hash(self.signature)

    @property
    def _meta(self) -> dict:
        if isinstance(self.response, dict):
            return self.response.get("meta") or {}
        return {}

    @property
    def slot(self) -> Optional[int]:
        """Slot the transaction was processed in."""
        if isinstance(self.response, dict):
            return self.response.get("slot")
        return None

    @property
    def err(self) -> Optional[Any]:
        """Execution error recorded for the transaction, if any."""
        return self._meta.get("err")

    @property
    def logs(self) -> List[str]:
        """Program log messages emitted during execution."""
        return list(self._meta.get("logMessages") or [])

    @property
    def compute_units(self) -> Optional[int]:
        """
        Compute units consumed by the transaction.

        Prefers the value reported in the transaction meta and falls back to
        the last "consumed N of M compute units" log line.
        """
        units = self._meta.get("computeUnitsConsumed")
        if units is not None:
            return int(units)

        for line in reversed(self.logs):
            match = _COMPUTE_UNITS_RE.match(line)
            if match:
                return int(match.group(1))
        return None

    def get_explorer_link(
        self,
        explorer_type: Optional[Union[ExplorerType, str]] = None,
        cluster: Optional[Union[Cluster, str]] = None,
    ) -> str:
        """Explorer URL for this receipt; defaults come from the configuration."""
        config = get_config()
        return generate_explorer_link(
            self.signature,
            explorer_type or config.explorer,
            cluster or config.cluster,
        )

    def print_logs(self) -> None:
        """Emit the program logs, one event per line."""
        for index, line in enumerate(self.logs):
            logger.info(
                "transaction_log",
                signature=self.signature,
                index=index,
                line=line,
            )
