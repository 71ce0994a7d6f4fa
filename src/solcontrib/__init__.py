"""
solcontrib

Sign, send and confirm Solana transactions. A provider signs and broadcasts
transactions paid for by a wallet; a pending transaction tracks a broadcast
signature until its receipt is known.
"""

__version__ = "0.1.0"

from solcontrib.core.types import (
    DEFAULT_PROVIDER_OPTIONS,
    Commitment,
    ConfirmOptions,
    SendTxRequest,
)
from solcontrib.provider.provider import SolanaProvider, SolanaReadonlyProvider
from solcontrib.transaction.pending import PendingTransaction
from solcontrib.transaction.receipt import TransactionReceipt

__all__ = [
    "DEFAULT_PROVIDER_OPTIONS",
    "Commitment",
    "ConfirmOptions",
    "PendingTransaction",
    "SendTxRequest",
    "SolanaProvider",
    "SolanaReadonlyProvider",
    "TransactionReceipt",
]
