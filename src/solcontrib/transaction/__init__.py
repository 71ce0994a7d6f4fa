"""
Transaction lifecycle after broadcast: confirmation and receipts.
"""

from solcontrib.transaction.pending import (
    ConfirmStrategy,
    PendingTransaction,
    RetryOptions,
)
from solcontrib.transaction.receipt import TransactionReceipt, generate_explorer_link

__all__ = [
    "ConfirmStrategy",
    "PendingTransaction",
    "RetryOptions",
    "TransactionReceipt",
    "generate_explorer_link",
]
