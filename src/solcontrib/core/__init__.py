"""
Core types shared by the provider and transaction modules.
"""

from solcontrib.core.types import (
    DEFAULT_PROVIDER_OPTIONS,
    Commitment,
    ConfirmOptions,
    SendTxRequest,
    Signer,
    Transaction,
    Wallet,
    commitment_satisfies,
    commitment_value,
    present_signers,
)

__all__ = [
    "DEFAULT_PROVIDER_OPTIONS",
    "Commitment",
    "ConfirmOptions",
    "SendTxRequest",
    "Signer",
    "Transaction",
    "Wallet",
    "commitment_satisfies",
    "commitment_value",
    "present_signers",
]
