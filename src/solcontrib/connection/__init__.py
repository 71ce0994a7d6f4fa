"""
Connection layer.

Abstract access to the RPC node: lookups, broadcast, simulation and
signature confirmation.
"""

from solcontrib.connection.interface import (
    AccountInfo,
    BlockhashWithExpiryBlockHeight,
    Connection,
    KeyedAccountInfo,
    RpcResponseAndContext,
    SignatureResult,
    SignatureStatus,
    SimulatedTransactionResponse,
    TransactionConfirmationStrategy,
)

__all__ = [
    "AccountInfo",
    "BlockhashWithExpiryBlockHeight",
    "Connection",
    "KeyedAccountInfo",
    "RpcResponseAndContext",
    "SignatureResult",
    "SignatureStatus",
    "SimulatedTransactionResponse",
    "TransactionConfirmationStrategy",
]
