"""
Exceptions raised while signing, sending and confirming transactions.
"""

from dataclasses import dataclass
from typing import Any, List, Optional


class SolContribError(Exception):
    """Base exception for solcontrib operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class RpcError(SolContribError):
    """RPC call failed at the transport level."""


class TransientLookupError(SolContribError):
    """A receipt lookup came back empty. Retried, never surfaced."""


class ConfirmationTimeoutError(SolContribError):
    """Transaction could not be confirmed within the retry budget."""


class OnChainFailureError(SolContribError):
    """The transaction executed on-chain and failed."""

    def __init__(self, signature: str, err: Any):
        self.signature = signature
        self.err = err
        super().__init__(
            f"Transaction {signature} failed ({err!r})",
            details={"signature": signature, "err": err},
        )


class BlockhashExpiredError(SolContribError):
    """
    The blockhash expired before the signature was seen.

    The transaction must be rebuilt against a fresh blockhash and resent;
    resending the same bytes cannot succeed.
    """

    def __init__(self, signature: str, last_valid_block_height: int):
        self.signature = signature
        self.last_valid_block_height = last_valid_block_height
        super().__init__(
            f"Signature {signature} has expired: block height exceeded "
            f"{last_valid_block_height}",
            details={
                "signature": signature,
                "last_valid_block_height": last_valid_block_height,
            },
        )


class SimulationError(SolContribError):
    """Transaction simulation request failed."""


@dataclass
class BatchSendResult:
    """Outcome of one transaction within a batch send."""
    index: int
    signature: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class BatchSendError(SolContribError):
    """One or more transactions in a batch failed; earlier sends still landed."""

    def __init__(self, results: List[BatchSendResult]):
        self.results = results
        failed = [r.index for r in results if not r.succeeded]
        super().__init__(
            f"{len(failed)} of {len(results)} transactions failed",
            details={"failed_indices": failed},
        )

    @property
    def signatures(self) -> List[Optional[str]]:
        """Signatures in input order, None where the send failed."""
        return [r.signature for r in self.results]


class TokenAmountInvariantError(SolContribError, ValueError):
    """A token amount violated one of its invariants."""
