"""
Abstract interface for RPC connections.

Defines the transport surface every connection adapter must implement. The
confirmation helpers are built on top of it; adapters with a real
subscription channel should override them.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

import structlog

from solcontrib.config import ContribConfig, get_config
from solcontrib.core.types import (
    Commitment,
    CommitmentLike,
    ConfirmOptions,
    commitment_satisfies,
)
from solcontrib.errors import (
    BlockhashExpiredError,
    ConfirmationTimeoutError,
    OnChainFailureError,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class BlockhashWithExpiryBlockHeight:
    """A recent blockhash and the last block height at which it is valid."""
    blockhash: str
    last_valid_block_height: int


@dataclass(frozen=True)
class TransactionConfirmationStrategy:
    """Confirm a signature, giving up once its blockhash has expired."""
    signature: str
    blockhash: str
    last_valid_block_height: int


@dataclass(frozen=True)
class SignatureResult:
    """Result of a confirmation: err is None when the transaction succeeded."""
    err: Optional[Any] = None


@dataclass(frozen=True)
class SignatureStatus:
    """Status of a signature as reported by getSignatureStatuses."""
    slot: int
    confirmations: Optional[int] = None      # None once rooted
    err: Optional[Any] = None
    confirmation_status: Optional[str] = None

    def satisfies(self, commitment: CommitmentLike) -> bool:
        """Check whether this status has reached the given commitment."""
        if self.confirmation_status is not None:
            return commitment_satisfies(self.confirmation_status, commitment)
        # Older nodes omit confirmationStatus; null confirmations means rooted
        level = Commitment.FINALIZED if self.confirmations is None else Commitment.PROCESSED
        return level.satisfies(commitment)


@dataclass(frozen=True)
class AccountInfo:
    """On-chain account state."""
    lamports: int
    owner: Any
    data: bytes = b""
    executable: bool = False
    rent_epoch: Optional[int] = None


@dataclass(frozen=True)
class KeyedAccountInfo:
    """Account state paired with the account address."""
    account_id: Any
    account_info: AccountInfo


@dataclass(frozen=True)
class SimulatedTransactionResponse:
    """Outcome of a simulated transaction."""
    err: Optional[Any] = None
    logs: Optional[List[str]] = None
    accounts: Optional[List[Any]] = None
    units_consumed: Optional[int] = None


@dataclass(frozen=True)
class RpcResponseAndContext:
    """An RPC value along with the slot it was evaluated at."""
    slot: int
    value: Any = field(default=None)


class Connection(ABC):
    """
    Abstract interface for RPC access.

    This interface defines all network operations needed by solcontrib:
    - Account and transaction lookups
    - Blockhash and block height queries
    - Raw transaction broadcast
    - Simulation
    """

    def __init__(self, config: Optional[ContribConfig] = None):
        """
        Initialize the connection.

        Args:
            config: Configuration. Uses global config if not provided.
        """
        self.config = config or get_config()

    @abstractmethod
    async def get_account_info(
        self,
        account_id: Any,
        commitment: Optional[CommitmentLike] = None,
    ) -> Optional[AccountInfo]:
        """
        Get account state.

        Returns:
            Account info, or None if the account does not exist
        """
        pass

    @abstractmethod
    async def get_transaction(
        self,
        signature: str,
        commitment: Optional[CommitmentLike] = None,
    ) -> Optional[dict]:
        """
        Get a confirmed transaction by signature.

        Returns:
            The getTransaction result, or None if not (yet) available
        """
        pass

    @abstractmethod
    async def get_recent_blockhash(
        self,
        commitment: Optional[CommitmentLike] = None,
    ) -> BlockhashWithExpiryBlockHeight:
        """Get a recent blockhash together with its expiry height."""
        pass

    @abstractmethod
    async def get_signature_status(
        self,
        signature: str,
    ) -> Optional[SignatureStatus]:
        """
        Get the status of a signature.

        Returns:
            The status, or None if the signature has not been seen
        """
        pass

    @abstractmethod
    async def get_block_height(
        self,
        commitment: Optional[CommitmentLike] = None,
    ) -> int:
        """Get the current block height."""
        pass

    @abstractmethod
    async def send_raw_transaction(
        self,
        raw_transaction: bytes,
        opts: Optional[ConfirmOptions] = None,
    ) -> str:
        """
        Broadcast a serialized, signed transaction.

        Returns:
            Transaction signature

        Raises:
            RpcError: If the node rejects the transaction
        """
        pass

    @abstractmethod
    async def simulate_transaction(
        self,
        transaction: Any,
        commitment: Optional[CommitmentLike] = None,
    ) -> dict:
        """
        Simulate a signed transaction.

        Returns:
            The raw JSON-RPC response, carrying either "result" or "error"
        """
        pass

    async def confirm_transaction(
        self,
        strategy: Union[str, TransactionConfirmationStrategy],
        commitment: CommitmentLike = Commitment.CONFIRMED,
    ) -> SignatureResult:
        """
        Wait for a signature to reach the given commitment.

        With a blockhash strategy the wait ends once the chain passes
        last_valid_block_height; otherwise it is bounded by
        confirm_timeout_seconds.

        Raises:
            BlockhashExpiredError: If the blockhash expired first
            ConfirmationTimeoutError: If the timeout elapsed first
        """
        if isinstance(strategy, TransactionConfirmationStrategy):
            signature = strategy.signature
            last_valid_block_height = strategy.last_valid_block_height
        else:
            signature = strategy
            last_valid_block_height = None

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.confirm_timeout_seconds

        while True:
            status = await self.get_signature_status(signature)
            if status is not None and status.satisfies(commitment):
                logger.debug(
                    "signature_confirmed",
                    signature=signature,
                    slot=status.slot,
                    failed=status.err is not None,
                )
                return SignatureResult(err=status.err)

            if last_valid_block_height is not None:
                block_height = await self.get_block_height(commitment)
                if block_height > last_valid_block_height:
                    logger.warning(
                        "blockhash_expired",
                        signature=signature,
                        block_height=block_height,
                        last_valid_block_height=last_valid_block_height,
                    )
                    raise BlockhashExpiredError(signature, last_valid_block_height)
            elif loop.time() >= deadline:
                raise ConfirmationTimeoutError(
                    f"Transaction was not confirmed in "
                    f"{self.config.confirm_timeout_seconds} seconds: {signature}",
                    details={
                        "signature": signature,
                        "timeout": self.config.confirm_timeout_seconds,
                    },
                )

            await asyncio.sleep(self.config.confirm_poll_interval_seconds)

    async def send_and_confirm_raw_transaction(
        self,
        raw_transaction: bytes,
        opts: Optional[ConfirmOptions] = None,
    ) -> str:
        """
        Broadcast a signed transaction and wait for its confirmation.

        Returns:
            Transaction signature

        Raises:
            OnChainFailureError: If the transaction executed and failed
        """
        opts = opts or ConfirmOptions.from_config(self.config)
        signature = await self.send_raw_transaction(raw_transaction, opts)

        result = await self.confirm_transaction(signature, opts.commitment)
        if result.err is not None:
            raise OnChainFailureError(signature, result.err)

        return signature
