"""
Pending transaction.

Tracks a broadcast signature until its outcome is known and memoizes the
receipt once it has been fetched.
"""

import random
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from solcontrib.config import ContribConfig, get_config
from solcontrib.connection.interface import (
    Connection,
    TransactionConfirmationStrategy,
)
from solcontrib.core.types import Commitment, CommitmentLike, commitment_value
from solcontrib.errors import (
    ConfirmationTimeoutError,
    OnChainFailureError,
    TransientLookupError,
)
from solcontrib.transaction.receipt import TransactionReceipt

logger = structlog.get_logger(__name__)


class ConfirmStrategy(str, Enum):
    """How wait() learns that a transaction has landed."""
    SUBSCRIPTION = "subscription"   # confirmation notification, then one receipt fetch
    POLLING = "polling"             # receipt lookups with backoff

    @classmethod
    def from_flag(cls, use_websocket: bool) -> "ConfirmStrategy":
        return cls.SUBSCRIPTION if use_websocket else cls.POLLING


class wait_jitter(wait_base):
    """Multiply another wait by a random factor in [1, 2), then cap it."""

    def __init__(self, wait: wait_base, max_timeout: Optional[float] = None) -> None:
        self.wait = wait
        self.max_timeout = max_timeout

    def __call__(self, retry_state: RetryCallState) -> float:
        delay = self.wait(retry_state) * (1 + random.random())
        if self.max_timeout is not None:
            delay = min(delay, self.max_timeout)
        return delay


def wait_backoff(
    min_timeout: float,
    factor: float,
    max_timeout: Optional[float] = None,
    randomize: bool = False,
) -> wait_base:
    """
    Exponential backoff: min_timeout * factor ** (attempt - 1), optionally
    multiplied by a random factor in [1, 2) and capped at max_timeout.
    """
    cap = {} if max_timeout is None else {"max": max_timeout}
    wait = wait_exponential(multiplier=min_timeout, exp_base=factor, **cap)
    if randomize:
        return wait_jitter(wait, max_timeout)
    return wait


@dataclass(frozen=True)
class RetryOptions:
    """
    Receipt polling policy. Unset fields fall back to the configuration.

    Attributes:
        retries: Retries after the first lookup (total attempts = retries + 1)
        min_timeout: Delay before the first retry, in seconds
        factor: Backoff growth factor
        max_timeout: Cap on a single delay, in seconds
        randomize: Multiply each delay by a random factor in [1, 2)
    """
    retries: Optional[int] = None
    min_timeout: Optional[float] = None
    factor: Optional[float] = None
    max_timeout: Optional[float] = None
    randomize: Optional[bool] = None

    def resolve(self, config: ContribConfig) -> "RetryOptions":
        return RetryOptions(
            retries=self.retries if self.retries is not None else config.poll_retries,
            min_timeout=(
                self.min_timeout if self.min_timeout is not None
                else config.poll_min_timeout_seconds
            ),
            factor=self.factor if self.factor is not None else config.poll_factor,
            max_timeout=(
                self.max_timeout if self.max_timeout is not None
                else config.poll_max_timeout_seconds
            ),
            randomize=self.randomize if self.randomize is not None else config.poll_randomize,
        )


class PendingTransaction:
    """
    Transaction which may or may not be confirmed.

    Usage:
        ```python
        signature = await connection.send_raw_transaction(raw)
        receipt = await PendingTransaction(connection, signature).wait()
        ```
    """

    def __init__(
        self,
        connection: Connection,
        signature: str,
        config: Optional[ContribConfig] = None,
    ):
        """
        Initialize the pending transaction.

        Args:
            connection: Connection used for confirmation and lookups
            signature: Signature of the broadcast transaction
            config: Configuration. Uses global config if not provided.
        """
        self._connection = connection
        self._signature = signature
        self.config = config or get_config()
        self._receipt: Optional[TransactionReceipt] = None

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def signature(self) -> str:
        return self._signature

    @property
    def receipt(self) -> Optional[TransactionReceipt]:
        """
        The transaction receipt, if it has already been fetched.

        You probably want the async version of this, `wait`.
        """
        return self._receipt

    def _store_receipt(self, receipt: TransactionReceipt) -> TransactionReceipt:
        # Set once: a receipt stored by an earlier caller is kept.
        if self._receipt is None:
            self._receipt = receipt
            logger.debug("receipt_cached", signature=self._signature, slot=receipt.slot)
        return self._receipt

    async def wait(
        self,
        commitment: Optional[CommitmentLike] = None,
        *,
        use_websocket: Optional[bool] = None,
        blockhash: Optional[str] = None,
        last_valid_block_height: Optional[int] = None,
        retries: Optional[int] = None,
        min_timeout: Optional[float] = None,
        factor: Optional[float] = None,
        max_timeout: Optional[float] = None,
        randomize: Optional[bool] = None,
    ) -> TransactionReceipt:
        """
        Wait for the transaction to be confirmed and return its receipt.

        Args:
            commitment: Commitment to wait for (default from config: confirmed)
            use_websocket: Await a confirmation notification before fetching
                the receipt; otherwise poll for the receipt directly
            blockhash: Blockhash the transaction was signed with
            last_valid_block_height: Expiry height of that blockhash
            retries, min_timeout, factor, max_timeout, randomize: Receipt
                polling policy, used by the polling strategy

        Returns:
            The transaction receipt
        """
        if self._receipt is not None:
            return self._receipt

        commitment = commitment or self.config.wait_commitment
        if use_websocket is None:
            use_websocket = self.config.use_websocket
        strategy = ConfirmStrategy.from_flag(use_websocket)

        logger.debug("tx_wait", signature=self._signature, strategy=strategy.value)

        if strategy == ConfirmStrategy.SUBSCRIPTION:
            await self.confirm(
                commitment,
                blockhash=blockhash,
                last_valid_block_height=last_valid_block_height,
            )
            return await self.poll_for_receipt(commitment)

        return await self.poll_for_receipt(
            commitment,
            retries=retries,
            min_timeout=min_timeout,
            factor=factor,
            max_timeout=max_timeout,
            randomize=randomize,
        )

    async def poll_for_receipt(
        self,
        commitment: Optional[CommitmentLike] = None,
        *,
        retries: Optional[int] = None,
        min_timeout: Optional[float] = None,
        factor: Optional[float] = None,
        max_timeout: Optional[float] = None,
        randomize: Optional[bool] = None,
    ) -> TransactionReceipt:
        """
        Fetch the transaction receipt, retrying while the lookup comes back empty.

        Raises:
            ConfirmationTimeoutError: If every attempt came back empty
        """
        if self._receipt is not None:
            return self._receipt

        commitment = commitment or self.config.wait_commitment
        policy = RetryOptions(
            retries=retries,
            min_timeout=min_timeout,
            factor=factor,
            max_timeout=max_timeout,
            randomize=randomize,
        ).resolve(self.config)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(policy.retries + 1),
            wait=wait_backoff(
                policy.min_timeout,
                policy.factor,
                policy.max_timeout,
                policy.randomize,
            ),
            retry=retry_if_exception_type(TransientLookupError),
            before_sleep=self._log_retry,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    receipt = await self._fetch_receipt(commitment)
        except RetryError as e:
            logger.warning(
                "receipt_poll_exhausted",
                signature=self._signature,
                attempts=policy.retries + 1,
            )
            raise ConfirmationTimeoutError(
                f"Transaction {self._signature} could not be confirmed",
                details={
                    "signature": self._signature,
                    "attempts": policy.retries + 1,
                },
            ) from e.last_attempt.exception()

        return self._store_receipt(receipt)

    async def _fetch_receipt(self, commitment: CommitmentLike) -> TransactionReceipt:
        result = await self._connection.get_transaction(self._signature, commitment)
        if not result:
            raise TransientLookupError(
                "Error fetching transaction",
                details={"signature": self._signature},
            )
        return TransactionReceipt(self._signature, result)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        logger.debug(
            "receipt_poll_retry",
            signature=self._signature,
            attempt=retry_state.attempt_number,
            delay=retry_state.next_action.sleep if retry_state.next_action else None,
        )

    async def confirm(
        self,
        commitment: Optional[CommitmentLike] = None,
        *,
        blockhash: Optional[str] = None,
        last_valid_block_height: Optional[int] = None,
    ) -> str:
        """
        Await the confirmation of the transaction via the connection's
        signature notifications.

        When both blockhash and last_valid_block_height are given the wait
        ends as soon as the blockhash expires.

        Returns:
            The transaction signature

        Raises:
            OnChainFailureError: If the transaction executed and failed
            BlockhashExpiredError: If the blockhash expired first
        """
        if self._receipt is not None:
            if self._receipt.err is not None:
                raise OnChainFailureError(self._signature, self._receipt.err)
            return self._signature

        commitment = commitment or self.config.wait_commitment

        if blockhash is not None and last_valid_block_height is not None:
            strategy = TransactionConfirmationStrategy(
                signature=self._signature,
                blockhash=blockhash,
                last_valid_block_height=last_valid_block_height,
            )
            result = await self._connection.confirm_transaction(strategy, commitment)
        else:
            result = await self._connection.confirm_transaction(self._signature, commitment)

        if result.err is not None:
            logger.warning("tx_failed_on_chain", signature=self._signature, err=result.err)
            raise OnChainFailureError(self._signature, result.err)

        logger.debug(
            "tx_confirmed",
            signature=self._signature,
            commitment=commitment_value(commitment),
        )
        return self._signature

    async def await_signature_confirmation(
        self,
        commitment: CommitmentLike = Commitment.CONFIRMED,
    ) -> str:
        """
        Await the confirmation of the transaction.

        Deprecated: use `confirm`.
        """
        warnings.warn(
            "await_signature_confirmation is deprecated, use confirm",
            DeprecationWarning,
            stacklevel=2,
        )
        return await self.confirm(commitment)

    def __repr__(self) -> str:
        state = "confirmed" if self._receipt is not None else "pending"
        return f"PendingTransaction(signature={self._signature!r}, {state})"
