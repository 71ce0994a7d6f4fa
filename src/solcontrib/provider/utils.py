"""
Batch send and simulation helpers used by the provider.
"""

from typing import TYPE_CHECKING, Any, List, Optional, Sequence

import structlog

from solcontrib.connection.interface import (
    Connection,
    RpcResponseAndContext,
    SimulatedTransactionResponse,
)
from solcontrib.core.types import CommitmentLike, ConfirmOptions, SendTxRequest
from solcontrib.errors import BatchSendError, BatchSendResult, SimulationError

if TYPE_CHECKING:
    from solcontrib.provider.provider import SolanaProvider

logger = structlog.get_logger(__name__)


async def send_all(
    *,
    provider: "SolanaProvider",
    reqs: Sequence[SendTxRequest],
    opts: Optional[ConfirmOptions] = None,
    confirm: bool = True,
    raise_on_error: bool = False,
) -> List[BatchSendResult]:
    """
    Sign a batch of transactions and dispatch them in order.

    Every transaction is attempted even if an earlier one failed, since a
    landed transaction cannot be undone.

    Args:
        provider: Provider used for signing and sending
        reqs: Transactions and their extra signers
        opts: Confirmation options (provider defaults if not given)
        confirm: Wait for each transaction to be confirmed
        raise_on_error: Raise instead of returning when any transaction failed

    Returns:
        One result per request in input order, carrying its signature or error

    Raises:
        BatchSendError: If raise_on_error is set and any transaction failed
    """
    opts = opts or provider.opts
    txs = await provider.sign_all(reqs, opts)

    results: List[BatchSendResult] = []
    for index, tx in enumerate(txs):
        raw = tx.serialize()
        try:
            if confirm:
                signature = await provider.send_connection.send_and_confirm_raw_transaction(
                    raw, opts
                )
            else:
                signature = await provider.send_connection.send_raw_transaction(raw, opts)
        except Exception as e:
            logger.error("batch_tx_failed", index=index, error=str(e))
            results.append(BatchSendResult(index=index, error=e))
            continue

        logger.info("batch_tx_sent", index=index, signature=signature)
        results.append(BatchSendResult(index=index, signature=signature))

    if raise_on_error and any(not r.succeeded for r in results):
        raise BatchSendError(results)

    return results


async def simulate_transaction_with_commitment(
    connection: Connection,
    transaction: Any,
    commitment: Optional[CommitmentLike] = None,
) -> RpcResponseAndContext:
    """
    Simulate a signed transaction at the given commitment.

    Returns:
        The simulation response with the slot it was evaluated at

    Raises:
        SimulationError: If the node returned an error instead of a result
    """
    response = await connection.simulate_transaction(transaction, commitment)

    if response.get("error"):
        error = response["error"]
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise SimulationError(
            f"failed to simulate transaction: {message}",
            details={"error": error},
        )

    result = response.get("result") or {}
    value = result.get("value") or {}
    return RpcResponseAndContext(
        slot=(result.get("context") or {}).get("slot", 0),
        value=SimulatedTransactionResponse(
            err=value.get("err"),
            logs=value.get("logs"),
            accounts=value.get("accounts"),
            units_consumed=value.get("unitsConsumed"),
        ),
    )
