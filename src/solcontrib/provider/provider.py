"""
Providers - sign and send transactions paid for by a wallet.

Reads go through `connection`; blockhash fetches and broadcasts go through
`send_connection`, which may point at a different RPC endpoint.
"""

from typing import List, Optional, Sequence

import structlog

from solcontrib.config import ContribConfig, get_config
from solcontrib.connection.interface import (
    Connection,
    KeyedAccountInfo,
    RpcResponseAndContext,
)
from solcontrib.core.types import (
    ConfirmOptions,
    SendTxRequest,
    Signer,
    Transaction,
    Wallet,
    present_signers,
)
from solcontrib.errors import BatchSendResult
from solcontrib.provider.utils import send_all, simulate_transaction_with_commitment
from solcontrib.transaction.pending import PendingTransaction

logger = structlog.get_logger(__name__)


class SolanaReadonlyProvider:
    """Provider that can only read."""

    def __init__(
        self,
        connection: Connection,
        opts: Optional[ConfirmOptions] = None,
        config: Optional[ContribConfig] = None,
    ):
        """
        Initialize the provider.

        Args:
            connection: The cluster connection where the program is deployed
            opts: Transaction confirmation options to use by default.
                Built from the configured commitments if not provided.
            config: Configuration. Uses global config if not provided.
        """
        self.connection = connection
        self.config = config or get_config()
        self.opts = opts or ConfirmOptions.from_config(self.config)

    async def get_account_info(self, account_id) -> Optional[KeyedAccountInfo]:
        """
        Get an account at the provider's commitment.

        Returns:
            The account keyed by its address, or None if it does not exist
        """
        account_info = await self.connection.get_account_info(
            account_id,
            self.opts.commitment,
        )
        if account_info is None:
            return None
        return KeyedAccountInfo(account_id=account_id, account_info=account_info)


class SolanaProvider(SolanaReadonlyProvider):
    """
    The network and wallet context used to send transactions paid for and
    signed by the provider.

    Usage:
        ```python
        provider = SolanaProvider(connection, connection, wallet)
        signature = await provider.send(tx, [mint_keypair])
        ```
    """

    def __init__(
        self,
        connection: Connection,
        send_connection: Connection,
        wallet: Wallet,
        opts: Optional[ConfirmOptions] = None,
        config: Optional[ContribConfig] = None,
    ):
        """
        Initialize the provider.

        Args:
            connection: The cluster connection where the program is deployed
            send_connection: The connection where transactions are sent to
            wallet: The wallet used to pay for and sign all transactions
            opts: Transaction confirmation options to use by default
            config: Configuration passed on to pending transactions
        """
        super().__init__(connection, opts, config)
        self.send_connection = send_connection
        self.wallet = wallet

    async def sign(
        self,
        tx: Transaction,
        signers: Sequence[Optional[Signer]] = (),
        opts: Optional[ConfirmOptions] = None,
    ) -> Transaction:
        """
        Sign a transaction with the wallet and any additional signers.

        The fee payer and recent blockhash are stamped onto `tx` in place.

        Args:
            tx: The transaction to sign
            signers: Signers in addition to the provider wallet; None entries are skipped
            opts: Transaction confirmation options

        Returns:
            The same transaction, fully signed
        """
        opts = opts or self.opts

        tx.fee_payer = self.wallet.public_key
        blockhash = await self.send_connection.get_recent_blockhash(
            opts.preflight_commitment
        )
        tx.recent_blockhash = blockhash.blockhash

        await self.wallet.sign_transaction(tx)
        for signer in present_signers(signers):
            tx.partial_sign(signer)

        logger.debug("tx_signed", blockhash=blockhash.blockhash)
        return tx

    async def sign_all(
        self,
        reqs: Sequence[SendTxRequest],
        opts: Optional[ConfirmOptions] = None,
    ) -> List[Transaction]:
        """
        Similar to `sign`, but for a batch of transactions.

        A single blockhash is fetched for the whole batch so every
        transaction shares the same validity window.

        Returns:
            Signed transactions, in input order
        """
        opts = opts or self.opts
        blockhash = await self.send_connection.get_recent_blockhash(
            opts.preflight_commitment
        )

        txs = []
        for req in reqs:
            tx = req.tx
            tx.fee_payer = self.wallet.public_key
            tx.recent_blockhash = blockhash.blockhash
            for signer in req.present_signers():
                tx.partial_sign(signer)
            txs.append(tx)

        signed = await self.wallet.sign_all_transactions(txs)
        logger.debug("txs_signed", count=len(signed), blockhash=blockhash.blockhash)
        return list(signed)

    async def send(
        self,
        tx: Transaction,
        signers: Sequence[Optional[Signer]] = (),
        opts: Optional[ConfirmOptions] = None,
    ) -> str:
        """
        Send the given transaction, paid for and signed by the provider's
        wallet, and wait for it to be confirmed.

        Args:
            tx: The transaction to send
            signers: Signers in addition to the provider wallet
            opts: Transaction confirmation options

        Returns:
            Transaction signature
        """
        opts = opts or self.opts
        signed = await self.sign(tx, signers, opts)
        raw = signed.serialize()

        signature = await self.send_connection.send_and_confirm_raw_transaction(raw, opts)
        logger.info("tx_sent", signature=signature)
        return signature

    async def broadcast(
        self,
        tx: Transaction,
        signers: Sequence[Optional[Signer]] = (),
        opts: Optional[ConfirmOptions] = None,
    ) -> PendingTransaction:
        """
        Sign and broadcast a transaction without waiting for confirmation.

        Returns:
            A pending transaction to wait on
        """
        opts = opts or self.opts
        signed = await self.sign(tx, signers, opts)

        signature = await self.send_connection.send_raw_transaction(signed.serialize(), opts)
        logger.info("tx_broadcast", signature=signature)
        return PendingTransaction(self.connection, signature, config=self.config)

    async def send_all(
        self,
        reqs: Sequence[SendTxRequest],
        opts: Optional[ConfirmOptions] = None,
        raise_on_error: bool = False,
    ) -> List[BatchSendResult]:
        """
        Similar to `send`, but for a batch of transactions.

        A failed transaction does not undo the ones sent before it, so the
        outcome is reported per transaction.

        Args:
            reqs: Transactions and their extra signers
            opts: Transaction confirmation options
            raise_on_error: Raise BatchSendError if any transaction failed

        Returns:
            One result per request, in input order
        """
        return await send_all(
            provider=self,
            reqs=reqs,
            opts=opts or self.opts,
            confirm=True,
            raise_on_error=raise_on_error,
        )

    async def simulate(
        self,
        tx: Transaction,
        signers: Sequence[Optional[Signer]] = (),
        opts: Optional[ConfirmOptions] = None,
    ) -> RpcResponseAndContext:
        """
        Simulate the given transaction, returning emitted logs from execution.

        Args:
            tx: The transaction to simulate
            signers: Signers in addition to the provider wallet
            opts: Transaction confirmation options

        Returns:
            Simulation response and context
        """
        opts = opts or self.opts
        signed = await self.sign(tx, signers, opts)
        return await simulate_transaction_with_commitment(
            self.connection,
            signed,
            opts.commitment,
        )
