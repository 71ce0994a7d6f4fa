"""
Pytest configuration and shared fixtures for the test suite.
"""

import hashlib
from typing import Dict, List, Optional

import pytest

from solcontrib.config import ContribConfig, set_config
from solcontrib.connection.interface import (
    AccountInfo,
    BlockhashWithExpiryBlockHeight,
    Connection,
    SignatureStatus,
)
from solcontrib.core.types import ConfirmOptions
from solcontrib.errors import RpcError


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_config() -> ContribConfig:
    """Create a test configuration with no real delays."""
    return ContribConfig(
        poll_retries=5,
        poll_min_timeout_seconds=0,
        confirm_timeout_seconds=0.05,
        confirm_poll_interval_seconds=0.001,
        log_level="DEBUG",
    )


@pytest.fixture(autouse=True)
def global_config(test_config):
    """Install the test configuration as the global one."""
    set_config(test_config)
    yield test_config
    set_config(None)


# ============================================================================
# Test Doubles
# ============================================================================

class FakeSigner:
    """Key pair stand-in; only its public key matters."""

    def __init__(self, name: str):
        self.public_key = f"{name}Pubkey"


class FakeTransaction:
    """Mutable transaction recording who signed it."""

    def __init__(self, name: str = "tx"):
        self.name = name
        self.fee_payer = None
        self.recent_blockhash: Optional[str] = None
        self.signers: List[str] = []

    def partial_sign(self, *signers) -> None:
        for signer in signers:
            self.signers.append(signer.public_key)

    def serialize(self) -> bytes:
        return "|".join(
            [self.name, str(self.fee_payer), str(self.recent_blockhash), *self.signers]
        ).encode()


class FakeWallet:
    """Wallet that signs by appending its public key."""

    def __init__(self, public_key: str = "WalletPubkey"):
        self.public_key = public_key
        self.sign_calls = 0
        self.sign_all_calls = 0

    async def sign_transaction(self, tx):
        self.sign_calls += 1
        tx.signers.append(self.public_key)
        return tx

    async def sign_all_transactions(self, txs):
        self.sign_all_calls += 1
        for tx in txs:
            tx.signers.append(self.public_key)
        return txs


def signature_for(raw: bytes) -> str:
    """Deterministic signature for a serialized transaction."""
    return hashlib.sha256(raw).hexdigest()[:32]


class MockConnection(Connection):
    """In-memory connection for testing."""

    def __init__(self, config: Optional[ContribConfig] = None):
        super().__init__(config)
        self.accounts: Dict[str, AccountInfo] = {}
        self.transactions: Dict[str, dict] = {}
        self.transaction_responses: List[Optional[dict]] = []
        self.statuses: Dict[str, SignatureStatus] = {}
        self.block_height = 100
        self.block_height_step = 0
        self.failing_sends: set = set()
        self.simulation_response: dict = {
            "result": {"context": {"slot": 1}, "value": {"err": None, "logs": []}}
        }

        self.sent: List[bytes] = []
        self.blockhash_requests = 0
        self.get_transaction_calls = 0
        self.confirm_calls = 0
        self._blockhash_counter = 0

    async def get_account_info(self, account_id, commitment=None) -> Optional[AccountInfo]:
        return self.accounts.get(account_id)

    async def get_transaction(self, signature, commitment=None) -> Optional[dict]:
        self.get_transaction_calls += 1
        if self.transaction_responses:
            return self.transaction_responses.pop(0)
        return self.transactions.get(signature)

    async def get_recent_blockhash(self, commitment=None) -> BlockhashWithExpiryBlockHeight:
        self.blockhash_requests += 1
        self._blockhash_counter += 1
        return BlockhashWithExpiryBlockHeight(
            blockhash=f"Blockhash{self._blockhash_counter}",
            last_valid_block_height=self.block_height + 150,
        )

    async def get_signature_status(self, signature) -> Optional[SignatureStatus]:
        return self.statuses.get(signature)

    async def get_block_height(self, commitment=None) -> int:
        self.block_height += self.block_height_step
        return self.block_height

    async def send_raw_transaction(self, raw_transaction, opts: Optional[ConfirmOptions] = None) -> str:
        if raw_transaction in self.failing_sends:
            raise RpcError("Transaction simulation failed", details={"code": -32002})
        self.sent.append(raw_transaction)
        signature = signature_for(raw_transaction)
        self.statuses.setdefault(
            signature,
            SignatureStatus(slot=10, confirmations=1, confirmation_status="confirmed"),
        )
        return signature

    async def simulate_transaction(self, transaction, commitment=None) -> dict:
        return self.simulation_response

    async def confirm_transaction(self, strategy, commitment="confirmed"):
        self.confirm_calls += 1
        return await super().confirm_transaction(strategy, commitment)

    def land(self, signature: str, slot: int = 10, err=None, logs=None) -> dict:
        """Record a confirmed transaction for lookups and status checks."""
        result = {
            "slot": slot,
            "meta": {"err": err, "logMessages": logs or []},
            "transaction": {"signatures": [signature]},
        }
        self.transactions[signature] = result
        self.statuses[signature] = SignatureStatus(
            slot=slot, confirmations=None, err=err, confirmation_status="finalized"
        )
        return result


@pytest.fixture
def mock_connection(test_config) -> MockConnection:
    """Create a mock connection."""
    return MockConnection(test_config)


@pytest.fixture
def send_connection(test_config) -> MockConnection:
    """A second mock connection, used as the send endpoint."""
    return MockConnection(test_config)


@pytest.fixture
def wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture
def make_tx():
    """Factory for fake transactions."""
    return FakeTransaction


@pytest.fixture
def make_signer():
    """Factory for fake signers."""
    return FakeSigner
