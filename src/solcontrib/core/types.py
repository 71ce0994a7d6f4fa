"""
Shared types for signing and confirmation.

The transaction, signer and wallet objects are owned by the caller; this
module only describes the surface solcontrib relies on.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, Optional, Protocol, Sequence, Union, runtime_checkable


class Commitment(str, Enum):
    """Commitment levels, including the legacy aliases still accepted by RPC nodes."""
    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"

    # Deprecated aliases
    RECENT = "recent"
    SINGLE = "single"
    SINGLE_GOSSIP = "singleGossip"
    ROOT = "root"
    MAX = "max"

    def normalized(self) -> "Commitment":
        """Map legacy aliases onto processed / confirmed / finalized."""
        return _ALIASES.get(self, self)

    @property
    def rank(self) -> int:
        return _RANKS[self.normalized()]

    def satisfies(self, required: "CommitmentLike") -> bool:
        """True if a status at this level meets the required level."""
        return commitment_satisfies(self, required)


_ALIASES = {
    Commitment.RECENT: Commitment.PROCESSED,
    Commitment.SINGLE: Commitment.CONFIRMED,
    Commitment.SINGLE_GOSSIP: Commitment.CONFIRMED,
    Commitment.ROOT: Commitment.FINALIZED,
    Commitment.MAX: Commitment.FINALIZED,
}

_RANKS = {
    Commitment.PROCESSED: 0,
    Commitment.CONFIRMED: 1,
    Commitment.FINALIZED: 2,
}

CommitmentLike = Union[Commitment, str]


def commitment_value(commitment: CommitmentLike) -> str:
    """The wire value of a commitment, whether or not it is a known level."""
    if isinstance(commitment, Commitment):
        return commitment.value
    return str(commitment)


def commitment_satisfies(level: CommitmentLike, required: CommitmentLike) -> bool:
    """
    True if a status at `level` meets `required`.

    Levels outside the known set are defined by the transport and have no
    ordering here, so they only satisfy an identical level.
    """
    try:
        known_level, known_required = Commitment(level), Commitment(required)
    except ValueError:
        return commitment_value(level) == commitment_value(required)
    return known_level.rank >= known_required.rank


@dataclass(frozen=True)
class ConfirmOptions:
    """
    Preflight and confirmation policy for a provider call.

    Attributes:
        preflight_commitment: Commitment for blockhash fetches and preflight simulation
        commitment: Commitment for reads and send confirmation
        skip_preflight: Ask the node to skip preflight checks when sending
        max_retries: Node-side rebroadcast limit (None leaves it to the node)
    """
    preflight_commitment: CommitmentLike = Commitment.RECENT
    commitment: CommitmentLike = Commitment.RECENT
    skip_preflight: bool = False
    max_retries: Optional[int] = None

    @classmethod
    def from_config(cls, config: Any) -> "ConfirmOptions":
        """Provider defaults taken from the configured commitments."""
        return cls(
            preflight_commitment=config.preflight_commitment,
            commitment=config.commitment,
        )

    def merge(self, **overrides: Any) -> "ConfirmOptions":
        """Return a copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


DEFAULT_PROVIDER_OPTIONS = ConfirmOptions(
    preflight_commitment=Commitment.RECENT,
    commitment=Commitment.RECENT,
)


@runtime_checkable
class Signer(Protocol):
    """Key pair able to add its signature to a transaction."""

    @property
    def public_key(self) -> Any:
        ...


@runtime_checkable
class Transaction(Protocol):
    """Mutable, not yet broadcast transaction."""

    fee_payer: Any
    recent_blockhash: Optional[str]

    def partial_sign(self, *signers: Signer) -> None:
        ...

    def serialize(self) -> bytes:
        ...


class Wallet(Protocol):
    """Holds the fee payer key and signs on its behalf."""

    @property
    def public_key(self) -> Any:
        ...

    async def sign_transaction(self, tx: Transaction) -> Transaction:
        ...

    async def sign_all_transactions(self, txs: List[Transaction]) -> List[Transaction]:
        ...


def present_signers(signers: Optional[Sequence[Optional[Signer]]]) -> List[Signer]:
    """Drop missing entries from an optional signer list."""
    return [s for s in signers or () if s is not None]


@dataclass
class SendTxRequest:
    """A transaction plus the extra signers it needs, for batch operations."""
    tx: Transaction
    signers: Sequence[Optional[Signer]] = field(default_factory=list)

    def present_signers(self) -> List[Signer]:
        return present_signers(self.signers)
