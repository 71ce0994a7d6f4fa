"""
Providers: signing, broadcast, batching and simulation.
"""

from solcontrib.provider.provider import SolanaProvider, SolanaReadonlyProvider
from solcontrib.provider.utils import send_all, simulate_transaction_with_commitment

__all__ = [
    "SolanaProvider",
    "SolanaReadonlyProvider",
    "send_all",
    "simulate_transaction_with_commitment",
]
