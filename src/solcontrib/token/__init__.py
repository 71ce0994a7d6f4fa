"""
SPL token amount arithmetic.
"""

from solcontrib.token.amount import MAX_U64, Percent, Token, TokenAmount, validate_u64

__all__ = [
    "MAX_U64",
    "Percent",
    "Token",
    "TokenAmount",
    "validate_u64",
]
