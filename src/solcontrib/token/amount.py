"""
Token amounts.

Fixed-point quantities of an SPL token, stored as the raw u64 integer the
token program uses.
"""

import math
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal, localcontext
from fractions import Fraction
from functools import total_ordering
from typing import Optional, Union

from solcontrib.errors import TokenAmountInvariantError

MAX_U64 = 2**64 - 1

IntegerLike = Union[int, str]


@dataclass(frozen=True)
class Token:
    """
    An SPL token.

    Attributes:
        mint: Mint address
        decimals: Number of decimals of the raw representation
        symbol: Ticker, informational only
        chain_id: Network the mint lives on, if tracked
    """
    mint: str
    decimals: int
    symbol: Optional[str] = field(default=None, compare=False)
    chain_id: Optional[int] = None

    def __post_init__(self):
        if not 0 <= self.decimals <= 255:
            raise TokenAmountInvariantError(
                f"invalid decimals: {self.decimals}",
                details={"mint": self.mint, "decimals": self.decimals},
            )

    def equals(self, other: "Token") -> bool:
        """Tokens are equal when they share a mint on the same network."""
        return self.mint == other.mint and self.chain_id == other.chain_id


def validate_u64(value: int) -> None:
    """Raise if value does not fit in an unsigned 64-bit integer."""
    if value < 0:
        raise TokenAmountInvariantError(
            f"{value} must be greater than zero", details={"value": value}
        )
    if value > MAX_U64:
        raise TokenAmountInvariantError(f"{value} overflows u64", details={"value": value})


def parse_integer(value: IntegerLike) -> int:
    if isinstance(value, bool):
        raise TokenAmountInvariantError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value), 10)
    except ValueError:
        raise TokenAmountInvariantError(f"not an integer: {value!r}")


class Percent(Fraction):
    """A fraction expressed as a percentage."""

    def to_significant(self, significant_digits: int = 5) -> str:
        return _significant(Fraction(self) * 100, significant_digits)

    def to_fixed(self, decimal_places: int = 2) -> str:
        return _fixed(Fraction(self) * 100, decimal_places)

    def __repr__(self) -> str:
        return f"Percent({self.to_significant()}%)"


def _to_decimal(value: Fraction) -> Decimal:
    return Decimal(value.numerator) / Decimal(value.denominator)


def _significant(value: Fraction, digits: int) -> str:
    if digits <= 0:
        raise ValueError(f"{digits} is not positive")
    with localcontext() as ctx:
        ctx.prec = digits
        ctx.rounding = ROUND_DOWN
        result = _to_decimal(value)
    return format(result.normalize(), "f")


def _fixed(value: Fraction, places: int) -> str:
    with localcontext() as ctx:
        ctx.prec = 100
        result = _to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_DOWN)
    return format(result, "f")


@total_ordering
class TokenAmount:
    """
    An amount of a token.

    The amount must be raw, i.e. in the native representation: 1.5 of a
    6-decimal token is TokenAmount(token, 1_500_000).
    """

    __slots__ = ("token", "raw")

    def __init__(self, token: Token, amount: IntegerLike):
        raw = parse_integer(amount)
        validate_u64(raw)
        self.token = token
        self.raw = raw

    @classmethod
    def parse(cls, token: Token, ui_amount: Union[str, Decimal]) -> "TokenAmount":
        """Create an amount from its human readable form, e.g. "1.5"."""
        value = Decimal(ui_amount).scaleb(token.decimals)
        if value != value.to_integral_value():
            raise TokenAmountInvariantError(
                f"{ui_amount} has more than {token.decimals} decimals",
                details={"amount": str(ui_amount), "decimals": token.decimals},
            )
        return cls(token, int(value))

    @property
    def fraction(self) -> Fraction:
        return Fraction(self.raw, 10 ** self.token.decimals)

    def _check_token(self, other: "TokenAmount") -> None:
        if not self.token.equals(other.token):
            raise TokenAmountInvariantError(
                "token mismatch",
                details={"token": self.token.mint, "other": other.token.mint},
            )

    def add(self, other: "TokenAmount") -> "TokenAmount":
        self._check_token(other)
        return TokenAmount(self.token, self.raw + other.raw)

    def subtract(self, other: "TokenAmount") -> "TokenAmount":
        self._check_token(other)
        return TokenAmount(self.token, self.raw - other.raw)

    __add__ = add
    __sub__ = subtract

    def divide_by_amount(self, other: "TokenAmount") -> Percent:
        """This amount as a percentage of another amount of the same token."""
        self._check_token(other)
        return Percent(self.raw, other.raw)

    def divide_by(self, other: Union[Fraction, int]) -> Percent:
        """This amount's decimal value divided by a fraction, as a percentage."""
        return Percent(self.fraction / Fraction(other))

    def multiply_by(self, percent: Fraction) -> "TokenAmount":
        """
        Multiply by a percentage, rounding half up.

        This loses precision.
        """
        scaled = Fraction(percent) * self.raw
        return TokenAmount(self.token, math.floor(scaled + Fraction(1, 2)))

    def reduce_by(self, percent: Fraction) -> "TokenAmount":
        """Reduce by a percentage. This loses precision."""
        return self.multiply_by(Percent(1) - Fraction(percent))

    def to_u64(self) -> int:
        return self.raw

    def to_exact(self) -> str:
        """Exact decimal representation, without trailing zeros."""
        with localcontext() as ctx:
            ctx.prec = 100
            value = Decimal(self.raw).scaleb(-self.token.decimals)
        return format(value.normalize(), "f")

    def to_fixed(self, decimal_places: Optional[int] = None) -> str:
        if decimal_places is None:
            decimal_places = self.token.decimals
        if decimal_places > self.token.decimals:
            raise TokenAmountInvariantError(
                "DECIMALS",
                details={"decimal_places": decimal_places, "decimals": self.token.decimals},
            )
        return _fixed(self.fraction, decimal_places)

    def to_significant(self, significant_digits: int = 6) -> str:
        return _significant(self.fraction, significant_digits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenAmount):
            return NotImplemented
        return self.token.equals(other.token) and self.raw == other.raw

    def __lt__(self, other: "TokenAmount") -> bool:
        self._check_token(other)
        return self.raw < other.raw

    def __hash__(self) -> int:
        return hash((self.token.mint, self.token.chain_id, self.raw))

    def __repr__(self) -> str:
        symbol = self.token.symbol or self.token.mint
        return f"TokenAmount({self.to_exact()} {symbol})"
