"""
Test suite for token amount arithmetic.
"""

from fractions import Fraction

import pytest

from solcontrib.errors import TokenAmountInvariantError
from solcontrib.token.amount import MAX_U64, Percent, Token, TokenAmount

USDC = Token(mint="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", decimals=6, symbol="USDC")
SOL = Token(mint="So11111111111111111111111111111111111111112", decimals=9, symbol="SOL")


class TestTokenAmountInvariants:
    """Tests for amount validation."""

    def test_negative_rejected(self):
        with pytest.raises(TokenAmountInvariantError, match="greater than zero"):
            TokenAmount(USDC, -1)

    def test_u64_overflow_rejected(self):
        TokenAmount(USDC, MAX_U64)
        with pytest.raises(TokenAmountInvariantError, match="overflows u64"):
            TokenAmount(USDC, MAX_U64 + 1)

    def test_token_mismatch_rejected(self):
        with pytest.raises(TokenAmountInvariantError, match="token mismatch"):
            TokenAmount(USDC, 1).add(TokenAmount(SOL, 1))

    def test_subtract_below_zero_rejected(self):
        with pytest.raises(TokenAmountInvariantError):
            TokenAmount(USDC, 1) - TokenAmount(USDC, 2)

    def test_string_amounts(self):
        assert TokenAmount(USDC, "1500000").raw == 1_500_000
        with pytest.raises(TokenAmountInvariantError):
            TokenAmount(USDC, "1.5")

    def test_invariant_error_is_value_error(self):
        with pytest.raises(ValueError):
            TokenAmount(USDC, -5)


class TestTokenAmountArithmetic:
    """Tests for arithmetic and formatting."""

    def test_add_and_subtract(self):
        a = TokenAmount(USDC, 1_500_000)
        b = TokenAmount(USDC, 500_000)

        assert (a + b).raw == 2_000_000
        assert (a - b).raw == 1_000_000
        assert a > b

    def test_parse(self):
        assert TokenAmount.parse(USDC, "1.5").raw == 1_500_000
        with pytest.raises(TokenAmountInvariantError):
            TokenAmount.parse(USDC, "0.0000001")

    def test_to_exact(self):
        assert TokenAmount(USDC, 1_500_000).to_exact() == "1.5"
        assert TokenAmount(USDC, 0).to_exact() == "0"
        assert TokenAmount(SOL, 1).to_exact() == "0.000000001"

    def test_to_fixed(self):
        amount = TokenAmount(USDC, 1_239_999)

        assert amount.to_fixed() == "1.239999"
        assert amount.to_fixed(2) == "1.23"
        with pytest.raises(TokenAmountInvariantError):
            amount.to_fixed(7)

    def test_to_significant(self):
        assert TokenAmount(USDC, 1_234_567_890).to_significant() == "1234.56"
        assert TokenAmount(USDC, 1_500_000).to_significant() == "1.5"

    def test_divide_by_amount(self):
        pct = TokenAmount(USDC, 250).divide_by_amount(TokenAmount(USDC, 1000))

        assert isinstance(pct, Percent)
        assert pct == Fraction(1, 4)
        assert pct.to_fixed(2) == "25.00"

    def test_multiply_and_reduce(self):
        amount = TokenAmount(USDC, 1_000_000)

        assert amount.multiply_by(Percent(1, 3)).raw == 333_333
        assert amount.multiply_by(Percent(2, 3)).raw == 666_667
        assert amount.reduce_by(Percent(1, 10)).raw == 900_000

    def test_to_u64(self):
        assert TokenAmount(SOL, 42).to_u64() == 42
