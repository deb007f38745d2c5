"""
Tests for TokenAmount display conversion and precision rules
"""
from decimal import Decimal

import pytest

from trident.core.structures.structures import TokenAmount


@pytest.mark.parametrize(
    "raw, decimals",
    [
        (0, 18),
        (1, 18),
        (250 * 10 ** 18, 18),
        (123456789, 6),
        (2 ** 256 - 1, 18),
        (42, 0),
    ],
)
def test_display_round_trip(raw: int, decimals: int):
    amount = TokenAmount(raw, decimals)
    assert TokenAmount.from_display(amount.to_display(), decimals) == amount


def test_to_display_is_exact():
    assert TokenAmount(1, 18).to_display() == Decimal("0.000000000000000001")
    assert TokenAmount(250 * 10 ** 18, 18).to_display() == Decimal("250")
    assert TokenAmount(1_500_000, 6).to_display() == Decimal("1.5")


def test_from_display_accepts_strings_and_floats():
    assert TokenAmount.from_display("0.1", 18).raw == 10 ** 17
    assert TokenAmount.from_display(0.1, 18).raw == 10 ** 17
    assert TokenAmount.from_display(3, 6).raw == 3_000_000


def test_from_display_rejects_excess_precision():
    with pytest.raises(ValueError, match="not representable"):
        TokenAmount.from_display("0.0000001", 6)


def test_from_display_rejects_sub_unit_digits_beyond_context_precision():
    long_tail = Decimal("0.1" + "0" * 80 + "1")

    with pytest.raises(ValueError, match="not representable"):
        TokenAmount.from_display(long_tail, 18)


def test_from_display_keeps_trailing_zero_digits():
    assert TokenAmount.from_display("0.1" + "0" * 80, 18).raw == 10 ** 17


@pytest.mark.parametrize("value", ["NaN", "Infinity", "abc"])
def test_from_display_rejects_non_numbers(value: str):
    with pytest.raises(ValueError):
        TokenAmount.from_display(value, 18)


def test_comparison_requires_same_precision():
    with pytest.raises(ValueError, match="precision mismatch"):
        _ = TokenAmount(1, 18) >= TokenAmount(1, 6)
    with pytest.raises(ValueError, match="precision mismatch"):
        _ = TokenAmount(1, 18) + TokenAmount(1, 6)


def test_ordering_and_arithmetic():
    small = TokenAmount(250, 18)
    large = TokenAmount(300, 18)
    assert large >= small
    assert small >= TokenAmount(250, 18)
    assert small < large
    assert large - small == TokenAmount(50, 18)
    assert small + small == TokenAmount(500, 18)


def test_rejects_bad_construction():
    with pytest.raises(TypeError):
        TokenAmount(1.5, 18)
    with pytest.raises(ValueError):
        TokenAmount(1, -1)


def test_str_is_normalized():
    assert str(TokenAmount(250 * 10 ** 18, 18)) == "250"
    assert str(TokenAmount(15, 1)) == "1.5"
