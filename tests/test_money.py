"""Money conversion and processing fee tests."""

from decimal import Decimal

import pytest

from app.utils.money import (
    calculate_processing_fee,
    cents_field_to_dollars,
    cents_to_dollars,
    dollars_to_cents,
    format_price,
    round_cents,
)


class TestDollarsToCents:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (Decimal("10.99"), 1099),
            (Decimal("0"), 0),
            ("20.88", 2088),
            (5, 500),
            (19.99, 1999),
        ],
    )
    def test_converts(self, amount, expected):
        assert dollars_to_cents(amount) == expected

    def test_half_cent_rounds_away_from_zero(self):
        assert dollars_to_cents(Decimal("1.005")) == 101
        assert dollars_to_cents(Decimal("-1.005")) == -101

    def test_float_read_as_written(self):
        # Binary 1.005 is slightly below 1.005; str() keeps the literal
        assert dollars_to_cents(1.005) == 101


class TestCentsToDollars:
    def test_two_decimal_places(self):
        assert cents_to_dollars(1044) == Decimal("10.44")
        assert str(cents_to_dollars(500)) == "5.00"
        assert cents_to_dollars(0) == Decimal("0.00")

    @pytest.mark.parametrize("cents", [0, 1, 30, 99, 1044, 2088, 123456789])
    def test_cents_survive_conversion(self, cents):
        assert dollars_to_cents(cents_to_dollars(cents)) == cents

    def test_api_field_reads_cents_only(self):
        assert cents_field_to_dollars(2088) == Decimal("20.88")
        assert cents_field_to_dollars(Decimal("20.88")) == Decimal("20.88")
        assert cents_field_to_dollars(None) is None
        assert cents_field_to_dollars(True) is True


class TestProcessingFee:
    @pytest.mark.parametrize(
        "amount_cents, expected",
        [
            (0, 30),
            (10, 30),
            (1000, 59),
            (2000, 88),
            (10000, 320),
        ],
    )
    def test_fee(self, amount_cents, expected):
        assert calculate_processing_fee(amount_cents) == expected

    def test_fixed_fee_is_unconditional(self):
        assert calculate_processing_fee(0) >= 30

    def test_half_cent_rounds_up(self):
        # 500 * 0.029 + 30 = 44.5
        assert calculate_processing_fee(500) == 45


class TestFormatting:
    def test_round_cents(self):
        assert round_cents(Decimal("1043.5")) == 1044
        assert round_cents(Decimal("1043.49")) == 1043

    def test_format_price(self):
        assert format_price(1044) == "$10.44"
        assert format_price(0) == "$0.00"
        assert format_price(100000) == "$1000.00"
