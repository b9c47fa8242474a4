"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation_defaults_to_store_currency(self):
        m = Money(Decimal("120000"))
        assert m.amount == Decimal("120000")
        assert m.currency == "VND"

    def test_of_factory_from_string(self):
        m = Money.of("25.99", "USD")
        assert m.amount == Decimal("25.99")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.5)  # type: ignore[arg-type]

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_addition(self):
        assert Money.of("100") + Money.of("20") == Money.of("120")

    def test_multiplication_by_int(self):
        assert Money.of("7.50", "USD") * 3 == Money.of("22.50", "USD")

    def test_multiplication_by_float_or_bool_rejected(self):
        with pytest.raises(TypeError):
            Money.of("1") * 1.5  # type: ignore[operator]
        with pytest.raises(TypeError):
            Money.of("1") * True

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money.of("10", "USD") + Money.of("5", "EUR")

    def test_str_zero_decimal_currency(self):
        assert str(Money.of("120000")) == "120,000 VND"

    def test_str_two_decimal_currency(self):
        assert str(Money.of("1234.5", "USD")) == "1,234.50 USD"

    def test_ordering_within_one_currency(self):
        prices = [Money.of("450000"), Money.of("90000"), Money.of("1300000")]
        assert max(prices) == Money.of("1300000")
        assert sorted(prices)[0] == Money.of("90000")
        assert Money.of("10") <= Money.of("10")

    def test_ordering_across_currencies_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money.of("1", "USD") < Money.of("1", "EUR")

    def test_negative_zero_is_allowed(self):
        assert Money(Decimal("-0")).to_minor_units() == 0

    def test_zero(self):
        assert Money.zero("USD") == Money(Decimal("0"), "USD")


class TestMinorUnits:

    def test_zero_decimal_currency_is_not_scaled(self):
        assert Money.of("120000", "VND").to_minor_units() == 120000

    def test_two_decimal_currency_is_scaled_by_100(self):
        assert Money.of("12.34", "USD").to_minor_units() == 1234

    def test_rounds_half_up(self):
        assert Money.of("0.005", "USD").to_minor_units() == 1

    def test_currency_code_is_case_insensitive(self):
        assert Money.of("500", "jpy").to_minor_units() == 500

    def test_custom_zero_decimal_set(self):
        # Treat VND as a two-decimal currency when configured that way
        assert Money.of("10", "VND").to_minor_units(frozenset()) == 1000


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid(self):
        assert Quantity(3).value == 3

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(-2)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)

    def test_str(self):
        assert str(Quantity(4)) == "4"
