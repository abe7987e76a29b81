"""
Tests for price modifier parsing and application.
"""
from decimal import Decimal

import pytest

from custom_shipping.core.exceptions import MalformedModifierError
from custom_shipping.modules.shipping.modifiers import PriceModifier, modify_price, parse_modifier


class TestModifyPrice:
    """Test modify_price with each operator."""

    @pytest.mark.parametrize(
        "price, modifier, expected",
        [
            (100, "10%", Decimal("110")),
            (100, "-10%", Decimal("90")),
            (100, "+10%", Decimal("110")),
            (100, "*1.5", Decimal("150")),
            (100, "/4", Decimal("25")),
            (100, "50", Decimal("50")),
            (100, "=7.25", Decimal("7.25")),
            (200, "=10%", Decimal("20")),
            (10, "+2.5", Decimal("12.5")),
            (10, "*50%", Decimal("50")),
        ],
    )
    def test_operators(self, price, modifier, expected):
        assert modify_price(price, modifier) == expected

    def test_negative_result_floors_at_zero(self):
        """Test subtracting more than the price gives zero, not a negative price."""
        assert modify_price(10, "-20") == Decimal("0")
        assert modify_price(10, "-150%") == Decimal("0")

    @pytest.mark.parametrize(
        "price, modifier, expected",
        [
            (100, 15, Decimal("15")),
            (100, 2.5, Decimal("2.5")),
            (100, 0.00001, Decimal("0.00001")),
            (5, Decimal("1E+2"), Decimal("100")),
            (5, 1e16, Decimal("10000000000000000")),
        ],
    )
    def test_numeric_modifier_sets_price(self, price, modifier, expected):
        """Test numbers Python prints in exponent form keep their value."""
        assert modify_price(price, modifier) == expected

    def test_negative_numeric_modifier_subtracts(self):
        assert modify_price(100, -5) == Decimal("95")

    def test_float_price_keeps_short_repr(self):
        """Test floats are converted via their text form."""
        assert modify_price(0.1, "+0.2") == Decimal("0.3")

    def test_returns_decimal(self):
        assert isinstance(modify_price("12.50", "+1"), Decimal)


class TestParseModifier:
    """Test parse_modifier."""

    def test_parse_percentage_delta(self):
        assert parse_modifier("-10%") == PriceModifier(operator="-", magnitude=Decimal("10"), is_percent=True)

    def test_bare_percentage_is_markup(self):
        modifier = parse_modifier("10%")
        assert modifier.operator == "+"
        assert modifier.is_percent is True

    def test_equals_means_absolute(self):
        modifier = parse_modifier("=5")
        assert modifier.operator is None
        assert modifier.magnitude == Decimal("5")

    def test_str_round_trips(self):
        for expression in ["-10%", "+2.5", "*3", "/2", "=7", "=10%"]:
            assert str(parse_modifier(expression)) == expression

    @pytest.mark.parametrize("expression", ["", "abc", "%", "+", "-%", "free shipping"])
    def test_missing_amount_raises(self, expression):
        with pytest.raises(MalformedModifierError) as exc_info:
            parse_modifier(expression)

        assert exc_info.value.code == "MODIFIER_MALFORMED"
        assert exc_info.value.details["modifier"] == expression

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            parse_modifier("nothing")

    def test_divide_by_zero_raises(self):
        with pytest.raises(MalformedModifierError):
            parse_modifier("/0")

    def test_divide_percent_leaves_free_rate_at_zero(self):
        """Test /50% on a zero price keeps the price at zero."""
        assert parse_modifier("/50%").apply(0) == Decimal("0")
