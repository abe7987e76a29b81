"""
Price Modifiers

A modifier is a short expression that turns a current price into a new one:

    "12.50"   set the price to 12.50 ("=12.50" is the same)
    "+2"      add 2
    "10%"     add 10% of the current price ("=10%" sets it to 10% of it)
    "-10%"    subtract 10% of the current price
    "*1.5"    multiply by 1.5
    "/2"      divide by 2

A trailing % makes the amount a percentage of the current price.
Results never go below zero.
"""
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from custom_shipping.core.exceptions import MalformedModifierError

_MODIFIER_RE = re.compile(r"([+\-=*/])?(\d+(?:\.\d+)?)(%)?", re.ASCII)

ModifierInput = Union[str, int, float, Decimal]


@dataclass(frozen=True)
class PriceModifier:
    operator: Optional[str]
    magnitude: Decimal
    is_percent: bool = False

    def operand(self, price: Decimal) -> Decimal:
        if self.is_percent:
            return price * (self.magnitude / 100)
        return self.magnitude

    def apply(self, price: Union[Decimal, int, float, str]) -> Decimal:
        """Apply to `price`, flooring the result at zero."""
        price = _to_decimal(price)
        operand = self.operand(price)

        if self.operator == "+":
            result = price + operand
        elif self.operator == "-":
            result = price - operand
        elif self.operator == "*":
            result = price * operand
        elif self.operator == "/":
            # Only a percentage of a zero price gets here; a free rate stays free
            result = price / operand if operand else price
        else:
            result = operand

        return max(result, Decimal("0"))

    def __str__(self) -> str:
        return f"{self.operator or '='}{self.magnitude}{'%' if self.is_percent else ''}"


def _to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their shortest repr (0.1 -> Decimal("0.1"))
    return Decimal(str(value))


def parse_modifier(expression: ModifierInput) -> PriceModifier:
    """
    Parse a modifier expression.

    Numbers are rendered as plain decimal text first, so -5 means "subtract 5".

    Raises:
        MalformedModifierError: if no numeric amount can be found
    """
    if isinstance(expression, (int, float, Decimal)) and not isinstance(expression, bool):
        # Positional notation, so 1e-05 is read as 0.00001 rather than 1
        text = f"{_to_decimal(expression):f}"
    else:
        text = str(expression)
    match = _MODIFIER_RE.search(text)
    if not match:
        raise MalformedModifierError(f"No amount found in price modifier {text!r}", modifier=text)

    operator, amount, percent = match.groups()
    magnitude = Decimal(amount)

    # A bare percentage is a markup: "10%" adds 10%, "=10%" sets 10% of the price
    if operator is None and percent:
        operator = "+"

    if operator == "/" and magnitude == 0:
        raise MalformedModifierError("Cannot divide a price by zero", modifier=text)

    return PriceModifier(
        operator=None if operator == "=" else operator,
        magnitude=magnitude,
        is_percent=bool(percent),
    )


def modify_price(price: Union[Decimal, int, float, str], modifier: ModifierInput) -> Decimal:
    """Parse `modifier` and apply it to `price`."""
    return parse_modifier(modifier).apply(price)
