"""
Shipping Module

- RateSet: the rates for one calculated-shipping callback
- Selectors: resolve a service id, text or list of ids to rate indices
- Modifiers: parse and apply price modifier expressions
"""
from custom_shipping.modules.shipping.modifiers import PriceModifier, modify_price, parse_modifier
from custom_shipping.modules.shipping.rate_set import RateSet
from custom_shipping.modules.shipping.selectors import (
    ServiceIdListSelector,
    ServiceIdSelector,
    TextSelector,
    as_selector,
    resolve,
    split_text_selector,
)

__all__ = [
    "RateSet",
    "PriceModifier",
    "modify_price",
    "parse_modifier",
    "ServiceIdSelector",
    "ServiceIdListSelector",
    "TextSelector",
    "as_selector",
    "resolve",
    "split_text_selector",
]
