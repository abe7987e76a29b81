"""
Rate Selectors

A selector names the rates an operation applies to. Three variants exist:
- ServiceIdSelector: the first rate with that service id
- ServiceIdListSelector: every rate whose service id is in the list,
  grouped by list order
- TextSelector: "all", or an optional carrier name followed by optional
  free text, both matched as case-insensitive substrings of
  "<method> <service_name>"

Raw values (int, str, list) are turned into a variant once by as_selector();
resolve() then maps a variant onto indices of a rate sequence without
modifying it.
"""
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from custom_shipping.core.config import settings
from custom_shipping.core.exceptions import InvalidSelectorError
from custom_shipping.schemas.shipping import Rate

# Free text runs up to the first character that is neither a word char nor whitespace
_FREE_TEXT_RE = re.compile(r"[\w\s]+")


@dataclass(frozen=True)
class ServiceIdSelector:
    service_id: int


@dataclass(frozen=True)
class ServiceIdListSelector:
    service_ids: Tuple[int, ...]


@dataclass(frozen=True)
class TextSelector:
    text: str

    @property
    def is_all(self) -> bool:
        return self.text.strip().lower() == "all"


Selector = Union[ServiceIdSelector, ServiceIdListSelector, TextSelector]
SelectorInput = Union[Selector, int, float, str, Sequence[int]]


def as_selector(value: SelectorInput) -> Selector:
    """
    Convert a raw selector value into a selector variant.

    Raises:
        InvalidSelectorError: for booleans, None and other unsupported types
    """
    if isinstance(value, (ServiceIdSelector, ServiceIdListSelector, TextSelector)):
        return value
    if isinstance(value, bool) or value is None:
        raise InvalidSelectorError(value)
    if isinstance(value, (int, float)):
        return ServiceIdSelector(service_id=value)
    if isinstance(value, str):
        return TextSelector(text=value)
    if isinstance(value, (list, tuple)):
        return ServiceIdListSelector(service_ids=tuple(value))
    raise InvalidSelectorError(value)


def split_text_selector(
    text: str,
    known_carriers: Optional[Iterable[str]] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a text selector into (carrier, free_text).

    The carrier is tried first: a known carrier name at the start of the
    text, ending at a word boundary (longest name wins, so "usps" beats
    "ups"). Whatever follows is the free text. Either part may be None.

    >>> split_text_selector("UPS Ground")
    ('ups', 'Ground')
    >>> split_text_selector("priority mail")
    (None, 'priority mail')
    """
    carriers = known_carriers if known_carriers is not None else settings.SHIPPING_KNOWN_CARRIERS
    remainder = text.strip()

    carrier = None
    for name in sorted({c.lower() for c in carriers if c}, key=len, reverse=True):
        if re.match(rf"{re.escape(name)}\b", remainder, re.IGNORECASE):
            carrier = name
            remainder = remainder[len(name):]
            break

    match = _FREE_TEXT_RE.match(remainder.lstrip())
    free_text = match.group(0).strip() if match else ""

    return carrier, free_text or None


def _resolve_text(
    rates: Sequence[Rate],
    selector: TextSelector,
    known_carriers: Optional[Iterable[str]],
) -> List[int]:
    if selector.is_all:
        return list(range(len(rates)))

    carrier, free_text = split_text_selector(selector.text, known_carriers)
    if carrier is None and free_text is None:
        return []

    indices = []
    for index, rate in enumerate(rates):
        label = rate.label.lower()
        if carrier and carrier not in label:
            continue
        if free_text and free_text.lower() not in label:
            continue
        indices.append(index)
    return indices


def resolve(
    rates: Sequence[Rate],
    selector: SelectorInput,
    known_carriers: Optional[Iterable[str]] = None,
) -> List[int]:
    """
    Return the indices of `rates` matched by `selector`.

    Args:
        rates: Current rate sequence (not modified)
        selector: A selector variant or a raw int / str / list of ints
        known_carriers: Carrier names for text selectors
            (defaults to settings.SHIPPING_KNOWN_CARRIERS)

    Returns:
        Matching indices; empty when nothing matches
    """
    selector = as_selector(selector)

    if isinstance(selector, ServiceIdSelector):
        for index, rate in enumerate(rates):
            if rate.service_id == selector.service_id:
                return [index]
        return []

    if isinstance(selector, ServiceIdListSelector):
        return [
            index
            for service_id in selector.service_ids
            for index, rate in enumerate(rates)
            if rate.service_id == service_id
        ]

    return _resolve_text(rates, selector, known_carriers)
