"""
Rate Set

Holds the shipping quotes for one cart during a calculated-shipping callback.
Rates can be added, re-priced, renamed, hidden and shown again; output()
produces the response body for the platform.

A RateSet is built per request and never shared.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from custom_shipping.core.config import settings
from custom_shipping.core.exceptions import CartPayloadError
from custom_shipping.modules.shipping.modifiers import ModifierInput, parse_modifier
from custom_shipping.modules.shipping.selectors import SelectorInput, resolve
from custom_shipping.schemas.shipping import (
    CartContext,
    CartPayload,
    Rate,
    ShippingErrorResponse,
    ShippingResults,
    ShippingSuccessResponse,
)

logger = logging.getLogger(__name__)


class RateSet:
    """
    Ordered collection of rates plus an optional error message.

    While an error message is set, output() reports the error and none of
    the rates. reset() returns to an empty, error-free set.
    """

    def __init__(
        self,
        cart_context: Optional[CartContext] = None,
        rates: Optional[Iterable[Union[Rate, Dict[str, Any]]]] = None,
        known_carriers: Optional[Iterable[str]] = None,
    ):
        self.cart_context = cart_context or CartContext()
        self._rates: List[Rate] = [
            r.model_copy() if isinstance(r, Rate) else Rate.model_validate(r)
            for r in (rates or [])
        ]
        self.error_message: Optional[str] = None
        self.known_carriers = list(known_carriers) if known_carriers is not None else None

    @classmethod
    def from_cart(
        cls,
        cart_details: Optional[Union[CartPayload, Dict[str, Any]]],
        known_carriers: Optional[Iterable[str]] = None,
    ) -> Optional["RateSet"]:
        """
        Build a rate set from the platform's cart payload.

        Seeds the set with any rates already in `fx:shipping_results`.
        Returns None (and logs) when no payload is given.
        """
        if cart_details is None:
            logger.error("The cart payload is required to build a RateSet")
            return None

        payload = (
            cart_details if isinstance(cart_details, CartPayload)
            else CartPayload.model_validate(cart_details)
        )
        return cls(
            cart_context=payload.embedded.shipment,
            rates=payload.embedded.shipping_results,
            known_carriers=known_carriers,
        )

    @property
    def rates(self) -> Tuple[Rate, ...]:
        return tuple(self._rates)

    @property
    def has_error(self) -> bool:
        return self.error_message is not None

    def _select(self, selector: SelectorInput) -> List[int]:
        return resolve(self._rates, selector, self.known_carriers)

    # ==================== Mutators ====================

    def add(
        self,
        service_id: int,
        price: Union[Decimal, int, float, str],
        method: str,
        service_name: str,
        add_flat_rate: bool = True,
        add_handling: bool = True,
    ) -> None:
        """
        Add a custom rate.

        Service ids below the custom offset (10000) are shifted above it.
        The cart's handling fee and flat-rate shipping are added to the price
        unless disabled.

        Raises:
            CartPayloadError: if a requested fee is missing from the cart
        """
        offset = settings.SHIPPING_CUSTOM_SERVICE_ID_OFFSET
        if service_id < offset:
            service_id += offset

        price = price if isinstance(price, Decimal) else Decimal(str(price))
        if add_handling:
            price += self._fee("total_handling_fee")
        if add_flat_rate:
            price += self._fee("total_flat_rate_shipping")

        self._rates.append(Rate(
            service_id=service_id,
            method=method,
            service_name=service_name,
            price=price,
        ))
        logger.debug(f"Added rate {service_id} ({method} {service_name}) at {price}")

    def _fee(self, name: str) -> Decimal:
        fee = getattr(self.cart_context, name)
        if fee is None:
            raise CartPayloadError(f"Cart shipment has no {name}", field=name)
        return fee

    def hide(self, selector: SelectorInput) -> None:
        """Hide matching rates. Hidden rates stay selectable and can be shown again."""
        self._set_hidden(selector, True)

    def show(self, selector: SelectorInput) -> None:
        """Show matching rates that were hidden."""
        self._set_hidden(selector, False)

    def remove(self, selector: SelectorInput) -> None:
        """Alias for hide()."""
        self.hide(selector)

    def _set_hidden(self, selector: SelectorInput, hidden: bool) -> None:
        indices = self._select(selector)
        for index in indices:
            self._rates[index].hidden = hidden
        logger.debug(f"{'Hid' if hidden else 'Showed'} {len(indices)} rate(s) for {selector!r}")

    def update(
        self,
        selector: SelectorInput,
        modifier: Optional[ModifierInput] = None,
        method: Optional[str] = None,
        service_name: Optional[str] = None,
    ) -> None:
        """
        Update the price, method and/or service name of matching rates.

        Args:
            selector: Which rates to update
            modifier: Price modifier expression; None or "" leaves prices alone
            method: New method (any string, including "", overwrites)
            service_name: New service name (any string, including "", overwrites)

        Raises:
            MalformedModifierError: if the modifier cannot be parsed or applied.
                No rate is changed in that case.
        """
        indices = self._select(selector)
        if not indices:
            return

        # Prices are computed before anything is assigned so a failure leaves the set untouched.
        # An index listed twice is modified twice.
        new_prices: Dict[int, Decimal] = {}
        if _is_modifier(modifier):
            price_modifier = parse_modifier(modifier)
            for index in indices:
                new_prices[index] = price_modifier.apply(new_prices.get(index, self._rates[index].price))

        for index in indices:
            rate = self._rates[index]
            if index in new_prices:
                rate.price = new_prices[index]
            if isinstance(method, str):
                rate.method = method
            if isinstance(service_name, str):
                rate.service_name = service_name

        logger.debug(f"Updated {len(indices)} rate(s) for {selector!r}")

    def reset(self) -> None:
        """Drop all rates and any error message."""
        self._rates = []
        self.error_message = None

    def error(self, message: str) -> None:
        """Report `message` to the platform instead of rates. Rates are kept."""
        self.error_message = message

    # ==================== Output ====================

    def to_response(self) -> Union[ShippingSuccessResponse, ShippingErrorResponse]:
        if self.error_message is not None:
            return ShippingErrorResponse(details=self.error_message)
        visible = [rate for rate in self._rates if not rate.hidden]
        return ShippingSuccessResponse(data=ShippingResults(shipping_results=visible))

    def output(self, as_string: bool = True) -> Union[str, Dict[str, Any]]:
        """
        Build the callback response.

        Returns:
            {"ok": false, "details": ...} when an error is set, otherwise
            {"ok": true, "data": {"shipping_results": [...]}} with hidden
            rates left out. A JSON string unless `as_string` is False.
        """
        response = self.to_response()
        if as_string:
            return response.model_dump_json()
        return response.model_dump()

    def __repr__(self) -> str:
        return f"RateSet(rates={len(self._rates)}, error={self.error_message!r})"


def _is_modifier(modifier: Any) -> bool:
    if isinstance(modifier, bool):
        return False
    if isinstance(modifier, (int, float, Decimal)):
        return True
    return isinstance(modifier, str) and modifier != ""
