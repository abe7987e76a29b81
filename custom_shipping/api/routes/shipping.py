"""
Custom Shipping Webhook Route

The platform posts the cart here when it calculates shipping and expects
either a list of rates or an error message back.
"""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from custom_shipping.core.config import settings
from custom_shipping.core.exceptions import ShippingResponseError
from custom_shipping.modules.shipping.rate_set import RateSet
from custom_shipping.schemas.shipping import RateRule
from custom_shipping.services.rate_rules import apply_rules, load_rules

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shipping", tags=["Shipping"])


def get_rate_rules() -> List[RateRule]:
    """Rules applied to every cart (from settings)."""
    return load_rules(settings.SHIPPING_RATE_RULES)


@router.post("/rates")
async def calculate_shipping_rates(
    request: Request,
    rules: List[RateRule] = Depends(get_rate_rules),
) -> Dict[str, Any]:
    """
    Handle a calculated-shipping callback.

    Always answers 200 with the platform envelope once the payload parses;
    failures while applying rules are returned as {"ok": false, "details": ...}.
    """
    try:
        cart_details = await request.json()
    except ValueError as e:
        logger.error(f"Failed to parse shipping callback payload: {e}")
        raise HTTPException(status_code=400, detail="Invalid JSON")

    try:
        rate_set = RateSet.from_cart(cart_details)
    except ValidationError as e:
        logger.error(f"Shipping callback payload is not a cart: {e.error_count()} error(s)")
        raise HTTPException(status_code=400, detail="Invalid cart payload")

    if rate_set is None:
        raise HTTPException(status_code=400, detail="Cart payload is required")

    try:
        apply_rules(rate_set, rules)
    except ShippingResponseError as e:
        logger.warning(f"Rate rules failed: {e.to_dict()}")
        rate_set.error(settings.SHIPPING_RULES_ERROR_MESSAGE)

    return rate_set.output(as_string=False)
