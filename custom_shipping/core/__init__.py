from custom_shipping.core.config import settings
from custom_shipping.core.exceptions import (
    ShippingResponseError,
    CartPayloadError,
    InvalidSelectorError,
    MalformedModifierError,
    RateRuleError,
)
