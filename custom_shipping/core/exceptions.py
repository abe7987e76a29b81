"""
Custom Shipping Exception Hierarchy

All exceptions carry a code, message and details so callers can log them
or turn them into a platform error response.

Exception Hierarchy:
    ShippingResponseError
    ├── CartPayloadError
    ├── InvalidSelectorError
    ├── MalformedModifierError
    └── RateRuleError
"""
from typing import Optional, Dict, Any


class ShippingResponseError(Exception):
    """
    Base exception for all custom shipping errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging
    """

    default_code: str = "SHIPPING_RESPONSE_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CartPayloadError(ShippingResponseError):
    """The cart payload is missing data an operation needs."""
    default_code = "CART_PAYLOAD_INVALID"

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["field"] = field
        super().__init__(message, details=details, **kwargs)


class InvalidSelectorError(ShippingResponseError, TypeError):
    """A selector of an unsupported type was given."""
    default_code = "SELECTOR_INVALID"

    def __init__(self, selector: Any, **kwargs):
        details = kwargs.pop("details", {})
        details["selector_type"] = type(selector).__name__
        super().__init__(
            f"Unsupported selector {selector!r}: expected a service id, text or list of service ids",
            details=details,
            **kwargs,
        )


class MalformedModifierError(ShippingResponseError, ValueError):
    """A price modifier expression could not be parsed or applied."""
    default_code = "MODIFIER_MALFORMED"

    def __init__(self, message: str, modifier: Any = None, **kwargs):
        details = kwargs.pop("details", {})
        details["modifier"] = None if modifier is None else str(modifier)
        super().__init__(message, details=details, **kwargs)


class RateRuleError(ShippingResponseError):
    """A declarative rate rule could not be applied."""
    default_code = "RATE_RULE_FAILED"

    def __init__(self, message: str, rule_index: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["rule_index"] = rule_index
        super().__init__(message, details=details, **kwargs)
