"""
Shipping Schemas for the custom shipping endpoint

Pydantic models for the inbound cart payload, the rate records it embeds,
the callback response envelopes and the declarative rate rules.
"""
from decimal import Decimal
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_serializer, model_validator


def _float_to_text(v):
    """Floats become Decimals through their repr (9.1 -> Decimal("9.1"))."""
    if isinstance(v, float):
        return repr(v)
    return v


Money = Annotated[Decimal, BeforeValidator(_float_to_text)]


# ==================== Rate Schemas ====================


class Rate(BaseModel):
    """
    A single shipping quote.

    Unknown fields sent by the platform are kept and echoed back.
    `hidden` is internal state and never serialized.
    """
    model_config = ConfigDict(extra="allow")

    service_id: int
    method: str = ""
    service_name: str = ""
    price: Money = Decimal("0")
    hidden: bool = Field(False, exclude=True)

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)

    @property
    def label(self) -> str:
        """Searchable label used by text selectors."""
        return f"{self.method} {self.service_name}"


# ==================== Cart Payload Schemas ====================


class CartContext(BaseModel):
    """Fees from the cart shipment that `add` can fold into a price."""
    total_flat_rate_shipping: Optional[Money] = None
    total_handling_fee: Optional[Money] = None


class CartEmbedded(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    shipping_results: List[Rate] = Field(default_factory=list, alias="fx:shipping_results")
    shipment: CartContext = Field(default_factory=CartContext, alias="fx:shipment")


class CartPayload(BaseModel):
    """Calculated-shipping callback payload (only the parts used here)."""
    model_config = ConfigDict(populate_by_name=True)

    embedded: CartEmbedded = Field(default_factory=CartEmbedded, alias="_embedded")


# ==================== Response Schemas ====================


class ShippingResults(BaseModel):
    shipping_results: List[Rate] = []


class ShippingSuccessResponse(BaseModel):
    """Rates returned to the platform."""
    ok: Literal[True] = True
    data: ShippingResults


class ShippingErrorResponse(BaseModel):
    """Error message shown to the customer instead of rates."""
    ok: Literal[False] = False
    details: str


# ==================== Rule Schemas ====================


RuleAction = Literal["add", "update", "hide", "show", "remove", "error", "reset"]

# Fields each action cannot do without
_REQUIRED_RULE_FIELDS: Dict[str, List[str]] = {
    "add": ["service_id", "price", "method", "service_name"],
    "update": ["selector"],
    "hide": ["selector"],
    "show": ["selector"],
    "remove": ["selector"],
    "error": ["message"],
    "reset": [],
}


class RateRule(BaseModel):
    """
    One declarative operation on a rate set.

    Example:
        {"action": "update", "selector": "ups ground", "modifier": "-10%"}
    """
    action: RuleAction
    selector: Optional[Union[int, str, List[int]]] = None
    modifier: Optional[Union[int, float, str]] = None
    method: Optional[str] = None
    service_name: Optional[str] = None
    service_id: Optional[int] = None
    price: Optional[Money] = None
    add_flat_rate: bool = True
    add_handling: bool = True
    message: Optional[str] = None

    @model_validator(mode="after")
    def check_required_fields(self):
        missing = [
            name for name in _REQUIRED_RULE_FIELDS[self.action]
            if getattr(self, name) is None
        ]
        if missing:
            raise ValueError(f"'{self.action}' rule requires: {', '.join(missing)}")
        return self
