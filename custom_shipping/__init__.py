"""
Custom Shipping Endpoint

Builds the response to a calculated-shipping callback: start from the cart's
rates, add or adjust quotes, hide the ones that should not be offered and
return the survivors (or an error message) to the platform.
"""
from custom_shipping.modules.shipping import RateSet, modify_price, resolve

__version__ = "1.1.0"

__all__ = ["RateSet", "modify_price", "resolve", "__version__"]
