"""
Pytest configuration and fixtures for the custom shipping endpoint tests.
"""
import os
import pytest

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ.pop("SHIPPING_RATE_RULES", None)
os.environ.pop("SHIPPING_KNOWN_CARRIERS", None)
os.environ.pop("HOST", None)
os.environ.pop("PORT", None)


@pytest.fixture
def cart_payload() -> dict:
    """
    Cart payload as posted by the platform.

    Labels of the embedded rates, in order:
    "UPS Ground", "UPS 2Day", "FedEx Ground", "USPS Priority Mail"
    """
    return {
        "_embedded": {
            "fx:shipment": {
                "total_flat_rate_shipping": 2.00,
                "total_handling_fee": 1.50,
                "total_weight": 3,
            },
            "fx:shipping_results": [
                {"service_id": 3, "method": "UPS", "service_name": "Ground", "price": 12.5},
                {"service_id": 2, "method": "UPS", "service_name": "2Day", "price": 25},
                {"service_id": 92, "method": "FedEx", "service_name": "Ground", "price": 11.75},
                {"service_id": 1, "method": "USPS", "service_name": "Priority Mail", "price": 9.1},
            ],
        }
    }


@pytest.fixture
def rate_set(cart_payload):
    """RateSet seeded from the sample cart."""
    from custom_shipping.modules.shipping.rate_set import RateSet

    return RateSet.from_cart(cart_payload)

