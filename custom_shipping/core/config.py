"""
Application configuration

Settings are read from the environment (and an optional .env file).
List-valued settings accept either a JSON array or a comma-separated string.
"""
import json
import logging
from typing import Any, Dict, List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Carrier names recognised as the leading token of a text selector
DEFAULT_KNOWN_CARRIERS = ["fedex", "usps", "ups", "dhl"]


def _parse_list(v: Any) -> Any:
    """Accept a JSON array or a comma-separated string."""
    if isinstance(v, str):
        if v.strip().startswith("["):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    APP_NAME: str = "Custom Shipping Endpoint"
    ENVIRONMENT: str = "production"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server (custom-shipping console script)
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Rate selection
    # Using Union with str to stop pydantic-settings from forcing JSON decoding
    SHIPPING_KNOWN_CARRIERS: Union[str, List[str]] = DEFAULT_KNOWN_CARRIERS

    @field_validator("SHIPPING_KNOWN_CARRIERS", mode="before")
    @classmethod
    def parse_known_carriers(cls, v):
        if isinstance(v, str) and not v.strip():
            return DEFAULT_KNOWN_CARRIERS
        parsed = _parse_list(v)
        if isinstance(parsed, list):
            return [str(name).strip().lower() for name in parsed if str(name).strip()]
        return parsed

    # Custom rates are numbered above the native carrier codes
    SHIPPING_CUSTOM_SERVICE_ID_OFFSET: int = 10000

    # Rules applied by the webhook to every inbound cart (JSON array of rule objects)
    SHIPPING_RATE_RULES: Union[str, List[Dict[str, Any]]] = []

    @field_validator("SHIPPING_RATE_RULES", mode="before")
    @classmethod
    def parse_rate_rules(cls, v):
        if isinstance(v, str):
            if not v.strip():
                return []
            try:
                return json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError(f"SHIPPING_RATE_RULES must be a JSON array: {e}")
        return v

    # Message returned to the platform when the rules cannot be applied
    SHIPPING_RULES_ERROR_MESSAGE: str = "Shipping rates are temporarily unavailable."

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return level


settings = Settings()
