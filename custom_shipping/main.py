"""
Custom Shipping Endpoint
FastAPI application entry point

Serves the calculated-shipping callback for the store's cart.
"""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from custom_shipping import __version__
from custom_shipping.api.routes import shipping
from custom_shipping.core.config import settings
from custom_shipping.core.exceptions import ShippingResponseError
from custom_shipping.schemas.shipping import ShippingErrorResponse

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def shipping_error_handler(request: Request, exc: ShippingResponseError) -> JSONResponse:
    """
    Report configuration errors raised outside a route (e.g. while loading
    rate rules) in the platform's error envelope.
    """
    logger.error(f"Shipping callback failed: {exc.to_dict()}")
    body = ShippingErrorResponse(details=settings.SHIPPING_RULES_ERROR_MESSAGE)
    return JSONResponse(status_code=200, content=body.model_dump())


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Calculated-shipping callback: adjusts the cart's shipping rates.",
        version=__version__,
        openapi_tags=[
            {"name": "Health", "description": "Health check endpoint"},
            {"name": "Shipping", "description": "Calculated-shipping callback"},
        ],
    )
    app.add_exception_handler(ShippingResponseError, shipping_error_handler)
    app.include_router(shipping.router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()


def serve() -> None:
    """Run the endpoint with uvicorn on HOST:PORT from settings."""
    import uvicorn

    logger.info(f"Starting {settings.APP_NAME} on {settings.HOST}:{settings.PORT}")
    uvicorn.run("custom_shipping.main:app", host=settings.HOST, port=settings.PORT)
