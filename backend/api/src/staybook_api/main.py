"""FastAPI application for the Staybook booking API.

Endpoints:
- GET /health
- GET /availability
- POST /quote
- POST /checkout
- POST /webhooks/stripe
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from staybook import __version__
from staybook.config import get_settings
from staybook.services.database import get_database_service
from staybook.utils.logging import configure_logging, get_logger
from staybook_api.exceptions import register_exception_handlers
from staybook_api.middleware.correlation import CORRELATION_ID_HEADER, CorrelationIdMiddleware
from staybook_api.routes import (
    availability_router,
    checkout_router,
    health_router,
    quote_router,
    webhooks_router,
)

settings = get_settings()
configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    get_database_service().create_schema()
    logger.info("Staybook API %s started (environment: %s)", __version__, settings.environment)
    yield


app = FastAPI(
    title="Staybook API",
    description="Availability, pricing and checkout for short-term rental properties",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[CORRELATION_ID_HEADER],
)
app.add_middleware(CorrelationIdMiddleware)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.include_router(health_router)
app.include_router(availability_router)
app.include_router(quote_router)
app.include_router(checkout_router)
app.include_router(webhooks_router)


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="auto")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = False) -> None:
    """Run the FastAPI server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 8080)
        reload: Enable hot reload for development (default: False)
    """
    import uvicorn

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run(
            "staybook_api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["backend/api/src", "backend/shared/src"],
        )
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
