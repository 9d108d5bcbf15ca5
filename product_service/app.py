"""
FastAPI application entry point for the product service.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from product_service.config import Settings, get_settings
from product_service.dependencies import Backends, build_backends
from product_service.errors import ProductServiceError
from product_service.events import log_received_event
from product_service.orchestrator import ProductOrchestrator
from product_service.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the event subscriber for the app's lifetime, then release stores."""
    backends: Backends = app.state.backends
    subscription = backends.notifier.subscribe(
        app.state.settings.event_topic, log_received_event
    )
    try:
        yield
    finally:
        subscription.stop()
        backends.close()


async def handle_service_error(request: Request, exc: ProductServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.as_dict())


async def handle_request_validation(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "type": "request-binding",
            "message": "Invalid request body",
            "error": str(exc.errors()),
        },
    )


def create_app(
    settings: Optional[Settings] = None, backends: Optional[Backends] = None
) -> FastAPI:
    settings = settings or get_settings()
    backends = backends or build_backends(settings)

    app = FastAPI(title="Product Service", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.backends = backends
    app.state.orchestrator = ProductOrchestrator(
        storage=backends.storage,
        db=backends.db,
        cache=backends.cache,
        notifier=backends.notifier,
        event_topic=settings.event_topic,
    )
    app.add_exception_handler(ProductServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)

    @app.get("/")
    def read_root():
        return {"message": "Hello World"}

    app.include_router(router, prefix=settings.api_prefix)
    return app
