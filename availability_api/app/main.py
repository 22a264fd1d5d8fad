"""
Main entrypoint for the Availability API.

This module assembles the FastAPI application, sets up logging and
includes the versioned router.  ``create_app`` builds and configures
the app; an instance is created at import time as ``app`` so it can
be served directly, e.g.::

    uvicorn availability_api.app.main:app --port 8080

A store or validator other than the in‑memory defaults can be passed
to ``create_app``, which is how tests substitute their own.
"""

import logging
from typing import Optional

from fastapi import FastAPI

from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .core.middleware import RequestLoggingMiddleware
from .api.v1.router import router as v1_router
from .services.availability_service import AvailabilityService
from .services.slot_store import InMemorySlotStore, SlotStore
from .services.validator import JSONValidator, TimeSlotValidator


def create_app(
    store: Optional[SlotStore] = None,
    validator: Optional[TimeSlotValidator] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[SlotStore]
        Slot store to use.  Defaults to an empty ``InMemorySlotStore``.
    validator : Optional[TimeSlotValidator]
        Validator to use.  Defaults to ``JSONValidator``.
    settings : Optional[Settings]
        Settings to use instead of the module‑level instance.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)
    logger = logging.getLogger(__name__)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.add_middleware(RequestLoggingMiddleware)

    store = store if store is not None else InMemorySlotStore()
    app.state.availability_service = AvailabilityService(
        store=store,
        validator=validator or JSONValidator(),
        sla=settings.store_sla_seconds,
    )

    app.include_router(v1_router)

    @app.on_event("startup")
    async def startup_event() -> None:
        service: AvailabilityService = app.state.availability_service
        info = service.describe()
        if isinstance(service.store, InMemorySlotStore):
            info["preloaded_slots"] = len(service.store)
        logger.info("Availability service ready: %s", info)

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        logger.info("server exiting")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
