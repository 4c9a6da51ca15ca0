"""
Main entrypoint for the List Manager API.

This module assembles the FastAPI application: it sets up logging,
builds the localizer, the list store and the list service, registers
error handlers and includes versioned routers.  ``create_app`` accepts
an alternative store or localizer, which is how tests inject a
temporary database.  The module-level ``app`` can be served directly::

    uvicorn list_manager_api.app.main:app --reload
"""

from typing import Optional

from fastapi import FastAPI

from .core.config import settings
from .core.errors import register_exception_handlers
from .core.i18n import Localizer
from .core.logging_config import setup_logging
from .api.v1.router import router as v1_router
from .services.list_service import ListService
from .services.list_store import ListStore, SQLiteListStore


def create_app(
    store: Optional[ListStore] = None,
    i18n: Optional[Localizer] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[ListStore]
        Persistence backend for lists.  Defaults to a ``SQLiteListStore``
        on ``settings.database_url``.
    i18n : Optional[Localizer]
        Message localizer.  Defaults to the ``settings.language`` pack.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file)

    i18n = i18n or Localizer(settings.language)
    if store is None:
        store = SQLiteListStore(i18n)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.i18n = i18n
    app.state.list_store = store
    app.state.list_service = ListService(store, i18n, max_name_len=settings.std_input_max_len)

    register_exception_handlers(app)
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Create the database file and apply migrations for the bundled store.
        if isinstance(store, SQLiteListStore):
            store.init()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
