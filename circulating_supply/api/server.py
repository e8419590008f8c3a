"""HTTP query interface serving the published snapshot as plain text.

Routes:
    GET /        circulating supply, display units
    GET /total   total supply, display units

Any other path returns 404 with an empty body. Handlers only read the
snapshot store and never wait on a refresh.
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..calculator.supply import SupplyCalculator
from ..storage.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


def create_app(
    store: SnapshotStore,
    calculator: SupplyCalculator | None = None,
) -> FastAPI:
    """
    Build the ASGI application.

    Args:
        store: Store the routes read from
        calculator: When given, its refresh loop runs for the lifetime of
                    the app as a background task

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task: asyncio.Task | None = None
        if calculator is not None:
            logger.info("Starting refresh loop...")
            task = asyncio.create_task(calculator.run_forever())
        try:
            yield
        finally:
            if task is not None:
                logger.info("Stopping refresh loop...")
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
                await calculator.ledger.aclose()

    app = FastAPI(
        title="Circulating Supply",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.store = store

    @app.exception_handler(StarletteHTTPException)
    async def empty_error_response(request: Request, exc: StarletteHTTPException) -> Response:
        return Response(status_code=exc.status_code)

    @app.get("/", response_class=PlainTextResponse)
    async def circulating_supply() -> str:
        return store.current().circulating_supply

    @app.get("/total", response_class=PlainTextResponse)
    async def total_supply() -> str:
        return store.current().total_supply

    return app
