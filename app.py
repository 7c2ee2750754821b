from __future__ import annotations

import contextlib
import logging
import time

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from persistence import AsyncDiskResourceRepository, DiskResourceStore, ResourceOperations, StorageError
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _attach_store(app: FastAPI, store: DiskResourceStore) -> None:
    app.state.store = store
    app.state.repository = AsyncDiskResourceRepository(ResourceOperations(store))


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    # A store handed to create_app() wins; otherwise load the configured file.
    # ParseFailureError propagates and aborts startup before serving begins.
    if getattr(app.state, "store", None) is None:
        settings: Settings = app.state.settings
        _attach_store(app, DiskResourceStore.open(settings.db_file))
    yield


def create_app(*, store: DiskResourceStore | None = None, settings: Settings | None = None) -> FastAPI:
    load_dotenv("local.env")

    from endpoints.resource_endpoints import router as resource_router

    settings = settings or get_settings()

    app = FastAPI(title="JSON Server", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = None
    app.state.repository = None
    if store is not None:
        _attach_store(app, store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse({"error": exc.error}, status_code=exc.status_code)

    if settings.enable_logs:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "%s %s -> %s (%.1fms)",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
            return response

    app.include_router(resource_router)

    return app


app = create_app()
