"""FastAPI application and process lifecycle."""

import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.responses import JSONResponse

from book_catalog.api.http.app_data import ApplicationDependencies
from book_catalog.api.http.routers.books import router as books_router
from book_catalog.api.http.routers.health import router as health_router
from book_catalog.api.utils.app_startup import configure_logging
from book_catalog.core.exceptions import BookValidationError
from book_catalog.core.services import DbManageService, DbSessionService
from book_catalog.runtime.context import get_config

# Initialize logging
configure_logging()


# --- FastAPI app setup ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title="Book Catalog",
    lifespan=lifespan,
    docs_url=None if get_config().app.environment == "production" else "/docs",
    redoc_url=None if get_config().app.environment == "production" else "/redoc",
)

# expose startup for tests
__all__ = ["app", "startup", "shutdown"]


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")

        response.headers.setdefault("X-Request-ID", request_id)
        return response


# --- Exception handlers ---
@app.exception_handler(BookValidationError)
async def book_validation_error_handler(
    request: Request, exc: BookValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation failed", "errors": exc.errors},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.bind(errors=exc.errors()).debug("Rejected request body")
    return JSONResponse(status_code=400, content={"detail": "Invalid request body"})


# --- Router registration ---
app.include_router(books_router)
app.include_router(health_router)


# --- Web UI ---
def _mount_static(static_dir: str | None) -> None:
    if not static_dir or not Path(static_dir).is_dir():
        logger.debug("No static directory at {}; web UI disabled", static_dir)
        return

    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    index_file = Path(static_dir) / "index.html"

    @app.get("/", include_in_schema=False)
    async def index() -> FileResponse:
        return FileResponse(index_file)


_mount_static(get_config().app.static_dir)


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    db_config = config.database

    logger.info("Starting Book Catalog in {} environment", config.app.environment)
    logger.info("Database: {}", db_config.describe())
    logger.info("Skip bootstrap: {}", db_config.skip_bootstrap)

    # A failed bootstrap or ping aborts startup so no request is served
    # against an unconfirmed schema
    if not db_config.skip_bootstrap:
        DbManageService(db_config).bootstrap()

    database_service = DbSessionService()
    try:
        database_service.ping()
    except Exception:
        database_service.dispose()
        raise

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
    )
    logger.info("API available at {}/api/books", config.app.base_url)


async def shutdown() -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        app_dependencies.database_service.dispose()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # Access logging is done in middleware
    )
