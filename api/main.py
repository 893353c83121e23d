import time
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request

from api.shared.dtos import ErrorResponse, HealthCheckResponse
from api.shared.entities.registry import BaseEntity
from api.shared.exceptions import CopilotException, MalformedRequest, StoreUnavailable
from core.logging import configure_logging
from core.settings import SETTINGS, Settings
from di.container import ApplicationContainer as DependencyContainer

logger = structlog.get_logger("copilot")

ERROR_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    500: "Internal Server Error",
}


class CustomFastAPI(FastAPI):
    container: DependencyContainer


@asynccontextmanager
async def lifespan(_app: CustomFastAPI):
    logger.info("Starting application initialization...")
    start_time = time.time()

    db_resource = _app.container.infrastructure.database()
    try:
        db_start = time.time()
        await db_resource.init()
        await db_resource.init_schema(BaseEntity)
        async with db_resource.engine.connect() as _conn:
            await _conn.execute(text("SELECT 1"))
        logger.info(
            f"✅ Primary store ready in {time.time() - db_start:.2f}s",
            database=db_resource.database_url.split("://", 1)[0],
        )
    except Exception as e:
        # The fallback store keeps the API usable without a database
        logger.warning(
            "⚠️ Primary store unavailable at startup, serving from fallback store",
            error=str(e),
        )

    # Seeded once per process
    _app.container.infrastructure.fallback_store()
    logger.info(f"✅ Application startup completed in {time.time() - start_time:.2f}s")

    yield

    await db_resource.shutdown()
    logger.info("Application shutdown complete")


def _error_response(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=ERROR_TITLES.get(status_code, "Error"),
            detail=detail,
            status_code=status_code,
        ).model_dump(),
    )


def register_exception_handlers(_app: FastAPI) -> None:
    @_app.exception_handler(CopilotException)
    async def copilot_exception_handler(request: Request, exc: CopilotException):
        if exc.status_code >= 500:
            logger.error(
                "request_failed",
                path=request.url.path,
                error_code=exc.error_code,
                error=exc.message,
            )
        detail = exc.message
        if isinstance(exc, StoreUnavailable):
            detail = "Storage is temporarily unavailable"
        return _error_response(exc.status_code, detail)

    @_app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        malformed = MalformedRequest(details={"errors": len(exc.errors())})
        return _error_response(malformed.status_code, malformed.message)

    @_app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @_app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception", path=request.url.path)
        return _error_response(500, "An unexpected error occurred")


def register_health_routes(_app: CustomFastAPI) -> None:
    @_app.get("/")
    async def root():
        return {"message": "DeFi Copilot API is running", "status": "ok"}

    @_app.get("/health")
    async def health():
        return {"status": "ok"}

    @_app.get("/ready", response_model=HealthCheckResponse)
    async def ready():
        primary_store = _app.container.services.primary_store()
        try:
            await primary_store.chat_exists("")
            database = "ok"
        except StoreUnavailable:
            database = "unavailable"
        return HealthCheckResponse(
            status="ok" if database == "ok" else "degraded",
            dependencies={"database": database, "fallback_store": "ok"},
        )


def create_fastapi_app(settings: Optional[Settings] = None) -> CustomFastAPI:
    settings = settings or SETTINGS
    configure_logging(settings.APP.LOG_LEVEL, settings.APP.JSON_LOGS)

    origins = {
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:8000",
        settings.APP.APP_URL,
    }

    _app = CustomFastAPI(
        title=f"{settings.APP.APP_TITLE} API",
        description="Chat backend answering DeFi questions with Gemini or DeepSeek",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Initialize dependency container
    _app.container = DependencyContainer()
    _app.container.infrastructure.settings.override(settings)
    _app.container.init_resources()

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include feature routers
    from api.features.chats.router import router as chats_router
    from api.features.completions.router import router as completions_router

    _app.include_router(chats_router, prefix="/api/chats", tags=["Chats"])
    _app.include_router(completions_router, prefix="/api", tags=["Completions"])

    register_exception_handlers(_app)
    register_health_routes(_app)
    return _app


app = create_fastapi_app()
