# File: outreach_cms/main.py
from contextlib import asynccontextmanager
from typing import Callable, Optional
import logging
import time

from azure.core.exceptions import AzureError
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from outreach_cms.api.v1.api import api_router
from outreach_cms.core.config import Settings, settings
from outreach_cms.core.exceptions import AppError, DependencyError
from outreach_cms.db.database import build_engine, build_session_factory
from outreach_cms.services.storage import AzureBlobStore, ObjectStore

logger = logging.getLogger(__name__)


def error_body(message: str, details: Optional[str], config: Settings) -> dict:
    body = {"error": message}
    if details and not config.is_production:
        body["details"] = details
    return body


def describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Invalid JSON body"
    # drop the "body"/"query" prefix, keep the field name as sent on the wire
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "Invalid value")
    return f"Invalid {field}: {message}" if field else message


def register_exception_handlers(app: FastAPI, config: Settings) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if isinstance(exc, DependencyError):
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message} ({exc.details})")
            details = exc.details
        else:
            details = None
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, details, config))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = describe_validation_error(exc)
        logger.info(f"Rejected {request.method} {request.url.path}: {message}")
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(f"❌ Database error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=error_body("Internal server error", str(exc), config))

    @app.exception_handler(AzureError)
    async def storage_error_handler(request: Request, exc: AzureError):
        logger.exception(f"❌ Storage error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=error_body("Internal server error", str(exc), config))


def create_app(
    config: Optional[Settings] = None,
    *,
    engine: Optional[Engine] = None,
    session_factory: Optional[sessionmaker] = None,
    object_store: Optional[ObjectStore] = None,
) -> FastAPI:
    """
    Build the API application.

    Engine, session factory and object store may be injected; otherwise they are
    built from `config`. A missing DATABASE_URL leaves the app running so that
    login and /health can report the misconfiguration.
    """
    config = config or settings
    built_engine = None

    logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))

    if session_factory is None:
        if engine is None and config.DATABASE_URL:
            engine = built_engine = build_engine(config.DATABASE_URL)
        if engine is not None:
            session_factory = build_session_factory(engine)
        else:
            logger.warning("⚠️ DATABASE_URL is not set; database-backed routes will fail")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.object_store is None:
            # raises ConfigurationError when no storage source is complete
            storage_config = config.resolve_storage()
            store = AzureBlobStore(storage_config)
            store.ensure_container()
            app.state.object_store = store
            logger.info(
                f"📦 Object store ready: container {storage_config.container} "
                f"(credentials from {storage_config.source})"
            )
        logger.info(f"🚀 {config.PROJECT_NAME} started ({config.ENVIRONMENT})")
        yield
        if built_engine is not None:
            built_engine.dispose()

    app = FastAPI(
        title=config.PROJECT_NAME,
        openapi_url=f"{config.API_V1_STR}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.session_factory = session_factory
    app.state.object_store = object_store

    allowed_origins = config.allowed_origins
    allow_all = "*" in allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else allowed_origins,
        allow_credentials=not allow_all,  # credentials cannot be combined with "*"
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
        expose_headers=["X-Process-Time"],
        max_age=3600,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable) -> Response:
        """Log every request with its status and timing"""
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.exception(
                f"❌ {request.method} {request.url.path} - "
                f"Error: {e} - "
                f"Time: {process_time:.4f}s"
            )
            return JSONResponse(
                status_code=500,
                content=error_body("Internal server error", str(e), config),
            )

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )
        response.headers["X-Process-Time"] = str(process_time)
        return response

    register_exception_handlers(app, config)
    app.include_router(api_router, prefix=config.API_V1_STR)

    return app


app = create_app()
