"""
StackIt Q&A

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stackit.api.middleware.request_id import RequestIdMiddleware
from stackit.api.v1 import router as api_v1_router
from stackit.config import Settings, get_settings
from stackit.database import (
    close_db,
    create_engine_from_settings,
    create_session_maker,
    init_db,
)
from stackit.engines.voting import VoteAcceptFacade
from stackit.kernel.errors import EngineError
from stackit.kernel.identity.jwt import JWTManager
from stackit.kernel.store import SqlEntityStore
from stackit.logging_config import configure_logging, get_logger
from stackit.schemas.common import ErrorResponse, HealthResponse

logger = get_logger(__name__)

ERROR_STATUS = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "unauthorized": status.HTTP_403_FORBIDDEN,
    "invalid_reference": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "invalid_argument": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "conflict": status.HTTP_409_CONFLICT,
}

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",  # Vite default
    "http://127.0.0.1:3000",
]


def _error_headers(request: Request) -> dict:
    req_id = getattr(request.state, "request_id", None)
    return {"X-Request-ID": req_id} if req_id else {}


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    The engine, session factory, EntityStore and facade are created in the
    lifespan and stored on ``app.state``; nothing database-related is
    module-global.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        configure_logging(
            log_level=settings.log_level,
            environment=settings.environment,
            debug=settings.debug,
        )

        logger.info("Starting %s v%s", settings.project_name, settings.version)
        engine = create_engine_from_settings(settings)
        await init_db(engine)
        logger.info("Database initialized")

        app.state.engine = engine
        app.state.session_maker = create_session_maker(engine)
        app.state.store = SqlEntityStore(app.state.session_maker)
        app.state.facade = VoteAcceptFacade.from_settings(app.state.store, settings)
        app.state.jwt_manager = JWTManager(
            secret_key=settings.secret_key,
            algorithm=settings.algorithm,
            access_token_expire_minutes=settings.access_token_expire_minutes,
        )

        yield

        logger.info("Shutting down...")
        await close_db(engine)
        logger.info("Database connections closed")

    app = FastAPI(
        title=settings.project_name,
        description="""
    StackIt Q&A

    Questions, answers, votes and accepted answers with optimistic
    concurrency. Every vote and accept is a compare-and-swap on a version
    counter, retried a bounded number of times under contention.
    """,
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Last added = outermost
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(EngineError)
    async def engine_error_handler(request: Request, exc: EngineError):
        """Map engine error codes to HTTP statuses."""
        status_code = ERROR_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        if status_code >= 500:
            logger.error("Unmapped engine error", extra={"code": exc.code})
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(detail=exc.message, code=exc.code).model_dump(exclude_none=True),
            headers=_error_headers(request),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        headers = _error_headers(request)
        if exc.headers:
            headers.update(exc.headers)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        errors = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            errors.append({
                "field": field,
                "message": error["msg"],
                "type": error["type"],
            })
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": "Validation error", "code": "invalid_argument", "errors": errors},
            headers=_error_headers(request),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception("Unhandled exception: %s", exc)
        req_id = getattr(request.state, "request_id", None)
        if settings.debug:
            content = {"detail": str(exc), "type": type(exc).__name__, "request_id": req_id}
        else:
            content = {"detail": "Internal server error", "request_id": req_id}
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=content,
            headers=_error_headers(request),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Check application health."""
        return HealthResponse(status="ok", version=settings.version, database="connected")

    app.include_router(api_v1_router, prefix=settings.api_v1_prefix)

    return app


app = create_app()


# Main entry point for development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "stackit.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
