"""
CourseNest course service - registration, login, course purchases and gated videos
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .access import AccessGuard
from .auth import AuthService
from .config import Settings, get_settings
from . import db as database
from .errors import CourseServiceError, StoreError
from .routes import auth as auth_routes, courses as course_routes, health

logger = logging.getLogger(__name__)

MISSING_FIELD_MESSAGES = {
    "/login": "Both fields are required",
}


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CourseServiceError)
    async def course_service_error_handler(_request: Request, exc: CourseServiceError):
        if exc.status_code >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message},
            headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
            for err in exc.errors()
        ]
        missing = any(err["type"] in ("missing", "string_too_short") for err in exc.errors())
        if missing:
            message = MISSING_FIELD_MESSAGES.get(request.url.path, "All fields are required")
        else:
            message = "Invalid request"
        return JSONResponse(
            status_code=400,
            content={
                "message": message,
                "errors": errors
            }
        )

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        error = StoreError()
        content = {"message": error.message}
        if request.app.state.settings.DEBUG:
            content["error"] = str(exc)
        return JSONResponse(status_code=error.status_code, content=content)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    if settings is get_settings():
        engine, session_factory = database.engine, database.SessionLocal
    else:
        engine = database.create_db_engine(settings)
        session_factory = database.create_session_factory(engine)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """Refuse to start without a signing secret, then create tables"""
        settings.require_signing_secret()
        database.init_db(engine)
        logger.info("Course service ready on port %s", settings.PORT)
        yield

    app = FastAPI(
        title="CourseNest",
        description="Course marketplace backend",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.auth_service = AuthService(settings)
    app.state.access_guard = AccessGuard(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth_routes.router)
    app.include_router(course_routes.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().PORT)
