import logging
import traceback
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings
from database import Database
from exceptions import VendingError
from routers import all_routers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Open the storage handle on startup, dispose it on shutdown.
    """
    settings: Settings = app.state.settings
    logger.info("Starting vending backend...")

    db = Database(settings.sqlalchemy_url, echo=settings.sql_echo)
    if settings.auto_create_tables:
        db.create_all()
    app.state.db = db
    logger.info("Database ready")

    yield

    logger.info("Shutting down vending backend...")
    db.dispose()


def _error_response(settings: Settings, status_code: int, message: str, exc: Exception) -> JSONResponse:
    content = {"message": message}
    if settings.debug:
        content["stack"] = "".join(traceback.format_exception(exc))
    return JSONResponse(status_code=status_code, content=content)


def _validation_message(exc: RequestValidationError) -> str:
    missing, invalid = [], []
    for error in exc.errors():
        field = str(error["loc"][-1]) if error.get("loc") else "body"
        (missing if error.get("type") == "missing" else invalid).append(field)
    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    return f"Invalid fields: {', '.join(invalid)}"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    app = FastAPI(
        title="Vending Backend API",
        description="Vending machine fleet with code-redeemed purchases",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(VendingError)
    async def vending_error_handler(request: Request, exc: VendingError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc.message}", exc_info=exc)
        else:
            logger.warning(f"{type(exc).__name__}: {exc.message}", extra={"details": exc.details})
        return _error_response(settings, exc.status_code, exc.message, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(settings, exc.status_code, str(exc.detail), exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_response(settings, 400, _validation_message(exc), exc)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error: {exc}", exc_info=True)
        return _error_response(settings, 500, "Database error", exc)

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error: {exc}", exc_info=True)
        return _error_response(settings, 500, "Internal server error", exc)

    @app.get("/api")
    def api_root():
        return {"message": "API - 👋🌎🌍🌏"}

    @app.get("/api/health")
    def health_check(request: Request):
        return {
            "status": "healthy",
            "database": request.app.state.db.check_connection(),
        }

    for router in all_routers:
        app.include_router(router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=app.state.settings.port, reload=True)
