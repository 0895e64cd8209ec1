# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.config import config
from src.controllers import operational_controller
from src.core.errors import (
    ErrorResponse,
    error_response_handler,
    http_exception_handler,
)
from src.core.indexes import create_indexes
from src.core.logger import logger
from src.db.mongodb import close_mongo_connection, connect_to_mongo
from src.middlewares import CorrelationIdMiddleware
from src.routers import item_router, rating_router
from src.routers.item_router import limiter
from src.validators import validate_config


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Catalog Service...")
    validate_config()
    db = await connect_to_mongo()
    await create_indexes(db)

    logger.info(
        "Catalog Service started successfully",
        metadata={
            "service_name": config.SERVICE_NAME,
            "version": config.SERVICE_VERSION,
            "environment": config.ENVIRONMENT,
            "port": config.PORT
        }
    )

    yield

    logger.info("Shutting down Catalog Service...")
    await close_mongo_connection()


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="Catalog Service",
        description="Book and comic catalog with one-rating-per-user ratings",
        version=config.SERVICE_VERSION,
        lifespan=lifespan if use_lifespan else None,
    )

    app.state.limiter = limiter

    app.add_middleware(CorrelationIdMiddleware)

    app.add_exception_handler(ErrorResponse, error_response_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(RequestValidationError)
    def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Validation error",
            metadata={"event": "VALIDATION_ERROR", "errors": jsonable_encoder(exc.errors())}
        )
        return JSONResponse(
            status_code=422,
            content={"error": "Validation error", "code": "ValidationError", "details": jsonable_encoder(exc.errors())}
        )

    app.include_router(item_router, prefix="/api/items", tags=["items"])
    app.include_router(rating_router, prefix="/api/ratings", tags=["ratings"])

    # Operational endpoints for infrastructure/monitoring
    app.get("/health")(operational_controller.health)
    app.get("/health/ready")(operational_controller.readiness)
    app.get("/health/live")(operational_controller.liveness)
    app.get("/metrics")(operational_controller.metrics)

    return app


app = create_app()


if __name__ == "__main__":
    logger.info(f"Catalog service starting on port {config.PORT}")
    uvicorn.run("src.main:app", host=config.HOST, port=config.PORT, reload=config.DEBUG)
