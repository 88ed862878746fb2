"""
Stockpick FastAPI Main Application
Entry point for the picking plan REST API
"""
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from stockpick.core.config import settings
from stockpick.core.database import check_db_connection, init_db
from stockpick.core.logging import setup_logging
from stockpick.api.v1.api_router import api_router
from stockpick.schemas.common import ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## Stockpick Allocation API

    Computes which warehouse locations to pick from, how much from each and in
    which walking order, for a batch of product demands.

    ### Key Features:
    - **Code multipliers**: `L3-8GX6` is six units of `L3-8G`
    - **Unit hierarchy**: case / box / piece quantities resolved to base units
    - **FEFO**: oldest manufacture date picked first
    - **Routing**: one zone/position/level ordered route per batch
    - **Stock check**: planned availability re-validated before picking
    """,
    docs_url=settings.DOCS_URL,
    openapi_url=settings.OPENAPI_URL,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """
    Health check endpoint for monitoring and load balancers

    Returns system status and database connectivity
    """
    try:
        db_status = check_db_connection()

        return HealthResponse(
            status="healthy" if db_status else "degraded",
            version=settings.APP_VERSION,
            database="connected" if db_status else "disconnected",
        )
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unavailable")


@app.on_event("startup")
async def startup_event():
    """
    Application startup tasks

    Configure logging and make sure the inventory tables exist
    """
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    init_db()


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """
    Global exception handler for unhandled errors

    Returns a JSON error response instead of a raw traceback
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc) if settings.DEBUG else "An unexpected error occurred",
            type="server_error"
        ).model_dump()
    )


app.include_router(api_router, prefix=settings.API_V1_STR)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "stockpick.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
