import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from invoice_tracker_api.api import categories, health, invoices
from invoice_tracker_api.application.interfaces.di_container import close_all_services, init_services
from shared.utils.logging_config import get_logger, setup_logging
from shared.config.settings import settings

setup_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        log_to_console=settings.log_to_console
    )

logger = get_logger(__name__)

logger.info(f"Loading environment settings for: {settings.environment}")

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Invoice Tracker API...")
    logger.info(f"API Title: {settings.api_title} Version: {settings.api_version}")

    await init_services()

    yield

    # Shutdown
    await close_all_services()
    logger.info("Shutting down Invoice Tracker API...")


app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    debug=settings.debug,
    lifespan=lifespan
)

# Middleware for request logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    logger.info(f"Request: {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"Response: {request.method} {request.url.path} "
        f"Status: {response.status_code} "
        f"Duration: {process_time:.3f}s"
    )
    return response


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/api/v1/health", tags=["health"])
app.include_router(categories.router, prefix="/api/v1/categories", tags=["categories"])
app.include_router(invoices.router, prefix="/api/v1/invoices", tags=["invoices"])

def run_production():
    """Entry point for the CLI script."""
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)

if __name__ == "__main__":
    run_production()
