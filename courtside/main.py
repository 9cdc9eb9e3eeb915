"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from courtside.api import payments, reservations
from courtside.core.config import settings
from courtside.core.database import init_models
from courtside.core.exceptions import DomainException

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Courtside reservation engine")
    logger.info(f"Debug mode: {settings.DEBUG}")

    if settings.CREATE_TABLES_ON_STARTUP:
        await init_models()

    yield

    # Shutdown
    logger.info("Shutting down Courtside reservation engine")


# Create FastAPI app
app = FastAPI(
    title="Courtside",
    description="Reservations, pricing and payments for sports clubs",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    """Render every engine rejection with its category and reason code."""
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.code} ({exc.category.value})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include routers
app.include_router(reservations.router)
app.include_router(payments.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
