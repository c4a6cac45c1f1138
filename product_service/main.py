# product_service/main.py

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import ConfigurationError, load_settings
from .db import create_client, get_products_collection
from .routes import router as products_router

# --- Standard Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Suppress noisy logs from third-party libraries for cleaner output
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)


# --- Database Lifecycle ---
def connect_database(app: FastAPI) -> None:
    """
    Opens the single MongoDB client shared by every request handler.
    Exits the process when configuration is missing or MongoDB is unreachable.
    """
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.critical(f"Product Service: Invalid configuration: {e}")
        sys.exit(1)

    logger.info(
        f"Product Service: Connecting to MongoDB database '{settings.database_name}' "
        f"(timeout {settings.timeout_ms} ms)..."
    )
    client = create_client(settings)
    try:
        client.server_info()
    except PyMongoError as e:
        logger.critical(
            f"Product Service: Failed to connect to MongoDB: {e}", exc_info=True
        )
        client.close()
        sys.exit(1)

    app.state.mongo_client = client
    app.state.products_collection = get_products_collection(client, settings)
    logger.info(
        f"Product Service: Connected to MongoDB, using collection '{settings.collection_name}'."
    )


def close_database(app: FastAPI) -> None:
    client = getattr(app.state, "mongo_client", None)
    if client is not None:
        client.close()
        logger.info("Product Service: MongoDB connection closed.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    connect_database(app)
    yield
    close_database(app)


# --- FastAPI Application Setup ---
app = FastAPI(
    title="Product Service API",
    description="CRUD service for products stored in MongoDB.",
    version="1.0.0",
    lifespan=lifespan,
)

# Enable CORS (for frontend dev/testing)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Use specific origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error Responses ---
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ())[1:])
    detail = first.get("msg", "Invalid request")
    if location:
        detail = f"{location}: {detail}"
    logger.warning(
        f"Product Service: Validation failed for {request.method} {request.url.path}: {detail}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Erro na validação dos dados", "error": detail},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


# --- Root Endpoint ---
@app.get("/", status_code=status.HTTP_200_OK, summary="Root endpoint")
async def read_root():
    return {"message": "Welcome to the Product Service!"}


# --- Health Check Endpoint ---
@app.get("/health", status_code=status.HTTP_200_OK, summary="Health check endpoint")
async def health_check():
    return {"status": "ok", "service": "product-service"}


app.include_router(products_router)
