"""
Reference Store Application

An in-memory catalog, cart and order service implementing the remote
contract the storefront client talks to.
"""

import os
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

# Load environment variables before the security module reads them
load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

from .routes import auth_router, products_router, cart_router, orders_router
from .security.auth import BearerTokenMiddleware, token_service
from .models import ErrorResponse

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

FAILURE_CODES = {
    400: "VALIDATION",
    401: "AUTH_REQUIRED",
    403: "PERMISSION",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "VALIDATION",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Reference store starting up...")
    yield
    logger.info("Reference store shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Reference Store",
    description="In-memory catalog, cart and order store for the storefront client",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Bearer token middleware
app.add_middleware(BearerTokenMiddleware, tokens=token_service)


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    """Answer every failure with a {code, message} body"""
    code = FAILURE_CODES.get(exc.status_code, "TRANSIENT" if exc.status_code >= 500 else "ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(code=code, message=str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid {field}: {first.get('msg', 'malformed request')}" if field else "Malformed request"
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(code="VALIDATION", message=message).model_dump(),
    )


# Include API routers
app.include_router(auth_router)
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(orders_router)


@app.get("/")
async def home():
    """Store index"""
    return {
        "message": "Reference Store API",
        "docs": "/docs",
        "endpoints": {
            "auth": "/api/auth",
            "products": "/api/products",
            "cart": "/api/cart",
            "orders": "/api/orders",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "reference-store"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mock_store.main:app",
        host=os.getenv("STORE_HOST", "0.0.0.0"),
        port=int(os.getenv("STORE_PORT", "8080")),
        reload=True,
    )
