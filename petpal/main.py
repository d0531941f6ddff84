"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging
import time

from fastapi import FastAPI, Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import NoResultFound
from starlette.middleware.base import BaseHTTPMiddleware

from petpal.config import Settings
from petpal.database import async_session_maker
from petpal.routers import animals, auth, categories, export, favorites, messages
from petpal.services.seed_service import seed_default_categories

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses."""

    async def dispatch(self, request: Request, call_next):
        """Log request and response details."""
        request_id = id(request)

        start_time = time.time()
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None
            }
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            duration = time.time() - start_time
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                exc_info=True,
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": round(duration * 1000, 2),
                    "error_type": type(exc).__name__,
                }
            )
            # Re-raise to let exception handlers deal with it
            raise

        duration = time.time() - start_time
        logger.info(
            f"Request completed: {request.method} {request.url.path} {response.status_code}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration * 1000, 2)
            }
        )
        return response


# Create settings instance for the application
settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    if settings.seed_categories_on_startup:
        async with async_session_maker() as session:
            await seed_default_categories(session)

    logger.info(f"Application started: {settings.app_name} (debug={settings.debug})")

    yield

    logger.info(f"Application shutdown: {settings.app_name}")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
    Pet Adoption Listing API

    * **Authentication**: Registration, username login, temporary passwords and password changes
    * **Animals**: List animals for adoption with an optional picture, search and sort the directory
    * **Favorites**: Bookmark animals
    * **Messages**: Contact owners about animals, reply, manage inbox and sent items
    * **Export**: The full directory as XML

    ## Authentication

    1. Register at `/api/auth/register` (username, email, password)
    2. Login at `/api/auth/jwt/login` with the username to receive a JWT token
    3. Include the token in the `Authorization` header as `Bearer <token>`

    ## Error Handling

    All errors return JSON with:
    - `detail`: Human-readable error message
    - `error_code`: Machine-readable error code
    """,
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "auth",
            "description": "Registration, login, temporary passwords and password changes.",
        },
        {
            "name": "users",
            "description": "The logged-in user's own account.",
        },
        {
            "name": "categories",
            "description": "The fixed list of animal categories.",
        },
        {
            "name": "animals",
            "description": "Adoption listings. Search, create and delete animals.",
        },
        {
            "name": "favorites",
            "description": "The logged-in user's bookmarked animals.",
        },
        {
            "name": "messages",
            "description": "Messages between users about animals.",
        },
        {
            "name": "export",
            "description": "XML export of the animal directory.",
        },
    ],
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)


@app.get("/")
async def root() -> dict:
    """Root endpoint returning API information."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "operational",
        "docs": "/api/docs"
    }


# Include routers
app.include_router(auth.router, prefix="/api/auth")
app.include_router(categories.router)
app.include_router(animals.router)
app.include_router(favorites.router)
app.include_router(messages.router)
app.include_router(export.router)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app_name": settings.app_name
    }


# Global exception handlers

@app.exception_handler(NoResultFound)
async def not_found_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    """Handle SQLAlchemy NoResultFound exceptions."""
    logger.warning(f"Resource not found: {request.url.path}")
    return JSONResponse(
        status_code=404,
        content={
            "detail": "Resource not found",
            "error_code": "NOT_FOUND"
        }
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors."""
    logger.info(f"Validation error: {request.url.path}")
    return JSONResponse(
        status_code=422,
        content={
            "detail": jsonable_encoder(exc.errors()),
            "error_code": "VALIDATION_ERROR"
        }
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions including authorization errors."""
    if exc.status_code >= 500:
        logger.error(f"HTTP error {exc.status_code}: {request.url.path} - {exc.detail}")
    else:
        logger.info(f"HTTP {exc.status_code}: {request.url.path}")

    # Map status codes to error codes
    error_code_map = {
        404: "NOT_FOUND",
        403: "FORBIDDEN",
        401: "UNAUTHORIZED",
        422: "VALIDATION_ERROR",
        400: "BAD_REQUEST",
    }

    error_code = error_code_map.get(exc.status_code, f"HTTP_{exc.status_code}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": error_code
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    logger.error(
        f"Unhandled exception: {request.url.path}",
        exc_info=True,
        extra={
            "method": request.method,
            "url": str(request.url),
            "client": request.client.host if request.client else None
        }
    )

    if settings.debug:
        # In debug mode, return detailed error information
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error_code": "INTERNAL_ERROR",
                "error_type": type(exc).__name__,
                "error_message": str(exc)
            }
        )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_code": "INTERNAL_ERROR"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "petpal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
