from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

import uvicorn
from starlette.exceptions import HTTPException as StarletteHTTPException

from content_recognition.core.config import settings, validate_settings
from content_recognition.core.errors import GENERIC_ERROR_MESSAGE, MissingUpload, RecognitionError
from content_recognition.api.endpoints import vision
from content_recognition.models.responses import HealthResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

VISION_PREFIX = "/api/v1/vision"

# Security headers added to every response
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    Validates configuration on startup
    """
    logger.info("Starting up Content Recognition API...")

    for issue in validate_settings(settings):
        logger.warning(f"Configuration issue ({issue.setting}): {issue.message}")

    yield

    logger.info("Shutting down Content Recognition API...")


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message}
    )


async def missing_upload_handler(request: Request, exc: MissingUpload) -> JSONResponse:
    return _error_response(str(exc))


async def recognition_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the internal detail and answer with the fixed user-safe message"""
    logger.error(f"Recognition request failed ({type(exc).__name__}): {exc}")
    return _error_response(GENERIC_ERROR_MESSAGE)


async def vision_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Keep the recognition endpoints on the {"error": ...} contract"""
    if request.url.path.startswith(VISION_PREFIX):
        return await recognition_error_handler(request, exc)
    return await http_exception_handler(request, exc)


async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="API for describing the non-sensitive physical objects in an uploaded image.",
        lifespan=lifespan
    )

    app.middleware("http")(add_security_headers)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(
        vision.router,
        prefix=VISION_PREFIX,
        tags=["Vision"]
    )

    app.add_exception_handler(MissingUpload, missing_upload_handler)
    app.add_exception_handler(RecognitionError, recognition_error_handler)
    app.add_exception_handler(RequestValidationError, recognition_error_handler)
    app.add_exception_handler(StarletteHTTPException, vision_http_exception_handler)
    app.add_exception_handler(Exception, recognition_error_handler)

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "name": settings.APP_NAME,
            "version": settings.VERSION,
            "status": "running",
            "docs": "/docs",
            "recognize_endpoint": "/api/v1/vision/recognize"
        }

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint"""
        return HealthResponse(status="ok")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.BACKEND_HOST, port=settings.backend_port)
