import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import ConfigError, Settings, load_settings
from app.dependencies.auth import TokenVerifier
from app.routes import auth, diagnostics, posts, profile, profile_picture
from app.services.errors import ServiceError
from app.services.storage import ProfilePictureStorage
from app.services.supabase import BaasClient, create_baas_client
from app.utils.responses import error_response

load_dotenv()

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request body")


def create_app(settings: Optional[Settings] = None, baas: Optional[BaasClient] = None) -> FastAPI:
    """
    Build the application. Settings and the Supabase handles are created
    once here and shared read-only by every request.
    """
    settings = settings or load_settings()
    baas = baas or create_baas_client(settings)

    app = FastAPI(
        redirect_slashes=False,
        title="BarterUp API",
        description="Auth, profiles and posts for the BarterUp skill-swap app",
        version="1.0.0",
    )

    app.state.settings = settings
    app.state.baas = baas
    app.state.token_verifier = TokenVerifier(settings.token_mode, baas, settings.jwt_secret)
    app.state.picture_storage = ProfilePictureStorage(settings.upload_dir)

    if settings.token_mode == "unverified":
        logger.warning("AUTH_TOKEN_MODE=unverified: bearer token signatures are NOT checked")

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["authorization", "content-type", "accept", "x-requested-with"],
        max_age=3600,
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return error_response(400, _validation_message(exc))

    @app.get("/health")
    def health():
        return {"status": "success", "message": "ok", "data": None}

    # Include routers
    app.include_router(auth.router, prefix="/auth", tags=["Auth"])
    app.include_router(profile.router, prefix="/api", tags=["Profile"])
    app.include_router(profile_picture.router, prefix="/api", tags=["Profile Picture"])
    app.include_router(posts.router, prefix="/api", tags=["Posts"])
    app.include_router(posts.router, include_in_schema=False)
    if settings.enable_debug_routes:
        app.include_router(diagnostics.router, prefix="/test", tags=["Debug"])

    return app


def run() -> None:
    try:
        settings = load_settings()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Configuration error: {str(e)}")
        sys.exit(1)

    logging.basicConfig(level=settings.log_level)
    for key, value in settings.describe().items():
        logger.info(f"{key}: {value}")

    logger.info(f"Starting server on 0.0.0.0:{settings.port}")
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
