"""
FastAPI Application Entry Point
Application factory: settings, clients, middleware, error handlers and routes
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from boosterhub.config import Settings, get_settings
from boosterhub.database import build_engine, dispose_engine
from boosterhub.exceptions import BoosterHubError
from boosterhub.services.qr_renderer import QRRenderer
from boosterhub.services.storage_service import StorageService

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ["GET", "POST", "PUT", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization"]


def allow_origin_header(request: Request, allow_origins: list[str]) -> dict:
    """Access-Control-Allow-Origin for a request, empty when its origin is not allowed"""
    if "*" in allow_origins:
        return {"Access-Control-Allow-Origin": "*"}
    origin = request.headers.get("origin")
    if origin in allow_origins:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


class PreflightMiddleware(BaseHTTPMiddleware):
    """Answer every OPTIONS request with 200 and the CORS headers"""

    def __init__(self, app, allow_origins):
        super().__init__(app)
        self.allow_origins = allow_origins

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(
                status_code=200,
                headers={
                    **allow_origin_header(request, self.allow_origins),
                    "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
                    "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
                },
            )
        return await call_next(request)


class NoCacheMiddleware(BaseHTTPMiddleware):
    """Prevent browsers and proxies from caching admin responses"""
    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        if request.url.path.startswith("/api/admin/"):
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BoosterHubError)
    async def boosterhub_error_handler(request: Request, exc: BoosterHubError):
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.client_message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
                "message": error.get("msg", "Invalid value"),
            }
            for error in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"detail": "Invalid request", "errors": errors})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        # Served by the outermost error middleware, which CORSMiddleware never wraps
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
            headers=allow_origin_header(request, request.app.state.settings.cors_origins),
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application

    The database engine and storage service are constructed here from settings
    and owned by the app; the lifespan disposes of the engine on shutdown.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    engine = build_engine(settings)
    if not settings.jwt_configured:
        logger.error("JWT_SECRET_KEY not configured; login and admin routes are unavailable")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("%s started in %s mode", settings.APP_NAME, settings.APP_ENV)
        try:
            yield
        finally:
            await dispose_engine(engine)
            logger.info("%s shut down", settings.APP_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Booster club payment settings and QR codes",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.qr_renderer = QRRenderer()
    app.state.storage = StorageService(settings) if settings.storage_configured else None

    # Last added runs first: preflight, then CORS, then no-cache
    app.add_middleware(NoCacheMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
    )
    app.add_middleware(PreflightMiddleware, allow_origins=settings.cors_origins)

    register_exception_handlers(app)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "ok",
            "app": settings.APP_NAME,
            "environment": settings.APP_ENV,
            "database_configured": engine is not None,
            "version": "1.0.0"
        }

    # Import and include routers
    from boosterhub.routes import admin, auth, public

    app.include_router(auth.router, prefix="/api", tags=["Authentication"])
    app.include_router(public.router, prefix="/api", tags=["Public"])
    app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "boosterhub.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True  # Auto-reload on code changes
    )
