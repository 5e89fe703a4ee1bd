"""
FastAPI Application Factory.

Creates and configures the FastAPI application with middleware,
JSON error handlers and core API endpoints.
"""

from typing import TYPE_CHECKING
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.app_context import AppContext

if TYPE_CHECKING:
    from core.registry import ModuleRegistry

_logger = logging.getLogger(__name__)


def create_base_app(
    context: AppContext,
    registry: "ModuleRegistry | None" = None,
    title: str = "DA Reporting Dashboard API",
    description: str = "Role-scoped reporting over Development Agent records",
    version: str = "1.0.0",
) -> FastAPI:
    """
    Create and configure the base FastAPI application.

    Args:
        context: Application context for logging and configuration.
        registry: Optional module registry for status reporting.
        title: API title for OpenAPI documentation.
        description: API description for OpenAPI documentation.
        version: API version string.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(title=title, description=description, version=version)

    # Store references in app state for access in route handlers
    app.state.context = context
    app.state.registry = registry

    # Get allowed origins from configuration (defaults to BASE_URL only)
    config = context.config
    base_url = config.get("server.base_url", "")
    is_debug = config.get("app.debug", False)

    allowed_origins: list[str] = []

    if base_url:
        allowed_origins.append(base_url)

    # In debug mode, also allow localhost for development
    if is_debug:
        allowed_origins.extend([
            "http://localhost:3000",
            "http://localhost:8000",
            "http://127.0.0.1:8000",
        ])

    if not allowed_origins:
        _logger.error(
            "BASE_URL not configured and not in debug mode. "
            "CORS will reject all cross-origin requests."
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    if allowed_origins:
        _logger.info(f"CORS configured with {len(allowed_origins)} origin(s): {allowed_origins}")

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    register_error_handlers(app)
    _register_core_routes(app)

    return app


def register_error_handlers(app: FastAPI) -> None:
    """
    Render every error response as {"error": "<message>"}.

    Request validation failures are reported as 400, not FastAPI's default 422.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            detail = first.get("msg", "")
            message = f"Invalid request: {location}: {detail}" if location else f"Invalid request: {detail}"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": message},
        )


def _register_core_routes(app: FastAPI) -> None:
    """Register core API routes (health check, module status)."""

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "DA Reporting Dashboard"}

    @app.get("/api/status/modules")
    async def module_status(request: Request) -> dict[str, dict]:
        """Status reported by each registered module."""
        registry: "ModuleRegistry | None" = request.app.state.registry
        if registry is None:
            return {}
        return {
            module.get_module_name(): module.get_status()
            for module in registry.get_all_modules()
        }


def set_registry(app: FastAPI, registry: "ModuleRegistry") -> None:
    """
    Set the module registry on the app.

    Args:
        app: FastAPI application instance.
        registry: Module registry instance.
    """
    app.state.registry = registry
