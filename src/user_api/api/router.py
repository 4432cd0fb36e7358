"""Root API router and middleware registration."""

from fastapi import APIRouter, FastAPI

from user_api.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware, setup_cors
from user_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    User and login routes live under ``settings.api_prefix``; health
    routes are mounted at the root.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from user_api.api.v1.auth import router as auth_router
    from user_api.api.v1.health import health_router
    from user_api.api.v1.users import users_router

    user_router = APIRouter(prefix=settings.api_prefix)
    user_router.include_router(auth_router)
    user_router.include_router(users_router)

    root_router = APIRouter()
    root_router.include_router(health_router)
    root_router.include_router(user_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
