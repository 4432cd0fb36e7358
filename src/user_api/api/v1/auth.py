"""Authentication API endpoint: POST /login."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.config import Settings, get_settings
from user_api.core.dependencies import get_async_session, get_service_locator
from user_api.lib.discovery import BaseServiceLocator
from user_api.schemas.common import ErrorResponse
from user_api.schemas.user import LoginRequest, LoginResponse
from user_api.services import auth_service

router = APIRouter(tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def login(
    body: LoginRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    locator: Annotated[BaseServiceLocator, Depends(get_service_locator)],
) -> LoginResponse:
    """Authenticate with email and password and return a session token.

    Non-admin users also receive their ``mod_poc_id`` from the peer service.
    """
    return await auth_service.login(session, body.email, body.password, locator=locator, settings=settings)
