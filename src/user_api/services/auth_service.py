"""Authentication: credential check, peer enrichment, and session tokens.

Admin logins are answered from the local store alone. Non-admin logins
also need the user's ``mod_poc_id`` from a peer service located through
service discovery; if that lookup fails the whole login fails and no
token is issued.
"""

from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.config import Settings
from user_api.core.exceptions import AuthError, DependencyError, NotFoundError
from user_api.core.security import create_session_token, verify_password
from user_api.lib.discovery import BaseServiceLocator, DiscoveryError
from user_api.lib.peer import PeerServiceError, fetch_mod_poc_id
from user_api.models.user import User
from user_api.schemas.user import LoginResponse
from user_api.services import user_service

LOGIN_FAILED_MSG = "Login failed"


async def authenticate_user(session: AsyncSession, email: str, password: str) -> User:
    """Check an email/password pair.

    Args:
        session: The database session.
        email: Login email.
        password: Plaintext password.

    Returns:
        The authenticated User.

    Raises:
        NotFoundError: If no user has this email.
        AuthError: If the password does not match.
    """
    user = await user_service.find_by_email(session, email)
    if user is None:
        raise NotFoundError(user_service.USER_NOT_FOUND_MSG)
    if not verify_password(password, user.password):
        raise AuthError("Invalid credentials")
    return user


async def fetch_peer_mod_poc_id(user: User, locator: BaseServiceLocator, settings: Settings) -> Any:
    """Resolve the peer service and fetch the user's ``mod_poc_id``.

    Args:
        user: The authenticated non-admin user.
        locator: Service locator used to find the peer.
        settings: Application settings (peer name and timeout).

    Returns:
        The identifier exactly as the peer returned it.

    Raises:
        DependencyError: If the peer cannot be located or its request fails.
    """
    service_name = settings.peer_service_name
    try:
        instances = await locator.resolve(service_name)
    except DiscoveryError as e:
        logger.error(f"Service discovery for {service_name} failed: {e.message}")
        raise DependencyError(LOGIN_FAILED_MSG, error=e.message, poc_error=None) from e

    if not instances:
        logger.error(f"No {service_name} instance registered in {locator.backend_name}")
        raise DependencyError(f"{service_name} service not found in Consul")

    instance = instances[0]
    if not instance.is_complete:
        logger.error(f"Incomplete address for {service_name}: {instance}")
        raise DependencyError("Invalid service address from Consul")

    try:
        return await fetch_mod_poc_id(instance, user.user_id, timeout=settings.peer_request_timeout)
    except PeerServiceError as e:
        raise DependencyError(LOGIN_FAILED_MSG, error=e.message, poc_error=e.payload) from e


async def login(
    session: AsyncSession,
    email: str,
    password: str,
    *,
    locator: BaseServiceLocator,
    settings: Settings,
) -> LoginResponse:
    """Authenticate a user and build the login response.

    The session token is created only once the rest of the response is
    ready, so a failed peer lookup never yields a token.

    Args:
        session: The database session.
        email: Login email.
        password: Plaintext password.
        locator: Service locator for the peer lookup (unused for admins).
        settings: Application settings.

    Returns:
        Message, token, and user summary.

    Raises:
        NotFoundError: If no user has this email.
        AuthError: If the password does not match.
        DependencyError: If a non-admin login cannot reach the peer service.
    """
    user = await authenticate_user(session, email, password)

    summary: dict[str, Any] = {"user_id": user.user_id, "full_name": user.full_name}
    if user.admin:
        msg = "Login successful (admin)"
        summary["admin"] = True
    else:
        mod_poc_id = await fetch_peer_mod_poc_id(user, locator, settings)
        msg = "Login successful"
        summary["admin"] = False
        summary["mod_poc_id"] = mod_poc_id

    token = create_session_token(
        user_id=user.user_id,
        full_name=user.full_name,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_hours=settings.session_token_expire_hours,
    )
    logger.info(f"User {user.user_id} logged in (admin={user.admin})")
    return LoginResponse(msg=msg, token=token, user=summary)
