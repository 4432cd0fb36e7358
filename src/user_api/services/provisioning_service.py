"""User provisioning: validation, password resolution, single and bulk creation."""

import pydantic
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.exceptions import ConflictError, UserServiceError, ValidationError
from user_api.core.security import hash_password
from user_api.lib.credentials import derive_default_password
from user_api.models.user import User, new_user_id
from user_api.schemas.user import (
    BulkCreateFailure,
    BulkCreateResponse,
    UserCreateRequest,
    UserCreateResponse,
)
from user_api.services import user_service

MISSING_IDENTITY_MSG = "Full name and email are required"
ADMIN_PASSWORD_MSG = "Password is required for admin users"
NON_ADMIN_FIELDS_MSG = "Department, college, and roll number are required for non-admin users"
MOBILE_REQUIRED_MSG = "Mobile number is required for non-admin users when password is empty"
EMPTY_BULK_MSG = "Users array is required and cannot be empty"
UNKNOWN_EMAIL = "unknown"


def validate_create_request(request: UserCreateRequest) -> None:
    """Check the required-field rules for a new user.

    Empty strings count as missing. Rules are checked in order and the
    first one broken is reported.

    Raises:
        ValidationError: With the message of the first rule broken.
    """
    if not request.full_name or not request.email:
        raise ValidationError(MISSING_IDENTITY_MSG)

    if request.admin:
        if not request.password:
            raise ValidationError(ADMIN_PASSWORD_MSG)
    else:
        if not request.department or not request.college or not request.rollno:
            raise ValidationError(NON_ADMIN_FIELDS_MSG)
        if not request.password and not request.mobile_no:
            raise ValidationError(MOBILE_REQUIRED_MSG)


def resolve_password(request: UserCreateRequest) -> str:
    """Return the plaintext password to set: the supplied one, or the derived default."""
    if request.password:
        return request.password
    return derive_default_password(request.full_name, request.mobile_no)


async def create_user(session: AsyncSession, request: UserCreateRequest) -> UserCreateResponse:
    """Validate, check uniqueness, and persist a new user.

    Args:
        session: The database session.
        request: User creation input.

    Returns:
        The created user's profile and the plaintext password that was set.

    Raises:
        ValidationError: If a required field is missing.
        ConflictError: If the email or roll number is taken.
        InternalError: If the store fails.
    """
    validate_create_request(request)
    email = str(request.email)

    existing = await user_service.find_by_email_or_rollno(session, email, request.rollno or None)
    if existing is not None:
        raise ConflictError(user_service.DUPLICATE_USER_MSG)

    plain_password = resolve_password(request)
    user = User(
        user_id=new_user_id(),
        full_name=request.full_name,
        email=email,
        password=hash_password(plain_password),
        mobile_no=request.mobile_no or None,
        department=request.department or "",
        college=request.college or "",
        rollno=request.rollno or None,
        status=request.status if request.status is not None else True,
        admin=request.admin is True,
    )
    user = await user_service.insert_user(session, user)
    logger.info(f"Created user {user.user_id} (admin={user.admin})")

    return UserCreateResponse(
        full_name=user.full_name,
        email=user.email,
        plain_password=plain_password,
        department=user.department,
        college=user.college,
        rollno=user.rollno,
    )


def _item_email(item: object) -> str:
    """Best-effort email of a raw bulk item for failure reports."""
    if isinstance(item, dict):
        email = item.get("email")
        if isinstance(email, str) and email:
            return email
    return UNKNOWN_EMAIL


def _describe_validation_error(exc: pydantic.ValidationError) -> str:
    """Render the first schema error of a bulk item as a single message."""
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


async def bulk_create_users(session: AsyncSession, items: object) -> BulkCreateResponse:
    """Create users one by one, collecting per-item failures.

    Items are processed sequentially in input order; a failing item never
    stops the items after it.

    Args:
        session: The database session.
        items: Non-empty list of raw user objects.

    Returns:
        Successes and failures, each in input order.

    Raises:
        ValidationError: If ``items`` is not a non-empty list.
    """
    if not isinstance(items, list) or not items:
        raise ValidationError(EMPTY_BULK_MSG)

    response = BulkCreateResponse()
    for item in items:
        email = _item_email(item)
        try:
            request = UserCreateRequest.model_validate(item)
        except pydantic.ValidationError as e:
            response.failures.append(BulkCreateFailure(email=email, msg=_describe_validation_error(e)))
            continue

        try:
            created = await create_user(session, request)
        except UserServiceError as e:
            response.failures.append(BulkCreateFailure(email=email, msg=e.message))
            continue
        response.successes.append(created)

    logger.info(
        f"Bulk user creation finished: {len(response.successes)} created, {len(response.failures)} failed"
    )
    return response
