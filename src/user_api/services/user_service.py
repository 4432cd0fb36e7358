"""User record store and single-record operations.

All lookups by ``user_id`` use the public identifier column, never the
internal primary key. The table's unique constraints on ``email`` and
``rollno`` are the authoritative uniqueness guard; the explicit checks
here only produce friendlier errors before the insert or update.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from loguru import logger
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from user_api.core.security import hash_password
from user_api.models.user import User
from user_api.schemas.user import RollnoLookupItem

DUPLICATE_USER_MSG = "Email or Roll Number already exists"
USER_NOT_FOUND_MSG = "User not found"

_UPDATABLE_USER_FIELDS: frozenset[str] = frozenset(
    {"full_name", "email", "password", "department", "college", "rollno", "mobile_no", "status", "admin"}
)
_IMMUTABLE_USER_FIELDS: frozenset[str] = frozenset({"id", "user_id"})


# ---------------------------------------------------------------------------
# Store queries
# ---------------------------------------------------------------------------


async def find_by_email(session: AsyncSession, email: str) -> User | None:
    """Return the user with the given email, if any."""
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def find_by_email_or_rollno(session: AsyncSession, email: str, rollno: str | None = None) -> User | None:
    """Return any user matching the email or, when given, the roll number.

    Args:
        session: The database session.
        email: Email to match.
        rollno: Roll number to match; ``None`` matches nothing.

    Returns:
        The first matching user, or None.
    """
    conditions = [User.email == email]
    if rollno:
        conditions.append(User.rollno == rollno)
    result = await session.execute(select(User).where(or_(*conditions)).limit(1))
    return result.scalars().first()


async def find_by_user_id(session: AsyncSession, user_id: str) -> User | None:
    """Return the user with the given public ID, if any."""
    result = await session.execute(select(User).where(User.user_id == user_id))
    return result.scalar_one_or_none()


async def find_by_rollno(session: AsyncSession, rollno: str) -> User | None:
    """Return the user with the given roll number, if any."""
    result = await session.execute(select(User).where(User.rollno == rollno))
    return result.scalar_one_or_none()


async def find_many_by_rollnos(session: AsyncSession, rollnos: Iterable[str]) -> list[User]:
    """Return all users whose roll number is in ``rollnos``."""
    wanted = list(dict.fromkeys(rollnos))
    if not wanted:
        return []
    result = await session.execute(select(User).where(User.rollno.in_(wanted)))
    return list(result.scalars().all())


async def list_all(session: AsyncSession) -> list[User]:
    """Return every stored user."""
    result = await session.execute(select(User))
    return list(result.scalars().all())


async def list_user_ids(session: AsyncSession) -> list[str]:
    """Return only the public IDs of every stored user."""
    result = await session.execute(select(User.user_id))
    return list(result.scalars().all())


async def insert_user(session: AsyncSession, user: User) -> User:
    """Persist a new user.

    Args:
        session: The database session.
        user: A fully populated, unsaved User.

    Returns:
        The stored User.

    Raises:
        ConflictError: If the email or roll number violates a unique constraint.
        InternalError: If the store fails for any other reason.
    """
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(DUPLICATE_USER_MSG) from None
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Failed to insert user {user.user_id}: {e}")
        raise InternalError("Server Error", error=str(e)) from e
    await session.refresh(user)
    return user


# ---------------------------------------------------------------------------
# Single-record operations
# ---------------------------------------------------------------------------


async def get_user(session: AsyncSession, user_id: str) -> User:
    """Get a user by public ID.

    Raises:
        NotFoundError: If no user has this ID.
    """
    user = await find_by_user_id(session, user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND_MSG)
    return user


def _normalize_updates(updates: Mapping[str, Any]) -> dict[str, Any]:
    """Filter and normalize update fields; hashes any supplied password.

    Raises:
        ValidationError: If a required field is blanked or a flag is not boolean.
    """
    changes: dict[str, Any] = {}
    for field, value in updates.items():
        if field not in _UPDATABLE_USER_FIELDS:
            continue
        if field in ("full_name", "email"):
            if not value:
                msg = "Full name and email cannot be empty"
                raise ValidationError(msg)
            changes[field] = value
        elif field == "password":
            if value:
                changes["password"] = hash_password(value)
        elif field in ("rollno", "mobile_no"):
            changes[field] = value or None
        elif field in ("department", "college"):
            changes[field] = value or ""
        elif field in ("status", "admin"):
            if value is None:
                continue
            if not isinstance(value, bool):
                msg = f"{field.capitalize()} must be a boolean value"
                raise ValidationError(msg)
            changes[field] = value
    return changes


async def update_by_user_id(session: AsyncSession, user_id: str, updates: Mapping[str, Any]) -> User:
    """Merge a partial update into a user.

    Unknown fields are ignored. A supplied password is hashed before it is
    stored. Email and roll number stay unique.

    Args:
        session: The database session.
        user_id: Public ID of the user to update.
        updates: Field names mapped to new values.

    Returns:
        The updated User.

    Raises:
        ValidationError: If ``user_id`` is in ``updates`` or a value is invalid.
        NotFoundError: If the user does not exist.
        ConflictError: If the new email or roll number belongs to another user.
    """
    immutable = sorted(_IMMUTABLE_USER_FIELDS & set(updates))
    if immutable:
        msg = f"Field(s) cannot be changed: {', '.join(immutable)}"
        raise ValidationError(msg)

    user = await get_user(session, user_id)
    changes = _normalize_updates(updates)

    new_email = changes.get("email")
    new_rollno = changes.get("rollno")
    if (new_email and new_email != user.email) or (new_rollno and new_rollno != user.rollno):
        conditions = []
        if new_email:
            conditions.append(User.email == new_email)
        if new_rollno:
            conditions.append(User.rollno == new_rollno)
        result = await session.execute(select(User.id).where(or_(*conditions), User.id != user.id).limit(1))
        if result.scalars().first() is not None:
            raise ConflictError(DUPLICATE_USER_MSG)

    for field, value in changes.items():
        setattr(user, field, value)

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(DUPLICATE_USER_MSG) from None
    await session.refresh(user)
    logger.info(f"Updated user {user_id} fields: {', '.join(sorted(changes)) or 'none'}")
    return user


async def update_last_login(session: AsyncSession, user_id: str, timestamp: datetime | None) -> User:
    """Record the time of a user's last login.

    Raises:
        ValidationError: If no timestamp is given.
        NotFoundError: If the user does not exist.
    """
    if timestamp is None:
        msg = "Last login timestamp is required"
        raise ValidationError(msg)
    user = await get_user(session, user_id)
    user.user_last_login = timestamp
    await session.commit()
    await session.refresh(user)
    return user


async def set_status(session: AsyncSession, user_id: str, status: object) -> User:
    """Activate or deactivate a user.

    Args:
        session: The database session.
        user_id: Public ID of the user.
        status: New status; must be a real boolean.

    Raises:
        ValidationError: If ``status`` is not a boolean.
        NotFoundError: If the user does not exist.
    """
    if not isinstance(status, bool):
        msg = "Status must be a boolean value"
        raise ValidationError(msg)
    user = await get_user(session, user_id)
    user.status = status
    await session.commit()
    await session.refresh(user)
    logger.info(f"User {user_id} status set to {'active' if status else 'inactive'}")
    return user


async def delete_by_user_id(session: AsyncSession, user_id: str) -> User:
    """Permanently remove a user.

    Returns:
        The removed User, detached from the session.

    Raises:
        NotFoundError: If the user does not exist.
    """
    user = await get_user(session, user_id)
    await session.delete(user)
    await session.commit()
    logger.info(f"Deleted user {user_id}")
    return user


async def get_user_id_by_rollno(session: AsyncSession, rollno: str) -> str:
    """Return the public ID of the user holding a roll number.

    Raises:
        NotFoundError: If no user has this roll number.
    """
    user = await find_by_rollno(session, rollno)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND_MSG)
    return user.user_id


async def lookup_user_ids_by_rollnos(session: AsyncSession, rollnos: object) -> list[RollnoLookupItem]:
    """Map each roll number to its user's public ID.

    Args:
        session: The database session.
        rollnos: Non-empty list of roll numbers.

    Returns:
        One item per input roll number, in input order; unmatched roll
        numbers map to ``None``.

    Raises:
        ValidationError: If ``rollnos`` is not a non-empty list of strings.
    """
    if not isinstance(rollnos, list) or not rollnos:
        msg = "Roll numbers must be provided as a non-empty array"
        raise ValidationError(msg)
    if not all(isinstance(r, str) for r in rollnos):
        msg = "Roll numbers must be strings"
        raise ValidationError(msg)

    users = await find_many_by_rollnos(session, rollnos)
    by_rollno = {u.rollno: u.user_id for u in users}
    return [RollnoLookupItem(rollno=r, user_id=by_rollno.get(r)) for r in rollnos]
