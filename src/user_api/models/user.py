"""User record model: credentials, profile fields, and account flags."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, false, true
from sqlalchemy.orm import Mapped, mapped_column

from user_api.models.base import Base, UUIDMixin


def new_user_id() -> str:
    """Generate a fresh public user identifier."""
    return str(uuid.uuid4())


class User(Base, UUIDMixin):
    """A user account.

    ``user_id`` is the public reference key; ``id`` stays internal to the store.
    ``rollno`` is unique only when set, since unique constraints ignore NULLs.
    """

    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, index=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str] = mapped_column(String(255), nullable=False, default="", server_default="")
    college: Mapped[str] = mapped_column(String(255), nullable=False, default="", server_default="")
    rollno: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    mobile_no: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    user_last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
