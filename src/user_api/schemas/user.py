"""User and login Pydantic v2 schemas.

Request schemas keep every field optional: the provisioning and update
services decide which fields are required, so that each missing field gets
its own message and bulk items fail one at a time.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


class LoginRequest(BaseModel):
    """Login request with email and password."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    """Successful login: session token plus a summary of the user.

    ``user`` holds ``user_id``, ``full_name`` and ``admin``; non-admin
    responses also carry ``mod_poc_id``.
    """

    msg: str
    token: str
    user: dict[str, Any]


class UserCreateRequest(BaseModel):
    """Input for single or bulk user creation."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    full_name: str | None = None
    email: str | None = None
    password: str | None = None
    department: str | None = None
    college: str | None = None
    rollno: str | None = None
    mobile_no: str | None = None
    status: StrictBool | None = None
    admin: StrictBool | None = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, v: object) -> object:
        return None if v == "" else v


class UserCreateResponse(BaseModel):
    """Created user, including the plaintext password that was set."""

    full_name: str
    email: str
    plain_password: str
    department: str
    college: str
    rollno: str | None = None


class BulkCreateFailure(BaseModel):
    """One rejected item of a bulk creation request."""

    email: str = Field(description="Email of the rejected item, or 'unknown' when absent")
    msg: str


class BulkCreateResponse(BaseModel):
    """Outcome of a bulk creation request, in input order."""

    msg: str = "Bulk user creation completed"
    successes: list[UserCreateResponse] = Field(default_factory=list)
    failures: list[BulkCreateFailure] = Field(default_factory=list)


class UserUpdateRequest(BaseModel):
    """Partial update of a user's fields.

    Fields outside this schema (``user_id`` included) are ignored.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    full_name: str | None = None
    email: str | None = None
    password: str | None = None
    department: str | None = None
    college: str | None = None
    rollno: str | None = None
    mobile_no: str | None = None
    status: StrictBool | None = None
    admin: StrictBool | None = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, v: object) -> object:
        return None if v == "" else v


class LastLoginUpdateRequest(BaseModel):
    """Request to record a login timestamp."""

    user_last_login: datetime | None = None


class StatusUpdateRequest(BaseModel):
    """Request to toggle a user's status; the type is checked by the service."""

    status: Any = None


class RollnoLookupRequest(BaseModel):
    """Request to map roll numbers to user IDs; validated by the service."""

    rollnos: Any = None


class RollnoLookupItem(BaseModel):
    """One roll number and the matching user ID, if any."""

    rollno: str
    user_id: str | None = None


class UserResponse(BaseModel):
    """Stored user as returned by read endpoints (never includes the password)."""

    user_id: str
    full_name: str
    email: str
    department: str
    college: str
    rollno: str | None = None
    mobile_no: str | None = None
    status: bool
    admin: bool
    user_last_login: datetime | None = None

    model_config = {"from_attributes": True}


class UserMessageResponse(BaseModel):
    """A message together with the affected user."""

    msg: str
    user: UserResponse


class UserStatusSummary(BaseModel):
    """Status fields echoed after a status change."""

    user_id: str
    full_name: str
    status: bool


class StatusUpdateResponse(BaseModel):
    """Result of a status change."""

    msg: str
    user: UserStatusSummary


class UserIdsResponse(BaseModel):
    """All public user IDs."""

    user_ids: list[str]


class UserIdResponse(BaseModel):
    """A single public user ID."""

    user_id: str
