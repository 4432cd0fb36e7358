"""User management API endpoints.

POST /add_user, POST /bulk_add_users, GET /read_all_users,
GET /get_user_by_id/{user_id}, PUT /update_user/{user_id},
PUT /update_last_login/{user_id}, DELETE /delete_user/{user_id},
PUT /update_user_status/{user_id}, GET /user-ids,
GET /get_user_id_by_rollno/{rollno}, POST /users/bulk.

Domain errors raised by the services propagate to the handlers in
``user_api.api.errors``.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.dependencies import get_async_session
from user_api.schemas.common import ErrorResponse
from user_api.schemas.user import (
    BulkCreateResponse,
    LastLoginUpdateRequest,
    RollnoLookupItem,
    RollnoLookupRequest,
    StatusUpdateRequest,
    StatusUpdateResponse,
    UserCreateRequest,
    UserCreateResponse,
    UserIdResponse,
    UserIdsResponse,
    UserMessageResponse,
    UserResponse,
    UserStatusSummary,
    UserUpdateRequest,
)
from user_api.services import provisioning_service, user_service

users_router = APIRouter(
    tags=["users"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@users_router.post("/add_user", response_model=UserCreateResponse, status_code=status.HTTP_201_CREATED)
async def add_user(
    body: UserCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> UserCreateResponse:
    """Create one user; the response carries the plaintext password once."""
    return await provisioning_service.create_user(session, body)


@users_router.post("/bulk_add_users", response_model=BulkCreateResponse)
async def bulk_add_users(
    body: Annotated[Any, Body()],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> BulkCreateResponse:
    """Create many users; each item succeeds or fails on its own."""
    return await provisioning_service.bulk_create_users(session, body)


@users_router.get("/read_all_users", response_model=list[UserResponse])
async def read_all_users(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> list[UserResponse]:
    """List every user."""
    users = await user_service.list_all(session)
    return [UserResponse.model_validate(u) for u in users]


@users_router.get("/get_user_by_id/{user_id}", response_model=UserResponse)
async def get_user_by_id(
    user_id: str,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> UserResponse:
    """Get one user by public ID."""
    user = await user_service.get_user(session, user_id)
    return UserResponse.model_validate(user)


@users_router.put("/update_user/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    body: UserUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> UserResponse:
    """Partially update a user; a new password is hashed before storage."""
    user = await user_service.update_by_user_id(session, user_id, body.model_dump(exclude_unset=True))
    return UserResponse.model_validate(user)


@users_router.put("/update_last_login/{user_id}", response_model=UserMessageResponse)
async def update_last_login(
    user_id: str,
    body: LastLoginUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> UserMessageResponse:
    """Record a user's last login time."""
    user = await user_service.update_last_login(session, user_id, body.user_last_login)
    return UserMessageResponse(msg="Last login updated successfully", user=UserResponse.model_validate(user))


@users_router.delete("/delete_user/{user_id}", response_model=UserMessageResponse)
async def delete_user(
    user_id: str,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> UserMessageResponse:
    """Permanently delete a user."""
    user = await user_service.delete_by_user_id(session, user_id)
    return UserMessageResponse(msg="User deleted successfully", user=UserResponse.model_validate(user))


@users_router.put("/update_user_status/{user_id}", response_model=StatusUpdateResponse)
async def update_user_status(
    user_id: str,
    body: StatusUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> StatusUpdateResponse:
    """Activate or deactivate a user; ``status`` must be a JSON boolean."""
    user = await user_service.set_status(session, user_id, body.status)
    return StatusUpdateResponse(
        msg=f"User status updated successfully to {'active' if user.status else 'inactive'}",
        user=UserStatusSummary(user_id=user.user_id, full_name=user.full_name, status=user.status),
    )


@users_router.get("/user-ids", response_model=UserIdsResponse)
async def list_user_ids(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> UserIdsResponse:
    """List the public IDs of all users."""
    return UserIdsResponse(user_ids=await user_service.list_user_ids(session))


@users_router.get("/get_user_id_by_rollno/{rollno}", response_model=UserIdResponse)
async def get_user_id_by_rollno(
    rollno: str,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> UserIdResponse:
    """Get the public ID of the user holding a roll number."""
    return UserIdResponse(user_id=await user_service.get_user_id_by_rollno(session, rollno))


@users_router.post("/users/bulk", response_model=list[RollnoLookupItem])
async def get_user_ids_by_rollnos(
    body: RollnoLookupRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> list[RollnoLookupItem]:
    """Map roll numbers to user IDs in input order; unmatched ones map to null."""
    return await user_service.lookup_user_ids_by_rollnos(session, body.rollnos)
