"""Tests for the user management endpoints."""

from collections.abc import Awaitable, Callable

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from user_api.core.security import verify_password
from user_api.models.user import User, new_user_id

MakeUser = Callable[..., Awaitable[User]]


def _student(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "full_name": "Priya Sharma",
        "email": "priya@example.com",
        "department": "CSE",
        "college": "Test College",
        "rollno": "21CS001",
        "mobile_no": "9876543210",
    }
    payload.update(overrides)
    return payload


class TestAddUser:
    """Tests for POST /user/add_user."""

    @pytest.mark.asyncio
    async def test_created(self, client: AsyncClient) -> None:
        resp = await client.post("/user/add_user", json=_student())
        assert resp.status_code == 201
        assert resp.json() == {
            "full_name": "Priya Sharma",
            "email": "priya@example.com",
            "plain_password": "priy3210",
            "department": "CSE",
            "college": "Test College",
            "rollno": "21CS001",
        }

    @pytest.mark.asyncio
    async def test_missing_fields(self, client: AsyncClient) -> None:
        resp = await client.post("/user/add_user", json=_student(department=""))
        assert resp.status_code == 400
        assert resp.json() == {"msg": "Department, college, and roll number are required for non-admin users"}

    @pytest.mark.asyncio
    async def test_duplicate(self, client: AsyncClient, sample_user: User) -> None:
        resp = await client.post("/user/add_user", json=_student(email=sample_user.email))
        assert resp.status_code == 400
        assert resp.json() == {"msg": "Email or Roll Number already exists"}

    @pytest.mark.asyncio
    async def test_email_stored_as_given(self, client: AsyncClient) -> None:
        resp = await client.post("/user/add_user", json=_student(email="Priya.S@College.TEST"))
        assert resp.status_code == 201
        assert resp.json()["email"] == "Priya.S@College.TEST"

        users = (await client.get("/user/read_all_users")).json()
        assert users[0]["email"] == "Priya.S@College.TEST"

    @pytest.mark.asyncio
    async def test_non_string_email_rejected(self, client: AsyncClient) -> None:
        resp = await client.post("/user/add_user", json=_student(email=["a@example.com"]))
        assert resp.status_code == 422
        assert resp.json()["msg"] == "Invalid request"


class TestBulkAddUsers:
    """Tests for POST /user/bulk_add_users."""

    @pytest.mark.asyncio
    async def test_partial_success(self, client: AsyncClient) -> None:
        items = [
            _student(email="a@example.com", rollno="R1"),
            _student(email="a@example.com", rollno="R2"),
            _student(email="c@example.com", rollno="R3"),
        ]
        resp = await client.post("/user/bulk_add_users", json=items)

        assert resp.status_code == 200
        body = resp.json()
        assert body["msg"] == "Bulk user creation completed"
        assert [s["email"] for s in body["successes"]] == ["a@example.com", "c@example.com"]
        assert body["failures"] == [{"email": "a@example.com", "msg": "Email or Roll Number already exists"}]

    @pytest.mark.parametrize("body", [[], {"users": []}])
    @pytest.mark.asyncio
    async def test_requires_non_empty_array(self, client: AsyncClient, body: object) -> None:
        resp = await client.post("/user/bulk_add_users", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"msg": "Users array is required and cannot be empty"}


class TestReadUsers:
    """Tests for the read endpoints."""

    @pytest.mark.asyncio
    async def test_read_all_never_returns_password(self, client: AsyncClient, sample_user: User) -> None:
        resp = await client.get("/user/read_all_users")
        assert resp.status_code == 200
        users = resp.json()
        assert len(users) == 1
        assert users[0]["user_id"] == sample_user.user_id
        assert "password" not in users[0]
        assert "id" not in users[0]

    @pytest.mark.asyncio
    async def test_read_all_empty(self, client: AsyncClient) -> None:
        resp = await client.get("/user/read_all_users")
        assert resp.status_code == 200
        assert resp.json() == []

    @pytest.mark.asyncio
    async def test_get_by_id(self, client: AsyncClient, sample_user: User) -> None:
        resp = await client.get(f"/user/get_user_by_id/{sample_user.user_id}")
        assert resp.status_code == 200
        assert resp.json()["email"] == sample_user.email

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, client: AsyncClient) -> None:
        resp = await client.get(f"/user/get_user_by_id/{new_user_id()}")
        assert resp.status_code == 404
        assert resp.json() == {"msg": "User not found"}

    @pytest.mark.asyncio
    async def test_user_ids(self, client: AsyncClient, make_user: MakeUser) -> None:
        first = await make_user(email="a@example.com", rollno="R1")
        second = await make_user(email="b@example.com", rollno="R2")
        resp = await client.get("/user/user-ids")
        assert resp.status_code == 200
        assert sorted(resp.json()["user_ids"]) == sorted([first.user_id, second.user_id])


class TestUpdateUser:
    """Tests for PUT /user/update_user/{user_id}."""

    @pytest.mark.asyncio
    async def test_updates_and_hides_password(
        self, client: AsyncClient, async_session: AsyncSession, sample_user: User
    ) -> None:
        resp = await client.put(
            f"/user/update_user/{sample_user.user_id}",
            json={"college": "New College", "password": "changed", "user_id": "ignored"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["college"] == "New College"
        assert body["user_id"] == sample_user.user_id
        assert "password" not in body

        await async_session.refresh(sample_user)
        assert verify_password("changed", sample_user.password)

    @pytest.mark.asyncio
    async def test_conflict(self, client: AsyncClient, make_user: MakeUser) -> None:
        first = await make_user(email="a@example.com", rollno="R1")
        await make_user(email="b@example.com", rollno="R2")
        resp = await client.put(f"/user/update_user/{first.user_id}", json={"rollno": "R2"})
        assert resp.status_code == 400
        assert resp.json() == {"msg": "Email or Roll Number already exists"}

    @pytest.mark.asyncio
    async def test_missing(self, client: AsyncClient) -> None:
        resp = await client.put(f"/user/update_user/{new_user_id()}", json={"college": "X"})
        assert resp.status_code == 404


class TestUpdateLastLogin:
    """Tests for PUT /user/update_last_login/{user_id}."""

    @pytest.mark.asyncio
    async def test_updated(self, client: AsyncClient, sample_user: User) -> None:
        resp = await client.put(
            f"/user/update_last_login/{sample_user.user_id}",
            json={"user_last_login": "2024-05-01T09:30:00Z"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["msg"] == "Last login updated successfully"
        assert body["user"]["user_last_login"].startswith("2024-05-01T09:30:00")

    @pytest.mark.asyncio
    async def test_timestamp_required(self, client: AsyncClient, sample_user: User) -> None:
        resp = await client.put(f"/user/update_last_login/{sample_user.user_id}", json={})
        assert resp.status_code == 400
        assert resp.json() == {"msg": "Last login timestamp is required"}


class TestDeleteUser:
    """Tests for DELETE /user/delete_user/{user_id}."""

    @pytest.mark.asyncio
    async def test_deleted(self, client: AsyncClient, sample_user: User) -> None:
        resp = await client.delete(f"/user/delete_user/{sample_user.user_id}")
        assert resp.status_code == 200
        assert resp.json()["msg"] == "User deleted successfully"
        assert resp.json()["user"]["user_id"] == sample_user.user_id

        again = await client.get(f"/user/get_user_by_id/{sample_user.user_id}")
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_missing(self, client: AsyncClient) -> None:
        resp = await client.delete(f"/user/delete_user/{new_user_id()}")
        assert resp.status_code == 404
        assert resp.json() == {"msg": "User not found"}


class TestUpdateUserStatus:
    """Tests for PUT /user/update_user_status/{user_id}."""

    @pytest.mark.asyncio
    async def test_deactivate(self, client: AsyncClient, sample_user: User) -> None:
        resp = await client.put(f"/user/update_user_status/{sample_user.user_id}", json={"status": False})
        assert resp.status_code == 200
        assert resp.json() == {
            "msg": "User status updated successfully to inactive",
            "user": {"user_id": sample_user.user_id, "full_name": "Test Student", "status": False},
        }

    @pytest.mark.asyncio
    async def test_activate(self, client: AsyncClient, sample_user: User) -> None:
        resp = await client.put(f"/user/update_user_status/{sample_user.user_id}", json={"status": True})
        assert resp.json()["msg"] == "User status updated successfully to active"

    @pytest.mark.parametrize("status", ["false", 0, None])
    @pytest.mark.asyncio
    async def test_non_boolean(self, client: AsyncClient, sample_user: User, status: object) -> None:
        resp = await client.put(f"/user/update_user_status/{sample_user.user_id}", json={"status": status})
        assert resp.status_code == 400
        assert resp.json() == {"msg": "Status must be a boolean value"}


class TestRollnoEndpoints:
    """Tests for roll number lookups."""

    @pytest.mark.asyncio
    async def test_get_user_id_by_rollno(self, client: AsyncClient, sample_user: User) -> None:
        resp = await client.get("/user/get_user_id_by_rollno/R001")
        assert resp.status_code == 200
        assert resp.json() == {"user_id": sample_user.user_id}

    @pytest.mark.asyncio
    async def test_get_user_id_by_rollno_missing(self, client: AsyncClient) -> None:
        resp = await client.get("/user/get_user_id_by_rollno/NOPE")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_bulk_lookup_order(self, client: AsyncClient, make_user: MakeUser) -> None:
        r1 = await make_user(email="a@example.com", rollno="R1")
        r2 = await make_user(email="b@example.com", rollno="R2")
        resp = await client.post("/user/users/bulk", json={"rollnos": ["R2", "X9", "R1"]})
        assert resp.status_code == 200
        assert resp.json() == [
            {"rollno": "R2", "user_id": r2.user_id},
            {"rollno": "X9", "user_id": None},
            {"rollno": "R1", "user_id": r1.user_id},
        ]

    @pytest.mark.parametrize("body", [{"rollnos": []}, {}, {"rollnos": "R1"}])
    @pytest.mark.asyncio
    async def test_bulk_lookup_invalid(self, client: AsyncClient, body: dict) -> None:
        resp = await client.post("/user/users/bulk", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"msg": "Roll numbers must be provided as a non-empty array"}
