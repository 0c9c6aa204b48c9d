"""
Blog API Backend - /api/users Endpoint Tests
=============================================

What:  End-to-end tests through the ASGI app with an in-memory database.

What we test:
    ✅ POST then GET returns the same user; list includes it with X-Total-Count
    ✅ Unknown and malformed ids are 404
    ✅ Malformed / incomplete bodies are 400 decode_error
    ✅ Duplicate username is 409
    ✅ PUT updates; DELETE refuses while posts exist, then succeeds
    ✅ Unexpected database failures are a generic 500
"""

import pytest
from unittest.mock import AsyncMock, patch
from uuid import uuid4

from conftest import create_blogpost, create_user

from blogapi.exceptions import DatabaseError
from blogapi.services.user_service import user_service


class TestCreateAndRead:

    @pytest.mark.asyncio
    async def test_create_then_get(self, test_client):
        created = await create_user(test_client, name="Ann", username="ann1")

        response = await test_client.get(f"/api/users/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]
        assert response.json()["name"] == "Ann"
        assert response.json()["username"] == "ann1"

    @pytest.mark.asyncio
    async def test_list_includes_created(self, test_client):
        ids = {(await create_user(test_client, username=f"user{i}"))["id"] for i in range(3)}

        response = await test_client.get("/api/users")

        assert response.status_code == 200
        assert ids <= {u["id"] for u in response.json()}
        assert int(response.headers["X-Total-Count"]) >= 3

    @pytest.mark.asyncio
    async def test_list_window(self, test_client):
        for i in range(3):
            await create_user(test_client, username=f"user{i}")

        response = await test_client.get("/api/users", params={"limit": 1, "offset": 1})

        assert response.status_code == 200
        assert len(response.json()) == 1
        assert response.headers["X-Total-Count"] == "3"

    @pytest.mark.asyncio
    async def test_list_limit_out_of_range(self, test_client):
        response = await test_client.get("/api/users", params={"limit": 0})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_unknown_id(self, test_client):
        response = await test_client.get(f"/api/users/{uuid4()}")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["request_id"]

    @pytest.mark.asyncio
    async def test_malformed_id(self, test_client):
        response = await test_client.get("/api/users/not-a-uuid")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestCreateErrors:

    @pytest.mark.asyncio
    async def test_malformed_json(self, test_client):
        response = await test_client.post(
            "/api/users",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "decode_error"

    @pytest.mark.asyncio
    async def test_missing_field(self, test_client):
        response = await test_client.post("/api/users", json={"name": "Ann"})

        assert response.status_code == 400
        assert response.json()["error"] == "decode_error"

    @pytest.mark.asyncio
    async def test_blank_username(self, test_client):
        response = await test_client.post("/api/users", json={"name": "Ann", "username": "   "})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_username(self, test_client):
        await create_user(test_client, username="ann1")

        response = await test_client.post("/api/users", json={"name": "Other", "username": "ann1"})

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_update(self, test_client):
        user = await create_user(test_client)

        response = await test_client.put(f"/api/users/{user['id']}", json={"name": "Annie"})

        assert response.status_code == 200
        assert response.json()["name"] == "Annie"
        assert response.json()["username"] == user["username"]

    @pytest.mark.asyncio
    async def test_update_to_taken_username(self, test_client):
        await create_user(test_client, username="ann1")
        bob = await create_user(test_client, name="Bob", username="bob1")

        response = await test_client.put(f"/api/users/{bob['id']}", json={"username": "ann1"})

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_update_without_fields(self, test_client):
        user = await create_user(test_client)

        response = await test_client.put(f"/api/users/{user['id']}", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_delete_blocked_by_posts(self, test_client):
        user = await create_user(test_client)
        post = await create_blogpost(test_client, user["id"])

        blocked = await test_client.delete(f"/api/users/{user['id']}")
        assert blocked.status_code == 409

        assert (await test_client.delete(f"/api/blogposts/{post['id']}")).status_code == 204
        assert (await test_client.delete(f"/api/users/{user['id']}")).status_code == 204
        assert (await test_client.get(f"/api/users/{user['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_user_blogposts(self, test_client):
        ann = await create_user(test_client, username="ann1")
        bob = await create_user(test_client, name="Bob", username="bob1")
        mine = await create_blogpost(test_client, ann["id"], title="Mine")
        await create_blogpost(test_client, bob["id"], title="Theirs")

        response = await test_client.get(f"/api/users/{ann['id']}/blogposts")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [mine["id"]]


class TestServerErrors:

    @pytest.mark.asyncio
    async def test_database_error_is_generic_500(self, test_client):
        with patch.object(user_service, "list_users", AsyncMock(side_effect=DatabaseError())):
            response = await test_client.get("/api/users")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "SQL" not in body["message"]
