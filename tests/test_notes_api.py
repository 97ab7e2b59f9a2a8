"""
Notes API - HTTP End-to-End Tests
=================================

What:  Full request/response cycle through create_app() over ASGITransport,
       backed by a per-test SQLite database.

What we test:
    ✅ CRUD scenarios on /v1/notes
    ✅ Bearer auth: 401 without/with unknown token, 403 without scope
    ✅ Legacy /notes surface: unauthenticated, deprecation headers
    ✅ List validation: limit out of range → 400, bad cursor → first page
    ✅ Tag filters from comma-separated and repeated query parameters
    ✅ Error bodies carry the request ID (404, 409, 500)
"""

import base64
import json
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import Depends

from notes_api.database import get_db_session
from notes_api.dependencies import get_note_repository, get_note_service
from notes_api.exceptions import ConflictError, DatabaseError
from notes_api.repositories.note_repository import SqlAlchemyNotesRepository

from conftest import ManualClock


def _use_clock(app, clock):
    def repository_with_clock(db=Depends(get_db_session)):
        return SqlAlchemyNotesRepository(db, clock=clock)

    app.dependency_overrides[get_note_repository] = repository_with_clock


async def _create(client, headers, **body):
    body.setdefault("title", "Test")
    response = await client.post("/v1/notes", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCrudScenarios:

    @pytest.mark.asyncio
    async def test_empty_store_lists_nothing(self, test_client):
        response = await test_client.get("/v1/notes")

        assert response.status_code == 200
        assert response.json() == {"items": [], "nextCursor": None}

    @pytest.mark.asyncio
    async def test_create_returns_note(self, test_client, auth_headers):
        response = await test_client.post(
            "/v1/notes",
            json={"title": "Test", "content": "c", "tags": ["a"]},
            headers=auth_headers["writer"],
        )

        assert response.status_code == 201
        body = response.json()
        assert body["id"]
        assert body["title"] == "Test"
        assert body["content"] == "c"
        assert body["tags"] == ["a"]
        assert body["createdAt"] == body["updatedAt"]
        assert body["createdAt"].endswith("Z")

    @pytest.mark.asyncio
    async def test_create_defaults(self, test_client, auth_headers):
        body = await _create(test_client, auth_headers["writer"], title="Only title")

        assert body["content"] == ""
        assert body["tags"] == []

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers["writer"], tags=["x", "y"])

        response = await test_client.get(f"/v1/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_get_unknown_id(self, test_client):
        response = await test_client.get(f"/v1/notes/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_get_malformed_id(self, test_client):
        response = await test_client.get("/v1/notes/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_update_existing_note(self, app, test_client, auth_headers):
        _use_clock(app, ManualClock())
        created = await _create(test_client, auth_headers["writer"], content="c", tags=["a"])

        response = await test_client.patch(
            f"/v1/notes/{created['id']}",
            json={"title": "New"},
            headers=auth_headers["writer"],
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "New"
        assert body["content"] == "c"
        assert body["tags"] == ["a"]
        assert body["createdAt"] == created["createdAt"]
        assert body["updatedAt"] > created["updatedAt"]

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, test_client, auth_headers):
        response = await test_client.patch(
            f"/v1/notes/{uuid4()}",
            json={"title": "New"},
            headers=auth_headers["writer"],
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"title": None}, {"title": ""}, {"tags": "a"}])
    async def test_update_rejects_invalid_body(self, test_client, auth_headers, body):
        created = await _create(test_client, auth_headers["writer"])

        response = await test_client.patch(
            f"/v1/notes/{created['id']}", json=body, headers=auth_headers["writer"]
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"title": ""}, {"content": "no title"}])
    async def test_create_rejects_invalid_body(self, test_client, auth_headers, body):
        response = await test_client.post("/v1/notes", json=body, headers=auth_headers["writer"])

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_then_delete_again(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers["writer"])
        url = f"/v1/notes/{created['id']}"

        first = await test_client.delete(url, headers=auth_headers["deleter"])
        second = await test_client.delete(url, headers=auth_headers["deleter"])

        assert first.status_code == 204
        assert first.content == b""
        assert second.status_code == 404
        assert (await test_client.get(url)).status_code == 404


class TestAuthorization:

    @pytest.mark.asyncio
    async def test_create_without_token(self, test_client):
        response = await test_client.post("/v1/notes", json={"title": "t"})

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_create_with_unknown_token(self, test_client):
        response = await test_client.post(
            "/v1/notes", json={"title": "t"}, headers={"Authorization": "Bearer nope"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_non_bearer_scheme_is_unauthorized(self, test_client):
        response = await test_client.post(
            "/v1/notes", json={"title": "t"}, headers={"Authorization": "Basic d3JpdGVyOng="}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_without_write_scope(self, test_client, auth_headers):
        response = await test_client.post(
            "/v1/notes", json={"title": "t"}, headers=auth_headers["reader"]
        )

        assert response.status_code == 403
        assert response.json()["details"]["required_scopes"] == ["notes:write"]

    @pytest.mark.asyncio
    async def test_update_without_write_scope(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers["writer"])

        response = await test_client.patch(
            f"/v1/notes/{created['id']}", json={"title": "x"}, headers=auth_headers["deleter"]
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_delete_needs_delete_scope(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers["writer"])
        url = f"/v1/notes/{created['id']}"

        assert (await test_client.delete(url, headers=auth_headers["writer"])).status_code == 403
        assert (await test_client.delete(url, headers=auth_headers["admin"])).status_code == 204

    @pytest.mark.asyncio
    async def test_reads_need_no_token(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers["writer"])

        assert (await test_client.get("/v1/notes")).status_code == 200
        assert (await test_client.get(f"/v1/notes/{created['id']}")).status_code == 200


class TestLegacySurface:

    @pytest.mark.asyncio
    async def test_writes_need_no_token(self, test_client):
        created = await test_client.post("/notes", json={"title": "legacy"})
        assert created.status_code == 201
        note_id = created.json()["id"]

        updated = await test_client.patch(f"/notes/{note_id}", json={"content": "x"})
        deleted = await test_client.delete(f"/notes/{note_id}")

        assert updated.status_code == 200
        assert updated.json()["content"] == "x"
        assert deleted.status_code == 204

    @pytest.mark.asyncio
    async def test_deprecation_headers(self, test_client):
        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert response.headers["Deprecation"] == "true"
        assert response.headers["Sunset"] == "Thu, 31 Dec 2026 23:59:59 GMT"
        assert response.headers["Link"] == '</v1/notes>; rel="successor-version"'

    @pytest.mark.asyncio
    async def test_deprecation_headers_on_no_content(self, test_client):
        created = (await test_client.post("/notes", json={"title": "t"})).json()

        response = await test_client.delete(f"/notes/{created['id']}")

        assert response.status_code == 204
        assert response.headers["Deprecation"] == "true"

    @pytest.mark.asyncio
    async def test_canonical_surface_has_no_deprecation_headers(self, test_client):
        response = await test_client.get("/v1/notes")

        assert "Deprecation" not in response.headers

    @pytest.mark.asyncio
    async def test_both_surfaces_share_data(self, test_client, auth_headers):
        created = await _create(test_client, auth_headers["writer"])

        response = await test_client.get(f"/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]


class TestListing:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", ["0", "101", "-1", "abc"])
    async def test_limit_out_of_range(self, test_client, limit):
        response = await test_client.get("/v1/notes", params={"limit": limit})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_invalid_cursor_returns_first_page(self, test_client, auth_headers):
        await _create(test_client, auth_headers["writer"])

        response = await test_client.get("/v1/notes", params={"cursor": "%%%garbage"})

        assert response.status_code == 200
        assert len(response.json()["items"]) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "created_at", ["0001-01-01T00:00:00+01:00", "9999-12-31T23:59:59-05:00"]
    )
    async def test_out_of_range_cursor_returns_first_page(
        self, test_client, auth_headers, created_at
    ):
        await _create(test_client, auth_headers["writer"])
        payload = json.dumps({"createdAt": created_at, "id": str(uuid4())}).encode("utf-8")
        token = base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")

        response = await test_client.get("/v1/notes", params={"cursor": token})

        assert response.status_code == 200
        assert len(response.json()["items"]) == 1

    @pytest.mark.asyncio
    async def test_paginates_to_the_end(self, app, test_client, auth_headers):
        _use_clock(app, ManualClock())
        created = [
            (await _create(test_client, auth_headers["writer"], title=f"n{i}"))["id"]
            for i in range(5)
        ]

        seen, cursor = [], None
        while True:
            params = {"limit": 2}
            if cursor:
                params["cursor"] = cursor
            body = (await test_client.get("/v1/notes", params=params)).json()
            seen.extend(item["id"] for item in body["items"])
            cursor = body["nextCursor"]
            if cursor is None:
                break

        assert seen == list(reversed(created))

    @pytest.mark.asyncio
    async def test_tags_any_comma_separated(self, app, test_client, auth_headers):
        _use_clock(app, ManualClock())
        writer = auth_headers["writer"]
        only_a = await _create(test_client, writer, tags=["a"])
        both = await _create(test_client, writer, tags=["a", "b"])
        await _create(test_client, writer, tags=["c"])

        response = await test_client.get("/v1/notes", params={"tagsAny": " a , b ,"})

        assert [n["id"] for n in response.json()["items"]] == [both["id"], only_a["id"]]

    @pytest.mark.asyncio
    async def test_tags_all_repeated_parameter(self, app, test_client, auth_headers):
        _use_clock(app, ManualClock())
        writer = auth_headers["writer"]
        await _create(test_client, writer, tags=["a"])
        both = await _create(test_client, writer, tags=["a", "b"])
        await _create(test_client, writer, tags=["b"])

        response = await test_client.get("/v1/notes", params=[("tagsAll", "a"), ("tagsAll", "b")])

        assert [n["id"] for n in response.json()["items"]] == [both["id"]]

    @pytest.mark.asyncio
    async def test_combined_filters(self, app, test_client, auth_headers):
        _use_clock(app, ManualClock())
        writer = auth_headers["writer"]
        await _create(test_client, writer, tags=["a"])
        both = await _create(test_client, writer, tags=["a", "b"])
        only_b = await _create(test_client, writer, tags=["b"])

        response = await test_client.get("/v1/notes", params={"tagsAny": "a,b", "tagsAll": "b"})

        assert [n["id"] for n in response.json()["items"]] == [only_b["id"], both["id"]]


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_request_id_is_echoed_in_error_body(self, test_client):
        response = await test_client.get(
            f"/v1/notes/{uuid4()}", headers={"X-Request-ID": "req-123"}
        )

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.json()["request_id"] == "req-123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/v1/notes")

        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_database_error_is_generic_500(self, app, test_client):
        service = AsyncMock()
        service.list.side_effect = DatabaseError(context={"operation": "list", "secret": "dsn"})
        app.dependency_overrides[get_note_service] = lambda: service

        response = await test_client.get("/v1/notes")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "secret" not in response.text
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_conflict_is_409(self, app, test_client, auth_headers):
        service = AsyncMock()
        service.create.side_effect = ConflictError(context={"operation": "create"})
        app.dependency_overrides[get_note_service] = lambda: service

        response = await test_client.post(
            "/v1/notes",
            json={"title": "t"},
            headers={**auth_headers["writer"], "X-Request-ID": "req-409"},
        )

        assert response.status_code == 409
        assert response.json() == {
            "error": "conflict",
            "message": "The resource conflicts with an existing one",
            "request_id": "req-409",
        }


class TestHealth:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/v1/health"])
    async def test_health(self, test_client, path):
        response = await test_client.get(path)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
