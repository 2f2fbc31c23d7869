"""
Tests for the members API endpoints.

Runs the full application against an in-memory database.
Validates status codes, headers, the camelCase payloads and the
failure envelope.
"""

import base64
import json

import pytest
from fastapi.testclient import TestClient

from app.domain.ports import CacheProvider
from app.interfaces.members.dependencies import get_member_repository
from app.main import create_app
from tests.factories import member_id

MEMBERS = "/api/v1/members"
CURSOR = "/api/v1/members:cursor"


def _create(client, index: int, **overrides):
    body = {"name": f"member{index}", "email": f"member{index}@example.com", "age": 30}
    body.update(overrides)
    return client.post(MEMBERS, json=body)


def _seed(client, count: int) -> list[dict]:
    created = []
    for index in range(1, count + 1):
        response = _create(client, index)
        assert response.status_code == 201
        created.append(response.json())
    return created


class TestCreateMember:
    """Tests for POST /api/v1/members."""

    def test_created_with_location(self, client) -> None:
        response = client.post(
            MEMBERS,
            json={"name": "Ada", "email": "ada@example.com", "age": 36},
            headers={"x-user-id": "alice"},
        )

        assert response.status_code == 201
        body = response.json()
        assert response.headers["location"] == f"{MEMBERS}/{body['id']}"
        assert body["name"] == "Ada"
        assert body["createdBy"] == body["changedBy"] == "alice"
        assert set(body) == {
            "id", "name", "email", "age", "createdAt", "createdBy", "changedAt", "changedBy",
        }

    def test_duplicate_email_conflict(self, client) -> None:
        _create(client, 1)
        response = client.post(
            MEMBERS,
            json={"name": "someone", "email": "member1@example.com"},
            headers={"x-trace-id": "trace-dup"},
        )

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "DuplicateEmail"
        assert body["traceId"] == "trace-dup"
        assert body["data"]["email"] == "member1@example.com"

    def test_duplicate_name_is_bad_request(self, client) -> None:
        _create(client, 1)
        response = _create(client, 2, name="member1")
        assert response.status_code == 400
        assert response.json()["code"] == "ValidationError"

    @pytest.mark.parametrize(
        "body",
        [
            {"email": "a@example.com"},
            {"name": "", "email": "a@example.com"},
            {"name": "x" * 21, "email": "a@example.com"},
            {"name": "Ada", "email": "no-at-sign"},
            {"name": "Ada", "email": "a@example.com", "age": 151},
        ],
    )
    def test_invalid_body(self, client, body) -> None:
        response = client.post(MEMBERS, json=body)
        assert response.status_code == 400
        assert response.json()["code"] == "ValidationError"


class TestGetMember:
    """Tests for GET /api/v1/members/{id}."""

    def test_found(self, client) -> None:
        (created,) = _seed(client, 1)
        response = client.get(f"{MEMBERS}/{created['id']}")
        assert response.status_code == 200
        assert response.json() == created

    def test_not_found(self, client) -> None:
        response = client.get(f"{MEMBERS}/{member_id(404)}")
        assert response.status_code == 404
        assert response.json()["code"] == "NotFound"

    def test_malformed_id(self, client) -> None:
        response = client.get(f"{MEMBERS}/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["data"] == {"field": "id"}


class TestUpdateAndDelete:
    """Tests for PUT and DELETE /api/v1/members/{id}."""

    def test_update(self, client) -> None:
        (created,) = _seed(client, 1)
        response = client.put(
            f"{MEMBERS}/{created['id']}",
            json={"name": "renamed", "email": "renamed@example.com"},
            headers={"x-user-id": "bob"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "renamed"
        assert body["age"] is None
        assert body["changedBy"] == "bob"
        assert body["createdBy"] == created["createdBy"]

    def test_update_to_taken_email(self, client) -> None:
        first, second = _seed(client, 2)
        response = client.put(
            f"{MEMBERS}/{second['id']}",
            json={"name": second["name"], "email": first["email"]},
        )
        assert response.status_code == 409

    def test_update_missing(self, client) -> None:
        response = client.put(
            f"{MEMBERS}/{member_id(404)}", json={"name": "a", "email": "a@example.com"}
        )
        assert response.status_code == 404

    def test_delete(self, client) -> None:
        (created,) = _seed(client, 1)

        response = client.delete(f"{MEMBERS}/{created['id']}")

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"{MEMBERS}/{created['id']}").status_code == 404
        assert client.delete(f"{MEMBERS}/{created['id']}").status_code == 404


class TestOffsetPaging:
    """Tests for GET /api/v1/members."""

    def test_empty_store(self, client) -> None:
        response = client.get(MEMBERS)
        assert response.status_code == 200
        assert response.json() == {
            "items": [],
            "pageIndex": 0,
            "pageSize": 10,
            "totalCount": 0,
            "totalPages": 0,
            "hasPreviousPage": False,
            "hasNextPage": False,
        }

    def test_last_page(self, client) -> None:
        created = _seed(client, 5)
        response = client.get(MEMBERS, headers={"x-page-index": "2", "x-page-size": "2"})

        body = response.json()
        assert [item["id"] for item in body["items"]] == [created[4]["id"]]
        assert body["totalCount"] == 5
        assert body["totalPages"] == 3
        assert body["hasPreviousPage"] is True
        assert body["hasNextPage"] is False

    def test_writes_are_visible_through_cache(self, client) -> None:
        _seed(client, 1)
        assert client.get(MEMBERS).json()["totalCount"] == 1
        _create(client, 2)
        assert client.get(MEMBERS).json()["totalCount"] == 2

    def test_no_cache_header(self, client) -> None:
        _seed(client, 1)
        cache: CacheProvider = client.app.state.cache
        client.get(MEMBERS)
        client.portal.call(cache.set, "members:offset:0:10", {"items": [], "totalCount": 9}, 60)

        assert client.get(MEMBERS).json()["totalCount"] == 9
        fresh = client.get(MEMBERS, headers={"cache-control": "no-cache"})
        assert fresh.json()["totalCount"] == 1

    @pytest.mark.parametrize(
        "headers",
        [
            {"x-page-index": "-1"},
            {"x-page-size": "0"},
            {"x-page-size": "101"},
            {"x-page-index": "abc"},
            {"x-page-index": "4611686018427387904"},
        ],
    )
    def test_invalid_paging_headers(self, client, headers) -> None:
        response = client.get(MEMBERS, headers=headers)
        assert response.status_code == 400
        assert response.json()["code"] == "ValidationError"


class TestCursorPaging:
    """Tests for GET /api/v1/members:cursor."""

    def test_walks_all_pages(self, client) -> None:
        created = _seed(client, 5)
        seen = []
        token = None
        pages = 0
        while True:
            headers = {"x-page-size": "2"}
            if token:
                headers["x-next-page-token"] = token
            body = client.get(CURSOR, headers=headers).json()
            pages += 1
            seen.extend(item["id"] for item in body["items"])
            assert body["previousPageToken"] is None
            token = body["nextPageToken"]
            assert body["hasNextPage"] is (token is not None)
            if token is None:
                break

        assert pages == 3
        assert seen == [member["id"] for member in created]

    def test_malformed_token(self, client) -> None:
        response = client.get(CURSOR, headers={"x-next-page-token": "garbage!!"})
        assert response.status_code == 400
        assert response.json()["data"] == {"field": "nextPageToken"}

    def test_sequence_beyond_store_range(self, client) -> None:
        token = base64.b64encode(
            json.dumps({"id": "x", "sequenceId": 2**70}).encode("utf-8")
        ).decode("ascii")
        response = client.get(CURSOR, headers={"x-next-page-token": token})
        assert response.status_code == 400
        assert response.json()["code"] == "ValidationError"

    def test_pages_bypass_cache(self, client) -> None:
        _seed(client, 3)
        body = client.get(CURSOR, headers={"x-page-size": "2"}).json()
        assert len(body["items"]) == 2
        assert client.app.state.cache._entries == {}

    def test_empty_store(self, client) -> None:
        body = client.get(CURSOR).json()
        assert body["items"] == []
        assert body["nextPageToken"] is None


class TestCrossCutting:
    """Trace ids, unknown routes, unexpected errors and health."""

    def test_trace_id_is_echoed(self, client) -> None:
        response = client.get(MEMBERS, headers={"x-trace-id": "trace-abc"})
        assert response.headers["x-trace-id"] == "trace-abc"

    def test_trace_id_is_generated(self, client) -> None:
        response = client.get(f"{MEMBERS}/{member_id(404)}")
        assert response.headers["x-trace-id"]
        assert response.json()["traceId"] == response.headers["x-trace-id"]

    def test_unknown_route(self, client) -> None:
        response = client.get("/api/v1/nothing-here")
        assert response.status_code == 404
        assert response.json()["code"] == "NotFound"

    def test_health(self, client) -> None:
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_unexpected_exception_is_hidden(self, settings) -> None:
        class ExplodingRepository:
            async def get_by_id(self, entity_id):
                raise RuntimeError("connection string leaked")

        app = create_app(settings)
        app.dependency_overrides[get_member_repository] = ExplodingRepository
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get(
                f"{MEMBERS}/{member_id(1)}", headers={"x-trace-id": "trace-500"}
            )

        assert response.status_code == 500
        assert response.json() == {
            "code": "Unknown",
            "message": "An unexpected error occurred",
            "traceId": "trace-500",
        }
        assert response.headers["x-trace-id"] == "trace-500"

    def test_rate_limit(self, settings) -> None:
        limited = settings.model_copy(
            update={"rate_limit_enabled": True, "rate_limit_default": "2/minute"}
        )
        with TestClient(create_app(limited)) as client:
            statuses = [client.get("/api/v1/health").status_code for _ in range(3)]
            response = client.get("/api/v1/health")

        assert statuses == [200, 200, 429]
        assert response.status_code == 429
        body = response.json()
        assert body["code"] == "InvalidOperation"
        assert body["traceId"] == response.headers["x-trace-id"]

    def test_rate_limit_covers_member_routes(self, settings) -> None:
        limited = settings.model_copy(
            update={"rate_limit_enabled": True, "rate_limit_default": "1/minute"}
        )
        with TestClient(create_app(limited)) as client:
            first = client.get(MEMBERS)
            second = client.get(MEMBERS)

        assert first.status_code == 200
        assert second.status_code == 429
        assert second.json()["data"]["limit"]
