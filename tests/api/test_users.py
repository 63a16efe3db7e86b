"""User API tests: status mapping and response shape (in-memory repository)."""

import uuid

from httpx import AsyncClient

PASSWORD = "Testando123@"


async def _create(client: AsyncClient, email: str = "alice@acme.io", username: str = "alice") -> dict:
    response = await client.post(
        "/api/v1/users",
        json={"email": email, "username": username, "password": PASSWORD},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_user_returns_201_without_password(client: AsyncClient) -> None:
    body = await _create(client)
    assert set(body) == {"id", "email", "username", "created_at", "updated_at"}
    assert body["email"] == "alice@acme.io"
    uuid.UUID(body["id"])


async def test_create_user_validation_errors_are_400(client: AsyncClient) -> None:
    response = await client.post("/api/v1/users", json={"email": "alice@acme.io"})
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "VALIDATION_ERROR"
    assert data["details"]["errors"] == [
        "field 'username' is required",
        "field 'password' is required",
    ]


async def test_duplicate_user_is_409(client: AsyncClient) -> None:
    await _create(client)
    response = await client.post(
        "/api/v1/users",
        json={"email": "alice@acme.io", "username": "alice", "password": PASSWORD},
    )
    assert response.status_code == 409
    assert response.json()["message"] == "user with email alice@acme.io already exists"


async def test_get_user_by_id(client: AsyncClient) -> None:
    created = await _create(client)
    response = await client.get(f"/api/v1/users/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


async def test_get_user_malformed_id_is_400(client: AsyncClient) -> None:
    response = await client.get("/api/v1/users/not-a-uuid")
    assert response.status_code == 400
    assert response.json()["message"] == "invalid user ID format"


async def test_get_unknown_user_is_404(client: AsyncClient) -> None:
    response = await client.get(f"/api/v1/users/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["error"] == "NOT_FOUND"


async def test_lookup_by_email_and_username(client: AsyncClient) -> None:
    created = await _create(client)
    by_email = await client.get("/api/v1/users/lookup", params={"email": "alice@acme.io"})
    by_username = await client.get("/api/v1/users/lookup", params={"username": "alice"})
    assert by_email.json()["id"] == created["id"]
    assert by_username.json()["id"] == created["id"]

    neither = await client.get("/api/v1/users/lookup")
    assert neither.status_code == 400


async def test_list_and_batch(client: AsyncClient) -> None:
    alice = await _create(client)
    bob = await _create(client, "bob@acme.io", "bob")

    listed = await client.get("/api/v1/users", params={"limit": 500, "offset": -1})
    assert listed.status_code == 200
    assert {u["id"] for u in listed.json()} == {alice["id"], bob["id"]}

    batch = await client.post("/api/v1/users/batch", json={"ids": [bob["id"]]})
    assert batch.status_code == 200
    assert [u["id"] for u in batch.json()] == [bob["id"]]

    empty = await client.post("/api/v1/users/batch", json={"ids": []})
    assert empty.json() == []


async def test_change_password(client: AsyncClient) -> None:
    created = await _create(client)
    response = await client.put(
        f"/api/v1/users/{created['id']}/password", json={"password": "N3w-Secret"}
    )
    assert response.status_code == 204

    weak = await client.put(
        f"/api/v1/users/{created['id']}/password", json={"password": "weak"}
    )
    assert weak.status_code == 400


async def test_soft_then_hard_delete(client: AsyncClient) -> None:
    created = await _create(client)

    assert (await client.delete(f"/api/v1/users/{created['id']}")).status_code == 204
    assert (await client.get(f"/api/v1/users/{created['id']}")).status_code == 404
    assert (await client.delete(f"/api/v1/users/{created['id']}")).status_code == 204

    hard = await client.delete(f"/api/v1/users/{created['id']}", params={"hard": "true"})
    assert hard.status_code == 204
    gone = await client.delete(f"/api/v1/users/{created['id']}", params={"hard": "true"})
    assert gone.status_code == 404


async def test_store_failure_is_opaque_500(client: AsyncClient, fake_repo) -> None:
    fake_repo.failures["list_users"] = RuntimeError("password authentication failed for user app")
    response = await client.get("/api/v1/users")
    assert response.status_code == 500
    assert response.json()["message"] == "internal server error"
    assert "password authentication" not in response.text


async def test_request_id_is_forwarded(client: AsyncClient) -> None:
    response = await client.get("/api/v1/users", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    generated = await client.get("/api/v1/users", headers={"X-Request-ID": "bad id!"})
    uuid.UUID(generated.headers["X-Request-ID"])


async def test_uncoercible_body_is_400_validation_error(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/users",
        json={"email": 5, "username": "alice", "password": PASSWORD},
    )
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "VALIDATION_ERROR"
    assert data["details"]["errors"] == [
        "field 'email' failed validation for tag 'string_type'"
    ]


async def test_malformed_json_is_400(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/users",
        content=b'{"email": ',
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_non_numeric_query_is_400(client: AsyncClient) -> None:
    response = await client.get("/api/v1/users", params={"limit": "ten"})
    assert response.status_code == 400
    assert response.json()["details"]["errors"] == ["field 'limit' must be a valid number"]


async def test_change_password_for_malformed_id_is_400(client: AsyncClient) -> None:
    response = await client.put(
        "/api/v1/users/not-a-uuid/password", json={"password": "N3w-Secret"}
    )
    assert response.status_code == 400
    assert response.json()["details"]["errors"] == [
        "field 'id' failed validation for tag 'uuid'"
    ]
