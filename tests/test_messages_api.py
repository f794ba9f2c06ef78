import time

import httpx
import pytest
from fastapi.testclient import TestClient

from chat_relay import main as main_module
from chat_relay.config import get_settings
from chat_relay.dependencies import get_list_store
from chat_relay.exceptions import MessageStoreError

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET,POST,OPTIONS",
    "access-control-allow-headers": "Content-Type",
}


def _assert_cors(response) -> None:
    for name, value in CORS.items():
        assert response.headers[name] == value


def test_post_then_list(client: TestClient) -> None:
    before = int(time.time() * 1000)
    response = client.post("/messages", json={"text": "hi", "author": "bob"})

    assert response.status_code == 201
    assert response.headers["content-type"] == "application/json"
    _assert_cors(response)
    message = response.json()["message"]
    assert message["text"] == "hi"
    assert message["author"] == "bob"
    assert message["id"]
    assert abs(message["timestamp"] - before) < 5000

    listing = client.get("/messages")
    assert listing.status_code == 200
    _assert_cors(listing)
    assert listing.json() == {"messages": [message]}


def test_text_and_author_are_trimmed(client: TestClient) -> None:
    response = client.post("/messages", json={"text": "  hello  ", "author": "   "})

    message = response.json()["message"]
    assert message["text"] == "hello"
    assert message["author"] == "anon"


def test_non_string_author_defaults(client: TestClient) -> None:
    response = client.post("/messages", json={"text": "hello", "author": 42})

    assert response.status_code == 201
    assert response.json()["message"]["author"] == "anon"


def test_empty_text_rejected(client: TestClient) -> None:
    response = client.post("/messages", json={"text": ""})

    assert response.status_code == 400
    assert response.json() == {"error": "Text is required"}
    _assert_cors(response)


def test_text_too_long(client: TestClient) -> None:
    response = client.post("/messages", json={"text": "a" * 2001})

    assert response.status_code == 400
    assert response.json() == {"error": "Text too long (max 2000 chars)"}


def test_text_at_limit_accepted(client: TestClient) -> None:
    response = client.post("/messages", json={"text": "a" * 2000})

    assert response.status_code == 201


def test_author_too_long(client: TestClient) -> None:
    response = client.post("/messages", json={"text": "hi", "author": "b" * 51})

    assert response.status_code == 400
    assert response.json() == {"error": "Author too long (max 50 chars)"}


def test_missing_body(client: TestClient) -> None:
    response = client.post("/messages", content=b"")

    assert response.status_code == 400
    assert response.json() == {"error": "Missing body"}


def test_invalid_json(client: TestClient) -> None:
    response = client.post(
        "/messages", content=b"not-json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON"}


def test_list_is_bounded(client: TestClient) -> None:
    for index in range(203):
        client.post("/messages", json={"text": f"m{index}"})

    messages = client.get("/messages").json()["messages"]

    assert len(messages) == 200
    assert [m["text"] for m in messages[:2]] == ["m202", "m201"]
    assert messages[-1]["text"] == "m3"


def test_repeated_gets_are_identical(client: TestClient) -> None:
    client.post("/messages", json={"text": "hello"})

    assert client.get("/messages").json() == client.get("/messages").json()


def test_options_preflight(client: TestClient) -> None:
    response = client.options("/messages")

    assert response.status_code == 204
    assert response.content == b""
    _assert_cors(response)


def test_unsupported_method(client: TestClient) -> None:
    response = client.delete("/messages")

    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}
    _assert_cors(response)
    assert "allow" in response.headers


class FailingStore:
    async def push_front(self, item: str) -> None:
        raise MessageStoreError("Upstash HTTP 500")

    async def trim(self, length: int) -> None:
        raise MessageStoreError("Upstash HTTP 500")

    async def range(self, count: int) -> list[str]:
        raise MessageStoreError("Upstash HTTP 500")


def test_store_failure_is_internal_error(app, client: TestClient) -> None:
    app.dependency_overrides[get_list_store] = lambda: FailingStore()

    listing = client.get("/messages")
    created = client.post("/messages", json={"text": "hi"})

    for response in (listing, created):
        assert response.status_code == 500
        assert response.json() == {"error": "Internal error", "details": "Upstash HTTP 500"}
        _assert_cors(response)


@pytest.mark.parametrize("body", [b"[1]", b'"x"', b"null"])
def test_non_object_json_rejected(client: TestClient, body: bytes) -> None:
    response = client.post(
        "/messages", content=body, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON"}


def test_text_limit_counts_utf16_units(client: TestClient) -> None:
    at_limit = client.post("/messages", json={"text": "\U0001F600" * 1000})
    over_limit = client.post("/messages", json={"text": "\U0001F600" * 1001})

    assert at_limit.status_code == 201
    assert over_limit.status_code == 400
    assert over_limit.json() == {"error": "Text too long (max 2000 chars)"}


def test_author_limit_counts_utf16_units(client: TestClient) -> None:
    response = client.post("/messages", json={"text": "hi", "author": "\U0001F600" * 26})

    assert response.status_code == 400
    assert response.json() == {"error": "Author too long (max 50 chars)"}


def test_configured_list_store_failure_is_internal_error(
    app, monkeypatch: pytest.MonkeyPatch
) -> None:
    commands = []

    async def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer secret"
        commands.append(request.url)
        return httpx.Response(200, text="<html>gateway</html>")

    real_client = httpx.AsyncClient
    monkeypatch.setattr(
        main_module.httpx,
        "AsyncClient",
        lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
    )
    monkeypatch.setenv("UPSTASH_REDIS_REST_URL", "https://example.upstash.io")
    monkeypatch.setenv("UPSTASH_REDIS_REST_TOKEN", "secret")
    get_settings.cache_clear()

    with TestClient(app) as client:
        listing = client.get("/messages")
        created = client.post("/messages", json={"text": "hi"})

    assert commands
    for response in (listing, created):
        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal error",
            "details": "List-store returned malformed JSON",
        }
        _assert_cors(response)
