"""Unit tests for the HTTP transport."""

import json

import httpx
import pytest

from inventory_client.api.errors import AuthError, HttpError, NetworkError
from inventory_client.api.transport import Transport


# ── Helpers ──


def _make_transport(handler) -> Transport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Transport("http://backend.test/", http_client=client)


def _recording_handler(seen: list, response: httpx.Response | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return response if response is not None else httpx.Response(200, json={"ok": True})
    return handler


# ── Tests ──


@pytest.mark.asyncio
async def test_get_sends_bearer_token_and_drops_none_params():
    seen = []
    transport = _make_transport(_recording_handler(seen))
    body = await transport.request("/api/productos", params={"page": 2, "search": None}, token="abc")
    assert body == {"ok": True}
    req = seen[0]
    assert req.method == "GET"
    assert req.headers["Authorization"] == "Bearer abc"
    assert req.url.path == "/api/productos"
    assert dict(req.url.params) == {"page": "2"}


@pytest.mark.asyncio
async def test_no_token_means_no_authorization_header():
    seen = []
    transport = _make_transport(_recording_handler(seen))
    await transport.request("/api/misc")
    assert "Authorization" not in seen[0].headers


@pytest.mark.asyncio
async def test_legacy_api_prefix_is_normalised():
    seen = []
    transport = _make_transport(_recording_handler(seen))
    await transport.request("/(api)/ventas", params={"type": "ventas"})
    assert seen[0].url.path == "/api/ventas"


@pytest.mark.asyncio
async def test_json_body_is_sent():
    seen = []
    transport = _make_transport(_recording_handler(seen))
    await transport.request("/api/proveedores", method="post", json={"nombre": "Acme"})
    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {"nombre": "Acme"}


@pytest.mark.asyncio
async def test_server_error_message_is_used():
    transport = _make_transport(
        _recording_handler([], httpx.Response(409, json={"error": "SKU already exists"}))
    )
    with pytest.raises(HttpError) as exc_info:
        await transport.request("/api/productos", method="POST", json={})
    assert exc_info.value.status == 409
    assert exc_info.value.message == "SKU already exists"


@pytest.mark.asyncio
async def test_message_field_is_used_when_no_error_field():
    transport = _make_transport(
        _recording_handler([], httpx.Response(400, json={"message": "Bad page size"}))
    )
    with pytest.raises(HttpError, match="Bad page size"):
        await transport.request("/api/productos")


@pytest.mark.asyncio
async def test_status_fallback_message():
    transport = _make_transport(_recording_handler([], httpx.Response(503, text="down")))
    with pytest.raises(HttpError) as exc_info:
        await transport.request("/api/productos")
    assert exc_info.value.message == "HTTP 503: Service Unavailable"


@pytest.mark.asyncio
async def test_unauthorized_is_an_auth_error():
    transport = _make_transport(
        _recording_handler([], httpx.Response(401, json={"error": "Token expired"}))
    )
    with pytest.raises(AuthError, match="Token expired"):
        await transport.request("/api/auth/me", token="old")


@pytest.mark.asyncio
async def test_connection_failure_is_a_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    transport = _make_transport(handler)
    with pytest.raises(NetworkError) as exc_info:
        await transport.request("/api/productos")
    assert not isinstance(exc_info.value, HttpError)


@pytest.mark.asyncio
async def test_empty_and_text_bodies():
    transport = _make_transport(_recording_handler([], httpx.Response(204)))
    assert await transport.request("/api/productos", method="DELETE", params={"id": 1}) is None

    transport = _make_transport(_recording_handler([], httpx.Response(200, text="pong")))
    assert await transport.request("/api/ping") == "pong"


def test_build_url_passes_absolute_urls_through():
    t = Transport("http://backend.test")
    assert t.build_url("https://cdn.test/x") == "https://cdn.test/x"
    assert t.build_url("api/productos") == "http://backend.test/api/productos"
