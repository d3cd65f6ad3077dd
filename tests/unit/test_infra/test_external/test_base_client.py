"""Tests for BaseHTTPClient error mapping."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from events_handler.core.exceptions import DataNotFound, MalformedResponse, UpstreamUnavailable
from events_handler.infra.external import BaseHTTPClient, bearer_headers

BASE_URL = "https://registry.example"


def make_client(handler, timeout: float = 1.0) -> BaseHTTPClient:
    return BaseHTTPClient(
        service="registry",
        base_url=BASE_URL,
        timeout=timeout,
        headers={"Authorization": "Bearer t"},
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_get_json_returns_decoded_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    async with make_client(handler) as client:
        data = await client.get_json("/things", params={"q": "1"})

    assert data == {"ok": True}
    assert seen[0].url.params["q"] == "1"
    assert seen[0].headers["Authorization"] == "Bearer t"
    assert seen[0].headers["Accept"] == "application/json"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "expected"),
    [
        (404, DataNotFound),
        (410, DataNotFound),
        (500, UpstreamUnavailable),
        (503, UpstreamUnavailable),
        (429, UpstreamUnavailable),
        (401, UpstreamUnavailable),
        (403, UpstreamUnavailable),
        (400, MalformedResponse),
    ],
)
async def test_status_codes_map_to_taxonomy(status_code: int, expected: type[Exception]) -> None:
    async with make_client(lambda request: httpx.Response(status_code, text="nope")) as client:
        with pytest.raises(expected) as exc_info:
            await client.get_json("/things")

    assert exc_info.value.extra["status_code"] == status_code


@pytest.mark.asyncio
async def test_non_json_body_is_malformed() -> None:
    async with make_client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(MalformedResponse):
            await client.get_json("/things")


@pytest.mark.asyncio
async def test_transport_timeout_is_upstream_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async with make_client(handler) as client:
        with pytest.raises(UpstreamUnavailable) as exc_info:
            await client.get_json("/things")

    assert exc_info.value.transient is True


@pytest.mark.asyncio
async def test_whole_exchange_is_bounded_by_timeout() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json={})

    async with make_client(handler, timeout=0.05) as client:
        with pytest.raises(UpstreamUnavailable, match="did not answer"):
            await client.get_json("/things")


@pytest.mark.asyncio
async def test_connection_error_is_upstream_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(UpstreamUnavailable, match="unreachable"):
            await client.post_json("/things", json={"a": 1})


def test_bearer_headers() -> None:
    assert bearer_headers(None) == {}
    assert bearer_headers("") == {}
    assert bearer_headers("abc") == {"Authorization": "Bearer abc"}
