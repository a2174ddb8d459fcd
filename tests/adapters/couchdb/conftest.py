"""Shared fixtures for CouchDB adapter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from settee.adapters.couchdb import CouchDBClient
from settee.adapters.http_resilience import ResilientClient
from settee.config.http_resilience import ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

type Handler = Callable[[httpx.Request], httpx.Response]

DATABASE_URL = "http://couch.test/crm"


class FakeCouch:
    """Routes requests by ``(method, path)`` and records them."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler | httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def route(self, method: str, path: str, response: Handler | httpx.Response) -> None:
        self.routes[(method, path)] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, request.url.raw_path.decode().split("?")[0]))
        if response is None:
            return httpx.Response(404, json={"error": "not_found", "reason": "missing"})
        if isinstance(response, httpx.Response):
            # routes may be hit repeatedly; hand out a fresh response each time
            return httpx.Response(
                response.status_code, headers=response.headers, content=response.content
            )
        return response(request)


def make_http(handler: Handler, *, retry: RetryPolicy | None = None) -> ResilientClient:
    config = ResilienceConfig(
        name="couchdb",
        base_url=DATABASE_URL,
        retry=retry or RetryPolicy(total=0),
    )
    return ResilientClient(config, transport=httpx.MockTransport(handler))


@pytest.fixture
def couch() -> FakeCouch:
    return FakeCouch()


@pytest.fixture
def client(couch: FakeCouch) -> Iterator[CouchDBClient]:
    with make_http(couch) as http:
        yield CouchDBClient(http)
