"""
Global fixtures for the test suite.

This `conftest.py` file provides fixtures that are available to all tests
in the `tests/` directory and its subdirectories.

Fixtures:
- `small_resources`: Minimal, already-normalized resources for quickly
  exercising any backend.
- `fake_consul`: An in-memory stand-in for the Consul HTTP KV API, served
  through `httpx.MockTransport`, so the Consul backend runs without a cluster.

Run all tests with:
    pytest -v
"""

import base64
from urllib.parse import unquote

import httpx
import pytest

from shaman_cache.resource import Record, Resource


@pytest.fixture
def small_resources():
    """Normalized resources keyed by a short name."""
    return {
        "example": Resource(
            domain="example.com.",
            records=[Record(ttl=60, class_="IN", type="A", address="127.0.0.1")],
        ),
        "mail": Resource(
            domain="mail.example.com.",
            records=[
                Record(ttl=300, class_="IN", type="A", address="10.0.0.25"),
                Record(ttl=300, class_="IN", type="AAAA", address="fd00::25"),
            ],
        ),
        "empty": Resource(domain="empty.example.org.", records=[]),
    }


class FakeConsul:
    """Minimal Consul agent: status/leader plus the KV endpoints the backend uses."""

    def __init__(self, leader: str = "10.0.0.1:8300"):
        self.leader = leader
        self.kv: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = unquote(request.url.path)
        params = request.url.params

        if path == "/v1/status/leader":
            return httpx.Response(200, json=self.leader)
        if not path.startswith("/v1/kv/"):
            return httpx.Response(404)

        key = path[len("/v1/kv/") :]
        if request.method == "PUT":
            self.kv[key] = request.content
            return httpx.Response(200, json=True)
        if request.method == "DELETE":
            if "recurse" in params:
                for k in [k for k in self.kv if k.startswith(key)]:
                    del self.kv[k]
            else:
                self.kv.pop(key, None)
            return httpx.Response(200, json=True)
        if request.method == "GET":
            if "recurse" in params:
                entries = [{"Key": k, "Value": base64.b64encode(v).decode()} for k, v in sorted(self.kv.items()) if k.startswith(key)]
                if not entries:
                    return httpx.Response(404)
                return httpx.Response(200, json=entries)
            if key not in self.kv:
                return httpx.Response(404)
            return httpx.Response(200, content=self.kv[key])
        return httpx.Response(405)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_consul():
    """In-memory Consul agent."""
    return FakeConsul()
