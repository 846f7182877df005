import json
import time

import httpx
import pytest
from jose import jwt

from clinic_client.client import create_client
from clinic_client.config import Settings
from clinic_client.services.storage import MemoryCache

BASE_URL = "http://backend.test/api"


def make_token(**claims) -> str:
    payload = {"sub": "doc@x.com", "exp": int(time.time()) + 3600}
    payload.update(claims)
    payload = {k: v for k, v in payload.items() if v is not None}
    return jwt.encode(payload, "test-secret", algorithm="HS256")


class FakeBackend:
    """Minimal REST backend behind httpx.MockTransport. Records every call."""

    def __init__(self):
        self.calls: list[dict] = []
        self.routes: dict = {}
        self.collections: dict[str, list[dict]] = {}
        self._next_id = 100

    def route(self, method: str, path: str, status: int = 200, body=None, handler=None):
        self.routes[(method, path)] = handler or (lambda request: httpx.Response(status, json=body))

    def add_collection(self, path: str, records: list[dict]):
        self.collections[path] = [dict(r) for r in records]

    def count(self, method: str, path: str) -> int:
        return sum(1 for c in self.calls if c["method"] == method and c["path"] == path)

    def _collection_response(self, request: httpx.Request, path: str, body):
        for base, records in self.collections.items():
            if path == base:
                if request.method == "GET":
                    return httpx.Response(200, json=records)
                if request.method == "POST":
                    self._next_id += 1
                    record = {**body, "id": f"{base.strip('/')[:3]}-{self._next_id}"}
                    records.append(record)
                    return httpx.Response(201, json=record)
            if path.startswith(base + "/"):
                entity_id = path[len(base) + 1:]
                match = next((r for r in records if r["id"] == entity_id), None)
                if match is None:
                    return httpx.Response(404, json={"message": f"{entity_id} not found"})
                if request.method == "GET":
                    return httpx.Response(200, json=match)
                if request.method == "PUT":
                    match.update({k: v for k, v in body.items() if k != "id"})
                    return httpx.Response(200, json=match)
                if request.method == "DELETE":
                    records.remove(match)
                    return httpx.Response(204)
        return None

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]
        body = json.loads(request.content) if request.content else None
        self.calls.append({
            "method": request.method,
            "path": path,
            "json": body,
            "authorization": request.headers.get("Authorization"),
        })
        route = self.routes.get((request.method, path))
        if route:
            return route(request)
        response = self._collection_response(request, path, body)
        if response is not None:
            return response
        return httpx.Response(404, json={"message": "no such route"})


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def cache():
    return MemoryCache()


@pytest.fixture
def navigations():
    return []


@pytest.fixture
def settings():
    return Settings(api_base_url=BASE_URL, request_timeout=10.0, cache_path="")


@pytest.fixture
async def client(backend, cache, navigations, settings):
    c = create_client(
        settings=settings,
        cache=cache,
        navigate=navigations.append,
        transport=httpx.MockTransport(backend.handler),
    )
    yield c
    await c.aclose()


@pytest.fixture
def token():
    return make_token
