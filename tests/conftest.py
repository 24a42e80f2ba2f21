import httpx
import pytest

from tourney_client.app import build_context
from tourney_client.storage import CredentialStore

BASE_URL = "http://api.test/api/v1"


class FakeServer:
    """Routes requests to canned responses and records what was sent."""

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, response):
        self.routes[(method, "/api/v1" + path)] = response

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "no route"})
        if callable(route):
            route = await route(request)
        return route

    def sent(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests
                if r.method == method and r.url.path == "/api/v1" + path]


@pytest.fixture()
def db_path(tmp_path):
    return str(tmp_path / "tourney.db")


@pytest.fixture()
def server():
    return FakeServer()


@pytest.fixture()
def make_context(db_path, server):
    def factory():
        return build_context(db_path=db_path, base_url=BASE_URL,
                             transport=httpx.MockTransport(server.handle))
    return factory


@pytest.fixture()
def stored_token(db_path):
    def put(token):
        CredentialStore(db_path).set(token)
    return put
