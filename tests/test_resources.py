import asyncio
import json
import logging

import httpx
import pytest

from tourney_client.api import RequestError


@pytest.fixture()
def echo_server(server):
    """Answers every routed call with the method and path it saw."""

    async def echo(request):
        body = json.loads(request.content) if request.content else None
        return httpx.Response(200, json={"method": request.method,
                                         "path": request.url.path, "body": body})

    def route(method, path):
        server.on(method, path, echo)
    return route


@pytest.mark.parametrize("call, method, path", [
    (lambda c: c.tournaments.get_all(), "GET", "/tournaments"),
    (lambda c: c.tournaments.get_by_id(4), "GET", "/tournaments/4"),
    (lambda c: c.tournaments.create({"name": "Cup"}), "POST", "/tournaments"),
    (lambda c: c.tournaments.update(4, {"name": "Cup"}), "PUT", "/tournaments/4"),
    (lambda c: c.tournaments.delete(4), "DELETE", "/tournaments/4"),
    (lambda c: c.players.get_all(4), "GET", "/tournaments/4/players"),
    (lambda c: c.players.get_by_id(4, 9), "GET", "/tournaments/4/players/9"),
    (lambda c: c.players.add(4, {"nickname": "zed"}), "POST", "/tournaments/4/players"),
    (lambda c: c.players.update(4, 9, {"nickname": "zed"}), "PUT", "/tournaments/4/players/9"),
    (lambda c: c.players.remove(4, 9), "DELETE", "/tournaments/4/players/9"),
    (lambda c: c.matches.get_all(), "GET", "/matches"),
    (lambda c: c.matches.get_by_id(2), "GET", "/matches/2"),
    (lambda c: c.matches.create({"tournament_id": 4}), "POST", "/matches"),
    (lambda c: c.matches.update(2, {"status": "done"}), "PUT", "/matches/2"),
    (lambda c: c.matches.delete(2), "DELETE", "/matches/2"),
    (lambda c: c.matches.add_score(2, {"player_id": 9, "score": 3}), "POST", "/matches/2/scores"),
    (lambda c: c.matches.update_score(2, {"player_id": 9, "score": 4}), "PUT", "/matches/2/scores"),
])
def test_verb_to_path_mapping(make_context, echo_server, call, method, path):
    echo_server(method, path)

    async def run():
        async with make_context() as ctx:
            return await call(ctx)

    result = asyncio.run(run())
    assert result["method"] == method
    assert result["path"] == "/api/v1" + path


def test_payload_is_sent_unchanged(make_context, echo_server):
    echo_server("POST", "/matches/2/scores")

    async def run():
        async with make_context() as ctx:
            return await ctx.matches.add_score(2, {"player_id": 9, "score": 3})

    assert asyncio.run(run())["body"] == {"player_id": 9, "score": 3}


def test_no_caching_between_calls(make_context, server):
    replies = iter([[{"id": 1}], [{"id": 1}, {"id": 2}]])

    async def listing(request):
        return httpx.Response(200, json=next(replies))

    server.on("GET", "/tournaments", listing)

    async def run():
        async with make_context() as ctx:
            return await ctx.tournaments.get_all(), await ctx.tournaments.get_all()

    first, second = asyncio.run(run())
    assert len(first) == 1
    assert len(second) == 2


def test_failure_is_logged_and_reraised(make_context, server, caplog):
    server.on("DELETE", "/tournaments/4", httpx.Response(403, json={"message": "not yours"}))

    async def run():
        async with make_context() as ctx:
            await ctx.tournaments.delete(4)

    with caplog.at_level(logging.ERROR, logger="tourney_client.resources"):
        with pytest.raises(RequestError) as info:
            asyncio.run(run())

    assert info.value.status_code == 403
    assert info.value.server_message == "not yours"
    assert "Error deleting tournament 4" in caplog.text
