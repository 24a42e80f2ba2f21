# resources.py
# -- tournament / player / match endpoints
from __future__ import annotations
import logging
from typing import Any, Awaitable

from .api import ApiClient

log = logging.getLogger(__name__)


async def _call(what: str, pending: Awaitable[Any]) -> Any:
    try:
        return await pending
    except Exception as e:
        log.error("Error %s: %s", what, e)
        raise


class TournamentClient:
    def __init__(self, api: ApiClient):
        self._api = api

    async def get_all(self) -> list[dict]:
        return await _call("fetching tournaments", self._api.get("/tournaments"))

    async def get_by_id(self, tournament_id) -> dict:
        return await _call(f"fetching tournament {tournament_id}",
                           self._api.get(f"/tournaments/{tournament_id}"))

    async def create(self, data: dict) -> dict:
        return await _call("creating tournament", self._api.post("/tournaments", data))

    async def update(self, tournament_id, data: dict) -> dict:
        return await _call(f"updating tournament {tournament_id}",
                           self._api.put(f"/tournaments/{tournament_id}", data))

    async def delete(self, tournament_id) -> Any:
        return await _call(f"deleting tournament {tournament_id}",
                           self._api.delete(f"/tournaments/{tournament_id}"))


class PlayerClient:
    """Roster of a single tournament; every call is scoped by tournament id."""

    def __init__(self, api: ApiClient):
        self._api = api

    async def get_all(self, tournament_id) -> list[dict]:
        return await _call(f"fetching players for tournament {tournament_id}",
                           self._api.get(f"/tournaments/{tournament_id}/players"))

    async def get_by_id(self, tournament_id, player_id) -> dict:
        return await _call(f"fetching player {player_id} of tournament {tournament_id}",
                           self._api.get(f"/tournaments/{tournament_id}/players/{player_id}"))

    async def create(self, tournament_id, data: dict) -> dict:
        return await _call(f"adding player to tournament {tournament_id}",
                           self._api.post(f"/tournaments/{tournament_id}/players", data))

    async def update(self, tournament_id, player_id, data: dict) -> dict:
        return await _call(f"updating player {player_id} of tournament {tournament_id}",
                           self._api.put(f"/tournaments/{tournament_id}/players/{player_id}", data))

    async def delete(self, tournament_id, player_id) -> Any:
        return await _call(f"removing player {player_id} from tournament {tournament_id}",
                           self._api.delete(f"/tournaments/{tournament_id}/players/{player_id}"))

    # roster wording
    add = create
    remove = delete


class MatchClient:
    def __init__(self, api: ApiClient):
        self._api = api

    async def get_all(self) -> list[dict]:
        return await _call("fetching matches", self._api.get("/matches"))

    async def get_by_id(self, match_id) -> dict:
        return await _call(f"fetching match {match_id}", self._api.get(f"/matches/{match_id}"))

    async def create(self, data: dict) -> dict:
        return await _call("creating match", self._api.post("/matches", data))

    async def update(self, match_id, data: dict) -> dict:
        return await _call(f"updating match {match_id}",
                           self._api.put(f"/matches/{match_id}", data))

    async def delete(self, match_id) -> Any:
        return await _call(f"deleting match {match_id}", self._api.delete(f"/matches/{match_id}"))

    async def add_score(self, match_id, score: dict) -> dict:
        return await _call(f"adding score to match {match_id}",
                           self._api.post(f"/matches/{match_id}/scores", score))

    async def update_score(self, match_id, score: dict) -> dict:
        return await _call(f"updating score for match {match_id}",
                           self._api.put(f"/matches/{match_id}/scores", score))
