# app.py
# -- wires store, transport, session and resource clients together
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

import httpx

from .api import ApiClient
from .config import API_URL, DB_PATH, HTTP_TIMEOUT
from .resources import MatchClient, PlayerClient, TournamentClient
from .session import SessionController
from .storage import CredentialStore


@dataclass
class AppContext:
    """Everything a view needs, wired once per process and passed around."""

    store: CredentialStore
    api: ApiClient
    session: SessionController
    tournaments: TournamentClient
    players: PlayerClient
    matches: MatchClient

    async def aclose(self) -> None:
        await self.api.aclose()

    async def __aenter__(self) -> "AppContext":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()


def build_context(*, db_path: str = DB_PATH, base_url: str = API_URL,
                  timeout: float = HTTP_TIMEOUT,
                  transport: Optional[httpx.AsyncBaseTransport] = None) -> AppContext:
    store = CredentialStore(db_path)
    api = ApiClient(store, base_url=base_url, timeout=timeout, transport=transport)
    return AppContext(
        store=store,
        api=api,
        session=SessionController(api, store),
        tournaments=TournamentClient(api),
        players=PlayerClient(api),
        matches=MatchClient(api),
    )
