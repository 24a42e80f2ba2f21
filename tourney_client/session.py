"""Session state and the login/register/logout/fetch-user transitions.

The controller is the only writer of the credential store. Every change of
token goes through ``on_token_changed``, which persists the new value and,
when a token is present, resolves the user profile behind it. A token that
cannot be resolved is dropped, so the session falls back to anonymous.

Overlapping transitions are ordered by two counters. The epoch advances
each time the caller starts a login, register or logout; a login or register
that finds the epoch moved on when its request returns discards its result.
The token-change count advances in ``on_token_changed``; a profile fetch
started under an older token is ignored, and a logout clears the session
unless a newer token was set while it was in flight.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Optional

from .api import ApiClient, RequestError
from .storage import CredentialStore

log = logging.getLogger(__name__)

LOGIN_FAILED = "Login failed"
REGISTRATION_FAILED = "Registration failed"
FETCH_USER_FAILED = "Failed to fetch user"


@dataclass(frozen=True)
class UserProfile:
    id: Any
    name: Optional[str]
    email: Optional[str]
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, data: dict) -> "UserProfile":
        return cls(id=data.get("id"), name=data.get("name"),
                   email=data.get("email"), raw=dict(data))


@dataclass(frozen=True)
class Session:
    """Read-only view of the session handed out to consumers."""

    user: Optional[UserProfile] = None
    token: Optional[str] = None
    loading: bool = False
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


class SessionController:
    def __init__(self, api: ApiClient, store: CredentialStore):
        self._api = api
        self._store = store
        self._user: Optional[UserProfile] = None
        self._token: Optional[str] = None
        self._error: Optional[str] = None
        self._starting = True
        self._in_flight = 0
        self._epoch = 0
        self._token_changes = 0

    # ------------ state ------------

    @property
    def session(self) -> Session:
        return Session(user=self._user, token=self._token,
                       loading=self.loading, error=self._error)

    @property
    def loading(self) -> bool:
        return self._starting or self._in_flight > 0

    @property
    def user(self) -> Optional[UserProfile]:
        return self._user

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def error(self) -> Optional[str]:
        return self._error

    @contextmanager
    def _busy(self):
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1

    def _advance(self) -> int:
        self._epoch += 1
        return self._epoch

    # ------------ transitions ------------

    async def start(self) -> Session:
        """Restore the persisted token at process start."""
        try:
            token = self._store.get()
            if token:
                await self.on_token_changed(token)
        finally:
            self._starting = False
        return self.session

    async def on_token_changed(self, token: Optional[str]) -> None:
        token = token or None
        self._token_changes += 1
        if token:
            self._store.set(token)
            self._token = token
            await self.fetch_user()
        else:
            self._store.clear()
            self._token = None
            self._user = None

    async def fetch_user(self) -> None:
        changes = self._token_changes
        with self._busy():
            try:
                data = await self._api.get("/user")
                if not isinstance(data, dict):
                    raise RequestError("profile response is not an object")
            except RequestError as e:
                if changes != self._token_changes:
                    log.info("ignoring stale profile failure: %s", e)
                    return
                log.info("token rejected by profile endpoint, signing out: %s", e)
                self._error = FETCH_USER_FAILED
                await self.on_token_changed(None)
                return

            if changes != self._token_changes:
                log.info("ignoring stale profile response")
                return
            self._user = UserProfile.from_api(data)
            self._error = None

    async def login(self, email: str, password: str) -> Any:
        return await self._authenticate(
            "/login", {"email": email, "password": password}, LOGIN_FAILED)

    async def register(self, name: str, email: str, password: str,
                       password_confirmation: str) -> Any:
        return await self._authenticate(
            "/register",
            {
                "name": name,
                "email": email,
                "password": password,
                "password_confirmation": password_confirmation,
            },
            REGISTRATION_FAILED,
        )

    async def _authenticate(self, path: str, payload: dict, fallback: str) -> Any:
        epoch = self._advance()
        with self._busy():
            try:
                data = await self._api.post(path, payload)
            except RequestError as e:
                if epoch == self._epoch:
                    self._error = e.server_message or fallback
                raise

            if epoch != self._epoch:
                log.info("discarding stale %s result", path)
                return data
            token = data.get("access_token") if isinstance(data, dict) else None
            await self.on_token_changed(token)
            return data

    async def logout(self) -> None:
        self._advance()
        changes = self._token_changes
        with self._busy():
            try:
                await self._api.post("/logout")
            except RequestError as e:
                log.error("Logout error: %s", e)
            finally:
                # only a token set after this logout started survives it
                if changes != self._token_changes and self._token is not None:
                    log.info("keeping token set after logout started")
                else:
                    await self.on_token_changed(None)
