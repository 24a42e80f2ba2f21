# api.py
# -- shared httpx client for the tournament API, with bearer auth
from __future__ import annotations
from typing import Any, Optional

import httpx

from .config import API_URL, HTTP_TIMEOUT
from .storage import CredentialStore


class RequestError(RuntimeError):
    def __init__(self, summary: str, *, status_code: Optional[int] = None,
                 server_message: Optional[str] = None):
        super().__init__(summary)
        self.status_code = status_code
        self.server_message = server_message


class BearerAuth(httpx.Auth):
    """Stamps each outgoing request with the token currently in the store."""

    def __init__(self, store: CredentialStore):
        self._store = store

    def auth_flow(self, request: httpx.Request):
        token = self._store.get()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        else:
            request.headers.pop("Authorization", None)
        yield request


def _server_message(r: httpx.Response) -> Optional[str]:
    try:
        body = r.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    msg = body.get("message")
    if isinstance(msg, str) and msg:
        return msg

    # validation payloads: {"errors": {"field": ["..."]}} or {"errors": ["..."]}
    errors = body.get("errors")
    if isinstance(errors, dict):
        parts = []
        for v in errors.values():
            parts.extend(v if isinstance(v, list) else [v])
        errors = parts
    if isinstance(errors, list) and errors:
        return "; ".join(str(e) for e in errors)
    return None


def _error_for(r: httpx.Response) -> RequestError:
    msg = _server_message(r)
    status = r.status_code
    if status == 401:
        summary = "unauthorized: missing or expired token"
    elif status == 403:
        summary = "forbidden: you lack access to this record"
    elif status == 404:
        summary = "not found: record doesn't exist"
    elif status == 422:
        summary = f"Validation error: {msg or r.text[:200]}"
    else:
        summary = f"API error ({status}): {msg or r.text[:200]}"
    return RequestError(summary, status_code=status, server_message=msg)


class ApiClient:
    """Shared transport for every call to the tournament API."""

    def __init__(self, store: CredentialStore, *, base_url: str = API_URL,
                 timeout: float = HTTP_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            auth=BearerAuth(store),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def request(self, method: str, path: str, *, json: Any = None,
                      params: dict | None = None) -> Any:
        try:
            r = await self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            raise RequestError(f"request failed: {method} {path}: {e}") from e

        if not r.is_success:
            raise _error_for(r)
        if not r.content:
            return None
        try:
            return r.json()
        except ValueError:
            return r.text

    async def get(self, path: str, params: dict | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()
