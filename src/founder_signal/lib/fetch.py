"""JSON fetch capability shared by the content source and the synthesis API.

Both upstreams are reached through :class:`JsonFetcher`, a thin wrapper
around an ``httpx.AsyncClient`` bound to a base URL and a fixed set of
headers.  Every failure mode (transport error, non-2xx status, body that
is not JSON) surfaces as a single :class:`FetchError`, so callers only
have one exception to absorb or report.
"""

import json
from typing import Any

import httpx


class FetchError(Exception):
    """An upstream request that did not yield a usable JSON body."""

    def __init__(
        self,
        url: str,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status_code = status_code
        self.body = body


class JsonFetcher:
    """Issue JSON requests against one upstream.

    ``base_url`` is joined with the *path* given to each call.  An empty
    *path* targets ``base_url`` itself; an absolute URL bypasses it.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "",
        headers: dict[str, str] | None = None,
    ):
        self._client = client
        self.base_url = base_url.rstrip("/")
        self.headers = dict(headers or {})

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")) or not self.base_url:
            return path
        if not path:
            return self.base_url
        return f"{self.base_url}/{path.lstrip('/')}"

    async def get_json(self, path: str) -> Any:
        return await self._request("GET", path)

    async def post_json(self, path: str, payload: Any) -> Any:
        return await self._request("POST", path, json=payload)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        url = self.url_for(path)
        try:
            resp = await self._client.request(method, url, headers=self.headers, **kwargs)
        except httpx.HTTPError as exc:
            raise FetchError(url, f"{type(exc).__name__}: {exc}") from exc

        if not resp.is_success:
            raise FetchError(
                url,
                f"upstream returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            return resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise FetchError(
                url,
                "upstream returned a non-JSON body",
                status_code=resp.status_code,
                body=resp.text,
            ) from exc
