"""Travis CI v3 REST API client using httpx."""

import logging
import os
from collections.abc import Iterator, Mapping
from typing import Any

import httpx

from .models import (
    DEFAULT_TOKEN_ENV_VAR,
    FROM_ENV,
    ClientConfig,
    Explicit,
    FromEnvironment,
    PaginationCursor,
    TokenSource,
)
from .settings import get_settings

logger = logging.getLogger(__name__)


class TravisError(RuntimeError):
    """Unexpected response from the Travis API, or unusable client configuration."""

    def __init__(self, message, status_code=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def build_query_string(filters: Mapping[str, Any] | None) -> str:
    """Render filters as ``key=value`` pairs joined by ``&``, sorted by key.

    Returns an empty string when there are no filters.
    """
    if not filters:
        return ""
    return "&".join(f"{key}={value}" for key, value in sorted(filters.items()))


def _resolve_token(auth_token: str | TokenSource) -> str | None:
    if isinstance(auth_token, str):
        return auth_token
    if isinstance(auth_token, Explicit):
        return auth_token.token
    if isinstance(auth_token, FromEnvironment):
        value = os.environ.get(auth_token.var_name)
        if value is None and auth_token.var_name == DEFAULT_TOKEN_ENV_VAR:
            # Fall back to .env via settings
            value = get_settings().travis_token
        return value
    raise TypeError(f"Unsupported token source: {auth_token!r}")


class TravisAPI:
    """Client for one repository on the Travis API.

    The token is resolved once, here. Pass a string to use it directly, or a
    FromEnvironment to read a variable (TRAVIS_TOKEN by default).
    """

    def __init__(
        self,
        organization: str,
        repo: str,
        auth_token: str | TokenSource = FROM_ENV,
        *,
        api_host: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        if not organization or not repo:
            raise TravisError("organization and repo are required")

        token = _resolve_token(auth_token)
        if not token:
            source = auth_token.var_name if isinstance(auth_token, FromEnvironment) else "auth_token"
            raise TravisError(f"No Travis API token available ({source} is not set)")

        self._config = ClientConfig(
            organization=organization,
            repo=repo,
            token=token,
            api_host=api_host or get_settings().travis_api_host,
        )
        self._client = httpx.Client(headers=self._config.headers, transport=transport)

    @property
    def organization(self) -> str:
        return self._config.organization

    @property
    def repo(self) -> str:
        return self._config.repo

    @property
    def config(self) -> ClientConfig:
        return self._config

    def builds(self, filters: Mapping[str, Any] | None = None) -> Iterator[dict]:
        """Lazily fetch all builds matching filters, e.g. ``{"branch.name": "main"}``."""
        return self.list_resources("builds", filters)

    def list_resources(self, resource: str, filters: Mapping[str, Any] | None = None) -> Iterator[dict]:
        """Lazily fetch every item of a paginated repository resource.

        Args:
            resource: Path segment under the repository, e.g. "builds"
            filters: Query parameters, sent as ``key=value`` pairs

        Returns:
            A single-pass iterator. Each page is requested only when the
            previous one has been consumed. Raises TravisError at the pull
            that hits a non-200 page.
        """
        url = f"{self._config.base_url}/{resource}"
        query = build_query_string(filters)
        if query:
            url = f"{url}?{query}"
        return self._fetch_resources_lazily(resource, url)

    def _fetch_resources_lazily(self, resource: str, url: str) -> Iterator[dict]:
        while True:
            logger.debug("GET %s", url)
            resp = self._client.get(url)

            if resp.status_code != 200:
                raise TravisError(
                    f"Could not perform request; got {resp.status_code} code! (url: {url}, body: {resp.text!r})",
                    status_code=resp.status_code,
                    body=resp.text,
                )

            body = self._decode(resp, url)
            yield from body.get(resource) or []

            cursor = PaginationCursor.from_body(body)
            if cursor.exhausted:
                return
            url = cursor.next_url(self._config.api_host)

    def create_request(self, request_options: Mapping[str, Any]) -> dict | None:
        """Trigger a build request.

        Travis answers 202 when the request is accepted for processing; that
        does not mean a build will run. The decoded body is returned as-is,
        or None when the response has no body.
        """
        url = f"{self._config.base_url}/requests"
        logger.debug("POST %s", url)
        resp = self._client.post(url, json={"request": dict(request_options)})

        if resp.status_code != 202:
            try:
                body = resp.json()
            except ValueError:
                body = resp.text
            raise TravisError(
                f"Travis API error {resp.status_code}: {body!r}",
                status_code=resp.status_code,
                body=body,
            )

        return self._decode(resp, url) if resp.content else None

    def _decode(self, resp: httpx.Response, url: str):
        try:
            return resp.json()
        except ValueError as e:
            raise TravisError(
                f"Could not decode response from {url} ({resp.status_code}): {resp.text!r}",
                status_code=resp.status_code,
                body=resp.text,
            ) from e

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
