"""Shared fixtures for the gitprovider tests."""

from typing import Any

import httpx
import pytest

# Fixtures shipped with the package
from gitprovider.testing.conftest import (  # noqa: F401
    client_with_repo,
    destructive_client,
    fake_client,
    fake_provider,
    org_ref,
    org_repo_ref,
    sample_deploy_key_info,
    sample_repository_info,
    sample_team_access_info,
    user_ref,
    user_repo_ref,
)
from gitprovider.transport import HTTPTransport, RetryConfig


class Router:
    """
    httpx.MockTransport handler answering from canned responses.

    Routes are keyed by method and raw (still percent-encoded) path. A route
    given several responses answers them in order, repeating the last one.
    Unknown routes answer 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[tuple[int, Any, dict[str, str] | None]]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.routes.setdefault((method, path), []).append((status_code, json, headers))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.raw_path.decode().split("?")[0]
        queue = self.routes.get((request.method, path))
        if not queue:
            return httpx.Response(404, json={"message": "Not Found"})
        status_code, json, headers = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(status_code, json=json, headers=headers)

    def calls(self, method: str, path: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method
            and (path is None or r.url.raw_path.decode().split("?")[0] == path)
        ]

    def transport(self, base_url: str, **kwargs: Any) -> HTTPTransport:
        kwargs.setdefault("retry_config", RetryConfig(max_retries=0))
        return HTTPTransport(base_url, transport=httpx.MockTransport(self), **kwargs)


@pytest.fixture
def router() -> Router:
    return Router()
