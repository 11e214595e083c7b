"""Shared fixtures: credentials, endpoints and a scripted OAuth provider."""

from collections.abc import Callable

import httpx
import pytest

from atompub_oauth.config import Credentials, Endpoints, OAuthConfig

BASE_URL = "https://atom.example.com"


def fixed_nonce_source(nonce: str = "fixednonce", timestamp: str = "1191242096"):
    """Nonce source that always returns the same pair."""

    def source() -> tuple[str, str]:
        return nonce, timestamp

    return source


def counting_nonce_source() -> Callable[[], tuple[str, str]]:
    """Nonce source returning nonce-1, nonce-2, ... on successive calls."""
    calls = 0

    def source() -> tuple[str, str]:
        nonlocal calls
        calls += 1
        return f"nonce-{calls}", str(1_700_000_000 + calls)

    return source


class FakeProvider:
    """OAuth provider with scripted responses, served through httpx.MockTransport."""

    def __init__(
        self,
        *,
        request_token_body: str = "oauth_token=rt1&oauth_token_secret=rts1",
        authorize_status: int = 200,
        access_token_body: str = "oauth_token=at1&oauth_token_secret=ats1",
        fail_on: str | None = None,
    ) -> None:
        self.request_token_body = request_token_body
        self.authorize_status = authorize_status
        self.access_token_body = access_token_body
        self.fail_on = fail_on  # path suffix whose request raises ConnectError
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if self.fail_on is not None and path.endswith(self.fail_on):
            raise httpx.ConnectError("connection refused", request=request)
        if path.endswith("/request_token"):
            return httpx.Response(200, text=self.request_token_body)
        if path.endswith("/authorize"):
            return httpx.Response(self.authorize_status, text="")
        if path.endswith("/access_token"):
            return httpx.Response(200, text=self.access_token_body)
        return httpx.Response(200, text="<feed/>")

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def params(self, index: int) -> dict[str, str]:
        """Query parameters of the index-th recorded request."""
        return dict(self.requests[index].url.params)


@pytest.fixture
def credentials() -> Credentials:
    """Consumer credentials used across tests."""
    return Credentials(
        consumer_key="ck",
        consumer_secret="cs",
        signature_method="HMAC-SHA1",
        username="alice",
    )


@pytest.fixture
def endpoints() -> Endpoints:
    """Negotiation endpoints of the fake provider."""
    return Endpoints(
        request_token_url=f"{BASE_URL}/oauth/request_token",
        authorize_url=f"{BASE_URL}/oauth/authorize",
        access_token_url=f"{BASE_URL}/oauth/access_token",
    )


@pytest.fixture
def config(credentials: Credentials, endpoints: Endpoints) -> OAuthConfig:
    """Complete configuration for the fake provider."""
    return OAuthConfig(credentials=credentials, endpoints=endpoints, timeout=5.0)


@pytest.fixture
def provider() -> FakeProvider:
    """A provider that completes all three legs."""
    return FakeProvider()


@pytest.fixture
def patched_http_client(monkeypatch: pytest.MonkeyPatch, provider: FakeProvider) -> list[dict]:
    """Route every httpx.Client created by the code under test to ``provider``.

    Returns the list of keyword arguments each client was created with.
    """
    real_client = httpx.Client
    created: list[dict] = []

    def factory(**kwargs):
        created.append(kwargs)
        return real_client(transport=httpx.MockTransport(provider.handler), **kwargs)

    monkeypatch.setattr(httpx, "Client", factory)
    return created
