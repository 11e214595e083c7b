"""OAuth 1.0a authentication strategy for signing outgoing requests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import TYPE_CHECKING

import httpx

from atompub_oauth.auth.negotiation import Decoder, TokenNegotiator, no_decode
from atompub_oauth.auth.signature import (
    NonceSource,
    SignatureEngine,
    default_nonce_source,
    query_parameters,
    render_query,
)
from atompub_oauth.config import DEFAULT_TIMEOUT, Credentials, Endpoints, OAuthConfig
from atompub_oauth.exceptions import AuthenticationError, FailureReason
from atompub_oauth.models.auth import HasAccessToken, Unauthorized

if TYPE_CHECKING:
    from atompub_oauth.models.auth import AccessToken, ProtocolState, SessionState

logger = logging.getLogger(__name__)


class OAuthStrategy(httpx.Auth):
    """Signs requests with an access token obtained by three-legged OAuth.

    Usage (negotiate, then sign calls explicitly):
        strategy = OAuthStrategy.negotiate(OAuthConfig.load())
        request = httpx.Request("GET", "https://example.com/feed?x=1")
        strategy.authenticate(request)

    Usage (as an httpx auth handler):
        with httpx.Client(auth=strategy) as client:
            client.get("https://example.com/feed")

    The session state is an immutable value; the strategy only ever holds
    the state it was created with.
    """

    def __init__(
        self,
        credentials: Credentials,
        state: SessionState | None = None,
        *,
        nonce_source: NonceSource = default_nonce_source,
    ) -> None:
        self._credentials = credentials
        self._state: SessionState = state if state is not None else Unauthorized()
        self._engine = SignatureEngine(credentials, nonce_source)

    @classmethod
    def negotiate(
        cls,
        config: OAuthConfig,
        *,
        client: httpx.Client | None = None,
        nonce_source: NonceSource = default_nonce_source,
        decode: Decoder = no_decode,
    ) -> OAuthStrategy:
        """Run all three legs and return a strategy ready to sign requests.

        Args:
            config: Credentials, endpoints and transport timeout
            client: Optional httpx.Client to send the legs through. It is
                    used as-is and NOT closed. If not provided, a client with
                    ``config.timeout`` is created and closed afterwards.
            nonce_source: Supplier of a fresh nonce/timestamp per signed call
            decode: Decoding applied to values in negotiation responses

        Raises:
            AuthenticationError: If any leg fails
        """
        if client is not None:
            state = cls._run_legs(config, client, nonce_source, decode)
        else:
            with httpx.Client(timeout=config.timeout) as owned:
                state = cls._run_legs(config, owned, nonce_source, decode)
        return cls(config.credentials, state, nonce_source=nonce_source)

    @staticmethod
    def _run_legs(
        config: OAuthConfig,
        client: httpx.Client,
        nonce_source: NonceSource,
        decode: Decoder,
    ) -> HasAccessToken:
        negotiator = TokenNegotiator(
            config.credentials,
            config.endpoints,
            client,
            nonce_source=nonce_source,
            decode=decode,
        )
        return negotiator.negotiate()

    @property
    def credentials(self) -> Credentials:
        """Consumer credentials this session signs with."""
        return self._credentials

    @property
    def state(self) -> SessionState:
        """Current negotiation state."""
        return self._state

    @property
    def phase(self) -> ProtocolState:
        """Phase of the current negotiation state."""
        return self._state.phase

    @property
    def access_token(self) -> AccessToken | None:
        """Access token, once negotiation has completed."""
        if isinstance(self._state, HasAccessToken):
            return self._state.token
        return None

    def authenticate(self, request: httpx.Request) -> None:
        """Sign ``request`` by rewriting its query string in place.

        Existing query parameters are kept and signed along with the OAuth
        parameters. Method, headers and body are left alone.

        Query parameters are signed as a single map: when a key repeats
        (``?tag=a&tag=b``) only its last value is kept and sent.

        Raises:
            AuthenticationError: If negotiation has not reached the access token
        """
        if not isinstance(self._state, HasAccessToken):
            raise AuthenticationError(
                f"Cannot sign requests in state {self._state.phase}; "
                "OAuth negotiation did not complete",
                phase=self._state.phase,
                reason=FailureReason.NOT_READY,
            )

        url = str(request.url)
        signed = self._engine.signed_parameters(
            request.method,
            url,
            query_parameters(url),
            token=self._state.token,
        )
        request.url = httpx.URL(render_query(url, signed))

        logger.debug("Signed %s %s%s", request.method, request.url.host, request.url.path)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response]:
        """httpx hook: sign each outgoing request."""
        self.authenticate(request)
        yield request


def new_session(
    username: str | None,
    consumer_key: str,
    consumer_secret: str,
    signature_method: str,
    request_token_url: str,
    authorize_url: str,
    access_token_url: str,
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    nonce_source: NonceSource = default_nonce_source,
    decode: Decoder = no_decode,
) -> OAuthStrategy:
    """Create a fully negotiated OAuth session.

    Raises:
        AuthenticationError: If any negotiation leg fails
        ValueError: If the signature method is not supported
    """
    config = OAuthConfig(
        credentials=Credentials(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            signature_method=signature_method,
            username=username,
        ),
        endpoints=Endpoints(
            request_token_url=request_token_url,
            authorize_url=authorize_url,
            access_token_url=access_token_url,
        ),
        timeout=timeout,
    )
    return OAuthStrategy.negotiate(
        config,
        client=client,
        nonce_source=nonce_source,
        decode=decode,
    )
