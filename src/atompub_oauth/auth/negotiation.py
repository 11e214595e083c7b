"""Three-legged OAuth 1.0a token negotiation.

The negotiation is a strict forward chain::

    UNAUTHORIZED -> REQUEST_TOKEN -> AUTHORIZED -> ACCESS_TOKEN

Each arrow is one leg. ``advance`` is the pure transition function: it takes
the current state and the HTTP response of that state's leg and returns the
next state, or a ``LegFailure`` leaving the state untouched. ``TokenNegotiator``
does the I/O around it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import unquote

import httpx

from atompub_oauth.auth.signature import NonceSource, SignatureEngine, default_nonce_source
from atompub_oauth.exceptions import AuthenticationError, FailureReason
from atompub_oauth.models.auth import (
    AccessToken,
    Authorized,
    HasAccessToken,
    HasRequestToken,
    Leg,
    ProtocolState,
    RequestToken,
    SessionState,
    Unauthorized,
)

if TYPE_CHECKING:
    from atompub_oauth.config import Credentials, Endpoints

logger = logging.getLogger(__name__)

Decoder = Callable[[str], str]

# leg run from each non-terminal state, with its HTTP method
_LEGS: dict[ProtocolState, tuple[Leg, str]] = {
    ProtocolState.UNAUTHORIZED: (Leg.REQUEST_TOKEN, "GET"),
    ProtocolState.REQUEST_TOKEN: (Leg.AUTHORIZE, "POST"),
    ProtocolState.AUTHORIZED: (Leg.ACCESS_TOKEN, "GET"),
}


def no_decode(value: str) -> str:
    """Leave negotiation response values exactly as received."""
    return value


def percent_decode(value: str) -> str:
    """Percent-decode negotiation response values."""
    return unquote(value)


@dataclass(frozen=True, slots=True)
class LegFailure:
    """Outcome of a leg that did not advance the state."""

    phase: ProtocolState
    reason: FailureReason
    detail: str
    leg: Leg | None = None
    status_code: int | None = None
    cause: BaseException | None = None

    def to_error(self) -> AuthenticationError:
        """Convert to the exception raised to callers."""
        where = f"{self.leg} leg" if self.leg is not None else "negotiation"
        message = f"OAuth {where} failed in state {self.phase}: {self.detail}"
        if self.status_code is not None:
            message += f" (HTTP {self.status_code})"
        return AuthenticationError(
            message,
            phase=self.phase,
            reason=self.reason,
            leg=self.leg,
            status_code=self.status_code,
        )


def parse_token_response(body: str, decode: Decoder = no_decode) -> dict[str, str]:
    """Parse an ``&``-joined ``key=value`` negotiation response body.

    Pairs lacking ``=`` or a value are skipped; a repeated key overrides the
    earlier one. Values go through ``decode``; keys are used as-is.
    """
    values: dict[str, str] = {}
    for pair in body.strip().split("&"):
        key, sep, value = pair.partition("=")
        if sep and value:
            values[key] = decode(value)
    return values


def leg_for(state: SessionState) -> Leg | None:
    """The leg that advances ``state``; None once negotiation is complete."""
    entry = _LEGS.get(state.phase)
    return entry[0] if entry else None


def _already_negotiated(state: SessionState) -> LegFailure:
    return LegFailure(
        phase=state.phase,
        reason=FailureReason.ALREADY_NEGOTIATED,
        detail="session already holds an access token",
    )


def _token_pair(
    leg: Leg,
    state: SessionState,
    response: httpx.Response,
    decode: Decoder,
) -> tuple[str, str] | LegFailure:
    values = parse_token_response(response.text, decode)
    token = values.get("oauth_token")
    token_secret = values.get("oauth_token_secret")
    if not token or not token_secret:
        return LegFailure(
            phase=state.phase,
            reason=FailureReason.MISSING_TOKEN,
            leg=leg,
            status_code=response.status_code,
            detail="response lacks oauth_token or oauth_token_secret",
        )
    return token, token_secret


def advance(
    state: SessionState,
    response: httpx.Response,
    *,
    decode: Decoder = no_decode,
) -> SessionState | LegFailure:
    """Transition ``state`` given the response of its leg."""
    if isinstance(state, Unauthorized):
        pair = _token_pair(Leg.REQUEST_TOKEN, state, response, decode)
        if isinstance(pair, LegFailure):
            return pair
        return HasRequestToken(token=RequestToken(token=pair[0], token_secret=pair[1]))

    if isinstance(state, HasRequestToken):
        if response.status_code != 200:
            return LegFailure(
                phase=state.phase,
                reason=FailureReason.UNEXPECTED_STATUS,
                leg=Leg.AUTHORIZE,
                status_code=response.status_code,
                detail="authorization was not granted",
            )
        return Authorized(token=state.token)

    if isinstance(state, Authorized):
        pair = _token_pair(Leg.ACCESS_TOKEN, state, response, decode)
        if isinstance(pair, LegFailure):
            return pair
        return HasAccessToken(token=AccessToken(token=pair[0], token_secret=pair[1]))

    return _already_negotiated(state)


class TokenNegotiator:
    """Runs the negotiation legs against the configured endpoints.

    The HTTP client is supplied by the caller; the negotiator never opens
    or closes it.
    """

    def __init__(
        self,
        credentials: Credentials,
        endpoints: Endpoints,
        client: httpx.Client,
        *,
        nonce_source: NonceSource = default_nonce_source,
        decode: Decoder = no_decode,
    ) -> None:
        self.endpoints = endpoints
        self.client = client
        self.decode = decode
        self.engine = SignatureEngine(credentials, nonce_source)

    def _endpoint(self, leg: Leg) -> str:
        if leg is Leg.REQUEST_TOKEN:
            return self.endpoints.request_token_url
        if leg is Leg.AUTHORIZE:
            return self.endpoints.authorize_url
        return self.endpoints.access_token_url

    def step(self, state: SessionState) -> SessionState | LegFailure:
        """Perform the single leg belonging to ``state``."""
        entry = _LEGS.get(state.phase)
        if entry is None:
            return _already_negotiated(state)
        leg, method = entry

        endpoint = self._endpoint(leg)
        token = state.token if isinstance(state, (HasRequestToken, Authorized)) else None
        url = self.engine.sign_url(method, endpoint, token=token, negotiation=True)

        logger.debug("OAuth %s leg: %s %s", leg, method, endpoint)

        try:
            response = self.client.request(method, url)
        except httpx.HTTPError as e:
            logger.warning("OAuth %s leg failed: %s", leg, e)
            return LegFailure(
                phase=state.phase,
                reason=FailureReason.TRANSPORT,
                leg=leg,
                detail=f"{type(e).__name__}: {e}",
                cause=e,
            )

        result = advance(state, response, decode=self.decode)
        if isinstance(result, LegFailure):
            logger.warning(
                "OAuth %s leg rejected with HTTP %s: %s",
                leg,
                response.status_code,
                result.detail,
            )
        else:
            logger.info("OAuth state %s -> %s", state.phase, result.phase)
        return result

    def negotiate(self, state: SessionState | None = None) -> HasAccessToken:
        """Run the remaining legs until an access token is held.

        Raises:
            AuthenticationError: On the first failing leg; later legs are skipped.
        """
        current: SessionState = state if state is not None else Unauthorized()
        while not isinstance(current, HasAccessToken):
            result = self.step(current)
            if isinstance(result, LegFailure):
                raise result.to_error() from result.cause
            current = result
        return current
