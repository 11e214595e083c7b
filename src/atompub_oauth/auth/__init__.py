"""OAuth 1.0a authentication for AtomPub clients."""

from atompub_oauth.auth.negotiation import (
    LegFailure,
    TokenNegotiator,
    advance,
    leg_for,
    no_decode,
    parse_token_response,
    percent_decode,
)
from atompub_oauth.auth.signature import SignatureEngine, default_nonce_source
from atompub_oauth.auth.strategy import OAuthStrategy, new_session

__all__ = [
    "LegFailure",
    "OAuthStrategy",
    "SignatureEngine",
    "TokenNegotiator",
    "advance",
    "default_nonce_source",
    "leg_for",
    "new_session",
    "no_decode",
    "parse_token_response",
    "percent_decode",
]
