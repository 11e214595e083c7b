"""OAuth 1.0a authentication strategy for AtomPub clients.

Negotiates a request token, authorizes it, exchanges it for an access token
and then signs every outgoing request with that access token.

Example:
    import httpx
    from atompub_oauth import new_session

    # Negotiate all three legs (blocking)
    session = new_session(
        username="alice",
        consumer_key="your_key",
        consumer_secret="your_secret",
        signature_method="HMAC-SHA1",
        request_token_url="https://example.com/oauth/request_token",
        authorize_url="https://example.com/oauth/authorize",
        access_token_url="https://example.com/oauth/access_token",
    )

    # Sign a single request in place
    request = httpx.Request("GET", "https://example.com/feed?x=1")
    session.authenticate(request)

    # Or let httpx sign every call
    with httpx.Client(auth=session) as client:
        feed = client.get("https://example.com/feed")
"""

from atompub_oauth.auth import OAuthStrategy, new_session
from atompub_oauth.config import Credentials, Endpoints, OAuthConfig
from atompub_oauth.exceptions import AtomPubError, AuthenticationError, FailureReason
from atompub_oauth.models.auth import AccessToken, ProtocolState, RequestToken

__version__ = "0.1.0"

__all__ = [
    # Session
    "OAuthStrategy",
    "new_session",
    # Configuration
    "Credentials",
    "Endpoints",
    "OAuthConfig",
    # Models
    "AccessToken",
    "ProtocolState",
    "RequestToken",
    # Exceptions
    "AtomPubError",
    "AuthenticationError",
    "FailureReason",
]
