"""OAuth 1.0a parameter assembly and request signing."""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

if TYPE_CHECKING:
    from atompub_oauth.config import Credentials
    from atompub_oauth.models.auth import AccessToken, RequestToken

NonceSource = Callable[[], tuple[str, str]]
"""Returns a fresh ``(nonce, timestamp)`` pair on every call."""

_DEFAULT_PORTS = {"http": 80, "https": 443}

_HMAC_DIGESTS = {
    "HMAC-SHA1": hashlib.sha1,
    "HMAC-SHA256": hashlib.sha256,
}


def default_nonce_source() -> tuple[str, str]:
    """Random hex nonce plus the current Unix time in seconds."""
    return secrets.token_hex(16), str(int(time.time()))


def percent_encode(value: str) -> str:
    """RFC 3986 percent-encoding, as OAuth 1.0a requires."""
    return quote(value, safe="")


def query_parameters(url: str) -> dict[str, str]:
    """Existing query parameters of ``url``; later duplicates win."""
    return dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))


def normalize_url(url: str) -> str:
    """Base string URI: lowercase scheme and host, no default port, query or fragment."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    port = parts.port
    netloc = host if port is None or _DEFAULT_PORTS.get(scheme) == port else f"{host}:{port}"
    return f"{scheme}://{netloc}{parts.path or '/'}"


def normalize_parameters(params: Mapping[str, str]) -> str:
    """Encode, sort and join parameters for the signature base string."""
    encoded = sorted(
        (percent_encode(key), percent_encode(value))
        for key, value in params.items()
        if key != "oauth_signature"
    )
    return "&".join(f"{key}={value}" for key, value in encoded)


def signature_base_string(method: str, url: str, params: Mapping[str, str]) -> str:
    """Build the canonical string that gets signed."""
    return "&".join(
        [
            method.upper(),
            percent_encode(normalize_url(url)),
            percent_encode(normalize_parameters(params)),
        ]
    )


def sign(
    base_string: str,
    *,
    signature_method: str,
    consumer_secret: str,
    token_secret: str = "",
) -> str:
    """Sign a base string with the consumer secret and optional token secret."""
    signing_key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"

    if signature_method == "PLAINTEXT":
        return signing_key

    try:
        digestmod = _HMAC_DIGESTS[signature_method]
    except KeyError:
        msg = f"Unsupported signature method: {signature_method!r}"
        raise ValueError(msg) from None

    digest = hmac.new(signing_key.encode(), base_string.encode(), digestmod).digest()
    return base64.b64encode(digest).decode()


def render_query(url: str, params: Mapping[str, str]) -> str:
    """Replace the query string of ``url`` entirely with ``params``."""
    parts = urlsplit(url)
    query = "&".join(
        f"{percent_encode(key)}={percent_encode(value)}" for key, value in params.items()
    )
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


class SignatureEngine:
    """Builds OAuth parameter sets and signs them for one consumer.

    A new nonce and timestamp are drawn from ``nonce_source`` for every
    signed call, so no two requests of a session share a nonce.
    """

    def __init__(
        self,
        credentials: Credentials,
        nonce_source: NonceSource = default_nonce_source,
    ) -> None:
        self.credentials = credentials
        self.nonce_source = nonce_source

    def oauth_parameters(
        self,
        *,
        nonce: str,
        timestamp: str,
        token: RequestToken | AccessToken | None = None,
        negotiation: bool = False,
    ) -> dict[str, str]:
        """OAuth protocol parameters for one call, without the signature."""
        params = {
            "oauth_version": "1.0",
            "oauth_consumer_key": self.credentials.consumer_key,
            "oauth_signature_method": self.credentials.signature_method,
            "oauth_timestamp": timestamp,
            "oauth_nonce": nonce,
        }
        if self.credentials.username is not None:
            params["xoauth_requestor_id"] = self.credentials.username
        if negotiation:
            params["oauth_callback"] = "none"
        if token is not None:
            params["oauth_token"] = token.token
            params["oauth_token_secret"] = token.token_secret
        return params

    def signed_parameters(
        self,
        method: str,
        url: str,
        params: Mapping[str, str] | None = None,
        *,
        token: RequestToken | AccessToken | None = None,
        negotiation: bool = False,
    ) -> dict[str, str]:
        """Merge caller and OAuth parameters and append ``oauth_signature``.

        OAuth parameters overwrite caller parameters of the same name.
        """
        nonce, timestamp = self.nonce_source()
        signed = dict(params or {})
        signed.update(
            self.oauth_parameters(
                nonce=nonce,
                timestamp=timestamp,
                token=token,
                negotiation=negotiation,
            )
        )
        signed.pop("oauth_signature", None)

        base_string = signature_base_string(method, url, signed)
        signed["oauth_signature"] = sign(
            base_string,
            signature_method=self.credentials.signature_method,
            consumer_secret=self.credentials.consumer_secret,
            token_secret=token.token_secret if token is not None else "",
        )
        return signed

    def sign_url(
        self,
        method: str,
        url: str,
        *,
        token: RequestToken | AccessToken | None = None,
        negotiation: bool = False,
    ) -> str:
        """Return ``url`` with its query string replaced by the signed parameter set."""
        signed = self.signed_parameters(
            method,
            url,
            query_parameters(url),
            token=token,
            negotiation=negotiation,
        )
        return render_query(url, signed)
