"""Configuration management for the AtomPub OAuth client."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

SUPPORTED_SIGNATURE_METHODS = ("HMAC-SHA1", "HMAC-SHA256", "PLAINTEXT")

DEFAULT_TIMEOUT = 30.0

_ENV_PREFIX = "ATOMPUB_OAUTH_"

_REQUIRED_ENV = (
    "CONSUMER_KEY",
    "CONSUMER_SECRET",
    "REQUEST_TOKEN_URL",
    "AUTHORIZE_URL",
    "ACCESS_TOKEN_URL",
)


class MissingConfigError(ValueError):
    """Required configuration values are absent."""

    def __init__(self, message: str, *, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(message)


def _require(data: dict[str, object], key: str) -> str:
    value = data.get(key)
    if value is None:
        raise KeyError(key)
    return str(value)


def _get_config_dir() -> Path:
    """Get XDG-compliant config directory."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "atompub-oauth"
    return Path.home() / ".config" / "atompub-oauth"


@dataclass(frozen=True, slots=True)
class Credentials:
    """Consumer credentials, fixed for the life of a session."""

    consumer_key: str
    consumer_secret: str = field(default="", repr=False)
    signature_method: str = "HMAC-SHA1"
    username: str | None = None  # sent as xoauth_requestor_id

    def __post_init__(self) -> None:
        if self.signature_method not in SUPPORTED_SIGNATURE_METHODS:
            msg = (
                f"Unsupported signature method: {self.signature_method!r} "
                f"(expected one of {', '.join(SUPPORTED_SIGNATURE_METHODS)})"
            )
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Endpoints:
    """The three OAuth negotiation endpoints."""

    request_token_url: str
    authorize_url: str
    access_token_url: str


@dataclass(frozen=True, slots=True)
class OAuthConfig:
    """Everything needed to negotiate a session."""

    credentials: Credentials
    endpoints: Endpoints
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> OAuthConfig:
        """Create config from environment variables.

        Expected env vars:
        - ATOMPUB_OAUTH_CONSUMER_KEY
        - ATOMPUB_OAUTH_CONSUMER_SECRET
        - ATOMPUB_OAUTH_REQUEST_TOKEN_URL
        - ATOMPUB_OAUTH_AUTHORIZE_URL
        - ATOMPUB_OAUTH_ACCESS_TOKEN_URL

        Optional:
        - ATOMPUB_OAUTH_SIGNATURE_METHOD (default HMAC-SHA1)
        - ATOMPUB_OAUTH_USERNAME
        - ATOMPUB_OAUTH_TIMEOUT (seconds)
        """
        values = {name: os.environ.get(_ENV_PREFIX + name) for name in _REQUIRED_ENV}
        missing = [_ENV_PREFIX + name for name, value in values.items() if not value]
        if missing:
            msg = f"Missing required environment variables: {', '.join(missing)}"
            raise MissingConfigError(msg, missing=missing)

        timeout = os.environ.get(_ENV_PREFIX + "TIMEOUT")
        try:
            timeout_seconds = float(timeout) if timeout else None
        except ValueError:
            msg = f"Invalid {_ENV_PREFIX}TIMEOUT: {timeout!r} is not a number"
            raise ValueError(msg) from None

        return cls.from_dict(
            {
                "consumer_key": values["CONSUMER_KEY"],
                "consumer_secret": values["CONSUMER_SECRET"],
                "signature_method": os.environ.get(_ENV_PREFIX + "SIGNATURE_METHOD"),
                "username": os.environ.get(_ENV_PREFIX + "USERNAME"),
                "request_token_url": values["REQUEST_TOKEN_URL"],
                "authorize_url": values["AUTHORIZE_URL"],
                "access_token_url": values["ACCESS_TOKEN_URL"],
                "timeout": timeout_seconds,
            }
        )

    @classmethod
    def from_file(cls, path: Path | None = None) -> OAuthConfig:
        """Load config from JSON file.

        Default path: ~/.config/atompub-oauth/config.json

        Expected format:
        {
            "consumer_key": "...",
            "consumer_secret": "...",
            "signature_method": "HMAC-SHA1",
            "username": "...",
            "request_token_url": "...",
            "authorize_url": "...",
            "access_token_url": "..."
        }
        """
        if path is None:
            path = _get_config_dir() / "config.json"

        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with path.open() as f:
            data = json.load(f)

        try:
            return cls.from_dict(data)
        except KeyError as e:
            msg = f"Missing key {e.args[0]!r} in config file {path}"
            raise ValueError(msg) from None

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> OAuthConfig:
        """Build config from a flat mapping; absent optional keys use defaults."""
        credentials = Credentials(
            consumer_key=_require(data, "consumer_key"),
            consumer_secret=_require(data, "consumer_secret"),
            signature_method=str(data.get("signature_method") or "HMAC-SHA1"),
            username=str(data["username"]) if data.get("username") else None,
        )
        endpoints = Endpoints(
            request_token_url=_require(data, "request_token_url"),
            authorize_url=_require(data, "authorize_url"),
            access_token_url=_require(data, "access_token_url"),
        )
        timeout = data.get("timeout")
        return cls(
            credentials=credentials,
            endpoints=endpoints,
            timeout=float(timeout) if timeout is not None else DEFAULT_TIMEOUT,  # type: ignore[arg-type]
        )

    @classmethod
    def load(cls, path: Path | None = None) -> OAuthConfig:
        """Load config from environment or file (env takes precedence).

        The file is only consulted when none of the required environment
        variables are set; a partial or invalid environment raises.
        """
        try:
            return cls.from_env()
        except MissingConfigError as e:
            if len(e.missing) < len(_REQUIRED_ENV):
                raise
            return cls.from_file(path)
