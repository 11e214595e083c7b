"""Pydantic models for OAuth tokens and negotiation state."""

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

__all__ = [
    "AccessToken",
    "Authorized",
    "HasAccessToken",
    "HasRequestToken",
    "Leg",
    "ProtocolState",
    "RequestToken",
    "SessionState",
    "Unauthorized",
]
