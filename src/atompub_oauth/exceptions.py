"""Typed exceptions for the AtomPub OAuth client."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from atompub_oauth.models.auth import Leg, ProtocolState


class FailureReason(StrEnum):
    """Why an authentication step failed."""

    TRANSPORT = "transport"
    MISSING_TOKEN = "missing_token"
    UNEXPECTED_STATUS = "unexpected_status"
    NOT_READY = "not_ready"
    ALREADY_NEGOTIATED = "already_negotiated"


class AtomPubError(Exception):
    """Base exception for all AtomPub client errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationError(AtomPubError):
    """OAuth negotiation or request signing failed.

    Carries enough context to tell which leg failed and why, so callers
    can branch on ``reason`` instead of matching message text.
    """

    def __init__(
        self,
        message: str,
        *,
        phase: ProtocolState,
        reason: FailureReason,
        leg: Leg | None = None,
        status_code: int | None = None,
    ) -> None:
        self.phase = phase  # state the session was in when it failed
        self.reason = reason
        self.leg = leg
        self.status_code = status_code
        super().__init__(message)
