"""OAuth token and session state models."""

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class ProtocolState(StrEnum):
    """Phase of the three-legged negotiation."""

    UNAUTHORIZED = "unauthorized"
    REQUEST_TOKEN = "request_token"
    AUTHORIZED = "authorized"
    ACCESS_TOKEN = "access_token"


class Leg(StrEnum):
    """One request/response round trip of the negotiation."""

    REQUEST_TOKEN = "request_token"
    AUTHORIZE = "authorize"
    ACCESS_TOKEN = "access_token"


class RequestToken(BaseModel):
    """OAuth request token (first leg of the flow)."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(description="Request token value")
    token_secret: str = Field(description="Request token secret", repr=False)


class AccessToken(BaseModel):
    """OAuth access token (final leg of the flow)."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(description="Access token value")
    token_secret: str = Field(description="Access token secret", repr=False)


class Unauthorized(BaseModel):
    """No tokens yet."""

    model_config = ConfigDict(frozen=True)

    phase: Literal[ProtocolState.UNAUTHORIZED] = ProtocolState.UNAUTHORIZED


class HasRequestToken(BaseModel):
    """Holding an unauthorized request token."""

    model_config = ConfigDict(frozen=True)

    phase: Literal[ProtocolState.REQUEST_TOKEN] = ProtocolState.REQUEST_TOKEN
    token: RequestToken


class Authorized(BaseModel):
    """The server has approved the request token."""

    model_config = ConfigDict(frozen=True)

    phase: Literal[ProtocolState.AUTHORIZED] = ProtocolState.AUTHORIZED
    token: RequestToken


class HasAccessToken(BaseModel):
    """Terminal state: a usable access token is held."""

    model_config = ConfigDict(frozen=True)

    phase: Literal[ProtocolState.ACCESS_TOKEN] = ProtocolState.ACCESS_TOKEN
    token: AccessToken


SessionState = Annotated[
    Unauthorized | HasRequestToken | Authorized | HasAccessToken,
    Field(discriminator="phase"),
]
