"""Authentication commands."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import cast

import httpx
import typer

from atompub_oauth.auth import OAuthStrategy
from atompub_oauth.cli.config import CLIConfig, OutputFormat
from atompub_oauth.cli.formatters import (
    console,
    format_output,
    mask,
    print_error,
    print_info,
    print_success,
)
from atompub_oauth.config import OAuthConfig
from atompub_oauth.exceptions import AuthenticationError
from atompub_oauth.models.auth import AccessToken

app = typer.Typer(no_args_is_help=True)


def _load_config(config: CLIConfig) -> OAuthConfig:
    try:
        return config.load_oauth_config()
    except (ValueError, FileNotFoundError) as e:
        print_error(str(e))
        print_info("Set the ATOMPUB_OAUTH_* environment variables")
        print_info("Or create a config file at ~/.config/atompub-oauth/config.json")
        raise typer.Exit(1) from None


@contextmanager
def _reporting_failures() -> Iterator[None]:
    """Turn authentication failures into a readable error and exit code 1."""
    try:
        yield
    except AuthenticationError as e:
        print_error(e.message)
        if e.leg is not None:
            print_info(f"Failed leg: {e.leg} (reason: {e.reason})")
        raise typer.Exit(1) from None


def _negotiate(config: CLIConfig, oauth_config: OAuthConfig) -> OAuthStrategy:
    print_info("Negotiating OAuth access token...")
    with _reporting_failures():
        return OAuthStrategy.negotiate(oauth_config, decode=config.decoder)


@app.command("negotiate")
def negotiate(
    ctx: typer.Context,
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
    show_secret: bool = typer.Option(
        False,
        "--show-secret",
        help="Print the access token secret unmasked.",
    ),
) -> None:
    """Run the three OAuth legs and print the resulting access token.

    The token is not stored anywhere.
    """
    config: CLIConfig = ctx.obj
    oauth_config = _load_config(config)

    session = _negotiate(config, oauth_config)
    token = cast(AccessToken, session.access_token)

    print_success("Access token obtained")
    format_output(
        {
            "token": token.token,
            "token_secret": token.token_secret if show_secret else mask(token.token_secret),
        },
        output,
        title="Access Token",
    )


@app.command("sign")
def sign(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="URL of the request to sign."),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
) -> None:
    """Negotiate, then print URL with its signed OAuth query string."""
    config: CLIConfig = ctx.obj
    oauth_config = _load_config(config)

    session = _negotiate(config, oauth_config)
    request = httpx.Request(method.upper(), url)
    with _reporting_failures():
        session.authenticate(request)

    console.print(str(request.url), soft_wrap=True, highlight=False)


@app.command("config")
def show_config(
    ctx: typer.Context,
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--output",
        "-o",
        help="Output format.",
    ),
) -> None:
    """Show the resolved OAuth configuration (secrets masked)."""
    config: CLIConfig = ctx.obj
    oauth_config = _load_config(config)

    credentials = oauth_config.credentials
    endpoints = oauth_config.endpoints
    format_output(
        {
            "consumer_key": credentials.consumer_key,
            "consumer_secret": mask(credentials.consumer_secret),
            "signature_method": credentials.signature_method,
            "username": credentials.username or "",
            "request_token_url": endpoints.request_token_url,
            "authorize_url": endpoints.authorize_url,
            "access_token_url": endpoints.access_token_url,
            "timeout": oauth_config.timeout,
        },
        output,
        title="OAuth Configuration",
    )
