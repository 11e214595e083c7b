"""Main Typer application."""

import logging
import sys
from pathlib import Path

import typer

from atompub_oauth.cli.config import CLIConfig

app = typer.Typer(
    name="atompub-oauth",
    help="OAuth 1.0a negotiation and request signing for AtomPub services.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log each negotiation leg to stderr.",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        "-c",
        help="JSON config file (default: environment, then ~/.config/atompub-oauth/config.json).",
        envvar="ATOMPUB_OAUTH_CONFIG_FILE",
    ),
    percent_decode: bool = typer.Option(
        False,
        "--percent-decode/--no-percent-decode",
        help="Percent-decode token values in negotiation responses.",
    ),
) -> None:
    """OAuth 1.0a negotiation and request signing for AtomPub services."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
        )
    ctx.obj = CLIConfig(
        verbose=verbose,
        config_file=config_file,
        percent_decode=percent_decode,
    )
