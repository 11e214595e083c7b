"""AtomPub OAuth CLI - diagnose OAuth negotiation from the command line."""

from atompub_oauth.cli.app import app

# Import command modules to register them with the app
from atompub_oauth.cli.commands import auth

# Register sub-apps
app.add_typer(auth.app, name="auth", help="OAuth negotiation commands.")


def main() -> None:
    """Entry point for the CLI."""
    app()


__all__ = ["app", "main"]
