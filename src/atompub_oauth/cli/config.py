"""CLI configuration passed through the Typer context."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from atompub_oauth.auth.negotiation import Decoder, no_decode, percent_decode
from atompub_oauth.config import OAuthConfig


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


@dataclass
class CLIConfig:
    """Configuration passed through Typer context.

    Attributes:
        verbose: Enable debug logging on stderr.
        config_file: Explicit JSON config file; the XDG default is used when None.
        percent_decode: Percent-decode token values in negotiation responses.
    """

    verbose: bool = False
    config_file: Path | None = None
    percent_decode: bool = False

    @property
    def decoder(self) -> Decoder:
        """Decoding step applied to negotiation response values."""
        return percent_decode if self.percent_decode else no_decode

    def load_oauth_config(self) -> OAuthConfig:
        """Load OAuth settings from environment variables or the config file.

        Environment variables take precedence; the file (``config_file`` or
        the XDG default) is read only when none of them are set.

        Raises:
            ValueError: If the configuration is incomplete or invalid
            FileNotFoundError: If no environment config is set and the file is missing
        """
        return OAuthConfig.load(self.config_file)
