"""Logging configuration for the application.

Route-level logs go through stdlib logging; anything that looks like a
signed credential is scrubbed before a record is emitted.
"""

import logging
import re
import sys

from pavilion.config import Settings

# header.payload.signature, each part base64url
_JWT_PATTERN = re.compile(r"eyJ[\w-]+\.[\w-]+\.[\w-]+")


class CredentialRedactingFilter(logging.Filter):
    """Replaces signed credentials in log messages with a placeholder."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _JWT_PATTERN.sub("<credential>", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(settings: Settings) -> None:
    """Configure application logging.

    Args:
        settings: Application settings
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CredentialRedactingFilter())

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
        force=True,  # Override any existing configuration
    )

    # Third-party chatter stays at WARNING
    for noisy in ("httpx", "httpcore", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger("pavilion").setLevel(level)

    logging.getLogger(__name__).info(
        f"Logging configured: environment={settings.environment}, "
        f"level={logging.getLevelName(level)}"
    )
