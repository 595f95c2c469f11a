"""Process-wide logging configuration."""

import logging


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with the application's line format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
