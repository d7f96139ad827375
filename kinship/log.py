"""Logging setup for the kinship service."""

import logging
from typing import Optional

from kinship.config import LogSettings, settings

_configured = False


def configure_logging(config: Optional[LogSettings] = None, force: bool = False) -> None:
    """Configure root logging once per process."""
    global _configured
    if _configured and not force:
        return

    config = config or settings.log
    logging.basicConfig(
        level=getattr(logging, config.level.upper(), logging.INFO),
        format=config.format,
        force=force,
    )
    _configured = True
