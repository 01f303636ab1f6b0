"""
Logging configuration for the admin panel service.

Every module logs through ``get_logger(__name__)`` into one stdout format.
Levels carry meaning here:

- INFO: successful user and profile mutations (``admin_panel.services.*``),
  failed logins, and requests the error handler turns into 4xx responses.
- WARNING: rejected administrator guards, permission denials from the API
  gates (``admin_panel.api.v1.deps``) and the rate limiter falling back to
  its in-process counter.
- ERROR: failed readiness checks.

Emails are never logged; rejections name the user id only.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from admin_panel.core.config import get_application_settings


def setup_logging(debug: Optional[bool] = None) -> None:
    """Configure root logging for the service.

    Parameters
    ----------
    debug : bool, optional
        Force DEBUG level on or off. If None, ``APP_DEBUG`` decides.
    """
    settings = get_application_settings()
    debug = settings.debug if debug is None else debug

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True,
    )

    # Quiet per-request lines.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured for %s (version %s, debug=%s, seed_data=%s)",
        settings.environment,
        settings.version,
        debug,
        settings.seed_data,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
