"""Non-fatal diagnostics for route building and resolution.

Diagnostics go to the ``wayfinder.routing`` logger and never raise.
Callers pass ``diagnose=False`` (production mode) to silence them.
"""

import logging

logger = logging.getLogger("wayfinder.routing")


def warn(diagnose: bool, message: str, *args: object) -> None:
    """Log a configuration or resolution warning when *diagnose* is set."""
    if diagnose:
        logger.warning(message, *args)


def error(diagnose: bool, message: str, *args: object) -> None:
    """Log a resolution failure that was degraded to an unmatched route."""
    if diagnose:
        logger.error(message, *args)
