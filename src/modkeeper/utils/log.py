"""structlog setup for command-line use.

Library code only calls ``structlog.get_logger(__name__)``; the CLI calls
:func:`configure_logging` once so events go to stderr and stdout stays
clean for ``--json`` output.
"""

import logging
import os
import sys

import structlog

from modkeeper.core.constants import ENV_DEBUG


def configure_logging(verbose: bool | None = None) -> None:
    """Route structlog events to stderr.

    Args:
        verbose: Log INFO events too. Defaults to the MODKEEPER_DEBUG setting;
            otherwise only warnings and errors are shown.
    """
    if verbose is None:
        verbose = os.environ.get(ENV_DEBUG, "").lower() in ("1", "true", "yes")

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.INFO if verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
