"""Logfire observability initialization and instrumentation."""

import logging

import logfire

from mindshare import __version__
from mindshare.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings, app=None) -> None:
    """
    Initialize Logfire and bridge stdlib logging into it.

    Call once at startup, before the first request is served. Without a
    token Logfire is configured locally only, so spans stay no-ops and
    nothing leaves the process.

    Instruments:
    - HTTPX clients (upstream leaderboard pages)
    - FastAPI (inbound /api/check requests), when an app is given
    - Python logging (bridged through LogfireLoggingHandler)
    """
    if not settings.logfire_token:
        logfire.configure(send_to_logfire=False, console=False)
        logger.warning("Logfire token not set - observability disabled")
        return

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="mindshare",
            service_version=__version__,
            environment=settings.environment,
        )

        logfire.instrument_httpx()

        if app is not None:
            logfire.instrument_fastapi(app)

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire cloud tracking initialized")

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
