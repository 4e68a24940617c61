"""JSON structured logging configuration."""

import logging
import sys
from urllib.parse import urlsplit, urlunsplit

from pythonjsonlogger.json import JsonFormatter

SERVICE_NAME = "agentflow"

# Record attributes (set through ``extra=``) that may carry an upstream address.
URL_FIELDS = ("url", "webhook_url", "endpoint")


def strip_credentials(url: str) -> str:
    """Drop ``user:password@`` from *url*; anything unparseable is returned as-is."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if "@" not in parts.netloc:
        return url
    host = parts.netloc.rsplit("@", 1)[1]
    return urlunsplit(parts._replace(netloc=host))


class RedactUrlCredentials(logging.Filter):
    """Strips basic-auth credentials from URL fields before they are written.

    Webhook addresses are configured by operators and sometimes embed
    credentials; the upstream client logs the address on every failed attempt.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for name in URL_FIELDS:
            value = getattr(record, name, None)
            if isinstance(value, str):
                setattr(record, name, strip_credentials(value))
        return True


def _json_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "logger",
            },
            static_fields={"service": SERVICE_NAME},
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )
    handler.addFilter(RedactUrlCredentials())
    return handler


def setup_logging(log_level: str = "INFO") -> None:
    """Send agentflow, uvicorn and httpx logs to stdout as redacted JSON lines."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    handler = _json_handler()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.addHandler(handler)
        uv_logger.propagate = False

    # httpx logs every outbound request at INFO, full URL included; the
    # upstream client already logs failures and retries.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
