"""
Logging Setup

All loggers live under the ``s2a_autoconfig`` namespace. Importing the
package installs no handlers, so records reach whatever the host
application configured. ``setup_logging`` (used by the CLI) gives the
package logger its own stderr handler and stops propagation, so each
record is emitted once.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

PACKAGE_LOGGER = "s2a_autoconfig"
LOG_LEVEL_ENV_VAR = "S2A_AUTOCONFIG_LOG_LEVEL"
LOG_FORMAT_ENV_VAR = "S2A_AUTOCONFIG_LOG_FORMAT"

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(component)s: %(message)s"

# Attributes present on every LogRecord; anything else arrived via ``extra``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def _parse_level(name: str | None) -> int | None:
    if not name:
        return None
    level = getattr(logging, name.upper(), None)
    return level if isinstance(level, int) else None


class JsonFormatter(logging.Formatter):
    """One JSON object per record with ``extra`` fields at the top level"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ComponentAdapter(logging.LoggerAdapter):
    """Stamps ``component`` on every record and keeps per-call extras"""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_service_logger(component: str) -> ComponentAdapter:
    """
    Logger for one component, e.g. ``mtls.sync``.

    S2A_AUTOCONFIG_LOG_LEVEL, when set, pins the package level; otherwise
    the level is inherited from the application's loggers.
    """
    level = _parse_level(os.environ.get(LOG_LEVEL_ENV_VAR))
    if level is not None:
        logging.getLogger(PACKAGE_LOGGER).setLevel(level)

    logger = logging.getLogger(f"{PACKAGE_LOGGER}.{component}")
    return ComponentAdapter(logger, {"component": component})


def setup_logging(
    log_level: str | None = None,
    json_format: bool | None = None,
) -> logging.Logger:
    """
    Route package logs to stderr (stdout stays free for CLI output).

    Args:
        log_level: Level name; defaults to S2A_AUTOCONFIG_LOG_LEVEL, then INFO
        json_format: JSON lines when True, plain text otherwise; defaults
            to S2A_AUTOCONFIG_LOG_FORMAT

    Returns:
        The package logger
    """
    if log_level is None:
        log_level = os.environ.get(LOG_LEVEL_ENV_VAR)
    if json_format is None:
        json_format = os.environ.get(LOG_FORMAT_ENV_VAR, "json").lower() == "json"

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(_parse_level(log_level) or logging.INFO)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            TEXT_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
            defaults={"component": "-"},
        ))
    package_logger.addHandler(handler)
    package_logger.propagate = False

    return package_logger
