"""
Logging setup for ScoreBoard

Records go to stderr, as JSON or plain text depending on LOG_FORMAT, so
command output on stdout stays machine-readable. Domain modules log through
get_logger(__name__, domain=...) and the domain tag rides along on every line.
"""
import logging
import sys
from datetime import UTC, datetime
from typing import IO, Any, Dict, MutableMapping, Optional, Tuple

from pythonjsonlogger import jsonlogger

from core.config import settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
JSON_FIELDS = "%(timestamp)s %(level)s %(name)s %(message)s"


class ScoreBoardJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping app, environment and a UTC timestamp on each record"""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.update(
            timestamp=datetime.fromtimestamp(record.created, UTC).isoformat(),
            level=record.levelname,
            logger=record.name,
            app=settings.app_name,
            environment=settings.environment,
        )
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return ScoreBoardJsonFormatter(JSON_FIELDS)
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def setup_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """(Re)configure the root logger; arguments override the settings"""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, (level or settings.log_level).upper()))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(build_formatter(log_format or settings.log_format))
    root_logger.addHandler(handler)


class ContextLogger(logging.LoggerAdapter):
    """Adapter merging a fixed context into the `extra` of every call"""

    def __init__(self, logger: logging.Logger, context: Optional[Dict[str, Any]] = None):
        super().__init__(logger, dict(context or {}))

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> Tuple[str, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **context) -> "ContextLogger":
        """New logger carrying this logger's context plus `context`"""
        return ContextLogger(self.logger, {**self.extra, **context})


def get_logger(name: str, **context) -> ContextLogger:
    """
    Get a logger carrying a fixed context

    Example:
        logger = get_logger(__name__, domain="d10_analytics")
        logger.info("Reshaped trend series", extra={"rows": 6})
    """
    return ContextLogger(logging.getLogger(name), context)


setup_logging()
