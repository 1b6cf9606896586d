"""Zyxel GS1900 Switch Monitoring Library.

Runs read-only monitoring commands on the GS1900 SSH command line and turns
their output into typed records. Port and PoE settings are changed through
the web interface.
"""

__version__ = "0.1.0"

import os
import sys
from typing import Any, Callable, Dict

from loguru import logger as glogger

glogger.disable(__name__)


def _loguru_skiplog_filter(record: dict) -> bool:  # type: ignore[type-arg]
    """Filter function to hide records with ``extra['skiplog']`` set."""
    return not record.get("extra", {}).get("skiplog", False)


def configure_logging(
    loguru_filter: Callable[[Dict[str, Any]], bool] = _loguru_skiplog_filter,
) -> None:
    """Configure a default ``loguru`` sink with a convenient format and filter."""
    os.environ["LOGURU_LEVEL"] = os.getenv("LOGURU_LEVEL", "DEBUG")
    glogger.remove()
    logger_fmt: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan>::<cyan>{extra[classname]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )
    glogger.add(sys.stderr, level=os.getenv("LOGURU_LEVEL"), format=logger_fmt, filter=loguru_filter)  # type: ignore[arg-type]
    glogger.configure(extra={"classname": "None", "skiplog": False})


from gs1900ctl.catalog import QueryKind, list_queries, query, resolve  # noqa: E402
from gs1900ctl.client import GS1900Switch  # noqa: E402
from gs1900ctl.config import SessionSettings  # noqa: E402
from gs1900ctl.exceptions import (  # noqa: E402
    AuthenticationError,
    CommandError,
    ControlError,
    InvalidParameterError,
    ParseError,
    StreamClosedError,
    SwitchConnectionError,
    SwitchError,
    SwitchTimeoutError,
)
from gs1900ctl.session import LineReader, Session, SSHTransport  # noqa: E402

__all__ = [
    "glogger",
    "configure_logging",
    "GS1900Switch",
    "Session",
    "LineReader",
    "SSHTransport",
    "SessionSettings",
    "QueryKind",
    "query",
    "resolve",
    "list_queries",
    "SwitchError",
    "SwitchConnectionError",
    "AuthenticationError",
    "StreamClosedError",
    "SwitchTimeoutError",
    "CommandError",
    "ParseError",
    "InvalidParameterError",
    "ControlError",
]
