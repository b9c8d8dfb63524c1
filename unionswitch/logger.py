"""
Logging for unionswitch

A small facade over the standard logging module used by every part of the
analyzer:

- keyword context is appended as ``key=value`` pairs
- ``node=`` adds the source position of an AST node (line:col)
- ``logger.error(..., exc_type=...)`` raises instead of only logging when
  raise-on-error mode is enabled (tests and library callers use this)

Usage:
    from .logger import logger
    logger.debug("Skipping construct", line=node.lineno)
    logger.error("Cannot parse module", node=node, exc_type=SyntaxError)
"""

import logging
import sys
from enum import IntEnum
from typing import Any, Optional, Type


class LogLevel(IntEnum):
    """Log levels understood by set_log_level()"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    @classmethod
    def parse(cls, value) -> "LogLevel":
        """Accept a LogLevel, an int or a level name ("debug", "WARNING")"""
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, int):
            return cls(value)
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}") from None


class Logger:
    """Context-aware logger wrapper"""

    def __init__(self, name: str = "unionswitch"):
        self._logger = logging.getLogger(name)
        self._raise_on_error = False
        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
            self._logger.addHandler(handler)
        self._logger.setLevel(LogLevel.WARNING)

    @property
    def raise_on_error(self) -> bool:
        return self._raise_on_error

    def set_level(self, level) -> None:
        self._logger.setLevel(LogLevel.parse(level))

    def set_raise_on_error(self, enabled: bool) -> None:
        self._raise_on_error = bool(enabled)

    def is_enabled_for(self, level) -> bool:
        return self._logger.isEnabledFor(LogLevel.parse(level))

    @staticmethod
    def _format(msg: str, node: Any = None, context: Optional[dict] = None) -> str:
        parts = [msg]
        if node is not None and hasattr(node, "lineno"):
            parts.append(f"at line {node.lineno}:{getattr(node, 'col_offset', 0) + 1}")
        if context:
            parts.append("(" + ", ".join(f"{k}={v}" for k, v in context.items()) + ")")
        return " ".join(parts)

    def debug(self, msg: str, node: Any = None, **context) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(self._format(msg, node, context))

    def info(self, msg: str, node: Any = None, **context) -> None:
        if self._logger.isEnabledFor(logging.INFO):
            self._logger.info(self._format(msg, node, context))

    def warning(self, msg: str, node: Any = None, **context) -> None:
        self._logger.warning(self._format(msg, node, context))

    def error(self, msg: str, node: Any = None,
              exc_type: Optional[Type[BaseException]] = None, **context) -> None:
        """Log an error; raise exc_type(msg) when raise-on-error is enabled"""
        formatted = self._format(msg, node, context)
        if self._raise_on_error:
            raise (exc_type or RuntimeError)(formatted)
        self._logger.error(formatted)


logger = Logger()


def set_log_level(level) -> None:
    """Set the minimum level of messages that are emitted"""
    logger.set_level(level)


def set_raise_on_error(enabled: bool) -> None:
    """Make logger.error() raise its exc_type instead of only logging"""
    logger.set_raise_on_error(enabled)
