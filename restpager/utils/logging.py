"""Logging for pagination runs.

Everything goes to stderr so command output on stdout stays machine readable:
a rich console by default, or one JSON object per line when structured.
Log calls take keyword context, and `bind` returns a logger that adds fixed
context (such as the pagination type) to every record it writes.

Registered secrets and the values of sensitive query parameters are masked
before anything is written, including inside logged URLs.
"""

import copy
import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

REDACTED = "[REDACTED]"

# Query parameter names whose values never reach the logs
SENSITIVE_PARAM_HINTS = ("token", "key", "secret", "signature", "password")

# name=value inside a query string; group 1 keeps the name and "=", group 2 is the name
_QUERY_PARAM = re.compile(r"([?&]([^=&#\s]+)=)[^&#\s\"')]*")


def _console_logger(level: int) -> logging.Logger:
    log = logging.getLogger("restpager")
    log.handlers.clear()
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    log.addHandler(handler)
    log.setLevel(level)
    log.propagate = False
    return log


class StructuredLogger:
    """Keyword-context logger with secret redaction."""

    def __init__(self, structured: bool = False, level: str = "INFO"):
        self.structured = structured
        self.level = getattr(logging, level.upper(), logging.INFO)
        self.context: Dict[str, Any] = {}
        self._secrets = set()
        self._sensitive_params = set()
        self.logger = None if structured else _console_logger(self.level)

    def bind(self, **context) -> "StructuredLogger":
        """Return a logger that adds `context` to every record.

        The bound logger shares secrets with this one, so anything registered
        through either is redacted by both.
        """
        bound = copy.copy(self)
        bound.context = {**self.context, **context}
        return bound

    def register_secret(self, secret: str):
        """Register a secret string to be redacted from logs."""
        if secret and isinstance(secret, str) and secret.strip():
            self._secrets.add(secret)

    def register_sensitive_param(self, name: str):
        """Redact the value of query parameter `name` wherever it shows up in a URL."""
        if name:
            self._sensitive_params.add(name.lower())

    def _is_sensitive_param(self, name: str) -> bool:
        name = name.lower()
        return name in self._sensitive_params or any(h in name for h in SENSITIVE_PARAM_HINTS)

    def _redact(self, text: str) -> str:
        if not text:
            return text
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return _QUERY_PARAM.sub(
            lambda m: m.group(1) + REDACTED if self._is_sensitive_param(m.group(2)) else m.group(0),
            text,
        )

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def _log(self, level: int, message: str, **kwargs):
        if level < self.level:
            return

        fields = {
            k: self._redact(v) if isinstance(v, str) else v
            for k, v in {**self.context, **kwargs}.items()
        }
        message = self._redact(str(message))

        if self.structured:
            entry = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "level": logging.getLevelName(level),
                "message": message,
                **fields,
            }
            print(json.dumps(entry, default=str), file=sys.stderr)
            return

        if fields:
            message = f"{message} ({', '.join(f'{k}={v}' for k, v in fields.items())})"
        self.logger.log(level, message)


# Global instance to be initialized
logger = StructuredLogger()


def get_logger() -> StructuredLogger:
    """Return the currently configured global logger."""
    return logger


def configure_logging(structured: bool, level: Optional[str] = "INFO"):
    """Configure the global logger."""
    global logger
    logger = StructuredLogger(structured=structured, level=level or "INFO")
