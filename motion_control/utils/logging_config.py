"""Unified logging configuration for all entrypoints.

Provides consistent logging for the joint loader and its scripts:
    - Console and optional file handlers
    - JSON output mode for ingestion (ELK, Vector, etc.)
    - Contextual fields (joint, config) on every record
    - Warning capture (Python warnings → logging)

Public API:
    setup_logging(log_level="INFO", context={"app": "configure_joint"})
    get_logger(name)
    push_context(joint=2)
    pop_context(keys=["joint"])
    with log_context(joint=2): ...

Format examples:
    Human: 2025-10-28T13:45:12.345Z | INFO     | joint=2 | Joint activated
    JSON: {"t":"2025-10-28T13:45:12.345Z","lvl":"INFO","joint":2,"msg":"..."}

Context uses contextvars for thread isolation.
Idempotent: repeated setup_logging() calls don't duplicate handlers.
"""

import contextlib
import contextvars
import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


# Context variable for per-thread contextual fields
_context_var = contextvars.ContextVar('logging_context', default={})

# Track if logging has been configured (idempotency)
_configured = False


class ContextFormatter(logging.Formatter):
    """Formatter that includes contextual fields.

    Supports:
        - Human-readable format with colors (optional)
        - JSON format for machine ingestion
        - Contextual fields from push_context()
    """

    def __init__(
        self,
        fmt_mode: str = "human",
        use_color: bool = True,
        tz: str = "UTC"
    ):
        super().__init__()
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()
        self.tz = tz

        # ANSI color codes
        self.colors = {
            'DEBUG': '\033[36m',    # Cyan
            'INFO': '\033[32m',     # Green
            'WARNING': '\033[33m',  # Yellow
            'ERROR': '\033[31m',    # Red
            'CRITICAL': '\033[35m', # Magenta
            'RESET': '\033[0m'
        }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record."""
        context = _context_var.get({})

        if self.tz == "UTC":
            ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        else:
            ts = datetime.fromtimestamp(record.created)

        if self.fmt_mode == "json":
            return self._format_json(record, ts, context)
        return self._format_human(record, ts, context)

    def _format_json(
        self,
        record: logging.LogRecord,
        ts: datetime,
        context: dict
    ) -> str:
        """Format as JSON line."""
        log_dict = {
            't': ts.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
            'pid': os.getpid(),
            'msg': record.getMessage()
        }
        log_dict.update(context)

        if record.exc_info:
            log_dict['exc'] = self.formatException(record.exc_info)

        return json.dumps(log_dict, default=str)

    def _format_human(
        self,
        record: logging.LogRecord,
        ts: datetime,
        context: dict
    ) -> str:
        """Format as human-readable line."""
        ts_str = ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'

        level = record.levelname
        if self.use_color:
            level = f"{self.colors.get(level, '')}{level:8s}{self.colors['RESET']}"
        else:
            level = f"{level:8s}"

        context_str = ' '.join(f"{k}={v}" for k, v in context.items())

        parts = [ts_str, '|', level, '|']
        if context_str:
            parts.extend([context_str, '|'])
        parts.append(record.getMessage())

        line = ' '.join(parts)

        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)

        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    tz: str = "UTC",
    capture_warnings: bool = True,
    context: Optional[Dict[str, Any]] = None
) -> List[logging.Handler]:
    """Configure root logger (idempotent).

    Parameters
    ----------
    log_level : str
        Logging level: "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
    log_file : str, optional
        Log file path; None for no file logging
    json : bool
        Use JSON format for the file handler, default False
    color : bool
        Use ANSI colors in console output, default True
    to_stderr : bool
        Log to stderr (console), default True
    tz : str
        Timezone for timestamps, "UTC" (default) or "local"
    capture_warnings : bool
        Capture Python warnings to logging, default True
    context : dict, optional
        Initial contextual fields (e.g., {"app": "configure_joint"})

    Returns
    -------
    list[logging.Handler]
        Handlers installed on the root logger
    """
    global _configured

    root = logging.getLogger()

    if _configured:
        root.handlers.clear()

    root.setLevel(getattr(logging, log_level.upper()))

    handlers: List[logging.Handler] = []

    if to_stderr:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(ContextFormatter("human", color, tz))
        root.addHandler(console_handler)
        handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        fmt_mode = "json" if json else "human"
        file_handler.setFormatter(ContextFormatter(fmt_mode, use_color=False, tz=tz))
        root.addHandler(file_handler)
        handlers.append(file_handler)

    if context:
        push_context(**context)

    if capture_warnings:
        logging.captureWarnings(True)

    _configured = True

    return handlers


def get_logger(name: str) -> logging.Logger:
    """Get logger by name (typically ``__name__``)."""
    return logging.getLogger(name)


def push_context(**kwargs) -> None:
    """Add contextual fields to all subsequent log records.

    Examples
    --------
    >>> push_context(app="configure_joint")
    >>> logger.info("Started")  # → "... | app=configure_joint | Started"
    """
    current = _context_var.get({})
    _context_var.set({**current, **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove contextual fields; all of them when *keys* is None."""
    if keys is None:
        _context_var.set({})
    else:
        current = dict(_context_var.get({}))
        for key in keys:
            current.pop(key, None)
        _context_var.set(current)


def get_context() -> Dict[str, Any]:
    """Return a copy of the current contextual fields."""
    return dict(_context_var.get({}))


@contextlib.contextmanager
def log_context(**kwargs) -> Iterator[None]:
    """Scope contextual fields to a ``with`` block.

    The previous context is restored on exit, including on error.

    Examples
    --------
    >>> with log_context(joint=2):
    ...     logger.info("Loading")  # → "... | joint=2 | Loading"
    """
    current = _context_var.get({})
    token = _context_var.set({**current, **kwargs})
    try:
        yield
    finally:
        _context_var.reset(token)
