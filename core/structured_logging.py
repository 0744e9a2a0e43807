"""
Structured logging for Care-Bot.

Every logger lives under the "carebot" namespace. The entry point calls
setup_logging() once; after that:
- console gets a short colored line per record
- logs/carebot.log gets one JSON object per record
- logs/errors.log gets ERROR and above, also as JSON

Both files rotate at midnight and keep 30 days.

Usage:
    from core.structured_logging import get_logger, log_conversation_turn

    logger = get_logger(__name__)
    logger.info("Catalog loaded", extra={"entries": 120})

    log_conversation_turn(session_id="abc", user_query="해약금", reply_type="direct_answer")
"""

import json
import logging
import sys
import time
import traceback
from datetime import datetime, timezone
from functools import wraps
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Tuple


ROOT_LOGGER_NAME = "carebot"
RETENTION_DAYS = 30


def _record_fields(record: logging.LogRecord, names) -> Iterator[Tuple[str, Any]]:
    """(name, value) for each of `names` set on the record and not None."""
    for name in names:
        value = getattr(record, name, None)
        if value is not None:
            yield name, value


# =============================================================================
# Formatters
# =============================================================================

class JSONFormatter(logging.Formatter):
    """
    One JSON object per record, for the log files.

    Base keys are timestamp (UTC), level, logger and message. Anything in
    EXTRA_FIELDS that was passed through `extra=` is copied when not None;
    other attributes are dropped.
    """

    EXTRA_FIELDS = (
        # conversation
        "event", "session_id", "user_query", "reply_type",
        "matched_question", "top_score", "category", "model",
        # catalog loading
        "source", "entries", "price_as_of",
        # timing
        "response_time_ms", "elapsed_ms", "function",
        # errors
        "error_type", "stack_trace", "context",
    )

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_record_fields(record, self.EXTRA_FIELDS))

        exc_type = record.exc_info[0] if record.exc_info else None
        if exc_type is not None:
            payload["error_type"] = exc_type.__name__
            payload["stack_trace"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Single readable line for the terminal:

    10:30:00 INFO     carebot.core.faq: FAQ resolved [session_id=abc123, event=faq_resolved]
    """

    SHOWN_FIELDS = ("session_id", "event", "reply_type", "response_time_ms")

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname, "")
        line = "{time} {color}{level:8}{reset} {name}: {message}".format(
            time=datetime.fromtimestamp(record.created).strftime("%H:%M:%S"),
            color=color,
            level=record.levelname,
            reset=self.RESET if color else "",
            name=record.name,
            message=record.getMessage(),
        )

        context = [f"{name}={value}" for name, value in _record_fields(record, self.SHOWN_FIELDS)]
        if context:
            line += " [" + ", ".join(context) + "]"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# =============================================================================
# Setup
# =============================================================================

_loggers: Dict[str, logging.Logger] = {}
_initialized = False


def _daily_file_handler(path: Path, level: int) -> logging.Handler:
    handler = TimedRotatingFileHandler(
        filename=str(path),
        when="midnight",
        backupCount=RETENTION_DAYS,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    log_dir: str = "logs",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    enable_console: bool = True,
    enable_file: bool = True,
    enable_error_log: bool = True,
) -> None:
    """
    Attach handlers to the "carebot" logger. Later calls are ignored.

    Args:
        log_dir: Directory for carebot.log and errors.log
        console_level: Minimum level printed to stdout
        file_level: Minimum level written to carebot.log
        enable_console: Print to stdout
        enable_file: Write carebot.log
        enable_error_log: Write errors.log
    """
    global _initialized
    if _initialized:
        return

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG)
    root.handlers = []

    if enable_console:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(console_level)
        console.setFormatter(ConsoleFormatter())
        root.addHandler(console)

    files = []
    if enable_file:
        files.append(("carebot.log", file_level))
    if enable_error_log:
        files.append(("errors.log", logging.ERROR))

    directory = Path(log_dir)
    for filename, level in files:
        try:
            directory.mkdir(parents=True, exist_ok=True)
            root.addHandler(_daily_file_handler(directory / filename, level))
        except OSError as e:
            # Console logging still works without the files
            print(f"Warning: Could not open {directory / filename}: {e}", file=sys.stderr)

    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Logger for `name` under the carebot namespace.

    Does not configure handlers; that is left to the entry point.
    """
    prefix = ROOT_LOGGER_NAME + "."
    full_name = name if name.startswith(prefix) else prefix + name

    logger = _loggers.get(full_name)
    if logger is None:
        logger = _loggers[full_name] = logging.getLogger(full_name)
    return logger


# =============================================================================
# Events
# =============================================================================

def log_catalog_load(source: str, entries: int, **extra) -> None:
    """Record a finished catalog load (FAQ or price data)."""
    get_logger("catalog").info(
        f"Catalog loaded: {entries} entries from {source}",
        extra=dict(event="catalog_loaded", source=source, entries=entries, **extra),
    )


def log_error(
    session_id: str,
    error: Exception,
    context: Optional[str] = None,
    **extra
) -> None:
    """
    Record a failed turn with its traceback.

    Args:
        session_id: Session the failure happened in
        error: The exception being handled
        context: Short note on what was being done
        **extra: Further EXTRA_FIELDS values
    """
    error_type = type(error).__name__
    get_logger("error").error(
        f"Error: {error_type}: {error}",
        extra=dict(
            event="error",
            session_id=session_id,
            error_type=error_type,
            stack_trace=traceback.format_exc(),
            context=context,
            **extra
        ),
        exc_info=True,
    )


def log_conversation_turn(
    session_id: str,
    user_query: str,
    reply_type: str,
    matched_question: Optional[str] = None,
    top_score: Optional[int] = None,
    category: Optional[str] = None,
    model: Optional[str] = None,
    response_time_ms: Optional[float] = None,
    **extra
) -> None:
    """
    Record one utterance and the reply chosen for it.

    Args:
        session_id: Platform user id, or a generated id for the console
        user_query: Raw utterance
        reply_type: ReplyType value
        matched_question: Answered question(s), pipe-separated for lists
        top_score: Best FAQ score when the resolver ran
        category: Menu category or card company shown
        model: Price model code shown
        response_time_ms: Handling time for the turn
    """
    if response_time_ms:
        response_time_ms = round(response_time_ms, 2)

    get_logger("conversation").info(
        f"Conversation turn: {reply_type}",
        extra=dict(
            event="conversation_turn",
            session_id=session_id,
            user_query=user_query,
            reply_type=reply_type,
            matched_question=matched_question,
            top_score=top_score,
            category=category,
            model=model,
            response_time_ms=response_time_ms or None,
            **extra
        ),
    )


# =============================================================================
# Timing
# =============================================================================

class Timer:
    """
    Measures a block in milliseconds.

        with Timer() as t:
            ...
        t.elapsed_ms
    """

    def __init__(self):
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *exc) -> None:
        self.end_time = time.perf_counter()
        self.elapsed_ms = (self.end_time - self.start_time) * 1000


def timed(event_name: str, logger_name: str = "performance"):
    """
    Decorator logging how long each call took.

    Success is logged at DEBUG as "<event_name>_timing"; an exception is
    logged at ERROR as "<event_name>_error" and re-raised.

        @timed("faq_load")
        def load(path): ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(logger_name)
            try:
                with Timer() as timer:
                    result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"{event_name} failed after {timer.elapsed_ms:.2f}ms",
                    extra={
                        "event": f"{event_name}_error",
                        "elapsed_ms": round(timer.elapsed_ms, 2),
                        "function": func.__name__,
                        "error_type": type(e).__name__,
                    },
                    exc_info=True,
                )
                raise

            logger.debug(
                f"{event_name} completed",
                extra={
                    "event": f"{event_name}_timing",
                    "elapsed_ms": round(timer.elapsed_ms, 2),
                    "function": func.__name__,
                },
            )
            return result
        return wrapper
    return decorator
