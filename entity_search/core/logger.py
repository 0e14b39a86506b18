"""Structured logging: console plus an optional JSON-lines event file."""

import contextvars
import json
import logging
import threading
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from entity_search.contracts.search_v1 import SearchRequest
from entity_search.core.config import config


def _format_duration(seconds: float) -> str:
    if seconds < 0:
        return "0ms"
    if seconds >= 1:
        return f"{seconds:.1f}s"
    ms = seconds * 1000
    if ms >= 0.1:
        return f"{ms:.1f}ms"
    if ms > 0:
        return "<0.1ms"
    return "0ms"


def _preview(text: str | None, max_len: int | None = None) -> str:
    """One-line, length-capped preview for log events."""
    if not text:
        return ""
    max_len = max_len or config.log_preview_chars
    s = str(text).replace("\n", " ").strip()
    return s[:max_len] + "..." if len(s) > max_len else s


# (start, operation) of the request currently being served in this context
_request_ctx: contextvars.ContextVar[tuple[float, str] | None] = contextvars.ContextVar(
    "search_request", default=None
)


@dataclass
class LogEvent:
    event_type: str
    timestamp: str
    data: dict[str, Any]

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class SearchLogger:
    def __init__(self):
        self._file_lock = threading.Lock()
        self._log_file_handle = None
        self.log_file = None
        if config.log_to_file:
            config.logs_dir.mkdir(parents=True, exist_ok=True)
            self.log_file = config.logs_dir / "search.log"
            self._log_file_handle = open(self.log_file, "a", encoding="utf-8")
        self._setup_console_logger()

    def _setup_console_logger(self):
        self.console = logging.getLogger("entity_search")
        level = logging.getLevelName(config.log_level)
        self.console.setLevel(level if isinstance(level, int) else logging.INFO)
        if not self.console.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
                    datefmt="%H:%M:%S",
                )
            )
            self.console.addHandler(handler)
        for problem in config.validate():
            self.warning("Config: %s", problem)

    def log_event(self, event: LogEvent) -> None:
        if self._log_file_handle is None:
            return
        with self._file_lock:
            self._log_file_handle.write(event.to_json() + "\n")
            self._log_file_handle.flush()

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    def search_request(self, request: SearchRequest) -> None:
        """Record an incoming request and start its timer."""
        _request_ctx.set((time.monotonic(), request.operation))
        data = request.summary()
        data["query"] = _preview(request.query)
        self.log_event(
            LogEvent(event_type="SEARCH_REQUEST", timestamp=self._timestamp(), data=data)
        )
        self.console.debug(
            "%s entities: %s, input: %s, postFilters: %s, sortCriterion: %s, from: %s, size: %s",
            request.operation,
            request.entity_names,
            request.query,
            request.post_filter,
            request.sort_criterion,
            request.scroll_id if request.from_ is None else request.from_,
            request.size,
        )

    def short_circuit(self, operation: str, requested: list[str]) -> None:
        self.log_event(
            LogEvent(
                event_type="SHORT_CIRCUIT",
                timestamp=self._timestamp(),
                data={"operation": operation, "requested": requested},
            )
        )
        self.console.debug(
            "%s: no non-empty entities among %s, skipping backend",
            operation,
            requested or "(all)",
        )
        _request_ctx.set(None)

    def search_result(self, operation: str, num_entities: int, total: int) -> None:
        pair = _request_ctx.get()
        _request_ctx.set(None)
        elapsed = time.monotonic() - pair[0] if pair is not None else 0.0
        self.log_event(
            LogEvent(
                event_type="SEARCH_RESULT",
                timestamp=self._timestamp(),
                data={
                    "operation": operation,
                    "returned": num_entities,
                    "total": total,
                    "duration_seconds": round(elapsed, 4),
                },
            )
        )
        self.console.debug(
            "%s: %s returned of %s total in %s",
            operation,
            num_entities,
            total,
            _format_duration(elapsed),
        )

    def ranking_failed(self, result: Any, exception: BaseException) -> None:
        _request_ctx.set(None)
        self.log_event(
            LogEvent(
                event_type="RANKING_FAILED",
                timestamp=self._timestamp(),
                data={
                    "result": _preview(repr(result)),
                    "exception": repr(exception),
                },
            )
        )
        self.console.error("Failed to rank: %s, exception - %r", result, exception)

    def error(self, message: str, *args, exception: Exception | None = None, **kwargs):
        self.log_event(
            LogEvent(
                event_type="ERROR",
                timestamp=self._timestamp(),
                data={
                    "message": _preview(message),
                    "exception": str(exception) if exception else None,
                },
            )
        )
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        if exception and "exc_info" not in log_kwargs:
            log_kwargs["exc_info"] = exception
        self.console.error(message, *args, **log_kwargs)

    def warning(self, message: str, *args, **kwargs):
        self.log_event(
            LogEvent(
                event_type="WARNING",
                timestamp=self._timestamp(),
                data={"message": _preview(message)},
            )
        )
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.warning(message, *args, **log_kwargs)

    def info(self, message: str, *args, **kwargs):
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.info(message, *args, **log_kwargs)

    def debug(self, message: str, *args, **kwargs):
        allowed = {"exc_info", "stack_info", "stacklevel", "extra"}
        log_kwargs = {k: v for k, v in kwargs.items() if k in allowed}
        self.console.debug(message, *args, **log_kwargs)

    def close(self) -> None:
        with self._file_lock:
            if self._log_file_handle is not None:
                self._log_file_handle.close()
                self._log_file_handle = None


logger = SearchLogger()
