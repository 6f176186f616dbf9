"""Loguru-flavoured logging on top of stdlib logging, rendered with rich.

Messages use brace placeholders filled from keyword arguments, and
`bind()` attaches context (such as `component`) to every record::

    from scaleway_baremetal.observability.logger import logger

    log = logger.bind(component="api")
    log.debug("GET {path}", path="/servers")

The library is silent by default. Applications opt in with a sink::

    import sys
    logger.add(sys.stderr, level="DEBUG")
    logger.add("/tmp/baremetal.log", level="TRACE")
"""

from __future__ import annotations

import logging
from itertools import count
from typing import Any, TextIO

from rich.console import Console
from rich.logging import RichHandler

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

ROOT_LOGGER_NAME = "scaleway_baremetal"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(component)s | "
    "%(module)s:%(funcName)s:%(lineno)d - %(message)s"
)


class _ComponentDefault(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = "-"
        return True


class BoundLogger:
    """Logger carrying a fixed set of extra fields."""

    __slots__ = ("_logger", "_extra")

    def __init__(self, name: str = ROOT_LOGGER_NAME, extra: dict[str, Any] | None = None) -> None:
        self._logger = logging.getLogger(name)
        self._extra = extra or {}

    @property
    def extra(self) -> dict[str, Any]:
        return dict(self._extra)

    def bind(self, **extra: Any) -> BoundLogger:
        return BoundLogger(self._logger.name, {**self._extra, **extra})

    def _emit(self, level: int, message: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        exc_info = kwargs.pop("exc_info", None)
        if args or kwargs:
            message = message.format(*args, **kwargs)
        # 3 = caller of the level method, past _emit and the method itself
        self._logger.log(level, message, exc_info=exc_info, extra=self._extra, stacklevel=3)

    def trace(self, message: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(TRACE, message, args, kwargs)

    def debug(self, message: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.DEBUG, message, args, kwargs)

    def info(self, message: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.INFO, message, args, kwargs)

    def warning(self, message: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.WARNING, message, args, kwargs)

    def error(self, message: str, /, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.ERROR, message, args, kwargs)

    def exception(self, message: str, /, *args: Any, **kwargs: Any) -> None:
        kwargs["exc_info"] = True
        self._emit(logging.ERROR, message, args, kwargs)


class Logger(BoundLogger):
    """Root logger with sink management: `add`, `remove`, `enable`, `disable`."""

    __slots__ = ("_sinks", "_ids")

    def __init__(self) -> None:
        super().__init__(ROOT_LOGGER_NAME)
        self._sinks: dict[int, logging.Handler] = {}
        self._ids = count(1)

        root = self._logger
        root.setLevel(TRACE)
        root.propagate = False
        root.addHandler(logging.NullHandler())
        root.addFilter(_ComponentDefault())

    def add(self, sink: str | TextIO, *, level: str | int = "DEBUG") -> int:
        """Attach a sink and return its id.

        A string is a file path, written in plain text. Anything else is
        a stream, rendered through rich.
        """
        numeric = level if isinstance(level, int) else logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"unknown log level: {level!r}")

        match sink:
            case str() as path:
                handler: logging.Handler = logging.FileHandler(path)
                handler.setFormatter(logging.Formatter(_FILE_FORMAT))
            case stream:
                handler = RichHandler(
                    console=Console(file=stream),
                    show_path=True,
                    rich_tracebacks=True,
                    markup=False,
                )
        handler.setLevel(numeric)
        handler.addFilter(_ComponentDefault())

        sink_id = next(self._ids)
        self._sinks[sink_id] = handler
        self._logger.addHandler(handler)
        return sink_id

    def remove(self, sink_id: int | None = None) -> None:
        """Detach one sink, or every sink when `sink_id` is None."""
        ids = list(self._sinks) if sink_id is None else [sink_id]
        for i in ids:
            handler = self._sinks.pop(i, None)
            if handler is not None:
                self._logger.removeHandler(handler)
                handler.close()

    def enable(self) -> None:
        self._logger.disabled = False

    def disable(self) -> None:
        self._logger.disabled = True


logger = Logger()
