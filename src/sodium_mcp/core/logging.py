import logging
from typing import Any, Iterable

LOG_EXTRA_FIELDS = (
    "tenant",
    "tool",
    "method",
    "endpoint",
    "status",
    "duration_ms",
    "error_type",
)

# Every request is already reported as a sodium_call event.
QUIET_LOGGERS = ("httpx", "httpcore")

_NEEDS_QUOTES = (" ", "=", '"', "\n", "\t")


class LogfmtFormatter(logging.Formatter):
    """
    One logfmt line per record: level, logger, event, then whichever of
    ``extra_fields`` the record carries.
    """

    def __init__(self, extra_fields: Iterable[str] = LOG_EXTRA_FIELDS):
        super().__init__()
        self.extra_fields = tuple(extra_fields)

    def format(self, record: logging.LogRecord) -> str:
        pairs = [
            ("level", record.levelname.lower()),
            ("logger", record.name),
            ("event", record.getMessage()),
        ]
        pairs.extend(
            (key, getattr(record, key))
            for key in self.extra_fields
            if getattr(record, key, None) is not None
        )
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            pairs.append(("exc_type", type(exc).__name__))
            pairs.append(("exc", str(exc)))

        return " ".join(f"{k}={self._fmt_val(v)}" for k, v in pairs if v != "")

    @staticmethod
    def _fmt_val(val: Any) -> str:
        if isinstance(val, (bool, int, float)):
            return str(val)
        s = str(val)
        if any(ch in s for ch in _NEEDS_QUOTES):
            s = s.replace("\\", "\\\\").replace('"', '\\"')
            s = s.replace("\n", "\\n").replace("\t", "\\t")
            return f'"{s}"'
        return s


def setup_logging(level: str = "INFO") -> None:
    """
    Route all logging to stderr as logfmt. stdout carries the stdio MCP
    stream, so nothing may be printed there.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["setup_logging", "LogfmtFormatter", "LOG_EXTRA_FIELDS", "QUIET_LOGGERS"]
