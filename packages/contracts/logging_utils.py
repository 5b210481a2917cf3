from __future__ import annotations

import logging
import sys
from typing import TextIO


class TraceDefaultFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "n/a"
        return True


def configure_logging(verbose: bool = False, stream: TextIO | None = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s trace_id=%(trace_id)s message=%(message)s",
        stream=stream or sys.stdout,
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, TraceDefaultFilter) for f in handler.filters):
            handler.addFilter(TraceDefaultFilter())


class TraceAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {})
        kwargs["extra"].setdefault("trace_id", self.extra.get("trace_id", "n/a"))
        return msg, kwargs
