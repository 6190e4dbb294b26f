from __future__ import annotations

import logging
import sys
from typing import Union

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _parse_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


# PUBLIC_INTERFACE
def setup_logging(level: Union[str, int] = logging.INFO) -> None:
    """
    Configure process-wide logging:
    - one stderr handler on the root logger with a timestamped format
    - uvicorn loggers drop their own handlers and propagate to root
    - warnings.warn(...) is routed into logging as 'py.warnings'

    Call this once, before the server starts.
    """
    root = logging.getLogger()
    root.setLevel(_parse_level(level))

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    root.addHandler(handler)

    for name in _UVICORN_LOGGERS:
        lg = logging.getLogger(name)
        for h in list(lg.handlers):
            lg.removeHandler(h)
        lg.propagate = True

    logging.captureWarnings(True)
