from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Optional

PACKAGE_LOGGER = "gdlsstar"


class JsonFormatter(logging.Formatter):
    """
    Minimal JSON log formatter:
      { "t": 169, "lvl": "DEBUG", "name": "gdlsstar.ransac.scoring", "msg": "text" }
    """

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            "t": int(time.time() * 1000),
            "lvl": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _resolve_level(level: Optional[str]) -> int:
    """
    Level precedence:
      - explicit `level` arg
      - env GDLSSTAR_RANSAC_DEBUG=1 -> DEBUG
      - env GDLSSTAR_LOG_LEVEL (e.g., DEBUG/INFO/WARNING/ERROR)
      - default WARNING
    """
    if level is None and os.environ.get("GDLSSTAR_RANSAC_DEBUG", "0") == "1":
        return logging.DEBUG
    lvl_name = (level or os.environ.get("GDLSSTAR_LOG_LEVEL") or "WARNING").upper()
    lvl = logging.getLevelName(lvl_name)
    return lvl if isinstance(lvl, int) else logging.WARNING


def setup_logging(level: Optional[str] = None) -> None:
    """
    Opt-in: print the package's records as JSON on stderr.

    Only the `gdlsstar` logger is touched; the root logger is left to the
    application. The package logger stops propagating so records are not
    printed twice. Calling again with an explicit level just changes the level.
    """
    pkg = logging.getLogger(PACKAGE_LOGGER)
    if getattr(pkg, "_gdlsstar_configured", False):  # idempotent
        if level is not None:
            pkg.setLevel(_resolve_level(level))
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())

    pkg.addHandler(handler)
    pkg.setLevel(_resolve_level(level))
    pkg.propagate = False
    pkg._gdlsstar_configured = True  # type: ignore[attr-defined]


def get_logger(name: str) -> logging.Logger:
    """Get a module logger. No handler or level is set here."""
    return logging.getLogger(name)


# Library default: silent unless the application configures logging.
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())
