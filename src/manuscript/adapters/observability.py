"""Runtime logging for the editor CLIs and API server, configured from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_LOG_PATH = Path("work/logs/manuscript.log")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

_CONFIGURED = False


def int_env(name: str, default: int, *, minimum: int, maximum: int) -> int:
    """Read a clamped integer setting, falling back to ``default`` when unset or invalid."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, min(maximum, value))


def level_env(name: str, default: int) -> int:
    """Read a level name such as ``debug``; unknown names keep ``default``."""
    raw = os.environ.get(name, "").strip().upper()
    level = logging.getLevelName(raw) if raw else default
    return level if isinstance(level, int) else default


@dataclass(frozen=True)
class LoggingSettings:
    level: int = logging.INFO
    log_path: Path = DEFAULT_LOG_PATH
    max_bytes: int = 5 * 1024 * 1024
    backup_count: int = 10
    access_level: int = logging.WARNING

    @classmethod
    def from_env(cls) -> LoggingSettings:
        log_path = os.environ.get("MANUSCRIPT_LOG_PATH", "").strip()
        return cls(
            level=level_env("MANUSCRIPT_LOG_LEVEL", logging.INFO),
            log_path=Path(log_path) if log_path else DEFAULT_LOG_PATH,
            max_bytes=int_env(
                "MANUSCRIPT_LOG_MAX_BYTES",
                cls.max_bytes,
                minimum=64 * 1024,
                maximum=100 * 1024 * 1024,
            ),
            backup_count=int_env(
                "MANUSCRIPT_LOG_BACKUP_COUNT", cls.backup_count, minimum=1, maximum=120
            ),
            access_level=level_env("MANUSCRIPT_ACCESS_LOG_LEVEL", logging.WARNING),
        )


def build_handlers(settings: LoggingSettings) -> list[logging.Handler]:
    """Console handler plus a size-bounded rotating file handler."""
    settings.log_path.parent.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(),
        RotatingFileHandler(
            filename=settings.log_path,
            maxBytes=settings.max_bytes,
            backupCount=settings.backup_count,
            encoding="utf-8",
        ),
    ]
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_runtime_logging(
    settings: LoggingSettings | None = None, *, force: bool = False
) -> None:
    """Install the root handlers once per process unless ``force`` is set."""
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    effective = settings if settings is not None else LoggingSettings.from_env()
    root = logging.getLogger()
    root.setLevel(effective.level)
    root.handlers.clear()
    for handler in build_handlers(effective):
        root.addHandler(handler)
    logging.getLogger("uvicorn.access").setLevel(effective.access_level)

    _CONFIGURED = True
