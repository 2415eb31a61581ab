"""
Project logger: console + optional rotating JSON file.

Usage:
    from supportdesk.core.logger import configure, LoggerConfig

    configure(LoggerConfig(level="DEBUG", log_dir="/var/log/supportdesk"))
    # or from env: LOG_LEVEL, LOG_DIR, LOG_FILE_BASENAME, LOG_MAX_BYTES, ...
    configure()

Modules log through ``logging.getLogger(__name__)``; pass conversation
context with ``extra={"session_id": ..., "route": ...}`` and the JSON file
handler lifts it into top-level keys.
"""
from supportdesk.core.logger.config import LoggerConfig
from supportdesk.core.logger.formatters import JsonFormatter, PlainConsoleFormatter
from supportdesk.core.logger.setup import configure, get_logger

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
    "get_logger",
]
