"""Logging from config and env.

Levels (inclusive):
- ERROR: startup probe failures and unexpected dispatch errors
- WARNING: partial GraphQL results, empty viewer login, and ERROR
- INFO: service lifecycle, scope fallback, WARNING, and ERROR
- DEBUG: every outbound request and all levels above

Configure via config.yaml (logging.level, logging.format) or env
(GHRPC_LOGGING_LEVEL, GHRPC_LOGGING_FORMAT).
"""

import logging

from ghrpc.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


class ServiceLogging:
    """Configures root logger from LoggingConfig."""

    def __init__(self, config: LoggingConfig) -> None:
        self._level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT

    def setup(self) -> None:
        """Apply level and format to the root logger.

        urllib3 is capped at WARNING so DEBUG output stays readable.
        """
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )
        logging.getLogger("urllib3").setLevel(max(self._level, logging.WARNING))

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)
