from __future__ import annotations

import logging
from typing import Dict, Optional

from .options import LoggingOptions

TRACE = logging.DEBUG - 5

LEVELS: Dict[str, int] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}


def _level(name: str) -> int:
    try:
        return LEVELS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level '{name}'") from None


class Logger:
    """Client logger with tmi.js style level names.

    Session events go through the usual level methods; chat lines go through
    :meth:`message`, logged at the separately configured messages level.
    """

    def __init__(self, name: str = "tmi_ws", options: Optional[LoggingOptions] = None) -> None:
        logging.addLevelName(TRACE, "TRACE")
        self._logger = logging.getLogger(name)
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s", "%H:%M"))
            self._logger.addHandler(handler)
        self._messages_level = logging.INFO
        self.configure(options or LoggingOptions())

    def configure(self, options: LoggingOptions) -> None:
        self._logger.setLevel(_level(options.level))
        self._messages_level = _level(options.messages_level)

    def set_level(self, level: str) -> None:
        self._logger.setLevel(_level(level))

    def get_level(self) -> str:
        current = self._logger.getEffectiveLevel()
        for name, value in LEVELS.items():
            if value == current:
                return name
        return logging.getLevelName(current)

    def message(self, message: str, *args) -> None:
        self._logger.log(self._messages_level, message, *args)

    def trace(self, message: str, *args, **kwargs) -> None:
        self._logger.log(TRACE, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs) -> None:
        self._logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs) -> None:
        self._logger.info(message, *args, **kwargs)

    def warn(self, message: str, *args, **kwargs) -> None:
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs) -> None:
        self._logger.error(message, *args, **kwargs)

    def exception(self, message: str, *args) -> None:
        self._logger.exception(message, *args)

    def fatal(self, message: str, *args, **kwargs) -> None:
        self._logger.critical(message, *args, **kwargs)


__all__ = ["Logger", "LEVELS", "TRACE"]
