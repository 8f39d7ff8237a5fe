"""Environment-variable settings and logger construction for matrixgen."""

from __future__ import annotations

import logging
import os
import re
from typing import TYPE_CHECKING, override

from pylibdmtx import pylibdmtx

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping, Sequence
    from logging import Logger
    from typing import Any, Final, LiteralString


__all__: Sequence[str] = (
    "ImproperlyConfiguredError",
    "Settings",
    "create_logger",
)


LOGGER_NAME: Final[LiteralString] = "matrixgen"
LOG_LEVEL_VALUES: Final[Collection[LiteralString]] = (
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
)
ENVIRONMENT_VARIABLE_PREFIX: Final[LiteralString] = "MATRIXGEN_"
DEFAULT_DM_SYMBOL_SIZE: Final[LiteralString] = "SquareAuto"


class ImproperlyConfiguredError(Exception):
    """Exception class to raise when environment variables are not correctly provided."""

    @override
    def __init__(self, message: str | None = None) -> None:
        """Initialise a new exception with the given error message."""
        self.message: str = (
            message or "One or more provided environment variable values are invalid."
        )

        super().__init__(self.message)


class Settings:
    """
    Settings class that provides access to all settings values.

    Settings values can be accessed via key (like a dictionary) or via class attribute.
    Values are read from the given environment mapping (defaulting to `os.environ`)
    and are only stored after they have been validated.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ: Mapping[str, str] = os.environ if environ is None else environ
        self._settings: dict[str, object] = {}

        self._setup_log_level()
        self._setup_dm_symbol_size()

    @classmethod
    def get_invalid_settings_key_message(cls, item: str) -> str:
        """Return the message to state that the given settings key is invalid."""
        return f"{item!r} is not a valid settings key."

    def __getattr__(self, item: str) -> Any:  # type: ignore[explicit-any]  # noqa: ANN401
        """Retrieve settings value by attribute lookup."""
        MISSING_ATTRIBUTE_MESSAGE: Final[str] = (
            f"{type(self).__name__!r} object has no attribute {item!r}"
        )

        if item.startswith("_") or "_pytest" in item:
            raise AttributeError(MISSING_ATTRIBUTE_MESSAGE)

        if item in self._settings:
            return self._settings[item]

        if re.fullmatch(r"\A[A-Z](?:[A-Z_]*[A-Z])?\Z", item):
            INVALID_SETTINGS_KEY_MESSAGE: Final[str] = self.get_invalid_settings_key_message(
                item
            )
            raise AttributeError(INVALID_SETTINGS_KEY_MESSAGE)

        raise AttributeError(MISSING_ATTRIBUTE_MESSAGE)

    def __getitem__(self, item: str) -> Any:  # type: ignore[explicit-any]  # noqa: ANN401
        """Retrieve settings value by key lookup."""
        attribute_not_exist_error: AttributeError
        try:
            return getattr(self, item)
        except AttributeError as attribute_not_exist_error:
            key_error_message: str = item

            if self.get_invalid_settings_key_message(item) in str(attribute_not_exist_error):
                key_error_message = str(attribute_not_exist_error)

            raise KeyError(key_error_message) from None

    def _getenv(self, name: str) -> str:
        return self._environ.get(f"{ENVIRONMENT_VARIABLE_PREFIX}{name}", "").strip()

    def _setup_log_level(self) -> None:
        log_level: str = self._getenv("LOG_LEVEL").upper()

        if not log_level:
            self._settings["LOG_LEVEL"] = "INFO"
            return

        if log_level not in LOG_LEVEL_VALUES:
            INVALID_LOG_LEVEL_MESSAGE: Final[str] = (
                f"Invalid value for {ENVIRONMENT_VARIABLE_PREFIX}LOG_LEVEL: {log_level}"
            )
            raise ImproperlyConfiguredError(INVALID_LOG_LEVEL_MESSAGE)

        self._settings["LOG_LEVEL"] = log_level

    def _setup_dm_symbol_size(self) -> None:
        raw_dm_symbol_size: str = self._getenv("DM_SYMBOL_SIZE")

        if not raw_dm_symbol_size:
            self._settings["DM_SYMBOL_SIZE"] = DEFAULT_DM_SYMBOL_SIZE
            return

        size_name: str
        for size_name in pylibdmtx.ENCODING_SIZE_NAMES:
            if size_name.lower() == raw_dm_symbol_size.lower():
                self._settings["DM_SYMBOL_SIZE"] = size_name
                return

        INVALID_DM_SYMBOL_SIZE_MESSAGE: Final[str] = (
            f"{ENVIRONMENT_VARIABLE_PREFIX}DM_SYMBOL_SIZE must be 'SquareAuto', "
            "'RectAuto', 'ShapeAuto' or an explicit Data Matrix size such as '16x16'."
        )
        raise ImproperlyConfiguredError(INVALID_DM_SYMBOL_SIZE_MESSAGE)


def create_logger(settings: Settings) -> Logger:
    """Set up a console logger with the output level given by the settings."""
    logger: Logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.LOG_LEVEL))

    handler: logging.Handler
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console_logging_handler: logging.Handler = logging.StreamHandler()
    console_logging_handler.setFormatter(
        logging.Formatter(
            "[{levelname}] {asctime} - {name}: {message}",
            datefmt="%d/%m/%y %H:%M:%S",
            style="{",
        ),
    )
    logger.addHandler(console_logging_handler)
    logger.propagate = False

    logger.debug("Logger set up with minimum output level: %s", settings.LOG_LEVEL)

    return logger
