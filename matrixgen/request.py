"""Encoding request model shared by the argument parser and the symbol encoders."""

from __future__ import annotations

import enum
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple, override

from qrcode import constants as qrcode_constants

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path
    from typing import Final, Self


__all__: Sequence[str] = (
    "DEFAULT_DM_BLOCK_SIZE",
    "DEFAULT_ERROR_CORRECTION_LEVEL",
    "DEFAULT_QR_SIZE",
    "ERROR_CORRECTION_TOKENS",
    "MAX_SIZE",
    "EncodingRequest",
    "ErrorCorrectionLevel",
    "MatrixCodeEncodingError",
    "MatrixCodeMode",
    "encode_payload",
)


DEFAULT_QR_SIZE: Final[int] = 1024
DEFAULT_DM_BLOCK_SIZE: Final[int] = 5
MAX_SIZE: Final[int] = 2**32 - 1


class MatrixCodeEncodingError(Exception):
    """Exception class to raise when a payload cannot be encoded as a matrix code."""

    @override
    def __init__(self, message: str | None = None) -> None:
        """Initialise a new exception with the given error message."""
        self.message: str = message or "The payload could not be encoded as a matrix code."

        super().__init__(self.message)


def encode_payload(payload: str) -> bytes:
    """Return the payload as UTF-8, restoring undecodable command line bytes verbatim."""
    return payload.encode(errors="surrogateescape")


class MatrixCodeMode(Enum):
    """"""

    QR = enum.auto()
    DATA_MATRIX = enum.auto()

    @property
    def default_size(self) -> int:
        """Image size in pixels for QR codes, pixels per module for Data Matrix codes."""
        return DEFAULT_QR_SIZE if self is MatrixCodeMode.QR else DEFAULT_DM_BLOCK_SIZE


class ErrorCorrectionLevel(Enum):
    """QR code error correction level, valued by the share of recoverable codewords."""

    LOW = "low"
    MEDIUM = "medium"
    QUARTILE = "quartile"
    HIGH = "high"

    @classmethod
    def from_token(cls, token: str) -> Self:
        """Parse a single-letter or full-word level name, ignoring case."""
        normalised_token: str = token.strip().lower()

        level: Self
        for level in cls:
            if normalised_token in (level.value, level.value[0]):
                return level

        UNKNOWN_LEVEL_MESSAGE: Final[str] = (
            f"Unrecognized error correction level: {token!r}"
        )
        raise ValueError(UNKNOWN_LEVEL_MESSAGE)

    @property
    def qrcode_constant(self) -> int:
        return _QRCODE_CONSTANTS[self]


_QRCODE_CONSTANTS: Final[Mapping[ErrorCorrectionLevel, int]] = {
    ErrorCorrectionLevel.LOW: qrcode_constants.ERROR_CORRECT_L,
    ErrorCorrectionLevel.MEDIUM: qrcode_constants.ERROR_CORRECT_M,
    ErrorCorrectionLevel.QUARTILE: qrcode_constants.ERROR_CORRECT_Q,
    ErrorCorrectionLevel.HIGH: qrcode_constants.ERROR_CORRECT_H,
}

ERROR_CORRECTION_TOKENS: Final[Sequence[str]] = tuple(
    token for level in ErrorCorrectionLevel for token in (level.value[0], level.value)
)
DEFAULT_ERROR_CORRECTION_LEVEL: Final[ErrorCorrectionLevel] = ErrorCorrectionLevel.MEDIUM


class EncodingRequest(NamedTuple):
    """A validated request to render one matrix code into one image file."""

    payload: str
    filename: Path
    mode: MatrixCodeMode
    size: int
    error_correction_level: ErrorCorrectionLevel | None = None
