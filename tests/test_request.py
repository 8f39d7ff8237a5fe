from __future__ import annotations

import pytest
from qrcode import constants as qrcode_constants

from matrixgen.request import (
    DEFAULT_ERROR_CORRECTION_LEVEL,
    ERROR_CORRECTION_TOKENS,
    ErrorCorrectionLevel,
    MatrixCodeEncodingError,
    MatrixCodeMode,
    encode_payload,
)


@pytest.mark.parametrize(
    ("tokens", "level"),
    [
        (("l", "L", "low", "Low", "LOW"), ErrorCorrectionLevel.LOW),
        (("m", "M", "medium", "Medium", "MEDIUM"), ErrorCorrectionLevel.MEDIUM),
        (("q", "Q", "quartile", "Quartile", "QUARTILE"), ErrorCorrectionLevel.QUARTILE),
        (("h", "H", "high", "High", "HIGH"), ErrorCorrectionLevel.HIGH),
    ],
)
def test_from_token_ignores_case(tokens, level):
    assert {ErrorCorrectionLevel.from_token(token) for token in tokens} == {level}


@pytest.mark.parametrize("token", ["", "x", "lo", "maximum", "hh"])
def test_from_token_rejects_unknown_tokens(token):
    with pytest.raises(ValueError, match="Unrecognized error correction level"):
        ErrorCorrectionLevel.from_token(token)


def test_error_correction_tokens_cover_letters_and_words():
    assert set(ERROR_CORRECTION_TOKENS) == {
        "l", "low", "m", "medium", "q", "quartile", "h", "high",
    }


def test_levels_map_onto_qrcode_constants():
    assert ErrorCorrectionLevel.LOW.qrcode_constant == qrcode_constants.ERROR_CORRECT_L
    assert ErrorCorrectionLevel.MEDIUM.qrcode_constant == qrcode_constants.ERROR_CORRECT_M
    assert ErrorCorrectionLevel.QUARTILE.qrcode_constant == qrcode_constants.ERROR_CORRECT_Q
    assert ErrorCorrectionLevel.HIGH.qrcode_constant == qrcode_constants.ERROR_CORRECT_H


def test_defaults():
    assert MatrixCodeMode.QR.default_size == 1024
    assert MatrixCodeMode.DATA_MATRIX.default_size == 5
    assert DEFAULT_ERROR_CORRECTION_LEVEL is ErrorCorrectionLevel.MEDIUM


def test_encoding_error_has_default_message():
    assert MatrixCodeEncodingError().message
    assert MatrixCodeEncodingError("too big").message == "too big"


def test_encode_payload_is_utf8():
    assert encode_payload("héllo") == "héllo".encode()


def test_encode_payload_restores_undecodable_bytes():
    assert encode_payload("caf\udce9") == b"caf\xe9"
