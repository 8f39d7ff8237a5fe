from __future__ import annotations

import pytest

from matrixgen.qr import encode_qr
from matrixgen.raster import BLACK, WHITE
from matrixgen.request import ErrorCorrectionLevel, MatrixCodeEncodingError


def test_encode_qr_image_is_requested_size(logger):
    image = encode_qr("HELLO", ErrorCorrectionLevel.HIGH, 256, logger=logger)

    assert image.mode == "L"
    assert image.size == (256, 256)
    assert set(image.getdata()) == {BLACK, WHITE}


def test_encode_qr_centres_symbol_with_quiet_zone(logger):
    # Version 1 is 21 modules: 256 // 23 = 11 pixels per module, (256 - 231) // 2 margin.
    image = encode_qr("HELLO", ErrorCorrectionLevel.HIGH, 256, logger=logger)

    assert image.getpixel((11, 11)) == WHITE
    assert image.getpixel((12, 12)) == BLACK
    assert image.getpixel((242, 12)) == BLACK
    assert image.getpixel((243, 12)) == WHITE
    assert image.getpixel((12, 242)) == BLACK
    assert image.getpixel((243, 243)) == WHITE


@pytest.mark.parametrize("level", list(ErrorCorrectionLevel))
def test_encode_qr_round_trip(logger, decode_qr, level):
    payload = "https://example.com/matrixgen?level=" + level.value

    image = encode_qr(payload, level, 512, logger=logger)

    assert decode_qr(image) == [payload.encode()]


def test_encode_qr_image_too_small(logger):
    with pytest.raises(MatrixCodeEncodingError, match="too small"):
        encode_qr("HELLO", ErrorCorrectionLevel.MEDIUM, 22, logger=logger)


def test_encode_qr_smallest_image(logger):
    image = encode_qr("HELLO", ErrorCorrectionLevel.MEDIUM, 23, logger=logger)

    assert image.size == (23, 23)
    assert image.getpixel((0, 0)) == WHITE
    assert image.getpixel((1, 1)) == BLACK


def test_encode_qr_payload_over_capacity(logger):
    with pytest.raises(MatrixCodeEncodingError, match="exceeds the capacity"):
        encode_qr("a" * 3000, ErrorCorrectionLevel.LOW, 1024, logger=logger)


def test_encode_qr_capacity_depends_on_level(logger):
    payload = "a" * 1500

    encode_qr(payload, ErrorCorrectionLevel.LOW, 1024, logger=logger)
    with pytest.raises(MatrixCodeEncodingError):
        encode_qr(payload, ErrorCorrectionLevel.HIGH, 1024, logger=logger)


def test_encode_qr_image_too_large(logger):
    with pytest.raises(MatrixCodeEncodingError, match="Cannot allocate"):
        encode_qr("HELLO", ErrorCorrectionLevel.MEDIUM, 2**32 - 1, logger=logger)


def test_encode_qr_accepts_undecodable_command_line_bytes(logger):
    image = encode_qr("caf\udce9", ErrorCorrectionLevel.MEDIUM, 64, logger=logger)

    assert image.size == (64, 64)
