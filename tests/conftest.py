from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner
from PIL import Image, ImageOps
from pylibdmtx import pylibdmtx
from pyzbar import pyzbar

if TYPE_CHECKING:
    from collections.abc import Callable
    from logging import Logger


DECODER_QUIET_ZONE_PIXELS = 40


@pytest.fixture
def logger() -> Logger:
    return logging.getLogger("matrixgen-tests")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _pad_for_decoder(image: Image.Image) -> Image.Image:
    # Readers want a wider quiet zone than the one-module border that is rendered.
    return ImageOps.expand(image.convert("RGB"), border=DECODER_QUIET_ZONE_PIXELS, fill="white")


@pytest.fixture
def decode_data_matrix() -> Callable[[Image.Image], list[bytes]]:
    def decode(image: Image.Image) -> list[bytes]:
        return [result.data for result in pylibdmtx.decode(_pad_for_decoder(image))]

    return decode


@pytest.fixture
def decode_qr() -> Callable[[Image.Image], list[bytes]]:
    def decode(image: Image.Image) -> list[bytes]:
        return [result.data for result in pyzbar.decode(_pad_for_decoder(image))]

    return decode
