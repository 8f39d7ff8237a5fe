"""Data Matrix (ECC200) symbol encoding backed by libdmtx."""

from __future__ import annotations

import itertools
import math
from typing import TYPE_CHECKING

from PIL import Image, ImageOps
from pylibdmtx import pylibdmtx

from .raster import ModuleGrid
from .request import MatrixCodeEncodingError, encode_payload

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence
    from logging import Logger
    from typing import Final


__all__: Sequence[str] = ("encode_module_grid",)


DARK_THRESHOLD: Final[int] = 128


def _get_run_lengths(pixels: Iterable[int]) -> Iterator[int]:
    for _, run in itertools.groupby(pixel < DARK_THRESHOLD for pixel in pixels):
        yield sum(1 for _ in run)


def _get_module_pitch(symbol_image: Image.Image) -> int:
    # Two symbol edges are solid and the other two alternate one module at a time.
    width: int = symbol_image.width
    height: int = symbol_image.height
    edges: Sequence[Iterable[tuple[int, int]]] = (
        ((x, 0) for x in range(width)),
        ((x, height - 1) for x in range(width)),
        ((0, y) for y in range(height)),
        ((width - 1, y) for y in range(height)),
    )

    return math.gcd(
        *(
            run_length
            for edge in edges
            for run_length in _get_run_lengths(
                symbol_image.getpixel(xy) for xy in edge  # type: ignore[misc]
            )
        )
    )


def _raster_to_module_grid(raster: Image.Image) -> ModuleGrid:
    # The solid finder edges bound the symbol exactly.
    symbol_box: tuple[int, int, int, int] | None = ImageOps.invert(raster).getbbox()
    if symbol_box is None:
        EMPTY_RASTER_MESSAGE: Final[str] = "libdmtx produced a symbol with no dark modules."
        raise MatrixCodeEncodingError(EMPTY_RASTER_MESSAGE)

    symbol_image: Image.Image = raster.crop(symbol_box)
    pitch: int = _get_module_pitch(symbol_image)

    if not pitch or symbol_image.width % pitch or symbol_image.height % pitch:
        UNALIGNED_RASTER_MESSAGE: Final[str] = (
            f"libdmtx produced a {symbol_image.width}x{symbol_image.height} pixel symbol "
            f"that is not a whole number of {pitch} pixel modules."
        )
        raise MatrixCodeEncodingError(UNALIGNED_RASTER_MESSAGE)

    module_image: Image.Image = symbol_image.resize(
        (symbol_image.width // pitch, symbol_image.height // pitch),
        resample=Image.Resampling.NEAREST,
    )

    return ModuleGrid.from_rows(
        (
            module_image.getpixel((x, y)) < DARK_THRESHOLD  # type: ignore[operator]
            for x in range(module_image.width)
        )
        for y in range(module_image.height)
    )


def encode_module_grid(
    payload: str, *, symbol_size: str = "SquareAuto", logger: Logger
) -> ModuleGrid:
    """
    Encode the payload as an ECC200 Data Matrix symbol and return its module grid.

    `symbol_size` is a libdmtx size name: "SquareAuto", "RectAuto", "ShapeAuto"
    or an explicit size such as "16x16". The automatic policies pick the smallest
    symbol that fits the payload.
    """
    payload_bytes: bytes = encode_payload(payload)

    logger.debug(
        "Encoding %d byte payload as a %s Data Matrix", len(payload_bytes), symbol_size
    )

    try:
        encoded: pylibdmtx.Encoded = pylibdmtx.encode(payload_bytes, size=symbol_size)
    except pylibdmtx.PyLibDMTXError as e:
        DATA_MATRIX_ENCODING_FAILED_MESSAGE: Final[str] = (
            f"Failed to generate data matrix: {str(e).strip('\n\r\t .')}."
        )
        raise MatrixCodeEncodingError(DATA_MATRIX_ENCODING_FAILED_MESSAGE) from e

    logger.debug(
        "libdmtx produced a %dx%d pixel raster at %d bits per pixel",
        encoded.width,
        encoded.height,
        encoded.bpp,
    )

    module_grid: ModuleGrid = _raster_to_module_grid(
        Image.frombytes("RGB", (encoded.width, encoded.height), encoded.pixels).convert("L")
    )

    logger.debug(
        "Recovered a %dx%d module grid from the libdmtx raster",
        module_grid.width,
        module_grid.height,
    )

    return module_grid
