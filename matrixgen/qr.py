"""QR code symbol encoding and rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

import qrcode
from PIL import Image
from qrcode.exceptions import DataOverflowError

from .raster import QUIET_ZONE_MODULES, ModuleGrid, new_canvas, paint_modules
from .request import MatrixCodeEncodingError, encode_payload

if TYPE_CHECKING:
    from collections.abc import Sequence
    from logging import Logger
    from typing import Final

    from .request import ErrorCorrectionLevel


__all__: Sequence[str] = ("encode_qr",)


def _make_module_grid(
    payload: bytes, error_correction_level: ErrorCorrectionLevel
) -> ModuleGrid:
    qr_code: qrcode.QRCode = qrcode.QRCode(  # type: ignore[type-arg]
        version=None,
        error_correction=error_correction_level.qrcode_constant,
        box_size=1,
        border=0,
    )
    qr_code.add_data(payload)

    try:
        qr_code.make(fit=True)
    except DataOverflowError as e:
        QR_CAPACITY_EXCEEDED_MESSAGE: Final[str] = (
            f"Failed to generate QR code: payload of {len(payload)} bytes exceeds "
            f"the capacity of a version 40 symbol at {error_correction_level.value} "
            "error correction."
        )
        raise MatrixCodeEncodingError(QR_CAPACITY_EXCEEDED_MESSAGE) from e

    return ModuleGrid.from_rows(qr_code.get_matrix())


def encode_qr(
    payload: str, error_correction_level: ErrorCorrectionLevel, size: int, *, logger: Logger
) -> Image.Image:
    """
    Encode the payload as a QR code rendered onto a `size` x `size` grayscale image.

    The smallest QR version that holds the payload is chosen. Every module gets the
    same whole number of pixels, sized so that the symbol plus a one-module quiet
    zone fits the image, and the symbol is centred.
    """
    payload_bytes: bytes = encode_payload(payload)

    logger.debug(
        "Encoding %d byte payload as a QR code at %s error correction",
        len(payload_bytes),
        error_correction_level.value,
    )

    module_grid: ModuleGrid = _make_module_grid(payload_bytes, error_correction_level)

    module_pixels: int = size // (module_grid.width + 2 * QUIET_ZONE_MODULES)
    if module_pixels == 0:
        IMAGE_TOO_SMALL_MESSAGE: Final[str] = (
            f"Failed to generate QR code: an image of {size} pixels is too small for a "
            f"{module_grid.width}x{module_grid.height} module symbol, "
            f"at least {module_grid.width + 2 * QUIET_ZONE_MODULES} pixels are required."
        )
        raise MatrixCodeEncodingError(IMAGE_TOO_SMALL_MESSAGE)

    margin: int = (size - module_pixels * module_grid.width) // 2

    logger.debug(
        "Rendering %dx%d module QR code at %d pixels per module with a %d pixel margin",
        module_grid.width,
        module_grid.height,
        module_pixels,
        margin,
    )

    image: Image.Image = new_canvas(size, size)
    paint_modules(image, module_grid, module_pixels, offset=(margin, margin))

    return image
