"""Console entry point for matrixgen."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from .config import ImproperlyConfiguredError, Settings, create_logger
from .datamatrix import encode_module_grid
from .request import (
    DEFAULT_ERROR_CORRECTION_LEVEL,
    ERROR_CORRECTION_TOKENS,
    MAX_SIZE,
    EncodingRequest,
    ErrorCorrectionLevel,
    MatrixCodeEncodingError,
    MatrixCodeMode,
)
from .qr import encode_qr
from .raster import rasterize
from .writer import ImageWriteError, save_image

if TYPE_CHECKING:
    from collections.abc import Sequence
    from logging import Logger
    from typing import Final

    from PIL import Image

__all__: Sequence[str] = ("build_request", "create_matrix_code", "run")


EXIT_IMPROPERLY_CONFIGURED: Final[int] = 1
EXIT_ENCODING_FAILED: Final[int] = 3
EXIT_IMAGE_WRITE_FAILED: Final[int] = 4


def build_request(
    data: str,
    filename: Path,
    *,
    qr: bool,
    dm: bool,
    size: int | None,
    ecc: str | None,
    ctx: click.Context | None = None,
) -> EncodingRequest:
    """Validate the parsed command line values and combine them into an encoding request."""
    if qr and dm:
        raise click.UsageError(
            "Options '-q' / '--qr' and '-d' / '--dm' cannot be used together.", ctx
        )

    if not qr and not dm:
        raise click.UsageError(
            "Missing option: one of '-q' / '--qr' or '-d' / '--dm' is required.", ctx
        )

    mode: MatrixCodeMode = MatrixCodeMode.QR if qr else MatrixCodeMode.DATA_MATRIX

    if ecc is not None and mode is not MatrixCodeMode.QR:
        raise click.UsageError(
            "Option '-e' / '--ecc' can only be used with '-q' / '--qr'.", ctx
        )

    if size is not None and not 0 <= size <= MAX_SIZE:
        raise click.BadParameter(
            f"{size} is not in the range 0<=x<={MAX_SIZE}.", ctx, param_hint="'-s' / '--size'"
        )

    error_correction_level: ErrorCorrectionLevel | None = None
    if mode is MatrixCodeMode.QR:
        error_correction_level = (
            DEFAULT_ERROR_CORRECTION_LEVEL
            if ecc is None
            else ErrorCorrectionLevel.from_token(ecc)
        )

    return EncodingRequest(
        payload=data,
        filename=filename,
        mode=mode,
        size=mode.default_size if size is None else size,
        error_correction_level=error_correction_level,
    )


def create_matrix_code(
    request: EncodingRequest, settings: Settings, *, logger: Logger
) -> Image.Image:
    """Encode the request's payload and return the rendered grayscale image."""
    match request.mode:
        case MatrixCodeMode.QR:
            logger.info(
                "Generating %dx%d pixel QR code with %s error correction",
                request.size,
                request.size,
                request.error_correction_level.value,  # type: ignore[union-attr]
            )
            return encode_qr(
                request.payload,
                request.error_correction_level,  # type: ignore[arg-type]
                request.size,
                logger=logger,
            )

        case MatrixCodeMode.DATA_MATRIX:
            logger.info(
                "Generating data matrix with %d pixels per module", request.size
            )
            return rasterize(
                encode_module_grid(
                    request.payload, symbol_size=settings.DM_SYMBOL_SIZE, logger=logger
                ),
                request.size,
            )

        case _:
            UNKNOWN_MODE_MESSAGE: Final[str] = f"Unrecognized matrix code mode: {request.mode}"
            raise ValueError(UNKNOWN_MODE_MESSAGE)


@click.command(
    name="matrixgen",
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Generate a QR-Code or DataMatrix-Code image holding DATA and save it to FILENAME.",
)
@click.version_option(None, "-V", "--version", package_name="matrixgen")
@click.argument("data", metavar="DATA")
@click.argument(
    "filename", metavar="FILENAME", type=click.Path(dir_okay=False, path_type=Path)
)
@click.option("-q", "--qr", "--quickresponse", "qr", is_flag=True, help="Generate a QR-Code.")
@click.option(
    "-d", "--dm", "--datamatrix", "dm", is_flag=True, help="Generate a DataMatrix-Code."
)
@click.option(
    "-s",
    "--size",
    type=click.IntRange(0, MAX_SIZE),
    default=None,
    metavar="SIZE",
    help=(
        "The size of the generated image: the size in pixels for QR-Codes [default: 1024] "
        "and the size in pixels of each block for DataMatrix-Codes [default: 5]."
    ),
)
@click.option(
    "-e",
    "--ecc",
    "--error-correction",
    "ecc",
    type=click.Choice(ERROR_CORRECTION_TOKENS, case_sensitive=False),
    default=None,
    metavar="ECC",
    help=(
        "The error correction level to use when generating QR-Codes: "
        "l(ow), m(edium), q(uartile) or h(igh) [default: m]."
    ),
)
@click.pass_context
def run(
    ctx: click.Context,
    data: str,
    filename: Path,
    qr: bool,  # noqa: FBT001
    dm: bool,  # noqa: FBT001
    size: int | None,
    ecc: str | None,
) -> None:
    """Run cli entry-point."""
    request: EncodingRequest = build_request(
        data, filename, qr=qr, dm=dm, size=size, ecc=ecc, ctx=ctx
    )

    try:
        settings: Settings = Settings()
    except ImproperlyConfiguredError as e:
        click.echo(f"Error: {e.message}", err=True)
        ctx.exit(EXIT_IMPROPERLY_CONFIGURED)

    logger: Logger = create_logger(settings)

    try:
        image: Image.Image = create_matrix_code(request, settings, logger=logger)
    except MatrixCodeEncodingError as e:
        logger.error(e.message)
        ctx.exit(EXIT_ENCODING_FAILED)

    try:
        save_image(image, request.filename, logger=logger)
    except ImageWriteError as e:
        logger.error(e.message)
        ctx.exit(EXIT_IMAGE_WRITE_FAILED)

    logger.info("Saved %dx%d pixel image to %s", image.width, image.height, request.filename)
