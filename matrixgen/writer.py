"""Persist rendered matrix code images to disk."""

from __future__ import annotations

import contextlib
import os
import stat
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, override

from PIL import Image

if TYPE_CHECKING:
    from collections.abc import Sequence
    from logging import Logger
    from typing import Final


__all__: Sequence[str] = (
    "ImageWriteError",
    "get_image_format",
    "save_image",
)


DEFAULT_FILE_MODE: Final[int] = 0o666


class ImageWriteError(Exception):
    """Exception class to raise when a rendered image cannot be written to its destination."""

    @override
    def __init__(self, message: str | None = None) -> None:
        """Initialise a new exception with the given error message."""
        self.message: str = message or "Failed to save to image."

        super().__init__(self.message)


def get_image_format(path: Path) -> str:
    """Return the Pillow format name able to write files with the given extension."""
    extension: str = path.suffix.lower()
    if not extension:
        MISSING_EXTENSION_MESSAGE: Final[str] = (
            f"Cannot infer an image format for {str(path)!r}: the filename has no extension."
        )
        raise ImageWriteError(MISSING_EXTENSION_MESSAGE)

    image_format: str | None = Image.registered_extensions().get(extension)
    if image_format is None or image_format.upper() not in Image.SAVE:
        UNSUPPORTED_FORMAT_MESSAGE: Final[str] = (
            f"Unsupported image format for files with extension {extension!r}."
        )
        raise ImageWriteError(UNSUPPORTED_FORMAT_MESSAGE)

    return image_format


def _get_file_mode(path: Path) -> int:
    # Match the permissions a plain `open(path, "wb")` would leave on the file.
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)

    umask: int = os.umask(0)
    os.umask(umask)
    return DEFAULT_FILE_MODE & ~umask


def save_image(image: Image.Image, path: Path, *, logger: Logger) -> None:
    """
    Write the image to the given path in the format implied by its extension.

    The image is written to a temporary file beside the destination which is then
    renamed into place, so a failed write never leaves a truncated file behind.
    """
    image_format: str = get_image_format(path)

    if not image.width or not image.height:
        EMPTY_IMAGE_MESSAGE: Final[str] = (
            f"Cannot save a {image.width}x{image.height} pixel image: "
            "both dimensions must be at least 1 pixel."
        )
        raise ImageWriteError(EMPTY_IMAGE_MESSAGE)

    logger.debug(
        "Saving %dx%d pixel image to %s as %s", image.width, image.height, path, image_format
    )

    temporary_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=path.suffix, delete=False
        ) as temporary_file:
            temporary_path = Path(temporary_file.name)
            image.save(temporary_file, format=image_format)

        os.chmod(temporary_path, _get_file_mode(path))
        os.replace(temporary_path, path)

    except (OSError, ValueError) as e:
        if temporary_path is not None:
            with contextlib.suppress(FileNotFoundError):
                temporary_path.unlink()

        SAVE_FAILED_MESSAGE: Final[str] = (
            f"Failed to save to image {str(path)!r}: {str(e).strip('\n\r\t .')}."
        )
        raise ImageWriteError(SAVE_FAILED_MESSAGE) from e

    logger.debug("Saved image to %s", path)
