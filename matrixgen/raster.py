"""Module grids and their rasterization into grayscale pixel images."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from PIL import Image

from .request import MatrixCodeEncodingError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence
    from typing import Final, Self


__all__: Sequence[str] = (
    "BLACK",
    "QUIET_ZONE_MODULES",
    "WHITE",
    "ModuleGrid",
    "new_canvas",
    "paint_modules",
    "rasterize",
)


BLACK: Final[int] = 0
WHITE: Final[int] = 255
QUIET_ZONE_MODULES: Final[int] = 1


class ModuleGrid(NamedTuple):
    """Dark/light modules of a matrix code, stored row-major with `True` as dark."""

    width: int
    height: int
    rows: tuple[tuple[bool, ...], ...]

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[bool]]) -> Self:
        frozen_rows: tuple[tuple[bool, ...], ...] = tuple(
            tuple(bool(module) for module in row) for row in rows
        )

        if any(len(row) != len(frozen_rows[0]) for row in frozen_rows):
            RAGGED_ROWS_MESSAGE: Final[str] = "All rows of a module grid must be the same length."
            raise ValueError(RAGGED_ROWS_MESSAGE)

        return cls(
            width=len(frozen_rows[0]) if frozen_rows else 0,
            height=len(frozen_rows),
            rows=frozen_rows,
        )

    def is_dark(self, x: int, y: int) -> bool:
        """Return whether the module in column `x` of row `y` is dark."""
        return self.rows[y][x]

    def dark_modules(self) -> Iterator[tuple[int, int]]:
        """Yield the `(x, y)` coordinate of every dark module."""
        y: int
        row: tuple[bool, ...]
        for y, row in enumerate(self.rows):
            x: int
            module: bool
            for x, module in enumerate(row):
                if module:
                    yield x, y


def new_canvas(width: int, height: int) -> Image.Image:
    """Allocate a white grayscale image, failing cleanly when it is too large to hold."""
    try:
        return Image.new("L", (width, height), color=WHITE)
    except (MemoryError, OverflowError, ValueError) as e:
        CANVAS_TOO_LARGE_MESSAGE: Final[str] = (
            f"Cannot allocate a {width}x{height} pixel image, choose a smaller size."
        )
        raise MatrixCodeEncodingError(CANVAS_TOO_LARGE_MESSAGE) from e


def paint_modules(
    image: Image.Image, grid: ModuleGrid, module_pixels: int, offset: tuple[int, int]
) -> None:
    """Paint each dark module as a black `module_pixels` square, starting at `offset`."""
    if module_pixels <= 0:
        return

    offset_x, offset_y = offset

    x: int
    y: int
    for x, y in grid.dark_modules():
        left: int = offset_x + x * module_pixels
        top: int = offset_y + y * module_pixels
        image.paste(BLACK, (left, top, left + module_pixels, top + module_pixels))


def rasterize(grid: ModuleGrid, block_size: int) -> Image.Image:
    """
    Render a module grid with a one-module white quiet zone on each side.

    The resulting grayscale image is `(grid.width + 2) * block_size` pixels wide
    and `(grid.height + 2) * block_size` pixels tall.
    """
    if block_size < 0:
        NEGATIVE_BLOCK_SIZE_MESSAGE: Final[str] = f"Negative block size: {block_size} pixels."
        raise ValueError(NEGATIVE_BLOCK_SIZE_MESSAGE)

    image: Image.Image = new_canvas(
        (grid.width + 2 * QUIET_ZONE_MODULES) * block_size,
        (grid.height + 2 * QUIET_ZONE_MODULES) * block_size,
    )

    paint_modules(
        image,
        grid,
        block_size,
        offset=(QUIET_ZONE_MODULES * block_size, QUIET_ZONE_MODULES * block_size),
    )

    return image
