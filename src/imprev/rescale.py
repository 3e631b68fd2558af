"""Resample a decoded image onto the half-block pixel grid of a terminal.

Each character cell is treated as one pixel wide and two pixels tall, so a
grid of ``columns x rows`` cells holds ``columns x 2*rows`` roughly square
pixels. The image is scaled uniformly to fit inside that area and centred,
or stretched to fill it when asked.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

from imprev.errors import InvalidDimensions
from imprev.logging_setup import get_logger
from imprev.terminal import TargetGrid

UPSCALE_FILTERS = {
    "nearest": Image.NEAREST,
    "bilinear": Image.BILINEAR,
}

logger = get_logger()


@dataclass
class PixelGrid:
    pixels: np.ndarray  # (2 * rows, columns, 3) uint8
    mask: np.ndarray  # (2 * rows, columns) bool, False in letterbox margins

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def width(self) -> int:
        return self.pixels.shape[1]


def _check_grid(grid: TargetGrid) -> None:
    if grid.columns < 1 or grid.rows < 1:
        raise InvalidDimensions(f"Target grid must be at least 1x1, got {grid.columns}x{grid.rows}")


def fit_size(src_width: int, src_height: int, grid: TargetGrid, stretch: bool = False) -> tuple[int, int]:
    """Pixel size the source is resampled to before being placed on the grid."""
    if src_width < 1 or src_height < 1:
        raise InvalidDimensions(f"Image must be at least 1x1, got {src_width}x{src_height}")
    _check_grid(grid)

    max_width = grid.columns
    max_height = 2 * grid.rows
    if stretch:
        return max_width, max_height

    scale = min(max_width / src_width, max_height / src_height)
    width = min(max(round(src_width * scale), 1), max_width)
    height = min(max(round(src_height * scale), 1), max_height)
    return width, height


def choose_filter(src_size: tuple[int, int], dst_size: tuple[int, int], upscale: str = "nearest") -> int:
    """Box filter whenever either axis shrinks, otherwise the requested upscale filter."""
    if dst_size[0] < src_size[0] or dst_size[1] < src_size[1]:
        return Image.BOX
    try:
        return UPSCALE_FILTERS[upscale]
    except KeyError:
        raise ValueError(f"Unknown upscale filter: {upscale!r}") from None


def rescale(image: np.ndarray, grid: TargetGrid, stretch: bool = False, upscale: str = "nearest") -> PixelGrid:
    """Resample an RGB array to exactly ``2 * grid.rows`` rows and ``grid.columns`` columns."""
    src_height, src_width = image.shape[:2]
    width, height = fit_size(src_width, src_height, grid, stretch=stretch)

    resample = choose_filter((src_width, src_height), (width, height), upscale)
    logger.debug(
        "resampling %dx%d -> %dx%d (filter %s)", src_width, src_height, width, height, Image.Resampling(resample).name
    )
    resized = Image.fromarray(np.ascontiguousarray(image, dtype=np.uint8)).resize((width, height), resample)

    canvas_height = 2 * grid.rows
    canvas_width = grid.columns
    top = (canvas_height - height) // 2
    left = (canvas_width - width) // 2

    pixels = np.zeros((canvas_height, canvas_width, 3), dtype=np.uint8)
    mask = np.zeros((canvas_height, canvas_width), dtype=bool)
    pixels[top : top + height, left : left + width] = np.asarray(resized, dtype=np.uint8)
    mask[top : top + height, left : left + width] = True
    return PixelGrid(pixels=pixels, mask=mask)
