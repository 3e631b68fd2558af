from pathlib import Path

import numpy as np
from PIL import Image

from imprev.colour import map_grid
from imprev.compositor import composite
from imprev.config import RenderConfig
from imprev.logging_setup import get_logger
from imprev.render import render_frame
from imprev.rescale import rescale
from imprev.source import load_image
from imprev.terminal import TargetGrid, TerminalGeometry

logger = get_logger()


def image_to_ansi(
    image: np.ndarray | Image.Image | str | Path,
    geometry: TerminalGeometry,
    config: RenderConfig | None = None,
) -> bytes:
    """Render an image into the bytes that draw it on a terminal of the given geometry."""
    if config is None:
        config = RenderConfig()
    image = load_image(image)

    geometry = config.apply(geometry)
    # Explicit rows were asked for, so don't take the prompt line out of them
    reserve = 0 if config.rows is not None else config.reserve_rows
    grid = TargetGrid.from_geometry(geometry, reserve_rows=reserve)
    logger.debug("target grid %dx%d, colour mode %s", grid.columns, grid.rows, geometry.colour_mode.value)

    pixels = rescale(image, grid, stretch=config.stretch, upscale=config.upscale)
    codes = map_grid(pixels, geometry.colour_mode)
    frame = composite(codes, geometry.colour_mode)
    return render_frame(frame)
