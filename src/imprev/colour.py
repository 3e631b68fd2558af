"""Map RGB colours onto what the terminal can display.

Colour codes are plain ints so whole grids can be held in numpy arrays:

- truecolor: ``r << 16 | g << 8 | b``
- 256 / 16 colour: the palette index
- monochrome: 1 for a lit pixel, 0 for a dark one

``DEFAULT`` stands for the terminal's own default colour.
"""

from __future__ import annotations

import numpy as np

from imprev.rescale import PixelGrid
from imprev.terminal import ColourMode

DEFAULT = -1

# xterm defaults. Normal colours come first so ties resolve to them.
ANSI_16 = np.array(
    [
        (0, 0, 0),
        (205, 0, 0),
        (0, 205, 0),
        (205, 205, 0),
        (0, 0, 238),
        (205, 0, 205),
        (0, 205, 205),
        (229, 229, 229),
        (127, 127, 127),
        (255, 0, 0),
        (0, 255, 0),
        (255, 255, 0),
        (92, 92, 255),
        (255, 0, 255),
        (0, 255, 255),
        (255, 255, 255),
    ],
    dtype=np.int32,
)

CUBE_STEPS = (0, 95, 135, 175, 215, 255)
GREY_RAMP = tuple(8 + 10 * i for i in range(24))

# Indices 16-231 are the 6x6x6 cube, 232-255 the grey ramp. 0-15 are left out:
# terminal themes redefine them, so their actual colour is unknown.
XTERM_256 = np.array(
    [(r, g, b) for r in CUBE_STEPS for g in CUBE_STEPS for b in CUBE_STEPS] + [(v, v, v) for v in GREY_RAMP],
    dtype=np.int32,
)
XTERM_256_OFFSET = 16

MONO_THRESHOLD = 128.0
LUMA = np.array([0.299, 0.587, 0.114])

_CHUNK = 4096


def palette(mode: ColourMode) -> tuple[np.ndarray, int]:
    """Return (entries, index of first entry) for an indexed mode."""
    if mode is ColourMode.INDEXED_256:
        return XTERM_256, XTERM_256_OFFSET
    if mode is ColourMode.INDEXED_16:
        return ANSI_16, 0
    raise ValueError(f"{mode} has no palette")


def pack_rgb(r: int, g: int, b: int) -> int:
    return (r << 16) | (g << 8) | b


def unpack_rgb(code: int) -> tuple[int, int, int]:
    return (code >> 16) & 0xFF, (code >> 8) & 0xFF, code & 0xFF


def _nearest(rgb: np.ndarray, entries: np.ndarray) -> np.ndarray:
    """Index of the nearest palette entry for each colour in an (N, 3) array.

    argmin returns the first of equal minima, so ties go to the lowest index.
    """
    out = np.empty(len(rgb), dtype=np.int64)
    # Chunked to bound the (chunk, entries, 3) intermediate on large grids
    for start in range(0, len(rgb), _CHUNK):
        diff = rgb[start : start + _CHUNK, np.newaxis, :].astype(np.int32) - entries[np.newaxis, :, :]
        out[start : start + _CHUNK] = (diff * diff).sum(axis=2).argmin(axis=1)
    return out


def map_pixels(rgb: np.ndarray, mode: ColourMode) -> np.ndarray:
    """Map an (..., 3) uint8 array to colour codes of shape (...)."""
    shape = rgb.shape[:-1]
    flat = rgb.reshape(-1, 3).astype(np.int32)

    if mode is ColourMode.TRUECOLOR:
        codes = (flat[:, 0] << 16) | (flat[:, 1] << 8) | flat[:, 2]
    elif mode is ColourMode.MONOCHROME:
        codes = (flat @ LUMA >= MONO_THRESHOLD).astype(np.int32)
    else:
        entries, offset = palette(mode)
        codes = _nearest(flat, entries) + offset

    return codes.astype(np.int32).reshape(shape)


def map_colour(rgb: tuple[int, int, int], mode: ColourMode) -> int:
    """Map a single RGB triple to a colour code. Total over 8-bit input."""
    return int(map_pixels(np.array([rgb], dtype=np.uint8), mode)[0])


def map_grid(grid: PixelGrid, mode: ColourMode) -> np.ndarray:
    """Colour codes for a resampled grid, with ``DEFAULT`` where nothing was drawn."""
    codes = map_pixels(grid.pixels, mode)
    codes[~grid.mask] = DEFAULT
    return codes


def _sgr(code: int, mode: ColourMode, background: bool) -> str:
    if mode is ColourMode.TRUECOLOR:
        r, g, b = unpack_rgb(code)
        return f"{48 if background else 38};2;{r};{g};{b}"
    if mode is ColourMode.INDEXED_256:
        return f"{48 if background else 38};5;{code}"
    if mode is ColourMode.INDEXED_16:
        base = 40 if background else 30
        if code >= 8:
            return str(base + 60 + code - 8)
        return str(base + code)
    raise ValueError(f"{mode} has no colour sequences")


def sgr_fg(code: int, mode: ColourMode) -> str:
    """SGR parameters selecting ``code`` as the foreground colour."""
    return _sgr(code, mode, background=False)


def sgr_bg(code: int, mode: ColourMode) -> str:
    """SGR parameters selecting ``code`` as the background colour."""
    return _sgr(code, mode, background=True)
