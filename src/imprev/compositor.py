import numpy as np

from imprev.colour import DEFAULT
from imprev.frame import BLANK, FULL_BLOCK, LOWER_HALF, UPPER_HALF, Cell, Frame
from imprev.terminal import ColourMode

_MONO_GLYPHS = {
    (True, True): FULL_BLOCK,
    (True, False): UPPER_HALF,
    (False, True): LOWER_HALF,
    (False, False): BLANK,
}

_BLANK_CELL = Cell(DEFAULT, DEFAULT, BLANK)


def _colour_cell(top: int, bottom: int) -> Cell:
    """Upper half block: the top pixel is the foreground, the bottom pixel the background.

    Only the background can be left at the terminal default, so a cell whose top
    pixel is empty flips to the lower half block and draws the bottom pixel as
    foreground instead.
    """
    if top == DEFAULT:
        if bottom == DEFAULT:
            return _BLANK_CELL
        return Cell(bottom, DEFAULT, LOWER_HALF)
    return Cell(top, bottom, UPPER_HALF)


def _mono_cell(top: int, bottom: int) -> Cell:
    return Cell(DEFAULT, DEFAULT, _MONO_GLYPHS[top == 1, bottom == 1])


def composite(codes: np.ndarray, mode: ColourMode) -> Frame:
    """Pack pairs of pixel rows into one row of half-block cells.

    An odd final row is paired with the terminal default so it still shows.
    """
    make_cell = _mono_cell if mode is ColourMode.MONOCHROME else _colour_cell
    height = codes.shape[0]

    rows = []
    for y in range(0, height, 2):
        top = codes[y].tolist()
        bottom = codes[y + 1].tolist() if y + 1 < height else [DEFAULT] * len(top)
        rows.append([make_cell(t, b) for t, b in zip(top, bottom)])
    return Frame(mode=mode, rows=rows)
