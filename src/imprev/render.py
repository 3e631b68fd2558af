import os

from imprev.colour import DEFAULT, sgr_bg, sgr_fg
from imprev.errors import OutputError
from imprev.frame import Cell, Frame
from imprev.terminal import ColourMode

ESC = "\033["
RESET = f"{ESC}0m"


def _select(cell: Cell, mode: ColourMode) -> str:
    """One SGR sequence that resets attributes and selects the cell's colours."""
    params = ["0"]
    if cell.fg != DEFAULT:
        params.append(sgr_fg(cell.fg, mode))
    if cell.bg != DEFAULT:
        params.append(sgr_bg(cell.bg, mode))
    return f"{ESC}{';'.join(params)}m"


def _trim(row: list[Cell]) -> list[Cell]:
    end = len(row)
    while end and row[end - 1].is_blank:
        end -= 1
    return row[:end]


def _render_row(row: list[Cell], mode: ColourMode) -> str:
    parts = []
    current = (DEFAULT, DEFAULT)
    for cell in row:
        colours = (cell.fg, cell.bg)
        if colours != current:
            parts.append(_select(cell, mode))
            current = colours
        parts.append(cell.glyph)
    parts.append(RESET)
    return "".join(parts)


def render_frame(frame: Frame) -> bytes:
    """Serialise a frame into the bytes written to the terminal.

    Colour sequences are only emitted when the colours change along a row.
    Every row, and the frame as a whole, ends with an attribute reset.
    Monochrome frames contain no escape sequences.
    """
    if frame.mode is ColourMode.MONOCHROME:
        text = "".join("".join(cell.glyph for cell in _trim(row)) + "\n" for row in frame.rows)
        return text.encode("utf-8")

    lines = [_render_row(_trim(row), frame.mode) + "\n" for row in frame.rows]
    return ("".join(lines) + RESET).encode("utf-8")


def write_output(data: bytes, fd: int) -> None:
    """Write ``data`` to a raw file descriptor, bypassing Python's stream buffers.

    Nothing is left sitting in a buffer to be flushed after an interrupt has
    already reset the terminal.
    """
    view = memoryview(data)
    try:
        while view:
            written = os.write(fd, view)
            view = view[written:]
    except OSError as e:
        raise OutputError(e.errno, f"Failed to write output: {e.strerror or e}") from e
