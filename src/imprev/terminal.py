from __future__ import annotations

import enum
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass

from imprev.logging_setup import get_logger

FALLBACK_SIZE = (80, 24)

logger = get_logger()


class ColourMode(enum.Enum):
    TRUECOLOR = "truecolor"
    INDEXED_256 = "256"
    INDEXED_16 = "16"
    MONOCHROME = "mono"


def get_terminal_size() -> tuple[int, int]:
    """Return (columns, rows) of the terminal, or (80, 24) if not a tty."""
    if not sys.stdout.isatty():
        return FALLBACK_SIZE
    try:
        size = os.get_terminal_size(sys.stdout.fileno())
    except (OSError, ValueError):
        logger.debug("terminal size query failed, using %dx%d", *FALLBACK_SIZE)
        return FALLBACK_SIZE
    return (size.columns, size.lines)


def detect_colour_mode(environ: Mapping[str, str] | None = None) -> ColourMode:
    """Guess the colour capability from COLORTERM, TERM and NO_COLOR.

    Falls back to 16 colours, which every ANSI terminal understands.
    """
    if environ is None:
        environ = os.environ
    term = environ.get("TERM", "").lower()
    if environ.get("NO_COLOR") or term == "dumb":
        return ColourMode.MONOCHROME
    if environ.get("COLORTERM", "").lower() in {"truecolor", "24bit"}:
        return ColourMode.TRUECOLOR
    if "256color" in term:
        return ColourMode.INDEXED_256
    return ColourMode.INDEXED_16


@dataclass(frozen=True)
class TerminalGeometry:
    columns: int
    rows: int
    colour_mode: ColourMode

    @classmethod
    def detect(cls, environ: Mapping[str, str] | None = None) -> TerminalGeometry:
        columns, rows = get_terminal_size()
        return cls(columns=columns, rows=rows, colour_mode=detect_colour_mode(environ))


@dataclass(frozen=True)
class TargetGrid:
    columns: int
    rows: int

    @classmethod
    def from_geometry(cls, geometry: TerminalGeometry, reserve_rows: int = 0) -> TargetGrid:
        # A terminal reporting 0x0 (e.g. a serial console) still gets one cell
        columns = max(geometry.columns, 1)
        rows = max(geometry.rows - reserve_rows, 1)
        return cls(columns=columns, rows=rows)
