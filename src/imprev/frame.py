from __future__ import annotations

from dataclasses import dataclass, field

from imprev.colour import DEFAULT
from imprev.terminal import ColourMode

UPPER_HALF = "▀"
LOWER_HALF = "▄"
FULL_BLOCK = "█"
BLANK = " "


@dataclass(frozen=True)
class Cell:
    fg: int
    bg: int
    glyph: str

    @property
    def is_blank(self) -> bool:
        return self.glyph == BLANK and self.bg == DEFAULT


@dataclass
class Frame:
    mode: ColourMode
    rows: list[list[Cell]] = field(default_factory=list)

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0
