from __future__ import annotations

from dataclasses import dataclass, replace

from imprev.terminal import ColourMode, TerminalGeometry


@dataclass(frozen=True)
class RenderConfig:
    colour_mode: ColourMode | None = None  # None: use what the terminal reports
    stretch: bool = False
    upscale: str = "nearest"
    reserve_rows: int = 1  # left free below the image for the shell prompt
    columns: int | None = None
    rows: int | None = None

    def apply(self, geometry: TerminalGeometry) -> TerminalGeometry:
        """Geometry with any explicit size or colour overrides applied."""
        return replace(
            geometry,
            columns=self.columns if self.columns is not None else geometry.columns,
            rows=self.rows if self.rows is not None else geometry.rows,
            colour_mode=self.colour_mode or geometry.colour_mode,
        )
