from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import math

import numpy as np

from markercluster.grid import CellKey
from markercluster.raster import draw_annulus, draw_hline, draw_text, draw_text_centered, draw_vline
from markercluster.raster.canvas import RGBA


@dataclass(frozen=True)
class PassStarted:
    series_name: str | None = None


@dataclass(frozen=True)
class GridDiagnostic:
    cells: tuple[CellKey, ...]
    grid_size: float
    offset_x: float
    offset_y: float
    plot_rect: tuple[float, float, float, float]


@dataclass(frozen=True)
class ClusterDiagnostic:
    key: CellKey
    member_count: int
    centroid: tuple[float, float]
    anchor: tuple[float, float]
    centroid_px: tuple[float, float] | None = None


Diagnostic = PassStarted | GridDiagnostic | ClusterDiagnostic
DiagnosticsCallback = Callable[[Diagnostic], None]


class RasterDebugOverlay:
    """Collects one pass of diagnostics and paints them over a canvas."""

    def __init__(
        self,
        *,
        grid_color: RGBA = (0, 0, 0, 255),
        label_color: RGBA = (0, 0, 0, 180),
        cluster_color: RGBA = (0, 255, 0, 26),
        cluster_radius: float = 15.0,
    ) -> None:
        self.grid_color = grid_color
        self.label_color = label_color
        self.cluster_color = cluster_color
        self.cluster_radius = cluster_radius
        self.grid: GridDiagnostic | None = None
        self.clusters: list[ClusterDiagnostic] = []

    def __call__(self, event: Diagnostic) -> None:
        if isinstance(event, PassStarted):
            self.grid = None
            self.clusters.clear()
        elif isinstance(event, GridDiagnostic):
            self.grid = event
        elif isinstance(event, ClusterDiagnostic):
            self.clusters.append(event)

    def draw(self, canvas: np.ndarray) -> None:
        if self.grid is not None:
            self._draw_grid(canvas, self.grid)
        for item in self.clusters:
            if item.centroid_px is None:
                continue
            cx, cy = item.centroid_px
            draw_annulus(canvas, cx, cy, self.cluster_radius, self.cluster_color)
            draw_annulus(canvas, cx, cy, self.cluster_radius, self.grid_color, inner=self.cluster_radius - 1.0)
            draw_text_centered(canvas, cx, cy, str(item.member_count), self.grid_color, font_size_px=12.0)

    def _draw_grid(self, canvas: np.ndarray, grid: GridDiagnostic) -> None:
        x0, y0, width, height = grid.plot_rect
        size = grid.grid_size
        col_start = math.ceil(grid.offset_x / size)
        col_end = math.floor((width + grid.offset_x) / size)
        row_start = math.ceil(grid.offset_y / size)
        row_end = math.floor((height + grid.offset_y) / size)
        left, right = int(round(x0)), int(round(x0 + width))
        top, bottom = int(round(y0)), int(round(y0 + height))
        for col in range(col_start, col_end + 1):
            draw_vline(canvas, int(round(x0 + col * size - grid.offset_x)), top, bottom, self.grid_color)
        for row in range(row_start, row_end + 1):
            draw_hline(canvas, left, right, int(round(y0 + row * size - grid.offset_y)), self.grid_color)
        for key in grid.cells:
            lx = x0 + key.col * size - grid.offset_x + 5
            ly = y0 + key.row * size - grid.offset_y + 5
            if x0 <= lx <= x0 + width and y0 <= ly <= y0 + height:
                draw_text(canvas, int(lx), int(ly), str(key), self.label_color, font_size_px=11.0)
