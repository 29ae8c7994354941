from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import math
from typing import NamedTuple

from markercluster.axis import CoordinateProjector
from markercluster.series import Point


class CellKey(NamedTuple):
    row: int
    col: int

    def __str__(self) -> str:
        return f"{self.row}-{self.col}"


CellGroup = dict[CellKey, list[Point]]


def data_start(axis: CoordinateProjector) -> float:
    """The end of the data extent that lands nearest the plot origin."""
    if axis.to_pixel(axis.data_min) <= axis.to_pixel(axis.data_max):
        return axis.data_min
    return axis.data_max


def axis_offset(axis: CoordinateProjector) -> float:
    return axis.origin - axis.to_pixel(data_start(axis))


@dataclass(frozen=True)
class GridFrame:
    """Maps data values into grid pixel space (plot origin at 0, offset applied)."""

    grid_size: float
    offset_x: float = 0.0
    offset_y: float = 0.0

    def __post_init__(self) -> None:
        if not self.grid_size > 0:
            raise ValueError("grid_size must be > 0")

    @classmethod
    def for_axes(
        cls,
        x_axis: CoordinateProjector,
        y_axis: CoordinateProjector,
        grid_size: float,
        *,
        data_relative: bool,
    ) -> GridFrame:
        if not data_relative:
            return cls(grid_size=float(grid_size))
        return cls(grid_size=float(grid_size), offset_x=axis_offset(x_axis), offset_y=axis_offset(y_axis))

    def to_grid(
        self,
        x_axis: CoordinateProjector,
        y_axis: CoordinateProjector,
        x: float,
        y: float,
    ) -> tuple[float, float]:
        gx = x_axis.to_pixel(x) + self.offset_x - x_axis.origin
        gy = y_axis.to_pixel(y) + self.offset_y - y_axis.origin
        return gx, gy

    def from_grid(
        self,
        x_axis: CoordinateProjector,
        y_axis: CoordinateProjector,
        gx: float,
        gy: float,
    ) -> tuple[float, float]:
        x = x_axis.to_value(gx - self.offset_x + x_axis.origin)
        y = y_axis.to_value(gy - self.offset_y + y_axis.origin)
        return x, y

    def locate(self, gx: float, gy: float) -> CellKey:
        return CellKey(row=math.floor(gy / self.grid_size), col=math.floor(gx / self.grid_size))

    def cell_origin(self, key: CellKey) -> tuple[float, float]:
        return key.col * self.grid_size, key.row * self.grid_size


def bucket(
    points: Iterable[Point],
    x_axis: CoordinateProjector,
    y_axis: CoordinateProjector,
    grid_size: float,
    *,
    data_relative: bool = True,
) -> CellGroup:
    frame = GridFrame.for_axes(x_axis, y_axis, grid_size, data_relative=data_relative)
    return bucket_in_frame(points, x_axis, y_axis, frame)


def bucket_in_frame(
    points: Iterable[Point],
    x_axis: CoordinateProjector,
    y_axis: CoordinateProjector,
    frame: GridFrame,
) -> CellGroup:
    # Keys keep first-seen order; output order downstream depends on it.
    groups: CellGroup = {}
    for point in points:
        key = frame.locate(*frame.to_grid(x_axis, y_axis, point.x, point.y))
        groups.setdefault(key, []).append(point)
    return groups
