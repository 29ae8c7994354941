from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Protocol

import numpy as np


class CoordinateProjector(Protocol):
    """Data-value <-> pixel mapping for one axis of the plot area."""

    @property
    def origin(self) -> float: ...

    @property
    def length(self) -> float: ...

    @property
    def visible_min(self) -> float: ...

    @property
    def visible_max(self) -> float: ...

    @property
    def data_min(self) -> float: ...

    @property
    def data_max(self) -> float: ...

    def to_pixel(self, value: float) -> float: ...

    def to_value(self, pixel: float) -> float: ...


@dataclass(frozen=True)
class DataLimits:
    xmin: float
    xmax: float
    ymin: float
    ymax: float


@dataclass(frozen=True)
class LinearAxis:
    origin: float
    length: float
    visible_min: float
    visible_max: float
    data_min: float
    data_max: float
    reversed: bool = False

    def __post_init__(self) -> None:
        if self.length <= 0:
            raise ValueError("axis length must be > 0")
        if self.visible_max - self.visible_min <= 1e-12:
            raise ValueError("visible span must be > 0")
        if self.data_max < self.data_min:
            raise ValueError("data_max must be >= data_min")

    @property
    def scale(self) -> float:
        return self.length / (self.visible_max - self.visible_min)

    def to_pixel(self, value: float) -> float:
        frac = (float(value) - self.visible_min) / (self.visible_max - self.visible_min)
        if self.reversed:
            frac = 1.0 - frac
        return self.origin + frac * self.length

    def to_value(self, pixel: float) -> float:
        frac = (float(pixel) - self.origin) / self.length
        if self.reversed:
            frac = 1.0 - frac
        return self.visible_min + frac * (self.visible_max - self.visible_min)

    def panned(self, delta: float) -> LinearAxis:
        return replace(self, visible_min=self.visible_min + delta, visible_max=self.visible_max + delta)


def compute_limits(x: np.ndarray, y: np.ndarray, mask: np.ndarray, y_buffer_ratio: float = 0.05) -> DataLimits:
    vx = x[mask]
    vy = y[mask]
    xmin = float(np.min(vx))
    xmax = float(np.max(vx))
    ymin = float(np.min(vy))
    ymax = float(np.max(vy))

    if ymin == ymax:
        delta = max(1.0, abs(ymin) * y_buffer_ratio)
        ymin -= delta
        ymax += delta
    else:
        pad = (ymax - ymin) * y_buffer_ratio
        ymin -= pad
        ymax += pad

    if xmin == xmax:
        xmin -= 1.0
        xmax += 1.0

    return DataLimits(xmin=xmin, xmax=xmax, ymin=ymin, ymax=ymax)


def axes_for_plot_rect(
    limits: DataLimits,
    plot_rect: tuple[float, float, float, float],
    *,
    visible: DataLimits | None = None,
) -> tuple[LinearAxis, LinearAxis]:
    """Screen-space axis pair for a plot rect; y grows downwards like the raster canvas."""
    x0, y0, width, height = plot_rect
    view = visible or limits
    x_axis = LinearAxis(
        origin=float(x0),
        length=float(width),
        visible_min=view.xmin,
        visible_max=view.xmax,
        data_min=limits.xmin,
        data_max=limits.xmax,
    )
    y_axis = LinearAxis(
        origin=float(y0),
        length=float(height),
        visible_min=view.ymin,
        visible_max=view.ymax,
        data_min=limits.ymin,
        data_max=limits.ymax,
        reversed=True,
    )
    return x_axis, y_axis
