from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from markercluster.errors import ClusterDataError


@dataclass(frozen=True)
class SeriesData:
    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray
    source_name: str | None = None


@dataclass(frozen=True)
class Point:
    """One input datum; ``index`` is its position in the caller's sequence."""

    index: int
    x: float
    y: float
    options: Mapping[str, Any] | None = None


def points_from_series(
    series: SeriesData,
    point_options: Sequence[Mapping[str, Any] | None] | None = None,
) -> list[Point]:
    size = int(series.x.size)
    if point_options is not None and len(point_options) != size:
        raise ClusterDataError(f"point options length mismatch: {len(point_options)} != {size}")
    points: list[Point] = []
    for i in np.flatnonzero(series.mask).tolist():
        payload = point_options[i] if point_options is not None else None
        points.append(Point(index=i, x=float(series.x[i]), y=float(series.y[i]), options=payload))
    return points
