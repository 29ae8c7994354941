from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
import math

from markercluster.aggregate import centroid, cluster_marker, effective_threshold
from markercluster.axis import CoordinateProjector
from markercluster.grid import CellGroup, CellKey, GridFrame
from markercluster.options import MarkerStyle, StyleZone


LOGGER = logging.getLogger(__name__)

_CORNERS = ((-1, -1), (1, -1), (-1, 1), (1, 1))
_EPSILON = 1e-9


@dataclass
class AnchorCache:
    """Per-pass arena of resolved cluster anchors, keyed by cell."""

    anchors: dict[CellKey, tuple[float, float]] = field(default_factory=dict)
    resolving: set[CellKey] = field(default_factory=set)
    moved: int = 0

    def clear(self) -> None:
        self.anchors.clear()
        self.resolving.clear()
        self.moved = 0


@dataclass(frozen=True)
class _Obstacle:
    gx: float
    gy: float
    radius: float


class OverlapResolver:
    """Pushes cluster anchors away from markers in diagonal/adjacent grid cells.

    Single pass and local: a cell only looks at the cells its own marker radius
    reaches, so the outcome depends on the order cells are resolved in when two
    neighbours push each other.
    """

    def __init__(
        self,
        cell_group: CellGroup,
        x_axis: CoordinateProjector,
        y_axis: CoordinateProjector,
        frame: GridFrame,
        *,
        minimum_cluster_size: int,
        style: MarkerStyle,
        zones: Sequence[StyleZone] = (),
        point_radius: float,
        cache: AnchorCache | None = None,
    ) -> None:
        self._cells = cell_group
        self._x_axis = x_axis
        self._y_axis = y_axis
        self._frame = frame
        self._threshold = effective_threshold(minimum_cluster_size)
        self._style = style
        self._zones = tuple(zones)
        self._point_radius = float(point_radius)
        self.cache = cache if cache is not None else AnchorCache()
        self.cache.clear()

    def resolve_anchor(self, key: CellKey, center: tuple[float, float], radius: float) -> tuple[float, float]:
        cached = self.cache.anchors.get(key)
        if cached is not None:
            return cached
        self.cache.resolving.add(key)
        try:
            anchor = self._resolve(key, center, float(radius))
        finally:
            self.cache.resolving.discard(key)
        self.cache.anchors[key] = anchor
        if anchor != center:
            self.cache.moved += 1
        return anchor

    def _resolve(self, key: CellKey, center: tuple[float, float], radius: float) -> tuple[float, float]:
        frame = self._frame
        gx, gy = frame.to_grid(self._x_axis, self._y_axis, center[0], center[1])
        if not self._on_screen(gx - frame.offset_x, gy - frame.offset_y):
            return center

        cell_x0, cell_y0 = frame.cell_origin(key)
        size = frame.grid_size
        moved = False
        for neighbor in self._neighbors(key, gx, gy, radius):
            for obstacle in self._obstacles(neighbor):
                reach = radius + obstacle.radius
                if math.hypot(gx - obstacle.gx, gy - obstacle.gy) >= reach - _EPSILON:
                    continue
                if neighbor.col != key.col:
                    push = obstacle.gx + reach if neighbor.col < key.col else obstacle.gx - reach
                    gx = _clamp(push, cell_x0 + radius, cell_x0 + size - radius)
                if neighbor.row != key.row:
                    push = obstacle.gy + reach if neighbor.row < key.row else obstacle.gy - reach
                    gy = _clamp(push, cell_y0 + radius, cell_y0 + size - radius)
                moved = True

        if not moved:
            return center
        return frame.from_grid(self._x_axis, self._y_axis, gx, gy)

    def _on_screen(self, px: float, py: float) -> bool:
        return 0.0 <= px <= self._x_axis.length and 0.0 <= py <= self._y_axis.length

    def _neighbors(self, key: CellKey, gx: float, gy: float, radius: float) -> list[CellKey]:
        found: list[CellKey] = []
        for sign_x, sign_y in _CORNERS:
            corner = self._frame.locate(gx + sign_x * radius, gy + sign_y * radius)
            if corner != key and corner not in found:
                found.append(corner)
        return found

    def _obstacles(self, neighbor: CellKey) -> list[_Obstacle]:
        members = self._cells.get(neighbor)
        if not members:
            return []
        frame = self._frame
        if len(members) < self._threshold:
            out = []
            for point in members:
                gx, gy = frame.to_grid(self._x_axis, self._y_axis, point.x, point.y)
                out.append(_Obstacle(gx=gx, gy=gy, radius=self._point_radius))
            return out

        center = centroid(members)
        _, marker = cluster_marker(len(members), self._style, self._zones)
        if neighbor in self.cache.resolving:
            # Mutual neighbours: the cell still being resolved is seen at its centroid.
            anchor = center
        else:
            anchor = self.resolve_anchor(neighbor, center, marker.radius)
        gx, gy = frame.to_grid(self._x_axis, self._y_axis, anchor[0], anchor[1])
        return [_Obstacle(gx=gx, gy=gy, radius=marker.radius)]


def _clamp(value: float, low: float, high: float) -> float:
    # A marker wider than its cell is centred in it.
    if low > high:
        return (low + high) * 0.5
    return min(max(value, low), high)
