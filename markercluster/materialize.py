from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
from typing import Any

from markercluster.aggregate import Cluster
from markercluster.axis import CoordinateProjector
from markercluster.errors import ClusterConfigError
from markercluster.options import ClusterOptions, MarkerStyle, parse_style
from markercluster.result import ClusterResult
from markercluster.series import Point


LOGGER = logging.getLogger(__name__)

CLUSTER_CLASS_NAME = "cluster-point"
_UPDATABLE_FIELDS = frozenset({"x", "y", "options"})


@dataclass
class RenderedPoint:
    """One drawable output entry handed to the renderer."""

    index: int
    x: float
    y: float
    plot_x: float
    plot_y: float
    marker: MarkerStyle
    is_cluster: bool
    members: tuple[Point, ...]
    options: Mapping[str, Any] = field(default_factory=dict)
    data_label: str | None = None
    tooltip: str = ""
    class_names: tuple[str, ...] = ()
    destroyed: bool = False

    @property
    def clustered_data_len(self) -> int:
        return len(self.members)

    @property
    def member_indices(self) -> tuple[int, ...]:
        return tuple(p.index for p in self.members)

    def update(self, **changes: Any) -> bool:
        if self.is_cluster:
            LOGGER.warning("cannot update aggregated point (entry %d, %d members)", self.index, len(self.members))
            return False
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"unsupported point fields: {sorted(unknown)}")
        for name, value in changes.items():
            setattr(self, name, value)
        return True

    def destroy(self) -> None:
        self.destroyed = True


def materialize(
    result: ClusterResult,
    x_axis: CoordinateProjector,
    y_axis: CoordinateProjector,
    options: ClusterOptions,
) -> list[RenderedPoint]:
    """Turn a clustering result into renderer points and attach them for disposal."""
    rendered: list[RenderedPoint] = []
    for entry, meta in zip(result.entries, result.group_map, strict=True):
        x = float(entry.x)
        y = float(entry.y)
        if isinstance(entry, Cluster):
            item = RenderedPoint(
                index=entry.index,
                x=x,
                y=y,
                plot_x=x_axis.to_pixel(x),
                plot_y=y_axis.to_pixel(y),
                marker=meta.marker or options.style,
                is_cluster=True,
                members=entry.members,
                class_names=(CLUSTER_CLASS_NAME,),
            )
            if options.data_labels.enabled:
                item.data_label = _format(options.data_labels.format, item)
            item.tooltip = _format(options.tooltip.cluster_format, item)
        else:
            item = RenderedPoint(
                index=entry.index,
                x=x,
                y=y,
                plot_x=x_axis.to_pixel(x),
                plot_y=y_axis.to_pixel(y),
                marker=_point_marker(meta.options, options.series_marker),
                is_cluster=False,
                members=(entry.point,),
                options=dict(meta.options),
            )
            item.tooltip = _format(options.tooltip.point_format, item)
        rendered.append(item)
        result.attach(item)
    return rendered


def _point_marker(payload: Mapping[str, Any], base: MarkerStyle) -> MarkerStyle:
    raw = payload.get("marker") if payload else None
    if not raw:
        return base
    return base.merged(parse_style(raw, "marker"))


def _format(template: str, point: RenderedPoint) -> str:
    try:
        return template.format(point=point)
    except (AttributeError, IndexError, KeyError, ValueError) as exc:
        raise ClusterConfigError(f"invalid label template {template!r}: {exc}") from exc
