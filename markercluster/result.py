from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import Any

import numpy as np

from markercluster.aggregate import Aggregation, Cluster, Entry, NoisePoint
from markercluster.axis import CoordinateProjector
from markercluster.diagnostics import ClusterDiagnostic, DiagnosticsCallback
from markercluster.errors import ClusterError
from markercluster.grid import CellKey
from markercluster.options import ClusterOptions, DataLabelOptions, MarkerStyle, StyleOverride
from markercluster.series import Point


LOGGER = logging.getLogger(__name__)

FORMAT_PREFIX_CLUSTER = "cluster"
FORMAT_PREFIX_POINT = "point"

_EMPTY_OPTIONS: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class GroupEntry:
    """Rendering metadata for one output entry (the ``groupMap`` item)."""

    format_prefix: str
    key: int | None = None
    marker: MarkerStyle | None = None
    zone_style: StyleOverride | None = None
    data_labels: DataLabelOptions | None = None
    options: Mapping[str, Any] = field(default_factory=lambda: _EMPTY_OPTIONS)

    @property
    def is_cluster(self) -> bool:
        return self.format_prefix == FORMAT_PREFIX_CLUSTER


@dataclass
class ClusterResult:
    grouped_x_data: np.ndarray
    grouped_y_data: np.ndarray
    group_map: list[GroupEntry]
    clusters: list[Cluster]
    noise: list[NoisePoint]
    entries: list[Entry]
    clustered: bool = True
    disposed: bool = False
    _resources: list[Any] = field(default_factory=list, repr=False)

    def __len__(self) -> int:
        return len(self.entries)

    def attach(self, resource: Any) -> None:
        """Register a renderer-owned resource released by :func:`dispose`."""
        if self.disposed:
            raise ClusterError("cannot attach resources to a disposed cluster result")
        self._resources.append(resource)

    @property
    def resources(self) -> tuple[Any, ...]:
        return tuple(self._resources)


def empty_result(*, clustered: bool = True) -> ClusterResult:
    return ClusterResult(
        grouped_x_data=np.empty(0, dtype=np.float64),
        grouped_y_data=np.empty(0, dtype=np.float64),
        group_map=[],
        clusters=[],
        noise=[],
        entries=[],
        clustered=clustered,
    )


def assemble(
    aggregation: Aggregation,
    options: ClusterOptions,
    *,
    diagnostics: DiagnosticsCallback | None = None,
    x_axis: CoordinateProjector | None = None,
    y_axis: CoordinateProjector | None = None,
) -> ClusterResult:
    entries = aggregation.entries
    if not entries:
        return empty_result()

    xs = np.empty(len(entries), dtype=np.float64)
    ys = np.empty(len(entries), dtype=np.float64)
    group_map: list[GroupEntry] = []
    report_clusters = diagnostics is not None and options.layout_algorithm.debug_draw_clusters

    for i, entry in enumerate(entries):
        xs[i] = entry.x
        ys[i] = entry.y
        if isinstance(entry, Cluster):
            group_map.append(
                GroupEntry(
                    format_prefix=FORMAT_PREFIX_CLUSTER,
                    key=entry.member_count,
                    marker=entry.marker,
                    zone_style=entry.zone.style if entry.zone is not None else None,
                    data_labels=options.data_labels,
                )
            )
            if report_clusters:
                diagnostics(_cluster_diagnostic(entry, x_axis, y_axis))
        else:
            payload = entry.point.options
            group_map.append(
                GroupEntry(
                    format_prefix=FORMAT_PREFIX_POINT,
                    options=MappingProxyType(dict(payload)) if payload else _EMPTY_OPTIONS,
                )
            )

    return ClusterResult(
        grouped_x_data=xs,
        grouped_y_data=ys,
        group_map=group_map,
        clusters=list(aggregation.clusters),
        noise=list(aggregation.noise),
        entries=list(entries),
    )


def dispose(result: ClusterResult | None) -> int:
    """Release every resource attached to ``result``; later calls are no-ops."""
    if result is None or result.disposed:
        return 0
    released = 0
    resources = result._resources
    result._resources = []
    result.disposed = True
    for resource in resources:
        if resource is None:
            continue
        release = getattr(resource, "destroy", None) or getattr(resource, "close", None)
        if release is None and callable(resource):
            release = resource
        if release is None:
            continue
        release()
        released += 1
    LOGGER.debug("disposed cluster result: %d resources released", released)
    return released


def member_indices(result: ClusterResult) -> list[tuple[int, ...]]:
    """Original point indices behind each output entry, in output order."""
    out: list[tuple[int, ...]] = []
    for entry in result.entries:
        if isinstance(entry, Cluster):
            out.append(tuple(p.index for p in entry.members))
        else:
            out.append((entry.point.index,))
    return out


def _cluster_diagnostic(
    cluster: Cluster,
    x_axis: CoordinateProjector | None,
    y_axis: CoordinateProjector | None,
) -> ClusterDiagnostic:
    centroid_px = None
    if x_axis is not None and y_axis is not None:
        centroid_px = (x_axis.to_pixel(cluster.centroid[0]), y_axis.to_pixel(cluster.centroid[1]))
    return ClusterDiagnostic(
        key=cluster.key,
        member_count=cluster.member_count,
        centroid=cluster.centroid,
        anchor=cluster.anchor,
        centroid_px=centroid_px,
    )


def passthrough_result(points: Sequence[Point]) -> ClusterResult:
    """Unclustered result: every point is its own entry, in input order."""
    if not points:
        return empty_result(clustered=False)
    noise: list[NoisePoint] = []
    group_map: list[GroupEntry] = []
    for i, point in enumerate(points):
        noise.append(NoisePoint(key=CellKey(0, 0), index=i, point=point, cell_members=(point,)))
        payload = point.options
        group_map.append(
            GroupEntry(
                format_prefix=FORMAT_PREFIX_POINT,
                options=MappingProxyType(dict(payload)) if payload else _EMPTY_OPTIONS,
            )
        )
    return ClusterResult(
        grouped_x_data=np.asarray([p.x for p in points], dtype=np.float64),
        grouped_y_data=np.asarray([p.y for p in points], dtype=np.float64),
        group_map=group_map,
        clusters=[],
        noise=noise,
        entries=list(noise),
        clustered=False,
    )
