from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
import math
from typing import Any

from markercluster.aggregate import aggregate
from markercluster.axis import CoordinateProjector
from markercluster.diagnostics import DiagnosticsCallback, GridDiagnostic, PassStarted
from markercluster.grid import GridFrame, bucket_in_frame
from markercluster.options import ClusterOptions
from markercluster.overlap import AnchorCache, OverlapResolver
from markercluster.result import ClusterResult, assemble, dispose, empty_result, passthrough_result
from markercluster.series import Point


LOGGER = logging.getLogger(__name__)


def cluster_points(
    points: Iterable[Point],
    x_axis: CoordinateProjector,
    y_axis: CoordinateProjector,
    options: ClusterOptions,
    *,
    diagnostics: DiagnosticsCallback | None = None,
    series_name: str | None = None,
    cache: AnchorCache | None = None,
) -> ClusterResult:
    """Bucket, aggregate, de-overlap and assemble one clustering pass."""
    finite = [p for p in points if math.isfinite(p.x) and math.isfinite(p.y)]
    if diagnostics is not None:
        diagnostics(PassStarted(series_name=series_name))
    if not finite:
        return empty_result()

    layout = options.layout_algorithm
    frame = GridFrame.for_axes(x_axis, y_axis, layout.grid_size, data_relative=layout.data_relative)
    cells = bucket_in_frame(finite, x_axis, y_axis, frame)

    if diagnostics is not None and layout.debug_draw_grid_lines:
        diagnostics(
            GridDiagnostic(
                cells=tuple(cells),
                grid_size=frame.grid_size,
                offset_x=frame.offset_x,
                offset_y=frame.offset_y,
                plot_rect=(x_axis.origin, y_axis.origin, x_axis.length, y_axis.length),
            )
        )

    resolver: OverlapResolver | None = None
    if options.resolves_overlap:
        resolver = OverlapResolver(
            cells,
            x_axis,
            y_axis,
            frame,
            minimum_cluster_size=options.minimum_cluster_size,
            style=options.style,
            zones=options.zones,
            point_radius=options.series_marker.extent,
            cache=cache,
        )

    aggregation = aggregate(
        cells,
        options.minimum_cluster_size,
        options.zones,
        style=options.style,
        place=resolver.resolve_anchor if resolver is not None else None,
    )
    result = assemble(aggregation, options, diagnostics=diagnostics, x_axis=x_axis, y_axis=y_axis)
    LOGGER.debug(
        "clustering pass: points=%d cells=%d clusters=%d noise=%d moved=%d",
        len(finite),
        len(cells),
        len(result.clusters),
        len(result.noise),
        resolver.cache.moved if resolver is not None else 0,
    )
    if layout.debug_draw_points:
        # Diagnostics above still describe the clusters; the series keeps its raw points.
        return passthrough_result(finite)
    return result


class MarkerClusterer:
    """Per-series clustering stage; owns only the handle to the previous result."""

    def __init__(
        self,
        options: ClusterOptions | Mapping[str, Any] | None = None,
        *,
        series_name: str | None = None,
        diagnostics: DiagnosticsCallback | None = None,
    ) -> None:
        if options is None:
            options = ClusterOptions()
        elif not isinstance(options, ClusterOptions):
            options = ClusterOptions.from_mapping(options)
        self.options = options
        self.series_name = series_name
        self.diagnostics = diagnostics
        self._result: ClusterResult | None = None
        self._cache = AnchorCache()

    @property
    def result(self) -> ClusterResult | None:
        return self._result

    def generate(
        self,
        points: Iterable[Point],
        x_axis: CoordinateProjector,
        y_axis: CoordinateProjector,
    ) -> ClusterResult:
        self.dispose()
        if self.options.enabled:
            result = cluster_points(
                points,
                x_axis,
                y_axis,
                self.options,
                diagnostics=self.diagnostics,
                series_name=self.series_name,
                cache=self._cache,
            )
        else:
            result = passthrough_result([p for p in points if math.isfinite(p.x) and math.isfinite(p.y)])
        self._result = result
        return result

    def dispose(self) -> int:
        previous, self._result = self._result, None
        return dispose(previous)

    def close(self) -> None:
        self.dispose()
        self._cache.clear()

    def __enter__(self) -> MarkerClusterer:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
