from markercluster.aggregate import Cluster, NoisePoint, aggregate, match_zone
from markercluster.axis import CoordinateProjector, DataLimits, LinearAxis, axes_for_plot_rect, compute_limits
from markercluster.diagnostics import ClusterDiagnostic, GridDiagnostic, PassStarted, RasterDebugOverlay
from markercluster.engine import MarkerClusterer, cluster_points
from markercluster.errors import ClusterConfigError, ClusterDataError, ClusterError, UnsupportedLayoutError
from markercluster.grid import CellKey, GridFrame, bucket
from markercluster.materialize import RenderedPoint, materialize
from markercluster.options import (
    ClusterOptions,
    DataLabelOptions,
    LayoutAlgorithm,
    MarkerStyle,
    StyleOverride,
    StyleZone,
    TooltipOptions,
    load_options,
)
from markercluster.overlap import AnchorCache, OverlapResolver
from markercluster.render import render_points
from markercluster.result import ClusterResult, GroupEntry, assemble, dispose
from markercluster.series import Point

__all__ = [
    "AnchorCache",
    "CellKey",
    "Cluster",
    "ClusterConfigError",
    "ClusterDataError",
    "ClusterDiagnostic",
    "ClusterError",
    "ClusterOptions",
    "ClusterResult",
    "CoordinateProjector",
    "DataLabelOptions",
    "DataLimits",
    "GridDiagnostic",
    "GridFrame",
    "GroupEntry",
    "LayoutAlgorithm",
    "LinearAxis",
    "MarkerClusterer",
    "MarkerStyle",
    "NoisePoint",
    "OverlapResolver",
    "PassStarted",
    "Point",
    "RasterDebugOverlay",
    "RenderedPoint",
    "StyleOverride",
    "StyleZone",
    "TooltipOptions",
    "UnsupportedLayoutError",
    "aggregate",
    "assemble",
    "axes_for_plot_rect",
    "bucket",
    "cluster_points",
    "compute_limits",
    "dispose",
    "load_options",
    "match_zone",
    "materialize",
    "render_points",
]
