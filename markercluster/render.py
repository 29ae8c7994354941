from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from markercluster.materialize import RenderedPoint
from markercluster.options import ClusterOptions
from markercluster.raster import draw_annulus, draw_cluster_symbol, draw_square_marker, draw_text_centered
from markercluster.raster.canvas import RGBA


DEFAULT_CLUSTER_FILL: RGBA = (62, 149, 255, 255)
DEFAULT_POINT_FILL: RGBA = (255, 165, 0, 255)


def render_points(canvas: np.ndarray, rendered: Iterable[RenderedPoint], options: ClusterOptions) -> np.ndarray:
    """Draw markers, then cluster labels on top, into an HxWx4 uint8 canvas."""
    labels: list[RenderedPoint] = []
    for point in rendered:
        if point.destroyed:
            continue
        marker = point.marker
        if point.is_cluster:
            fill = marker.fill_color or DEFAULT_CLUSTER_FILL
            if marker.symbol == "cluster":
                draw_cluster_symbol(canvas, point.plot_x, point.plot_y, marker.radius, fill)
            else:
                draw_annulus(canvas, point.plot_x, point.plot_y, marker.radius, fill)
            if marker.line_color is not None and marker.line_width:
                draw_annulus(
                    canvas,
                    point.plot_x,
                    point.plot_y,
                    marker.radius,
                    marker.line_color,
                    inner=marker.radius - marker.line_width,
                )
            if point.data_label:
                labels.append(point)
            continue
        fill = marker.fill_color or DEFAULT_POINT_FILL
        px = int(round(point.plot_x))
        py = int(round(point.plot_y))
        if marker.symbol == "circle":
            draw_annulus(canvas, point.plot_x, point.plot_y, marker.radius, fill)
        else:
            draw_square_marker(canvas, px, py, fill, int(round(marker.radius)))

    label_opts = options.data_labels
    for point in labels:
        draw_text_centered(
            canvas,
            point.plot_x,
            point.plot_y,
            point.data_label or "",
            label_opts.color,
            font_size_px=label_opts.font_size_px,
        )
    return canvas
