from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from markercluster import (
    ClusterOptions,
    DataLimits,
    LayoutAlgorithm,
    MarkerClusterer,
    RasterDebugOverlay,
    axes_for_plot_rect,
    compute_limits,
    load_options,
    materialize,
    render_points,
)
from markercluster.adapters import normalize_points, normalize_xy
from markercluster.raster import new_canvas


def _sample_blobs(count: int, seed: int) -> tuple[np.ndarray, np.ndarray]:
    rng = np.random.default_rng(seed)
    centers = rng.uniform(-50.0, 50.0, size=(6, 2))
    picks = rng.integers(0, centers.shape[0], size=count)
    spread = rng.uniform(1.5, 9.0, size=centers.shape[0])
    x = centers[picks, 0] + rng.normal(0.0, spread[picks])
    y = centers[picks, 1] + rng.normal(0.0, spread[picks])
    return x, y


def _render(
    clusterer: MarkerClusterer,
    overlay: RasterDebugOverlay,
    x: np.ndarray,
    y: np.ndarray,
    *,
    width: int,
    height: int,
    visible: DataLimits | None,
) -> np.ndarray:
    series = normalize_xy(x, y, source_name="blobs")
    limits = compute_limits(series.x, series.y, series.mask)
    margin = 24.0
    x_axis, y_axis = axes_for_plot_rect(
        limits,
        (margin, margin, width - 2 * margin, height - 2 * margin),
        visible=visible,
    )
    points = normalize_points(x, y)
    result = clusterer.generate(points, x_axis, y_axis)
    rendered = materialize(result, x_axis, y_axis, clusterer.options)
    canvas = new_canvas(width, height, (12, 16, 23, 255))
    overlay.draw(canvas)
    render_points(canvas, rendered, clusterer.options)
    return canvas


def main() -> None:
    parser = argparse.ArgumentParser(prog="cluster-scatter-demo")
    parser.add_argument("--out", type=Path, default=Path("cluster_demo.png"))
    parser.add_argument("--points", type=int, default=1500)
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--width", type=int, default=960)
    parser.add_argument("--height", type=int, default=640)
    parser.add_argument("--options", type=Path, default=None, help="JSON option bag (camelCase keys).")
    parser.add_argument("--grid-size", type=float, default=50.0)
    parser.add_argument("--minimum-cluster-size", type=int, default=2)
    parser.add_argument("--layout", choices=["grid", "grid-data-relative", "grid-view-relative"], default="grid")
    parser.add_argument("--no-overlap", action="store_true")
    parser.add_argument("--debug-grid", action="store_true")
    parser.add_argument("--pan", type=float, default=0.0, help="Also render a frame panned by this many x units.")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.options is not None:
        options = load_options(args.options)
    else:
        options = ClusterOptions(
            enabled=True,
            allow_overlap=not args.no_overlap,
            minimum_cluster_size=args.minimum_cluster_size,
            layout_algorithm=LayoutAlgorithm(
                type=args.layout,
                grid_size=args.grid_size,
                debug_draw_grid_lines=args.debug_grid,
                debug_draw_clusters=args.debug_grid,
            ),
        )

    x, y = _sample_blobs(args.points, args.seed)
    overlay = RasterDebugOverlay(grid_color=(90, 110, 140, 255), label_color=(150, 170, 200, 255))
    frames = []
    with MarkerClusterer(options, series_name="blobs", diagnostics=overlay) as clusterer:
        frames.append(_render(clusterer, overlay, x, y, width=args.width, height=args.height, visible=None))
        if args.pan:
            full = compute_limits(x, y, np.isfinite(x) & np.isfinite(y))
            panned = DataLimits(xmin=full.xmin + args.pan, xmax=full.xmax + args.pan, ymin=full.ymin, ymax=full.ymax)
            frames.append(_render(clusterer, overlay, x, y, width=args.width, height=args.height, visible=panned))
        result = clusterer.result
        print(f"entries={len(result)} clusters={len(result.clusters)} points={len(result.noise)}")

    out = np.concatenate(frames, axis=0)
    args.out.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(out).save(args.out)
    print(f"wrote {args.out}")


if __name__ == "__main__":
    main()
