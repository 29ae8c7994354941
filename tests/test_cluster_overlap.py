from __future__ import annotations

import math
import unittest

from markercluster.axis import LinearAxis
from markercluster.engine import cluster_points
from markercluster.grid import CellKey, GridFrame, bucket_in_frame
from markercluster.options import ClusterOptions, LayoutAlgorithm, MarkerStyle, StyleOverride, StyleZone
from markercluster.overlap import AnchorCache, OverlapResolver
from markercluster.series import Point


def _axis(vmin: float = 0.0, vmax: float = 500.0, *, data_min: float = 0.0, data_max: float = 500.0) -> LinearAxis:
    return LinearAxis(origin=0.0, length=500.0, visible_min=vmin, visible_max=vmax, data_min=data_min, data_max=data_max)


def _points(coords: list[tuple[float, float]]) -> list[Point]:
    return [Point(index=i, x=x, y=y) for i, (x, y) in enumerate(coords)]


def _options(**kwargs) -> ClusterOptions:
    layout = kwargs.pop("layout", LayoutAlgorithm(type="grid-data-relative", grid_size=50))
    return ClusterOptions(enabled=True, allow_overlap=False, layout_algorithm=layout, **kwargs)


def _anchor_px(cluster, axis: LinearAxis) -> tuple[float, float]:
    return axis.to_pixel(cluster.anchor[0]), axis.to_pixel(cluster.anchor[1])


class OverlapResolverTests(unittest.TestCase):
    def test_isolated_cluster_keeps_its_centroid(self) -> None:
        result = cluster_points(_points([(20, 20), (30, 30)]), _axis(), _axis(), _options())
        cluster = result.clusters[0]
        self.assertEqual(cluster.anchor, cluster.centroid)

    def test_horizontal_neighbours_are_pushed_apart(self) -> None:
        points = _points([(45, 25), (46, 25), (55, 25), (56, 25)])
        result = cluster_points(points, _axis(), _axis(), _options())
        left, right = result.clusters
        lx, ly = _anchor_px(left, _axis())
        rx, ry = _anchor_px(right, _axis())
        self.assertGreaterEqual(math.hypot(rx - lx, ry - ly), 24.0 - 1e-9)
        self.assertAlmostEqual(ly, 25.0)
        self.assertAlmostEqual(ry, 25.0)

    def test_first_seen_cell_keeps_position(self) -> None:
        points = _points([(45, 25), (46, 25), (55, 25), (56, 25)])
        result = cluster_points(points, _axis(), _axis(), _options())
        first, second = result.clusters
        self.assertEqual(first.anchor, first.centroid)
        self.assertAlmostEqual(second.anchor[0], 69.5)

        swapped = _points([(55, 25), (56, 25), (45, 25), (46, 25)])
        result = cluster_points(swapped, _axis(), _axis(), _options())
        first, second = result.clusters
        self.assertEqual(first.key, CellKey(0, 1))
        self.assertEqual(first.anchor, first.centroid)
        self.assertAlmostEqual(second.anchor[0], 31.5)

    def test_diagonal_neighbours_are_pushed_apart(self) -> None:
        points = _points([(45, 45), (46, 46), (55, 55), (56, 56)])
        result = cluster_points(points, _axis(), _axis(), _options())
        a, b = result.clusters
        ax, ay = _anchor_px(a, _axis())
        bx, by = _anchor_px(b, _axis())
        self.assertGreaterEqual(math.hypot(bx - ax, by - ay), 24.0 - 1e-9)
        self.assertAlmostEqual(bx, 69.5)
        self.assertAlmostEqual(by, 69.5)

    def test_noise_neighbour_pushes_cluster_but_is_not_moved(self) -> None:
        points = _points([(45, 25), (46, 25), (52, 25)])
        options = _options(series_marker=MarkerStyle(symbol="square", radius=4, line_width=0))
        result = cluster_points(points, _axis(), _axis(), options)
        cluster = result.clusters[0]
        noise = result.noise[0]
        self.assertEqual((noise.x, noise.y), (52, 25))
        self.assertAlmostEqual(cluster.anchor[0], 36.0)
        self.assertGreaterEqual(abs(52 - cluster.anchor[0]), 16.0 - 1e-9)

    def test_push_never_leaves_the_anchor_cell(self) -> None:
        points = _points([(55, 25), (55, 25), (44, 25), (45, 25), (46, 25)])
        options = _options(
            style=MarkerStyle(radius=20),
            zones=(StyleZone(3, 3, StyleOverride(radius=40)),),
        )
        result = cluster_points(points, _axis(), _axis(), options)
        small, large = result.clusters
        self.assertEqual(small.key, CellKey(0, 1))
        self.assertEqual(large.anchor, large.centroid)
        self.assertAlmostEqual(small.anchor[0], 80.0)
        self.assertAlmostEqual(small.anchor[1], 25.0)
        self.assertGreaterEqual(small.anchor[0], 50.0 + 20.0 - 1e-9)
        self.assertLessEqual(small.anchor[0], 100.0 - 20.0 + 1e-9)

    def test_off_screen_clusters_are_not_adjusted(self) -> None:
        x_axis = _axis(0, 500, data_min=-100, data_max=500)
        points = _points([(-55, 25), (-54, 25), (-45, 25), (-44, 25)])
        result = cluster_points(points, x_axis, _axis(), _options())
        self.assertEqual(len(result.clusters), 2)
        for cluster in result.clusters:
            self.assertEqual(cluster.anchor, cluster.centroid)

    def test_view_relative_layout_never_resolves(self) -> None:
        layout = LayoutAlgorithm(type="grid-view-relative", grid_size=50)
        points = _points([(45, 25), (46, 25), (55, 25), (56, 25)])
        result = cluster_points(points, _axis(), _axis(), _options(layout=layout))
        for cluster in result.clusters:
            self.assertEqual(cluster.anchor, cluster.centroid)

    def test_allow_overlap_skips_resolution(self) -> None:
        points = _points([(45, 25), (46, 25), (55, 25), (56, 25)])
        options = ClusterOptions(enabled=True, allow_overlap=True)
        result = cluster_points(points, _axis(), _axis(), options)
        for cluster in result.clusters:
            self.assertEqual(cluster.anchor, cluster.centroid)

    def test_anchor_is_memoized_per_pass(self) -> None:
        points = _points([(45, 25), (46, 25), (55, 25), (56, 25)])
        frame = GridFrame(grid_size=50)
        cells = bucket_in_frame(points, _axis(), _axis(), frame)
        cache = AnchorCache()
        resolver = OverlapResolver(
            cells,
            _axis(),
            _axis(),
            frame,
            minimum_cluster_size=2,
            style=MarkerStyle(),
            point_radius=4,
            cache=cache,
        )
        first = resolver.resolve_anchor(CellKey(0, 0), (45.5, 25.0), 12)
        self.assertIn(CellKey(0, 1), cache.anchors)
        again = resolver.resolve_anchor(CellKey(0, 0), (0.0, 0.0), 12)
        self.assertEqual(first, again)
        self.assertEqual(cache.moved, 1)

    def test_new_resolver_clears_previous_pass(self) -> None:
        cache = AnchorCache()
        cache.anchors[CellKey(9, 9)] = (1.0, 1.0)
        cache.moved = 3
        OverlapResolver({}, _axis(), _axis(), GridFrame(grid_size=50), minimum_cluster_size=2, style=MarkerStyle(), point_radius=4, cache=cache)
        self.assertEqual(cache.anchors, {})
        self.assertEqual(cache.moved, 0)


if __name__ == "__main__":
    unittest.main()
