from __future__ import annotations

import unittest

from markercluster.axis import LinearAxis
from markercluster.engine import cluster_points
from markercluster.errors import ClusterConfigError
from markercluster.materialize import CLUSTER_CLASS_NAME, materialize
from markercluster.options import ClusterOptions, DataLabelOptions, TooltipOptions
from markercluster.result import dispose
from markercluster.series import Point


def _axis() -> LinearAxis:
    return LinearAxis(origin=0.0, length=500.0, visible_min=0.0, visible_max=500.0, data_min=0.0, data_max=500.0)


def _points() -> list[Point]:
    coords = [(2, 2), (3, 3), (4, 4), (60, 60), (61, 61)]
    points = [Point(index=i, x=x, y=y) for i, (x, y) in enumerate(coords)]
    points[3] = Point(index=3, x=60, y=60, options={"name": "lonely", "marker": {"radius": 6, "fillColor": "#ff0000"}})
    return points


class MaterializeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.options = ClusterOptions(enabled=True, minimum_cluster_size=3)
        self.result = cluster_points(_points(), _axis(), _axis(), self.options)
        self.rendered = materialize(self.result, _axis(), _axis(), self.options)

    def test_cluster_gets_label_tooltip_and_class(self) -> None:
        cluster = self.rendered[0]
        self.assertTrue(cluster.is_cluster)
        self.assertEqual(cluster.data_label, "3")
        self.assertEqual(cluster.tooltip, "Clustered points: 3")
        self.assertEqual(cluster.class_names, (CLUSTER_CLASS_NAME,))
        self.assertEqual(cluster.member_indices, (0, 1, 2))
        self.assertAlmostEqual(cluster.plot_x, 3.0)

    def test_points_keep_payload_and_marker_override(self) -> None:
        lonely, plain = self.rendered[1], self.rendered[2]
        self.assertFalse(lonely.is_cluster)
        self.assertIsNone(lonely.data_label)
        self.assertEqual(lonely.options["name"], "lonely")
        self.assertEqual(lonely.marker.radius, 6.0)
        self.assertEqual(lonely.marker.fill_color, (255, 0, 0, 255))
        self.assertEqual(lonely.marker.symbol, "square")
        self.assertEqual(plain.marker, self.options.series_marker)
        self.assertEqual(plain.tooltip, "x: 61.0, y: 61.0")

    def test_cluster_update_is_rejected_with_warning(self) -> None:
        cluster = self.rendered[0]
        with self.assertLogs("markercluster.materialize", level="WARNING") as logs:
            self.assertFalse(cluster.update(x=10))
        self.assertEqual(cluster.x, 3.0)
        self.assertIn("cannot update aggregated point", logs.output[0])

    def test_point_update_applies_known_fields(self) -> None:
        point = self.rendered[2]
        self.assertTrue(point.update(x=70.0, options={"name": "moved"}))
        self.assertEqual(point.x, 70.0)
        self.assertEqual(point.options, {"name": "moved"})
        with self.assertRaises(TypeError):
            point.update(members=())

    def test_rendered_points_are_destroyed_on_dispose(self) -> None:
        self.assertEqual(len(self.result.resources), 3)
        self.assertEqual(dispose(self.result), 3)
        self.assertTrue(all(p.destroyed for p in self.rendered))

    def test_disabled_labels_leave_no_text(self) -> None:
        options = ClusterOptions(enabled=True, data_labels=DataLabelOptions(enabled=False))
        result = cluster_points(_points(), _axis(), _axis(), options)
        rendered = materialize(result, _axis(), _axis(), options)
        self.assertTrue(all(p.data_label is None for p in rendered))

    def test_bad_template_raises_config_error(self) -> None:
        options = ClusterOptions(enabled=True, tooltip=TooltipOptions(cluster_format="{point.no_such_field}"))
        result = cluster_points(_points(), _axis(), _axis(), options)
        with self.assertRaises(ClusterConfigError):
            materialize(result, _axis(), _axis(), options)


if __name__ == "__main__":
    unittest.main()
