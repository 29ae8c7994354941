from __future__ import annotations

from decimal import Decimal
import unittest

import numpy as np

from markercluster.adapters import normalize_points, normalize_xy
from markercluster.errors import ClusterDataError


class NormalizeTests(unittest.TestCase):
    def test_lists_and_mask(self) -> None:
        series = normalize_xy([1, 2, None, 4], [1.0, float("nan"), 3.0, Decimal("4.5")])
        np.testing.assert_allclose(series.x[[0, 1, 3]], [1.0, 2.0, 4.0])
        self.assertEqual(series.mask.tolist(), [True, False, False, True])
        self.assertEqual(series.y[3], 4.5)

    def test_points_keep_original_indices_and_payloads(self) -> None:
        points = normalize_points(
            np.array([1.0, np.inf, 3.0]),
            np.array([1.0, 2.0, 3.0]),
            point_options=[{"name": "a"}, None, {"name": "c"}],
        )
        self.assertEqual([p.index for p in points], [0, 2])
        self.assertEqual(points[1].options, {"name": "c"})

    def test_rejects_bad_input(self) -> None:
        with self.assertRaises(ClusterDataError):
            normalize_xy([1, 2], [1])
        with self.assertRaises(ClusterDataError):
            normalize_xy([[1, 2]], [[1, 2]])
        with self.assertRaises(ClusterDataError):
            normalize_xy(["a"], [1])
        with self.assertRaises(ClusterDataError):
            normalize_xy("12", [1, 2])
        with self.assertRaises(ClusterDataError):
            normalize_points([1, 2], [1, 2], point_options=[None])

    def test_pandas_columns(self) -> None:
        try:
            import pandas as pd
        except Exception:
            self.skipTest("pandas is not installed")

        df = pd.DataFrame({"lon": [1.0, 2.0], "lat": [3.0, None]})
        series = normalize_xy("lon", "lat", data=df, source_name="cities")
        self.assertEqual(series.mask.tolist(), [True, False])
        self.assertEqual(series.source_name, "cities")
        with self.assertRaises(ClusterDataError):
            normalize_xy("lon", "missing", data=df)

    def test_torch_tensors(self) -> None:
        try:
            import torch
        except Exception:
            self.skipTest("torch is not installed")

        points = normalize_points(torch.tensor([1.0, 2.0]), torch.tensor([5.0, float("nan")]))
        self.assertEqual([(p.x, p.y) for p in points], [(1.0, 5.0)])


if __name__ == "__main__":
    unittest.main()
