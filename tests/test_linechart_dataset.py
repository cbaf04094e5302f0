from __future__ import annotations

import math
import unittest

import numpy as np

from linechart.adapters.normalize import coerce_points
from linechart.config import validate_props
from linechart.dataset import Datum, build_dataset, get_data
from linechart.errors import ConfigurationError, PlotDataError

try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None


class DatasetBuilderTests(unittest.TestCase):
    def test_mapping_points_keep_order_label_and_fields(self) -> None:
        data = [{"x": 3, "y": 1, "label": "late"}, {"x": 1, "y": 2, "kind": "early"}]
        dataset = build_dataset(data)
        self.assertEqual([(d.x, d.y, d.index) for d in dataset], [(3, 1, 0), (1, 2, 1)])
        self.assertEqual(dataset[0].label, "late")
        self.assertIsNone(dataset[1].label)
        self.assertEqual(dataset[1].get("kind"), "early")
        self.assertIs(dataset[0].source, data[0])

    def test_array_points_with_index_accessors(self) -> None:
        dataset = build_dataset([[1, 2], [3, 4]], x=0, y=1)
        self.assertEqual([(d.x, d.y) for d in dataset], [(1, 2), (3, 4)])

    def test_missing_and_nan_y_become_gaps(self) -> None:
        dataset = build_dataset([{"x": 1}, {"x": 2, "y": math.nan}, {"x": 3, "y": None}, {"x": 4, "y": 0}])
        self.assertEqual([d.is_gap for d in dataset], [True, True, True, False])

    def test_unresolved_x_falls_back_to_index(self) -> None:
        dataset = build_dataset([{"y": 5}, {"y": 6}])
        self.assertEqual([d.x for d in dataset], [0, 1])

    def test_identity_accessors_on_scalar_data(self) -> None:
        dataset = build_dataset([4, 9], x=None, y=None)
        self.assertEqual([(d.x, d.y) for d in dataset], [(4, 4), (9, 9)])

    def test_numpy_scalars_are_unwrapped(self) -> None:
        dataset = build_dataset(np.asarray([[1.0, 2.0]]), x=0, y=1)
        self.assertIsInstance(dataset[0].y, float)

    def test_function_of_x_is_sampled_over_unit_interval(self) -> None:
        dataset = build_dataset(None, y=lambda x: x * 2, samples=5)
        self.assertEqual([d.x for d in dataset], [0.0, 0.25, 0.5, 0.75, 1.0])
        self.assertEqual([d.y for d in dataset], [0.0, 0.5, 1.0, 1.5, 2.0])

    def test_sampling_uses_explicit_x_domain(self) -> None:
        props = validate_props({"y": lambda x: x + 1, "samples": 3, "domain": {"x": [0, 10]}})
        dataset = get_data(props)
        self.assertEqual([d.x for d in dataset], [0.0, 5.0, 10.0])
        self.assertEqual([d.y for d in dataset], [1.0, 6.0, 11.0])

    def test_no_data_and_no_function_is_empty(self) -> None:
        self.assertEqual(build_dataset(None), ())

    def test_sampling_rejects_non_positive_samples(self) -> None:
        with self.assertRaises(ConfigurationError):
            build_dataset(None, y=lambda x: x, samples=0)

    def test_datum_points_keep_their_fields(self) -> None:
        first = build_dataset([{"x": 1, "y": 2, "title": "t"}])
        again = build_dataset(first)
        self.assertEqual(again[0].get("title"), "t")
        self.assertEqual((again[0].x, again[0].y), (1, 2))


class InputAdapterTests(unittest.TestCase):
    def test_two_dimensional_array_becomes_rows(self) -> None:
        self.assertEqual(coerce_points(np.asarray([[1, 2], [3, 4]])), [[1, 2], [3, 4]])

    def test_three_dimensional_array_is_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            coerce_points(np.zeros((2, 2, 2)))

    def test_column_mapping_becomes_records(self) -> None:
        points = coerce_points({"x": [1, 2], "y": np.asarray([3.0, 4.0])})
        self.assertEqual(points, [{"x": 1, "y": 3.0}, {"x": 2, "y": 4.0}])

    def test_column_length_mismatch_is_rejected(self) -> None:
        with self.assertRaisesRegex(PlotDataError, "length mismatch"):
            coerce_points({"x": [1, 2], "y": [3]})

    def test_string_data_is_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            coerce_points("1,2,3")

    def test_generators_are_materialized(self) -> None:
        self.assertEqual(coerce_points(i for i in range(3)), [0, 1, 2])

    @unittest.skipIf(pd is None, "pandas not installed")
    def test_dataframe_rows_become_records(self) -> None:
        frame = pd.DataFrame({"x": [1, 2], "y": [5.0, 6.0]})
        dataset = build_dataset(frame)
        self.assertEqual([(d.x, d.y) for d in dataset], [(1, 5.0), (2, 6.0)])
        self.assertIsInstance(dataset[0], Datum)

    @unittest.skipIf(pd is None, "pandas not installed")
    def test_series_index_becomes_x(self) -> None:
        series = pd.Series([10.0, 20.0], index=[3, 4])
        self.assertEqual(coerce_points(series), [{"x": 3, "y": 10.0}, {"x": 4, "y": 20.0}])

    @unittest.skipIf(torch is None, "torch not installed")
    def test_tensor_rows_become_points(self) -> None:
        tensor = torch.tensor([[0.0, 1.0], [1.0, 4.0]])
        dataset = build_dataset(tensor, x=0, y=1)
        self.assertEqual([(d.x, d.y) for d in dataset], [(0.0, 1.0), (1.0, 4.0)])


if __name__ == "__main__":
    unittest.main()
