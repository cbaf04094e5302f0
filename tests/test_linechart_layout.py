from __future__ import annotations

import unittest

from linechart import LineChart
from linechart.config import validate_props
from linechart.dataset import Datum
from linechart.layout import format_label, get_label_text


SCENARIO_A = [{"x": 1, "y": 1}, {"x": 2, "y": None}, {"x": 3, "y": 3}]


def render(**options):
    return LineChart(options).render()


class SegmentLayoutTests(unittest.TestCase):
    def test_points_are_in_pixel_space(self) -> None:
        geometry = render(data=[{"x": 1, "y": 2}, {"x": 3, "y": 4}])
        (segment,) = geometry.segments
        self.assertEqual(segment.points, ((50.0, 250.0), (400.0, 50.0)))
        self.assertEqual(segment.index, 0)

    def test_default_line_style(self) -> None:
        (segment,) = render(data=[{"x": 1, "y": 2}, {"x": 3, "y": 4}]).segments
        self.assertEqual(segment.style["stroke"], "#756f6a")
        self.assertEqual(segment.style["fill"], "none")
        self.assertEqual(segment.style["stroke_width"], 2)

    def test_interpolation_is_passed_through(self) -> None:
        (segment,) = render(data=[{"x": 1, "y": 2}, {"x": 3, "y": 4}], interpolation="stepAfter").segments
        self.assertEqual(segment.interpolation, "stepAfter")

    def test_gap_suppresses_marker(self) -> None:
        geometry = render(data=SCENARIO_A)
        self.assertEqual(len(geometry.segments), 2)
        self.assertEqual([m.index for m in geometry.markers], [0, 2])

    def test_view_box_and_parent_style(self) -> None:
        geometry = render(data=SCENARIO_A, width=200, height=100)
        self.assertEqual(geometry.view_box, (0.0, 0.0, 200.0, 100.0))
        self.assertEqual(geometry.parent_style, {"width": "100%", "height": "auto"})


class MarkerLayoutTests(unittest.TestCase):
    def test_component_props_merge_under_computed_values(self) -> None:
        geometry = render(
            data=[{"x": 1, "y": 2}, {"x": 3, "y": 4}],
            marker_props={"size": 4, "x": -1, "style": {"fill": "black"}},
        )
        marker = geometry.markers[0]
        self.assertEqual(marker.x, 50.0)
        self.assertEqual(marker.extra, {"size": 4})
        self.assertEqual(marker.style, {"opacity": 1, "fill": "black"})

    def test_callable_styles_receive_datum(self) -> None:
        geometry = render(
            data=[{"x": 1, "y": 1}, {"x": 2, "y": 5}],
            style={"markers": {"fill": lambda d: "red" if d.y > 2 else "blue"}},
        )
        self.assertEqual([m.style["fill"] for m in geometry.markers], ["blue", "red"])

    def test_marker_carries_datum(self) -> None:
        geometry = render(data=[{"x": 1, "y": 1, "kind": "a"}])
        self.assertEqual(geometry.markers[0].datum.get("kind"), "a")


class LabelLayoutTests(unittest.TestCase):
    def test_no_labels_by_default(self) -> None:
        self.assertEqual(render(data=SCENARIO_A).labels, ())

    def test_label_placement_defaults(self) -> None:
        geometry = render(data=[{"x": 1, "y": 1}, {"x": 3, "y": 3}], labels=["lo", "hi"])
        label = geometry.labels[1]
        self.assertEqual((label.text, label.x, label.y), ("hi", 400.0, 50.0))
        self.assertEqual(label.dy, 5)
        self.assertEqual(label.text_anchor, "start")
        self.assertEqual(label.vertical_anchor, "end")

    def test_label_fill_follows_line_stroke(self) -> None:
        data = [{"x": 1, "y": 1}]
        self.assertEqual(render(data=data, labels=["a"]).labels[0].style["fill"], "#756f6a")
        styled = render(data=data, labels=["a"], style={"data": {"stroke": "blue"}})
        self.assertEqual(styled.labels[0].style["fill"], "blue")
        explicit = render(data=data, labels=["a"], style={"data": {"stroke": "blue"}, "labels": {"fill": "green"}})
        self.assertEqual(explicit.labels[0].style["fill"], "green")

    def test_label_props_are_merged(self) -> None:
        geometry = render(data=[{"x": 1, "y": 1}], labels=["a"], label_props={"angle": 45, "dy": 10})
        label = geometry.labels[0]
        self.assertEqual(label.dy, 10)
        self.assertEqual(label.extra, {"angle": 45})

    def test_labels_true_formats_y(self) -> None:
        geometry = render(data=[{"x": 1, "y": 2.5}, {"x": 2, "y": 3.0}], labels=True)
        self.assertEqual([label.text for label in geometry.labels], ["2.5", "3"])

    def test_empty_text_produces_no_label(self) -> None:
        geometry = render(data=[{"x": 1, "y": 1}, {"x": 2, "y": 2}], labels=["", "b"])
        self.assertEqual([label.index for label in geometry.labels], [1])


class LabelTextTests(unittest.TestCase):
    def test_datum_label_wins(self) -> None:
        props = validate_props({"labels": ["from list"]})
        self.assertEqual(get_label_text(props, Datum(x=1, y=1, index=0, label="own")), "own")

    def test_empty_datum_label_falls_back_to_labels(self) -> None:
        props = validate_props({"labels": ["from list"]})
        self.assertEqual(get_label_text(props, Datum(x=1, y=1, index=0, label="")), "from list")

    def test_sequence_by_index(self) -> None:
        props = validate_props({"labels": ["a", "b"]})
        self.assertEqual(get_label_text(props, Datum(x=1, y=1, index=1)), "b")
        self.assertIsNone(get_label_text(props, Datum(x=1, y=1, index=5)))

    def test_callable(self) -> None:
        props = validate_props({"labels": lambda d: f"y={d.y}"})
        self.assertEqual(get_label_text(props, Datum(x=1, y=7, index=0)), "y=7")

    def test_callable_with_index(self) -> None:
        props = validate_props({"labels": lambda d, i: f"#{i}"})
        self.assertEqual(get_label_text(props, Datum(x=1, y=7, index=3)), "#3")

    def test_format_label(self) -> None:
        self.assertEqual(format_label(3.0), "3")
        self.assertEqual(format_label(-0.0), "0")
        self.assertEqual(format_label(2.5), "2.5")
        self.assertEqual(format_label(1 / 3), "0.333333")
        self.assertEqual(format_label(7), "7")
        self.assertEqual(format_label("n/a"), "n/a")


class SeriesLabelTests(unittest.TestCase):
    def test_placed_at_last_point_of_last_segment(self) -> None:
        geometry = render(data=SCENARIO_A, series_label="Series 1")
        label = geometry.series_label
        self.assertIsNotNone(label)
        self.assertEqual((label.x, label.y, label.text), (400.0, 50.0, "Series 1"))
        self.assertEqual(label.style["fill"], "#756f6a")

    def test_absent_without_segments(self) -> None:
        geometry = render(data=[{"x": 1, "y": None}], series_label="Series 1")
        self.assertIsNone(geometry.series_label)

    def test_elements_lists_every_primitive(self) -> None:
        geometry = render(data=SCENARIO_A, labels=True, series_label="s")
        self.assertEqual(len(geometry.elements()), 2 + 2 + 2 + 1)


class ParentEventTests(unittest.TestCase):
    def test_parent_events_only_when_standalone(self) -> None:
        events = {"parent": {"on_click": lambda event, props, key, kind: None}}
        self.assertIn("on_click", render(data=SCENARIO_A, events=events).parent_events)
        self.assertEqual(render(data=SCENARIO_A, events=events, standalone=False).parent_events, {})


if __name__ == "__main__":
    unittest.main()
