from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
import math
from typing import Any, Protocol

from linechart.accessors import make_accessor, resolve
from linechart.dataset import Datum
from linechart.events import SERIES_LABEL_KEY, BoundEventMap, ElementHandler, ElementState
from linechart.scales import Scale
from linechart.segments import Segment
from linechart.styles import ChartStyles, evaluate_style, label_style, merge_props


DEFAULT_VERTICAL_ANCHOR = "end"


@dataclass(frozen=True)
class AxisScales:
    x: Scale
    y: Scale


@dataclass(frozen=True)
class CalculatedProps:
    """Everything one render pass derives from props, before layout."""

    dataset: tuple[Datum, ...]
    segments: tuple[Segment, ...]
    scale: AxisScales
    style: ChartStyles


@dataclass(frozen=True)
class EventBindings:
    data: BoundEventMap
    markers: BoundEventMap
    labels: BoundEventMap
    parent: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LineSegmentGeometry:
    index: int
    data: tuple[Datum, ...]
    points: tuple[tuple[float, float], ...]
    interpolation: str
    style: Mapping[str, Any]
    events: Mapping[str, ElementHandler] = field(default_factory=dict)
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MarkerGeometry:
    index: int
    datum: Datum
    x: float
    y: float
    style: Mapping[str, Any]
    events: Mapping[str, ElementHandler] = field(default_factory=dict)
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LabelGeometry:
    index: int
    datum: Datum
    x: float
    y: float
    text: Any
    dy: float
    text_anchor: str | None
    vertical_anchor: str
    style: Mapping[str, Any]
    events: Mapping[str, ElementHandler] = field(default_factory=dict)
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SeriesLabelGeometry:
    x: float
    y: float
    text: Any
    style: Mapping[str, Any]
    events: Mapping[str, ElementHandler] = field(default_factory=dict)
    extra: Mapping[str, Any] = field(default_factory=dict)


ElementGeometry = LineSegmentGeometry | MarkerGeometry | LabelGeometry | SeriesLabelGeometry


@dataclass(frozen=True)
class ChartGeometry:
    width: float
    height: float
    view_box: tuple[float, float, float, float]
    standalone: bool
    parent_style: Mapping[str, Any]
    segments: tuple[LineSegmentGeometry, ...]
    markers: tuple[MarkerGeometry, ...]
    labels: tuple[LabelGeometry, ...]
    series_label: SeriesLabelGeometry | None = None
    parent_events: Mapping[str, Any] = field(default_factory=dict)

    def elements(self) -> tuple[ElementGeometry, ...]:
        tail = (self.series_label,) if self.series_label is not None else ()
        return (*self.segments, *self.markers, *self.labels, *tail)


class GeometryRenderer(Protocol):
    """Drawing backend that paints laid-out chart geometry."""

    def draw_chart(self, geometry: ChartGeometry) -> None:
        ...


def layout_chart(
    props: Any,
    calculated: CalculatedProps,
    state: ElementState,
    bindings: EventBindings,
) -> ChartGeometry:
    markers, labels = layout_markers_and_labels(props, calculated, state, bindings)
    return ChartGeometry(
        width=props.width,
        height=props.height,
        view_box=(0.0, 0.0, float(props.width), float(props.height)),
        standalone=props.standalone,
        parent_style=calculated.style.parent,
        segments=layout_segments(props, calculated, state, bindings.data),
        markers=markers,
        labels=labels,
        series_label=layout_series_label(props, calculated, state, bindings.labels),
        parent_events=bindings.parent if props.standalone else {},
    )


def layout_segments(
    props: Any,
    calculated: CalculatedProps,
    state: ElementState,
    events: BoundEventMap,
) -> tuple[LineSegmentGeometry, ...]:
    scale = calculated.scale
    out = []
    for index, segment in enumerate(calculated.segments):
        points = tuple(
            (px, py)
            for px, py in ((scale.x(d.x), scale.y(d.y)) for d in segment)
            if math.isfinite(px) and math.isfinite(py)
        )
        computed = {
            "index": index,
            "data": segment,
            "points": points,
            "interpolation": props.interpolation,
            "style": dict(calculated.style.data),
        }
        merged = merge_props(computed, state.get("data", index))
        out.append(_build(LineSegmentGeometry, merged, events.for_element(index, merged)))
    return tuple(out)


def layout_markers_and_labels(
    props: Any,
    calculated: CalculatedProps,
    state: ElementState,
    bindings: EventBindings,
) -> tuple[tuple[MarkerGeometry, ...], tuple[LabelGeometry, ...]]:
    """Markers (and labels where text resolves) for every non-gap point.

    Props merge, later wins: built-in style < caller component defaults <
    computed position < stored element state.
    """

    scale = calculated.scale
    styles = calculated.style
    markers: list[MarkerGeometry] = []
    labels: list[LabelGeometry] = []
    for datum in calculated.dataset:
        if datum.is_gap:
            continue
        x = scale.x(datum.x)
        y = scale.y(datum.y)
        if not (math.isfinite(x) and math.isfinite(y)):
            continue
        index = datum.index
        shared = {"index": index, "datum": datum, "x": x, "y": y}

        marker_props = merge_props(
            {"style": evaluate_style(styles.markers, datum)},
            props.marker_props,
            shared,
            state.get("markers", index),
        )
        markers.append(_build(MarkerGeometry, marker_props, bindings.markers.for_element(index, marker_props)))

        text = get_label_text(props, datum)
        if (text is None or text == "") and props.labels is True:
            text = format_label(datum.y)
        if text is None or text == "":
            continue
        style = label_style(styles, datum)
        label_props = merge_props(
            {
                "dy": style.get("padding", 0),
                "text_anchor": style.get("text_anchor"),
                "vertical_anchor": style.get("vertical_anchor") or DEFAULT_VERTICAL_ANCHOR,
                "style": style,
            },
            props.label_props,
            {**shared, "text": text},
            state.get("labels", index),
        )
        labels.append(_build(LabelGeometry, label_props, bindings.labels.for_element(index, label_props)))
    return tuple(markers), tuple(labels)


def layout_series_label(
    props: Any,
    calculated: CalculatedProps,
    state: ElementState,
    events: BoundEventMap,
) -> SeriesLabelGeometry | None:
    if not props.series_label or not calculated.segments:
        return None
    last = calculated.segments[-1][-1]
    x = calculated.scale.x(last.x)
    y = calculated.scale.y(last.y)
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    merged = merge_props(
        {"x": x, "y": y, "text": props.series_label, "style": label_style(calculated.style)},
        state.get("labels", SERIES_LABEL_KEY),
    )
    return _build(SeriesLabelGeometry, merged, events.for_element(SERIES_LABEL_KEY, merged))


def get_label_text(props: Any, datum: Datum) -> Any:
    if datum.label:
        return datum.label
    labels = props.labels
    if labels is None or isinstance(labels, bool):
        return None
    if callable(labels):
        return resolve(make_accessor(labels), datum, datum.index)
    if isinstance(labels, Sequence) and not isinstance(labels, str):
        return labels[datum.index] if datum.index < len(labels) else None
    return None


def format_label(value: Any) -> str:
    """Label text for a raw y value; integral floats drop the trailing `.0`."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return f"{value:.6g}"


def _build(cls: type, merged: Mapping[str, Any], events: Mapping[str, ElementHandler]) -> Any:
    names = set(cls.__dataclass_fields__) - {"events", "extra"}
    known = {k: v for k, v in merged.items() if k in names}
    extra = {k: v for k, v in merged.items() if k not in names and k != "events"}
    return cls(**known, events=events, extra=extra)
