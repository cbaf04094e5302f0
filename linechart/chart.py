from __future__ import annotations

import logging
import math
from typing import Any, Hashable, Mapping

from linechart.animation import AnimationBridge, AnimationDriver, SteppedDriver
from linechart.config import ChartProps, get_padding, update_props, validate_props
from linechart.dataset import Datum, get_data
from linechart.errors import ConfigurationError
from linechart.events import SERIES_LABEL_KEY, STATE_KINDS, ElementState, invoke, scope_events, scope_parent_events
from linechart.layout import (
    AxisScales,
    CalculatedProps,
    ChartGeometry,
    EventBindings,
    GeometryRenderer,
    layout_chart,
)
from linechart.scales import Scale, get_axis_scale
from linechart.segments import segment_data
from linechart.styles import resolve_styles


LOGGER = logging.getLogger(__name__)


class LineChart:
    """Line chart component: owns its props and the per-element state.

    `render()` runs the pipeline (dataset, scales, segments, layout) and returns
    plain geometry. Event handlers bound into that geometry report their
    results back here, and the next `render()` applies them.
    """

    def __init__(
        self,
        props: ChartProps | Mapping[str, Any] | None = None,
        *,
        driver: AnimationDriver | None = None,
    ) -> None:
        self.props = props if isinstance(props, ChartProps) else validate_props(props)
        self._element_state = ElementState()
        self._bridge = AnimationBridge(driver or SteppedDriver())
        self._last_geometry: ChartGeometry | None = None

    @property
    def element_state(self) -> ElementState:
        return self._element_state

    @property
    def last_geometry(self) -> ChartGeometry | None:
        return self._last_geometry

    @property
    def transition_phase(self) -> str:
        return self._bridge.model.phase

    def set_props(self, **changes: Any) -> ChartProps:
        self.props = update_props(self.props, changes)
        return self.props

    def remount(self) -> None:
        self._element_state = ElementState()
        self._bridge.reset()
        self._last_geometry = None

    def calculate(self, props: ChartProps | None = None) -> CalculatedProps:
        props = props or self.props
        dataset = get_data(props)
        padding = get_padding(props)
        scale = AxisScales(
            x=get_axis_scale(props, "x", dataset, padding),
            y=get_axis_scale(props, "y", dataset, padding),
        )
        key = _position_key(scale.x) if scale.x.kind == "categorical" else None
        return CalculatedProps(
            dataset=dataset,
            segments=segment_data(dataset, key),
            scale=scale,
            style=resolve_styles(props.style),
        )

    def render(self) -> Any:
        if self.props.animate:
            return self._bridge.tween(self.props, self.props.animate, self._render_props)
        return self._render_props(self.props)

    def draw(self, renderer: GeometryRenderer) -> Any:
        geometry = self.render()
        renderer.draw_chart(geometry)
        return geometry

    def dispatch(self, kind: str, key: Hashable, name: str, event: Any = None) -> Any:
        """Deliver a host event to the handler bound on one element."""

        if kind not in STATE_KINDS:
            raise ConfigurationError(f"Unknown element kind: {kind}")
        geometry = self._last_geometry or self._render_props(self.props)
        for element in _elements_of(geometry, kind, key):
            handler = element.events.get(name)
            if handler is not None:
                return handler(event)
        bound = getattr(self._bindings(self.props), kind)
        return invoke(bound, name, key, event)

    def dispatch_parent(self, name: str, event: Any = None) -> Any:
        geometry = self._last_geometry or self._render_props(self.props)
        handler = geometry.parent_events.get(name)
        return None if handler is None else handler(event)

    def _render_props(self, props: ChartProps) -> ChartGeometry:
        geometry = layout_chart(props, self.calculate(props), self._element_state, self._bindings(props))
        self._last_geometry = geometry
        return geometry

    def _bindings(self, props: ChartProps) -> EventBindings:
        events = props.events or {}
        return EventBindings(
            data=scope_events(events.get("data"), "data", self._store),
            markers=scope_events(events.get("markers"), "markers", self._store),
            labels=scope_events(events.get("labels"), "labels", self._store),
            parent=scope_parent_events(events.get("parent"), props),
        )

    def _store(self, kind: str, key: Hashable, update: Mapping[str, Any]) -> None:
        if not isinstance(update, Mapping):
            LOGGER.warning("ignoring %s handler result for %r: expected a mapping, got %s", kind, key, type(update).__name__)
            return
        LOGGER.debug("element state update %s[%r]: %r", kind, key, update)
        self._element_state = self._element_state.apply(kind, key, update)


def _position_key(scale: Scale) -> Any:
    def key(datum: Datum) -> float:
        position = scale(datum.x)
        return position if math.isfinite(position) else math.inf

    return key


def _elements_of(geometry: ChartGeometry, kind: str, key: Hashable) -> list[Any]:
    if kind == "data":
        return [s for s in geometry.segments if s.index == key]
    if kind == "markers":
        return [m for m in geometry.markers if m.index == key]
    if kind == "labels":
        found: list[Any] = [label for label in geometry.labels if label.index == key]
        if geometry.series_label is not None and key == SERIES_LABEL_KEY:
            found.append(geometry.series_label)
        return found
    return []
