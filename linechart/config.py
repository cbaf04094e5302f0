from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any

from linechart.errors import ConfigurationError
from linechart.scales import SCALE_KINDS
from linechart.styles import ELEMENT_KINDS


DEFAULT_WIDTH = 450.0
DEFAULT_HEIGHT = 300.0
DEFAULT_PADDING = 50.0
DEFAULT_SAMPLES = 50

EVENT_KINDS = ("data", "labels", "markers", "parent")

INTERPOLATIONS = frozenset(
    {
        "basis",
        "basisClosed",
        "basisOpen",
        "bundle",
        "cardinal",
        "cardinalClosed",
        "cardinalOpen",
        "catmullRom",
        "catmullRomClosed",
        "catmullRomOpen",
        "linear",
        "linearClosed",
        "monotoneX",
        "monotoneY",
        "natural",
        "radial",
        "step",
        "stepAfter",
        "stepBefore",
    }
)


@dataclass(frozen=True)
class Padding:
    top: float = DEFAULT_PADDING
    bottom: float = DEFAULT_PADDING
    left: float = DEFAULT_PADDING
    right: float = DEFAULT_PADDING


@dataclass(frozen=True)
class ChartProps:
    """Recognized options of a line chart.

    `padding` keeps the caller's form (number or per-side mapping) so it can be
    tweened; use `get_padding` for the normalized sides.
    """

    data: Any = None
    x: Any = "x"
    y: Any = "y"
    domain: Any = None
    scale: Any = "linear"
    categories: Any = None
    interpolation: str = "linear"
    samples: int = DEFAULT_SAMPLES
    padding: Any = DEFAULT_PADDING
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    events: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    labels: Any = None
    series_label: str | None = None
    style: Mapping[str, Any] | None = None
    standalone: bool = True
    animate: Mapping[str, Any] | None = None
    marker_props: Mapping[str, Any] = field(default_factory=dict)
    label_props: Mapping[str, Any] = field(default_factory=dict)


DEFAULT_PROPS = ChartProps()
PROP_NAMES = frozenset(f.name for f in fields(ChartProps))


def validate_props(overrides: Mapping[str, Any] | None = None) -> ChartProps:
    """Merge caller options over the defaults and validate the result."""

    if not overrides:
        return DEFAULT_PROPS
    return update_props(DEFAULT_PROPS, overrides)


def update_props(props: ChartProps, changes: Mapping[str, Any]) -> ChartProps:
    for key in changes:
        if key not in PROP_NAMES:
            raise ConfigurationError(f"Unknown chart prop: {key}")
    updated = replace(props, **changes)
    _check_props(updated)
    return updated


def get_padding(props: ChartProps) -> Padding:
    padding = props.padding
    if padding is None:
        return Padding()
    if isinstance(padding, Padding):
        return padding
    if isinstance(padding, Mapping):
        return Padding(
            top=float(padding.get("top", 0.0)),
            bottom=float(padding.get("bottom", 0.0)),
            left=float(padding.get("left", 0.0)),
            right=float(padding.get("right", 0.0)),
        )
    value = float(padding)
    return Padding(top=value, bottom=value, left=value, right=value)


def _check_props(props: ChartProps) -> None:
    for name in ("width", "height"):
        value = getattr(props, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(f"{name} must be a number")
        if value < 0:
            raise ConfigurationError(f"{name} must be >= 0")

    if isinstance(props.samples, bool) or not isinstance(props.samples, int) or props.samples <= 0:
        raise ConfigurationError("samples must be a positive integer")

    if props.interpolation not in INTERPOLATIONS:
        raise ConfigurationError(f"unsupported interpolation: {props.interpolation}")

    _check_padding(props.padding)
    _check_scale(props.scale)

    for kind in props.events or {}:
        if kind not in EVENT_KINDS:
            raise ConfigurationError(f"Unknown event element kind: {kind}")

    for kind in props.style or {}:
        if kind not in ELEMENT_KINDS:
            raise ConfigurationError(f"Unknown style element kind: {kind}")


def _check_padding(padding: Any) -> None:
    if padding is None or isinstance(padding, Padding):
        return
    if isinstance(padding, Mapping):
        for side, value in padding.items():
            if side not in ("top", "bottom", "left", "right"):
                raise ConfigurationError(f"Unknown padding side: {side}")
            if not isinstance(value, (int, float)) or value < 0:
                raise ConfigurationError(f"padding.{side} must be a number >= 0")
        return
    if isinstance(padding, bool) or not isinstance(padding, (int, float)) or padding < 0:
        raise ConfigurationError("padding must be a number >= 0 or a per-side mapping")


def _check_scale(scale: Any) -> None:
    if isinstance(scale, Mapping):
        for axis, kind in scale.items():
            if axis not in ("x", "y"):
                raise ConfigurationError(f"Unknown scale axis: {axis}")
            if kind not in SCALE_KINDS:
                raise ConfigurationError(f"unsupported scale kind: {kind}")
        return
    if scale not in SCALE_KINDS:
        raise ConfigurationError(f"unsupported scale kind: {scale}")
