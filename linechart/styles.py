from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from linechart.errors import ConfigurationError


ELEMENT_KINDS = ("parent", "data", "labels", "markers")

DEFAULT_STYLES: Mapping[str, Mapping[str, Any]] = {
    "parent": {"width": "100%", "height": "auto"},
    "data": {"stroke_width": 2, "fill": "none", "stroke": "#756f6a", "opacity": 1},
    "markers": {"opacity": 1},
    "labels": {
        "padding": 5,
        "font_family": "Helvetica",
        "font_size": 10,
        "stroke_width": 0,
        "stroke": "transparent",
        "text_anchor": "start",
    },
}


@dataclass(frozen=True)
class ChartStyles:
    """Per-element styles after the caller's overrides are applied."""

    parent: Mapping[str, Any] = field(default_factory=dict)
    data: Mapping[str, Any] = field(default_factory=dict)
    labels: Mapping[str, Any] = field(default_factory=dict)
    markers: Mapping[str, Any] = field(default_factory=dict)


def resolve_styles(style: Mapping[str, Any] | None = None) -> ChartStyles:
    overrides = style or {}
    for kind in overrides:
        if kind not in ELEMENT_KINDS:
            raise ConfigurationError(f"Unknown style element kind: {kind}")
    return ChartStyles(**{kind: merge_layers(DEFAULT_STYLES[kind], overrides.get(kind)) for kind in ELEMENT_KINDS})


def merge_layers(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Flat merge; later layers win, `None` layers are skipped."""

    out: dict[str, Any] = {}
    for layer in layers:
        if layer:
            out.update(layer)
    return out


def merge_props(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Like `merge_layers`, except `style` mappings are merged key by key."""

    out: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if key == "style" and isinstance(value, Mapping) and isinstance(out.get("style"), Mapping):
                out["style"] = merge_layers(out["style"], value)
            else:
                out[key] = value
    return out


def evaluate_style(style: Mapping[str, Any], datum: Any = None) -> dict[str, Any]:
    """Resolve style values given as callables of the datum."""

    return {key: (value(datum) if callable(value) else value) for key, value in style.items()}


def label_style(styles: ChartStyles, datum: Any = None) -> dict[str, Any]:
    # Text is painted with `fill`, so it follows the line's stroke unless styled.
    fallback = {"fill": styles.data.get("stroke"), "padding": 0}
    style = merge_layers(fallback, styles.labels)
    if style.get("padding") is None:
        style["padding"] = 0
    return evaluate_style(style, datum)
