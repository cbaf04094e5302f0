from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
import math
from typing import Any

import numpy as np

from linechart.accessors import Accessor, make_accessor, resolve
from linechart.adapters import coerce_points
from linechart.domain import explicit_domain
from linechart.errors import ConfigurationError


@dataclass(frozen=True)
class Datum:
    """One normalized data point.

    `index` is the position of the source point in input order and is the key
    used for labels, events and per-element state.
    """

    x: Any
    y: Any
    index: int
    label: str | None = None
    source: Any = None
    fields: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_gap(self) -> bool:
        return self.y is None

    def get(self, key: str, default: Any = None) -> Any:
        if key in ("x", "y", "index", "label"):
            return getattr(self, key)
        return self.fields.get(key, default)


def build_dataset(
    data: Any,
    x: Any = "x",
    y: Any = "y",
    samples: int = 50,
    x_domain: tuple[float, float] | None = None,
) -> tuple[Datum, ...]:
    x_accessor = make_accessor(x)
    y_accessor = make_accessor(y)
    if data is None:
        if y_accessor.kind != "function":
            return ()
        return _sample_function(y_accessor, samples, x_domain)

    points = coerce_points(data)
    out: list[Datum] = []
    for index, point in enumerate(points):
        x_value = _clean(resolve(x_accessor, point, index, points))
        y_value = _clean(resolve(y_accessor, point, index, points))
        out.append(
            Datum(
                x=index if x_value is None else x_value,
                y=y_value,
                index=index,
                label=_label_of(point),
                source=point.source if isinstance(point, Datum) else point,
                fields=_fields_of(point),
            )
        )
    return tuple(out)


def get_data(props: Any) -> tuple[Datum, ...]:
    """Dataset for a `ChartProps`-like object."""

    explicit = explicit_domain(props.domain, "x")
    x_domain = None if explicit is None else explicit.as_tuple()
    return build_dataset(props.data, props.x, props.y, samples=props.samples, x_domain=x_domain)


def _sample_function(y_accessor: Accessor, samples: int, x_domain: tuple[float, float] | None) -> tuple[Datum, ...]:
    if isinstance(samples, bool) or not isinstance(samples, int) or samples <= 0:
        raise ConfigurationError("samples must be a positive integer")
    lo, hi = (0.0, 1.0) if x_domain is None else (float(x_domain[0]), float(x_domain[1]))
    xs = np.linspace(lo, hi, samples, dtype=np.float64).tolist()
    out = []
    for index, x_value in enumerate(xs):
        y_value = _clean(resolve(y_accessor, x_value, index, xs))
        out.append(Datum(x=x_value, y=y_value, index=index, fields={"x": x_value, "y": y_value}))
    return tuple(out)


def _clean(value: Any) -> Any:
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _label_of(point: Any) -> str | None:
    if isinstance(point, Mapping):
        label = point.get("label")
    elif isinstance(point, (str, bytes, int, float, Sequence)):
        label = None
    else:
        label = getattr(point, "label", None)
    return label


def _fields_of(point: Any) -> Mapping[str, Any]:
    if isinstance(point, Datum):
        return point.fields
    if isinstance(point, Mapping):
        return dict(point)
    return {}
