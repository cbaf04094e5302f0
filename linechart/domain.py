from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import datetime as dt
from typing import Any, Literal

import numpy as np

from linechart.errors import ConfigurationError


Axis = Literal["x", "y"]

# Half-width added on each side of a zero-width domain, as a fraction of |value|.
ZERO_WIDTH_EXPANSION_RATIO = 0.01
# Half-width used when a zero-width domain sits at exactly 0.
ZERO_VALUE_HALF_WIDTH = 1.0
CATEGORY_PADDING = 0.5


@dataclass(frozen=True)
class Domain:
    """Value interval of one axis; `padding` is in category steps."""

    min: float
    max: float
    padding: float = 0.0

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError("domain min must be <= max")

    @property
    def span(self) -> float:
        return self.max - self.min

    def as_tuple(self) -> tuple[float, float]:
        return (self.min, self.max)


def to_number(value: Any) -> float:
    """Continuous position of a data value (datetimes become POSIX seconds)."""

    if isinstance(value, dt.datetime):
        return value.timestamp()
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day).timestamp()
    if isinstance(value, np.datetime64):
        return float(value.astype("datetime64[us]").astype(np.int64)) / 1e6
    return float(value)


def get_domain(props: Any, axis: Axis, dataset: Sequence[Any]) -> Domain:
    explicit = explicit_domain(props.domain, axis)
    if explicit is not None:
        return explicit

    if is_categorical(props, axis, dataset):
        categories = get_categories(props, axis, dataset)
        return Domain(min=0.0, max=float(max(len(categories) - 1, 0)), padding=CATEGORY_PADDING)

    values = [getattr(d, axis) for d in dataset]
    numeric = [to_number(v) for v in values if v is not None]
    if not numeric:
        return Domain(min=0.0, max=1.0)
    arr = np.asarray(numeric, dtype=np.float64)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return Domain(min=0.0, max=1.0)
    return expand_zero_width(float(np.min(arr)), float(np.max(arr)))


def expand_zero_width(vmin: float, vmax: float) -> Domain:
    if vmin != vmax:
        return Domain(min=vmin, max=vmax)
    delta = abs(vmin) * ZERO_WIDTH_EXPANSION_RATIO if vmin != 0 else ZERO_VALUE_HALF_WIDTH
    return Domain(min=vmin - delta, max=vmax + delta)


def is_categorical(props: Any, axis: Axis, dataset: Sequence[Any]) -> bool:
    scale = props.scale
    kind = scale.get(axis) if isinstance(scale, Mapping) else scale
    if kind == "categorical":
        return True
    if kind not in (None, "linear"):
        return False
    if _explicit_categories(props.categories, axis) is not None:
        return True
    return any(isinstance(getattr(d, axis), str) for d in dataset)


def get_categories(props: Any, axis: Axis, dataset: Sequence[Any]) -> tuple[Any, ...]:
    explicit = _explicit_categories(props.categories, axis)
    values = explicit if explicit is not None else [getattr(d, axis) for d in dataset if getattr(d, axis) is not None]
    seen: dict[Any, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return tuple(seen)


def _explicit_categories(categories: Any, axis: Axis) -> Sequence[Any] | None:
    if categories is None:
        return None
    if isinstance(categories, Mapping):
        return categories.get(axis)
    if isinstance(categories, Sequence) and not isinstance(categories, str):
        return categories if axis == "x" else None
    raise ConfigurationError("categories must be a sequence or a per-axis mapping")


def explicit_domain(domain: Any, axis: Axis) -> Domain | None:
    if domain is None:
        return None
    if isinstance(domain, Domain):
        return domain
    if isinstance(domain, Mapping):
        entry = domain.get(axis)
        return None if entry is None else _pair_to_domain(entry)
    return _pair_to_domain(domain)


def _pair_to_domain(pair: Any) -> Domain:
    if isinstance(pair, Domain):
        return pair
    if isinstance(pair, str) or not isinstance(pair, Sequence) or len(pair) != 2:
        raise ConfigurationError(f"domain must be a [min, max] pair, got {pair!r}")
    lo, hi = sorted((to_number(pair[0]), to_number(pair[1])))
    return expand_zero_width(lo, hi)
