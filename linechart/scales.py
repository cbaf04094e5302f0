from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
import logging
import math
from typing import TYPE_CHECKING, Any, Callable, Literal, Mapping, Sequence

import numpy as np

from linechart.domain import Domain, expand_zero_width, get_categories, get_domain, is_categorical, to_number
from linechart.errors import ConfigurationError, DomainError

if TYPE_CHECKING:
    from linechart.config import Padding


LOGGER = logging.getLogger(__name__)

ScaleKind = Literal["linear", "log", "sqrt", "time", "categorical"]
SCALE_KINDS: tuple[str, ...] = ("linear", "log", "sqrt", "time", "categorical")

# Smallest value a log scale will place; non-positive domains and values clamp here.
LOG_EPSILON = 1e-6


def _identity(values: np.ndarray) -> np.ndarray:
    return values


def _signed_sqrt(values: np.ndarray) -> np.ndarray:
    return np.sign(values) * np.sqrt(np.abs(values))


def _clamped_log10(values: np.ndarray) -> np.ndarray:
    return np.log10(np.maximum(values, LOG_EPSILON))


_TRANSFORMS: dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "linear": _identity,
    "time": _identity,
    "sqrt": _signed_sqrt,
    "log": _clamped_log10,
}


@dataclass(frozen=True)
class Scale:
    """Domain to pixel mapping for one axis.

    Continuous kinds map through a monotonic transform (identity, signed square
    root or log10) followed by an affine map onto `range`. The categorical kind
    places each category at an evenly spaced point, inset by `domain.padding`
    steps at both ends.
    """

    kind: ScaleKind
    domain: Domain
    range: tuple[float, float]
    categories: tuple[Any, ...] = ()

    def __call__(self, value: Any) -> float:
        if value is None:
            return math.nan
        if self.kind == "categorical":
            return self._map_rank(self._rank(value))
        return float(self.map(np.asarray([to_number(value)], dtype=np.float64))[0])

    def map(self, values: Sequence[Any] | np.ndarray) -> np.ndarray:
        if self.kind == "categorical":
            return np.asarray([self(v) for v in values], dtype=np.float64)
        if isinstance(values, np.ndarray) and values.dtype.kind == "f":
            arr = values
        else:
            arr = np.asarray([math.nan if v is None else to_number(v) for v in values], dtype=np.float64)
        transform = _TRANSFORMS[self.kind]
        t0, t1 = self._transformed_domain
        r0, r1 = self.range
        if t1 == t0:
            return np.full(arr.shape, (r0 + r1) / 2.0, dtype=np.float64)
        return r0 + (transform(arr) - t0) / (t1 - t0) * (r1 - r0)

    @cached_property
    def _transformed_domain(self) -> tuple[float, float]:
        transform = _TRANSFORMS[self.kind]
        out = transform(np.asarray([self.domain.min, self.domain.max], dtype=np.float64))
        return (float(out[0]), float(out[1]))

    @cached_property
    def _ranks(self) -> dict[Any, int]:
        ranks: dict[Any, int] = {}
        for i, category in enumerate(self.categories):
            ranks.setdefault(category, i)
        return ranks

    def _rank(self, value: Any) -> float:
        try:
            if value in self._ranks:
                return float(self._ranks[value])
        except TypeError:
            return math.nan
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return math.nan

    def _map_rank(self, rank: float) -> float:
        r0, r1 = self.range
        steps = self.domain.span + 2.0 * self.domain.padding
        if steps <= 0:
            return (r0 + r1) / 2.0
        step = (r1 - r0) / steps
        return r0 + (rank - self.domain.min + self.domain.padding) * step


def build_scale(
    kind: str,
    domain: Domain,
    range: tuple[float, float],
    categories: Sequence[Any] = (),
) -> Scale:
    if kind not in SCALE_KINDS:
        raise ConfigurationError(f"unsupported scale kind: {kind}")
    if kind == "log":
        try:
            _check_log_domain(domain)
        except DomainError as exc:
            LOGGER.warning("%s; clamping to %s", exc, LOG_EPSILON)
            domain = expand_zero_width(max(domain.min, LOG_EPSILON), max(domain.max, LOG_EPSILON))
    return Scale(kind=kind, domain=domain, range=(float(range[0]), float(range[1])), categories=tuple(categories))  # type: ignore[arg-type]


def resolve_scale_kind(props: Any, axis: str, dataset: Sequence[Any]) -> str:
    if is_categorical(props, axis, dataset):  # type: ignore[arg-type]
        return "categorical"
    scale = props.scale
    kind = scale.get(axis, "linear") if isinstance(scale, Mapping) else scale
    if kind not in SCALE_KINDS:
        raise ConfigurationError(f"unsupported scale kind: {kind}")
    return kind


def get_range(axis: str, width: float, height: float, padding: "Padding") -> tuple[float, float]:
    """Pixel range of an axis; y is inverted so larger values sit higher."""

    if axis == "x":
        return (padding.left, width - padding.right)
    return (height - padding.bottom, padding.top)


def get_axis_scale(props: Any, axis: str, dataset: Sequence[Any], padding: "Padding") -> Scale:
    kind = resolve_scale_kind(props, axis, dataset)
    domain = get_domain(props, axis, dataset)  # type: ignore[arg-type]
    categories = get_categories(props, axis, dataset) if kind == "categorical" else ()  # type: ignore[arg-type]
    return build_scale(kind, domain, get_range(axis, props.width, props.height, padding), categories)


def _check_log_domain(domain: Domain) -> None:
    if domain.min <= 0 or domain.max <= 0:
        raise DomainError(f"log scale domain must be > 0, got [{domain.min}, {domain.max}]")

