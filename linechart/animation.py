from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
import datetime as dt
import logging
from typing import Any, Callable, Literal, Protocol

from linechart.config import ChartProps
from linechart.dataset import Datum, get_data
from linechart.errors import ConfigurationError


LOGGER = logging.getLogger(__name__)

# Props the transition may rewrite; everything else comes from the target props.
ANIMATION_WHITELIST: tuple[str, ...] = (
    "data",
    "domain",
    "height",
    "padding",
    "samples",
    "style",
    "width",
    "x",
    "y",
)

TransitionPhase = Literal["idle", "entering", "steady", "exiting", "removed"]

_NEXT_PHASES: dict[str, frozenset[str]] = {
    "idle": frozenset({"entering", "steady"}),
    "entering": frozenset({"steady"}),
    "steady": frozenset({"entering", "exiting", "steady"}),
    "exiting": frozenset({"removed"}),
    "removed": frozenset({"idle"}),
}


def _hide_y(datum: Datum) -> dict[str, Any]:
    _ = datum
    return {"y": None}


def _restore_y(datum: Datum) -> dict[str, Any]:
    return {"y": datum.y}


DEFAULT_TRANSITIONS: Mapping[str, Mapping[str, Any]] = {
    "on_exit": {"duration": 500, "before": _hide_y},
    "on_enter": {"duration": 500, "before": _hide_y, "after": _restore_y},
}


@dataclass
class TransitionModel:
    """Lifecycle of the animated series: idle -> entering -> steady -> exiting -> removed."""

    phase: TransitionPhase = "idle"

    def advance(self, phase: TransitionPhase) -> TransitionPhase:
        if phase not in _NEXT_PHASES[self.phase]:
            raise ConfigurationError(f"illegal transition: {self.phase} -> {phase}")
        self.phase = phase
        return self.phase


@dataclass(frozen=True)
class TransitionPlan:
    entering: frozenset[int] = frozenset()
    exiting: frozenset[int] = frozenset()


@dataclass(frozen=True)
class TweenRequest:
    """One interpolation job handed to an animation driver."""

    whitelist: tuple[str, ...]
    start: ChartProps
    end: ChartProps
    config: Mapping[str, Any]
    phase: TransitionPhase

    @property
    def duration(self) -> float:
        key = {"exiting": "on_exit", "entering": "on_enter"}.get(self.phase)
        phase_config = (self.config.get(key) if key else None) or {}
        return float(phase_config.get("duration", self.config.get("duration", 500)))

    def frame(self, t: float) -> ChartProps:
        return interpolate_props(self.start, self.end, t, self.whitelist)


class AnimationDriver(Protocol):
    """Scheduler that feeds interpolated props back through `render` over time."""

    def run(self, request: TweenRequest, render: Callable[[ChartProps], Any]) -> Any:
        ...


@dataclass
class SteppedDriver:
    """Synchronous driver rendering a fixed number of evenly spaced frames."""

    steps: int = 10
    frames: list[ChartProps] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.steps <= 0:
            raise ValueError("steps must be > 0")

    def run(self, request: TweenRequest, render: Callable[[ChartProps], Any]) -> Any:
        self.frames.clear()
        result = None
        for i in range(self.steps + 1):
            props = request.frame(i / self.steps)
            self.frames.append(props)
            result = render(props)
        return result


def resolve_transitions(animate: Mapping[str, Any] | None) -> dict[str, Any]:
    config: dict[str, Any] = {key: dict(value) for key, value in DEFAULT_TRANSITIONS.items()}
    for key, value in (animate or {}).items():
        if key in config and isinstance(value, Mapping):
            config[key].update(value)
        else:
            config[key] = value
    return config


def plan_transition(old_data: Sequence[Datum], new_data: Sequence[Datum]) -> TransitionPlan:
    old_keys = {d.index for d in old_data}
    new_keys = {d.index for d in new_data}
    return TransitionPlan(entering=frozenset(new_keys - old_keys), exiting=frozenset(old_keys - new_keys))


def apply_hook(
    dataset: Sequence[Datum],
    indices: frozenset[int],
    hook: Callable[[Datum], Mapping[str, Any]] | None,
) -> tuple[Datum, ...]:
    if hook is None or not indices:
        return tuple(dataset)
    return tuple(replace(d, **hook(d)) if d.index in indices else d for d in dataset)


def interpolate_value(start: Any, end: Any, t: float) -> Any:
    """Value between `start` (t=0) and `end` (t=1).

    Numbers, datetimes, datums and same-shaped mappings/sequences blend; any
    other pair switches to `end` at t >= 1.
    """

    if t >= 1.0:
        return end
    if t <= 0.0:
        return start
    if _is_number(start) and _is_number(end):
        return start + (end - start) * t
    if isinstance(start, dt.datetime) and isinstance(end, dt.datetime):
        return start + (end - start) * t
    if isinstance(start, Datum) and isinstance(end, Datum):
        return replace(end, x=interpolate_value(start.x, end.x, t), y=interpolate_value(start.y, end.y, t))
    if isinstance(start, Mapping) and isinstance(end, Mapping):
        return {key: interpolate_value(start.get(key, value), value, t) for key, value in end.items()}
    if _is_sequence(start) and _is_sequence(end) and len(start) == len(end):
        blended = [interpolate_value(a, b, t) for a, b in zip(start, end, strict=True)]
        return tuple(blended) if isinstance(end, tuple) else blended
    return start


def interpolate_props(start: ChartProps, end: ChartProps, t: float, whitelist: Sequence[str] = ANIMATION_WHITELIST) -> ChartProps:
    changes = {name: interpolate_value(getattr(start, name), getattr(end, name), t) for name in whitelist}
    if "samples" in changes:
        changes["samples"] = max(1, int(round(changes["samples"])))
    return replace(end, **changes)


class AnimationBridge:
    """Turns a prop change into tween requests for an animation driver.

    Data is normalized before tweening so enter/exit hooks can rewrite single
    points: a departing point starts its exit as a gap, an arriving point
    enters as a gap and settles on its real value.
    """

    def __init__(self, driver: AnimationDriver, whitelist: Sequence[str] = ANIMATION_WHITELIST) -> None:
        for name in whitelist:
            if name not in ANIMATION_WHITELIST:
                raise ConfigurationError(f"prop is not tweenable: {name}")
        self.driver = driver
        self.whitelist = tuple(whitelist)
        self.model = TransitionModel()
        self._previous: ChartProps | None = None

    def tween(self, current: ChartProps, animate: Mapping[str, Any] | None, render: Callable[[ChartProps], Any]) -> Any:
        config = resolve_transitions(animate)
        target = replace(current, animate=None)
        previous = self._previous
        self._previous = target

        if previous is None:
            self.model.advance("steady")
            return render(target)

        start = _as_datums(previous)
        end = _as_datums(target)
        if start == end:
            return render(target)

        plan = plan_transition(start.data, end.data)
        LOGGER.debug("tween: %d entering, %d exiting", len(plan.entering), len(plan.exiting))

        if plan.exiting:
            on_exit = config.get("on_exit") or {}
            self.model.advance("exiting")
            exit_start = replace(start, data=apply_hook(start.data, plan.exiting, on_exit.get("before")))
            exit_end = replace(exit_start, **{k: getattr(end, k) for k in self.whitelist if k != "data"})
            result = self._run("exiting", exit_start, exit_end, config, render)
            self.model.advance("removed")
            self.model.advance("idle")
            start = replace(exit_end, data=tuple(d for d in exit_end.data if d.index not in plan.exiting))
            if not plan.entering:
                self.model.advance("steady")
                return result

        if plan.entering:
            on_enter = config.get("on_enter") or {}
            self.model.advance("entering")
            old_by_index = {d.index: d for d in start.data}
            enter_data = tuple(
                replace(d, x=old_by_index[d.index].x, y=old_by_index[d.index].y) if d.index in old_by_index else d
                for d in end.data
            )
            enter_start = replace(start, data=apply_hook(enter_data, plan.entering, on_enter.get("before")))
            enter_end = replace(end, data=apply_hook(end.data, plan.entering, on_enter.get("after")))
            result = self._run("entering", enter_start, enter_end, config, render)
        else:
            result = self._run("steady", start, end, config, render)
        self.model.advance("steady")
        return result

    def reset(self) -> None:
        self.model = TransitionModel()
        self._previous = None

    def _run(
        self,
        phase: TransitionPhase,
        start: ChartProps,
        end: ChartProps,
        config: Mapping[str, Any],
        render: Callable[[ChartProps], Any],
    ) -> Any:
        request = TweenRequest(whitelist=self.whitelist, start=start, end=end, config=config, phase=phase)
        # Frames re-enter the pipeline without `animate` so they never recurse.
        return self.driver.run(request, lambda props: render(replace(props, animate=None)))


def _as_datums(props: ChartProps) -> ChartProps:
    return replace(props, data=get_data(props), x="x", y="y")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))
