from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Callable, Hashable, Mapping

from linechart.errors import ConfigurationError
from linechart.styles import merge_props


LOGGER = logging.getLogger(__name__)

STATE_KINDS = ("data", "markers", "labels")
SERIES_LABEL_KEY = "series"

Handler = Callable[[Any, Mapping[str, Any] | None, Hashable | None, str], Any]
StateSink = Callable[[str, Hashable, Mapping[str, Any]], None]


@dataclass(frozen=True)
class ElementState:
    """Per-element overrides returned by event handlers.

    Keyed by element kind, then by element key (the data index, the segment
    index for `data`, or `SERIES_LABEL_KEY`). Snapshots are never mutated;
    `apply` returns a new snapshot.
    """

    entries: Mapping[str, Mapping[Hashable, Mapping[str, Any]]] = field(default_factory=dict)

    def get(self, kind: str, key: Hashable) -> Mapping[str, Any]:
        return self.entries.get(kind, {}).get(key, {})

    def apply(self, kind: str, key: Hashable, update: Mapping[str, Any]) -> "ElementState":
        if kind not in STATE_KINDS:
            raise ConfigurationError(f"Unknown element kind: {kind}")
        by_key = dict(self.entries.get(kind, {}))
        by_key[key] = merge_props(by_key.get(key), update)
        entries = dict(self.entries)
        entries[kind] = by_key
        return ElementState(entries=entries)

    def is_empty(self) -> bool:
        return not any(self.entries.values())


@dataclass(frozen=True)
class BoundEventMap:
    kind: str
    handlers: Mapping[str, Handler] = field(default_factory=dict)
    sink: StateSink | None = None

    def for_element(self, key: Hashable, element_props: Mapping[str, Any] | None = None) -> dict[str, "ElementHandler"]:
        return {name: ElementHandler(bound=self, name=name, key=key, element_props=element_props) for name in self.handlers}


@dataclass(frozen=True)
class ElementHandler:
    """Handler bound to one element; call it with the host event."""

    bound: BoundEventMap
    name: str
    key: Hashable
    element_props: Mapping[str, Any] | None = None

    def __call__(self, event: Any) -> Any:
        return invoke(self.bound, self.name, self.key, event, self.element_props)


def scope_events(handlers: Mapping[str, Handler] | None, kind: str, sink: StateSink | None = None) -> BoundEventMap:
    if kind not in STATE_KINDS:
        raise ConfigurationError(f"Unknown element kind: {kind}")
    return BoundEventMap(kind=kind, handlers=dict(handlers or {}), sink=sink)


def invoke(
    bound: BoundEventMap,
    name: str,
    key: Hashable,
    event: Any,
    element_props: Mapping[str, Any] | None = None,
) -> Any:
    """Run one bound handler and forward its result to the state sink.

    Handler failures are logged and yield None; results are not validated.
    """

    handler = bound.handlers.get(name)
    if handler is None:
        return None
    try:
        result = handler(event, element_props, key, bound.kind)
    except Exception:  # noqa: BLE001
        LOGGER.exception("%s handler %r failed for element %r", bound.kind, name, key)
        return None
    if result is not None and bound.sink is not None:
        bound.sink(bound.kind, key, result)
    return result


@dataclass(frozen=True)
class ParentHandler:
    handler: Handler
    props: Any

    def __call__(self, event: Any) -> Any:
        try:
            return self.handler(event, self.props, None, "parent")
        except Exception:  # noqa: BLE001
            LOGGER.exception("parent handler failed")
            return None


def scope_parent_events(handlers: Mapping[str, Handler] | None, props: Any) -> dict[str, ParentHandler]:
    return {name: ParentHandler(handler=handler, props=props) for name, handler in (handlers or {}).items()}
