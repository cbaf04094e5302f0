from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import inspect
import re
from typing import Any, Callable, Literal

from linechart.errors import ConfigurationError


AccessorKind = Literal["function", "index", "path", "identity"]
AccessorFn = Callable[[Any, int, Sequence[Any]], Any]

# `a.b`, `a[0]`, `a["key"]`, `a['key']`
_PATH_TOKEN = re.compile(r"\[\s*([\"']?)(.*?)\1\s*\]|([^.\[\]]+)")


@dataclass(frozen=True)
class Accessor:
    """Tagged accessor variant; build with `make_accessor`."""

    kind: AccessorKind
    fn: AccessorFn | None = None
    index: int | None = None
    path: tuple[str, ...] = ()
    raw_path: str | None = None
    arity: int = 1


IDENTITY = Accessor(kind="identity")


def make_accessor(spec: Any) -> Accessor:
    if isinstance(spec, Accessor):
        return spec
    if spec is None:
        return IDENTITY
    if isinstance(spec, bool):
        raise ConfigurationError("accessor must not be a bool")
    if isinstance(spec, int):
        if spec < 0:
            raise ConfigurationError(f"index accessor must be >= 0, got {spec}")
        return Accessor(kind="index", index=spec)
    if isinstance(spec, str):
        path = parse_path(spec)
        if not path:
            raise ConfigurationError("path accessor must be a non-empty string")
        return Accessor(kind="path", path=path, raw_path=spec)
    if callable(spec):
        return Accessor(kind="function", fn=spec, arity=_positional_arity(spec))
    if isinstance(spec, Sequence) and not isinstance(spec, (bytes, bytearray)):
        segments = tuple(spec)
        if not segments or not all(isinstance(s, str) for s in segments):
            raise ConfigurationError("path accessor sequence must contain only strings")
        return Accessor(kind="path", path=segments)
    raise ConfigurationError(f"unsupported accessor type: {type(spec)!r}")


def parse_path(path: str) -> tuple[str, ...]:
    """Split a dotted/bracketed path (`a.b[2]["c"]`) into its segments."""

    segments: list[str] = []
    for match in _PATH_TOKEN.finditer(path.strip()):
        bracketed, bare = match.group(2), match.group(3)
        segment = bare if bare is not None else bracketed
        if segment:
            segments.append(segment)
    return tuple(segments)


def resolve(accessor: Accessor, point: Any, index: int, data: Sequence[Any] = ()) -> Any:
    return _RESOLVERS[accessor.kind](accessor, point, index, data)


def _resolve_function(accessor: Accessor, point: Any, index: int, data: Sequence[Any]) -> Any:
    assert accessor.fn is not None
    return accessor.fn(*(point, index, data)[: accessor.arity])


def _resolve_index(accessor: Accessor, point: Any, index: int, data: Sequence[Any]) -> Any:
    _ = (index, data)
    if isinstance(point, (str, bytes)) or not isinstance(point, Sequence):
        return None
    try:
        return point[accessor.index]
    except IndexError:
        return None


def _resolve_path(accessor: Accessor, point: Any, index: int, data: Sequence[Any]) -> Any:
    _ = (index, data)
    # An exact key wins over path interpretation (`{"a.b": 1}`).
    if accessor.raw_path is not None and isinstance(point, Mapping) and accessor.raw_path in point:
        return point[accessor.raw_path]
    current = point
    for segment in accessor.path:
        current = _lookup(current, segment)
        if current is None:
            return None
    return current


def _resolve_identity(accessor: Accessor, point: Any, index: int, data: Sequence[Any]) -> Any:
    _ = (accessor, index, data)
    return point


def _lookup(obj: Any, segment: str) -> Any:
    if isinstance(obj, Mapping):
        if segment in obj:
            return obj[segment]
        if segment.isdigit() and int(segment) in obj:
            return obj[int(segment)]
        return None
    if isinstance(obj, (str, bytes, int, float, complex)):
        return None
    if isinstance(obj, Sequence):
        if not segment.isdigit():
            return None
        position = int(segment)
        return obj[position] if position < len(obj) else None
    return getattr(obj, segment, None)


_RESOLVERS: dict[str, Callable[[Accessor, Any, int, Sequence[Any]], Any]] = {
    "function": _resolve_function,
    "index": _resolve_index,
    "path": _resolve_path,
    "identity": _resolve_identity,
}


def _positional_arity(fn: Callable[..., Any]) -> int:
    """How many of `(point, index, data)` the callable accepts."""

    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return 1
    count = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 3
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return max(1, min(count, 3))
