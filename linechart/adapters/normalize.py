from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import numpy as np

from linechart.errors import PlotDataError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def coerce_points(data: Any) -> list[Any]:
    """Turn a `data` input into a list of raw points.

    Tabular inputs become one point per row: DataFrame rows and column
    mappings become dicts, 2-D arrays become row lists, 1-D arrays become
    scalars. Anything else sequence-like is taken point by point.
    """

    if data is None:
        return []

    if torch is not None and isinstance(data, torch.Tensor):
        tensor = data.detach()
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return _coerce_ndarray(tensor.numpy(), label="tensor")

    if pd is not None and isinstance(data, pd.DataFrame):
        return data.to_dict(orient="records")

    if pd is not None and isinstance(data, pd.Series):
        return [{"x": key, "y": value} for key, value in data.items()]

    if isinstance(data, np.ndarray):
        return _coerce_ndarray(data, label="array")

    if isinstance(data, Mapping):
        return _columns_to_records(data)

    if isinstance(data, (str, bytes, bytearray)):
        raise PlotDataError(f"unsupported data input type: {type(data)!r}")

    if isinstance(data, Sequence):
        return list(data)

    if isinstance(data, Iterable):
        return list(data)

    raise PlotDataError(f"unsupported data input type: {type(data)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> list[Any]:
    if arr.ndim == 0:
        raise PlotDataError(f"{label} data must be at least 1-D")
    if arr.ndim > 2:
        raise PlotDataError(f"{label} data must be 1-D or 2-D, got {arr.ndim}-D")
    return arr.tolist()


def _columns_to_records(columns: Mapping[str, Any]) -> list[dict[str, Any]]:
    values = {key: list(_column_values(key, col)) for key, col in columns.items()}
    lengths = {len(col) for col in values.values()}
    if len(lengths) > 1:
        raise PlotDataError(f"column length mismatch: {sorted(lengths)}")
    size = lengths.pop() if lengths else 0
    return [{key: col[i] for key, col in values.items()} for i in range(size)]


def _column_values(key: str, column: Any) -> Iterable[Any]:
    if isinstance(column, np.ndarray):
        if column.ndim != 1:
            raise PlotDataError(f"column {key} must be 1-D")
        return column.tolist()
    if isinstance(column, (str, bytes)) or not isinstance(column, Iterable):
        raise PlotDataError(f"column {key} must be a sequence")
    return column
