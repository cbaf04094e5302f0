from __future__ import annotations

from typing import Any, Callable, Sequence

import numpy as np

from linechart.dataset import Datum
from linechart.domain import to_number


Segment = tuple[Datum, ...]


def segment_data(dataset: Sequence[Datum], key: Callable[[Datum], Any] | None = None) -> tuple[Segment, ...]:
    """Split x-ordered data into maximal runs without gaps.

    The sort is stable, so points sharing an x keep their input order. Gap
    points end the current run and are not part of any segment.
    """

    ordered = sorted(dataset, key=key or _x_sort_key)
    mask = np.asarray([not d.is_gap for d in ordered], dtype=bool)
    return tuple(tuple(ordered[start:stop]) for start, stop in _contiguous_true_runs(mask))


def _x_sort_key(datum: Datum) -> tuple[int, Any]:
    try:
        return (0, to_number(datum.x))
    except (TypeError, ValueError):
        return (1, str(datum.x))


def _contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[tuple[int, int]] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append((start, prev + 1))
        start = iv
        prev = iv
    runs.append((start, prev + 1))
    return runs
