from __future__ import annotations

from typing import Any

from linechart.animation import AnimationDriver
from linechart.chart import LineChart
from linechart.config import validate_props


def line_chart(data: Any = None, *, driver: AnimationDriver | None = None, **options: Any) -> LineChart:
    if data is not None:
        options["data"] = data
    return LineChart(validate_props(options), driver=driver)
