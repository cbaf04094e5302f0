from linechart.accessors import Accessor, make_accessor, resolve
from linechart.animation import (
    ANIMATION_WHITELIST,
    AnimationBridge,
    AnimationDriver,
    SteppedDriver,
    TweenRequest,
    interpolate_props,
)
from linechart.api import line_chart
from linechart.chart import LineChart
from linechart.config import ChartProps, Padding, validate_props
from linechart.dataset import Datum, build_dataset
from linechart.domain import Domain, get_domain
from linechart.errors import ConfigurationError, DomainError, LineChartError, PlotDataError
from linechart.events import ElementState, scope_events
from linechart.layout import ChartGeometry, GeometryRenderer, LabelGeometry, LineSegmentGeometry, MarkerGeometry
from linechart.scales import Scale, build_scale
from linechart.segments import segment_data

__all__ = [
    "ANIMATION_WHITELIST",
    "Accessor",
    "AnimationBridge",
    "AnimationDriver",
    "ChartGeometry",
    "ChartProps",
    "ConfigurationError",
    "Datum",
    "Domain",
    "DomainError",
    "ElementState",
    "GeometryRenderer",
    "LabelGeometry",
    "LineChart",
    "LineChartError",
    "LineSegmentGeometry",
    "MarkerGeometry",
    "Padding",
    "PlotDataError",
    "Scale",
    "SteppedDriver",
    "TweenRequest",
    "build_dataset",
    "build_scale",
    "get_domain",
    "interpolate_props",
    "line_chart",
    "make_accessor",
    "resolve",
    "scope_events",
    "segment_data",
    "validate_props",
]
