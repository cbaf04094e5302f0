from __future__ import annotations


class LineChartError(Exception):
    """Base error for the linechart package."""


class ConfigurationError(LineChartError, ValueError):
    """Unsupported or malformed chart configuration, raised at build time."""


class DomainError(LineChartError, ValueError):
    """Domain that the requested scale kind cannot represent.

    Raised and recovered inside the scale builder; callers never see it.
    """


class PlotDataError(LineChartError):
    """Data input that cannot be turned into points."""
