from .normalize import coerce_points

__all__ = ["coerce_points"]
