from .normalize import normalize_points, normalize_xy

__all__ = ["normalize_points", "normalize_xy"]
