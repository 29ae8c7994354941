from __future__ import annotations


class ClusterError(Exception):
    """Base class for marker clustering errors."""


class ClusterConfigError(ClusterError, ValueError):
    pass


class UnsupportedLayoutError(ClusterConfigError):
    def __init__(self, layout_type: str) -> None:
        self.layout_type = layout_type
        super().__init__(f"unsupported layout algorithm: {layout_type!r}")


class ClusterDataError(ClusterError, ValueError):
    pass
