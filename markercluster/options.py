from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields, replace
import json
import logging
from pathlib import Path
from typing import Any

from markercluster.errors import ClusterConfigError, UnsupportedLayoutError


LOGGER = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]

LAYOUT_GRID_VIEW_RELATIVE = "grid-view-relative"
LAYOUT_GRID_DATA_RELATIVE = "grid-data-relative"
LAYOUT_TYPES = (LAYOUT_GRID_VIEW_RELATIVE, LAYOUT_GRID_DATA_RELATIVE)
_LAYOUT_ALIASES = {"grid": LAYOUT_GRID_DATA_RELATIVE}

DEFAULT_GRID_SIZE = 50.0
DEFAULT_CLUSTER_RADIUS = 12.0
DEFAULT_POINT_RADIUS = 4.0
DEFAULT_DATA_LABEL_FORMAT = "{point.clustered_data_len}"
DEFAULT_TOOLTIP_CLUSTER_FORMAT = "Clustered points: {point.clustered_data_len}"


def coerce_color(value: Any) -> RGBA | None:
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) not in (6, 8):
            raise ClusterConfigError(f"unsupported color string: {value!r}")
        try:
            parts = [int(text[i : i + 2], 16) for i in range(0, len(text), 2)]
        except ValueError as exc:
            raise ClusterConfigError(f"unsupported color string: {value!r}") from exc
        if len(parts) == 3:
            parts.append(255)
        return (parts[0], parts[1], parts[2], parts[3])
    if isinstance(value, Sequence) and len(value) in (3, 4):
        channels = [int(c) for c in value]
        if any(c < 0 or c > 255 for c in channels):
            raise ClusterConfigError(f"color channels must be within 0..255: {value!r}")
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    raise ClusterConfigError(f"unsupported color value: {value!r}")


@dataclass(frozen=True)
class StyleOverride:
    """Partial marker style; unset fields leave the base style untouched."""

    symbol: str | None = None
    radius: float | None = None
    fill_color: RGBA | None = None
    line_color: RGBA | None = None
    line_width: float | None = None

    def __post_init__(self) -> None:
        if self.radius is not None and self.radius < 0:
            raise ClusterConfigError("style radius must be >= 0")
        if self.line_width is not None and self.line_width < 0:
            raise ClusterConfigError("style line_width must be >= 0")


@dataclass(frozen=True)
class MarkerStyle:
    symbol: str = "cluster"
    radius: float = DEFAULT_CLUSTER_RADIUS
    fill_color: RGBA | None = None
    line_color: RGBA | None = None
    line_width: float | None = None

    def __post_init__(self) -> None:
        if self.radius < 0:
            raise ClusterConfigError("style radius must be >= 0")
        if self.line_width is not None and self.line_width < 0:
            raise ClusterConfigError("style line_width must be >= 0")

    def merged(self, override: StyleOverride | None) -> MarkerStyle:
        if override is None:
            return self
        changes = {f.name: getattr(override, f.name) for f in fields(override) if getattr(override, f.name) is not None}
        return replace(self, **changes)

    @property
    def extent(self) -> float:
        return self.radius + (self.line_width or 0.0)


@dataclass(frozen=True)
class StyleZone:
    from_count: int
    to_count: int
    style: StyleOverride = field(default_factory=StyleOverride)

    def __post_init__(self) -> None:
        if self.from_count > self.to_count:
            raise ClusterConfigError(f"zone bounds are inverted: from={self.from_count} > to={self.to_count}")

    def contains(self, member_count: int) -> bool:
        return self.from_count <= member_count <= self.to_count


@dataclass(frozen=True)
class LayoutAlgorithm:
    type: str = "grid"
    grid_size: float = DEFAULT_GRID_SIZE
    debug_draw_grid_lines: bool = False
    debug_draw_clusters: bool = False
    debug_draw_points: bool = False

    def __post_init__(self) -> None:
        resolved = _LAYOUT_ALIASES.get(self.type, self.type)
        if resolved not in LAYOUT_TYPES:
            raise UnsupportedLayoutError(self.type)
        object.__setattr__(self, "type", resolved)
        if not self.grid_size > 0:
            raise ClusterConfigError("layout_algorithm.grid_size must be > 0")

    @property
    def data_relative(self) -> bool:
        return self.type == LAYOUT_GRID_DATA_RELATIVE


@dataclass(frozen=True)
class DataLabelOptions:
    enabled: bool = True
    format: str = DEFAULT_DATA_LABEL_FORMAT
    color: RGBA = (255, 255, 255, 255)
    font_size_px: float = 11.0


@dataclass(frozen=True)
class TooltipOptions:
    cluster_format: str = DEFAULT_TOOLTIP_CLUSTER_FORMAT
    point_format: str = "x: {point.x}, y: {point.y}"


@dataclass(frozen=True)
class ClusterOptions:
    enabled: bool = False
    allow_overlap: bool = True
    minimum_cluster_size: int = 2
    layout_algorithm: LayoutAlgorithm = field(default_factory=LayoutAlgorithm)
    style: MarkerStyle = field(default_factory=MarkerStyle)
    zones: tuple[StyleZone, ...] = ()
    data_labels: DataLabelOptions = field(default_factory=DataLabelOptions)
    tooltip: TooltipOptions = field(default_factory=TooltipOptions)
    series_marker: MarkerStyle = field(
        default_factory=lambda: MarkerStyle(symbol="square", radius=DEFAULT_POINT_RADIUS, line_width=0.0)
    )

    def __post_init__(self) -> None:
        if isinstance(self.minimum_cluster_size, bool) or not isinstance(self.minimum_cluster_size, int):
            raise ClusterConfigError("minimum_cluster_size must be an integer")
        if self.minimum_cluster_size < 2:
            raise ClusterConfigError("minimum_cluster_size must be >= 2")
        object.__setattr__(self, "zones", tuple(self.zones))

    @property
    def resolves_overlap(self) -> bool:
        return not self.allow_overlap and self.layout_algorithm.data_relative

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> ClusterOptions:
        """Build options from a camelCase option bag merged over the defaults."""
        if not isinstance(raw, Mapping):
            raise ClusterConfigError("cluster options must be a mapping")
        _warn_unknown(raw, _TOP_LEVEL_KEYS, "cluster")
        defaults = cls()
        kwargs: dict[str, Any] = {}
        if "enabled" in raw:
            kwargs["enabled"] = bool(raw["enabled"])
        if "allowOverlap" in raw:
            kwargs["allow_overlap"] = bool(raw["allowOverlap"])
        if "minimumClusterSize" in raw:
            kwargs["minimum_cluster_size"] = raw["minimumClusterSize"]
        if "layoutAlgorithm" in raw:
            kwargs["layout_algorithm"] = _parse_layout(raw["layoutAlgorithm"], defaults.layout_algorithm)
        if "style" in raw:
            kwargs["style"] = defaults.style.merged(parse_style(raw["style"], "style"))
        if "zones" in raw:
            kwargs["zones"] = tuple(_parse_zone(item) for item in raw["zones"] or ())
        data_labels = defaults.data_labels
        if "dataLabels" in raw:
            labels_raw = _section(raw["dataLabels"], "dataLabels")
            data_labels = replace(
                data_labels,
                enabled=bool(labels_raw.get("enabled", data_labels.enabled)),
                format=str(labels_raw.get("format", data_labels.format)),
                color=coerce_color(labels_raw.get("color")) or data_labels.color,
                font_size_px=float(labels_raw.get("fontSize", data_labels.font_size_px)),
            )
        if "dataLabelFormat" in raw:
            data_labels = replace(data_labels, format=str(raw["dataLabelFormat"]))
        kwargs["data_labels"] = data_labels
        if "tooltip" in raw:
            tooltip_raw = _section(raw["tooltip"], "tooltip")
            kwargs["tooltip"] = replace(
                defaults.tooltip,
                cluster_format=str(tooltip_raw.get("clusterFormat", defaults.tooltip.cluster_format)),
                point_format=str(tooltip_raw.get("pointFormat", defaults.tooltip.point_format)),
            )
        if "marker" in raw:
            kwargs["series_marker"] = defaults.series_marker.merged(parse_style(raw["marker"], "marker"))
        return cls(**kwargs)


def load_options(path: str | Path) -> ClusterOptions:
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        raw = json.load(fh)
    LOGGER.debug("loaded cluster options from %s", path)
    return ClusterOptions.from_mapping(raw)


_TOP_LEVEL_KEYS = frozenset(
    {
        "enabled",
        "allowOverlap",
        "minimumClusterSize",
        "layoutAlgorithm",
        "style",
        "zones",
        "dataLabels",
        "dataLabelFormat",
        "tooltip",
        "marker",
    }
)
_LAYOUT_KEYS = frozenset({"type", "gridSize", "debugDrawGridLines", "debugDrawClusters", "debugDrawPoints"})
_STYLE_KEYS = frozenset({"symbol", "radius", "fillColor", "lineColor", "lineWidth"})


def _section(value: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ClusterConfigError(f"`{name}` must be a mapping")
    return value


def _warn_unknown(raw: Mapping[str, Any], known: frozenset[str], name: str) -> None:
    for key in raw:
        if key not in known:
            LOGGER.debug("ignoring unknown %s option: %s", name, key)


def _parse_layout(value: Any, base: LayoutAlgorithm) -> LayoutAlgorithm:
    raw = _section(value, "layoutAlgorithm")
    _warn_unknown(raw, _LAYOUT_KEYS, "layoutAlgorithm")
    try:
        grid_size = float(raw.get("gridSize", base.grid_size))
    except (TypeError, ValueError) as exc:
        raise ClusterConfigError(f"layoutAlgorithm.gridSize must be a number: {raw.get('gridSize')!r}") from exc
    return LayoutAlgorithm(
        type=str(raw.get("type", base.type)),
        grid_size=grid_size,
        debug_draw_grid_lines=bool(raw.get("debugDrawGridLines", base.debug_draw_grid_lines)),
        debug_draw_clusters=bool(raw.get("debugDrawClusters", base.debug_draw_clusters)),
        debug_draw_points=bool(raw.get("debugDrawPoints", base.debug_draw_points)),
    )


def parse_style(value: Any, name: str) -> StyleOverride:
    raw = _section(value, name)
    _warn_unknown(raw, _STYLE_KEYS, name)
    radius = raw.get("radius")
    line_width = raw.get("lineWidth")
    return StyleOverride(
        symbol=str(raw["symbol"]) if raw.get("symbol") is not None else None,
        radius=float(radius) if radius is not None else None,
        fill_color=coerce_color(raw.get("fillColor")),
        line_color=coerce_color(raw.get("lineColor")),
        line_width=float(line_width) if line_width is not None else None,
    )


def _parse_zone(value: Any) -> StyleZone:
    raw = _section(value, "zones[]")
    if "from" not in raw or "to" not in raw:
        raise ClusterConfigError("zone requires both `from` and `to`")
    try:
        from_count = int(raw["from"])
        to_count = int(raw["to"])
    except (TypeError, ValueError) as exc:
        raise ClusterConfigError(f"zone `from`/`to` must be integers: {raw.get('from')!r}, {raw.get('to')!r}") from exc
    return StyleZone(
        from_count=from_count,
        to_count=to_count,
        style=parse_style(raw.get("style") or {}, "zones[].style"),
    )
