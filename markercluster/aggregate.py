from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
import logging

from markercluster.grid import CellGroup, CellKey
from markercluster.options import MarkerStyle, StyleZone
from markercluster.series import Point


LOGGER = logging.getLogger(__name__)

AnchorPlacer = Callable[[CellKey, tuple[float, float], float], tuple[float, float]]


@dataclass(frozen=True)
class Cluster:
    key: CellKey
    index: int
    members: tuple[Point, ...]
    centroid: tuple[float, float]
    anchor: tuple[float, float]
    zone: StyleZone | None
    marker: MarkerStyle

    @property
    def id(self) -> str:
        return str(self.key)

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def x(self) -> float:
        return self.anchor[0]

    @property
    def y(self) -> float:
        return self.anchor[1]


@dataclass(frozen=True)
class NoisePoint:
    key: CellKey
    index: int
    point: Point
    cell_members: tuple[Point, ...]

    @property
    def id(self) -> str:
        return str(self.key)

    @property
    def x(self) -> float:
        return self.point.x

    @property
    def y(self) -> float:
        return self.point.y


Entry = Cluster | NoisePoint


@dataclass(frozen=True)
class Aggregation:
    clusters: list[Cluster]
    noise: list[NoisePoint]
    entries: list[Entry]


def effective_threshold(minimum_cluster_size: int) -> int:
    return max(int(minimum_cluster_size), 2)


def centroid(members: Sequence[Point]) -> tuple[float, float]:
    count = len(members)
    sum_x = 0.0
    sum_y = 0.0
    for point in members:
        sum_x += point.x
        sum_y += point.y
    return sum_x / count, sum_y / count


def match_zone(member_count: int, zones: Sequence[StyleZone]) -> StyleZone | None:
    # Every matching zone overwrites the previous match; the last one wins.
    matched: StyleZone | None = None
    for zone in zones:
        if zone.contains(member_count):
            matched = zone
    return matched


def cluster_marker(member_count: int, style: MarkerStyle, zones: Sequence[StyleZone]) -> tuple[StyleZone | None, MarkerStyle]:
    zone = match_zone(member_count, zones)
    return zone, style.merged(zone.style if zone is not None else None)


def aggregate(
    cell_group: CellGroup,
    minimum_cluster_size: int,
    zones: Sequence[StyleZone] = (),
    *,
    style: MarkerStyle | None = None,
    place: AnchorPlacer | None = None,
) -> Aggregation:
    base_style = style or MarkerStyle()
    threshold = effective_threshold(minimum_cluster_size)
    clusters: list[Cluster] = []
    noise: list[NoisePoint] = []
    entries: list[Entry] = []

    for key, members in cell_group.items():
        if len(members) >= threshold:
            center = centroid(members)
            zone, marker = cluster_marker(len(members), base_style, zones)
            anchor = place(key, center, marker.radius) if place is not None else center
            cluster = Cluster(
                key=key,
                index=len(entries),
                members=tuple(members),
                centroid=center,
                anchor=anchor,
                zone=zone,
                marker=marker,
            )
            clusters.append(cluster)
            entries.append(cluster)
            continue
        cell_members = tuple(members)
        for point in members:
            item = NoisePoint(key=key, index=len(entries), point=point, cell_members=cell_members)
            noise.append(item)
            entries.append(item)

    LOGGER.debug(
        "aggregated %d cells into %d clusters and %d noise points",
        len(cell_group),
        len(clusters),
        len(noise),
    )
    return Aggregation(clusters=clusters, noise=noise, entries=entries)
