from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

import numpy as np

from road_spelling.domain.entities.geography import EARTH_RADIUS_M, Distance, Location

NAME_TAG = "name"


@dataclass(frozen=True)
class Segment:
    """A directed piece of road. Identity is (id, start, end); tags ride along."""

    id: int
    start: Location | None
    end: Location | None
    tags: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False)
    graph: "RoadGraph | None" = field(default=None, compare=False, hash=False, repr=False)

    @property
    def name(self) -> str | None:
        value = self.tags.get(NAME_TAG)
        if value is None or not str(value).strip():
            return None
        return str(value)

    def is_primary(self) -> bool:
        # reverse/duplicate directional segments carry negative ids
        return self.id > 0

    def connected_segments(self) -> set["Segment"]:
        if self.graph is None:
            return set()
        return self.graph.connected(self)


class RoadGraph:
    """In-memory road network. Read-only once loaded; safe for concurrent readers."""

    def __init__(self, node_digits: int = 7):
        self.node_digits = node_digits
        self._segments: dict[int, Segment] = {}
        self._by_node: dict[tuple[float, float], list[int]] = {}
        self._starts: tuple[np.ndarray, np.ndarray, list[int]] | None = None

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments.values())

    def __contains__(self, segment_id: int) -> bool:
        return segment_id in self._segments

    def add(
        self,
        segment_id: int,
        start: Location | None,
        end: Location | None,
        tags: Mapping[str, str] | None = None,
    ) -> Segment:
        if segment_id in self._segments:
            raise ValueError(f"duplicate segment id {segment_id}")
        seg = Segment(segment_id, start, end, dict(tags or {}), graph=self)
        self._segments[segment_id] = seg
        for loc in {start, end}:
            if loc is not None:
                self._by_node.setdefault(loc.node_key(self.node_digits), []).append(segment_id)
        self._starts = None
        return seg

    def segment(self, segment_id: int) -> Segment:
        return self._segments[segment_id]

    def primary_segments(self) -> Iterable[Segment]:
        return (s for s in self._segments.values() if s.is_primary())

    def connected(self, seg: Segment) -> set[Segment]:
        out: set[Segment] = set()
        for loc in (seg.start, seg.end):
            if loc is None:
                continue
            for sid in self._by_node.get(loc.node_key(self.node_digits), ()):
                if sid != seg.id:
                    out.add(self._segments[sid])
        return out

    # ---------------- spatial lookup ----------------

    def _start_index(self):
        if self._starts is None:
            ids = [s.id for s in self._segments.values() if s.start is not None]
            lat = np.radians([self._segments[i].start.lat for i in ids])
            lon = np.radians([self._segments[i].start.lon for i in ids])
            self._starts = (lat, lon, ids)
        return self._starts

    def segments_near(self, center: Location, radius: Distance) -> list[Segment]:
        """Segments whose start lies within `radius` of `center` (haversine)."""
        lat, lon, ids = self._start_index()
        if not ids:
            return []
        p0, l0 = np.radians(center.lat), np.radians(center.lon)
        a = np.sin((lat - p0) / 2) ** 2 + np.cos(p0) * np.cos(lat) * np.sin((lon - l0) / 2) ** 2
        d = 2 * EARTH_RADIUS_M * np.arcsin(np.minimum(1.0, np.sqrt(a)))
        return [self._segments[ids[k]] for k in np.flatnonzero(d <= radius.as_meters())]
