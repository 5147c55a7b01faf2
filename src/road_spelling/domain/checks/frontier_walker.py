# road_spelling/domain/checks/frontier_walker.py
from collections import deque
from collections.abc import Iterator

from road_spelling.app.protocols import Expander, ExpansionPolicy, RoadSegment
from road_spelling.domain.entities.geography import Distance
from road_spelling.domain.errors import GraphDataError


def within_search_distance(start: RoadSegment, max_distance: Distance) -> Expander:
    """
    Admit the neighbours of an incoming segment while the incoming segment's END
    lies within `max_distance` of the start segment's START. Only primary
    segments are yielded.
    """

    def expand(incoming: RoadSegment):
        if start.start is None:
            raise GraphDataError(f"segment {start.id} has no start location", segment_id=start.id)
        if incoming.end is None:
            raise GraphDataError(
                f"segment {incoming.id} has no end location", segment_id=incoming.id
            )
        if incoming.end.distance_to(start.start) > max_distance:
            return ()
        return (s for s in incoming.connected_segments() if s.is_primary())

    return expand


def walk(start: RoadSegment, expand: Expander) -> Iterator[RoadSegment]:
    """Breadth-first expansion from `start`; yields each newly reached segment once."""
    visited = {start.id}
    frontier = deque([start])
    while frontier:
        seg = frontier.popleft()
        for nxt in expand(seg):
            if nxt.id in visited:
                continue
            visited.add(nxt.id)
            frontier.append(nxt)
            yield nxt


class BoundedFrontierWalker:
    def __init__(self, policy: ExpansionPolicy = within_search_distance):
        self.policy = policy

    def collect(self, start: RoadSegment, max_distance: Distance) -> set[RoadSegment]:
        # visited set is local to this call; walkers are safe to share across threads
        return set(walk(start, self.policy(start, max_distance)))


def collect(
    start: RoadSegment,
    max_distance: Distance,
    policy: ExpansionPolicy = within_search_distance,
) -> set[RoadSegment]:
    return BoundedFrontierWalker(policy).collect(start, max_distance)
