# road_spelling/domain/checks/spelling_check.py
from dataclasses import dataclass, field

from road_spelling.app.protocols import RoadSegment
from road_spelling.domain.checks.frontier_walker import BoundedFrontierWalker
from road_spelling.domain.checks.name_matching import is_spelling_inconsistent
from road_spelling.domain.entities.changes import FeatureChange
from road_spelling.domain.entities.geography import Distance, Location
from road_spelling.domain.entities.road_graph import NAME_TAG

CHECK_NAME = "RoadNameSpellingConsistencyCheck"


@dataclass(frozen=True)
class InconsistentPair:
    start_id: int
    other_id: int
    start_name: str
    other_name: str


@dataclass(frozen=True)
class PointOfInterest:
    location: Location
    description: str | None = None


@dataclass
class CheckFlag:
    check_name: str
    identifier: str
    instruction: str
    start: RoadSegment
    flagged: list[RoadSegment]
    pairs: list[InconsistentPair]
    points: list[PointOfInterest] = field(default_factory=list)


class RoadNameSpellingConsistencyCheck:
    """
    Flags named primary segments that have a nearby segment whose name is one
    character edit away, unless the two names carry different road identifiers.
    """

    def __init__(
        self,
        max_search_distance: Distance,
        challenge_name: str = CHECK_NAME,
        walker: BoundedFrontierWalker | None = None,
    ):
        self.max_search_distance = max_search_distance
        self.challenge_name = challenge_name
        self.walker = walker or BoundedFrontierWalker()

    def valid_start(self, segment: RoadSegment) -> bool:
        return segment.is_primary() and bool(segment.name)

    def inconsistent_segments(self, start: RoadSegment) -> list[RoadSegment]:
        name = start.name
        if not name:
            return []
        nearby = self.walker.collect(start, self.max_search_distance)
        hits = [s for s in nearby if is_spelling_inconsistent(s.name, name)]
        return sorted(hits, key=lambda s: s.id)

    def flag(self, start: RoadSegment) -> CheckFlag | None:
        if not self.valid_start(start):
            return None
        flagged = self.inconsistent_segments(start)
        if not flagged:
            return None
        pairs = [InconsistentPair(start.id, s.id, start.name, s.name) for s in flagged]
        points = [
            PointOfInterest(s.start, f"segment {s.id}: {s.name!r}")
            for s in (start, *flagged)
            if s.start is not None
        ]
        return CheckFlag(
            check_name=self.challenge_name,
            identifier=str(start.id),
            instruction=self.instruction(start, flagged),
            start=start,
            flagged=flagged,
            pairs=pairs,
            points=points,
        )

    @staticmethod
    def instruction(start: RoadSegment, flagged: list[RoadSegment]) -> str:
        others = ", ".join(f"{s.id} ({s.name!r})" for s in flagged)
        return (
            f"Segment {start.id} is named {start.name!r}. Nearby segment(s) {others} "
            "have a name one character different. Check the spelling and make the "
            "names consistent if they refer to the same road."
        )

    @staticmethod
    def fix_suggestions(flag: CheckFlag) -> list[FeatureChange]:
        return [FeatureChange.set_tag(s.id, NAME_TAG, flag.start.name) for s in flag.flagged]
