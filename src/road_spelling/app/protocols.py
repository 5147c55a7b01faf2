from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from road_spelling.domain.entities.geography import Distance, Location


# ------------- Road graph --------------------
@runtime_checkable
class RoadSegment(Protocol):
    """
    What the checks read from the road graph.
    • Segments are immutable and owned by the graph.
    • `start`/`end` may be None when the source geometry was unusable;
      consumers that need them raise GraphDataError.
    """

    id: int
    start: Location | None
    end: Location | None

    @property
    def name(self) -> str | None: ...
    def connected_segments(self) -> Iterable["RoadSegment"]: ...
    def is_primary(self) -> bool: ...


Expander = Callable[[RoadSegment], Iterable[RoadSegment]]
ExpansionPolicy = Callable[[RoadSegment, Distance], Expander]


# ------------- Output --------------------
@runtime_checkable
class Sink(Protocol):
    def write(self, payload: Mapping[str, Any]) -> None: ...


@runtime_checkable
class CheckHooks(Protocol):
    def run_start(self, *, candidates: int, workers: int): ...
    def run_end(self, *, checked: int, flagged: int, errors: int, wall_ms: float): ...
    def segment_start(self, segment: RoadSegment, *, seq: int): ...
    def flag(self, flag, *, seq: int): ...
    def error(self, segment: RoadSegment, *, exc: BaseException, **kw): ...
