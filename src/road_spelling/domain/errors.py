# road_spelling/domain/errors.py


class RoadSpellingError(Exception):
    """Base class for errors raised by road_spelling."""


class GraphDataError(RoadSpellingError):
    """Malformed geometry or missing location data in the road graph.

    Fatal to the traversal that hit it; sibling traversals keep running.
    """

    def __init__(self, msg: str, *, segment_id: int | None = None):
        super().__init__(msg)
        self.segment_id = segment_id


class TaskError(RoadSpellingError, ValueError):
    """A task payload could not be generated."""
