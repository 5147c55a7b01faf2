# road_spelling/io/task.py
"""
Task payloads for a cooperative mapping challenge: a GeoJSON FeatureCollection of
points to look at, plus optional tag-fix operations ("cooperative work").
"""

import copy
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from road_spelling.domain.checks.spelling_check import (
    CheckFlag,
    RoadNameSpellingConsistencyCheck,
)
from road_spelling.domain.entities.changes import ChangeType, FeatureChange
from road_spelling.domain.entities.geography import Location
from road_spelling.domain.errors import TaskError

FRAMEWORK = "road-spelling"
CHECK_GENERATOR = "flag:check"
FRAMEWORK_GENERATOR = "flag:generator"

_ELEMENT_ACTION = {ChangeType.UPDATE: "modifyElement", ChangeType.REMOVE: "removeElement"}
_TAG_ACTION = {
    ChangeType.ADD: "setTags",
    ChangeType.UPDATE: "setTags",
    ChangeType.REMOVE: "unsetTags",
}


@dataclass(frozen=True)
class PointInformation:
    location: Location
    description: str | None = None


class TagChangeOperation:
    def __init__(self, change: FeatureChange):
        self.change = change

    def create(self) -> dict[str, Any]:
        try:
            operation_type = _ELEMENT_ACTION[self.change.kind]
        except KeyError:
            raise TaskError(f"Unsupported feature change {self.change.kind.name}") from None
        operations = []
        for tc in self.change.tag_changes:
            action = _TAG_ACTION[tc.kind]
            data = [tc.key] if action == "unsetTags" else {tc.key: tc.value}
            operations.append({"operation": action, "data": data})
        return {
            "operationType": operation_type,
            "data": {"id": self.change.identifier, "operations": operations},
        }


def cooperative_work(changes: Iterable[FeatureChange]) -> list[dict[str, Any]]:
    return [TagChangeOperation(c).create() for c in changes]


@dataclass(eq=False)
class Task:
    challenge_name: str = ""
    task_identifier: str = ""
    instruction: str = ""
    project_name: str = ""
    points: list[PointInformation] = field(default_factory=list)
    geojson: list[dict[str, Any]] | None = None
    operations: list[dict[str, Any]] = field(default_factory=list)

    # identity is (task_identifier, challenge_name); geometry and text don't matter
    def __eq__(self, other):
        if not isinstance(other, Task):
            return NotImplemented
        return (self.task_identifier, self.challenge_name) == (
            other.task_identifier,
            other.challenge_name,
        )

    def __hash__(self):
        return hash((self.task_identifier, self.challenge_name))

    def add_point(self, location: Location, description: str | None = None) -> None:
        p = PointInformation(location, description)
        if p not in self.points:
            self.points.append(p)

    def set_point(self, location: Location) -> None:
        self.add_point(location)

    def set_points(self, locations: Iterable[Location]) -> None:
        for loc in locations:
            self.add_point(loc)

    def set_cooperative_work(self, changes: Iterable[FeatureChange]) -> None:
        self.operations = cooperative_work(changes)

    def generate_task(self, parent_id: int) -> dict[str, Any]:
        task = {
            "instruction": self.instruction,
            "name": self.task_identifier,
            "parent": parent_id,
            "geometries": {"type": "FeatureCollection", "features": self._features()},
        }
        if self.operations:
            task["cooperativeWork"] = {
                "meta": {"version": 2, "type": 1},
                "operations": self.operations,
            }
        return task

    def _features(self) -> list[dict[str, Any]]:
        if not self.points and not self.geojson:
            raise TaskError(f"Could not find any features for the task [{self.task_identifier}].")
        features = []
        for p in self.points:
            props = {} if p.description is None else {"description": p.description}
            features.append(
                {
                    "type": "Feature",
                    "geometry": {"type": "Point", "coordinates": [p.location.lon, p.location.lat]},
                    "properties": props,
                }
            )
        if self.geojson:
            extra = copy.deepcopy(self.geojson)
            props = extra[0].setdefault("properties", {})
            props[CHECK_GENERATOR] = self.challenge_name
            props[FRAMEWORK_GENERATOR] = FRAMEWORK
            features.extend(extra)
        return features


def task_from_flag(flag: CheckFlag, project_name: str = "") -> Task:
    task = Task(
        challenge_name=flag.check_name,
        task_identifier=flag.identifier,
        instruction=flag.instruction,
        project_name=project_name,
    )
    for poi in flag.points:
        task.add_point(poi.location, poi.description)
    task.set_cooperative_work(RoadNameSpellingConsistencyCheck.fix_suggestions(flag))
    return task
