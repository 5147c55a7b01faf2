import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from road_spelling.domain.checks.spelling_check import CHECK_NAME
from road_spelling.domain.entities.geography import Distance, Location


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1000, ge=1)


# ----------------- CHECK ---------------------


class DistanceModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    value: float = Field(ge=0)
    unit: Literal["meters", "kilometers", "miles", "feet"] = "meters"

    def to_distance(self) -> Distance:
        return Distance.of(self.value, self.unit)


class CheckModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    max_search_distance: DistanceModel = Field(
        default_factory=lambda: DistanceModel(value=0.5, unit="miles")
    )
    challenge_name: str = CHECK_NAME
    parent_id: int = 0
    project_name: str = ""


# ----------------- GRAPH ---------------------


class GraphByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    fmt: Literal["geojson", "json"] = "geojson"
    must_exist: bool = True

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


class GraphByName(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["name"] = "name"
    name: str


GraphRef = Annotated[GraphByPath | GraphByName, Field(discriminator="by")]


# ----------------- RUN ---------------------


class RegionModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    radius_m: float = Field(gt=0)

    def center(self) -> Location:
        return Location(self.lat, self.lon)


class RunModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    workers: int = Field(default=1, ge=1)
    seed: int = 123
    sample_fraction: float = Field(default=1.0, gt=0, le=1)
    region: RegionModel | None = None


# ------------------ OUTPUT -----------------------------


class OutputJsonlModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["jsonl"] = "jsonl"
    file: str | None = None  # None => stdout

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str | None) -> str | None:
        return None if v is None else os.path.expandvars(os.path.expanduser(v))


class OutputMemoryModel(BaseModel):
    """Test sink; tasks stay on the recorder."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["memory"] = "memory"


OutputUnion = Annotated[OutputJsonlModel | OutputMemoryModel, Field(discriminator="kind")]


# ------------------------------------------------------------------


class RunConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str = "local"
    graph: GraphRef
    check: CheckModel = CheckModel()
    run: RunModel = RunModel()
    log: LogModel = LogModel()
    output: OutputUnion = Field(default_factory=OutputJsonlModel)
