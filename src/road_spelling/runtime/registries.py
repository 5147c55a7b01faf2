# runtime/registries.py
import os
from collections.abc import Callable
from typing import Any

from road_spelling.app.protocols import Sink
from road_spelling.config.models import (
    GraphByName,
    GraphByPath,
    GraphRef,
    OutputJsonlModel,
    OutputMemoryModel,
    OutputUnion,
)
from road_spelling.domain.entities.road_graph import RoadGraph
from road_spelling.io.recorder import JsonlSink, MemorySink
from road_spelling.runtime.resources import load_graph_from_path

SinkFactory = Callable[[OutputUnion, dict], Sink]

_sink_registry: dict[str, SinkFactory] = {}


# ----------------------- Graphs ----------------------------


def resolve_graph(ref: GraphRef | None, *, deps: dict) -> RoadGraph:
    """
    deps can include:
      - 'graphs': dict[str, RoadGraph]  # prebuilt graphs by name
      - 'graph': RoadGraph              # a direct fallback/default
    """
    if ref is None:
        if "graph" in deps:
            return deps["graph"]
        raise ValueError("No graph provided")
    if isinstance(ref, GraphByName):
        return deps["graphs"][ref.name]  # raises KeyError if missing
    if isinstance(ref, GraphByPath):
        if not os.path.exists(ref.file):
            if ref.must_exist:
                raise FileNotFoundError(ref.file)
            return RoadGraph()
        return load_graph_from_path(ref.file, ref.fmt)
    raise TypeError(ref)


# ----------------------- Sinks ----------------------------


def register_sink(kind: str):
    def deco(fn: SinkFactory):
        _sink_registry[kind] = fn
        return fn

    return deco


def make_sink(cfg: OutputUnion, *, deps: dict[str, Any] | None = None) -> Sink:
    try:
        factory = _sink_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown output kind {cfg.kind!r}") from None
    return factory(cfg, deps or {})


@register_sink("jsonl")
def _make_jsonl(cfg: OutputJsonlModel, deps):
    return JsonlSink.open(cfg.file) if cfg.file else JsonlSink()


@register_sink("memory")
def _make_memory(cfg: OutputMemoryModel, deps):
    return MemorySink()
