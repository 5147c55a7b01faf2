# road_spelling/runtime/resources.py
import json
import logging
from collections.abc import Callable
from functools import lru_cache
from typing import Any

from road_spelling.domain.entities.geography import Location
from road_spelling.domain.entities.road_graph import RoadGraph
from road_spelling.domain.errors import GraphDataError

log = logging.getLogger(__name__)

GraphLoader = Callable[[Any], RoadGraph]

_graph_loader_registry: dict[str, GraphLoader] = {}


def register_graph_loader(fmt: str):
    def deco(fn: GraphLoader):
        _graph_loader_registry[fmt] = fn
        return fn

    return deco


def parse_graph(doc: Any, fmt: str) -> RoadGraph:
    try:
        loader = _graph_loader_registry[fmt]
    except KeyError:
        raise ValueError(f"Unsupported graph fmt {fmt!r}") from None
    return loader(doc)


@lru_cache(maxsize=8)
def load_graph_from_path(file: str, fmt: str) -> RoadGraph:
    if fmt not in _graph_loader_registry:
        raise ValueError(f"Unsupported graph fmt {fmt!r}")
    try:
        with open(file, encoding="utf-8") as f:
            doc = json.load(f)
    except UnicodeDecodeError as e:
        raise GraphDataError(f"{file}: not valid UTF-8 ({e})") from e
    except json.JSONDecodeError as e:
        raise GraphDataError(f"{file}: not valid JSON ({e})") from e
    return parse_graph(doc, fmt)


# ---------------------- helpers ----------------------------


def _segment_id(raw: Any, where: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise GraphDataError(f"{where}: segment id {raw!r} is not an integer") from None


def _location(pair: Any, *, lon_first: bool, sid: int) -> Location | None:
    """Best effort: unusable coordinates become None and fail later, per traversal."""
    try:
        # positions may carry a third (altitude) value
        if len(pair) < 2:
            raise ValueError("need at least two values")
        a, b = float(pair[0]), float(pair[1])
        return Location(b, a) if lon_first else Location(a, b)
    except (TypeError, ValueError, KeyError, GraphDataError) as e:
        log.warning("segment %s: unusable coordinate %r (%s)", sid, pair, e)
        return None


def _add(g: RoadGraph, sid: int, start, end, tags: dict[str, str]) -> None:
    try:
        g.add(sid, start, end, tags)
    except ValueError as e:
        raise GraphDataError(str(e), segment_id=sid) from e


def _tags(props: dict) -> dict[str, str]:
    return {str(k): str(v) for k, v in props.items() if v is not None}


# ---------------------- formats ----------------------------


@register_graph_loader("geojson")
def read_geojson_graph(doc: Any) -> RoadGraph:
    if not isinstance(doc, dict) or doc.get("type") != "FeatureCollection":
        raise GraphDataError("geojson graph must be a FeatureCollection")
    g = RoadGraph()
    for k, feat in enumerate(doc.get("features") or []):
        if not isinstance(feat, dict):
            raise GraphDataError(f"feature[{k}] is not an object")
        props = feat.get("properties") or {}
        if not isinstance(props, dict):
            raise GraphDataError(f"feature[{k}]: properties must be an object")
        props = dict(props)
        sid = _segment_id(props.pop("id", feat.get("id")), f"feature[{k}]")
        geom = feat.get("geometry")
        line = isinstance(geom, dict) and geom.get("type") == "LineString"
        coords = geom.get("coordinates") if line else None
        if not isinstance(coords, list) or len(coords) < 2:
            log.warning("segment %s: missing or malformed LineString geometry", sid)
            start = end = None
        else:
            start = _location(coords[0], lon_first=True, sid=sid)
            end = _location(coords[-1], lon_first=True, sid=sid)
        _add(g, sid, start, end, _tags(props))
    return g


@register_graph_loader("json")
def read_json_graph(doc: Any) -> RoadGraph:
    if not isinstance(doc, dict) or not isinstance(doc.get("segments"), list):
        raise GraphDataError("json graph must be an object with a 'segments' list")
    g = RoadGraph()
    for k, raw in enumerate(doc["segments"]):
        if not isinstance(raw, dict):
            raise GraphDataError(f"segments[{k}] is not an object")
        sid = _segment_id(raw.get("id"), f"segments[{k}]")
        tags = raw.get("tags") or {}
        if not isinstance(tags, dict):
            raise GraphDataError(f"segments[{k}]: tags must be an object")
        start = _location(raw.get("start"), lon_first=False, sid=sid)
        end = _location(raw.get("end"), lon_first=False, sid=sid)
        _add(g, sid, start, end, _tags(tags))
    return g
