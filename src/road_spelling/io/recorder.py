# road_spelling/io/recorder.py
import json
import logging
import sys
import threading
from collections.abc import Mapping
from typing import Any

from road_spelling.app.protocols import Sink

log = logging.getLogger(__name__)


class JsonlSink:
    """One JSON document per line. Writes are serialized; workers may share a sink."""

    def __init__(self, fp=sys.stdout):
        self.fp = fp
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path: str) -> "JsonlSink":
        return cls(open(path, "a", encoding="utf-8"))

    def write(self, payload: Mapping[str, Any]) -> None:
        line = json.dumps(payload, ensure_ascii=False) + "\n"
        with self._lock:
            self.fp.write(line)
            self.fp.flush()

    def close(self) -> None:
        if self.fp not in (sys.stdout, sys.stderr):
            self.fp.close()


class MemorySink:
    def __init__(self):
        self.payloads: list = []
        self._lock = threading.Lock()

    def write(self, payload: Mapping[str, Any]) -> None:
        with self._lock:
            self.payloads.append(payload)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)
        self.failed = 0

    def emit(self, payload: Mapping[str, Any]) -> None:
        for s in self.sinks:
            try:
                s.write(payload)
            except (OSError, TypeError, ValueError):
                # one bad sink must not lose the rest of the run
                self.failed += 1
                log.exception("sink %s failed for task %s", type(s).__name__, payload.get("name"))

    def close(self) -> None:
        for s in self.sinks:
            close = getattr(s, "close", None)
            if close:
                close()
