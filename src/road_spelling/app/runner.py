# road_spelling/app/runner.py
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import numpy as np

from road_spelling.app.protocols import CheckHooks
from road_spelling.domain.checks.spelling_check import CheckFlag, RoadNameSpellingConsistencyCheck
from road_spelling.domain.entities.geography import Distance, Location
from road_spelling.domain.entities.road_graph import RoadGraph, Segment
from road_spelling.domain.errors import GraphDataError
from road_spelling.io.recorder import Recorder
from road_spelling.io.task import task_from_flag
from road_spelling.runtime.hooks import NoopHooks
from road_spelling.runtime.rng import sample_ids


@dataclass
class RunSummary:
    checked: int = 0
    flagged: int = 0
    errors: int = 0
    failed_ids: list[int] = field(default_factory=list)


@dataclass
class _Outcome:
    segment: Segment
    flag: CheckFlag | None = None
    error: GraphDataError | None = None


class CheckRunner:
    """
    Evaluates the check for every eligible start segment. Each start segment gets
    its own traversal, so they fan out over a thread pool; results are recorded
    in start-segment order.
    """

    def __init__(
        self,
        graph: RoadGraph,
        check: RoadNameSpellingConsistencyCheck,
        recorder: Recorder,
        *,
        hooks: CheckHooks | None = None,
        workers: int = 1,
        parent_id: int = 0,
        project_name: str = "",
        region: tuple[Location, Distance] | None = None,
        sample_fraction: float = 1.0,
        rng: np.random.Generator | None = None,
    ):
        self.graph, self.check, self.recorder = graph, check, recorder
        self.hooks = hooks or NoopHooks()
        self.workers = max(1, workers)
        self.parent_id, self.project_name = parent_id, project_name
        self.region = region
        self.sample_fraction = sample_fraction
        self.rng = rng if rng is not None else np.random.default_rng(0)
        self._starts: list[Segment] | None = None

    def start_segments(self) -> list[Segment]:
        # drawn once: the sample must not change between inspection and run
        if self._starts is None:
            pool = self.graph.segments_near(*self.region) if self.region else list(self.graph)
            ids = sorted(s.id for s in pool if self.check.valid_start(s))
            keep = sample_ids(ids, self.sample_fraction, self.rng)
            self._starts = [self.graph.segment(i) for i in keep]
        return self._starts

    def _evaluate(self, seq: int, segment: Segment) -> _Outcome:
        self.hooks.segment_start(segment, seq=seq)
        try:
            return _Outcome(segment, flag=self.check.flag(segment))
        except GraphDataError as e:
            return _Outcome(segment, error=e)

    def run(self) -> RunSummary:
        t0 = time.perf_counter()
        starts = self.start_segments()
        self.hooks.run_start(candidates=len(starts), workers=self.workers)
        summary = RunSummary()
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            outcomes = pool.map(self._evaluate, range(len(starts)), starts)
            for seq, out in enumerate(outcomes):
                summary.checked += 1
                if out.error is not None:
                    summary.errors += 1
                    summary.failed_ids.append(out.segment.id)
                    self.hooks.error(out.segment, exc=out.error, seq=seq)
                    continue
                if out.flag is None:
                    continue
                summary.flagged += 1
                self.hooks.flag(out.flag, seq=seq)
                task = task_from_flag(out.flag, project_name=self.project_name)
                self.recorder.emit(task.generate_task(self.parent_id))
        self.hooks.run_end(
            checked=summary.checked,
            flagged=summary.flagged,
            errors=summary.errors,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return summary
