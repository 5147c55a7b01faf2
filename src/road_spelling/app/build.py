# road_spelling/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from road_spelling.app.runner import CheckRunner
from road_spelling.config.models import RunConfigModel
from road_spelling.domain.checks.spelling_check import RoadNameSpellingConsistencyCheck
from road_spelling.domain.entities.geography import Distance
from road_spelling.domain.entities.road_graph import RoadGraph
from road_spelling.io.check_logging import CheckLogging  # JSON logs
from road_spelling.io.recorder import Recorder
from road_spelling.runtime.hooks import NoopHooks
from road_spelling.runtime.registries import make_sink, resolve_graph
from road_spelling.runtime.rng import RNGRegistry


@dataclass
class App:
    config: RunConfigModel
    graph: RoadGraph
    rng: RNGRegistry
    check: RoadNameSpellingConsistencyCheck
    recorder: Recorder
    runner: CheckRunner


def build(
    cfg: RunConfigModel | Mapping,
    *,
    graphs: Mapping[str, RoadGraph] | None = None,
    use_logging: bool = True,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, RunConfigModel) else RunConfigModel.model_validate(cfg)

    # 1) Graph & RNG
    graph = resolve_graph(model.graph, deps={"graphs": dict(graphs or {})})
    rng_registry = RNGRegistry(model.run.seed, run_id=model.run_id)

    # 2) Output & hooks
    recorder = Recorder(make_sink(model.output))
    hooks = (
        CheckLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )

    # 3) Check & runner
    check = RoadNameSpellingConsistencyCheck(
        model.check.max_search_distance.to_distance(),
        challenge_name=model.check.challenge_name,
    )
    region = model.run.region
    runner = CheckRunner(
        graph,
        check,
        recorder,
        hooks=hooks,
        workers=model.run.workers,
        parent_id=model.check.parent_id,
        project_name=model.check.project_name,
        region=(region.center(), Distance.meters(region.radius_m)) if region else None,
        sample_fraction=model.run.sample_fraction,
        rng=rng_registry.stream("sampling"),
    )
    return App(model, graph, rng_registry, check, recorder, runner)
