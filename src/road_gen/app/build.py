# road_gen/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from road_gen.app.protocols import TerrainLookup
from road_gen.config.models import ScenarioModel
from road_gen.domain.roads import RoadSegment
from road_gen.engine.generator import RoadNetworkGenerator
from road_gen.io.generation_logging import GenerationLogging  # JSON logs
from road_gen.io.recorder import MemorySink, Recorder
from road_gen.sim.hooks import NoopHooks
from road_gen.sim.rng import RNGRegistry


@dataclass
class App:
    model: ScenarioModel
    engine: RoadNetworkGenerator
    rng: RNGRegistry
    recorder: Recorder | None = None

    def run(self) -> list[RoadSegment]:
        ra, qa = self.model.seed_road.attributes()
        return self.engine.generate_network(ra, qa)


def build(
    cfg: ScenarioModel | Mapping,
    terrain: TerrainLookup,
    *,
    use_logging: bool = True,
    recorder: Recorder | None = None,
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, ScenarioModel) else ScenarioModel.model_validate(cfg)

    # 1) RNG
    rng_registry = RNGRegistry(model.seed, scenario=model.name)

    # 2) Hooks
    if use_logging and recorder is None:
        recorder = Recorder(MemorySink())
    hooks = (
        GenerationLogging(
            run_id=model.run_id,
            recorder=recorder,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )

    # 3) Engine
    engine = RoadNetworkGenerator(
        model.city.to_state(),
        terrain,
        model.rules,
        rng_registry=rng_registry,
        limits=model.limits,
        hooks=hooks,
    )
    return App(model, engine, rng_registry, recorder)
