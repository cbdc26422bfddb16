# engine/generator.py

import time
from collections.abc import Mapping

from road_gen.app.protocols import ConstraintRule, GoalRule, TerrainLookup
from road_gen.config.models import EngineLimitsModel, RuleConfiguration
from road_gen.domain.city import CityState, transition
from road_gen.domain.context import ConstraintState, GenerationContext
from road_gen.domain.roads import QueryAttributes, RoadAttributes, RoadSegment
from road_gen.rules.evaluators import ConstraintEvaluator, GoalEvaluator
from road_gen.rules.generators import GlobalGoalGenerator, LocalConstraintGenerator
from road_gen.sim.hooks import GenerationHooks, NoopHooks
from road_gen.sim.queue import RoadQueue
from road_gen.sim.rng import RNGRegistry


class RoadNetworkGenerator:
    """
    Queue-driven road growth. Pops the earliest candidate, validates it
    against the active constraints and, when accepted, commits a segment and
    schedules whatever the active goals propose.

    The committed segment uses the popped entry's own RoadAttributes; the
    constraint-adjusted query only feeds goal generation.
    """

    def __init__(
        self,
        city_state: CityState,
        terrain: TerrainLookup,
        config: RuleConfiguration | Mapping | None = None,
        *,
        rng_registry: RNGRegistry | None = None,
        limits: EngineLimitsModel | None = None,
        hooks: GenerationHooks | None = None,
    ):
        self._config = _validated(config)
        self._terrain = terrain
        self._city, _ = transition(None, city_state)
        self._limits = limits or EngineLimitsModel()
        self._hooks = hooks or NoopHooks()
        self._rng_registry = rng_registry or RNGRegistry(0)
        self._runs = 0

        self._q = RoadQueue()
        self._segments: list[RoadSegment] = []

        self._constraint_generator = LocalConstraintGenerator()
        self._goal_generator = GlobalGoalGenerator()
        self._constraints = ConstraintEvaluator()
        self._goals = GoalEvaluator()
        self._regenerate_rules(cause="init")

    # ------------------ state ------------------------------

    @property
    def city_state(self) -> CityState:
        return self._city

    @property
    def config(self) -> RuleConfiguration:
        return self._config

    @property
    def terrain(self) -> TerrainLookup:
        return self._terrain

    @property
    def constraint_rules(self) -> tuple[ConstraintRule, ...]:
        return self._constraints.rules

    @property
    def goal_rules(self) -> tuple[GoalRule, ...]:
        return self._goals.rules

    def get_segments(self) -> list[RoadSegment]:
        return list(self._segments)

    def get_queue_size(self) -> int:
        return len(self._q)

    def reset(self) -> None:
        """Drop accepted segments and pending candidates; keep state, rules and seed."""
        self._segments = []
        self._q.clear()
        self._runs = 0

    # ------------------ updates ------------------------------

    def update_city_state(self, new: CityState) -> None:
        self._city, regenerate = transition(self._city, new)
        if regenerate:
            self._regenerate_rules(cause="city_state")

    def update_terrain_map(self, new: TerrainLookup) -> None:
        self._terrain = new
        self._regenerate_rules(cause="terrain")

    def update_configuration(self, new: RuleConfiguration | Mapping) -> None:
        # validate before touching anything so a bad config leaves the engine intact
        self._config = _validated(new)
        self._regenerate_rules(cause="configuration")

    def _regenerate_rules(self, *, cause: str) -> None:
        constraints = self._constraint_generator.generate(self._city, self._terrain, self._config)
        goals = self._goal_generator.generate(self._city, self._terrain, self._config)
        self._constraints.update_rules(constraints)
        self._goals.update_rules(goals)
        self._hooks.rules_regenerated(
            cause=cause,
            constraints=[r.kind for r in constraints],
            goals=[r.kind for r in goals],
        )

    # ------------------ main loop ------------------------------

    def generate_network(self, seed_attrs: RoadAttributes, seed_query: QueryAttributes) -> list[RoadSegment]:
        t0 = time.perf_counter()
        self._goals.rng = self._rng_registry.substream("goals", self._runs)
        self._runs += 1

        self._schedule(0, seed_attrs, seed_query, now=0)
        self._hooks.run_start(seed=seed_attrs, qsize=len(self._q), segments=len(self._segments))

        max_tick = self._limits.max_tick
        max_segments = self._limits.max_segments
        accepted = 0
        last_tick = 0
        stopped_by = "empty"
        while self._q:
            if max_tick is not None and self._q.peek_tick() > max_tick:
                stopped_by = "max_tick"
                break
            if max_segments is not None and accepted >= max_segments:
                stopped_by = "max_segments"
                break

            entry = self._q.pop()
            last_tick = entry.tick
            qa = entry.query_attributes
            context = GenerationContext(
                current_location=qa.start,
                terrain=self._terrain,
                city_state=self._city,
                existing=tuple(self._segments),
                query=qa,
            )

            adjusted, state = self._constraints.evaluate(qa, context)
            if state is ConstraintState.FAILED:
                self._hooks.rejected(entry, reason=self._constraints.last_reason, qsize=len(self._q))
                continue

            # every delay is checked before the segment or any sibling is committed
            proposals = self._goals.generate_proposals(adjusted, entry.road_attributes, context)
            for p in proposals:
                if p.delay < 1:
                    self._hooks.error(entry, reason="non_positive_delay", delay=p.delay)
                    raise RuntimeError(f"proposal delay must be >= 1, got {p.delay}")

            segment = RoadSegment(
                id=len(self._segments), attributes=entry.road_attributes, created_at=entry.tick
            )
            self._segments.append(segment)
            accepted += 1
            for p in proposals:
                self._schedule(
                    entry.tick + p.delay, p.road_attributes, p.query_attributes, now=entry.tick
                )
            self._hooks.accepted(segment, qsize=len(self._q), proposals=len(proposals))

        self._hooks.run_end(
            accepted=accepted,
            last_tick=last_tick,
            qsize=len(self._q),
            stopped_by=stopped_by,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return list(self._segments)

    def _schedule(self, tick: int, ra: RoadAttributes, qa: QueryAttributes, *, now: int) -> None:
        entry = self._q.schedule(tick, ra, qa)
        self._hooks.schedule(entry, now=now, qsize=len(self._q))


def _validated(config: RuleConfiguration | Mapping | None) -> RuleConfiguration:
    if config is None:
        return RuleConfiguration()
    if isinstance(config, RuleConfiguration):
        return config
    return RuleConfiguration.model_validate(config)
