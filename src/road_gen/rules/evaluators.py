# road_gen/rules/evaluators.py
from collections.abc import Iterable

import numpy as np

from road_gen.app.protocols import ConstraintRule, GoalRule
from road_gen.domain.context import ConstraintState, GenerationContext
from road_gen.domain.roads import QueryAttributes, RoadAttributes, RoadProposal
from road_gen.rules.generators import by_priority


class ConstraintEvaluator:
    def __init__(self, rules: Iterable[ConstraintRule] = ()):
        self._rules: tuple[ConstraintRule, ...] = tuple(by_priority(rules))
        self.last_reason: str | None = None

    @property
    def rules(self) -> tuple[ConstraintRule, ...]:
        return self._rules

    def update_rules(self, rules: Iterable[ConstraintRule]) -> None:
        self._rules = tuple(by_priority(rules))

    def evaluate(
        self, qa: QueryAttributes, context: GenerationContext
    ) -> tuple[QueryAttributes, ConstraintState]:
        """
        Short-circuiting fold: each applicable rule sees the previous rule's
        adjusted query; the first failure ends evaluation.
        """
        self.last_reason = None
        current = qa
        for rule in self._rules:
            if not rule.applies_to(context):
                continue
            result = rule.evaluate(current, context)
            if result.failed:
                self.last_reason = result.reason
                return result.adjusted_query, ConstraintState.FAILED
            current = result.adjusted_query
        return current, ConstraintState.SUCCEED


class GoalEvaluator:
    def __init__(self, rules: Iterable[GoalRule] = (), *, rng: np.random.Generator | None = None):
        self._rules: tuple[GoalRule, ...] = tuple(by_priority(rules))
        self.rng = rng if rng is not None else np.random.default_rng(0)

    @property
    def rules(self) -> tuple[GoalRule, ...]:
        return self._rules

    def update_rules(self, rules: Iterable[GoalRule]) -> None:
        self._rules = tuple(by_priority(rules))

    def generate_proposals(
        self, qa: QueryAttributes, ra: RoadAttributes, context: GenerationContext
    ) -> list[RoadProposal]:
        out: list[RoadProposal] = []
        for rule in self._rules:
            if rule.applies_to(context):
                out.extend(rule.generate_proposals(qa, ra, context, self.rng))
        return out
