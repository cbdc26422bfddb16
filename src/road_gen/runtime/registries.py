# runtime/registries.py
from collections.abc import Callable

from road_gen.app.protocols import ConstraintRule, GoalRule
from road_gen.config.models import RuleConfiguration
from road_gen.rules.constraints import (
    AngleConstraintRule,
    BoundaryConstraintRule,
    DistrictBoundaryRule,
    ProximityConstraintRule,
    TerrainConstraintRule,
)
from road_gen.rules.goals import CoastalGrowthRule, ConnectivityRule, DistrictPatternRule

ConstraintFactory = Callable[[RuleConfiguration], ConstraintRule]
GoalFactory = Callable[[RuleConfiguration], GoalRule]

_constraint_registry: dict[str, ConstraintFactory] = {}
_goal_registry: dict[str, GoalFactory] = {}


# ------------------- Constraint rule registry ---------------------------


def register_constraint(kind: str):
    def deco(fn: ConstraintFactory):
        _constraint_registry[kind] = fn
        return fn

    return deco


def make_constraint(kind: str, config: RuleConfiguration) -> ConstraintRule:
    try:
        factory = _constraint_registry[kind]
    except KeyError:
        raise ValueError(f"Unknown constraint kind {kind!r}") from None
    return factory(config)


def constraint_kinds() -> list[str]:
    return sorted(_constraint_registry)


register_constraint(BoundaryConstraintRule.kind)(BoundaryConstraintRule)
register_constraint(TerrainConstraintRule.kind)(TerrainConstraintRule)
register_constraint(AngleConstraintRule.kind)(AngleConstraintRule)
register_constraint(ProximityConstraintRule.kind)(ProximityConstraintRule)
register_constraint(DistrictBoundaryRule.kind)(DistrictBoundaryRule)


# ------------------- Goal rule registry ---------------------------


def register_goal(kind: str):
    def deco(fn: GoalFactory):
        _goal_registry[kind] = fn
        return fn

    return deco


def make_goal(kind: str, config: RuleConfiguration) -> GoalRule:
    try:
        factory = _goal_registry[kind]
    except KeyError:
        raise ValueError(f"Unknown goal kind {kind!r}") from None
    return factory(config)


def goal_kinds() -> list[str]:
    return sorted(_goal_registry)


register_goal(DistrictPatternRule.kind)(DistrictPatternRule)
register_goal(CoastalGrowthRule.kind)(CoastalGrowthRule)
register_goal(ConnectivityRule.kind)(ConnectivityRule)
