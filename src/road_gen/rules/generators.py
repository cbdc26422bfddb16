# road_gen/rules/generators.py
from road_gen.app.protocols import ConstraintRule, GoalRule, TerrainLookup
from road_gen.config.models import RuleConfiguration
from road_gen.domain.city import CityState
from road_gen.runtime.registries import make_constraint, make_goal

# city age thresholds past which optional rules switch on
ANGLE_MIN_AGE = 0
CONNECTIVITY_MIN_AGE = 5


def by_priority(rules):
    # sorted() is stable: equal priorities keep insertion order
    return sorted(rules, key=lambda r: r.priority)


class LocalConstraintGenerator:
    """Active constraint set for a city. Pure function of its inputs."""

    def generate(
        self, city_state: CityState, terrain: TerrainLookup, config: RuleConfiguration
    ) -> list[ConstraintRule]:
        kinds = ["boundary", "terrain", "proximity"]
        if city_state.age > ANGLE_MIN_AGE:
            kinds.append("angle")
        kinds.append("district_boundary")
        return by_priority(make_constraint(k, config) for k in kinds)


class GlobalGoalGenerator:
    """Active goal set for a city. Pure function of its inputs."""

    def generate(
        self, city_state: CityState, terrain: TerrainLookup, config: RuleConfiguration
    ) -> list[GoalRule]:
        kinds = ["district_pattern", "coastal_growth"]
        if city_state.age > CONNECTIVITY_MIN_AGE:
            kinds.append("connectivity")
        return by_priority(make_goal(k, config) for k in kinds)
