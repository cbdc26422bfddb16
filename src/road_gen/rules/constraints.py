# road_gen/rules/constraints.py
from dataclasses import dataclass
from typing import ClassVar

from road_gen.config.models import RuleConfiguration
from road_gen.domain.context import ConstraintResult, GenerationContext
from road_gen.domain.geometry import angle_between, distance
from road_gen.domain.roads import QueryAttributes


@dataclass(frozen=True)
class BoundaryConstraintRule:
    """Start and end must both fall inside the city bounds."""

    config: RuleConfiguration
    priority: int = 10
    kind: ClassVar[str] = "boundary"

    def applies_to(self, context: GenerationContext) -> bool:
        return True

    def evaluate(self, qa: QueryAttributes, context: GenerationContext) -> ConstraintResult:
        bounds = self.config.bounds
        if not bounds.contains(qa.start) or not bounds.contains(qa.end):
            return ConstraintResult.fail(qa, "Outside city bounds")
        return ConstraintResult.ok(qa)


@dataclass(frozen=True)
class TerrainConstraintRule:
    config: RuleConfiguration
    priority: int = 15
    kind: ClassVar[str] = "terrain"

    def applies_to(self, context: GenerationContext) -> bool:
        return True

    def evaluate(self, qa: QueryAttributes, context: GenerationContext) -> ConstraintResult:
        node = context.terrain.lookup(qa.start)
        if node is None:
            return ConstraintResult.fail(qa, "No terrain data")
        if node.slope > self.config.max_buildable_slope:
            return ConstraintResult.fail(qa, "Slope too steep")
        if node.urbanization < self.config.min_urbanization_factor:
            return ConstraintResult.fail(qa, "Low urbanization factor")
        return ConstraintResult.ok(qa)


@dataclass(frozen=True)
class AngleConstraintRule:
    """
    Intersection angle check against accepted segments whose start point lies
    within intersection_min_spacing of the candidate's start. Start-point
    proximity only; no true segment intersection test.
    """

    config: RuleConfiguration
    priority: int = 20
    kind: ClassVar[str] = "angle"

    def applies_to(self, context: GenerationContext) -> bool:
        return len(context.existing) > 0

    def evaluate(self, qa: QueryAttributes, context: GenerationContext) -> ConstraintResult:
        lo, hi = self.config.angle_range(qa.is_main_road)
        spacing = self.config.intersection_min_spacing
        for seg in context.existing:
            if distance(seg.attributes.start, qa.start) >= spacing:
                continue
            diff = angle_between(qa.angle, seg.attributes.angle)
            if diff < lo or diff > hi:
                return ConstraintResult.fail(qa, "Invalid intersection angle")
        return ConstraintResult.ok(qa)


@dataclass(frozen=True)
class ProximityConstraintRule:
    """Compares end point to end point, not full segment-to-segment distance."""

    config: RuleConfiguration
    priority: int = 25
    kind: ClassVar[str] = "proximity"

    def applies_to(self, context: GenerationContext) -> bool:
        return len(context.existing) > 0

    def evaluate(self, qa: QueryAttributes, context: GenerationContext) -> ConstraintResult:
        proposed_end = qa.end
        for seg in context.existing:
            if distance(proposed_end, seg.attributes.end) < self.config.minimum_road_distance:
                return ConstraintResult.fail(qa, "Too close to existing road")
        return ConstraintResult.ok(qa)


@dataclass(frozen=True)
class DistrictBoundaryRule:
    """Only main roads may cross between districts. Missing terrain passes."""

    config: RuleConfiguration
    priority: int = 30
    kind: ClassVar[str] = "district_boundary"

    def applies_to(self, context: GenerationContext) -> bool:
        return True

    def evaluate(self, qa: QueryAttributes, context: GenerationContext) -> ConstraintResult:
        start_node = context.terrain.lookup(qa.start)
        if start_node is None:
            return ConstraintResult.ok(qa)
        end_node = context.terrain.lookup(qa.end)
        if end_node is None:
            return ConstraintResult.ok(qa)
        if start_node.district != end_node.district and not qa.is_main_road:
            return ConstraintResult.fail(qa, "Cannot cross district boundary")
        return ConstraintResult.ok(qa)
