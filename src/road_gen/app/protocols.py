from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from road_gen.domain.geometry import Point
from road_gen.domain.roads import QueryAttributes, RoadAttributes, RoadProposal
from road_gen.domain.terrain import TerrainNode

if TYPE_CHECKING:
    import numpy as np

    from road_gen.domain.context import ConstraintResult, GenerationContext


# ------------- Terrain --------------------
@runtime_checkable
class TerrainLookup(Protocol):
    """
    Responsibilities:
      • Return slope, buildability and district for a world point.
      • Return None when the point carries no terrain data.
    """

    def lookup(self, p: Point) -> TerrainNode | None: ...


# ------------- Rules --------------------
@runtime_checkable
class ConstraintRule(Protocol):
    """
    Gatekeeping predicate over a candidate road.
    Lower priority runs first. Deterministic; consumes no randomness.
    """

    kind: str
    priority: int

    def applies_to(self, context: GenerationContext) -> bool: ...
    def evaluate(self, qa: QueryAttributes, context: GenerationContext) -> ConstraintResult: ...


@runtime_checkable
class GoalRule(Protocol):
    """
    Produces follow-on proposals from an accepted segment.
    Branching decisions draw from the injected generator only.
    """

    kind: str
    priority: int

    def applies_to(self, context: GenerationContext) -> bool: ...
    def generate_proposals(
        self,
        qa: QueryAttributes,
        ra: RoadAttributes,
        context: GenerationContext,
        rng: np.random.Generator,
    ) -> list[RoadProposal]: ...
