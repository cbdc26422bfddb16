# road_gen/domain/context.py
from dataclasses import dataclass
from enum import Enum

from road_gen.app.protocols import TerrainLookup
from road_gen.domain.city import CityState
from road_gen.domain.geometry import Point
from road_gen.domain.roads import QueryAttributes, RoadSegment


class ConstraintState(Enum):
    SUCCEED = "succeed"
    FAILED = "failed"


@dataclass(frozen=True)
class ConstraintResult:
    state: ConstraintState
    adjusted_query: QueryAttributes
    reason: str | None = None

    @classmethod
    def ok(cls, qa: QueryAttributes) -> "ConstraintResult":
        return cls(ConstraintState.SUCCEED, qa)

    @classmethod
    def fail(cls, qa: QueryAttributes, reason: str) -> "ConstraintResult":
        return cls(ConstraintState.FAILED, qa, reason)

    @property
    def failed(self) -> bool:
        return self.state is ConstraintState.FAILED


@dataclass(frozen=True)
class GenerationContext:
    """Built fresh for every popped queue entry; never stored."""

    current_location: Point
    terrain: TerrainLookup
    city_state: CityState
    existing: tuple[RoadSegment, ...]  # accepted segments at pop time
    query: QueryAttributes
