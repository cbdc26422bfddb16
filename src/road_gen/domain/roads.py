# road_gen/domain/roads.py
from dataclasses import dataclass, field

from road_gen.domain.geometry import Point, end_point


@dataclass(frozen=True)
class RoadAttributes:
    """Committed geometry of a road segment."""

    start: Point
    angle: float  # radians
    length: float
    road_type: str

    @property
    def end(self) -> Point:
        return end_point(self.start, self.angle, self.length)


@dataclass(frozen=True)
class QueryAttributes:
    """Candidate geometry under validation; constraint rules may hand back an adjusted copy."""

    start: Point
    angle: float
    length: float
    road_type: str
    is_main_road: bool = False

    @property
    def end(self) -> Point:
        return end_point(self.start, self.angle, self.length)

    @classmethod
    def from_attributes(cls, ra: RoadAttributes, *, is_main_road: bool = False) -> "QueryAttributes":
        return cls(ra.start, ra.angle, ra.length, ra.road_type, is_main_road=is_main_road)


@dataclass(frozen=True)
class RoadProposal:
    road_attributes: RoadAttributes
    query_attributes: QueryAttributes
    delay: int  # ticks to wait before the candidate is considered


@dataclass(order=True, frozen=True)
class RoadQueueEntry:
    tick: int
    road_attributes: RoadAttributes = field(compare=False)
    query_attributes: QueryAttributes = field(compare=False)


@dataclass(frozen=True)
class RoadSegment:
    id: int
    attributes: RoadAttributes
    created_at: int  # tick the segment was accepted on
