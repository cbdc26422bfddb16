# road_gen/rules/goals.py
from dataclasses import dataclass
from typing import ClassVar

import numpy as np

from road_gen.config.models import RuleConfiguration
from road_gen.domain.context import GenerationContext
from road_gen.domain.roads import QueryAttributes, RoadAttributes, RoadProposal
from road_gen.domain.terrain import DistrictType


def _continue_from(
    ra: RoadAttributes, *, angle: float, length: float, is_main_road: bool, delay: int
) -> RoadProposal:
    start = ra.end
    new_ra = RoadAttributes(start, angle, length, ra.road_type)
    new_qa = QueryAttributes(start, angle, length, ra.road_type, is_main_road=is_main_road)
    return RoadProposal(new_ra, new_qa, delay)


@dataclass(frozen=True)
class DistrictPatternRule:
    """
    Branches according to the district under the accepted segment's start.
    Each configured offset survives with the district's branching probability;
    the first offset (straight on) uses default_delay, the rest branch_delay,
    so continuations are processed before side streets.
    """

    config: RuleConfiguration
    priority: int = 10
    kind: ClassVar[str] = "district_pattern"

    def applies_to(self, context: GenerationContext) -> bool:
        return True

    def generate_proposals(
        self,
        qa: QueryAttributes,
        ra: RoadAttributes,
        context: GenerationContext,
        rng: np.random.Generator,
    ) -> list[RoadProposal]:
        node = context.terrain.lookup(ra.start)
        if node is None:
            return []
        district = node.district or self.config.default_district
        probability, multiplier, offsets = self.config.district_pattern(district)

        out: list[RoadProposal] = []
        for index, offset in enumerate(offsets):
            # one draw per offset, consumed even when the offset is skipped
            if rng.random() > probability:
                continue
            delay = self.config.default_delay if index == 0 else self.config.branch_delay
            out.append(
                _continue_from(
                    ra,
                    angle=ra.angle + offset,
                    length=ra.length * multiplier,
                    is_main_road=qa.is_main_road,
                    delay=delay,
                )
            )
        return out


@dataclass(frozen=True)
class CoastalGrowthRule:
    config: RuleConfiguration
    priority: int = 5
    kind: ClassVar[str] = "coastal_growth"

    def applies_to(self, context: GenerationContext) -> bool:
        node = context.terrain.lookup(context.current_location)
        return node is not None and node.district == DistrictType.COASTAL

    def generate_proposals(
        self,
        qa: QueryAttributes,
        ra: RoadAttributes,
        context: GenerationContext,
        rng: np.random.Generator,
    ) -> list[RoadProposal]:
        # follow the shoreline: same heading, slightly shorter
        return [
            _continue_from(
                ra,
                angle=ra.angle,
                length=ra.length * self.config.coastal_length_factor,
                is_main_road=qa.is_main_road,
                delay=self.config.default_delay,
            )
        ]


@dataclass(frozen=True)
class ConnectivityRule:
    """Main roads keep going straight at full length."""

    config: RuleConfiguration
    priority: int = 8
    kind: ClassVar[str] = "connectivity"

    def applies_to(self, context: GenerationContext) -> bool:
        return context.query.is_main_road

    def generate_proposals(
        self,
        qa: QueryAttributes,
        ra: RoadAttributes,
        context: GenerationContext,
        rng: np.random.Generator,
    ) -> list[RoadProposal]:
        return [
            _continue_from(
                ra,
                angle=ra.angle,
                length=ra.length,
                is_main_road=True,
                delay=self.config.default_delay,
            )
        ]
