# tests/rules/test_goal_rules.py
import math

import numpy as np
import pytest

from road_gen.config.models import RuleConfiguration
from road_gen.domain.city import CityState
from road_gen.domain.context import GenerationContext
from road_gen.domain.geometry import Point
from road_gen.domain.roads import QueryAttributes, RoadAttributes
from road_gen.domain.terrain import DistrictType, TerrainMap
from road_gen.rules.goals import CoastalGrowthRule, ConnectivityRule, DistrictPatternRule


def _road(x=2.0, y=2.0, angle=0.0, length=3.0, main=False):
    ra = RoadAttributes(Point(x, y), angle, length, "street")
    return ra, QueryAttributes.from_attributes(ra, is_main_road=main)


def _ctx(qa, terrain) -> GenerationContext:
    return GenerationContext(qa.start, terrain, CityState(1_000, 100.0, 0.5, 10), (), qa)


def _always(district: str, **extra) -> RuleConfiguration:
    return RuleConfiguration(branching_probability={district: 1.0}, **extra)


# ------------------ District pattern ------------------


def test_district_pattern_business_grid_when_every_branch_survives():
    terrain = TerrainMap.uniform(10, 10, district=DistrictType.BUSINESS)
    ra, qa = _road(angle=0.25, length=3.0)
    rule = DistrictPatternRule(_always("business"))

    props = rule.generate_proposals(qa, ra, _ctx(qa, terrain), np.random.default_rng(1))

    assert len(props) == 3
    assert [p.road_attributes.angle for p in props] == pytest.approx(
        [0.25, 0.25 + math.pi / 2, 0.25 - math.pi / 2]
    )
    assert [p.delay for p in props] == [1, 3, 3]
    for p in props:
        assert p.road_attributes.start == ra.end
        assert p.query_attributes.start == ra.end
        assert p.road_attributes.length == pytest.approx(3.0)
        assert p.road_attributes.road_type == "street"
        assert p.query_attributes.is_main_road is False
        assert p.query_attributes.angle == p.road_attributes.angle


def test_district_pattern_skips_every_branch_at_zero_probability():
    terrain = TerrainMap.uniform(10, 10, district=DistrictType.PARK)
    ra, qa = _road()
    rule = DistrictPatternRule(RuleConfiguration(branching_probability={"park": 0.0}))
    rng = np.random.default_rng(5)
    # random() lands on exactly 0.0 with negligible probability
    assert rule.generate_proposals(qa, ra, _ctx(qa, terrain), rng) == []


def test_district_pattern_draws_once_per_offset():
    terrain = TerrainMap.uniform(10, 10, district=DistrictType.OLD_TOWN)
    ra, qa = _road(main=True)
    cfg = RuleConfiguration()
    rule = DistrictPatternRule(cfg)

    ref = np.random.default_rng(42)
    draws = [ref.random() for _ in cfg.branching_angles[DistrictType.OLD_TOWN]]
    p = cfg.branching_probability[DistrictType.OLD_TOWN]
    survivors = [i for i, u in enumerate(draws) if u <= p]

    props = rule.generate_proposals(qa, ra, _ctx(qa, terrain), np.random.default_rng(42))
    offsets = cfg.branching_angles[DistrictType.OLD_TOWN]
    assert [pr.road_attributes.angle for pr in props] == pytest.approx(
        [ra.angle + offsets[i] for i in survivors]
    )
    assert [pr.delay for pr in props] == [1 if i == 0 else 3 for i in survivors]
    assert all(pr.query_attributes.is_main_road for pr in props)
    assert all(pr.road_attributes.length == pytest.approx(ra.length * 0.6) for pr in props)


def test_district_pattern_defaults_when_cell_has_no_district():
    terrain = TerrainMap.uniform(10, 10, district=None)
    ra, qa = _road(length=5.0)
    rule = DistrictPatternRule(_always("residential"))
    props = rule.generate_proposals(qa, ra, _ctx(qa, terrain), np.random.default_rng(0))
    assert len(props) == 3
    assert props[0].road_attributes.length == pytest.approx(4.0)


def test_district_pattern_falls_back_for_unconfigured_district():
    terrain = TerrainMap.uniform(10, 10, district=DistrictType.INDUSTRIAL)
    ra, qa = _road(length=10.0)
    cfg = RuleConfiguration(
        branching_probability={},
        road_length_multiplier={},
        branching_angles={},
        fallback_branching_probability=1.0,
    )
    props = DistrictPatternRule(cfg).generate_proposals(
        qa, ra, _ctx(qa, terrain), np.random.default_rng(0)
    )
    assert [p.road_attributes.angle for p in props] == pytest.approx([0.0, math.pi / 4, -math.pi / 4])
    assert all(p.road_attributes.length == pytest.approx(8.0) for p in props)


def test_district_pattern_emits_nothing_off_terrain():
    terrain = TerrainMap.uniform(10, 10)
    ra, qa = _road(x=50.0, y=50.0)
    rule = DistrictPatternRule(_always("residential"))
    assert rule.generate_proposals(qa, ra, _ctx(qa, terrain), np.random.default_rng(0)) == []


# ------------------ Coastal growth ------------------


def test_coastal_growth_applies_only_on_coastal_cells():
    rule = CoastalGrowthRule(RuleConfiguration())
    ra, qa = _road()
    assert rule.applies_to(_ctx(qa, TerrainMap.uniform(10, 10, district=DistrictType.COASTAL)))
    assert not rule.applies_to(_ctx(qa, TerrainMap.uniform(10, 10, district=DistrictType.PARK)))
    far_ra, far_qa = _road(x=99.0, y=99.0)
    assert not rule.applies_to(_ctx(far_qa, TerrainMap.uniform(10, 10, district=DistrictType.COASTAL)))


def test_coastal_growth_continues_along_the_shore():
    terrain = TerrainMap.uniform(10, 10, district=DistrictType.COASTAL)
    ra, qa = _road(angle=0.3, length=10.0, main=True)
    props = CoastalGrowthRule(RuleConfiguration()).generate_proposals(
        qa, ra, _ctx(qa, terrain), np.random.default_rng(0)
    )
    assert len(props) == 1
    (p,) = props
    assert p.road_attributes.angle == pytest.approx(0.3)
    assert p.road_attributes.length == pytest.approx(9.0)
    assert p.road_attributes.start == ra.end
    assert p.delay == 1
    assert p.query_attributes.is_main_road


# ------------------ Connectivity ------------------


def test_connectivity_applies_iff_main_road():
    rule = ConnectivityRule(RuleConfiguration())
    terrain = TerrainMap.uniform(10, 10)
    _, main_qa = _road(main=True)
    _, local_qa = _road(main=False)
    assert rule.applies_to(_ctx(main_qa, terrain))
    assert not rule.applies_to(_ctx(local_qa, terrain))


def test_connectivity_forces_main_road_continuation():
    terrain = TerrainMap.uniform(10, 10)
    ra, qa = _road(angle=1.0, length=4.0, main=False)
    props = ConnectivityRule(RuleConfiguration()).generate_proposals(
        qa, ra, _ctx(qa, terrain), np.random.default_rng(0)
    )
    assert len(props) == 1
    assert props[0].query_attributes.is_main_road
    assert props[0].road_attributes.angle == 1.0
    assert props[0].road_attributes.length == 4.0
    assert props[0].delay == 1


def test_goal_priorities():
    cfg = RuleConfiguration()
    assert DistrictPatternRule(cfg).priority == 10
    assert CoastalGrowthRule(cfg).priority == 5
    assert ConnectivityRule(cfg).priority == 8
