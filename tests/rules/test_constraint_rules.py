# tests/rules/test_constraint_rules.py
import math

import numpy as np

from road_gen.config.models import RuleConfiguration
from road_gen.domain.city import CityState
from road_gen.domain.context import ConstraintState, GenerationContext
from road_gen.domain.geometry import Point
from road_gen.domain.roads import QueryAttributes, RoadAttributes, RoadSegment
from road_gen.domain.terrain import DistrictType, TerrainMap
from road_gen.rules.constraints import (
    AngleConstraintRule,
    BoundaryConstraintRule,
    DistrictBoundaryRule,
    ProximityConstraintRule,
    TerrainConstraintRule,
)


# --- helpers ---
def _query(x, y, angle=0.0, length=2.0, main=False) -> QueryAttributes:
    return QueryAttributes(Point(x, y), angle, length, "main" if main else "local", is_main_road=main)


def _segment(x, y, angle=0.0, length=10.0, sid=0) -> RoadSegment:
    return RoadSegment(sid, RoadAttributes(Point(x, y), angle, length, "local"), created_at=0)


def _ctx(qa, terrain=None, existing=(), age=10) -> GenerationContext:
    return GenerationContext(
        current_location=qa.start,
        terrain=terrain if terrain is not None else TerrainMap.uniform(10, 10),
        city_state=CityState(10_000, 1_000.0, 0.5, age),
        existing=tuple(existing),
        query=qa,
    )


def _split_terrain() -> TerrainMap:
    """10x10: columns 0-4 residential, 5-9 business."""
    t = TerrainMap.uniform(10, 10)
    t.paint(slice(0, 10), slice(5, 10), DistrictType.BUSINESS)
    return t


# ------------------ Boundary ------------------


def test_boundary_rejects_end_point_outside_bounds():
    qa = _query(50, 50, angle=0.0, length=100)
    small = BoundaryConstraintRule(RuleConfiguration(city_bounds=(0, 0, 100, 100)))
    res = small.evaluate(qa, _ctx(qa))
    assert res.state is ConstraintState.FAILED
    assert res.reason == "Outside city bounds"
    assert res.adjusted_query == qa

    large = BoundaryConstraintRule(RuleConfiguration(city_bounds=(0, 0, 1000, 1000)))
    assert large.evaluate(qa, _ctx(qa)).state is ConstraintState.SUCCEED


def test_boundary_rejects_start_outside_bounds():
    qa = _query(-5, 50, angle=0.0, length=20)
    rule = BoundaryConstraintRule(RuleConfiguration())
    assert rule.applies_to(_ctx(qa))
    assert rule.evaluate(qa, _ctx(qa)).reason == "Outside city bounds"


# ------------------ Terrain ------------------


def test_terrain_rule_thresholds():
    slope = np.full((10, 10), 0.1)
    urban = np.full((10, 10), 0.8)
    slope[1, 1] = 0.9
    urban[2, 2] = 0.1
    terrain = TerrainMap(slope, urban)
    rule = TerrainConstraintRule(RuleConfiguration())

    ok = _query(5, 5)
    assert rule.evaluate(ok, _ctx(ok, terrain)).state is ConstraintState.SUCCEED

    steep = _query(1.5, 1.5)
    assert rule.evaluate(steep, _ctx(steep, terrain)).reason == "Slope too steep"

    barren = _query(2.5, 2.5)
    assert rule.evaluate(barren, _ctx(barren, terrain)).reason == "Low urbanization factor"

    nowhere = _query(50, 50)
    res = rule.evaluate(nowhere, _ctx(nowhere, terrain))
    assert res.failed and res.reason == "No terrain data"


def test_terrain_rule_boundary_values_pass():
    terrain = TerrainMap.uniform(4, 4, slope=0.3, urbanization=0.2)
    qa = _query(1, 1)
    assert TerrainConstraintRule(RuleConfiguration()).evaluate(qa, _ctx(qa, terrain)).state is (
        ConstraintState.SUCCEED
    )


# ------------------ Angle ------------------


def test_angle_rule_applies_only_with_existing_roads():
    rule = AngleConstraintRule(RuleConfiguration())
    qa = _query(6, 5)
    assert not rule.applies_to(_ctx(qa))
    assert rule.applies_to(_ctx(qa, existing=[_segment(5, 5)]))


def test_angle_rule_checks_nearby_intersections():
    rule = AngleConstraintRule(RuleConfiguration())
    existing = [_segment(5, 5, angle=0.0)]

    parallel = _query(6, 5, angle=0.0)
    res = rule.evaluate(parallel, _ctx(parallel, existing=existing))
    assert res.failed and res.reason == "Invalid intersection angle"

    crossing = _query(6, 5, angle=math.pi / 2)
    assert rule.evaluate(crossing, _ctx(crossing, existing=existing)).state is ConstraintState.SUCCEED

    far_away = _query(500, 500, angle=0.0)
    assert rule.evaluate(far_away, _ctx(far_away, existing=existing)).state is ConstraintState.SUCCEED


def test_angle_rule_uses_main_road_range_and_wraps():
    rule = AngleConstraintRule(RuleConfiguration())

    # 180 degrees is fine for internal roads, above the 170 degree main-road ceiling
    existing = [_segment(5, 5, angle=0.0)]
    internal = _query(6, 5, angle=math.pi)
    main = _query(6, 5, angle=math.pi, main=True)
    assert rule.evaluate(internal, _ctx(internal, existing=existing)).state is ConstraintState.SUCCEED
    assert rule.evaluate(main, _ctx(main, existing=existing)).failed

    # 0.1 vs 2*pi - 0.1 is a 0.2 rad difference after folding
    near_full_turn = [_segment(5, 5, angle=2 * math.pi - 0.1)]
    qa = _query(6, 5, angle=0.1)
    assert rule.evaluate(qa, _ctx(qa, existing=near_full_turn)).failed


def test_angle_rule_accepts_crossings_after_repeated_turns():
    # two left turns past a full circle still cross an east-west road at right angles
    rule = AngleConstraintRule(RuleConfiguration())
    existing = [_segment(5, 5, angle=0.0)]
    for heading in (5 * math.pi / 2, -5 * math.pi / 2, 9 * math.pi / 2):
        qa = _query(6, 5, angle=heading, main=True)
        assert rule.evaluate(qa, _ctx(qa, existing=existing)).state is ConstraintState.SUCCEED

    parallel = _query(6, 5, angle=4 * math.pi)
    assert rule.evaluate(parallel, _ctx(parallel, existing=existing)).failed


# ------------------ Proximity ------------------


def test_proximity_compares_end_points():
    rule = ProximityConstraintRule(RuleConfiguration())
    existing = [_segment(0, 0, angle=0.0, length=10)]  # ends at (10, 0)

    close = _query(0, 5, angle=0.0, length=10)  # ends at (10, 5)
    res = rule.evaluate(close, _ctx(close, existing=existing))
    assert res.failed and res.reason == "Too close to existing road"

    clear = _query(0, 30, angle=0.0, length=10)
    assert rule.evaluate(clear, _ctx(clear, existing=existing)).state is ConstraintState.SUCCEED

    # overlapping start points are not checked, only the ends
    fan = _query(0, 0, angle=math.pi / 2, length=10)  # ends at (0, 10)
    assert rule.evaluate(fan, _ctx(fan, existing=existing)).state is ConstraintState.SUCCEED


def test_proximity_applies_only_with_existing_roads():
    rule = ProximityConstraintRule(RuleConfiguration())
    qa = _query(1, 1)
    assert not rule.applies_to(_ctx(qa))
    assert rule.applies_to(_ctx(qa, existing=[_segment(3, 3)]))


# ------------------ District boundary ------------------


def test_district_boundary_blocks_internal_roads_only():
    terrain = _split_terrain()
    rule = DistrictBoundaryRule(RuleConfiguration())

    internal = _query(3, 5, angle=0.0, length=4)  # (3,5) residential -> (7,5) business
    res = rule.evaluate(internal, _ctx(internal, terrain))
    assert res.failed and res.reason == "Cannot cross district boundary"

    main = _query(3, 5, angle=0.0, length=4, main=True)
    assert rule.evaluate(main, _ctx(main, terrain)).state is ConstraintState.SUCCEED

    same = _query(1, 5, angle=0.0, length=2)
    assert rule.evaluate(same, _ctx(same, terrain)).state is ConstraintState.SUCCEED


def test_district_boundary_passes_on_missing_terrain():
    terrain = _split_terrain()
    rule = DistrictBoundaryRule(RuleConfiguration())

    off_end = _query(3, 5, angle=0.0, length=50)
    assert rule.evaluate(off_end, _ctx(off_end, terrain)).state is ConstraintState.SUCCEED

    off_start = _query(-20, 5, angle=0.0, length=23)
    assert rule.evaluate(off_start, _ctx(off_start, terrain)).state is ConstraintState.SUCCEED


def test_rule_priorities():
    cfg = RuleConfiguration()
    assert [
        r.priority
        for r in (
            BoundaryConstraintRule(cfg),
            TerrainConstraintRule(cfg),
            AngleConstraintRule(cfg),
            ProximityConstraintRule(cfg),
            DistrictBoundaryRule(cfg),
        )
    ] == [10, 15, 20, 25, 30]
