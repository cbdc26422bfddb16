# main.py
import sys
from dataclasses import replace

import numpy as np

from road_gen.app.build import build
from road_gen.domain.city import mark_dirty
from road_gen.domain.terrain import DistrictType, TerrainMap
from road_gen.io.config import load_scenario
from road_gen.io.serializer import RoadNetworkSerializer

DEMO = {"name": "demo", "seed": 1, "limits": {"max_segments": 5000}}


def demo_terrain(size: int = 1000, seed: int = 7) -> TerrainMap:
    rng = np.random.default_rng(seed)
    slope = rng.uniform(0.0, 0.5, size=(size, size))
    urbanization = rng.uniform(0.3, 1.0, size=(size, size))
    terrain = TerrainMap(slope, urbanization)
    half = size // 2
    terrain.paint(slice(0, size), slice(0, size), DistrictType.RESIDENTIAL)
    terrain.paint(slice(half - 100, half + 100), slice(half - 100, half + 100), DistrictType.BUSINESS)
    terrain.paint(slice(0, 50), slice(0, size), DistrictType.COASTAL)
    return terrain


def run(scenario_path: str | None = None) -> str:
    cfg = load_scenario(scenario_path) if scenario_path else DEMO
    app = build(cfg, demo_terrain())

    roads = app.run()

    # age the city one year; the engine regenerates its rule sets on the dirty state
    city = app.engine.city_state
    app.engine.update_city_state(
        mark_dirty(replace(city, population=city.population + 5_000, age=city.age + 1))
    )

    return RoadNetworkSerializer().export(roads, app.engine.city_state, app.engine.config)


if __name__ == "__main__":
    print(run(sys.argv[1] if len(sys.argv) > 1 else None))
