# io/serializer.py
import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from road_gen.config.models import RuleConfiguration
from road_gen.domain.city import CityState
from road_gen.domain.geometry import Point
from road_gen.domain.roads import RoadAttributes, RoadSegment


@dataclass(frozen=True)
class CityStateSnapshot:
    population: int
    density: float
    economic_level: float
    age: int


@dataclass(frozen=True)
class ConfigurationSnapshot:
    max_buildable_slope: float
    min_urbanization_factor: float
    minimum_road_distance: float


@dataclass(frozen=True)
class Metadata:
    generated_at: datetime
    city_state: CityStateSnapshot
    configuration: ConfigurationSnapshot


def _segment_to_dict(seg: RoadSegment) -> dict:
    return asdict(seg)


def _segment_from_dict(d: dict) -> RoadSegment:
    a = d["attributes"]
    ra = RoadAttributes(
        start=Point(float(a["start"]["x"]), float(a["start"]["y"])),
        angle=float(a["angle"]),
        length=float(a["length"]),
        road_type=str(a["road_type"]),
    )
    return RoadSegment(id=int(d["id"]), attributes=ra, created_at=int(d["created_at"]))


class RoadNetworkSerializer:
    """JSON export/import of accepted road networks, with or without a metadata block."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def _dumps(self, obj) -> str:
        return json.dumps(obj, indent=self.indent, sort_keys=True)

    def export(
        self,
        segments: list[RoadSegment],
        city_state: CityState,
        config: RuleConfiguration,
        *,
        generated_at: datetime | None = None,
    ) -> str:
        meta = Metadata(
            generated_at=generated_at or datetime.now(UTC),
            city_state=CityStateSnapshot(
                population=city_state.population,
                density=city_state.density,
                economic_level=city_state.economic_level,
                age=city_state.age,
            ),
            configuration=ConfigurationSnapshot(
                max_buildable_slope=config.max_buildable_slope,
                min_urbanization_factor=config.min_urbanization_factor,
                minimum_road_distance=config.minimum_road_distance,
            ),
        )
        meta_d = asdict(meta)
        meta_d["generated_at"] = meta.generated_at.isoformat()
        return self._dumps({"metadata": meta_d, "roads": [_segment_to_dict(s) for s in segments]})

    def import_(self, text: str) -> tuple[list[RoadSegment], Metadata]:
        doc = json.loads(text)
        m = doc["metadata"]
        meta = Metadata(
            generated_at=datetime.fromisoformat(m["generated_at"]),
            city_state=CityStateSnapshot(**m["city_state"]),
            configuration=ConfigurationSnapshot(**m["configuration"]),
        )
        return [_segment_from_dict(d) for d in doc["roads"]], meta

    def export_simple(self, segments: list[RoadSegment]) -> str:
        return self._dumps([_segment_to_dict(s) for s in segments])

    def import_simple(self, text: str) -> list[RoadSegment]:
        return [_segment_from_dict(d) for d in json.loads(text)]
