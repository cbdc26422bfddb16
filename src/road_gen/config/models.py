import math
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from road_gen.domain.city import CityState
from road_gen.domain.geometry import Bounds, to_point
from road_gen.domain.roads import QueryAttributes, RoadAttributes
from road_gen.domain.terrain import DistrictType

Probability = Annotated[float, Field(ge=0.0, le=1.0)]
Multiplier = Annotated[float, Field(gt=0.0)]

_D = DistrictType


def _deg(x: float) -> float:
    return x * math.pi / 180


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(1, ge=1)


# ----------------- RULE PARAMETERS ---------------------


class RuleConfiguration(BaseModel):
    """Every threshold the constraint and goal rules read. Validated on construction."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    # boundary: (x, y, width, height)
    city_bounds: tuple[float, float, float, float] = (0.0, 0.0, 1000.0, 1000.0)

    # intersection angles, radians in [0, pi]
    main_road_angle_min: float = _deg(60)
    main_road_angle_max: float = _deg(170)
    internal_road_angle_min: float = _deg(30)
    internal_road_angle_max: float = math.pi

    # distances
    minimum_road_distance: float = Field(10.0, ge=0.0)
    intersection_min_spacing: float = Field(50.0, ge=0.0)

    # terrain
    max_buildable_slope: Probability = 0.3
    min_urbanization_factor: Probability = 0.2

    # per-district growth patterns
    branching_probability: dict[DistrictType, Probability] = Field(
        default_factory=lambda: {
            _D.BUSINESS: 0.7,
            _D.OLD_TOWN: 0.9,
            _D.RESIDENTIAL: 0.6,
            _D.INDUSTRIAL: 0.5,
            _D.PARK: 0.3,
            _D.COASTAL: 0.6,
        }
    )
    road_length_multiplier: dict[DistrictType, Multiplier] = Field(
        default_factory=lambda: {
            _D.BUSINESS: 1.0,
            _D.OLD_TOWN: 0.6,
            _D.RESIDENTIAL: 0.8,
            _D.INDUSTRIAL: 1.2,
            _D.PARK: 0.5,
            _D.COASTAL: 0.7,
        }
    )
    branching_angles: dict[DistrictType, list[float]] = Field(
        default_factory=lambda: {
            _D.BUSINESS: [0.0, math.pi / 2, -math.pi / 2],  # grid
            _D.OLD_TOWN: [0.0, math.pi / 6, -math.pi / 6, math.pi / 4, -math.pi / 4],  # organic
            _D.RESIDENTIAL: [0.0, math.pi / 3, -math.pi / 3],
            _D.INDUSTRIAL: [0.0, math.pi / 2, -math.pi / 2],
            _D.PARK: [0.0, math.pi / 4, -math.pi / 4],
            _D.COASTAL: [0.0, math.pi / 4, -math.pi / 4],
        }
    )

    # used when a district is missing from the maps above
    default_district: DistrictType = DistrictType.RESIDENTIAL
    fallback_branching_probability: Probability = 0.5
    fallback_length_multiplier: Multiplier = 0.8
    fallback_branching_angles: list[float] = Field(
        default_factory=lambda: [0.0, math.pi / 4, -math.pi / 4]
    )

    coastal_length_factor: Multiplier = 0.9

    # scheduling, in ticks
    default_delay: int = Field(1, ge=1)
    branch_delay: int = Field(3, ge=1)

    @field_validator("city_bounds")
    @classmethod
    def _positive_extent(cls, v: tuple[float, float, float, float]):
        if not all(math.isfinite(x) for x in v):
            raise ValueError("city_bounds must be finite")
        if v[2] <= 0 or v[3] <= 0:
            raise ValueError("city_bounds width and height must be > 0")
        return v

    @field_validator(
        "main_road_angle_min",
        "main_road_angle_max",
        "internal_road_angle_min",
        "internal_road_angle_max",
    )
    @classmethod
    def _angle_in_range(cls, v: float, info: ValidationInfo) -> float:
        # compared against differences folded into [0, pi]
        if not 0.0 <= v <= math.pi + 1e-9:
            raise ValueError(f"{info.field_name} must be within [0, pi], got {v}")
        return v

    @field_validator("branching_angles", "fallback_branching_angles")
    @classmethod
    def _finite_offsets(cls, v, info: ValidationInfo):
        tables = v.items() if isinstance(v, dict) else [(None, v)]
        for district, offsets in tables:
            if any(not math.isfinite(a) for a in offsets):
                where = info.field_name if district is None else f"{info.field_name}[{district.value}]"
                raise ValueError(f"{where} must be finite")
        return v

    @model_validator(mode="after")
    def _check_ranges(self):
        if self.main_road_angle_min > self.main_road_angle_max:
            raise ValueError("main_road_angle_min must be <= main_road_angle_max")
        if self.internal_road_angle_min > self.internal_road_angle_max:
            raise ValueError("internal_road_angle_min must be <= internal_road_angle_max")
        return self

    # ---- read helpers used by the rules ----

    @property
    def bounds(self) -> Bounds:
        return Bounds(*self.city_bounds)

    def angle_range(self, is_main_road: bool) -> tuple[float, float]:
        if is_main_road:
            return self.main_road_angle_min, self.main_road_angle_max
        return self.internal_road_angle_min, self.internal_road_angle_max

    def district_pattern(self, district: DistrictType) -> tuple[float, float, list[float]]:
        """(branching probability, length multiplier, angle offsets) for a district."""
        return (
            self.branching_probability.get(district, self.fallback_branching_probability),
            self.road_length_multiplier.get(district, self.fallback_length_multiplier),
            self.branching_angles.get(district, self.fallback_branching_angles),
        )


# ------------------ ENGINE -----------------------------


class EngineLimitsModel(BaseModel):
    """Optional ceilings on a single generation run. None disables a limit."""

    model_config = ConfigDict(extra="forbid")
    max_segments: int | None = Field(None, ge=1)
    max_tick: int | None = Field(None, ge=0)


class CityStateModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    population: int = Field(10_000, ge=0)
    density: float = Field(1_500.0, ge=0.0)
    economic_level: Probability = 0.5
    age: int = Field(0, ge=0)

    def to_state(self) -> CityState:
        return CityState(
            population=self.population,
            density=self.density,
            economic_level=self.economic_level,
            age=self.age,
        )


class SeedRoadModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    start: tuple[float, float] = (500.0, 500.0)
    angle: float = 0.0
    length: float = Field(100.0, gt=0.0)
    road_type: str = "main"
    is_main_road: bool = True

    def attributes(self) -> tuple[RoadAttributes, QueryAttributes]:
        ra = RoadAttributes(to_point(self.start), self.angle, self.length, self.road_type)
        return ra, QueryAttributes.from_attributes(ra, is_main_road=self.is_main_road)


# ------------------------------------------------------------------


class ScenarioModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    run_id: str = "local"
    seed: int = 0
    log: LogModel = LogModel()
    rules: RuleConfiguration = Field(default_factory=RuleConfiguration)
    city: CityStateModel = Field(default_factory=CityStateModel)
    limits: EngineLimitsModel = Field(default_factory=EngineLimitsModel)
    seed_road: SeedRoadModel = Field(default_factory=SeedRoadModel)
