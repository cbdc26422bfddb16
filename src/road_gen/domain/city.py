# road_gen/domain/city.py
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class CityState:
    population: int
    density: float  # people per km^2
    economic_level: float  # 0..1
    age: int  # simulation years
    needs_rule_regeneration: bool = True


def mark_dirty(state: CityState) -> CityState:
    """Flag that the active rule sets are stale for this state."""
    return replace(state, needs_rule_regeneration=True)


def transition(old: CityState | None, new: CityState) -> tuple[CityState, bool]:
    """
    Decide what the engine stores when the city state changes.
    Returns (state_to_store, regenerate). A dirty incoming state, or the first
    state an engine sees (old is None), triggers regeneration and is stored
    clean; otherwise the new state is stored as-is.
    """
    if old is None or new.needs_rule_regeneration:
        return replace(new, needs_rule_regeneration=False), True
    return new, False
