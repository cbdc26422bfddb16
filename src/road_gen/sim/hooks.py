# sim/hooks.py
from typing import Protocol

from road_gen.domain.roads import RoadQueueEntry, RoadSegment


class GenerationHooks(Protocol):
    def run_start(self, *, seed, qsize, segments): ...
    def run_end(self, *, accepted, last_tick, qsize, stopped_by, wall_ms): ...
    def schedule(self, entry: RoadQueueEntry, *, now, qsize): ...
    def accepted(self, segment: RoadSegment, *, qsize, proposals): ...
    def rejected(self, entry: RoadQueueEntry, *, reason, qsize): ...
    def rules_regenerated(self, *, cause, constraints, goals): ...
    def error(self, entry: RoadQueueEntry, *, reason: str, **kw): ...


class NoopHooks:
    def run_start(self, **_):
        pass

    def run_end(self, **_):
        pass

    def schedule(self, *_, **__):
        pass

    def accepted(self, *_, **__):
        pass

    def rejected(self, *_, **__):
        pass

    def rules_regenerated(self, **_):
        pass

    def error(self, *_, **__):
        pass
