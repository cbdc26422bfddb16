# io/generation_logging.py
import json
import logging
import sys

from road_gen.domain.roads import RoadQueueEntry, RoadSegment
from road_gen.io.recorder import Recorder
from road_gen.io.records import ProposalRejectedRecord, SegmentAcceptedRecord
from road_gen.sim.hooks import NoopHooks


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def default_json_logger(name="road_gen", level="INFO", stream=None):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(stream or sys.stdout)
        h.setFormatter(JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


def _shape_entry(entry: RoadQueueEntry) -> dict:
    qa = entry.query_attributes
    return {
        "tick": entry.tick,
        "x": round(qa.start.x, 3),
        "y": round(qa.start.y, 3),
        "angle": round(qa.angle, 4),
        "length": round(qa.length, 3),
        "main": qa.is_main_road,
    }


class GenerationLogging(NoopHooks):
    """
    Structured JSON logs for a generation run. Lifecycle and rule changes log
    at INFO; per-candidate events only in debug mode, sampled.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1000,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id = run_id
        self.debug = debug
        self.sample_every = max(1, sample_every)
        self.recorder = recorder
        self.log = logger or default_json_logger(level=level)
        self._seen = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        self.log.log(getattr(logging, level), msg, extra={"extra": {"run_id": self.run_id, **extra}})

    def _sampled(self) -> bool:
        self._seen += 1
        return self.debug and (self._seen % self.sample_every) == 0

    # --------------- run lifecycle ------------------------

    def run_start(self, *, seed, qsize: int, segments: int):
        self._emit(
            "INFO",
            "run_start",
            seed_x=seed.start.x,
            seed_y=seed.start.y,
            seed_angle=seed.angle,
            qsize=qsize,
            segments=segments,
        )

    def run_end(self, *, accepted: int, **extra):
        self._emit("INFO", "run_end", accepted=accepted, **extra)

    def rules_regenerated(self, *, cause: str, constraints: list[str], goals: list[str]):
        self._emit("INFO", "rules_regenerated", cause=cause, constraints=constraints, goals=goals)

    # --------------- per candidate ------------------------

    def schedule(self, entry: RoadQueueEntry, *, now: int, qsize: int):
        if self._sampled():
            self._emit("DEBUG", "schedule", **_shape_entry(entry), now=now, qsize=qsize)

    def accepted(self, segment: RoadSegment, *, qsize: int, proposals: int):
        if self.recorder:
            ra = segment.attributes
            self.recorder.emit(
                SegmentAcceptedRecord(
                    run_id=self.run_id,
                    tick=segment.created_at,
                    segment_id=segment.id,
                    start=(ra.start.x, ra.start.y),
                    end=(ra.end.x, ra.end.y),
                    road_type=ra.road_type,
                    proposals=proposals,
                )
            )
        if self._sampled():
            self._emit(
                "DEBUG",
                "accepted",
                segment_id=segment.id,
                tick=segment.created_at,
                qsize=qsize,
                proposals=proposals,
            )

    def rejected(self, entry: RoadQueueEntry, *, reason: str | None, qsize: int):
        if self.recorder and self.debug:
            qa = entry.query_attributes
            self.recorder.emit(
                ProposalRejectedRecord(
                    run_id=self.run_id, tick=entry.tick, start=(qa.start.x, qa.start.y), reason=reason
                )
            )
        if self._sampled():
            self._emit("DEBUG", "rejected", **_shape_entry(entry), reason=reason, qsize=qsize)

    def error(self, entry: RoadQueueEntry, *, reason: str, **extra):
        self._emit("ERROR", "generation_error", reason=reason, **_shape_entry(entry), **extra)
