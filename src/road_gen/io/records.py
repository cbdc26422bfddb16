# road_gen/io/records.py

from dataclasses import dataclass


# Analytics records emitted by the logging hooks (not queue entries!)
@dataclass
class GenerationRecord:
    run_id: str
    tick: int  # simulation tick the record refers to


@dataclass
class SegmentAcceptedRecord(GenerationRecord):
    segment_id: int
    start: tuple[float, float]
    end: tuple[float, float]
    road_type: str
    proposals: int  # follow-on candidates scheduled from this segment


@dataclass
class ProposalRejectedRecord(GenerationRecord):
    start: tuple[float, float]
    reason: str | None = None
