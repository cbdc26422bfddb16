# io/recorder.py
import json
import logging
import sys
from dataclasses import asdict
from typing import Protocol

log = logging.getLogger(__name__)


class Sink(Protocol):
    def write(self, rec) -> None: ...


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, rec) -> None:
        self.fp.write(json.dumps({"type": type(rec).__name__, **asdict(rec)}) + "\n")


class MemorySink:
    def __init__(self):
        self.records: list = []

    def write(self, rec) -> None:
        self.records.append(rec)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)
        self.failures = 0

    def emit(self, rec):
        for s in self.sinks:
            try:
                s.write(rec)
            except (OSError, TypeError, ValueError) as exc:
                # a broken sink must not stop generation
                self.failures += 1
                log.warning("record sink %s failed: %s", type(s).__name__, exc)
