# sim/queue.py

import heapq

from road_gen.domain.roads import QueryAttributes, RoadAttributes, RoadQueueEntry


class RoadQueue:
    """
    Min-heap of pending road candidates keyed on tick.
    Equal ticks pop in insertion order (seq tie-break), so a run is
    reproducible given the same random stream.
    """

    def __init__(self):
        self._q: list[tuple[int, int, RoadQueueEntry]] = []
        self._seq = 0

    def __len__(self) -> int:
        return len(self._q)

    def __bool__(self) -> bool:
        return bool(self._q)

    def push(self, entry: RoadQueueEntry) -> None:
        if entry.tick < 0:
            raise ValueError(f"queue entries need tick >= 0, got {entry.tick}")
        self._seq += 1
        heapq.heappush(self._q, (entry.tick, self._seq, entry))

    def schedule(self, tick: int, ra: RoadAttributes, qa: QueryAttributes) -> RoadQueueEntry:
        entry = RoadQueueEntry(tick, ra, qa)
        self.push(entry)
        return entry

    def pop(self) -> RoadQueueEntry:
        _, _, entry = heapq.heappop(self._q)
        return entry

    def peek_tick(self) -> int | None:
        return self._q[0][0] if self._q else None

    def clear(self) -> None:
        self._q = []
        self._seq = 0
