# sim/rng.py
from __future__ import annotations

from dataclasses import dataclass
from zlib import crc32

import numpy as np

_MASK = 0xFFFFFFFF


def _word(part: object) -> int:
    """Fold an int, string or anything else with a stable repr into 32 bits."""
    if isinstance(part, (int, np.integer)):
        return int(part) & _MASK
    text = part if isinstance(part, str) else repr(part)
    return crc32(text.encode("utf-8")) & _MASK


@dataclass(frozen=True)
class RNGKey:
    """Named stream plus optional qualifiers, e.g. ("goals", run_index)."""

    stream: str
    parts: tuple[int, ...]

    @classmethod
    def from_parts(cls, stream: str, *parts: object) -> RNGKey:
        return cls(stream=stream, parts=(_word(stream), *(_word(p) for p in parts)))


class RNGRegistry:
    """
    Deterministic numpy Generators for a generation scenario.
    Entropy is [seed, scenario, *key.parts]; nothing is cached, so each
    request starts its stream from the beginning and a rerun replays it.
    """

    def __init__(self, master_seed: int, *, scenario: str | int = 0):
        self.master_seed = _word(master_seed)
        self.scenario_tag = _word(str(scenario))

    def seed_sequence(self, key: RNGKey) -> np.random.SeedSequence:
        return np.random.SeedSequence(entropy=[self.master_seed, self.scenario_tag, *key.parts])

    def generator(self, key: RNGKey) -> np.random.Generator:
        return np.random.Generator(np.random.PCG64(self.seed_sequence(key)))

    def stream(self, name: str) -> np.random.Generator:
        return self.generator(RNGKey.from_parts(name))

    def substream(self, name: str, *parts: object) -> np.random.Generator:
        return self.generator(RNGKey.from_parts(name, *parts))
