# runtime/rng.py
from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from zlib import crc32

import numpy as np


def _u32(x: int) -> int:
    return int(x & 0xFFFFFFFF)


def _crc32_u32(s: str) -> int:
    return _u32(crc32(s.encode("utf-8")))


@dataclass(frozen=True)
class RNGKey:
    """Hierarchical key: stream name + optional ints/strings for substreams."""

    stream: str
    parts: tuple[int, ...]  # already normalized to u32

    @classmethod
    def from_parts(cls, stream: str, *parts: object) -> RNGKey:
        norm: list[int] = [_crc32_u32(stream)]
        for p in parts:
            if isinstance(p, (int, np.integer)):
                norm.append(_u32(int(p)))
            elif isinstance(p, str):
                norm.append(_crc32_u32(p))
            else:
                norm.append(_crc32_u32(repr(p)))
        return cls(stream=stream, parts=tuple(norm))


class RNGRegistry:
    """
    Deterministic registry of numpy.random.Generator streams.
    Derivation path: [master_seed, run_id, *key.parts]
    """

    def __init__(self, master_seed: int, *, run_id: str | int = 0):
        self.master_seed = _u32(master_seed)
        self.run_tag = _crc32_u32(str(run_id))

    @cache
    def generator(self, key: RNGKey) -> np.random.Generator:
        ss = np.random.SeedSequence(entropy=[self.master_seed, self.run_tag, *key.parts])
        return np.random.Generator(np.random.PCG64(ss))

    def stream(self, name: str) -> np.random.Generator:
        return self.generator(RNGKey.from_parts(name))

    def substream(self, name: str, *parts: object) -> np.random.Generator:
        return self.generator(RNGKey.from_parts(name, *parts))


def sample_ids(ids: list[int], fraction: float, rng: np.random.Generator) -> list[int]:
    """Keep a reproducible `fraction` of `ids` (at least one when non-empty), in input order."""
    if fraction >= 1.0 or not ids:
        return list(ids)
    k = max(1, int(round(len(ids) * fraction)))
    keep = np.sort(rng.choice(len(ids), size=k, replace=False))
    return [ids[i] for i in keep]
