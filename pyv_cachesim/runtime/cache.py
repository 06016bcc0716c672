from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from ..config import SimConfig
from ..utils.logging import get_logger
from . import address as addr
from .policy import get_victim_selector

logger = get_logger(__name__)


class EmptyTraceError(ValueError):
    """Raised when a rate is requested before any access was simulated."""


class Outcome(str, Enum):
    HIT = "H"
    MISS = "M"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class AccessResult:
    outcome: Outcome
    set_index: int
    tag: int
    line_index: int

    @property
    def hit(self) -> bool:
        return self.outcome is Outcome.HIT


class CacheLine:
    """Represents a single line in a cache set."""
    def __init__(self):
        self.valid = False
        self.tag = -1


class CacheSet:
    """A fixed group of lines with per-line LRU timestamps and LFU counts."""
    def __init__(self, associativity: int):
        self.lines = [CacheLine() for _ in range(associativity)]
        self.last_used_at = [0] * associativity
        self.access_count = [0] * associativity
        self.lines_used = 0

    @property
    def associativity(self) -> int:
        return len(self.lines)

    def find_line(self, tag: int) -> int | None:
        """Index of the first valid line holding `tag`, or None."""
        for i, line in enumerate(self.lines):
            if line.valid and line.tag == tag:
                return i
        return None

    def valid_lines(self) -> int:
        return sum(1 for line in self.lines if line.valid)


class CacheSimulator:
    """
    A set-associative cache replaying one address at a time.
    This class classifies hits and misses and keeps the counters; the cycle
    cost is derived from those counters, not tracked per access.
    """
    def __init__(self, config: SimConfig):
        self.config = config
        self.sets = [CacheSet(config.associativity) for _ in range(config.num_sets)]
        self.select_victim = get_victim_selector(config.policy)
        self.hits = 0
        self.misses = 0
        # Logical clock, advanced once per fill
        self.clock = 0

    def access(self, address: int) -> AccessResult:
        """Looks up `address`, filling a victim line on a miss."""
        tag, index, _ = addr.decompose(address, self.config)
        cache_set = self.sets[index]

        line_index = cache_set.find_line(tag)
        if line_index is not None:
            # Recency is left untouched on a hit.
            cache_set.access_count[line_index] += 1
            self.hits += 1
            return AccessResult(Outcome.HIT, index, tag, line_index)

        victim = self.select_victim(cache_set)
        logger.debug(f"Miss on {address:#x}: set {index}, replacing line {victim}")
        self.install(cache_set, tag, victim)
        self.misses += 1
        return AccessResult(Outcome.MISS, index, tag, victim)

    def install(self, cache_set: CacheSet, tag: int, line_index: int):
        """Fills (or overwrites) a line with `tag`."""
        line = cache_set.lines[line_index]
        line.tag = tag
        line.valid = True
        if cache_set.lines_used < cache_set.associativity:
            cache_set.lines_used += 1
        self.clock += 1
        cache_set.last_used_at[line_index] = self.clock
        cache_set.access_count[line_index] += 1

    @property
    def accesses(self) -> int:
        return self.hits + self.misses

    @property
    def miss_rate(self) -> float:
        if self.accesses == 0:
            raise EmptyTraceError("Miss rate is undefined before any access.")
        return self.misses / self.accesses

    @property
    def total_cycles(self) -> int:
        return self.accesses * self.config.hit_time + self.misses * self.config.miss_penalty

    def stats(self) -> Dict[str, object]:
        return {
            "policy": str(self.config.policy),
            "hits": self.hits,
            "misses": self.misses,
            "accesses": self.accesses,
            "miss_rate": self.miss_rate if self.accesses else None,
            "total_cycles": self.total_cycles,
        }

    def occupancy(self) -> List[int]:
        """Valid line count for each set."""
        return [s.valid_lines() for s in self.sets]
