from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict

from ..utils.logging import get_logger

if TYPE_CHECKING:
    from .cache import CacheSet

logger = get_logger(__name__)


class ReplacementPolicy(str, Enum):
    """Victim selection policies supported by the cache."""

    LRU = "LRU"
    LFU = "LFU"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token) -> ReplacementPolicy:
        """Case-insensitive lookup. Anything other than 'lru' selects LFU."""
        if isinstance(token, cls):
            return token
        name = str(token).strip().lower()
        if name == "lru":
            return cls.LRU
        if name != "lfu":
            # Unrecognized tokens are not rejected; they run as LFU.
            logger.warning(f"Unknown replacement policy '{token}', falling back to LFU")
        return cls.LFU


def find_lru(cache_set: CacheSet) -> int:
    """Index of the line with the oldest fill timestamp.

    Only the first `lines_used` lines are candidates; with none used yet the
    victim is line 0. Ties go to the lowest index.
    """
    worst_idx = 0
    worst_score = None
    for i in range(cache_set.lines_used):
        if worst_score is None or cache_set.last_used_at[i] < worst_score:
            worst_idx = i
            worst_score = cache_set.last_used_at[i]
    return worst_idx


def find_lfu(cache_set: CacheSet) -> int:
    """Index of the line with the fewest accesses, scanning every line.

    Never-used lines have a count of 0. Ties go to the lowest index.
    """
    worst_idx = 0
    worst_score = None
    for i, count in enumerate(cache_set.access_count):
        if worst_score is None or count < worst_score:
            worst_idx = i
            worst_score = count
    return worst_idx


VICTIM_SELECTORS: Dict[ReplacementPolicy, Callable[[CacheSet], int]] = {
    ReplacementPolicy.LRU: find_lru,
    ReplacementPolicy.LFU: find_lfu,
}


def get_victim_selector(policy: ReplacementPolicy) -> Callable[[CacheSet], int]:
    return VICTIM_SELECTORS[ReplacementPolicy.parse(policy)]
