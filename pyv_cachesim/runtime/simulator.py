from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from ..config import SimConfig
from ..utils.logging import get_logger
from .cache import CacheSimulator
from .policy import ReplacementPolicy

logger = get_logger(__name__)


@dataclass
class AccessRecord:
    address: int
    set_index: int
    tag: int
    line_index: int
    hit: bool
    cycles: int


def run(addresses: Iterable[int], config: SimConfig) -> Tuple[List[AccessRecord], Dict[str, Any]]:
    """
    Replays a trace against a fresh cache.

    Addresses are applied strictly in order. Returns one AccessRecord per
    address plus aggregate stats; `miss_rate` is None for an empty trace.
    """
    logger.debug(
        f"Running trace with S={config.num_sets} E={config.associativity} "
        f"B={config.block_size} m={config.address_bits} policy={config.policy}"
    )
    cache = CacheSimulator(config)
    records: List[AccessRecord] = []
    per_set = [{"set": i, "hits": 0, "misses": 0} for i in range(config.num_sets)]

    for address in addresses:
        result = cache.access(address)
        cycles = config.hit_time if result.hit else config.hit_time + config.miss_penalty
        records.append(AccessRecord(
            address=address,
            set_index=result.set_index,
            tag=result.tag,
            line_index=result.line_index,
            hit=result.hit,
            cycles=cycles,
        ))
        per_set[result.set_index]["hits" if result.hit else "misses"] += 1

    stats = cache.stats()
    stats["per_set"] = per_set
    stats["occupancy"] = cache.occupancy()
    return records, stats


def compare_policies(
    addresses: Sequence[int],
    config: SimConfig,
    policies: Sequence[ReplacementPolicy] = (ReplacementPolicy.LRU, ReplacementPolicy.LFU),
) -> Dict[str, Dict[str, Any]]:
    """Runs the same trace once per policy and returns the stats keyed by policy name."""
    results = {}
    for policy in policies:
        policy_config = replace(config, policy=policy)
        _, stats = run(addresses, policy_config)
        results[str(policy)] = stats
    return results
