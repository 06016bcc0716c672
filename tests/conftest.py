import pytest
from pyv_cachesim.config import SimConfig


@pytest.fixture
def make_config():
    """Factory for SimConfig with small defaults: one set, 16-byte blocks, 16-bit addresses."""
    def _make(**overrides):
        params = dict(num_sets=1, associativity=2, block_size=16, address_bits=16,
                      policy="LRU", hit_time=1, miss_penalty=100)
        params.update(overrides)
        return SimConfig(**params)
    return _make


@pytest.fixture
def sample_trace_text():
    """The 4-set direct-mapped trace where 0x10 lands in a different set than 0x0."""
    return "4 1 16 16 LRU 1 100\n0x0\n0x10\n0x0\n-1\n"
