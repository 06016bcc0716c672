from __future__ import annotations
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from ..config import SimConfig


def _mask(bits: int) -> int:
    return (1 << bits) - 1


def set_index(address: int, s: int, b: int) -> int:
    """Drops the block offset, then keeps the low `s` bits."""
    return (address >> b) & _mask(s)


def tag(address: int, t: int, s: int, b: int) -> int:
    """Drops the set index and offset, then keeps the low `t` bits."""
    return (address >> (s + b)) & _mask(t)


def block_offset(address: int, b: int) -> int:
    return address & _mask(b)


def compose(tag_value: int, set_value: int, offset: int, s: int, b: int) -> int:
    """Packs (tag, set index, offset) back into an address."""
    return (tag_value << (s + b)) | (set_value << b) | offset


def decompose(address: int, config: SimConfig) -> Tuple[int, int, int]:
    """Decomposes an address into tag, set index, and offset."""
    s, b, t = config.set_bits, config.offset_bits, config.tag_bits
    return tag(address, t, s, b), set_index(address, s, b), block_offset(address, b)
