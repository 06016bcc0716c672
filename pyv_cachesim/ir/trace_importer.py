from __future__ import annotations
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, List, Optional, Union

from ..config import SimConfig, HEADER_FIELDS

SENTINEL = -1


class TraceFormatError(ValueError):
    """Raised when a trace stream cannot be parsed."""


@dataclass
class Trace:
    """An address trace, optionally carrying the configuration record it started with."""
    addresses: List[int] = field(default_factory=list)
    header: Optional[SimConfig] = None

    def __len__(self) -> int:
        return len(self.addresses)


def parse_address(token: str) -> int:
    """Parses a hex address token; a leading 0x is optional."""
    try:
        return int(token, 16)
    except ValueError:
        raise TraceFormatError(f"Invalid hexadecimal address: '{token}'") from None


def parse_trace(text: str, has_header: bool = True) -> Trace:
    """
    Parses a whitespace-separated trace.

    With `has_header`, the first seven tokens are the configuration record
    `S E B m policy hit_time miss_penalty`. Addresses follow until the
    sentinel -1 or the end of input; anything after the sentinel is ignored.
    """
    tokens = text.split()
    trace = Trace()

    if has_header:
        n = len(HEADER_FIELDS)
        if len(tokens) < n:
            raise TraceFormatError(
                f"Trace header needs {n} fields (S E B m policy hit_time miss_penalty), got {len(tokens)}."
            )
        trace.header = SimConfig.from_header(tokens[:n])
        tokens = tokens[n:]

    for token in tokens:
        address = parse_address(token)
        if address == SENTINEL:
            break
        trace.addresses.append(address)
    return trace


def load_trace(source: Union[str, Path, IO[str]] = "-", has_header: bool = True) -> Trace:
    """Loads a trace from a path, an open text stream, or stdin ('-')."""
    if hasattr(source, "read"):
        text = source.read()
    elif str(source) == "-":
        text = sys.stdin.read()
    else:
        text = Path(source).read_text()
    return parse_trace(text, has_header=has_header)
