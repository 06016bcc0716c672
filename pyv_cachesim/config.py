from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import yaml
from pathlib import Path

from .runtime.policy import ReplacementPolicy
from .utils.logging import get_logger

logger = get_logger(__name__)

HEADER_FIELDS = ("num_sets", "associativity", "block_size", "address_bits",
                 "policy", "hit_time", "miss_penalty")
INT_FIELDS = tuple(name for name in HEADER_FIELDS if name != "policy")


class ConfigurationError(ValueError):
    """Raised when cache parameters cannot describe a valid cache."""


def is_power_of_two(n: int) -> bool:
    return (n > 0) and (n & (n - 1) == 0)


@dataclass
class SimConfig:
    """Cache simulator configuration."""
    # Cache geometry
    num_sets: int = 4          # S
    associativity: int = 1     # E, lines per set
    block_size: int = 16       # B, bytes
    address_bits: int = 16     # m

    # Replacement and timing
    policy: str = "LRU"
    hit_time: int = 1
    miss_penalty: int = 100

    # Input / output
    trace: str = ""
    config_file: str = ""
    report_dir: str = "out/default_run"

    # Derived properties
    set_bits: int = field(init=False)
    offset_bits: int = field(init=False)
    tag_bits: int = field(init=False)

    def __post_init__(self):
        # YAML and header values may arrive as strings
        for name in INT_FIELDS:
            value = getattr(self, name)
            try:
                setattr(self, name, int(str(value).strip()))
            except ValueError:
                raise ConfigurationError(f"Field '{name}' must be an integer, got {value!r}.") from None

        if not is_power_of_two(self.num_sets):
            raise ConfigurationError(f"Number of sets must be a power of two, got {self.num_sets}.")
        if not is_power_of_two(self.block_size):
            raise ConfigurationError(f"Block size must be a power of two, got {self.block_size}.")
        if self.associativity < 1:
            raise ConfigurationError(f"Associativity must be at least 1, got {self.associativity}.")
        if self.address_bits < 0:
            raise ConfigurationError("Address width must be non-negative.")
        if self.hit_time < 0 or self.miss_penalty < 0:
            raise ConfigurationError("Hit time and miss penalty must be non-negative.")

        # bit_length() - 1 is log2 for powers of two
        self.set_bits = self.num_sets.bit_length() - 1
        self.offset_bits = self.block_size.bit_length() - 1
        self.tag_bits = self.address_bits - (self.set_bits + self.offset_bits)
        if self.tag_bits < 0:
            raise ConfigurationError(
                f"Address width {self.address_bits} is too small for "
                f"{self.set_bits} set bits and {self.offset_bits} offset bits."
            )

        self.policy = ReplacementPolicy.parse(self.policy)

    @property
    def address_space(self) -> int:
        """Number of addressable bytes, 2**m."""
        return 1 << self.address_bits

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        with open(yaml_path, 'r') as f:
            yaml_config = yaml.safe_load(f) or {}
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(f"Config file {yaml_path} must contain a mapping.")
        for key, value in yaml_config.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                logger.warning(f"Ignoring unknown config key '{key}' in {yaml_path}")

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.__dict__)
        data["policy"] = str(self.policy)
        return data

    @classmethod
    def from_header(cls, tokens: List[str]) -> SimConfig:
        """Builds a config from the 7-token record `S E B m policy hit_time miss_penalty`."""
        if len(tokens) != len(HEADER_FIELDS):
            raise ConfigurationError(
                f"Configuration record needs {len(HEADER_FIELDS)} fields, got {len(tokens)}."
            )
        values: Dict[str, Any] = {}
        for name, token in zip(HEADER_FIELDS, tokens):
            if name == "policy":
                values[name] = token
                continue
            try:
                values[name] = int(token)
            except ValueError:
                raise ConfigurationError(f"Field '{name}' must be an integer, got '{token}'.") from None
        return cls(**values)

    @classmethod
    def from_args(cls, args, base: Optional[SimConfig] = None) -> SimConfig:
        """Factory method to create a SimConfig from parsed argparse arguments.

        Precedence (lowest first): defaults, `base` (e.g. a trace header),
        the YAML file given by `args.config`, explicit command-line values.
        """
        config = cls(**{k: getattr(base, k) for k in HEADER_FIELDS}) if base else cls()

        # 1. Load from YAML config file if provided
        if getattr(args, 'config', None):
            config.config_file = args.config
            if not Path(config.config_file).exists():
                raise ConfigurationError(f"Config file {config.config_file} not found.")
            config.update_from_yaml(config.config_file)

        # 2. Override with command-line arguments
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if value is not None and key != 'config' and hasattr(config, key):
                setattr(config, key, value)

        config.__post_init__()
        return config
