import yaml
import argparse
import logging
from pathlib import Path
import pytest
from pyv_cachesim.config import SimConfig, ConfigurationError
from pyv_cachesim.runtime.policy import ReplacementPolicy


def test_config_derived_bit_widths():
    """S=8, B=64, m=16 -> s=3, b=6, t=7."""
    config = SimConfig(num_sets=8, associativity=2, block_size=64, address_bits=16)

    assert config.set_bits == 3
    assert config.offset_bits == 6
    assert config.tag_bits == 7
    assert config.address_space == 65536


def test_config_single_set_single_byte_blocks():
    config = SimConfig(num_sets=1, block_size=1, address_bits=8)
    assert config.set_bits == 0
    assert config.offset_bits == 0
    assert config.tag_bits == 8


@pytest.mark.parametrize("overrides", [
    dict(num_sets=3),
    dict(num_sets=0),
    dict(block_size=24),
    dict(associativity=0),
    dict(hit_time=-1),
    dict(miss_penalty=-5),
    dict(num_sets=256, block_size=256, address_bits=15),
])
def test_config_rejects_invalid_geometry(overrides):
    with pytest.raises(ConfigurationError):
        SimConfig(**overrides)


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        SimConfig(num_sets=6)


@pytest.mark.parametrize("token, expected", [
    ("lru", ReplacementPolicy.LRU),
    ("LRU", ReplacementPolicy.LRU),
    ("LrU", ReplacementPolicy.LRU),
    ("lfu", ReplacementPolicy.LFU),
    ("LFU", ReplacementPolicy.LFU),
])
def test_config_policy_is_case_insensitive(token, expected):
    assert SimConfig(policy=token).policy is expected


def test_config_unknown_policy_falls_back_to_lfu(caplog):
    """Unrecognized policy tokens are not rejected: they run as LFU."""
    with caplog.at_level(logging.WARNING):
        config = SimConfig(policy="fifo")

    assert config.policy is ReplacementPolicy.LFU
    assert "falling back to LFU" in caplog.text


def test_config_from_header():
    config = SimConfig.from_header(["4", "1", "16", "16", "lru", "1", "100"])

    assert config.num_sets == 4
    assert config.associativity == 1
    assert config.block_size == 16
    assert config.address_bits == 16
    assert config.policy is ReplacementPolicy.LRU
    assert config.hit_time == 1
    assert config.miss_penalty == 100


def test_config_from_header_rejects_bad_fields():
    with pytest.raises(ConfigurationError):
        SimConfig.from_header(["4", "1", "16"])
    with pytest.raises(ConfigurationError):
        SimConfig.from_header(["4", "one", "16", "16", "lru", "1", "100"])


def test_config_yaml_loading(tmp_path: Path):
    """Tests that config is loaded correctly from a YAML file."""
    yaml_content = {
        'num_sets': 16,
        'associativity': 4,
        'policy': 'lfu',
    }
    yaml_file = tmp_path / "cache.yaml"
    with open(yaml_file, 'w') as f:
        yaml.dump(yaml_content, f)

    args = argparse.Namespace(config=str(yaml_file), num_sets=None, policy=None)

    config = SimConfig.from_args(args)

    assert config.num_sets == 16
    assert config.associativity == 4
    assert config.policy is ReplacementPolicy.LFU
    assert config.set_bits == 4
    assert config.config_file == str(yaml_file)


def test_config_cli_override(tmp_path: Path):
    """Tests that CLI arguments override YAML settings, and YAML overrides the base."""
    yaml_file = tmp_path / "cache.yaml"
    with open(yaml_file, 'w') as f:
        yaml.dump({'num_sets': 16, 'associativity': 4, 'miss_penalty': 50}, f)

    base = SimConfig(num_sets=2, associativity=1, hit_time=3)
    args = argparse.Namespace(
        config=str(yaml_file),
        num_sets=8,       # Override
        policy="lfu",     # Override
        associativity=None,
    )

    config = SimConfig.from_args(args, base=base)

    assert config.num_sets == 8            # CLI
    assert config.set_bits == 3            # re-derived after override
    assert config.associativity == 4       # YAML
    assert config.miss_penalty == 50       # YAML
    assert config.hit_time == 3            # base
    assert config.policy is ReplacementPolicy.LFU


def test_config_from_args_missing_yaml(tmp_path: Path):
    args = argparse.Namespace(config=str(tmp_path / "missing.yaml"))
    with pytest.raises(ConfigurationError):
        SimConfig.from_args(args)


def test_config_to_dict_is_json_friendly():
    data = SimConfig(policy="lfu").to_dict()
    assert data["policy"] == "LFU"
    assert data["tag_bits"] == 10


def test_config_yaml_string_values_are_coerced(tmp_path: Path):
    yaml_file = tmp_path / "cache.yaml"
    yaml_file.write_text('num_sets: "8"\nassociativity: "2"\nmiss_penalty: " 50 "\n')

    config = SimConfig.from_args(argparse.Namespace(config=str(yaml_file)))

    assert config.num_sets == 8
    assert config.set_bits == 3
    assert config.associativity == 2
    assert config.miss_penalty == 50


@pytest.mark.parametrize("value", ["eight", 8.5, None, True])
def test_config_non_integer_field_raises_configuration_error(value):
    with pytest.raises(ConfigurationError):
        SimConfig(num_sets=value)
