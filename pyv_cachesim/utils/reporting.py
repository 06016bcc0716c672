from __future__ import annotations
import json
import struct
from dataclasses import asdict
from pathlib import Path
from typing import List, Dict, Any
from ..config import SimConfig
from ..runtime.simulator import AccessRecord
from . import viz


def format_access(record: AccessRecord) -> str:
    """One trace line: hex address and H or M."""
    return f"{record.address:#x} {'H' if record.hit else 'M'}"


def as_single_precision(value: float) -> float:
    """Rounds a double to the nearest IEEE-754 single-precision value."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _format_rate(miss_rate) -> str:
    # The miss rate is a 32-bit float printed with 6 decimals.
    return "nan" if miss_rate is None else f"{as_single_precision(miss_rate):f}"


def format_summary(stats: Dict[str, Any]) -> str:
    """Miss rate (6 decimals, single precision) and total cycles."""
    rate = _format_rate(stats.get("miss_rate"))
    return f"{rate} {stats['total_cycles']}"


def format_comparison(results: Dict[str, Dict[str, Any]]) -> str:
    lines = [f"{'policy':<8}{'hits':>8}{'misses':>8}{'miss_rate':>12}{'cycles':>10}"]
    for policy, stats in results.items():
        rate = _format_rate(stats.get("miss_rate"))
        lines.append(
            f"{policy:<8}{stats['hits']:>8}{stats['misses']:>8}{rate:>12}{stats['total_cycles']:>10}"
        )
    return "\n".join(lines)


def generate_report_json(records: List[AccessRecord], config: SimConfig, stats: Dict[str, Any]) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary from a replay."""
    timeline = []
    for i, record in enumerate(records):
        item = asdict(record)
        item["index"] = i
        item["address"] = f"{record.address:#x}"
        item["outcome"] = "H" if record.hit else "M"
        timeline.append(item)

    summary = {k: v for k, v in stats.items() if k not in ("per_set", "occupancy")}
    if stats.get("miss_rate") is not None:
        summary["hit_rate"] = 1.0 - stats["miss_rate"]

    return {
        "summary": summary,
        "per_set": stats.get("per_set", []),
        "occupancy": stats.get("occupancy", []),
        "timeline": timeline,
        "config": config.to_dict(),
    }


def generate_report(records: List[AccessRecord], config: SimConfig, stats: Dict[str, Any]):
    """Generates all report artifacts."""
    report_data = generate_report_json(records, config, stats)
    output_dir = Path(config.report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / "report.json", "w") as f:
        json.dump(report_data, f, indent=4)

    viz.export_set_chart(report_data["per_set"], str(output_dir / "report.html"))

    print(viz.export_set_chart_ascii(report_data["per_set"]))
    print(f"\nReports generated in {output_dir.absolute()}")
