from __future__ import annotations
import argparse
from ..config import SimConfig, ConfigurationError
from ..ir.trace_importer import load_trace, TraceFormatError
from ..runtime.simulator import run as run_sim, compare_policies
from ..utils.logging import get_logger
from ..utils.reporting import format_access, format_summary, format_comparison, generate_report

logger = get_logger("pyv-cachesim")


def _load(args):
    """Reads the trace and builds the config. A YAML config means the trace has no header."""
    has_header = not args.config
    trace = load_trace(args.trace, has_header=has_header)
    config = SimConfig.from_args(args, base=trace.header)
    return trace, config


def cmd_run(args):
    """Handles the 'run' command."""
    trace, config = _load(args)
    records, stats = run_sim(trace.addresses, config)

    if not args.quiet:
        for record in records:
            print(format_access(record))

    if stats["accesses"] == 0:
        logger.error("Trace contained no addresses; miss rate is undefined.")
        return 1
    print(format_summary(stats))

    if args.report_dir:
        generate_report(records, config, stats)
    return 0


def cmd_compare(args):
    """Handles the 'compare' command."""
    trace, config = _load(args)
    if not trace.addresses:
        logger.error("Trace contained no addresses; nothing to compare.")
        return 1
    results = compare_policies(trace.addresses, config)
    print(format_comparison(results))
    return 0


def _add_cache_args(p):
    p.add_argument("trace", nargs='?', default="-",
                   help="Path to trace file ('-' reads stdin)")
    p.add_argument("-c", "--config", type=str, default=None,
                   help="Path to YAML config file; the trace then carries no header")

    geo = p.add_argument_group('Cache Parameters (override header / YAML)')
    geo.add_argument("--sets", type=int, default=None, dest="num_sets",
                     help="Number of sets S (power of two)")
    geo.add_argument("--assoc", type=int, default=None, dest="associativity",
                     help="Lines per set E")
    geo.add_argument("--block-size", type=int, default=None, dest="block_size",
                     help="Block size B in bytes (power of two)")
    geo.add_argument("--address-bits", type=int, default=None, dest="address_bits",
                     help="Address width m in bits")
    geo.add_argument("--policy", type=str, default=None,
                     help="Replacement policy (lru or lfu; anything else runs as lfu)")
    geo.add_argument("--hit-time", type=int, default=None, dest="hit_time",
                     help="Cycles per access")
    geo.add_argument("--miss-penalty", type=int, default=None, dest="miss_penalty",
                     help="Extra cycles per miss")


def build_parser():
    p = argparse.ArgumentParser(
        prog="pyv-cachesim",
        description="Set-associative cache simulator (LRU / LFU)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Replay a trace and print H/M per access",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    _add_cache_args(pr)
    pr.add_argument("--report", type=str, default=None, dest="report_dir",
                    help="Directory to save JSON/HTML reports")
    pr.add_argument("-q", "--quiet", action="store_true",
                    help="Only print the summary line")
    pr.set_defaults(func=cmd_run)

    # --- Compare Command ---
    pc = sub.add_parser("compare", help="Replay a trace under LRU and LFU",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    _add_cache_args(pc)
    pc.set_defaults(func=cmd_compare)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (ConfigurationError, TraceFormatError, OSError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
