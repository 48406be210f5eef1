"""
PatternMatch - Command Line Entry Point

Runs the matching engines from the command line:

    patternmatch quick
    patternmatch benchmark --preset medium --workers 4
    patternmatch scalability --workers 1 2 4 8
    patternmatch custom --generate 100000 --pattern ACGTAC
    patternmatch custom --text "ABABDABACD" --pattern ABA --workers 3

Exit status is 0 when every parallel result matched its sequential baseline,
1 when a verification failed, and 2 for invalid input.
"""

import argparse
import os
import sys

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from patternmatch.benchmark import (
    format_benchmark,
    format_scalability,
    run_benchmark,
    run_scalability,
)
from patternmatch.config import get_benchmark_preset
from patternmatch.data_generator import TextGenerator
from patternmatch.logging_config import close_debug_log, error, info, set_verbose
from patternmatch.matching import create_default_engines
from patternmatch.matching.aho_corasick import AhoCorasickEngine
from patternmatch.matching.base import InvalidPatternError, to_symbols
from patternmatch.system_resources import get_resource_summary, resolve_worker_count


def _generate_input(preset: dict, seed: int | None) -> tuple[bytes, bytes]:
    generator = TextGenerator(seed=preset['seed'] if seed is None else seed)
    text = generator.generate_text(preset['text_length'], preset['alphabet'])
    pattern = generator.extract_pattern(text, preset['pattern_length'])
    return text, pattern


def cmd_quick(args) -> int:
    """Search the fixed demo text with every engine and print the positions."""
    preset = get_benchmark_preset('quick')
    text = to_symbols(preset['text'])
    pattern = to_symbols(preset['pattern'])

    print(f"Text:    {preset['text']}")
    print(f"Pattern: {preset['pattern']}")
    print()

    for engine in create_default_engines(patterns=[pattern]):
        if isinstance(engine, AhoCorasickEngine):
            result = engine.search_sequential(text)
        else:
            result = engine.search_sequential(text, pattern)
        positions = ", ".join(str(p) for p in result.positions)
        print(f"{engine.name} found matches at positions: [{positions}]")
    return 0


def cmd_benchmark(args) -> int:
    """Benchmark all engines on a generated text from a preset."""
    preset = get_benchmark_preset(args.preset)
    text, pattern = _generate_input(preset, args.seed)
    workers = resolve_worker_count(args.workers)

    info(f"[CLI] Benchmark preset '{args.preset}': {len(text)} symbols, {workers} workers")
    entries = run_benchmark(text, pattern, workers)
    print(format_benchmark(text, pattern, workers, entries))
    return 0 if all(entry.verified for entry in entries) else 1


def cmd_scalability(args) -> int:
    """Print speedup per engine for several worker counts."""
    preset = get_benchmark_preset('scalability')
    if args.length is not None:
        preset['text_length'] = args.length
    text, pattern = _generate_input(preset, args.seed)
    worker_counts = args.workers or preset.get('worker_counts', [1, 2, 4, 8])

    print(f"Text:    {len(text):,} symbols")
    print(f"Pattern: {len(pattern)} symbols\n")
    print(format_scalability(run_scalability(text, pattern, worker_counts)))
    return 0


def cmd_custom(args) -> int:
    """Benchmark a user-supplied (or generated) text and pattern."""
    if args.generate is not None:
        text = TextGenerator(seed=args.seed).generate_text(args.generate)
        print(f"Generated {args.generate:,} symbols.")
    else:
        text = to_symbols(args.text, "text")
    pattern = to_symbols(args.pattern, "pattern")
    workers = resolve_worker_count(args.workers)

    entries = run_benchmark(text, pattern, workers)
    print(format_benchmark(text, pattern, workers, entries))
    return 0 if all(entry.verified for entry in entries) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patternmatch",
        description="Sequential and parallel KMP, Boyer-Moore and Aho-Corasick search.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    quick = subparsers.add_parser("quick", help="Search the built-in demo text")
    quick.set_defaults(func=cmd_quick)

    bench = subparsers.add_parser("benchmark", help="Benchmark on a generated text")
    bench.add_argument("--preset", default="medium", help="Preset from config/benchmarks.yaml (default: medium)")
    bench.add_argument("--workers", type=int, default=None, help="Worker count (default: available parallelism)")
    bench.add_argument("--seed", type=int, default=None, help="Override the preset's random seed")
    bench.set_defaults(func=cmd_benchmark)

    scale = subparsers.add_parser("scalability", help="Speedup for several worker counts")
    scale.add_argument("--workers", type=int, nargs="+", default=None, help="Worker counts (default: 1 2 4 8)")
    scale.add_argument("--length", type=int, default=None, help="Override the generated text length")
    scale.add_argument("--seed", type=int, default=None, help="Override the preset's random seed")
    scale.set_defaults(func=cmd_scalability)

    custom = subparsers.add_parser("custom", help="Benchmark your own text and pattern")
    source = custom.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", help="Text to search")
    source.add_argument("--generate", type=int, metavar="N", help="Generate N random symbols")
    custom.add_argument("--pattern", required=True, help="Pattern to search for")
    custom.add_argument("--workers", type=int, default=None, help="Worker count (default: auto)")
    custom.add_argument("--seed", type=int, default=42, help="Seed for --generate (default: 42)")
    custom.set_defaults(func=cmd_custom)

    return parser


def main(argv=None) -> int:
    """
    Main entry point for the PatternMatch command line.
    """
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)

    if args.verbose:
        print(f"System: {get_resource_summary()}")

    try:
        return args.func(args)
    except (InvalidPatternError, KeyError, ValueError) as e:
        error(f"[CLI] {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 2
    finally:
        close_debug_log()


if __name__ == "__main__":
    sys.exit(main())
