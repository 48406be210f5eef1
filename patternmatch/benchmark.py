"""
Comparative Benchmark for the Matching Engines

Runs each engine sequentially and in parallel on the same input, verifies
that the parallel result reproduces the sequential one, and reports speedup
and parallel efficiency.

    speedup    = sequential_ms / parallel_ms
    efficiency = speedup / worker_count * 100   (percent)

Usage:
    from patternmatch.benchmark import run_benchmark, format_benchmark

    entries = run_benchmark(text, pattern, worker_count=4)
    print(format_benchmark(text, pattern, 4, entries))

Note: with CPython threads the chunk scans share the GIL, so speedups stay
near 1x; verification is the meaningful column there.
"""

from dataclasses import dataclass

from patternmatch.logging_config import debug_log, warning
from patternmatch.matching import AhoCorasickEngine, create_default_engines
from patternmatch.matching.base import SearchResult, to_symbols
from patternmatch.result_merger import ResultAggregator, VerificationReport
from patternmatch.system_resources import resolve_worker_count


@dataclass
class BenchmarkEntry:
    """
    Sequential vs parallel measurement for one engine.

    Attributes:
        algorithm: Engine name
        sequential: Result of search_sequential()
        parallel: Result of search_parallel()
        verification: Sequential/parallel comparison report
    """
    algorithm: str
    sequential: SearchResult
    parallel: SearchResult
    verification: VerificationReport

    @property
    def speedup(self) -> float:
        return compute_speedup(self.sequential.elapsed_ms, self.parallel.elapsed_ms)

    @property
    def efficiency(self) -> float:
        """Parallel efficiency in percent."""
        return self.speedup / self.parallel.worker_count * 100

    @property
    def verified(self) -> bool:
        return bool(self.verification)

    @property
    def match_count(self) -> int:
        return self.sequential.match_count


def compute_speedup(baseline_ms: float, measured_ms: float) -> float:
    """Ratio baseline / measured, with a zero-duration measurement treated as no change."""
    if measured_ms <= 0:
        return 1.0
    return baseline_ms / measured_ms


def _run_pair(engine, text, pattern, worker_count) -> tuple[SearchResult, SearchResult]:
    if isinstance(engine, AhoCorasickEngine):
        return engine.search_sequential(text), engine.search_parallel(text, worker_count)
    return (
        engine.search_sequential(text, pattern),
        engine.search_parallel(text, pattern, worker_count),
    )


def run_benchmark(text, pattern, worker_count: int | None = None) -> list[BenchmarkEntry]:
    """
    Benchmark KMP, Boyer-Moore and Aho-Corasick (single pattern) on one input.

    Args:
        text: Text to search
        pattern: Pattern to search for
        worker_count: Workers for the parallel runs; None/<=0 = auto

    Returns:
        One BenchmarkEntry per engine, in benchmark order.
    """
    text = to_symbols(text, "text")
    pattern = to_symbols(pattern, "pattern")
    workers = resolve_worker_count(worker_count)
    aggregator = ResultAggregator()

    entries = []
    for engine in create_default_engines(patterns=[pattern]):
        sequential, parallel = _run_pair(engine, text, pattern, workers)
        report = aggregator.verify(sequential, parallel)
        if not report:
            warning(f"[Benchmark] {engine.name}: parallel result differs from sequential ({report.reason})")
        entries.append(BenchmarkEntry(engine.name, sequential, parallel, report))

    debug_log(
        f"[Benchmark] {len(text)} symbols, {len(pattern)}-symbol pattern, {workers} workers: "
        + ", ".join(f"{e.algorithm} {e.speedup:.2f}x" for e in entries)
    )
    return entries


def run_scalability(text, pattern, worker_counts) -> dict[int, dict[str, float]]:
    """
    Measure each engine's speedup over its sequential baseline for several worker counts.

    A worker count of 1 reuses the sequential baseline (speedup 1.0).

    Args:
        text: Text to search
        pattern: Pattern to search for
        worker_counts: Iterable of worker counts, e.g. [1, 2, 4, 8]

    Returns:
        {worker_count: {algorithm: speedup}}. Parallel results that differ
        from the baseline are logged as warnings.
    """
    text = to_symbols(text, "text")
    pattern = to_symbols(pattern, "pattern")
    aggregator = ResultAggregator()
    engines = create_default_engines(patterns=[pattern])

    baselines = {}
    for engine in engines:
        if isinstance(engine, AhoCorasickEngine):
            baselines[engine.name] = engine.search_sequential(text)
        else:
            baselines[engine.name] = engine.search_sequential(text, pattern)

    table = {}
    for workers in worker_counts:
        row = {}
        for engine in engines:
            baseline = baselines[engine.name]
            if workers == 1:
                row[engine.name] = 1.0
                continue
            if isinstance(engine, AhoCorasickEngine):
                parallel = engine.search_parallel(text, workers)
            else:
                parallel = engine.search_parallel(text, pattern, workers)
            report = aggregator.verify(baseline, parallel)
            if not report:
                warning(f"[Scalability] {engine.name} with {workers} workers: {report.reason}")
            row[engine.name] = compute_speedup(baseline.elapsed_ms, parallel.elapsed_ms)
        table[workers] = row

    return table


def truncate(text: str, max_len: int) -> str:
    """Shorten text to max_len characters, ending with '...' when cut."""
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


def _display(symbols: bytes) -> str:
    return symbols.decode('latin-1')


def format_benchmark(text, pattern, worker_count: int, entries: list[BenchmarkEntry]) -> str:
    """Render benchmark entries as the multi-line console report."""
    text = to_symbols(text, "text")
    pattern = to_symbols(pattern, "pattern")
    lines = [
        f"Text:    {len(text):,} symbols",
        f'Pattern: "{truncate(_display(pattern), 30)}" ({len(pattern)} symbols)',
        f"Workers: {worker_count}",
        "-" * 60,
    ]
    for entry in entries:
        lines.extend([
            "",
            f"{entry.algorithm}:",
            f"  Sequential:  {entry.sequential.elapsed_ms:8.3f} ms",
            f"  Parallel:    {entry.parallel.elapsed_ms:8.3f} ms",
            f"  Speedup:     {entry.speedup:8.2f}x",
            f"  Efficiency:  {entry.efficiency:8.1f}%",
            f"  Matches:     {entry.match_count}",
            f"  Verified:    {'OK' if entry.verified else 'ERROR (' + entry.verification.reason + ')'}",
        ])
    return "\n".join(lines)


def format_scalability(table: dict[int, dict[str, float]]) -> str:
    """Render the scalability table (speedup per engine and worker count)."""
    if not table:
        return "(no worker counts)"
    algorithms = list(next(iter(table.values())).keys())
    header = "Workers | " + " | ".join(f"{name:>12}" for name in algorithms)
    lines = [header, "-" * len(header)]
    for workers, row in table.items():
        cells = " | ".join(f"{row[name]:11.2f}x" for name in algorithms)
        lines.append(f"{workers:>7} | {cells}")
    return "\n".join(lines)
