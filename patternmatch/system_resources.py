"""
System Resource Manager for PatternMatch.

Resolves the worker count used by parallel scans. A caller-supplied count
that is missing, zero or negative means "auto": use the configured override
if one is set, otherwise the platform-reported available parallelism.

Usage:
    from patternmatch.system_resources import resolve_worker_count

    workers = resolve_worker_count(None)   # e.g. 8 on an 8-core machine
    workers = resolve_worker_count(3)      # 3
"""

import os
from typing import NamedTuple

import psutil

from patternmatch.config import PARALLEL_MAX_WORKERS
from patternmatch.logging_config import debug_log


class ResourceInfo(NamedTuple):
    """System resource information."""
    cpu_count: int
    available_parallelism: int
    available_ram_gb: float
    total_ram_gb: float


def get_available_parallelism() -> int:
    """
    Return the number of CPUs this process may run on.

    Honours CPU affinity (containers, taskset) where psutil supports it,
    and falls back to the logical CPU count elsewhere (macOS).

    Returns:
        Number of usable CPUs, at least 1.
    """
    try:
        affinity = psutil.Process().cpu_affinity()
    except (AttributeError, NotImplementedError, psutil.Error):
        affinity = None

    if affinity:
        return len(affinity)
    return psutil.cpu_count(logical=True) or os.cpu_count() or 1


def get_system_resources() -> ResourceInfo:
    """
    Get current system resource information.

    Returns:
        ResourceInfo with CPU count, usable parallelism, available RAM, and total RAM.
    """
    mem = psutil.virtual_memory()
    return ResourceInfo(
        cpu_count=psutil.cpu_count(logical=True) or os.cpu_count() or 1,
        available_parallelism=get_available_parallelism(),
        available_ram_gb=mem.available / (1024 ** 3),
        total_ram_gb=mem.total / (1024 ** 3),
    )


def resolve_worker_count(requested: int | None = None) -> int:
    """
    Normalize a requested worker count.

    Zero, negative or missing counts are never an error; they select the
    automatic count instead.

    Args:
        requested: Worker count asked for by the caller (may be None).

    Returns:
        Worker count to use, at least 1.
    """
    if requested is not None and requested > 0:
        return requested

    if PARALLEL_MAX_WORKERS is not None:
        workers = PARALLEL_MAX_WORKERS
        source = "configured override"
    else:
        workers = get_available_parallelism()
        source = "available parallelism"

    debug_log(f"[Resources] Worker count {requested!r} normalized to {workers} ({source})")
    return max(1, workers)


def get_resource_summary() -> str:
    """
    Get a human-readable summary of system resources.

    Returns:
        String like "8 cores (8 usable), 12.3 GB RAM available"
    """
    resources = get_system_resources()
    return (
        f"{resources.cpu_count} cores ({resources.available_parallelism} usable), "
        f"{resources.available_ram_gb:.1f} GB RAM available"
    )
