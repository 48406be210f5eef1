"""
PatternMatch Configuration Module
Centralized configuration for the matching engines, worker pool and benchmarks.
"""

import os
from pathlib import Path

import yaml

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Application Paths
APP_NAME = "PatternMatch"
APPDATA_DIR = Path(os.environ.get('APPDATA', os.path.expanduser('~/.config'))) / APP_NAME
LOGS_DIR = APPDATA_DIR / "logs"

# Ensure directories exist
for directory in [APPDATA_DIR, LOGS_DIR]:
    directory.mkdir(parents=True, exist_ok=True)

# Symbol Alphabet
# Text and patterns are raw 8-bit symbols; lookup tables are sized to this.
ALPHABET_SIZE = 256

# Parallel Processing Configuration
# Controls the worker count used by search_parallel() when the caller does
# not pass one (or passes zero / a negative number).
#
# User Override Options:
# - USER_PICKS_MAX_WORKER_COUNT: If True, use USER_DEFINED_MAX_WORKER_COUNT
#   instead of auto-detection. Default: False (platform-reported parallelism)
# - USER_DEFINED_MAX_WORKER_COUNT: Manual worker count when override enabled.
#   Range: 1-64.
USER_PICKS_MAX_WORKER_COUNT = False
USER_DEFINED_MAX_WORKER_COUNT = 4

# Enforce bounds on user-defined count (1 minimum, 64 maximum)
_user_workers = max(1, min(64, USER_DEFINED_MAX_WORKER_COUNT))

# None means "ask the platform" (see system_resources.get_available_parallelism)
PARALLEL_MAX_WORKERS = _user_workers if USER_PICKS_MAX_WORKER_COUNT else None

# Logging Configuration
LOG_FILE = LOGS_DIR / "matching.log"
DEBUG_LOG_FILE = LOGS_DIR / "debug_flow.txt"
LOG_FORMAT = "[%(levelname)s %(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# --- Benchmark Preset System ---
BENCHMARK_CONFIG_FILE = Path(__file__).parent.parent / "config" / "benchmarks.yaml"
BENCHMARK_PRESETS = {}

# Used when config/benchmarks.yaml is missing or broken.
# Sizes follow the original demo menu: 1 MB, 10 MB and a 5 MB scaling run.
DEFAULT_BENCHMARK_PRESETS = {
    'quick': {
        'text': "ABABDABACDABABCABABABABDABACDABABCABAB",
        'pattern': "ABABCABAB",
    },
    'medium': {
        'text_length': 1_000_000,
        'pattern_length': 12,
    },
    'large': {
        'text_length': 10_000_000,
        'pattern_length': 15,
    },
    'scalability': {
        'text_length': 5_000_000,
        'pattern_length': 12,
        'worker_counts': [1, 2, 4, 8],
    },
}

DEFAULT_ALPHABET = "ACGT"
DEFAULT_SEED = 42


def load_benchmark_presets():
    """Loads benchmark presets from config/benchmarks.yaml."""
    global BENCHMARK_PRESETS
    try:
        with open(BENCHMARK_CONFIG_FILE) as f:
            data = yaml.safe_load(f) or {}
            BENCHMARK_PRESETS = data.get('presets', {})
        if DEBUG_MODE and BENCHMARK_PRESETS:
            from patternmatch.logging_config import debug_log
            debug_log(f"[Config] Loaded {len(BENCHMARK_PRESETS)} benchmark presets from {BENCHMARK_CONFIG_FILE}")
    except FileNotFoundError:
        if DEBUG_MODE:
            from patternmatch.logging_config import debug_log
            debug_log(f"[Config] WARNING: Benchmark config not found at {BENCHMARK_CONFIG_FILE}. Using fallback presets.")
        BENCHMARK_PRESETS = {}
    except (OSError, yaml.YAMLError) as e:
        from patternmatch.logging_config import debug_log
        debug_log(f"[Config] ERROR: Failed to load or parse benchmark config file: {e}")
        BENCHMARK_PRESETS = {}


def get_benchmark_preset(name: str) -> dict:
    """
    Returns the settings for a named benchmark preset, with fallbacks.

    Args:
        name: Preset name (e.g., 'medium', 'scalability').

    Returns:
        A dictionary with the preset settings. Keys missing from the YAML
        preset are filled in from the built-in defaults.

    Raises:
        KeyError: If the preset exists neither in the YAML file nor in the
                  built-in defaults.
    """
    if not BENCHMARK_PRESETS:
        load_benchmark_presets()

    if name not in BENCHMARK_PRESETS and name not in DEFAULT_BENCHMARK_PRESETS:
        available = ", ".join(sorted(set(BENCHMARK_PRESETS) | set(DEFAULT_BENCHMARK_PRESETS)))
        raise KeyError(f"Unknown benchmark preset '{name}'. Available presets: {available}")

    preset = {
        'alphabet': DEFAULT_ALPHABET,
        'seed': DEFAULT_SEED,
    }
    preset.update(DEFAULT_BENCHMARK_PRESETS.get(name, {}))
    preset.update(BENCHMARK_PRESETS.get(name) or {})
    return preset

# Load presets on module import
load_benchmark_presets()
# --- End Benchmark Preset System ---
