"""
Pattern Matching Engines Package

This package provides the exact-matching engines (KMP, Boyer-Moore,
Aho-Corasick). Each engine is registered via decorator and can be
instantiated by name.

Usage:
    from patternmatch.matching import (
        create_default_engines,
        get_engine,
        get_available_engines,
    )

    kmp = get_engine("KMP")
    result = kmp.search_parallel(text, b"ACGTAC", worker_count=4)

    ac = get_engine("Aho-Corasick", patterns=[b"ACGT", b"GTA"])
    result = ac.search_sequential(text)

Registration:
    @register_engine("MyEngine")
    class MyEngine(BaseMatchEngine):
        name = "MyEngine"
        ...
"""

from typing import Type

from patternmatch.matching.base import (
    AutomatonFrozenError,
    BaseMatchEngine,
    InvalidPatternError,
    Match,
    SearchResult,
    SinglePatternEngine,
    to_symbols,
)

# Registry of available engines (class references, not instances)
_ENGINE_REGISTRY: dict[str, Type[BaseMatchEngine]] = {}


def register_engine(name: str):
    """
    Decorator to register an engine class.

    Args:
        name: Unique name for the engine (e.g., "KMP", "Boyer-Moore")

    Returns:
        Decorator function that registers the class

    Raises:
        ValueError: If name is already registered (prevents accidental overwrites)
    """
    def decorator(cls: Type[BaseMatchEngine]) -> Type[BaseMatchEngine]:
        if name in _ENGINE_REGISTRY:
            raise ValueError(
                f"Engine '{name}' is already registered. "
                f"Existing: {_ENGINE_REGISTRY[name].__name__}, New: {cls.__name__}"
            )
        _ENGINE_REGISTRY[name] = cls
        return cls
    return decorator


def get_engine(name: str, **kwargs) -> BaseMatchEngine:
    """
    Instantiate an engine by its registered name.

    Args:
        name: Registered engine name (case-sensitive)
        **kwargs: Constructor arguments passed to the engine class
                  (e.g. patterns=[...] for Aho-Corasick)

    Returns:
        Engine instance

    Raises:
        KeyError: If engine name is not registered
    """
    if name not in _ENGINE_REGISTRY:
        available = ", ".join(sorted(_ENGINE_REGISTRY.keys()))
        raise KeyError(
            f"Unknown engine '{name}'. Available engines: {available or '(none registered)'}"
        )
    return _ENGINE_REGISTRY[name](**kwargs)


def get_available_engines() -> list[str]:
    """
    Return list of all registered engine names.

    Returns:
        Sorted list of engine names that can be passed to get_engine()
    """
    return sorted(_ENGINE_REGISTRY.keys())


def create_default_engines(patterns=None) -> list[BaseMatchEngine]:
    """
    Create one instance of each built-in engine, in benchmark order.

    Args:
        patterns: Optional patterns to preload into the Aho-Corasick engine.

    Returns:
        [KMPEngine, BoyerMooreEngine, AhoCorasickEngine]
    """
    return [
        KMPEngine(),
        BoyerMooreEngine(),
        AhoCorasickEngine(patterns or ()),
    ]


# Importing the engine modules runs their @register_engine decorators
from patternmatch.matching.kmp import KMPEngine, compute_failure_table  # noqa: E402
from patternmatch.matching.boyer_moore import (  # noqa: E402
    ABSENT,
    BoyerMooreEngine,
    compute_bad_character_table,
)
from patternmatch.matching.aho_corasick import (  # noqa: E402
    AhoCorasickAutomaton,
    AhoCorasickEngine,
    AutomatonNode,
    AutomatonState,
)

__all__ = [
    'ABSENT',
    'AhoCorasickAutomaton',
    'AhoCorasickEngine',
    'AutomatonFrozenError',
    'AutomatonNode',
    'AutomatonState',
    'BaseMatchEngine',
    'BoyerMooreEngine',
    'InvalidPatternError',
    'KMPEngine',
    'Match',
    'SearchResult',
    'SinglePatternEngine',
    'compute_bad_character_table',
    'compute_failure_table',
    'create_default_engines',
    'get_available_engines',
    'get_engine',
    'register_engine',
    'to_symbols',
]
