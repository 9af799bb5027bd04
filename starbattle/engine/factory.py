"""
Counter Factory Module - Looks up solution counter variants by name.

The CLI and the settings file refer to counters by name ("blocking",
"cooperative"). Variants register themselves with @register_counter when
the counters package is imported.
"""

from typing import Dict, List, Optional, Type

from .base import SolutionCounter

# Used when neither the command line nor the settings name a counter
DEFAULT_COUNTER = "blocking"

_COUNTERS: Dict[str, Type[SolutionCounter]] = {}


def register_counter(cls: Type[SolutionCounter]) -> Type[SolutionCounter]:
    """
    Class decorator adding a counter variant to the registry.

    Raises:
        ValueError: If another class already claimed the same name
    """
    existing = _COUNTERS.get(cls.name)
    if existing is not None and existing is not cls:
        raise ValueError(f"Counter name {cls.name!r} is already taken by {existing.__name__}")
    _COUNTERS[cls.name] = cls
    return cls


def create_counter(name: Optional[str] = None) -> SolutionCounter:
    """
    Instantiate a counter variant.

    Args:
        name: Registered name; None or "" selects the default variant

    Returns:
        New counter instance

    Raises:
        ValueError: If no variant is registered under name
    """
    name = name or get_default_counter_name()
    cls = _COUNTERS.get(name)
    if cls is None:
        raise ValueError(f"Unknown counter: {name}. Available: {', '.join(get_counter_names())}")
    return cls()


def get_counter_names() -> List[str]:
    return sorted(_COUNTERS)


def get_default_counter_name() -> str:
    return DEFAULT_COUNTER


def describe_counters() -> str:
    """One 'name: description' entry per variant, for command-line help."""
    return "; ".join(f"{name}: {_COUNTERS[name].description}" for name in get_counter_names())
