"""
Counters Package - Concrete solution counter implementations.

Import this module to register all built-in counters.
"""

from .blocking import BlockingCounter, count_solutions
from .cooperative import CooperativeCounter, count_solutions_cooperative

__all__ = [
    "BlockingCounter",
    "CooperativeCounter",
    "count_solutions",
    "count_solutions_cooperative",
]
