"""
Verification Cache Module - Memoizes verifier results by board content.

Keys are content strings, so a changed board can never hit a stale entry.
There is no invalidation tied to board mutation: an unbounded cache grows
with every distinct (board, candidate) pair it sees. Pass max_entries to cap
it with least-recently-used eviction.

Not thread-safe. Guard it with a lock or keep one per thread if the engine
is ever driven from several threads.
"""

import logging
from collections import OrderedDict
from typing import Optional

from .board import BoardState
from .candidate import Candidate
from .proof import VerifiedCandidate

logger = logging.getLogger(__name__)


def make_verification_key(state: BoardState, candidate: Candidate) -> str:
    """Canonical key: size, required-per-unit, grid content, cell and mark."""
    return f"{state.canonical_key()}::{candidate.key()}"


class VerificationCache:
    """
    Mapping from verification key to VerifiedCandidate.

    Attributes:
        max_entries: Optional size cap (None means unbounded)
        hits: Lookups answered from the cache
        misses: Lookups that found nothing
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self._entries: "OrderedDict[str, VerifiedCandidate]" = OrderedDict()

    def get(self, key: str) -> Optional[VerifiedCandidate]:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        self.hits += 1
        if self.max_entries is not None:
            self._entries.move_to_end(key)
        return entry

    def set(self, key: str, value: VerifiedCandidate) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Verification cache full, evicted {evicted[-24:]}")

    def clear(self) -> None:
        """Drop every entry and reset the hit/miss counters."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries


# Shared cache used by verify_forced_cell() when no cache is given
_default_cache = VerificationCache()


def get_default_cache() -> VerificationCache:
    return _default_cache


def clear_verification_cache() -> None:
    """Clear the shared cache (for test isolation)."""
    _default_cache.clear()
