"""
Dropping candidate fixtures whose matchup is already scheduled.

This is a fast path only. Uniqueness is enforced again by the storage
layer when the batch is inserted.
"""
import logging
from typing import Iterable, List, Set, Tuple

from padel_core.models import Fixture

logger = logging.getLogger(__name__)


class DuplicateFixtureFilter:
    def __init__(self, existing_keys: Iterable = ()):
        self.existing_keys: Set = set(existing_keys)
        self.skipped = 0

    def admit(self, fixture: Fixture) -> bool:
        """Keep the fixture unless its matchup is known; remember it if kept."""
        key = fixture.matchup_key
        if key in self.existing_keys:
            self.skipped += 1
            logger.debug("Skipping already scheduled matchup %s", key)
            return False
        self.existing_keys.add(key)
        return True

    def filter(self, candidates: Iterable[Fixture]) -> List[Fixture]:
        return [fixture for fixture in candidates if self.admit(fixture)]


def filter_new_fixtures(candidates: Iterable[Fixture], existing_keys: Iterable) -> Tuple[List[Fixture], int]:
    """Return (kept fixtures, number skipped)."""
    dedup = DuplicateFixtureFilter(existing_keys)
    kept = dedup.filter(candidates)
    return kept, dedup.skipped
