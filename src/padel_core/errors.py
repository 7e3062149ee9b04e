"""Errors reported by the pairing, fixture, score and standings engine."""


class PadelCoreError(Exception):
    """Base exception for all engine errors.

    ``kind`` is a stable identifier the API layer reports to clients.
    """

    kind = 'Error'

    def __init__(self, message=None):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class InvalidSelection(PadelCoreError):
    """Roster too small, odd-sized, or with duplicate players."""

    kind = 'InvalidSelection'


class InvalidFormatConfig(PadelCoreError):
    """Unknown format or group count out of range for the team count."""

    kind = 'InvalidFormatConfig'


class NoNewFixtures(PadelCoreError):
    """Every computed matchup already exists. Informational."""

    kind = 'NoNewFixtures'

    def __init__(self, skipped=0, message=None):
        super().__init__(message or f"No new fixtures to generate ({skipped} already scheduled)")
        self.skipped = skipped


class InvalidScore(PadelCoreError):
    kind = 'InvalidScore'

    def __init__(self, message=None, set_index=None):
        super().__init__(message)
        self.set_index = set_index


class WinnerMismatch(PadelCoreError):
    kind = 'WinnerMismatch'


class PersistenceFailure(PadelCoreError):
    """The storage layer rejected a write. Never retried here."""

    kind = 'PersistenceFailure'
