"""
Score validation for two-set-or-three-set padel matches.

A score is a list of (games_a, games_b) pairs. The text form
"6-4 4-6 6-2" is only used at the storage boundary.
"""
import re
from typing import List, Optional, Sequence, Tuple

from padel_core.errors import InvalidScore, WinnerMismatch
from padel_core.models import Side

MAX_SETS = 3
MAX_GAMES = 7

SET_PATTERN = re.compile(r'(\d+)\s*[-/:]\s*(\d+)')


class ResolvedScore:
    def __init__(self, sets, winner, sets_won):
        self.sets = sets
        self.winner = winner
        self.sets_won = sets_won

    @property
    def text(self):
        return format_score(self.sets)

    def __repr__(self):
        return f"ResolvedScore(sets={self.sets}, winner={self.winner.value})"


def is_valid_set(games_a: int, games_b: int) -> bool:
    """6 games with a 2+ game lead, or 7 after 5-5 or a tie-break at 6-6."""
    return (
        (games_a == 6 and games_b <= 4)
        or (games_b == 6 and games_a <= 4)
        or (games_a == 7 and games_b in (5, 6))
        or (games_b == 7 and games_a in (5, 6))
    )


def _as_games(value, set_index):
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidScore(f"Set {set_index}: games must be whole numbers, got {value!r}", set_index)
    return value


def validate_set(set_score, set_index: int) -> Tuple[int, int]:
    if not isinstance(set_score, (list, tuple)) or len(set_score) != 2:
        raise InvalidScore(f"Set {set_index}: each set must be [games_a, games_b]", set_index)
    games_a = _as_games(set_score[0], set_index)
    games_b = _as_games(set_score[1], set_index)
    if games_a < 0 or games_b < 0:
        raise InvalidScore(f"Set {set_index}: games cannot be negative ({games_a}-{games_b})", set_index)
    if games_a > MAX_GAMES or games_b > MAX_GAMES:
        raise InvalidScore(f"Set {set_index}: a set cannot exceed {MAX_GAMES} games ({games_a}-{games_b})",
                           set_index)
    if not is_valid_set(games_a, games_b):
        raise InvalidScore(f"Set {set_index}: invalid set {games_a}-{games_b}", set_index)
    return games_a, games_b


def count_sets_won(sets: Sequence[Tuple[int, int]]) -> Tuple[int, int]:
    won_a = sum(1 for a, b in sets if a > b)
    won_b = sum(1 for a, b in sets if b > a)
    return won_a, won_b


def validate_and_resolve_score(sets, declared_winner) -> ResolvedScore:
    """
    Check every set against the game-count rule and cross-check the winner.

    Raises InvalidScore for no sets, too many sets or a bad set, and
    WinnerMismatch when the declared winner did not win more sets.
    """
    if not isinstance(sets, (list, tuple)):
        raise InvalidScore("Sets must be a list of [games_a, games_b]")
    if not sets:
        raise InvalidScore("At least one set is required")
    if len(sets) > MAX_SETS:
        raise InvalidScore(f"At most {MAX_SETS} sets are allowed, got {len(sets)}")

    validated = [validate_set(s, idx) for idx, s in enumerate(sets, start=1)]

    try:
        winner = Side.parse(declared_winner)
    except ValueError:
        raise WinnerMismatch(f"Declared winner must be A or B, got {declared_winner!r}")
    if winner == Side.PENDING:
        raise WinnerMismatch("A winner (A or B) must be declared")

    won_a, won_b = count_sets_won(validated)
    if winner == Side.A and not won_a > won_b:
        raise WinnerMismatch(f"Side A must win more sets than side B ({won_a}-{won_b})")
    if winner == Side.B and not won_b > won_a:
        raise WinnerMismatch(f"Side B must win more sets than side A ({won_b}-{won_a})")

    return ResolvedScore(validated, winner, (won_a, won_b))


def format_score(sets: Optional[Sequence[Tuple[int, int]]]) -> Optional[str]:
    if not sets:
        return None
    return ' '.join(f"{a}-{b}" for a, b in sets)


def parse_score(text) -> Optional[List[Tuple[int, int]]]:
    """
    Best-effort parse of stored score text ("6-4 6-3", "6/4, 3/6").

    Returns None when nothing looks like a set.
    """
    if text is None:
        return None
    if isinstance(text, (list, tuple)):
        return [(int(a), int(b)) for a, b in text]
    sets = [(int(a), int(b)) for a, b in SET_PATTERN.findall(str(text))]
    return sets or None
