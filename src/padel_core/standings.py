"""
Per-player ranking computed from resolved fixtures.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from padel_core.models import Fixture, Side, Standing, sort_token

FIRST_SET = 'first_set'
ALL_SETS = 'all_sets'


class RankingRules:
    """
    Points and ordering rules.

    The default awards 3 per win and 1 per loss and breaks ties on game
    difference, games won and wins. ``RankingRules(points_per_loss=0,
    tie_breaks=False)`` is the wins-only table.
    """

    def __init__(self, points_per_win=3, points_per_loss=1, tie_breaks=True, games_from=FIRST_SET):
        if games_from not in (FIRST_SET, ALL_SETS):
            raise ValueError(f"games_from must be {FIRST_SET!r} or {ALL_SETS!r}, got {games_from!r}")
        self.points_per_win = points_per_win
        self.points_per_loss = points_per_loss
        self.tie_breaks = tie_breaks
        self.games_from = games_from

    @classmethod
    def from_settings(cls, settings: Optional[Dict]):
        settings = settings or {}
        return cls(
            points_per_win=settings.get('points_per_win', 3),
            points_per_loss=settings.get('points_per_loss', 1),
            tie_breaks=settings.get('tie_breaks', True),
            games_from=settings.get('games_from', FIRST_SET),
        )


def games_by_side(fixture: Fixture, games_from: str = FIRST_SET) -> Tuple[int, int]:
    """(games for side A, games for side B); a missing score counts zero."""
    if not fixture.score:
        return 0, 0
    sets = fixture.score[:1] if games_from == FIRST_SET else fixture.score
    return sum(a for a, _ in sets), sum(b for _, b in sets)


def _entry(table: Dict, player_id, names: Dict) -> Standing:
    if player_id not in table:
        table[player_id] = Standing(player_id, names.get(player_id))
    return table[player_id]


def compute_standings(fixtures: Iterable[Fixture], rules: Optional[RankingRules] = None,
                      names: Optional[Dict] = None) -> List[Standing]:
    """
    Fold resolved fixtures into an ordered standings table.

    Pending fixtures are ignored. Only players who appear in at least one
    resolved fixture are listed.
    """
    rules = rules or RankingRules()
    names = names or {}
    table: Dict = {}

    for fixture in fixtures:
        if not fixture.is_resolved:
            continue
        games_a, games_b = games_by_side(fixture, rules.games_from)
        if fixture.winner == Side.A:
            won, lost = (games_a, games_b), (games_b, games_a)
        else:
            won, lost = (games_b, games_a), (games_a, games_b)

        for player_id in fixture.winning_team():
            entry = _entry(table, player_id, names)
            entry.points += rules.points_per_win
            entry.wins += 1
            entry.played += 1
            entry.games_for += won[0]
            entry.games_against += won[1]

        for player_id in fixture.losing_team():
            entry = _entry(table, player_id, names)
            entry.points += rules.points_per_loss
            entry.losses += 1
            entry.played += 1
            entry.games_for += lost[0]
            entry.games_against += lost[1]

    if rules.tie_breaks:
        def sort_key(s):
            return (-s.points, -s.game_diff, -s.games_for, -s.wins, s.name or '', sort_token(s.player_id))
    else:
        def sort_key(s):
            return (-s.points, s.name or '', sort_token(s.player_id))

    return sorted(table.values(), key=sort_key)
