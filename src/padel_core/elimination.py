"""
Single elimination first-round bracket generation.
"""
import math
import random
from typing import Dict, List, Optional, Sequence, Tuple

from padel_core.models import Player, Team, sort_token
from padel_core.pairing import shuffled

ROUND_NAMES = {
    2: "Final",
    4: "Semifinal",
    8: "Cuartos",
    16: "Octavos",
}


def get_round_name(teams_in_round: int) -> str:
    """Get the display name of a round based on number of bracket slots."""
    return ROUND_NAMES.get(teams_in_round, f"Ronda de {teams_in_round}")


def calculate_bracket_size(num_teams: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_teams <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_teams))


def calculate_byes(num_teams: int) -> int:
    """Calculate number of byes needed."""
    bracket_size = calculate_bracket_size(num_teams)
    return bracket_size - num_teams


def team_strength(team: Team, levels: Dict) -> float:
    """Sum of both players' levels; unknown levels count as -1."""
    total = 0
    for player_id in team:
        level = levels.get(player_id)
        total += level if level is not None else -1
    return total


def seed_teams(teams: Sequence[Team], players: Sequence[Player]) -> List[Team]:
    """Order teams strongest first, ties broken by team key."""
    levels = {p.id: p.level for p in players}
    return sorted(teams, key=lambda t: (-team_strength(t, levels), [sort_token(p) for p in t.key]))


def create_bracket_matchups(ordered_teams: Sequence[Team]) -> List[Dict]:
    """
    Create first round matchups for a single elimination bracket.

    The ordered list is padded with byes (None) up to the next power of two,
    then slot i meets slot bracket_size-1-i, so the top of the order gets the
    byes when the bracket is not full.

    Returns list of match dicts with:
    - teams: (team1, team2), team2 is None for a bye
    - round: round name
    - match_number: position in bracket
    - seeds: tuple of 1-based slot numbers
    - is_bye: True if one side has no opponent
    """
    num_teams = len(ordered_teams)
    if num_teams < 2:
        return []

    bracket_size = calculate_bracket_size(num_teams)
    slots: List[Optional[Team]] = list(ordered_teams) + [None] * calculate_byes(num_teams)
    round_name = get_round_name(bracket_size)

    # More than half the slots hold teams, so team1 is never a bye
    matchups = []
    for i in range(bracket_size // 2):
        team1 = slots[i]
        team2 = slots[bracket_size - 1 - i]
        matchups.append({
            'teams': (team1, team2),
            'round': round_name,
            'match_number': i + 1,
            'seeds': (i + 1, bracket_size - i),
            'is_bye': team2 is None,
        })
    return matchups


def order_for_bracket(teams: Sequence[Team], players: Sequence[Player], seeded: bool,
                      rng: Optional[random.Random] = None) -> List[Team]:
    if seeded:
        return seed_teams(teams, players)
    return shuffled(teams, rng)


def first_round(teams: Sequence[Team], players: Sequence[Player], seeded: bool,
                rng: Optional[random.Random] = None) -> Tuple[int, List[Dict]]:
    """Return (bracket_size, matchups) for the first round."""
    ordered = order_for_bracket(teams, players, seeded, rng)
    return calculate_bracket_size(len(ordered)), create_bracket_matchups(ordered)
