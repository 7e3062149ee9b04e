"""
Turning a roster of players into 2-person teams.
"""
import random
from typing import List, Optional, Sequence

from padel_core.models import Player, Team


def shuffled(items: Sequence, rng: Optional[random.Random] = None) -> list:
    """Return a shuffled copy; ``rng`` is the only source of randomness."""
    rng = rng or random.SystemRandom()
    result = list(items)
    rng.shuffle(result)
    return result


def seed_order(players: Sequence[Player]) -> List[Player]:
    """Strongest first; players without a level count as lowest, ties by name."""
    return sorted(players, key=lambda p: (-p.level_or_lowest, p.name))


def build_teams(players: Sequence[Player], seeded: bool = False,
                rng: Optional[random.Random] = None) -> List[Team]:
    """
    Pair players into teams.

    Seeded: best with weakest, advancing inward, which balances team strength.
    Random: shuffle, then pair consecutive players.
    """
    if seeded:
        ordered = seed_order(players)
        teams = []
        i, j = 0, len(ordered) - 1
        while i < j:
            teams.append(Team(ordered[i].id, ordered[j].id))
            i += 1
            j -= 1
        return teams

    ordered = shuffled(players, rng)
    return [Team(ordered[i].id, ordered[i + 1].id) for i in range(0, len(ordered) - 1, 2)]
