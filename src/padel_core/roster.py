"""
Roster validation for 2vs2 generation.
"""
from typing import Dict, Iterable, List

from padel_core.errors import InvalidSelection
from padel_core.models import Player

MIN_PLAYERS = 4


def normalize_roster(player_ids: Iterable) -> List:
    """
    Validate a selection of player ids.

    Rejects fewer than 4 players, an odd count (teams are pairs) and
    repeated ids. Returns the ids as a list in selection order.
    """
    ids = list(player_ids)
    seen = set()
    duplicates = []
    for player_id in ids:
        if player_id in seen and player_id not in duplicates:
            duplicates.append(player_id)
        seen.add(player_id)

    if duplicates:
        raise InvalidSelection(f"Duplicate players in selection: {duplicates}")
    if len(ids) < MIN_PLAYERS:
        raise InvalidSelection(f"Select at least {MIN_PLAYERS} players (2 teams), got {len(ids)}")
    if len(ids) % 2 != 0:
        raise InvalidSelection(f"2vs2 needs an even number of players, got {len(ids)}")
    return ids


def select_players(players: Iterable[Player], player_ids: Iterable) -> List[Player]:
    """Resolve a validated id selection against the roster."""
    ids = normalize_roster(player_ids)
    by_id: Dict = {p.id: p for p in players}
    missing = [player_id for player_id in ids if player_id not in by_id]
    if missing:
        raise InvalidSelection(f"Unknown or unapproved players: {missing}")
    return [by_id[player_id] for player_id in ids]
