"""
YAML file storage for players and fixtures.

Writes go through a FileLock so that concurrent generation requests for the
same tournament cannot both insert the same matchup, and concurrent result
submissions cannot both resolve the same fixture.
"""
import logging
import os
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

import yaml
from filelock import FileLock, Timeout

from padel_core.errors import PersistenceFailure
from padel_core.models import Fixture, Player, RoundStage, Side, Team
from padel_core.scoring import format_score, parse_score

logger = logging.getLogger(__name__)

PLAYERS_FILE = 'players.yaml'
FIXTURES_FILE = 'fixtures.yaml'


def fixture_to_record(fixture: Fixture) -> Dict:
    """Convert a fixture to plain data for YAML serialization."""
    return {
        'id': fixture.id,
        'tournament_id': fixture.tournament_id,
        'side_a': list(fixture.side_a.players),
        'side_b': list(fixture.side_b.players),
        'round': fixture.round_label,
        'stage': fixture.stage.value,
        'bracket_size': fixture.bracket_size,
        'leg': fixture.leg,
        'start_time': fixture.start_time.isoformat() if fixture.start_time else None,
        'score': format_score(fixture.score),
        'winner': fixture.winner.value,
    }


def fixture_from_record(record: Dict) -> Fixture:
    start_time = record.get('start_time')
    if isinstance(start_time, str):
        start_time = datetime.fromisoformat(start_time)
    return Fixture(
        Team(*record['side_a']),
        Team(*record['side_b']),
        record.get('round', ''),
        RoundStage(record.get('stage', RoundStage.LEAGUE.value)),
        start_time=start_time,
        bracket_size=record.get('bracket_size'),
        leg=record.get('leg', 1),
        score=parse_score(record.get('score')),
        winner=record.get('winner') or Side.PENDING,
        id=record.get('id'),
        tournament_id=record.get('tournament_id'),
    )


class TournamentStore:
    def __init__(self, data_dir: str, lock_timeout: float = 10):
        self.data_dir = data_dir
        self.players_file = os.path.join(data_dir, PLAYERS_FILE)
        self.fixtures_file = os.path.join(data_dir, FIXTURES_FILE)
        self._lock = FileLock(os.path.join(data_dir, '.lock'), timeout=lock_timeout)

    # -- raw file access ---------------------------------------------------

    def _load_list(self, path: str, section: str) -> List[Dict]:
        if not os.path.exists(path):
            return []
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        if not data:
            return []
        return data.get(section, []) or []

    def _save_list(self, path: str, section: str, items: List[Dict]):
        os.makedirs(self.data_dir, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump({section: items}, f, default_flow_style=False, sort_keys=False)

    def _locked(self):
        os.makedirs(self.data_dir, exist_ok=True)
        return self._lock

    def _load_fixture_records(self) -> List[Dict]:
        return self._load_list(self.fixtures_file, 'fixtures')

    # -- players -------------------------------------------------------------

    def add_player(self, name: str, level: Optional[float] = None, approved: bool = True) -> Player:
        try:
            with self._locked():
                records = self._load_list(self.players_file, 'players')
                next_id = max((r['id'] for r in records), default=0) + 1
                records.append({'id': next_id, 'name': name, 'level': level, 'approved': approved})
                self._save_list(self.players_file, 'players', records)
        except Timeout as e:
            raise PersistenceFailure(f"Player store is busy: {e}")
        return Player(next_id, name, level)

    def fetch_approved_roster(self, ids: Optional[Iterable] = None, min_level: Optional[float] = None,
                              max_level: Optional[float] = None) -> List[Player]:
        """Approved players, ordered by name, optionally filtered."""
        wanted = set(ids) if ids is not None else None
        players = []
        for record in self._load_list(self.players_file, 'players'):
            if not record.get('approved', False):
                continue
            if wanted is not None and record['id'] not in wanted:
                continue
            level = record.get('level')
            if min_level is not None and (level is None or level < min_level):
                continue
            if max_level is not None and (level is None or level > max_level):
                continue
            players.append(Player(record['id'], record['name'], level))
        return sorted(players, key=lambda p: p.name)

    # -- fixtures ------------------------------------------------------------

    def fetch_fixtures(self, tournament_id=None) -> List[Fixture]:
        fixtures = [fixture_from_record(r) for r in self._load_fixture_records()]
        if tournament_id is None:
            return fixtures
        return [f for f in fixtures if f.tournament_id == tournament_id]

    def fetch_existing_matchup_keys(self, tournament_id) -> Set:
        return {f.matchup_key for f in self.fetch_fixtures(tournament_id)}

    def fetch_resolved_fixtures(self, tournament_id=None) -> List[Fixture]:
        """Resolved fixtures of one tournament, or of all when ``tournament_id`` is None."""
        return [f for f in self.fetch_fixtures(tournament_id) if f.is_resolved]

    def insert_fixtures(self, tournament_id, fixtures: List[Fixture]) -> List[Fixture]:
        """
        Persist a batch of new fixtures.

        Matchup keys are unique per tournament: the whole batch is rejected if
        any key is already stored or repeated within the batch.
        """
        try:
            with self._locked():
                records = self._load_fixture_records()
                existing = {
                    fixture_from_record(r).matchup_key
                    for r in records if r.get('tournament_id') == tournament_id
                }
                for fixture in fixtures:
                    key = fixture.matchup_key
                    if key in existing:
                        logger.warning("Rejected duplicate matchup %s in tournament %s", key, tournament_id)
                        raise PersistenceFailure(
                            f"Matchup {fixture.side_a.key_text} vs {fixture.side_b.key_text} "
                            f"already exists in tournament {tournament_id}")
                    existing.add(key)

                next_id = max((r['id'] for r in records), default=0) + 1
                for fixture in fixtures:
                    fixture.id = next_id
                    fixture.tournament_id = tournament_id
                    records.append(fixture_to_record(fixture))
                    next_id += 1
                self._save_list(self.fixtures_file, 'fixtures', records)
        except Timeout as e:
            raise PersistenceFailure(f"Fixture store is busy: {e}")
        return fixtures

    def update_fixture_result(self, fixture_id, score, winner, override: bool = False) -> Fixture:
        """
        Store a validated score and winner.

        Only a pending fixture can be resolved, unless ``override`` is set for
        an authorized correction.
        """
        winner = Side.parse(winner)
        try:
            with self._locked():
                records = self._load_fixture_records()
                record = next((r for r in records if r.get('id') == fixture_id), None)
                if record is None:
                    raise PersistenceFailure(f"Fixture {fixture_id} not found")
                current = Side.parse(record.get('winner'))
                if current != Side.PENDING and not override:
                    raise PersistenceFailure(f"Fixture {fixture_id} already has a result")
                record['score'] = format_score(score)
                record['winner'] = winner.value
                self._save_list(self.fixtures_file, 'fixtures', records)
        except Timeout as e:
            raise PersistenceFailure(f"Fixture store is busy: {e}")
        return fixture_from_record(record)
