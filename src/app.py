"""
Flask web application exposing the club tournament engine.
"""
import os
import random
from datetime import datetime

import yaml
from flask import Flask, jsonify, request

from padel_core.errors import (
    InvalidFormatConfig,
    InvalidScore,
    InvalidSelection,
    NoNewFixtures,
    PadelCoreError,
    PersistenceFailure,
    WinnerMismatch,
)
from padel_core.fixtures import generate_fixtures
from padel_core.models import FormatConfig
from padel_core.roster import select_players
from padel_core.scoring import validate_and_resolve_score
from padel_core.standings import RankingRules, compute_standings
from padel_core.storage import TournamentStore, fixture_to_record

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('CLUB_DATA_DIR', os.path.join(BASE_DIR, 'data'))
SETTINGS_FILE = os.path.join(DATA_DIR, 'settings.yaml')

ERROR_STATUS = {
    InvalidSelection: 400,
    InvalidFormatConfig: 400,
    InvalidScore: 400,
    WinnerMismatch: 400,
    PersistenceFailure: 409,
}


def get_default_settings():
    """Return default engine settings."""
    return {
        'slot_minutes': 5,
        'lock_timeout_seconds': 10,
        'ranking': {
            'points_per_win': 3,
            'points_per_loss': 1,
            'tie_breaks': True,
            'games_from': 'first_set',
        },
    }


def load_settings():
    """Load settings from YAML, merged over the defaults."""
    settings = get_default_settings()
    if not os.path.exists(SETTINGS_FILE):
        return settings
    try:
        with open(SETTINGS_FILE, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        app.logger.warning(f'Failed to parse {SETTINGS_FILE}: {e}')
        return settings
    if not isinstance(data, dict):
        app.logger.warning(f'Ignoring {SETTINGS_FILE}: expected a mapping')
        return settings
    ranking = data.pop('ranking', None)
    settings.update(data)
    if isinstance(ranking, dict):
        settings['ranking'].update(ranking)
    return settings


def get_store(settings=None):
    settings = settings or load_settings()
    return TournamentStore(DATA_DIR, lock_timeout=settings['lock_timeout_seconds'])


def parse_start_time(value):
    if not value:
        raise InvalidFormatConfig('A tournament start date is required')
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise InvalidFormatConfig(f'Invalid start date: {value!r}')


def generate_for_tournament(store, tournament_id, player_ids, format_config, base_timestamp,
                            rng=None, slot_minutes=5):
    """
    Generate and persist new fixtures for a tournament.

    Raises NoNewFixtures when every computed matchup is already scheduled.
    The store re-checks matchup uniqueness under its lock on insert.
    """
    roster = store.fetch_approved_roster(ids=player_ids)
    players = select_players(roster, player_ids)
    existing_keys = store.fetch_existing_matchup_keys(tournament_id)

    result = generate_fixtures(players, format_config, base_timestamp, existing_keys,
                               rng=rng, slot_minutes=slot_minutes)
    if not result.has_new_fixtures:
        raise NoNewFixtures(result.skipped)

    store.insert_fixtures(tournament_id, result.fixtures)
    app.logger.info(f'Tournament {tournament_id}: stored {len(result.fixtures)} fixtures, '
                    f'skipped {result.skipped}')
    return result


def submit_result(store, fixture_id, sets, declared_winner, override=False):
    """Validate a score, then persist it. Nothing is written if validation fails."""
    resolved = validate_and_resolve_score(sets, declared_winner)
    fixture = store.update_fixture_result(fixture_id, resolved.sets, resolved.winner, override=override)
    app.logger.info(f'Fixture {fixture_id}: result {resolved.text} winner {resolved.winner.value}')
    return fixture


@app.errorhandler(PadelCoreError)
def handle_engine_error(error):
    status = ERROR_STATUS.get(type(error), 400)
    if status >= 409:
        app.logger.warning(f'{error.kind}: {error.message}')
    body = {'success': False, 'error': error.kind, 'message': error.message}
    if isinstance(error, InvalidScore) and error.set_index is not None:
        body['set'] = error.set_index
    return jsonify(body), status


@app.route('/api/players', methods=['GET'])
def api_players():
    """Approved roster, optionally filtered by level."""
    min_level = request.args.get('min_level', type=float)
    max_level = request.args.get('max_level', type=float)
    players = get_store().fetch_approved_roster(min_level=min_level, max_level=max_level)
    return jsonify({
        'players': [{'id': p.id, 'name': p.name, 'level': p.level} for p in players]
    })


@app.route('/api/tournaments/<int:tournament_id>/generate', methods=['POST'])
def api_generate(tournament_id):
    """Build teams from the selected players and create the format's fixtures."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'success': False, 'error': 'InvalidSelection', 'message': 'No data provided'}), 400

    player_ids = data.get('player_ids') or []
    if not isinstance(player_ids, list):
        raise InvalidSelection('player_ids must be a list of player ids')

    settings = load_settings()
    format_config = FormatConfig(
        data.get('format', FormatConfig.LEAGUE),
        group_count=data.get('group_count', 2),
        round_trip=bool(data.get('round_trip', False)),
        seeded=bool(data.get('seeded', False)),
    )
    base_timestamp = parse_start_time(data.get('start_time'))
    seed = data.get('seed')
    rng = random.Random(seed) if seed is not None else random.SystemRandom()

    try:
        result = generate_for_tournament(
            get_store(settings), tournament_id, player_ids, format_config,
            base_timestamp, rng=rng, slot_minutes=settings['slot_minutes'],
        )
    except NoNewFixtures as e:
        return jsonify({
            'success': True,
            'created': 0,
            'skipped': e.skipped,
            'message': e.message,
        })

    return jsonify({
        'success': True,
        'created': len(result.fixtures),
        'skipped': result.skipped,
        'teams': [list(t.players) for t in result.teams],
        'byes': [list(t.players) for t in result.byes],
        'fixtures': [fixture_to_record(f) for f in result.fixtures],
    })


@app.route('/api/tournaments/<int:tournament_id>/fixtures', methods=['GET'])
def api_fixtures(tournament_id):
    fixtures = get_store().fetch_fixtures(tournament_id)
    fixtures.sort(key=lambda f: (f.start_time or datetime.min, f.id or 0))
    return jsonify({'fixtures': [fixture_to_record(f) for f in fixtures]})


@app.route('/api/fixtures/<int:fixture_id>/result', methods=['POST'])
def api_fixture_result(fixture_id):
    """Save a match result. Requires sets and the declared winner side."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'success': False, 'error': 'InvalidScore', 'message': 'No data provided'}), 400

    fixture = submit_result(get_store(), fixture_id, data.get('sets') or [], data.get('winner'),
                            override=bool(data.get('override', False)))
    return jsonify({'success': True, 'fixture': fixture_to_record(fixture)})


@app.route('/api/ranking', methods=['GET'])
def api_ranking():
    """Standings for one tournament (``?tournament=<id>``) or across all tournaments."""
    tournament_id = request.args.get('tournament', type=int)
    settings = load_settings()
    store = get_store(settings)
    names = {p.id: p.name for p in store.fetch_approved_roster()}
    standings = compute_standings(
        store.fetch_resolved_fixtures(tournament_id),
        rules=RankingRules.from_settings(settings['ranking']),
        names=names,
    )
    return jsonify({'standings': [s.to_dict() for s in standings]})


if __name__ == '__main__':
    app.run(debug=True)
