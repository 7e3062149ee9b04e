import argparse
import os
import random
import sys
from datetime import datetime

import yaml

from padel_core.errors import PadelCoreError
from padel_core.fixtures import generate_fixtures
from padel_core.models import FormatConfig, Player


def load_players(file_path):
    """Load players from a YAML list of {id, name, level} entries."""
    players = []
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or []
        if isinstance(data, dict):
            data = data.get('players', [])
        for entry in data:
            players.append(Player(id=entry['id'], name=entry['name'], level=entry.get('level')))
    return players


def group_by_round(fixtures):
    rounds = {}
    for fixture in fixtures:
        rounds.setdefault(fixture.round_label, []).append(fixture)
    return rounds


def team_names(team, names):
    return ' / '.join(str(names.get(p, p)) for p in team.players)


def build_parser():
    parser = argparse.ArgumentParser(description='Generate 2vs2 fixtures for a list of players.')
    parser.add_argument('players_file', nargs='?', help='YAML file with the selected players')
    parser.add_argument('--format', default=FormatConfig.LEAGUE,
                        choices=list(FormatConfig.FORMATS) + list(FormatConfig.ALIASES))
    parser.add_argument('--groups', type=int, default=2, help='number of groups (groups format)')
    parser.add_argument('--round-trip', action='store_true', help='also play the return fixture in groups')
    parser.add_argument('--seeded', action='store_true', help='balance teams and bracket by level')
    parser.add_argument('--start', default=None, help='ISO start date-time (default: now)')
    parser.add_argument('--seed', type=int, default=None, help='random seed for reproducible draws')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)
    players_file = args.players_file or os.path.join(base_dir, 'data', 'players.yaml')

    players = load_players(players_file)
    if not players:
        print(f"No players loaded. Check {players_file}", file=sys.stderr)
        return 1

    format_config = FormatConfig(args.format, group_count=args.groups,
                                 round_trip=args.round_trip, seeded=args.seeded)
    start = datetime.fromisoformat(args.start) if args.start else datetime.now().replace(second=0, microsecond=0)
    rng = random.Random(args.seed) if args.seed is not None else None

    try:
        result = generate_fixtures(players, format_config, start, rng=rng)
    except PadelCoreError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2

    names = {p.id: p.name for p in players}
    first_round = True
    for round_label, fixtures in group_by_round(result.fixtures).items():
        if not first_round:
            print()
        print(f"# {round_label}")
        for fixture in fixtures:
            print(f"{fixture.start_time:%Y-%m-%d %H:%M}  "
                  f"{team_names(fixture.side_a, names)} vs {team_names(fixture.side_b, names)}")
        first_round = False

    if result.byes:
        print()
        print("# Bye")
        for team in result.byes:
            print(team_names(team, names))
    return 0


if __name__ == '__main__':
    sys.exit(main())
