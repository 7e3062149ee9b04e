"""
Fixture generation for league, group and elimination formats.

Every format works on teams (pairs of players). Generated fixtures get
placeholder start times a few minutes apart; real court scheduling is
done by the organizers.
"""
import logging
import random
from datetime import datetime, timedelta
from itertools import combinations
from typing import Iterable, List, Optional, Sequence

from padel_core import elimination
from padel_core.dedup import filter_new_fixtures
from padel_core.errors import InvalidFormatConfig
from padel_core.models import Fixture, FormatConfig, Player, RoundStage, Team
from padel_core.pairing import build_teams, shuffled
from padel_core.roster import normalize_roster

logger = logging.getLogger(__name__)

DEFAULT_SLOT_MINUTES = 5
LEAGUE_LABEL = "Liga"


class GenerationResult:
    def __init__(self, fixtures, skipped, teams, byes=None):
        self.fixtures = fixtures
        self.skipped = skipped
        self.teams = teams
        self.byes = byes or []  # teams advancing without a first-round fixture

    @property
    def has_new_fixtures(self):
        return bool(self.fixtures)

    def __repr__(self):
        return f"GenerationResult(fixtures={len(self.fixtures)}, skipped={self.skipped}, byes={len(self.byes)})"


def group_label(index: int) -> str:
    return f"Grupo {chr(ord('A') + index)}"


def generate_league_fixtures(teams: Sequence[Team]) -> List[Fixture]:
    """Every team against every other team once."""
    return [
        Fixture(t1, t2, LEAGUE_LABEL, RoundStage.LEAGUE)
        for t1, t2 in combinations(teams, 2)
    ]


def split_into_groups(teams: Sequence[Team], group_count: int,
                      rng: Optional[random.Random] = None) -> List[List[Team]]:
    """Shuffle, then deal teams round-robin into ``group_count`` groups."""
    groups: List[List[Team]] = [[] for _ in range(group_count)]
    for idx, team in enumerate(shuffled(teams, rng)):
        groups[idx % group_count].append(team)
    return groups


def generate_group_fixtures(teams: Sequence[Team], group_count: int, round_trip: bool = False,
                            rng: Optional[random.Random] = None) -> List[Fixture]:
    validate_group_count(group_count, len(teams))
    fixtures = []
    for idx, group_teams in enumerate(split_into_groups(teams, group_count, rng)):
        label = group_label(idx)
        if len(group_teams) < 2:
            logger.info("%s has %d team(s), no fixtures generated", label, len(group_teams))
            continue
        for t1, t2 in combinations(group_teams, 2):
            fixtures.append(Fixture(t1, t2, label, RoundStage.GROUP))
            if round_trip:
                fixtures.append(Fixture(t2, t1, label, RoundStage.GROUP, leg=2))
    return fixtures


def generate_elimination_fixtures(teams: Sequence[Team], players: Sequence[Player], seeded: bool = False,
                                  rng: Optional[random.Random] = None):
    """Return (fixtures, bye teams) for the first bracket round."""
    bracket_size, matchups = elimination.first_round(teams, players, seeded, rng)
    fixtures = []
    byes = []
    for match in matchups:
        team1, team2 = match['teams']
        if match['is_bye']:
            byes.append(team1)
            continue
        fixtures.append(Fixture(team1, team2, match['round'], RoundStage.ELIMINATION,
                                bracket_size=bracket_size))
    return fixtures, byes


def validate_group_count(group_count, team_count: int):
    if not isinstance(group_count, int) or isinstance(group_count, bool):
        raise InvalidFormatConfig(f"Group count must be an integer, got {group_count!r}")
    if group_count < 2:
        raise InvalidFormatConfig(f"Group count must be at least 2, got {group_count}")
    if group_count > team_count:
        raise InvalidFormatConfig(
            f"Group count ({group_count}) cannot exceed the number of teams ({team_count})")


def assign_start_times(fixtures: Sequence[Fixture], base_timestamp: datetime,
                       slot_minutes: int = DEFAULT_SLOT_MINUTES, first_slot: int = 0):
    """Stagger start times so no two fixtures share a timestamp."""
    for slot, fixture in enumerate(fixtures, start=first_slot):
        fixture.start_time = base_timestamp + timedelta(minutes=slot * slot_minutes)


def generate_candidates(teams: Sequence[Team], players: Sequence[Player], format_config: FormatConfig,
                        rng: Optional[random.Random] = None):
    """Return (candidate fixtures, bye teams) for the configured format."""
    if format_config.format == FormatConfig.LEAGUE:
        return generate_league_fixtures(teams), []
    if format_config.format == FormatConfig.GROUPS:
        return generate_group_fixtures(teams, format_config.group_count, format_config.round_trip, rng), []
    if format_config.format == FormatConfig.ELIMINATION:
        return generate_elimination_fixtures(teams, players, format_config.seeded, rng)
    raise InvalidFormatConfig(f"Unknown format: {format_config.format!r}")


def generate_fixtures(players: Sequence[Player], format_config: FormatConfig, base_timestamp: datetime,
                      existing_keys: Iterable = (), rng: Optional[random.Random] = None,
                      slot_minutes: int = DEFAULT_SLOT_MINUTES) -> GenerationResult:
    """
    Build teams from the selected players and generate the fixtures for the format.

    Matchups already present in ``existing_keys`` (and repeats inside this
    batch) are dropped and counted in ``skipped``. An empty result is not an
    error here; the caller decides how to report it.
    """
    if format_config.format not in FormatConfig.FORMATS:
        raise InvalidFormatConfig(f"Unknown format: {format_config.format!r}")
    normalize_roster([p.id for p in players])
    rng = rng or random.SystemRandom()

    teams = build_teams(players, seeded=format_config.seeded, rng=rng)
    candidates, byes = generate_candidates(teams, players, format_config, rng)

    fixtures, skipped = filter_new_fixtures(candidates, existing_keys)
    assign_start_times(fixtures, base_timestamp, slot_minutes)

    logger.info("Generated %d %s fixture(s) for %d players in %d teams, %d skipped, %d bye(s)",
                len(fixtures), format_config.format, len(players), len(teams), skipped, len(byes))
    return GenerationResult(fixtures, skipped, teams, byes)
