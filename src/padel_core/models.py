from enum import Enum


class Side(Enum):
    A = 'A'
    B = 'B'
    PENDING = 'pending'

    @classmethod
    def parse(cls, value):
        """Accept a Side or its stored string ('A', 'B', 'pending')."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.PENDING
        text = str(value).strip()
        for side in cls:
            if side.value.lower() == text.lower():
                return side
        raise ValueError(f"Unknown side: {value!r}")


class RoundStage(Enum):
    LEAGUE = 'league'
    GROUP = 'group'
    ELIMINATION = 'elimination'


class Player:
    def __init__(self, id, name, level=None):
        self.id = id
        self.name = name
        self.level = level  # 1.0 - 7.0, optional

    @property
    def level_or_lowest(self):
        return self.level if self.level is not None else -1

    def __repr__(self):
        return f"Player(id={self.id}, name={self.name}, level={self.level})"


class Team:
    """Two distinct players; identity is the sorted pair of ids."""

    def __init__(self, first, second):
        if first == second:
            raise ValueError(f"A team needs two distinct players, got {first!r} twice")
        self.players = (first, second)

    @property
    def key(self):
        return tuple(sorted(self.players, key=sort_token))

    @property
    def key_text(self):
        return '-'.join(str(p) for p in self.key)

    def __eq__(self, other):
        if not isinstance(other, Team):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)

    def __iter__(self):
        return iter(self.players)

    def __repr__(self):
        return f"Team(players={self.players})"


def sort_token(value):
    # Ints sort numerically, everything else by text, without mixing types
    if isinstance(value, int) and not isinstance(value, bool):
        return (0, value, '')
    return (1, 0, str(value))


def matchup_key(team_a, team_b, leg=1):
    """Unordered identity of a pairing of two teams (plus its leg)."""
    keys = sorted([team_a.key, team_b.key], key=lambda k: [sort_token(p) for p in k])
    return (keys[0], keys[1], leg)


class Fixture:
    def __init__(self, side_a, side_b, round_label, stage, start_time=None,
                 bracket_size=None, leg=1, score=None, winner=Side.PENDING,
                 id=None, tournament_id=None):
        if set(side_a.players) & set(side_b.players):
            raise ValueError(f"Fixture sides share a player: {side_a} vs {side_b}")
        self.side_a = side_a
        self.side_b = side_b
        self.round_label = round_label
        self.stage = stage
        self.start_time = start_time
        self.bracket_size = bracket_size
        self.leg = leg
        self.score = score  # list of (games_a, games_b) or None
        self.winner = Side.parse(winner)
        self.id = id
        self.tournament_id = tournament_id

    @property
    def matchup_key(self):
        return matchup_key(self.side_a, self.side_b, self.leg)

    @property
    def is_resolved(self):
        return self.winner != Side.PENDING

    def winning_team(self):
        if self.winner == Side.A:
            return self.side_a
        if self.winner == Side.B:
            return self.side_b
        return None

    def losing_team(self):
        if self.winner == Side.A:
            return self.side_b
        if self.winner == Side.B:
            return self.side_a
        return None

    def __repr__(self):
        return (f"Fixture(round={self.round_label}, side_a={self.side_a.players}, "
                f"side_b={self.side_b.players}, winner={self.winner.value})")


class FormatConfig:
    LEAGUE = 'league'
    GROUPS = 'groups'
    ELIMINATION = 'elimination'
    FORMATS = (LEAGUE, GROUPS, ELIMINATION)

    # Spanish names the club uses in its forms
    ALIASES = {'liga': LEAGUE, 'grupos': GROUPS, 'eliminacion': ELIMINATION}

    def __init__(self, format, group_count=2, round_trip=False, seeded=False):
        format = self.ALIASES.get(format, format)
        self.format = format
        self.group_count = group_count
        self.round_trip = round_trip
        self.seeded = seeded

    def __repr__(self):
        return (f"FormatConfig(format={self.format}, group_count={self.group_count}, "
                f"round_trip={self.round_trip}, seeded={self.seeded})")


class Standing:
    def __init__(self, player_id, name=None):
        self.player_id = player_id
        self.name = name
        self.points = 0
        self.wins = 0
        self.losses = 0
        self.played = 0
        self.games_for = 0
        self.games_against = 0

    @property
    def game_diff(self):
        return self.games_for - self.games_against

    def to_dict(self):
        return {
            'player_id': self.player_id,
            'name': self.name,
            'points': self.points,
            'wins': self.wins,
            'losses': self.losses,
            'played': self.played,
            'games_for': self.games_for,
            'games_against': self.games_against,
            'game_diff': self.game_diff,
        }

    def __repr__(self):
        return (f"Standing(player_id={self.player_id}, points={self.points}, "
                f"wins={self.wins}, losses={self.losses})")
