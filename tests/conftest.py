"""
Shared pytest fixtures for the club tournament engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os
import random

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from padel_core.models import Player, Team
from padel_core.storage import TournamentStore


@pytest.fixture
def rng():
    """Deterministic random source."""
    return random.Random(4545)


@pytest.fixture
def four_players():
    """Four players with levels 7, 6, 5 and 4."""
    return [
        Player(1, "Ana", 7.0),
        Player(2, "Bruno", 6.0),
        Player(3, "Carla", 5.0),
        Player(4, "Diego", 4.0),
    ]


def make_players(count):
    return [Player(i, f"Player {i:02d}", float(1 + (i % 7))) for i in range(1, count + 1)]


@pytest.fixture
def eight_players():
    return make_players(8)


@pytest.fixture
def four_teams():
    return [Team(1, 2), Team(3, 4), Team(5, 6), Team(7, 8)]


@pytest.fixture
def store(tmp_path):
    """Empty YAML store in a temporary directory."""
    return TournamentStore(str(tmp_path))


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Flask test client wired to a temporary data directory."""
    import app as app_module

    monkeypatch.setattr(app_module, 'DATA_DIR', str(tmp_path))
    monkeypatch.setattr(app_module, 'SETTINGS_FILE', str(tmp_path / 'settings.yaml'))
    app_module.app.config['TESTING'] = True
    with app_module.app.test_client() as client:
        yield client
