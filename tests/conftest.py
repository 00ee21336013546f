"""
Shared pytest fixtures for knockout tournament tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from knockout.models import Participant


def make_participants(count):
    """Participants with team ids 101.., seeded 1..count."""
    return [
        Participant(fpl_team_id=100 + seed, fpl_team_name=f"Team {seed}",
                    manager_name=f"Manager {seed}", seed=seed)
        for seed in range(1, count + 1)
    ]


def make_standings(count):
    """League standings rows in the shape the standings endpoint returns."""
    return [
        {'entry': 100 + rank, 'entry_name': f"Team {rank}", 'player_name': f"Manager {rank}",
         'rank': rank, 'total': 1000 - rank}
        for rank in range(1, count + 1)
    ]


@pytest.fixture
def four_participants():
    return make_participants(4)


@pytest.fixture
def five_participants():
    return make_participants(5)


@pytest.fixture
def eight_participants():
    return make_participants(8)


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the app at an empty temporary data directory."""
    import app as app_module
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setattr(app_module, 'DATA_DIR', str(data_dir))
    return data_dir


@pytest.fixture
def client(temp_data_dir):
    """Create a test client backed by a temporary data directory."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client
