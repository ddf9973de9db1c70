"""
Shared pytest fixtures for poker league manager tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os
import yaml

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.models import Player, Event, EventResult, Participant, Season


@pytest.fixture
def client():
    """Create a test client."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the app's data files at a temporary directory."""
    import app as app_module

    monkeypatch.setattr(app_module, 'DATA_DIR', str(tmp_path))
    monkeypatch.setattr(app_module, 'PLAYERS_FILE', str(tmp_path / 'players.yaml'))
    monkeypatch.setattr(app_module, 'EVENTS_FILE', str(tmp_path / 'events.yaml'))
    monkeypatch.setattr(app_module, 'SEASONS_FILE', str(tmp_path / 'seasons.yaml'))
    monkeypatch.setattr(app_module, 'LIVE_DIR', str(tmp_path / 'live'))

    return tmp_path


@pytest.fixture
def write_data(temp_data_dir):
    """Write players, events and seasons (as dicts) into the temp data dir."""
    def _write(players=None, events=None, seasons=None):
        for filename, key, items in (('players.yaml', 'players', players),
                                     ('events.yaml', 'events', events),
                                     ('seasons.yaml', 'seasons', seasons)):
            if items is not None:
                (temp_data_dir / filename).write_text(
                    yaml.dump({key: items}, default_flow_style=False))
    return _write


@pytest.fixture
def sample_players():
    """Five regulars and one guest."""
    return [
        Player(id="p1", first_name="Alice", last_name="Martin"),
        Player(id="p2", first_name="Bruno", last_name="Petit", nickname="The Rock"),
        Player(id="p3", first_name="Chloe", last_name="Durand"),
        Player(id="p4", first_name="David"),
        Player(id="p5", last_name="Moreau"),
        Player(id="g1", first_name="Gary", last_name="Guest", is_guest=True),
    ]


@pytest.fixture
def five_player_event():
    """An active event with five participants and rebuys."""
    return Event(
        id="e1",
        name="Friday Night",
        date="2024-03-01",
        buy_in=20,
        rebuy_allowed=True,
        rebuy_price=10,
        max_players=6,
        status="active",
        season_id="s1",
        participants=["p1", "p2", "p3", "p4", "p5"],
        starting_stack=5000,
    )


@pytest.fixture
def roster():
    """A five-player live roster, nobody eliminated."""
    return [
        Participant(id="p1", name="Alice M."),
        Participant(id="p3", name="Chloe D."),
        Participant(id="p4", name="David"),
        Participant(id="p5", name="Moreau"),
        Participant(id="p2", name="The Rock"),
    ]


@pytest.fixture
def season():
    return Season(id="s1", name="Season 2024", start_date="2024-01-01", is_active=True)


@pytest.fixture
def season_events():
    """Three completed events in season s1, given out of date order."""
    return [
        Event(
            id="e2", name="Game 2", date="2024-02-01", buy_in=20, rebuy_price=10,
            status="completed", season_id="s1",
            participants=["p1", "p2", "p3", "p4", "p5"],
            results=[
                EventResult("p2", 1, 70, 0),
                EventResult("p1", 2, 30, 2),
            ],
        ),
        Event(
            id="e1", name="Game 1", date="2024-01-05", buy_in=20, rebuy_price=10,
            status="completed", season_id="s1",
            participants=["p1", "p2", "p3"],
            results=[
                EventResult("p1", 1, 39, 0),
                EventResult("p2", 2, 21, 0),
                EventResult("p3", 3, 0, 0),
            ],
        ),
        Event(
            id="e3", name="Game 3", date="2024-03-01", buy_in=50,
            status="completed", season_id="s1",
            participants=["p3", "g1"],
            results=[
                EventResult("g1", 1, 65, 0),
                EventResult("p3", 2, 35, 0),
            ],
        ),
    ]
