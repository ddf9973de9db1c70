"""
Unit tests for the data models.
"""
import datetime
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.models import (
    Player, Participant, EventResult, BlindLevel, Event, Season, player_display_name,
)


class TestPlayerDisplayName:
    """Tests for player_display_name."""

    def test_nickname_wins(self):
        player = Player(id="p", first_name="Bruno", last_name="Petit", nickname="The Rock")
        assert player_display_name(player) == "The Rock"

    def test_blank_nickname_ignored(self):
        player = Player(id="p", first_name="Bruno", last_name="Petit", nickname="  ")
        assert player_display_name(player) == "Bruno P."

    def test_first_name_only(self):
        assert player_display_name(Player(id="p", first_name="David")) == "David"

    def test_last_name_only(self):
        assert player_display_name(Player(id="p", last_name="Moreau")) == "Moreau"

    def test_no_names(self):
        assert player_display_name(Player(id="p")) == "Unnamed"

    def test_missing_player(self):
        assert player_display_name(None) == "Unknown Player"


class TestParticipant:
    """Tests for the Participant model."""

    def test_defaults(self):
        participant = Participant(id="p1", name="Alice")
        assert participant.rebuys == 0
        assert participant.eliminated_position is None
        assert participant.is_active

    def test_copy_is_independent(self):
        participant = Participant(id="p1", name="Alice")
        out = participant.copy()
        out.eliminated_position = 3
        assert out == Participant(id="p1", name="Alice", eliminated_position=3)
        assert participant.eliminated_position is None

    def test_equality(self):
        assert Participant(id="p1", name="A", rebuys=1) == Participant(id="p1", name="A", rebuys=1)
        assert Participant(id="p1", name="A") != Participant(id="p1", name="A", rebuys=1)

    def test_dict_round_trip(self):
        participant = Participant(id="p1", name="Alice", is_guest=True, rebuys=2, eliminated_position=4)
        assert Participant.from_dict(participant.to_dict()) == participant

    def test_repr(self):
        assert "Alice" in repr(Participant(id="p1", name="Alice"))


class TestEvent:
    """Tests for the Event model."""

    def test_from_dict_with_yaml_date(self):
        """Test a date parsed by YAML is kept as an ISO string."""
        event = Event.from_dict({
            'id': 'e1', 'name': 'Friday', 'date': datetime.date(2024, 3, 1), 'buy_in': 20,
        })
        assert event.date == "2024-03-01"
        assert event.status == 'draft'
        assert event.participants == []
        assert event.prize_pool['total'] == 0

    def test_from_dict_nested(self):
        event = Event.from_dict({
            'id': 'e1', 'name': 'Friday', 'date': '2024-03-01', 'buy_in': 20,
            'rebuy_price': 10, 'status': 'completed', 'participants': ['p1', 'p2'],
            'results': [{'player_id': 'p1', 'position': 1, 'prize': 40}],
            'blind_structure': [{'level': 1, 'small_blind': 5, 'big_blind': 10, 'duration': 15}],
        })
        assert event.results[0] == EventResult('p1', 1, 40, 0)
        assert event.blind_structure[0].duration == 15
        assert event.result_for('p1').prize == 40
        assert event.result_for('p2') is None

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValueError):
            Event.from_dict({'id': 'e1', 'name': 'Friday', 'status': 'postponed'})

    def test_to_dict_round_trip(self):
        event = Event(id='e1', name='Friday', date='2024-03-01', buy_in=20, rebuy_price=10,
                      status='active', participants=['p1'],
                      results=[EventResult('p1', 1, 20, 1)],
                      blind_structure=[BlindLevel(level=1, small_blind=5, big_blind=10, duration=15)])
        assert Event.from_dict(event.to_dict()).to_dict() == event.to_dict()


class TestSeason:
    """Tests for the Season model."""

    def test_from_dict(self):
        season = Season.from_dict({'id': 's1', 'name': '2024', 'start_date': datetime.date(2024, 1, 1)})
        assert season.start_date == "2024-01-01"
        assert season.end_date is None
        assert season.leaderboard == []
