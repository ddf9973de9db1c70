"""
Live tournament roster: eliminations, rebuys and final results.

Roster functions never mutate their input; each returns a new list of
Participant copies. Operations that make no sense for the current roster
(eliminating someone twice, removing an eliminated player, undoing with
nobody out) return the roster unchanged instead of raising.
"""
from typing import List, Optional, Tuple

from core.blinds import BlindClock
from core.models import EventResult, Participant, player_display_name
from core.payouts import (
    compute_chip_stats,
    compute_payout_structure,
    compute_prize_pool,
    payout_lookup,
    total_rebuys,
)


def _sort_by_name(roster: List[Participant]) -> List[Participant]:
    return sorted(roster, key=lambda p: p.name.lower())


def _copy(roster) -> List[Participant]:
    return [p.copy() for p in roster]


def _find(roster, player_id) -> Optional[Participant]:
    for participant in roster:
        if participant.id == player_id:
            return participant
    return None


def active_count(roster) -> int:
    return sum(1 for p in roster if p.eliminated_position is None)


def eliminated_count(roster) -> int:
    return sum(1 for p in roster if p.eliminated_position is not None)


def build_roster(event, players) -> List[Participant]:
    """Initial roster for an event, carrying over any rebuys already recorded."""
    directory = {player.id: player for player in players}
    roster = []
    for player_id in event.participants:
        player = directory.get(player_id)
        result = event.result_for(player_id)
        roster.append(Participant(
            id=player_id,
            name=player_display_name(player),
            is_guest=player.is_guest if player else False,
            rebuys=result.rebuys if result else 0,
        ))
    return _sort_by_name(roster)


def add_participant(roster, player) -> List[Participant]:
    roster = _copy(roster)
    if _find(roster, player.id) is None:
        roster.append(Participant(
            id=player.id,
            name=player_display_name(player),
            is_guest=player.is_guest,
        ))
    return _sort_by_name(roster)


def remove_participant(roster, player_id) -> List[Participant]:
    """Drop a player who has not been eliminated yet."""
    participant = _find(roster, player_id)
    if participant is None or participant.eliminated_position is not None:
        return _copy(roster)
    return [p.copy() for p in roster if p.id != player_id]


def change_rebuys(roster, player_id, delta: int) -> List[Participant]:
    """Adjust a rebuy count; it never drops below zero."""
    roster = _copy(roster)
    participant = _find(roster, player_id)
    if participant is not None:
        participant.rebuys = max(0, participant.rebuys + delta)
    return roster


def eliminate(roster, player_id) -> List[Participant]:
    """
    Knock a player out.

    The finishing position is the number of players still in before this
    elimination, so with five left the one going out now finishes 5th. The
    last player standing is the winner and cannot be eliminated.
    """
    roster = _copy(roster)
    participant = _find(roster, player_id)
    if participant is None or participant.eliminated_position is not None:
        return roster
    if active_count(roster) <= 1:
        return roster
    participant.eliminated_position = active_count(roster)
    return roster


def undo_last_elimination(roster) -> List[Participant]:
    """
    Bring back the most recently eliminated player.

    Positions count down as the field shrinks, so the latest elimination holds
    the smallest position.
    """
    roster = _copy(roster)
    eliminated = [p for p in roster if p.eliminated_position is not None]
    if not eliminated:
        return roster
    latest = min(eliminated, key=lambda p: p.eliminated_position)
    latest.eliminated_position = None
    return roster


def is_finished(roster) -> bool:
    return len(roster) > 0 and active_count(roster) <= 1


def positions_are_complete(results, participant_count) -> bool:
    """True when the finishing positions are exactly 1..participant_count."""
    return sorted(r.position for r in results) == list(range(1, participant_count + 1))


def finalize_results(roster, payout_structure) -> List[EventResult]:
    """
    Turn the final roster into event results.

    The last player standing takes 1st. Players still active while others are
    also active have no position yet and are left out.
    """
    prizes = payout_lookup(payout_structure)
    active = [p for p in roster if p.eliminated_position is None]
    results = []
    if len(active) == 1:
        winner = active[0]
        results.append(EventResult(player_id=winner.id, position=1,
                                   prize=prizes.get(1, 0), rebuys=winner.rebuys))
    for participant in roster:
        if participant.eliminated_position is None:
            continue
        position = participant.eliminated_position
        results.append(EventResult(player_id=participant.id, position=position,
                                   prize=prizes.get(position, 0), rebuys=participant.rebuys))
    results.sort(key=lambda r: r.position)
    return results


class LiveTournament:
    """One running event: the roster, its economics and the blind clock."""

    def __init__(self, event_id, roster=None, buy_in=0, rebuy_price=None, starting_stack=None,
                 max_players=0, clock=None):
        self.event_id = event_id
        self.roster = list(roster) if roster else []
        self.buy_in = buy_in
        self.rebuy_price = rebuy_price
        self.starting_stack = starting_stack
        self.max_players = max_players
        self.clock = clock if clock else BlindClock()

    @classmethod
    def from_event(cls, event, players) -> 'LiveTournament':
        return cls(
            event_id=event.id,
            roster=build_roster(event, players),
            buy_in=event.buy_in,
            rebuy_price=event.rebuy_price,
            starting_stack=event.starting_stack,
            max_players=event.max_players,
            clock=BlindClock(event.blind_structure),
        )

    @property
    def is_full(self) -> bool:
        return bool(self.max_players) and len(self.roster) >= self.max_players

    @property
    def has_started(self) -> bool:
        """Someone is out, so the field can no longer change."""
        return eliminated_count(self.roster) > 0

    def add(self, player):
        self.roster = add_participant(self.roster, player)

    def remove(self, player_id):
        self.roster = remove_participant(self.roster, player_id)

    def rebuy(self, player_id, delta: int = 1):
        self.roster = change_rebuys(self.roster, player_id, delta)

    def eliminate(self, player_id):
        self.roster = eliminate(self.roster, player_id)

    def undo(self):
        self.roster = undo_last_elimination(self.roster)

    @property
    def prize_pool(self):
        return compute_prize_pool(self.roster, self.buy_in, self.rebuy_price)

    @property
    def payout_structure(self):
        return compute_payout_structure(self.prize_pool, len(self.roster), self.buy_in)

    @property
    def chip_stats(self):
        return compute_chip_stats(self.roster, self.starting_stack)

    @property
    def is_finished(self) -> bool:
        return is_finished(self.roster)

    def finalize(self) -> Tuple[List[EventResult], float]:
        """Results ready to be merged into the event, plus the pool they were paid from."""
        total = self.prize_pool
        return finalize_results(self.roster, self.payout_structure), total

    def summary(self) -> dict:
        return {
            'event_id': self.event_id,
            'participants': [p.to_dict() for p in self.roster],
            'active_count': active_count(self.roster),
            'eliminated_count': eliminated_count(self.roster),
            'total_rebuys': total_rebuys(self.roster),
            'prize_pool': self.prize_pool,
            'payouts': [entry.to_dict() for entry in self.payout_structure],
            'chip_stats': self.chip_stats.to_dict(),
            'is_full': self.is_full,
            'is_finished': self.is_finished,
            'clock': self.clock.to_dict(),
        }

    def snapshot(self) -> dict:
        return {
            'event_id': self.event_id,
            'buy_in': self.buy_in,
            'rebuy_price': self.rebuy_price,
            'starting_stack': self.starting_stack,
            'max_players': self.max_players,
            'participants': [p.to_dict() for p in self.roster],
            'clock': self.clock.snapshot(),
        }

    @classmethod
    def restore(cls, data: dict) -> 'LiveTournament':
        return cls(
            event_id=data['event_id'],
            roster=[Participant.from_dict(p) for p in data.get('participants') or []],
            buy_in=data.get('buy_in') or 0,
            rebuy_price=data.get('rebuy_price'),
            starting_stack=data.get('starting_stack'),
            max_players=data.get('max_players') or 0,
            clock=BlindClock.restore(data.get('clock') or {}),
        )

    def __repr__(self):
        return (f"LiveTournament(event_id={self.event_id}, players={len(self.roster)}, "
                f"active={active_count(self.roster)})")
