"""
Prize pool, payout tiers and chip statistics for a live tournament.
"""
import math
from typing import Dict, List, Optional

from core.models import PayoutEntry

# Field size from which a flat 4th-place prize (one buy-in) is paid.
FOURTH_PLACE_MIN_PLAYERS = 14

THREE_WAY_SPLIT = (0.5, 0.3, 0.2)
HEADS_UP_SPLIT = (0.65, 0.35)


def _round_prize(amount: float) -> int:
    """Round half up, as the payout board has always displayed it."""
    return int(math.floor(amount + 0.5))


def total_rebuys(roster) -> int:
    return sum(p.rebuys for p in roster)


def compute_prize_pool(roster, buy_in, rebuy_price=None) -> float:
    """Every entry pays one buy-in; every rebuy adds one rebuy price."""
    return len(roster) * (buy_in or 0) + total_rebuys(roster) * (rebuy_price or 0)


def _split(pool: float, shares) -> List[PayoutEntry]:
    return [PayoutEntry(position=i + 1, prize=_round_prize(pool * share))
            for i, share in enumerate(shares)]


def compute_payout_structure(total, participant_count: int, buy_in) -> List[PayoutEntry]:
    """
    Build the payout table for a prize pool.

    Under 14 players: 50/30/20 for three or more, 65/35 heads-up, everything
    to a lone player. From 14 players on, 4th place gets its buy-in back and
    the rest of the pool is split 50/30/20; if the pool cannot cover that
    buy-in the whole pool is split 50/30/20 instead.

    Prizes are rounded one by one, so their sum may drift a unit or two from
    the total.
    """
    buy_in = buy_in or 0
    if participant_count <= 0 or not total:
        return []

    if participant_count < FOURTH_PLACE_MIN_PLAYERS:
        if participant_count >= 3:
            structure = _split(total, THREE_WAY_SPLIT)
        elif participant_count == 2:
            structure = _split(total, HEADS_UP_SPLIT)
        else:
            structure = [PayoutEntry(position=1, prize=_round_prize(total))]
    elif total > buy_in:
        structure = _split(total - buy_in, THREE_WAY_SPLIT)
        structure.append(PayoutEntry(position=4, prize=buy_in))
    else:
        structure = _split(total, THREE_WAY_SPLIT)

    return sorted(structure, key=lambda entry: entry.position)


def payout_lookup(structure) -> Dict[int, float]:
    """Map finishing position to prize."""
    return {entry.position: entry.prize for entry in structure}


def compute_payout_distribution(structure, total) -> List[dict]:
    """Distribution rows stored on the event's prize pool once it is finalized."""
    rows = []
    for entry in structure:
        percentage = round(entry.prize / total * 100, 1) if total else 0
        rows.append({'position': entry.position, 'amount': entry.prize, 'percentage': percentage})
    return rows


class ChipStats:
    def __init__(self, total_chips, active_count, average_stack):
        self.total_chips = total_chips
        self.active_count = active_count
        self.average_stack = average_stack

    def to_dict(self):
        return {
            'total_chips': self.total_chips,
            'active_count': self.active_count,
            'average_stack': self.average_stack,
        }

    def __repr__(self):
        return (f"ChipStats(total_chips={self.total_chips}, active_count={self.active_count}, "
                f"average_stack={self.average_stack})")


def compute_chip_stats(roster, starting_stack: Optional[int]) -> ChipStats:
    """Each entry and each rebuy brings one starting stack onto the table."""
    total_chips = (len(roster) + total_rebuys(roster)) * (starting_stack or 0)
    active = sum(1 for p in roster if p.eliminated_position is None)
    average = total_chips // active if active > 0 else 0
    return ChipStats(total_chips=total_chips, active_count=active, average_stack=average)
