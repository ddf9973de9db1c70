"""
Blind structure and tournament clock.

The clock never reads wall time: the caller advances it with tick(), which
keeps it serialisable between requests.
"""
from typing import List, Optional

from core.models import BlindLevel


DEFAULT_BLIND_STRUCTURE = [
    BlindLevel(level=1, small_blind=10, big_blind=20, duration=20),
    BlindLevel(level=2, small_blind=20, big_blind=40, duration=20),
    BlindLevel(level=3, small_blind=30, big_blind=60, duration=20),
    BlindLevel(level=4, small_blind=40, big_blind=80, duration=20),
    BlindLevel(level=5, small_blind=50, big_blind=100, duration=20),
    BlindLevel(level=0, small_blind=0, big_blind=0, duration=5, is_break=True),
    BlindLevel(level=6, small_blind=100, big_blind=200, duration=15),
    BlindLevel(level=7, small_blind=150, big_blind=300, duration=15),
    BlindLevel(level=8, small_blind=200, big_blind=400, duration=15),
]


def format_time(seconds: int) -> str:
    """Format a second count as MM:SS."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class BlindClock:
    def __init__(self, structure: Optional[List[BlindLevel]] = None, level_index: int = 0,
                 time_left: Optional[int] = None, elapsed: int = 0, paused: bool = True):
        self.structure = list(structure) if structure else list(DEFAULT_BLIND_STRUCTURE)
        self.level_index = level_index % len(self.structure)
        self.time_left = time_left if time_left is not None else self._level_seconds(self.level_index)
        self.elapsed = elapsed
        self.paused = paused

    def _level_seconds(self, index: int) -> int:
        return self.structure[index].duration * 60

    def _move_to(self, index: int):
        self.level_index = index % len(self.structure)
        self.time_left = self._level_seconds(self.level_index)

    @property
    def current_level(self) -> BlindLevel:
        return self.structure[self.level_index]

    @property
    def next_level(self) -> BlindLevel:
        return self.structure[(self.level_index + 1) % len(self.structure)]

    def advance(self):
        self._move_to(self.level_index + 1)

    def rewind(self):
        self._move_to(self.level_index - 1)

    def toggle(self):
        self.paused = not self.paused

    def tick(self, seconds: int = 1):
        """Run the clock for a number of seconds, rolling into later levels as needed."""
        if self.paused or seconds <= 0:
            return
        self.elapsed += seconds
        self.time_left -= seconds
        while self.time_left <= 0:
            overflow = -self.time_left
            self.advance()
            # Zero-length levels would never consume the overflow.
            if self.time_left <= 0:
                break
            self.time_left -= overflow

    def time_to_next_break(self) -> Optional[int]:
        """
        Seconds until the next break starts.

        0 while on a break, None when the structure has no break at all.
        """
        if self.current_level.is_break:
            return 0
        total = self.time_left
        count = len(self.structure)
        for step in range(1, count):
            level = self.structure[(self.level_index + step) % count]
            if level.is_break:
                return total
            total += level.duration * 60
        return None

    def snapshot(self) -> dict:
        return {
            'structure': [level.to_dict() for level in self.structure],
            'level_index': self.level_index,
            'time_left': self.time_left,
            'elapsed': self.elapsed,
            'paused': self.paused,
        }

    @classmethod
    def restore(cls, data: dict) -> 'BlindClock':
        structure = [BlindLevel.from_dict(level) for level in data.get('structure') or []]
        return cls(
            structure=structure or None,
            level_index=data.get('level_index', 0),
            time_left=data.get('time_left'),
            elapsed=data.get('elapsed', 0),
            paused=data.get('paused', True),
        )

    def to_dict(self) -> dict:
        """Display state for the clock panel."""
        time_to_break = self.time_to_next_break()
        return {
            'level': self.current_level.to_dict(),
            'next_level': self.next_level.to_dict(),
            'time_left': self.time_left,
            'time_left_display': format_time(self.time_left),
            'elapsed': self.elapsed,
            'elapsed_display': format_time(self.elapsed),
            'time_to_break': time_to_break,
            'time_to_break_display': format_time(time_to_break) if time_to_break is not None else None,
            'paused': self.paused,
        }
