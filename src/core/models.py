EVENT_STATUSES = ('draft', 'active', 'completed', 'cancelled')


def _iso(value):
    """Dates may come back from YAML as date objects; keep them as ISO strings."""
    if value is None:
        return None
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return str(value)


class Player:
    def __init__(self, id, first_name='', last_name='', nickname=None, email=None,
                 is_guest=False, is_active=True):
        self.id = id
        self.first_name = first_name
        self.last_name = last_name
        self.nickname = nickname
        self.email = email
        self.is_guest = is_guest
        self.is_active = is_active

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            first_name=data.get('first_name') or '',
            last_name=data.get('last_name') or '',
            nickname=data.get('nickname'),
            email=data.get('email'),
            is_guest=bool(data.get('is_guest', False)),
            is_active=bool(data.get('is_active', True)),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'nickname': self.nickname,
            'email': self.email,
            'is_guest': self.is_guest,
            'is_active': self.is_active,
        }

    def __repr__(self):
        return f"Player(id={self.id}, name={player_display_name(self)}, is_guest={self.is_guest})"


def player_display_name(player) -> str:
    """Nickname first, then "First L.", then the last name alone."""
    if player is None:
        return "Unknown Player"
    if player.nickname and player.nickname.strip():
        return player.nickname
    if player.first_name:
        if player.last_name:
            return f"{player.first_name} {player.last_name[0]}."
        return player.first_name
    if player.last_name:
        return player.last_name
    return "Unnamed"


class Participant:
    """A player on the live roster. eliminated_position is None while active."""

    def __init__(self, id, name, is_guest=False, rebuys=0, eliminated_position=None):
        self.id = id
        self.name = name
        self.is_guest = is_guest
        self.rebuys = rebuys
        self.eliminated_position = eliminated_position

    @property
    def is_active(self):
        return self.eliminated_position is None

    def copy(self):
        return Participant(**self.to_dict())

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            is_guest=bool(data.get('is_guest', False)),
            rebuys=int(data.get('rebuys', 0)),
            eliminated_position=data.get('eliminated_position'),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'is_guest': self.is_guest,
            'rebuys': self.rebuys,
            'eliminated_position': self.eliminated_position,
        }

    def __eq__(self, other):
        if not isinstance(other, Participant):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Participant(id={self.id}, name={self.name}, rebuys={self.rebuys}, "
                f"eliminated_position={self.eliminated_position})")


class PayoutEntry:
    def __init__(self, position, prize):
        self.position = position
        self.prize = prize

    def to_dict(self):
        return {'position': self.position, 'prize': self.prize}

    def __eq__(self, other):
        if not isinstance(other, PayoutEntry):
            return NotImplemented
        return (self.position, self.prize) == (other.position, other.prize)

    def __repr__(self):
        return f"PayoutEntry(position={self.position}, prize={self.prize})"


class EventResult:
    def __init__(self, player_id, position, prize=0, rebuys=0):
        self.player_id = player_id
        self.position = position
        self.prize = prize
        self.rebuys = rebuys

    @classmethod
    def from_dict(cls, data):
        return cls(
            player_id=data['player_id'],
            position=int(data['position']),
            prize=data.get('prize') or 0,
            rebuys=int(data.get('rebuys') or 0),
        )

    def to_dict(self):
        return {
            'player_id': self.player_id,
            'position': self.position,
            'prize': self.prize,
            'rebuys': self.rebuys,
        }

    def __eq__(self, other):
        if not isinstance(other, EventResult):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"EventResult(player_id={self.player_id}, position={self.position}, "
                f"prize={self.prize}, rebuys={self.rebuys})")


class BlindLevel:
    def __init__(self, level, small_blind, big_blind, duration, ante=0, is_break=False):
        self.level = level
        self.small_blind = small_blind
        self.big_blind = big_blind
        self.duration = duration  # minutes
        self.ante = ante
        self.is_break = is_break

    @classmethod
    def from_dict(cls, data):
        return cls(
            level=int(data.get('level', 0)),
            small_blind=int(data.get('small_blind', 0)),
            big_blind=int(data.get('big_blind', 0)),
            duration=int(data['duration']),
            ante=int(data.get('ante') or 0),
            is_break=bool(data.get('is_break', False)),
        )

    def to_dict(self):
        return {
            'level': self.level,
            'small_blind': self.small_blind,
            'big_blind': self.big_blind,
            'ante': self.ante,
            'duration': self.duration,
            'is_break': self.is_break,
        }

    def __repr__(self):
        if self.is_break:
            return f"BlindLevel(break, duration={self.duration})"
        return f"BlindLevel(level={self.level}, blinds={self.small_blind}/{self.big_blind}, duration={self.duration})"


class Event:
    def __init__(self, id, name, date, buy_in, rebuy_allowed=False, rebuy_price=None,
                 max_players=0, status='draft', season_id=None, participants=None,
                 results=None, prize_pool=None, starting_stack=None, blind_structure=None):
        self.id = id
        self.name = name
        self.date = _iso(date)
        self.buy_in = buy_in
        self.rebuy_allowed = rebuy_allowed
        self.rebuy_price = rebuy_price
        self.max_players = max_players
        self.status = status
        self.season_id = season_id
        self.participants = participants if participants else []
        self.results = results if results else []
        self.prize_pool = prize_pool if prize_pool else {
            'total': 0, 'distribution_type': 'automatic', 'distribution': []
        }
        self.starting_stack = starting_stack
        self.blind_structure = blind_structure

    @classmethod
    def from_dict(cls, data):
        blind_structure = data.get('blind_structure')
        status = data.get('status', 'draft')
        if status not in EVENT_STATUSES:
            raise ValueError(f"Unknown event status '{status}' for event {data.get('id')}")
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            date=data.get('date'),
            buy_in=data.get('buy_in') or 0,
            rebuy_allowed=bool(data.get('rebuy_allowed', False)),
            rebuy_price=data.get('rebuy_price'),
            max_players=int(data.get('max_players') or 0),
            status=status,
            season_id=data.get('season_id'),
            participants=list(data.get('participants') or []),
            results=[EventResult.from_dict(r) for r in data.get('results') or []],
            prize_pool=data.get('prize_pool'),
            starting_stack=data.get('starting_stack'),
            blind_structure=[BlindLevel.from_dict(b) for b in blind_structure] if blind_structure else None,
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'date': self.date,
            'buy_in': self.buy_in,
            'rebuy_allowed': self.rebuy_allowed,
            'rebuy_price': self.rebuy_price,
            'max_players': self.max_players,
            'status': self.status,
            'season_id': self.season_id,
            'participants': list(self.participants),
            'results': [r.to_dict() for r in self.results],
            'prize_pool': self.prize_pool,
            'starting_stack': self.starting_stack,
            'blind_structure': [b.to_dict() for b in self.blind_structure] if self.blind_structure else None,
        }

    def result_for(self, player_id):
        for result in self.results:
            if result.player_id == player_id:
                return result
        return None

    def __repr__(self):
        return f"Event(id={self.id}, name={self.name}, date={self.date}, status={self.status})"


class Season:
    def __init__(self, id, name, start_date, end_date=None, is_active=False, leaderboard=None):
        self.id = id
        self.name = name
        self.start_date = _iso(start_date)
        self.end_date = _iso(end_date)
        self.is_active = is_active
        # Stored for round-tripping only; standings are always recomputed.
        self.leaderboard = leaderboard if leaderboard else []

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            start_date=data.get('start_date'),
            end_date=data.get('end_date'),
            is_active=bool(data.get('is_active', False)),
            leaderboard=data.get('leaderboard'),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'start_date': self.start_date,
            'end_date': self.end_date,
            'is_active': self.is_active,
            'leaderboard': self.leaderboard,
        }

    def __repr__(self):
        return f"Season(id={self.id}, name={self.name}, is_active={self.is_active})"


class LeaderboardEntry:
    def __init__(self, player_id, player_name, is_guest=False, total_final_result=0,
                 events_played=0, wins=0, final_tables=0, event_results=None):
        self.player_id = player_id
        self.player_name = player_name
        self.is_guest = is_guest
        self.total_final_result = total_final_result
        self.events_played = events_played
        self.wins = wins
        self.final_tables = final_tables
        self.event_results = event_results if event_results else {}

    def to_dict(self):
        return {
            'player_id': self.player_id,
            'player_name': self.player_name,
            'is_guest': self.is_guest,
            'total_final_result': self.total_final_result,
            'events_played': self.events_played,
            'wins': self.wins,
            'final_tables': self.final_tables,
            'event_results': dict(self.event_results),
        }

    def __repr__(self):
        return (f"LeaderboardEntry(player={self.player_name}, total={self.total_final_result}, "
                f"events_played={self.events_played})")


class PlayerProgressPoint:
    def __init__(self, event_id, event_date, event_name, event_final_result, cumulative_final_result):
        self.event_id = event_id
        self.event_date = event_date
        self.event_name = event_name
        self.event_final_result = event_final_result
        self.cumulative_final_result = cumulative_final_result

    def to_dict(self):
        return {
            'event_id': self.event_id,
            'event_date': self.event_date,
            'event_name': self.event_name,
            'event_final_result': self.event_final_result,
            'cumulative_final_result': self.cumulative_final_result,
        }

    def __repr__(self):
        return (f"PlayerProgressPoint(event={self.event_name}, result={self.event_final_result}, "
                f"cumulative={self.cumulative_final_result})")
