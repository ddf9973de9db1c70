"""
Season standings, player history and hall-of-fame records.

Everything here is recomputed from the event list on each call; nothing is
cached or written back.
"""
import math
from typing import Optional

from core.models import LeaderboardEntry, PlayerProgressPoint, player_display_name

MIN_GAMES_FOR_CONSISTENCY = 3


def final_table_threshold(num_participants: int) -> int:
    """Worst position that still counts as a final-table finish."""
    if num_participants >= 10:
        return math.ceil(num_participants * 0.3)
    if num_participants >= 5:
        return 3
    return num_participants if num_participants > 0 else 1


def event_investment(event, rebuys: int) -> float:
    return (event.buy_in or 0) + rebuys * (event.rebuy_price or 0)


def event_net_result(event, prize, rebuys: int) -> float:
    """Prize won minus buy-in and rebuys paid."""
    return (prize or 0) - event_investment(event, rebuys)


def completed_events(all_events, season_id=None) -> list:
    """Completed events in date order, optionally limited to one season."""
    events = [e for e in all_events
              if e.status == 'completed' and (season_id is None or e.season_id == season_id)]
    return sorted(events, key=lambda e: e.date or '')


class SeasonStats:
    def __init__(self, leaderboard, player_progress, completed_events):
        self.leaderboard = leaderboard
        self.player_progress = player_progress
        self.completed_events = completed_events

    def to_dict(self):
        return {
            'leaderboard': [entry.to_dict() for entry in self.leaderboard],
            'player_progress': {
                player_id: [point.to_dict() for point in points]
                for player_id, points in self.player_progress.items()
            },
            'completed_events': [
                {'id': e.id, 'name': e.name, 'date': e.date} for e in self.completed_events
            ],
        }


def calculate_season_stats(season, all_events, all_players) -> SeasonStats:
    """
    Net-profit leaderboard and cumulative progress for one season.

    Ranked results are counted first, then participants with no recorded
    result, who are charged a single buy-in. A player is counted at most once
    per event. Players missing from the directory are skipped.
    """
    events = completed_events(all_events, season.id)

    summaries = {}
    for player in all_players:
        summaries[player.id] = {
            'player': player,
            'total_final_result': 0,
            'events_played': 0,
            'wins': 0,
            'final_tables': 0,
            'event_results': {},
            'progress': [],
        }

    def record(summary, event, net):
        summary['events_played'] += 1
        summary['total_final_result'] += net
        summary['event_results'][event.id] = net
        summary['progress'].append(PlayerProgressPoint(
            event_id=event.id,
            event_date=event.date,
            event_name=event.name,
            event_final_result=net,
            cumulative_final_result=summary['total_final_result'],
        ))

    for event in events:
        processed = set()
        threshold = final_table_threshold(len(event.participants))

        for result in event.results:
            summary = summaries.get(result.player_id)
            if summary is None or result.player_id in processed:
                continue
            processed.add(result.player_id)
            if result.position == 1:
                summary['wins'] += 1
            if result.position <= threshold:
                summary['final_tables'] += 1
            record(summary, event, event_net_result(event, result.prize, result.rebuys))

        for player_id in event.participants:
            summary = summaries.get(player_id)
            if summary is None or player_id in processed:
                continue
            processed.add(player_id)
            record(summary, event, -(event.buy_in or 0))

    leaderboard = []
    player_progress = {}
    for player_id, summary in summaries.items():
        if summary['events_played'] == 0:
            continue
        player = summary['player']
        leaderboard.append(LeaderboardEntry(
            player_id=player_id,
            player_name=player_display_name(player),
            is_guest=player.is_guest,
            total_final_result=summary['total_final_result'],
            events_played=summary['events_played'],
            wins=summary['wins'],
            final_tables=summary['final_tables'],
            event_results=summary['event_results'],
        ))
        player_progress[player_id] = sorted(summary['progress'], key=lambda p: p.event_date or '')

    leaderboard.sort(key=lambda entry: -entry.total_final_result)

    return SeasonStats(leaderboard, player_progress, events)


def calculate_player_overall_stats(player_id, all_events, all_players, all_seasons) -> dict:
    """Lifetime statistics for one player over every completed event."""
    stats = {
        'games_played': 0,
        'wins': 0,
        'win_rate': 0,
        'final_tables': 0,
        'itm_rate': 0,
        'total_winnings': 0,
        'total_buy_ins': 0,
        'best_position': None,
        'average_position': None,
        'season_stats': {},
        'profit_evolution': [],
    }
    if not any(p.id == player_id for p in all_players):
        return stats

    season_names = {s.id: s.name for s in all_seasons}
    positions = []
    cumulative = 0

    for event in completed_events(all_events):
        if player_id not in event.participants:
            continue
        stats['games_played'] += 1

        result = event.result_for(player_id)
        rebuys = result.rebuys if result else 0
        prize = (result.prize or 0) if result else 0
        stats['total_winnings'] += prize

        if result:
            positions.append(result.position)
            if result.position == 1:
                stats['wins'] += 1
            if result.position <= final_table_threshold(len(event.participants)):
                stats['final_tables'] += 1

        investment = event_investment(event, rebuys)
        net = prize - investment
        stats['total_buy_ins'] += investment
        cumulative += net
        stats['profit_evolution'].append({
            'event_name': event.name,
            'event_date': event.date,
            'cumulative_profit': cumulative,
        })

        if event.season_id:
            season_entry = stats['season_stats'].setdefault(event.season_id, {
                'season_name': season_names.get(event.season_id, 'Unknown Season'),
                'games_played': 0,
                'net_profit': 0,
            })
            season_entry['games_played'] += 1
            season_entry['net_profit'] += net

    if positions:
        stats['best_position'] = min(positions)
        stats['average_position'] = sum(positions) / len(positions)
    if stats['games_played']:
        stats['win_rate'] = stats['wins'] / stats['games_played'] * 100
        stats['itm_rate'] = stats['final_tables'] / stats['games_played'] * 100

    return stats


def _player_record(player, value) -> dict:
    return {'player_id': player.id, 'player_name': player_display_name(player), 'value': value}


def calculate_hall_of_fame_stats(all_players, all_events) -> dict:
    """All-time records over non-guest players."""
    events = [e for e in all_events if e.status == 'completed']
    members = [p for p in all_players if not p.is_guest]
    total_prize_pools = sum((e.prize_pool or {}).get('total') or 0 for e in events)

    records = {
        'most_wins': None,
        'most_podiums': None,
        'highest_net': None,
        'lowest_net': None,
        'most_games_played': None,
        'most_spent': None,
        'biggest_single_win': None,
        'most_consistent': None,
        'total_prize_pools': total_prize_pools,
    }
    if not members or not events:
        return records

    tallies = {}
    for player in members:
        tallies[player.id] = {
            'wins': 0, 'podiums': 0, 'games_played': 0, 'total_net': 0,
            'total_spent': 0, 'biggest_win': None, 'positions': [],
        }

    for event in events:
        for player_id in event.participants:
            tally = tallies.get(player_id)
            if tally is None:
                continue
            tally['games_played'] += 1
            result = event.result_for(player_id)
            rebuys = result.rebuys if result else 0
            prize = (result.prize or 0) if result else 0

            spent = event_investment(event, rebuys)
            net = prize - spent
            tally['total_spent'] += spent
            tally['total_net'] += net
            if tally['biggest_win'] is None or net > tally['biggest_win'][1]:
                tally['biggest_win'] = (event, net)

            if result:
                tally['positions'].append(result.position)
                if result.position == 1:
                    tally['wins'] += 1
                if result.position <= 3:
                    tally['podiums'] += 1

    def best(key, lowest=False) -> Optional[dict]:
        winner = None
        for player in members:
            value = tallies[player.id][key]
            if winner is None or (value < winner['value'] if lowest else value > winner['value']):
                winner = _player_record(player, value)
        return winner

    for name, key in (('most_wins', 'wins'), ('most_podiums', 'podiums'),
                      ('most_games_played', 'games_played'), ('most_spent', 'total_spent'),
                      ('highest_net', 'total_net')):
        record = best(key)
        records[name] = record if record and record['value'] > 0 else None

    lowest = best('total_net', lowest=True)
    records['lowest_net'] = lowest if lowest and lowest['value'] < 0 else None

    biggest = None
    for player in members:
        candidate = tallies[player.id]['biggest_win']
        if candidate and (biggest is None or candidate[1] > biggest['value']):
            event, value = candidate
            biggest = _player_record(player, value)
            biggest.update({'event_id': event.id, 'event_name': event.name})
    records['biggest_single_win'] = biggest if biggest and biggest['value'] > 0 else None

    for player in members:
        tally = tallies[player.id]
        if tally['positions'] and tally['games_played'] >= MIN_GAMES_FOR_CONSISTENCY:
            average = sum(tally['positions']) / len(tally['positions'])
            current = records['most_consistent']
            if current is None or average < current['value']:
                records['most_consistent'] = _player_record(player, average)

    return records
