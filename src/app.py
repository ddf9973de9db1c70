"""
Flask web application for the poker league manager.

Serves the live tournament view and the statistics pages as JSON. Players,
events, seasons and in-progress live sessions are stored as YAML files under
DATA_DIR.
"""
import os
import logging
import yaml
from filelock import FileLock
from flask import Flask, request, jsonify, abort
from core.models import Player, Event, Season
from core.live import LiveTournament, positions_are_complete
from core.payouts import compute_payout_distribution
from core.stats import calculate_season_stats, calculate_player_overall_stats, calculate_hall_of_fame_stats

app = Flask(__name__)
app.logger.setLevel(logging.INFO)


BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('POKER_DATA_DIR', os.path.join(BASE_DIR, 'data'))

PLAYERS_FILE = os.path.join(DATA_DIR, 'players.yaml')
EVENTS_FILE = os.path.join(DATA_DIR, 'events.yaml')
SEASONS_FILE = os.path.join(DATA_DIR, 'seasons.yaml')
LIVE_DIR = os.path.join(DATA_DIR, 'live')

os.makedirs(DATA_DIR, exist_ok=True)
_data_lock = FileLock(os.path.join(DATA_DIR, '.lock'), timeout=10)

LIVE_ACTIONS = ('add', 'remove', 'rebuy', 'eliminate', 'undo',
                'tick', 'next_level', 'prev_level', 'toggle_clock')


def _load_collection(path: str, key: str) -> list:
    """Load one top-level list from a YAML file; missing or broken files read as empty."""
    if not os.path.exists(path):
        return []
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        return data.get(key, []) if data else []
    except Exception as e:
        app.logger.warning(f'Failed to parse {path}: {e}')
        return []


def _save_collection(path: str, key: str, items: list):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump({key: items}, f, default_flow_style=False, sort_keys=False)


def load_players() -> list:
    """Load the player directory."""
    return [Player.from_dict(p) for p in _load_collection(PLAYERS_FILE, 'players')]


def load_events() -> list:
    """Load all events."""
    return [Event.from_dict(e) for e in _load_collection(EVENTS_FILE, 'events')]


def save_events(events: list):
    """Save all events."""
    _save_collection(EVENTS_FILE, 'events', [e.to_dict() for e in events])


def load_seasons() -> list:
    """Load all seasons."""
    return [Season.from_dict(s) for s in _load_collection(SEASONS_FILE, 'seasons')]


def _live_file(event_id: str) -> str:
    return os.path.join(LIVE_DIR, f'{event_id}.yaml')


def load_live_session(event_id: str):
    """Restore a live session snapshot, or None if there is none."""
    path = _live_file(event_id)
    if not os.path.exists(path):
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except Exception as e:
        app.logger.warning(f'Failed to parse {path}: {e}')
        return None
    if not data:
        return None
    return LiveTournament.restore(data)


def save_live_session(session: LiveTournament):
    """Persist a live session snapshot."""
    os.makedirs(LIVE_DIR, exist_ok=True)
    with open(_live_file(session.event_id), 'w', encoding='utf-8') as f:
        yaml.dump(session.snapshot(), f, default_flow_style=False, sort_keys=False)


def delete_live_session(event_id: str) -> bool:
    path = _live_file(event_id)
    if os.path.exists(path):
        os.remove(path)
        return True
    return False


def _find(items, item_id):
    for item in items:
        if item.id == item_id:
            return item
    return None


def _get_live_event(event_id: str):
    """Return the event or an error response tuple."""
    event = _find(load_events(), event_id)
    if event is None:
        return None, (jsonify({'error': 'Event not found'}), 404)
    if event.status != 'active':
        return None, (jsonify({'error': 'Event is not active'}), 409)
    return event, None


def _get_or_start_session(event) -> LiveTournament:
    session = load_live_session(event.id)
    if session is None:
        session = LiveTournament.from_event(event, load_players())
        save_live_session(session)
        app.logger.info(f'Started live session for event {event.id} with {len(session.roster)} players')
    return session


@app.route('/api/events/<event_id>/live', methods=['GET'])
def api_live_state(event_id):
    """Current live state of an event, starting a session on first access."""
    with _data_lock:
        event, error = _get_live_event(event_id)
        if error:
            return error
        session = _get_or_start_session(event)
    return jsonify(session.summary())


@app.route('/api/events/<event_id>/live', methods=['POST'])
def api_live_action(event_id):
    """Apply one roster or clock action to the live session."""
    data = request.get_json(silent=True) or {}
    action = data.get('action')
    if action not in LIVE_ACTIONS:
        return jsonify({'error': f'Unknown action: {action}'}), 400

    player_id = data.get('player_id')
    if action in ('add', 'remove', 'rebuy', 'eliminate') and not player_id:
        return jsonify({'error': 'Missing player_id'}), 400

    with _data_lock:
        event, error = _get_live_event(event_id)
        if error:
            return error
        session = _get_or_start_session(event)

        if action in ('add', 'remove') and session.has_started:
            return jsonify({'error': 'Players cannot join or leave after the first elimination'}), 409

        if action == 'add':
            player = _find(load_players(), player_id)
            if player is None:
                return jsonify({'error': 'Player not found'}), 404
            if session.is_full:
                return jsonify({'error': f'Event is full ({session.max_players} players)'}), 400
            session.add(player)
        elif action == 'remove':
            session.remove(player_id)
        elif action == 'rebuy':
            try:
                delta = int(data.get('delta', 1))
            except (TypeError, ValueError):
                return jsonify({'error': 'delta must be an integer'}), 400
            session.rebuy(player_id, delta)
        elif action == 'eliminate':
            session.eliminate(player_id)
        elif action == 'undo':
            session.undo()
        elif action == 'tick':
            try:
                seconds = int(data.get('seconds', 1))
            except (TypeError, ValueError):
                return jsonify({'error': 'seconds must be an integer'}), 400
            session.clock.tick(seconds)
        elif action == 'next_level':
            session.clock.advance()
        elif action == 'prev_level':
            session.clock.rewind()
        elif action == 'toggle_clock':
            session.clock.toggle()

        save_live_session(session)

    return jsonify(session.summary())


@app.route('/api/events/<event_id>/live', methods=['DELETE'])
def api_discard_live_session(event_id):
    """Throw away the in-progress session for an event."""
    with _data_lock:
        deleted = delete_live_session(event_id)
    return jsonify({'success': True, 'deleted': deleted})


@app.route('/api/events/<event_id>/live/finalize', methods=['POST'])
def api_finalize_live_session(event_id):
    """Write the final results into the event and close the session."""
    with _data_lock:
        events = load_events()
        event = _find(events, event_id)
        if event is None:
            return jsonify({'error': 'Event not found'}), 404
        if event.status != 'active':
            return jsonify({'error': 'Event is not active'}), 409
        session = load_live_session(event_id)
        if session is None:
            return jsonify({'error': 'No live session for this event'}), 409
        if not session.is_finished:
            return jsonify({'error': 'Tournament is not finished yet'}), 409

        results, total = session.finalize()
        if not positions_are_complete(results, len(session.roster)):
            app.logger.warning(f'Refusing to finalize event {event_id}: inconsistent finishing positions')
            return jsonify({'error': 'Finishing positions are inconsistent'}), 409
        event.results = results
        event.participants = [p.id for p in session.roster]
        event.prize_pool = {
            'total': total,
            'distribution_type': 'automatic',
            'distribution': compute_payout_distribution(session.payout_structure, total),
        }
        event.status = 'completed'
        try:
            save_events(events)
        except OSError as e:
            app.logger.error(f'Failed to save results for event {event_id}: {e}')
            return jsonify({'error': f'Failed to save results: {e}'}), 500
        delete_live_session(event_id)

    app.logger.info(f'Finalized event {event_id}: {len(results)} results, prize pool {total}')
    return jsonify({
        'success': True,
        'results': [r.to_dict() for r in results],
        'total_prize_pool': total,
    })


@app.route('/api/seasons/<season_id>/stats')
def api_season_stats(season_id):
    """Season leaderboard and per-player progress."""
    season = _find(load_seasons(), season_id)
    if season is None:
        abort(404)
    stats = calculate_season_stats(season, load_events(), load_players())
    return jsonify({'season': season.to_dict(), **stats.to_dict()})


@app.route('/api/players/<player_id>/stats')
def api_player_stats(player_id):
    """Lifetime statistics for one player."""
    players = load_players()
    if _find(players, player_id) is None:
        abort(404)
    stats = calculate_player_overall_stats(player_id, load_events(), players, load_seasons())
    return jsonify(stats)


@app.route('/api/hall-of-fame')
def api_hall_of_fame():
    """All-time records."""
    return jsonify(calculate_hall_of_fame_stats(load_players(), load_events()))


@app.errorhandler(404)
def not_found(e):
    return jsonify({'error': 'Not found'}), 404


if __name__ == '__main__':
    app.run(debug=True)
