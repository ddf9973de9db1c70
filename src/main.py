# Command-line entry point: print a season leaderboard from the YAML data files

import argparse
import os
import sys
import yaml
from core.models import Player, Event, Season
from core.stats import calculate_season_stats


def load_collection(file_path, key):
    if not os.path.exists(file_path):
        return []
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file)
    return data.get(key, []) if data else []


def format_money(amount):
    sign = '-' if amount < 0 else ''
    return f"{sign}€{abs(amount):,.0f}"


def print_leaderboard(stats, season):
    print(f"\n--- {season.name} ---")
    if not stats.leaderboard:
        print("No completed events in this season.")
        return
    print(f"Completed events: {len(stats.completed_events)}\n")
    print(f"{'#':>3}  {'Player':<24} {'Events':>6} {'Wins':>5} {'FT':>4} {'Net':>10}")
    for rank, entry in enumerate(stats.leaderboard, start=1):
        name = entry.player_name + (' (guest)' if entry.is_guest else '')
        print(f"{rank:>3}  {name:<24} {entry.events_played:>6} {entry.wins:>5} "
              f"{entry.final_tables:>4} {format_money(entry.total_final_result):>10}")


def main(argv=None):
    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)

    parser = argparse.ArgumentParser(description='Print the leaderboard of a season.')
    parser.add_argument('season_id', help='Season identifier')
    parser.add_argument('--data-dir', default=os.environ.get('POKER_DATA_DIR', os.path.join(base_dir, 'data')),
                        help='Directory holding players.yaml, events.yaml and seasons.yaml')
    args = parser.parse_args(argv)

    players = [Player.from_dict(p) for p in load_collection(os.path.join(args.data_dir, 'players.yaml'), 'players')]
    events = [Event.from_dict(e) for e in load_collection(os.path.join(args.data_dir, 'events.yaml'), 'events')]
    seasons = [Season.from_dict(s) for s in load_collection(os.path.join(args.data_dir, 'seasons.yaml'), 'seasons')]

    season = next((s for s in seasons if s.id == args.season_id), None)
    if season is None:
        print(f"Error: season '{args.season_id}' not found in {args.data_dir}", file=sys.stderr)
        return 1

    stats = calculate_season_stats(season, events, players)
    print_leaderboard(stats, season)
    return 0


if __name__ == '__main__':
    sys.exit(main())
