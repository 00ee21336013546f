# Command line entry point: seed a knockout bracket from standings and print it

import argparse
import logging
import sys

import yaml

from knockout.advancement import get_tournament_state
from knockout.bracket import BracketValidationError
from knockout.config import get_default_settings
from knockout.service import create_tournament, record_scores
from knockout.standings import StandingsError


def load_standings(file_path):
    """
    Load standings from YAML.

    Accepts either a plain list of rows or a mapping with 'league' and
    'standings' (itself a list or {'results': [...]}).
    """
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or []
    if isinstance(data, list):
        return {}, data
    standings = data.get('standings', [])
    if isinstance(standings, dict):
        standings = standings.get('results', [])
    return data.get('league', {}), standings


def load_scores(file_path):
    """Load {gameweek: {fpl_team_id: points}} from YAML."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or {}
    return {int(gw): {int(team): pts for team, pts in (scores or {}).items()} for gw, scores in data.items()}


def format_player(player):
    if not player:
        return "TBD"
    text = f"({player['seed']}) {player['team_name']}"
    if player.get('score') is not None:
        text += f" {player['score']}"
    return text


def print_bracket(tournament):
    print(f"{tournament.fpl_league_name or 'Knockout'} - {len(tournament.participants)} teams, "
          f"{tournament.total_rounds} rounds")
    for rnd in tournament.rounds:
        print(f"\n{rnd['name']} (GW{rnd['gameweek']})")
        for match in rnd['matches']:
            if match['is_bye']:
                print(f"  {format_player(match['player1'])} - bye")
                continue
            line = f"  {format_player(match['player1'])} vs {format_player(match['player2'])}"
            if match['winner_id'] is not None:
                winner = tournament.get_participant(match['winner_id'])
                line += f"  -> {winner.fpl_team_name}"
            print(line)

    state = get_tournament_state(tournament.rounds)
    if tournament.winner_id is not None:
        print(f"\nChampion: {tournament.get_participant(tournament.winner_id).fpl_team_name}")
    else:
        print(f"\nStatus: {state}, current round {tournament.current_round}")


def main(argv=None):
    parser = argparse.ArgumentParser(description='Generate a knockout bracket from league standings')
    parser.add_argument('standings', help='YAML file with league standings')
    parser.add_argument('--start-gameweek', type=int, required=True, help='Gameweek of round 1')
    parser.add_argument('--scores', help='YAML file with scores per gameweek')
    parser.add_argument('--max-participants', type=int, help='Override the participant limit')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    league, standings = load_standings(args.standings)
    settings = get_default_settings()
    if args.max_participants:
        settings['max_participants'] = args.max_participants

    try:
        tournament = create_tournament(
            fpl_league_id=league.get('id'),
            fpl_league_name=league.get('name', ''),
            standings=standings,
            start_gameweek=args.start_gameweek,
            settings=settings,
        )
    except (StandingsError, BracketValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.scores:
        for gameweek, scores in sorted(load_scores(args.scores).items()):
            tournament = record_scores(tournament, gameweek, scores)

    print_bracket(tournament)
    return 0


if __name__ == '__main__':
    sys.exit(main())
