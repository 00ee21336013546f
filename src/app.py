"""
Flask web application for Knockout tournaments.

JSON API over the bracket engine. Tournament documents live in YAML files
under DATA_DIR.
"""
import os
import logging
from flask import Flask, request, jsonify
from knockout.advancement import get_tournament_state
from knockout.bracket import BracketValidationError, calculate_bracket_preview
from knockout.config import load_settings
from knockout.progress import calculate_remaining_participants, find_eliminated_round, get_user_status
from knockout.service import create_tournament, record_scores, refresh_tournament
from knockout.standings import StandingsError
from knockout.store import TournamentStore, VersionConflictError

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('KNOCKOUT_DATA_DIR', os.path.join(BASE_DIR, 'data'))

app.secret_key = os.environ.get('SECRET_KEY', 'dev')

if not app.debug:
    app.logger.setLevel(logging.INFO)


def get_store() -> TournamentStore:
    """Store rooted at the current DATA_DIR."""
    return TournamentStore(DATA_DIR)


def _error(message: str, status: int):
    return jsonify({'success': False, 'error': message}), status


def _tournament_payload(tournament) -> dict:
    data = tournament.to_dict()
    data['state'] = get_tournament_state(tournament.rounds)
    data['remaining_participants'] = calculate_remaining_participants(tournament.rounds)
    return data


def _parse_scores(raw) -> dict:
    """Scores arrive as a JSON object keyed by team id strings."""
    if not isinstance(raw, dict):
        raise ValueError('scores must be an object of team id to points')
    scores = {}
    for team_id, points in raw.items():
        if points is None:
            continue
        if isinstance(points, bool) or not isinstance(points, (int, float)):
            raise ValueError(f'Score for team {team_id} must be a number')
        scores[int(team_id)] = points
    return scores


def _save_refreshed(store, tournament):
    """Save tournament, mapping a lost write race to a 409 response."""
    try:
        store.save(tournament)
    except VersionConflictError as e:
        app.logger.warning(f'Write conflict: {e}')
        return _error('Tournament was updated by another request, reload and retry.', 409)
    return None


@app.route('/api/tournaments', methods=['GET'])
def api_list_tournaments():
    """List tournament summaries."""
    tournaments = get_store().list_tournaments()
    return jsonify({'success': True, 'tournaments': [
        {
            'id': t.id,
            'fpl_league_id': t.fpl_league_id,
            'fpl_league_name': t.fpl_league_name,
            'status': t.status,
            'current_round': t.current_round,
            'total_rounds': t.total_rounds,
            'participant_count': len(t.participants),
        }
        for t in tournaments
    ]})


@app.route('/api/tournaments', methods=['POST'])
def api_create_tournament():
    """Create a tournament from league standings."""
    data = request.get_json(silent=True) or {}
    standings = data.get('standings')
    start_gameweek = data.get('start_gameweek')
    if not isinstance(standings, list) or not standings:
        return _error('standings are required.', 400)
    if isinstance(start_gameweek, bool) or not isinstance(start_gameweek, int) or start_gameweek < 1:
        return _error('start_gameweek must be a positive integer.', 400)

    try:
        tournament = create_tournament(
            fpl_league_id=data.get('fpl_league_id'),
            fpl_league_name=data.get('fpl_league_name', ''),
            standings=standings,
            start_gameweek=start_gameweek,
            creator_user_id=data.get('creator_user_id'),
            settings=load_settings(DATA_DIR),
        )
    except (StandingsError, BracketValidationError) as e:
        return _error(str(e), 400)

    get_store().save(tournament)
    app.logger.info(f'Tournament {tournament.id} created ({tournament.fpl_league_name})')
    return jsonify({'success': True, 'tournament': _tournament_payload(tournament)}), 201


@app.route('/api/tournaments/<tournament_id>', methods=['GET'])
def api_get_tournament(tournament_id):
    """Get a tournament with its full bracket."""
    tournament = get_store().load(tournament_id)
    if tournament is None:
        return _error('Tournament not found.', 404)
    return jsonify({'success': True, 'tournament': _tournament_payload(tournament)})


@app.route('/api/tournaments/<tournament_id>', methods=['DELETE'])
def api_delete_tournament(tournament_id):
    """Delete a tournament."""
    if not get_store().delete(tournament_id):
        return _error('Tournament not found.', 404)
    return jsonify({'success': True})


@app.route('/api/tournaments/<tournament_id>/scores', methods=['POST'])
def api_record_scores(tournament_id):
    """Record gameweek scores and advance winners."""
    store = get_store()
    tournament = store.load(tournament_id)
    if tournament is None:
        return _error('Tournament not found.', 404)

    data = request.get_json(silent=True) or {}
    gameweek = data.get('gameweek')
    if isinstance(gameweek, bool) or not isinstance(gameweek, int):
        return _error('gameweek must be an integer.', 400)
    if not any(r['gameweek'] == gameweek for r in tournament.rounds):
        return _error(f'No round is played in gameweek {gameweek}.', 400)
    try:
        scores = _parse_scores(data.get('scores'))
    except ValueError as e:
        return _error(str(e), 400)

    updated = record_scores(tournament, gameweek, scores)
    conflict = _save_refreshed(store, updated)
    if conflict:
        return conflict
    return jsonify({'success': True, 'tournament': _tournament_payload(updated)})


@app.route('/api/tournaments/<tournament_id>/refresh', methods=['POST'])
def api_refresh_tournament(tournament_id):
    """Advance winners of complete rounds. Safe to call repeatedly."""
    store = get_store()
    tournament = store.load(tournament_id)
    if tournament is None:
        return _error('Tournament not found.', 404)

    updated = refresh_tournament(tournament)
    if updated.to_dict() != tournament.to_dict():
        conflict = _save_refreshed(store, updated)
        if conflict:
            return conflict
    return jsonify({'success': True, 'tournament': _tournament_payload(updated)})


@app.route('/api/tournaments/<tournament_id>/teams/<int:fpl_team_id>', methods=['GET'])
def api_team_status(tournament_id, fpl_team_id):
    """Where a team stands in the tournament."""
    tournament = get_store().load(tournament_id)
    if tournament is None:
        return _error('Tournament not found.', 404)
    participant = tournament.get_participant(fpl_team_id)
    if participant is None:
        return _error('Team is not in this tournament.', 404)

    eliminated_round = find_eliminated_round(tournament.rounds, fpl_team_id)
    return jsonify({
        'success': True,
        'team': participant.to_dict(),
        'status': get_user_status(eliminated_round, tournament.is_complete),
        'eliminated_round': eliminated_round,
        'current_round': tournament.current_round,
    })


@app.route('/api/bracket-preview', methods=['GET'])
def api_bracket_preview():
    """Bracket shape for a field size and number of managers per match."""
    participants = request.args.get('participants', type=int)
    match_size = request.args.get('match_size', default=load_settings(DATA_DIR)['match_size'], type=int)
    if participants is None:
        return _error('participants is required.', 400)
    return jsonify({'success': True, 'preview': calculate_bracket_preview(participants, match_size)})


if __name__ == '__main__':
    app.run(debug=True, port=5000)
