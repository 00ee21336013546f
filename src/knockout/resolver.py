"""
Match resolution and score recording.

Winners are decided on points with a seed tiebreaker: on equal points the
better (lower) seed goes through, so a match never ends in a draw.
"""
import copy
import logging
from typing import Dict, List, Mapping, Optional

from knockout.models import get_match_players

logger = logging.getLogger(__name__)


def resolve_match(match: Dict) -> Optional[Dict]:
    """
    Resolve a single match.

    Players are ranked by score (highest first), then by seed (lowest first).
    Returns None while the match cannot be decided yet, otherwise a dict with
    winner_id, loser_id, winner_score, loser_score, rankings and
    decided_by_tiebreaker. loser_id and loser_score are only set for
    two-player matches; rankings lists every team id in finishing order.
    """
    player1 = match.get('player1')
    if match.get('is_bye') and player1:
        return {
            'winner_id': player1['fpl_team_id'],
            'loser_id': None,
            'winner_score': player1.get('score'),
            'loser_score': None,
            'rankings': [player1['fpl_team_id']],
            'decided_by_tiebreaker': False,
        }

    players = get_match_players(match)
    # A lone player in an N-way match goes through on their own
    minimum = 1 if match.get('players') else 2
    if len(players) < minimum:
        return None

    # A score of 0 is a real score; only None means "not recorded"
    missing = [p['fpl_team_id'] for p in players if p.get('score') is None]
    if missing:
        logger.debug("Match %s: cannot resolve, missing scores for %s", match.get('id'), missing)
        return None

    ranked = sorted(players, key=lambda p: (-p['score'], p['seed']))
    winner = ranked[0]
    decided_by_tiebreaker = any(p['score'] == winner['score'] for p in ranked[1:])
    loser = ranked[1] if len(ranked) == 2 else None

    return {
        'winner_id': winner['fpl_team_id'],
        'loser_id': loser['fpl_team_id'] if loser else None,
        'winner_score': winner['score'],
        'loser_score': loser['score'] if loser else None,
        'rankings': [p['fpl_team_id'] for p in ranked],
        'decided_by_tiebreaker': decided_by_tiebreaker,
    }


def determine_match_winner(match: Dict) -> Optional[int]:
    """Return the winning fpl_team_id, or None if the match is not decided yet."""
    result = resolve_match(match)
    if result is None:
        return None
    return result['winner_id']


def is_round_complete(round_data: Dict) -> bool:
    """A round is complete when every match has a winner."""
    return all(match.get('winner_id') is not None for match in round_data['matches'])


def record_round_scores(rounds: List[Dict], round_number: int, scores: Mapping[int, float]) -> List[Dict]:
    """
    Record gameweek scores for one round.

    Scores are keyed by fpl_team_id. A player's score is set once; players
    that already have a score keep it. Winners and the round's is_complete
    flag are recomputed. Returns new rounds, the input is not modified.
    """
    if not any(r['round_number'] == round_number for r in rounds):
        logger.warning("Cannot record scores: no round %s", round_number)
        return rounds

    new_rounds = copy.deepcopy(rounds)
    target = next(r for r in new_rounds if r['round_number'] == round_number)

    recorded = 0
    for match in target['matches']:
        for player in get_match_players(match):
            team_id = player['fpl_team_id']
            if player.get('score') is None and scores.get(team_id) is not None:
                player['score'] = scores[team_id]
                recorded += 1
        if match.get('winner_id') is None:
            match['winner_id'] = determine_match_winner(match)

    target['is_complete'] = is_round_complete(target)
    logger.debug("Recorded %d scores for round %s (complete=%s)",
                 recorded, round_number, target['is_complete'])
    return new_rounds
