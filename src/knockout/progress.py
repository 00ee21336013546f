"""
Per-team progress queries over a bracket.
"""
from typing import Dict, List, Optional, Tuple

from knockout.models import get_match_players


def find_sibling_match(rounds: List[Dict], match_id: str, round_number: int) -> Optional[Tuple[Dict, Dict]]:
    """
    Find the match that feeds the same next-round match as match_id.

    Matches at positions 2n and 2n+1 feed position n, so the sibling of an
    even position is the next one and of an odd position the previous one.
    Returns (match, round) or None (e.g. in the final).
    """
    rnd = next((r for r in rounds if r['round_number'] == round_number), None)
    if rnd is None:
        return None

    index = next((i for i, m in enumerate(rnd['matches']) if m['id'] == match_id), None)
    if index is None:
        return None

    sibling_index = index + 1 if index % 2 == 0 else index - 1
    if sibling_index < 0 or sibling_index >= len(rnd['matches']):
        return None
    return rnd['matches'][sibling_index], rnd


def calculate_remaining_participants(rounds: List[Dict]) -> int:
    """Count teams that have appeared in the bracket and not lost a match."""
    all_teams = set()
    eliminated = set()

    for rnd in rounds:
        for match in rnd['matches']:
            players = get_match_players(match)
            all_teams.update(p['fpl_team_id'] for p in players)
            if match.get('winner_id') is None or match.get('is_bye'):
                continue
            eliminated.update(p['fpl_team_id'] for p in players if p['fpl_team_id'] != match['winner_id'])

    return len(all_teams) - len(eliminated)


def find_eliminated_round(rounds: List[Dict], fpl_team_id: int) -> Optional[int]:
    """Round number in which the team lost, or None if it is still in."""
    for rnd in rounds:
        for match in rnd['matches']:
            if match.get('winner_id') is None or match.get('is_bye'):
                continue
            players = get_match_players(match)
            if any(p['fpl_team_id'] == fpl_team_id for p in players) and match['winner_id'] != fpl_team_id:
                return rnd['round_number']
    return None


def get_user_status(eliminated_round: Optional[int], tournament_complete: bool) -> str:
    """One of 'in', 'eliminated' or 'winner'."""
    if eliminated_round is not None:
        return 'eliminated'
    if tournament_complete:
        return 'winner'
    return 'in'
