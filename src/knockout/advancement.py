"""
Advancing winners through the bracket and tracking tournament state.

Match i of round k feeds match i // 2 of round k + 1: the winner of an even
match fills player1, the winner of an odd match fills player2.
"""
import copy
import logging
from typing import Dict, List, Optional

from knockout.models import get_match_players, new_match_player

logger = logging.getLogger(__name__)

SEEDED = 'seeded'
IN_PROGRESS = 'in_progress'
COMPLETE = 'complete'


def _find_round(rounds: List[Dict], round_number: int) -> Optional[Dict]:
    for rnd in rounds:
        if rnd['round_number'] == round_number:
            return rnd
    return None


def _player_id(player: Optional[Dict]) -> Optional[int]:
    return player['fpl_team_id'] if player else None


def advance_winners_to_next_round(rounds: List[Dict], completed_round_number: int,
                                  participants: List) -> List[Dict]:
    """
    Fill the next round's slots with the winners of a completed round.

    Returns the input unchanged if there is no next round or the round is not
    marked complete, so it is safe to call on every refresh. Otherwise returns
    a new list of rounds. Next-round matches that already hold the right
    players are left as they are.
    """
    completed_round = _find_round(rounds, completed_round_number)
    next_round = _find_round(rounds, completed_round_number + 1)
    if completed_round is None or next_round is None:
        return rounds
    if not completed_round.get('is_complete'):
        return rounds

    winners = [m['winner_id'] for m in completed_round['matches'] if m.get('winner_id') is not None]
    by_team_id = {p.fpl_team_id: p for p in participants}

    new_rounds = copy.deepcopy(rounds)
    target = _find_round(new_rounds, completed_round_number + 1)

    filled = 0
    for index, match in enumerate(target['matches']):
        id1 = winners[2 * index] if 2 * index < len(winners) else None
        id2 = winners[2 * index + 1] if 2 * index + 1 < len(winners) else None

        if (_player_id(match.get('player1')), _player_id(match.get('player2'))) == (id1, id2):
            continue

        match['player1'] = new_match_player(by_team_id[id1]) if id1 is not None else None
        match['player2'] = new_match_player(by_team_id[id2]) if id2 is not None else None
        # A lone player has no opponent and goes through, as in round 1
        match['is_bye'] = match['player1'] is not None and match['player2'] is None
        match['winner_id'] = id1 if match['is_bye'] else None
        filled += 1

    target['is_complete'] = all(m.get('winner_id') is not None for m in target['matches'])

    logger.debug("Advanced %d winners from round %s, %d matches updated",
                 len(winners), completed_round_number, filled)
    return new_rounds


def advance_completed_rounds(rounds: List[Dict], participants: List) -> List[Dict]:
    """Advance winners out of every complete round, first to last."""
    for rnd in sorted(rounds, key=lambda r: r['round_number']):
        rounds = advance_winners_to_next_round(rounds, rnd['round_number'], participants)
    return rounds


def get_champion(rounds: List[Dict]) -> Optional[int]:
    """Winner of the final's single match, if decided."""
    if not rounds:
        return None
    final = max(rounds, key=lambda r: r['round_number'])
    if len(final['matches']) != 1:
        return None
    return final['matches'][0].get('winner_id')


def get_current_round(rounds: List[Dict]) -> int:
    """First round that is not complete, or the final once everything is."""
    ordered = sorted(rounds, key=lambda r: r['round_number'])
    for rnd in ordered:
        if not rnd.get('is_complete'):
            return rnd['round_number']
    return ordered[-1]['round_number'] if ordered else 0


def get_tournament_state(rounds: List[Dict]) -> str:
    """
    Where the tournament is in its lifecycle.

    seeded: round 1 drawn, nothing played yet.
    in_progress: some score or non-bye result recorded, no champion yet.
    complete: the final has a winner.
    """
    if get_champion(rounds) is not None:
        return COMPLETE

    for rnd in rounds:
        for match in rnd['matches']:
            if match.get('is_bye'):
                continue
            if match.get('winner_id') is not None:
                return IN_PROGRESS
            if any(p.get('score') is not None for p in get_match_players(match)):
                return IN_PROGRESS
    return SEEDED
