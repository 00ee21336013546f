"""
Tournament lifecycle: creation from standings, score recording and refresh.

All functions return a new Tournament; persisting it is up to the caller.
"""
import logging
import uuid
from datetime import datetime

from knockout.advancement import advance_completed_rounds, get_champion, get_current_round
from knockout.bracket import generate_bracket
from knockout.config import get_default_settings
from knockout.models import Tournament
from knockout.resolver import record_round_scores
from knockout.standings import check_participant_count, participants_from_standings

logger = logging.getLogger(__name__)


def create_tournament(fpl_league_id, fpl_league_name, standings, start_gameweek,
                      creator_user_id=None, settings=None):
    """Seed a new tournament from league standings rows."""
    if settings is None:
        settings = get_default_settings()

    check_participant_count(len(standings), settings)
    participants = participants_from_standings(standings)
    rounds = generate_bracket(participants, start_gameweek)

    now = datetime.now().isoformat()
    tournament = Tournament(
        id=str(uuid.uuid4()),
        fpl_league_id=fpl_league_id,
        fpl_league_name=fpl_league_name,
        creator_user_id=creator_user_id,
        start_gameweek=start_gameweek,
        participants=participants,
        rounds=rounds,
        match_size=settings.get('match_size', 2),
        created_at=now,
        updated_at=now,
    )
    logger.info(f'Created tournament {tournament.id} for league {fpl_league_id}: '
                f'{len(participants)} participants, {tournament.total_rounds} rounds')
    return refresh_tournament(tournament)


def refresh_tournament(tournament):
    """Advance winners out of complete rounds and update status fields."""
    updated = tournament.copy()
    updated.rounds = advance_completed_rounds(updated.rounds, updated.participants)
    updated.current_round = get_current_round(updated.rounds)
    updated.winner_id = get_champion(updated.rounds)
    new_status = 'completed' if updated.winner_id is not None else 'active'
    if new_status != tournament.status:
        logger.info(f'Tournament {tournament.id} is now {new_status}')
    updated.status = new_status

    if updated.to_dict() != tournament.to_dict():
        updated.updated_at = datetime.now().isoformat()
    return updated


def record_scores(tournament, gameweek, scores):
    """
    Record scores for the round played in gameweek, then refresh.

    scores maps fpl_team_id to points. Unknown gameweeks leave the
    tournament unchanged.
    """
    rnd = next((r for r in tournament.rounds if r['gameweek'] == gameweek), None)
    if rnd is None:
        logger.warning(f'Tournament {tournament.id} has no round in gameweek {gameweek}')
        return tournament

    updated = tournament.copy()
    updated.rounds = record_round_scores(updated.rounds, rnd['round_number'], scores)
    return refresh_tournament(updated)
