"""
Turning league standings into seeded participants.
"""
from typing import Dict, List

from knockout.models import Participant


class StandingsError(ValueError):
    """Raised when standings cannot be used to start a tournament."""


def _check_row(row):
    if not isinstance(row, dict):
        raise StandingsError(f"Standings row must be a mapping, got {row!r}")
    missing = [key for key in ('entry', 'entry_name', 'player_name') if key not in row]
    if missing:
        raise StandingsError(f"Standings row is missing {', '.join(missing)}: {row}")
    rank = row.get('rank')
    if 'rank' in row and (isinstance(rank, bool) or not isinstance(rank, int)):
        raise StandingsError(f"Standings rank must be an integer, got {rank!r}")
    entry = row['entry']
    if isinstance(entry, bool):
        raise StandingsError(f"Standings entry must be a team id, got {entry!r}")
    try:
        return int(entry)
    except (TypeError, ValueError):
        raise StandingsError(f"Standings entry must be a team id, got {entry!r}")


def participants_from_standings(results: List[Dict]) -> List[Participant]:
    """
    Convert standings rows into participants.

    Each row carries entry, entry_name, player_name and rank, as returned by
    the league standings endpoint. Seed 1 goes to the best rank; rows with
    the same rank keep their input order.
    """
    entries = [_check_row(row) for row in results]

    ordered = sorted(range(len(results)), key=lambda i: (results[i].get('rank', i + 1), i))

    participants = []
    seen = set()
    for seed, index in enumerate(ordered, start=1):
        row, entry = results[index], entries[index]
        if entry in seen:
            raise StandingsError(f"Team {entry} appears more than once in standings")
        seen.add(entry)
        participants.append(Participant(
            fpl_team_id=entry,
            fpl_team_name=row['entry_name'],
            manager_name=row['player_name'],
            seed=seed,
        ))
    return participants


def check_participant_count(count: int, settings: Dict) -> None:
    """Raise StandingsError when count is outside the configured limits."""
    minimum = settings['min_participants']
    maximum = settings['max_participants']
    if count < minimum:
        raise StandingsError(f"League must have at least {minimum} participants, found {count}")
    if count > maximum:
        raise StandingsError(f"League exceeds maximum {maximum} participants, found {count}")
