"""
Single elimination bracket generation.
"""
import logging
import math
from typing import Dict, List, Tuple

from knockout.models import new_match, new_match_player

logger = logging.getLogger(__name__)


class BracketValidationError(ValueError):
    """Raised when participants cannot form a valid bracket."""


def get_round_name(round_number: int, total_rounds: int) -> str:
    """Get the display name of a round from its distance to the final."""
    rounds_from_end = total_rounds - round_number

    if rounds_from_end == 0:
        return "Final"
    elif rounds_from_end == 1:
        return "Semi-Finals"
    elif rounds_from_end == 2:
        return "Quarter-Finals"
    return f"Round {round_number}"


def calculate_bracket_size(participant_count: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if participant_count < 1:
        raise BracketValidationError(f"Participant count must be positive, got {participant_count}")
    return 2 ** math.ceil(math.log2(participant_count))


def calculate_byes(participant_count: int) -> int:
    """Calculate number of byes needed."""
    return calculate_bracket_size(participant_count) - participant_count


def calculate_total_rounds(participant_count: int) -> int:
    """Number of rounds needed to reduce the field to one winner."""
    return int(math.log2(calculate_bracket_size(participant_count)))


def get_match_count_for_round(bracket_size: int, round_number: int) -> int:
    """Get number of matches in a specific round."""
    return bracket_size // (2 ** round_number)


def sort_by_seed(participants: List) -> List:
    """Return participants ordered by seed, best first."""
    return sorted(participants, key=lambda p: p.seed)


def validate_participants(participants: List) -> None:
    """
    Check that participants can be seeded into a bracket.

    Requires at least two participants, seeds forming exactly 1..N and
    no repeated team ids.
    """
    count = len(participants)
    if count < 2:
        raise BracketValidationError(f"A bracket needs at least 2 participants, got {count}")

    seeds = [p.seed for p in participants]
    if sorted(seeds) != list(range(1, count + 1)):
        raise BracketValidationError(f"Seeds must be unique and cover 1..{count}, got {sorted(seeds)}")

    team_ids = [p.fpl_team_id for p in participants]
    if len(set(team_ids)) != count:
        raise BracketValidationError("Duplicate fpl_team_id in participants")


def _generate_bracket_order(bracket_size: int) -> List[int]:
    """
    Generate the standard tournament bracket order.
    This ensures that if all higher seeds win, they meet in the proper rounds.

    For 8 seeds: [1, 8, 4, 5, 2, 7, 3, 6]
    This gives matchups: 1v8, 4v5, 2v7, 3v6
    """
    if bracket_size == 2:
        return [1, 2]

    half_size = bracket_size // 2
    upper_half = _generate_bracket_order(half_size)

    # Each seed s in the upper half meets its complement bracket_size + 1 - s
    result = []
    for seed in upper_half:
        result.extend([seed, bracket_size + 1 - seed])

    return result


def generate_seed_pairings(bracket_size: int) -> List[Tuple[int, int]]:
    """
    First round (top_seed, bottom_seed) pairings in bracket order.

    Seeds larger than the real field size stand for byes.
    """
    order = _generate_bracket_order(bracket_size)
    return [(order[i], order[i + 1]) for i in range(0, len(order), 2)]


def create_first_round_matches(participants: List) -> List[Dict]:
    """
    Pair seeded participants into round 1 matches.

    Seed s meets seed bracket_size + 1 - s. When that opponent seed does not
    exist the match is a bye and the top seed advances immediately.
    Matches come out in bracket order and match i feeds next-round match
    i // 2. With 8 teams the winners of 1v8 and 4v5 meet in the first semi,
    and the winners of 2v7 and 3v6 meet in the second.
    """
    seeded = sort_by_seed(participants)
    participant_count = len(seeded)
    bracket_size = calculate_bracket_size(participant_count)

    matches = []
    for index, (top_seed, bottom_seed) in enumerate(generate_seed_pairings(bracket_size)):
        player1 = new_match_player(seeded[top_seed - 1])
        match_id = f"r1-m{index}"
        if bottom_seed > participant_count:
            matches.append(new_match(match_id, player1, None, is_bye=True))
        else:
            player2 = new_match_player(seeded[bottom_seed - 1])
            matches.append(new_match(match_id, player1, player2))

    return matches


def generate_bracket(participants: List, start_gameweek: int) -> List[Dict]:
    """
    Generate all rounds for a single elimination bracket.

    Round 1 is populated with seeded matches (byes already resolved); later
    rounds are empty shells waiting for winners to advance. Round k is played
    in gameweek start_gameweek + k - 1.
    """
    validate_participants(participants)

    participant_count = len(participants)
    bracket_size = calculate_bracket_size(participant_count)
    total_rounds = calculate_total_rounds(participant_count)

    rounds = []
    for round_number in range(1, total_rounds + 1):
        if round_number == 1:
            matches = create_first_round_matches(participants)
        else:
            matches = [
                new_match(f"r{round_number}-m{index}")
                for index in range(get_match_count_for_round(bracket_size, round_number))
            ]
        rounds.append({
            'round_number': round_number,
            'name': get_round_name(round_number, total_rounds),
            'gameweek': start_gameweek + round_number - 1,
            'matches': matches,
            'is_complete': False,
        })

    logger.debug("Generated bracket: %d participants, %d byes, %d rounds",
                 participant_count, bracket_size - participant_count, total_rounds)
    return rounds


def calculate_bracket_preview(participant_count: int, match_size: int) -> Dict:
    """
    Calculate bracket structure for tournaments with match_size managers per match.

    Returns rounds, total_slots, bye_count and matches_per_round.
    """
    if participant_count < 2 or match_size < 2:
        return {'rounds': 0, 'total_slots': 0, 'bye_count': 0, 'matches_per_round': []}

    # Smallest number of rounds with match_size ** rounds >= participant_count
    rounds = 0
    total_slots = 1
    while total_slots < participant_count:
        total_slots *= match_size
        rounds += 1

    matches_per_round = [match_size ** (rounds - r) for r in range(1, rounds + 1)]

    return {
        'rounds': rounds,
        'total_slots': total_slots,
        'bye_count': total_slots - participant_count,
        'matches_per_round': matches_per_round,
    }
