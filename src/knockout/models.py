"""
Data models for knockout tournaments.

Participants and tournaments are small classes; matches and rounds are
plain dicts so they can be stored and copied as documents.
"""
import copy


class Participant:
    def __init__(self, fpl_team_id, fpl_team_name, manager_name, seed):
        self.fpl_team_id = fpl_team_id
        self.fpl_team_name = fpl_team_name
        self.manager_name = manager_name
        self.seed = seed  # 1 = top seed (best league rank)

    def to_dict(self):
        return {
            'fpl_team_id': self.fpl_team_id,
            'fpl_team_name': self.fpl_team_name,
            'manager_name': self.manager_name,
            'seed': self.seed,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            fpl_team_id=data['fpl_team_id'],
            fpl_team_name=data.get('fpl_team_name', ''),
            manager_name=data.get('manager_name', ''),
            seed=data['seed'],
        )

    def __eq__(self, other):
        if not isinstance(other, Participant):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Participant(fpl_team_id={self.fpl_team_id}, fpl_team_name={self.fpl_team_name}, "
                f"seed={self.seed})")


def new_match_player(participant, score=None):
    """Build the match-player dict for a participant (score starts unset)."""
    return {
        'fpl_team_id': participant.fpl_team_id,
        'seed': participant.seed,
        'score': score,
        'team_name': participant.fpl_team_name,
        'manager_name': participant.manager_name,
    }


def new_match(match_id, player1=None, player2=None, is_bye=False):
    """Build a match dict. Byes resolve to player1 straight away."""
    winner_id = player1['fpl_team_id'] if is_bye and player1 else None
    return {
        'id': match_id,
        'player1': player1,
        'player2': player2,
        'winner_id': winner_id,
        'is_bye': is_bye,
    }


def get_match_players(match):
    """
    Get players from a match.

    Prefers the N-way ``players`` list when it is present and non-empty,
    otherwise falls back to ``player1``/``player2``.
    """
    players = match.get('players')
    if players:
        return list(players)
    return [p for p in (match.get('player1'), match.get('player2')) if p]


class Tournament:
    """Aggregate root: participants plus the ordered list of rounds."""

    def __init__(self, id, fpl_league_id, fpl_league_name, start_gameweek,
                 participants, rounds, creator_user_id=None, match_size=2,
                 current_round=1, status='active', winner_id=None,
                 created_at=None, updated_at=None, version=0):
        self.id = id
        self.fpl_league_id = fpl_league_id
        self.fpl_league_name = fpl_league_name
        self.creator_user_id = creator_user_id
        self.start_gameweek = start_gameweek
        self.current_round = current_round
        self.total_rounds = len(rounds)
        self.match_size = match_size
        self.status = status
        self.participants = participants
        self.rounds = rounds
        self.winner_id = winner_id
        self.created_at = created_at
        self.updated_at = updated_at
        self.version = version

    @property
    def is_complete(self):
        return self.status == 'completed'

    def copy(self):
        return copy.deepcopy(self)

    def get_participant(self, fpl_team_id):
        for participant in self.participants:
            if participant.fpl_team_id == fpl_team_id:
                return participant
        return None

    def get_round(self, round_number):
        for rnd in self.rounds:
            if rnd['round_number'] == round_number:
                return rnd
        return None

    def to_dict(self):
        return {
            'id': self.id,
            'fpl_league_id': self.fpl_league_id,
            'fpl_league_name': self.fpl_league_name,
            'creator_user_id': self.creator_user_id,
            'start_gameweek': self.start_gameweek,
            'current_round': self.current_round,
            'total_rounds': self.total_rounds,
            'match_size': self.match_size,
            'status': self.status,
            'participants': [p.to_dict() for p in self.participants],
            'rounds': copy.deepcopy(self.rounds),
            'winner_id': self.winner_id,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            'version': self.version,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            fpl_league_id=data.get('fpl_league_id'),
            fpl_league_name=data.get('fpl_league_name', ''),
            creator_user_id=data.get('creator_user_id'),
            start_gameweek=data['start_gameweek'],
            participants=[Participant.from_dict(p) for p in data.get('participants', [])],
            rounds=data.get('rounds', []),
            match_size=data.get('match_size', 2),
            current_round=data.get('current_round', 1),
            status=data.get('status', 'active'),
            winner_id=data.get('winner_id'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
            version=data.get('version', 0),
        )

    def __repr__(self):
        return (f"Tournament(id={self.id}, fpl_league_name={self.fpl_league_name}, "
                f"rounds={self.total_rounds}, status={self.status})")
