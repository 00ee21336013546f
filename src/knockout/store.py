"""
YAML file storage for tournaments.

One document per tournament under <data_dir>/tournaments/<id>.yaml. Writes
are serialized with a file lock and checked against the stored version, so
two refreshes computed from the same snapshot cannot both be written.
"""
import logging
import os

import yaml
from filelock import FileLock

from knockout.models import Tournament

logger = logging.getLogger(__name__)


class VersionConflictError(Exception):
    """Raised when a tournament changed on disk since it was loaded."""


class TournamentStore:
    def __init__(self, data_dir, lock_timeout=10):
        self.data_dir = data_dir
        self.tournaments_dir = os.path.join(data_dir, 'tournaments')
        os.makedirs(self.tournaments_dir, exist_ok=True)
        self._lock = FileLock(os.path.join(data_dir, '.lock'), timeout=lock_timeout)

    def _path(self, tournament_id):
        return os.path.join(self.tournaments_dir, f'{tournament_id}.yaml')

    def _read(self, tournament_id):
        path = self._path(tournament_id)
        if not os.path.exists(path):
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)

    def load(self, tournament_id):
        """Load a tournament, or None if it does not exist."""
        data = self._read(tournament_id)
        if not data:
            return None
        return Tournament.from_dict(data)

    def list_tournaments(self):
        """All stored tournaments, oldest first."""
        tournaments = []
        for filename in sorted(os.listdir(self.tournaments_dir)):
            if not filename.endswith('.yaml'):
                continue
            tournament = self.load(filename[:-len('.yaml')])
            if tournament is not None:
                tournaments.append(tournament)
        tournaments.sort(key=lambda t: t.created_at or '')
        return tournaments

    def save(self, tournament):
        """
        Write a tournament if nobody else wrote it since it was loaded.

        The stored version must equal tournament.version (a new tournament
        must not exist yet). On success the version is incremented on both
        the document and the passed tournament.
        """
        with self._lock:
            current = self._read(tournament.id)
            if current is not None and current.get('version', 0) != tournament.version:
                raise VersionConflictError(
                    f"Tournament {tournament.id} is at version {current.get('version', 0)}, "
                    f"expected {tournament.version}"
                )
            if current is None and tournament.version != 0:
                raise VersionConflictError(f"Tournament {tournament.id} no longer exists")

            # Bump the version only once the document is on disk
            document = tournament.to_dict()
            document['version'] = tournament.version + 1
            text = yaml.safe_dump(document, default_flow_style=False, sort_keys=False)
            with open(self._path(tournament.id), 'w', encoding='utf-8') as f:
                f.write(text)
            tournament.version = document['version']
        logger.debug(f'Saved tournament {tournament.id} at version {tournament.version}')
        return tournament

    def delete(self, tournament_id):
        """Delete a tournament. Returns False if it did not exist."""
        with self._lock:
            path = self._path(tournament_id)
            if not os.path.exists(path):
                return False
            os.remove(path)
        logger.info(f'Deleted tournament {tournament_id}')
        return True
