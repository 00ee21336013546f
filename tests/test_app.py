"""
Unit tests for the Flask JSON API.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from conftest import make_standings


def create(client, count=4, start_gameweek=20):
    response = client.post('/api/tournaments', json={
        'fpl_league_id': 314,
        'fpl_league_name': 'Office League',
        'start_gameweek': start_gameweek,
        'standings': make_standings(count),
    })
    assert response.status_code == 201
    return response.get_json()['tournament']


class TestCreateTournament:
    """Tests for POST /api/tournaments."""

    def test_create(self, client):
        tournament = create(client)
        assert tournament['total_rounds'] == 2
        assert tournament['state'] == 'seeded'
        assert tournament['remaining_participants'] == 4
        assert tournament['version'] == 1

    def test_create_requires_standings(self, client):
        response = client.post('/api/tournaments', json={'start_gameweek': 1})
        assert response.status_code == 400
        assert response.get_json()['success'] is False

    def test_create_requires_start_gameweek(self, client):
        response = client.post('/api/tournaments', json={'standings': make_standings(4)})
        assert response.status_code == 400

    def test_create_rejects_large_league(self, client):
        response = client.post('/api/tournaments', json={
            'start_gameweek': 1, 'standings': make_standings(49)})
        assert response.status_code == 400
        assert 'maximum' in response.get_json()['error']

    def test_settings_file_raises_limit(self, client, temp_data_dir):
        (temp_data_dir / "settings.yaml").write_text("max_participants: 64\n")
        response = client.post('/api/tournaments', json={
            'start_gameweek': 1, 'standings': make_standings(49)})
        assert response.status_code == 201

    def test_create_rejects_single_team(self, client):
        response = client.post('/api/tournaments', json={
            'start_gameweek': 1, 'standings': make_standings(1)})
        assert response.status_code == 400

    def test_create_rejects_boolean_start_gameweek(self, client):
        response = client.post('/api/tournaments', json={
            'start_gameweek': True, 'standings': make_standings(4)})
        assert response.status_code == 400
        assert 'start_gameweek' in response.get_json()['error']

    @pytest.mark.parametrize("standings", [
        [{'entry': 'abc', 'entry_name': 'A', 'player_name': 'a', 'rank': 1},
         {'entry': 102, 'entry_name': 'B', 'player_name': 'b', 'rank': 2}],
        [1, 2, 3],
        [{'entry': 101, 'entry_name': 'A', 'player_name': 'a', 'rank': None},
         {'entry': 102, 'entry_name': 'B', 'player_name': 'b', 'rank': 2}],
    ], ids=['non-numeric-entry', 'rows-not-mappings', 'null-rank'])
    def test_create_rejects_malformed_standings(self, client, standings):
        response = client.post('/api/tournaments', json={
            'start_gameweek': 1, 'standings': standings})
        assert response.status_code == 400
        body = response.get_json()
        assert body['success'] is False
        assert body['error']


class TestReadAndDelete:
    """Tests for listing, fetching and deleting tournaments."""

    def test_list(self, client):
        created = create(client)
        response = client.get('/api/tournaments')
        data = response.get_json()
        assert data['success'] is True
        assert [t['id'] for t in data['tournaments']] == [created['id']]
        assert data['tournaments'][0]['participant_count'] == 4

    def test_get(self, client):
        created = create(client, count=5)
        response = client.get(f"/api/tournaments/{created['id']}")
        assert response.status_code == 200
        assert len(response.get_json()['tournament']['rounds']) == 3

    def test_get_missing(self, client):
        assert client.get('/api/tournaments/nope').status_code == 404

    def test_delete(self, client):
        created = create(client)
        assert client.delete(f"/api/tournaments/{created['id']}").status_code == 200
        assert client.get(f"/api/tournaments/{created['id']}").status_code == 404
        assert client.delete(f"/api/tournaments/{created['id']}").status_code == 404


class TestScores:
    """Tests for recording scores and refreshing."""

    def test_record_scores_advances(self, client):
        created = create(client)
        response = client.post(f"/api/tournaments/{created['id']}/scores", json={
            'gameweek': 20,
            'scores': {'101': 50, '104': 60, '102': 70, '103': 10},
        })
        assert response.status_code == 200
        tournament = response.get_json()['tournament']
        final = tournament['rounds'][1]['matches'][0]
        assert final['player1']['fpl_team_id'] == 104
        assert final['player2']['fpl_team_id'] == 102
        assert tournament['current_round'] == 2
        assert tournament['state'] == 'in_progress'

    def test_full_tournament(self, client):
        created = create(client)
        url = f"/api/tournaments/{created['id']}/scores"
        client.post(url, json={'gameweek': 20, 'scores': {'101': 50, '104': 60, '102': 70, '103': 10}})
        response = client.post(url, json={'gameweek': 21, 'scores': {'104': 0, '102': 0}})
        tournament = response.get_json()['tournament']
        assert tournament['winner_id'] == 102
        assert tournament['status'] == 'completed'
        assert tournament['state'] == 'complete'

    def test_unknown_gameweek(self, client):
        created = create(client)
        response = client.post(f"/api/tournaments/{created['id']}/scores",
                               json={'gameweek': 5, 'scores': {}})
        assert response.status_code == 400

    def test_bad_scores(self, client):
        created = create(client)
        response = client.post(f"/api/tournaments/{created['id']}/scores",
                               json={'gameweek': 20, 'scores': {'101': 'lots'}})
        assert response.status_code == 400

    def test_boolean_gameweek_rejected(self, client):
        created = create(client, start_gameweek=1)
        response = client.post(f"/api/tournaments/{created['id']}/scores",
                               json={'gameweek': True, 'scores': {'101': 50, '104': 40}})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'gameweek must be an integer.'

    def test_scores_missing_tournament(self, client):
        response = client.post('/api/tournaments/nope/scores', json={'gameweek': 20, 'scores': {}})
        assert response.status_code == 404

    def test_refresh_is_idempotent(self, client):
        created = create(client)
        client.post(f"/api/tournaments/{created['id']}/scores",
                    json={'gameweek': 20, 'scores': {'101': 50, '104': 60, '102': 70, '103': 10}})
        first = client.post(f"/api/tournaments/{created['id']}/refresh").get_json()['tournament']
        second = client.post(f"/api/tournaments/{created['id']}/refresh").get_json()['tournament']
        assert first == second

    def test_refresh_missing(self, client):
        assert client.post('/api/tournaments/nope/refresh').status_code == 404


class TestTeamStatus:
    """Tests for GET /api/tournaments/<id>/teams/<team>."""

    def test_status_progression(self, client):
        created = create(client)
        base = f"/api/tournaments/{created['id']}/teams"
        assert client.get(f"{base}/101").get_json()['status'] == 'in'

        client.post(f"/api/tournaments/{created['id']}/scores",
                    json={'gameweek': 20, 'scores': {'101': 50, '104': 60, '102': 70, '103': 10}})
        data = client.get(f"{base}/101").get_json()
        assert data['status'] == 'eliminated'
        assert data['eliminated_round'] == 1

        client.post(f"/api/tournaments/{created['id']}/scores",
                    json={'gameweek': 21, 'scores': {'104': 80, '102': 20}})
        assert client.get(f"{base}/104").get_json()['status'] == 'winner'
        assert client.get(f"{base}/102").get_json()['eliminated_round'] == 2

    def test_unknown_team(self, client):
        created = create(client)
        assert client.get(f"/api/tournaments/{created['id']}/teams/999").status_code == 404


class TestBracketPreview:
    """Tests for GET /api/bracket-preview."""

    def test_preview(self, client):
        data = client.get('/api/bracket-preview?participants=5&match_size=2').get_json()
        assert data['preview']['bye_count'] == 3
        assert data['preview']['matches_per_round'] == [4, 2, 1]

    def test_preview_default_match_size(self, client):
        data = client.get('/api/bracket-preview?participants=16').get_json()
        assert data['preview']['rounds'] == 4

    def test_preview_requires_participants(self, client):
        assert client.get('/api/bracket-preview').status_code == 400
