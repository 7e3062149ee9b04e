"""
Tests for the Flask JSON API.
"""
import pytest
import sys
import os
import yaml

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from padel_core.storage import TournamentStore

START = '2026-07-04T09:00:00'


@pytest.fixture
def roster(tmp_path):
    """Eight approved players and one unapproved."""
    store = TournamentStore(str(tmp_path))
    players = [store.add_player(f"Player {i}", float(i % 7 + 1)) for i in range(1, 9)]
    store.add_player("Not approved", 4.0, approved=False)
    return players


def generate(client, tournament_id=1, **overrides):
    payload = {
        'player_ids': list(range(1, 9)),
        'format': 'league',
        'seeded': True,
        'start_time': START,
    }
    payload.update(overrides)
    return client.post(f'/api/tournaments/{tournament_id}/generate', json=payload)


class TestPlayersApi:
    def test_lists_approved_players(self, client, roster):
        response = client.get('/api/players')
        assert response.status_code == 200
        names = [p['name'] for p in response.get_json()['players']]
        assert len(names) == 8
        assert "Not approved" not in names

    def test_level_filter(self, client, roster):
        response = client.get('/api/players?min_level=7')
        assert [p['level'] for p in response.get_json()['players']] == [7.0]


class TestGenerateApi:
    def test_generate_league(self, client, roster):
        response = generate(client)
        data = response.get_json()

        assert response.status_code == 200
        assert data['success'] is True
        assert data['created'] == 6
        assert data['skipped'] == 0
        assert len(data['teams']) == 4
        assert data['fixtures'][0]['start_time'] == START
        assert data['fixtures'][1]['start_time'] == '2026-07-04T09:05:00'

    def test_second_generation_creates_nothing(self, client, roster):
        generate(client)
        response = generate(client)
        data = response.get_json()

        assert response.status_code == 200
        assert data['success'] is True
        assert data['created'] == 0
        assert data['skipped'] == 6
        assert len(client.get('/api/tournaments/1/fixtures').get_json()['fixtures']) == 6

    def test_other_tournament_is_independent(self, client, roster):
        generate(client, tournament_id=1)
        assert generate(client, tournament_id=2).get_json()['created'] == 6

    def test_groups_round_trip(self, client, roster):
        data = generate(client, format='grupos', group_count=2, round_trip=True, seed=3).get_json()
        assert data['created'] == 4
        labels = {f['round'] for f in data['fixtures']}
        assert labels == {"Grupo A", "Grupo B"}

    def test_elimination_with_byes(self, client, tmp_path):
        store = TournamentStore(str(tmp_path))
        for i in range(1, 11):
            store.add_player(f"Player {i}", 4.0)

        data = generate(client, player_ids=list(range(1, 11)), format='elimination', seed=5).get_json()

        assert data['created'] == 1
        assert len(data['byes']) == 3
        assert data['fixtures'][0]['round'] == "Cuartos"

    def test_odd_selection(self, client, roster):
        response = generate(client, player_ids=[1, 2, 3, 4, 5])
        assert response.status_code == 400
        assert response.get_json()['error'] == 'InvalidSelection'

    def test_unapproved_player_rejected(self, client, roster):
        response = generate(client, player_ids=[1, 2, 3, 9])
        assert response.status_code == 400
        assert response.get_json()['error'] == 'InvalidSelection'

    def test_too_many_groups(self, client, roster):
        response = generate(client, format='groups', group_count=5)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'InvalidFormatConfig'

    def test_player_ids_must_be_a_list(self, client, roster):
        response = generate(client, player_ids=5)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'InvalidSelection'

    def test_missing_start_time(self, client, roster):
        response = generate(client, start_time=None)
        assert response.status_code == 400
        assert response.get_json()['error'] == 'InvalidFormatConfig'

    def test_no_body(self, client, roster):
        response = client.post('/api/tournaments/1/generate')
        assert response.status_code == 400

    def test_slot_minutes_setting(self, client, roster, tmp_path):
        (tmp_path / 'settings.yaml').write_text(yaml.dump({'slot_minutes': 30}))
        data = generate(client).get_json()
        assert data['fixtures'][1]['start_time'] == '2026-07-04T09:30:00'


class TestResultApi:
    def test_submit_result(self, client, roster):
        fixture_id = generate(client).get_json()['fixtures'][0]['id']

        response = client.post(f'/api/fixtures/{fixture_id}/result',
                               json={'sets': [[6, 4], [4, 6], [6, 2]], 'winner': 'A'})
        data = response.get_json()

        assert response.status_code == 200
        assert data['fixture']['score'] == "6-4 4-6 6-2"
        assert data['fixture']['winner'] == 'A'

    def test_invalid_set(self, client, roster):
        fixture_id = generate(client).get_json()['fixtures'][0]['id']
        response = client.post(f'/api/fixtures/{fixture_id}/result',
                               json={'sets': [[6, 4], [6, 5]], 'winner': 'A'})
        data = response.get_json()

        assert response.status_code == 400
        assert data['error'] == 'InvalidScore'
        assert data['set'] == 2
        fixtures = client.get('/api/tournaments/1/fixtures').get_json()['fixtures']
        assert all(f['winner'] == 'pending' for f in fixtures)

    def test_winner_mismatch(self, client, roster):
        fixture_id = generate(client).get_json()['fixtures'][0]['id']
        response = client.post(f'/api/fixtures/{fixture_id}/result',
                               json={'sets': [[6, 4]], 'winner': 'B'})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'WinnerMismatch'

    def test_sets_not_a_list(self, client, roster):
        fixture_id = generate(client).get_json()['fixtures'][0]['id']
        response = client.post(f'/api/fixtures/{fixture_id}/result', json={'sets': 5, 'winner': 'A'})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'InvalidScore'

    def test_second_submission_conflicts(self, client, roster):
        fixture_id = generate(client).get_json()['fixtures'][0]['id']
        url = f'/api/fixtures/{fixture_id}/result'
        client.post(url, json={'sets': [[6, 4]], 'winner': 'A'})

        response = client.post(url, json={'sets': [[4, 6]], 'winner': 'B'})
        assert response.status_code == 409
        assert response.get_json()['error'] == 'PersistenceFailure'

        override = client.post(url, json={'sets': [[4, 6]], 'winner': 'B', 'override': True})
        assert override.status_code == 200
        assert override.get_json()['fixture']['winner'] == 'B'

    def test_unknown_fixture(self, client, roster):
        response = client.post('/api/fixtures/404/result', json={'sets': [[6, 4]], 'winner': 'A'})
        assert response.status_code == 409


class TestRankingApi:
    def test_empty_ranking(self, client, roster):
        response = client.get('/api/ranking')
        assert response.status_code == 200
        assert response.get_json()['standings'] == []

    def test_ranking_after_results(self, client, roster):
        fixtures = generate(client).get_json()['fixtures']
        first = fixtures[0]
        client.post(f"/api/fixtures/{first['id']}/result", json={'sets': [[6, 1]], 'winner': 'A'})

        standings = client.get('/api/ranking?tournament=1').get_json()['standings']

        assert len(standings) == 4
        assert {s['player_id'] for s in standings[:2]} == set(first['side_a'])
        assert standings[0]['points'] == 3
        assert standings[0]['name'].startswith("Player")
        assert standings[-1]['points'] == 1

    def test_ranking_scope(self, client, roster):
        first = generate(client, tournament_id=1).get_json()['fixtures'][0]
        client.post(f"/api/fixtures/{first['id']}/result", json={'sets': [[6, 1]], 'winner': 'A'})

        assert client.get('/api/ranking?tournament=2').get_json()['standings'] == []
        assert len(client.get('/api/ranking').get_json()['standings']) == 4

    def test_wins_only_setting(self, client, roster, tmp_path):
        (tmp_path / 'settings.yaml').write_text(yaml.dump({'ranking': {'points_per_loss': 0}}))
        first = generate(client).get_json()['fixtures'][0]
        client.post(f"/api/fixtures/{first['id']}/result", json={'sets': [[6, 1]], 'winner': 'A'})

        standings = client.get('/api/ranking').get_json()['standings']
        assert standings[-1]['points'] == 0
