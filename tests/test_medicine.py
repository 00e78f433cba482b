"""Integration tests for medicine cards kept by doctors."""

import pytest

from vetclinic import db
from vetclinic.models import MedicineCard


@pytest.fixture
def doctor_headers(make_doctor):
    return make_doctor()[1]


@pytest.fixture
def pet_id(make_user, make_pet):
    owner_id, _ = make_user()
    return make_pet(owner_id)


@pytest.fixture
def card(client, doctor_headers, pet_id):
    response = client.post('/api/doctor/medicine', json={
        'reason': 'Вакцинация', 'description': 'Комплексная прививка', 'visit_date': '2024-03-15', 'pet_id': pet_id
    }, headers=doctor_headers)
    assert response.status_code == 201
    return response.get_json()['medicine_card']


class TestMedicineCards:
    def test_create_and_get(self, client, doctor_headers, card, pet_id):
        assert card['pet_id'] == pet_id
        assert card['visit_date'] == '2024-03-15'

        response = client.get(f"/api/doctor/medicine/{card['id']}", headers=doctor_headers)
        assert response.get_json()['medicine_card'] == card

    def test_unknown_pet(self, app, client, doctor_headers):
        response = client.post('/api/doctor/medicine', json={
            'reason': 'Осмотр', 'description': 'Плановый', 'visit_date': '2024-03-15', 'pet_id': 999
        }, headers=doctor_headers)
        assert response.status_code == 404
        with app.app_context():
            assert MedicineCard.query.count() == 0

    def test_invalid_fields(self, client, doctor_headers, pet_id):
        response = client.post('/api/doctor/medicine', json={
            'reason': '', 'description': 'Плановый', 'visit_date': '15.03.2024', 'pet_id': pet_id
        }, headers=doctor_headers)
        assert response.status_code == 400
        assert len(response.get_json()['errors']) == 2

    def test_any_doctor_reads_any_card(self, client, card, make_doctor):
        _, other_headers = make_doctor()
        assert client.get(f"/api/doctor/medicine/{card['id']}", headers=other_headers).status_code == 200

    def test_cards_of_one_pet(self, client, doctor_headers, card, make_user, make_pet):
        owner_id, _ = make_user()
        other_pet = make_pet(owner_id, name='Шарик')
        client.post('/api/doctor/medicine', json={
            'reason': 'Осмотр', 'description': 'Плановый', 'visit_date': '2024-04-01', 'pet_id': other_pet
        }, headers=doctor_headers)

        response = client.get(f"/api/doctor/medicine/current?pet_id={card['pet_id']}", headers=doctor_headers)
        assert [c['id'] for c in response.get_json()['medicine_cards']] == [card['id']]
        assert len(client.get('/api/doctor/medicine', headers=doctor_headers).get_json()['medicine_cards']) == 2

        assert client.get('/api/doctor/medicine/current', headers=doctor_headers).status_code == 400
        assert client.get('/api/doctor/medicine/current?pet_id=999', headers=doctor_headers).status_code == 404

    def test_partial_update(self, client, doctor_headers, card):
        response = client.put(f"/api/doctor/medicine/{card['id']}", json={'description': 'Повторная прививка'},
                              headers=doctor_headers)
        updated = response.get_json()['medicine_card']
        assert updated['description'] == 'Повторная прививка'
        assert updated['reason'] == card['reason']

    def test_identical_update_is_noop(self, client, doctor_headers, card):
        payload = {'reason': card['reason'], 'visit_date': card['visit_date']}
        response = client.put(f"/api/doctor/medicine/{card['id']}", json=payload, headers=doctor_headers)
        assert response.get_json()['medicine_card'] == card

    def test_delete(self, app, client, doctor_headers, card):
        assert client.delete(f"/api/doctor/medicine/{card['id']}", headers=doctor_headers).status_code == 200
        assert client.get(f"/api/doctor/medicine/{card['id']}", headers=doctor_headers).status_code == 404
        with app.app_context():
            assert db.session.get(MedicineCard, card['id']) is None

    def test_clients_cannot_touch_cards(self, client, card, make_user):
        _, client_headers = make_user()
        assert client.get(f"/api/doctor/medicine/{card['id']}", headers=client_headers).status_code == 403
