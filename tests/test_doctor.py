"""Integration tests for doctor accounts managed by the administrator."""

import pytest

from vetclinic import db
from vetclinic.models import Doctor, Role, User

from tests.conftest import PASSWORD, unique_email, unique_phone


@pytest.fixture
def post_id(client, admin_headers):
    return client.post('/api/admin/post', json={'name': 'Терапевт'}, headers=admin_headers).get_json()['post']['id']


def doctor_payload(post_id, **overrides):
    data = {
        'fio': 'Петров Пётр',
        'phone': unique_phone(),
        'email': unique_email('doctor'),
        'password': PASSWORD,
        'experience': 7,
        'post_id': post_id
    }
    data.update(overrides)
    return data


class TestCreateDoctor:
    def test_creates_user_and_profile(self, app, client, admin_headers, post_id):
        response = client.post('/api/admin/doctor', json=doctor_payload(post_id), headers=admin_headers)

        assert response.status_code == 201
        doctor = response.get_json()['doctor']
        assert doctor['role'] == 'DOCTOR'
        assert doctor['doctor']['experience'] == 7
        assert doctor['doctor']['post'] == {'id': post_id, 'name': 'Терапевт'}
        with app.app_context():
            assert Doctor.query.filter_by(user_id=doctor['id']).count() == 1

    def test_new_doctor_can_log_in(self, client, admin_headers, post_id):
        payload = doctor_payload(post_id)
        client.post('/api/admin/doctor', json=payload, headers=admin_headers)

        response = client.post('/api/user/login', json={'email': payload['email'], 'password': PASSWORD})
        assert response.status_code == 200

    def test_invalid_profile_leaves_no_user(self, app, client, admin_headers, post_id):
        """Profile fields are checked before the account is written."""
        response = client.post('/api/admin/doctor', json=doctor_payload(post_id, experience='много'),
                               headers=admin_headers)
        assert response.status_code == 400

        response = client.post('/api/admin/doctor', json=doctor_payload(999), headers=admin_headers)
        assert response.status_code == 404

        with app.app_context():
            assert User.query.filter_by(role=Role.DOCTOR).count() == 0
            assert Doctor.query.count() == 0

    @pytest.mark.parametrize('experience', ['inf', 'nan', '-inf', '1e20', 2.5])
    def test_experience_must_be_a_finite_whole_number(self, app, client, admin_headers, post_id, experience):
        response = client.post('/api/admin/doctor', json=doctor_payload(post_id, experience=experience),
                               headers=admin_headers)
        assert response.status_code == 400
        with app.app_context():
            assert Doctor.query.count() == 0

    @pytest.mark.parametrize('bad_post_id', ['²', 10 ** 20])
    def test_post_id_outside_integer_range(self, client, admin_headers, bad_post_id):
        response = client.post('/api/admin/doctor', json=doctor_payload(bad_post_id), headers=admin_headers)
        assert response.status_code == 400

    def test_taken_email(self, client, admin_headers, post_id, make_user):
        email = unique_email()
        make_user(email=email)
        response = client.post('/api/admin/doctor', json=doctor_payload(post_id, email=email), headers=admin_headers)
        assert response.status_code == 409


class TestReadUpdateDelete:
    def test_list_and_get(self, client, admin_headers, make_doctor, make_user):
        doctor_id, _ = make_doctor()
        client_id, _ = make_user()

        response = client.get('/api/admin/doctor', headers=admin_headers)
        assert [d['id'] for d in response.get_json()['doctors']] == [doctor_id]
        assert client.get(f'/api/admin/doctor/{doctor_id}', headers=admin_headers).status_code == 200
        # a client account is not a doctor
        assert client.get(f'/api/admin/doctor/{client_id}', headers=admin_headers).status_code == 404
        assert client.get(f'/api/client/doctor/{doctor_id}').status_code == 200

    def test_partial_update(self, client, admin_headers, make_doctor):
        doctor_id, _ = make_doctor(experience=3)

        response = client.put(f'/api/admin/doctor/{doctor_id}', json={'experience': 4, 'fio': 'Петров Павел'},
                              headers=admin_headers)
        doctor = response.get_json()['doctor']
        assert doctor['fio'] == 'Петров Павел'
        assert doctor['doctor']['experience'] == 4

    def test_update_identical_twice(self, client, admin_headers, make_doctor):
        doctor_id, _ = make_doctor(experience=3)
        current = client.get(f'/api/admin/doctor/{doctor_id}', headers=admin_headers).get_json()['doctor']
        payload = {'fio': current['fio'], 'email': current['email'], 'phone': current['phone'],
                   'password': PASSWORD, 'experience': 3}

        first = client.put(f'/api/admin/doctor/{doctor_id}', json=payload, headers=admin_headers)
        second = client.put(f'/api/admin/doctor/{doctor_id}', json=payload, headers=admin_headers)
        assert first.status_code == second.status_code == 200
        assert first.get_json() == second.get_json() == {'doctor': current}

    def test_update_into_taken_phone(self, client, admin_headers, make_doctor, make_user):
        doctor_id, _ = make_doctor()
        phone = unique_phone()
        make_user(phone=phone)

        response = client.put(f'/api/admin/doctor/{doctor_id}', json={'phone': phone}, headers=admin_headers)
        assert response.status_code == 409

    def test_delete_removes_doctor_and_user(self, app, client, admin_headers, make_doctor):
        doctor_id, _ = make_doctor()

        response = client.delete(f'/api/admin/doctor/{doctor_id}', headers=admin_headers)
        assert response.status_code == 200

        assert client.get(f'/api/admin/doctor/{doctor_id}', headers=admin_headers).status_code == 404
        assert client.delete(f'/api/admin/doctor/{doctor_id}', headers=admin_headers).status_code == 404
        with app.app_context():
            assert db.session.get(User, doctor_id) is None
            assert Doctor.query.filter_by(user_id=doctor_id).count() == 0
