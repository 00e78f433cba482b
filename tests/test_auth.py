"""Integration tests for registration, login, session check and the access gate."""

from datetime import timedelta

from flask_jwt_extended import create_access_token, decode_token

from vetclinic import db
from vetclinic.models import Role, User

from tests.conftest import PASSWORD, auth_headers, unique_email, unique_phone


def registration(**overrides):
    data = {
        'fio': 'Сидорова Анна',
        'phone': unique_phone(),
        'email': unique_email('client'),
        'password': PASSWORD
    }
    data.update(overrides)
    return data


class TestRegistration:
    def test_token_carries_persisted_identity(self, app, client):
        """The token issued at registration decodes to the stored id, email and role."""
        data = registration(email='a@x.com')
        response = client.post('/api/user/registration', json=data)

        assert response.status_code == 201
        token = response.get_json()['token']
        with app.app_context():
            claims = decode_token(token)
            user = User.query.filter_by(email='a@x.com').one()
            assert claims['id'] == user.id
            assert claims['email'] == user.email
            assert claims['role'] == user.role.value == 'USER'
            assert claims['sub'] == str(user.id)
            assert claims['fio'] == 'Сидорова Анна'

    def test_login_right_after_registration(self, client):
        data = registration()
        client.post('/api/user/registration', json=data)

        response = client.post('/api/user/login', json={'email': data['email'], 'password': PASSWORD})
        assert response.status_code == 200
        assert response.get_json()['token']

    def test_duplicate_email_conflicts(self, client):
        first = registration()
        assert client.post('/api/user/registration', json=first).status_code == 201

        response = client.post('/api/user/registration', json=registration(email=first['email'], fio='Другой Человек'))
        assert response.status_code == 409

    def test_duplicate_phone_conflicts(self, client):
        first = registration()
        assert client.post('/api/user/registration', json=first).status_code == 201

        response = client.post('/api/user/registration', json=registration(phone=first['phone']))
        assert response.status_code == 409

    def test_all_violations_are_reported(self, app, client):
        response = client.post('/api/user/registration', json={
            'fio': 'Иванов', 'phone': '123', 'email': 'broken', 'password': '123'
        })

        assert response.status_code == 400
        assert len(response.get_json()['errors']) == 4
        with app.app_context():
            assert User.query.count() == 0

    def test_privileged_role_is_rejected(self, app, client):
        response = client.post('/api/user/registration', json=registration(role='ADMIN'))

        assert response.status_code == 403
        with app.app_context():
            assert User.query.count() == 0

    def test_privileged_role_allowed_by_config(self, app, client):
        app.config['ALLOW_PRIVILEGED_REGISTRATION'] = True
        response = client.post('/api/user/registration', json=registration(role='manager'))

        assert response.status_code == 201
        with app.app_context():
            assert decode_token(response.get_json()['token'])['role'] == 'MANAGER'

    def test_unknown_role(self, client):
        response = client.post('/api/user/registration', json=registration(role='OWNER'))
        assert response.status_code == 400


class TestLogin:
    def test_unknown_email(self, client):
        response = client.post('/api/user/login', json={'email': 'nobody@example.com', 'password': PASSWORD})
        assert response.status_code == 409

    def test_wrong_password(self, client, make_user):
        email = unique_email()
        make_user(email=email)

        response = client.post('/api/user/login', json={'email': email, 'password': 'wrong-password'})
        assert response.status_code == 409

    def test_malformed_input(self, client):
        response = client.post('/api/user/login', json={'email': 'broken'})
        assert response.status_code == 400

    def test_password_is_stored_hashed(self, app, make_user):
        user_id, _ = make_user()
        with app.app_context():
            assert db.session.get(User, user_id).password != PASSWORD


class TestSessionCheck:
    def test_check_reissues_token(self, app, client, make_user):
        user_id, headers = make_user()

        response = client.get('/api/user/auth', headers=headers)
        assert response.status_code == 200
        with app.app_context():
            claims = decode_token(response.get_json()['token'])
            assert claims['id'] == user_id
            assert claims['role'] == 'USER'

    def test_missing_token(self, client):
        response = client.get('/api/user/auth')
        assert response.status_code == 401
        assert 'message' in response.get_json()

    def test_malformed_token(self, client):
        response = client.get('/api/user/auth', headers=auth_headers('not-a-jwt'))
        assert response.status_code == 401

    def test_expired_token(self, app, client, make_user):
        user_id, _ = make_user()
        with app.app_context():
            token = create_access_token(
                identity=str(user_id),
                additional_claims={'id': user_id, 'email': 'x@example.com', 'role': 'USER'},
                expires_delta=timedelta(seconds=-1)
            )

        response = client.get('/api/user/auth', headers=auth_headers(token))
        assert response.status_code == 401

    def test_permissions_of_role(self, client, make_user):
        _, headers = make_user(Role.MANAGER)

        response = client.get('/api/user/permissions', headers=headers)
        body = response.get_json()
        assert response.status_code == 200
        assert body['role'] == 'MANAGER'
        assert 'create_appointment' in body['permissions']['actions']
        assert 'manage_own_pets' not in body['permissions']['actions']

    def test_token_without_principal_claims(self, app, client):
        with app.app_context():
            token = create_access_token(identity='1')

        response = client.get('/api/user/auth', headers=auth_headers(token))
        assert response.status_code == 401
