"""
Shared fixtures for the vet clinic tests.

Every test gets a fresh application on an in-memory SQLite database and its
own upload folder. Helpers create data through the services inside an app
context and hand back plain ids, so tests never hold detached ORM objects.
"""

import io
import itertools

import pytest
from werkzeug.datastructures import FileStorage

from vetclinic import create_app, db
from vetclinic.config import TestingConfig
from vetclinic.models import Role
from vetclinic.services.auth_service import AuthService, token_for_user
from vetclinic.services.catalog_service import CategoryService, PostService, ServiceCatalog
from vetclinic.services.doctor_service import DoctorService
from vetclinic.services.pet_service import PetService
from vetclinic.services.request_service import RequestService

_counter = itertools.count(1)

PASSWORD = 'secret123'


def unique_phone():
    return f"+7999{next(_counter):07d}"


def unique_email(prefix='user'):
    return f"{prefix}{next(_counter)}@example.com"


def auth_headers(token):
    return {'Authorization': f'Bearer {token}'}


def image_file(filename='cat.png', content=b'fake image bytes'):
    return FileStorage(stream=io.BytesIO(content), filename=filename)


@pytest.fixture
def app(tmp_path):
    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path / 'uploads')

    app = create_app(Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Create a user with the given role; returns ``(user_id, headers)``."""
    def _make_user(role=Role.USER, email=None, phone=None, fio='Иванов Иван'):
        with app.app_context():
            user = AuthService(db.session).create_user({
                'fio': fio,
                'phone': phone or unique_phone(),
                'email': email or unique_email(role.value.lower()),
                'password': PASSWORD
            }, role)
            return user.id, auth_headers(token_for_user(user))
    return _make_user


@pytest.fixture
def admin_headers(make_user):
    return make_user(Role.ADMIN)[1]


@pytest.fixture
def manager_headers(make_user):
    return make_user(Role.MANAGER)[1]


@pytest.fixture
def make_service(app):
    """Create a clinic service (and a category for it); returns the service id."""
    def _make_service(name=None, price=1500, category_name=None):
        with app.app_context():
            category_name = category_name or f'Категория {next(_counter)}'
            category = CategoryService(db.session).repository.get_by_name(category_name)
            category_id = category.id if category else CategoryService(db.session).create(
                {'name': category_name})['id']
            service = ServiceCatalog(db.session).create_service({
                'name': name or f'Услуга {next(_counter)}',
                'price': price,
                'category_id': category_id
            })
            return service['id']
    return _make_service


@pytest.fixture
def make_doctor(app):
    """Create a doctor account with its profile; returns ``(user_id, headers)``."""
    def _make_doctor(experience=5):
        with app.app_context():
            post = PostService(db.session).create({'name': f'Терапевт {next(_counter)}'})
            doctor = DoctorService(db.session).create_doctor({
                'fio': 'Петров Пётр',
                'phone': unique_phone(),
                'email': unique_email('doctor'),
                'password': PASSWORD,
                'experience': experience,
                'post_id': post['id']
            })
            user = AuthService(db.session).users.get_by_id(doctor['id'])
            return doctor['id'], auth_headers(token_for_user(user))
    return _make_doctor


@pytest.fixture
def make_pet(app):
    """Create a pet owned by ``owner_id``; returns the pet id."""
    def _make_pet(owner_id, name='Барсик'):
        with app.app_context():
            pet = PetService(db.session, app.config['UPLOAD_FOLDER']).create_pet(owner_id, {
                'name': name,
                'breed': 'Сиамская',
                'age': 3,
                'sex': 'M',
                'weight': 4.5
            }, image_file())
            return pet['id']
    return _make_pet


@pytest.fixture
def make_request(app):
    """File a request for ``pet_id``; returns the request id."""
    def _make_request(client_id, pet_id, service_ids):
        with app.app_context():
            request = RequestService(db.session).create_request(client_id, {
                'pet_id': pet_id,
                'service_id': service_ids
            })
            return request['id']
    return _make_request
