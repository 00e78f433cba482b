from flask import current_app, g
from flask_restx import Namespace, Resource, fields

from vetclinic import db
from vetclinic.services.auth_service import AuthService
from vetclinic.utils.role_utils import get_principal_permissions
from vetclinic.utils.util import get_json_body, login_required

user_ns = Namespace('user', description='Регистрация, вход и проверка сессии', path='/user')

registration_model = user_ns.model('Registration', {
    'fio': fields.String(required=True, description='Фамилия и имя', example='Иванов Иван'),
    'phone': fields.String(required=True, example='+79991234567'),
    'email': fields.String(required=True, example='client@example.com'),
    'password': fields.String(required=True, min_length=6),
    'role': fields.String(description='USER (по умолчанию)', enum=['USER', 'DOCTOR', 'MANAGER', 'ADMIN'])
})

login_model = user_ns.model('Login', {
    'email': fields.String(required=True),
    'password': fields.String(required=True)
})

token_model = user_ns.model('Token', {
    'token': fields.String(description='JWT, действителен 24 часа')
})


def _auth_service():
    return AuthService(
        db.session,
        allow_privileged_registration=current_app.config.get('ALLOW_PRIVILEGED_REGISTRATION', False)
    )


@user_ns.route('/registration')
class Registration(Resource):
    @user_ns.expect(registration_model)
    @user_ns.response(201, 'Пользователь зарегистрирован', token_model)
    @user_ns.response(400, 'Некорректные данные')
    @user_ns.response(409, 'Телефон или почта уже заняты')
    def post(self):
        """Регистрация нового клиента"""
        token = _auth_service().register(get_json_body())
        return {'token': token}, 201


@user_ns.route('/login')
class Login(Resource):
    @user_ns.expect(login_model)
    @user_ns.response(200, 'Успешный вход', token_model)
    @user_ns.response(409, 'Неверная почта или пароль')
    def post(self):
        """Вход по почте и паролю"""
        token = _auth_service().login(get_json_body())
        return {'token': token}, 200


@user_ns.route('/auth')
class Check(Resource):
    @login_required
    @user_ns.doc(security='BearerAuth')
    @user_ns.response(200, 'Токен обновлён', token_model)
    def get(self):
        """Проверка сессии: выдаёт новый токен для текущего пользователя"""
        return {'token': _auth_service().check(g.principal)}, 200


@user_ns.route('/permissions')
class Permissions(Resource):
    @login_required
    @user_ns.doc(security='BearerAuth')
    def get(self):
        """Разделы интерфейса и действия, доступные роли текущего пользователя"""
        return get_principal_permissions(g.principal), 200
