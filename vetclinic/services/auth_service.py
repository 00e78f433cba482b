# Auth service module for business logic
import logging

from flask_jwt_extended import create_access_token

from vetclinic import bcrypt
from vetclinic.errors import ConflictError, ForbiddenError, ValidationError
from vetclinic.models import User, Role
from vetclinic.repositories import UserRepository
from vetclinic.services.base_service import BaseService
from vetclinic.utils.validation import (
    ValidationResult, is_non_empty_string, validate_email, validate_fio,
    validate_password, validate_phone
)

logger = logging.getLogger(__name__)


def hash_password(password):
    return bcrypt.generate_password_hash(password).decode('utf-8')


def check_password(password_hash, password):
    return bcrypt.check_password_hash(password_hash, password)


def generate_token(user_id, email, role, fio=None, phone=None):
    claims = {'id': user_id, 'email': email, 'role': role}
    if fio is not None:
        claims['fio'] = fio
    if phone is not None:
        claims['phone'] = phone
    return create_access_token(identity=str(user_id), additional_claims=claims)


def token_for_user(user):
    return generate_token(user.id, user.email, user.role.value, fio=user.fio, phone=user.phone)


def format_user(user):
    return {
        'id': user.id,
        'fio': user.fio,
        'phone': user.phone,
        'email': user.email,
        'role': user.role.value
    }


def check_user_fields(data, result, partial=False):
    """Shape checks for the account fields shared by registration and doctor management."""
    def supplied(field):
        return not partial or data.get(field) is not None

    if supplied('fio'):
        if result.check(is_non_empty_string(data.get('fio')), 'Некорректно указано ФИО пользователя!'):
            result.check(validate_fio(data.get('fio')), 'Пожалуйста, обязательно укажите фамилию и имя!')
    if supplied('phone'):
        result.check(validate_phone(data.get('phone')), 'Некорректно указан мобильный телефон!')
    if supplied('email'):
        result.check(validate_email(data.get('email')), 'Некорректно указана почта!')
    if supplied('password'):
        if result.check(is_non_empty_string(data.get('password')), 'Некорректно указан пароль!'):
            result.check(validate_password(data.get('password')), 'Пароль должен содержать минимум 6 символов!')


def parse_role(value, default=Role.USER):
    if value is None:
        return default
    try:
        return Role(str(value).upper())
    except ValueError:
        raise ValidationError(f'Недопустимая роль: {value}. Допустимые роли: {[r.value for r in Role]}')


class AuthService(BaseService):
    def __init__(self, session, users=None, allow_privileged_registration=False):
        super().__init__(session)
        self.users = users or UserRepository(session)
        self.allow_privileged_registration = allow_privileged_registration

    def ensure_contacts_free(self, phone=None, email=None, user_id=None):
        if phone is not None and self.users.exists_other(user_id, phone=phone):
            raise ConflictError('Пользователь с таким мобильным номером уже есть в системе!')
        if email is not None and self.users.exists_other(user_id, email=email):
            raise ConflictError('Пользователь с такой почтой уже есть в системе!')

    def build_user(self, data, role):
        return User(
            fio=data['fio'].strip(),
            phone=data['phone'],
            email=data['email'],
            password=hash_password(data['password']),
            role=role
        )

    def register(self, data):
        result = ValidationResult()
        check_user_fields(data, result)
        result.raise_if_invalid()
        role = parse_role(data.get('role'))
        if role != Role.USER and not self.allow_privileged_registration:
            raise ForbiddenError('Самостоятельная регистрация доступна только клиентам!')
        user = self.create_user(data, role, validated=True)
        return token_for_user(user)

    def create_user(self, data, role, validated=False):
        if not validated:
            result = ValidationResult()
            check_user_fields(data, result)
            result.raise_if_invalid()
        self.ensure_contacts_free(phone=data['phone'], email=data['email'])
        with self.atomic():
            user = self.users.add(self.build_user(data, role))
        logger.info(f"Registered user {user.id} with role {role.value}")
        return user

    def login(self, data):
        result = ValidationResult()
        result.check(validate_email(data.get('email')), 'Некорректно указана почта!')
        if result.check(is_non_empty_string(data.get('password')), 'Некорректно указан пароль!'):
            result.check(validate_password(data.get('password')), 'Пароль должен содержать минимум 6 символов!')
        result.raise_if_invalid()

        user = self.users.get_by_email(data['email'])
        if not user:
            raise ConflictError('Пользователя с такой почтой не найдено в системе!')
        if not check_password(user.password, data['password']):
            logger.info(f"Wrong password for user {user.id}")
            raise ConflictError('Указан неверный пароль!')
        return token_for_user(user)

    def check(self, principal):
        return generate_token(
            principal['id'], principal['email'], principal['role'],
            fio=principal.get('fio'), phone=principal.get('phone')
        )
