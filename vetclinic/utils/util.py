# vetclinic/utils/util.py
from functools import wraps

from flask import g, request
from flask_jwt_extended import jwt_required, get_jwt

from vetclinic.errors import ForbiddenError, UnauthorizedError, ValidationError
from vetclinic.models.user_model import Role
from vetclinic.utils.role_utils import can_perform_action


def get_current_principal():
    """Decoded identity of the caller, built from the verified token claims."""
    claims = get_jwt()
    if claims.get('id') is None or claims.get('role') is None:
        raise UnauthorizedError('Пользователь не авторизован')
    return {
        'id': claims.get('id'),
        'email': claims.get('email'),
        'role': claims.get('role'),
        'fio': claims.get('fio'),
        'phone': claims.get('phone')
    }


def login_required(fn):
    @wraps(fn)
    @jwt_required()
    def decorator(*args, **kwargs):
        g.principal = get_current_principal()
        return fn(*args, **kwargs)
    return decorator


def permission_required(action):
    """Access gate: a valid bearer token whose role is allowed ``action``."""
    def wrapper(fn):
        @wraps(fn)
        @jwt_required()
        def decorator(*args, **kwargs):
            principal = get_current_principal()
            try:
                role = Role(principal['role'])
            except ValueError:
                raise ForbiddenError('У Вас нет прав использовать эту функцию!')
            if not can_perform_action(role, action):
                raise ForbiddenError('У Вас нет прав использовать эту функцию!')
            g.principal = principal
            return fn(*args, **kwargs)
        return decorator
    return wrapper


def get_json_body():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Тело запроса должно быть JSON-объектом')
    return data
