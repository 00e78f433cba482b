"""Domain errors raised by services and mapped to HTTP statuses by the app."""


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def to_dict(self):
        body = {'message': self.message}
        if self.errors:
            body['errors'] = self.errors
        return body


class ValidationError(ApiError):
    """Malformed or missing input. Carries every violation found, not just the first."""
    status_code = 400

    def __init__(self, errors, message='Некорректные данные запроса'):
        if isinstance(errors, str):
            errors = [errors]
        if len(errors) == 1:
            message = errors[0]
        super().__init__(message, errors)


class NotFoundError(ApiError):
    status_code = 404


class AuthorizationError(ApiError):
    """The resource exists but belongs to somebody else."""
    status_code = 403


class UnauthorizedError(ApiError):
    status_code = 401


class ForbiddenError(ApiError):
    """Valid session, but the role is not allowed to perform the action."""
    status_code = 403


class ConflictError(ApiError):
    status_code = 409


class DatabaseStartupError(Exception):
    pass
