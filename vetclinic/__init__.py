import logging
import os

from flask import Flask, send_from_directory
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_restx import Api
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from vetclinic.config import Config
from vetclinic.errors import ApiError, DatabaseStartupError

logger = logging.getLogger(__name__)

migrate = Migrate()
db = SQLAlchemy()
jwt = JWTManager()
bcrypt = Bcrypt()


@jwt.unauthorized_loader
def missing_token_callback(reason):
    return {'message': 'Пользователь не авторизован', 'error': reason}, 401


@jwt.invalid_token_loader
def invalid_token_callback(reason):
    return {'message': 'Пользователь не авторизован', 'error': reason}, 401


@jwt.expired_token_loader
def expired_token_callback(jwt_header, jwt_payload):
    return {'message': 'Срок действия сессии истёк, войдите заново'}, 401


def create_api(app):
    return Api(
        app,
        title='Vet Clinic API',
        version='1.0',
        description='Документация к API ветеринарной клиники',
        prefix='/api',
        doc='/docs',
        ui_config={
            'displayOperationId': True,
            'docExpansion': 'none',
            'filter': True,
            'defaultModelsExpandDepth': 1,
            'defaultModelExpandDepth': 1
        },
        authorizations={
            'BearerAuth': {
                'type': 'apiKey',
                'in': 'header',
                'name': 'Authorization',
                'description': 'Enter your JWT token as "Bearer <token>"'
            }
        }
    )


def seed_statuses(names):
    from vetclinic.models import Status

    existing = {s.name for s in Status.query.all()}
    missing = [name for name in names if name not in existing]
    for name in missing:
        db.session.add(Status(name=name))
    if missing:
        db.session.commit()
        logger.info(f"Seeded request statuses: {missing}")


def init_database(app):
    """Connectivity check, schema creation and reference data, in that order."""
    with app.app_context():
        try:
            db.session.execute(text('SELECT 1'))
            db.create_all()
            seed_statuses(app.config['REQUEST_STATUSES'])
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Database is not available: {e}")
            raise DatabaseStartupError(str(e)) from e


def register_error_handlers(app, api):
    def handle_api_error(error):
        if error.status_code >= 500:
            logger.error(f"{type(error).__name__}: {error.message}")
        return error.to_dict(), error.status_code

    api.errorhandler(ApiError)(handle_api_error)
    app.register_error_handler(ApiError, handle_api_error)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return error
        db.session.rollback()
        logger.exception(f"Unhandled error: {error}")
        detail = str(error) if app.config.get('EXPOSE_ERROR_DETAILS') else type(error).__name__
        return {'message': 'Внутренняя ошибка сервера', 'error': detail}, 500


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    bcrypt.init_app(app)

    # Create the upload directory if it doesn't exist
    upload_folder = os.path.abspath(app.config['UPLOAD_FOLDER'])
    app.config['UPLOAD_FOLDER'] = upload_folder
    os.makedirs(upload_folder, exist_ok=True)

    # Route for serving pet images
    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(upload_folder, filename)

    # Enable CORS
    CORS(app, resources={r"/*": {"origins": app.config.get('CORS_ORIGINS', '*')}},
         supports_credentials=app.config.get('CORS_SUPPORTS_CREDENTIALS', True),
         allow_headers=app.config.get('CORS_ALLOW_HEADERS', ["Content-Type", "Authorization"]),
         methods=app.config.get('CORS_METHODS', ["GET", "POST", "PUT", "DELETE", "OPTIONS"]))

    from vetclinic import models  # noqa: F401
    from vetclinic.routes import register_namespaces

    api = create_api(app)
    register_namespaces(api)
    register_error_handlers(app, api)

    init_database(app)
    return app
