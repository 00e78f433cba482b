# run.py
import logging
import sys

import click
from flask.cli import with_appcontext

from vetclinic import create_app, db, init_database
from vetclinic.config import Config
from vetclinic.errors import ApiError, DatabaseStartupError
from vetclinic.models import Role
from vetclinic.services.auth_service import AuthService

logging.basicConfig(level=Config.LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
logger = logging.getLogger(__name__)

try:
    app = create_app()
except DatabaseStartupError as e:
    logger.error(f"Startup halted, database check failed: {e}")
    sys.exit(1)


@app.cli.command('init-db')
def init_db():
    """Create missing tables and seed request statuses."""
    init_database(app)
    click.echo('Database initialized.')


@app.cli.command('create-staff')
@click.option('--fio', required=True, help='Фамилия и имя')
@click.option('--phone', required=True)
@click.option('--email', required=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', type=click.Choice(['MANAGER', 'ADMIN'], case_sensitive=False), default='MANAGER')
@with_appcontext
def create_staff(fio, phone, email, password, role):
    """Create a manager or administrator account."""
    data = {'fio': fio, 'phone': phone, 'email': email, 'password': password}
    try:
        user = AuthService(db.session).create_user(data, Role(role.upper()))
    except ApiError as e:
        raise click.ClickException('; '.join(e.errors) if e.errors else e.message)
    click.echo(f'{user.role.value} {user.email} created with id {user.id}.')


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=app.config['PORT'])
