import click
from flask.cli import with_appcontext

from app.domain.enums import ActionStatus
from app.extensions import db
from app.services.registration import create_credentials_user


@click.command('init-db')
@with_appcontext
def init_db_command() -> None:
    """Create any missing tables (never drops)."""
    import app.models  # noqa: F401

    db.create_all()
    click.echo('Database tables are in place.')


@click.command('create-user')
@click.option('--email', prompt=True, help='Account email')
@click.option(
    '--password',
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help='Account password (will not be echoed)'
)
@click.option('--username', default='', help='Username (defaults to the email local part)')
@with_appcontext
def create_user_command(email: str, password: str, username: str) -> None:
    """Create a credentials account, or link a password to a Google account."""
    state = create_credentials_user({'email': email, 'password': password, 'username': username})

    if state.get('status') != ActionStatus.SUCCESS:
        raise click.ClickException(state.get('message') or 'Registration failed.')

    click.echo(f"{state['message']} (user id {state['user_id']})")
