"""Test configuration and fixtures."""

import os
import pytest
import tempfile
from pathlib import Path

from flask_login import FlaskLoginClient

from app import create_app
from app.extensions import db as _db
from app.models import User
from app.services.passwords import PasswordService


STRONG_PASSWORD = 'Str0ng!Pass'

VALID_PROPERTY_FORM = {
    'name': 'Cozy Lakeside Cabin',
    'type': 'Cabin',
    'description': 'A quiet cabin right on the lake shore.',
    'location.street': '120 Lakeshore Drive',
    'location.city': 'Tahoe City',
    'location.state': 'CA',
    'location.zipcode': '96145',
    'beds': '3',
    'baths': '2',
    'square_feet': '1400',
    'amenities': ['Wifi', 'Full kitchen', 'Free Parking', 'Hot Tub', 'Fireplace'],
    'rates.nightly': '250',
    'rates.weekly': '',
    'rates.monthly': '',
    'seller_info.name': 'Jane Owner',
    'seller_info.email': 'jane@lakeside-rentals.com',
    'seller_info.phone': '555-555-1234',
}


@pytest.fixture
def app():
    """Create application for testing.

    No app context is held while the test runs, so every request gets its
    own context, session and ``g``. Use ``app.app_context()`` (or the
    ``app_ctx`` fixture) to touch the database directly.
    """
    db_fd, db_path = tempfile.mkstemp()

    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}',
        'SECRET_KEY': 'test-secret-key',
        'WTF_CSRF_ENABLED': False,
        'RATELIMIT_ENABLED': False,
        'SESSION_PROTECTION': None,
    })
    app.test_client_class = FlaskLoginClient

    with app.app_context():
        _db.create_all()

    yield app

    with app.app_context():
        _db.drop_all()
        _db.engine.dispose()

    os.close(db_fd)
    Path(db_path).unlink(missing_ok=True)


@pytest.fixture
def app_ctx(app):
    """Active application context for service level tests."""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Anonymous test client."""
    return app.test_client()


@pytest.fixture
def db(app):
    """Database fixture."""
    return _db


@pytest.fixture
def make_user(app):
    """Persist a user; ``password=None`` makes a Google-only account.

    The returned instance is detached with its columns loaded.
    """
    passwords = PasswordService()

    def _make_user(email='owner@lakeside-rentals.com', username='owner', password=STRONG_PASSWORD):
        with app.app_context():
            user = User(
                email=email,
                username=username,
                password_hash=passwords.hash(password) if password else None,
            )
            _db.session.add(user)
            _db.session.commit()
            _db.session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def login_client(app):
    """Test client signed in as the given user."""

    def _login_client(user):
        return app.test_client(user=user)

    return _login_client


@pytest.fixture
def property_form():
    """A listing submission that passes validation."""
    return dict(VALID_PROPERTY_FORM)
