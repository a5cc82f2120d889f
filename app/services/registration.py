"""Credential account registration.

``create_credentials_user`` signs a visitor up with email and password::

    validate input -> look up email -> reject | link | create -> action state

* Unknown email: a new identity is created. The username is the one
  submitted or, failing that, the local part of the email address.
* Known email that already has a password: rejected.
* Known email without a password (the account was opened through Google):
  the password is linked to that identity so both sign-in methods work.

Successful states carry the plaintext password and ``should_auto_login`` so
the client can sign the user in straight away. Any unexpected failure
(lookup, hashing, persistence) is logged and reported to the client with a
single generic message.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from flask import current_app

from app.domain.action_state import to_action_state
from app.domain.enums import ActionStatus, AuthProvider
from app.services.identity_store import IdentityStore, SqlAlchemyIdentityStore, UniquenessConflict
from app.services.passwords import PasswordService

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')

MSG_REQUIRED = 'Email and password are required.'
MSG_INVALID_EMAIL = 'Please enter a valid email address.'
MSG_INTERNAL_ERROR = 'Internal server error. Please try again.'
MSG_CREATED = 'Account created successfully.'
MSG_LINKED = (
    'Password successfully added to your existing Google account. '
    'You can now sign in with either method.'
)


def _email_taken(email: str) -> str:
    return f'An account with the email "{email}" already exists.'


def _username_taken(username: str) -> str:
    return f'Username "{username}" is already taken.'


def _error(message: str) -> dict:
    return to_action_state({'status': ActionStatus.ERROR, 'message': message})


def _form_value(form_data: Any, key: str) -> str:
    if not isinstance(form_data, Mapping):
        return ''
    value = form_data.get(key)
    return value if isinstance(value, str) else ''


class CredentialAccountCoordinator:
    def __init__(self, store: IdentityStore, passwords: PasswordService):
        self.store = store
        self.passwords = passwords

    def create_credentials_user(self, form_data: Any) -> dict:
        """Register (or link) a credentials account from submitted form data."""

        email = _form_value(form_data, 'email')
        password = _form_value(form_data, 'password')
        username = _form_value(form_data, 'username').strip()

        if not email or not password:
            return _error(MSG_REQUIRED)

        if not EMAIL_PATTERN.fullmatch(email):
            return _error(MSG_INVALID_EMAIL)

        try:
            strength = self.passwords.validate_strength(password)
            if not strength.is_valid:
                return _error(' '.join(strength.errors))

            identity = self.store.find_by_email(email.lower())
            if identity is None:
                return self._create(email, password, username)

            if identity.password_hash:
                logger.info('Registration rejected, %s already has credentials', email.lower())
                return _error(_email_taken(email))

            return self._link(identity, email, password, username)
        except Exception:
            logger.exception('Credential registration failed for %s', email.lower())
            return _error(MSG_INTERNAL_ERROR)

    def _create(self, email: str, password: str, username: str) -> dict:
        final_username = username or email.split('@')[0]

        if self.store.find_by_username(final_username) is not None:
            return _error(_username_taken(final_username))

        password_hash = self.passwords.hash(password)
        try:
            identity = self.store.create(
                email=email.lower(),
                username=final_username,
                password_hash=password_hash,
                image=None,
            )
        except UniquenessConflict as conflict:
            if conflict.field == 'username':
                return _error(_username_taken(final_username))
            return _error(_email_taken(email))

        logger.info('Created credentials account %s for %s', identity.id, email.lower())
        return to_action_state({
            'status': ActionStatus.SUCCESS,
            'message': MSG_CREATED,
            'user_id': str(identity.id),
            'email': email,
            'password': password,
            'is_account_linked': False,
            'can_sign_in_with': [AuthProvider.CREDENTIALS],
            'should_auto_login': True,
        })

    def _link(self, identity: Any, email: str, password: str, username: str) -> dict:
        logger.info('Linking password to existing %s account %s', AuthProvider.GOOGLE, email.lower())
        password_hash = self.passwords.hash(password)

        # A taken username does not block linking; the old one is kept.
        previous_username = identity.username
        renamed = False
        if username and username != previous_username:
            if self.store.find_by_username(username, excluding_id=identity.id) is None:
                identity.username = username
                renamed = True
            else:
                logger.info(
                    'Kept username %r while linking %s, %r is taken',
                    previous_username,
                    email.lower(),
                    username,
                )

        identity.password_hash = password_hash
        try:
            self.store.save(identity)
        except UniquenessConflict as conflict:
            if not renamed or conflict.field != 'username':
                raise
            logger.info(
                'Kept username %r while linking %s, %r was taken concurrently',
                previous_username,
                email.lower(),
                username,
            )
            identity.username = previous_username
            identity.password_hash = password_hash
            self.store.save(identity)

        return to_action_state({
            'status': ActionStatus.SUCCESS,
            'message': MSG_LINKED,
            'user_id': str(identity.id),
            'email': email,
            'password': password,
            'is_account_linked': True,
            'can_sign_in_with': [AuthProvider.GOOGLE, AuthProvider.CREDENTIALS],
            'should_auto_login': True,
        })


def create_credentials_user(
    form_data: Any,
    store: IdentityStore | None = None,
    passwords: PasswordService | None = None,
) -> dict:
    """Run registration against the database store unless collaborators are given."""
    if store is None:
        store = SqlAlchemyIdentityStore()
    if passwords is None:
        passwords = PasswordService(min_length=current_app.config.get('PASSWORD_MIN_LENGTH', 8))
    return CredentialAccountCoordinator(store, passwords).create_credentials_user(form_data)
