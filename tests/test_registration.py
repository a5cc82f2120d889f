"""Credential registration against an in-memory identity store."""

from types import SimpleNamespace

import pytest

from app.services.identity_store import UniquenessConflict
from app.services.passwords import PasswordService
from app.services.registration import CredentialAccountCoordinator, MSG_INTERNAL_ERROR

STRONG_PASSWORD = 'Str0ng!Pass'


class FakePasswords(PasswordService):
    def __init__(self, fail=False):
        super().__init__(min_length=8)
        self.fail = fail

    def hash(self, plaintext):
        if self.fail:
            raise RuntimeError('hasher unavailable')
        return f'hashed::{plaintext}'


class InMemoryIdentityStore:
    def __init__(self, *identities, fail_on=()):
        self.identities = list(identities)
        self.created = []
        self.saved = []
        self.fail_on = set(fail_on)
        self.create_conflict = None
        self.save_conflicts = []

    def _maybe_fail(self, operation):
        if operation in self.fail_on:
            raise RuntimeError(f'{operation} failed')

    def find_by_email(self, email):
        self._maybe_fail('find_by_email')
        return next((i for i in self.identities if i.email == email), None)

    def find_by_username(self, username, excluding_id=None):
        self._maybe_fail('find_by_username')
        return next(
            (i for i in self.identities if i.username == username and i.id != excluding_id),
            None,
        )

    def create(self, **fields):
        self._maybe_fail('create')
        if self.create_conflict:
            raise self.create_conflict
        identity = SimpleNamespace(id=len(self.identities) + 1, **fields)
        self.identities.append(identity)
        self.created.append(identity)
        return identity

    def save(self, identity):
        self._maybe_fail('save')
        if self.save_conflicts:
            raise self.save_conflicts.pop(0)
        self.saved.append(identity)
        return identity


def _identity(id, email, username, password_hash=None):
    return SimpleNamespace(id=id, email=email, username=username, password_hash=password_hash, image=None)


def _register(store, passwords=None, **form):
    coordinator = CredentialAccountCoordinator(store, passwords or FakePasswords())
    return coordinator.create_credentials_user(form)


@pytest.mark.parametrize('form', [
    {'email': '', 'password': STRONG_PASSWORD},
    {'email': 'someone@example.com', 'password': ''},
    {'password': STRONG_PASSWORD},
    {},
])
def test_email_and_password_are_required(form):
    store = InMemoryIdentityStore()
    assert _register(store, **form) == {'status': 'error', 'message': 'Email and password are required.'}


def test_non_mapping_submission_is_treated_as_missing_input():
    coordinator = CredentialAccountCoordinator(InMemoryIdentityStore(), FakePasswords())
    assert coordinator.create_credentials_user(None)['message'] == 'Email and password are required.'


@pytest.mark.parametrize('email', [
    'invalid-email',
    'no-domain@',
    'spaces in@example.com',
    'a@b',
    'a@b.com\n',
    'existing@example.com\n',
])
def test_malformed_email_is_rejected(email):
    result = _register(InMemoryIdentityStore(), email=email, password='anything')
    assert result == {'status': 'error', 'message': 'Please enter a valid email address.'}


def test_weak_password_messages_are_joined_with_spaces():
    result = _register(InMemoryIdentityStore(), email='newuser@example.com', password='weakpassword')

    assert result == {
        'status': 'error',
        'message': (
            'Password must contain at least one uppercase letter. '
            'Password must contain at least one number. '
            'Password must contain at least one special character (@$!%*?&).'
        ),
    }


def test_new_account_uses_email_local_part_as_username():
    store = InMemoryIdentityStore()

    result = _register(store, email='NewUser@Example.com', password=STRONG_PASSWORD)

    created = store.created[0]
    assert created.username == 'NewUser'
    assert created.email == 'newuser@example.com'
    assert created.password_hash == f'hashed::{STRONG_PASSWORD}'
    assert created.image is None
    assert result == {
        'status': 'success',
        'message': 'Account created successfully.',
        'user_id': str(created.id),
        'email': 'NewUser@Example.com',
        'password': STRONG_PASSWORD,
        'is_account_linked': False,
        'can_sign_in_with': ['credentials'],
        'should_auto_login': True,
    }


def test_new_account_username_from_email_example():
    store = InMemoryIdentityStore()
    _register(store, email='newuser@example.com', password=STRONG_PASSWORD)
    assert store.created[0].username == 'newuser'


def test_explicit_username_is_trimmed():
    store = InMemoryIdentityStore()
    _register(store, email='newuser@example.com', password=STRONG_PASSWORD, username='  lakeside  ')
    assert store.created[0].username == 'lakeside'


def test_blank_username_falls_back_to_email():
    store = InMemoryIdentityStore()
    _register(store, email='newuser@example.com', password=STRONG_PASSWORD, username='   ')
    assert store.created[0].username == 'newuser'


def test_existing_credentials_account_is_rejected():
    existing = _identity(1, 'existing@example.com', 'existing', password_hash='hashed::old')
    store = InMemoryIdentityStore(existing)

    result = _register(store, email='existing@example.com', password=STRONG_PASSWORD)

    assert result == {
        'status': 'error',
        'message': 'An account with the email "existing@example.com" already exists.',
    }
    assert store.created == []
    assert store.saved == []


def test_rejection_echoes_email_as_submitted():
    existing = _identity(1, 'existing@example.com', 'existing', password_hash='hashed::old')
    result = _register(InMemoryIdentityStore(existing), email='Existing@Example.com', password=STRONG_PASSWORD)
    assert result['message'] == 'An account with the email "Existing@Example.com" already exists.'


def test_taken_username_blocks_creation():
    store = InMemoryIdentityStore(_identity(1, 'someone@example.com', 'lakeside', 'hashed::x'))

    result = _register(store, email='newuser@example.com', password=STRONG_PASSWORD, username='lakeside')

    assert result == {'status': 'error', 'message': 'Username "lakeside" is already taken.'}
    assert store.created == []


def test_taken_derived_username_blocks_creation():
    store = InMemoryIdentityStore(_identity(1, 'newuser@elsewhere.com', 'newuser', 'hashed::x'))

    result = _register(store, email='newuser@example.com', password=STRONG_PASSWORD)

    assert result['message'] == 'Username "newuser" is already taken.'
    assert store.created == []


@pytest.mark.parametrize('field, message', [
    ('username', 'Username "newuser" is already taken.'),
    ('email', 'An account with the email "newuser@example.com" already exists.'),
])
def test_store_level_conflict_maps_to_user_message(field, message):
    store = InMemoryIdentityStore()
    store.create_conflict = UniquenessConflict(field)

    result = _register(store, email='newuser@example.com', password=STRONG_PASSWORD)

    assert result == {'status': 'error', 'message': message}


def test_google_account_gets_password_linked():
    google_user = _identity(7, 'traveler@example.com', 'traveler')
    store = InMemoryIdentityStore(google_user)

    result = _register(store, email='traveler@example.com', password=STRONG_PASSWORD)

    assert google_user.password_hash == f'hashed::{STRONG_PASSWORD}'
    assert store.saved == [google_user]
    assert store.created == []
    assert result == {
        'status': 'success',
        'message': (
            'Password successfully added to your existing Google account. '
            'You can now sign in with either method.'
        ),
        'user_id': '7',
        'email': 'traveler@example.com',
        'password': STRONG_PASSWORD,
        'is_account_linked': True,
        'can_sign_in_with': ['google', 'credentials'],
        'should_auto_login': True,
    }


def test_linking_renames_when_username_is_free():
    google_user = _identity(7, 'traveler@example.com', 'traveler')
    store = InMemoryIdentityStore(google_user)

    _register(store, email='traveler@example.com', password=STRONG_PASSWORD, username='globetrotter')

    assert google_user.username == 'globetrotter'


def test_linking_keeps_old_username_when_requested_one_is_taken():
    google_user = _identity(7, 'traveler@example.com', 'traveler')
    other = _identity(8, 'other@example.com', 'globetrotter', 'hashed::x')
    store = InMemoryIdentityStore(google_user, other)

    result = _register(store, email='traveler@example.com', password=STRONG_PASSWORD, username='globetrotter')

    assert result['status'] == 'success'
    assert result['is_account_linked'] is True
    assert google_user.username == 'traveler'
    assert google_user.password_hash == f'hashed::{STRONG_PASSWORD}'


def test_trailing_newline_does_not_slip_past_an_existing_email():
    existing = _identity(1, 'existing@example.com', 'existing', password_hash='hashed::old')
    store = InMemoryIdentityStore(existing)

    result = _register(store, email='existing@example.com\n', password=STRONG_PASSWORD, username='second')

    assert result == {'status': 'error', 'message': 'Please enter a valid email address.'}
    assert store.created == []


def test_linking_keeps_old_username_when_it_is_taken_concurrently():
    google_user = _identity(7, 'traveler@example.com', 'traveler')
    store = InMemoryIdentityStore(google_user)
    store.save_conflicts.append(UniquenessConflict('username', 'globetrotter'))

    result = _register(store, email='traveler@example.com', password=STRONG_PASSWORD, username='globetrotter')

    assert result['status'] == 'success'
    assert result['is_account_linked'] is True
    assert google_user.username == 'traveler'
    assert google_user.password_hash == f'hashed::{STRONG_PASSWORD}'
    assert store.saved == [google_user]


def test_linking_email_conflict_on_save_is_hidden():
    store = InMemoryIdentityStore(_identity(7, 'traveler@example.com', 'traveler'))
    store.save_conflicts.append(UniquenessConflict('email', 'traveler@example.com'))

    result = _register(store, email='traveler@example.com', password=STRONG_PASSWORD, username='globetrotter')

    assert result == {'status': 'error', 'message': MSG_INTERNAL_ERROR}


@pytest.mark.parametrize('operation', ['find_by_email', 'find_by_username', 'create'])
def test_store_failures_during_creation_are_hidden(operation):
    store = InMemoryIdentityStore(fail_on={operation})

    result = _register(store, email='newuser@example.com', password=STRONG_PASSWORD)

    assert result == {'status': 'error', 'message': MSG_INTERNAL_ERROR}


def test_save_failure_during_linking_is_hidden():
    store = InMemoryIdentityStore(_identity(7, 'traveler@example.com', 'traveler'), fail_on={'save'})

    result = _register(store, email='traveler@example.com', password=STRONG_PASSWORD)

    assert result == {'status': 'error', 'message': 'Internal server error. Please try again.'}


@pytest.mark.parametrize('identities', [(), (_identity(7, 'traveler@example.com', 'traveler'),)])
def test_hasher_failure_is_hidden(identities):
    store = InMemoryIdentityStore(*identities)

    result = _register(store, FakePasswords(fail=True), email='traveler@example.com', password=STRONG_PASSWORD)

    assert result == {'status': 'error', 'message': MSG_INTERNAL_ERROR}
    assert store.created == []
    assert store.saved == []


def test_infrastructure_failures_are_logged(caplog):
    store = InMemoryIdentityStore(fail_on={'find_by_email'})

    with caplog.at_level('ERROR', logger='app.services.registration'):
        _register(store, email='newuser@example.com', password=STRONG_PASSWORD)

    assert 'Credential registration failed' in caplog.text
    assert 'find_by_email failed' in caplog.text
