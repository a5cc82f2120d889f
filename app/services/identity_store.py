"""Identity store used by credential registration.

The registration flow talks to an ``IdentityStore`` rather than to the
ORM so it can be exercised without a database. ``SqlAlchemyIdentityStore``
is the production implementation backed by the ``users`` table.

``create`` and ``save`` rely on the table's unique constraints: a write that loses
a race against a concurrent registration surfaces as ``UniquenessConflict``
instead of a raw database error.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from sqlalchemy.exc import IntegrityError

from app.extensions import db
from app.models import User

logger = logging.getLogger(__name__)


class UniquenessConflict(Exception):
    """An identity with the same ``field`` value already exists."""

    def __init__(self, field: str, value: str | None = None):
        super().__init__(f'{field} already in use')
        self.field = field
        self.value = value


class IdentityStore(Protocol):
    def find_by_email(self, email: str) -> Optional[Any]: ...

    def find_by_username(self, username: str, excluding_id: Any = None) -> Optional[Any]: ...

    def create(self, **fields: Any) -> Any: ...

    def save(self, identity: Any) -> Any: ...


class SqlAlchemyIdentityStore:
    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def find_by_email(self, email: str) -> Optional[User]:
        return self.session.execute(
            db.select(User).filter_by(email=email)
        ).scalar_one_or_none()

    def find_by_username(self, username: str, excluding_id: Any = None) -> Optional[User]:
        query = db.select(User).filter_by(username=username)
        if excluding_id is not None:
            query = query.filter(User.id != excluding_id)
        return self.session.execute(query).scalars().first()

    def create(self, **fields: Any) -> User:
        user = User(**fields)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise self._conflict_for(fields)
        return user

    def save(self, identity: User) -> User:
        """Commit in-place changes; a lost race on ``username`` raises ``UniquenessConflict``."""
        fields = {'username': identity.username, 'email': identity.email}
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise self._conflict_for(fields, excluding_id=identity.id)
        except Exception:
            self.session.rollback()
            raise
        return identity

    def _username_in_use(self, username: str, excluding_id: Any = None) -> bool:
        query = db.select(User.id).filter_by(username=username)
        if excluding_id is not None:
            query = query.filter(User.id != excluding_id)
        return self.session.execute(query).first() is not None

    def _conflict_for(self, fields: dict, excluding_id: Any = None) -> UniquenessConflict:
        """Work out which unique column the failed write collided on."""
        username = fields.get('username')
        if username and self._username_in_use(username, excluding_id):
            logger.info('Write lost a race on username %r', username)
            return UniquenessConflict('username', username)
        logger.info('Write lost a race on email %r', fields.get('email'))
        return UniquenessConflict('email', fields.get('email'))
