"""Password hashing and strength rules for credential accounts."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from werkzeug.security import check_password_hash, generate_password_hash

SPECIAL_CHARACTERS = '@$!%*?&'

_LOWERCASE = re.compile(r'[a-z]')
_UPPERCASE = re.compile(r'[A-Z]')
_DIGIT = re.compile(r'\d')
_SPECIAL = re.compile(f'[{re.escape(SPECIAL_CHARACTERS)}]')


@dataclass(frozen=True)
class PasswordValidation:
    is_valid: bool
    errors: tuple[str, ...] = field(default_factory=tuple)


class PasswordService:
    """Hashes passwords with Werkzeug and checks them against the strength rules."""

    def __init__(self, min_length: int = 8, method: str | None = None):
        self.min_length = min_length
        self.method = method

    def hash(self, plaintext: str) -> str:
        if self.method:
            return generate_password_hash(plaintext, method=self.method)
        return generate_password_hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        return check_password_hash(hashed, plaintext)

    def validate_strength(self, plaintext: str) -> PasswordValidation:
        errors = []

        if len(plaintext) < self.min_length:
            errors.append(f'Password must be at least {self.min_length} characters long.')
        if not _LOWERCASE.search(plaintext):
            errors.append('Password must contain at least one lowercase letter.')
        if not _UPPERCASE.search(plaintext):
            errors.append('Password must contain at least one uppercase letter.')
        if not _DIGIT.search(plaintext):
            errors.append('Password must contain at least one number.')
        if not _SPECIAL.search(plaintext):
            errors.append(f'Password must contain at least one special character ({SPECIAL_CHARACTERS}).')

        return PasswordValidation(is_valid=not errors, errors=tuple(errors))
