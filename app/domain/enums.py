from __future__ import annotations


class ActionStatus:
    """Outcome of a mutating action as seen by the UI layer."""

    INFO = 'info'
    SUCCESS = 'success'
    WARNING = 'warning'
    ERROR = 'error'

    ALL = (INFO, SUCCESS, WARNING, ERROR)


class AuthProvider:
    """Sign-in methods an identity can use."""

    CREDENTIALS = 'credentials'
    # Only third-party provider wired into account linking so far.
    GOOGLE = 'google'

    ALL = (CREDENTIALS, GOOGLE)


PROPERTY_TYPES: tuple[str, ...] = (
    'Apartment',
    'Cabin',
    'Chalet',
    'Condo',
    'Cottage',
    'House',
    'Room',
    'Studio',
    'Other',
)

US_STATE_CODES: tuple[str, ...] = (
    'AL', 'AK', 'AZ', 'AR', 'CA', 'CO', 'CT', 'DE', 'FL', 'GA',
    'HI', 'ID', 'IL', 'IN', 'IA', 'KS', 'KY', 'LA', 'ME', 'MD',
    'MA', 'MI', 'MN', 'MS', 'MO', 'MT', 'NE', 'NV', 'NH', 'NJ',
    'NM', 'NY', 'NC', 'ND', 'OH', 'OK', 'OR', 'PA', 'RI', 'SC',
    'SD', 'TN', 'TX', 'UT', 'VT', 'VA', 'WA', 'WV', 'WI', 'WY',
)
