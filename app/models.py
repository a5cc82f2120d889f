"""
Database Models for the Property Rentals Application

This module defines all database models using SQLAlchemy ORM.
Models include User, Property and Message.
"""

from app.extensions import db, login_manager
from werkzeug.security import check_password_hash
from flask_login import UserMixin
from datetime import datetime
from slugify import slugify


user_favorites = db.Table(
    'user_favorites',
    db.Column('user_id', db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    db.Column('property_id', db.Integer, db.ForeignKey('properties.id', ondelete='CASCADE'), primary_key=True),
    db.Index('ix_user_favorites_property_id', 'property_id'),
)


@login_manager.user_loader
def load_user(user_id):
    """Load user by ID for Flask-Login"""
    try:
        if user_id is None:
            return None
        return db.session.get(User, int(user_id))
    except Exception:
        try:
            db.session.rollback()
        except Exception:
            pass
        return None


class User(UserMixin, db.Model):
    """Identity record: unique lower-cased email and unique username.

    ``password_hash`` is empty for accounts that only sign in through a
    third-party provider; linking a password fills it in place.
    """

    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255))
    image = db.Column(db.String(600))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    properties = db.relationship('Property', backref='owner', lazy='dynamic', cascade='all, delete-orphan')
    favorites = db.relationship('Property', secondary=user_favorites, lazy='dynamic')

    @property
    def has_credentials(self):
        return bool(self.password_hash)

    def check_password(self, password):
        """Verify password against stored hash.

        Accounts without a password hash (third-party sign-in only) never match.
        """
        if not self.password_hash:
            return False
        try:
            return check_password_hash(self.password_hash, password)
        except Exception:
            return False

    def __repr__(self):
        return f'<User {self.username}>'


class Property(db.Model):
    """Rental listing owned by a user"""

    __tablename__ = 'properties'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(250), nullable=False, index=True)
    type = db.Column(db.String(40), nullable=False, index=True)
    description = db.Column(db.Text)

    # Location
    street = db.Column(db.String(200), nullable=False)
    city = db.Column(db.String(120), nullable=False, index=True)
    state = db.Column(db.String(2), nullable=False)
    zipcode = db.Column(db.String(10), nullable=False)

    # Specs
    beds = db.Column(db.Integer, nullable=False)
    baths = db.Column(db.Float, nullable=False)
    square_feet = db.Column(db.Integer, nullable=False)
    amenities = db.Column(db.JSON, nullable=False, default=list)

    # Rates (at least one is set)
    rate_nightly = db.Column(db.Numeric(10, 2))
    rate_weekly = db.Column(db.Numeric(10, 2))
    rate_monthly = db.Column(db.Numeric(10, 2))

    # Seller
    seller_name = db.Column(db.String(120), nullable=False)
    seller_email = db.Column(db.String(255), nullable=False)
    seller_phone = db.Column(db.String(40), nullable=False)

    is_featured = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    messages = db.relationship('Message', backref='property', lazy='dynamic')

    def __init__(self, **kwargs):
        super(Property, self).__init__(**kwargs)
        if not self.slug and self.name:
            self.slug = slugify(self.name)

    def to_dict(self):
        def _rate(value):
            return float(value) if value is not None else None

        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'name': self.name,
            'slug': self.slug,
            'type': self.type,
            'description': self.description,
            'location': {
                'street': self.street,
                'city': self.city,
                'state': self.state,
                'zipcode': self.zipcode,
            },
            'beds': self.beds,
            'baths': self.baths,
            'square_feet': self.square_feet,
            'amenities': list(self.amenities or []),
            'rates': {
                'nightly': _rate(self.rate_nightly),
                'weekly': _rate(self.rate_weekly),
                'monthly': _rate(self.rate_monthly),
            },
            'seller_info': {
                'name': self.seller_name,
                'email': self.seller_email,
                'phone': self.seller_phone,
            },
        }

    def __repr__(self):
        return f'<Property {self.name}>'


class Message(db.Model):
    """Inquiry sent to a property owner"""

    __tablename__ = 'messages'

    id = db.Column(db.Integer, primary_key=True)
    sender_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    recipient_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    property_id = db.Column(db.Integer, db.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(40))
    body = db.Column(db.Text, nullable=False)
    read = db.Column(db.Boolean, nullable=False, default=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    sender = db.relationship('User', foreign_keys=[sender_id])
    recipient = db.relationship('User', foreign_keys=[recipient_id])

    def __repr__(self):
        return f'<Message {self.id} to {self.recipient_id}>'
