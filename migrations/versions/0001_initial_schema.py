"""Initial schema: users, properties, messages, favorites

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        # NULL for accounts that only sign in through Google
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('image', sa.String(length=600), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=250), nullable=False),
        sa.Column('type', sa.String(length=40), nullable=False),
        sa.Column('description', sa.Text()),

        # Location
        sa.Column('street', sa.String(length=200), nullable=False),
        sa.Column('city', sa.String(length=120), nullable=False),
        sa.Column('state', sa.String(length=2), nullable=False),
        sa.Column('zipcode', sa.String(length=10), nullable=False),

        # Specs
        sa.Column('beds', sa.Integer(), nullable=False),
        sa.Column('baths', sa.Float(), nullable=False),
        sa.Column('square_feet', sa.Integer(), nullable=False),
        sa.Column('amenities', sa.JSON(), nullable=False),

        # Rates
        sa.Column('rate_nightly', sa.Numeric(10, 2)),
        sa.Column('rate_weekly', sa.Numeric(10, 2)),
        sa.Column('rate_monthly', sa.Numeric(10, 2)),

        # Seller
        sa.Column('seller_name', sa.String(length=120), nullable=False),
        sa.Column('seller_email', sa.String(length=255), nullable=False),
        sa.Column('seller_phone', sa.String(length=40), nullable=False),

        sa.Column('is_featured', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_properties_owner_id', 'properties', ['owner_id'], unique=False)
    op.create_index('ix_properties_slug', 'properties', ['slug'], unique=False)
    op.create_index('ix_properties_type', 'properties', ['type'], unique=False)
    op.create_index('ix_properties_city', 'properties', ['city'], unique=False)

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sender_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('recipient_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=40)),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_messages_sender_id', 'messages', ['sender_id'], unique=False)
    op.create_index('ix_messages_recipient_id', 'messages', ['recipient_id'], unique=False)
    op.create_index('ix_messages_read', 'messages', ['read'], unique=False)

    op.create_table(
        'user_favorites',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('property_id', sa.Integer(), sa.ForeignKey('properties.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_index('ix_user_favorites_property_id', 'user_favorites', ['property_id'], unique=False)


def downgrade():
    op.drop_index('ix_user_favorites_property_id', table_name='user_favorites')
    op.drop_table('user_favorites')

    op.drop_index('ix_messages_read', table_name='messages')
    op.drop_index('ix_messages_recipient_id', table_name='messages')
    op.drop_index('ix_messages_sender_id', table_name='messages')
    op.drop_table('messages')

    op.drop_index('ix_properties_city', table_name='properties')
    op.drop_index('ix_properties_type', table_name='properties')
    op.drop_index('ix_properties_slug', table_name='properties')
    op.drop_index('ix_properties_owner_id', table_name='properties')
    op.drop_table('properties')

    op.drop_index('ix_users_username', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
