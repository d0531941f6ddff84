"""create_adoption_tables

Revision ID: 3c9e1f0a7b21
Revises:
Create Date: 2026-10-19 10:12:03.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c9e1f0a7b21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, categories, animals, favorites and messages tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_superuser', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.UniqueConstraint('name', name='uq_categories_name'),
    )

    op.create_table(
        'animals',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_animals_owner_id'), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id', name='fk_animals_category_id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('gender', sa.String(20), nullable=True),
        sa.Column('short_description', sa.String(255), nullable=True),
        sa.Column('full_description', sa.Text(), nullable=True),
        sa.Column('image_blob', sa.LargeBinary(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('age >= 0', name='ck_animals_age_non_negative'),
    )
    op.create_index('ix_animals_owner_id', 'animals', ['owner_id'])
    op.create_index('ix_animals_category_id', 'animals', ['category_id'])
    op.create_index('ix_animals_timestamp', 'animals', ['timestamp'])

    op.create_table(
        'favorites',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_favorites_user_id'), nullable=False),
        sa.Column('animal_id', sa.Integer(), sa.ForeignKey('animals.id', name='fk_favorites_animal_id'), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', 'animal_id', name='uq_favorites_user_animal'),
    )
    op.create_index('ix_favorites_user_id', 'favorites', ['user_id'])
    op.create_index('ix_favorites_animal_id', 'favorites', ['animal_id'])

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column('sender_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_messages_sender_id'), nullable=False),
        sa.Column('recipient_id', sa.Integer(), sa.ForeignKey('users.id', name='fk_messages_recipient_id'), nullable=False),
        sa.Column('animal_id', sa.Integer(), sa.ForeignKey('animals.id', name='fk_messages_animal_id'), nullable=True),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_messages_sender_id', 'messages', ['sender_id'])
    op.create_index('ix_messages_recipient_id', 'messages', ['recipient_id'])
    op.create_index('ix_messages_animal_id', 'messages', ['animal_id'])
    op.create_index('ix_messages_is_read', 'messages', ['is_read'])
    op.create_index('ix_messages_timestamp', 'messages', ['timestamp'])


def downgrade() -> None:
    """Drop all adoption tables."""
    op.drop_index('ix_messages_timestamp', 'messages')
    op.drop_index('ix_messages_is_read', 'messages')
    op.drop_index('ix_messages_animal_id', 'messages')
    op.drop_index('ix_messages_recipient_id', 'messages')
    op.drop_index('ix_messages_sender_id', 'messages')
    op.drop_table('messages')

    op.drop_index('ix_favorites_animal_id', 'favorites')
    op.drop_index('ix_favorites_user_id', 'favorites')
    op.drop_table('favorites')

    op.drop_index('ix_animals_timestamp', 'animals')
    op.drop_index('ix_animals_category_id', 'animals')
    op.drop_index('ix_animals_owner_id', 'animals')
    op.drop_table('animals')

    op.drop_table('categories')

    op.drop_index('ix_users_email', 'users')
    op.drop_index('ix_users_username', 'users')
    op.drop_table('users')
