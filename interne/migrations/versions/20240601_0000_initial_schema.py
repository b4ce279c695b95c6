"""Initial schema: users, collections, entries, visits, tags

Revision ID: 3f1c2a9d8e10
Revises:
Create Date: 2024-06-01 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d8e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

INTERVALS = ('hours', 'days', 'weeks', 'months', 'years')


def upgrade() -> None:
    """
    Create all tables.

    Instants are stored as text (RFC 3339, UTC).
    """
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('invite_code', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.String(), nullable=False),
        sa.Column('updated_at', sa.String(), nullable=False),
        sa.CheckConstraint("name != ''", name='ck_user_non_empty_name'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('invite_code'),
    )

    op.create_table(
        'collections',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('invite_code', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.String(), nullable=False),
        sa.Column('updated_at', sa.String(), nullable=False),
        sa.CheckConstraint("name != ''", name='ck_collection_non_empty_name'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invite_code'),
    )
    op.create_index('ix_collections_owner_id', 'collections', ['owner_id'])

    op.create_table(
        'collection_members',
        sa.Column('collection_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('joined_at', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['collection_id'], ['collections.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('collection_id', 'user_id'),
    )
    op.create_index('ix_collection_members_user_id', 'collection_members', ['user_id'])

    op.create_table(
        'entries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('collection_id', sa.Integer(), nullable=True),
        sa.Column('url', sa.String(length=2048), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column(
            'interval',
            sa.Enum(*INTERVALS, name='interval', create_constraint=True),
            nullable=False,
        ),
        sa.Column('dismissed_at', sa.String(), nullable=True),
        sa.Column('created_at', sa.String(), nullable=False),
        sa.Column('updated_at', sa.String(), nullable=False),
        sa.CheckConstraint("url != ''", name='ck_entry_non_empty_url'),
        sa.CheckConstraint("title != ''", name='ck_entry_non_empty_title'),
        sa.CheckConstraint('duration >= 1', name='ck_entry_positive_duration'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['collection_id'], ['collections.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_entries_user_id', 'entries', ['user_id'])
    op.create_index('ix_entries_collection_id', 'entries', ['collection_id'])
    op.create_index('ix_entries_dismissed_at', 'entries', ['dismissed_at'])

    op.create_table(
        'visits',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('entry_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('visited_at', sa.String(), nullable=False),
        sa.ForeignKeyConstraint(['entry_id'], ['entries.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_visits_entry_id', 'visits', ['entry_id'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.String(), nullable=False),
        sa.CheckConstraint("name != ''", name='ck_tag_non_empty_name'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tags_name', 'tags', ['name'], unique=True)

    op.create_table(
        'entry_tags',
        sa.Column('entry_id', sa.Integer(), nullable=False),
        sa.Column('tag_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['entry_id'], ['entries.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('entry_id', 'tag_id'),
    )
    op.create_index('ix_entry_tags_tag_id', 'entry_tags', ['tag_id'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_entry_tags_tag_id', table_name='entry_tags')
    op.drop_table('entry_tags')
    op.drop_index('ix_tags_name', table_name='tags')
    op.drop_table('tags')
    op.drop_index('ix_visits_entry_id', table_name='visits')
    op.drop_table('visits')
    op.drop_index('ix_entries_dismissed_at', table_name='entries')
    op.drop_index('ix_entries_collection_id', table_name='entries')
    op.drop_index('ix_entries_user_id', table_name='entries')
    op.drop_table('entries')
    op.drop_index('ix_collection_members_user_id', table_name='collection_members')
    op.drop_table('collection_members')
    op.drop_index('ix_collections_owner_id', table_name='collections')
    op.drop_table('collections')
    op.drop_table('users')
