"""Reading progress and reading sessions.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One row per (user, book); the unique pair is the upsert conflict target
    op.create_table(
        'reading_progress',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('book_id', sa.Uuid(), nullable=False),
        sa.Column('current_page', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_pages', sa.Integer(), nullable=False),
        sa.Column('progress', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('last_read_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),

        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_reading_progress_user_id_users', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['book_id'], ['books.id'],
            name='fk_reading_progress_book_id_books', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_reading_progress'),
        sa.UniqueConstraint('user_id', 'book_id', name='uq_reading_progress_user_book'),
        sa.CheckConstraint('current_page >= 0', name='ck_reading_progress_current_page_non_negative'),
        sa.CheckConstraint('total_pages >= 0', name='ck_reading_progress_total_pages_non_negative'),
        sa.CheckConstraint('progress >= 0 AND progress <= 100', name='ck_reading_progress_progress_range'),
    )
    op.create_index('ix_reading_progress_user_id', 'reading_progress', ['user_id'])
    op.create_index('ix_reading_progress_book_id', 'reading_progress', ['book_id'])
    op.create_index('idx_reading_progress_user_last_read', 'reading_progress', ['user_id', 'last_read_at'])

    # Append-only session log, correlated with progress only by (user, book)
    op.create_table(
        'reading_sessions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('book_id', sa.Uuid(), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('pages_read', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),

        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_reading_sessions_user_id_users', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['book_id'], ['books.id'],
            name='fk_reading_sessions_book_id_books', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_reading_sessions'),
        sa.CheckConstraint('pages_read >= 0', name='ck_reading_sessions_pages_read_non_negative'),
        sa.CheckConstraint('duration >= 0', name='ck_reading_sessions_duration_non_negative'),
    )
    op.create_index('ix_reading_sessions_user_id', 'reading_sessions', ['user_id'])
    op.create_index('ix_reading_sessions_book_id', 'reading_sessions', ['book_id'])
    op.create_index('idx_reading_sessions_created_at', 'reading_sessions', ['created_at'])


def downgrade() -> None:
    op.drop_index('idx_reading_sessions_created_at', table_name='reading_sessions')
    op.drop_index('ix_reading_sessions_book_id', table_name='reading_sessions')
    op.drop_index('ix_reading_sessions_user_id', table_name='reading_sessions')
    op.drop_table('reading_sessions')

    op.drop_index('idx_reading_progress_user_last_read', table_name='reading_progress')
    op.drop_index('ix_reading_progress_book_id', table_name='reading_progress')
    op.drop_index('ix_reading_progress_user_id', table_name='reading_progress')
    op.drop_table('reading_progress')
