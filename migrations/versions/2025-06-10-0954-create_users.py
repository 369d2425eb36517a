"""create users

Revision ID: 20250610095404
Revises:
Create Date: 2025-06-10 09:54:04

Safe to re-run over an existing users table.
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '20250610095404'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('user_password', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('archived_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
        if_not_exists=True,
    )
    op.create_index('idx_users_id', 'users', ['id'], if_not_exists=True)
    op.create_index('idx_users_username', 'users', ['username'], if_not_exists=True)


def downgrade() -> None:
    op.drop_index('idx_users_username', table_name='users', if_exists=True)
    op.drop_index('idx_users_id', table_name='users', if_exists=True)
    op.drop_table('users', if_exists=True)
