"""create_users_table

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-18 16:20:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3f1c9a7d2b10'
down_revision = None
branch_labels = None
depends_on = None


user_status = sa.Enum('ACTIVE', 'INACTIVE', 'SUSPENDED', name='user_status')
user_role = sa.Enum('USER', 'ADMIN', 'MODERATOR', name='user_role')


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('status', user_status, nullable=False),
        sa.Column('role', user_role, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index('ix_users_deleted_at_created_at', 'users', ['deleted_at', 'created_at'], unique=False)


def downgrade():
    op.drop_index('ix_users_deleted_at_created_at', table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
    user_role.drop(op.get_bind(), checkfirst=True)
    user_status.drop(op.get_bind(), checkfirst=True)
