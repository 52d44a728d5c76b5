"""Initial inquiry schema

Revision ID: 4e1a7c2b9d30
Revises:
Create Date: 2026-10-19 10:40:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4e1a7c2b9d30'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'client_inquiries',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('subject', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('team_member', sa.String(length=50), nullable=False),
        sa.Column('inquiry_type', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('responded_at', sa.DateTime(), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.String(length=512), nullable=True),
    )
    op.create_index('ix_client_inquiries_email', 'client_inquiries', ['email'])
    op.create_index('ix_client_inquiries_team_member', 'client_inquiries', ['team_member'])
    op.create_index('ix_client_inquiries_status', 'client_inquiries', ['status'])
    op.create_index('ix_client_inquiries_created_at', 'client_inquiries', ['created_at'])
    op.create_index('ix_client_inquiries_status_created', 'client_inquiries', ['status', 'created_at'])

    op.create_table(
        'client_interactions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('inquiry_id', sa.Integer(), sa.ForeignKey('client_inquiries.id'), nullable=False),
        sa.Column('interaction_type', sa.String(length=30), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('follow_up_required', sa.Boolean(), nullable=False),
        sa.Column('follow_up_date', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_client_interactions_inquiry_id', 'client_interactions', ['inquiry_id'])

    op.create_table(
        'admin_users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(length=50), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=128), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'admin_login_attempts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('ip', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_admin_login_attempts_ip', 'admin_login_attempts', ['ip'])
    op.create_index('ix_admin_login_attempt_ip_created', 'admin_login_attempts', ['ip', 'created_at'])


def downgrade():
    op.drop_index('ix_admin_login_attempt_ip_created', table_name='admin_login_attempts')
    op.drop_index('ix_admin_login_attempts_ip', table_name='admin_login_attempts')
    op.drop_table('admin_login_attempts')
    op.drop_table('admin_users')
    op.drop_index('ix_client_interactions_inquiry_id', table_name='client_interactions')
    op.drop_table('client_interactions')
    op.drop_index('ix_client_inquiries_status_created', table_name='client_inquiries')
    op.drop_index('ix_client_inquiries_created_at', table_name='client_inquiries')
    op.drop_index('ix_client_inquiries_status', table_name='client_inquiries')
    op.drop_index('ix_client_inquiries_team_member', table_name='client_inquiries')
    op.drop_index('ix_client_inquiries_email', table_name='client_inquiries')
    op.drop_table('client_inquiries')
