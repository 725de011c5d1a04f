"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-12

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create roles table
    op.create_table(
        'roles',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_roles'),
        sa.UniqueConstraint('name', name='uq_roles_name'),
    )

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('role_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id'], name='fk_users_role_id_roles'),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Create document_requests table
    op.create_table(
        'document_requests',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('document_path', sa.String(512), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('requested_by_user_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('approved_by_user_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('decided_at', sa.DateTime(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ['requested_by_user_id'], ['users.id'],
            name='fk_document_requests_requested_by_user_id_users', ondelete='SET NULL',
        ),
        sa.ForeignKeyConstraint(
            ['approved_by_user_id'], ['users.id'],
            name='fk_document_requests_approved_by_user_id_users', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_document_requests'),
    )
    op.create_index('ix_document_requests_status', 'document_requests', ['status'])
    op.create_index('ix_document_requests_created_at', 'document_requests', ['created_at'])

    # Create approval_votes table
    op.create_table(
        'approval_votes',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('document_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('approver_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('decision', sa.String(20), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('voted_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ['document_id'], ['document_requests.id'],
            name='fk_approval_votes_document_id_document_requests', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['approver_id'], ['users.id'],
            name='fk_approval_votes_approver_id_users', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_approval_votes'),
        sa.UniqueConstraint('document_id', 'approver_id', name='uq_approval_votes_document_approver'),
    )
    op.create_index('ix_approval_votes_document_id', 'approval_votes', ['document_id'])
    op.create_index('ix_approval_votes_approver_id', 'approval_votes', ['approver_id'])

    # Create approval_configs table
    op.create_table(
        'approval_configs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('mode', sa.String(50), nullable=False),
        sa.Column('threshold_value', sa.Integer(), nullable=False),
        sa.Column('comments_required', sa.Boolean(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_approval_configs'),
    )

    # Create document_history table
    op.create_table(
        'document_history',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('document_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('action', sa.String(50), nullable=False),
        sa.Column('from_state', sa.String(50), nullable=False),
        sa.Column('to_state', sa.String(50), nullable=False),
        sa.Column('user_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ['document_id'], ['document_requests.id'],
            name='fk_document_history_document_id_document_requests', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_document_history_user_id_users', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_document_history'),
    )
    op.create_index('ix_document_history_document_id', 'document_history', ['document_id'])
    op.create_index('ix_document_history_created_at', 'document_history', ['created_at'])

    # Create notifications table
    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('link', sa.String(512), nullable=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_notifications_user_id_users', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_notifications'),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_created_at', 'notifications', ['created_at'])

    # Create notification_logs table
    op.create_table(
        'notification_logs',
        sa.Column('id', sa.Uuid(as_uuid=True), nullable=False),
        sa.Column('channel', sa.String(50), nullable=False),
        sa.Column('event_type', sa.String(50), nullable=False),
        sa.Column('recipient', sa.String(512), nullable=False),
        sa.Column('document_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('subject', sa.String(512), nullable=True),
        sa.Column('body', sa.Text(), nullable=True),
        sa.Column('payload', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('attempts', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('sent_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ['document_id'], ['document_requests.id'],
            name='fk_notification_logs_document_id_document_requests', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_notification_logs'),
    )
    op.create_index('ix_notification_logs_created_at', 'notification_logs', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_notification_logs_created_at', table_name='notification_logs')
    op.drop_table('notification_logs')
    op.drop_index('ix_notifications_created_at', table_name='notifications')
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_document_history_created_at', table_name='document_history')
    op.drop_index('ix_document_history_document_id', table_name='document_history')
    op.drop_table('document_history')
    op.drop_table('approval_configs')
    op.drop_index('ix_approval_votes_approver_id', table_name='approval_votes')
    op.drop_index('ix_approval_votes_document_id', table_name='approval_votes')
    op.drop_table('approval_votes')
    op.drop_index('ix_document_requests_created_at', table_name='document_requests')
    op.drop_index('ix_document_requests_status', table_name='document_requests')
    op.drop_table('document_requests')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    op.drop_table('roles')
