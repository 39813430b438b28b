"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

사용자, 동영상, 메모, 업무 테이블 생성.
Create users, videos, memos and tasks tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # users: 계정 (email/username unique, soft deactivation via is_active)
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('username', sa.String(30), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('display_name', sa.String(100), nullable=True),
        sa.Column('avatar_url', sa.String(2048), nullable=True),
        sa.Column('notification_settings', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('email_verified', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # videos: 사용자별 저장 동영상 (one row per user per YouTube id)
    op.create_table(
        'videos',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('youtube_id', sa.String(11), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('channel_name', sa.String(255), nullable=True),
        sa.Column('channel_id', sa.String(64), nullable=True),
        sa.Column('thumbnail_url', sa.String(2048), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('saved_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('last_watched_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('watch_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_archived', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.UniqueConstraint('user_id', 'youtube_id', name='uq_video_user_youtube'),
    )
    op.create_index('ix_videos_user_id', 'videos', ['user_id'])

    # memos: 동영상 메모 (video optional, cascades with the video)
    op.create_table(
        'memos',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('video_id', sa.Uuid(), sa.ForeignKey('videos.id', ondelete='CASCADE'), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('timestamp_seconds', sa.Integer(), nullable=True),
        sa.Column('is_task', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('is_important', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_memos_user_id', 'memos', ['user_id'])
    op.create_index('ix_memos_video_id', 'memos', ['video_id'])

    # tasks: 업무 (memo/video links are cleared when those are deleted)
    op.create_table(
        'tasks',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('memo_id', sa.Uuid(), sa.ForeignKey('memos.id', ondelete='SET NULL'), nullable=True),
        sa.Column('video_id', sa.Uuid(), sa.ForeignKey('videos.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('priority', sa.String(20), server_default='medium', nullable=False),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_tasks_user_id', 'tasks', ['user_id'])
    op.create_index('ix_tasks_user_status', 'tasks', ['user_id', 'status'])
    op.create_index('ix_tasks_user_due_date', 'tasks', ['user_id', 'due_date'])


def downgrade() -> None:
    op.drop_table('tasks')
    op.drop_table('memos')
    op.drop_table('videos')
    op.drop_table('users')
