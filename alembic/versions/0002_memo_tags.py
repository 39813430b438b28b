"""memo_tags

Revision ID: 0002_memo_tags
Revises: 0001_initial_schema
Create Date: 2026-10-19 10:00:00.000000

태그 및 메모-태그 연결 테이블 생성.
Create tags and memo_tags tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002_memo_tags'
down_revision: Union[str, None] = '0001_initial_schema'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # tags: 사용자별 태그 (name unique per user)
    op.create_table(
        'tags',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('usage_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'name', name='uq_tags_user_name'),
    )
    op.create_index('ix_tags_user_id', 'tags', ['user_id'])

    # memo_tags: 메모/태그 어느 쪽이 삭제되어도 연결 행 삭제
    op.create_table(
        'memo_tags',
        sa.Column('memo_id', sa.Uuid(), sa.ForeignKey('memos.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('tag_id', sa.Uuid(), sa.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_index('ix_memo_tags_tag_id', 'memo_tags', ['tag_id'])


def downgrade() -> None:
    op.drop_index('ix_memo_tags_tag_id', table_name='memo_tags')
    op.drop_table('memo_tags')
    op.drop_index('ix_tags_user_id', table_name='tags')
    op.drop_table('tags')
