"""태그 ORM 모델.

Tag ORM model: per-user labels attached to memos.

Tables:
    - tags: 사용자 태그 (User tags, unique name per user)
    - memo_tags: 메모-태그 연결 (Memo/tag association)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from memotube.database import Base

# 메모/태그 삭제 시 연결 행도 삭제 (CASCADE on both sides)
memo_tags: Table = Table(
    "memo_tags",
    Base.metadata,
    Column("memo_id", Uuid, ForeignKey("memos.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Uuid, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base):
    """태그 모델.

    Tag model. ``usage_count`` is the number of memos carrying the tag;
    a tag whose count drops to zero is removed.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 소유자 FK (Owner foreign key)
        name: 태그 이름 (Name, unique per user)
        usage_count: 사용 횟수 (Number of memos using the tag)
        created_at: 생성 일시 UTC
    """

    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_tags_user_name"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
