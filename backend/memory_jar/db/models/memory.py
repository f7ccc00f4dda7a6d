import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text, UniqueConstraint

from memory_jar.db.session import Base

MOODS = ("happy", "sad", "neutral", "excited", "calm", "anxious")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Memory(Base):
    __tablename__ = "memories"
    # one memory per owner per calendar day
    __table_args__ = (UniqueConstraint("owner_id", "date", name="uq_memories_owner_date"),)

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    date = Column(Date, nullable=False)
    note = Column(Text, nullable=False, default="")
    mood = Column(String, nullable=False)
    image_url = Column(Text, nullable=True)  # remote URL or inline data: URI
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
