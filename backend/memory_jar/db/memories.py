# memory_jar/db/memories.py
from __future__ import annotations

import calendar
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from tenacity import RetryError, retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from memory_jar.config import UPSERT_MAX_ATTEMPTS
from memory_jar.db.models import MOODS, Memory
from memory_jar.db.models.memory import utcnow
from memory_jar.errors import NotFound, TransientStoreError, ValidationError
from memory_jar.utils.logger import get_logger

logger = get_logger(__name__)


def parse_day(value) -> date:
    """Accept a date or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise ValidationError("Date and mood are required")
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def validate_mood(mood: Optional[str]) -> str:
    if not mood:
        raise ValidationError("Date and mood are required")
    if mood not in MOODS:
        raise ValidationError(f"Invalid mood: {mood!r} (expected one of {', '.join(MOODS)})")
    return mood


def load_memories(db: Session, owner_id: str) -> List[Memory]:
    return (
        db.query(Memory)
        .filter(Memory.owner_id == owner_id)
        .order_by(Memory.date.desc())
        .all()
    )


def get_memory_by_date(db: Session, owner_id: str, day) -> Optional[Memory]:
    return (
        db.query(Memory)
        .filter(Memory.owner_id == owner_id, Memory.date == parse_day(day))
        .first()
    )


def load_memories_for_month(db: Session, owner_id: str, year: int, month: int) -> List[Memory]:
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}")
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    return (
        db.query(Memory)
        .filter(Memory.owner_id == owner_id, Memory.date >= first, Memory.date <= last)
        .order_by(Memory.date.desc())
        .all()
    )


@retry(
    retry=retry_if_exception_type(IntegrityError),
    stop=stop_after_attempt(UPSERT_MAX_ATTEMPTS),
    wait=wait_fixed(0.05),
)
def _upsert_once(db: Session, owner_id: str, day: date, note: str, mood: str, image_url: Optional[str]) -> Memory:
    row = (
        db.query(Memory)
        .filter(Memory.owner_id == owner_id, Memory.date == day)
        .first()
    )
    now = utcnow()
    created = row is None
    if row:
        row.note = note
        row.mood = mood
        row.image_url = image_url
        # refreshed even when nothing else changed
        row.updated_at = now
    else:
        row = Memory(
            owner_id=owner_id,
            date=day,
            note=note,
            mood=mood,
            image_url=image_url,
            created_at=now,
            updated_at=now,
        )
        db.add(row)

    try:
        db.commit()
    except IntegrityError:
        # a concurrent save won the insert for this (owner, date); retry updates it
        db.rollback()
        logger.warning("upsert conflict owner=%s date=%s, retrying", owner_id, day.isoformat())
        raise

    db.refresh(row)
    logger.info("%s memory id=%s owner=%s date=%s", "created" if created else "updated", row.id, owner_id, day.isoformat())
    return row


def upsert_memory(
    db: Session,
    owner_id: str,
    day,
    mood: Optional[str],
    note: Optional[str] = "",
    image_url: Optional[str] = None,
) -> Memory:
    """Insert or update the owner's memory for ``day``.

    Validation happens before anything is written. The (owner, date) unique
    constraint makes a lost insert race surface as IntegrityError, in which case
    the whole read-then-write is retried and lands on the update branch.
    """
    day = parse_day(day)
    mood = validate_mood(mood)

    try:
        return _upsert_once(db, owner_id, day, note or "", mood, image_url or None)
    except RetryError as re_err:
        last = re_err.last_attempt.exception()
        logger.error("upsert gave up after %s attempts owner=%s date=%s: %s", UPSERT_MAX_ATTEMPTS, owner_id, day.isoformat(), last)
        raise TransientStoreError() from last
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("upsert failed owner=%s date=%s", owner_id, day.isoformat())
        raise TransientStoreError() from e


def delete_memory(db: Session, owner_id: str, memory_id: str) -> None:
    # ownership is part of the DELETE itself, no separate lookup
    try:
        deleted = (
            db.query(Memory)
            .filter(Memory.id == memory_id, Memory.owner_id == owner_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("delete failed owner=%s id=%s", owner_id, memory_id)
        raise TransientStoreError() from e

    if not deleted:
        raise NotFound()
    logger.info("deleted memory id=%s owner=%s", memory_id, owner_id)
