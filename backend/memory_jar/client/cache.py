# memory_jar/client/cache.py
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from memory_jar.errors import (
    MemoryJarError,
    NotFound,
    PayloadTooLarge,
    Unauthorized,
    ValidationError,
)
from memory_jar.insights import flashback, monthly_insights, record_date, streak
from memory_jar.schemas import MemoryOut
from memory_jar.utils.logger import get_logger

logger = get_logger(__name__)

LOADING = "loading"
READY = "ready"
ERROR = "error"


def _message_for(action: str, e: Exception) -> str:
    if isinstance(e, PayloadTooLarge):
        return "Photo is too large. Try a smaller image."
    if isinstance(e, Unauthorized):
        return "Your session has ended. Please sign in again."
    if isinstance(e, ValidationError):
        return e.message
    if isinstance(e, NotFound):
        return "That memory no longer exists. Refresh to see the latest."
    return f"Failed to {action}. Please try again."


class MemoryCache:
    """Session-scoped mirror of the signed-in user's memories.

    One instance per session. Reads never hit the server; every mutation waits
    for the server and then reconciles the local list. A failed call flips the
    state to ``error`` but keeps whatever was already loaded.
    """

    def __init__(self, api):
        self.api = api
        self.state = LOADING
        self.error: Optional[str] = None
        self._memories: List[MemoryOut] = []

    @property
    def memories(self) -> List[MemoryOut]:
        return list(self._memories)

    @property
    def is_loaded(self) -> bool:
        return self.state != LOADING

    def _ok(self) -> None:
        # a successful mutation replaces any earlier failure message
        self.state = READY
        self.error = None

    def _fail(self, action: str, e: Exception) -> None:
        self.state = ERROR
        self.error = _message_for(action, e)
        logger.warning("failed to %s: %s", action, e)

    # ------------------------
    # Load
    # ------------------------

    def load(self) -> List[MemoryOut]:
        self.state = LOADING
        try:
            records = self.api.list()
        except Unauthorized:
            # not signed in yet
            self._memories = []
            self.state = READY
            self.error = None
            return self.memories
        except MemoryJarError as e:
            self._fail("load memories", e)
            return self.memories

        self._memories = list(records)
        self.state = READY
        self.error = None
        return self.memories

    refetch = load
    retry = load

    def reset(self) -> None:
        self._memories = []
        self.state = LOADING
        self.error = None

    # ------------------------
    # Mutations
    # ------------------------

    def add_or_update(self, date: str, mood: str, note: str = "", image_url: Optional[str] = None) -> Optional[MemoryOut]:
        try:
            saved = self.api.upsert(date=date, mood=mood, note=note, image_url=image_url)
        except MemoryJarError as e:
            self._fail("save memory", e)
            return None

        # match on date: an overwrite may target a record whose id we never saw
        for i, m in enumerate(self._memories):
            if m.date == saved.date:
                self._memories[i] = saved
                break
        else:
            self._memories.append(saved)
        self._ok()
        return saved

    def remove(self, memory_id: str) -> bool:
        try:
            self.api.delete(memory_id)
        except MemoryJarError as e:
            self._fail("delete memory", e)
            return False

        self._memories = [m for m in self._memories if m.id != memory_id]
        self._ok()
        return True

    # ------------------------
    # Reads
    # ------------------------

    def get_by_date(self, day) -> Optional[MemoryOut]:
        if isinstance(day, str):
            day = date.fromisoformat(day)
        for m in self._memories:
            if record_date(m) == day:
                return m
        return None

    def for_month(self, year: int, month: int) -> List[MemoryOut]:
        return [m for m in self._memories if m.date.year == year and m.date.month == month]

    def flashback(self, today: date) -> Optional[MemoryOut]:
        return flashback(self._memories, today)

    def streak(self, today: date) -> int:
        return streak(self._memories, today)

    def insights(self, month: int, year: int) -> Dict[str, Any]:
        return monthly_insights(self._memories, month=month, year=year)
