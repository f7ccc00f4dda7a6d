import json
from datetime import date
from typing import Optional

import pydantic
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from memory_jar.auth.deps import require_user_id
from memory_jar.config import MAX_BODY_BYTES
from memory_jar.db.memories import (
    delete_memory,
    get_memory_by_date,
    load_memories,
    load_memories_for_month,
    upsert_memory,
)
from memory_jar.db.session import get_db
from memory_jar.errors import PayloadTooLarge, ValidationError
from memory_jar.insights import daily_prompt, flashback, monthly_insights, streak
from memory_jar.schemas import MemoryIn, MemoryOut, MonthlyInsights
from memory_jar.utils.dates import today_local
from memory_jar.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/memories", tags=["memories"])


def _first_error(e: pydantic.ValidationError) -> str:
    err = e.errors()[0]
    msg = str(err.get("msg", "Invalid request"))
    # pydantic prefixes messages raised from validators
    return msg.removeprefix("Value error, ")


async def memory_payload(request: Request) -> MemoryIn:
    """Read and validate the POST body. Oversized or unreadable bodies are 413."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > MAX_BODY_BYTES:
        raise PayloadTooLarge()

    # chunked uploads carry no content-length; stop reading once over the limit
    chunks = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > MAX_BODY_BYTES:
            raise PayloadTooLarge()
        chunks.append(chunk)
    body = b"".join(chunks)

    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.warning("unreadable memory payload (%d bytes)", len(body))
        raise PayloadTooLarge("Could not read the request. If you attached a photo, try a smaller one.")

    if not isinstance(data, dict):
        raise ValidationError("Date and mood are required")
    try:
        return MemoryIn.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(_first_error(e))


@router.get("")
def list_memories(
    day: Optional[date] = Query(default=None, alias="date"),
    user_id: str = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    if day:
        row = get_memory_by_date(db, owner_id=user_id, day=day)
        rows = [row] if row else []
    else:
        rows = load_memories(db, owner_id=user_id)
    return {"memories": [MemoryOut.model_validate(r).to_json() for r in rows]}


@router.post("")
def save_memory(
    user_id: str = Depends(require_user_id),
    payload: MemoryIn = Depends(memory_payload),
    db: Session = Depends(get_db),
):
    row = upsert_memory(
        db,
        owner_id=user_id,
        day=payload.date,
        mood=payload.mood,
        note=payload.note,
        image_url=payload.image_url,
    )
    return {"memory": MemoryOut.model_validate(row).to_json()}


@router.delete("")
def remove_memory(
    id: Optional[str] = None,
    user_id: str = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    if not id:
        raise ValidationError("Memory ID is required")
    delete_memory(db, owner_id=user_id, memory_id=id)
    return {"success": True}


@router.get("/highlights")
def highlights(
    today: Optional[date] = None,
    user_id: str = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    today = today or today_local()
    rows = load_memories(db, owner_id=user_id)
    fb = flashback(rows, today)
    return {
        "today": today.isoformat(),
        "flashback": MemoryOut.model_validate(fb).to_json() if fb else None,
        "streak": streak(rows, today),
        "prompt": daily_prompt(today),
    }


@router.get("/insights", response_model=MonthlyInsights)
def insights(
    month: Optional[int] = Query(default=None, ge=1, le=12),
    year: Optional[int] = Query(default=None, ge=1, le=9999),
    user_id: str = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    today = today_local()
    month = month or today.month
    year = year or today.year
    rows = load_memories_for_month(db, owner_id=user_id, year=year, month=month)
    return monthly_insights(rows, month=month, year=year)
