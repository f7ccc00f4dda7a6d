from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from memory_jar.auth.tokens import decode_token
from memory_jar.config import SESSION_COOKIE
from memory_jar.db.session import get_db
from memory_jar.db.users import get_user
from memory_jar.errors import Unauthorized
from memory_jar.utils.logger import get_logger

logger = get_logger(__name__)


def _token_from_request(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get(SESSION_COOKIE)


def get_current_user_id(request: Request, db: Session = Depends(get_db)) -> Optional[str]:
    """Resolve zero or one identity. Never trusts an id supplied in the body or query."""
    token = _token_from_request(request)
    if not token:
        return None
    try:
        payload = decode_token(token)
    except Unauthorized as e:
        logger.info("rejected session on %s: %s", request.url.path, e.message)
        return None

    # account may have been removed after the token was issued
    user = get_user(db, payload["sub"])
    return user.id if user else None


def require_user_id(user_id: Optional[str] = Depends(get_current_user_id)) -> str:
    if not user_id:
        raise Unauthorized()
    return user_id
