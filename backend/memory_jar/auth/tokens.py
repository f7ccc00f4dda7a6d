import base64
import hashlib
import hmac
import json
import time

from memory_jar.config import SESSION_SECRET, SESSION_TTL_SECONDS
from memory_jar.errors import Unauthorized


def _to_segment(raw: bytes) -> str:
    # unpadded base64url keeps tokens cookie and header safe
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _from_segment(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _sign(data: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), data, hashlib.sha256).digest()


def encode_token(payload: dict, secret: str = SESSION_SECRET) -> str:
    """Session token: <claims segment>.<signature segment>, signed with HMAC-SHA256."""
    data = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return f"{_to_segment(data)}.{_to_segment(_sign(data, secret))}"


def decode_token(token: str, secret: str = SESSION_SECRET) -> dict:
    try:
        data_b64, sig_b64 = token.split(".", 1)
        data = _from_segment(data_b64)
        sig = _from_segment(sig_b64)
        if not hmac.compare_digest(sig, _sign(data, secret)):
            raise ValueError("bad signature")
        payload = json.loads(data.decode("utf-8"))
    except Exception as e:
        raise Unauthorized(f"Invalid session: {e}")

    if not isinstance(payload, dict) or not payload.get("sub"):
        raise Unauthorized("Invalid session")
    if int(payload.get("exp", 0)) < int(time.time()):
        raise Unauthorized("Session expired")
    return payload


def new_session_token(user_id: str, ttl: int = SESSION_TTL_SECONDS, secret: str = SESSION_SECRET) -> str:
    now = int(time.time())
    return encode_token({"sub": user_id, "iat": now, "exp": now + ttl}, secret=secret)
