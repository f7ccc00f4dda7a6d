# memory_jar/db/users.py
from __future__ import annotations

from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from memory_jar.db.models import User
from memory_jar.errors import Conflict, ValidationError
from memory_jar.utils.logger import get_logger

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6
BCRYPT_ROUNDS = 10


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # malformed hash in the db
        return False


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == _normalize_email(email)).first()


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def create_user(db: Session, name: str, email: str, password: str) -> User:
    name = (name or "").strip()
    email = _normalize_email(email)
    if not name or not email or not password:
        raise ValidationError("All fields are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if get_user_by_email(db, email):
        raise Conflict()

    user = User(name=name, email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # registered concurrently with the same email
        db.rollback()
        raise Conflict()
    db.refresh(user)
    logger.info("registered user id=%s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(db, email)
    if not user or not password or not check_password(password, user.password_hash):
        logger.info("failed login for email=%s", _normalize_email(email))
        return None
    return user
