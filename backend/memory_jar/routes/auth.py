from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from memory_jar.auth.tokens import new_session_token
from memory_jar.config import SESSION_COOKIE, SESSION_TTL_SECONDS
from memory_jar.db.session import get_db
from memory_jar.db.users import authenticate, create_user
from memory_jar.errors import Unauthorized
from memory_jar.schemas import LoginRequest, RegisterRequest, UserOut

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    user = create_user(db, name=req.name, email=req.email, password=req.password)
    return UserOut.model_validate(user).model_dump()


@router.post("/login")
def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, email=req.email, password=req.password)
    if not user:
        raise Unauthorized("Invalid email or password")

    token = new_session_token(user.id)
    resp = JSONResponse({"token": token, "user": UserOut.model_validate(user).model_dump()})
    resp.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=SESSION_TTL_SECONDS,
        httponly=True,
        samesite="lax",
    )
    return resp


@router.post("/logout")
def logout():
    resp = JSONResponse({"success": True})
    resp.delete_cookie(SESSION_COOKIE)
    return resp
