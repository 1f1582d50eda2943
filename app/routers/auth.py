from fastapi import APIRouter, Depends
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.core.security import SessionIssuer
from app.db.session import get_db
from app.routers.deps import get_pwd_context, get_session_issuer
from app.schemas.auth import AuthResponse, LoginRequest, UserCreate, UserRead
from app.services import accounts

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse)
def register(
    payload: UserCreate,
    db: Session = Depends(get_db),
    pwd_context: CryptContext = Depends(get_pwd_context),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> AuthResponse:
    user = accounts.register(db, pwd_context, payload.email, payload.password, payload.name)
    return AuthResponse(user=UserRead.model_validate(user), token=issuer.issue(user))


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    pwd_context: CryptContext = Depends(get_pwd_context),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> AuthResponse:
    user = accounts.authenticate(db, pwd_context, payload.email, payload.password)
    return AuthResponse(user=UserRead.model_validate(user), token=issuer.issue(user))
