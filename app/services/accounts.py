import logging

from fastapi import status
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Conflict, Unauthenticated
from app.core.security import hash_password, verify_password
from app.models.user import User

logger = logging.getLogger(__name__)


def register(db: Session, pwd_context: CryptContext, email: str, password: str, name: str | None = None) -> User:
    user = User(email=email, password_hash=hash_password(pwd_context, password), name=name or None)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict("Email already exists", status_code=status.HTTP_400_BAD_REQUEST) from exc
    db.refresh(user)
    logger.info("user_registered", extra={"user_id": user.id})
    return user


def authenticate(db: Session, pwd_context: CryptContext, email: str, password: str) -> User:
    user = db.scalar(select(User).where(User.email == email))
    if user is None or not verify_password(pwd_context, password, user.password_hash):
        raise Unauthenticated("Invalid credentials")
    return user
