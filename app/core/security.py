from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.errors import Unauthenticated


def build_password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(pwd_context: CryptContext, password: str) -> str:
    return pwd_context.hash(password)


def verify_password(pwd_context: CryptContext, password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(password, hashed_password)
    except ValueError:
        # Unrecognised or corrupt hash in the store.
        return False


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str


class SessionIssuer:
    """Mints and checks bearer tokens carrying ``userId`` and ``email``."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=8)) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = ttl

    def issue(self, user: Any, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {"userId": str(user.id), "email": user.email, "exp": issued_at + self.ttl}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Identity:
        if not token:
            raise Unauthenticated("Invalid token")
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm], options={"require_exp": True})
        except JWTError as exc:
            raise Unauthenticated("Invalid token") from exc
        user_id = claims.get("userId")
        email = claims.get("email")
        if not isinstance(user_id, str) or not isinstance(email, str):
            raise Unauthenticated("Invalid token")
        return Identity(user_id=user_id, email=email)
