from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext

from app.core.errors import Unauthenticated
from app.core.security import Identity, SessionIssuer
from app.services.storage import BlobStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_session_issuer(request: Request) -> SessionIssuer:
    return request.app.state.session_issuer


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def get_pwd_context(request: Request) -> CryptContext:
    return request.app.state.pwd_context


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> Identity:
    if credentials is None:
        raise Unauthenticated("Missing authorization")
    return issuer.verify(credentials.credentials)
