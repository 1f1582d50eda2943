from app.schemas.auth import AuthResponse, LoginRequest, UserCreate, UserRead
from app.schemas.file import DeletedResponse, FileRead
from app.schemas.form import FormCreate, FormRead, SubmissionFile, SubmissionRead, SubmitResponse

__all__ = [
    "UserCreate",
    "UserRead",
    "LoginRequest",
    "AuthResponse",
    "FileRead",
    "DeletedResponse",
    "FormCreate",
    "FormRead",
    "SubmissionFile",
    "SubmissionRead",
    "SubmitResponse",
]
