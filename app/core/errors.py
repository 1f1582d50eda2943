"""Error taxonomy shared by services and routers.

Each error is an ``HTTPException`` so FastAPI renders it as ``{"detail": ...}``
with the matching status code; services raise them directly.
"""

from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail, headers=headers)


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid token"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "access denied"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "not found"


class Conflict(ApiError):
    """Unique constraint violation.

    Duplicate emails answer 400 for compatibility with existing clients, so the
    status can be overridden per instance.
    """

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"

    def __init__(self, detail: str | None = None, status_code: int | None = None) -> None:
        if status_code is not None:
            self.status_code = status_code
        super().__init__(detail)


class Gone(ApiError):
    status_code = status.HTTP_410_GONE
    default_detail = "file missing"


class PayloadTooLarge(ApiError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    default_detail = "File exceeds max size"


class Internal(ApiError):
    pass
