from datetime import datetime

from pydantic import BaseModel


class FileRead(BaseModel):
    id: str
    owner_id: str | None
    filename_original: str
    mime: str | None
    size_bytes: int | None
    uploaded_at: datetime

    model_config = {"from_attributes": True}


class DeletedResponse(BaseModel):
    deleted: bool = True
