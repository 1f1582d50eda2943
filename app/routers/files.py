from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.core.errors import ValidationError
from app.core.security import Identity
from app.db.session import get_db
from app.models.file import FileRecord
from app.routers.deps import get_blob_store, get_current_identity
from app.schemas.file import DeletedResponse, FileRead
from app.services import files as file_service
from app.services.access import load_owned
from app.services.storage import BlobStore

router = APIRouter(prefix="/files", tags=["files"])


@router.post("/upload", response_model=FileRead)
async def upload(
    file: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
    identity: Identity = Depends(get_current_identity),
) -> FileRecord:
    if file is None or not file.filename:
        raise ValidationError("no file")
    return await file_service.upload_file(db, blobs, identity.user_id, file)


@router.get("", response_model=list[FileRead])
def list_files(db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)) -> list[FileRecord]:
    return file_service.list_files(db, identity.user_id)


@router.get("/{file_id}/download")
def download(
    file_id: str,
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
    identity: Identity = Depends(get_current_identity),
) -> FileResponse:
    record = load_owned(db, FileRecord, file_id, identity)
    path = blobs.locate(record.filename_stored)
    return FileResponse(path, filename=record.filename_original, media_type=record.mime or "application/octet-stream")


@router.delete("/{file_id}", response_model=DeletedResponse)
def delete(
    file_id: str,
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
    identity: Identity = Depends(get_current_identity),
) -> DeletedResponse:
    record = load_owned(db, FileRecord, file_id, identity)
    file_service.delete_file(db, blobs, record)
    return DeletedResponse(deleted=True)
