import logging

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.models.file import FileRecord
from app.services.storage import BlobStore

logger = logging.getLogger(__name__)


def create_file(
    db: Session,
    owner_id: str | None,
    original_name: str,
    stored_name: str,
    mime: str | None,
    size: int,
    commit: bool = True,
) -> FileRecord:
    record = FileRecord(
        owner_id=owner_id,
        filename_original=original_name,
        filename_stored=stored_name,
        mime=mime,
        size_bytes=size,
    )
    db.add(record)
    if commit:
        db.commit()
        db.refresh(record)
    else:
        db.flush()
    return record


async def upload_file(db: Session, blobs: BlobStore, owner_id: str | None, upload: UploadFile, commit: bool = True) -> FileRecord:
    original_name = upload.filename or ""
    mime = upload.content_type
    blob = await blobs.save_upload(upload)
    try:
        record = create_file(db, owner_id, original_name, blob.stored_name, mime, blob.size_bytes, commit=commit)
    except Exception:
        db.rollback()
        blobs.delete(blob.stored_name)
        raise
    logger.info("file_uploaded", extra={"file_id": record.id, "owner_id": owner_id, "size_bytes": blob.size_bytes})
    return record


def list_files(db: Session, owner_id: str) -> list[FileRecord]:
    stmt = select(FileRecord).where(FileRecord.owner_id == owner_id).order_by(FileRecord.uploaded_at.desc())
    return list(db.scalars(stmt).all())


def get_file(db: Session, file_id: str) -> FileRecord:
    record = db.scalar(select(FileRecord).where(FileRecord.id == file_id))
    if record is None:
        raise NotFound("not found")
    return record


def delete_file(db: Session, blobs: BlobStore, record: FileRecord) -> None:
    """Drop the metadata row, then the blob. The row delete is what counts."""
    stored_name = record.filename_stored
    file_id = record.id
    db.delete(record)
    db.commit()
    if not blobs.delete(stored_name):
        logger.warning("file_blob_left_behind", extra={"file_id": file_id, "stored_name": stored_name})
    logger.info("file_deleted", extra={"file_id": file_id})
