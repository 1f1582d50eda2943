import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from fastapi import UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Conflict, NotFound, ValidationError
from app.core.security import Identity
from app.models.form import Form
from app.models.submission import FormSubmission
from app.services.access import load_owned
from app.services.files import upload_file
from app.services.storage import BlobStore

logger = logging.getLogger(__name__)


def create_form(db: Session, owner_id: str, name: str, slug: str, schema: Any) -> Form:
    form = Form(owner_id=owner_id, name=name, slug=slug, schema_json=schema)
    db.add(form)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict("Slug already exists", status_code=status.HTTP_409_CONFLICT) from exc
    db.refresh(form)
    logger.info("form_created", extra={"form_id": form.id, "owner_id": owner_id, "slug": slug})
    return form


def list_forms(db: Session, owner_id: str) -> list[Form]:
    stmt = select(Form).where(Form.owner_id == owner_id).order_by(Form.created_at.desc())
    return list(db.scalars(stmt).all())


def get_form_by_slug(db: Session, slug: str) -> Form:
    form = db.scalar(select(Form).where(Form.slug == slug))
    if form is None:
        raise NotFound("form not found")
    return form


def delete_form(db: Session, form_id: str, identity: Identity) -> None:
    form = load_owned(db, Form, form_id, identity, label="form not found")
    db.delete(form)
    db.commit()
    logger.info("form_deleted", extra={"form_id": form_id})


def extract_submission_data(fields: Any) -> Any:
    """Pick the submission payload out of the request fields.

    A non-empty ``data`` field wins: text is decoded as JSON, anything else is
    taken as-is. Otherwise the fields themselves are the payload.
    """
    if not isinstance(fields, Mapping):
        return fields
    raw = fields.get("data")
    if not raw:
        return dict(fields)
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValidationError("data must be valid JSON") from exc
    return raw


def _submitter_email(data: Any) -> str | None:
    if isinstance(data, Mapping):
        email = data.get("email")
        if isinstance(email, str) and email:
            return email
    return None


async def submit(
    db: Session,
    blobs: BlobStore,
    slug: str,
    data: Any,
    attachments: Sequence[tuple[str, UploadFile]] = (),
) -> FormSubmission:
    """Record a public submission against the form published under ``slug``.

    The payload is stored as received; it is not checked against the form's
    schema. Attachments become ownerless file records referenced from the
    submission's ``files`` list.
    """
    form = get_form_by_slug(db, slug)

    saved_files: list[dict[str, str]] = []
    stored_names: list[str] = []
    try:
        for field_name, upload in attachments:
            record = await upload_file(db, blobs, None, upload, commit=False)
            stored_names.append(record.filename_stored)
            saved_files.append({"file_id": record.id, "field_name": field_name})

        submission = FormSubmission(
            form_id=form.id,
            submitter_email=_submitter_email(data),
            data=data,
            files=saved_files,
        )
        db.add(submission)
        db.commit()
    except Exception:
        db.rollback()
        for stored_name in stored_names:
            blobs.delete(stored_name)
        raise
    db.refresh(submission)
    logger.info("submission_received", extra={"form_id": form.id, "submission_id": submission.id, "attachments": len(saved_files)})
    return submission


def list_submissions(db: Session, form_id: str, identity: Identity) -> list[FormSubmission]:
    form = load_owned(db, Form, form_id, identity, label="form not found")
    stmt = (
        select(FormSubmission)
        .where(FormSubmission.form_id == form.id)
        .order_by(FormSubmission.submitted_at.desc())
    )
    return list(db.scalars(stmt).all())
