import json

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.core.errors import ValidationError
from app.core.security import Identity
from app.db.session import get_db
from app.models.form import Form
from app.models.submission import FormSubmission
from app.routers.deps import get_blob_store, get_current_identity
from app.schemas.file import DeletedResponse
from app.schemas.form import FormCreate, FormRead, SubmissionRead, SubmitResponse
from app.services import forms as form_service
from app.services.storage import BlobStore

router = APIRouter(prefix="/forms", tags=["forms"])

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


@router.post("", response_model=FormRead)
def create_form(
    payload: FormCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> Form:
    return form_service.create_form(db, identity.user_id, payload.name, payload.slug, payload.schema_json)


@router.get("", response_model=list[FormRead])
def list_forms(db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)) -> list[Form]:
    return form_service.list_forms(db, identity.user_id)


@router.delete("/{form_id}", response_model=DeletedResponse)
def delete_form(
    form_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> DeletedResponse:
    form_service.delete_form(db, form_id, identity)
    return DeletedResponse(deleted=True)


@router.post("/{slug}/submit", response_model=SubmitResponse)
async def submit(
    slug: str,
    request: Request,
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
) -> SubmitResponse:
    # Unknown slugs are rejected before the body is read, so nothing is stored.
    form_service.get_form_by_slug(db, slug)

    content_type = request.headers.get("content-type", "")
    attachments: list[tuple[str, UploadFile]] = []
    if content_type.startswith(FORM_CONTENT_TYPES):
        form_data = await request.form()
        fields: dict = {}
        for key, value in form_data.multi_items():
            if isinstance(value, UploadFile):
                attachments.append((key, value))
            else:
                fields[key] = value
    else:
        raw_body = await request.body()
        if not raw_body:
            fields = {}
        else:
            try:
                fields = json.loads(raw_body)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise ValidationError("Invalid JSON body.") from exc

    data = form_service.extract_submission_data(fields)
    submission = await form_service.submit(db, blobs, slug, data, attachments)
    return SubmitResponse(success=True, submission=SubmissionRead.model_validate(submission))


@router.get("/{form_id}/submissions", response_model=list[SubmissionRead])
def list_submissions(
    form_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> list[FormSubmission]:
    return form_service.list_submissions(db, form_id, identity)
