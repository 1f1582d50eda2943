from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.common import UUIDPrimaryKeyMixin, utcnow


class FormSubmission(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "form_submissions"

    form_id: Mapped[str] = mapped_column(ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)
    submitter_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    data: Mapped[Any] = mapped_column(JSON, nullable=False)
    # [{"file_id": ..., "field_name": ...}] pointing at ownerless FileRecord rows.
    files: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    form = relationship("Form", back_populates="submissions")
