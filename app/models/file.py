from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.common import UUIDPrimaryKeyMixin, utcnow


class FileRecord(UUIDPrimaryKeyMixin, Base):
    """Metadata for one blob. A null owner marks a form-submitted upload."""

    __tablename__ = "files"

    owner_id: Mapped[str | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    filename_original: Mapped[str] = mapped_column(String(500), nullable=False)
    filename_stored: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    mime: Mapped[str | None] = mapped_column(String(255), nullable=True)
    size_bytes: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    owner = relationship("User", back_populates="files")
