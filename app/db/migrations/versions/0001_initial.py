"""Initial schema."""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "files",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("owner_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("filename_original", sa.String(length=500), nullable=False),
        sa.Column("filename_stored", sa.String(length=255), nullable=False, unique=True),
        sa.Column("mime", sa.String(length=255), nullable=True),
        sa.Column("size_bytes", sa.BigInteger(), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_files_owner_id", "files", ["owner_id"], unique=False)
    op.create_index("ix_files_uploaded_at", "files", ["uploaded_at"], unique=False)

    op.create_table(
        "forms",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("owner_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("schema", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_forms_owner_id", "forms", ["owner_id"], unique=False)
    op.create_index("ix_forms_slug", "forms", ["slug"], unique=True)

    op.create_table(
        "form_submissions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("form_id", sa.String(length=36), sa.ForeignKey("forms.id", ondelete="CASCADE"), nullable=False),
        sa.Column("submitter_email", sa.String(length=255), nullable=True),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("files", sa.JSON(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_form_submissions_form_id", "form_submissions", ["form_id"], unique=False)
    op.create_index("ix_form_submissions_submitted_at", "form_submissions", ["submitted_at"], unique=False)


def downgrade() -> None:
    op.drop_table("form_submissions")
    op.drop_table("forms")
    op.drop_table("files")
    op.drop_table("users")
