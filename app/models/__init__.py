from app.models.file import FileRecord
from app.models.form import Form
from app.models.submission import FormSubmission
from app.models.user import User

__all__ = ["User", "FileRecord", "Form", "FormSubmission"]
