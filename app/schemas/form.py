from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class FormCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255)
    schema_json: Any = Field(validation_alias="schema")

    @field_validator("schema_json")
    @classmethod
    def schema_required(cls, value: Any) -> Any:
        if value is None or value == "":
            raise ValueError("schema is required")
        return value


class FormRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str | None
    name: str
    slug: str
    schema_json: Any = Field(
        validation_alias=AliasChoices("schema_json", "schema"),
        serialization_alias="schema",
    )
    created_at: datetime


class SubmissionFile(BaseModel):
    file_id: str
    field_name: str


class SubmissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    form_id: str
    submitter_email: str | None
    data: Any
    files: list[SubmissionFile] = Field(default_factory=list)
    submitted_at: datetime


class SubmitResponse(BaseModel):
    success: bool = True
    submission: SubmissionRead
