from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class RawUploadMetadata(_WireModel):
    upload_type: Literal["raw"] = Field(alias="uploadType")
    editor: str = Field(min_length=3)
    client_name: str = Field(alias="clientName", min_length=1)
    shoot_date: Optional[str] = Field(default=None, alias="shootDate")
    footage_type: Optional[str] = Field(default=None, alias="footageType")
    music_type: Optional[str] = Field(default=None, alias="musicType")
    instructions: Optional[str] = None

    @field_validator("editor")
    @classmethod
    def editor_must_be_email(cls, value: str) -> str:
        local_part, sep, domain = value.strip().partition("@")
        if not sep or not local_part or not domain:
            raise ValueError("editor must be an email address")
        return value.strip()

    @property
    def editor_handle(self) -> str:
        return self.editor.split("@", 1)[0]


class EditedUploadMetadata(_WireModel):
    upload_type: Literal["edited"] = Field(alias="uploadType")
    project_name: str = Field(alias="projectName", min_length=1)
    client_name: Optional[str] = Field(default=None, alias="clientName")
    editor_name: Optional[str] = Field(default=None, alias="editorName")
    description: Optional[str] = None


UploadMetadata = Annotated[
    Union[RawUploadMetadata, EditedUploadMetadata],
    Field(discriminator="upload_type"),
]


class PrepareUploadRequest(_WireModel):
    file_name: str = Field(alias="fileName", min_length=1)
    file_size: Optional[int] = Field(default=None, alias="fileSize", ge=0)
    metadata: UploadMetadata


class PreparedUpload(_WireModel):
    upload_url: str = Field(alias="uploadUrl")
    auth_token: str = Field(alias="authToken")
    file_id: str = Field(alias="fileId")
    file_path: str = Field(alias="filePath")


class UploadedFileRef(_WireModel):
    file_name: str = Field(alias="fileName", min_length=1)
    file_path: str = Field(alias="filePath", min_length=1)
    size: Optional[int] = Field(default=None, ge=0)


class CompleteUploadRequest(_WireModel):
    metadata: UploadMetadata
    files: list[UploadedFileRef] = Field(default_factory=list)
