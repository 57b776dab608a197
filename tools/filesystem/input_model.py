"""Input models for the sandboxed filesystem tools."""

from pydantic import BaseModel, Field

ENCODING_DESCRIPTION = "Character encoding, default UTF-8"


class PathInput(BaseModel):
    path: str = Field(..., description="File or directory path")


class CreateFileInput(BaseModel):
    file_path: str = Field(..., description="File path")
    content: str = Field(..., description="File content")
    charset: str = Field("UTF-8", description=ENCODING_DESCRIPTION)


class ReadFileInput(BaseModel):
    file_path: str = Field(..., description="File path")
    charset: str = Field("UTF-8", description=ENCODING_DESCRIPTION)


class UpdateFileInput(BaseModel):
    file_path: str = Field(..., description="File path")
    content: str = Field(..., description="New file content")
    charset: str = Field("UTF-8", description=ENCODING_DESCRIPTION)


class DeleteInput(BaseModel):
    path: str = Field(..., description="File or directory path")
    recursive: bool = Field(
        False, description="Whether to recursively delete, applicable to directories"
    )


class TransferInput(BaseModel):
    source_path: str = Field(..., description="Source file path")
    target_path: str = Field(..., description="Target file path")
    replace: bool = Field(False, description="Whether to overwrite an existing target file")


class ListDirectoryInput(BaseModel):
    directory_path: str = Field(..., description="Directory path")
    files_only: bool = Field(False, description="Whether to list only files")
    directories_only: bool = Field(False, description="Whether to list only directories")


class CreateDirectoryInput(BaseModel):
    directory_path: str = Field(..., description="Directory path")
    create_parents: bool = Field(
        True, description="Whether to create parent directories if they don't exist"
    )
