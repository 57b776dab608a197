"""Input models for the Google Drive tools."""

from typing import Optional

from pydantic import BaseModel, Field

FILE_ID = "Google Drive file ID"
DIRECTORY_ID = "Google Drive directory ID"


class CreateFileInput(BaseModel):
    file_name: str = Field(..., description="File name")
    content: str = Field("", description="File content, can be empty")
    mime_type: str = Field("text/plain", description="File type, such as: text/plain")
    parent_id: Optional[str] = Field(
        None, description="Parent directory ID, leave empty for root directory"
    )


class UploadFileInput(BaseModel):
    file_path: str = Field(..., description="Local file path")
    file_name: str = Field(..., description="File name in Google Drive")
    file_type: Optional[str] = Field(
        None, description="File type, such as: text/plain; guessed from the name if empty"
    )


class FileIdInput(BaseModel):
    file_id: str = Field(..., description=FILE_ID)


class UpdateFileInput(BaseModel):
    file_id: str = Field(..., description=FILE_ID)
    content: str = Field(..., description="New file content as string")
    file_type: str = Field("text/plain", description="File type, such as: text/plain")


class UpdateFromLocalInput(BaseModel):
    file_id: str = Field(..., description=FILE_ID)
    file_path: str = Field(..., description="Local file path to upload")
    file_type: Optional[str] = Field(
        None, description="File type, such as: text/plain; guessed from the path if empty"
    )


class ListFilesInput(BaseModel):
    page_size: int = Field(10, ge=1, le=1000, description="Maximum number of files to list")


class FileNameInput(BaseModel):
    file_name: str = Field(..., description="File name in Google Drive")


class SearchInput(BaseModel):
    query: str = Field(..., description="Search keyword")


class RenameInput(BaseModel):
    file_id: str = Field(..., description=FILE_ID)
    new_name: str = Field(..., description="New name")


class DirectoryNameInput(BaseModel):
    directory_name: str = Field(..., description="Directory name")


class DirectoryInParentInput(BaseModel):
    directory_name: str = Field(..., description="Directory name")
    parent_id: str = Field(..., description="Parent directory ID")


class DirectoryIdInput(BaseModel):
    directory_id: str = Field(..., description=DIRECTORY_ID)


class RenameDirectoryInput(BaseModel):
    directory_id: str = Field(..., description=DIRECTORY_ID)
    new_name: str = Field(..., description="New directory name")


class ListDirectoryInput(BaseModel):
    directory_id: Optional[str] = Field(
        None, description="Google Drive directory ID, empty value means root directory"
    )


class MoveFileInput(BaseModel):
    file_id: str = Field(..., description=FILE_ID)
    target_directory_id: str = Field(..., description="Target directory ID")


class SearchInDirectoryInput(BaseModel):
    query: str = Field(..., description="Search keyword")
    directory_id: Optional[str] = Field(
        None, description="Directory ID to search in, empty for root directory"
    )
    recursive: bool = Field(
        False, description="Whether to search the whole drive instead of only the directory"
    )


class FileInDirectoryInput(BaseModel):
    directory_id: str = Field(..., description="Directory ID")
    file_name: str = Field(..., description="File name to check")


class SearchDirectoriesInput(BaseModel):
    query: str = Field(..., description="Directory name or keyword to search")
    exact_match: bool = Field(
        False, description="Whether to perform exact match (true) or partial match (false)"
    )


class DownloadInput(BaseModel):
    file_id: str = Field(..., description=FILE_ID)
    local_file_path: str = Field(..., description="Local file path to save the downloaded file")


class UploadToDirectoryInput(BaseModel):
    file_path: str = Field(..., description="Local file path")
    file_name: Optional[str] = Field(
        None, description="File name in Google Drive (uses the local file name if empty)"
    )
    directory_id: Optional[str] = Field(
        None, description="Google Drive directory ID to upload to, empty for root"
    )
    mime_type: Optional[str] = Field(
        None, description="File MIME type (guessed from the file name if empty)"
    )
