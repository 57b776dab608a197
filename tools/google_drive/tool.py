"""Google Drive v3 file and directory tools."""

import io
import logging
import mimetypes
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from googleapiclient.errors import HttpError
from googleapiclient.http import MediaFileUpload, MediaIoBaseDownload, MediaIoBaseUpload

from util.config import GoogleOAuthSettings
from util.envelope import error_response, success_response
from util.google_auth import GoogleAuthError, build_service
from util.langfuse import tag_error

from .input_model import (
    CreateFileInput,
    DirectoryIdInput,
    DirectoryInParentInput,
    DirectoryNameInput,
    DownloadInput,
    FileIdInput,
    FileInDirectoryInput,
    FileNameInput,
    ListDirectoryInput,
    ListFilesInput,
    MoveFileInput,
    RenameDirectoryInput,
    RenameInput,
    SearchDirectoriesInput,
    SearchInDirectoryInput,
    SearchInput,
    UpdateFileInput,
    UpdateFromLocalInput,
    UploadFileInput,
    UploadToDirectoryInput,
)

logger = logging.getLogger(__name__)

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
DEFAULT_MIME_TYPE = "application/octet-stream"
TEXT_MIME_MARKERS = ("text/", "application/json", "application/xml")
BINARY_PLACEHOLDER = "[Binary file - Please use download function]"


class DriveError(Exception):
    """Raised for a Drive request that is invalid for the target item."""


DRIVE_ERRORS = (HttpError, GoogleAuthError, DriveError, OSError, ValueError)

_service = None


def get_drive_service():
    """Get the Drive API service (lazy initialization, runs OAuth on first use)."""
    global _service
    if _service is None:
        _service = build_service("drive", "v3", GoogleOAuthSettings.for_drive())
    return _service


def quote(value: str) -> str:
    """Render a string literal for a Drive query."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def guess_mime_type(file_name: str) -> str:
    mime_type, _ = mimetypes.guess_type(file_name)
    return mime_type or DEFAULT_MIME_TYPE


def item_type(mime_type: Optional[str]) -> str:
    return "Directory" if mime_type == FOLDER_MIME_TYPE else "File"


def _summary(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": item.get("id"),
        "name": item.get("name"),
        "type": item_type(item.get("mimeType")),
    }


def _first_parent(item: Dict[str, Any]) -> str:
    return (item.get("parents") or ["root"])[0]


def drive_operation(action: str, *context_fields: str):
    """
    Turn a Drive call that returns a payload dict into a tool returning an envelope.

    Failures become error envelopes carrying the named input fields as context.
    """

    def decorator(func: Callable[[Any], Dict[str, Any]]):
        @wraps(func)
        def wrapper(params):
            try:
                return success_response(**func(params))
            except DRIVE_ERRORS as e:
                logger.error("Drive %s failed: %s", action, e)
                tag_error("drive_error", str(e), action=action)
                context = {name: getattr(params, name) for name in context_fields}
                return error_response(f"Failed to {action}: {e}", **context)

        return wrapper

    return decorator


def _files():
    return get_drive_service().files()


def _list(query: str, fields: str, **kwargs) -> List[Dict[str, Any]]:
    result = _files().list(q=query, fields=fields, **kwargs).execute()
    return result.get("files", [])


def _get(file_id: str, fields: str = "id,name,mimeType") -> Dict[str, Any]:
    return _files().get(fileId=file_id, fields=fields).execute()


def _require_directory(directory_id: str) -> None:
    if _get(directory_id).get("mimeType") != FOLDER_MIME_TYPE:
        raise DriveError(f"ID {directory_id} is not a directory")


def _rename(file_id: str, new_name: str) -> Dict[str, Any]:
    return _files().update(fileId=file_id, body={"name": new_name}, fields="id,name").execute()


def _local_upload(file_path: str, mime_type: Optional[str]) -> MediaFileUpload:
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"Local file does not exist: {file_path}")
    return MediaFileUpload(str(path), mimetype=mime_type or guess_mime_type(path.name))


@drive_operation("create file", "file_name")
def create_new_file(params: CreateFileInput) -> Dict:
    """Create a file from text content, optionally inside a directory."""
    metadata: Dict[str, Any] = {"name": params.file_name}
    if params.parent_id:
        metadata["parents"] = [params.parent_id]
    media = MediaIoBaseUpload(
        io.BytesIO(params.content.encode("utf-8")), mimetype=params.mime_type
    )
    created = (
        _files()
        .create(body=metadata, media_body=media, fields="id, name, parents")
        .execute()
    )
    return {
        "file_id": created.get("id"),
        "file_name": created.get("name"),
        "parent_id": _first_parent(created),
    }


@drive_operation("upload file", "file_path")
def upload_file(params: UploadFileInput) -> Dict:
    media = _local_upload(params.file_path, params.file_type)
    created = (
        _files()
        .create(body={"name": params.file_name}, media_body=media, fields="id, name")
        .execute()
    )
    return {"file_id": created.get("id"), "file_name": created.get("name")}


@drive_operation("delete file", "file_id")
def delete_file(params: FileIdInput) -> Dict:
    _files().delete(fileId=params.file_id).execute()
    return {"message": "File successfully deleted", "file_id": params.file_id}


@drive_operation("read file", "file_id")
def read_file(params: FileIdInput) -> Dict:
    """Read a text-like file; binary files return a placeholder instead of content."""
    info = _get(params.file_id)
    mime_type = info.get("mimeType") or ""
    if any(marker in mime_type for marker in TEXT_MIME_MARKERS):
        data = _files().get_media(fileId=params.file_id).execute()
        content = data.decode("utf-8", errors="replace")
    else:
        content = BINARY_PLACEHOLDER
    return {
        "file_id": params.file_id,
        "file_name": info.get("name"),
        "mime_type": mime_type,
        "content": content,
        "encoding": "UTF-8",
    }


@drive_operation("update file", "file_id")
def update_file(params: UpdateFileInput) -> Dict:
    media = MediaIoBaseUpload(
        io.BytesIO(params.content.encode("utf-8")), mimetype=params.file_type
    )
    updated = (
        _files().update(fileId=params.file_id, media_body=media, fields="id,name").execute()
    )
    return {
        "message": "File content updated successfully",
        "file_id": updated.get("id"),
        "file_name": updated.get("name"),
    }


@drive_operation("update file from local file", "file_id", "file_path")
def update_file_from_local(params: UpdateFromLocalInput) -> Dict:
    media = _local_upload(params.file_path, params.file_type)
    updated = (
        _files().update(fileId=params.file_id, media_body=media, fields="id,name").execute()
    )
    return {
        "message": "File content updated successfully from local file",
        "file_id": updated.get("id"),
        "file_name": updated.get("name"),
    }


@drive_operation("list files")
def list_files(params: ListFilesInput) -> Dict:
    files = _list(
        "trashed = false",
        "nextPageToken, files(id, name, mimeType)",
        pageSize=params.page_size,
    )
    summaries = [_summary(f) for f in files]
    return {"files": summaries, "total_count": len(summaries)}


@drive_operation("find file", "file_name")
def get_file_id_by_name(params: FileNameInput) -> Dict:
    files = _list(
        f"name = {quote(params.file_name)} and trashed = false",
        "files(id, name)",
        spaces="drive",
    )
    if not files:
        raise DriveError(f"Could not find file named '{params.file_name}'")
    return {"file_id": files[0].get("id"), "file_name": files[0].get("name")}


@drive_operation("search files", "query")
def search_files(params: SearchInput) -> Dict:
    files = _list(
        f"name contains {quote(params.query)} and trashed = false",
        "files(id, name, mimeType)",
        spaces="drive",
    )
    summaries = [_summary(f) for f in files]
    return {"files": summaries, "total_count": len(summaries), "query": params.query}


@drive_operation("get file", "file_id")
def get_file_by_id(params: FileIdInput) -> Dict:
    item = _get(
        params.file_id, "id, name, mimeType, size, createdTime, modifiedTime, parents"
    )
    return {
        "file_id": item.get("id"),
        "file_name": item.get("name"),
        "mime_type": item.get("mimeType"),
        "type": item_type(item.get("mimeType")),
        "size": int(item["size"]) if item.get("size") is not None else None,
        "created": item.get("createdTime"),
        "modified": item.get("modifiedTime"),
        "parents": item.get("parents", []),
    }


@drive_operation("rename file", "file_id", "new_name")
def rename_file(params: RenameInput) -> Dict:
    old_name = _get(params.file_id).get("name")
    _rename(params.file_id, params.new_name)
    return {
        "message": "File renamed successfully",
        "file_id": params.file_id,
        "new_name": params.new_name,
        "old_name": old_name,
    }


def _create_folder(name: str, parent_id: Optional[str] = None) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {"name": name, "mimeType": FOLDER_MIME_TYPE}
    if parent_id:
        metadata["parents"] = [parent_id]
    return _files().create(body=metadata, fields="id, name").execute()


@drive_operation("create directory", "directory_name")
def create_directory(params: DirectoryNameInput) -> Dict:
    created = _create_folder(params.directory_name)
    return {
        "message": "Directory created successfully",
        "directory_id": created.get("id"),
        "directory_name": created.get("name"),
    }


@drive_operation("create directory", "directory_name", "parent_id")
def create_directory_in_parent(params: DirectoryInParentInput) -> Dict:
    created = _create_folder(params.directory_name, params.parent_id)
    return {
        "message": "Subdirectory created successfully",
        "directory_id": created.get("id"),
        "directory_name": created.get("name"),
        "parent_id": params.parent_id,
    }


@drive_operation("delete directory", "directory_id")
def delete_directory(params: DirectoryIdInput) -> Dict:
    _require_directory(params.directory_id)
    _files().delete(fileId=params.directory_id).execute()
    return {"message": "Directory deleted successfully", "directory_id": params.directory_id}


@drive_operation("rename directory", "directory_id", "new_name")
def rename_directory(params: RenameDirectoryInput) -> Dict:
    info = _get(params.directory_id)
    if info.get("mimeType") != FOLDER_MIME_TYPE:
        raise DriveError(f"ID {params.directory_id} is not a directory")
    _rename(params.directory_id, params.new_name)
    return {
        "message": "Directory renamed successfully",
        "directory_id": params.directory_id,
        "new_name": params.new_name,
        "old_name": info.get("name"),
    }


@drive_operation("list directory", "directory_id")
def list_directory_contents(params: ListDirectoryInput) -> Dict:
    directory_id = params.directory_id or "root"
    files = _list(
        f"{quote(directory_id)} in parents and trashed = false",
        "files(id, name, mimeType)",
    )
    contents = [_summary(f) for f in files]
    return {"directory_id": directory_id, "contents": contents, "total_count": len(contents)}


@drive_operation("move file", "file_id", "target_directory_id")
def move_file(params: MoveFileInput) -> Dict:
    """Move a file out of all of its current parents into the target directory."""
    previous_parents = ",".join(_get(params.file_id, "id,name,parents").get("parents", []))
    updated = (
        _files()
        .update(
            fileId=params.file_id,
            addParents=params.target_directory_id,
            removeParents=previous_parents,
            fields="id, parents, name",
        )
        .execute()
    )
    return {
        "message": "File moved successfully",
        "file_id": params.file_id,
        "file_name": updated.get("name"),
        "target_directory_id": params.target_directory_id,
        "previous_parents": previous_parents,
    }


@drive_operation("search files", "query", "directory_id")
def search_files_in_directory(params: SearchInDirectoryInput) -> Dict:
    directory_id = params.directory_id or "root"
    query = f"name contains {quote(params.query)} and trashed = false"
    if not params.recursive:
        query += f" and {quote(directory_id)} in parents"

    files = _list(query, "files(id, name, mimeType, parents)", spaces="drive")
    results = [{**_summary(f), "parent_id": _first_parent(f)} for f in files]
    return {
        "files": results,
        "total_count": len(results),
        "query": params.query,
        "directory_id": directory_id,
        "recursive": params.recursive,
    }


@drive_operation("check file", "directory_id", "file_name")
def check_file_exists_in_directory(params: FileInDirectoryInput) -> Dict:
    files = _list(
        f"{quote(params.directory_id)} in parents and name = {quote(params.file_name)} "
        "and trashed = false",
        "files(id, name)",
    )
    return {
        "exists": bool(files),
        "directory_id": params.directory_id,
        "file_name": params.file_name,
        "file_id": files[0].get("id") if files else None,
    }


@drive_operation("search directories", "query", "exact_match")
def search_directories(params: SearchDirectoriesInput) -> Dict:
    operator = "=" if params.exact_match else "contains"
    files = _list(
        f"mimeType = {quote(FOLDER_MIME_TYPE)} and name {operator} {quote(params.query)} "
        "and trashed = false",
        "files(id, name, parents)",
        spaces="drive",
    )
    directories = [
        {"id": f.get("id"), "name": f.get("name"), "parent_id": _first_parent(f)}
        for f in files
    ]
    return {
        "directories": directories,
        "total_count": len(directories),
        "query": params.query,
        "exact_match": params.exact_match,
    }


@drive_operation("download file", "file_id", "local_file_path")
def download_file(params: DownloadInput) -> Dict:
    info = _get(params.file_id)
    local_path = Path(params.local_file_path)
    with open(local_path, "wb") as f:
        downloader = MediaIoBaseDownload(f, _files().get_media(fileId=params.file_id))
        done = False
        while not done:
            _, done = downloader.next_chunk()

    return {
        "message": "File downloaded successfully",
        "file_id": params.file_id,
        "file_name": info.get("name"),
        "mime_type": info.get("mimeType"),
        "local_path": params.local_file_path,
        "file_size": local_path.stat().st_size,
    }


@drive_operation("upload file", "file_path", "directory_id")
def upload_file_to_directory(params: UploadToDirectoryInput) -> Dict:
    target_name = params.file_name or Path(params.file_path).name
    media = _local_upload(params.file_path, params.mime_type or guess_mime_type(target_name))
    metadata: Dict[str, Any] = {"name": target_name}
    if params.directory_id:
        metadata["parents"] = [params.directory_id]

    created = (
        _files()
        .create(
            body=metadata,
            media_body=media,
            fields="id, name, mimeType, size, parents",
        )
        .execute()
    )
    return {
        "message": "File uploaded successfully",
        "file_id": created.get("id"),
        "file_name": created.get("name"),
        "mime_type": created.get("mimeType"),
        "file_size": int(created["size"]) if created.get("size") is not None else None,
        "parent_id": _first_parent(created),
        "local_path": params.file_path,
    }
