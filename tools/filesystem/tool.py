"""
Local filesystem tools restricted to a set of allowed root directories.

A path is usable only when its resolved form is one of the roots or lies
beneath one. With no roots configured, every path is refused.
"""

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from util.config import FileSystemSettings
from util.envelope import error_response, success_response

from .input_model import (
    CreateDirectoryInput,
    CreateFileInput,
    DeleteInput,
    ListDirectoryInput,
    PathInput,
    ReadFileInput,
    TransferInput,
    UpdateFileInput,
)

logger = logging.getLogger(__name__)

FS_ERRORS = (OSError, ValueError, LookupError)


class PathNotAllowedError(PermissionError):
    """Raised for a path outside every allowed root."""


class FileSystemSandbox:
    """Checks paths against the allowed roots."""

    def __init__(self, settings: FileSystemSettings):
        self.roots: List[Path] = list(settings.allowed_paths)

    def is_allowed(self, path: str) -> bool:
        if not self.roots:
            return False
        resolved = Path(path).resolve()
        return any(resolved == root or root in resolved.parents for root in self.roots)

    def is_root(self, path: str) -> bool:
        return Path(path).resolve() in self.roots

    def check(self, path: str, label: str = "this path") -> Path:
        if not self.is_allowed(path):
            raise PathNotAllowedError(f"Access to {label} is not allowed")
        return Path(path)


_sandbox: Optional[FileSystemSandbox] = None


def configure(allowed_paths: Optional[Iterable[str]] = None) -> FileSystemSandbox:
    """
    Set the allowed roots, e.g. from server command-line arguments.

    Without explicit paths the roots come from FILESYSTEM_ALLOWED_PATHS.
    """
    global _sandbox
    paths = [p for p in (allowed_paths or []) if p]
    settings = (
        FileSystemSettings.from_paths(paths) if paths else FileSystemSettings.from_env()
    )
    _sandbox = FileSystemSandbox(settings)
    logger.info("Filesystem tools allowed roots: %s", [str(r) for r in _sandbox.roots])
    return _sandbox


def get_sandbox() -> FileSystemSandbox:
    if _sandbox is None:
        return configure()
    return _sandbox


def _modified(path: Path) -> str:
    return datetime.fromtimestamp(path.stat().st_mtime).isoformat()


def check_file_exists(params: PathInput) -> Dict:
    try:
        path = get_sandbox().check(params.path)
    except PathNotAllowedError as e:
        return error_response(str(e), path=params.path)

    exists = path.exists()
    return success_response(
        path=params.path,
        exists=exists,
        is_file=exists and path.is_file(),
        is_directory=exists and path.is_dir(),
    )


def create_file(params: CreateFileInput) -> Dict:
    """Create a new file, creating missing parent directories; fails if it exists."""
    try:
        path = get_sandbox().check(params.file_path)
        if path.exists():
            return error_response("File already exists", file_path=params.file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(params.content.encode(params.charset))
    except FS_ERRORS as e:
        return error_response(str(e), file_path=params.file_path)

    return success_response(
        file_path=params.file_path,
        created=True,
        size=path.stat().st_size,
        charset=params.charset,
    )


def _existing_file(file_path: str) -> Path:
    path = get_sandbox().check(file_path)
    if not path.exists():
        raise FileNotFoundError("File or directory does not exist")
    if not path.is_file():
        raise IsADirectoryError("Specified path is not a file")
    return path


def read_file(params: ReadFileInput) -> Dict:
    try:
        path = _existing_file(params.file_path)
        content = path.read_bytes().decode(params.charset)
    except FS_ERRORS as e:
        return error_response(str(e), file_path=params.file_path)

    return success_response(
        file_path=params.file_path,
        content=content,
        size=path.stat().st_size,
        charset=params.charset,
    )


def update_file(params: UpdateFileInput) -> Dict:
    try:
        path = _existing_file(params.file_path)
        old_size = path.stat().st_size
        path.write_bytes(params.content.encode(params.charset))
    except FS_ERRORS as e:
        return error_response(str(e), file_path=params.file_path)

    return success_response(
        file_path=params.file_path,
        updated=True,
        old_size=old_size,
        new_size=path.stat().st_size,
        charset=params.charset,
    )


def delete_file(params: DeleteInput) -> Dict:
    """Delete a file, or a directory (non-empty ones only when recursive)."""
    try:
        sandbox = get_sandbox()
        path = sandbox.check(params.path)
        if sandbox.is_root(params.path):
            raise PathNotAllowedError("An allowed root directory cannot be deleted")
        if not path.exists():
            return error_response("File or directory does not exist", path=params.path)

        was_file = path.is_file()
        if was_file:
            path.unlink()
        elif params.recursive:
            shutil.rmtree(path)
        else:
            path.rmdir()
    except FS_ERRORS as e:
        return error_response(str(e), path=params.path)

    return success_response(
        path=params.path, deleted=True, was_file=was_file, was_directory=not was_file
    )


def _check_transfer(params: TransferInput) -> tuple[Path, Path]:
    sandbox = get_sandbox()
    source = sandbox.check(params.source_path, "source path")
    target = sandbox.check(params.target_path, "target path")
    if sandbox.is_root(params.source_path):
        raise PathNotAllowedError("An allowed root directory cannot be moved or copied")

    if not source.exists():
        raise FileNotFoundError("Source file does not exist")
    if target.exists():
        if not params.replace:
            raise FileExistsError("Target file already exists and overwrite not specified")
        if target.is_dir():
            raise IsADirectoryError("Target path is a directory")

    target.parent.mkdir(parents=True, exist_ok=True)
    return source, target


def copy_file(params: TransferInput) -> Dict:
    context = {"source_path": params.source_path, "target_path": params.target_path}
    try:
        source, target = _check_transfer(params)
        if not source.is_file():
            raise IsADirectoryError("Source path is not a file")
        shutil.copyfile(source, target)
    except FS_ERRORS as e:
        return error_response(str(e), **context)

    return success_response(
        copied=True, size=target.stat().st_size, replaced=params.replace, **context
    )


def move_file(params: TransferInput) -> Dict:
    context = {"source_path": params.source_path, "target_path": params.target_path}
    try:
        source, target = _check_transfer(params)
        shutil.move(str(source), str(target))
    except FS_ERRORS as e:
        return error_response(str(e), **context)

    return success_response(moved=True, replaced=params.replace, **context)


def _describe(path: Path) -> Dict:
    is_file = path.is_file()
    return {
        "name": path.name,
        "path": str(path.resolve()),
        "is_file": is_file,
        "is_directory": path.is_dir(),
        "size": path.stat().st_size if is_file else None,
        "last_modified": _modified(path),
    }


def list_directory(params: ListDirectoryInput) -> Dict:
    try:
        directory = get_sandbox().check(params.directory_path)
        if not directory.exists():
            raise FileNotFoundError("Directory does not exist")
        if not directory.is_dir():
            raise NotADirectoryError("Specified path is not a directory")

        entries = sorted(directory.iterdir())
        if params.files_only:
            entries = [p for p in entries if p.is_file()]
        elif params.directories_only:
            entries = [p for p in entries if p.is_dir()]
        contents = [_describe(p) for p in entries]
    except FS_ERRORS as e:
        return error_response(str(e), directory_path=params.directory_path)

    return success_response(
        directory_path=params.directory_path,
        contents=contents,
        count=len(contents),
        files_only=params.files_only,
        directories_only=params.directories_only,
    )


def get_file_info(params: PathInput) -> Dict:
    try:
        path = get_sandbox().check(params.path)
        if not path.exists():
            raise FileNotFoundError("File or directory does not exist")

        info = _describe(path)
        info.update(
            exists=True,
            is_hidden=path.name.startswith("."),
            can_read=os.access(path, os.R_OK),
            can_write=os.access(path, os.W_OK),
            can_execute=os.access(path, os.X_OK),
            parent=str(path.resolve().parent),
        )
    except FS_ERRORS as e:
        return error_response(str(e), path=params.path)

    return success_response(**info)


def create_directory(params: CreateDirectoryInput) -> Dict:
    """Create a directory; an existing directory is reported, not treated as an error."""
    try:
        directory = get_sandbox().check(params.directory_path)
        if directory.exists():
            if directory.is_dir():
                return success_response(
                    directory_path=params.directory_path,
                    created=False,
                    already_exists=True,
                )
            raise FileExistsError("Specified path exists but is not a directory")
        directory.mkdir(parents=params.create_parents)
    except FS_ERRORS as e:
        return error_response(str(e), directory_path=params.directory_path)

    return success_response(
        directory_path=params.directory_path,
        created=True,
        with_parents=params.create_parents,
    )
