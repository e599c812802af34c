"""
Workspace Manager

Owns the two directories a render job writes into: ``intake`` (uploads and
downloaded sources) and ``output`` (everything the pipeline renders). The
workspace is an explicit value handed to the routes and the orchestrator, so
each test or process can run against its own directories.
"""

import shutil
import time
import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from darkmaker.core import (
    get_logger,
    sanitize_filename,
    UploadTooLarge,
    WorkspaceError,
)
from darkmaker.models import FileHandle

logger = get_logger(__name__, component="workspace")

UPLOAD_CHUNK_SIZE = 1024 * 1024


class Workspace:
    """Intake/output directory pair with safe artifact allocation and deletion"""

    def __init__(self, intake_dir: Path, output_dir: Path):
        self.intake_dir = Path(intake_dir)
        self.output_dir = Path(output_dir)

    @classmethod
    def under(cls, root: Path) -> "Workspace":
        """Workspace with ``intake`` and ``output`` below a common root"""
        root = Path(root)
        return cls(root / "intake", root / "output")

    def prepare(self) -> "Workspace":
        """Ensure both directories exist"""
        self.ensure_directory(self.intake_dir)
        self.ensure_directory(self.output_dir)
        return self

    @staticmethod
    def ensure_directory(path: Path) -> Path:
        """
        Ensure ``path`` is a directory, creating it if necessary

        A non-directory entry occupying the path is removed first.

        Raises:
            WorkspaceError: If the directory cannot be created
        """
        path = Path(path)
        try:
            if path.is_dir():
                return path
            if path.exists() or path.is_symlink():
                logger.warning("Replacing non-directory entry with a directory", extra={"path": str(path)})
                path.unlink()
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WorkspaceError(f"Cannot create directory {path}: {exc}") from exc
        return path

    def allocate(self, directory: Path, prefix: str, suffix: str = "") -> Path:
        """
        Reserve a unique path for a new artifact

        Names combine a millisecond timestamp with a random token so that
        overlapping requests in the same directories never share a file.
        """
        stamp = int(time.time() * 1000)
        token = uuid.uuid4().hex[:8]
        return Path(directory) / f"{prefix}-{stamp}-{token}{suffix}"

    def intake_path(self, prefix: str, suffix: str = "") -> Path:
        return self.allocate(self.intake_dir, prefix, suffix)

    def output_path(self, prefix: str, suffix: str = "") -> Path:
        return self.allocate(self.output_dir, prefix, suffix)

    def delete_if_present(self, path: Optional[Path]) -> bool:
        """
        Remove a regular file if it exists

        Directories are never touched. Failures are logged and swallowed so
        that cleanup never masks the error that triggered it.

        Returns:
            True if a file was removed
        """
        if path is None:
            return False
        path = Path(path)
        try:
            if not path.is_file():
                return False
            path.unlink()
            logger.debug("Removed artifact", extra={"path": str(path)})
            return True
        except OSError as exc:
            logger.error("Failed to remove artifact", extra={
                "path": str(path),
                "error": str(exc),
            })
            return False

    async def save_upload(self, upload: UploadFile, prefix: str, max_size: int) -> FileHandle:
        """
        Stream an uploaded file into the intake directory

        The stored name keeps the sanitized original name after a unique
        prefix. A partially written file is removed when the size limit is
        exceeded or the write fails.

        Raises:
            UploadTooLarge: If the upload exceeds ``max_size`` bytes
            WorkspaceError: If the file cannot be written
        """
        display_name = sanitize_filename(upload.filename or "", fallback=prefix)
        target = self.intake_path(prefix, f"-{display_name}")
        size = 0

        try:
            with open(target, "wb") as out:
                while True:
                    chunk = await upload.read(UPLOAD_CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > max_size:
                        raise UploadTooLarge(
                            f"File too large: {display_name}. "
                            f"Maximum size: {max_size / (1024 * 1024):.0f}MB"
                        )
                    out.write(chunk)
        except UploadTooLarge:
            self.delete_if_present(target)
            raise
        except OSError as exc:
            self.delete_if_present(target)
            raise WorkspaceError(f"Failed to save upload {display_name}: {exc}") from exc

        logger.info("Upload stored", extra={
            "upload_name": display_name,
            "size": size,
            "path": str(target),
        })
        return FileHandle(path=target, display_name=display_name)

    def disk_usage(self) -> dict:
        usage = shutil.disk_usage(self.output_dir)
        return {"available_gb": round(usage.free / (1024 ** 3), 2)}
