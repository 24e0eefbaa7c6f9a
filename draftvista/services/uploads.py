import logging
import os
import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Optional

from werkzeug.utils import secure_filename

from ..parsing.documents import SUPPORTED_EXTENSIONS

logger = logging.getLogger(__name__)


@dataclass
class CleanupReport:
    deleted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    total: int = 0
    error: Optional[str] = None


def is_allowed_file(filename: str, allowed: Iterable[str] = SUPPORTED_EXTENSIONS) -> bool:
    return os.path.splitext(filename or "")[1].lower() in {ext.lower() for ext in allowed}


def unique_upload_name(original_name: str) -> str:
    safe = secure_filename(original_name) or "manuscript"
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}-{safe}"


def save_upload(stream: BinaryIO, original_name: str, upload_dir: str) -> Path:
    """Copy an uploaded stream into ``upload_dir`` under a collision-free name."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / unique_upload_name(original_name)
    with open(path, "wb") as f:
        while True:
            chunk = stream.read(64 * 1024)
            if not chunk:
                break
            f.write(chunk)
    return path


def delete_file(file_path) -> bool:
    """Remove one file. Missing files count as deleted; OS errors are logged and reported as False."""
    if not file_path:
        return False
    path = Path(file_path)
    try:
        path.unlink()
    except FileNotFoundError:
        logger.info("File already deleted or doesn't exist: %s", path)
        return True
    except OSError as e:
        logger.error("Failed to delete file %s: %s", path, e)
        return False
    logger.info("Deleted file: %s", path.name)
    return True


def delete_files(file_paths: Iterable) -> CleanupReport:
    paths = list(file_paths)
    report = CleanupReport(total=len(paths))
    for path in paths:
        if delete_file(path):
            report.deleted.append(str(path))
        else:
            report.failed.append(str(path))
    return report


@contextmanager
def managed_upload(file_path) -> Iterator[Path]:
    """Yield ``file_path`` and delete it however the block exits."""
    try:
        yield Path(file_path)
    finally:
        delete_file(file_path)


def cleanup_old_files(upload_dir: str, max_age_hours: float = 24) -> CleanupReport:
    """Delete regular files in ``upload_dir`` last modified more than ``max_age_hours`` ago."""
    directory = Path(upload_dir)
    if not directory.exists():
        logger.info("Uploads directory does not exist: %s", directory)
        return CleanupReport()

    cutoff = time.time() - max_age_hours * 3600
    try:
        old_files = [p for p in directory.iterdir() if p.is_file() and p.stat().st_mtime < cutoff]
    except OSError as e:
        logger.error("Cleanup failed: %s", e)
        return CleanupReport(error=str(e))

    if not old_files:
        logger.info("No old files to clean up")
        return CleanupReport()

    logger.info("Cleaning up %d old files...", len(old_files))
    return delete_files(old_files)


def upload_dir_info(upload_dir: str) -> dict:
    directory = Path(upload_dir)
    if not directory.exists():
        return {"exists": False, "path": str(directory), "files": 0, "total_size": 0}
    files = [p for p in directory.iterdir() if p.is_file()]
    total_size = sum(p.stat().st_size for p in files)
    return {
        "exists": True,
        "path": str(directory),
        "files": len(files),
        "total_size": total_size,
        "total_size_mb": f"{total_size / (1024 * 1024):.2f}",
    }


def ensure_upload_dir(upload_dir: str) -> bool:
    """Create ``upload_dir`` if needed and check that it is writable."""
    directory = Path(upload_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        probe = directory / ".write-test"
        probe.write_text("test")
        probe.unlink()
    except OSError as e:
        logger.error("Failed to prepare uploads directory %s: %s", directory, e)
        return False
    logger.info("Uploads directory ready: %s", directory)
    return True


class UploadSweeper:
    """Background thread deleting stale uploads on a fixed interval.

    Not coordinated with requests in flight: a request slower than
    ``max_age_hours`` can lose its file mid-analysis.
    """

    def __init__(self, upload_dir: str, interval_hours: float = 6, max_age_hours: float = 24):
        self.upload_dir = upload_dir
        self.interval_seconds = interval_hours * 3600
        self.max_age_hours = max_age_hours
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def run_once(self) -> CleanupReport:
        logger.info("Running scheduled cleanup...")
        report = cleanup_old_files(self.upload_dir, self.max_age_hours)
        if report.deleted:
            logger.info("Cleaned up %d old files", len(report.deleted))
        if report.failed:
            logger.warning("Failed to delete %d files", len(report.failed))
        return report

    def _loop(self):
        while not self._stop.wait(self.interval_seconds):
            self.run_once()

    def start(self) -> "UploadSweeper":
        if self._thread is None or not self._thread.is_alive():
            logger.info("Scheduling automatic cleanup every %s hours", self.interval_seconds / 3600)
            self._stop.clear()
            self._thread = threading.Thread(target=self._loop, name="upload-sweeper", daemon=True)
            self._thread.start()
        return self

    def stop(self, timeout: Optional[float] = None):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
