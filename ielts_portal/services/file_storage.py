# ielts_portal/services/file_storage.py
import logging
import shutil
import uuid
from pathlib import Path

from fastapi import UploadFile

from ielts_portal.core.config import settings

logger = logging.getLogger(__name__)

IMAGE_CONTENT_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")
AUDIO_CONTENT_TYPES = ("audio/mpeg", "audio/wav", "audio/mp3", "audio/m4a", "audio/ogg")


class StorageError(Exception):
    pass


def uploads_dir(*parts: str) -> Path:
    """{UPLOAD_ROOT}/uploads/<parts>, created on demand."""
    path = Path(settings.UPLOAD_ROOT, "uploads", *parts)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _file_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    file.file.seek(0, 2)
    size = file.file.tell()
    file.file.seek(0)
    return size


def _write(file: UploadFile, target: Path) -> None:
    file.file.seek(0)
    with target.open("wb") as out:
        shutil.copyfileobj(file.file, out)


def save_upload(file: UploadFile, *, folder: str, allowed_types: tuple[str, ...]) -> str:
    """
    Store a profile image or exam audio file.

    Returns the root-relative URL, e.g. ``/uploads/audio/<uuid>.mp3``.

    Raises:
        StorageError: empty file, wrong content type, or over MAX_UPLOAD_MB
    """
    size = _file_size(file)
    if not file.filename or size == 0:
        raise StorageError("No file uploaded")
    if (file.content_type or "").lower() not in allowed_types:
        raise StorageError(f"Invalid file type: {file.content_type}")
    if size > settings.MAX_UPLOAD_MB * 1024 * 1024:
        raise StorageError(f"File size exceeds {settings.MAX_UPLOAD_MB}MB limit")

    file_name = f"{uuid.uuid4().hex}{Path(file.filename).suffix.lower()}"
    _write(file, uploads_dir(folder) / file_name)
    logger.info(f"Stored upload {file.filename} as {folder}/{file_name} ({size} bytes)")
    return f"/uploads/{folder}/{file_name}"


def save_speaking_audio(submission_id: int, file: UploadFile) -> str:
    """Recordings are kept as-is; no format check or transcoding."""
    stem = Path(file.filename or "recording").stem or "recording"
    file_name = f"{submission_id}_{stem}_{uuid.uuid4().hex}.wav"
    _write(file, uploads_dir("speaking") / file_name)
    return f"/uploads/speaking/{file_name}"


def delete_upload(url: str) -> None:
    """Remove a stored file by the URL save_upload / save_speaking_audio returned."""
    path = Path(settings.UPLOAD_ROOT, url.lstrip("/"))
    path.unlink(missing_ok=True)
    logger.info(f"Deleted upload {url}")
