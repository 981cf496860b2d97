# ielts_portal/api/endpoints/uploads.py
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ielts_portal.core.security import get_current_user
from ielts_portal.models.user import User
from ielts_portal.services import file_storage
from ielts_portal.services.file_storage import StorageError

router = APIRouter(prefix="/Upload", tags=["uploads"])


def _store(file: UploadFile, folder: str, allowed_types: tuple[str, ...]) -> dict:
    try:
        url = file_storage.save_upload(file, folder=folder, allowed_types=allowed_types)
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"url": url}


@router.post("/profile")
def upload_profile_image(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
):
    return _store(file, "profiles", file_storage.IMAGE_CONTENT_TYPES)


@router.post("/audio")
def upload_audio(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
):
    return _store(file, "audio", file_storage.AUDIO_CONTENT_TYPES)
