# legal_vault/api/v1/endpoints/uploads.py

"""
Upload Endpoints

Hands out pre-signed S3 URLs. The browser PUTs the file straight to the
bucket and later stores the returned key on a document or profile.
"""

from fastapi import APIRouter, Depends, Query

from legal_vault.api.v1.deps import get_current_actor
from legal_vault.core.config import settings
from legal_vault.core.logger import logger
from legal_vault.db.schemas import DownloadUrlResponse, PresignUploadRequest, PresignUploadResponse
from legal_vault.services.access_control import Actor
from legal_vault.services.storage_service import StorageService, get_storage_service
from legal_vault.utils.exceptions import ForbiddenError, ValidationError
from legal_vault.utils.validators import RESTRICTED_FOLDERS, validate_upload

router = APIRouter()


@router.post("/presign", response_model=PresignUploadResponse)
def presign_upload(
    body: PresignUploadRequest,
    actor: Actor = Depends(get_current_actor),
    storage: StorageService = Depends(get_storage_service),
):
    max_size = (
        settings.MAX_PROFILE_UPLOAD_SIZE if body.folder == "profiles" else settings.MAX_DOCUMENT_UPLOAD_SIZE
    )
    validate_upload(body.folder, body.content_type, body.file_size, max_size)

    key = storage.build_key(body.folder, body.filename)
    url = storage.generate_upload_url(
        key,
        content_type=body.content_type,
        expires_in=settings.UPLOAD_URL_EXPIRY_SECONDS,
    )
    logger.info("User %s presigned upload %s (%s bytes)", actor.user_id, key, body.file_size)
    return PresignUploadResponse(
        upload_url=url,
        key=key,
        expires_in=settings.UPLOAD_URL_EXPIRY_SECONDS,
        headers={"Content-Type": body.content_type},
    )


@router.get("/download-url", response_model=DownloadUrlResponse)
def download_url(
    key: str = Query(..., min_length=1, description="Object key returned by /presign"),
    actor: Actor = Depends(get_current_actor),
    storage: StorageService = Depends(get_storage_service),
):
    if ".." in key or key.startswith("/"):
        raise ValidationError("Invalid object key", field="key")

    folder = key.split("/", 1)[0]
    if folder in RESTRICTED_FOLDERS and not (actor.is_admin or actor.is_lawyer):
        raise ForbiddenError("Only Admins and Lawyers can download these files")

    url = storage.generate_download_url(key, expires_in=settings.DOWNLOAD_URL_EXPIRY_SECONDS)
    return DownloadUrlResponse(url=url, key=key, expires_in=settings.DOWNLOAD_URL_EXPIRY_SECONDS)
