"""Image upload storage"""
import os
import shutil
import time
from typing import Optional

from fastapi import Request, UploadFile

from blogapi.config import Settings
from blogapi.utils.errors import FieldValidationError
from blogapi.utils.logger import logger

FILE_TYPE_MAP = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/jpg": "jpg",
}


def build_filename(original_name: str, content_type: str) -> str:
    """``<original-name>-<epoch-ms>.<ext>`` with spaces turned into hyphens"""
    name = os.path.basename(original_name).replace(" ", "-")
    extension = FILE_TYPE_MAP[content_type]
    return f"{name}-{int(time.time() * 1000)}.{extension}"


def store_image(
    request: Request,
    upload: Optional[UploadFile],
    field: str,
    settings: Settings,
) -> Optional[str]:
    """Save an uploaded image and return its public absolute URL.

    Returns None when no file was sent. Raises FieldValidationError for
    content types other than png/jpeg/jpg.
    """
    if upload is None or not upload.filename:
        return None

    if upload.content_type not in FILE_TYPE_MAP:
        raise FieldValidationError({field: "Invalid image type"})

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    filename = build_filename(upload.filename, upload.content_type)
    with open(os.path.join(settings.UPLOAD_DIR, filename), "wb") as fh:
        shutil.copyfileobj(upload.file, fh)

    logger.info(f"Stored upload {filename}", extra={"action": "upload"})

    base = f"{request.url.scheme}://{request.url.netloc}"
    return f"{base}{settings.UPLOAD_URL_PATH}/{filename}"
