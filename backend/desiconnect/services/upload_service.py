"""
Product image uploads

Images are written to UPLOADS_DIR under a random name and served back
from /uploads.
"""
import logging
import os
import uuid
from typing import Optional

from fastapi import UploadFile

from desiconnect.core.config import settings
from desiconnect.domain.errors import ValidationFailedError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

PUBLIC_PREFIX = "/uploads"


def ensure_upload_dir(directory: Optional[str] = None) -> str:
    directory = directory or settings.UPLOADS_DIR
    os.makedirs(directory, exist_ok=True)
    return directory


def save_image(upload: UploadFile, directory: Optional[str] = None) -> str:
    """
    Store an uploaded image

    Args:
        upload: Multipart file from the request
        directory: Target directory (defaults to UPLOADS_DIR)

    Returns:
        Public path of the stored file, e.g. /uploads/3f2a....jpg

    Raises:
        ValidationFailedError: Unsupported content type or file too large
    """
    extension = ALLOWED_IMAGE_TYPES.get(upload.content_type or "")
    if extension is None:
        raise ValidationFailedError("Only JPEG, PNG, GIF and WEBP images are allowed")

    data = upload.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationFailedError(
            f"Image exceeds the {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} MB limit"
        )

    directory = ensure_upload_dir(directory)
    filename = f"{uuid.uuid4().hex}{extension}"
    with open(os.path.join(directory, filename), "wb") as fh:
        fh.write(data)

    logger.info(f"Stored product image {filename} ({len(data)} bytes)")
    return f"{PUBLIC_PREFIX}/{filename}"


def delete_image(public_path: Optional[str], directory: Optional[str] = None) -> None:
    """Remove a previously stored image; missing files are ignored"""
    if not public_path or not public_path.startswith(f"{PUBLIC_PREFIX}/"):
        return
    path = os.path.join(directory or settings.UPLOADS_DIR, os.path.basename(public_path))
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
