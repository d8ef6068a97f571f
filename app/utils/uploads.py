"""
Image upload helpers for report submissions.
"""

import logging
import os
import uuid
from typing import Optional

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"


class UploadRejectedError(ValueError):
    """The uploaded file is not an acceptable image."""


def check_image_upload(content_type: Optional[str], size: int, max_bytes: int) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise UploadRejectedError("Only image files are allowed")
    if size > max_bytes:
        raise UploadRejectedError(f"Image exceeds the {max_bytes // (1024 * 1024)}MB limit")


def store_image(data: bytes, filename: Optional[str], upload_dir: str) -> str:
    """
    Write image bytes under a random name and return its public URL path.
    """
    os.makedirs(upload_dir, exist_ok=True)
    extension = os.path.splitext(filename or "")[1].lower()[:10]
    stored_name = f"{uuid.uuid4().hex}{extension}"

    with open(os.path.join(upload_dir, stored_name), "wb") as f:
        f.write(data)

    logger.info(f"Stored uploaded image: {stored_name} ({len(data)} bytes)")
    return f"{UPLOAD_URL_PREFIX}/{stored_name}"
