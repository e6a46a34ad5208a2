import logging
import os
import time
from typing import Optional

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from marketplace.config.constants import ALLOWED_IMAGE_EXTENSIONS
from marketplace.config.env import IMAGE_STORAGE, UPLOAD_DIR, UPLOAD_URL_PREFIX
from marketplace.utils.cloudinary import upload_image

logger = logging.getLogger(__name__)


class UnsupportedImage(ValueError):
    pass


def image_extension(filename: str) -> str:
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise UnsupportedImage("unsupported image format")
    return ext


def _write_local(content: bytes, name: str) -> str:
    os.makedirs(UPLOAD_DIR, exist_ok=True)
    with open(os.path.join(UPLOAD_DIR, name), "wb") as f:
        f.write(content)
    return f"{UPLOAD_URL_PREFIX}/{name}"


async def save_uploaded_image(image: Optional[UploadFile], seller_id: int) -> str:
    """
    Store an optional product image and return the path it is served from.

    No file selected returns "". A file with an extension other than
    jpg/jpeg/png/webp raises UnsupportedImage.
    """
    if image is None or not image.filename:
        return ""

    try:
        ext = image_extension(image.filename)
    except UnsupportedImage:
        logger.info("Rejected upload %r from seller %s", image.filename, seller_id)
        raise

    stamp = time.time_ns()
    content = await image.read()

    if IMAGE_STORAGE == "cloudinary":
        return await run_in_threadpool(upload_image, content, str(stamp), seller_id)

    return await run_in_threadpool(_write_local, content, f"{stamp}{ext}")
