import cloudinary
import cloudinary.uploader

from marketplace.config.env import (
    CLOUDINARY_CLOUD_NAME,
    CLOUDINARY_API_KEY,
    CLOUDINARY_API_SECRET,
    CLOUDINARY_FOLDER,
)

cloudinary.config(
    cloud_name=CLOUDINARY_CLOUD_NAME,
    api_key=CLOUDINARY_API_KEY,
    api_secret=CLOUDINARY_API_SECRET,
    secure=True,
)


def upload_image(content: bytes, public_id: str, seller_id: int) -> str:
    """
    Uploads raw image bytes and returns the secure URL.
    """
    result = cloudinary.uploader.upload(
        content,
        folder=f"{CLOUDINARY_FOLDER}/{seller_id}",
        public_id=public_id,
        resource_type="image",
    )
    url = result.get("secure_url")
    if not url:
        raise RuntimeError("Image upload failed")
    return url
