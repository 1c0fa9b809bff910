# courier/core/storage_utils.py
import uuid

from courier.core.config import get_settings
from courier.core.supabase_client import supabase_admin

settings = get_settings()

ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/heic": "heic",
}


def upload_item_image(user_id: uuid.UUID, file_bytes: bytes, content_type: str) -> str:
    """
    Upload an item picture to Supabase Storage and return its public URL.

    Objects are stored as "drafts/<user_id>/<uuid4>.<ext>" so that every
    upload gets a fresh name and never overwrites a picture already
    referenced by a submitted order.

    Raises:
        ValueError: if the content type is not an accepted image type.
        Any exception raised by Supabase client if upload fails.
    """
    ext = ALLOWED_IMAGE_TYPES.get(content_type)
    if ext is None:
        raise ValueError(f"Unsupported image type: {content_type}")

    path = f"drafts/{user_id}/{generate_filename(ext)}"
    bucket = supabase_admin().storage.from_(settings.ITEM_IMAGE_BUCKET)
    bucket.upload(path, file_bytes, {"content-type": content_type, "upsert": "false"})
    return bucket.get_public_url(path)


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4.

    Args:
        ext: File extension without dot (e.g. "png", "jpg")

    Returns:
        A filename like "<uuid4>.png"
    """
    return f"{uuid.uuid4()}.{ext}"
