"""
Upload validation for campaign images: extension, content type and size.
"""

from typing import Tuple

ALLOWED_IMAGE_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
    }
)
ALLOWED_IMAGE_EXTS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})


def image_extension(filename: str | None) -> str | None:
    if not filename or "." not in filename:
        return None
    return "." + filename.rsplit(".", 1)[-1].lower()


def validate_image(
    filename: str | None, content_type: str | None
) -> Tuple[bool, str | None]:
    """
    Returns (valid, error_message).
    """
    ext = image_extension(filename)
    if ext not in ALLOWED_IMAGE_EXTS:
        return False, "Only image files are allowed (jpg, jpeg, png, gif, webp)"
    ct = (content_type or "").strip().lower().split(";")[0].strip()
    if ct not in ALLOWED_IMAGE_TYPES:
        return False, f"content type '{content_type}' is not an allowed image type"
    return True, None


def validate_size(size_bytes: int, max_bytes: int) -> Tuple[bool, str | None]:
    if size_bytes <= 0:
        return False, "Uploaded file is empty"
    if size_bytes > max_bytes:
        return False, f"File too large (max {max_bytes // (1024 * 1024)}MB)"
    return True, None
