"""Image upload constraints for comic episodes."""

from dataclasses import dataclass

ALLOWED_IMAGE_TYPES = (
    'image/png',
    'image/jpeg',
    'image/webp',
    'image/gif',
    'image/avif',
)

# 40MB
MAX_IMAGE_SIZE = 40 * 1024 * 1024


@dataclass(frozen=True)
class ImageUpload:
    """An uploaded image file as received from the admin panel."""
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def validate_image_file(size: int, content_type: str, field_name: str = 'image') -> str | None:
    """Check an image against the size limit and the media-type allow-list.

    Returns a human-readable error message, or None when the file is acceptable.
    """
    if size > MAX_IMAGE_SIZE:
        return f"{field_name} exceeds maximum size of 40MB"
    if content_type not in ALLOWED_IMAGE_TYPES:
        return f"{field_name} must be png, jpg, webp, gif, or avif. Got: {content_type}"
    return None
