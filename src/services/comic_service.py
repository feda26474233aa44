"""Episode writes against the content store.

Every input check runs before the first network call. Upload and document
mutation are separate calls with no compensation: if the mutation fails after
a successful upload, the asset stays orphaned in the store.
"""

import logging

from domain.model.comic import ComicDraft, ComicPatch
from domain.model.errors import ValidationError
from domain.model.image import ImageUpload, validate_image_file
from port.comic_writer import ComicWriter

logger = logging.getLogger(__name__)


def check_image(image: ImageUpload) -> None:
    """Raise ValidationError if the image breaks the size/type rules."""
    error = validate_image_file(image.size, image.content_type, 'image')
    if error:
        raise ValidationError(error)


def check_draft(draft: ComicDraft) -> None:
    if not draft.title or not draft.slug:
        raise ValidationError("title and slug are required")


async def create_comic(draft: ComicDraft, image: ImageUpload, writer: ComicWriter) -> str:
    """Upload the image, then create the episode document. Returns its id."""
    check_image(image)
    check_draft(draft)

    asset_id = await writer.upload_image(image.data, image.filename, image.content_type)
    comic_id = await writer.create_comic(draft, asset_id)

    logger.info("Comic created", extra={"comicId": comic_id, "slug": draft.slug, "assetId": asset_id})
    return comic_id


async def patch_comic(
    comic_id: str,
    patch: ComicPatch,
    writer: ComicWriter,
    image: ImageUpload | None = None,
) -> str:
    """Apply a partial update, replacing the image when one is supplied."""
    if image is not None:
        check_image(image)

    asset_id = None
    if image is not None:
        asset_id = await writer.upload_image(image.data, image.filename, image.content_type)

    await writer.patch_comic(comic_id, patch, asset_id)

    logger.info("Comic patched", extra={"comicId": comic_id, "imageReplaced": asset_id is not None})
    return comic_id


async def delete_comic(comic_id: str, writer: ComicWriter) -> str:
    await writer.delete_comic(comic_id)
    logger.info("Comic deleted", extra={"comicId": comic_id})
    return comic_id
