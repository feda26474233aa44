"""Sanity adapter for ComicWriter.

upload, create, patch and delete are independent calls: an uploaded image
whose document creation later fails stays behind as an orphaned asset.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Protocol

from domain.model.comic import COMIC_DOCUMENT_TYPE, UNSET, ComicDraft, ComicPatch
from domain.model.errors import ContentStoreError

logger = logging.getLogger(__name__)


class MutationClient(Protocol):
    async def mutate(self, mutations: list[dict[str, Any]], action: str = ...) -> dict[str, Any]: ...

    async def upload_image(self, data: bytes, filename: str, content_type: str) -> dict[str, Any]: ...


def _image_field(asset_id: str) -> dict[str, Any]:
    return {
        '_type': 'image',
        'asset': {'_type': 'reference', '_ref': asset_id},
    }


def _slug_field(slug: str | None) -> dict[str, str | None]:
    return {'_type': 'slug', 'current': slug}


def build_patch_set(patch: ComicPatch, image_asset_id: str | None = None) -> dict[str, Any]:
    """Sparse `set` containing only the fields sent in the patch; an explicit None is written as null."""
    fields: dict[str, Any] = {}
    if patch.title is not UNSET:
        fields['title'] = patch.title
    if patch.slug is not UNSET:
        fields['slug'] = _slug_field(patch.slug)
    if patch.published_at is not UNSET:
        fields['publishedAt'] = patch.published_at
    if patch.alt_text is not UNSET:
        fields['altText'] = patch.alt_text
    if patch.transcript is not UNSET:
        fields['transcript'] = patch.transcript
    if patch.hidden is not UNSET:
        fields['hidden'] = patch.hidden
    if image_asset_id:
        fields['image'] = _image_field(image_asset_id)
    return fields


class SanityComicWriter:
    def __init__(self, client: MutationClient):
        self._client = client

    async def upload_image(self, data: bytes, filename: str, content_type: str) -> str:
        result = await self._client.upload_image(data, filename, content_type)
        try:
            asset_id = result['document']['_id']
        except (KeyError, TypeError) as e:
            raise ContentStoreError(f"Unexpected upload response: {result!r}") from e

        logger.info("Uploaded image asset", extra={"assetId": asset_id, "filename": filename})
        return asset_id

    async def create_comic(self, draft: ComicDraft, image_asset_id: str) -> str:
        published_at = draft.published_at or datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
        document = {
            '_type': COMIC_DOCUMENT_TYPE,
            'title': draft.title,
            'slug': _slug_field(draft.slug),
            'publishedAt': published_at,
            'image': _image_field(image_asset_id),
            'altText': draft.alt_text or '',
            'transcript': draft.transcript or '',
        }
        result = await self._client.mutate([{'create': document}], action='create document')
        try:
            comic_id = result['results'][0]['id']
        except (KeyError, IndexError, TypeError) as e:
            raise ContentStoreError(f"Unexpected mutation response: {result!r}") from e

        logger.info("Created comic", extra={"comicId": comic_id, "slug": draft.slug})
        return comic_id

    async def patch_comic(
        self,
        comic_id: str,
        patch: ComicPatch,
        image_asset_id: str | None = None,
    ) -> None:
        fields = build_patch_set(patch, image_asset_id)
        await self._client.mutate(
            [{'patch': {'id': comic_id, 'set': fields}}],
            action='patch document',
        )
        logger.info("Patched comic", extra={"comicId": comic_id, "fields": sorted(fields)})

    async def delete_comic(self, comic_id: str) -> None:
        await self._client.mutate([{'delete': {'id': comic_id}}], action='delete document')
        logger.info("Deleted comic", extra={"comicId": comic_id})
