"""Port definition for ComicWriter."""

from typing import Protocol

from domain.model.comic import ComicDraft, ComicPatch


class ComicWriter(Protocol):
    async def upload_image(self, data: bytes, filename: str, content_type: str) -> str: ...

    async def create_comic(self, draft: ComicDraft, image_asset_id: str) -> str: ...

    async def patch_comic(
        self,
        comic_id: str,
        patch: ComicPatch,
        image_asset_id: str | None = None,
    ) -> None: ...

    async def delete_comic(self, comic_id: str) -> None: ...
