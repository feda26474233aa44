"""In-memory implementation of ComicWriter for testing."""

from domain.model.comic import ComicDraft, ComicPatch
from domain.model.errors import ContentStoreError


class FakeComicWriter:
    """Records every call; `fail_on` names a method that raises ContentStoreError."""

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.uploads: list[tuple[str, str, int]] = []
        self.created: dict[str, tuple[ComicDraft, str]] = {}
        self.patches: list[tuple[str, ComicPatch, str | None]] = []
        self.deleted: list[str] = []

    @property
    def call_count(self) -> int:
        return len(self.uploads) + len(self.created) + len(self.patches) + len(self.deleted)

    def _check(self, name: str) -> None:
        if self.fail_on == name:
            raise ContentStoreError(f"Failed to {name}: 500 boom", status_code=500, body='boom')

    async def upload_image(self, data: bytes, filename: str, content_type: str) -> str:
        self.uploads.append((filename, content_type, len(data)))
        self._check('upload_image')
        return f"image-asset{len(self.uploads)}-800x600-png"

    async def create_comic(self, draft: ComicDraft, image_asset_id: str) -> str:
        comic_id = f"comic-{len(self.created) + 1}"
        self.created[comic_id] = (draft, image_asset_id)
        self._check('create_comic')
        return comic_id

    async def patch_comic(
        self,
        comic_id: str,
        patch: ComicPatch,
        image_asset_id: str | None = None,
    ) -> None:
        self.patches.append((comic_id, patch, image_asset_id))
        self._check('patch_comic')

    async def delete_comic(self, comic_id: str) -> None:
        self.deleted.append(comic_id)
        self._check('delete_comic')
