"""Read-side access to published episodes."""

from typing import Protocol

from domain.model.comic import AdjacentComics, Comic


class ComicReader(Protocol):
    """Port for reading episodes from the content store.

    Public reads never return hidden episodes; the admin reads do.
    Store errors propagate unmodified.
    """

    async def get_latest_comic(self) -> Comic | None: ...

    async def get_comic_by_slug(self, slug: str) -> Comic | None: ...

    async def get_archive(self, limit: int = 50) -> list[Comic]: ...

    async def get_all_comics_admin(self, limit: int = 100) -> list[Comic]: ...

    async def get_hidden_comics(self, limit: int = 100) -> list[Comic]: ...

    async def get_adjacent_comics(self, published_at: str) -> AdjacentComics: ...
