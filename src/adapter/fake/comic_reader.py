"""In-memory implementation of ComicReader for testing."""

from domain.model.comic import AdjacentComics, Comic


class FakeComicReader:
    def __init__(self, comics: list[Comic] | None = None):
        self.comics: list[Comic] = list(comics or [])

    def _newest_first(self, include_hidden: bool = False) -> list[Comic]:
        comics = [c for c in self.comics if include_hidden or not c.hidden]
        return sorted(comics, key=lambda c: c.published_at, reverse=True)

    async def get_latest_comic(self) -> Comic | None:
        visible = self._newest_first()
        return visible[0] if visible else None

    async def get_comic_by_slug(self, slug: str) -> Comic | None:
        return next((c for c in self._newest_first() if c.slug == slug), None)

    async def get_archive(self, limit: int = 50) -> list[Comic]:
        return self._newest_first()[:limit]

    async def get_all_comics_admin(self, limit: int = 100) -> list[Comic]:
        return self._newest_first(include_hidden=True)[:limit]

    async def get_hidden_comics(self, limit: int = 100) -> list[Comic]:
        return [c for c in self._newest_first(include_hidden=True) if c.hidden][:limit]

    async def get_adjacent_comics(self, published_at: str) -> AdjacentComics:
        visible = self._newest_first()
        earlier = [c for c in visible if c.published_at < published_at]
        later = [c for c in visible if c.published_at > published_at]
        prev = max(earlier, key=lambda c: c.published_at, default=None)
        next_ = min(later, key=lambda c: c.published_at, default=None)
        return AdjacentComics(prev=_as_link(prev), next=_as_link(next_))


def _as_link(comic: Comic | None) -> Comic | None:
    if comic is None:
        return None
    return Comic(
        id=comic.id,
        title=comic.title,
        slug=comic.slug,
        published_at=comic.published_at,
        image_url='',
    )
