"""Sanity adapter for ComicReader.

Builds GROQ queries over comicEpisode documents and maps the raw results into
display-ready Comic objects with resolved image URLs.
"""

import asyncio
import logging
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from adapter.sanity.documents import SanityComicDocument, SanityComicLink
from adapter.sanity.image_url import image_url
from domain.model.comic import COMIC_DOCUMENT_TYPE, AdjacentComics, Comic
from domain.model.errors import ContentStoreError

logger = logging.getLogger(__name__)

COMIC_FIELDS = "_id, _type, title, slug, publishedAt, image, altText, transcript, hidden"
LINK_FIELDS = "_id, title, slug, publishedAt"

ALL_COMICS = f'_type == "{COMIC_DOCUMENT_TYPE}"'
VISIBLE_COMICS = f'{ALL_COMICS} && hidden != true'
HIDDEN_COMICS = f'{ALL_COMICS} && hidden == true'


class QueryClient(Protocol):
    async def fetch(self, query: str, params: dict[str, Any] | None = None) -> Any: ...


def _slice(limit: int) -> str:
    """GROQ slice for the first `limit` results (exclusive range)."""
    limit = int(limit)
    if limit < 1:
        raise ValueError("limit must be at least 1")
    return f"[0...{limit}]"


class SanityComicReader:
    """Read-side queries against the content store."""

    def __init__(self, client: QueryClient, project_id: str, dataset: str):
        self._client = client
        self._project_id = project_id
        self._dataset = dataset

    async def get_latest_comic(self) -> Comic | None:
        query = f"*[{VISIBLE_COMICS}] | order(publishedAt desc)[0] {{{COMIC_FIELDS}}}"
        return self._to_comic(await self._client.fetch(query))

    async def get_comic_by_slug(self, slug: str) -> Comic | None:
        query = f"*[{VISIBLE_COMICS} && slug.current == $slug][0] {{{COMIC_FIELDS}}}"
        return self._to_comic(await self._client.fetch(query, {'slug': slug}))

    async def get_archive(self, limit: int = 50) -> list[Comic]:
        query = f"*[{VISIBLE_COMICS}] | order(publishedAt desc){_slice(limit)} {{{COMIC_FIELDS}}}"
        return self._to_comics(await self._client.fetch(query))

    async def get_all_comics_admin(self, limit: int = 100) -> list[Comic]:
        query = f"*[{ALL_COMICS}] | order(publishedAt desc){_slice(limit)} {{{COMIC_FIELDS}}}"
        return self._to_comics(await self._client.fetch(query))

    async def get_hidden_comics(self, limit: int = 100) -> list[Comic]:
        query = f"*[{HIDDEN_COMICS}] | order(publishedAt desc){_slice(limit)} {{{COMIC_FIELDS}}}"
        return self._to_comics(await self._client.fetch(query))

    async def get_adjacent_comics(self, published_at: str) -> AdjacentComics:
        """Nearest earlier ("prev") and later ("next") visible episodes.

        Both lookups run concurrently; if either fails the whole call fails.
        """
        prev_query = (
            f"*[{VISIBLE_COMICS} && publishedAt < $publishedAt] "
            f"| order(publishedAt desc)[0] {{{LINK_FIELDS}}}"
        )
        next_query = (
            f"*[{VISIBLE_COMICS} && publishedAt > $publishedAt] "
            f"| order(publishedAt asc)[0] {{{LINK_FIELDS}}}"
        )
        params = {'publishedAt': published_at}
        prev_raw, next_raw = await asyncio.gather(
            self._client.fetch(prev_query, params),
            self._client.fetch(next_query, params),
        )
        return AdjacentComics(prev=self._to_link(prev_raw), next=self._to_link(next_raw))

    # ── mapping ──────────────────────────────────────────

    def _to_comics(self, raw: Any) -> list[Comic]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise ContentStoreError(f"Expected a list of comics, got {type(raw).__name__}")
        return [self._to_comic(item) for item in raw]

    def _to_comic(self, raw: Any) -> Comic | None:
        if raw is None:
            return None
        try:
            doc = SanityComicDocument.model_validate(raw)
        except PydanticValidationError as e:
            logger.error("Malformed comic document", extra={"error": str(e)})
            raise ContentStoreError(f"Malformed comic document: {e}") from e

        return Comic(
            id=doc.id,
            title=doc.title,
            slug=doc.slug.current,
            published_at=doc.published_at,
            image_url=image_url(doc.image.asset.ref, self._project_id, self._dataset),
            alt_text=doc.alt_text,
            transcript=doc.transcript,
            hidden=bool(doc.hidden),
        )

    def _to_link(self, raw: Any) -> Comic | None:
        if raw is None:
            return None
        try:
            doc = SanityComicLink.model_validate(raw)
        except PydanticValidationError as e:
            raise ContentStoreError(f"Malformed comic document: {e}") from e

        # Navigation only needs identity, title and slug
        return Comic(
            id=doc.id,
            title=doc.title,
            slug=doc.slug.current,
            published_at=doc.published_at,
            image_url='',
        )
