"""Public read routes used by the site frontend.

Endpoints:
- GET /api/site/latest: Newest visible episode
- GET /api/site/archive: Visible episodes, newest first
- GET /api/site/comics/{slug}: One episode with prev/next navigation

Hidden episodes are never returned here.
"""

import logging

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_comic_reader
from api.models import ComicPageResponse, ComicResponse
from api.responses import respond
from domain.model.comic import Comic
from domain.model.errors import NotFoundError
from port.comic_reader import ComicReader

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/site", tags=["site"])


def _link(comic: Comic | None) -> ComicResponse | None:
    return ComicResponse.from_comic(comic) if comic else None


async def _latest(reader: ComicReader) -> Comic:
    comic = await reader.get_latest_comic()
    if comic is None:
        raise NotFoundError("Comic not found")
    return comic


async def _page(reader: ComicReader, slug: str) -> ComicPageResponse:
    comic = await reader.get_comic_by_slug(slug)
    if comic is None:
        raise NotFoundError("Comic not found")

    adjacent = await reader.get_adjacent_comics(comic.published_at)
    return ComicPageResponse(
        comic=ComicResponse.from_comic(comic),
        prev=_link(adjacent.prev),
        next=_link(adjacent.next),
    )


@router.get("/latest")
async def get_latest(reader: ComicReader = Depends(get_comic_reader)):
    return await respond(_latest(reader), "Failed to fetch comic", ComicResponse.from_comic)


@router.get("/archive")
async def get_archive(
    limit: int = Query(50, ge=1, le=500),
    reader: ComicReader = Depends(get_comic_reader),
):
    return await respond(
        reader.get_archive(limit),
        "Failed to fetch archive",
        lambda comics: [ComicResponse.from_comic(c) for c in comics],
    )


@router.get("/comics/{slug}")
async def get_comic_page(slug: str, reader: ComicReader = Depends(get_comic_reader)):
    """Episode by slug plus the neighbours used for prev/next links."""
    return await respond(_page(reader, slug), "Failed to fetch comic", lambda page: page)
