# domain/model/comic.py

from dataclasses import dataclass
from enum import Enum

COMIC_DOCUMENT_TYPE = 'comicEpisode'


@dataclass(frozen=True)
class Comic:
    """A comic episode in display shape, with its image reference resolved.

    Navigation results (prev/next) carry an empty image_url placeholder.
    """
    id: str
    title: str
    slug: str
    published_at: str
    image_url: str
    alt_text: str | None = None
    transcript: str | None = None
    hidden: bool = False


@dataclass(frozen=True)
class AdjacentComics:
    """Nearest earlier and later episodes relative to a publication time."""
    prev: Comic | None
    next: Comic | None


@dataclass(frozen=True)
class ComicDraft:
    """Fields for a new episode. title and slug are required."""
    title: str
    slug: str
    published_at: str | None = None
    alt_text: str | None = None
    transcript: str | None = None


class Unset(Enum):
    """Marker for a patch field the caller did not send."""
    UNSET = 'unset'


UNSET = Unset.UNSET


@dataclass(frozen=True)
class ComicPatch:
    """Partial update for an episode.

    UNSET leaves a field untouched; any other value, None included, is written.
    """
    title: str | None | Unset = UNSET
    slug: str | None | Unset = UNSET
    published_at: str | None | Unset = UNSET
    alt_text: str | None | Unset = UNSET
    transcript: str | None | Unset = UNSET
    hidden: bool | None | Unset = UNSET
