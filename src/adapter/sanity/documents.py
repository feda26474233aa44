"""Pydantic models for the comic documents returned by GROQ queries.

Raw query results are decoded here so that a document missing a required
field fails loudly instead of flowing on with undefined values.
"""

from pydantic import BaseModel, ConfigDict, Field


class _SanityModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SanitySlug(_SanityModel):
    current: str


class SanityReference(_SanityModel):
    ref: str = Field(..., alias='_ref')


class SanityImage(_SanityModel):
    asset: SanityReference


class SanityComicLink(_SanityModel):
    """Projection used for prev/next navigation."""
    id: str = Field(..., alias='_id')
    title: str
    slug: SanitySlug
    published_at: str = Field(..., alias='publishedAt')


class SanityComicDocument(SanityComicLink):
    """Full comicEpisode projection."""
    type: str = Field('comicEpisode', alias='_type')
    image: SanityImage
    alt_text: str | None = Field(None, alias='altText')
    transcript: str | None = None
    hidden: bool | None = None
