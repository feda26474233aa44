"""Pydantic models for API request/response."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from domain.model.comic import Comic
from domain.model.modification import (
    ModificationCreated,
    ModificationStatusReport,
    ModificationSummary,
)


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, as the admin panel sends them."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Comic requests ───────────────────────────────────────


class ComicBody(CamelModel):
    """The `json` form field of a create request."""
    title: Optional[str] = None
    slug: Optional[str] = None
    published_at: Optional[str] = Field(None, description="ISO datetime, defaults to now")
    alt_text: Optional[str] = None
    transcript: Optional[str] = None


class PatchComicBody(CamelModel):
    """Partial update; omitted fields are left untouched, explicit nulls are written."""
    title: Optional[str] = None
    slug: Optional[str] = None
    published_at: Optional[str] = None
    alt_text: Optional[str] = None
    transcript: Optional[str] = None
    hidden: Optional[bool] = None


# ── Comic responses ──────────────────────────────────────


class SlugResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = Field('slug', alias='_type')
    current: str


class ComicResponse(CamelModel):
    """Episode in display shape, with the image resolved to a URL."""
    id: str = Field(..., alias='_id')
    type: str = Field('comicEpisode', alias='_type')
    title: str
    slug: SlugResponse
    published_at: str
    image_url: str
    alt_text: Optional[str] = None
    transcript: Optional[str] = None
    hidden: bool = False

    @classmethod
    def from_comic(cls, comic: Comic) -> "ComicResponse":
        return cls(
            id=comic.id,
            title=comic.title,
            slug=SlugResponse(current=comic.slug),
            published_at=comic.published_at,
            image_url=comic.image_url,
            alt_text=comic.alt_text,
            transcript=comic.transcript,
            hidden=comic.hidden,
        )


class ComicPageResponse(CamelModel):
    """An episode with its prev/next navigation links."""
    comic: ComicResponse
    prev: Optional[ComicResponse] = None
    next: Optional[ComicResponse] = None


# ── AI modification requests ─────────────────────────────


class AiModRequestBody(CamelModel):
    description: Optional[str] = None


class ApproveBody(CamelModel):
    pr_number: Optional[int] = None


class RejectBody(CamelModel):
    pr_number: Optional[int] = None
    issue_number: Optional[int] = None


class ReviseBody(CamelModel):
    issue_number: Optional[int] = None
    pr_number: Optional[int] = None
    original_description: Optional[str] = None
    feedback: Optional[str] = None


class RevertBody(CamelModel):
    pr_number: Optional[int] = None
    description: Optional[str] = None


# ── AI modification responses ────────────────────────────


class ModificationCreatedResponse(CamelModel):
    issue_number: int
    issue_url: str
    copilot_assigned: bool
    assignment: str = Field(..., description="assigned, bot_unavailable or failed")
    status: Optional[str] = None
    replaced_issue: Optional[int] = None

    @classmethod
    def from_created(cls, created: ModificationCreated, status: Optional[str] = None) -> "ModificationCreatedResponse":
        return cls(
            issue_number=created.issue.number,
            issue_url=created.issue.html_url,
            copilot_assigned=created.copilot_assigned,
            assignment=created.assignment.value,
            status=status,
            replaced_issue=created.replaced_issue,
        )


class ModificationStatusResponse(CamelModel):
    issue_number: int
    issue_state: str
    pr_number: Optional[int] = None
    pr_url: Optional[str] = None
    pr_state: str
    preview_url: Optional[str] = None
    preview_source: Optional[str] = None
    status: str

    @classmethod
    def from_report(cls, report: ModificationStatusReport) -> "ModificationStatusResponse":
        pr = report.pull_request
        return cls(
            issue_number=report.issue_number,
            issue_state=report.issue_state,
            pr_number=pr.number if pr else None,
            pr_url=pr.html_url if pr else None,
            pr_state=report.pr_state,
            preview_url=report.preview.url if report.preview else None,
            preview_source=report.preview.source.value if report.preview else None,
            status=report.status.value,
        )


class ModificationSummaryResponse(CamelModel):
    issue_number: int
    issue_url: str
    issue_state: str
    description: str
    created_at: Optional[str] = None
    pr_number: Optional[int] = None
    pr_url: Optional[str] = None
    pr_state: Optional[str] = None
    preview_url: Optional[str] = None
    status: str
    is_revision: bool
    is_revert: bool

    @classmethod
    def from_summary(cls, summary: ModificationSummary) -> "ModificationSummaryResponse":
        pr = summary.pull_request
        return cls(
            issue_number=summary.issue.number,
            issue_url=summary.issue.html_url,
            issue_state=summary.issue.state,
            description=summary.description,
            created_at=summary.issue.created_at,
            pr_number=pr.number if pr else None,
            pr_url=pr.html_url if pr else None,
            pr_state=pr.display_state if pr else None,
            preview_url=summary.preview.url if summary.preview else None,
            status=summary.status.value,
            is_revision=summary.is_revision,
            is_revert=summary.is_revert,
        )
