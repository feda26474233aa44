# domain/model/modification.py

"""Modification requests: issues worked on by the automation bot and the
pull requests it opens.

The platform offers no structured link between an issue and the PR that
addresses it, so linkage and status are inferred from naming conventions:
branch names, "Fixes #N" style PR bodies and issue title prefixes.
"""

import re
from dataclasses import dataclass
from enum import Enum

MODIFICATION_LABEL = 'ai-modification'
AUTOMATION_BOT_LOGIN = 'copilot-swe-agent'
AUTOMATION_BOT_KIND = 'Bot'

TITLE_PREFIX = '[AI]'
REVISION_PREFIX = 'Revision:'
REVERT_PREFIX = 'Revert:'
REPLACES_MARKER = 'This replaces issue #'

PREVIEW_SLUG_MAX_LENGTH = 28

_TITLE_PREFIX_RE = re.compile(r'^\[AI\]\s*')
_KIND_PREFIX_RE = re.compile(r'^(Revision|Revert):\s*')


class ModificationStatus(str, Enum):
    """Derived display status of a modification request."""
    PENDING = 'pending'
    PR_CREATED = 'pr_created'
    PREVIEW_READY = 'preview_ready'
    MERGED = 'merged'
    DISCARDED = 'discarded'
    REPLACED = 'replaced'


class AssignmentOutcome(str, Enum):
    """Result of the best-effort bot assignment that follows issue creation."""
    ASSIGNED = 'assigned'
    BOT_UNAVAILABLE = 'bot_unavailable'
    FAILED = 'failed'


class ReadyForReviewOutcome(str, Enum):
    """Result of the best-effort draft-to-ready transition before a merge."""
    ALREADY_READY = 'already_ready'
    MARKED_READY = 'marked_ready'
    FAILED = 'failed'


class PreviewSource(str, Enum):
    DEPLOYMENT = 'deployment'
    FALLBACK = 'fallback'


# ── Platform records ─────────────────────────────────────


@dataclass(frozen=True)
class Issue:
    number: int
    html_url: str
    state: str
    title: str = ''
    body: str | None = None
    created_at: str | None = None

    @property
    def is_closed(self) -> bool:
        return self.state == 'closed'


@dataclass(frozen=True)
class PullRequest:
    number: int
    html_url: str
    state: str
    head_ref: str
    merged: bool = False
    body: str | None = None

    @property
    def is_open(self) -> bool:
        return self.state == 'open'

    @property
    def display_state(self) -> str:
        return 'merged' if self.merged else self.state


@dataclass(frozen=True)
class PullRequestNode:
    """GraphQL view of a pull request, used for the draft check."""
    id: str
    is_draft: bool


@dataclass(frozen=True)
class Actor:
    """An account that can be assigned to issues."""
    login: str
    id: str
    kind: str

    @property
    def is_automation_bot(self) -> bool:
        return self.login == AUTOMATION_BOT_LOGIN and self.kind == AUTOMATION_BOT_KIND


@dataclass(frozen=True)
class Deployment:
    id: int
    environment: str
    ref: str


@dataclass(frozen=True)
class DeploymentStatus:
    state: str
    environment_url: str | None = None


# ── Workflow results ─────────────────────────────────────


@dataclass(frozen=True)
class PreviewUrl:
    url: str
    source: PreviewSource


@dataclass(frozen=True)
class ModificationCreated:
    """A newly opened modification issue and the outcome of bot assignment."""
    issue: Issue
    assignment: AssignmentOutcome
    replaced_issue: int | None = None

    @property
    def copilot_assigned(self) -> bool:
        return self.assignment == AssignmentOutcome.ASSIGNED


@dataclass(frozen=True)
class ModificationStatusReport:
    issue_number: int
    issue_state: str
    pull_request: PullRequest | None
    preview: PreviewUrl | None
    status: ModificationStatus

    @property
    def pr_state(self) -> str:
        if self.pull_request is None:
            return 'not_found'
        return self.pull_request.display_state


@dataclass(frozen=True)
class ModificationSummary:
    """One row of the modification request listing."""
    issue: Issue
    description: str
    is_revision: bool
    is_revert: bool
    pull_request: PullRequest | None
    preview: PreviewUrl | None
    status: ModificationStatus


@dataclass(frozen=True)
class MergeResult:
    pr_number: int
    ready_for_review: ReadyForReviewOutcome


# ── Inference rules ──────────────────────────────────────


def references_issue(pr: PullRequest, issue_number: int) -> bool:
    """True when the PR's branch name embeds the issue number or its body
    says it fixes/closes/resolves the issue."""
    number = str(issue_number)
    if number in pr.head_ref or f"issue-{number}" in pr.head_ref:
        return True
    if pr.body:
        pattern = re.compile(rf"(fixes|closes|resolves)\s+.*#{number}\b", re.IGNORECASE)
        if pattern.search(pr.body):
            return True
    return False


def find_linked_pull_request(issue_number: int, pull_requests: list[PullRequest]) -> PullRequest | None:
    """First PR in list order that references the issue."""
    for pr in pull_requests:
        if references_issue(pr, issue_number):
            return pr
    return None


def parse_title(title: str) -> tuple[str, bool, bool]:
    """Split an issue title into (description, is_revision, is_revert).

    The [AI] prefix is stripped first, then a Revision:/Revert: prefix.
    """
    description = _TITLE_PREFIX_RE.sub('', title, count=1)
    is_revision = description.startswith(REVISION_PREFIX)
    is_revert = description.startswith(REVERT_PREFIX)
    description = _KIND_PREFIX_RE.sub('', description, count=1)
    return description, is_revision, is_revert


def is_replaced(issue: Issue) -> bool:
    return REPLACES_MARKER in (issue.body or '') and issue.is_closed


def branch_preview_slug(branch: str, max_length: int = PREVIEW_SLUG_MAX_LENGTH) -> str:
    """Subdomain-safe form of a branch name: slashes to dashes, lowercased, truncated."""
    slug = branch.replace('/', '-').lower()
    return slug[:max_length]


def fallback_preview_url(branch: str, pages_project: str) -> str:
    # Guessed branch-to-subdomain convention of the preview host
    return f"https://{branch_preview_slug(branch)}.{pages_project}.pages.dev"


def status_for_pull_request(pr: PullRequest | None, preview: PreviewUrl | None) -> ModificationStatus:
    """Status derived from the linked PR alone."""
    if pr is None:
        return ModificationStatus.PENDING
    if pr.merged:
        return ModificationStatus.MERGED
    if preview is not None:
        return ModificationStatus.PREVIEW_READY
    return ModificationStatus.PR_CREATED


def classify_request(
    issue: Issue,
    pr: PullRequest | None,
    preview: PreviewUrl | None,
) -> ModificationStatus:
    """Listing status: replaced and discarded take priority over the PR status."""
    if is_replaced(issue):
        return ModificationStatus.REPLACED
    if pr is not None and pr.state == 'closed' and not pr.merged:
        return ModificationStatus.DISCARDED
    return status_for_pull_request(pr, preview)


def truncate(text: str, limit: int) -> str:
    return text[:limit] + ('...' if len(text) > limit else '')
