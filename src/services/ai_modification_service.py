"""Site changes delegated to the automation bot.

Flow:
    request → issue created (+ best-effort bot assignment)
    bot works on the issue → opens a (draft) PR → preview deployment
    status/list → reconcile issue + PR state into a derived status
    approve / reject / revise / revert → flip issue/PR state

Nothing is cached: every read reconstructs state from the platform.
"""

import asyncio
import logging

from domain.model.errors import CodeHostError, ValidationError
from domain.model.modification import (
    MODIFICATION_LABEL,
    AssignmentOutcome,
    Issue,
    MergeResult,
    ModificationCreated,
    ModificationStatusReport,
    ModificationSummary,
    PreviewSource,
    PreviewUrl,
    PullRequest,
    ReadyForReviewOutcome,
    classify_request,
    fallback_preview_url,
    find_linked_pull_request,
    is_replaced,
    parse_title,
    status_for_pull_request,
    truncate,
)
from port.code_host import CodeHostPort

logger = logging.getLogger(__name__)

STATUS_PR_WINDOW = 20
LIST_ISSUE_WINDOW = 20
LIST_PR_WINDOW = 30
DEPLOYMENT_WINDOW = 5

REQUEST_BODY_TEMPLATE = """## Site Modification Request

{description}

---
*This issue was created from the admin panel. Copilot will work on this and create a PR.*
"""

REVISION_BODY_TEMPLATE = """## Site Modification Request

{original_description}

### Additional Changes Requested:
{feedback}

---
*This replaces issue #{issue_number}. Copilot will work on this and create a PR.*
"""

REVERT_BODY_TEMPLATE = """## Site Modification Request

Undo the changes from PR #{pr_number}.

Original change: {description}

Please revert the code changes made in that PR to restore the previous behavior.

---
*This is a revert request created from the admin panel. Copilot will work on this and create a PR.*
"""


# ── Shared steps ─────────────────────────────────────────


async def assign_automation_bot(code_host: CodeHostPort, issue_number: int) -> AssignmentOutcome:
    """Assign the automation bot to an issue. Never raises.

    Bot assignment needs the bot to be enabled on the repository; when it is
    not, the issue stays unassigned and can be assigned by hand.
    """
    try:
        actors = await code_host.list_assignable_actors()
        bot = next((actor for actor in actors if actor.is_automation_bot), None)
        if bot is None:
            logger.warning("Automation bot is not assignable", extra={"issueNumber": issue_number})
            return AssignmentOutcome.BOT_UNAVAILABLE

        issue_id = await code_host.get_issue_node_id(issue_number)
        await code_host.add_assignees(issue_id, [bot.id])
    except CodeHostError as e:
        logger.warning(
            "Bot assignment failed",
            extra={"issueNumber": issue_number, "error": str(e)},
        )
        return AssignmentOutcome.FAILED

    logger.info("Automation bot assigned", extra={"issueNumber": issue_number})
    return AssignmentOutcome.ASSIGNED


async def resolve_preview_url(code_host: CodeHostPort, branch: str, pages_project: str) -> PreviewUrl:
    """Preview URL for a branch.

    Prefers the environment URL of a successful deployment; when the lookup
    fails or finds nothing, falls back to the host's branch-subdomain guess.
    """
    try:
        deployments = await code_host.list_deployments(branch, per_page=DEPLOYMENT_WINDOW)
        for deployment in deployments:
            statuses = await code_host.list_deployment_statuses(deployment.id)
            for status in statuses:
                if status.state == 'success' and status.environment_url:
                    return PreviewUrl(url=status.environment_url, source=PreviewSource.DEPLOYMENT)
    except CodeHostError as e:
        logger.warning("Deployment lookup failed", extra={"branch": branch, "error": str(e)})

    return PreviewUrl(url=fallback_preview_url(branch, pages_project), source=PreviewSource.FALLBACK)


async def _open_issue(
    code_host: CodeHostPort,
    title: str,
    body: str,
    replaced_issue: int | None = None,
) -> ModificationCreated:
    issue = await code_host.create_issue(title, body, [MODIFICATION_LABEL])
    assignment = await assign_automation_bot(code_host, issue.number)
    return ModificationCreated(issue=issue, assignment=assignment, replaced_issue=replaced_issue)


def _require_number(value: int | None, message: str) -> int:
    if not value:
        raise ValidationError(message)
    return value


# ── Operations ───────────────────────────────────────────


async def request_modification(description: str | None, code_host: CodeHostPort) -> ModificationCreated:
    """Open a modification issue from a free-text description."""
    if not description or not description.strip():
        raise ValidationError("Description is required")

    created = await _open_issue(
        code_host,
        title=f"[AI] {truncate(description, 60)}",
        body=REQUEST_BODY_TEMPLATE.format(description=description),
    )
    logger.info("Modification requested", extra={
        "issueNumber": created.issue.number,
        "assignment": created.assignment.value,
    })
    return created


async def get_modification_status(
    issue_number: int,
    code_host: CodeHostPort,
    pages_project: str,
) -> ModificationStatusReport:
    issue = await code_host.get_issue(issue_number)
    pull_requests = await code_host.list_pull_requests(per_page=STATUS_PR_WINDOW)

    linked = find_linked_pull_request(issue_number, pull_requests)
    preview = None
    if linked is not None and not linked.merged:
        preview = await resolve_preview_url(code_host, linked.head_ref, pages_project)

    return ModificationStatusReport(
        issue_number=issue_number,
        issue_state=issue.state,
        pull_request=linked,
        preview=preview,
        status=status_for_pull_request(linked, preview),
    )


async def list_modifications(code_host: CodeHostPort, pages_project: str) -> list[ModificationSummary]:
    """All labelled modification requests, newest first, with derived status."""
    issues = await code_host.list_issues(MODIFICATION_LABEL, per_page=LIST_ISSUE_WINDOW)
    pull_requests = await code_host.list_pull_requests(per_page=LIST_PR_WINDOW)

    return list(await asyncio.gather(*(
        _summarize(issue, pull_requests, code_host, pages_project) for issue in issues
    )))


async def _summarize(
    issue: Issue,
    pull_requests: list[PullRequest],
    code_host: CodeHostPort,
    pages_project: str,
) -> ModificationSummary:
    linked = find_linked_pull_request(issue.number, pull_requests)

    preview = None
    if linked is not None and linked.is_open and not linked.merged and not is_replaced(issue):
        preview = await resolve_preview_url(code_host, linked.head_ref, pages_project)

    description, is_revision, is_revert = parse_title(issue.title)
    status = classify_request(issue, linked, preview)
    return ModificationSummary(
        issue=issue,
        description=description,
        is_revision=is_revision,
        is_revert=is_revert,
        pull_request=linked,
        preview=preview,
        status=status,
    )


async def approve_modification(pr_number: int | None, code_host: CodeHostPort) -> MergeResult:
    """Squash-merge a PR, first moving it out of draft when needed."""
    pr_number = _require_number(pr_number, "PR number is required")

    ready = await _mark_ready_if_draft(code_host, pr_number)
    await code_host.merge_pull_request(pr_number, merge_method='squash')

    logger.info("Modification approved", extra={"prNumber": pr_number, "readyForReview": ready.value})
    return MergeResult(pr_number=pr_number, ready_for_review=ready)


async def _mark_ready_if_draft(code_host: CodeHostPort, pr_number: int) -> ReadyForReviewOutcome:
    # The bot opens PRs as drafts, which cannot be merged
    try:
        node = await code_host.get_pull_request_node(pr_number)
        if not node.is_draft:
            return ReadyForReviewOutcome.ALREADY_READY
        await code_host.mark_ready_for_review(node.id)
    except CodeHostError as e:
        logger.warning(
            "Failed to mark PR ready for review, merging anyway",
            extra={"prNumber": pr_number, "error": str(e)},
        )
        return ReadyForReviewOutcome.FAILED
    return ReadyForReviewOutcome.MARKED_READY


async def reject_modification(
    pr_number: int | None,
    code_host: CodeHostPort,
    issue_number: int | None = None,
) -> int:
    """Close the PR, and the issue too when one is given."""
    pr_number = _require_number(pr_number, "PR number is required")

    await code_host.close_pull_request(pr_number)
    if issue_number:
        await code_host.close_issue(issue_number)

    logger.info("Modification rejected", extra={"prNumber": pr_number, "issueNumber": issue_number})
    return pr_number


async def revise_modification(
    issue_number: int | None,
    pr_number: int | None,
    original_description: str | None,
    feedback: str | None,
    code_host: CodeHostPort,
) -> ModificationCreated:
    """Replace an issue/PR pair with a new issue carrying extra feedback."""
    if not issue_number or not pr_number:
        raise ValidationError("Issue number and PR number are required")
    if not feedback or not feedback.strip():
        raise ValidationError("Feedback is required")
    original_description = original_description or ''

    await code_host.close_pull_request(pr_number)
    await code_host.close_issue(issue_number)

    created = await _open_issue(
        code_host,
        title=f"[AI] Revision: {truncate(original_description, 50)}",
        body=REVISION_BODY_TEMPLATE.format(
            original_description=original_description,
            feedback=feedback,
            issue_number=issue_number,
        ),
        replaced_issue=issue_number,
    )
    logger.info("Modification revised", extra={
        "issueNumber": created.issue.number,
        "replacedIssue": issue_number,
    })
    return created


async def revert_modification(
    pr_number: int | None,
    description: str | None,
    code_host: CodeHostPort,
) -> ModificationCreated:
    """Open an issue asking the bot to undo a merged PR."""
    pr_number = _require_number(pr_number, "PR number is required")

    title_text = description[:50] if description else f"PR #{pr_number}"
    created = await _open_issue(
        code_host,
        title=f"[AI] Revert: {title_text}",
        body=REVERT_BODY_TEMPLATE.format(
            pr_number=pr_number,
            description=description or 'No description available',
        ),
    )
    logger.info("Revert requested", extra={"issueNumber": created.issue.number, "prNumber": pr_number})
    return created
