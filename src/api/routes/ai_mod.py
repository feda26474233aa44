"""AI site modification routes.

Endpoints:
- POST /api/ai-mod/request: Open a modification issue for the automation bot
- GET /api/ai-mod/list: All modification requests with derived status
- GET /api/ai-mod/status?issue=N: Status of one request
- POST /api/ai-mod/approve: Merge the bot's PR
- POST /api/ai-mod/reject: Close the PR (and optionally the issue)
- POST /api/ai-mod/revise: Replace a request with one carrying extra feedback
- POST /api/ai-mod/revert: Ask the bot to undo a merged PR

Flow:
    Admin → POST /request → issue + bot assignment → Return issueNumber
    Admin → Poll GET /status?issue=N → PR / preview URL appear
    Admin → POST /approve | /reject | /revise
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_code_host, get_preview_pages_project
from api.models import (
    AiModRequestBody,
    ApproveBody,
    ModificationCreatedResponse,
    ModificationStatusResponse,
    ModificationSummaryResponse,
    RejectBody,
    RevertBody,
    ReviseBody,
)
from api.responses import error_response, respond
from domain.model.modification import ModificationCreated
from port.code_host import CodeHostPort
from services import ai_modification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai-mod", tags=["ai-mod"])


def _created(created: ModificationCreated, status: str | None = None) -> dict:
    """Created-issue payload; keys that do not apply to the operation are left out."""
    response = ModificationCreatedResponse.from_created(created, status=status)
    return response.model_dump(by_alias=True, exclude_none=True)


@router.post("/request")
async def request_modification(
    body: AiModRequestBody,
    code_host: CodeHostPort = Depends(get_code_host),
):
    return await respond(
        ai_modification_service.request_modification(body.description, code_host),
        "Failed to create AI modification request",
        lambda created: _created(created, status='pending'),
        status_code=201,
    )


@router.get("/list")
async def list_modifications(
    code_host: CodeHostPort = Depends(get_code_host),
    pages_project: str = Depends(get_preview_pages_project),
):
    return await respond(
        ai_modification_service.list_modifications(code_host, pages_project),
        "Failed to list requests",
        lambda summaries: [ModificationSummaryResponse.from_summary(s) for s in summaries],
    )


@router.get("/status")
async def get_status(
    issue: str | None = None,
    code_host: CodeHostPort = Depends(get_code_host),
    pages_project: str = Depends(get_preview_pages_project),
):
    if not issue or not (issue.isascii() and issue.isdecimal()) or int(issue) == 0:
        return error_response("Issue number is required", 400)

    return await respond(
        ai_modification_service.get_modification_status(int(issue), code_host, pages_project),
        "Failed to get status",
        ModificationStatusResponse.from_report,
    )


@router.post("/approve")
async def approve(body: ApproveBody, code_host: CodeHostPort = Depends(get_code_host)):
    return await respond(
        ai_modification_service.approve_modification(body.pr_number, code_host),
        "Failed to merge PR",
        lambda result: {
            'prNumber': result.pr_number,
            'merged': True,
            'readyForReview': result.ready_for_review.value,
        },
    )


@router.post("/reject")
async def reject(body: RejectBody, code_host: CodeHostPort = Depends(get_code_host)):
    return await respond(
        ai_modification_service.reject_modification(body.pr_number, code_host, issue_number=body.issue_number),
        "Failed to reject changes",
        lambda pr_number: {'prNumber': pr_number, 'closed': True},
    )


@router.post("/revise")
async def revise(body: ReviseBody, code_host: CodeHostPort = Depends(get_code_host)):
    return await respond(
        ai_modification_service.revise_modification(
            body.issue_number,
            body.pr_number,
            body.original_description,
            body.feedback,
            code_host,
        ),
        "Failed to create revision",
        _created,
        status_code=201,
    )


@router.post("/revert")
async def revert(body: RevertBody, code_host: CodeHostPort = Depends(get_code_host)):
    return await respond(
        ai_modification_service.revert_modification(body.pr_number, body.description, code_host),
        "Failed to create revert request",
        _created,
        status_code=201,
    )
