"""In-memory implementation of CodeHostPort for testing."""

from dataclasses import replace

from domain.model.errors import CodeHostError
from domain.model.modification import (
    Actor,
    Deployment,
    DeploymentStatus,
    Issue,
    PullRequest,
    PullRequestNode,
)

COPILOT_BOT = Actor(login='copilot-swe-agent', id='BOT_kgDOC9w8XQ', kind='Bot')


class FakeCodeHost:
    """Fake platform holding issues and PRs in dicts.

    Every call is appended to `calls` as (method_name, args). Set a method
    name in `failing` to make that method raise CodeHostError.
    """

    def __init__(
        self,
        issues: list[Issue] | None = None,
        pull_requests: list[PullRequest] | None = None,
        actors: list[Actor] | None = None,
        deployments: dict[str, list[Deployment]] | None = None,
        deployment_statuses: dict[int, list[DeploymentStatus]] | None = None,
        drafts: set[int] | None = None,
    ):
        self.issues: dict[int, Issue] = {i.number: i for i in issues or []}
        self.pull_requests: list[PullRequest] = list(pull_requests or [])
        self.actors = [COPILOT_BOT] if actors is None else actors
        self.deployments = deployments or {}
        self.deployment_statuses = deployment_statuses or {}
        self.drafts = set(drafts or ())
        self.assignees: dict[str, list[str]] = {}
        self.merged: list[tuple[int, str]] = []
        self.failing: set[str] = set()
        self.calls: list[tuple[str, tuple]] = []
        self._next_issue_number = max(self.issues, default=0) + 1

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, args))
        if name in self.failing:
            raise CodeHostError(f"{name} failed", status_code=500, body='boom')

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    # ── issues ───────────────────────────────────────────

    async def create_issue(self, title: str, body: str, labels: list[str]) -> Issue:
        self._record('create_issue', title, body, labels)
        number = self._next_issue_number
        self._next_issue_number += 1
        issue = Issue(
            number=number,
            html_url=f"https://github.com/owner/repo/issues/{number}",
            state='open',
            title=title,
            body=body,
            created_at='2026-01-01T00:00:00Z',
        )
        self.issues[number] = issue
        return issue

    async def get_issue(self, number: int) -> Issue:
        self._record('get_issue', number)
        if number not in self.issues:
            raise CodeHostError("GitHub API error: 404 Not Found", status_code=404, body='Not Found')
        return self.issues[number]

    async def list_issues(self, label: str, per_page: int = 20) -> list[Issue]:
        self._record('list_issues', label, per_page)
        ordered = sorted(self.issues.values(), key=lambda i: i.number, reverse=True)
        return ordered[:per_page]

    async def close_issue(self, number: int) -> None:
        self._record('close_issue', number)
        if number in self.issues:
            self.issues[number] = replace(self.issues[number], state='closed')

    # ── pull requests ────────────────────────────────────

    async def list_pull_requests(self, per_page: int = 20) -> list[PullRequest]:
        self._record('list_pull_requests', per_page)
        return self.pull_requests[:per_page]

    def _replace_pr(self, number: int, **changes) -> None:
        self.pull_requests = [
            replace(pr, **changes) if pr.number == number else pr
            for pr in self.pull_requests
        ]

    async def close_pull_request(self, number: int) -> None:
        self._record('close_pull_request', number)
        self._replace_pr(number, state='closed')

    async def merge_pull_request(self, number: int, merge_method: str = 'squash') -> None:
        self._record('merge_pull_request', number, merge_method)
        self.merged.append((number, merge_method))
        self._replace_pr(number, state='closed', merged=True)

    async def get_pull_request_node(self, number: int) -> PullRequestNode:
        self._record('get_pull_request_node', number)
        return PullRequestNode(id=f"PR_node_{number}", is_draft=number in self.drafts)

    async def mark_ready_for_review(self, pull_request_id: str) -> None:
        self._record('mark_ready_for_review', pull_request_id)
        self.drafts.discard(int(pull_request_id.rsplit('_', 1)[-1]))

    # ── assignment ───────────────────────────────────────

    async def list_assignable_actors(self) -> list[Actor]:
        self._record('list_assignable_actors')
        return self.actors

    async def get_issue_node_id(self, number: int) -> str:
        self._record('get_issue_node_id', number)
        return f"I_node_{number}"

    async def add_assignees(self, assignable_id: str, actor_ids: list[str]) -> None:
        self._record('add_assignees', assignable_id, actor_ids)
        self.assignees.setdefault(assignable_id, []).extend(actor_ids)

    # ── deployments ──────────────────────────────────────

    async def list_deployments(self, ref: str, per_page: int = 5) -> list[Deployment]:
        self._record('list_deployments', ref, per_page)
        return self.deployments.get(ref, [])[:per_page]

    async def list_deployment_statuses(self, deployment_id: int) -> list[DeploymentStatus]:
        self._record('list_deployment_statuses', deployment_id)
        return self.deployment_statuses.get(deployment_id, [])
