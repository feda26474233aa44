"""Outbound interface for the source-hosting platform."""

from typing import Protocol

from domain.model.modification import (
    Actor,
    Deployment,
    DeploymentStatus,
    Issue,
    PullRequest,
    PullRequestNode,
)


class CodeHostPort(Protocol):
    """Port for issue, pull request and deployment operations.

    Every method raises CodeHostError when the platform answers with a
    non-success response.
    """

    async def create_issue(self, title: str, body: str, labels: list[str]) -> Issue: ...

    async def get_issue(self, number: int) -> Issue: ...

    async def list_issues(self, label: str, per_page: int = 20) -> list[Issue]:
        """Issues with the label in any state, newest first."""
        ...

    async def close_issue(self, number: int) -> None: ...

    async def list_pull_requests(self, per_page: int = 20) -> list[PullRequest]:
        """Most recent pull requests in any state."""
        ...

    async def close_pull_request(self, number: int) -> None: ...

    async def merge_pull_request(self, number: int, merge_method: str = 'squash') -> None: ...

    async def get_pull_request_node(self, number: int) -> PullRequestNode: ...

    async def mark_ready_for_review(self, pull_request_id: str) -> None: ...

    async def list_assignable_actors(self) -> list[Actor]: ...

    async def get_issue_node_id(self, number: int) -> str: ...

    async def add_assignees(self, assignable_id: str, actor_ids: list[str]) -> None: ...

    async def list_deployments(self, ref: str, per_page: int = 5) -> list[Deployment]: ...

    async def list_deployment_statuses(self, deployment_id: int) -> list[DeploymentStatus]: ...
