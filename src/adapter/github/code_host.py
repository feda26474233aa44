"""CodeHostPort implementation for a single repository.

REST is used for issues, pull requests and deployments. GraphQL is used where
REST has no equivalent: listing assignable bot actors, assigning a bot, and
moving a draft PR to ready for review.
"""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from adapter.github.client import GitHubClient
from adapter.github.schemas import (
    GitHubActor,
    GitHubDeployment,
    GitHubDeploymentStatus,
    GitHubIssue,
    GitHubPullRequest,
    GitHubPullRequestNode,
)
from domain.model.errors import CodeHostError
from domain.model.modification import (
    Actor,
    Deployment,
    DeploymentStatus,
    Issue,
    PullRequest,
    PullRequestNode,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)


# ── GraphQL documents ────────────────────────────────────

SUGGESTED_ACTORS_QUERY = """
query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) {
    suggestedActors(capabilities: [CAN_BE_ASSIGNED], first: 20) {
      nodes {
        login
        __typename
        ... on Bot { id }
        ... on User { id }
      }
    }
  }
}
"""

ISSUE_ID_QUERY = """
query($owner: String!, $name: String!, $number: Int!) {
  repository(owner: $owner, name: $name) {
    issue(number: $number) { id }
  }
}
"""

ADD_ASSIGNEES_MUTATION = """
mutation($issueId: ID!, $assigneeIds: [ID!]!) {
  addAssigneesToAssignable(input: { assignableId: $issueId, assigneeIds: $assigneeIds }) {
    assignable { ... on Issue { id } }
  }
}
"""

PULL_REQUEST_NODE_QUERY = """
query($owner: String!, $name: String!, $number: Int!) {
  repository(owner: $owner, name: $name) {
    pullRequest(number: $number) { id isDraft }
  }
}
"""

MARK_READY_MUTATION = """
mutation($pullRequestId: ID!) {
  markPullRequestReadyForReview(input: { pullRequestId: $pullRequestId }) {
    pullRequest { id }
  }
}
"""


def _decode(model: type[ModelT], raw: Any) -> ModelT:
    try:
        return model.model_validate(raw)
    except PydanticValidationError as e:
        raise CodeHostError(f"Unexpected GitHub payload for {model.__name__}: {e}") from e


def _decode_list(model: type[ModelT], raw: Any) -> list[ModelT]:
    if not isinstance(raw, list):
        raise CodeHostError(f"Expected a list of {model.__name__}, got {type(raw).__name__}")
    return [_decode(model, item) for item in raw]


def _dig(data: Any, *path: str) -> Any:
    """Walk a GraphQL `data` object, failing on any missing level."""
    node = data
    for key in path:
        if not isinstance(node, dict) or node.get(key) is None:
            raise CodeHostError(f"GitHub GraphQL response missing {'.'.join(path)}")
        node = node[key]
    return node


def _to_issue(raw: GitHubIssue) -> Issue:
    return Issue(
        number=raw.number,
        html_url=raw.html_url,
        state=raw.state,
        title=raw.title,
        body=raw.body,
        created_at=raw.created_at,
    )


def _to_pull_request(raw: GitHubPullRequest) -> PullRequest:
    return PullRequest(
        number=raw.number,
        html_url=raw.html_url,
        state=raw.state,
        head_ref=raw.head.ref,
        merged=raw.is_merged,
        body=raw.body,
    )


class GitHubCodeHost:
    """CodeHostPort bound to one owner/repo."""

    def __init__(self, client: GitHubClient, owner: str, repo: str):
        self._client = client
        self._owner = owner
        self._repo = repo

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self._owner}/{self._repo}"

    # ── issues ───────────────────────────────────────────

    async def create_issue(self, title: str, body: str, labels: list[str]) -> Issue:
        raw = await self._client.rest(
            'POST', f"{self._repo_path}/issues",
            json={'title': title, 'body': body, 'labels': labels},
        )
        issue = _to_issue(_decode(GitHubIssue, raw))
        logger.info("Created issue", extra={"issueNumber": issue.number})
        return issue

    async def get_issue(self, number: int) -> Issue:
        raw = await self._client.rest('GET', f"{self._repo_path}/issues/{number}")
        return _to_issue(_decode(GitHubIssue, raw))

    async def list_issues(self, label: str, per_page: int = 20) -> list[Issue]:
        raw = await self._client.rest(
            'GET', f"{self._repo_path}/issues",
            params={
                'labels': label,
                'state': 'all',
                'per_page': per_page,
                'sort': 'created',
                'direction': 'desc',
            },
        )
        return [_to_issue(item) for item in _decode_list(GitHubIssue, raw)]

    async def close_issue(self, number: int) -> None:
        await self._client.rest('PATCH', f"{self._repo_path}/issues/{number}", json={'state': 'closed'})
        logger.info("Closed issue", extra={"issueNumber": number})

    # ── pull requests ────────────────────────────────────

    async def list_pull_requests(self, per_page: int = 20) -> list[PullRequest]:
        raw = await self._client.rest(
            'GET', f"{self._repo_path}/pulls",
            params={'state': 'all', 'per_page': per_page},
        )
        return [_to_pull_request(item) for item in _decode_list(GitHubPullRequest, raw)]

    async def close_pull_request(self, number: int) -> None:
        await self._client.rest('PATCH', f"{self._repo_path}/pulls/{number}", json={'state': 'closed'})
        logger.info("Closed pull request", extra={"prNumber": number})

    async def merge_pull_request(self, number: int, merge_method: str = 'squash') -> None:
        await self._client.rest(
            'PUT', f"{self._repo_path}/pulls/{number}/merge",
            json={'merge_method': merge_method},
        )
        logger.info("Merged pull request", extra={"prNumber": number, "mergeMethod": merge_method})

    async def get_pull_request_node(self, number: int) -> PullRequestNode:
        data = await self._client.graphql(
            PULL_REQUEST_NODE_QUERY,
            {'owner': self._owner, 'name': self._repo, 'number': number},
        )
        node = _decode(GitHubPullRequestNode, _dig(data, 'repository', 'pullRequest'))
        return PullRequestNode(id=node.id, is_draft=node.is_draft)

    async def mark_ready_for_review(self, pull_request_id: str) -> None:
        await self._client.graphql(MARK_READY_MUTATION, {'pullRequestId': pull_request_id})

    # ── assignment ───────────────────────────────────────

    async def list_assignable_actors(self) -> list[Actor]:
        data = await self._client.graphql(
            SUGGESTED_ACTORS_QUERY,
            {'owner': self._owner, 'name': self._repo},
        )
        nodes = _dig(data, 'repository', 'suggestedActors', 'nodes')
        actors = _decode_list(GitHubActor, nodes)
        return [Actor(login=a.login, id=a.id, kind=a.typename) for a in actors if a.id]

    async def get_issue_node_id(self, number: int) -> str:
        data = await self._client.graphql(
            ISSUE_ID_QUERY,
            {'owner': self._owner, 'name': self._repo, 'number': number},
        )
        return _dig(data, 'repository', 'issue', 'id')

    async def add_assignees(self, assignable_id: str, actor_ids: list[str]) -> None:
        await self._client.graphql(
            ADD_ASSIGNEES_MUTATION,
            {'issueId': assignable_id, 'assigneeIds': actor_ids},
        )

    # ── deployments ──────────────────────────────────────

    async def list_deployments(self, ref: str, per_page: int = 5) -> list[Deployment]:
        raw = await self._client.rest(
            'GET', f"{self._repo_path}/deployments",
            params={'ref': ref, 'per_page': per_page},
        )
        return [
            Deployment(id=d.id, environment=d.environment, ref=d.ref)
            for d in _decode_list(GitHubDeployment, raw)
        ]

    async def list_deployment_statuses(self, deployment_id: int) -> list[DeploymentStatus]:
        raw = await self._client.rest('GET', f"{self._repo_path}/deployments/{deployment_id}/statuses")
        return [
            DeploymentStatus(state=s.state, environment_url=s.environment_url)
            for s in _decode_list(GitHubDeploymentStatus, raw)
        ]
