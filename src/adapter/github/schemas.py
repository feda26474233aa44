"""Pydantic models for the GitHub payloads this service reads.

Only the fields we use are declared; extra fields are ignored.
"""

from pydantic import BaseModel, Field


class GitHubIssue(BaseModel):
    number: int
    html_url: str
    state: str
    title: str = ''
    body: str | None = None
    created_at: str | None = None


class GitHubBranchRef(BaseModel):
    ref: str


class GitHubPullRequest(BaseModel):
    number: int
    html_url: str
    state: str
    head: GitHubBranchRef
    body: str | None = None
    merged: bool = False
    merged_at: str | None = None

    @property
    def is_merged(self) -> bool:
        # The list endpoint omits `merged`; a merge timestamp implies it
        return self.merged or self.merged_at is not None


class GitHubDeployment(BaseModel):
    id: int
    environment: str
    ref: str


class GitHubDeploymentStatus(BaseModel):
    state: str
    environment_url: str | None = None


class GitHubActor(BaseModel):
    login: str
    typename: str = Field(..., alias='__typename')
    id: str | None = None


class GitHubPullRequestNode(BaseModel):
    id: str
    is_draft: bool = Field(..., alias='isDraft')
