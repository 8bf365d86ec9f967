"""Pydantic schemas for the GitHub REST API resources we sync.

Only the fields the sync relies on are declared; everything else is
carried through unvalidated.
See: https://docs.github.com/en/rest
"""

from datetime import datetime

from pydantic import Field

from .base import UpstreamModel


class GitHubUser(UpstreamModel):
    """GitHub user object from API responses."""

    login: str = Field(description="GitHub username")
    id: int = Field(description="GitHub user ID")


class GitHubPull(UpstreamModel):
    """Pull request from GET /repos/{owner}/{repo}/pulls."""

    id: int = Field(description="Pull request ID")
    number: int = Field(description="PR number")
    html_url: str = Field(description="GitHub PR URL")
    commits_url: str = Field(description="API URL listing the PR's commits")
    state: str = Field(description="PR state (open, closed)")
    title: str = Field(description="PR title")
    user: GitHubUser | None = Field(default=None, description="PR author")
    created_at: datetime = Field(description="When PR was created")
    updated_at: datetime = Field(description="Last update timestamp")
    closed_at: datetime | None = Field(default=None, description="When PR was closed")
    merged_at: datetime | None = Field(default=None, description="When PR was merged")


class GitHubGitAuthor(UpstreamModel):
    """Commit author info (from git, not GitHub user)."""

    name: str | None = Field(default=None, description="Author name")
    email: str | None = Field(default=None, description="Author email")
    date: datetime | None = Field(default=None, description="Commit date (UTC)")


class GitHubCommitDetail(UpstreamModel):
    """Nested git commit object."""

    author: GitHubGitAuthor | None = Field(default=None, description="Commit author info")
    committer: GitHubGitAuthor | None = Field(default=None, description="Committer info")
    message: str = Field(description="Commit message")


class GitHubCommit(UpstreamModel):
    """Commit from GET /repos/{owner}/{repo}/commits or a PR's commits_url."""

    sha: str = Field(description="Commit SHA")
    node_id: str = Field(description="GraphQL node ID")
    commit: GitHubCommitDetail = Field(description="Commit details")


class GitHubActionRun(UpstreamModel):
    """Workflow run from GET /repos/{owner}/{repo}/actions/runs."""

    id: int = Field(description="Run ID")
    node_id: str = Field(description="GraphQL node ID")
    html_url: str = Field(description="Run URL")
    status: str | None = Field(default=None, description="queued, in_progress, completed...")
    conclusion: str | None = Field(default=None, description="success, failure...")
    head_branch: str | None = Field(default=None, description="Branch the run was triggered on")
    path: str | None = Field(default=None, description="Workflow file path")
    created_at: datetime = Field(description="When the run was created")
    updated_at: datetime = Field(description="Last update timestamp")


class GitHubActionRunsPage(UpstreamModel):
    """One page of workflow runs."""

    total_count: int
    workflow_runs: list[GitHubActionRun]


class GitHubActionWorkflow(UpstreamModel):
    """Workflow from GET /repos/{owner}/{repo}/actions/workflows."""

    id: int = Field(description="Workflow ID")
    node_id: str = Field(description="GraphQL node ID")
    name: str = Field(description="Workflow name")
    path: str = Field(description="Workflow file path")
    state: str = Field(description="active, disabled_manually...")


class GitHubActionWorkflowsPage(UpstreamModel):
    """One page of workflows."""

    total_count: int
    workflows: list[GitHubActionWorkflow]


class GitHubRelease(UpstreamModel):
    """Release from GET /repos/{owner}/{repo}/releases."""

    id: int = Field(description="Release ID")
    html_url: str = Field(description="Release URL")
    tag_name: str = Field(description="Git tag")
    name: str | None = Field(default=None, description="Release title")
    draft: bool = Field(default=False)
    prerelease: bool = Field(default=False)
    created_at: datetime = Field(description="When the release was created")
    published_at: datetime | None = Field(default=None, description="When it was published")


# ------------------------------------------------------------------------------
# Repository statistics
# ------------------------------------------------------------------------------

GitHubStatsCodeFrequency = list[int]
"""Weekly ``[week_epoch, additions, deletions]``."""

GitHubStatsPunchCard = list[int]
"""``[day (0-6), hour (0-23), commits]``."""


class GitHubStatsCommitActivity(UpstreamModel):
    """Weekly commit activity for the last year."""

    days: list[int] = Field(description="Commits per day, starting on Sunday")
    total: int = Field(description="Commits in the week")
    week: int = Field(description="Start of the week (epoch seconds)")


class GitHubContributorWeek(UpstreamModel):
    """Weekly totals for one contributor."""

    w: int = Field(description="Start of the week (epoch seconds)")
    a: int = Field(description="Additions")
    d: int = Field(description="Deletions")
    c: int = Field(description="Commits")


class GitHubStatsContributor(UpstreamModel):
    """Commit activity of one contributor."""

    author: GitHubUser | None = Field(default=None, description="Contributor")
    total: int = Field(description="Total commits")
    weeks: list[GitHubContributorWeek] = Field(default_factory=list)


class GitHubStatsParticipation(UpstreamModel):
    """Weekly commit counts for the last 52 weeks."""

    all: list[int] = Field(description="Everyone, oldest week first")
    owner: list[int] = Field(description="Repository owner, oldest week first")
