"""Pydantic schemas for upstream payloads (GitHub REST, Jira REST)."""

from .base import UpstreamModel
from .github import (
    GitHubActionRun,
    GitHubActionRunsPage,
    GitHubActionWorkflow,
    GitHubActionWorkflowsPage,
    GitHubCommit,
    GitHubCommitDetail,
    GitHubContributorWeek,
    GitHubGitAuthor,
    GitHubPull,
    GitHubRelease,
    GitHubStatsCodeFrequency,
    GitHubStatsCommitActivity,
    GitHubStatsContributor,
    GitHubStatsParticipation,
    GitHubStatsPunchCard,
    GitHubUser,
)
from .jira import JiraIssueFields, JiraPaginationFields, JiraSearchIssue, JiraSearchResponse

__all__ = [
    "UpstreamModel",
    # GitHub
    "GitHubActionRun",
    "GitHubActionRunsPage",
    "GitHubActionWorkflow",
    "GitHubActionWorkflowsPage",
    "GitHubCommit",
    "GitHubCommitDetail",
    "GitHubContributorWeek",
    "GitHubGitAuthor",
    "GitHubPull",
    "GitHubRelease",
    "GitHubStatsCodeFrequency",
    "GitHubStatsCommitActivity",
    "GitHubStatsContributor",
    "GitHubStatsParticipation",
    "GitHubStatsPunchCard",
    "GitHubUser",
    # Jira
    "JiraIssueFields",
    "JiraPaginationFields",
    "JiraSearchIssue",
    "JiraSearchResponse",
]
