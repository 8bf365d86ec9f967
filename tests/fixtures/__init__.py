"""Upstream API response builders for activity-sync tests."""

from .github_responses import (
    GITHUB_USER_RESPONSE,
    STATS_CODE_FREQUENCY_RESPONSE,
    STATS_COMMIT_ACTIVITY_RESPONSE,
    STATS_CONTRIBUTORS_RESPONSE,
    STATS_PARTICIPATION_RESPONSE,
    STATS_PUNCH_CARD_RESPONSE,
    make_action_run,
    make_action_runs_page,
    make_commit,
    make_pull,
    make_release,
    make_workflow,
    make_workflows_page,
)
from .jira_responses import JIRA_NAMES, make_issue, make_search_page

__all__ = [
    # GitHub
    "GITHUB_USER_RESPONSE",
    "STATS_CODE_FREQUENCY_RESPONSE",
    "STATS_COMMIT_ACTIVITY_RESPONSE",
    "STATS_CONTRIBUTORS_RESPONSE",
    "STATS_PARTICIPATION_RESPONSE",
    "STATS_PUNCH_CARD_RESPONSE",
    "make_action_run",
    "make_action_runs_page",
    "make_commit",
    "make_pull",
    "make_release",
    "make_workflow",
    "make_workflows_page",
    # Jira
    "JIRA_NAMES",
    "make_issue",
    "make_search_page",
]
