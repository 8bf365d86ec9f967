"""Jira REST API v2 search response builders.

See: https://docs.atlassian.com/software/jira/docs/api/REST/latest/#api/2/search
"""

from typing import Any

JIRA_HOST = "https://jira.example.com"
SEARCH_PATH = "/rest/api/2/search"

JIRA_NAMES = {
    "summary": "Summary",
    "status": "Status",
    "updated": "Updated",
    "customfield_10010": "Story Points",
}


def make_issue(key: str, *, updated: str = "2024-01-16T14:00:00.000+0000") -> dict[str, Any]:
    issue_id = key.split("-")[-1]
    return {
        "id": issue_id,
        "key": key,
        "self": f"{JIRA_HOST}/rest/api/2/issue/{issue_id}",
        "fields": {
            "summary": f"Issue {key}",
            "status": {"name": "In Progress"},
            "created": "2024-01-10T09:00:00.000+0000",
            "updated": updated,
        },
        "changelog": {"startAt": 0, "maxResults": 0, "total": 0, "histories": []},
        "transitions": [],
    }


def make_search_page(
    *issues: dict[str, Any],
    start_at: int = 0,
    max_results: int = 50,
    total: int | None = None,
    names: dict[str, str] | None = None,
) -> dict[str, Any]:
    return {
        "expand": "names,schema",
        "startAt": start_at,
        "maxResults": max_results,
        "total": len(issues) if total is None else total,
        "issues": list(issues),
        "names": JIRA_NAMES if names is None else names,
    }
