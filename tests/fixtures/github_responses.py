"""GitHub API response builders.

Payloads match the GitHub REST API shapes closely enough for the sync
schemas; unknown fields are carried through like the real API's.

See: https://docs.github.com/en/rest
"""

from typing import Any

from tests.conftest import JAN_15_ISO, JAN_16_ISO

API = "https://api.github.com"
OWNER = "octocat"
REPO = "hello-world"
REPO_PATH = f"/repos/{OWNER}/{REPO}"

GITHUB_USER_RESPONSE = {
    "login": "testuser",
    "id": 12345,
    "type": "User",
}


# -----------------------------------------------------------------------------
# Lists
# -----------------------------------------------------------------------------
def make_pull(number: int, *, updated_at: str = JAN_16_ISO, **overrides: Any) -> dict[str, Any]:
    pull = {
        "id": 1_000_000 + number,
        "number": number,
        "html_url": f"https://github.com/{OWNER}/{REPO}/pull/{number}",
        "commits_url": f"{API}{REPO_PATH}/pulls/{number}/commits",
        "state": "open",
        "title": f"Pull #{number}",
        "user": GITHUB_USER_RESPONSE,
        "created_at": JAN_15_ISO,
        "updated_at": updated_at,
        "closed_at": None,
        "merged_at": None,
        "labels": [],
    }
    pull.update(overrides)
    return pull


def make_commit(sha: str, *, message: str = "Fix things", date: str = JAN_15_ISO) -> dict[str, Any]:
    author = {"name": "Test User", "email": "test@example.com", "date": date}
    return {
        "sha": sha,
        "node_id": f"C_{sha}",
        "commit": {"author": author, "committer": author, "message": message},
        "html_url": f"https://github.com/{OWNER}/{REPO}/commit/{sha}",
    }


def make_action_run(run_id: int, *, updated_at: str = JAN_16_ISO) -> dict[str, Any]:
    return {
        "id": run_id,
        "node_id": f"WFR_{run_id}",
        "html_url": f"https://github.com/{OWNER}/{REPO}/actions/runs/{run_id}",
        "status": "completed",
        "conclusion": "success",
        "head_branch": "main",
        "path": ".github/workflows/ci.yml",
        "created_at": JAN_15_ISO,
        "updated_at": updated_at,
    }


def make_action_runs_page(*runs: dict[str, Any], total_count: int | None = None) -> dict[str, Any]:
    return {"total_count": len(runs) if total_count is None else total_count, "workflow_runs": list(runs)}


def make_workflow(workflow_id: int, name: str = "CI") -> dict[str, Any]:
    return {
        "id": workflow_id,
        "node_id": f"W_{workflow_id}",
        "name": name,
        "path": f".github/workflows/{name.lower()}.yml",
        "state": "active",
    }


def make_workflows_page(*workflows: dict[str, Any]) -> dict[str, Any]:
    return {"total_count": len(workflows), "workflows": list(workflows)}


def make_release(release_id: int, *, created_at: str = JAN_16_ISO) -> dict[str, Any]:
    return {
        "id": release_id,
        "html_url": f"https://github.com/{OWNER}/{REPO}/releases/tag/v{release_id}",
        "tag_name": f"v{release_id}",
        "name": f"Release {release_id}",
        "draft": False,
        "prerelease": False,
        "created_at": created_at,
        "published_at": created_at,
    }


# -----------------------------------------------------------------------------
# Statistics
# -----------------------------------------------------------------------------
STATS_CODE_FREQUENCY_RESPONSE = [
    [1704585600, 120, -30],
    [1705190400, 45, -12],
]

STATS_COMMIT_ACTIVITY_RESPONSE = [
    {"days": [0, 3, 2, 1, 4, 0, 0], "total": 10, "week": 1704585600},
    {"days": [0, 1, 0, 0, 2, 1, 0], "total": 4, "week": 1705190400},
]

STATS_CONTRIBUTORS_RESPONSE = [
    {
        "author": GITHUB_USER_RESPONSE,
        "total": 14,
        "weeks": [{"w": 1704585600, "a": 120, "d": 30, "c": 10}],
    },
    {
        "author": None,
        "total": 1,
        "weeks": [{"w": 1705190400, "a": 2, "d": 0, "c": 1}],
    },
]

STATS_PARTICIPATION_RESPONSE = {
    "all": [0] * 50 + [10, 4],
    "owner": [0] * 50 + [3, 1],
}

STATS_PUNCH_CARD_RESPONSE = [
    [0, 9, 2],
    [1, 14, 5],
    [3, 10, 0],
]
