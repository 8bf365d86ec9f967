"""Tests for the GitHub resource fetchers.

Responses are routed by URL path on a CannedResponses transport; backoff
sleeps are patched out.
"""

from unittest.mock import AsyncMock, patch

import pytest

from activity_sync.fetching import FetchContext, UnexpectedResponseError
from activity_sync.github import fetchers
from activity_sync.github.rest_spec import GitHubRestSpec
from activity_sync.schemas.github import GitHubPull
from tests.conftest import JAN_10_ISO, JAN_12_ISO, JAN_15, JAN_16_ISO, json_response, link_next
from tests.fixtures import (
    STATS_CODE_FREQUENCY_RESPONSE,
    STATS_CONTRIBUTORS_RESPONSE,
    STATS_PARTICIPATION_RESPONSE,
    make_action_run,
    make_action_runs_page,
    make_commit,
    make_pull,
    make_release,
    make_workflow,
    make_workflows_page,
)
from tests.fixtures.github_responses import API, OWNER, REPO, REPO_PATH


@pytest.fixture(autouse=True)
def no_sleep():
    with patch(
        "activity_sync.fetching.executor.cancellable_sleep", new_callable=AsyncMock
    ) as mock:
        yield mock


@pytest.fixture
def context(transport):
    return FetchContext(transport=transport)


async def _collect(iterator):
    return [item async for item in iterator]


# -----------------------------------------------------------------------------
# Pulls
# -----------------------------------------------------------------------------
class TestFetchPulls:
    """Tests for fetch_pulls."""

    async def test_requests_all_pulls_by_update_time(self, transport, context):
        transport.route(f"{REPO_PATH}/pulls", json_response([make_pull(1)]))

        pulls = await _collect(fetchers.fetch_pulls(OWNER, REPO, token="ghp_test", context=context))

        assert [p.number for p in pulls] == [1]
        request = transport.requests[0]
        assert dict(request.url.params) == {"state": "all", "sort": "updated", "direction": "desc"}
        assert request.headers["authorization"] == "Bearer ghp_test"
        assert request.headers["accept"] == "application/vnd.github+json"

    async def test_follows_pages(self, transport, context):
        transport.route(
            f"{REPO_PATH}/pulls",
            json_response([make_pull(3), make_pull(2)], headers=link_next(f"{API}{REPO_PATH}/pulls?page=2")),
            json_response([make_pull(1)]),
        )

        pulls = await _collect(fetchers.fetch_pulls(OWNER, REPO, context=context))

        assert [p.number for p in pulls] == [3, 2, 1]
        assert len(transport.requests) == 2
        assert "authorization" not in transport.requests[0].headers

    async def test_stops_at_first_pull_older_than_window(self, transport, context):
        """The list is ordered by update time, so nothing after it is fetched."""
        transport.route(
            f"{REPO_PATH}/pulls",
            json_response(
                [make_pull(3, updated_at=JAN_16_ISO), make_pull(2, updated_at=JAN_12_ISO), make_pull(1)],
                headers=link_next(f"{API}{REPO_PATH}/pulls?page=2"),
            ),
        )

        pulls = await _collect(fetchers.fetch_pulls(OWNER, REPO, newer_than=JAN_15, context=context))

        assert [p.number for p in pulls] == [3]
        assert len(transport.requests) == 1

    async def test_error_status_raises(self, transport, context):
        transport.route(f"{REPO_PATH}/pulls", json_response({"message": "Not Found"}, 404))

        with pytest.raises(UnexpectedResponseError, match="404 Not Found") as exc_info:
            await _collect(fetchers.fetch_pulls(OWNER, REPO, context=context))

        assert exc_info.value.response.status_code == 404
        assert len(transport.requests) == 1


class TestFetchPullCommits:
    """Tests for fetch_pull_commits."""

    async def test_uses_commits_url(self, transport, context):
        pull = GitHubPull.model_validate(make_pull(7))
        transport.route(f"{REPO_PATH}/pulls/7/commits", json_response([make_commit("a"), make_commit("b")]))

        commits = await _collect(fetchers.fetch_pull_commits(pull, context=context))

        assert [c.sha for c in commits] == ["a", "b"]


class TestFetchCommits:
    """Tests for fetch_commits."""

    async def test_since_parameter(self, transport, context):
        transport.route(f"{REPO_PATH}/commits", json_response([make_commit("abc")]))

        await _collect(fetchers.fetch_commits(OWNER, REPO, newer_than=JAN_15, context=context))

        assert transport.requests[0].url.params["since"] == "2024-01-15T10:00:00Z"

    async def test_no_since_for_full_sync(self, transport, context):
        transport.route(f"{REPO_PATH}/commits", json_response([]))

        commits = await _collect(fetchers.fetch_commits(OWNER, REPO, context=context))

        assert commits == []
        assert "since" not in transport.requests[0].url.params


# -----------------------------------------------------------------------------
# Actions and releases
# -----------------------------------------------------------------------------
class TestFetchActionRuns:
    """Tests for fetch_action_runs."""

    async def test_unwraps_pages_and_stops_at_window(self, transport, context):
        transport.route(
            f"{REPO_PATH}/actions/runs",
            json_response(
                make_action_runs_page(make_action_run(30), total_count=3),
                headers=link_next(f"{API}{REPO_PATH}/actions/runs?page=2"),
            ),
            json_response(
                make_action_runs_page(
                    make_action_run(20), make_action_run(10, updated_at=JAN_10_ISO), total_count=3
                )
            ),
        )

        runs = await _collect(fetchers.fetch_action_runs(OWNER, REPO, newer_than=JAN_15, context=context))

        assert [r.id for r in runs] == [30, 20]
        assert transport.requests[0].url.params["per_page"] == "50"

    def test_page_cap_is_raised_for_runs(self):
        assert fetchers.ACTION_RUNS_MAX_PAGES > FetchContext().max_pages


class TestFetchActionWorkflows:
    """Tests for fetch_action_workflows."""

    async def test_unwraps_workflows(self, transport, context):
        transport.route(
            f"{REPO_PATH}/actions/workflows",
            json_response(make_workflows_page(make_workflow(1, "CI"), make_workflow(2, "Release"))),
        )

        workflows = await _collect(fetchers.fetch_action_workflows(OWNER, REPO, context=context))

        assert [w.name for w in workflows] == ["CI", "Release"]


class TestFetchReleases:
    """Tests for fetch_releases."""

    async def test_stops_at_release_created_before_window(self, transport, context):
        transport.route(
            f"{REPO_PATH}/releases",
            json_response([make_release(3), make_release(2, created_at=JAN_10_ISO), make_release(1)]),
        )

        releases = await _collect(fetchers.fetch_releases(OWNER, REPO, newer_than=JAN_15, context=context))

        assert [r.tag_name for r in releases] == ["v3"]


# -----------------------------------------------------------------------------
# Statistics
# -----------------------------------------------------------------------------
class TestFetchStats:
    """Tests for the statistics fetchers."""

    async def test_waits_out_202_while_computing(self, transport, context, no_sleep):
        transport.route(
            f"{REPO_PATH}/stats/contributors",
            json_response({}, 202),
            json_response({}, 202),
            json_response(STATS_CONTRIBUTORS_RESPONSE),
        )

        contributors = await _collect(fetchers.fetch_stats_contributors(OWNER, REPO, context=context))

        assert [c.total for c in contributors] == [14, 1]
        assert contributors[1].author is None
        assert len(transport.requests) == 3
        assert no_sleep.await_count == 2
        for call in no_sleep.await_args_list:
            assert 0.5 <= call.args[0] <= 9

    async def test_422_is_terminal(self, transport, context):
        transport.route(
            f"{REPO_PATH}/stats/contributors",
            json_response({"message": "too large to compute"}, 422),
        )

        with pytest.raises(UnexpectedResponseError, match="422"):
            await _collect(fetchers.fetch_stats_contributors(OWNER, REPO, context=context))

        assert len(transport.requests) == 1

    async def test_rows(self, transport, context):
        transport.route(f"{REPO_PATH}/stats/code_frequency", json_response(STATS_CODE_FREQUENCY_RESPONSE))

        rows = await _collect(fetchers.fetch_stats_code_frequency(OWNER, REPO, context=context))

        assert rows == STATS_CODE_FREQUENCY_RESPONSE

    async def test_participation_is_single_element(self, transport, context):
        transport.route(f"{REPO_PATH}/stats/participation", json_response(STATS_PARTICIPATION_RESPONSE))

        elements = await _collect(fetchers.fetch_stats_participation(OWNER, REPO, context=context))

        assert len(elements) == 1
        assert elements[0].all[-1] == 4

    async def test_custom_base_url(self, transport):
        transport.route("/api/v3/repos/octocat/hello-world/stats/punch_card", json_response([[0, 9, 2]]))
        spec = GitHubRestSpec("https://github.example.com/api/v3/")

        rows = await _collect(
            fetchers.fetch_stats_punch_card(OWNER, REPO, context=FetchContext(transport=transport), spec=spec)
        )

        assert rows == [[0, 9, 2]]
        assert str(transport.requests[0].url) == (
            "https://github.example.com/api/v3/repos/octocat/hello-world/stats/punch_card"
        )
