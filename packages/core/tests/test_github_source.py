"""Tests for the PyGithub-backed run source."""

import types
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests
from github import GithubException

from lastgreen_core.errors import ConfigurationError, RetrievalError
from lastgreen_core.models import JobRecord, RunScope
from lastgreen_core.sources.github import GitHubRunSource, get_repo


def _run(run_id, sha, created_hour, conclusion="success"):
    return types.SimpleNamespace(
        id=run_id,
        head_sha=sha,
        status="completed",
        conclusion=conclusion,
        name="CI",
        workflow_id=11,
        created_at=datetime(2026, 1, 1, created_hour, tzinfo=timezone.utc),
        html_url=f"https://github.com/o/r/actions/runs/{run_id}",
    )


def _job(name, conclusion="success"):
    return types.SimpleNamespace(id=100, run_id=7, name=name, status="completed", conclusion=conclusion)


class TestListRuns:
    def test_repository_runs_filtered_by_branch_and_status(self):
        repo = MagicMock()
        repo.get_workflow_runs.return_value.get_page.return_value = [_run(2, "b", 2), _run(1, "a", 1)]

        runs = GitHubRunSource(repo).list_runs(RunScope(branch="main", status="success"))

        repo.get_workflow_runs.assert_called_once_with(branch="main", status="success")
        repo.get_workflow_runs.return_value.get_page.assert_called_once_with(0)
        repo.get_workflow.assert_not_called()
        assert [r.commit_id for r in runs] == ["b", "a"]
        assert runs[0].id == 2
        assert runs[0].conclusion == "success"
        assert runs[0].url.endswith("/runs/2")

    def test_no_status_filter_omits_status(self):
        repo = MagicMock()
        repo.get_workflow_runs.return_value.get_page.return_value = []

        GitHubRunSource(repo).list_runs(RunScope(branch="dev"))

        repo.get_workflow_runs.assert_called_once_with(branch="dev")

    def test_workflow_scope_uses_workflow_runs(self):
        repo = MagicMock()
        workflow = repo.get_workflow.return_value
        workflow.get_runs.return_value.get_page.return_value = [_run(5, "e", 5)]

        runs = GitHubRunSource(repo).list_runs(RunScope(branch="main", workflow_id="ci.yml", page=3))

        repo.get_workflow.assert_called_once_with("ci.yml")
        workflow.get_runs.assert_called_once_with(branch="main")
        workflow.get_runs.return_value.get_page.assert_called_once_with(2)
        repo.get_workflow_runs.assert_not_called()
        assert [r.id for r in runs] == [5]

    def test_sorts_page_newest_first(self):
        repo = MagicMock()
        repo.get_workflow_runs.return_value.get_page.return_value = [_run(1, "a", 1), _run(3, "c", 3), _run(2, "b", 2)]

        runs = GitHubRunSource(repo).list_runs(RunScope(branch="main"))

        assert [r.id for r in runs] == [3, 2, 1]

    def test_truncates_to_page_size(self):
        repo = MagicMock()
        repo.get_workflow_runs.return_value.get_page.return_value = [_run(3, "c", 3), _run(2, "b", 2), _run(1, "a", 1)]

        runs = GitHubRunSource(repo).list_runs(RunScope(branch="main", page_size=2))

        assert [r.id for r in runs] == [3, 2]

    def test_small_page_size_sliced_from_full_page(self):
        repo = MagicMock()
        api_page = [_run(1000 - i, f"sha{i}", 0) for i in range(100)]
        repo.get_workflow_runs.return_value.get_page.return_value = api_page

        runs = GitHubRunSource(repo).list_runs(RunScope(branch="main", page=3, page_size=20))

        repo.get_workflow_runs.return_value.get_page.assert_called_once_with(0)
        assert [r.commit_id for r in runs] == [f"sha{i}" for i in range(40, 60)]

    def test_small_page_spanning_two_api_pages(self):
        repo = MagicMock()
        api_pages = {
            0: [_run(1000 - i, f"sha{i}", 0) for i in range(100)],
            1: [_run(900 - i, f"sha{100 + i}", 0) for i in range(100)],
        }
        repo.get_workflow_runs.return_value.get_page.side_effect = api_pages.__getitem__

        runs = GitHubRunSource(repo).list_runs(RunScope(branch="main", page=4, page_size=30))

        assert [r.commit_id for r in runs] == [f"sha{i}" for i in range(90, 120)]

    def test_api_error_wrapped(self):
        repo = MagicMock()
        error = GithubException(401, {"message": "Bad credentials"}, None)
        repo.get_workflow_runs.return_value.get_page.side_effect = error

        with pytest.raises(RetrievalError, match="Error getting workflow runs") as excinfo:
            GitHubRunSource(repo).list_runs(RunScope(branch="main"))
        assert excinfo.value.__cause__ is error

    def test_unknown_workflow_wrapped(self):
        repo = MagicMock()
        repo.get_workflow.side_effect = GithubException(404, {"message": "Not Found"}, None)

        with pytest.raises(RetrievalError, match="Not Found"):
            GitHubRunSource(repo).list_runs(RunScope(branch="main", workflow_id="missing.yml"))

    def test_network_error_wrapped(self):
        repo = MagicMock()
        repo.get_workflow_runs.side_effect = requests.ConnectionError("connection reset")

        with pytest.raises(RetrievalError, match="connection reset"):
            GitHubRunSource(repo).list_runs(RunScope(branch="main"))


class TestListJobs:
    def test_returns_all_jobs_of_run(self):
        repo = MagicMock()
        repo.get_workflow_run.return_value.jobs.return_value = [_job("build"), _job("test", "failure")]

        jobs = GitHubRunSource(repo).list_jobs(7)

        repo.get_workflow_run.assert_called_once_with(7)
        assert jobs == [
            JobRecord(name="build", status="completed", conclusion="success", id=100, run_id=7),
            JobRecord(name="test", status="completed", conclusion="failure", id=100, run_id=7),
        ]

    def test_api_error_wrapped(self):
        repo = MagicMock()
        repo.get_workflow_run.side_effect = GithubException(403, {"message": "API rate limit exceeded"}, None)

        with pytest.raises(RetrievalError, match="Error getting workflow run jobs"):
            GitHubRunSource(repo).list_jobs(7)


class TestListCommits:
    def test_returns_shas_newest_first(self):
        repo = MagicMock()
        repo.get_commits.return_value = [types.SimpleNamespace(sha=s) for s in "abc"]

        shas = GitHubRunSource(repo).list_commits("main", 100)

        repo.get_commits.assert_called_once_with(sha="main")
        assert shas == ["a", "b", "c"]

    def test_respects_limit(self):
        repo = MagicMock()
        repo.get_commits.return_value = [types.SimpleNamespace(sha=s) for s in "abc"]

        assert GitHubRunSource(repo).list_commits("main", 2) == ["a", "b"]

    def test_window_reads_past_a_short_client_page(self):
        # PaginatedList iteration crosses request boundaries whatever per_page the client uses.
        repo = MagicMock()
        commits = (types.SimpleNamespace(sha=f"sha{i}") for i in range(160))
        repo.get_commits.return_value = commits

        shas = GitHubRunSource(repo).list_commits("main", 100)

        assert len(shas) == 100
        assert shas[-1] == "sha99"

    def test_api_error_wrapped(self):
        repo = MagicMock()
        repo.get_commits.side_effect = GithubException(409, {"message": "Git Repository is empty."}, None)

        with pytest.raises(RetrievalError, match="commits of branch main"):
            GitHubRunSource(repo).list_commits("main", 100)


class TestGetRepo:
    def test_builds_client_with_full_pages(self, mocker):
        mock_github = mocker.patch("lastgreen_core.sources.github.Github")

        repo = get_repo("owner/repo", token="tok")

        assert mock_github.call_args.kwargs["per_page"] == 100
        mock_github.return_value.get_repo.assert_called_once_with("owner/repo")
        assert repo is mock_github.return_value.get_repo.return_value

    @pytest.mark.parametrize("name", ["", "repo", "a/b/c"])
    def test_malformed_name_raises(self, name):
        with pytest.raises(ConfigurationError, match="owner/name"):
            get_repo(name, token="tok")

    def test_missing_repo_wrapped(self, mocker):
        mock_github = mocker.patch("lastgreen_core.sources.github.Github")
        mock_github.return_value.get_repo.side_effect = GithubException(404, {"message": "Not Found"}, None)

        with pytest.raises(RetrievalError, match="owner/repo"):
            get_repo("owner/repo", token="tok")
