"""Shared fixtures for ghchangelog tests."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from ghchangelog.changelog.models import PullRequest


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep the developer's token and config files out of the tests."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setattr("ghchangelog.config.settings.find_config_file", lambda: None)


@pytest.fixture
def make_pull():
    def _make(number, labels=(), sha=None, author="octocat", repo="acme/widgets",
              title=None, body=""):
        return PullRequest(
            number=number,
            title=title or f"PR {number}",
            body=body,
            author_login=author,
            merge_commit_sha=sha,
            labels=list(labels),
            html_url=f"https://github.com/{repo}/pull/{number}",
            head_repo_full_name=repo,
            repo=repo.split("/")[-1],
        )
    return _make


def api_pull(number, labels=(), sha=None, author="octocat", repo="acme/widgets", body="Body"):
    """Pull request payload shaped like the REST API's."""
    return {
        "number": number,
        "title": f"PR {number}",
        "body": body,
        "user": {"login": author},
        "merge_commit_sha": sha,
        "labels": [{"name": name} for name in labels],
        "html_url": f"https://github.com/{repo}/pull/{number}",
        "head": {"ref": f"branch-{number}", "repo": {"full_name": repo}},
        "base": {"ref": "main", "repo": {"full_name": repo}},
    }


def api_response(data, status_code=200, next_url=None, headers=None):
    """Mock requests.Response for one page."""
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = data
    resp.text = ""
    resp.reason = ""
    resp.headers = headers or {}
    resp.links = {"next": {"url": next_url, "rel": "next"}} if next_url else {}
    return resp
