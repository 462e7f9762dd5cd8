"""GitHub client wrapper using requests."""

import logging
from typing import List, Optional, Dict, Any

import requests

from ..changelog.models import PullRequest
from ..exceptions import AuthenticationError, TransientFetchError


PER_PAGE = 100
REQUEST_TIMEOUT = 30


def pull_request_from_api(data: Dict[str, Any], repo_full_name: str) -> PullRequest:
    """Decode one pull request record from the REST API.

    Args:
        data: Pull request object as returned by GitHub
        repo_full_name: `owner/repo` the pull request was listed from

    Returns:
        Typed pull request
    """
    user = data.get("user") or {}
    head_repo = (data.get("head") or {}).get("repo") or {}
    labels = [lb["name"] for lb in (data.get("labels") or []) if isinstance(lb, dict) and "name" in lb]
    return PullRequest(
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        author_login=user.get("login", ""),
        merge_commit_sha=data.get("merge_commit_sha"),
        labels=labels,
        html_url=data.get("html_url") or "",
        # Head repository is null once a fork is deleted.
        head_repo_full_name=head_repo.get("full_name") or repo_full_name,
        repo=repo_full_name.split("/")[-1],
    )


class GitHubClient:
    """Wrapper for the GitHub REST API."""

    def __init__(self, token: str, api_url: str = "https://api.github.com",
                 logger: Optional[logging.Logger] = None):
        """Initialize GitHub client.

        Args:
            token: GitHub access token
            api_url: Base URL of the REST API
            logger: Logger instance
        """
        self.api_url = api_url.rstrip("/")
        self.logger = logger or logging.getLogger(__name__)

        self._session = requests.Session()
        self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        try:
            resp = self._session.request("GET", url, params=params, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise TransientFetchError(f"GET {url}: {e}") from e

        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except (ValueError, AttributeError):
                pass
            rate_limited = resp.headers.get("X-RateLimit-Remaining") == "0"
            if resp.status_code == 401 or (resp.status_code == 403 and not rate_limited):
                raise AuthenticationError(f"{resp.status_code}: {msg}")
            raise TransientFetchError(f"{resp.status_code}: {msg}")
        return resp

    def list_closed_pull_requests(self, owner: str, repo: str) -> List[PullRequest]:
        """List every closed pull request of a repository.

        Follows the `next` link until the last page. Order is the API's.

        Args:
            owner: Repository owner or organization
            repo: Repository name

        Returns:
            List of pull requests
        """
        full_name = f"{owner}/{repo}"
        url: Optional[str] = f"{self.api_url}/repos/{full_name}/pulls"
        params: Optional[Dict[str, Any]] = {"state": "closed", "per_page": PER_PAGE}

        result: List[PullRequest] = []
        page = 0
        while url:
            resp = self._get(url, params)
            try:
                page_data = resp.json()
                result.extend(pull_request_from_api(pr, full_name) for pr in page_data)
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                raise TransientFetchError(f"Unexpected response from {url}: {e}") from e

            page += 1
            self.logger.debug(f"Fetched page {page} of {full_name} ({len(page_data)} pull requests)")

            # The next link already carries the query string.
            url = resp.links.get("next", {}).get("url")
            params = None

        return result
