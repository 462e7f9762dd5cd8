"""Typed records flowing through the changelog pipeline."""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class Section(str, Enum):
    """Changelog section a pull request is classified into."""

    BREAKING = "Breaking"
    ADDED = "Added"
    FIXED = "Fixed"
    CHANGED = "Changed"
    UNCLASSIFIED = "Unclassified"


class PullRequest(BaseModel):
    """A closed pull request, decoded from the GitHub API."""

    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    body: str = ""
    author_login: str = ""
    merge_commit_sha: Optional[str] = None
    labels: List[str] = []
    html_url: str = ""
    head_repo_full_name: str
    repo: str

    @property
    def key(self) -> Tuple[str, int]:
        """Identity of the pull request across aggregated repositories."""
        return (self.head_repo_full_name, self.number)

    @property
    def reference(self) -> str:
        return f"{self.repo}#{self.number}"


class ChangelogEntry(BaseModel):
    """A pull request in range together with its classification."""

    model_config = ConfigDict(frozen=True)

    pull: PullRequest
    section: Section
    changelog: bool = False
    breaking: bool = False


class RepoChanges(BaseModel):
    """Selected entries and their distinct authors."""

    entries: List[ChangelogEntry] = []
    contributors: List[str] = []
