"""Selection and classification of pull requests in a revision range."""

import logging
from typing import Iterable, List, Optional, Set, Tuple

from .history import rev_list
from .models import ChangelogEntry, PullRequest, RepoChanges, Section
from ..exceptions import ChangelogError


# Evaluated in order, first match wins. Matching is by label substring.
SECTION_RULES: List[Tuple[Section, Tuple[str, ...]]] = [
    (Section.FIXED, ("bug",)),
    (Section.ADDED, ("feature", "enhancement")),
    (Section.BREAKING, ("breaking",)),
    (Section.CHANGED, ("changelog",)),
]

CHANGELOG_MARKER = "changelog"
BREAKING_MARKER = "breaking"


def has_label_containing(labels: Iterable[str], needle: str) -> bool:
    """Check if any label contains `needle`."""
    return any(needle in label for label in labels)


def classify(labels: Iterable[str]) -> Section:
    """Map a pull request's labels to its changelog section.

    Args:
        labels: Label names

    Returns:
        Section of the first rule that matches, or Section.UNCLASSIFIED
    """
    labels = list(labels)
    for section, needles in SECTION_RULES:
        if any(has_label_containing(labels, needle) for needle in needles):
            return section
    return Section.UNCLASSIFIED


def matches_label_filter(pull: PullRequest, label_filter: Optional[Iterable[str]]) -> bool:
    """Check if a pull request passes the label filter.

    Args:
        pull: Pull request to check
        label_filter: Label names to keep, or None to keep everything

    Returns:
        True if the filter is disabled or the PR carries one of its labels
    """
    if label_filter is None:
        return True
    wanted = set(label_filter)
    return any(label in wanted for label in pull.labels)


def build_entry(pull: PullRequest) -> ChangelogEntry:
    return ChangelogEntry(
        pull=pull,
        section=classify(pull.labels),
        changelog=has_label_containing(pull.labels, CHANGELOG_MARKER),
        breaking=has_label_containing(pull.labels, BREAKING_MARKER),
    )


def unique_contributors(entries: Iterable[ChangelogEntry]) -> List[str]:
    """Distinct author logins, in order of first appearance."""
    seen: List[str] = []
    for entry in entries:
        login = entry.pull.author_login
        if login and login not in seen:
            seen.append(login)
    return seen


def select_pulls(pulls: Iterable[PullRequest], commit_hashes: Set[str],
                 label_filter: Optional[Iterable[str]] = None) -> RepoChanges:
    """Keep pull requests merged in range and classify them.

    Args:
        pulls: Closed pull requests of one repository
        commit_hashes: Commits in the revision range
        label_filter: Label names to keep, or None to keep every PR in range

    Returns:
        Classified entries and their authors
    """
    if label_filter is not None:
        label_filter = list(label_filter)

    entries = [
        build_entry(pull)
        for pull in pulls
        if pull.merge_commit_sha
        and pull.merge_commit_sha in commit_hashes
        and matches_label_filter(pull, label_filter)
    ]
    return RepoChanges(entries=entries, contributors=unique_contributors(entries))


def get_pulls_in_range(client, owner: str, repo: str, git_directory: str,
                       from_tag: str, to_tag: str,
                       label_filter: Optional[Iterable[str]] = None) -> RepoChanges:
    """Get the classified pull requests of one repository merged in `from..to`.

    Args:
        client: GitHub client instance
        owner: Repository owner or organization
        repo: Repository name
        git_directory: Git working tree containing both revisions
        from_tag: Start of range (exclusive), a tag or revision
        to_tag: End of range (inclusive), a tag or revision
        label_filter: Label names to keep, or None for no filtering

    Returns:
        Classified entries and their authors

    Raises:
        FetchError: Pull requests could not be listed
        RangeResolutionError: The git range could not be resolved
    """
    logger = logging.getLogger(__name__)

    logger.info(f"--- Getting closed PRs for {owner}:{repo} ---")
    pulls = client.list_closed_pull_requests(owner, repo)
    logger.info(f"Fetched {len(pulls)} closed PRs for {owner}/{repo}")

    logger.info(f"+++ Running git rev-list {from_tag}..{to_tag} in {git_directory} +++")
    commit_hashes = rev_list(git_directory, from_tag, to_tag, log=logger)

    changes = select_pulls(pulls, commit_hashes, label_filter)
    logger.info(f"{len(changes.entries)} PRs of {owner}/{repo} are in range")
    return changes


def merge_changes(all_changes: Iterable[RepoChanges]) -> RepoChanges:
    """Concatenate per-repository results, dropping repeated pull requests.

    The first occurrence of an identity key wins.
    """
    seen = set()
    entries: List[ChangelogEntry] = []
    for changes in all_changes:
        for entry in changes.entries:
            if entry.pull.key in seen:
                continue
            seen.add(entry.pull.key)
            entries.append(entry)
    return RepoChanges(entries=entries, contributors=unique_contributors(entries))


def collect_changes(client, config) -> RepoChanges:
    """Run the pipeline over every configured repository, in order.

    A repository that fails to fetch or resolve contributes nothing; the
    remaining repositories are still processed.

    Args:
        client: GitHub client instance
        config: Run configuration

    Returns:
        Aggregated entries and contributors
    """
    logger = logging.getLogger(__name__)

    results = []
    for repo in config.repos:
        try:
            changes = get_pulls_in_range(
                client, config.owner, repo, config.git_directory_for(repo),
                config.from_tag, config.to_tag, config.active_label_filter
            )
        except ChangelogError as e:
            logger.error(f"Skipping {config.owner}/{repo}: {e}")
            continue
        results.append(changes)

    return merge_changes(results)
