"""Tests for range selection, label filtering and classification."""

from unittest.mock import Mock, patch

import pytest

from conftest import api_pull
from ghchangelog.changelog.models import Section
from ghchangelog.changelog.selector import (
    SECTION_RULES,
    classify,
    collect_changes,
    get_pulls_in_range,
    matches_label_filter,
    merge_changes,
    select_pulls,
)
from ghchangelog.config import Config
from ghchangelog.exceptions import AuthenticationError, RangeResolutionError, TransientFetchError
from ghchangelog.github import pull_request_from_api


class TestClassify:
    @pytest.mark.parametrize("labels, expected", [
        (["bug"], Section.FIXED),
        (["type/bugfix"], Section.FIXED),
        (["feature"], Section.ADDED),
        (["enhancement"], Section.ADDED),
        (["impact/breaking"], Section.BREAKING),
        (["impact/changelog"], Section.CHANGED),
        (["chore"], Section.UNCLASSIFIED),
        ([], Section.UNCLASSIFIED),
    ])
    def test_single_rule(self, labels, expected):
        assert classify(labels) == expected

    def test_bug_wins_over_breaking(self):
        assert classify(["bug", "impact/breaking"]) == Section.FIXED

    def test_feature_wins_over_breaking_and_changelog(self):
        assert classify(["impact/changelog", "impact/breaking", "feature"]) == Section.ADDED

    def test_breaking_wins_over_changelog(self):
        assert classify(["impact/changelog", "impact/breaking"]) == Section.BREAKING

    def test_rules_are_ordered(self):
        assert [section for section, _ in SECTION_RULES] == [
            Section.FIXED, Section.ADDED, Section.BREAKING, Section.CHANGED,
        ]


class TestLabelFilter:
    def test_disabled_filter_keeps_everything(self, make_pull):
        assert matches_label_filter(make_pull(1, labels=[]), None)

    def test_breaking_only_pr_against_changelog_filter(self, make_pull):
        pull = make_pull(1, labels=["impact/breaking"], sha="aaa")

        filtered = select_pulls([pull], {"aaa"}, label_filter=["impact/changelog"])
        unfiltered = select_pulls([pull], {"aaa"}, label_filter=None)

        assert filtered.entries == []
        assert [e.pull.number for e in unfiltered.entries] == [1]

    def test_filter_is_exact_match(self, make_pull):
        assert not matches_label_filter(make_pull(1, labels=["impact/changelog-old"]), ["impact/changelog"])
        assert matches_label_filter(make_pull(1, labels=["x", "impact/changelog"]), ["impact/changelog"])


class TestSelectPulls:
    def test_range_membership_is_exact(self, make_pull):
        hashes = {"h1", "h2", "h3", "h4", "h5"}
        pulls = [
            make_pull(1, labels=["bug"], sha="h2"),
            make_pull(2, labels=["bug"], sha="other-1"),
            make_pull(3, labels=["bug"], sha="h5"),
            make_pull(4, labels=["bug"], sha="other-2"),
            make_pull(5, labels=["bug"], sha="other-3"),
        ]

        changes = select_pulls(pulls, hashes)

        assert [e.pull.number for e in changes.entries] == [1, 3]
        assert all(e.pull.merge_commit_sha in hashes for e in changes.entries)

    def test_unmerged_pr_is_dropped(self, make_pull):
        changes = select_pulls([make_pull(1, labels=["bug"], sha=None)], {"aaa"})
        assert changes.entries == []

    def test_flags_are_independent_of_section(self, make_pull):
        pull = make_pull(1, labels=["bug", "impact/breaking", "impact/changelog"], sha="aaa")

        entry = select_pulls([pull], {"aaa"}).entries[0]

        assert entry.section == Section.FIXED
        assert entry.breaking is True
        assert entry.changelog is True

    def test_unclassified_passes_without_filter(self, make_pull):
        entry = select_pulls([make_pull(1, labels=["chore"], sha="aaa")], {"aaa"}).entries[0]

        assert entry.section == Section.UNCLASSIFIED
        assert entry.changelog is False
        assert entry.breaking is False

    def test_classification_cannot_be_reassigned(self, make_pull):
        entry = select_pulls([make_pull(1, labels=["bug"], sha="aaa")], {"aaa"}).entries[0]

        with pytest.raises(Exception):
            entry.section = Section.ADDED
        assert entry.section == Section.FIXED

    def test_contributors_are_unique_in_first_seen_order(self, make_pull):
        pulls = [
            make_pull(1, sha="a", author="alice"),
            make_pull(2, sha="b", author="bob"),
            make_pull(3, sha="c", author="alice"),
            make_pull(4, sha="zzz", author="carol"),
        ]

        changes = select_pulls(pulls, {"a", "b", "c"})

        assert changes.contributors == ["alice", "bob"]


def test_end_to_end_scenario():
    """acme/widgets v1.0..v1.1 keeps #10 (Fixed) and #11 (Added), drops #12."""
    client = Mock()
    client.list_closed_pull_requests.return_value = [
        pull_request_from_api(api_pull(10, labels=["bug"], sha="aaa", author="alice"), "acme/widgets"),
        pull_request_from_api(api_pull(11, labels=["feature"], sha="bbb", author="bob"), "acme/widgets"),
        pull_request_from_api(api_pull(12, labels=["chore"], sha="ccc", author="carol"), "acme/widgets"),
    ]

    with patch("ghchangelog.changelog.selector.rev_list", return_value={"aaa", "bbb"}) as rev:
        changes = get_pulls_in_range(client, "acme", "widgets", "/src/widgets", "v1.0", "v1.1")

    client.list_closed_pull_requests.assert_called_once_with("acme", "widgets")
    assert rev.call_args[0] == ("/src/widgets", "v1.0", "v1.1")
    assert [(e.pull.number, e.section) for e in changes.entries] == [
        (10, Section.FIXED),
        (11, Section.ADDED),
    ]
    assert changes.contributors == ["alice", "bob"]


def test_get_pulls_in_range_propagates_range_error():
    client = Mock()
    client.list_closed_pull_requests.return_value = []

    with patch("ghchangelog.changelog.selector.rev_list", side_effect=RangeResolutionError("bad revision")):
        with pytest.raises(RangeResolutionError):
            get_pulls_in_range(client, "acme", "widgets", ".", "v1.0", "v1.1")


class TestCollectChanges:
    def _config(self, repos, **kwargs):
        return Config(from_tag="v1.0", to_tag="v1.1", owner="acme", repos=repos,
                      github_token="t", all_prs=True, **kwargs)

    def test_failing_repositories_contribute_nothing(self, make_pull):
        client = Mock()
        client.list_closed_pull_requests.side_effect = [
            AuthenticationError("401: Bad credentials"),
            [make_pull(1, labels=["bug"], sha="aaa", repo="acme/gadgets", author="alice")],
            [make_pull(2, labels=["bug"], sha="bbb", repo="acme/gizmos", author="bob")],
            TransientFetchError("502: Server Error"),
        ]
        rev_results = [{"aaa"}, RangeResolutionError("unknown revision")]

        with patch("ghchangelog.changelog.selector.rev_list", side_effect=rev_results):
            changes = collect_changes(client, self._config("widgets,gadgets,gizmos,doohickeys"))

        assert [e.pull.key for e in changes.entries] == [("acme/gadgets", 1)]
        assert changes.contributors == ["alice"]
        assert client.list_closed_pull_requests.call_count == 4

    def test_repositories_processed_in_order(self, make_pull):
        client = Mock()
        client.list_closed_pull_requests.side_effect = [
            [make_pull(5, sha="a", repo="acme/widgets", labels=["feature"])],
            [make_pull(5, sha="b", repo="acme/gadgets", labels=["feature"])],
        ]

        with patch("ghchangelog.changelog.selector.rev_list", return_value={"a", "b"}):
            changes = collect_changes(client, self._config(["widgets", "gadgets"]))

        calls = [c[0] for c in client.list_closed_pull_requests.call_args_list]
        assert calls == [("acme", "widgets"), ("acme", "gadgets")]
        assert [e.pull.key for e in changes.entries] == [("acme/widgets", 5), ("acme/gadgets", 5)]

    def test_label_filter_from_config(self, make_pull):
        client = Mock()
        client.list_closed_pull_requests.return_value = [
            make_pull(1, sha="a", labels=["impact/changelog"]),
            make_pull(2, sha="b", labels=["bug"]),
        ]
        config = Config(from_tag="v1.0", to_tag="v1.1", owner="acme", repos="widgets", github_token="t")

        with patch("ghchangelog.changelog.selector.rev_list", return_value={"a", "b"}):
            changes = collect_changes(client, config)

        assert [e.pull.number for e in changes.entries] == [1]


def test_merge_changes_drops_duplicates(make_pull):
    first = select_pulls([make_pull(1, sha="a", author="alice")], {"a"})
    again = select_pulls([make_pull(1, sha="a", author="alice"), make_pull(2, sha="b", author="bob")], {"a", "b"})

    merged = merge_changes([first, again])

    assert [e.pull.number for e in merged.entries] == [1, 2]
    assert merged.contributors == ["alice", "bob"]
