"""Changelog generation module."""

from .history import rev_list
from .models import ChangelogEntry, PullRequest, RepoChanges, Section
from .renderer import render, render_document, render_table
from .selector import (
    SECTION_RULES,
    classify,
    collect_changes,
    get_pulls_in_range,
    matches_label_filter,
    merge_changes,
    select_pulls,
)

__all__ = [
    "ChangelogEntry",
    "PullRequest",
    "RepoChanges",
    "Section",
    "SECTION_RULES",
    "classify",
    "collect_changes",
    "get_pulls_in_range",
    "matches_label_filter",
    "merge_changes",
    "render",
    "render_document",
    "render_table",
    "rev_list",
    "select_pulls",
]
