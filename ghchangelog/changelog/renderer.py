"""Rendering of classified pull requests."""

from typing import Iterable, List, Optional, Tuple

from .models import ChangelogEntry, Section


TABLE_HEADER = ["Title", "User", "IsChangelog", "IsBreaking", "Changelog Section", "Repo", "Link"]

BREAKING_PREFIX = "(Breaking) "

# Document order; each heading collects the listed sections, in this order.
DOCUMENT_SECTIONS: List[Tuple[str, Tuple[Section, ...]]] = [
    ("Added", (Section.ADDED,)),
    ("Changed", (Section.BREAKING, Section.CHANGED)),
    ("Fixed", (Section.FIXED,)),
]


def _table_cell(text: str) -> str:
    return " ".join(text.split()).replace(",", ".")


def _flag(value: bool) -> str:
    return "true" if value else "false"


def hyperlink(url: str) -> str:
    """Spreadsheet formula linking to `url` with the URL as display text."""
    return f'=HYPERLINK("{url}", "{url}")'


def render_table(entries: Iterable[ChangelogEntry]) -> str:
    """Render entries as tab-separated rows under a header row.

    Args:
        entries: Classified entries, in output order

    Returns:
        Table text
    """
    rows = ["\t".join(TABLE_HEADER)]
    for entry in entries:
        pr = entry.pull
        rows.append("\t".join([
            _table_cell(pr.title),
            pr.author_login,
            _flag(entry.changelog),
            _flag(entry.breaking),
            entry.section.value,
            pr.repo,
            hyperlink(pr.html_url),
        ]))
    return "\n".join(rows) + "\n"


def render_item(entry: ChangelogEntry) -> str:
    """Render one document item with its body block.

    Args:
        entry: Entry to render

    Returns:
        Markdown lines for the item
    """
    pr = entry.pull
    ref = pr.reference
    prefix = BREAKING_PREFIX if entry.section == Section.BREAKING else ""
    lines = [
        f"<!-- {entry.section.value}: {ref} -->",
        f"- {prefix}{pr.title} [{ref}]({pr.html_url})",
        f"<!-- begin body: {ref} -->",
        pr.body,
        f"<!-- end body: {ref} -->",
    ]
    return "\n".join(lines)


def render_document(entries: Iterable[ChangelogEntry], version: str,
                    contributors: Optional[List[str]] = None) -> str:
    """Render entries as a markdown changelog.

    Unclassified entries are left out. Empty sections are omitted.

    Args:
        entries: Classified entries, in output order
        version: Heading for the document, usually the end tag
        contributors: Optional author logins to acknowledge

    Returns:
        Markdown document
    """
    entries = list(entries)
    blocks = [f"## {version}"]

    for heading, sections in DOCUMENT_SECTIONS:
        items = [
            render_item(entry)
            for section in sections
            for entry in entries
            if entry.section == section
        ]
        if items:
            blocks.append(f"### {heading}\n\n" + "\n\n".join(items))

    if contributors:
        blocks.append("### Contributors\n\n" + "\n".join(f"- @{login}" for login in contributors))

    return "\n\n".join(blocks) + "\n"


def render(entries: Iterable[ChangelogEntry], tab_output: bool, version: str,
           contributors: Optional[List[str]] = None) -> str:
    """Render entries as a table or as a document."""
    if tab_output:
        return render_table(entries)
    return render_document(entries, version, contributors)
