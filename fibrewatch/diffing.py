"""
Line diff between two summaries, rendered as HTML for the notification mail.

Lines removed since the last snapshot are shown as ``+`` in green and lines
that appeared are shown as ``-`` in red. Unchanged context lines get a blank
sign and an empty color.
"""

import difflib
from enum import Enum
from typing import List, Tuple

from bs4 import BeautifulSoup

CONTEXT_LINES = 3


class ChangeTag(str, Enum):
    DELETE = "delete"
    INSERT = "insert"
    EQUAL = "equal"


# tag -> (sign, color)
LINE_STYLES = {
    ChangeTag.DELETE: ("+", "green"),
    ChangeTag.INSERT: ("-", "red"),
    ChangeTag.EQUAL: (" ", ""),
}

Change = Tuple[ChangeTag, str]


def split_lines(text: str) -> List[str]:
    """Split on newlines; an empty text has no lines and a final newline adds none."""
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def diff_hunks(old: str, new: str, context: int = CONTEXT_LINES) -> List[List[Change]]:
    """Group the changes between ``old`` and ``new`` into unified-diff hunks."""
    a, b = split_lines(old), split_lines(new)
    matcher = difflib.SequenceMatcher(None, a, b, autojunk=False)
    hunks = []
    for group in matcher.get_grouped_opcodes(context):
        hunk: List[Change] = []
        for op, i1, i2, j1, j2 in group:
            if op == "equal":
                hunk.extend((ChangeTag.EQUAL, line) for line in a[i1:i2])
                continue
            # deletions before insertions within a replaced block
            if op in ("replace", "delete"):
                hunk.extend((ChangeTag.DELETE, line) for line in a[i1:i2])
            if op in ("replace", "insert"):
                hunk.extend((ChangeTag.INSERT, line) for line in b[j1:j2])
        hunks.append(hunk)
    return hunks


def diff_lines(old: str, new: str) -> List[Change]:
    """All changes of all hunks, in order."""
    return [change for hunk in diff_hunks(old, new) for change in hunk]


def _render_line(soup: BeautifulSoup, tag: ChangeTag, text: str):
    sign, color = LINE_STYLES[tag]
    strong = soup.new_tag("strong")
    strong.string = sign
    span = soup.new_tag("span", attrs={"style": f"color:{color}"})
    span.string = text + "\n"
    return strong, span


def render_diff(old_summary: str, new_summary: str) -> str:
    """
    HTML rendering of the diff, or "" when the summaries have no changes.

    Line text is set as tag strings, so the markup builder escapes it and
    field values cannot inject markup into the mail.
    """
    changes = diff_lines(old_summary, new_summary)
    if not changes:
        return ""

    soup = BeautifulSoup("", "html.parser")
    pre = soup.new_tag("pre")
    code = soup.new_tag("code")
    pre.append(code)
    for tag, text in changes:
        for node in _render_line(soup, tag, text):
            code.append(node)
    return str(pre).strip()
