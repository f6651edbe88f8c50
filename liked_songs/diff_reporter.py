"""Colorized unified diff between two snapshots."""

import difflib
from typing import List, Optional, Tuple
from rich.console import Console
from rich.text import Text
from liked_songs.snapshot import split_lines


CONTEXT_LINES = 3
NO_NEWLINE_MARKER = '\\ No newline at end of file'


def compute_diff(old_text: str, new_text: str) -> List[str]:
    """
    Compute a line-based unified diff.

    A last line that lacks its newline is followed by the
    '\\ No newline at end of file' marker, so a change to the trailing
    newline alone still shows up.

    Args:
        old_text: Previous snapshot
        new_text: New snapshot

    Returns:
        Diff lines without trailing newlines; empty when the texts match
    """
    diff = difflib.unified_diff(
        split_lines(old_text, keepends=True),
        split_lines(new_text, keepends=True),
        fromfile='old',
        tofile='new',
        n=CONTEXT_LINES,
    )
    lines = []
    for line in diff:
        if line.endswith('\n'):
            lines.append(line[:-1])
        else:
            lines.append(line)
            # Headers always end in '\n', so this is a body line
            lines.append(NO_NEWLINE_MARKER)
    return lines


def _style_for(index: int, line: str) -> str:
    if index < 2:
        return 'bold'
    if line.startswith('@@'):
        return 'cyan'
    if line.startswith('+'):
        return 'green'
    if line.startswith('-'):
        return 'red'
    if line == NO_NEWLINE_MARKER:
        return 'dim'
    return ''


def count_changes(diff_lines: List[str]) -> Tuple[int, int]:
    """Return (added, removed) line counts, skipping the two file headers."""
    body = diff_lines[2:]
    added = sum(1 for line in body if line.startswith('+'))
    removed = sum(1 for line in body if line.startswith('-'))
    return added, removed


def print_diff(old_text: str, new_text: str, console: Optional[Console] = None) -> List[str]:
    """
    Print the diff between two snapshots with insertions and deletions colored.

    Args:
        old_text: Previous snapshot
        new_text: New snapshot
        console: Optional rich console; defaults to stdout

    Returns:
        The printed diff lines
    """
    console = console or Console()
    diff_lines = compute_diff(old_text, new_text)
    for index, line in enumerate(diff_lines):
        # Text() avoids interpreting [brackets] in song names as markup
        console.print(Text(line, style=_style_for(index, line)), soft_wrap=True)
    return diff_lines
