"""Pure task completion logic - rewriting a task line as done. No I/O."""

from datetime import date

from .errors import LineMismatch
from .tasks import COMPLETION_GLYPH, TaskEntry, scan_checkbox
from .text import join_lines, split_lines


def expected_token(entry: TaskEntry) -> str:
    """Text the task line must still contain for the entry to be marked done."""
    if entry.exercise_name is not None:
        return f"[[{entry.exercise_name}]]"
    return entry.raw_text


def line_matches(line: str, entry: TaskEntry) -> bool:
    checkbox = scan_checkbox(line)
    if checkbox is None or not checkbox.is_unchecked:
        return False
    if entry.exercise_name is not None:
        return expected_token(entry) in line
    return checkbox.text == entry.raw_text


def completed_line(line: str, completion_date: date) -> str:
    """``- [ ] text`` -> ``- [x] text ✅ YYYY-MM-DD``, keeping a CRLF ending."""
    checkbox = scan_checkbox(line)
    if checkbox is None:
        raise ValueError(f"Not a checkbox line: {line!r}")
    ending = "\r" if line.endswith("\r") else ""
    start = checkbox.bracket
    checked = line[:start] + "[x]" + line[start + 3 :]
    return f"{checked.rstrip()} {COMPLETION_GLYPH} {completion_date.isoformat()}{ending}"


def mark_done(tasks_document_text: str, entry: TaskEntry, completion_date: date) -> str:
    """
    Return the tasks document with the entry's line marked as completed.

    The line at ``entry.line_index`` must still be an unchecked checkbox carrying
    the entry's link (or, for unlinked entries, its exact text). Otherwise the
    document changed since it was parsed and LineMismatch is raised; the input
    text is never partially modified.
    Pure function - no I/O.
    """
    lines = split_lines(tasks_document_text)
    index = entry.line_index
    if not 0 <= index < len(lines) or not line_matches(lines[index], entry):
        raise LineMismatch(index, expected_token(entry))

    lines[index] = completed_line(lines[index], completion_date)
    return join_lines(lines)
