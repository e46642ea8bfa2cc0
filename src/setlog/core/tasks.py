"""Pure task document logic - parsing, grouping, selection. No I/O."""

import locale
from dataclasses import dataclass, field
from datetime import date, datetime, time

from .text import split_lines

CHECKED_STATES = ("x", "X")
COMPLETION_GLYPH = "\u2705"  # ✅
START_GLYPH = "\U0001f6eb"  # 🛫
UNTAGGED_LABEL = "Untagged"
# Tags never contain "#", so this cannot collide with a real tag key.
UNTAGGED_KEY = "#untagged"


@dataclass(frozen=True)
class TaskEntry:
    """One actionable (unchecked, not future-scheduled) line of the tasks document.

    ``line_index`` is only meaningful for the document text it was parsed from.
    """

    line_index: int
    raw_text: str
    exercise_name: str | None = None
    tag: str | None = None
    scheduled_date: date | None = None

    @property
    def display_name(self) -> str:
        return self.exercise_name or self.raw_text

    def is_scheduled_after(self, now: datetime) -> bool:
        return starts_after(self.scheduled_date, now)


@dataclass(frozen=True)
class Checkbox:
    """A list-item checkbox found at the start of a line."""

    state: str
    bracket: int  # index of "[" in the line
    text: str

    @property
    def is_checked(self) -> bool:
        return self.state in CHECKED_STATES

    @property
    def is_unchecked(self) -> bool:
        return self.state == " "


@dataclass
class TaskGroup:
    """Entries sharing a tag, as indices into the parsed entry list."""

    tag: str | None
    indices: list[int] = field(default_factory=list)

    @property
    def is_untagged(self) -> bool:
        return self.tag is None

    @property
    def display_name(self) -> str:
        if self.tag is None:
            return UNTAGGED_LABEL
        return self.tag[:1].upper() + self.tag[1:]

    @property
    def key(self) -> str:
        """Lowercased key used to remember the group's collapsed state."""
        if self.tag is None:
            return UNTAGGED_KEY
        return self.tag.lower()


# ============== Scanning ==============


def scan_checkbox(line: str) -> Checkbox | None:
    """
    Scan a checkbox list item: ``- [ ] text``, ``* [x] text``, ``-[X] text``.

    Leading whitespace and whitespace between the bullet and the bracket are
    allowed. Returns None if the line is not a checkbox item.
    """
    n = len(line)
    i = 0
    while i < n and line[i].isspace():
        i += 1
    if i >= n or line[i] not in "-*":
        return None
    i += 1
    while i < n and line[i].isspace():
        i += 1
    if i + 2 >= n or line[i] != "[" or line[i + 2] != "]":
        return None
    text = line[i + 3 :].lstrip().rstrip("\r")
    return Checkbox(state=line[i + 1], bracket=i, text=text)


def _digits_end(text: str, start: int, min_len: int, max_len: int) -> int | None:
    """Return the end of a run of min_len..max_len ASCII digits at start."""
    end = start
    while end < len(text) and end - start < max_len and text[end] in "0123456789":
        end += 1
    if end - start < min_len:
        return None
    if end < len(text) and text[end] in "0123456789":
        return None
    return end


def _date_at(text: str, start: int) -> date | None:
    """Parse a ``YYYY-M-D`` token beginning at start."""
    year_end = _digits_end(text, start, 4, 4)
    if year_end is None or text[year_end : year_end + 1] != "-":
        return None
    month_end = _digits_end(text, year_end + 1, 1, 2)
    if month_end is None or text[month_end : month_end + 1] != "-":
        return None
    day_end = _digits_end(text, month_end + 1, 1, 2)
    if day_end is None:
        return None
    try:
        return date(
            int(text[start:year_end]),
            int(text[year_end + 1 : month_end]),
            int(text[month_end + 1 : day_end]),
        )
    except ValueError:
        return None


def extract_scheduled_date(line: str) -> date | None:
    """Date following the first start glyph that carries a valid date token."""
    pos = line.find(START_GLYPH)
    while pos != -1:
        i = pos + len(START_GLYPH)
        while i < len(line) and line[i] in " \t":
            i += 1
        found = _date_at(line, i)
        if found is not None:
            return found
        pos = line.find(START_GLYPH, pos + 1)
    return None


def extract_link(text: str) -> str | None:
    """Target of the first well-formed ``[[link]]`` in text."""
    pos = text.find("[[")
    while pos != -1:
        close = text.find("]", pos + 2)
        if close == -1:
            return None
        if close > pos + 2 and text.startswith("]]", close):
            return text[pos + 2 : close]
        pos = text.find("[[", pos + 1)
    return None


def _is_tag_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def extract_tag(text: str) -> str | None:
    """First ``#tag`` token in text, without the ``#``."""
    pos = text.find("#")
    while pos != -1:
        end = pos + 1
        while end < len(text) and _is_tag_char(text[end]):
            end += 1
        if end > pos + 1:
            return text[pos + 1 : end]
        pos = text.find("#", pos + 1)
    return None


def starts_after(scheduled: date | None, now: datetime) -> bool:
    """True if scheduled begins strictly after now (midnight of that day)."""
    if scheduled is None:
        return False
    return datetime.combine(scheduled, time.min, tzinfo=now.tzinfo) > now


def is_done_line(line: str) -> bool:
    """Checked checkbox or a line carrying the completion glyph."""
    if COMPLETION_GLYPH in line:
        return True
    checkbox = scan_checkbox(line)
    return checkbox is not None and checkbox.is_checked


# ============== Parsing ==============


def parse_tasks(document_text: str, now: datetime | None = None) -> list[TaskEntry]:
    """
    Parse the tasks document into actionable entries, in source order.

    Done lines and lines scheduled to start after ``now`` are skipped, as is
    anything that is not an unchecked checkbox item.
    Pure function - no I/O.
    """
    now = now or datetime.now()
    lines = split_lines(document_text)
    entries = []
    for index, line in enumerate(lines):
        if is_done_line(line):
            continue
        scheduled = extract_scheduled_date(line)
        if starts_after(scheduled, now):
            continue
        checkbox = scan_checkbox(line)
        if checkbox is None or not checkbox.is_unchecked:
            continue
        entries.append(
            TaskEntry(
                line_index=index,
                raw_text=checkbox.text,
                exercise_name=extract_link(checkbox.text),
                tag=extract_tag(checkbox.text),
                scheduled_date=scheduled,
            )
        )
    return entries


# ============== Grouping ==============


def _group_sort_key(group: TaskGroup) -> tuple[str, str, str]:
    # Collation first, then casefold and the group key so equal collations stay ordered.
    folded = group.key.casefold()
    return (locale.strxfrm(folded), folded, group.key)


def group_entries(entries: list[TaskEntry]) -> list[TaskGroup]:
    """
    Partition entries by tag, case-insensitively.

    A group shows the tag as first written; its key matches the lowercased
    key used for collapsed state.

    Tagged groups are ordered by locale-aware, case-insensitive tag comparison;
    the untagged group always comes last. Members keep their original order.
    """
    groups: dict[str | None, TaskGroup] = {}
    for index, entry in enumerate(entries):
        key = entry.tag.lower() if entry.tag is not None else None
        groups.setdefault(key, TaskGroup(tag=entry.tag)).indices.append(index)

    ordered = sorted(
        (g for key, g in groups.items() if key is not None),
        key=_group_sort_key,
    )
    if None in groups:
        ordered.append(groups[None])
    return ordered


# ============== Selection ==============


def preselect(entries: list[TaskEntry], remembered: str | None = None) -> int | None:
    """
    Index of the entry to select initially.

    Prefers the remembered exercise (by name, or contained in the raw text),
    falling back to the first entry. None if there are no entries.
    """
    if not entries:
        return None
    if remembered:
        for index, entry in enumerate(entries):
            if entry.exercise_name == remembered or remembered in entry.raw_text:
                return index
    return 0


def find_entry(entries: list[TaskEntry], exercise_name: str) -> TaskEntry | None:
    """First entry for an exercise, matched case-insensitively on its display name."""
    wanted = exercise_name.casefold()
    for entry in entries:
        if entry.display_name.casefold() == wanted:
            return entry
    return None
