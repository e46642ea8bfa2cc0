"""Pure result table logic - finding the append point, formatting rows. No I/O."""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from .errors import DocumentTableMalformed
from .text import join_lines, line_ending, split_lines

SEPARATOR_CHARS = frozenset("|-: \t")


class Placement(Enum):
    """Where a new row was inserted."""

    AFTER_LAST_ROW = "after_last_row"  # below the last existing data row
    AFTER_SEPARATOR = "after_separator"  # table has a header but no data yet
    END_OF_DOCUMENT = "end_of_document"  # no table found at all


@dataclass(frozen=True)
class ResultRow:
    """One logged set. Weight and reps are kept as the text the user entered."""

    date: str
    weight: str
    reps: str

    @classmethod
    def create(cls, when: date, weight: str, reps: str) -> "ResultRow":
        """Build a row for a date, validating the cell values."""
        return cls(
            date=when.isoformat(),
            weight=clean_cell("weight", weight),
            reps=clean_cell("reps", reps),
        )

    def to_markdown(self) -> str:
        return f"| {self.date} | {self.weight} | {self.reps} |"


def clean_cell(name: str, value: str) -> str:
    """Strip a cell value, rejecting blanks and anything that would break the table."""
    value = str(value).strip()
    if not value:
        raise ValueError(f"{name} must not be empty")
    if "|" in value or "\n" in value or "\r" in value:
        raise ValueError(f"{name} must not contain '|' or line breaks: {value!r}")
    return value


def is_separator_row(line: str) -> bool:
    """A row made only of pipes, dashes, colons and whitespace, e.g. ``|---|:--:|``."""
    stripped = line.strip()
    return (
        stripped.startswith("|")
        and "-" in stripped
        and all(ch in SEPARATOR_CHARS for ch in stripped)
    )


def is_data_row(line: str) -> bool:
    return line.startswith("|") and not is_separator_row(line)


def split_cells(line: str) -> list[str]:
    """Trimmed cell values of a pipe-delimited row."""
    body = line.strip()
    if body.startswith("|"):
        body = body[1:]
    if body.endswith("|"):
        body = body[:-1]
    return [cell.strip() for cell in body.split("|")]


def find_separator(lines: list[str]) -> int | None:
    for index, line in enumerate(lines):
        if is_separator_row(line):
            return index
    return None


def find_last_data_row(lines: list[str], start: int = 0) -> int | None:
    for index in range(len(lines) - 1, start - 1, -1):
        if is_data_row(lines[index]):
            return index
    return None


def locate_append_point(lines: list[str]) -> tuple[int, Placement]:
    """
    Index at which a new row should be inserted.

    After the last data row if there is one, else right after the separator,
    else at the end of the document. The header row above the separator is
    never treated as data.
    """
    sep = find_separator(lines)
    last_data = find_last_data_row(lines, start=sep + 1 if sep is not None else 0)
    if last_data is not None:
        return last_data + 1, Placement.AFTER_LAST_ROW
    if sep is not None:
        return sep + 1, Placement.AFTER_SEPARATOR
    return len(lines), Placement.END_OF_DOCUMENT


def insert_result(
    table_document_text: str,
    new_row: ResultRow,
    strict: bool = False,
) -> tuple[str, Placement]:
    """
    Insert a row into the result table, returning the new text and placement.

    With ``strict``, a document with neither a separator nor a data row raises
    DocumentTableMalformed instead of getting the row appended at its end.
    """
    lines = split_lines(table_document_text)
    # An empty document splits into [""]; appending goes in place of that line.
    if lines == [""]:
        lines = []
    index, placement = locate_append_point(lines)
    if strict and placement is Placement.END_OF_DOCUMENT:
        raise DocumentTableMalformed("No result table separator row found")
    ending = line_ending(lines, index)
    if index == len(lines) and lines:
        # The old last line becomes terminated; the new row ends the document.
        lines[-1] += ending
        lines.append(new_row.to_markdown())
    else:
        lines.insert(index, new_row.to_markdown() + ending)
    return join_lines(lines), placement


def append_result(table_document_text: str, new_row: ResultRow, strict: bool = False) -> str:
    """Return the table document with new_row appended. Pure function - no I/O."""
    text, _ = insert_result(table_document_text, new_row, strict=strict)
    return text


def last_result(table_document_text: str) -> ResultRow | None:
    """
    The most recently appended row, used to prefill the next set.

    Only rows below the separator count when the table has one, so a bare
    header is never mistaken for a result.
    """
    lines = split_lines(table_document_text)
    sep = find_separator(lines)
    last = find_last_data_row(lines, start=sep + 1 if sep is not None else 0)
    if last is None:
        return None
    cells = split_cells(lines[last])
    if len(cells) < 3:
        return None
    return ResultRow(date=cells[0], weight=cells[1], reps=cells[2])
