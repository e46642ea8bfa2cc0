"""Shared workflow layer between the CLI and any other front end.

Reads and writes go through a DocumentStore; the document logic itself lives
in the pure core. Settings are returned, never saved, so the caller owns them.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from .adapters.file_vault import FileDocumentStore
from .config import VAULT_DIR, Settings
from .core.completion import mark_done
from .core.errors import (
    DocumentNotFound,
    DocumentUnreadable,
    LineMismatch,
    SetlogError,
    WriteFailed,
)
from .core.results import Placement, ResultRow, insert_result, last_result
from .core.tasks import TaskEntry, parse_tasks, preselect
from .ports.document_store import DocumentRef, DocumentStore
from .session import set_remembered_exercise

logger = logging.getLogger(__name__)


@dataclass
class LogOutcome:
    """Combined result of logging a set and, optionally, marking the task done."""

    exercise: str
    row: ResultRow
    table_path: str
    placement: Placement
    mark_requested: bool
    task_marked: bool
    settings: Settings
    completion_error: SetlogError | None = None

    @property
    def ok(self) -> bool:
        """Row written, and the task marked done if that was requested."""
        return not self.mark_requested or self.task_marked


def get_store(vault_dir: Path | str | None = None) -> FileDocumentStore:
    """Resolve the vault directory, defaulting to SETLOG_VAULT."""
    return FileDocumentStore(Path(vault_dir) if vault_dir else VAULT_DIR)


def load_entries(
    store: DocumentStore,
    settings: Settings,
    now: datetime | None = None,
) -> list[TaskEntry]:
    """Read the tasks document and parse its actionable entries."""
    text = store.read(settings.tasks_file_path)
    entries = parse_tasks(text, now)
    logger.debug(f"Parsed {len(entries)} entries from {settings.tasks_file_path}")
    return entries


def select_entry(entries: list[TaskEntry], settings: Settings) -> TaskEntry | None:
    """Entry to preselect, honouring the remembered exercise."""
    remembered = settings.remembered_exercise
    index = preselect(entries, remembered)
    if index is None:
        return None
    entry = entries[index]
    if remembered and entry.exercise_name != remembered and remembered not in entry.raw_text:
        logger.info(f"Remembered exercise {remembered!r} has no pending task")
    return entry


def find_exercise_document(store: DocumentStore, exercise_name: str) -> DocumentRef:
    """The exercise's own document, found by file name."""
    for doc in store.list_documents():
        if doc.name == exercise_name:
            return doc
    raise DocumentNotFound(f"{exercise_name}.md")


def get_last_result(store: DocumentStore, exercise_name: str) -> ResultRow | None:
    """Last logged row for an exercise, used to prefill weight and reps."""
    doc = find_exercise_document(store, exercise_name)
    return last_result(store.read(doc.path))


def log_set(
    store: DocumentStore,
    settings: Settings,
    entry: TaskEntry,
    weight: str,
    reps: str,
    mark_done_requested: bool = False,
    today: date | None = None,
) -> LogOutcome:
    """
    Append a result row to the exercise's table, then optionally mark the task done.

    The table write happens first; if it fails the error propagates and the
    tasks document is not touched. A failure while marking the task done is
    reported in the outcome instead, since the row has already been saved.
    """
    today = today or date.today()
    exercise = entry.display_name
    row = ResultRow.create(today, weight, reps)

    doc = find_exercise_document(store, exercise)
    table_text, placement = insert_result(store.read(doc.path), row)
    if placement is Placement.END_OF_DOCUMENT:
        logger.warning(f"No result table in {doc.path}, appending row at end of document")
    store.write(doc.path, table_text)
    logger.info(f"Result added to {exercise}: {row.to_markdown()}")

    task_marked = False
    completion_error = None
    if mark_done_requested:
        try:
            tasks_text = store.read(settings.tasks_file_path)
            store.write(settings.tasks_file_path, mark_done(tasks_text, entry, today))
            task_marked = True
            logger.info(f"Task marked as done in {settings.tasks_file_path}")
        except (DocumentNotFound, DocumentUnreadable, LineMismatch, WriteFailed) as e:
            logger.warning(f"Could not mark {exercise} as done: {e}")
            completion_error = e

    # Keep the exercise remembered until its task is actually done.
    if task_marked:
        new_settings = set_remembered_exercise(settings, "")
    else:
        new_settings = set_remembered_exercise(settings, exercise)

    return LogOutcome(
        exercise=exercise,
        row=row,
        table_path=doc.path,
        placement=placement,
        mark_requested=mark_done_requested,
        task_marked=task_marked,
        settings=new_settings,
        completion_error=completion_error,
    )
