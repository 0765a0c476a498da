"""tasklens.api

Stable *library* entrypoint for tasklens.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from tasklens.duedate import URGENCY_TIERS, DueLabel, due_labels, relative_due_label
from tasklens.model import (
    TASK_STATUSES,
    DataProblem,
    Event,
    Log,
    Note,
    Project,
    Task,
    Workspace,
)
from tasklens.ops import (
    CounterIdFactory,
    RecordNotFound,
    UuidIdFactory,
    add_log,
    add_note,
    book_time,
    complete_task,
    create_event,
    create_project,
    create_task,
    delete_event,
    delete_log,
    delete_note,
    delete_project,
    delete_task,
    edit_log,
    edit_note,
    update_event,
    update_project,
    update_task,
)
from tasklens.query import (
    aggregate_status_counts,
    latest_note,
    notes_for_task,
    recompute_event_duration,
    record_by_id,
)
from tasklens.query_lang import (
    EVENT_SEARCH_FIELDS,
    TASK_SEARCH_FIELDS,
    Query,
    QueryError,
    QueryResult,
    filter_and_sort,
    run_query,
)
from tasklens.seed import load_seed
from tasklens.stats import BucketResult, DaySummary, bucket_by_date, bucket_events, day_summaries, event_totals
from tasklens.util.duration import format_duration
from tasklens.util.timeparse import DateParseError
from tasklens.validate import FormValidationError, WorkspaceValidationError, validate_workspace
from tasklens.workspace import load_workspace, save_workspace, workspace_from_doc, workspace_to_doc


# --- Public API exports (locked by contract tests) ------------------------
# Keep changes intentional and reviewable.
# Prefer append-only unless you are intentionally reshaping the public surface.
_PUBLIC_EXPORTS = (
    "BucketResult",
    "CounterIdFactory",
    "DataProblem",
    "DateParseError",
    "DaySummary",
    "DueLabel",
    "EVENT_SEARCH_FIELDS",
    "Event",
    "FormValidationError",
    "Log",
    "Note",
    "Project",
    "Query",
    "QueryError",
    "QueryResult",
    "RecordNotFound",
    "TASK_SEARCH_FIELDS",
    "TASK_STATUSES",
    "Task",
    "URGENCY_TIERS",
    "UuidIdFactory",
    "Workspace",
    "WorkspaceValidationError",
    "add_log",
    "add_note",
    "aggregate_status_counts",
    "book_time",
    "bucket_by_date",
    "bucket_events",
    "complete_task",
    "create_event",
    "create_project",
    "create_task",
    "day_summaries",
    "delete_event",
    "delete_log",
    "delete_note",
    "delete_project",
    "delete_task",
    "due_labels",
    "edit_log",
    "edit_note",
    "event_totals",
    "filter_and_sort",
    "format_duration",
    "latest_note",
    "load_seed",
    "load_workspace",
    "notes_for_task",
    "recompute_event_duration",
    "record_by_id",
    "relative_due_label",
    "run_query",
    "save_workspace",
    "update_event",
    "update_project",
    "update_task",
    "validate_workspace",
    "workspace_from_doc",
    "workspace_to_doc",
)

__all__ = [n for n in _PUBLIC_EXPORTS if n in globals()]
# --- /Public API exports --------------------------------------------------
