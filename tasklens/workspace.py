# tasklens/workspace.py
from __future__ import annotations

"""tasklens.workspace

Workspace value (all collections of one session) and its JSON document form.

On disk keys are camelCase:
  {"schema_version": 1, "projects": [...], "tasks": [...], "notes": [...], "events": [...]}
"""

from pathlib import Path
from typing import Any, Dict, List, Union

import orjson

from .model import Event, Note, Project, Task, Workspace
from .normalize import normalize_event, normalize_many, normalize_note, normalize_project, normalize_task
from .validate import WORKSPACE_SCHEMA_VERSION, WorkspaceValidationError, assert_valid_workspace

JsonPath = Union[str, Path]


def workspace_from_doc(doc: Dict[str, Any], *, validate: bool = True) -> Workspace:
    if not isinstance(doc, dict):
        raise TypeError(f"workspace document must be a dict/object; got {type(doc).__name__}")
    if validate:
        assert_valid_workspace(doc)

    projects, p1 = normalize_many("projects", doc.get("projects"), normalize_project)
    tasks, p2 = normalize_many("tasks", doc.get("tasks"), normalize_task)
    notes, p3 = normalize_many("notes", doc.get("notes"), normalize_note)
    events, p4 = normalize_many("events", doc.get("events"), normalize_event)

    meta = dict(doc.get("meta") or {}) if isinstance(doc.get("meta"), dict) else {}
    skipped = len(p1) + len(p2) + len(p3) + len(p4)
    if skipped:
        meta["skipped_entries"] = skipped
    return Workspace(projects=projects, tasks=tasks, notes=notes, events=events, meta=meta)


def _project_doc(p: Project) -> Dict[str, Any]:
    return {"id": p.id, "title": p.title, "description": p.description, "programLead": p.program_lead}


def task_doc(t: Task) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": t.id,
        "title": t.title,
        "programLead": t.program_lead,
        "jiraLink": t.jira_link,
        "dueDate": t.due_date,
        "dateCreated": t.date_created,
        "dateModified": t.date_modified,
        "status": t.status,
    }
    if t.description is not None:
        out["description"] = t.description
    return out


def _note_doc(n: Note) -> Dict[str, Any]:
    return {
        "id": n.id,
        "taskId": n.task_id,
        "text": n.text,
        "dateCreated": n.date_created,
        "dateModified": n.date_modified,
    }


def event_doc(e: Event) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": e.id,
        "title": e.title,
        "creationDate": e.created_at,
        "duration": e.duration,
        "totalBooked": e.total_booked,
        "logs": [{"id": lg.id, "title": lg.title, "duration": lg.duration} for lg in e.logs],
    }
    if e.task_id is not None:
        out["taskId"] = e.task_id
    if e.task_title is not None:
        out["taskTitle"] = e.task_title
    return out


def workspace_to_doc(ws: Workspace) -> Dict[str, Any]:
    doc: Dict[str, Any] = {
        "schema_version": WORKSPACE_SCHEMA_VERSION,
        "projects": [_project_doc(p) for p in ws.projects],
        "tasks": [task_doc(t) for t in ws.tasks],
        "notes": [_note_doc(n) for n in ws.notes],
        "events": [event_doc(e) for e in ws.events],
    }
    if ws.meta:
        doc["meta"] = dict(ws.meta)
    return doc


def load_workspace(path: JsonPath, *, validate: bool = True) -> Workspace:
    p = Path(path)
    try:
        doc = orjson.loads(p.read_bytes())
    except orjson.JSONDecodeError as ex:
        raise WorkspaceValidationError(f"{p}: invalid JSON ({ex})") from ex
    if not isinstance(doc, dict):
        raise WorkspaceValidationError(f"{p}: workspace must be an object/dict; got {type(doc).__name__}")
    return workspace_from_doc(doc, validate=validate)


def dumps(obj: Any, *, pretty: bool = False) -> str:
    opts = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(obj, option=opts).decode("utf-8")


def save_workspace(ws: Workspace, path: JsonPath, *, pretty: bool = True) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dumps(workspace_to_doc(ws), pretty=pretty) + "\n", encoding="utf-8", newline="\n")
    return p


__all__: List[str] = [
    "workspace_from_doc",
    "workspace_to_doc",
    "task_doc",
    "event_doc",
    "load_workspace",
    "save_workspace",
    "dumps",
]
