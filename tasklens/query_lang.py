# tasklens/query_lang.py
from __future__ import annotations

"""tasklens.query_lang

Declarative list query (status filter, free-text search, sort key) and its
executor. The same Query drives every list screen; screens differ only in the
search fields they pass.

URL convention (shareable views):
  status=Upcoming,Done   comma-joined status filter
  q=image                free-text search
  sort=due-date          sort key
"""

import datetime as dt
import unicodedata
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .model import DataProblem, record_field, record_id
from .util.console import warn
from .util.timeparse import DateParseError, coerce_date


class QueryError(ValueError):
    """Raised for invalid query descriptors (parse or execution)."""


SORT_NONE = "none"
SORT_NAME = "name"
SORT_DUE_DATE = "due-date"
SORT_STATUS = "status"
SORT_PROGRAM_LEAD = "pl"

SORT_KEYS: Tuple[str, ...] = (SORT_NONE, SORT_NAME, SORT_DUE_DATE, SORT_STATUS, SORT_PROGRAM_LEAD)

_SORT_ALIASES: Dict[str, str] = {
    "": SORT_NONE,
    "none": SORT_NONE,
    "name": SORT_NAME,
    "byname": SORT_NAME,
    "title": SORT_NAME,
    "due-date": SORT_DUE_DATE,
    "duedate": SORT_DUE_DATE,
    "byduedate": SORT_DUE_DATE,
    "due": SORT_DUE_DATE,
    "status": SORT_STATUS,
    "bystatus": SORT_STATUS,
    "pl": SORT_PROGRAM_LEAD,
    "program-lead": SORT_PROGRAM_LEAD,
    "programlead": SORT_PROGRAM_LEAD,
    "byprogramlead": SORT_PROGRAM_LEAD,
}

# sort key -> (record field, kind)
_SORT_FIELDS: Dict[str, Tuple[str, str]] = {
    SORT_NAME: ("title", "text"),
    SORT_DUE_DATE: ("due_date", "date"),
    SORT_STATUS: ("status", "text"),
    SORT_PROGRAM_LEAD: ("program_lead", "text"),
}

TASK_SEARCH_FIELDS: Tuple[str, ...] = ("title", "description", "program_lead", "status")
EVENT_SEARCH_FIELDS: Tuple[str, ...] = ("title", "task_title")
NOTE_SEARCH_FIELDS: Tuple[str, ...] = ("text",)
PROJECT_SEARCH_FIELDS: Tuple[str, ...] = ("title", "description", "program_lead")


def normalize_sort_key(raw: Optional[str]) -> str:
    key = (raw or "").strip().lower().replace("_", "-")
    got = _SORT_ALIASES.get(key) or _SORT_ALIASES.get(key.replace("-", ""))
    if got is None:
        raise QueryError(f"Unknown sort key: {raw!r} (expected one of {', '.join(SORT_KEYS)})")
    return got


def _split_csv(s: str) -> List[str]:
    parts: List[str] = []
    for p in (s or "").split(","):
        p = p.strip()
        if p:
            parts.append(p)
    return parts


def _text(v: Any) -> str:
    if v is None:
        return ""
    return v if isinstance(v, str) else str(v)


def collation_key(s: str) -> Tuple[str, str]:
    """Sort key close to a locale collation: accents and case only break ties.

    "Émile" sorts between "apple" and "Zeta"; among equal letters lowercase
    comes first.
    """
    folded = unicodedata.normalize("NFKD", s.casefold())
    base = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return base, s.swapcase()


@dataclass(frozen=True)
class QueryResult:
    records: Tuple[Any, ...]
    problems: Tuple[DataProblem, ...] = ()


@dataclass(frozen=True)
class Query:
    statuses: Tuple[str, ...] = ()
    search_text: str = ""
    sort_key: str = SORT_NONE
    search_fields: Tuple[str, ...] = TASK_SEARCH_FIELDS

    def __post_init__(self) -> None:
        if self.statuses is None:
            object.__setattr__(self, "statuses", ())
        if self.search_text is None:
            object.__setattr__(self, "search_text", "")
        if isinstance(self.statuses, str):
            raise QueryError("statuses must be a sequence of status values, not a string")
        if not isinstance(self.search_text, str):
            raise QueryError(f"search_text must be str; got {type(self.search_text).__name__}")
        object.__setattr__(self, "statuses", tuple(self.statuses))
        object.__setattr__(self, "search_fields", tuple(self.search_fields))
        object.__setattr__(self, "sort_key", normalize_sort_key(self.sort_key))

    # --- URL parameters ---------------------------------------------------

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        *,
        search_fields: Sequence[str] = TASK_SEARCH_FIELDS,
    ) -> "Query":
        """Build a query from URL-style parameters (status, q, sort)."""
        status_raw = params.get("status")
        if isinstance(status_raw, (list, tuple)):
            statuses: List[str] = []
            for s in status_raw:
                statuses.extend(_split_csv(_text(s)))
        else:
            statuses = _split_csv(_text(status_raw))
        return cls(
            statuses=tuple(statuses),
            search_text=_text(params.get("q")),
            sort_key=_text(params.get("sort")) or SORT_NONE,
            search_fields=tuple(search_fields),
        )

    def to_params(self) -> Dict[str, str]:
        """Encode as URL parameters; empty values are omitted."""
        out: Dict[str, str] = {}
        if self.statuses:
            out["status"] = ",".join(self.statuses)
        if self.search_text:
            out["q"] = self.search_text
        if self.sort_key != SORT_NONE:
            out["sort"] = self.sort_key
        return out

    def toggle_status(self, status: str) -> "Query":
        """Flip one status in or out of the filter (appended at the end)."""
        if status in self.statuses:
            return replace(self, statuses=tuple(s for s in self.statuses if s != status))
        return replace(self, statuses=self.statuses + (status,))

    def with_search(self, text: str) -> "Query":
        return replace(self, search_text=text or "")

    def with_sort(self, sort_key: str) -> "Query":
        return replace(self, sort_key=sort_key)

    # --- execution --------------------------------------------------------

    def matches(self, record: Any) -> bool:
        if self.statuses and _text(record_field(record, "status")) not in self.statuses:
            return False
        if not self.search_text:
            return True
        needle = self.search_text.casefold()
        for name in self.search_fields:
            if needle in _text(record_field(record, name)).casefold():
                return True
        return False

    def run(self, records: Iterable[Any]) -> QueryResult:
        kept = [r for r in records if self.matches(r)]
        if self.sort_key == SORT_NONE:
            return QueryResult(records=tuple(kept))

        field_name, kind = _SORT_FIELDS[self.sort_key]
        if kind == "text":
            # list.sort is stable; ties keep input order.
            kept.sort(key=lambda r: collation_key(_text(record_field(r, field_name))))
            return QueryResult(records=tuple(kept))

        dated: List[Tuple[dt.date, Any]] = []
        undated: List[Any] = []
        problems: List[DataProblem] = []
        for r in kept:
            raw = record_field(r, field_name)
            try:
                dated.append((coerce_date(raw), r))
            except DateParseError as ex:
                undated.append(r)
                problems.append(DataProblem(record_id(r), field_name, raw, str(ex)))
                warn("query", f"unsortable {field_name} id={record_id(r)!r} value={raw!r}")
        dated.sort(key=lambda x: x[0])
        return QueryResult(records=tuple(r for _, r in dated) + tuple(undated), problems=tuple(problems))


def run_query(records: Iterable[Any], query: Optional[Query] = None) -> QueryResult:
    return (query or Query()).run(records)


def filter_and_sort(records: Iterable[Any], query: Optional[Query] = None) -> List[Any]:
    """Filtered, ordered view of `records`. Never mutates the input.

    Records whose sort date is unparseable are kept after the dated ones; use
    run_query() to see them reported.
    """
    return list(run_query(records, query).records)
