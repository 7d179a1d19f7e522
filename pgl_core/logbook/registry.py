# pgl_core/logbook/registry.py
"""
One descriptor per log type. Services, serializers, views, exports and the
review aggregates are all driven from here, so adding a log type means one
model and one `register(LogType(...))` call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type
from uuid import UUID

from pgl_core.logbook.models import LogEntry

# clean(values, owner_id=..., instance=...) -> {field: [messages]}
CleanHook = Callable[..., Dict[str, List[str]]]
# initial_rows(params) -> [{field: value}, ...]
InitialRowsHook = Callable[[Dict[str, Any]], List[Dict[str, Any]]]


@dataclass(frozen=True)
class LogType:
    key: str  # URL segment, e.g. "case-management"
    entity_type: str  # signature/audit/count key, e.g. "case_management"
    model: Type[LogEntry]
    label: str

    # student-writable fields (category/sub_category included where used)
    fields: Tuple[str, ...]
    required_on_submit: Tuple[str, ...] = ()

    # filled by clean(), shown read-only
    derived_fields: Tuple[str, ...] = ()

    # reviewer-writable fields accepted by sign
    review_fields: Tuple[str, ...] = ()
    required_on_sign: Tuple[str, ...] = ()

    # per-category cap on entries for one student; None = unlimited
    max_entries: Optional[Callable[[str], Optional[int]]] = None

    clean: Optional[CleanHook] = None
    initial_rows: Optional[InitialRowsHook] = None

    export_columns: Tuple[Tuple[str, str], ...] = field(default=())

    @property
    def supports_initialize(self) -> bool:
        return self.initial_rows is not None

    def cap_for(self, category: str) -> Optional[int]:
        if self.max_entries is None or not category:
            return None
        return self.max_entries(category)

    def run_clean(self, values: Dict[str, Any], *, owner_id: UUID, instance: Optional[LogEntry]) -> Dict[str, List[str]]:
        if self.clean is None:
            return {}
        return self.clean(values, owner_id=owner_id, instance=instance) or {}


_by_key: Dict[str, LogType] = {}
_by_entity: Dict[str, LogType] = {}


def register(log_type: LogType) -> LogType:
    if log_type.key in _by_key or log_type.entity_type in _by_entity:
        raise ValueError(f"Log type already registered: {log_type.key}")
    _by_key[log_type.key] = log_type
    _by_entity[log_type.entity_type] = log_type
    return log_type


def get_log_type(key: str) -> LogType:
    """
    Lookup by URL key. Raises KeyError for unknown keys.
    """
    return _by_key[key]


def get_by_entity_type(entity_type: str) -> LogType:
    return _by_entity[entity_type]


def all_log_types() -> Iterable[LogType]:
    return tuple(_by_key.values())
