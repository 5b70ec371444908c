import heapq
from datetime import datetime
from typing import Any, Callable, Iterator, List, NamedTuple, Sequence, Union

from statuspage.errors import InvalidArgumentError
from statuspage.schemas import (
    IncidentStatus,
    MaintenanceStatus,
    coerce_enum,
    field_of,
)
from statuspage.timefmt import as_utc


class IncidentPartition(NamedTuple):
    active: List[Any]
    resolved: List[Any]

    @property
    def active_count(self) -> int:
        return len(self.active)


class MaintenancePartition(NamedTuple):
    upcoming: List[Any]
    in_progress: List[Any]
    completed: List[Any]

    @property
    def active(self) -> List[Any]:
        # display contract: every scheduled entry before any in_progress one
        return self.upcoming + self.in_progress


def incident_status(record: Any) -> IncidentStatus:
    return coerce_enum(IncidentStatus, field_of(record, "status"), field="incident.status")


def maintenance_status(record: Any) -> MaintenanceStatus:
    return coerce_enum(MaintenanceStatus, field_of(record, "status"), field="maintenance.status")


def partition_incidents(incidents: Sequence[Any]) -> IncidentPartition:
    active, resolved = [], []
    for inc in incidents:
        if incident_status(inc) is IncidentStatus.resolved:
            resolved.append(inc)
        else:
            active.append(inc)
    return IncidentPartition(active, resolved)


def partition_maintenances(maintenances: Sequence[Any]) -> MaintenancePartition:
    buckets = {status: [] for status in MaintenanceStatus}
    for m in maintenances:
        buckets[maintenance_status(m)].append(m)
    return MaintenancePartition(
        upcoming=buckets[MaintenanceStatus.scheduled],
        in_progress=buckets[MaintenanceStatus.in_progress],
        completed=buckets[MaintenanceStatus.completed],
    )


SortKey = Union[str, Callable[[Any], Any]]


def timestamp_of(record: Any, name: str) -> Any:
    """Read a timestamp field as an aware UTC datetime so naive and offset values compare."""
    value = field_of(record, name)
    if isinstance(value, (str, datetime)):
        return as_utc(value)
    return value


class RecentView:
    """The ``n`` most recent records of a snapshot, newest first.

    Nothing is sorted until the view is iterated, and every iteration starts
    over from the snapshot taken at construction.
    """

    def __init__(self, records: Sequence[Any], n: int, key: SortKey = "created_at"):
        self._records = tuple(records)
        self._n = n
        self._key = key if callable(key) else (lambda r, name=key: timestamp_of(r, name))

    def __iter__(self) -> Iterator[Any]:
        # nlargest keeps input order among equal timestamps
        return iter(heapq.nlargest(self._n, self._records, key=self._key))

    def __len__(self) -> int:
        return min(self._n, len(self._records))

    def __eq__(self, other) -> bool:
        if isinstance(other, RecentView):
            return list(self) == list(other)
        if isinstance(other, (list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"RecentView(n={self._n}, size={len(self)})"


def recent_n(collection: Sequence[Any], n: int, key: SortKey = "created_at") -> RecentView:
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidArgumentError(f"n must be an integer, got {n!r}")
    if n < 0:
        raise InvalidArgumentError(f"n must be non-negative, got {n}")
    return RecentView(collection, n, key)


class NoUpdates:
    label = "No updates"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_UPDATES"


NO_UPDATES = NoUpdates()


def most_recent_update(maintenance: Any):
    updates = field_of(maintenance, "updates") or []
    if not updates:
        return NO_UPDATES
    return max(updates, key=lambda u: timestamp_of(u, "created_at"))
