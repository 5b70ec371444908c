"""Display-ready structures for dashboard, services, maintenance and public pages.

Each ``build_*`` function classifies its inputs once and threads the results
to every part of the view, so no two widgets can disagree about the data.
"""
from datetime import datetime
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Tuple

from pydantic import BaseModel

from statuspage.classifier import (
    NO_UPDATES,
    incident_status,
    maintenance_status,
    most_recent_update,
    partition_incidents,
    partition_maintenances,
    recent_n,
)
from statuspage.engine import classify, label_for, service_status
from statuspage.schemas import IncidentStatus, MaintenanceStatus, OverallStatus, ServiceStatus, field_of
from statuspage.timefmt import format_date_range, format_time_ago

DEFAULT_RECENT_ITEMS = 3


class ServiceStatusDetails(NamedTuple):
    text: str
    description: str
    tone: str


SERVICE_STATUS_DETAILS: Dict[ServiceStatus, ServiceStatusDetails] = {
    ServiceStatus.operational: ServiceStatusDetails(
        "Operational", "This service is operating normally", "green"
    ),
    ServiceStatus.degraded: ServiceStatusDetails(
        "Degraded", "This service is experiencing performance issues", "yellow"
    ),
    ServiceStatus.partialOutage: ServiceStatusDetails(
        "Partial Outage", "Some components of this service are unavailable", "orange"
    ),
    ServiceStatus.majorOutage: ServiceStatusDetails(
        "Major Outage", "This service is currently unavailable", "red"
    ),
    ServiceStatus.maintenance: ServiceStatusDetails(
        "Maintenance", "This service is undergoing scheduled maintenance", "sky"
    ),
}

INCIDENT_BADGE_TONES: Dict[IncidentStatus, str] = {
    IncidentStatus.resolved: "success",
    IncidentStatus.investigating: "warning",
    IncidentStatus.identified: "danger",
    IncidentStatus.monitoring: "danger",
}

MAINTENANCE_STATUS_LABELS: Dict[MaintenanceStatus, str] = {
    MaintenanceStatus.scheduled: "Scheduled",
    MaintenanceStatus.in_progress: "In Progress",
    MaintenanceStatus.completed: "Completed",
}


def service_status_details(status: Any) -> ServiceStatusDetails:
    return SERVICE_STATUS_DETAILS[service_status({"status": status})]


def build_service_status_counts(services: Sequence[Any]) -> Dict[ServiceStatus, int]:
    counts = {status: 0 for status in ServiceStatus}
    for s in services:
        counts[service_status(s)] += 1
    return counts


def has_issues(services: Sequence[Any]) -> bool:
    return classify(services) is not OverallStatus.operational


class ServiceGrouping(NamedTuple):
    groups: List[Tuple[Any, List[Any]]]
    ungrouped: List[Any]


def group_services_by_group(services: Sequence[Any], groups: Sequence[Any]) -> ServiceGrouping:
    buckets: Dict[Any, List[Any]] = {}
    ordered: List[Tuple[Any, List[Any]]] = []
    for g in groups:
        gid = field_of(g, "id")
        if gid in buckets:
            continue
        buckets[gid] = []
        ordered.append((g, buckets[gid]))

    ungrouped = []
    for s in services:
        gid = field_of(s, "group_id")
        if gid is not None and gid in buckets:
            buckets[gid].append(s)
        else:
            ungrouped.append(s)
    return ServiceGrouping(ordered, ungrouped)


def _dump(record: Any) -> Dict[str, Any]:
    if isinstance(record, BaseModel):
        return record.model_dump(mode="json")
    return dict(record)


def _counts_json(counts: Dict[ServiceStatus, int]) -> Dict[str, int]:
    return {status.value: n for status, n in counts.items()}


def _overall_json(overall: OverallStatus) -> Dict[str, Any]:
    label = label_for(overall)
    return {"status": overall.value, "message": label.message, "icon": label.icon.value}


def _service_row(service: Any) -> Dict[str, Any]:
    details = service_status_details(field_of(service, "status"))
    row = _dump(service)
    row["status_text"] = details.text
    row["status_description"] = details.description
    row["tone"] = details.tone
    return row


def _incident_row(incident: Any) -> Dict[str, Any]:
    row = _dump(incident)
    row["badge"] = INCIDENT_BADGE_TONES[incident_status(incident)]
    return row


def _maintenance_row(maintenance: Any, now: Optional[datetime] = None) -> Dict[str, Any]:
    row = _dump(maintenance)
    row["status_label"] = MAINTENANCE_STATUS_LABELS[maintenance_status(maintenance)]
    row["window"] = format_date_range(field_of(maintenance, "start_time"), field_of(maintenance, "end_time"))
    latest = most_recent_update(maintenance)
    if latest is NO_UPDATES:
        row["last_update"] = None
        row["last_update_text"] = NO_UPDATES.label
    else:
        row["last_update"] = _dump(latest)
        row["last_update_text"] = format_time_ago(field_of(latest, "created_at"), now)
    return row


def _plural_caption(n: int, empty: str, noun: str, suffix: str) -> str:
    if n == 0:
        return empty
    return f"{n} {noun}{'s' if n > 1 else ''} {suffix}"


def summarize_groups(grouping: ServiceGrouping) -> List[Dict[str, Any]]:
    return [
        {
            "id": field_of(g, "id"),
            "name": field_of(g, "name"),
            "service_count": len(members),
            "has_issues": has_issues(members),
        }
        for g, members in grouping.groups
    ]


def build_dashboard(
    services: Sequence[Any],
    incidents: Sequence[Any],
    maintenances: Sequence[Any],
    recent: int = DEFAULT_RECENT_ITEMS,
) -> Dict[str, Any]:
    overall = classify(services)
    incident_parts = partition_incidents(incidents)
    maintenance_parts = partition_maintenances(maintenances)
    active_maintenances = maintenance_parts.active

    return {
        "overall": _overall_json(overall),
        "has_issues": overall is not OverallStatus.operational,
        "service_status_counts": _counts_json(build_service_status_counts(services)),
        "active_incidents": {
            "count": incident_parts.active_count,
            "caption": _plural_caption(
                incident_parts.active_count, "No active incidents", "incident", "being tracked"
            ),
        },
        "active_maintenances": {
            "count": len(active_maintenances),
            "caption": _plural_caption(
                len(active_maintenances), "No scheduled maintenance", "maintenance", "planned"
            ),
        },
        "recent_incidents": [_incident_row(i) for i in recent_n(incidents, recent)],
        "recent_maintenances": [
            _maintenance_row(m) for m in recent_n(active_maintenances, recent, key="start_time")
        ],
    }


def build_services_overview(services: Sequence[Any], groups: Sequence[Any]) -> Dict[str, Any]:
    grouping = group_services_by_group(services, groups)
    return {
        "has_issues": has_issues(services),
        "groups": [
            {"id": field_of(g, "id"), "name": field_of(g, "name"), "services": [_service_row(s) for s in members]}
            for g, members in grouping.groups
        ],
        "ungrouped": [_service_row(s) for s in grouping.ungrouped],
        "group_summary": summarize_groups(grouping),
    }


def build_maintenance_overview(maintenances: Sequence[Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    parts = partition_maintenances(maintenances)
    return {
        "upcoming": [_maintenance_row(m, now) for m in parts.upcoming],
        "in_progress": [_maintenance_row(m, now) for m in parts.in_progress],
        "completed": [_maintenance_row(m, now) for m in parts.completed],
        "counts": {
            "upcoming": len(parts.upcoming),
            "in_progress": len(parts.in_progress),
            "completed": len(parts.completed),
        },
    }


def build_status_page(
    organization: Any,
    services: Sequence[Any],
    groups: Sequence[Any],
    incidents: Sequence[Any],
    maintenances: Sequence[Any],
    recent: int = DEFAULT_RECENT_ITEMS,
) -> Dict[str, Any]:
    """Public page for one organization: overall banner, services by group, open work and history."""
    overall = classify(services)
    grouping = group_services_by_group(services, groups)
    incident_parts = partition_incidents(incidents)
    maintenance_parts = partition_maintenances(maintenances)

    return {
        "organization": {"name": field_of(organization, "name"), "slug": field_of(organization, "slug")},
        "overall": _overall_json(overall),
        "groups": [
            {
                "name": field_of(g, "name"),
                "has_issues": has_issues(members),
                "services": [_service_row(s) for s in members],
            }
            for g, members in grouping.groups
        ],
        "ungrouped": [_service_row(s) for s in grouping.ungrouped],
        "active_incidents": [_incident_row(i) for i in incident_parts.active],
        "active_maintenances": [_maintenance_row(m) for m in maintenance_parts.active],
        "incident_history": [_incident_row(i) for i in recent_n(incident_parts.resolved, recent)],
        "maintenance_history": [
            _maintenance_row(m) for m in recent_n(maintenance_parts.completed, recent, key="start_time")
        ],
    }
