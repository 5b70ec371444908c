from enum import Enum
from typing import Any, Dict, Iterable, NamedTuple

from statuspage.errors import InvalidStatusError
from statuspage.schemas import OverallStatus, ServiceStatus, coerce_enum, field_of


class IconKind(str, Enum):
    check_circle = "check-circle"
    activity = "activity"
    alert_triangle = "alert-triangle"


class StatusLabel(NamedTuple):
    message: str
    icon: IconKind


# maintenance is not "down" but not fully normal either
OVERALL_FOR_SERVICE: Dict[ServiceStatus, OverallStatus] = {
    ServiceStatus.operational: OverallStatus.operational,
    ServiceStatus.degraded: OverallStatus.degraded,
    ServiceStatus.maintenance: OverallStatus.degraded,
    ServiceStatus.partialOutage: OverallStatus.partialOutage,
    ServiceStatus.majorOutage: OverallStatus.majorOutage,
}

# worst first
PRECEDENCE = (
    OverallStatus.majorOutage,
    OverallStatus.partialOutage,
    OverallStatus.degraded,
    OverallStatus.operational,
)

LABELS: Dict[OverallStatus, StatusLabel] = {
    OverallStatus.operational: StatusLabel("All Systems Operational", IconKind.check_circle),
    OverallStatus.degraded: StatusLabel("Degraded Performance", IconKind.activity),
    OverallStatus.partialOutage: StatusLabel("Partial System Outage", IconKind.alert_triangle),
    OverallStatus.majorOutage: StatusLabel("Major System Outage", IconKind.alert_triangle),
}


def service_status(record: Any) -> ServiceStatus:
    return coerce_enum(ServiceStatus, field_of(record, "status"), field="service.status")


def classify(services: Iterable[Any]) -> OverallStatus:
    """Derive the overall status of a set of services, worst case first.

    A single broken service is never masked by healthy ones. Every record is
    validated, so an unknown status raises DataIntegrityError even when a
    worse status has already been seen.
    """
    seen = {OVERALL_FOR_SERVICE[service_status(s)] for s in services}
    for level in PRECEDENCE:
        if level in seen:
            return level
    return OverallStatus.operational


def label_for(overall_status: Any) -> StatusLabel:
    if isinstance(overall_status, OverallStatus):
        return LABELS[overall_status]
    if isinstance(overall_status, str) and not isinstance(overall_status, Enum):
        for level, label in LABELS.items():
            if level.value == overall_status:
                return label
    raise InvalidStatusError(
        f"{overall_status!r} is not an overall status", field="overall_status", value=overall_status
    )
