from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, field_validator, model_validator

from statuspage.errors import DataIntegrityError
from statuspage.timefmt import as_utc


class ServiceStatus(str, Enum):
    operational = "operational"
    degraded = "degraded"
    partialOutage = "partialOutage"
    majorOutage = "majorOutage"
    maintenance = "maintenance"


class OverallStatus(str, Enum):
    operational = "operational"
    degraded = "degraded"
    partialOutage = "partialOutage"
    majorOutage = "majorOutage"


class IncidentStatus(str, Enum):
    investigating = "investigating"
    identified = "identified"
    monitoring = "monitoring"
    resolved = "resolved"


class IncidentImpact(str, Enum):
    none = "none"
    minor = "minor"
    major = "major"
    critical = "critical"


class MaintenanceStatus(str, Enum):
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"


E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value: Any, field: str = "status") -> E:
    """Return ``value`` as a member of ``enum_cls`` or raise DataIntegrityError.

    Members of a different enum are rejected even when their string value
    matches, so an OverallStatus never passes for a ServiceStatus by accident.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str) and not isinstance(value, Enum):
        try:
            return enum_cls(value)
        except ValueError:
            pass
    raise DataIntegrityError(
        f"{field}={value!r} is not a valid {enum_cls.__name__}", field=field, value=value
    )


def field_of(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    # timestamps without an offset are UTC
    return None if value is None else as_utc(value)


class Organization(BaseModel):
    id: str
    name: str
    slug: str


class Service(BaseModel):
    id: str
    organization_id: str
    name: str
    description: str = ""
    status: ServiceStatus = ServiceStatus.operational
    group_id: Optional[str] = None
    updated_at: Optional[datetime] = None

    @field_validator("updated_at", mode="after")
    @classmethod
    def normalise_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _utc(value)


class ServiceGroup(BaseModel):
    id: str
    organization_id: str
    name: str


class Incident(BaseModel):
    id: str
    organization_id: str
    title: str
    description: str = ""
    status: IncidentStatus = IncidentStatus.investigating
    impact: IncidentImpact = IncidentImpact.none
    created_at: datetime
    service_ids: List[str] = Field(default_factory=list)

    @field_validator("created_at", mode="after")
    @classmethod
    def normalise_timestamps(cls, value: datetime) -> datetime:
        return _utc(value)


class MaintenanceUpdate(BaseModel):
    id: str
    message: str
    status: MaintenanceStatus
    created_at: datetime
    author: Optional[str] = None

    @field_validator("created_at", mode="after")
    @classmethod
    def normalise_timestamps(cls, value: datetime) -> datetime:
        return _utc(value)


class Maintenance(BaseModel):
    id: str
    organization_id: str
    title: str
    description: str = ""
    status: MaintenanceStatus = MaintenanceStatus.scheduled
    start_time: datetime
    end_time: datetime
    service_ids: List[str] = Field(default_factory=list)
    updates: List[MaintenanceUpdate] = Field(default_factory=list)

    @field_validator("start_time", "end_time", mode="after")
    @classmethod
    def normalise_timestamps(cls, value: datetime) -> datetime:
        return _utc(value)

    @model_validator(mode="after")
    def _window_is_ordered(self) -> "Maintenance":
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self
