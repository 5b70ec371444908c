import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Type

from pydantic import BaseModel

from statuspage.cache import clear_cache
from statuspage.errors import DataIntegrityError
from statuspage.loader import parse_record, data_path
from statuspage.logging_config import get_logger
from statuspage.schemas import (
    Incident,
    IncidentStatus,
    Maintenance,
    MaintenanceUpdate,
    Service,
    ServiceGroup,
    ServiceStatus,
    coerce_enum,
)

logger = get_logger("statuspage.updater")


def _read(path: Path) -> List[Dict[str, Any]]:
    if not path.exists():
        return []
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    # refuse to rewrite a file we could not read back as records
    if not isinstance(data, list):
        raise DataIntegrityError(f"{path.name} must hold a JSON list", field=path.name)
    return data


def _write(path: Path, obj) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2)
    clear_cache()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _find(data: List[Dict[str, Any]], organization_id: str, record_id: str):
    for row in data:
        if row.get("organization_id") == organization_id and row.get("id") == record_id:
            return row
    return None


def _add(kind: str, model: Type[BaseModel], organization_id: str, record: Dict[str, Any]) -> Dict[str, Any]:
    record = {**record, "organization_id": organization_id}
    record.setdefault("id", uuid.uuid4().hex)
    parsed = parse_record(model, record, kind)

    path = data_path(kind)
    data = _read(path)
    if _find(data, organization_id, parsed.id) is not None:
        return {"ok": False, "error": f"{kind}_id_exists", "id": parsed.id}

    data.append(parsed.model_dump(mode="json"))
    _write(path, data)
    logger.info("record_created", kind=kind, organization_id=organization_id, id=parsed.id)
    return {"ok": True, f"added_{kind}_id": parsed.id}


def add_service(organization_id: str, service: Dict[str, Any]) -> Dict[str, Any]:
    service = {**service}
    service.setdefault("updated_at", _now())
    return _add("service", Service, organization_id, service)


def add_service_group(organization_id: str, group: Dict[str, Any]) -> Dict[str, Any]:
    return _add("service_group", ServiceGroup, organization_id, group)


def add_incident(organization_id: str, incident: Dict[str, Any]) -> Dict[str, Any]:
    incident = {**incident}
    incident.setdefault("created_at", _now())
    return _add("incident", Incident, organization_id, incident)


def add_maintenance(organization_id: str, maintenance: Dict[str, Any]) -> Dict[str, Any]:
    return _add("maintenance", Maintenance, organization_id, maintenance)


def set_service_status(organization_id: str, service_id: str, status: str) -> Dict[str, Any]:
    status = coerce_enum(ServiceStatus, status, field="service.status")
    path = data_path("service")
    data = _read(path)
    row = _find(data, organization_id, service_id)
    if row is None:
        return {"ok": False, "error": "service_not_found", "id": service_id}

    row["status"] = status.value
    row["updated_at"] = _now()
    _write(path, data)
    logger.info("service_status_set", organization_id=organization_id, id=service_id, status=status.value)
    return {"ok": True, "id": service_id, "status": status.value}


def set_incident_status(organization_id: str, incident_id: str, status: str) -> Dict[str, Any]:
    status = coerce_enum(IncidentStatus, status, field="incident.status")
    path = data_path("incident")
    data = _read(path)
    row = _find(data, organization_id, incident_id)
    if row is None:
        return {"ok": False, "error": "incident_not_found", "id": incident_id}

    row["status"] = status.value
    _write(path, data)
    logger.info("incident_status_set", organization_id=organization_id, id=incident_id, status=status.value)
    return {"ok": True, "id": incident_id, "status": status.value}


def delete_service_group(organization_id: str, group_id: str) -> Dict[str, Any]:
    groups_path = data_path("service_group")
    groups = _read(groups_path)
    if _find(groups, organization_id, group_id) is None:
        return {"ok": False, "error": "service_group_not_found", "id": group_id}

    # members become ungrouped, they are never deleted with the group
    services_path = data_path("service")
    services = _read(services_path)
    ungrouped = 0
    for s in services:
        if s.get("organization_id") == organization_id and s.get("group_id") == group_id:
            s["group_id"] = None
            ungrouped += 1
    if ungrouped:
        _write(services_path, services)

    remaining = [
        g for g in groups if not (g.get("organization_id") == organization_id and g.get("id") == group_id)
    ]
    _write(groups_path, remaining)
    logger.info("service_group_deleted", organization_id=organization_id, id=group_id, ungrouped=ungrouped)
    return {"ok": True, "deleted_service_group_id": group_id, "ungrouped_services": ungrouped}


def add_maintenance_update(organization_id: str, maintenance_id: str, update: Dict[str, Any]) -> Dict[str, Any]:
    path = data_path("maintenance")
    data = _read(path)
    row = _find(data, organization_id, maintenance_id)
    if row is None:
        return {"ok": False, "error": "maintenance_not_found", "id": maintenance_id}

    update = {**update}
    update.setdefault("id", uuid.uuid4().hex)
    update.setdefault("created_at", _now())
    parsed = parse_record(MaintenanceUpdate, update, "maintenance_update")

    row.setdefault("updates", []).append(parsed.model_dump(mode="json"))
    row["status"] = parsed.status.value
    _write(path, data)
    logger.info(
        "maintenance_update_added",
        organization_id=organization_id,
        id=maintenance_id,
        status=parsed.status.value,
        updates=len(row["updates"]),
    )
    return {"ok": True, "id": maintenance_id, "status": parsed.status.value, "updates_total": len(row["updates"])}
