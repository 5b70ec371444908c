from pathlib import Path
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from statuspage import config
from statuspage.cache import load_json_cached
from statuspage.errors import DataIntegrityError, OrganizationNotFoundError
from statuspage.logging_config import get_logger
from statuspage.schemas import Incident, Maintenance, Organization, Service, ServiceGroup

logger = get_logger("statuspage.loader")

M = TypeVar("M", bound=BaseModel)

FILES = {
    "organization": "organizations.json",
    "service": "services.json",
    "service_group": "service_groups.json",
    "incident": "incidents.json",
    "maintenance": "maintenances.json",
}


def data_path(kind: str) -> Path:
    return config.DATA_DIR / FILES[kind]


def _rows(kind: str) -> List[Dict[str, Any]]:
    raw = load_json_cached(data_path(kind))
    if not isinstance(raw, list):
        raise DataIntegrityError(f"{FILES[kind]} must hold a JSON list", field=kind)
    return raw


def parse_record(model: Type[M], row: Dict[str, Any], kind: str) -> M:
    try:
        return model(**row)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ())) or kind
        logger.warning("record_rejected", kind=kind, id=row.get("id"), field=field, error=err.get("msg"))
        raise DataIntegrityError(
            f"{kind} {row.get('id')!r}: {err.get('msg')}", field=field, value=err.get("input")
        ) from e


def _scoped(model: Type[M], kind: str, organization_id: str) -> List[M]:
    items = [parse_record(model, row, kind) for row in _rows(kind) if row.get("organization_id") == organization_id]
    logger.debug("records_loaded", kind=kind, organization_id=organization_id, count=len(items))
    return items


def list_organizations() -> List[Organization]:
    return [parse_record(Organization, row, "organization") for row in _rows("organization")]


def get_organization(organization_id: str) -> Organization:
    for org in list_organizations():
        if org.id == organization_id:
            return org
    raise OrganizationNotFoundError(organization_id)


def get_organization_by_slug(slug: str) -> Organization:
    for org in list_organizations():
        if org.slug == slug:
            return org
    raise OrganizationNotFoundError(slug)


def list_services(organization_id: str) -> List[Service]:
    return _scoped(Service, "service", organization_id)


def list_service_groups(organization_id: str) -> List[ServiceGroup]:
    return _scoped(ServiceGroup, "service_group", organization_id)


def list_incidents(organization_id: str) -> List[Incident]:
    incidents = _scoped(Incident, "incident", organization_id)
    return sorted(incidents, key=lambda i: i.created_at, reverse=True)


def list_maintenances(organization_id: str) -> List[Maintenance]:
    maintenances = _scoped(Maintenance, "maintenance", organization_id)
    for m in maintenances:
        m.updates.sort(key=lambda u: u.created_at, reverse=True)
    return sorted(maintenances, key=lambda m: m.start_time)
