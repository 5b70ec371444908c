"""Shared test fixtures."""

import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from statuspage import config
from statuspage.cache import clear_cache

SAMPLE_DATA = Path(__file__).resolve().parents[1] / "data"

BASE_TIME = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def make_service(id="svc", status="operational", group_id=None, organization_id="org_test", **extra):
    return {
        "id": id,
        "organization_id": organization_id,
        "name": extra.pop("name", id.title()),
        "status": status,
        "group_id": group_id,
        **extra,
    }


def make_incident(id="inc", status="investigating", hours_ago=0, **extra):
    return {
        "id": id,
        "organization_id": "org_test",
        "title": extra.pop("title", f"Incident {id}"),
        "status": status,
        "impact": extra.pop("impact", "minor"),
        "created_at": BASE_TIME - timedelta(hours=hours_ago),
        **extra,
    }


def make_maintenance(id="mnt", status="scheduled", start_in_hours=1, updates=None, **extra):
    start = BASE_TIME + timedelta(hours=start_in_hours)
    return {
        "id": id,
        "organization_id": "org_test",
        "title": extra.pop("title", f"Maintenance {id}"),
        "status": status,
        "start_time": start,
        "end_time": start + timedelta(hours=2),
        "updates": updates or [],
        **extra,
    }


def make_update(id="upd", status="scheduled", hours_ago=0, message="update"):
    return {
        "id": id,
        "message": message,
        "status": status,
        "created_at": BASE_TIME - timedelta(hours=hours_ago),
        "author": "ops",
    }


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Copy the sample dataset into a temp dir and point the gateway at it."""
    target = tmp_path / "data"
    shutil.copytree(SAMPLE_DATA, target)
    monkeypatch.setattr(config, "DATA_DIR", target)
    clear_cache()
    yield target
    clear_cache()
