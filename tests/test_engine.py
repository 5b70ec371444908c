"""Tests for overall status classification and labels."""

import itertools

import pytest

from statuspage.engine import LABELS, OVERALL_FOR_SERVICE, IconKind, classify, label_for
from statuspage.errors import DataIntegrityError, InvalidStatusError
from statuspage.schemas import OverallStatus, Service, ServiceStatus
from tests.conftest import make_service


def _services(*statuses):
    return [make_service(id=f"s{i}", status=s) for i, s in enumerate(statuses)]


class TestClassify:
    def test_empty_is_operational(self):
        assert classify([]) is OverallStatus.operational

    def test_all_operational(self):
        assert classify(_services("operational", "operational")) is OverallStatus.operational

    def test_major_outage_wins_in_any_order(self):
        statuses = ["operational", "degraded", "partialOutage", "maintenance", "majorOutage"]
        for perm in itertools.permutations(statuses):
            assert classify(_services(*perm)) is OverallStatus.majorOutage

    def test_single_major_outage_not_masked_by_many_healthy(self):
        services = _services(*(["operational"] * 50 + ["majorOutage"]))
        assert classify(services) is OverallStatus.majorOutage

    def test_partial_outage_beats_degraded(self):
        assert classify(_services("degraded", "partialOutage", "maintenance")) is OverallStatus.partialOutage

    @pytest.mark.parametrize("status", ["degraded", "maintenance"])
    def test_degraded_or_maintenance_gives_degraded(self, status):
        assert classify(_services("operational", status)) is OverallStatus.degraded

    def test_maintenance_only(self):
        assert classify(_services("maintenance")) is OverallStatus.degraded

    def test_spec_example(self):
        services = _services("operational", "degraded", "majorOutage")
        assert classify(services) is OverallStatus.majorOutage

    def test_accepts_models_and_enums(self):
        services = [
            Service(id="a", organization_id="o", name="A", status=ServiceStatus.partialOutage),
            {"status": ServiceStatus.operational},
        ]
        assert classify(services) is OverallStatus.partialOutage

    def test_accepts_generator(self):
        assert classify(s for s in _services("degraded")) is OverallStatus.degraded

    def test_unknown_status_raises(self):
        with pytest.raises(DataIntegrityError) as exc:
            classify(_services("operational", "down"))
        assert exc.value.value == "down"

    def test_unknown_status_raises_even_after_major_outage(self):
        with pytest.raises(DataIntegrityError):
            classify(_services("majorOutage", "broken"))

    def test_missing_status_raises(self):
        with pytest.raises(DataIntegrityError):
            classify([{"id": "x"}])

    def test_overall_status_member_is_not_a_service_status(self):
        with pytest.raises(DataIntegrityError):
            classify([{"status": OverallStatus.degraded}])

    def test_service_table_is_exhaustive(self):
        assert set(OVERALL_FOR_SERVICE) == set(ServiceStatus)


class TestLabelFor:
    @pytest.mark.parametrize(
        "status,message,icon",
        [
            (OverallStatus.operational, "All Systems Operational", IconKind.check_circle),
            (OverallStatus.degraded, "Degraded Performance", IconKind.activity),
            (OverallStatus.partialOutage, "Partial System Outage", IconKind.alert_triangle),
            (OverallStatus.majorOutage, "Major System Outage", IconKind.alert_triangle),
        ],
    )
    def test_labels(self, status, message, icon):
        label = label_for(status)
        assert label.message == message
        assert label.icon is icon

    def test_plain_string_value(self):
        assert label_for("partialOutage").message == "Partial System Outage"

    @pytest.mark.parametrize("bad", ["maintenance", "unknown", "", None, 3])
    def test_outside_domain_raises(self, bad):
        with pytest.raises(InvalidStatusError):
            label_for(bad)

    def test_service_status_member_rejected(self):
        with pytest.raises(InvalidStatusError):
            label_for(ServiceStatus.operational)

    def test_invalid_status_is_data_integrity_error(self):
        with pytest.raises(DataIntegrityError):
            label_for("nope")

    def test_label_table_is_exhaustive(self):
        assert set(LABELS) == set(OverallStatus)
