"""Tests for scene validation at the system boundary."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from app.domain.models import ConflictEntry, ConflictReport, ConflictType, Scene, parse_person_ids


def _scene(**overrides) -> Scene:
    defaults = dict(company_id="co-1", show_id="show-1", scene_number="1", title="Opening")
    defaults.update(overrides)
    return Scene(**defaults)


def test_person_ids_from_list_are_deduplicated():
    assert parse_person_ids([3, 1, 3]) == frozenset({1, 3})


def test_person_ids_from_legacy_json_string():
    assert parse_person_ids("[4, 2, 4]") == frozenset({2, 4})


@pytest.mark.parametrize("raw", [None, "", "not json", '{"a": 1}', "7"])
def test_person_ids_unusable_legacy_values_become_empty(raw):
    assert parse_person_ids(raw) == frozenset()


def test_person_ids_reject_non_integer_items():
    with pytest.raises(ValueError):
        parse_person_ids(["abc"])
    with pytest.raises(ValueError):
        parse_person_ids([True])


def test_scene_normalises_assignments():
    scene = _scene(assigned_actors="[1, 2, 2]", assigned_crew=[2, 5])
    assert scene.assigned_actors == frozenset({1, 2})
    assert scene.assigned_crew == frozenset({2, 5})
    assert scene.resources == frozenset({1, 2, 5})


def test_scene_rejects_bad_person_id():
    with pytest.raises(ValidationError):
        _scene(assigned_crew=[{"id": 1}])


def test_naive_scheduled_time_is_taken_as_utc():
    scene = _scene(scheduled_time=datetime(2025, 3, 10, 10, 0))
    assert scene.scheduled_time == datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc)


def test_report_groups_by_type():
    def entry(kind: ConflictType) -> ConflictEntry:
        return ConflictEntry(
            scene_id="a",
            scene_number="1",
            scene_title="A",
            conflict_type=kind,
            conflicting_scene_id="b",
            conflicting_scene_number="2",
            conflicting_scene_title="B",
            conflicting_resources=[1] if kind == ConflictType.RESOURCE else None,
        )

    report = ConflictReport(
        has_conflicts=True,
        conflicts=[entry(ConflictType.TIME), entry(ConflictType.RESOURCE)],
    )
    assert [c.conflict_type for c in report.time_overlaps] == [ConflictType.TIME]
    assert [c.conflict_type for c in report.resource_conflicts] == [ConflictType.RESOURCE]


def test_empty_report_defaults():
    report = ConflictReport()
    assert report.has_conflicts is False
    assert report.conflicts == []
