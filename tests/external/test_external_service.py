from __future__ import annotations

import pytest

from conftest import identity_of
from src.timesheet_portal.timesheet_portal.core.exceptions import EntryLockedError, NotFoundError, ValidationError

WEEK = "2024-06-07"


@pytest.fixture
def ext(container):
    return container.external_service


def test_submit_timesheet_creates_submitted_entry(ext, schedules_repo, jsmith):
    psa = schedules_repo.add(jsmith, "PSA")

    entry = ext.submit_timesheet(
        username="jsmith",
        schedule_id=psa.schedule_id,
        week_ending=WEEK,
        payload={"mon": 8, "tue": 8},
        notes={"mon": "kickoff"},
    )

    assert entry.is_submitted
    assert (entry.mon, entry.tue) == (8.0, 8.0)
    assert entry.notes.mon == "kickoff"


def test_submit_timesheet_over_draft_submits_it(ext, container, schedules_repo, jsmith):
    psa = schedules_repo.add(jsmith, "PSA")
    draft = container.timesheet_service.save_entry(
        identity_of(jsmith), schedule_id=psa.schedule_id, week_ending=WEEK, payload={"mon": 1}
    )

    entry = ext.submit_timesheet(username="jsmith", schedule_id=psa.schedule_id, week_ending=WEEK, payload={"mon": 5})

    assert entry.entry_id == draft.entry_id
    assert entry.mon == 5.0
    assert entry.is_submitted


def test_submit_timesheet_over_submitted_entry_is_locked(ext, schedules_repo, jsmith):
    psa = schedules_repo.add(jsmith, "PSA")
    ext.submit_timesheet(username="jsmith", schedule_id=psa.schedule_id, week_ending=WEEK, payload={"mon": 8})

    with pytest.raises(EntryLockedError):
        ext.submit_timesheet(username="jsmith", schedule_id=psa.schedule_id, week_ending=WEEK, payload={"mon": 1})


def test_submit_timesheet_unknown_user(ext, schedules_repo, jsmith):
    psa = schedules_repo.add(jsmith, "PSA")
    with pytest.raises(NotFoundError, match="User 'ghost' not found"):
        ext.submit_timesheet(username="ghost", schedule_id=psa.schedule_id, week_ending=WEEK, payload={})


def test_submit_timesheet_schedule_of_other_user(ext, schedules_repo, jsmith, mjohnson):
    infra = schedules_repo.add(mjohnson, "INFRA")
    with pytest.raises(NotFoundError, match="Schedule not found for this user"):
        ext.submit_timesheet(username="jsmith", schedule_id=infra.schedule_id, week_ending=WEEK, payload={})


def test_submit_timesheet_required_fields(ext):
    with pytest.raises(ValidationError):
        ext.submit_timesheet(username="jsmith", schedule_id=None, week_ending=WEEK, payload={})


def test_update_note_appends(ext, container, schedules_repo, jsmith):
    psa = schedules_repo.add(jsmith, "PSA")
    entry = container.timesheet_service.save_entry(
        identity_of(jsmith), schedule_id=psa.schedule_id, week_ending=WEEK, payload={}, notes={"wed": "A"}
    )

    updated, day = ext.update_note(entry_id=entry.entry_id, day="Wednesday", text="B", mode="append")

    assert day == "wed"
    assert updated.notes.wed == "A\nB"


def test_update_note_on_submitted_entry_is_locked(ext, schedules_repo, jsmith):
    psa = schedules_repo.add(jsmith, "PSA")
    entry = ext.submit_timesheet(username="jsmith", schedule_id=psa.schedule_id, week_ending=WEEK, payload={})

    with pytest.raises(EntryLockedError):
        ext.update_note(entry_id=entry.entry_id, day="mon", text="late")


def test_update_note_validation(ext):
    with pytest.raises(ValidationError):
        ext.update_note(entry_id=None, day="mon", text="x")
    with pytest.raises(ValidationError):
        ext.update_note(entry_id=1, day="mon", text=None)
    with pytest.raises(NotFoundError):
        ext.update_note(entry_id=123, day="mon", text="x")
