from datetime import date

import pytest

from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.modules.attendance.schemas import AttendanceCreate, AttendanceStatus, AttendanceUpdate
from app.modules.attendance.service import AttendanceService
from app.modules.weeks.schemas import WeekCreate
from app.modules.weeks.service import WeekService


def record(user_id, day, status=AttendanceStatus.PRESENT, week_id=None):
    return AttendanceCreate(user_id=user_id, date=date.fromisoformat(day), status=status, week_id=week_id)


def test_record_attendance_embeds_member_name(store, tenants):
    service = AttendanceService(store)
    created = service.record_attendance(tenants.admin, record(tenants.alice.id, "2026-02-03"))

    assert created.committee_id == tenants.design
    fetched = service.get_attendance(tenants.admin, created.id)
    assert fetched.user.full_name == "Alice"


def test_member_of_other_committee_is_rejected(store, tenants):
    with pytest.raises(ValidationError):
        AttendanceService(store).record_attendance(tenants.admin, record(tenants.carol.id, "2026-02-03"))


def test_week_of_other_committee_is_rejected(store, tenants):
    foreign_week = WeekService(store).create_week(tenants.web_admin, WeekCreate(
        week_number=1, title="Web kickoff", start_date=date(2026, 2, 2), end_date=date(2026, 2, 8)
    ))
    with pytest.raises(ValidationError):
        AttendanceService(store).record_attendance(
            tenants.admin, record(tenants.alice.id, "2026-02-03", week_id=foreign_week.id)
        )


def test_members_cannot_record(store, tenants):
    with pytest.raises(ForbiddenError):
        AttendanceService(store).record_attendance(tenants.alice, record(tenants.alice.id, "2026-02-03"))


def test_members_see_only_their_records(store, tenants):
    service = AttendanceService(store)
    own = service.record_attendance(tenants.admin, record(tenants.alice.id, "2026-02-03"))
    other = service.record_attendance(tenants.admin, record(tenants.bob.id, "2026-02-03"))

    assert [a.id for a in service.list_attendance(tenants.alice)] == [own.id]
    assert service.list_attendance(tenants.alice, user_id=tenants.bob.id) == []
    with pytest.raises(NotFoundError):
        service.get_attendance(tenants.alice, other.id)
    assert len(service.list_attendance(tenants.admin)) == 2


def test_filters_and_ordering(store, tenants):
    service = AttendanceService(store)
    service.record_attendance(tenants.admin, record(tenants.alice.id, "2026-02-03"))
    service.record_attendance(tenants.admin, record(tenants.alice.id, "2026-02-10", AttendanceStatus.ABSENT))
    service.record_attendance(tenants.admin, record(tenants.alice.id, "2026-02-17", AttendanceStatus.EXCUSED))

    dates = [a.date for a in service.list_attendance(tenants.admin)]
    assert dates == [date(2026, 2, 17), date(2026, 2, 10), date(2026, 2, 3)]

    ranged = service.list_attendance(tenants.admin, date_from=date(2026, 2, 4), date_to=date(2026, 2, 16))
    assert [a.date for a in ranged] == [date(2026, 2, 10)]

    absent = service.list_attendance(tenants.admin, status=AttendanceStatus.ABSENT)
    assert [a.status for a in absent] == [AttendanceStatus.ABSENT]

    with pytest.raises(ValidationError):
        service.list_attendance(tenants.admin, date_from=date(2026, 2, 10), date_to=date(2026, 2, 1))


def test_update_and_delete(store, tenants):
    service = AttendanceService(store)
    created = service.record_attendance(tenants.admin, record(tenants.alice.id, "2026-02-03"))

    updated = service.update_attendance(
        tenants.admin, created.id, AttendanceUpdate(status=AttendanceStatus.EXCUSED, notes="Doctor")
    )
    assert updated.status == AttendanceStatus.EXCUSED
    assert updated.notes == "Doctor"

    with pytest.raises(NotFoundError):
        service.delete_attendance(tenants.web_admin, created.id)
    assert service.delete_attendance(tenants.admin, created.id) is True
    assert store.rows("attendance") == []
