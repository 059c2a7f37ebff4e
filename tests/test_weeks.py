from datetime import date

import pytest
from pydantic import ValidationError as SchemaValidationError

from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.modules.weeks.schemas import WeekCreate, WeekUpdate
from app.modules.weeks.service import WeekService


def week(number, start="2026-02-02", end="2026-02-08", title=None):
    return WeekCreate(
        week_number=number,
        title=title or f"Week {number}",
        start_date=date.fromisoformat(start),
        end_date=date.fromisoformat(end),
    )


def test_create_and_get_week(store, tenants):
    service = WeekService(store)
    created = service.create_week(tenants.admin, week(1))

    assert created.committee_id == tenants.design
    assert service.get_week(tenants.alice, created.id).title == "Week 1"


def test_member_cannot_create_week(store, tenants):
    with pytest.raises(ForbiddenError):
        WeekService(store).create_week(tenants.alice, week(1))
    assert store.rows("weeks") == []


def test_week_from_other_committee_is_not_found(store, tenants):
    service = WeekService(store)
    created = service.create_week(tenants.web_admin, week(1))

    with pytest.raises(NotFoundError):
        service.get_week(tenants.admin, created.id)
    with pytest.raises(NotFoundError):
        service.update_week(tenants.admin, created.id, WeekUpdate(title="Hijacked"))
    with pytest.raises(NotFoundError):
        service.delete_week(tenants.admin, created.id)
    assert store.find("weeks", created.id)["title"] == "Week 1"


def test_list_weeks_in_week_number_order(store, tenants):
    service = WeekService(store)
    service.create_week(tenants.admin, week(3, "2026-02-16", "2026-02-22"))
    service.create_week(tenants.admin, week(1, "2026-02-02", "2026-02-08"))
    service.create_week(tenants.admin, week(2, "2026-02-09", "2026-02-15"))
    service.create_week(tenants.web_admin, week(1))

    weeks = service.list_weeks(tenants.alice)
    assert [w.week_number for w in weeks] == [1, 2, 3]

    upcoming = service.list_weeks(tenants.alice, ending_on_or_after=date(2026, 2, 10))
    assert [w.week_number for w in upcoming] == [2, 3]


def test_end_date_before_start_date_is_rejected():
    with pytest.raises(SchemaValidationError):
        week(1, "2026-02-08", "2026-02-02")


def test_update_checks_dates_against_stored_row(store, tenants):
    service = WeekService(store)
    created = service.create_week(tenants.admin, week(1, "2026-02-02", "2026-02-08"))

    with pytest.raises(ValidationError):
        service.update_week(tenants.admin, created.id, WeekUpdate(end_date=date(2026, 2, 1)))

    updated = service.update_week(tenants.admin, created.id, WeekUpdate(end_date=date(2026, 2, 10)))
    assert updated.end_date == date(2026, 2, 10)


def test_week_number_is_unique_per_committee(store, tenants):
    service = WeekService(store)
    service.create_week(tenants.admin, week(1))
    second = service.create_week(tenants.admin, week(2))

    with pytest.raises(ValidationError):
        service.create_week(tenants.admin, week(1))
    with pytest.raises(ValidationError):
        service.update_week(tenants.admin, second.id, WeekUpdate(week_number=1))

    # another committee may reuse the number
    assert service.create_week(tenants.web_admin, week(1)).week_number == 1


def test_delete_week_leaves_attendance_to_the_foreign_key(store, tenants):
    created = WeekService(store).create_week(tenants.admin, week(1))
    store.table("attendance").insert({
        "committee_id": tenants.design,
        "user_id": tenants.alice.id,
        "week_id": created.id,
        "date": "2026-02-03",
        "status": "present",
    }).execute()
    # the delete alone is enough; attendance is never written
    store.fail("update", "attendance")

    assert WeekService(store).delete_week(tenants.admin, created.id) is True
    assert store.rows("weeks") == []
    record = store.rows("attendance")[0]
    assert record["week_id"] is None
    assert record["status"] == "present"


def test_member_without_committee_sees_no_weeks(store, tenants):
    WeekService(store).create_week(tenants.admin, week(1))
    loner = store.add_profile(None, full_name="Loner")
    assert WeekService(store).list_weeks(loner) == []


def test_weeks_over_http(client, store, tenants):
    payload = {
        "week_number": 1,
        "title": "Kickoff",
        "start_date": "2026-02-02",
        "end_date": "2026-02-08",
        "committee_id": tenants.web,
    }
    response = client.post("/api/v1/weeks", json=payload, headers=store.headers(tenants.admin))
    assert response.status_code == 201
    # committee comes from the caller, never from the body
    assert response.json()["committee_id"] == tenants.design

    response = client.post("/api/v1/weeks", json=payload, headers=store.headers(tenants.alice))
    assert response.status_code == 403

    response = client.get("/api/v1/weeks", headers=store.headers(tenants.carol))
    assert response.status_code == 200
    assert response.json() == []


def test_missing_token_is_rejected(client):
    response = client.get("/api/v1/weeks")
    assert response.status_code in (401, 403)
