from datetime import date, datetime, timezone

from src.syncink.syncink.core.enums import AttendanceKind, Role

UTC = timezone.utc
DAY = date(2026, 3, 10)


def test_sweep_does_nothing_until_deadline_passes(container, employee):
    svc = container.attendance_service

    assert svc.run_auto_absent_sweep(as_of=datetime(2026, 3, 10, 17, 0, tzinfo=UTC)) == []
    assert svc.run_auto_absent_sweep(as_of=datetime(2026, 3, 10, 18, 0, tzinfo=UTC)) == []
    assert not svc.has_entry_for_date(employee.user_id, DAY)


def test_sweep_marks_only_employees_without_entries(container, admin, manager, employee, employee2):
    svc = container.attendance_service
    svc.submit_entry(
        user_id=employee2.user_id,
        work_date=DAY,
        attendance=AttendanceKind.PRESENT,
        seconds_done=3600,
        now=datetime(2026, 3, 10, 12, 0, tzinfo=UTC),
    )
    as_of = datetime(2026, 3, 10, 18, 5, tzinfo=UTC)

    created = svc.run_auto_absent_sweep(as_of=as_of)

    assert [e.user_id for e in created] == [employee.user_id]
    entry = created[0]
    assert entry.kind == AttendanceKind.AUTO_ABSENT
    assert entry.work_date == DAY
    assert entry.is_late is False
    assert entry.submitted_at == as_of
    assert not svc.has_entry_for_date(admin.user_id, DAY)
    assert not svc.has_entry_for_date(manager.user_id, DAY)
    assert svc.list_entries_for_user(employee2.user_id)[0].kind == AttendanceKind.PRESENT


def test_sweep_is_idempotent(container, employee):
    svc = container.attendance_service

    first = svc.run_auto_absent_sweep(as_of=datetime(2026, 3, 10, 19, 0, tzinfo=UTC))
    second = svc.run_auto_absent_sweep(as_of=datetime(2026, 3, 10, 20, 0, tzinfo=UTC))

    assert len(first) == 1
    assert second == []
    assert len(svc.list_entries_for_user(employee.user_id)) == 1


def test_sweep_can_be_disabled(container, admin, employee):
    container.settings_service.update_settings(current_role=Role.ADMIN, auto_absent_after_deadline=False)

    assert container.attendance_service.run_auto_absent_sweep(as_of=datetime(2026, 3, 10, 23, 0, tzinfo=UTC)) == []


def test_sweep_uses_local_day_and_deadline(container, admin, employee):
    container.settings_service.update_settings(
        current_role=Role.ADMIN,
        daily_deadline="17:00",
        time_zone="Asia/Tokyo",
    )
    svc = container.attendance_service

    # 16:30 in Tokyo: before the local deadline.
    assert svc.run_auto_absent_sweep(as_of=datetime(2026, 3, 10, 7, 30, tzinfo=UTC)) == []

    # 17:30 in Tokyo.
    created = svc.run_auto_absent_sweep(as_of=datetime(2026, 3, 10, 8, 30, tzinfo=UTC))
    assert [e.work_date for e in created] == [DAY]

    # 00:30 on the 11th in Tokyo: a new day, deadline not reached yet.
    assert svc.run_auto_absent_sweep(as_of=datetime(2026, 3, 10, 15, 30, tzinfo=UTC)) == []
