from datetime import date, datetime, timezone

import pytest

from src.syncink.syncink.core.constants import AUTO_APPROVAL_COMMENT
from src.syncink.syncink.core.enums import AttendanceKind, RequestStatus, Role
from src.syncink.syncink.core.exceptions import (
    AlreadyReviewedError,
    AuthorizationError,
    DuplicatePendingRequestError,
    EmptyReasonError,
    InvalidTargetError,
    NotFoundError,
    ValidationError,
)

UTC = timezone.utc
REQUESTED_AT = datetime(2026, 3, 11, 9, 0, tzinfo=UTC)
REVIEWED_AT = datetime(2026, 3, 11, 15, 0, tzinfo=UTC)


@pytest.fixture
def auto_absent(container, employee):
    [entry] = container.attendance_service.run_auto_absent_sweep(as_of=datetime(2026, 3, 10, 19, 0, tzinfo=UTC))
    return entry


def _request(container, employee, entry, **overrides):
    kwargs = dict(
        current_role=Role.EMPLOYEE,
        current_user_id=employee.user_id,
        entry_id=entry.entry_id,
        reason="Forgot to submit after client visit",
        requested_attendance=AttendanceKind.PRESENT,
        requested_seconds_done=3600,
        requested_remarks="Client visit",
        now=REQUESTED_AT,
    )
    kwargs.update(overrides)
    return container.retroactive_service.create_request(**kwargs)


def test_create_request_is_pending(container, employee, auto_absent):
    req = _request(container, employee, auto_absent)

    assert req.status == RequestStatus.PENDING
    assert req.entry_id == auto_absent.entry_id
    assert req.user_id == employee.user_id
    assert req.requested_by == employee.user_id
    assert req.original_attendance == AttendanceKind.AUTO_ABSENT
    assert req.requested_attendance == AttendanceKind.PRESENT
    assert req.requested_seconds_done == 3600
    assert req.requested_remarks == "Client visit"
    assert req.request_date == REQUESTED_AT
    assert req.reviewed_by is None
    # Nothing changes until a reviewer approves.
    assert container.attendance_service.get_entry(auto_absent.entry_id).kind == AttendanceKind.AUTO_ABSENT


def test_approval_applies_requested_attendance(container, manager, employee, auto_absent):
    req = _request(container, employee, auto_absent)

    decided = container.retroactive_service.approve_request(
        current_role=Role.MANAGER,
        reviewer_id=manager.user_id,
        request_id=req.request_id,
        comments="OK",
        now=REVIEWED_AT,
    )

    assert decided.status == RequestStatus.APPROVED
    assert decided.reviewed_by == manager.user_id
    assert decided.reviewed_at == REVIEWED_AT
    assert decided.review_comments == "OK"

    entry = container.attendance_service.get_entry(auto_absent.entry_id)
    assert entry.kind == AttendanceKind.PRESENT
    assert entry.seconds_done == 3600
    assert entry.remarks == "Client visit"
    assert entry.retroactive_request_id == req.request_id
    assert entry.work_date == date(2026, 3, 10)


def test_rejection_leaves_entry_untouched(container, admin, employee, auto_absent):
    req = _request(container, employee, auto_absent)

    decided = container.retroactive_service.reject_request(
        current_role=Role.ADMIN,
        reviewer_id=admin.user_id,
        request_id=req.request_id,
        comments="No evidence",
        now=REVIEWED_AT,
    )

    assert decided.status == RequestStatus.REJECTED
    assert decided.is_terminal
    assert container.attendance_service.get_entry(auto_absent.entry_id) == auto_absent


def test_request_can_be_absent(container, manager, employee, auto_absent):
    req = _request(container, employee, auto_absent, requested_attendance=AttendanceKind.ABSENT)
    assert req.requested_seconds_done is None

    container.retroactive_service.approve_request(
        current_role=Role.MANAGER, reviewer_id=manager.user_id, request_id=req.request_id
    )

    assert container.attendance_service.get_entry(auto_absent.entry_id).kind == AttendanceKind.ABSENT


def test_request_cannot_be_reviewed_twice(container, manager, admin, employee, auto_absent):
    svc = container.retroactive_service
    req = _request(container, employee, auto_absent)
    svc.reject_request(current_role=Role.MANAGER, reviewer_id=manager.user_id, request_id=req.request_id)

    with pytest.raises(AlreadyReviewedError):
        svc.approve_request(current_role=Role.ADMIN, reviewer_id=admin.user_id, request_id=req.request_id)

    assert svc.get_request(req.request_id).status == RequestStatus.REJECTED
    assert container.attendance_service.get_entry(auto_absent.entry_id).kind == AttendanceKind.AUTO_ABSENT


def test_only_one_pending_request_per_entry(container, manager, employee, auto_absent):
    first = _request(container, employee, auto_absent)

    with pytest.raises(DuplicatePendingRequestError):
        _request(container, employee, auto_absent, reason="Second try")

    # Once decided, a new request may be filed.
    container.retroactive_service.reject_request(
        current_role=Role.MANAGER, reviewer_id=manager.user_id, request_id=first.request_id
    )
    second = _request(container, employee, auto_absent, reason="Second try")
    assert second.status == RequestStatus.PENDING


def test_only_auto_absent_entries_can_be_corrected(container, employee):
    entry = container.attendance_service.submit_entry(
        user_id=employee.user_id,
        work_date=date(2026, 3, 10),
        attendance=AttendanceKind.ABSENT,
        now=datetime(2026, 3, 10, 10, 0, tzinfo=UTC),
    )

    with pytest.raises(InvalidTargetError):
        _request(container, employee, entry)


@pytest.mark.parametrize("reason", ["", "   "])
def test_reason_is_required(container, employee, auto_absent, reason):
    with pytest.raises(EmptyReasonError):
        _request(container, employee, auto_absent, reason=reason)

    assert container.retroactive_service.list_for_user(employee.user_id) == []


def test_requested_attendance_cannot_be_auto_absent(container, employee, auto_absent):
    with pytest.raises(ValidationError):
        _request(container, employee, auto_absent, requested_attendance=AttendanceKind.AUTO_ABSENT)


def test_only_owner_can_request(container, employee, employee2, auto_absent):
    with pytest.raises(AuthorizationError):
        _request(container, employee2, auto_absent)


def test_reviewers_cannot_file_requests(container, manager, employee, auto_absent):
    with pytest.raises(AuthorizationError):
        _request(container, employee, auto_absent, current_role=Role.MANAGER)


def test_employees_cannot_review(container, employee, employee2, auto_absent):
    req = _request(container, employee, auto_absent)

    with pytest.raises(AuthorizationError):
        container.retroactive_service.approve_request(
            current_role=Role.EMPLOYEE, reviewer_id=employee2.user_id, request_id=req.request_id
        )


def test_unknown_entry_or_request(container, manager, employee):
    with pytest.raises(NotFoundError):
        container.retroactive_service.create_request(
            current_role=Role.EMPLOYEE,
            current_user_id=employee.user_id,
            entry_id=999,
            reason="x",
            requested_attendance=AttendanceKind.ABSENT,
        )
    with pytest.raises(NotFoundError):
        container.retroactive_service.approve_request(
            current_role=Role.MANAGER, reviewer_id=manager.user_id, request_id=999
        )


def test_invalid_decision_is_rejected(container, manager, employee, auto_absent):
    req = _request(container, employee, auto_absent)

    with pytest.raises(ValidationError):
        container.retroactive_service.review_request(
            current_role=Role.MANAGER,
            reviewer_id=manager.user_id,
            request_id=req.request_id,
            decision="maybe",
        )
    with pytest.raises(ValidationError):
        container.retroactive_service.review_request(
            current_role=Role.MANAGER,
            reviewer_id=manager.user_id,
            request_id=req.request_id,
            decision=RequestStatus.PENDING,
        )


def test_requests_disabled(container, admin, employee, auto_absent):
    container.settings_service.update_settings(current_role=Role.ADMIN, allow_retroactive=False)

    with pytest.raises(ValidationError):
        _request(container, employee, auto_absent)


def test_auto_approval_when_review_not_required(container, admin, employee, auto_absent):
    container.settings_service.update_settings(current_role=Role.ADMIN, retroactive_requires_approval=False)

    req = _request(container, employee, auto_absent)

    assert req.status == RequestStatus.APPROVED
    assert req.reviewed_by is None
    assert req.review_comments == AUTO_APPROVAL_COMMENT
    assert container.attendance_service.get_entry(auto_absent.entry_id).kind == AttendanceKind.PRESENT


def test_list_pending(container, manager, employee, employee2):
    entries = container.attendance_service.run_auto_absent_sweep(as_of=datetime(2026, 3, 10, 19, 0, tzinfo=UTC))
    by_user = {e.user_id: e for e in entries}
    mine = _request(container, employee, by_user[employee.user_id])
    theirs = _request(container, employee2, by_user[employee2.user_id])
    container.retroactive_service.reject_request(
        current_role=Role.MANAGER, reviewer_id=manager.user_id, request_id=theirs.request_id
    )

    pending = container.retroactive_service.list_pending()

    assert [r.request_id for r in pending] == [mine.request_id]


def test_approved_request_cannot_be_reviewed_again(container, manager, admin, employee, auto_absent):
    svc = container.retroactive_service
    req = _request(container, employee, auto_absent)
    svc.approve_request(current_role=Role.MANAGER, reviewer_id=manager.user_id, request_id=req.request_id)
    corrected = container.attendance_service.get_entry(auto_absent.entry_id)

    with pytest.raises(AlreadyReviewedError):
        svc.approve_request(current_role=Role.ADMIN, reviewer_id=admin.user_id, request_id=req.request_id)
    with pytest.raises(AlreadyReviewedError):
        svc.reject_request(current_role=Role.ADMIN, reviewer_id=admin.user_id, request_id=req.request_id)

    after = svc.get_request(req.request_id)
    assert after.status == RequestStatus.APPROVED
    assert after.reviewed_by == manager.user_id
    assert container.attendance_service.get_entry(auto_absent.entry_id) == corrected


def test_failed_correction_leaves_request_pending(container, manager, employee, auto_absent, monkeypatch):
    req = _request(container, employee, auto_absent)

    def broken_correction(**kwargs):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(container.attendance_repo, "apply_correction", broken_correction)
    with pytest.raises(RuntimeError):
        container.retroactive_service.approve_request(
            current_role=Role.MANAGER, reviewer_id=manager.user_id, request_id=req.request_id
        )

    assert container.retroactive_service.get_request(req.request_id).status == RequestStatus.PENDING
    assert container.attendance_service.get_entry(auto_absent.entry_id).kind == AttendanceKind.AUTO_ABSENT

    # Once the store recovers the same request can still be approved.
    monkeypatch.undo()
    approved = container.retroactive_service.approve_request(
        current_role=Role.MANAGER, reviewer_id=manager.user_id, request_id=req.request_id
    )
    assert approved.status == RequestStatus.APPROVED
    assert container.attendance_service.get_entry(auto_absent.entry_id).kind == AttendanceKind.PRESENT


def test_approval_of_vanished_entry_writes_nothing(container, manager, employee, auto_absent):
    req = _request(container, employee, auto_absent)
    del container.attendance_repo.rows[auto_absent.entry_id]

    with pytest.raises(NotFoundError):
        container.retroactive_service.approve_request(
            current_role=Role.MANAGER, reviewer_id=manager.user_id, request_id=req.request_id
        )

    assert container.retroactive_service.get_request(req.request_id).status == RequestStatus.PENDING
