from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Dict, Optional

import pytest

from src.syncink.syncink.attendance.model import WorkEntry
from src.syncink.syncink.container import assemble
from src.syncink.syncink.core.enums import RequestStatus, Role
from src.syncink.syncink.core.exceptions import AlreadyReviewedError, NotFoundError
from src.syncink.syncink.main import create_app
from src.syncink.syncink.retroactive.model import RetroactiveRequest
from src.syncink.syncink.settings.model import AttendanceSettings
from src.syncink.syncink.users.model import User


class InMemoryUsers:
    def __init__(self):
        self._next_id = 1
        self.rows: Dict[int, User] = {}

    def get_by_id(self, user_id):
        return self.rows.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self.rows.values() if u.email == email), None)

    def list_users(self, *, role=None):
        return [u for u in self.rows.values() if role is None or u.role == role]

    def create_user(self, *, name, email, password_hash, role, created_at):
        uid = self._next_id
        self._next_id += 1
        self.rows[uid] = User(
            user_id=uid,
            name=name,
            email=email,
            password_hash=password_hash,
            role=Role(role),
            created_at=created_at,
        )
        return uid

    def update_user(self, user):
        if user.user_id not in self.rows:
            return False
        self.rows[user.user_id] = user
        return True

    def set_last_login(self, user_id, when):
        user = self.rows.get(int(user_id))
        if not user:
            return False
        self.rows[user.user_id] = replace(user, last_login=when)
        return True

    def delete_by_id(self, user_id):
        return self.rows.pop(int(user_id), None) is not None


class InMemoryEntries:
    def __init__(self):
        self._next_id = 1
        self.rows: Dict[int, WorkEntry] = {}

    def get_by_id(self, entry_id):
        return self.rows.get(int(entry_id))

    def get_for_user_and_date(self, user_id, work_date):
        return next((e for e in self.rows.values() if e.user_id == user_id and e.work_date == work_date), None)

    def list_for_user(self, user_id):
        return [e for e in self.rows.values() if e.user_id == user_id]

    def list_by_date_range(self, *, start_date, end_date, user_id=None):
        return [
            e
            for e in self.rows.values()
            if start_date <= e.work_date <= end_date and (user_id is None or e.user_id == user_id)
        ]

    def list_all(self):
        return list(self.rows.values())

    def create_entry(self, *, user_id, work_date, attendance, created_at, submitted_at, is_late):
        eid = self._next_id
        self._next_id += 1
        self.rows[eid] = WorkEntry(
            entry_id=eid,
            user_id=user_id,
            work_date=work_date,
            attendance=attendance,
            created_at=created_at,
            submitted_at=submitted_at,
            is_late=is_late,
        )
        return eid

    def apply_correction(self, *, entry_id, attendance, retroactive_request_id):
        entry = self.rows.get(int(entry_id))
        if not entry:
            return False
        self.rows[entry.entry_id] = replace(
            entry, attendance=attendance, retroactive_request_id=retroactive_request_id
        )
        return True

    def delete_for_user(self, user_id):
        doomed = [eid for eid, e in self.rows.items() if e.user_id == user_id]
        for eid in doomed:
            del self.rows[eid]
        return len(doomed)


class InMemoryRequests:
    def __init__(self, entries: InMemoryEntries):
        self._entries = entries
        self._next_id = 1
        self.rows: Dict[int, RetroactiveRequest] = {}

    def create_request(self, *, entry_id, user_id, requested_by, request_date, reason, original_attendance, requested):
        rid = self._next_id
        self._next_id += 1
        self.rows[rid] = RetroactiveRequest(
            request_id=rid,
            entry_id=entry_id,
            user_id=user_id,
            requested_by=requested_by,
            request_date=request_date,
            reason=reason,
            original_attendance=original_attendance,
            requested=requested,
        )
        return rid

    def get_by_id(self, request_id):
        return self.rows.get(int(request_id))

    def get_pending_for_entry(self, entry_id):
        return next(
            (r for r in self.rows.values() if r.entry_id == entry_id and r.status == RequestStatus.PENDING),
            None,
        )

    def list_requests(self, *, status=None, user_id=None):
        return [
            r
            for r in self.rows.values()
            if (status is None or r.status == status) and (user_id is None or r.user_id == user_id)
        ]

    def decide(self, *, request_id, status, reviewed_by, reviewed_at, review_comments=None):
        req = self.rows.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.rows[req.request_id] = replace(
            req,
            status=status,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
            review_comments=review_comments,
        )
        return True

    def approve_and_apply(self, *, request_id, reviewed_by, reviewed_at, review_comments, entry_id, attendance):
        req = self.rows.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            raise AlreadyReviewedError("This request has already been reviewed")
        # Entry first: if it fails the request stays pending.
        if not self._entries.apply_correction(
            entry_id=entry_id, attendance=attendance, retroactive_request_id=req.request_id
        ):
            raise NotFoundError("Work entry not found")
        self.rows[req.request_id] = replace(
            req,
            status=RequestStatus.APPROVED,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
            review_comments=review_comments,
        )

    def delete_for_user(self, user_id):
        doomed = [rid for rid, r in self.rows.items() if user_id in (r.user_id, r.requested_by)]
        for rid in doomed:
            del self.rows[rid]
        return len(doomed)

    def clear_reviewer(self, user_id):
        cleared = 0
        for rid, r in list(self.rows.items()):
            if r.reviewed_by == user_id:
                self.rows[rid] = replace(r, reviewed_by=None)
                cleared += 1
        return cleared


class InMemorySettings:
    def __init__(self, settings: Optional[AttendanceSettings] = None):
        self.value = settings
        self.saves = 0

    def get(self):
        return self.value

    def save(self, settings):
        self.value = settings
        self.saves += 1


@pytest.fixture
def container():
    entries = InMemoryEntries()
    return assemble(
        users_repo=InMemoryUsers(),
        attendance_repo=entries,
        requests_repo=InMemoryRequests(entries),
        settings_repo=InMemorySettings(),
        default_time_zone="UTC",
    )


def _add_user(container, name, email, role):
    return container.user_service.create_user(
        current_role=Role.ADMIN,
        name=name,
        email=email,
        password="secret123",
        role=role,
        now=datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def admin(container):
    return _add_user(container, "Admin User", "admin@syncink.com", Role.ADMIN)


@pytest.fixture
def manager(container):
    return _add_user(container, "Mia Manager", "mia@syncink.com", Role.MANAGER)


@pytest.fixture
def employee(container):
    return _add_user(container, "John Doe", "john@syncink.com", Role.EMPLOYEE)


@pytest.fixture
def employee2(container):
    return _add_user(container, "Jane Smith", "jane@syncink.com", Role.EMPLOYEE)


@pytest.fixture
def today():
    return date(2026, 3, 10)


@pytest.fixture
def app(container, admin, manager, employee):
    # Keep login from sweeping against the wall clock.
    container.settings_service.update_settings(current_role=Role.ADMIN, auto_absent_after_deadline=False)

    return create_app(container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(email, password="secret123"):
        client.post("/api/logout")
        return client.post("/api/login", json={"email": email, "password": password})

    return _login
