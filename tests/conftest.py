from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime

import pytest

from src.campus_attendance.campus_attendance.academics.model import DEFAULT_STRUCTURE, FacultyAssignment
from src.campus_attendance.campus_attendance.container import build_services
from src.campus_attendance.campus_attendance.notifications.model import Notification


class FakeAccounts:
    def __init__(self):
        self.rows = {}

    def get_by_id(self, account_id):
        return self.rows.get(account_id)

    def save(self, account):
        self.rows[account.account_id] = account

    def list_by_role(self, role):
        return [a for a in self.rows.values() if a.role == role]


class FakePeople:
    def __init__(self):
        self.rows = {}
        self.upsert_calls = []
        self.fail_on_upsert_call = None

    def add(self, profile):
        self.rows[(profile.role, profile.profile_id)] = profile
        return profile

    def get(self, role, profile_id):
        return self.rows.get((role, profile_id))

    def _first(self, role, pred):
        for (r, _), p in self.rows.items():
            if r == role and pred(p):
                return p
        return None

    def find_by_uid(self, role, uid):
        return self._first(role, lambda p: p.uid == uid)

    def find_by_email(self, role, email):
        return self._first(role, lambda p: (p.email or "").lower() == email.lower())

    def find_by_barcode(self, role, barcode_id):
        return self._first(role, lambda p: p.barcode_id == barcode_id)

    def list_all(self, role):
        return sorted((p for (r, _), p in self.rows.items() if r == role), key=lambda p: p.profile_id)

    def claim(self, role, profile_id, *, uid, activated_at):
        p = self.rows.get((role, profile_id))
        if not p:
            return False
        self.rows[(role, profile_id)] = replace(p, uid=uid, is_claimed=True, activated_at=activated_at)
        return True

    def set_blocked(self, role, profile_id, *, blocked):
        p = self.rows.get((role, profile_id))
        if not p:
            return False
        self.rows[(role, profile_id)] = replace(p, is_blocked=blocked)
        return True

    def upsert_many(self, role, profiles):
        self.upsert_calls.append(len(profiles))
        if self.fail_on_upsert_call == len(self.upsert_calls):
            raise RuntimeError("batch write failed")
        for p in profiles:
            old = self.rows.get((role, p.profile_id))
            if old:
                p = replace(p, uid=old.uid, is_claimed=old.is_claimed, activated_at=old.activated_at)
            self.rows[(role, p.profile_id)] = p
        return len(profiles)


class _FakeDayTransaction:
    def __init__(self, repo, person_ids, log_date):
        self._repo = repo
        self._person_ids = set(person_ids)
        self._log_date = log_date
        self.pending_logs = []
        self.pending_alerts = []

    def logs(self):
        return [log for log in self._repo.logs if log.person_id in self._person_ids and log.log_date == self._log_date]

    def append_log(self, log):
        self.pending_logs.append(log)
        return len(self._repo.logs) + len(self.pending_logs)

    def add_alert(self, alert):
        self.pending_alerts.append(alert)
        return len(self._repo.alerts) + len(self.pending_alerts)


class FakeAttendance:
    """Keeps writes of a day transaction until the block exits cleanly."""

    def __init__(self):
        self.logs = []
        self.alerts = []
        self.locked = []

    @contextmanager
    def day_transaction(self, lock_id, log_date, *, person_ids=None):
        self.locked.append((lock_id, log_date))
        tx = _FakeDayTransaction(self, person_ids or [lock_id], log_date)
        yield tx
        for log in tx.pending_logs:
            self.logs.append(replace(log, log_id=len(self.logs) + 1))
        for alert in tx.pending_alerts:
            self.alerts.append(replace(alert, alert_id=len(self.alerts) + 1))

    def list_for_person(self, person_id, *, limit=None):
        rows = sorted((log for log in self.logs if log.person_id == person_id), key=lambda log: log.timestamp, reverse=True)
        return rows[:limit] if limit is not None else rows

    def list_for_date(self, log_date):
        return sorted((log for log in self.logs if log.log_date == log_date), key=lambda log: log.timestamp)

    def alerts_for_date(self, alert_date):
        return sorted((a for a in self.alerts if a.alert_date == alert_date), key=lambda a: a.timestamp, reverse=True)

    def purge_all(self):
        n = len(self.logs)
        self.logs.clear()
        return n


class FakeStructure:
    def __init__(self, doc=None):
        self.doc = doc
        self.saves = 0

    def get(self):
        return self.doc

    def save(self, structure, *, expected_version):
        current = self.doc.version if self.doc else 0
        if expected_version is not None and int(expected_version) != current:
            return -1
        self.saves += 1
        self.doc = replace(structure, version=current + 1)
        return current + 1


class FakeAssignments:
    def __init__(self):
        self.rows = {}
        self._next_id = 1

    def create(self, **kwargs):
        aid = self._next_id
        self._next_id += 1
        self.rows[aid] = FacultyAssignment(assignment_id=aid, **kwargs)
        return aid

    def add(self, assignment):
        self.rows[assignment.assignment_id] = assignment
        self._next_id = max(self._next_id, assignment.assignment_id + 1)
        return assignment

    def delete(self, assignment_id):
        return self.rows.pop(int(assignment_id), None) is not None

    def list_active_for_faculty(self, faculty_id):
        return [a for a in self.rows.values() if a.faculty_id == faculty_id and a.is_active]

    def list_active_for_branch(self, branch):
        return [a for a in self.rows.values() if a.branch == branch and a.is_active]


class FakeTimetables:
    def __init__(self):
        self.rows = {}

    def get(self, key):
        return self.rows.get(key)

    def save(self, timetable, *, expected_version=None):
        current = self.rows.get(timetable.key)
        version = current.version if current else 0
        if expected_version is not None and int(expected_version) != version:
            return -1
        self.rows[timetable.key] = replace(timetable, version=version + 1)
        return version + 1


class FakeNotifications:
    def __init__(self):
        self.rows = {}
        self._next_id = 1

    def create(self, **kwargs):
        nid = self._next_id
        self._next_id += 1
        self.rows[nid] = Notification(notification_id=nid, **kwargs)
        return nid

    def get(self, notification_id):
        return self.rows.get(int(notification_id))

    def list_for_roles(self, roles, *, limit):
        rows = [n for n in self.rows.values() if n.target_role in roles]
        rows.sort(key=lambda n: (n.timestamp, n.notification_id), reverse=True)
        return rows[:limit]

    def list_by_sender(self, sender_id, *, limit):
        rows = [n for n in self.rows.values() if n.sender_id == sender_id]
        rows.sort(key=lambda n: (n.timestamp, n.notification_id), reverse=True)
        return rows[:limit]

    def delete(self, notification_id):
        return self.rows.pop(int(notification_id), None) is not None


class FakeRules:
    def __init__(self):
        self.doc = None

    def get(self):
        return self.doc

    def save(self, rules):
        self.doc = rules


class RecordingSms:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def send(self, to, message):
        if self.fail:
            raise RuntimeError("gateway down")
        self.sent.append((to, message))


class RecordingCursor:
    def __init__(self, db):
        self._db = db
        self._rows = []
        self.rowcount = 0
        self.lastrowid = None

    def execute(self, sql, params=()):
        sql = " ".join(sql.split())
        self._db.calls.append(("execute", sql, tuple(params)))
        result = self._db.result_for(sql)
        self._rows = list(result.get("rows", []))
        self.rowcount = result.get("rowcount", len(self._rows))
        self.lastrowid = result.get("lastrowid")

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def close(self):
        self._db.calls.append(("cursor.close",))


class RecordingConnection:
    def __init__(self, db):
        self._db = db

    def start_transaction(self):
        self._db.calls.append(("start_transaction",))

    def cursor(self, dictionary=False):
        return RecordingCursor(self._db)

    def commit(self):
        self._db.calls.append(("commit",))

    def rollback(self):
        self._db.calls.append(("rollback",))

    def close(self):
        self._db.calls.append(("close",))


class RecordingDB:
    """Connection factory that records every call and answers SQL by fragment."""

    def __init__(self):
        self.calls = []
        self._results = []

    def on(self, fragment, **result):
        self._results.append((fragment, result))

    def result_for(self, sql):
        for fragment, result in self._results:
            if fragment in sql:
                return result
        return {}

    def connect(self):
        self.calls.append(("connect",))
        return RecordingConnection(self)

    def trace(self):
        """Call names in order, with each statement's SQL in place of ``execute``."""
        return [c[1] if c[0] == "execute" else c[0] for c in self.calls]

    def params_of(self, fragment):
        return [c[2] for c in self.calls if c[0] == "execute" and fragment in c[1]]


@pytest.fixture()
def fixed_now():
    return datetime(2026, 2, 2, 9, 0, 0)


@pytest.fixture()
def accounts():
    return FakeAccounts()


@pytest.fixture()
def people():
    return FakePeople()


@pytest.fixture()
def attendance():
    return FakeAttendance()


@pytest.fixture()
def structure_repo():
    return FakeStructure(replace(DEFAULT_STRUCTURE, version=1))


@pytest.fixture()
def assignments():
    return FakeAssignments()


@pytest.fixture()
def timetables():
    return FakeTimetables()


@pytest.fixture()
def notifications():
    return FakeNotifications()


@pytest.fixture()
def rules_repo():
    return FakeRules()


@pytest.fixture()
def sms():
    return RecordingSms()


@pytest.fixture()
def container(accounts, people, attendance, structure_repo, assignments, timetables, notifications, rules_repo, sms):
    return build_services(
        accounts=accounts,
        people=people,
        attendance=attendance,
        structure=structure_repo,
        assignments=assignments,
        timetables=timetables,
        notifications=notifications,
        rules=rules_repo,
        scan_debounce_seconds=0,
        sms=sms,
    )


@pytest.fixture()
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.campus_attendance.campus_attendance.main import create_app

    return create_app(container)


@pytest.fixture()
def client(app):
    return app.test_client()




@pytest.fixture()
def recording_db():
    return RecordingDB()
