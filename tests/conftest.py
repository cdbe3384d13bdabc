"""Pytest configuration and fixtures."""

import copy
import os
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from fastapi.testclient import TestClient

from gradnet.dependencies.auth import user_supabase_client
from gradnet.main import app

VIEWER_ID = "user-viewer"
ADMIN_ID = "user-admin"


class FakeQuery:
    """In-memory stand-in for the PostgREST request builder used by supabase-py."""

    def __init__(self, client: "FakeSupabase", table: str):
        self.client = client
        self.table = table
        self.action = "select"
        self.payload: Any = None
        self.count: Optional[str] = None
        self.head = False
        self.predicates: List = []
        self.order_by: Optional[tuple] = None
        self.max_rows: Optional[int] = None

    # builders
    def select(self, *columns, count=None, head=None):
        self.action = "select"
        self.count = count
        self.head = bool(head)
        return self

    def insert(self, row):
        self.action, self.payload = "insert", row
        return self

    def upsert(self, row):
        self.action, self.payload = "upsert", row
        return self

    def update(self, patch):
        self.action, self.payload = "update", patch
        return self

    def delete(self):
        self.action = "delete"
        return self

    # filters
    def eq(self, column, value):
        self.predicates.append(lambda r: r.get(column) == value)
        return self

    def neq(self, column, value):
        self.predicates.append(lambda r: r.get(column) != value)
        return self

    def or_(self, expression):
        clauses = []
        for clause in expression.split(","):
            column, op, value = clause.split(".", 2)
            assert op == "eq"
            clauses.append((column, value))
        self.predicates.append(lambda r: any(r.get(c) == v for c, v in clauses))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def _matches(self, row):
        return all(p(row) for p in self.predicates)

    def execute(self):
        self.client.calls.append((self.table, self.action))
        error = self.client.failures.get((self.table, self.action))
        if error is not None:
            raise error

        rows = self.client.tables.setdefault(self.table, [])

        if self.action == "select":
            found = [copy.deepcopy(r) for r in rows if self._matches(r)]
            if self.order_by:
                column, desc = self.order_by
                found.sort(key=lambda r: r.get(column) or "", reverse=desc)
            if self.max_rows:
                found = found[: self.max_rows]
            count = len(found) if self.count else None
            return SimpleNamespace(data=[] if self.head else found, count=count)

        if self.action == "insert":
            row = dict(self.payload)
            row.setdefault("id", str(uuid.uuid4()))
            now = datetime.now(timezone.utc).isoformat()
            row.setdefault("created_at", now)
            if self.table != "messages":
                row.setdefault("updated_at", now)
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)], count=None)

        if self.action == "upsert":
            existing = next((r for r in rows if r["id"] == self.payload["id"]), None)
            if existing is None:
                existing = {"created_at": datetime.now(timezone.utc).isoformat()}
                rows.append(existing)
            existing.update(self.payload)
            return SimpleNamespace(data=[copy.deepcopy(existing)], count=None)

        if self.action == "update":
            changed = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    changed.append(copy.deepcopy(row))
            return SimpleNamespace(data=changed, count=None)

        if self.action == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.client.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=removed, count=None)

        raise AssertionError(f"unsupported action {self.action}")


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, contents, options=None):
        self.storage.objects[(self.name, path)] = contents
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://storage.test/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.objects: Dict = {}

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabase:
    def __init__(self, tables: Optional[Dict[str, List[Dict]]] = None):
        self.tables = copy.deepcopy(tables or {})
        self.failures: Dict = {}
        self.calls: List = []
        self.storage = FakeStorage()
        self.signed_out: List[str] = []
        self.auth = SimpleNamespace(admin=SimpleNamespace(sign_out=self.signed_out.append))

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, action, error):
        self.failures[(table, action)] = error


def profile_row(id, full_name, **fields):
    row = {
        "id": id,
        "email": f"{id}@example.com",
        "full_name": full_name,
        "graduation_year": None,
        "major": None,
        "current_company": None,
        "current_position": None,
        "is_mentor": False,
        "is_admin": False,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    }
    row.update(fields)
    return row


def message_row(id, sender_id, recipient_id, created_at, subject="Hello", content="Hi there", is_read=False):
    return {
        "id": id,
        "sender_id": sender_id,
        "recipient_id": recipient_id,
        "subject": subject,
        "content": content,
        "is_read": is_read,
        "created_at": created_at,
        "sender": {"id": sender_id, "full_name": sender_id.replace("user-", "").title()},
        "recipient": {"id": recipient_id, "full_name": recipient_id.replace("user-", "").title()},
    }


@pytest.fixture
def seed_tables() -> Dict[str, List[Dict]]:
    return {
        "profiles": [
            profile_row(VIEWER_ID, "Viewer Person", graduation_year=2020, is_mentor=True),
            profile_row(ADMIN_ID, "Ada Admin", graduation_year=2015, is_admin=True, is_mentor=True),
            profile_row("user-bo", "Bo Chen", graduation_year=2021, major="Computer Science",
                        current_company="Acme", current_position="Engineer"),
            profile_row("user-cy", "Cy Diaz", graduation_year=2021, major="History", is_mentor=True),
        ],
        "messages": [
            message_row("m1", VIEWER_ID, "user-bo", "2024-03-01T10:00:00+00:00", subject="Hi"),
            message_row("m2", "user-bo", VIEWER_ID, "2024-03-01T11:00:00+00:00", subject="Re: Hi"),
            message_row("m3", "user-cy", VIEWER_ID, "2024-02-01T09:00:00+00:00", subject="Mentoring"),
            message_row("m4", "user-bo", "user-cy", "2024-03-02T09:00:00+00:00", subject="Not ours"),
        ],
        "announcements": [
            {
                "id": "a1",
                "author_id": ADMIN_ID,
                "title": "Reunion",
                "content": "Save the date",
                "created_at": "2024-01-10T00:00:00+00:00",
                "updated_at": "2024-01-10T00:00:00+00:00",
                "profiles": {"full_name": "Ada Admin"},
            },
        ],
    }


@pytest.fixture
def supabase(seed_tables) -> FakeSupabase:
    return FakeSupabase(seed_tables)


def _as_user(user_id: str, supabase: FakeSupabase):
    user = SimpleNamespace(id=user_id, email=f"{user_id}@example.com")
    return lambda: {"supabase": supabase, "user_id": user_id, "user": user, "token": f"token-{user_id}"}


@pytest.fixture
def client(supabase: FakeSupabase):
    """Test client signed in as the regular viewer."""
    app.dependency_overrides[user_supabase_client] = _as_user(VIEWER_ID, supabase)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(supabase: FakeSupabase):
    """Test client signed in as an admin-flagged profile."""
    app.dependency_overrides[user_supabase_client] = _as_user(ADMIN_ID, supabase)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
