"""
In-memory stand-in for the Supabase client used by the services.

It implements the slice of the supabase-py surface the app calls: table().select/insert/update/
delete with eq/in_/gte/lte/order/limit/offset/range, PostgREST-style embeds ("alias:fk(col, ...)")
resolved against the profiles table, and auth sign_up/sign_in/get_user plus the admin API.
Failures can be injected per (operation, table), `max_rows` mimics the server's response cap
and `view()` gives a second client over the same data (e.g. a caller client next to the
service-role one).
"""

from __future__ import annotations

import itertools
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.database.supabase_client import get_service_supabase, get_supabase
from app.core.dependencies import get_user_supabase
from app.modules.auth.service import clear_auth_cache
from app.modules.profiles.schemas import ProfileResponse

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)

# foreign keys declared "on delete set null": parent table -> [(child table, column)]
ON_DELETE_SET_NULL = {
    "weeks": [("attendance", "week_id")],
    "profiles": [("projects", "assigned_to")],
}


def _split_columns(columns: str) -> List[str]:
    parts, depth, current = [], 0, ""
    for ch in columns:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += ch
    if current.strip():
        parts.append(current.strip())
    return parts


class FakeQuery:
    def __init__(self, store: "FakeSupabase", table: str):
        self.store = store
        self.table_name = table
        self.op = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters = []
        self._order: Optional[tuple] = None
        self._limit: Optional[int] = None
        self._offset = 0

    def select(self, columns: str = "*"):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] <= value)
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def offset(self, count):
        self._offset = count
        return self

    def range(self, start, end):
        self._offset = start
        self._limit = end - start + 1
        return self

    def execute(self):
        self.store.check_failure(self.op, self.table_name)
        rows = self.store.tables.setdefault(self.table_name, [])

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in items:
                row = dict(item)
                row.setdefault("id", str(uuid.uuid4()))
                row.setdefault("created_at", self.store.next_timestamp())
                if self.table_name in ("profiles", "projects", "announcements"):
                    row.setdefault("updated_at", row["created_at"])
                rows.append(row)
                inserted.append(dict(row))
            return SimpleNamespace(data=inserted, count=None)

        matched = [row for row in rows if all(f(row) for f in self.filters)]

        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(row) for row in matched], count=None)

        if self.op == "delete":
            for row in matched:
                rows.remove(row)
                for child, column in ON_DELETE_SET_NULL.get(self.table_name, []):
                    for child_row in self.store.rows(child):
                        if child_row.get(column) == row["id"]:
                            child_row[column] = None
            return SimpleNamespace(data=[dict(row) for row in matched], count=None)

        if self._order:
            column, desc = self._order
            present = [r for r in matched if r.get(column) is not None]
            missing = [r for r in matched if r.get(column) is None]
            matched = sorted(present, key=lambda r: r[column], reverse=desc) + missing
        matched = matched[self._offset:]
        if self._limit is not None:
            matched = matched[:self._limit]
        if self.store.max_rows is not None:
            matched = matched[:self.store.max_rows]
        return SimpleNamespace(data=[self._project(row) for row in matched], count=None)

    def _project(self, row: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for part in _split_columns(self.columns):
            if part == "*":
                result.update(row)
            elif "(" in part:
                head, inner = part.split("(", 1)
                alias, _, fk = head.partition(":")
                fk = fk or alias
                wanted = [c.strip() for c in inner.rstrip(")").split(",")]
                target = self.store.find("profiles", row.get(fk))
                result[alias.strip()] = {c: target.get(c) for c in wanted} if target else None
            else:
                result[part] = row.get(part)
        return result


class FakeAuthAdmin:
    def __init__(self, store: "FakeSupabase"):
        self.store = store

    def create_user(self, attributes):
        self.store.check_failure("create_user", "auth")
        if attributes["email"] in self.store.users_by_email:
            raise Exception("A user with this email address has already been registered")
        user = self.store.create_user(attributes["email"], attributes["password"], attributes.get("user_metadata"))
        return SimpleNamespace(user=user)

    def delete_user(self, user_id):
        self.store.check_failure("delete_user", "auth")
        self.store.delete_user(user_id)

    def sign_out(self, jwt, scope="global"):
        self.store.revoked.add(jwt)


class FakeAuth:
    def __init__(self, store: "FakeSupabase"):
        self.store = store
        self.admin = FakeAuthAdmin(store)

    def sign_up(self, credentials):
        if credentials["email"] in self.store.users_by_email:
            raise Exception("User already registered")
        metadata = credentials.get("options", {}).get("data")
        user = self.store.create_user(credentials["email"], credentials["password"], metadata)
        return SimpleNamespace(user=user, session=SimpleNamespace(access_token=self.store.token_for(user.id)))

    def sign_in_with_password(self, credentials):
        user = self.store.users_by_email.get(credentials["email"])
        if not user or self.store.passwords[user.id] != credentials["password"]:
            raise Exception("Invalid login credentials")
        return SimpleNamespace(user=user, session=SimpleNamespace(access_token=self.store.token_for(user.id)))

    def get_user(self, jwt=None):
        user_id = self.store.tokens.get(jwt)
        if not user_id or jwt in self.store.revoked or user_id not in self.store.users:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.store.users[user_id])

    def sign_out(self):
        return None


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.users: Dict[str, SimpleNamespace] = {}
        self.users_by_email: Dict[str, SimpleNamespace] = {}
        self.passwords: Dict[str, str] = {}
        self.tokens: Dict[str, str] = {}
        self.revoked = set()
        self.failures = set()
        # PostgREST max-rows: no single select returns more than this
        self.max_rows: Optional[int] = None
        self._clock = itertools.count(1)
        self.auth = FakeAuth(self)

    def view(self) -> "FakeSupabase":
        """Another client over the same data, with its own failure injection"""
        other = FakeSupabase.__new__(FakeSupabase)
        other.__dict__.update(self.__dict__)
        other.failures = set()
        other.auth = FakeAuth(other)
        return other

    # store API used by the services
    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    # test helpers
    def next_timestamp(self) -> str:
        return (BASE_TIME + timedelta(seconds=next(self._clock))).isoformat()

    def fail(self, op: str, table: str) -> None:
        self.failures.add((op, table))

    def check_failure(self, op: str, table: str) -> None:
        if (op, table) in self.failures:
            raise Exception(f"simulated {op} failure on {table}")

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table, [])

    def find(self, table: str, row_id: Optional[str]) -> Optional[Dict[str, Any]]:
        for row in self.rows(table):
            if row.get("id") == row_id:
                return row
        return None

    def create_user(self, email: str, password: str, metadata: Optional[dict] = None) -> SimpleNamespace:
        user = SimpleNamespace(
            id=str(uuid.uuid4()),
            email=email,
            user_metadata=metadata or {},
            app_metadata={},
            created_at=self.next_timestamp(),
            updated_at=None,
            identities=[{"provider": "email"}],
        )
        self.users[user.id] = user
        self.users_by_email[email] = user
        self.passwords[user.id] = password
        return user

    def delete_user(self, user_id: str) -> None:
        user = self.users.pop(user_id)
        self.users_by_email.pop(user.email, None)

    def token_for(self, user_id: str) -> str:
        token = f"token-{user_id}"
        self.tokens[token] = user_id
        return token

    def add_committee(self, name: str = "Design") -> str:
        return self.table("committees").insert({"name": name, "description": f"{name} committee"}).execute().data[0]["id"]

    def add_profile(
        self,
        committee_id: Optional[str],
        role: str = "member",
        full_name: str = "Member",
        email: Optional[str] = None,
        password: str = "secret123",
    ) -> ProfileResponse:
        email = email or f"{uuid.uuid4().hex[:8]}@example.com"
        user = self.create_user(email, password, {"full_name": full_name})
        row = self.table("profiles").insert({
            "id": user.id,
            "email": email,
            "full_name": full_name,
            "role": role,
            "committee_id": committee_id,
            "avatar_url": None,
        }).execute().data[0]
        return ProfileResponse(**row)

    def headers(self, profile: ProfileResponse) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token_for(profile.id)}"}


@pytest.fixture
def store():
    clear_auth_cache()
    yield FakeSupabase()
    clear_auth_cache()


@pytest.fixture
def tenants(store):
    """Two committees, each with one admin and two members"""
    design = store.add_committee("Design")
    web = store.add_committee("Web")
    return SimpleNamespace(
        design=design,
        web=web,
        admin=store.add_profile(design, role="admin", full_name="Dana Admin"),
        alice=store.add_profile(design, full_name="Alice"),
        bob=store.add_profile(design, full_name="Bob"),
        web_admin=store.add_profile(web, role="admin", full_name="Wes Admin"),
        carol=store.add_profile(web, full_name="Carol"),
    )


@pytest.fixture
def client(store):
    from app.main import app

    app.dependency_overrides[get_supabase] = lambda: store
    app.dependency_overrides[get_service_supabase] = lambda: store
    app.dependency_overrides[get_user_supabase] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
