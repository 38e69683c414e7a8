# tests/conftest.py
import base64
import json
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest
from fastapi.testclient import TestClient
from supabase import AuthApiError, PostgrestAPIError

from app.config import Settings
from app.main import create_app

JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
USER_EMAIL = "member@example.com"
USER_PASSWORD = "secret123"


def make_token(sub, secret=JWT_SECRET, audience="authenticated", expires_in=3600):
    claims = {
        "sub": str(sub),
        "aud": audience,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(claims, secret, algorithm="HS256")


def make_unsigned_token(payload):
    """header.payload.signature with a garbage signature."""
    def segment(data):
        return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()

    return f"{segment({'alg': 'HS256', 'typ': 'JWT'})}.{segment(payload)}.not-a-signature"


class FakeQuery:
    """Mimics the supabase/postgrest builder chain against in-memory rows."""

    def __init__(self, rest, table):
        self.rest = rest
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.descending = False
        self.limit_count = None

    def select(self, columns="*"):
        self.columns = columns
        return self

    def insert(self, payload):
        self.op, self.payload = "insert", payload
        return self

    def upsert(self, payload):
        self.op, self.payload = "upsert", payload
        return self

    def update(self, payload):
        self.op, self.payload = "update", payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.descending = desc
        return self

    def limit(self, count):
        self.limit_count = count
        return self

    def _matches(self, row):
        return all(str(row.get(column)) == str(value) for column, value in self.filters)

    def _with_embed(self, row):
        row = dict(row)
        if "profiles" in self.columns:
            profile = next((p for p in self.rest.rows("profiles") if p["id"] == row.get("user_id")), None)
            row["profiles"] = dict(profile) if profile else None
        return row

    def execute(self):
        self.rest.calls.append(self)
        for predicate in self.rest.failures:
            if predicate(self):
                raise PostgrestAPIError({"message": "Could not find a relationship", "code": "PGRST200"})

        rows = self.rest.rows(self.table)
        if self.op == "insert":
            now = datetime.now(timezone.utc).isoformat()
            row = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": None, **self.payload}
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])

        if self.op == "upsert":
            existing = next((r for r in rows if r.get("id") == self.payload["id"]), None)
            if existing is None:
                existing = {}
                rows.append(existing)
            existing.update(self.payload)
            return SimpleNamespace(data=[dict(existing)])

        matched = [r for r in rows if self._matches(r)]
        if self.op == "update":
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in matched])

        if self.op == "delete":
            for row in matched:
                rows.remove(row)
            return SimpleNamespace(data=[dict(r) for r in matched])

        matched.sort(key=lambda r: r.get("created_at") or "", reverse=self.descending)
        if self.limit_count is not None:
            matched = matched[: self.limit_count]
        return SimpleNamespace(data=[self._with_embed(r) for r in matched])


class FakeRest:
    def __init__(self):
        self.tables = {"profiles": [], "posts": []}
        self.calls = []
        self.failures = []

    def rows(self, table):
        return self.tables.setdefault(table, [])

    def table(self, name):
        return FakeQuery(self, name)


class FakeAuth:
    def __init__(self):
        self.users = {}
        self.calls = []

    def add_user(self, email=USER_EMAIL, password=USER_PASSWORD):
        user_id = str(uuid.uuid4())
        self.users[email] = {"id": user_id, "password": password}
        return user_id

    def sign_up(self, credentials):
        self.calls.append(("sign_up", credentials["email"]))
        if credentials["email"] in self.users:
            raise AuthApiError("User already registered", 422, "user_already_exists")
        user_id = self.add_user(credentials["email"], credentials["password"])
        return SimpleNamespace(user=SimpleNamespace(id=user_id), session=None)

    def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in_with_password", credentials["email"]))
        user = self.users.get(credentials["email"])
        if user is None or user["password"] != credentials["password"]:
            raise AuthApiError("Invalid login credentials", 400, "invalid_credentials")
        session = SimpleNamespace(
            access_token=make_token(user["id"]),
            refresh_token="refresh-token",
            expires_in=3600,
            token_type="bearer",
        )
        return SimpleNamespace(user=SimpleNamespace(id=user["id"]), session=session)

    def get_user(self, token):
        self.calls.append(("get_user", token))
        try:
            claims = jwt.decode(token, JWT_SECRET, algorithms=["HS256"], audience="authenticated")
        except jwt.InvalidTokenError:
            raise AuthApiError("invalid JWT", 403, "bad_jwt")
        return SimpleNamespace(user=SimpleNamespace(id=claims["sub"]))


class FakeBaas:
    url = "https://project.supabase.test"
    anon_key = "anon-key-for-tests"
    service_role_key = "service-role-key-for-tests"
    timeout = 5.0

    def __init__(self):
        self.rest = FakeRest()
        self.auth = FakeAuth()
        self.auth_clients_created = 0

    def auth_client(self):
        self.auth_clients_created += 1
        return SimpleNamespace(auth=self.auth)

    def probe(self, table="profiles"):
        return {"supabase_status": 200, "body": "[]"}


@pytest.fixture
def fake_baas():
    return FakeBaas()


@pytest.fixture
def settings(tmp_path):
    # Validated from a mapping so the process environment cannot leak in
    return Settings.model_validate({
        "supabase_url": FakeBaas.url,
        "supabase_anon_key": FakeBaas.anon_key,
        "supabase_service_role_key": FakeBaas.service_role_key,
        "pg_host": "localhost",
        "pg_user": "postgres",
        "pg_db": "barterup",
        "upload_dir": str(tmp_path / "uploads" / "profile_pictures"),
        "jwt_secret": JWT_SECRET,
        "enable_debug_routes": True,
    })


@pytest.fixture
def client(settings, fake_baas):
    with TestClient(create_app(settings, baas=fake_baas)) as c:
        yield c


@pytest.fixture
def user_id(fake_baas):
    return fake_baas.auth.add_user()


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def profile_row(fake_baas, user_id):
    row = {
        "id": user_id,
        "date_of_birth": "1990-06-15",
        "primary_skill": "Music",
        "skill_to_learn": "Cooking",
        "bio": "I play guitar and want to learn to cook.",
        "profile_picture_url": None,
        "full_name": "Dana Member",
        "role": "user",
    }
    fake_baas.rest.tables["profiles"].append(row)
    return row
