"""
In-memory stand-in for the Supabase client, covering the subset of the
postgrest query builder the routers use. Rows are plain dicts; embedded
relation selects are ignored and whole rows are returned.
"""
import copy
import re
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from postgrest.exceptions import APIError

UNIQUE = {
    "sizes": [("name",)],
    "colors": [("name",)],
    "categories": [("name",), ("slug",)],
    "products": [("sku",)],
    "orders": [("order_number",)],
    "user_profiles": [("email",)],
}

EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _same(a, b) -> bool:
    # PostgREST filters arrive as text, so 1 and "1" match
    if isinstance(a, bool) or isinstance(b, bool):
        return a == b or str(a).lower() == str(b).lower()
    return str(a) == str(b)


def _like(pattern: str):
    parts = [re.escape(p) for p in pattern.split("%")]
    return re.compile("^" + ".*".join(parts) + "$", re.IGNORECASE | re.DOTALL)


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db, table: str):
        self.db = db
        self.table = table
        self.action = "select"
        self.payload = None
        self.filters = []
        self.orders = []
        self.window = None
        self.max_rows = None
        self.want_single = False
        self.count_mode = None
        self.head = False

    def select(self, *columns, count=None, head=False):
        self.count_mode = count
        self.head = head
        return self

    def insert(self, rows):
        self.action = "insert"
        self.payload = rows
        return self

    def update(self, values):
        self.action = "update"
        self.payload = values
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda r: _same(r.get(column), value))
        return self

    def neq(self, column, value):
        self.filters.append(lambda r: not _same(r.get(column), value))
        return self

    def in_(self, column, values):
        self.filters.append(lambda r: any(_same(r.get(column), v) for v in values))
        return self

    def ilike(self, column, pattern):
        rx = _like(pattern)
        self.filters.append(lambda r: r.get(column) is not None and bool(rx.match(str(r[column]))))
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def range(self, start, end):
        self.window = (start, end)
        return self

    def single(self):
        self.want_single = True
        return self

    def _matching(self):
        return [r for r in self.db.tables.setdefault(self.table, []) if all(f(r) for f in self.filters)]

    def execute(self):
        self.db.calls.append((self.table, self.action))
        failure = self.db.failures.get((self.table, self.action))
        if failure is not None:
            raise failure
        return getattr(self, f"_{self.action}")()

    def _select(self):
        rows = self._matching()
        for column, desc in reversed(self.orders):
            present = [r for r in rows if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            # postgres puts nulls first when descending
            rows = missing + present if desc else present + missing
        total = len(rows)
        if self.window is not None:
            start, end = self.window
            rows = rows[start:end + 1]
        if self.max_rows is not None:
            rows = rows[:self.max_rows]
        rows = copy.deepcopy(rows)
        if self.want_single:
            if len(rows) != 1:
                raise APIError({
                    "code": "PGRST116",
                    "message": "JSON object requested, multiple (or no) rows returned",
                })
            return FakeResponse(rows[0])
        return FakeResponse([] if self.head else rows, total if self.count_mode else None)

    def _insert(self):
        rows = self.payload if isinstance(self.payload, list) else [self.payload]
        created = [self.db.add(self.table, row) for row in rows]
        return FakeResponse(copy.deepcopy(created))

    def _update(self):
        rows = self._matching()
        for r in rows:
            self.db.check_unique(self.table, {**r, **self.payload}, ignore=r)
        for r in rows:
            r.update(copy.deepcopy(self.payload))
        return FakeResponse(copy.deepcopy(rows))

    def _delete(self):
        doomed = self._matching()
        gone = {id(r) for r in doomed}
        self.db.tables[self.table] = [r for r in self.db.tables[self.table] if id(r) not in gone]
        return FakeResponse(copy.deepcopy(doomed))


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, content, file_options=None):
        if self.storage.fail_uploads:
            raise RuntimeError("storage unavailable")
        self.storage.files[(self.name, path)] = (content, file_options)
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://example.supabase.co/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        for p in paths:
            self.storage.removed.append((self.name, p))
            self.storage.files.pop((self.name, p), None)
        return []


class FakeStorage:
    def __init__(self):
        self.files = {}
        self.removed = []
        self.fail_uploads = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeAuthAdmin:
    def __init__(self):
        self.users = []

    def list_users(self):
        return list(self.users)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failures = {}
        self.calls = []
        self.storage = FakeStorage()
        self.auth = SimpleNamespace(admin=FakeAuthAdmin())
        self._ids = {}
        self._ticks = 0

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, action, code="XX000", message="simulated failure"):
        self.failures[(table, action)] = APIError({"code": code, "message": message})

    def check_unique(self, table, row, ignore=None):
        for columns in UNIQUE.get(table, []):
            if any(row.get(c) is None for c in columns):
                continue
            for other in self.tables.get(table, []):
                if other is ignore:
                    continue
                if all(_same(other.get(c), row.get(c)) for c in columns):
                    raise APIError({
                        "code": "23505",
                        "message": f'duplicate key value violates unique constraint "{table}_{"_".join(columns)}_key"',
                    })

    def add(self, table, row):
        row = copy.deepcopy(row)
        if row.get("id") is None:
            self._ids[table] = self._ids.get(table, 0) + 1
            row["id"] = self._ids[table]
        elif isinstance(row["id"], int):
            self._ids[table] = max(self._ids.get(table, 0), row["id"])
        self._ticks += 1
        row.setdefault("created_at", (EPOCH + timedelta(minutes=self._ticks)).isoformat())
        if table == "orders":
            row.setdefault("order_number", f"ORD-{row['id']:06d}")
            row.setdefault("status", "pending")
        if table == "products":
            row.setdefault("is_active", True)
        self.check_unique(table, row)
        self.tables.setdefault(table, []).append(row)
        return row

    def seed(self, table, *rows):
        return [copy.deepcopy(self.add(table, r)) for r in rows]

    def rows(self, table):
        return copy.deepcopy(self.tables.get(table, []))
