from collections import defaultdict
import copy

import pytest


class SimpleResult:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count
        self.error = None


class FakeSupabase:
    """In-memory stand-in for the postgrest query builder used by the repository."""

    def __init__(self):
        self.tables = defaultdict(list)
        self._seq = 0
        self.fail_tables = set()

    def next_id(self):
        self._seq += 1
        return 'id-%d' % self._seq

    def table(self, name):
        return TableProxy(self, name)


class TableProxy:
    def __init__(self, db, name):
        self.db = db
        self.name = name
        self._op = None
        self._filters = []
        self._order = []
        self._limit = None
        self._count = None

    def select(self, *args, count=None):
        self._op = 'select'
        self._count = count
        return self

    def insert(self, rec):
        self._op = 'insert'
        self._payload = rec
        return self

    def update(self, rec):
        self._op = 'update'
        self._payload = rec
        return self

    def delete(self):
        self._op = 'delete'
        return self

    def eq(self, k, v):
        self._filters.append(lambda row: row.get(k) == v)
        return self

    def is_(self, k, v):
        self._filters.append(lambda row: row.get(k) is None)
        return self

    def order(self, col, desc=False):
        self._order.append((col, desc))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def _matching(self):
        return [r for r in self.db.tables[self.name] if all(f(r) for f in self._filters)]

    def execute(self):
        if self.name in self.db.fail_tables:
            raise RuntimeError('storage unavailable')
        rows = self.db.tables[self.name]

        if self._op == 'select':
            found = self._matching()
            for col, desc in reversed(self._order):
                found = sorted(found, key=lambda r: (r.get(col) is None, r.get(col) or ''), reverse=desc)
            count = len(found) if self._count else None
            if self._limit is not None:
                found = found[:self._limit]
            return SimpleResult(copy.deepcopy(found), count)

        if self._op == 'insert':
            rec = dict(self._payload)
            rec.setdefault('id', self.db.next_id())
            rec.setdefault('created_at', '2026-01-01T00:00:%02d' % self.db._seq)
            rows.append(rec)
            return SimpleResult([copy.deepcopy(rec)])

        if self._op == 'update':
            found = self._matching()
            for r in found:
                r.update(self._payload)
            return SimpleResult(copy.deepcopy(found))

        if self._op == 'delete':
            found = self._matching()
            self.db.tables[self.name] = [r for r in rows if r not in found]
            return SimpleResult(copy.deepcopy(found))

        return SimpleResult(None)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()
