"""Shared test fixtures for the Shiptivity test suite.

Provides:
- app: Flask app configured for testing (in-memory SQLite, rate limits off)
- client: Flask test client
- db_session: clean database per test (tables created/dropped)
- seed_clients: a small board persisted through the real ClientStore
- memory_store: in-memory fake of ClientStore for service-level tests
"""

import copy
import time
from contextlib import contextmanager

import pytest

from shiptivity import create_app
from shiptivity.extensions import db as _db
from shiptivity.models.client import Client
from shiptivity.services.client_store import ClientStore


# backlog: 1,2,3 / in-progress: 4,5 / complete: 6
SEED_CLIENTS = [
    {"id": 1, "name": "Stark, White and Abbott", "description": "Cloned Optimal Architecture",
     "email": "ops@stark.example", "status": "backlog", "priority": 1},
    {"id": 2, "name": "Wiza LLC", "description": "Exclusive Bandwidth-Monitored Implementation",
     "email": "hello@wiza.example", "status": "backlog", "priority": 2},
    {"id": 3, "name": "Nolan LLC", "description": "Vision-Oriented Graphical User Interface",
     "email": "contact@nolan.example", "status": "backlog", "priority": 3},
    {"id": 4, "name": "Thompson PLC", "description": "Streamlined Regional Knowledge User",
     "email": "team@thompson.example", "status": "in-progress", "priority": 1},
    {"id": 5, "name": "Walker-Williamson", "description": "Team-Oriented Matrix",
     "email": "info@walker.example", "status": "in-progress", "priority": 2},
    {"id": 6, "name": "Boehm and Sons", "description": "Automated Systematic Paradigm",
     "email": "sales@boehm.example", "status": "complete", "priority": 1},
]


class InMemoryClientStore:
    """Dict-backed stand-in for ClientStore.

    Records every write in `writes`. Set `fail_on_move` to make apply_move
    raise, which exercises transaction rollback. `write_delay` sleeps
    between each write so concurrent callers would interleave.
    """

    def __init__(self, clients=()):
        self._rows = {c["id"]: dict(c) for c in clients}
        self.writes = []
        self.fail_on_move = False
        self.write_delay = 0
        self.closed = False

    def load_all(self):
        return [dict(self._rows[cid]) for cid in sorted(self._rows)]

    def load_by_id(self, client_id):
        row = self._rows.get(client_id)
        return dict(row) if row else None

    def load_by_status(self, status):
        return [c for c in self.load_all() if c["status"] == status]

    @contextmanager
    def transaction(self):
        snapshot = copy.deepcopy(self._rows)
        try:
            yield self
        except Exception:
            self._rows = snapshot
            raise

    def apply_priority_updates(self, updates):
        for client_id, priority in updates:
            time.sleep(self.write_delay)
            self._rows[client_id]["priority"] = priority
            self.writes.append(("priority", client_id, priority))

    def apply_move(self, client_id, status, priority):
        if self.fail_on_move:
            raise RuntimeError("simulated write failure")
        time.sleep(self.write_delay)
        self._rows[client_id]["status"] = status
        self._rows[client_id]["priority"] = priority
        self.writes.append(("move", client_id, status, priority))

    def reset(self, records):
        self._rows = {r["id"]: dict(r) for r in records}
        return len(records)

    def close(self):
        self.closed = True


@pytest.fixture(scope="session")
def app():
    """Create the Flask application configured for testing."""
    app = create_app("testing")
    yield app


@pytest.fixture(autouse=True)
def db_session(app):
    """Create all tables before each test, drop after."""
    with app.app_context():
        _db.create_all()
        yield _db.session
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def seed_clients(app, db_session):
    """Persist SEED_CLIENTS and return copies of the records."""
    for record in SEED_CLIENTS:
        db_session.add(Client(**record))
    db_session.commit()
    return copy.deepcopy(SEED_CLIENTS)


@pytest.fixture
def store(app):
    """The ClientStore registered on the test app."""
    return app.extensions[ClientStore.extension_name]


@pytest.fixture
def memory_store():
    return InMemoryClientStore(SEED_CLIENTS)
