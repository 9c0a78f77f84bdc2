"""Client service — input validation, lane moves, fixture reset.

Every function takes the store explicitly so callers (routes, CLI commands,
tests) decide which backend is used.

Moves are serialized with a process-wide lock: each one reads the full
client set, renumbers it, and writes the delta back in a single store
transaction.
"""

import json
import logging
import threading

from shiptivity.models.client import Client
from shiptivity.services import reorder

logger = logging.getLogger(__name__)

_move_lock = threading.Lock()

# Largest id a 64-bit INTEGER column can hold
MAX_CLIENT_ID = 2**63 - 1


# ─── Input errors ────────────────────────────────────────

class ClientInputError(ValueError):
    """User input error, reported to the caller as a 400."""

    message = "Invalid input provided."

    def __init__(self, long_message):
        super().__init__(long_message)
        self.long_message = long_message

    def to_dict(self):
        return {"message": self.message, "long_message": self.long_message}


class InvalidId(ClientInputError):
    message = "Invalid id provided."


class InvalidStatus(ClientInputError):
    message = "Invalid status provided."


class InvalidPriority(ClientInputError):
    message = "Invalid priority provided."


# ─── Parsing ─────────────────────────────────────────────

def parse_client_id(raw):
    """Parse a client id from a path segment or JSON value."""
    if isinstance(raw, bool):
        raise InvalidId("Id can only be integer.")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InvalidId("Id can only be integer.")


def parse_status(raw):
    """Return `raw` if it names one of the lanes."""
    if raw not in Client.STATUSES:
        raise InvalidStatus(
            "Status can only be one of the following: "
            f"[{' | '.join(Client.STATUSES)}]."
        )
    return raw


def parse_priority(raw):
    """Parse a positive integer priority (int or digit string)."""
    if isinstance(raw, bool):
        raise InvalidPriority("Priority can only be positive integer.")
    if isinstance(raw, str):
        raw = raw.strip()
        if not (raw.isascii() and raw.isdigit()):
            raise InvalidPriority("Priority can only be positive integer.")
    elif not isinstance(raw, int):
        raise InvalidPriority("Priority can only be positive integer.")

    priority = int(raw)
    if priority < 1:
        raise InvalidPriority("Priority can only be positive integer.")
    return priority


# ─── Queries ─────────────────────────────────────────────

def get_client(store, client_id):
    """Load one client or raise InvalidId."""
    if not 1 <= client_id <= MAX_CLIENT_ID:
        raise InvalidId("Cannot find client with that id.")
    client = store.load_by_id(client_id)
    if client is None:
        raise InvalidId("Cannot find client with that id.")
    return client


def list_clients(store, status=None):
    if status is None:
        return store.load_all()
    return store.load_by_status(parse_status(status))


# ─── Moves ───────────────────────────────────────────────

def move_client(store, client_id, status=None, priority=None):
    """Move a client to a new lane and/or priority and persist the result.

    Args:
        store: ClientStore (or compatible fake).
        client_id: Id of the client to move.
        status: Destination lane, or None to keep the current one.
        priority: Requested priority, or None to keep the current one.

    Returns:
        The full client list after the move, sorted by id.

    Raises:
        InvalidId: If the client does not exist.
    """
    with _move_lock:
        before = store.load_all()
        try:
            after = reorder.move(
                client_id, before, new_status=status, new_priority=priority
            )
        except reorder.ClientNotFound:
            raise InvalidId("Cannot find client with that id.")

        delta = reorder.changed_clients(before, after)
        if not delta:
            logger.info(f"Client {client_id} move was a no-op")
            return after

        moved = next((c for c in delta if c["id"] == client_id), None)
        updates = [(c["id"], c["priority"]) for c in delta if c["id"] != client_id]

        with store.transaction():
            if updates:
                store.apply_priority_updates(updates)
            if moved is not None:
                store.apply_move(client_id, moved["status"], moved["priority"])

        target = next(c for c in after if c["id"] == client_id)
        logger.info(
            f"Moved client {client_id} to {target['status']}#{target['priority']}, "
            f"{len(updates)} other client(s) renumbered"
        )
        return after


# ─── Fixture reset ───────────────────────────────────────

FIXTURE_FIELDS = ("id", "name", "description", "email", "status", "priority")


def load_fixture(path):
    """Read client records from a JSON fixture file.

    The file holds a list of objects with the Client columns. The records
    must already satisfy the lane invariant.

    Raises:
        ValueError: If a record is malformed or a lane is not dense.
    """
    with open(path, encoding="utf-8") as fh:
        raw = json.load(fh)

    if not isinstance(raw, list):
        raise ValueError(f"Fixture {path} must contain a list of clients.")

    records = []
    seen = set()
    for item in raw:
        if not isinstance(item, dict):
            raise ValueError(f"Fixture {path} entries must be objects, got {item!r}.")
        record = {field: item.get(field) for field in FIXTURE_FIELDS}
        record["id"] = parse_client_id(record["id"])
        if not 1 <= record["id"] <= MAX_CLIENT_ID:
            raise ValueError(f"Client id {record['id']} out of range in fixture {path}.")
        record["status"] = parse_status(record["status"])
        record["priority"] = parse_priority(record["priority"])
        if record["id"] in seen:
            raise ValueError(f"Duplicate client id {record['id']} in fixture {path}.")
        seen.add(record["id"])
        records.append(record)

    violations = reorder.lane_violations(records)
    if violations:
        raise ValueError(f"Fixture {path} breaks lane ordering: {violations}")
    return records


def reset_clients(store, path):
    """Replace all clients with the fixture at `path`. Returns the row count."""
    records = load_fixture(path)
    with _move_lock:
        count = store.reset(records)
    logger.info(f"Reset {count} client(s) from {path}")
    return count
