"""Reordering engine — lane/priority renumbering for a single client move.

Pure functions over plain client dicts (the shape of Client.to_dict()).
Nothing here touches the database; the caller loads the full client set,
runs move(), and persists whatever changed_clients() reports.

Within a lane, priorities always form the dense sequence 1..N.
"""


class ClientNotFound(LookupError):
    """Raised when the client to move is not part of the given set."""

    def __init__(self, client_id):
        super().__init__(f"Client {client_id} not found.")
        self.client_id = client_id


def clamp_priority(priority, lane_size):
    """Clamp a requested slot into [1, lane_size + 1].

    `lane_size` is the number of *other* clients already in the lane, so an
    empty lane always yields 1 and anything past the bottom appends.
    """
    return max(1, min(priority, lane_size + 1))


def move(client_id, clients, new_status=None, new_priority=None):
    """Move one client to a new lane and/or priority.

    Args:
        client_id: Id of the client being moved.
        clients: Full, currently valid client set (iterable of dicts).
        new_status: Destination lane. None keeps the current lane.
        new_priority: Requested slot in the destination lane. None keeps
            the current priority (clamped against the destination lane).

    Returns:
        A new list of client dicts sorted by id. Input dicts are not mutated.

    Raises:
        ClientNotFound: If client_id is not in `clients`.
    """
    by_id = {c["id"]: dict(c) for c in clients}
    target = by_id.get(client_id)
    if target is None:
        raise ClientNotFound(client_id)

    old_status = target["status"]
    old_priority = target["priority"]
    if new_status is None:
        new_status = old_status
    if new_priority is None:
        new_priority = old_priority

    others = [c for cid, c in by_id.items() if cid != client_id]

    # Phase 1: close the gap in the source lane.
    for c in others:
        if c["status"] == old_status and c["priority"] > old_priority:
            c["priority"] -= 1

    # Phase 2: open a slot in the destination lane.
    lane = [c for c in others if c["status"] == new_status]
    slot = clamp_priority(new_priority, len(lane))
    for c in lane:
        if c["priority"] >= slot:
            c["priority"] += 1

    target["status"] = new_status
    target["priority"] = slot

    return sorted(by_id.values(), key=lambda c: c["id"])


def changed_clients(before, after):
    """Return the records in `after` whose status or priority differ from `before`.

    Records missing from `before` count as changed. Result is sorted by id.
    """
    old = {c["id"]: c for c in before}
    delta = []
    for c in after:
        prev = old.get(c["id"])
        if (
            prev is None
            or prev["status"] != c["status"]
            or prev["priority"] != c["priority"]
        ):
            delta.append(c)
    return sorted(delta, key=lambda c: c["id"])


def lane_violations(clients):
    """Map each lane whose priorities are not exactly 1..N to its priorities.

    An empty dict means every lane is dense.
    """
    lanes = {}
    for c in clients:
        lanes.setdefault(c["status"], []).append(c["priority"])

    violations = {}
    for status, priorities in lanes.items():
        priorities.sort()
        if priorities != list(range(1, len(priorities) + 1)):
            violations[status] = priorities
    return violations
