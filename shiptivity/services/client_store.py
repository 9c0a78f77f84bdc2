"""Client store — SQLAlchemy-backed persistence for client records.

Reads return plain dicts (Client.to_dict()) so the reordering engine never
sees ORM objects. Writes flush but do NOT commit — wrap them in
transaction(), which commits on success and rolls back on any error.

The store is registered on app.extensions["client_store"] by init_app();
routes look it up from there so tests can swap in a fake.
"""

import logging
from contextlib import contextmanager

from shiptivity.extensions import db
from shiptivity.models.client import Client

logger = logging.getLogger(__name__)


class ClientStore:
    """Database-backed store of Client rows."""

    extension_name = "client_store"

    def __init__(self, app=None):
        self.app = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        app.extensions[self.extension_name] = self

    # ─── Reads ───────────────────────────────────────────────

    def load_all(self):
        return [c.to_dict() for c in Client.query.order_by(Client.id).all()]

    def load_by_id(self, client_id):
        client = db.session.get(Client, client_id)
        return client.to_dict() if client else None

    def load_by_status(self, status):
        clients = (
            Client.query
            .filter_by(status=status)
            .order_by(Client.id)
            .all()
        )
        return [c.to_dict() for c in clients]

    # ─── Writes ──────────────────────────────────────────────

    @contextmanager
    def transaction(self):
        """Commit everything written inside the block, or nothing."""
        try:
            yield self
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def apply_priority_updates(self, updates):
        """Set priority for each (client_id, priority) pair. Status is untouched."""
        for client_id, priority in updates:
            client = self._get_or_raise(client_id)
            client.priority = priority
        db.session.flush()

    def apply_move(self, client_id, status, priority):
        """Set both lane and priority of one client."""
        client = self._get_or_raise(client_id)
        client.status = status
        client.priority = priority
        db.session.flush()

    def reset(self, records):
        """Replace every client row with `records` in one transaction.

        Creates the table first if it does not exist yet.

        Returns:
            Number of rows inserted.
        """
        db.create_all()
        with self.transaction():
            deleted = Client.query.delete()
            db.session.add_all([Client(**r) for r in records])
            db.session.flush()
        logger.info(f"Client table reset: {deleted} removed, {len(records)} inserted")
        return len(records)

    # ─── Lifecycle ───────────────────────────────────────────

    def close(self):
        """Release pooled connections. Safe to call more than once."""
        if self.app is None:
            return
        with self.app.app_context():
            db.session.remove()
            db.engine.dispose()
        logger.info("Client store closed")

    def _get_or_raise(self, client_id):
        client = db.session.get(Client, client_id)
        if client is None:
            raise LookupError(f"Client {client_id} not found.")
        return client


def get_store(app):
    """Return the store registered on `app`."""
    return app.extensions[ClientStore.extension_name]
