"""Client model.

One row per client on the board. `status` is the lane the client sits in,
`priority` its rank inside that lane (1 = top of the lane).
"""

from shiptivity.extensions import db


class Client(db.Model):
    __tablename__ = "clients"

    # -- Lanes, in board order --
    STATUSES = ["backlog", "in-progress", "complete"]

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    email = db.Column(db.String(255), nullable=True)
    status = db.Column(
        db.String(50), default="backlog", nullable=False
    )  # backlog | in-progress | complete
    priority = db.Column(db.Integer, nullable=False, default=1)

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('backlog', 'in-progress', 'complete')",
            name="ck_clients_status",
        ),
        db.CheckConstraint("priority >= 1", name="ck_clients_priority"),
        db.Index("ix_clients_status_priority", "status", "priority"),
    )

    def to_dict(self):
        """Serialize to the JSON shape returned by the API."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "email": self.email,
            "status": self.status,
            "priority": self.priority,
        }

    def __repr__(self):
        return f"<Client {self.id} {self.status}#{self.priority}>"
