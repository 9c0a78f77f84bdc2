#!/usr/bin/env python3
"""Reset all client data in the local database from the JSON fixture.

Drops every existing client row and reloads the fixture
(shiptivity/fixtures/clients.json unless CLIENTS_FIXTURE_PATH is set).
The fixture is checked first: every lane must run 1..N.

Usage:
    python3 reset_client_data.py
    python3 reset_client_data.py --yes   (skip confirmation prompt)
"""

import sys
import os

# Ensure we can import the app
sys.path.insert(0, os.path.dirname(__file__))

# Load .env
from dotenv import load_dotenv
load_dotenv()


def reset():
    from shiptivity import create_app
    from shiptivity.extensions import db
    from shiptivity.models.client import Client
    from shiptivity.services.client_service import load_fixture, reset_clients
    from shiptivity.services.client_store import get_store

    app = create_app("development")

    with app.app_context():
        path = app.config["CLIENTS_FIXTURE_PATH"]
        records = load_fixture(path)

        db.create_all()
        current = Client.query.count()

        print(f"\n  Fixture: {path}")
        print(f"    - {len(records)} client(s) to load")
        for status in Client.STATUSES:
            lane = [r for r in records if r["status"] == status]
            print(f"      {status}: {len(lane)}")
        print(f"\n  Data to be DELETED:")
        print(f"    - {current} existing client(s)")
        print()

        if "--yes" not in sys.argv:
            confirm = input("  Proceed? (type 'yes' to confirm): ")
            if confirm.strip().lower() != "yes":
                print("  Aborted.")
                return

        count = reset_clients(get_store(app), path)
        print(f"\n  Done! {count} client(s) loaded.\n")


if __name__ == "__main__":
    reset()
