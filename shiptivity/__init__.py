import os
import logging

import click
from flask import Flask, jsonify

from shiptivity.config import config_by_name
from shiptivity.extensions import db, migrate, limiter


def create_app(config_name=None):
    """Application factory."""

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.sort_keys = False

    # --- Validate required env vars (skip in testing) ---
    if config_name != "testing":
        try:
            config_by_name[config_name].validate()
        except RuntimeError as e:
            app.logger.warning(f"Config validation: {e}")

    # --- Init extensions ---
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # --- Import models so Alembic can discover them ---
    with app.app_context():
        from shiptivity import models  # noqa: F401

    # --- Client store ---
    from shiptivity.services.client_store import ClientStore
    ClientStore().init_app(app)

    # --- Register blueprints ---
    from shiptivity.blueprints.clients import clients_bp

    app.register_blueprint(clients_bp)

    # --- Root route ---
    @app.route("/")
    def index():
        return jsonify({"message": "SHIPTIVITY API. Read documentation to see API docs"})

    # --- Error handlers ---
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({
            "message": "Not found.",
            "long_message": "The requested URL was not found on the server.",
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({
            "message": "Method not allowed.",
            "long_message": "The method is not allowed for the requested URL.",
        }), 405

    @app.errorhandler(500)
    def server_error(e):
        return jsonify({
            "message": "Internal server error.",
            "long_message": "The server could not complete the request.",
        }), 500

    # --- CLI commands ---
    register_cli(app)

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("reset-clients")
    @click.option("--fixture", default=None, help="Path to a JSON client fixture.")
    def reset_clients_command(fixture):
        """Replace every client with the records in the fixture file.

        Usage:
            flask reset-clients
            flask reset-clients --fixture path/to/clients.json
        """
        from shiptivity.services.client_service import reset_clients
        from shiptivity.services.client_store import get_store

        path = fixture or app.config["CLIENTS_FIXTURE_PATH"]
        count = reset_clients(get_store(app), path)
        click.echo(f"Reset {count} client(s) from {path}")

    @app.cli.command("check-lanes")
    def check_lanes_command():
        """Verify every lane's priorities run 1..N with no gaps or duplicates."""
        from shiptivity.services.client_store import get_store
        from shiptivity.services.reorder import lane_violations

        clients = get_store(app).load_all()
        violations = lane_violations(clients)
        if not violations:
            click.echo(f"All lanes OK ({len(clients)} clients).")
            return

        for status, priorities in violations.items():
            click.echo(f"  {status}: priorities {priorities}")
        raise click.ClickException(f"{len(violations)} lane(s) out of order.")
