"""Clients blueprint — /api/v1/clients/*

JSON API over the client board. Input errors come back as 400 with
{message, long_message}; store failures as 500 with the same shape.

Route Map:
  GET  /api/v1/clients?status=<lane>   — List clients, optional lane filter
  GET  /api/v1/clients/<id>            — Single client
  PUT  /api/v1/clients/<id>            — Move client (status and/or priority)
  PUT  /api/v1/clients                 — Reset all clients from the fixture
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from shiptivity.extensions import limiter
from shiptivity.services import client_service
from shiptivity.services.client_service import ClientInputError
from shiptivity.services.client_store import get_store

logger = logging.getLogger(__name__)

clients_bp = Blueprint("clients", __name__, url_prefix="/api/v1/clients")


# ─── Error Handlers ──────────────────────────────────────────────

@clients_bp.errorhandler(ClientInputError)
def handle_input_error(e):
    return jsonify(e.to_dict()), 400


@clients_bp.errorhandler(SQLAlchemyError)
def handle_store_error(e):
    logger.error(f"Client store failure: {e}", exc_info=True)
    return jsonify({
        "message": "Internal server error.",
        "long_message": "The client store could not complete the request.",
    }), 500


# ─── Read API ────────────────────────────────────────────────────

@clients_bp.route("", methods=["GET"])
def api_list_clients():
    # Empty ?status= means no filter
    status = request.args.get("status") or None
    store = get_store(current_app)
    return jsonify(client_service.list_clients(store, status))


@clients_bp.route("/<client_id>", methods=["GET"])
def api_get_client(client_id):
    store = get_store(current_app)
    client = client_service.get_client(
        store, client_service.parse_client_id(client_id)
    )
    return jsonify(client)


# ─── Write API ───────────────────────────────────────────────────

@clients_bp.route("/<client_id>", methods=["PUT"])
def api_move_client(client_id):
    """Change a client's lane and/or priority.

    Body (all optional):
      status:   'backlog' | 'in-progress' | 'complete'
      priority: positive integer, 1 = top of the lane

    Omitted fields keep their current value. Priorities past the bottom of
    the destination lane append to it. Returns every client, sorted by id.
    """
    store = get_store(current_app)
    cid = client_service.parse_client_id(client_id)
    client_service.get_client(store, cid)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    status = data.get("status")
    priority = data.get("priority")
    if status is not None:
        status = client_service.parse_status(status)
    if priority is not None:
        priority = client_service.parse_priority(priority)

    result = client_service.move_client(store, cid, status=status, priority=priority)
    return jsonify(result)


@clients_bp.route("", methods=["PUT"])
@limiter.limit("10 per minute")
def api_reset_clients():
    store = get_store(current_app)
    count = client_service.reset_clients(
        store, current_app.config["CLIENTS_FIXTURE_PATH"]
    )
    return jsonify(f"Reset {count} clients from fixture."), 200
