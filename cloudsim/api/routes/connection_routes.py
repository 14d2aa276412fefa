from __future__ import annotations

from flask import Blueprint, jsonify, request

from cloudsim.services.connection_service import ConnectionService

connection_routes = Blueprint("connection_routes", __name__)


@connection_routes.route("/api/connections/check", methods=["GET"])
def check_connection():
    payload, status = ConnectionService().check_connection(
        request.args.get("source"), request.args.get("target")
    )
    return jsonify(payload), status


@connection_routes.route("/api/services", methods=["GET"])
def list_services():
    return jsonify({"services": ConnectionService().list_services()})
