from __future__ import annotations

from flask import Blueprint, jsonify, request

from cloudsim.services.simulation_service import SimulationService

simulation_routes = Blueprint("simulation_routes", __name__)


@simulation_routes.route("/api/simulate", methods=["POST"])
def simulate_route():
    payload = request.get_json(silent=True) or {}
    result, status = SimulationService().run_simulation(payload)
    return jsonify(result), status


@simulation_routes.route("/api/validate", methods=["POST"])
def validate_route():
    payload = request.get_json(silent=True) or {}
    result, status = SimulationService().validate_graph(payload)
    return jsonify(result), status


@simulation_routes.route("/api/order", methods=["POST"])
def order_route():
    payload = request.get_json(silent=True) or {}
    result, status = SimulationService().order_graph(payload)
    return jsonify(result), status
