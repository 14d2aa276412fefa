from __future__ import annotations

import logging
from typing import Dict, Tuple

from cloudsim.api.schemas import parse_advanced_mode, parse_graph, parse_traffic
from cloudsim.core.graph.ordering import order
from cloudsim.core.graph.validator import validate
from cloudsim.core.simulation_engine import simulate

logger = logging.getLogger(__name__)


class SimulationService:
    def run_simulation(self, payload: Dict[str, object]) -> Tuple[Dict[str, object], int]:
        try:
            nodes, edges = parse_graph(payload)
            traffic = parse_traffic(payload)
            advanced_mode = parse_advanced_mode(payload)
        except ValueError as exc:
            logger.warning("Rejected simulation request: %s", exc)
            return {"error": str(exc)}, 400

        result = simulate(nodes, edges, traffic, advanced_mode=advanced_mode)
        return result.to_dict(), 200

    def validate_graph(self, payload: Dict[str, object]) -> Tuple[Dict[str, object], int]:
        try:
            nodes, edges = parse_graph(payload)
        except ValueError as exc:
            logger.warning("Rejected validation request: %s", exc)
            return {"error": str(exc)}, 400
        return validate(nodes, edges).to_dict(), 200

    def order_graph(self, payload: Dict[str, object]) -> Tuple[Dict[str, object], int]:
        try:
            nodes, edges = parse_graph(payload)
        except ValueError as exc:
            logger.warning("Rejected ordering request: %s", exc)
            return {"error": str(exc)}, 400
        return {"ordered_node_ids": [node.id for node in order(nodes, edges)]}, 200
