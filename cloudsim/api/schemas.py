from __future__ import annotations

from typing import List, Mapping, Optional, Tuple

from cloudsim.config import Config
from cloudsim.core.models import Edge, ServiceNode, TrafficProfile, parse_bool


def _object_list(payload: Mapping[str, object], key: str) -> List[Mapping[str, object]]:
    items = payload.get(key, [])
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"{key} must be a list.")
    for item in items:
        if not isinstance(item, Mapping):
            raise ValueError(f"Each entry in {key} must be an object.")
    return items


def parse_graph(payload: Mapping[str, object]) -> Tuple[List[ServiceNode], List[Edge]]:
    if not isinstance(payload, Mapping):
        raise ValueError("Request body must be a JSON object.")

    nodes = [ServiceNode.from_dict(item) for item in _object_list(payload, "nodes")]
    seen = set()
    for node in nodes:
        if node.id in seen:
            raise ValueError(f"Duplicate node id: {node.id}.")
        seen.add(node.id)

    edges = [Edge.from_dict(item) for item in _object_list(payload, "edges")]
    return nodes, edges


def parse_traffic(payload: Mapping[str, object]) -> TrafficProfile:
    traffic = payload.get("traffic_profile")
    if traffic is None:
        traffic = Config.DEFAULT_TRAFFIC_PROFILE
    if not isinstance(traffic, Mapping):
        raise ValueError("traffic_profile must be an object.")
    return TrafficProfile.from_dict(traffic)


def parse_advanced_mode(payload: Mapping[str, object]) -> bool:
    options: Optional[object] = payload.get("options")
    if options is None:
        return Config.DEFAULT_ADVANCED_MODE
    if not isinstance(options, Mapping):
        raise ValueError("options must be an object.")
    return parse_bool(options.get("advanced_mode", Config.DEFAULT_ADVANCED_MODE))
