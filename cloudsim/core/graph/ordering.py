from __future__ import annotations

import logging
from collections import defaultdict, deque
from typing import Dict, List, Sequence

from ..models import Edge, ServiceNode

logger = logging.getLogger(__name__)


def order(nodes: Sequence[ServiceNode], edges: Sequence[Edge]) -> List[ServiceNode]:
    """Order nodes along the request flow using Kahn's algorithm.

    Nodes with no incoming edges are released in input order. Edges that
    reference an unknown node are skipped. Nodes on a cycle never reach
    in-degree zero and are left out of the result.
    """
    node_map: Dict[str, ServiceNode] = {}
    for node in nodes:
        node_map.setdefault(node.id, node)

    adjacency: Dict[str, List[str]] = defaultdict(list)
    indegree: Dict[str, int] = {node_id: 0 for node_id in node_map}

    for edge in edges:
        if edge.source not in node_map or edge.target not in node_map:
            continue
        adjacency[edge.source].append(edge.target)
        indegree[edge.target] += 1

    queue = deque([node_id for node_id, degree in indegree.items() if degree == 0])
    ordered: List[ServiceNode] = []

    while queue:
        node_id = queue.popleft()
        ordered.append(node_map[node_id])
        for neighbor in adjacency.get(node_id, []):
            indegree[neighbor] -= 1
            if indegree[neighbor] == 0:
                queue.append(neighbor)

    logger.debug("Ordered %d of %d node(s) across %d edge(s)", len(ordered), len(node_map), len(edges))
    if len(ordered) != len(node_map):
        placed = {node.id for node in ordered}
        logger.debug(
            "Excluded %d node(s) on a cycle from the flow order: %s",
            len(node_map) - len(ordered),
            [node_id for node_id in node_map if node_id not in placed],
        )
    return ordered
