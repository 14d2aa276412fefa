from __future__ import annotations

from collections import deque
from typing import Dict, List, Sequence, Set

from ..catalog import service_label
from ..connection_rules import (
    BACKEND_TYPES,
    COMPUTE_TYPES,
    DATABASE_TYPES,
    DEPENDENCY_RULES,
    ENTRY_POINT_TYPES,
    PLACEMENT_RULES,
    SUBOPTIMAL_CONNECTIONS,
)
from ..connection_validator import can_connect
from ..models import Edge, ServiceNode
from ..results import ValidationIssue, ValidationResult


def validate_connections(nodes: Sequence[ServiceNode], edges: Sequence[Edge]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    node_map = {node.id: node for node in nodes}

    for edge in edges:
        source = node_map.get(edge.source)
        target = node_map.get(edge.target)
        if source is None or target is None:
            continue

        check = can_connect(source.service_type, target.service_type)
        if not check.allowed:
            issues.append(
                ValidationIssue(
                    severity="error",
                    category="connection",
                    message=check.warning
                    or f"{source.service_type.value} cannot connect to {target.service_type.value}",
                    node_ids=(edge.source, edge.target),
                )
            )

        suboptimal = SUBOPTIMAL_CONNECTIONS.get((source.service_type, target.service_type))
        if suboptimal:
            issues.append(
                ValidationIssue(
                    severity="warning",
                    category="connection",
                    message=suboptimal,
                    node_ids=(edge.source, edge.target),
                )
            )

    return issues


def validate_placements(nodes: Sequence[ServiceNode]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for node in nodes:
        if PLACEMENT_RULES.get(node.service_type) and not node.parent_id:
            issues.append(
                ValidationIssue(
                    severity="warning",
                    category="placement",
                    message=f"{node.service_type.value} should be in a private subnet for security",
                    node_ids=(node.id,),
                )
            )
    return issues


def validate_dependencies(nodes: Sequence[ServiceNode]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    present = {node.service_type for node in nodes}

    for node in nodes:
        for required in DEPENDENCY_RULES.get(node.service_type, ()):
            if required not in present:
                issues.append(
                    ValidationIssue(
                        severity="warning",
                        category="dependency",
                        message=f"{node.service_type.value} typically requires {required.value}",
                        node_ids=(node.id,),
                    )
                )
    return issues


def _reachable_from(start: Sequence[str], adjacency: Dict[str, List[str]]) -> Set[str]:
    reachable: Set[str] = set(start)
    queue = deque(start)
    while queue:
        node_id = queue.popleft()
        for neighbor in adjacency.get(node_id, []):
            if neighbor not in reachable:
                reachable.add(neighbor)
                queue.append(neighbor)
    return reachable


def validate_viability(nodes: Sequence[ServiceNode], edges: Sequence[Edge]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    flow_nodes = [node for node in nodes if node.is_flow]
    if not flow_nodes:
        return issues

    present = {node.service_type for node in flow_nodes}
    has_entry_point = any(service_type in present for service_type in ENTRY_POINT_TYPES)
    if not has_entry_point:
        labels = ", ".join(service_label(service_type) for service_type in ENTRY_POINT_TYPES)
        issues.append(
            ValidationIssue(
                severity="warning",
                category="viability",
                message=f"No entry point found. Add one of {labels} as an entry point.",
            )
        )

    has_database = any(service_type in present for service_type in DATABASE_TYPES)
    has_compute = any(service_type in present for service_type in COMPUTE_TYPES)
    if has_database and not has_compute:
        issues.append(
            ValidationIssue(
                severity="warning",
                category="viability",
                message="Database services found without a compute layer. "
                "Add ECS, EKS, EC2, or Lambda to process requests.",
                node_ids=tuple(node.id for node in flow_nodes if node.service_type in DATABASE_TYPES),
            )
        )

    if has_entry_point and len(flow_nodes) > 1:
        adjacency: Dict[str, List[str]] = {node.id: [] for node in flow_nodes}
        for edge in edges:
            if edge.source in adjacency:
                adjacency[edge.source].append(edge.target)

        entry_ids = [node.id for node in flow_nodes if node.service_type in ENTRY_POINT_TYPES]
        reachable = _reachable_from(entry_ids, adjacency)
        unreachable = [
            node.id for node in flow_nodes if node.service_type in BACKEND_TYPES and node.id not in reachable
        ]
        if unreachable:
            issues.append(
                ValidationIssue(
                    severity="warning",
                    category="viability",
                    message=f"{len(unreachable)} backend service(s) unreachable from entry points. "
                    "Check connections.",
                    node_ids=tuple(unreachable),
                )
            )

    connected: Set[str] = set()
    for edge in edges:
        connected.add(edge.source)
        connected.add(edge.target)

    for node in flow_nodes:
        if node.id not in connected:
            issues.append(
                ValidationIssue(
                    severity="info",
                    category="viability",
                    message=f"{node.service_type.value} is isolated with no connections.",
                    node_ids=(node.id,),
                )
            )

    return issues


def validate(nodes: Sequence[ServiceNode], edges: Sequence[Edge]) -> ValidationResult:
    issues: List[ValidationIssue] = []
    issues.extend(validate_connections(nodes, edges))
    issues.extend(validate_placements(nodes))
    issues.extend(validate_dependencies(nodes))
    issues.extend(validate_viability(nodes, edges))
    return ValidationResult.from_issues(issues)
