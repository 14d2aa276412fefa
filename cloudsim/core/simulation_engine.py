from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from .advanced import calculate_advanced_results
from .cost_calculator import CostInputs, service_monthly_cost
from .graph.ordering import order
from .graph.validator import validate
from .models import SECURE_PROTOCOLS, Edge, ServiceNode, ServiceType, TrafficProfile, flow_nodes
from .results import (
    AvailabilityResult,
    CostLineItem,
    CostResult,
    PerformanceResult,
    SecurityResult,
    SimulationResult,
    round_half_up,
)

logger = logging.getLogger(__name__)

P50_MULTIPLIER = 0.9
P99_MULTIPLIER = 1.8

BASE_UPTIME = 0.99
MAX_UPTIME = 0.9999

ENCRYPTED_AT_REST_TYPES = frozenset({ServiceType.S3, ServiceType.RDS, ServiceType.ELASTICACHE, ServiceType.DYNAMODB})


def _cache_hit_rate(node: ServiceNode) -> float:
    cache = node.config.cache
    if cache is None or not cache.active:
        return 0.0
    return cache.hit_rate


def calculate_performance(ordered_nodes: Sequence[ServiceNode], traffic: TrafficProfile) -> PerformanceResult:
    """Sum base latency along the flow while each cache layer filters the
    traffic that survived the layers before it."""
    nodes = flow_nodes(ordered_nodes)
    initial = traffic.requests_per_second

    total_latency = 0.0
    remaining = initial
    for node in nodes:
        total_latency += node.config.latency.base
        remaining -= remaining * _cache_hit_rate(node)

    return PerformanceResult(
        total_latency=total_latency,
        p50_latency=total_latency * P50_MULTIPLIER,
        p99_latency=total_latency * P99_MULTIPLIER,
        ttfb=nodes[0].config.latency.base if nodes else 0.0,
        cache_hit_rate=1 - remaining / initial if initial > 0 else 0.0,
        requests_reaching_origin=remaining,
    )


def calculate_cost(ordered_nodes: Sequence[ServiceNode], traffic: TrafficProfile) -> CostResult:
    breakdown: List[CostLineItem] = []
    total_monthly = 0.0
    effective_rps = traffic.requests_per_second

    for node in flow_nodes(ordered_nodes):
        inputs = CostInputs.from_rate(effective_rps, traffic.average_payload_size, traffic.read_write_ratio)
        amount = service_monthly_cost(node, inputs)
        breakdown.append(CostLineItem(service=node.config.name, amount=amount))
        total_monthly += amount
        effective_rps *= 1 - _cache_hit_rate(node)

    requests_per_month = CostInputs.from_rate(traffic.requests_per_second, 0, 0).requests_per_month
    per_request = total_monthly / requests_per_month if requests_per_month > 0 else 0.0

    return CostResult(monthly=total_monthly, per_request=per_request, breakdown=tuple(breakdown))


def is_edge_secure(edge: Edge) -> bool:
    if edge.protocol is None:
        return True
    return edge.protocol in SECURE_PROTOCOLS


def analyze_security(ordered_nodes: Sequence[ServiceNode], edges: Sequence[Edge]) -> SecurityResult:
    nodes = flow_nodes(ordered_nodes)

    secured = [node.config.security for node in nodes if node.config.security is not None]
    ddos_protection = any(security.ddos_protection for security in secured)
    waf_enabled = any(security.waf for security in secured)
    encryption_in_transit = all(is_edge_secure(edge) for edge in edges)

    storage_nodes = [node for node in nodes if node.service_type in ENCRYPTED_AT_REST_TYPES]
    encryption_at_rest = all(
        node.config.security is not None and node.config.security.encryption for node in storage_nodes
    )

    has_vpc = any(node.service_type == ServiceType.VPC for node in ordered_nodes)
    has_private_subnet = any(
        node.service_type == ServiceType.SUBNET and node.config.specific.subnet_type == "private"
        for node in ordered_nodes
    )

    score = 20 * sum((ddos_protection, waf_enabled, encryption_in_transit, encryption_at_rest))
    if has_vpc:
        score += 20 if has_private_subnet else 10

    return SecurityResult(
        ddos_protection=ddos_protection,
        waf_enabled=waf_enabled,
        encryption_in_transit=encryption_in_transit,
        encryption_at_rest=encryption_at_rest,
        score=min(100, score),
    )


def _always(spec) -> bool:
    return True


def _scales_out(count: int, auto_scaling) -> bool:
    return count > 1 or (auto_scaling.enabled and auto_scaling.max > 1)


REDUNDANCY_RULES: Dict[ServiceType, Callable[[object], bool]] = {
    ServiceType.ECS: lambda spec: _scales_out(spec.task_count, spec.auto_scaling),
    ServiceType.EKS: lambda spec: _scales_out(spec.node_count, spec.auto_scaling),
    ServiceType.EC2: lambda spec: spec.instance_count > 1,
    ServiceType.RDS: lambda spec: spec.multi_az or spec.read_replicas > 0,
    ServiceType.ELASTICACHE: lambda spec: spec.num_nodes > 1,
    ServiceType.ALB: lambda spec: spec.target_count > 1,
    ServiceType.NLB: lambda spec: spec.target_count > 1,
    ServiceType.CLOUDFRONT: _always,
    ServiceType.ROUTE53: _always,
    ServiceType.S3: _always,
    ServiceType.DYNAMODB: _always,
    ServiceType.LAMBDA: _always,
    ServiceType.SQS: _always,
    ServiceType.SNS: _always,
    ServiceType.KINESIS: _always,
}


def is_node_redundant(node: ServiceNode) -> bool:
    rule = REDUNDANCY_RULES.get(node.service_type)
    return rule is not None and rule(node.config.specific)


def analyze_availability(ordered_nodes: Sequence[ServiceNode]) -> AvailabilityResult:
    nodes = flow_nodes(ordered_nodes)
    if not nodes:
        return AvailabilityResult(single_points_of_failure=(), redundancy_score=100, estimated_uptime=MAX_UPTIME)

    redundant = [is_node_redundant(node) for node in nodes]
    redundancy_score = round_half_up(sum(redundant) / len(nodes) * 100)
    uptime = BASE_UPTIME + (MAX_UPTIME - BASE_UPTIME) * (redundancy_score / 100)

    return AvailabilityResult(
        single_points_of_failure=tuple(node.config.name for node, ok in zip(nodes, redundant) if not ok),
        redundancy_score=redundancy_score,
        estimated_uptime=round(uptime, 4),
    )


def simulate(
    nodes: Sequence[ServiceNode],
    edges: Sequence[Edge],
    traffic: TrafficProfile,
    advanced_mode: Optional[bool] = False,
) -> SimulationResult:
    ordered_nodes = order(nodes, edges)

    performance = calculate_performance(ordered_nodes, traffic)
    cost = calculate_cost(ordered_nodes, traffic)
    security = analyze_security(ordered_nodes, edges)
    availability = analyze_availability(ordered_nodes)
    validation = validate(nodes, edges)
    advanced = calculate_advanced_results(ordered_nodes, traffic) if advanced_mode else None

    logger.info(
        "Simulated %d node(s) at %.2f rps: latency=%.2fms monthly=%.2f security=%d uptime=%.4f issues=%d",
        len(ordered_nodes),
        traffic.requests_per_second,
        performance.total_latency,
        cost.monthly,
        security.score,
        availability.estimated_uptime,
        len(validation.issues),
    )

    return SimulationResult(
        performance=performance,
        cost=cost,
        security=security,
        availability=availability,
        validation=validation,
        advanced=advanced,
    )
