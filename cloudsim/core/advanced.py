"""Per-service analytics computed on demand for advanced-mode simulations."""

from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, NamedTuple, Sequence, Tuple

from .catalog import LATENCY_TABLE
from .cost_calculator import CostInputs, service_monthly_cost
from .models import ServiceNode, ServiceType, TrafficProfile, flow_nodes
from .results import (
    AdvancedResult,
    CostCategoryEntry,
    LatencyBreakdownResult,
    OperationalCostBreakdown,
    ScalabilityResult,
    ScalabilityServiceEntry,
    ServiceLatencyEntry,
    round_half_up,
)

P50_POSITION = 0.6
P99_POSITION = 0.9

SCALABLE_TYPES = frozenset(
    {ServiceType.ECS, ServiceType.EKS, ServiceType.EC2, ServiceType.LAMBDA, ServiceType.API_GATEWAY}
)

COMPUTE = "compute"
STORAGE = "storage"
DATA_TRANSFER = "data_transfer"
REQUESTS = "requests"

COST_CATEGORIES: Mapping[ServiceType, str] = MappingProxyType(
    {
        ServiceType.ECS: COMPUTE,
        ServiceType.EKS: COMPUTE,
        ServiceType.EC2: COMPUTE,
        ServiceType.LAMBDA: COMPUTE,
        ServiceType.RDS: STORAGE,
        ServiceType.S3: STORAGE,
        ServiceType.DYNAMODB: STORAGE,
        ServiceType.ELASTICACHE: STORAGE,
        ServiceType.CLOUDFRONT: DATA_TRANSFER,
        ServiceType.NAT_GATEWAY: DATA_TRANSFER,
    }
)


def latency_range(node: ServiceNode) -> Tuple[float, float, float]:
    known = LATENCY_TABLE.get(node.service_type)
    if known is not None:
        return known
    base = node.config.latency.base
    return 0.0, base, base * 2


def calculate_latency_breakdown(
    ordered_nodes: Sequence[ServiceNode], traffic: TrafficProfile
) -> LatencyBreakdownResult:
    entries: List[ServiceLatencyEntry] = []
    for node in flow_nodes(ordered_nodes):
        low, base, high = latency_range(node)
        entries.append(
            ServiceLatencyEntry(
                service=node.config.name,
                service_type=node.service_type.value,
                base_ms=base,
                p50_ms=round(low + (base - low) * P50_POSITION, 2),
                p99_ms=round(base + (high - base) * P99_POSITION, 2),
            )
        )

    return LatencyBreakdownResult(
        per_service=tuple(entries),
        total_p50=round(sum(entry.p50_ms for entry in entries), 2),
        total_p99=round(sum(entry.p99_ms for entry in entries), 2),
    )


class Throughput(NamedTuple):
    max_rps: float
    is_fargate: bool
    auto_scaling: bool


def service_throughput(node: ServiceNode) -> Throughput:
    spec = node.config.specific
    per_unit = 1000 / max(node.config.latency.base, 1)

    if node.service_type == ServiceType.ECS:
        is_fargate = spec.launch_type == "fargate"
        if spec.auto_scaling.enabled:
            return Throughput(spec.auto_scaling.max * per_unit, is_fargate, True)
        return Throughput(spec.task_count * per_unit, is_fargate, False)

    if node.service_type == ServiceType.EKS:
        is_fargate = spec.node_group_type == "fargate"
        if spec.auto_scaling.enabled:
            return Throughput(spec.auto_scaling.max * per_unit, is_fargate, True)
        return Throughput(spec.node_count * per_unit, is_fargate, False)

    if node.service_type == ServiceType.EC2:
        return Throughput(spec.instance_count * per_unit, False, spec.auto_scaling)

    if node.service_type == ServiceType.LAMBDA:
        return Throughput(float(spec.concurrency), False, True)

    if node.service_type == ServiceType.API_GATEWAY:
        return Throughput(float(spec.throttling_rate), False, True)

    raise ValueError(f"{node.service_type.value} has no throughput model.")


def calculate_scalability(ordered_nodes: Sequence[ServiceNode], traffic: TrafficProfile) -> ScalabilityResult:
    compute_nodes = [node for node in flow_nodes(ordered_nodes) if node.service_type in SCALABLE_TYPES]
    if not compute_nodes:
        return ScalabilityResult(bottleneck_service=None, max_rps=0, headroom_percent=0, auto_scaling_enabled=False)

    current = traffic.requests_per_second
    measured = [(node, service_throughput(node)) for node in compute_nodes]
    entries = tuple(
        ScalabilityServiceEntry(
            service=node.config.name,
            current_capacity=current,
            max_capacity=round_half_up(throughput.max_rps),
            is_fargate=throughput.is_fargate,
        )
        for node, throughput in measured
    )

    # min() keeps the first of equally constrained services.
    bottleneck, limit = min(measured, key=lambda pair: pair[1].max_rps)
    max_rps = round_half_up(limit.max_rps)
    headroom = max(0, round_half_up((max_rps - current) / max_rps * 100)) if max_rps > 0 else 0

    return ScalabilityResult(
        bottleneck_service=bottleneck.config.name,
        max_rps=max_rps,
        headroom_percent=headroom,
        auto_scaling_enabled=all(throughput.auto_scaling for _, throughput in measured),
        per_service=entries,
    )


def cost_category(service_type: ServiceType) -> str:
    return COST_CATEGORIES.get(service_type, REQUESTS)


def calculate_cost_breakdown(
    ordered_nodes: Sequence[ServiceNode], traffic: TrafficProfile
) -> OperationalCostBreakdown:
    inputs = CostInputs.from_rate(traffic.requests_per_second, traffic.average_payload_size, traffic.read_write_ratio)
    entries = tuple(
        CostCategoryEntry(
            service=node.config.name,
            category=cost_category(node.service_type),
            amount=service_monthly_cost(node, inputs),
        )
        for node in flow_nodes(ordered_nodes)
    )

    def bucket(category: str) -> float:
        return round(sum(entry.amount for entry in entries if entry.category == category), 2)

    return OperationalCostBreakdown(
        compute=bucket(COMPUTE),
        storage=bucket(STORAGE),
        data_transfer=bucket(DATA_TRANSFER),
        requests=bucket(REQUESTS),
        per_service=entries,
    )


def calculate_advanced_results(ordered_nodes: Sequence[ServiceNode], traffic: TrafficProfile) -> AdvancedResult:
    return AdvancedResult(
        latency_breakdown=calculate_latency_breakdown(ordered_nodes, traffic),
        scalability=calculate_scalability(ordered_nodes, traffic),
        operational_cost=calculate_cost_breakdown(ordered_nodes, traffic),
    )
