from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict

from . import pricing
from .models import CostConfig, ServiceNode, ServiceType

HOURS_PER_MONTH = pricing.HOURS_PER_MONTH


@dataclass(frozen=True)
class CostInputs:
    requests_per_month: float
    data_transfer_gb: float
    read_write_ratio: float

    @classmethod
    def from_rate(cls, requests_per_second: float, average_payload_kb: float, read_write_ratio: float) -> "CostInputs":
        requests_per_month = requests_per_second * pricing.SECONDS_PER_MONTH
        data_transfer_gb = requests_per_month * average_payload_kb / pricing.KB_PER_GB
        return cls(
            requests_per_month=requests_per_month,
            data_transfer_gb=data_transfer_gb,
            read_write_ratio=read_write_ratio,
        )


def _per_million(requests: float, rate: float) -> float:
    return requests / 1_000_000 * rate


def calculate_route53_monthly_cost(requests_per_month: float) -> float:
    return _per_million(requests_per_month, pricing.ROUTE53["per_million_queries"]) + pricing.ROUTE53[
        "hosted_zone_monthly"
    ]


def calculate_cloudfront_monthly_cost(requests_per_month: float, data_transfer_gb: float) -> float:
    request_cost = requests_per_month / 10_000 * pricing.CLOUDFRONT["per_10000_requests"]
    transfer_cost = data_transfer_gb * pricing.CLOUDFRONT["per_gb_first_10tb"]
    return request_cost + transfer_cost


def _capacity_units(requests_per_month: float, data_transfer_gb: float, requests_per_unit: float) -> float:
    requests_per_second = requests_per_month / pricing.SECONDS_PER_MONTH
    gb_per_hour = data_transfer_gb / HOURS_PER_MONTH
    return max(requests_per_second / requests_per_unit, gb_per_hour)


def calculate_alb_monthly_cost(requests_per_month: float, data_transfer_gb: float) -> float:
    lcu = _capacity_units(requests_per_month, data_transfer_gb, pricing.ALB["requests_per_lcu"])
    return (pricing.ALB["per_hour"] + lcu * pricing.ALB["per_lcu_hour"]) * HOURS_PER_MONTH


def calculate_nlb_monthly_cost(requests_per_month: float, data_transfer_gb: float) -> float:
    nlcu = _capacity_units(requests_per_month, data_transfer_gb, pricing.NLB["flows_per_nlcu"])
    return (pricing.NLB["per_hour"] + nlcu * pricing.NLB["per_nlcu_hour"]) * HOURS_PER_MONTH


def calculate_api_gateway_monthly_cost(api_type: str, requests_per_month: float, caching_enabled: bool) -> float:
    rate = pricing.API_GATEWAY.get(f"{api_type}_per_million", pricing.API_GATEWAY["rest_per_million"])
    cost = _per_million(requests_per_month, rate)
    if caching_enabled:
        cost += pricing.API_GATEWAY["caching_per_hour"] * HOURS_PER_MONTH
    return cost


def calculate_ecs_monthly_cost(launch_type: str, task_count: int, cpu: float, memory: float) -> float:
    if launch_type != "fargate":
        # Tasks on the EC2 launch type are billed through their instances.
        return 0.0
    cpu_cost = cpu * pricing.ECS["fargate_vcpu_per_hour"] * HOURS_PER_MONTH * task_count
    memory_cost = memory * pricing.ECS["fargate_memory_gb_per_hour"] * HOURS_PER_MONTH * task_count
    return cpu_cost + memory_cost


def calculate_eks_monthly_cost(node_group_type: str, node_count: int, instance_type: str) -> float:
    control_plane = pricing.EKS["control_plane_per_hour"] * HOURS_PER_MONTH
    if node_group_type == "fargate":
        return control_plane
    hourly = pricing.EKS_NODE_HOURLY.get(instance_type, pricing.EKS_NODE_HOURLY["t3.medium"])
    return control_plane + hourly * HOURS_PER_MONTH * node_count


def calculate_ec2_monthly_cost(instance_type: str, instance_count: int) -> float:
    hourly = pricing.EC2_HOURLY.get(instance_type, pricing.EC2_HOURLY["t3.micro"])
    return hourly * HOURS_PER_MONTH * instance_count


def calculate_lambda_monthly_cost(memory_mb: float, requests_per_month: float, avg_duration_ms: float) -> float:
    request_cost = _per_million(requests_per_month, pricing.LAMBDA["per_million_requests"])
    gb_seconds = (memory_mb / 1024) * (avg_duration_ms / 1000) * requests_per_month
    return request_cost + gb_seconds * pricing.LAMBDA["per_gb_second"]


def calculate_s3_monthly_cost(requests_per_month: float, storage_gb: float, read_write_ratio: float) -> float:
    reads = requests_per_month * read_write_ratio
    writes = requests_per_month * (1 - read_write_ratio)
    request_cost = reads / 1000 * pricing.S3["per_1000_get"] + writes / 1000 * pricing.S3["per_1000_put"]
    return request_cost + storage_gb * pricing.S3["per_gb_month"]


def calculate_rds_monthly_cost(instance_class: str, multi_az: bool, read_replicas: int, storage_gb: float) -> float:
    hourly = pricing.RDS_HOURLY.get(instance_class, pricing.RDS_HOURLY["db.t3.micro"])
    az_multiplier = pricing.RDS["multi_az_multiplier"] if multi_az else 1
    instance_cost = hourly * HOURS_PER_MONTH * az_multiplier
    replica_cost = hourly * HOURS_PER_MONTH * read_replicas
    storage_cost = storage_gb * pricing.RDS["storage_per_gb_month"] * az_multiplier
    return instance_cost + replica_cost + storage_cost


def calculate_dynamodb_monthly_cost(
    capacity_mode: str,
    requests_per_month: float,
    read_write_ratio: float,
    read_capacity_units: int,
    write_capacity_units: int,
    storage_gb: float,
) -> float:
    storage_cost = storage_gb * pricing.DYNAMODB["storage_per_gb_month"]
    if capacity_mode == "provisioned":
        rcu_cost = read_capacity_units * pricing.DYNAMODB["rcu_per_hour"] * HOURS_PER_MONTH
        wcu_cost = write_capacity_units * pricing.DYNAMODB["wcu_per_hour"] * HOURS_PER_MONTH
        return rcu_cost + wcu_cost + storage_cost
    read_cost = _per_million(requests_per_month * read_write_ratio, pricing.DYNAMODB["per_million_reads"])
    write_cost = _per_million(requests_per_month * (1 - read_write_ratio), pricing.DYNAMODB["per_million_writes"])
    return read_cost + write_cost + storage_cost


def calculate_elasticache_monthly_cost(node_type: str, num_nodes: int) -> float:
    hourly = pricing.ELASTICACHE_HOURLY.get(node_type, pricing.ELASTICACHE_HOURLY["cache.t3.micro"])
    return hourly * HOURS_PER_MONTH * num_nodes


def calculate_sqs_monthly_cost(queue_type: str, requests_per_month: float) -> float:
    rate = pricing.SQS["per_million_fifo"] if queue_type == "fifo" else pricing.SQS["per_million_standard"]
    return _per_million(requests_per_month, rate)


def calculate_sns_monthly_cost(topic_type: str, subscription_count: int, requests_per_month: float) -> float:
    publish_rate = (
        pricing.SNS["per_million_publishes_fifo"] if topic_type == "fifo" else pricing.SNS["per_million_publishes"]
    )
    publish_cost = _per_million(requests_per_month, publish_rate)
    delivery_cost = _per_million(requests_per_month * subscription_count, pricing.SNS["per_million_deliveries"])
    return publish_cost + delivery_cost


def calculate_kinesis_monthly_cost(stream_mode: str, shard_count: int, data_transfer_gb: float) -> float:
    if stream_mode == "on-demand":
        if data_transfer_gb <= 0:
            return 0.0
        ingest_cost = data_transfer_gb * pricing.KINESIS["per_gb_ingested"]
        # On-demand streams keep at least one shard's worth of stream hours.
        return ingest_cost + pricing.KINESIS["per_shard_hour"] * HOURS_PER_MONTH
    shard_cost = shard_count * pricing.KINESIS["shard_hour_provisioned"] * HOURS_PER_MONTH
    put_cost = shard_count * pricing.KINESIS["per_shard_hour"] * HOURS_PER_MONTH
    return shard_cost + put_cost


def calculate_waf_monthly_cost(rule_count: int, requests_per_month: float) -> float:
    fixed = pricing.WAF["per_web_acl_monthly"] + rule_count * pricing.WAF["per_rule_monthly"]
    return fixed + _per_million(requests_per_month, pricing.WAF["per_million_requests"])


def calculate_shield_monthly_cost(tier: str) -> float:
    if tier == "advanced":
        return float(pricing.SHIELD["advanced_monthly"])
    return float(pricing.SHIELD["standard_monthly"])


def calculate_nat_gateway_monthly_cost(data_transfer_gb: float) -> float:
    return pricing.NAT_GATEWAY["per_hour"] * HOURS_PER_MONTH + data_transfer_gb * pricing.NAT_GATEWAY[
        "per_gb_processed"
    ]


def calculate_generic_monthly_cost(cost: CostConfig, requests_per_month: float, data_transfer_gb: float) -> float:
    return (
        (cost.per_request or 0) * requests_per_month
        + (cost.per_gb or 0) * data_transfer_gb
        + (cost.monthly or 0)
    )


CostFormula = Callable[[object, CostInputs], float]

_COST_FORMULAS: Dict[ServiceType, CostFormula] = {
    ServiceType.ROUTE53: lambda spec, v: calculate_route53_monthly_cost(v.requests_per_month),
    ServiceType.CLOUDFRONT: lambda spec, v: calculate_cloudfront_monthly_cost(v.requests_per_month, v.data_transfer_gb),
    ServiceType.ALB: lambda spec, v: calculate_alb_monthly_cost(v.requests_per_month, v.data_transfer_gb),
    ServiceType.NLB: lambda spec, v: calculate_nlb_monthly_cost(v.requests_per_month, v.data_transfer_gb),
    ServiceType.API_GATEWAY: lambda spec, v: calculate_api_gateway_monthly_cost(
        spec.api_type, v.requests_per_month, spec.caching_enabled
    ),
    ServiceType.ECS: lambda spec, v: calculate_ecs_monthly_cost(spec.launch_type, spec.task_count, spec.cpu, spec.memory),
    ServiceType.EKS: lambda spec, v: calculate_eks_monthly_cost(spec.node_group_type, spec.node_count, spec.instance_type),
    ServiceType.EC2: lambda spec, v: calculate_ec2_monthly_cost(spec.instance_type, spec.instance_count),
    ServiceType.LAMBDA: lambda spec, v: calculate_lambda_monthly_cost(
        spec.memory_mb, v.requests_per_month, spec.avg_duration_ms
    ),
    ServiceType.S3: lambda spec, v: calculate_s3_monthly_cost(v.requests_per_month, spec.storage_gb, v.read_write_ratio),
    ServiceType.RDS: lambda spec, v: calculate_rds_monthly_cost(
        spec.instance_class, spec.multi_az, spec.read_replicas, spec.storage_gb
    ),
    ServiceType.DYNAMODB: lambda spec, v: calculate_dynamodb_monthly_cost(
        spec.capacity_mode,
        v.requests_per_month,
        v.read_write_ratio,
        spec.read_capacity_units,
        spec.write_capacity_units,
        spec.storage_gb,
    ),
    ServiceType.ELASTICACHE: lambda spec, v: calculate_elasticache_monthly_cost(spec.node_type, spec.num_nodes),
    ServiceType.SQS: lambda spec, v: calculate_sqs_monthly_cost(spec.queue_type, v.requests_per_month),
    ServiceType.SNS: lambda spec, v: calculate_sns_monthly_cost(
        spec.topic_type, spec.subscription_count, v.requests_per_month
    ),
    ServiceType.KINESIS: lambda spec, v: calculate_kinesis_monthly_cost(
        spec.stream_mode, spec.shard_count, v.data_transfer_gb
    ),
    ServiceType.WAF: lambda spec, v: calculate_waf_monthly_cost(spec.rule_count, v.requests_per_month),
    ServiceType.SHIELD: lambda spec, v: calculate_shield_monthly_cost(spec.tier),
    ServiceType.NAT_GATEWAY: lambda spec, v: calculate_nat_gateway_monthly_cost(v.data_transfer_gb),
}


def service_monthly_cost(node: ServiceNode, inputs: CostInputs) -> float:
    """Monthly cost of one node at the given derived traffic volumes.

    Types without a dedicated formula (the containment types) fall back to
    the node's own per-request/per-GB/monthly cost fields.
    """
    formula = _COST_FORMULAS.get(node.service_type)
    if formula is None:
        return calculate_generic_monthly_cost(node.config.cost, inputs.requests_per_month, inputs.data_transfer_gb)
    return formula(node.config.specific, inputs)
