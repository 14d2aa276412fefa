"""Unit prices used by the cost formulas, in USD."""

from __future__ import annotations

from types import MappingProxyType

HOURS_PER_MONTH = 730
SECONDS_PER_MONTH = 30 * 24 * 3600
KB_PER_GB = 1024 * 1024

ROUTE53 = MappingProxyType({"per_million_queries": 0.4, "hosted_zone_monthly": 0.5})

CLOUDFRONT = MappingProxyType({"per_gb_first_10tb": 0.085, "per_10000_requests": 0.0075})

ALB = MappingProxyType({"per_hour": 0.0225, "per_lcu_hour": 0.008, "requests_per_lcu": 25})

NLB = MappingProxyType({"per_hour": 0.0225, "per_nlcu_hour": 0.006, "flows_per_nlcu": 800})

API_GATEWAY = MappingProxyType(
    {
        "rest_per_million": 3.5,
        "http_per_million": 1.0,
        "websocket_per_million": 1.0,
        "caching_per_hour": 0.02,
    }
)

ECS = MappingProxyType({"fargate_vcpu_per_hour": 0.04048, "fargate_memory_gb_per_hour": 0.004445})

EC2_HOURLY = MappingProxyType(
    {
        "t3.micro": 0.0104,
        "t3.small": 0.0208,
        "t3.medium": 0.0416,
        "t3.large": 0.0832,
        "t3.xlarge": 0.1664,
    }
)

LAMBDA = MappingProxyType({"per_million_requests": 0.2, "per_gb_second": 0.0000166667})

S3 = MappingProxyType({"per_gb_month": 0.023, "per_1000_get": 0.0004, "per_1000_put": 0.005})

RDS_HOURLY = MappingProxyType(
    {
        "db.t3.micro": 0.017,
        "db.t3.small": 0.034,
        "db.t3.medium": 0.068,
        "db.t3.large": 0.136,
    }
)
RDS = MappingProxyType({"storage_per_gb_month": 0.115, "multi_az_multiplier": 2})

DYNAMODB = MappingProxyType(
    {
        "per_million_reads": 0.25,
        "per_million_writes": 1.25,
        "rcu_per_hour": 0.00013,
        "wcu_per_hour": 0.00065,
        "storage_per_gb_month": 0.25,
    }
)

ELASTICACHE_HOURLY = MappingProxyType(
    {
        "cache.t3.micro": 0.017,
        "cache.t3.small": 0.034,
        "cache.t3.medium": 0.068,
    }
)

WAF = MappingProxyType({"per_web_acl_monthly": 5, "per_rule_monthly": 1, "per_million_requests": 0.6})

SHIELD = MappingProxyType({"standard_monthly": 0, "advanced_monthly": 3000})

EKS = MappingProxyType({"control_plane_per_hour": 0.10})
EKS_NODE_HOURLY = MappingProxyType(
    {
        "t3.medium": 0.0416,
        "t3.large": 0.0832,
        "t3.xlarge": 0.1664,
    }
)

SQS = MappingProxyType({"per_million_standard": 0.40, "per_million_fifo": 0.50})

SNS = MappingProxyType(
    {
        "per_million_publishes": 0.50,
        "per_million_publishes_fifo": 0.30,
        "per_million_deliveries": 0.09,
    }
)

KINESIS = MappingProxyType({"shard_hour_provisioned": 0.015, "per_gb_ingested": 0.08, "per_shard_hour": 0.04})

NAT_GATEWAY = MappingProxyType({"per_hour": 0.045, "per_gb_processed": 0.045})

EC2_INSTANCE_TYPES = tuple(EC2_HOURLY)
RDS_INSTANCE_CLASSES = tuple(RDS_HOURLY)
ELASTICACHE_NODE_TYPES = tuple(ELASTICACHE_HOURLY)
EKS_INSTANCE_TYPES = tuple(EKS_NODE_HOURLY)
