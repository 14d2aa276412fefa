from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from . import pricing
from .models import ServiceRole, ServiceType, default_role


@dataclass(frozen=True)
class ServiceDefinition:
    service_type: ServiceType
    label: str
    category: str
    description: str
    default_config: Mapping[str, object]

    @property
    def role(self) -> ServiceRole:
        return default_role(self.service_type)

    def to_dict(self) -> Dict[str, object]:
        return {
            "service_type": self.service_type.value,
            "label": self.label,
            "category": self.category,
            "role": self.role.value,
            "description": self.description,
            "default_config": _thaw(self.default_config),
            "size_options": list(SIZE_OPTIONS.get(self.service_type, ())),
        }


def _freeze(value):
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    return value


def _thaw(value):
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    return value


def _define(service_type, label, category, description, **config) -> ServiceDefinition:
    config.setdefault("name", label)
    return ServiceDefinition(
        service_type=service_type,
        label=label,
        category=category,
        description=description,
        default_config=_freeze(config),
    )


_DEFINITIONS = (
    _define(
        ServiceType.ROUTE53, "Route 53", "networking", "DNS and domain management",
        latency={"base": 3},
        cost={"per_request": 0.0000005, "monthly": 0.5},
        specific={"routing_policy": "simple", "health_check_enabled": True},
    ),
    _define(
        ServiceType.CLOUDFRONT, "CloudFront", "networking", "CDN and edge cache",
        cache={"enabled": True, "ttl": 86400, "hit_rate": 0.85},
        latency={"base": 20},
        cost={"per_request": 0.00000075, "per_gb": 0.085},
        security={"ddos_protection": True},
        specific={"edge_locations": 200, "behaviors": 1, "origin_shield": False, "compression_enabled": True},
    ),
    _define(
        ServiceType.ALB, "ALB", "networking", "Application Load Balancer",
        latency={"base": 5},
        cost={"monthly": 16.2},
        specific={"target_type": "instance", "target_count": 2, "health_check_interval": 30, "sticky_session": False},
    ),
    _define(
        ServiceType.NLB, "NLB", "networking", "Network Load Balancer",
        latency={"base": 3},
        cost={"monthly": 16.2},
        specific={"target_type": "instance", "target_count": 2, "cross_zone": True},
    ),
    _define(
        ServiceType.API_GATEWAY, "API Gateway", "networking", "Managed API front door",
        latency={"base": 30},
        cost={"per_request": 0.0000035},
        specific={"api_type": "rest", "throttling_rate": 10000, "throttling_burst": 5000, "caching_enabled": False},
    ),
    _define(
        ServiceType.ECS, "ECS", "compute", "Container orchestration",
        latency={"base": 50, "per_request": 0.5},
        cost={"monthly": 0},
        specific={
            "launch_type": "fargate",
            "task_count": 2,
            "cpu": 0.25,
            "memory": 0.5,
            "auto_scaling": {"enabled": True, "min": 2, "max": 10, "target_cpu": 70},
        },
    ),
    _define(
        ServiceType.EKS, "EKS", "compute", "Kubernetes orchestration",
        latency={"base": 50, "per_request": 0.5},
        cost={"monthly": 73},
        specific={
            "node_group_type": "managed",
            "node_count": 2,
            "instance_type": "t3.medium",
            "auto_scaling": {"enabled": True, "min": 2, "max": 10, "target_cpu": 70},
        },
    ),
    _define(
        ServiceType.EC2, "EC2", "compute", "Virtual servers",
        latency={"base": 50, "per_request": 0.5},
        cost={"monthly": 8.5},
        specific={"instance_type": "t3.micro", "instance_count": 1, "auto_scaling": False},
    ),
    _define(
        ServiceType.LAMBDA, "Lambda", "compute", "Serverless functions",
        latency={"base": 100},
        cost={"per_request": 0.0000002},
        specific={"memory_mb": 128, "timeout_seconds": 30, "concurrency": 100, "runtime": "nodejs20.x"},
    ),
    _define(
        ServiceType.S3, "S3", "storage", "Object storage",
        latency={"base": 15},
        cost={"per_request": 0.0000004, "per_gb": 0.023},
        security={"encryption": True},
        specific={"storage_class": "standard", "versioning_enabled": False},
    ),
    _define(
        ServiceType.RDS, "RDS", "database", "Relational database",
        latency={"base": 3, "per_request": 0.1},
        cost={"monthly": 25},
        security={"encryption": True},
        specific={"instance_class": "db.t3.micro", "multi_az": False, "read_replicas": 0, "storage_gb": 20},
    ),
    _define(
        ServiceType.DYNAMODB, "DynamoDB", "database", "NoSQL database",
        latency={"base": 5, "per_request": 0.05},
        cost={"per_request": 0.00000125, "monthly": 0},
        security={"encryption": True},
        specific={"capacity_mode": "on-demand", "read_capacity_units": 5, "write_capacity_units": 5, "global_tables": False},
    ),
    _define(
        ServiceType.ELASTICACHE, "ElastiCache", "database", "In-memory cache",
        cache={"enabled": True, "ttl": 300, "hit_rate": 0.9},
        latency={"base": 1},
        cost={"monthly": 12.5},
        specific={"engine": "redis", "node_type": "cache.t3.micro", "num_nodes": 1, "cluster_mode": False},
    ),
    _define(
        ServiceType.SQS, "SQS", "messaging", "Message queue",
        latency={"base": 10},
        cost={"per_request": 0.0000004},
        specific={"queue_type": "standard", "visibility_timeout": 30, "message_retention": 345600, "dlq_enabled": False},
    ),
    _define(
        ServiceType.SNS, "SNS", "messaging", "Pub/sub notifications",
        latency={"base": 5},
        cost={"per_request": 0.0000005},
        specific={"topic_type": "standard", "subscription_count": 1},
    ),
    _define(
        ServiceType.KINESIS, "Kinesis", "messaging", "Data streaming",
        latency={"base": 8},
        cost={"monthly": 0},
        specific={"stream_mode": "on-demand", "shard_count": 1, "retention_hours": 24},
    ),
    _define(
        ServiceType.WAF, "WAF", "security", "Web Application Firewall",
        latency={"base": 2},
        cost={"monthly": 5, "per_request": 0.0000006},
        security={"waf": True},
        specific={"rule_count": 10, "rate_based_rules": True, "managed_rule_groups": 2},
    ),
    _define(
        ServiceType.SHIELD, "Shield", "security", "DDoS protection",
        latency={"base": 0},
        cost={"monthly": 0},
        security={"ddos_protection": True},
        specific={"tier": "standard"},
    ),
    _define(
        ServiceType.VPC, "VPC", "infrastructure", "Virtual private cloud",
        latency={"base": 0},
        cost={"monthly": 0},
        specific={"cidr_block": "10.0.0.0/16", "enable_dns_support": True, "enable_dns_hostnames": True},
    ),
    _define(
        ServiceType.SUBNET, "Subnet", "infrastructure", "Subnet",
        latency={"base": 0},
        cost={"monthly": 0},
        specific={"cidr_block": "10.0.1.0/24", "availability_zone": "us-east-1a", "subnet_type": "public"},
    ),
    _define(
        ServiceType.SECURITY_GROUP, "Security Group", "infrastructure", "Security group",
        latency={"base": 0},
        cost={"monthly": 0},
        specific={"ingress_rules": 3, "egress_rules": 1},
    ),
    _define(
        ServiceType.NAT_GATEWAY, "NAT Gateway", "infrastructure", "NAT gateway",
        latency={"base": 1},
        cost={"monthly": 32.4, "per_gb": 0.045},
        specific={"connectivity_type": "public"},
    ),
    _define(
        ServiceType.INTERNET_GATEWAY, "Internet Gateway", "infrastructure", "Internet gateway",
        latency={"base": 0},
        cost={"monthly": 0},
    ),
)

SERVICE_DEFINITIONS: Mapping[ServiceType, ServiceDefinition] = MappingProxyType(
    {definition.service_type: definition for definition in _DEFINITIONS}
)

SIZE_OPTIONS: Mapping[ServiceType, Tuple[str, ...]] = MappingProxyType(
    {
        ServiceType.EC2: pricing.EC2_INSTANCE_TYPES,
        ServiceType.EKS: pricing.EKS_INSTANCE_TYPES,
        ServiceType.RDS: pricing.RDS_INSTANCE_CLASSES,
        ServiceType.ELASTICACHE: pricing.ELASTICACHE_NODE_TYPES,
    }
)

# Observed {min, base, max} milliseconds per service type.
LATENCY_TABLE: Mapping[ServiceType, Tuple[float, float, float]] = MappingProxyType(
    {
        ServiceType.ROUTE53: (1, 3, 10),
        ServiceType.CLOUDFRONT: (5, 20, 80),
        ServiceType.ALB: (2, 5, 20),
        ServiceType.NLB: (1, 3, 10),
        ServiceType.API_GATEWAY: (10, 30, 100),
        ServiceType.ECS: (20, 50, 200),
        ServiceType.EKS: (20, 50, 200),
        ServiceType.EC2: (20, 50, 200),
        ServiceType.LAMBDA: (20, 100, 1000),
        ServiceType.S3: (5, 15, 100),
        ServiceType.RDS: (1, 3, 20),
        ServiceType.DYNAMODB: (2, 5, 20),
        ServiceType.ELASTICACHE: (0.5, 1, 5),
        ServiceType.SQS: (5, 10, 50),
        ServiceType.SNS: (2, 5, 30),
        ServiceType.KINESIS: (3, 8, 70),
        ServiceType.WAF: (1, 2, 5),
        ServiceType.SHIELD: (0, 0, 1),
    }
)

NESTING_RULES: Mapping[ServiceType, frozenset] = MappingProxyType(
    {
        ServiceType.VPC: frozenset({ServiceType.SUBNET, ServiceType.SECURITY_GROUP, ServiceType.NAT_GATEWAY}),
        ServiceType.SUBNET: frozenset(
            {
                ServiceType.ALB,
                ServiceType.NLB,
                ServiceType.ECS,
                ServiceType.EKS,
                ServiceType.EC2,
                ServiceType.LAMBDA,
                ServiceType.RDS,
                ServiceType.ELASTICACHE,
                ServiceType.DYNAMODB,
            }
        ),
    }
)


def default_config(service_type: ServiceType) -> Dict[str, object]:
    return _thaw(SERVICE_DEFINITIONS[service_type].default_config)


def service_label(service_type: object) -> str:
    definition = SERVICE_DEFINITIONS.get(service_type)
    if definition is None:
        return str(getattr(service_type, "value", service_type))
    return definition.label


def is_infrastructure_service(service_type: ServiceType) -> bool:
    return default_role(service_type) == ServiceRole.INFRASTRUCTURE


def can_nest_in(child_type: ServiceType, parent_type: ServiceType) -> bool:
    allowed = NESTING_RULES.get(parent_type)
    return allowed is not None and child_type in allowed
