from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import ClassVar, Dict, List, Mapping, Optional, Sequence, Tuple, Type


class ServiceType(str, enum.Enum):
    ROUTE53 = "route53"
    CLOUDFRONT = "cloudfront"
    ALB = "alb"
    NLB = "nlb"
    API_GATEWAY = "api-gateway"
    ECS = "ecs"
    EKS = "eks"
    EC2 = "ec2"
    LAMBDA = "lambda"
    S3 = "s3"
    RDS = "rds"
    ELASTICACHE = "elasticache"
    WAF = "waf"
    SHIELD = "shield"
    DYNAMODB = "dynamodb"
    SQS = "sqs"
    SNS = "sns"
    KINESIS = "kinesis"
    VPC = "vpc"
    SUBNET = "subnet"
    SECURITY_GROUP = "security-group"
    NAT_GATEWAY = "nat-gateway"
    INTERNET_GATEWAY = "internet-gateway"

    @classmethod
    def parse(cls, value: object) -> "ServiceType":
        if isinstance(value, cls):
            return value
        raw = str(value or "").strip().lower()
        try:
            return cls(raw)
        except ValueError:
            raise ValueError(f"Unknown service type: {value!r}.") from None


class ServiceRole(str, enum.Enum):
    FLOW = "flow"
    INFRASTRUCTURE = "infrastructure"


INFRASTRUCTURE_SERVICES = frozenset(
    {
        ServiceType.VPC,
        ServiceType.SUBNET,
        ServiceType.SECURITY_GROUP,
        ServiceType.NAT_GATEWAY,
        ServiceType.INTERNET_GATEWAY,
    }
)

SECURE_PROTOCOLS = frozenset({"http", "https", "tcp", "udp", "dns", "invoke", "inline"})


def default_role(service_type: ServiceType) -> ServiceRole:
    if service_type in INFRASTRUCTURE_SERVICES:
        return ServiceRole.INFRASTRUCTURE
    return ServiceRole.FLOW


TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
    raise ValueError(f"Expected a boolean, got {value!r}.")


def _coerce(default: object, value: object) -> object:
    if isinstance(default, SpecificConfig):
        if isinstance(value, Mapping):
            return type(default).from_dict(value)
        return default
    if isinstance(default, bool):
        return parse_bool(value)
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    if isinstance(default, str):
        return str(value)
    return value


# --- Service-specific configuration -------------------------------------


@dataclass(frozen=True)
class SpecificConfig:
    """Base for the per-service configuration variants.

    Every field carries a default, so a partial mapping (or none at all)
    always yields a complete record. Unknown keys are ignored.
    """

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, object]] = None):
        data = data or {}
        values = {}
        for item in fields(cls):
            if item.name not in data or data[item.name] is None:
                continue
            default = item.default_factory() if callable(item.default_factory) else item.default
            try:
                values[item.name] = _coerce(default, data[item.name])
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Invalid value for {item.name}: {data[item.name]!r}.") from exc
        return cls(**values)

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            payload[item.name] = value.to_dict() if isinstance(value, SpecificConfig) else value
        return payload


@dataclass(frozen=True)
class AutoScalingConfig(SpecificConfig):
    enabled: bool = True
    min: int = 2
    max: int = 10
    target_cpu: int = 70


@dataclass(frozen=True)
class Route53Config(SpecificConfig):
    routing_policy: str = "simple"
    health_check_enabled: bool = True


@dataclass(frozen=True)
class CloudFrontConfig(SpecificConfig):
    edge_locations: int = 200
    behaviors: int = 1
    origin_shield: bool = False
    compression_enabled: bool = True


@dataclass(frozen=True)
class ALBConfig(SpecificConfig):
    target_type: str = "instance"
    target_count: int = 2
    health_check_interval: int = 30
    sticky_session: bool = False


@dataclass(frozen=True)
class NLBConfig(SpecificConfig):
    target_type: str = "instance"
    target_count: int = 2
    cross_zone: bool = True


@dataclass(frozen=True)
class APIGatewayConfig(SpecificConfig):
    api_type: str = "rest"
    throttling_rate: int = 10000
    throttling_burst: int = 5000
    caching_enabled: bool = False


@dataclass(frozen=True)
class ECSConfig(SpecificConfig):
    launch_type: str = "fargate"
    task_count: int = 2
    cpu: float = 0.25
    memory: float = 0.5
    auto_scaling: AutoScalingConfig = field(default_factory=AutoScalingConfig)


@dataclass(frozen=True)
class EKSConfig(SpecificConfig):
    node_group_type: str = "managed"
    node_count: int = 2
    instance_type: str = "t3.medium"
    auto_scaling: AutoScalingConfig = field(default_factory=AutoScalingConfig)


@dataclass(frozen=True)
class EC2Config(SpecificConfig):
    instance_type: str = "t3.micro"
    instance_count: int = 1
    auto_scaling: bool = False


@dataclass(frozen=True)
class LambdaConfig(SpecificConfig):
    memory_mb: int = 128
    timeout_seconds: int = 30
    concurrency: int = 100
    runtime: str = "nodejs20.x"
    avg_duration_ms: float = 200.0


@dataclass(frozen=True)
class S3Config(SpecificConfig):
    storage_class: str = "standard"
    versioning_enabled: bool = False
    storage_gb: float = 0.0


@dataclass(frozen=True)
class RDSConfig(SpecificConfig):
    instance_class: str = "db.t3.micro"
    multi_az: bool = False
    read_replicas: int = 0
    storage_gb: float = 20.0


@dataclass(frozen=True)
class DynamoDBConfig(SpecificConfig):
    capacity_mode: str = "on-demand"
    read_capacity_units: int = 5
    write_capacity_units: int = 5
    global_tables: bool = False
    storage_gb: float = 50.0


@dataclass(frozen=True)
class ElastiCacheConfig(SpecificConfig):
    engine: str = "redis"
    node_type: str = "cache.t3.micro"
    num_nodes: int = 1
    cluster_mode: bool = False


@dataclass(frozen=True)
class WAFConfig(SpecificConfig):
    rule_count: int = 10
    rate_based_rules: bool = True
    managed_rule_groups: int = 2


@dataclass(frozen=True)
class ShieldConfig(SpecificConfig):
    tier: str = "standard"


@dataclass(frozen=True)
class SQSConfig(SpecificConfig):
    queue_type: str = "standard"
    visibility_timeout: int = 30
    message_retention: int = 345600
    dlq_enabled: bool = False


@dataclass(frozen=True)
class SNSConfig(SpecificConfig):
    topic_type: str = "standard"
    subscription_count: int = 1


@dataclass(frozen=True)
class KinesisConfig(SpecificConfig):
    stream_mode: str = "on-demand"
    shard_count: int = 1
    retention_hours: int = 24


@dataclass(frozen=True)
class VPCConfig(SpecificConfig):
    cidr_block: str = "10.0.0.0/16"
    enable_dns_support: bool = True
    enable_dns_hostnames: bool = True


@dataclass(frozen=True)
class SubnetConfig(SpecificConfig):
    cidr_block: str = "10.0.1.0/24"
    availability_zone: str = "us-east-1a"
    subnet_type: str = "public"


@dataclass(frozen=True)
class SecurityGroupConfig(SpecificConfig):
    ingress_rules: int = 3
    egress_rules: int = 1


@dataclass(frozen=True)
class NATGatewayConfig(SpecificConfig):
    connectivity_type: str = "public"


@dataclass(frozen=True)
class InternetGatewayConfig(SpecificConfig):
    pass


SPECIFIC_CONFIG_TYPES: Dict[ServiceType, Type[SpecificConfig]] = {
    ServiceType.ROUTE53: Route53Config,
    ServiceType.CLOUDFRONT: CloudFrontConfig,
    ServiceType.ALB: ALBConfig,
    ServiceType.NLB: NLBConfig,
    ServiceType.API_GATEWAY: APIGatewayConfig,
    ServiceType.ECS: ECSConfig,
    ServiceType.EKS: EKSConfig,
    ServiceType.EC2: EC2Config,
    ServiceType.LAMBDA: LambdaConfig,
    ServiceType.S3: S3Config,
    ServiceType.RDS: RDSConfig,
    ServiceType.DYNAMODB: DynamoDBConfig,
    ServiceType.ELASTICACHE: ElastiCacheConfig,
    ServiceType.WAF: WAFConfig,
    ServiceType.SHIELD: ShieldConfig,
    ServiceType.SQS: SQSConfig,
    ServiceType.SNS: SNSConfig,
    ServiceType.KINESIS: KinesisConfig,
    ServiceType.VPC: VPCConfig,
    ServiceType.SUBNET: SubnetConfig,
    ServiceType.SECURITY_GROUP: SecurityGroupConfig,
    ServiceType.NAT_GATEWAY: NATGatewayConfig,
    ServiceType.INTERNET_GATEWAY: InternetGatewayConfig,
}


# --- Shared configuration records -----------------------------------------


@dataclass(frozen=True)
class CacheConfig:
    enabled: bool = False
    ttl: float = 0.0
    hit_rate: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "CacheConfig":
        hit_rate = float(data.get("hit_rate", 0) or 0)
        if not 0 <= hit_rate <= 1:
            raise ValueError("cache.hit_rate must be between 0 and 1.")
        return cls(
            enabled=parse_bool(data.get("enabled", False)),
            ttl=float(data.get("ttl", 0) or 0),
            hit_rate=hit_rate,
        )

    @property
    def active(self) -> bool:
        return self.enabled and self.hit_rate > 0

    def to_dict(self) -> Dict[str, object]:
        return {"enabled": self.enabled, "ttl": self.ttl, "hit_rate": self.hit_rate}


@dataclass(frozen=True)
class LatencyConfig:
    base: float = 0.0
    per_request: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "LatencyConfig":
        per_request = data.get("per_request")
        return cls(
            base=float(data.get("base", 0) or 0),
            per_request=float(per_request) if per_request is not None else None,
        )

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"base": self.base}
        if self.per_request is not None:
            payload["per_request"] = self.per_request
        return payload


@dataclass(frozen=True)
class CostConfig:
    per_request: Optional[float] = None
    per_gb: Optional[float] = None
    monthly: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "CostConfig":
        values = {}
        for key in ("per_request", "per_gb", "monthly"):
            value = data.get(key)
            if value is None:
                continue
            if float(value) < 0:
                raise ValueError(f"cost.{key} cannot be negative.")
            values[key] = float(value)
        return cls(**values)

    def to_dict(self) -> Dict[str, object]:
        return {
            key: value
            for key, value in (
                ("per_request", self.per_request),
                ("per_gb", self.per_gb),
                ("monthly", self.monthly),
            )
            if value is not None
        }


@dataclass(frozen=True)
class SecurityConfig:
    waf: bool = False
    ddos_protection: bool = False
    encryption: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "SecurityConfig":
        return cls(
            waf=parse_bool(data.get("waf", False)),
            ddos_protection=parse_bool(data.get("ddos_protection", False)),
            encryption=parse_bool(data.get("encryption", False)),
        )

    def to_dict(self) -> Dict[str, object]:
        return {"waf": self.waf, "ddos_protection": self.ddos_protection, "encryption": self.encryption}


@dataclass(frozen=True)
class ServiceConfig:
    name: str
    latency: LatencyConfig
    cost: CostConfig
    specific: SpecificConfig
    region: Optional[str] = None
    cache: Optional[CacheConfig] = None
    security: Optional[SecurityConfig] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object], service_type: ServiceType) -> "ServiceConfig":
        name = str(data.get("name", "")).strip()
        if not name:
            raise ValueError("Service config must include a name.")

        latency = data.get("latency") or {}
        cost = data.get("cost") or {}
        cache = data.get("cache")
        security = data.get("security")
        specific = data.get("specific") or {}
        for key, value in (("latency", latency), ("cost", cost), ("specific", specific)):
            if not isinstance(value, Mapping):
                raise ValueError(f"Service config {key} must be an object.")

        region = data.get("region")
        return cls(
            name=name,
            region=str(region) if region else None,
            latency=LatencyConfig.from_dict(latency),
            cost=CostConfig.from_dict(cost),
            cache=CacheConfig.from_dict(cache) if isinstance(cache, Mapping) else None,
            security=SecurityConfig.from_dict(security) if isinstance(security, Mapping) else None,
            specific=SPECIFIC_CONFIG_TYPES[service_type].from_dict(specific),
        )

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "name": self.name,
            "latency": self.latency.to_dict(),
            "cost": self.cost.to_dict(),
            "specific": self.specific.to_dict(),
        }
        if self.region:
            payload["region"] = self.region
        if self.cache is not None:
            payload["cache"] = self.cache.to_dict()
        if self.security is not None:
            payload["security"] = self.security.to_dict()
        return payload


# --- Graph inputs ---------------------------------------------------------

REQUIRED_CONFIG_KEYS = frozenset({"name", "latency", "cost", "specific"})


@dataclass(frozen=True)
class ServiceNode:
    id: str
    service_type: ServiceType
    config: ServiceConfig
    role: ServiceRole = ServiceRole.FLOW
    parent_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "ServiceNode":
        from .catalog import default_config

        node_id = str(data.get("id", "") or "").strip()
        if not node_id:
            raise ValueError("Each node must include a non-empty id.")
        service_type = ServiceType.parse(data.get("service_type"))

        raw_config = data.get("config") or {}
        if not isinstance(raw_config, Mapping):
            raise ValueError(f"Node {node_id} config must be an object.")
        # Cache and security are never inherited from the catalog.
        defaults = default_config(service_type)
        merged = {key: value for key, value in defaults.items() if key in REQUIRED_CONFIG_KEYS}
        merged.update(raw_config)
        config = ServiceConfig.from_dict(merged, service_type)

        role_value = data.get("role")
        role = ServiceRole(role_value) if role_value else default_role(service_type)
        if role == ServiceRole.FLOW and config.latency.base < 0:
            raise ValueError(f"Node {node_id} latency.base must be >= 0.")

        parent_id = data.get("parent_id")
        return cls(
            id=node_id,
            service_type=service_type,
            config=config,
            role=role,
            parent_id=str(parent_id) if parent_id else None,
        )

    @property
    def is_flow(self) -> bool:
        return self.role == ServiceRole.FLOW

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "id": self.id,
            "service_type": self.service_type.value,
            "role": self.role.value,
            "config": self.config.to_dict(),
        }
        if self.parent_id:
            payload["parent_id"] = self.parent_id
        return payload


def flow_nodes(nodes: Sequence[ServiceNode]) -> List[ServiceNode]:
    return [node for node in nodes if node.is_flow]


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str
    protocol: Optional[str] = None
    bandwidth: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "Edge":
        source = str(data.get("source", "") or "").strip()
        target = str(data.get("target", "") or "").strip()
        if not source or not target:
            raise ValueError("Edges must include source and target ids.")
        edge_id = str(data.get("id", "") or "").strip() or f"{source}->{target}"
        protocol = data.get("protocol")
        if protocol is not None:
            protocol = str(protocol).strip().lower() or None
        bandwidth = data.get("bandwidth")
        return cls(
            id=edge_id,
            source=source,
            target=target,
            protocol=protocol,
            bandwidth=float(bandwidth) if bandwidth is not None else None,
        )

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"id": self.id, "source": self.source, "target": self.target}
        if self.protocol:
            payload["protocol"] = self.protocol
        if self.bandwidth is not None:
            payload["bandwidth"] = self.bandwidth
        return payload


@dataclass(frozen=True)
class GeoShare:
    region: str
    percentage: float

    def to_dict(self) -> Dict[str, object]:
        return {"region": self.region, "percentage": self.percentage}


@dataclass(frozen=True)
class TrafficProfile:
    MAX_REQUESTS_PER_SECOND: ClassVar[float] = 1_000_000
    MAX_PAYLOAD_KB: ClassVar[float] = 1_000_000

    requests_per_second: float
    average_payload_size: float
    read_write_ratio: float
    geo_distribution: Tuple[GeoShare, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "TrafficProfile":
        try:
            rps = float(data.get("requests_per_second", 0) or 0)
            payload_kb = float(data.get("average_payload_size", 0) or 0)
            ratio = float(data.get("read_write_ratio", 0) or 0)
        except (TypeError, ValueError) as exc:
            raise ValueError("Traffic profile values must be numeric.") from exc

        if not 0 <= rps <= cls.MAX_REQUESTS_PER_SECOND:
            raise ValueError("requests_per_second must be between 0 and 1,000,000.")
        if not 0 <= payload_kb <= cls.MAX_PAYLOAD_KB:
            raise ValueError("average_payload_size must be between 0 and 1,000,000.")
        if not 0 <= ratio <= 1:
            raise ValueError("read_write_ratio must be between 0 and 1.")

        geo_distribution = data.get("geo_distribution") or []
        if not isinstance(geo_distribution, list):
            raise ValueError("geo_distribution must be a list.")

        shares: List[GeoShare] = []
        for entry in geo_distribution:
            if not isinstance(entry, Mapping):
                raise ValueError("geo_distribution entries must be objects.")
            region = str(entry.get("region", "") or "").strip()
            try:
                percentage = float(entry.get("percentage", 0) or 0)
            except (TypeError, ValueError) as exc:
                raise ValueError("geo_distribution percentage must be numeric.") from exc
            if not region:
                raise ValueError("geo_distribution entries must include a region.")
            if not 0 <= percentage <= 100:
                raise ValueError("geo_distribution percentage must be between 0 and 100.")
            shares.append(GeoShare(region=region, percentage=percentage))

        return cls(
            requests_per_second=rps,
            average_payload_size=payload_kb,
            read_write_ratio=ratio,
            geo_distribution=tuple(shares),
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "requests_per_second": self.requests_per_second,
            "average_payload_size": self.average_payload_size,
            "read_write_ratio": self.read_write_ratio,
            "geo_distribution": [share.to_dict() for share in self.geo_distribution],
        }
