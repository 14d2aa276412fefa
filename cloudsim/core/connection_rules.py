"""Declarative connection, placement and dependency tables.

Adding a service type means adding rows here; the evaluators in
``connection_validator`` and ``graph.validator`` stay unchanged.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, NamedTuple, Tuple, Union

from .models import ServiceType as T

# A missing entry means "unrestricted"; an empty tuple means "terminal".
ALLOWED_TARGETS: Mapping[T, Tuple[T, ...]] = MappingProxyType(
    {
        T.ROUTE53: (T.CLOUDFRONT, T.ALB, T.NLB, T.API_GATEWAY, T.S3, T.EC2),
        T.CLOUDFRONT: (T.ALB, T.NLB, T.API_GATEWAY, T.S3, T.EC2, T.LAMBDA),
        T.WAF: (T.CLOUDFRONT, T.ALB, T.API_GATEWAY),
        T.SHIELD: (T.CLOUDFRONT, T.ALB, T.NLB, T.ROUTE53),
        T.ALB: (T.ECS, T.EKS, T.EC2, T.LAMBDA),
        T.NLB: (T.ECS, T.EKS, T.EC2),
        T.API_GATEWAY: (T.LAMBDA, T.ECS, T.EC2, T.NLB),
        T.ECS: (T.RDS, T.DYNAMODB, T.ELASTICACHE, T.S3, T.SQS, T.SNS, T.KINESIS),
        T.EKS: (T.RDS, T.DYNAMODB, T.ELASTICACHE, T.S3, T.SQS, T.SNS, T.KINESIS),
        T.EC2: (T.RDS, T.DYNAMODB, T.ELASTICACHE, T.S3, T.SQS, T.SNS, T.KINESIS),
        T.LAMBDA: (T.RDS, T.DYNAMODB, T.ELASTICACHE, T.S3, T.SQS, T.SNS, T.KINESIS),
        T.SQS: (T.LAMBDA, T.ECS, T.EKS),
        T.SNS: (T.LAMBDA, T.SQS, T.KINESIS, T.ECS, T.EKS),
        T.KINESIS: (T.LAMBDA, T.ECS, T.EKS),
        T.S3: (),
        T.RDS: (),
        T.DYNAMODB: (),
        T.ELASTICACHE: (),
        T.NAT_GATEWAY: (T.INTERNET_GATEWAY,),
    }
)

COMPUTE_TYPES = (T.ECS, T.EKS, T.EC2, T.LAMBDA)
MESSAGING_TYPES = (T.SQS, T.SNS, T.KINESIS)
DATABASE_TYPES = (T.RDS, T.DYNAMODB, T.ELASTICACHE)
ENTRY_POINT_TYPES = (T.ROUTE53, T.CLOUDFRONT, T.API_GATEWAY, T.ALB, T.NLB)
BACKEND_TYPES = COMPUTE_TYPES + DATABASE_TYPES + (T.S3,)

ANY = "*"

Pattern = Union[T, Tuple[T, ...], str]


class ProtocolRule(NamedTuple):
    source: Pattern
    target: Pattern
    protocol: str


# Evaluated top to bottom; the first match wins.
PROTOCOL_RULES: Tuple[ProtocolRule, ...] = (
    ProtocolRule(T.ROUTE53, ANY, "dns"),
    ProtocolRule(T.WAF, ANY, "inline"),
    ProtocolRule(T.SHIELD, ANY, "inline"),
    ProtocolRule(T.ALB, (T.ECS, T.EC2, T.LAMBDA, T.EKS), "http"),
    ProtocolRule(T.NLB, (T.ECS, T.EC2, T.EKS), "tcp"),
    ProtocolRule(T.API_GATEWAY, T.LAMBDA, "invoke"),
    ProtocolRule(T.API_GATEWAY, (T.ECS, T.EC2, T.NLB), "https"),
    ProtocolRule(COMPUTE_TYPES, (T.RDS, T.ELASTICACHE), "tcp"),
    ProtocolRule(COMPUTE_TYPES, (T.DYNAMODB, T.S3), "https"),
    ProtocolRule(COMPUTE_TYPES, MESSAGING_TYPES, "https"),
    ProtocolRule(MESSAGING_TYPES, T.LAMBDA, "invoke"),
    ProtocolRule(T.SQS, (T.ECS, T.EKS), "https"),
    ProtocolRule(T.SNS, (T.SQS, T.KINESIS, T.ECS, T.EKS), "https"),
    ProtocolRule(T.KINESIS, (T.ECS, T.EKS), "https"),
    ProtocolRule(T.CLOUDFRONT, ANY, "https"),
    ProtocolRule(T.NAT_GATEWAY, T.INTERNET_GATEWAY, "tcp"),
)

DEFAULT_PROTOCOL = "https"

SUBOPTIMAL_CONNECTIONS: Mapping[Tuple[T, T], str] = MappingProxyType(
    {
        (T.CLOUDFRONT, T.RDS): "CloudFront should not connect directly to RDS. Use a compute layer.",
        (T.ROUTE53, T.RDS): "Route 53 should not connect directly to RDS. Use a load balancer.",
        (T.ALB, T.RDS): "ALB should not connect directly to RDS. Use a compute service like ECS or Lambda.",
        (T.ROUTE53, T.EC2): "Route 53 pointing straight at EC2 skips a load balancer. Consider an ALB or NLB.",
        (T.CLOUDFRONT, T.EC2): "CloudFront to a single EC2 origin has no failover. Consider an ALB in between.",
    }
)

# Service types that should sit inside a private subnet.
PLACEMENT_RULES: Mapping[T, bool] = MappingProxyType(
    {
        T.RDS: True,
        T.ELASTICACHE: True,
        T.DYNAMODB: False,
        T.ECS: True,
        T.EKS: True,
        T.EC2: True,
        T.SQS: False,
        T.SNS: False,
        T.KINESIS: False,
    }
)

# Service types that need another type present somewhere in the diagram.
DEPENDENCY_RULES: Mapping[T, Tuple[T, ...]] = MappingProxyType(
    {
        T.NAT_GATEWAY: (T.INTERNET_GATEWAY,),
        T.SUBNET: (T.VPC,),
        T.SECURITY_GROUP: (T.VPC,),
    }
)
