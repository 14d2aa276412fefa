from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class PerformanceResult:
    total_latency: float
    p50_latency: float
    p99_latency: float
    ttfb: float
    cache_hit_rate: float
    requests_reaching_origin: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "total_latency": self.total_latency,
            "p50_latency": self.p50_latency,
            "p99_latency": self.p99_latency,
            "ttfb": self.ttfb,
            "cache_hit_rate": self.cache_hit_rate,
            "requests_reaching_origin": self.requests_reaching_origin,
        }


@dataclass(frozen=True)
class CostLineItem:
    service: str
    amount: float

    def to_dict(self) -> Dict[str, object]:
        return {"service": self.service, "amount": self.amount}


@dataclass(frozen=True)
class CostResult:
    monthly: float
    per_request: float
    breakdown: Tuple[CostLineItem, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "monthly": self.monthly,
            "per_request": self.per_request,
            "breakdown": [item.to_dict() for item in self.breakdown],
        }


@dataclass(frozen=True)
class SecurityResult:
    ddos_protection: bool
    waf_enabled: bool
    encryption_in_transit: bool
    encryption_at_rest: bool
    score: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "ddos_protection": self.ddos_protection,
            "waf_enabled": self.waf_enabled,
            "encryption_in_transit": self.encryption_in_transit,
            "encryption_at_rest": self.encryption_at_rest,
            "score": self.score,
        }


@dataclass(frozen=True)
class AvailabilityResult:
    single_points_of_failure: Tuple[str, ...]
    redundancy_score: int
    estimated_uptime: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "single_points_of_failure": list(self.single_points_of_failure),
            "redundancy_score": self.redundancy_score,
            "estimated_uptime": self.estimated_uptime,
        }


@dataclass(frozen=True)
class ValidationIssue:
    severity: str
    category: str
    message: str
    node_ids: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "severity": self.severity,
            "category": self.category,
            "message": self.message,
            "node_ids": list(self.node_ids),
        }


@dataclass(frozen=True)
class ValidationResult:
    issues: Tuple[ValidationIssue, ...]
    is_valid: bool
    error_count: int
    warning_count: int
    info_count: int

    @classmethod
    def from_issues(cls, issues: List[ValidationIssue]) -> "ValidationResult":
        error_count = sum(1 for issue in issues if issue.severity == "error")
        warning_count = sum(1 for issue in issues if issue.severity == "warning")
        info_count = sum(1 for issue in issues if issue.severity == "info")
        return cls(
            issues=tuple(issues),
            is_valid=error_count == 0,
            error_count=error_count,
            warning_count=warning_count,
            info_count=info_count,
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "issues": [issue.to_dict() for issue in self.issues],
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
        }


@dataclass(frozen=True)
class ServiceLatencyEntry:
    service: str
    service_type: str
    base_ms: float
    p50_ms: float
    p99_ms: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "service": self.service,
            "service_type": self.service_type,
            "base_ms": self.base_ms,
            "p50_ms": self.p50_ms,
            "p99_ms": self.p99_ms,
        }


@dataclass(frozen=True)
class LatencyBreakdownResult:
    per_service: Tuple[ServiceLatencyEntry, ...]
    total_p50: float
    total_p99: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "per_service": [entry.to_dict() for entry in self.per_service],
            "total_p50": self.total_p50,
            "total_p99": self.total_p99,
        }


@dataclass(frozen=True)
class ScalabilityServiceEntry:
    service: str
    current_capacity: float
    max_capacity: int
    is_fargate: bool

    def to_dict(self) -> Dict[str, object]:
        return {
            "service": self.service,
            "current_capacity": self.current_capacity,
            "max_capacity": self.max_capacity,
            "is_fargate": self.is_fargate,
        }


@dataclass(frozen=True)
class ScalabilityResult:
    bottleneck_service: Optional[str]
    max_rps: int
    headroom_percent: int
    auto_scaling_enabled: bool
    per_service: Tuple[ScalabilityServiceEntry, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "bottleneck_service": self.bottleneck_service,
            "max_rps": self.max_rps,
            "headroom_percent": self.headroom_percent,
            "auto_scaling_enabled": self.auto_scaling_enabled,
            "per_service": [entry.to_dict() for entry in self.per_service],
        }


@dataclass(frozen=True)
class CostCategoryEntry:
    service: str
    category: str
    amount: float

    def to_dict(self) -> Dict[str, object]:
        return {"service": self.service, "category": self.category, "amount": self.amount}


@dataclass(frozen=True)
class OperationalCostBreakdown:
    compute: float
    storage: float
    data_transfer: float
    requests: float
    per_service: Tuple[CostCategoryEntry, ...] = ()

    def to_dict(self) -> Dict[str, object]:
        return {
            "compute": self.compute,
            "storage": self.storage,
            "data_transfer": self.data_transfer,
            "requests": self.requests,
            "per_service": [entry.to_dict() for entry in self.per_service],
        }


@dataclass(frozen=True)
class AdvancedResult:
    latency_breakdown: LatencyBreakdownResult
    scalability: ScalabilityResult
    operational_cost: OperationalCostBreakdown

    def to_dict(self) -> Dict[str, object]:
        return {
            "latency_breakdown": self.latency_breakdown.to_dict(),
            "scalability": self.scalability.to_dict(),
            "operational_cost": self.operational_cost.to_dict(),
        }


@dataclass(frozen=True)
class SimulationResult:
    performance: PerformanceResult
    cost: CostResult
    security: SecurityResult
    availability: AvailabilityResult
    validation: ValidationResult
    advanced: Optional[AdvancedResult] = field(default=None)

    def to_dict(self) -> Dict[str, object]:
        payload = {
            "performance": self.performance.to_dict(),
            "cost": self.cost.to_dict(),
            "security": self.security.to_dict(),
            "availability": self.availability.to_dict(),
            "validation": self.validation.to_dict(),
        }
        if self.advanced is not None:
            payload["advanced"] = self.advanced.to_dict()
        return payload
