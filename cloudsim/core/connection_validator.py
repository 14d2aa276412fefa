from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .catalog import is_infrastructure_service, service_label
from .connection_rules import (
    ALLOWED_TARGETS,
    ANY,
    DEFAULT_PROTOCOL,
    PROTOCOL_RULES,
    SUBOPTIMAL_CONNECTIONS,
    Pattern,
)
from .models import ServiceType

CONTAINMENT_MESSAGE = (
    "Infrastructure services are placed by containment, not connected with edges."
)


@dataclass(frozen=True)
class ConnectionCheck:
    allowed: bool
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {"allowed": self.allowed, "warning": self.warning}


def _format_targets(targets: Iterable[ServiceType]) -> str:
    return ", ".join(service_label(target) for target in targets)


def is_terminal_service(service_type: ServiceType) -> bool:
    targets = ALLOWED_TARGETS.get(service_type)
    return targets is not None and len(targets) == 0


def is_reverse_valid(source_type: ServiceType, target_type: ServiceType) -> bool:
    reverse_targets = ALLOWED_TARGETS.get(target_type)
    if reverse_targets is None:
        return True
    return source_type in reverse_targets


def _rejection_message(source_type: ServiceType, target_type: ServiceType) -> str:
    source = service_label(source_type)
    target = service_label(target_type)

    if is_terminal_service(source_type):
        return f"{source} is a terminal service and cannot have outgoing connections."

    if is_reverse_valid(source_type, target_type):
        message = (
            f"{source} -> {target} is not allowed "
            f"(the reverse direction {target} -> {source} is allowed)."
        )
    else:
        message = f"{source} -> {target} is not allowed."

    allowed = ALLOWED_TARGETS.get(source_type)
    if allowed:
        message += f" {source} can connect to: {_format_targets(allowed)}"
    return message


def can_connect(source_type: ServiceType, target_type: ServiceType) -> ConnectionCheck:
    """Decide whether an edge from ``source_type`` to ``target_type`` is legal.

    Legal but discouraged pairs come back allowed with an advisory warning.
    """
    if is_infrastructure_service(source_type) or is_infrastructure_service(target_type):
        if source_type == ServiceType.NAT_GATEWAY and target_type == ServiceType.INTERNET_GATEWAY:
            return ConnectionCheck(allowed=True)
        return ConnectionCheck(allowed=False, warning=CONTAINMENT_MESSAGE)

    allowed_targets = ALLOWED_TARGETS.get(source_type)
    if allowed_targets is None:
        return ConnectionCheck(allowed=True)

    if target_type not in allowed_targets:
        return ConnectionCheck(allowed=False, warning=_rejection_message(source_type, target_type))

    return ConnectionCheck(allowed=True, warning=SUBOPTIMAL_CONNECTIONS.get((source_type, target_type)))


def _matches(service_type: ServiceType, pattern: Pattern) -> bool:
    if pattern == ANY:
        return True
    if isinstance(pattern, tuple):
        return service_type in pattern
    return service_type == pattern


def protocol_for(source_type: ServiceType, target_type: ServiceType) -> str:
    for rule in PROTOCOL_RULES:
        if _matches(source_type, rule.source) and _matches(target_type, rule.target):
            return rule.protocol
    return DEFAULT_PROTOCOL
