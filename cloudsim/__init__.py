from .core.connection_validator import can_connect, protocol_for
from .core.graph.ordering import order
from .core.graph.validator import validate
from .core.simulation_engine import simulate

__all__ = [
    "can_connect",
    "order",
    "protocol_for",
    "simulate",
    "validate",
]
