from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from cloudsim.core.catalog import SERVICE_DEFINITIONS
from cloudsim.core.connection_validator import can_connect, protocol_for
from cloudsim.core.models import ServiceType

logger = logging.getLogger(__name__)


class ConnectionService:
    def check_connection(self, source: Optional[str], target: Optional[str]) -> Tuple[Dict[str, object], int]:
        if not source or not target:
            return {"error": "source and target query parameters are required."}, 400
        try:
            source_type = ServiceType.parse(source)
            target_type = ServiceType.parse(target)
        except ValueError as exc:
            logger.warning("Rejected connection check %s -> %s: %s", source, target, exc)
            return {"error": str(exc)}, 400

        check = can_connect(source_type, target_type)
        payload = check.to_dict()
        payload["protocol"] = protocol_for(source_type, target_type) if check.allowed else None
        return payload, 200

    def list_services(self) -> List[Dict[str, object]]:
        return [definition.to_dict() for definition in SERVICE_DEFINITIONS.values()]
