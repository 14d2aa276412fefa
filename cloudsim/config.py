from __future__ import annotations

import os


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    LOG_LEVEL = os.getenv("CLOUDSIM_LOG_LEVEL", "INFO").upper()
    DEFAULT_ADVANCED_MODE = _env_flag("CLOUDSIM_ADVANCED_MODE")
    DEFAULT_TRAFFIC_PROFILE = {
        "requests_per_second": 100,
        "average_payload_size": 10,
        "read_write_ratio": 0.8,
        "geo_distribution": [{"region": "us-east-1", "percentage": 100}],
    }
