from __future__ import annotations

import pytest

from cloudsim.core.models import Edge, ServiceNode, TrafficProfile


def build_node(node_id, service_type, config=None, **extra):
    data = {"id": node_id, "service_type": service_type, "config": config or {}}
    data.update(extra)
    return ServiceNode.from_dict(data)


def build_edge(source, target, **extra):
    data = {"source": source, "target": target}
    data.update(extra)
    return Edge.from_dict(data)


@pytest.fixture
def make_node():
    return build_node


@pytest.fixture
def make_edge():
    return build_edge


@pytest.fixture
def traffic():
    return TrafficProfile.from_dict(
        {"requests_per_second": 100, "average_payload_size": 10, "read_write_ratio": 0.8}
    )
