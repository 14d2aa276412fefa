import pytest

from cloudsim.app import create_app

GRAPH = {
    "nodes": [
        {"id": "dns", "service_type": "route53"},
        {"id": "lb", "service_type": "alb"},
        {"id": "app", "service_type": "ecs", "parent_id": "subnet-1"},
        {"id": "db", "service_type": "rds", "parent_id": "subnet-1"},
    ],
    "edges": [
        {"source": "dns", "target": "lb"},
        {"source": "lb", "target": "app"},
        {"source": "app", "target": "db"},
    ],
}


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def test_simulate_route(client):
    payload = dict(GRAPH, traffic_profile={"requests_per_second": 50, "average_payload_size": 5, "read_write_ratio": 0.9})

    response = client.post("/api/simulate", json=payload)

    assert response.status_code == 200
    body = response.get_json()
    assert set(body) == {"performance", "cost", "security", "availability", "validation"}
    assert body["performance"]["total_latency"] == pytest.approx(61)
    assert [item["service"] for item in body["cost"]["breakdown"]] == ["Route 53", "ALB", "ECS", "RDS"]
    assert body["validation"]["is_valid"] is True


def test_simulate_route_uses_default_traffic(client):
    response = client.post("/api/simulate", json=GRAPH)

    assert response.status_code == 200
    assert response.get_json()["performance"]["requests_reaching_origin"] == pytest.approx(100)


def test_simulate_route_advanced_mode(client):
    payload = dict(GRAPH, options={"advanced_mode": True})

    body = client.post("/api/simulate", json=payload).get_json()

    assert body["advanced"]["scalability"]["bottleneck_service"] == "ECS"
    assert len(body["advanced"]["latency_breakdown"]["per_service"]) == 4


def test_simulate_route_rejects_bad_payload(client):
    response = client.post("/api/simulate", json={"nodes": [{"id": "x", "service_type": "mainframe"}]})

    assert response.status_code == 400
    assert "Unknown service type" in response.get_json()["error"]


def test_simulate_route_rejects_bad_traffic(client):
    payload = dict(GRAPH, traffic_profile={"requests_per_second": 100, "read_write_ratio": 3})

    response = client.post("/api/simulate", json=payload)

    assert response.status_code == 400


def test_validate_route(client):
    payload = {"nodes": GRAPH["nodes"], "edges": [{"source": "db", "target": "app"}]}

    response = client.post("/api/validate", json=payload)

    body = response.get_json()
    assert response.status_code == 200
    assert body["is_valid"] is False
    assert body["error_count"] == 1


def test_validate_route_rejects_duplicate_ids(client):
    payload = {"nodes": [{"id": "a", "service_type": "s3"}, {"id": "a", "service_type": "sqs"}]}

    response = client.post("/api/validate", json=payload)

    assert response.status_code == 400
    assert response.get_json()["error"] == "Duplicate node id: a."


def test_order_route(client):
    payload = {"nodes": list(reversed(GRAPH["nodes"])), "edges": GRAPH["edges"]}

    response = client.post("/api/order", json=payload)

    assert response.status_code == 200
    assert response.get_json() == {"ordered_node_ids": ["dns", "lb", "app", "db"]}


def test_order_route_rejects_non_list_nodes(client):
    response = client.post("/api/order", json={"nodes": "dns"})

    assert response.status_code == 400


def test_connection_check_route(client):
    allowed = client.get("/api/connections/check?source=route53&target=cloudfront").get_json()
    rejected = client.get("/api/connections/check?source=ecs&target=alb").get_json()

    assert allowed == {"allowed": True, "warning": None, "protocol": "dns"}
    assert rejected["allowed"] is False
    assert rejected["protocol"] is None
    assert "reverse direction" in rejected["warning"]


def test_connection_check_route_rejects_unknown_type(client):
    response = client.get("/api/connections/check?source=ecs&target=mainframe")

    assert response.status_code == 400


def test_connection_check_route_requires_both_types(client):
    assert client.get("/api/connections/check?source=ecs").status_code == 400


def test_services_route(client):
    services = client.get("/api/services").get_json()["services"]

    assert len(services) == 23
    route53 = next(service for service in services if service["service_type"] == "route53")
    assert route53["label"] == "Route 53"
    assert route53["role"] == "flow"


@pytest.mark.parametrize("geo_distribution", [["us-east-1"], [None], "us"])
def test_simulate_route_rejects_malformed_geo_distribution(client, geo_distribution):
    traffic = {"requests_per_second": 100, "geo_distribution": geo_distribution}

    response = client.post("/api/simulate", json=dict(GRAPH, traffic_profile=traffic))

    assert response.status_code == 400
    assert "geo_distribution" in response.get_json()["error"]


def test_services_route_lists_size_options(client):
    services = {service["service_type"]: service for service in client.get("/api/services").get_json()["services"]}

    assert "t3.micro" in services["ec2"]["size_options"]
    assert "db.t3.micro" in services["rds"]["size_options"]
    assert services["lambda"]["size_options"] == []


def test_simulate_route_reads_string_advanced_flag(client):
    body = client.post("/api/simulate", json=dict(GRAPH, options={"advanced_mode": "false"})).get_json()

    assert "advanced" not in body
