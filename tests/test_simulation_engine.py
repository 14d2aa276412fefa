import logging

import pytest

from cloudsim.core.cost_calculator import CostInputs, calculate_lambda_monthly_cost, service_monthly_cost
from cloudsim.core.models import ServiceNode, TrafficProfile
from cloudsim.core.simulation_engine import (
    analyze_availability,
    analyze_security,
    calculate_cost,
    calculate_performance,
    simulate,
)


CDN = {"cache": {"enabled": True, "ttl": 86400, "hit_rate": 0.85}, "security": {"ddos_protection": True}}
REDIS = {"cache": {"enabled": True, "ttl": 300, "hit_rate": 0.9}}


def _traffic(rps, payload=10, ratio=0.8):
    return TrafficProfile.from_dict(
        {"requests_per_second": rps, "average_payload_size": payload, "read_write_ratio": ratio}
    )


def test_performance_sums_flow_latency(make_node, traffic):
    nodes = [
        make_node("cdn", "cloudfront", CDN),
        make_node("lb", "alb"),
        make_node("app", "ecs"),
        make_node("db", "rds"),
    ]

    result = calculate_performance(nodes, traffic)

    assert result.total_latency == pytest.approx(78)
    assert result.p50_latency == pytest.approx(78 * 0.9)
    assert result.p99_latency == pytest.approx(78 * 1.8)
    assert result.ttfb == pytest.approx(20)
    assert result.cache_hit_rate == pytest.approx(0.85)
    assert result.requests_reaching_origin == pytest.approx(15)


def test_performance_cascades_cache_layers(make_node, traffic):
    nodes = [make_node("cdn", "cloudfront", CDN), make_node("app", "ecs"), make_node("cache", "elasticache", REDIS)]

    result = calculate_performance(nodes, traffic)

    assert result.requests_reaching_origin == pytest.approx(1.5)
    assert result.cache_hit_rate == pytest.approx(0.985)


def test_performance_ignores_disabled_cache(make_node, traffic):
    nodes = [make_node("cdn", "cloudfront", {"cache": {"enabled": False, "hit_rate": 0.9}})]

    result = calculate_performance(nodes, traffic)

    assert result.cache_hit_rate == 0
    assert result.requests_reaching_origin == pytest.approx(100)


def test_performance_treats_missing_cache_as_disabled(traffic):
    node = ServiceNode.from_dict(
        {"id": "cf", "service_type": "cloudfront", "config": {"name": "CDN", "latency": {"base": 20}}}
    )

    result = calculate_performance([node], traffic)

    assert node.config.cache is None
    assert result.cache_hit_rate == 0
    assert result.requests_reaching_origin == pytest.approx(100)


def test_security_does_not_assume_unconfigured_protection(make_node):
    result = analyze_security([make_node("cdn", "cloudfront"), make_node("edge-waf", "waf")], [])

    assert result.ddos_protection is False
    assert result.waf_enabled is False
    assert result.score == 40


def test_performance_skips_infrastructure_nodes(make_node, traffic):
    nodes = [make_node("nat", "nat-gateway"), make_node("dns", "route53")]

    result = calculate_performance(nodes, traffic)

    assert result.total_latency == pytest.approx(3)
    assert result.ttfb == pytest.approx(3)


def test_performance_with_zero_traffic(make_node):
    result = calculate_performance([make_node("cdn", "cloudfront")], _traffic(0))

    assert result.cache_hit_rate == 0
    assert result.requests_reaching_origin == 0
    assert result.total_latency == pytest.approx(20)


def test_performance_empty():
    result = calculate_performance([], _traffic(100))

    assert result.total_latency == 0
    assert result.ttfb == 0
    assert result.cache_hit_rate == 0


def test_cost_uses_traffic_that_survives_caches(make_node, traffic):
    nodes = [make_node("cdn", "cloudfront", CDN), make_node("fn", "lambda")]

    result = calculate_cost(nodes, traffic)

    assert [item.service for item in result.breakdown] == ["CloudFront", "Lambda"]
    cdn_expected = service_monthly_cost(nodes[0], CostInputs.from_rate(100, 10, 0.8))
    fn_expected = calculate_lambda_monthly_cost(128, 15 * 2_592_000, 200)
    assert result.breakdown[0].amount == pytest.approx(cdn_expected)
    assert result.breakdown[1].amount == pytest.approx(fn_expected)
    assert result.monthly == pytest.approx(cdn_expected + fn_expected)
    assert result.per_request == pytest.approx(result.monthly / (100 * 2_592_000))


def test_cost_excludes_infrastructure_nodes(make_node, traffic):
    nodes = [make_node("vpc-1", "vpc"), make_node("nat", "nat-gateway"), make_node("fn", "lambda")]

    result = calculate_cost(nodes, traffic)

    assert [item.service for item in result.breakdown] == ["Lambda"]


def test_cost_with_zero_traffic(make_node):
    nodes = [make_node("dns", "route53"), make_node("fn", "lambda")]

    result = calculate_cost(nodes, _traffic(0))

    assert result.monthly == pytest.approx(0.5)
    assert result.per_request == 0


def test_security_counts_features(make_node, make_edge):
    nodes = [
        make_node("waf", "waf", {"security": {"waf": True}}),
        make_node("cdn", "cloudfront", CDN),
        make_node("bucket", "s3", {"security": {"encryption": True}}),
    ]
    edges = [make_edge("waf", "cdn", protocol="inline"), make_edge("cdn", "bucket")]

    result = analyze_security(nodes, edges)

    assert result.ddos_protection is True
    assert result.waf_enabled is True
    assert result.encryption_in_transit is True
    assert result.encryption_at_rest is True
    assert result.score == 80


def test_security_network_bonus(make_node):
    nodes = [make_node("cdn", "cloudfront", CDN), make_node("vpc-1", "vpc")]

    assert analyze_security(nodes, []).score == 20 + 20 + 20 + 10

    nodes.append(make_node("subnet-1", "subnet", {"specific": {"subnet_type": "private"}}))
    assert analyze_security(nodes, []).score == 80

    nodes.append(make_node("waf", "waf", {"security": {"waf": True}}))
    assert analyze_security(nodes, []).score == 100


def test_security_flags_plaintext_edge_and_unencrypted_storage(make_node, make_edge):
    nodes = [
        make_node("app", "ec2"),
        make_node("db", "rds", {"security": {"encryption": False}}),
    ]
    edges = [make_edge("app", "db", protocol="ftp")]

    result = analyze_security(nodes, edges)

    assert result.encryption_in_transit is False
    assert result.encryption_at_rest is False
    assert result.score == 0


def test_security_empty_graph():
    result = analyze_security([], [])

    assert result.encryption_in_transit is True
    assert result.encryption_at_rest is True
    assert result.score == 40


def test_availability_scores_redundancy(make_node):
    nodes = [
        make_node("dns", "route53"),
        make_node("lb", "alb"),
        make_node("app", "ecs"),
        make_node("db", "rds"),
    ]

    result = analyze_availability(nodes)

    assert result.redundancy_score == 75
    assert result.estimated_uptime == 0.9974
    assert result.single_points_of_failure == ("RDS",)


def test_availability_uses_configuration(make_node):
    nodes = [
        make_node("db", "rds", {"specific": {"multi_az": True}}),
        make_node("web", "ec2", {"specific": {"instance_count": 3}}),
        make_node("cache", "elasticache", {"specific": {"num_nodes": 2}}),
        make_node(
            "app",
            "ecs",
            {"specific": {"task_count": 1, "auto_scaling": {"enabled": True, "max": 4}}},
        ),
    ]

    result = analyze_availability(nodes)

    assert result.redundancy_score == 100
    assert result.estimated_uptime == 0.9999
    assert result.single_points_of_failure == ()


def test_availability_single_task_without_scaling(make_node):
    node = make_node("app", "ecs", {"specific": {"task_count": 1, "auto_scaling": {"enabled": False}}})

    result = analyze_availability([node])

    assert result.redundancy_score == 0
    assert result.estimated_uptime == 0.99


def test_availability_rounds_half_up(make_node):
    nodes = [make_node("dns", "route53")] + [make_node(f"db-{index}", "rds") for index in range(7)]

    assert analyze_availability(nodes).redundancy_score == 13


def test_availability_empty():
    result = analyze_availability([])

    assert result.redundancy_score == 100
    assert result.estimated_uptime == 0.9999


def test_simulate_standard_web_stack(make_node, make_edge, traffic):
    nodes = [
        make_node("dns", "route53"),
        make_node("cdn", "cloudfront"),
        make_node("lb", "alb"),
        make_node("app", "ecs"),
        make_node("db", "rds"),
    ]
    edges = [
        make_edge("dns", "cdn"),
        make_edge("cdn", "lb"),
        make_edge("lb", "app"),
        make_edge("app", "db"),
    ]

    result = simulate(nodes, edges, traffic)

    assert result.validation.error_count == 0
    assert result.performance.total_latency == pytest.approx(3 + 20 + 5 + 50 + 3)


def test_simulate_orchestrates_all_analyses(make_node, make_edge, traffic):
    nodes = [
        make_node("dns", "route53"),
        make_node("lb", "alb"),
        make_node("app", "ecs", parent_id="subnet-1"),
        make_node("db", "rds", parent_id="subnet-1"),
    ]
    edges = [make_edge("dns", "lb"), make_edge("lb", "app"), make_edge("app", "db")]

    result = simulate(nodes, edges, traffic)

    assert result.performance.total_latency == pytest.approx(61)
    assert len(result.cost.breakdown) == 4
    assert result.availability.redundancy_score == 75
    assert result.validation.is_valid is True
    assert result.advanced is None
    assert "advanced" not in result.to_dict()


def test_simulate_advanced_mode(make_node, make_edge, traffic):
    nodes = [make_node("api", "api-gateway"), make_node("fn", "lambda")]
    edges = [make_edge("api", "fn")]

    result = simulate(nodes, edges, traffic, advanced_mode=True)

    assert result.advanced is not None
    assert result.advanced.scalability.bottleneck_service == "Lambda"
    assert "advanced" in result.to_dict()


def test_simulate_omits_cycles_but_validates_everything(make_node, make_edge, traffic):
    nodes = [make_node("dns", "route53"), make_node("a", "sqs"), make_node("b", "lambda")]
    edges = [make_edge("a", "b"), make_edge("b", "a")]

    result = simulate(nodes, edges, traffic)

    assert result.performance.total_latency == pytest.approx(3)
    assert [item.service for item in result.cost.breakdown] == ["Route 53"]
    assert result.validation.info_count == 1


def test_simulate_is_repeatable(make_node, make_edge, traffic):
    nodes = [make_node("cdn", "cloudfront"), make_node("bucket", "s3")]
    edges = [make_edge("cdn", "bucket")]

    assert simulate(nodes, edges, traffic, True) == simulate(nodes, edges, traffic, True)


def test_simulate_logs_summary(make_node, traffic, caplog):
    with caplog.at_level(logging.INFO, logger="cloudsim.core.simulation_engine"):
        simulate([make_node("dns", "route53")], [], traffic)

    assert "Simulated 1 node(s) at 100.00 rps" in caplog.text
