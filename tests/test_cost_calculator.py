import pytest

from cloudsim.core import cost_calculator as calc
from cloudsim.core.cost_calculator import CostInputs, service_monthly_cost

MILLION = 1_000_000


def test_cost_inputs_from_rate():
    inputs = CostInputs.from_rate(100, 10, 0.8)

    assert inputs.requests_per_month == 259_200_000
    assert inputs.data_transfer_gb == pytest.approx(259_200_000 * 10 / (1024 * 1024))
    assert inputs.read_write_ratio == 0.8


def test_route53_cost():
    assert calc.calculate_route53_monthly_cost(MILLION) == pytest.approx(0.9)
    assert calc.calculate_route53_monthly_cost(0) == pytest.approx(0.5)


def test_cloudfront_cost():
    assert calc.calculate_cloudfront_monthly_cost(10_000, 1) == pytest.approx(0.0925)


def test_load_balancer_costs():
    alb_requests = 25 * 2_592_000
    assert calc.calculate_alb_monthly_cost(alb_requests, 0) == pytest.approx((0.0225 + 0.008) * 730)
    assert calc.calculate_alb_monthly_cost(0, 0) == pytest.approx(0.0225 * 730)
    assert calc.calculate_nlb_monthly_cost(0, 730) == pytest.approx((0.0225 + 0.006) * 730)


def test_api_gateway_cost():
    assert calc.calculate_api_gateway_monthly_cost("http", MILLION, False) == pytest.approx(1.0)
    assert calc.calculate_api_gateway_monthly_cost("rest", MILLION, True) == pytest.approx(3.5 + 0.02 * 730)


def test_ecs_cost():
    assert calc.calculate_ecs_monthly_cost("fargate", 2, 0.25, 0.5) == pytest.approx(18.02005)
    assert calc.calculate_ecs_monthly_cost("ec2", 4, 1, 2) == 0.0


def test_eks_cost():
    assert calc.calculate_eks_monthly_cost("fargate", 3, "t3.large") == pytest.approx(73.0)
    assert calc.calculate_eks_monthly_cost("managed", 2, "t3.medium") == pytest.approx(133.736)
    assert calc.calculate_eks_monthly_cost("managed", 2, "m9.huge") == pytest.approx(133.736)


def test_ec2_cost_unknown_size_uses_smallest_tier():
    assert calc.calculate_ec2_monthly_cost("t3.small", 2) == pytest.approx(0.0208 * 730 * 2)
    assert calc.calculate_ec2_monthly_cost("x9.mega", 1) == pytest.approx(7.592)


def test_lambda_cost():
    assert calc.calculate_lambda_monthly_cost(128, MILLION, 200) == pytest.approx(0.6166675)
    assert calc.calculate_lambda_monthly_cost(1024, 0, 200) == 0


def test_s3_cost():
    assert calc.calculate_s3_monthly_cost(MILLION, 0, 0.8) == pytest.approx(1.32)
    assert calc.calculate_s3_monthly_cost(0, 100, 0.8) == pytest.approx(2.3)


def test_rds_cost():
    assert calc.calculate_rds_monthly_cost("db.t3.micro", False, 0, 20) == pytest.approx(12.41 + 2.3)
    assert calc.calculate_rds_monthly_cost("db.t3.micro", True, 1, 20) == pytest.approx(41.83)


def test_dynamodb_cost():
    assert calc.calculate_dynamodb_monthly_cost("on-demand", MILLION, 0.5, 5, 5, 0) == pytest.approx(0.75)
    assert calc.calculate_dynamodb_monthly_cost("provisioned", MILLION, 0.5, 5, 5, 0) == pytest.approx(2.847)
    assert calc.calculate_dynamodb_monthly_cost("on-demand", 0, 0.5, 5, 5, 10) == pytest.approx(2.5)


def test_elasticache_cost():
    assert calc.calculate_elasticache_monthly_cost("cache.t3.micro", 2) == pytest.approx(0.017 * 730 * 2)


def test_messaging_costs():
    assert calc.calculate_sqs_monthly_cost("standard", MILLION) == pytest.approx(0.4)
    assert calc.calculate_sqs_monthly_cost("fifo", MILLION) == pytest.approx(0.5)
    assert calc.calculate_sns_monthly_cost("standard", 2, MILLION) == pytest.approx(0.68)
    assert calc.calculate_sns_monthly_cost("fifo", 0, MILLION) == pytest.approx(0.3)


def test_kinesis_cost():
    assert calc.calculate_kinesis_monthly_cost("on-demand", 1, 0) == 0.0
    assert calc.calculate_kinesis_monthly_cost("on-demand", 1, 10) == pytest.approx(30.0)
    assert calc.calculate_kinesis_monthly_cost("provisioned", 2, 0) == pytest.approx(80.3)


def test_security_service_costs():
    assert calc.calculate_waf_monthly_cost(10, MILLION) == pytest.approx(15.6)
    assert calc.calculate_shield_monthly_cost("standard") == 0.0
    assert calc.calculate_shield_monthly_cost("advanced") == 3000.0


def test_nat_gateway_cost():
    assert calc.calculate_nat_gateway_monthly_cost(100) == pytest.approx(32.85 + 4.5)


def test_zero_traffic_costs_only_fixed_charges(make_node):
    zero = CostInputs.from_rate(0, 10, 0.8)
    expected = {
        "route53": 0.5,
        "cloudfront": 0.0,
        "api-gateway": 0.0,
        "lambda": 0.0,
        "sqs": 0.0,
        "sns": 0.0,
        "kinesis": 0.0,
        "shield": 0.0,
        "alb": 0.0225 * 730,
        "waf": 15.0,
    }
    for service_type, amount in expected.items():
        node = make_node(service_type, service_type)
        assert service_monthly_cost(node, zero) == pytest.approx(amount), service_type


def test_service_monthly_cost_uses_node_configuration(make_node):
    inputs = CostInputs.from_rate(0, 0, 0.8)
    node = make_node("db", "rds", {"specific": {"multi_az": True, "read_replicas": 1}})

    assert service_monthly_cost(node, inputs) == pytest.approx(41.83)


def test_service_monthly_cost_generic_fallback(make_node):
    node = make_node(
        "vpc-1", "vpc", {"name": "Main VPC", "cost": {"per_request": 0.001, "per_gb": 2, "monthly": 5}}
    )
    inputs = CostInputs(requests_per_month=1000, data_transfer_gb=0.5, read_write_ratio=0.8)

    assert service_monthly_cost(node, inputs) == pytest.approx(7.0)
