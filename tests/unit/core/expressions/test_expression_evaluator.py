"""Tests for group expression evaluation against device attribute views."""

import pytest

from device_registry.core.expressions import evaluate_expression, parse_expression


def matches(expression: str, attributes: dict) -> bool:
    return evaluate_expression(parse_expression(expression), attributes)


DEVICE = {
    "role": "sensor",
    "device_id": "VIN0001",
    "firmware": 12,
    "ratio": 0.5,
    "enabled": True,
    "tags": ["edge", "beta"],
    "system_info": {"os": "linux-5.15", "cpu": {"cores": 4}},
    "network": {"local_ipv4": "10.0.0.7", "mac": "aa:bb", "hostname": "gw-7"},
}


class TestComparisons:
    @pytest.mark.parametrize(
        "expression,expected",
        [
            ('role == "sensor"', True),
            ('role == "actuator"', False),
            ('role != "actuator"', True),
            ("firmware > 10", True),
            ("firmware <= 11", False),
            ("ratio < 1", True),
            ("system_info.cpu.cores >= 4", True),
            ("network.hostname == 'gw-7'", True),
            ("enabled == true", True),
        ],
    )
    def test_comparison(self, expression, expected):
        assert matches(expression, DEVICE) is expected

    def test_booleans_do_not_equal_integers(self):
        assert matches("flag == 1", {"flag": True}) is False
        assert matches("flag != 1", {"flag": True}) is True

    def test_incompatible_ordered_comparison_is_false(self):
        assert matches("role > 3", DEVICE) is False

    def test_in_list(self):
        assert matches("role in ['sensor', 'camera']", DEVICE) is True
        assert matches("role in ['camera']", DEVICE) is False


class TestMissingAttributes:
    @pytest.mark.parametrize(
        "expression",
        [
            'region == "eu"',
            'region != "eu"',
            "region > 1",
            "region in ['eu']",
            "system_info.gpu.model == 'x'",
            "contains(region, 'e')",
            "starts_with(region, 'e')",
        ],
    )
    def test_missing_attribute_terms_are_false(self, expression):
        assert matches(expression, DEVICE) is False

    def test_attribute_below_a_scalar_is_missing(self):
        assert matches("role.kind == 'x'", DEVICE) is False

    def test_exists(self):
        assert matches("exists(system_info.os)", DEVICE) is True
        assert matches("exists(system_info.kernel)", DEVICE) is False

    def test_null_value_is_present(self):
        assert matches("exists(owner)", {"owner": None}) is True
        assert matches("owner == null", {"owner": None}) is True


class TestFunctions:
    def test_contains_string(self):
        assert matches("contains(system_info.os, 'linux')", DEVICE) is True

    def test_contains_list(self):
        assert matches("contains(tags, 'beta')", DEVICE) is True
        assert matches("contains(tags, 'prod')", DEVICE) is False

    def test_starts_and_ends_with(self):
        assert matches("starts_with(device_id, 'VIN')", DEVICE) is True
        assert matches("ends_with(device_id, '0001')", DEVICE) is True
        assert matches("ends_with(firmware, '2')", DEVICE) is False


class TestLogic:
    def test_and_or_not(self):
        assert matches("role == 'sensor' and firmware > 10", DEVICE) is True
        assert matches("role == 'camera' or firmware > 10", DEVICE) is True
        assert matches("not role == 'camera'", DEVICE) is True

    def test_non_boolean_value_is_not_a_match(self):
        assert matches("role", DEVICE) is False
        assert matches("enabled", DEVICE) is True

    def test_long_or_chain(self):
        expression = " or ".join(f"device_id == 'D{i}'" for i in range(2000))

        assert matches(expression, {"device_id": "D1999"}) is True
        assert matches(expression, {"device_id": "X"}) is False

    def test_long_and_chain(self):
        expression = " and ".join("active" for _ in range(2000))

        assert matches(expression, {"active": True}) is True
        assert matches(expression, {"active": False}) is False
