"""Tests for the Group entity invariants."""

import pytest

from device_registry.domain.entities.group import Group, GroupType


def test_static_group():
    group = Group(id="g1", namespace="acme", name="Fleet", group_type="static")
    assert group.group_type is GroupType.STATIC
    assert group.is_dynamic is False


def test_dynamic_group_requires_expression():
    with pytest.raises(ValueError, match="require an expression"):
        Group(id="g1", namespace="acme", name="Fleet", group_type=GroupType.DYNAMIC)


def test_static_group_rejects_expression():
    with pytest.raises(ValueError, match="cannot have an expression"):
        Group(id="g1", namespace="acme", name="Fleet", group_type=GroupType.STATIC, expression="a == 1")


@pytest.mark.parametrize("field", ["id", "namespace", "name"])
def test_required_fields(field):
    values = {"id": "g1", "namespace": "acme", "name": "Fleet", "group_type": GroupType.STATIC}
    values[field] = ""
    with pytest.raises(ValueError):
        Group(**values)
