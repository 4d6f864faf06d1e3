"""Tests for the primitive flat-field readers."""

from __future__ import annotations

import pytest

from rkebridge.errors import FieldTypeError
from rkebridge.resource.data import DictResourceData
from rkebridge.resource.fields import (
    read_block,
    read_block_list,
    read_bool,
    read_port,
    read_str,
    read_str_list,
    read_str_map,
)


@pytest.mark.parametrize(
    "reader,zero",
    [
        (read_str, ""),
        (read_bool, False),
        (read_port, ""),
        (read_str_list, []),
        (read_str_map, {}),
    ],
)
def test_absent_and_null_read_as_zero(reader, zero) -> None:
    assert reader(DictResourceData({}), "k") == zero
    assert reader(DictResourceData({"k": None}), "k") == zero


@pytest.mark.parametrize(
    "reader,value",
    [
        (read_str, 1),
        (read_bool, "true"),
        (read_bool, 1),
        (read_port, "22"),
        (read_port, True),
        (read_port, -1),
        (read_str_list, "a,b"),
        (read_str_list, [1, 2]),
        (read_str_map, ["a"]),
        (read_str_map, {"a": 1}),
    ],
)
def test_wrong_shape_rejected(reader, value) -> None:
    with pytest.raises(FieldTypeError) as exc_info:
        reader(DictResourceData({"k": value}), "k")
    assert exc_info.value.key == "k"
    assert "'k'" in str(exc_info.value)


def test_port_becomes_decimal_string() -> None:
    assert read_port(DictResourceData({"port": 2222}), "port") == "2222"


def test_list_is_copied() -> None:
    roles = ["etcd"]
    got = read_str_list(DictResourceData({"role": roles}), "role")
    got.append("worker")
    assert roles == ["etcd"]


class TestReadBlock:
    """Single-occurrence blocks."""

    def test_first_element(self) -> None:
        d = DictResourceData({"network": [{"plugin": "canal"}]})
        block = read_block(d, "network")
        assert block is not None
        assert read_str(block, "plugin") == "canal"

    @pytest.mark.parametrize("values", [{}, {"network": []}, {"network": None}])
    def test_omitted(self, values) -> None:
        assert read_block(DictResourceData(values), "network") is None

    def test_empty_map_is_present(self) -> None:
        assert read_block(DictResourceData({"network": [{}]}), "network") is not None

    def test_not_a_list(self) -> None:
        with pytest.raises(FieldTypeError, match="list of nested maps"):
            read_block(DictResourceData({"network": {"plugin": "canal"}}), "network")

    def test_element_not_a_map(self) -> None:
        with pytest.raises(FieldTypeError, match="nested map"):
            read_block(DictResourceData({"network": ["canal"]}), "network")


def test_block_list_order() -> None:
    d = DictResourceData({"nodes": [{"address": "a"}, {"address": "b"}]})
    assert [read_str(n, "address") for n in read_block_list(d, "nodes")] == ["a", "b"]
    assert read_block_list(DictResourceData({}), "nodes") == []
