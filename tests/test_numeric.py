#!/usr/bin/env python3
"""test numeric payload normalization"""

import pytest
from dbus_fast import Variant

import mprisbus.numeric


@pytest.mark.parametrize(
    "value,expected",
    [
        (Variant("u", 42), 42),
        (Variant("y", 255), 255),
        (Variant("q", 65535), 65535),
        (Variant("n", -32768), -32768),
        (Variant("i", -5), -5),
        (Variant("x", 7), 7),
        (Variant("t", 2**63), -(2**63)),
        (Variant("t", 2**64 - 1), -1),
        (Variant("d", 3.9), 3),
        (Variant("d", -3.9), -3),
        (42, 42),
        (-42, -42),
        (3.9, 3),
        (-0.5, 0),
        (2**63, -(2**63)),
        (2.0**64 + 4096.0, 4096),
        (Variant("d", 2.0**63), -(2**63)),
        (-(2.0**63) - 4096.0, 2**63 - 4096),
    ],
)
def test_get_long(value, expected):
    """numbers of any width and sign become int64"""
    assert mprisbus.numeric.get_long(value) == expected


@pytest.mark.parametrize(
    "value",
    [
        "7",
        b"7",
        None,
        True,
        False,
        [7],
        {"a": 7},
        (7,),
        Variant("s", "7"),
        Variant("b", True),
        Variant("v", Variant("x", 7)),
        Variant("as", ["7"]),
        float("nan"),
        float("inf"),
    ],
)
def test_get_long_fallback(value):
    """anything else is zero"""
    assert mprisbus.numeric.get_long(value) == 0


@pytest.mark.parametrize(
    "value,expected",
    [
        (-5, -5.0),
        (Variant("i", -5), -5.0),
        (Variant("u", 42), 42.0),
        (Variant("t", 2**64 - 1), float(2**64 - 1)),
        (Variant("x", -(2**63)), float(-(2**63))),
        (Variant("d", 1.5), 1.5),
        (0.25, 0.25),
        (2**63, float(-(2**63))),
    ],
)
def test_get_double(value, expected):
    """numbers of any width and sign become a double"""
    result = mprisbus.numeric.get_double(value)
    assert isinstance(result, float)
    assert result == expected


@pytest.mark.parametrize(
    "value",
    [
        True,
        "1.5",
        None,
        Variant("s", "1.5"),
        Variant("v", Variant("d", 1.5)),
        object(),
    ],
)
def test_get_double_fallback(value):
    """anything else is 0.0"""
    result = mprisbus.numeric.get_double(value)
    assert isinstance(result, float)
    assert result == 0.0


@pytest.mark.parametrize(
    "value", [0, 1, -1, 2**63 - 1, -(2**63), 3.9, -2.5, Variant("t", 2**64 - 1), "x"]
)
def test_idempotent(value):
    """normalizing normalized output changes nothing"""
    once = mprisbus.numeric.get_long(value)
    assert mprisbus.numeric.get_long(once) == once
    once = mprisbus.numeric.get_double(value)
    assert mprisbus.numeric.get_double(once) == once


def test_get_long_returns_plain_int():
    """bool never leaks out"""
    result = mprisbus.numeric.get_long(Variant("u", 1))
    assert type(result) is int  # pylint: disable=unidiomatic-typecheck


@pytest.mark.parametrize(
    "value,kind",
    [
        (1, mprisbus.numeric.PayloadKind.SIGNED),
        (True, mprisbus.numeric.PayloadKind.OTHER),
        (1.0, mprisbus.numeric.PayloadKind.FLOAT),
        (Variant("x", 1), mprisbus.numeric.PayloadKind.VARIANT),
        ("1", mprisbus.numeric.PayloadKind.OTHER),
    ],
)
def test_classify(value, kind):
    """top level classification"""
    assert mprisbus.numeric.classify(value) == kind


@pytest.mark.parametrize(
    "signature,value,kind",
    [
        ("x", 1, mprisbus.numeric.PayloadKind.SIGNED),
        ("u", 1, mprisbus.numeric.PayloadKind.UNSIGNED),
        ("d", 1.0, mprisbus.numeric.PayloadKind.FLOAT),
        ("v", Variant("x", 1), mprisbus.numeric.PayloadKind.OTHER),
        ("b", True, mprisbus.numeric.PayloadKind.OTHER),
        ("h", 3, mprisbus.numeric.PayloadKind.OTHER),
    ],
)
def test_classify_signature(signature, value, kind):
    """variant contents are classified by signature"""
    assert mprisbus.numeric.classify_signature(signature, value) == kind
