#!/usr/bin/env python3
"""Numeric payload normalization

Some mpris players report numeric values as the wrong type (unsigned
instead of signed, 32-bit instead of 64-bit, a double for an integer).
These helpers make all of them interchangeable.  Anything that is not
a number, or a variant carrying one, becomes zero.
"""

import enum
import math
from typing import Any

from dbus_fast import Variant

INT64_MIN = -(2**63)
UINT64_RANGE = 2**64

SIGNED_SIGNATURES = frozenset("nix")
UNSIGNED_SIGNATURES = frozenset("yqut")
FLOAT_SIGNATURES = frozenset("d")


class PayloadKind(enum.Enum):
    """the shapes a bus payload can take"""

    SIGNED = "signed"
    UNSIGNED = "unsigned"
    FLOAT = "float"
    VARIANT = "variant"
    OTHER = "other"


def classify(value: Any) -> PayloadKind:
    """figure out which kind of payload a raw value is"""
    # bool is an int subclass but never a number on the bus
    if isinstance(value, bool):
        return PayloadKind.OTHER
    if isinstance(value, int):
        return PayloadKind.SIGNED
    if isinstance(value, float):
        return PayloadKind.FLOAT
    if isinstance(value, Variant):
        return PayloadKind.VARIANT
    return PayloadKind.OTHER


def classify_signature(signature: str, value: Any) -> PayloadKind:
    """figure out the kind of the value inside a variant"""
    if signature in SIGNED_SIGNATURES and classify(value) == PayloadKind.SIGNED:
        return PayloadKind.SIGNED
    if signature in UNSIGNED_SIGNATURES and classify(value) == PayloadKind.SIGNED:
        return PayloadKind.UNSIGNED
    if signature in FLOAT_SIGNATURES and classify(value) in (
        PayloadKind.FLOAT,
        PayloadKind.SIGNED,
    ):
        return PayloadKind.FLOAT
    return PayloadKind.OTHER


def _wrap_int64(value: int) -> int:
    return (value - INT64_MIN) % UINT64_RANGE + INT64_MIN


def _long(kind: PayloadKind, value: Any, unwrapped: bool) -> int:
    match kind:
        case PayloadKind.SIGNED | PayloadKind.UNSIGNED:
            return _wrap_int64(value)
        case PayloadKind.FLOAT:
            if not math.isfinite(value):
                return 0
            return _wrap_int64(math.trunc(value))
        case PayloadKind.VARIANT if not unwrapped:
            inner = value.value
            return _long(classify_signature(value.signature, inner), inner, True)
        case _:
            return 0


def _double(kind: PayloadKind, value: Any, unwrapped: bool) -> float:
    match kind:
        case PayloadKind.SIGNED:
            return float(_wrap_int64(value))
        case PayloadKind.UNSIGNED:
            return float(value % UINT64_RANGE)
        case PayloadKind.FLOAT:
            return float(value)
        case PayloadKind.VARIANT if not unwrapped:
            inner = value.value
            return _double(classify_signature(value.signature, inner), inner, True)
        case _:
            return 0.0


def get_long(value: Any) -> int:
    """coerce a bus payload to a signed 64-bit integer, 0 if it isn't numeric"""
    return _long(classify(value), value, False)


def get_double(value: Any) -> float:
    """coerce a bus payload to a double, 0.0 if it isn't numeric"""
    return _double(classify(value), value, False)
