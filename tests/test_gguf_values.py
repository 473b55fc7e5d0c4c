"""Tests for the GGUF typed-value reader."""

from __future__ import annotations

import struct

import pytest
from builders import FORMATS, gguf_array, gguf_scalar, gguf_str

from ggml_container.io.stream import ReadSeekOffset
from ggml_container.model_formats.ggml.errors import TruncatedStreamError, UnknownTypeError
from ggml_container.model_formats.ggml.gguf_values import (
    GGUFValue,
    GGUFValueReader,
    GGUFValueType,
    read_value,
)


def test_value_type_tags_follow_wire_order():
    assert [t.value for t in GGUFValueType] == list(range(13))
    assert GGUFValueType.STRING == 8
    assert GGUFValueType.ARRAY == 9
    assert GGUFValueType.FLOAT64 == 12


@pytest.mark.parametrize(
    "tag,value",
    [
        (0, 255),
        (1, -128),
        (2, 65535),
        (3, -2),
        (4, 2**32 - 1),
        (5, -(2**31)),
        (6, 1.5),
        (7, True),
        (10, 2**64 - 1),
        (11, -(2**63)),
        (12, 0.1),
    ],
)
def test_scalars(tag, value):
    stream = ReadSeekOffset(gguf_scalar(tag, value) + b"tail")
    v = read_value(stream, tag, version=3)
    assert v == GGUFValue(GGUFValueType(tag), value)
    assert stream.offset == struct.calcsize("<" + FORMATS[tag])


def test_big_endian_scalar():
    stream = ReadSeekOffset(struct.pack(">I", 0x01020304))
    assert read_value(stream, 4, version=3, endian="BE").value == 0x01020304


def test_string_v1_strips_terminator():
    stream = ReadSeekOffset(gguf_str("llama", version=1))
    v = read_value(stream, 8, version=1)
    assert v.value == "llama"
    assert stream.offset == 4 + 6


def test_string_v2_keeps_every_byte():
    raw = struct.pack("<Q", 3) + b"ab\x00"
    v = read_value(ReadSeekOffset(raw), 8, version=2)
    assert v.value == "ab\x00"


def test_empty_string_v1():
    stream = ReadSeekOffset(struct.pack("<I", 0))
    assert GGUFValueReader(stream, version=1).string() == ""


def test_array_of_ints_v3():
    v = read_value(ReadSeekOffset(gguf_array(5, [1, -2, 3])), 9, version=3)
    assert v.is_array
    assert v.element_type == GGUFValueType.INT32
    assert v.value == (1, -2, 3)


def test_array_of_strings_v1_uses_32bit_count():
    payload = gguf_array(8, ["a", "bc"], version=1)
    assert payload[4:8] == struct.pack("<I", 2)
    stream = ReadSeekOffset(payload)
    v = read_value(stream, 9, version=1)
    assert v.value == ("a", "bc")
    assert stream.at_eof()


def test_empty_array():
    v = read_value(ReadSeekOffset(gguf_array(6, [])), 9, version=3)
    assert v.value == ()
    assert v.element_type == GGUFValueType.FLOAT32


def test_nested_array_is_rejected():
    payload = struct.pack("<IQ", 9, 1) + gguf_array(0, [1])
    with pytest.raises(UnknownTypeError) as ei:
        read_value(ReadSeekOffset(payload), 9, version=3)
    assert ei.value.tag == 9
    assert ei.value.array


def test_unknown_array_element_tag():
    with pytest.raises(UnknownTypeError, match="invalid array type: 42"):
        read_value(ReadSeekOffset(struct.pack("<IQ", 42, 0)), 9, version=3)


def test_unknown_value_tag():
    with pytest.raises(UnknownTypeError) as ei:
        read_value(ReadSeekOffset(b"\x00" * 8), 255, version=3)
    assert ei.value.tag == 255
    assert not ei.value.array


def test_short_array_body():
    payload = struct.pack("<IQ", 4, 1000) + b"\x00" * 8
    with pytest.raises(TruncatedStreamError):
        read_value(ReadSeekOffset(payload), 9, version=3)
