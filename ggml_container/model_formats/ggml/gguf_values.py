"""
GGUF typed values: type tags, the tagged value union, and the stream reader.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

from ggml_container.model_formats.ggml.errors import UnknownTypeError


class GGUFValueType(IntEnum):
    UINT8 = 0
    INT8 = 1
    UINT16 = 2
    INT16 = 3
    UINT32 = 4
    INT32 = 5
    FLOAT32 = 6
    BOOL = 7
    STRING = 8
    ARRAY = 9
    UINT64 = 10
    INT64 = 11
    FLOAT64 = 12


# struct codes for fixed-width scalars
SCALAR_FORMATS: Dict[GGUFValueType, str] = {
    GGUFValueType.UINT8: "B",
    GGUFValueType.INT8: "b",
    GGUFValueType.UINT16: "H",
    GGUFValueType.INT16: "h",
    GGUFValueType.UINT32: "I",
    GGUFValueType.INT32: "i",
    GGUFValueType.FLOAT32: "f",
    GGUFValueType.BOOL: "?",
    GGUFValueType.UINT64: "Q",
    GGUFValueType.INT64: "q",
    GGUFValueType.FLOAT64: "d",
}


@dataclass(frozen=True)
class GGUFValue:
    """One metadata value.

    ``value`` is a Python scalar, a ``str``, or for arrays a tuple of scalars
    or strings; ``element_type`` is only set for arrays.
    """

    type: GGUFValueType
    value: Any
    element_type: Optional[GGUFValueType] = None

    @property
    def is_array(self) -> bool:
        return self.type == GGUFValueType.ARRAY


def _tag(raw: int, *, array: bool = False) -> GGUFValueType:
    try:
        return GGUFValueType(raw)
    except ValueError:
        raise UnknownTypeError(raw, array=array) from None


class GGUFValueReader:
    """Decodes GGUF strings and typed values from a :class:`ReadSeekOffset`.

    Integer widths and string encoding depend on the container version:
    v1 uses 32-bit lengths/counts and NUL-terminated strings, later
    versions use 64-bit lengths/counts without terminator.
    """

    def __init__(self, stream, *, version: int, endian: str = "LE"):
        self.stream = stream
        self.version = version
        self.bo = "<" if endian == "LE" else ">"
        self._len_fmt = self.bo + ("I" if version == 1 else "Q")

    def u32(self) -> int:
        return self.stream.unpack(self.bo + "I")[0]

    def u64(self) -> int:
        return self.stream.unpack(self.bo + "Q")[0]

    def count(self) -> int:
        """Length or element count: u32 in v1, u64 otherwise."""
        return self.stream.unpack(self._len_fmt)[0]

    def string(self) -> str:
        raw = self.stream.read(self.count())
        if self.version == 1 and raw:
            # v1 strings carry a trailing NUL
            raw = raw[:-1]
        return raw.decode("utf-8", "replace")

    def scalar(self, vtype: GGUFValueType) -> Any:
        return self.stream.unpack(self.bo + SCALAR_FORMATS[vtype])[0]

    def value(self, raw_tag: int) -> GGUFValue:
        """Read one value of type ``raw_tag``."""
        vtype = _tag(raw_tag)
        if vtype == GGUFValueType.ARRAY:
            element_type, items = self.array()
            return GGUFValue(vtype, items, element_type)
        if vtype == GGUFValueType.STRING:
            return GGUFValue(vtype, self.string())
        return GGUFValue(vtype, self.scalar(vtype))

    def array(self) -> Tuple[GGUFValueType, Tuple[Any, ...]]:
        """Read an array body: element tag, count, elements (one level only)."""
        raw = self.u32()
        etype = _tag(raw, array=True)
        if etype == GGUFValueType.ARRAY:
            raise UnknownTypeError(raw, array=True)
        n = self.count()
        if etype == GGUFValueType.STRING:
            return etype, tuple(self.string() for _ in range(n))
        fmt = SCALAR_FORMATS[etype]
        # bulk unpack; the read fails before allocating if the stream is short
        data = self.stream.read(n * struct.calcsize(fmt))
        return etype, struct.unpack(f"{self.bo}{n}{fmt}", data)


def read_value(stream, raw_tag: int, *, version: int, endian: str = "LE") -> GGUFValue:
    """Decode one value of type ``raw_tag`` from ``stream``."""
    return GGUFValueReader(stream, version=version, endian=endian).value(raw_tag)
