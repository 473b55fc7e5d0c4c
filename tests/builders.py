"""Byte-level builders for crafting GGUF and GGLA test buffers."""

from __future__ import annotations

import struct
from typing import Iterable, Sequence, Tuple

GGUF_MAGIC = b"GGUF"
GGUF_MAGIC_BE = b"FUGG"
GGLA_MAGIC = struct.pack("<I", 0x67676C61)

FORMATS = {0: "B", 1: "b", 2: "H", 3: "h", 4: "I", 5: "i", 6: "f", 7: "?", 10: "Q", 11: "q", 12: "d"}


def gguf_str(s: str, *, version: int = 3, bo: str = "<") -> bytes:
    raw = s.encode("utf-8")
    if version == 1:
        raw += b"\x00"
        return struct.pack(bo + "I", len(raw)) + raw
    return struct.pack(bo + "Q", len(raw)) + raw


def gguf_scalar(tag: int, value, *, bo: str = "<") -> bytes:
    return struct.pack(bo + FORMATS[tag], value)


def gguf_array(elem_tag: int, items: Sequence, *, version: int = 3, bo: str = "<") -> bytes:
    out = struct.pack(bo + "I", elem_tag)
    out += struct.pack(bo + ("I" if version == 1 else "Q"), len(items))
    for item in items:
        if elem_tag == 8:
            out += gguf_str(item, version=version, bo=bo)
        else:
            out += gguf_scalar(elem_tag, item, bo=bo)
    return out


def gguf_kv(key: str, tag: int, payload: bytes, *, version: int = 3, bo: str = "<") -> bytes:
    """One KV entry; ``payload`` is the already-encoded value body."""
    return gguf_str(key, version=version, bo=bo) + struct.pack(bo + "I", tag) + payload


def gguf_tensor(
    name: str, shape: Sequence[int], kind: int, offset: int, *, version: int = 3, bo: str = "<"
) -> bytes:
    out = gguf_str(name, version=version, bo=bo)
    out += struct.pack(bo + "I", len(shape))
    out += b"".join(struct.pack(bo + "Q", d) for d in shape)
    out += struct.pack(bo + "IQ", kind, offset)
    return out


def build_gguf(
    kvs: Iterable[bytes] = (),
    tensors: Iterable[bytes] = (),
    *,
    version: int = 3,
    bo: str = "<",
    n_kv: int | None = None,
    n_tensors: int | None = None,
    data: bytes = b"",
) -> bytes:
    kvs = list(kvs)
    tensors = list(tensors)
    magic = GGUF_MAGIC if bo == "<" else GGUF_MAGIC_BE
    counts = (len(tensors) if n_tensors is None else n_tensors, len(kvs) if n_kv is None else n_kv)
    header = magic + struct.pack(bo + "I", version)
    header += struct.pack(bo + ("II" if version == 1 else "QQ"), *counts)
    return header + b"".join(kvs) + b"".join(tensors) + data


def ggla_tensor(name: str, wire_shape: Sequence[int], kind: int) -> bytes:
    """Tensor header as written on disk (shape innermost-first)."""
    raw = name.encode("utf-8")
    out = struct.pack("<III", len(wire_shape), len(raw), kind)
    out += b"".join(struct.pack("<I", d) for d in wire_shape)
    return out + raw


def build_ggla(
    tensors: Iterable[Tuple[str, Sequence[int], int, int]] = (),
    *,
    r: int = 8,
    alpha: int = 16,
    version: int = 1,
) -> bytes:
    """Build a GGLA file; each tensor is ``(name, wire_shape, kind, payload_size)``."""
    buf = bytearray(GGLA_MAGIC + struct.pack("<III", version, r, alpha))
    for name, wire_shape, kind, payload_size in tensors:
        buf += ggla_tensor(name, wire_shape, kind)
        buf += b"\x00" * (-len(buf) % 32)
        buf += b"\xab" * payload_size
    return bytes(buf)
