"""
GGUF decoder: version-aware header, typed KV store, tensor catalog and
aligned data-section skip.
"""

from __future__ import annotations

import io
from typing import Dict, List

from loguru import logger

from ggml_container.model_formats.ggml.ggml import (
    DEFAULT_ALIGNMENT,
    KEY_ALIGNMENT,
    KEY_CHAT_TEMPLATE,
    KEY_PARAMETER_COUNT,
    Container,
    DecodedModel,
    Tensor,
)
from ggml_container.model_formats.ggml.ggml_types import tensor_size
from ggml_container.model_formats.ggml.gguf_values import GGUFValue, GGUFValueReader, GGUFValueType


def align_up(x: int, a: int) -> int:
    """Smallest multiple of ``a`` not less than ``x``."""
    return (x + (a - 1)) // a * a


def keep_metadata(key: str, value: GGUFValue) -> bool:
    """Whether a decoded KV entry is exposed in the metadata store.

    Top-level arrays (tokenizer vocabularies etc.) and the chat template are
    left out.
    """
    return not value.is_array and key != KEY_CHAT_TEMPLATE


def resolve_alignment(kv: Dict[str, GGUFValue]) -> int:
    v = kv.get(KEY_ALIGNMENT)
    if v is None or v.type != GGUFValueType.UINT32:
        return DEFAULT_ALIGNMENT
    if v.value == 0:
        logger.warning("Ignoring zero {key}; using {default}", key=KEY_ALIGNMENT, default=DEFAULT_ALIGNMENT)
        return DEFAULT_ALIGNMENT
    return v.value


class GGUFDecoder:
    """Decoder for GGUF containers (v1, v2, v3 and later)."""

    def __init__(self, byte_order: str = "LE"):
        if byte_order not in ("LE", "BE"):
            raise ValueError(f"byte_order must be 'LE' or 'BE', got {byte_order!r}")
        self.byte_order = byte_order

    def name(self) -> str:
        return "gguf"

    def decode(self, stream) -> DecodedModel:
        """Decode a GGUF container; ``stream`` is positioned after the magic."""
        bo = "<" if self.byte_order == "LE" else ">"
        (version,) = stream.unpack(bo + "I")
        if version == 1:
            n_tensors, n_kv = stream.unpack(bo + "II")
        else:
            n_tensors, n_kv = stream.unpack(bo + "QQ")
        container = Container(
            format=self.name(),
            byte_order=self.byte_order,
            version=version,
            n_tensors=n_tensors,
            n_kv=n_kv,
        )
        logger.debug(
            "GGUF v{v} ({bo}): {nt} tensors, {nkv} kv entries",
            v=version,
            bo=self.byte_order,
            nt=n_tensors,
            nkv=n_kv,
        )

        reader = GGUFValueReader(stream, version=version, endian=self.byte_order)

        kv: Dict[str, GGUFValue] = {}
        for _ in range(n_kv):
            key = reader.string()
            value = reader.value(reader.u32())
            if keep_metadata(key, value):
                kv[key] = value
            else:
                logger.debug("Dropping metadata key {key}", key=key)

        tensors: List[Tensor] = []
        parameters = 0
        for _ in range(n_tensors):
            name = reader.string()
            n_dims = reader.u32()
            shape = stream.unpack(f"{bo}{n_dims}Q") if n_dims else ()
            kind, offset = stream.unpack(bo + "IQ")
            t = Tensor(name=name, kind=kind, shape=tuple(shape), offset=offset)
            tensors.append(t)
            parameters += tensor_size(t.kind, t.shape)[0]

        if KEY_PARAMETER_COUNT in kv:
            logger.warning("Overwriting {key} from the stream", key=KEY_PARAMETER_COUNT)
        kv[KEY_PARAMETER_COUNT] = GGUFValue(GGUFValueType.UINT64, parameters)

        alignment = resolve_alignment(kv)
        data_start = align_up(stream.offset, alignment)
        stream.seek(data_start, io.SEEK_SET)
        for t in tensors:
            stream.seek(align_up(t.size, alignment), io.SEEK_CUR)
        logger.debug(
            "GGUF data section at {start} (alignment {a}), ends at {end}",
            start=data_start,
            a=alignment,
            end=stream.offset,
        )

        return DecodedModel(container=container, kv=kv, tensor_infos=tensors)
