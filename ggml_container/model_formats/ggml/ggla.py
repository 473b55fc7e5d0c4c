"""
GGLA (LoRA adapter) decoder.
"""

from __future__ import annotations

import io
from typing import Dict, List

from loguru import logger

from ggml_container.model_formats.ggml.errors import FormatVersionError
from ggml_container.model_formats.ggml.ggml import Container, DecodedModel, Tensor
from ggml_container.model_formats.ggml.gguf_values import GGUFValue, GGUFValueType

GGLA_VERSION = 1
GGLA_ALIGNMENT = 32

KEY_RANK = "r"
KEY_ALPHA = "alpha"


class GGLADecoder:
    """Decoder for GGLA containers. Always little-endian, version 1 only."""

    def name(self) -> str:
        return "ggla"

    def decode(self, stream) -> DecodedModel:
        """Decode a GGLA container; ``stream`` is positioned after the magic.

        Tensor entries are read until the stream is exhausted at an entry
        boundary. Running out of bytes inside an entry raises
        :class:`TruncatedStreamError`.
        """
        (version,) = stream.unpack("<I")
        if version != GGLA_VERSION:
            raise FormatVersionError(self.name(), version)

        r, alpha = stream.unpack("<II")
        kv: Dict[str, GGUFValue] = {
            KEY_RANK: GGUFValue(GGUFValueType.UINT32, r),
            KEY_ALPHA: GGUFValue(GGUFValueType.UINT32, alpha),
        }

        tensors: List[Tensor] = []
        while not stream.at_eof():
            n_dims, name_size, kind = stream.unpack("<III")
            shape = stream.unpack(f"<{n_dims}I") if n_dims else ()
            # stored innermost-first on disk
            shape = tuple(reversed(shape))
            name = stream.read(name_size).decode("utf-8", "replace")

            offset = stream.seek((stream.offset + GGLA_ALIGNMENT - 1) & -GGLA_ALIGNMENT, io.SEEK_SET)
            t = Tensor(name=name, kind=kind, shape=shape, offset=offset)
            stream.seek(t.size, io.SEEK_CUR)
            tensors.append(t)

        logger.debug("GGLA r={r} alpha={alpha}: {n} tensors", r=r, alpha=alpha, n=len(tensors))
        return DecodedModel(
            container=Container(format=self.name(), byte_order="LE", version=version),
            kv=kv,
            tensor_infos=tensors,
        )
