"""
Magic sniffing and decoder selection.
"""

from __future__ import annotations

from typing import Union

from loguru import logger

from ggml_container.io.file_reader import LocalFileSource
from ggml_container.io.stream import ReadSeekOffset
from ggml_container.model_formats.ggml.errors import UnsupportedFormatError
from ggml_container.model_formats.ggml.ggla import GGLADecoder
from ggml_container.model_formats.ggml.ggml import GGML
from ggml_container.model_formats.ggml.gguf import GGUFDecoder
from ggml_container.observability import Timer

# Leading four bytes, read as a little-endian u32.
FILE_MAGIC_GGML = 0x67676D6C
FILE_MAGIC_GGMF = 0x67676D66
FILE_MAGIC_GGJT = 0x67676A74
FILE_MAGIC_GGLA = 0x67676C61
FILE_MAGIC_GGUF_LE = 0x46554747
FILE_MAGIC_GGUF_BE = 0x47475546

LEGACY_MAGICS = {
    FILE_MAGIC_GGML: "ggml",
    FILE_MAGIC_GGMF: "ggmf",
    FILE_MAGIC_GGJT: "ggjt",
}

Decoder = Union[GGUFDecoder, GGLADecoder]


def select_decoder(magic: int) -> Decoder:
    if magic == FILE_MAGIC_GGUF_LE:
        return GGUFDecoder("LE")
    if magic == FILE_MAGIC_GGUF_BE:
        return GGUFDecoder("BE")
    if magic == FILE_MAGIC_GGLA:
        return GGLADecoder()
    if magic in LEGACY_MAGICS:
        raise UnsupportedFormatError(magic, f"unsupported legacy format {LEGACY_MAGICS[magic]}")
    raise UnsupportedFormatError(magic)


def decode_ggml(stream: ReadSeekOffset) -> GGML:
    """Sniff the magic at the current offset and decode the container."""
    (magic,) = stream.unpack("<I")
    decoder = select_decoder(magic)
    with Timer(decoder.name()) as t:
        model = decoder.decode(stream)
    logger.debug(
        "{format} decoded in {ms:.2f}ms, {n} tensors",
        format=decoder.name().upper(),
        ms=t.duration_ms,
        n=len(model.tensors()),
    )
    return GGML(model=model, size=stream.offset)


def decode_file(path: str) -> GGML:
    """Memory-map a local file and decode it."""
    with LocalFileSource(path).open() as mf:
        return decode_ggml(ReadSeekOffset(mf.view))
