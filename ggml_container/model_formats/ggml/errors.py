"""
Error taxonomy shared by the GGUF and GGLA decoders.
"""

from __future__ import annotations


class ModelDecodeError(Exception):
    """Raised when a model container cannot be decoded."""


class FormatVersionError(ModelDecodeError):
    """Raised for an unsupported container version tag."""

    def __init__(self, format_name: str, version: int):
        super().__init__(f"unsupported {format_name} version: {version}")
        self.format_name = format_name
        self.version = version


class UnknownTypeError(ModelDecodeError):
    """Raised for an unrecognized GGUF value or array element type tag."""

    def __init__(self, tag: int, *, array: bool = False):
        what = "array type" if array else "type"
        super().__init__(f"invalid {what}: {tag}")
        self.tag = tag
        self.array = array


class UnknownQuantizationError(ModelDecodeError):
    """Raised when a tensor kind is missing from the size table."""

    def __init__(self, kind: int):
        super().__init__(f"unknown tensor kind: {kind}")
        self.kind = kind


class UnsupportedFormatError(ModelDecodeError):
    """Raised when the leading magic does not select a supported decoder."""

    def __init__(self, magic: int, detail: str = "invalid file magic"):
        super().__init__(f"{detail} (0x{magic:08x})")
        self.magic = magic


class TruncatedStreamError(ModelDecodeError, EOFError):
    """Raised when the stream ends before a complete field was read."""

    def __init__(self, offset: int, wanted: int, got: int):
        super().__init__(f"short read at offset {offset}: wanted {wanted} bytes, got {got}")
        self.offset = offset
        self.wanted = wanted
        self.got = got
