"""
Offset-tracking seekable stream over a bytes-like buffer.

The buffer itself is never copied; each read copies only the requested field.
"""

from __future__ import annotations

import io
import struct
from typing import Union

from ggml_container.model_formats.ggml.errors import TruncatedStreamError

Buffer = Union[bytes, bytearray, memoryview]


class ReadSeekOffset:
    """Sequential reader that owns the current absolute offset.

    Seeking past the end is allowed (like a regular file); the next read
    from there raises :class:`TruncatedStreamError`.
    """

    __slots__ = ("_mv", "_offset")

    def __init__(self, buf: Buffer, offset: int = 0):
        self._mv = buf if isinstance(buf, memoryview) else memoryview(buf)
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    def __len__(self) -> int:
        return len(self._mv)

    def at_eof(self) -> bool:
        """True when no byte is left at the current offset."""
        return self._offset >= len(self._mv)

    def read(self, n: int) -> bytes:
        """Return exactly ``n`` bytes and advance the offset."""
        if n < 0:
            raise ValueError(f"negative read size: {n}")
        start = self._offset
        chunk = bytes(self._mv[start : start + n])
        if len(chunk) != n:
            raise TruncatedStreamError(start, n, len(chunk))
        self._offset = start + n
        return chunk

    def unpack(self, fmt: str) -> tuple:
        """Read and unpack one ``struct`` format from the stream."""
        return struct.unpack(fmt, self.read(struct.calcsize(fmt)))

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            pos = offset
        elif whence == io.SEEK_CUR:
            pos = self._offset + offset
        elif whence == io.SEEK_END:
            pos = len(self._mv) + offset
        else:
            raise ValueError(f"invalid whence: {whence}")
        if pos < 0:
            raise ValueError(f"negative seek position: {pos}")
        self._offset = pos
        return pos

    def tell(self) -> int:
        return self._offset
