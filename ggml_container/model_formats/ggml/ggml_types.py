"""
GGML tensor kinds (including quantization) and their block-packing sizes.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Dict, Iterable, Tuple

from ggml_container.model_formats.ggml.errors import UnknownQuantizationError


class GGMLType(IntEnum):
    """GGML tensor types, including quantization."""

    F32 = 0
    F16 = 1
    Q4_0 = 2
    Q4_1 = 3
    # Removed upstream
    # Q4_2 = 4
    # Q4_3 = 5
    Q5_0 = 6
    Q5_1 = 7
    Q8_0 = 8
    Q8_1 = 9
    Q2_K = 10
    Q3_K = 11
    Q4_K = 12
    Q5_K = 13
    Q6_K = 14
    Q8_K = 15
    IQ2_XXS = 16
    IQ2_XS = 17
    IQ3_XXS = 18
    IQ1_S = 19
    IQ4_NL = 20
    IQ3_S = 21
    IQ2_S = 22
    IQ4_XS = 23
    I8 = 24
    I16 = 25
    I32 = 26
    I64 = 27
    F64 = 28
    IQ1_M = 29
    BF16 = 30


# (elements per block, bytes per block); unquantized kinds use a block of one.
GGML_QUANT_SIZES: Dict[GGMLType, Tuple[int, int]] = {
    GGMLType.F32: (1, 4),
    GGMLType.F16: (1, 2),
    GGMLType.Q4_0: (32, 18),
    GGMLType.Q4_1: (32, 20),
    GGMLType.Q5_0: (32, 22),
    GGMLType.Q5_1: (32, 24),
    GGMLType.Q8_0: (32, 34),
    GGMLType.Q8_1: (32, 36),
    GGMLType.Q2_K: (256, 84),
    GGMLType.Q3_K: (256, 110),
    GGMLType.Q4_K: (256, 144),
    GGMLType.Q5_K: (256, 176),
    GGMLType.Q6_K: (256, 210),
    GGMLType.Q8_K: (256, 292),
    GGMLType.IQ2_XXS: (256, 66),
    GGMLType.IQ2_XS: (256, 74),
    GGMLType.IQ3_XXS: (256, 98),
    GGMLType.IQ1_S: (256, 50),
    GGMLType.IQ4_NL: (32, 18),
    GGMLType.IQ3_S: (256, 110),
    GGMLType.IQ2_S: (256, 82),
    GGMLType.IQ4_XS: (256, 136),
    GGMLType.I8: (1, 1),
    GGMLType.I16: (1, 2),
    GGMLType.I32: (1, 4),
    GGMLType.I64: (1, 8),
    GGMLType.F64: (1, 8),
    GGMLType.IQ1_M: (256, 56),
    GGMLType.BF16: (1, 2),
}


def block_info(kind: int) -> Tuple[int, int]:
    """Return ``(block_size, type_size)`` for a kind code."""
    try:
        return GGML_QUANT_SIZES[GGMLType(kind)]
    except (ValueError, KeyError):
        raise UnknownQuantizationError(kind) from None


def element_count(shape: Iterable[int]) -> int:
    n = 1
    for d in shape:
        n *= d
    return n


def tensor_size(kind: int, shape: Iterable[int]) -> Tuple[int, int]:
    """Return ``(n_elements, n_bytes)`` for a tensor of ``kind`` and ``shape``.

    Quantized kinds pack ``block_size`` elements into ``type_size`` bytes.
    """
    block_size, type_size = block_info(kind)
    n = element_count(shape)
    return n, n * type_size // block_size


def type_name(kind: int) -> str:
    """Display name for a kind code, tolerating unknown codes."""
    try:
        return GGMLType(kind).name
    except ValueError:
        return f"UNKNOWN({kind})"
