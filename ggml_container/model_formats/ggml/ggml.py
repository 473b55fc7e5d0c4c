"""
Structures shared by the GGUF and GGLA decoders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from ggml_container.model_formats.ggml.ggml_types import element_count, tensor_size, type_name
from ggml_container.model_formats.ggml.gguf_values import GGUFValue

# Keys with a fixed meaning in the metadata store.
KEY_ALIGNMENT = "general.alignment"
KEY_PARAMETER_COUNT = "general.parameter_count"
KEY_CHAT_TEMPLATE = "tokenizer.chat_template"

DEFAULT_ALIGNMENT = 32


@dataclass(frozen=True)
class Container:
    """Outer header of a model file."""

    format: str  # 'gguf' or 'ggla'
    byte_order: str  # 'LE' or 'BE'
    version: int
    n_tensors: Optional[int] = None  # header-declared (GGUF only)
    n_kv: Optional[int] = None  # header-declared (GGUF only)


@dataclass(frozen=True)
class Tensor:
    name: str
    kind: int
    shape: Tuple[int, ...]
    offset: int  # GGUF: relative to data section; GGLA: absolute

    @property
    def n_elements(self) -> int:
        """Total number of elements in the tensor."""
        return element_count(self.shape)

    @property
    def parameters(self) -> int:
        return self.n_elements

    @property
    def size(self) -> int:
        """Byte footprint of the tensor payload."""
        return tensor_size(self.kind, self.shape)[1]

    @property
    def kind_name(self) -> str:
        return type_name(self.kind)


@dataclass(frozen=True)
class DecodedModel:
    """Result of one successful decode call; read-only once built."""

    container: Container
    kv: Mapping[str, GGUFValue] = field(default_factory=dict)
    tensor_infos: Tuple[Tensor, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "kv", MappingProxyType(dict(self.kv)))
        object.__setattr__(self, "tensor_infos", tuple(self.tensor_infos))

    def metadata(self) -> Mapping[str, GGUFValue]:
        return self.kv

    def tensors(self) -> Tuple[Tensor, ...]:
        return self.tensor_infos

    def tensor_count(self) -> int:
        if self.container.n_tensors is not None:
            return self.container.n_tensors
        return len(self.tensor_infos)

    def kv_count(self) -> int:
        if self.container.n_kv is not None:
            return self.container.n_kv
        return len(self.kv)

    def values(self) -> Dict[str, Any]:
        """Plain ``key -> python value`` view of the metadata store."""
        return {k: v.value for k, v in self.kv.items()}


@dataclass(frozen=True)
class GGML:
    """A decoded container plus the stream offset reached after decoding."""

    model: DecodedModel
    size: int

    @property
    def format(self) -> str:
        return self.model.container.format
