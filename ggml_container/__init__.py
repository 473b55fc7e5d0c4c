# ggml_container/__init__.py
"""
ggml_container
==============

Pure-Python decoders for GGUF model files and GGLA LoRA adapters: typed
metadata, tensor catalogs and data-section offsets, without reading tensor
payloads.
"""
from __future__ import annotations

from importlib.metadata import version as _pkg_version

from loguru import logger

__all__ = ["__version__"]

try:
    # Read version dynamically from installed package metadata
    __version__: str = _pkg_version("ggml-container")
except Exception:  # pragma: no cover - fallback for development environments
    __version__ = "0.0.0-dev"

# Library default: silent until the application calls configure_logging().
logger.disable(__name__)

