# ggml_container/reporting/json_reporter.py
"""
JSON reporting utilities.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from ggml_container.model_formats.ggml.ggml import GGML
from ggml_container.observability import to_dict


def to_json_dict(ggml: GGML) -> Dict[str, Any]:
    """Convert a decoded container to a JSON-serializable dict."""
    model = ggml.model
    return {
        "container": to_dict(model.container),
        "size": ggml.size,
        "kv_count": model.kv_count(),
        "tensor_count": model.tensor_count(),
        "metadata": to_dict(model.metadata()),
        "tensors": [
            dict(to_dict(t), type=t.kind_name, n_elements=t.n_elements, size=t.size)
            for t in model.tensors()
        ],
    }


def write_json(ggml: GGML, path: str) -> None:
    """Write report to a file as pretty JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_json_dict(ggml), f, indent=2)
