# ggml_container/reporting/console.py
"""
Console reporting functions for decoded containers.
"""
from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ggml_container.model_formats.ggml.ggml import GGML
from ggml_container.model_formats.ggml.gguf_values import GGUFValue

console = Console()

MAX_VALUE_WIDTH = 70


def _format_value(v: GGUFValue) -> str:
    if v.is_array:
        count = len(v.value)
        preview = f"[{', '.join(map(str, v.value[:3]))}{', ...' if count > 3 else ''}]"
        value_str = f"Array, Count={count}, Preview={preview}"
    elif isinstance(v.value, float):
        value_str = f"{v.value:.6g}"
    else:
        value_str = str(v.value)

    # Truncate long strings to keep the table clean
    if len(value_str) > MAX_VALUE_WIDTH:
        value_str = value_str[: MAX_VALUE_WIDTH - 3] + "..."
    return value_str


def render_summary(ggml: GGML, path: Optional[str] = None) -> None:
    """Render a high-level summary table."""
    model = ggml.model
    c = model.container
    t = Table(title="GGML Container Summary", box=box.SIMPLE_HEAVY)
    t.add_column("Field", style="bold")
    t.add_column("Value")
    if path is not None:
        t.add_row("Path", path)
    t.add_row("Format", c.format)
    t.add_row("Version", f"v{c.version} ({c.byte_order})")
    t.add_row("KV Count", str(model.kv_count()))
    t.add_row("Tensor Count", str(model.tensor_count()))
    t.add_row("Size (bytes)", str(ggml.size))
    console.print(t)


def render_metadata(ggml: GGML) -> None:
    kv = ggml.model.metadata()
    if not kv:
        return
    table = Table(title="Metadata", box=box.ROUNDED, show_lines=False, title_style="bold magenta")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Type", style="yellow")
    table.add_column("Value", style="white")
    for key in sorted(kv):
        v = kv[key]
        table.add_row(escape(key), v.type.name, escape(_format_value(v)))
    console.print(table)


def render_tensors(ggml: GGML) -> None:
    tensors = ggml.model.tensors()
    if not tensors:
        return
    table = Table(title="Tensors", box=box.ROUNDED, show_lines=False, title_style="bold magenta")
    table.add_column("Index", justify="right", style="dim")
    table.add_column("Tensor Name", style="cyan", no_wrap=True)
    table.add_column("GGML Type", justify="left", style="yellow")
    table.add_column("Shape", justify="left", style="green")
    table.add_column("Offset", justify="right", style="white")
    table.add_column("Size", justify="right", style="white")

    # Declaration order, not offset order
    for index, t in enumerate(tensors, start=1):
        table.add_row(
            str(index),
            escape(t.name),
            t.kind_name,
            str(list(t.shape)),
            str(t.offset),
            str(t.size),
        )
    console.print(table)


def render_report(ggml: GGML, path: Optional[str] = None) -> None:
    """Render the full console report."""
    render_summary(ggml, path)
    render_metadata(ggml)
    render_tensors(ggml)
