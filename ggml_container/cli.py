# ggml_container/cli.py
"""
cli.py

Rich console CLI:
- inspect: decode a .gguf or .ggla file, print summary, metadata and tensor
           catalog; optionally write a JSON report.
- version: show the package version.
"""
from __future__ import annotations

import argparse
import os
from typing import Optional

from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from ggml_container import __version__
from ggml_container.logging import configure_logging
from ggml_container.model_formats.ggml.dispatch import decode_file
from ggml_container.model_formats.ggml.errors import ModelDecodeError
from ggml_container.reporting.console import render_report
from ggml_container.reporting.json_reporter import write_json

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ggmlc",
        description="Decode GGUF and GGLA model containers without reading tensor data.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    sub = p.add_subparsers(dest="cmd", title="Available Commands", metavar="<command>")

    sp_inspect = sub.add_parser("inspect", help="Decode a local .gguf or .ggla file")
    sp_inspect.add_argument("path", help="Path to model file")
    sp_inspect.add_argument("--debug", action="store_true", help="Enable debug logging")
    sp_inspect.add_argument(
        "--json-out", type=str, default=None, help="Write JSON report to this path"
    )

    sub.add_parser("version", help="Show the version of ggml-container")

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "version":
        console.print(f"ggml-container version {__version__}")
        return 0

    if args.cmd == "inspect":
        configure_logging(debug=args.debug)
        path = args.path
        if not os.path.exists(path):
            console.print(f"[red]File not found:[/red] {path}")
            return 2

        try:
            ggml = decode_file(path)
        except ModelDecodeError as e:
            logger.error("Failed to decode {path}: {error}", path=path, error=e)
            console.print(Panel(f"[bold]Result:[/bold] [red]FAILED[/red] {escape(str(e))}", style="bold cyan"))
            return 2

        console.print(Panel("[bold]Result:[/bold] [green]OK[/green]", style="bold cyan"))
        render_report(ggml, path)

        if args.json_out:
            write_json(ggml, args.json_out)
            console.print(f"[dim]Wrote JSON report → {args.json_out}[/dim]")

        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
