from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import FinderConfig, load_config, save_config
from .document import Document
from .engine import DocumentKind
from .errors import ElementFinderError
from .translators import CssExpression

console = Console(soft_wrap=True)

MODES = ("html", "outer", "text", "attr")


def _read_markup(source: str) -> bytes | str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_bytes()


def _load_document(args: argparse.Namespace) -> Document:
    config = load_config(args.config) if args.config else FinderConfig()
    if args.kind:
        config.kind = args.kind
    document = Document.from_config(_read_markup(args.path), config)
    if getattr(args, "css", False):
        document.translator = CssExpression(html=document.kind is DocumentKind.HTML)
    return document


def cmd_query(args: argparse.Namespace) -> int:
    document = _load_document(args)
    if args.mode == "text":
        results = document.value(args.selector)
    elif args.mode == "attr":
        results = document.attribute(args.selector)
    else:
        results = document.html(args.selector, outer=args.mode == "outer")

    if not results:
        console.print("No matches.")
        return 0
    for item in results:
        console.print(item, markup=False, highlight=False)
    return 0


def _parse_fields(raw_fields: list[str]) -> dict[str, str]:
    fields: dict[str, str] = {}
    for raw in raw_fields:
        name, sep, selector = raw.partition("=")
        if not sep or not name.strip() or not selector.strip():
            raise argparse.ArgumentTypeError(f"Field must look like NAME=SELECTOR, got {raw!r}")
        fields[name.strip()] = selector.strip()
    return fields


def cmd_items(args: argparse.Namespace) -> int:
    document = _load_document(args)
    fields = _parse_fields(args.field)
    items = document.get_node_items(args.base, fields)
    if not items:
        console.print("No items found.")
        return 0

    table = Table(title=f"Items matching {escape(args.base)}", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    for name in fields:
        table.add_column(name)
    for index, values in items.items():
        table.add_row(str(index), *[escape((values[name] or "").strip()) for name in fields])
    console.print(table)
    return 0


def cmd_match(args: argparse.Namespace) -> int:
    document = _load_document(args)
    found = document.match(args.pattern, args.group)
    if not found:
        console.print("No matches.")
        return 0
    for idx, value in enumerate(found, start=1):
        console.print(f"{idx:02d}. {value}", markup=False, highlight=False)
    return 0


def cmd_init_config(args: argparse.Namespace) -> int:
    path = Path(args.path)
    if path.exists():
        console.print(f"{path} already exists. Skipping creation.")
        return 0

    save_config(FinderConfig(kind=args.kind or "html"), path)
    console.print(f"Created starter config at {path}")
    return 0


def _add_document_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("path", help="Markup file to read, or '-' for stdin")
    parser.add_argument("--kind", "-k", choices=["html", "xml"], help="Document kind (overrides the config)")
    parser.add_argument("--config", "-c", help="YAML config with kind, options and translator")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query and extract content from HTML or XML documents")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log parser diagnostics and debug output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    query_parser = subparsers.add_parser("query", help="Print the results of a selector")
    _add_document_arguments(query_parser)
    query_parser.add_argument("selector", help="Selector, XPath unless --css or the config says otherwise")
    query_parser.add_argument("--mode", "-m", choices=MODES, default="html", help="What to extract from each match")
    query_parser.add_argument("--css", action="store_true", help="Treat the selector as CSS")
    query_parser.set_defaults(func=cmd_query)

    items_parser = subparsers.add_parser("items", help="Extract one record per repeated element")
    _add_document_arguments(items_parser)
    items_parser.add_argument("base", help="Selector for the repeated element")
    items_parser.add_argument(
        "--field",
        "-f",
        action="append",
        default=[],
        required=True,
        help="NAME=SELECTOR evaluated inside each item (repeatable)",
    )
    items_parser.add_argument("--css", action="store_true", help="Treat selectors as CSS")
    items_parser.set_defaults(func=cmd_items)

    match_parser = subparsers.add_parser("match", help="Run a regular expression over the document")
    _add_document_arguments(match_parser)
    match_parser.add_argument("pattern", help="Python regular expression")
    match_parser.add_argument("--group", "-g", type=int, default=1, help="Capture group to print")
    match_parser.set_defaults(func=cmd_match)

    init_parser = subparsers.add_parser("init-config", help="Create a starter YAML config")
    init_parser.add_argument("--path", "-p", default="element_finder.yaml", help="Where to create the file")
    init_parser.add_argument("--kind", "-k", choices=["html", "xml"], help="Default document kind")
    init_parser.set_defaults(func=cmd_init_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    try:
        return args.func(args)
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/red] {escape(str(exc.filename or exc))}")
        return 1
    except argparse.ArgumentTypeError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return 2
    except (ElementFinderError, ValueError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
