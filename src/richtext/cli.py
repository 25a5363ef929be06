#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richtext/cli.py
"""Command line interface for richtext.

Decodes a structured text document from a JSON file, optionally resolves its
entry and asset links against a delivery API ``includes`` file, and writes the
result as re-encoded JSON, a tree outline or plain text.

Examples
--------
Re-encode a document::

    $ richtext body.json --indent 2

Show the tree with links resolved::

    $ richtext body.json --includes includes.json --format tree --rich

"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, get_args

from richtext import __version__
from richtext.ast.nodes import (
    Heading,
    Hyperlink,
    Node,
    ResolvedLink,
    ResourceLinkBlock,
    ResourceLinkInline,
    Text,
    get_node_children,
)
from richtext.ast.serialization import decode, document_to_json
from richtext.ast.utils import extract_text
from richtext.constants import (
    EXIT_DECODE_ERROR,
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    OutputFormat,
)
from richtext.exceptions import DecodeError, RichTextError, ValidationError
from richtext.logging_utils import configure_logging
from richtext.options import DecodeOptions, EncodeOptions
from richtext.resolution import MappingResolver

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the richtext command."""
    parser = argparse.ArgumentParser(
        prog="richtext",
        description="Decode, resolve and re-encode structured text documents.",
    )
    parser.add_argument("input", help="Path to a JSON file holding a document object")
    parser.add_argument(
        "--includes",
        metavar="FILE",
        help='JSON file with linked entities, e.g. {"Entry": [...], "Asset": [...]}',
    )
    parser.add_argument("--output", "-o", metavar="FILE", help="Write output to FILE instead of stdout")
    parser.add_argument(
        "--format",
        choices=list(get_args(OutputFormat)),
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument("--indent", type=int, default=None, help="Indentation for JSON output")
    parser.add_argument(
        "--embed-resolved",
        action="store_true",
        help="Write resolved links as their entity JSON instead of link references",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DecodeOptions().max_depth,
        help="Maximum nesting depth of content arrays",
    )
    parser.add_argument("--rich", action="store_true", help="Use rich formatting for tree output")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Shortcut for --log-level DEBUG")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments.

    ``--trace`` takes precedence over ``--verbose``, which takes precedence
    over ``--log-level``.
    """
    if parsed_args.trace:
        log_level = logging.DEBUG
    elif parsed_args.verbose and parsed_args.log_level == "WARNING":
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper())

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _load_json(path: str) -> Any:
    with Path(path).open(encoding="utf-8") as f:
        return json.load(f)


def _describe_node(node: Node) -> str:
    """One-line description of a node for the tree outline."""
    label = node.node_type.value
    if isinstance(node, Text):
        marks = f" [{', '.join(mark.value for mark in node.marks)}]" if node.marks else ""
        return f"{label} {node.value!r}{marks}"
    if isinstance(node, Heading):
        return f"{label} (level {node.level})"
    if isinstance(node, Hyperlink):
        return f"{label} -> {node.uri}"
    if isinstance(node, (ResourceLinkBlock, ResourceLinkInline)):
        target = node.data.target
        state = "resolved" if isinstance(target, ResolvedLink) else "unresolved"
        return f"{label} -> {target.link_type}:{target.id} ({state})"
    return label


def render_tree_outline(node: Node, indent: str = "  ") -> str:
    """Render an indented outline of a tree, one node per line."""
    lines: list[str] = []

    def _add(current: Node, depth: int) -> None:
        lines.append(f"{indent * depth}{_describe_node(current)}")
        for child in get_node_children(current):
            _add(child, depth + 1)

    _add(node, 0)
    return "\n".join(lines)


def should_use_rich_output(args: argparse.Namespace, stream: Any = None) -> bool:
    """Use rich only when requested and writing to a terminal."""
    if not args.rich or args.output:
        return False
    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def _print_rich_tree(node: Node) -> None:
    from rich.console import Console
    from rich.text import Text as RichText
    from rich.tree import Tree

    def _build(current: Node, branch: Tree) -> None:
        for child in get_node_children(current):
            _build(child, branch.add(RichText(_describe_node(child))))

    root = Tree(RichText(_describe_node(node), style="bold"))
    _build(node, root)
    Console().print(root)


def _write_output(text: str, output: Optional[str]) -> None:
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote output to {output}")
    else:
        print(text)


def main(args: list[str] | None = None) -> int:
    """Execute the richtext command.

    Returns
    -------
    int
        Process exit code

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    _setup_logging_level(parsed_args)

    try:
        decode_options = DecodeOptions(max_depth=parsed_args.max_depth)
        encode_options = EncodeOptions(resolved_link_mode="entity" if parsed_args.embed_resolved else "reference")

        data = _load_json(parsed_args.input)
        resolver = MappingResolver.from_includes(_load_json(parsed_args.includes)) if parsed_args.includes else None

        result = decode(data, resolver=resolver, options=decode_options)
        if result.document is None:
            raise ValidationError("Input must be a document object, not a content array", parameter_name="input")
        for link in result.report.unresolved:
            logger.info(f"Unresolved link: {link.link_type} '{link.id}'")

        if parsed_args.format == "tree":
            if should_use_rich_output(parsed_args):
                _print_rich_tree(result.document)
                return EXIT_SUCCESS
            output = render_tree_outline(result.document)
        elif parsed_args.format == "text":
            output = extract_text(result.document)
        else:
            output = document_to_json(result.document, indent=parsed_args.indent, options=encode_options)

        _write_output(output, parsed_args.output)
        return EXIT_SUCCESS

    except (OSError, json.JSONDecodeError) as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR
    except DecodeError as e:
        print(f"Error decoding document: {e}", file=sys.stderr)
        return EXIT_DECODE_ERROR
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except RichTextError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
