"""Command-line interface for the KiXtart indenter."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kixtart.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    indent_offset: int
    check: bool
    index: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="kixtart",
        description="Reindent, check and index KiXtart scripts",
    )
    p.add_argument("input", help="Input .kix file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--offset",
        type=int,
        default=None,
        metavar="N",
        help="Columns per indentation level (default: 4)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover kixtart.toml)",
    )
    p.add_argument("--check", action="store_true", help="Report malformed macros")
    p.add_argument("--index", action="store_true", help="List functions and labels")
    p.add_argument("--debug", action="store_true", help="Dump classified tokens to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "kixtart.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"{path}: {exc}") from exc


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: default < config file < CLI flags.
    """
    from kixtart.indent import DEFAULT_INDENT_OFFSET, check_indent_offset

    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    indent_offset = DEFAULT_INDENT_OFFSET
    cfg_indent = config.get("indent")
    if isinstance(cfg_indent, dict) and "offset" in cfg_indent:
        indent_offset = check_indent_offset(cfg_indent["offset"])
    if args.offset is not None:
        indent_offset = check_indent_offset(args.offset)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        indent_offset=indent_offset,
        check=args.check,
        index=args.index,
        debug=args.debug,
    )


def format_index(source: str) -> str:
    """Render the function and label index of *source* as text."""
    from kixtart.buffer import Buffer
    from kixtart.index import build_index

    buffer = Buffer(source)
    index = build_index(buffer)
    out: list[str] = []
    for title, entries in (("Functions", index.functions), ("Labels", index.labels)):
        out.append(f"{title}:\n")
        for entry in entries:
            line = buffer.line_of(entry.position) + 1
            out.append(f"  {entry.name} (line {line})\n")
    return "".join(out)


def process_file(options: CliOptions) -> tuple[str, int]:
    """Read a script and produce the output text and exit code."""
    from kixtart.buffer import Buffer
    from kixtart.debug import dump_tokens
    from kixtart.errors import collect_warnings
    from kixtart.indent import reindent

    with open(options.input_file, encoding="utf-8", newline="") as f:
        source = f.read()
    logger.debug("read %d characters from %s", len(source), options.input_file)

    if options.debug:
        dump_tokens(Buffer(source), file=sys.stderr)

    if options.check:
        warnings = collect_warnings(Buffer(source))
        text = "".join(w.format(str(options.input_file)) + "\n" for w in warnings)
        return text, 1 if warnings else 0

    if options.index:
        return format_index(source), 0

    return reindent(source, options.indent_offset), 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        options = resolve_options(args)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        text, code = process_file(options)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.output_file:
        with open(options.output_file, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    else:
        sys.stdout.write(text)

    return code
