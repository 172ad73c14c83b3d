"""Command-line interface for chainindent."""

from __future__ import annotations

import argparse
import dataclasses
import difflib
import sys
from dataclasses import dataclass
from pathlib import Path

from chainindent.config import FixerConfig, config_from_mapping, load_config_file, parse_line_ending
from chainindent.errors import ConfigError, LexError, StructureError


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_files: list[Path]
    output_file: Path | None
    in_place: bool
    check: bool
    diff: bool
    config: FixerConfig
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="chainindent",
        description="Indent fluent method chains in PHP files",
    )
    p.add_argument("inputs", nargs="+", metavar="FILE", help="PHP file(s) to fix")
    p.add_argument("-o", "--output", help="Output file for a single input (default: stdout)")
    p.add_argument("-i", "--in-place", action="store_true", help="Rewrite input files in place")
    p.add_argument(
        "--check",
        action="store_true",
        help="Report files that would change and exit 1; write nothing",
    )
    p.add_argument("--diff", action="store_true", help="Print a unified diff; write nothing")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover chainindent.toml)",
    )
    p.add_argument(
        "--indent",
        metavar="UNIT",
        help="One indentation level: a number of spaces, 'tab', or a literal string",
    )
    p.add_argument(
        "--line-ending",
        choices=["lf", "crlf"],
        default=None,
        help="Line ending for inserted line breaks (default: lf)",
    )
    p.add_argument(
        "--open-marker",
        action="append",
        default=[],
        metavar="NAME",
        help="Call name that opens a nested block (repeatable, replaces configured set)",
    )
    p.add_argument(
        "--close-marker",
        action="append",
        default=[],
        metavar="NAME",
        help="Call name that closes a nested block (repeatable, replaces configured set)",
    )
    p.add_argument(
        "--no-split",
        action="store_true",
        help="Leave single-line chains containing marker calls on one line",
    )
    p.add_argument("--debug", action="store_true", help="Dump tokens to stderr")
    return p


def parse_indent_arg(s: str) -> str:
    """Turn an --indent value into the literal indentation unit."""
    if s.isdigit():
        return " " * int(s)
    if s.lower() in ("tab", "\\t"):
        return "\t"
    return s


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_files = [Path(p) for p in args.inputs]
    input_dir = input_files[0].parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = config_from_mapping(load_config_file(config_path, input_dir))

    changes: dict[str, object] = {}
    if args.indent is not None:
        changes["indent"] = parse_indent_arg(args.indent)
    if args.line_ending is not None:
        changes["line_ending"] = parse_line_ending(args.line_ending)
    if args.open_marker:
        changes["open_markers"] = frozenset(args.open_marker)
    if args.close_marker:
        changes["close_markers"] = frozenset(args.close_marker)
    if args.no_split:
        changes["split_marker_chains"] = False
    if changes:
        config = dataclasses.replace(config, **changes)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_files=input_files,
        output_file=output_file,
        in_place=args.in_place,
        check=args.check,
        diff=args.diff,
        config=config,
        debug=args.debug,
    )


def read_source(path: Path) -> str:
    # newline="" keeps \r\n intact
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def write_source(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def fix_file(path: Path, options: CliOptions) -> tuple[str, str]:
    """Read and fix one file, returning (original, fixed) source."""
    from chainindent.buffer import TokenBuffer
    from chainindent.debug import dump_tokens
    from chainindent.fixer import MethodChainingIndentationFixer
    from chainindent.lexer import tokenize

    source = read_source(path)
    tokens = TokenBuffer(tokenize(source, str(path)), source)

    fixer = MethodChainingIndentationFixer(options.config)
    if fixer.is_candidate(tokens):
        fixer.fix(tokens)

    if options.debug:
        dump_tokens(tokens, file=sys.stderr)

    return source, tokens.generate_code()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.output and (len(args.inputs) > 1 or args.in_place):
        print("error: --output takes exactly one input and excludes --in-place", file=sys.stderr)
        return 2

    try:
        options = resolve_options(args)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    failed = False
    changed = False
    report_only = options.check or options.diff

    for path in options.input_files:
        try:
            source, fixed = fix_file(path, options)
        except (LexError, StructureError) as exc:
            print(exc.format(str(path)), file=sys.stderr)
            failed = True
            continue
        except OSError as exc:
            print(f"error: {exc}", file=sys.stderr)
            failed = True
            continue

        if fixed != source:
            changed = True

        if options.diff and fixed != source:
            sys.stdout.writelines(
                difflib.unified_diff(
                    source.splitlines(keepends=True),
                    fixed.splitlines(keepends=True),
                    fromfile=f"{path} (original)",
                    tofile=f"{path} (fixed)",
                )
            )
        if options.check and fixed != source:
            print(f"would reformat {path}", file=sys.stderr)
        if report_only:
            continue

        if options.in_place:
            if fixed != source:
                write_source(path, fixed)
                print(f"reformatted {path}", file=sys.stderr)
        elif options.output_file:
            write_source(options.output_file, fixed)
        else:
            sys.stdout.write(fixed)

    if failed:
        return 2
    if report_only and changed:
        return 1
    return 0
