"""CLI entrypoints for waymark commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .checker import CheckFailure, run_check_command
from .config import ConfigError, WaymarkConfig, load_config
from .docstrings import detect_docstring, extract_summary
from .insertion import find_tldr_insertion_point
from .languages import language_for_path
from .logging import configure_logging
from .parsers import ParseFn, ParserResolutionError, resolve_parser
from .repo_scanner import expand_paths
from .report import format_check_report, format_check_report_json
from .seed import OUTPUT_JSON, OUTPUT_JSONL, OUTPUT_TEXT, build_seed_options, format_seed_output, run_seed

EXIT_ISSUES = 1
EXIT_TOOLING_ERROR = 2


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_language_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--language",
        help="Language identifier to use instead of detecting it from the file name.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="waymark",
        description="Check and maintain waymark annotations across a repository.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        help="Path to .waymark.yml or the directory holding it (defaults to the current directory).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        help="Validate canonicals, relations, TLDRs and signals across files.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    check_parser.add_argument("paths", nargs="*", help="Files or directories to check.")
    check_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on warnings as well as errors.",
    )
    check_parser.add_argument("--json", action="store_true", help="Emit the report as JSON.")

    seed_parser = subparsers.add_parser(
        "seed",
        help="Suggest TLDR waymarks from docstrings or codetags.",
    )
    _add_verbose_option(seed_parser, suppress_default=True)
    seed_parser.add_argument("paths", nargs="*", help="Files or directories to scan.")
    seed_parser.add_argument(
        "--docstrings", action="store_true", help="Use file-level docstrings as candidates."
    )
    seed_parser.add_argument(
        "--codetags", action="store_true", help="Use TODO/FIXME/NOTE/HACK comments as candidates."
    )
    seed_parser.add_argument(
        "--all", dest="all_sources", action="store_true", help="Use every candidate source."
    )
    output_group = seed_parser.add_mutually_exclusive_group()
    output_group.add_argument("--json", action="store_true", help="Emit candidates as JSON.")
    output_group.add_argument("--jsonl", action="store_true", help="Emit one JSON object per line.")

    insertion_parser = subparsers.add_parser(
        "insertion-point",
        help="Print the line where a TLDR waymark can be inserted.",
    )
    _add_verbose_option(insertion_parser, suppress_default=True)
    insertion_parser.add_argument("file", help="Source file to inspect.")
    _add_language_option(insertion_parser)

    docstring_parser = subparsers.add_parser(
        "docstring",
        help="Show the first docstring or doc comment of a file.",
    )
    _add_verbose_option(docstring_parser, suppress_default=True)
    docstring_parser.add_argument("file", help="Source file to inspect.")
    _add_language_option(docstring_parser)
    docstring_parser.add_argument("--json", action="store_true", help="Emit the docstring as JSON.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing waymark operations.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None, *, parse: Optional[ParseFn] = None) -> None:
    """CLI entrypoint for waymark commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        config = load_config(Path(args.config) if args.config else Path.cwd())
    except ConfigError as exc:
        parser.exit(EXIT_TOOLING_ERROR, f"waymark: {exc}\n")

    if args.command == "check":
        _run_check(parser, args, config, parse)
    elif args.command == "seed":
        _run_seed(parser, args, config, parse)
    elif args.command == "insertion-point":
        _run_insertion_point(parser, args, config, parse)
    elif args.command == "docstring":
        _run_docstring(parser, args, config)
    elif args.command == "serve":
        _run_serve(parser, args)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(EXIT_TOOLING_ERROR, "Unknown command\n")


def _run_check(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: WaymarkConfig,
    parse: Optional[ParseFn],
) -> None:
    result = run_check_command(
        args.paths, config, parse=parse, strict=True if args.strict else None
    )
    if isinstance(result, CheckFailure):
        parser.exit(EXIT_TOOLING_ERROR, f"waymark: {result.message}\n")

    print(format_check_report_json(result) if args.json else format_check_report(result))
    if not result.passed:
        parser.exit(EXIT_ISSUES)


def _run_seed(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: WaymarkConfig,
    parse: Optional[ParseFn],
) -> None:
    options = build_seed_options(
        docstrings=args.docstrings,
        codetags=args.codetags,
        all_sources=args.all_sources,
        config=config.seed,
    )
    parser_fn = _resolve(parser, config, parse)
    files = expand_paths(args.paths, config)
    run = run_seed(files, options, parse=parser_fn, config=config)

    output = OUTPUT_JSON if args.json else OUTPUT_JSONL if args.jsonl else OUTPUT_TEXT
    print(format_seed_output(run, output))
    if run.exit_code:
        parser.exit(run.exit_code)


def _run_insertion_point(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: WaymarkConfig,
    parse: Optional[ParseFn],
) -> None:
    language = _language_for(parser, args, config)
    content = _read_source(parser, args.file)
    parser_fn = _resolve(parser, config, parse)
    try:
        line = find_tldr_insertion_point(content, language, parse=parser_fn, file=args.file)
    except Exception as exc:
        parser.exit(EXIT_TOOLING_ERROR, f"waymark: failed to parse {args.file}: {exc}\n")
    if line is None:
        parser.exit(EXIT_ISSUES, f"waymark: no safe TLDR insertion point in {args.file}\n")
    print(line)


def _run_docstring(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: WaymarkConfig
) -> None:
    language = _language_for(parser, args, config)
    content = _read_source(parser, args.file)
    info = detect_docstring(content, language)
    if info is None:
        parser.exit(EXIT_ISSUES, f"waymark: no docstring found in {args.file}\n")

    summary = extract_summary(info)
    if args.json:
        payload = info.to_dict()
        payload["summary"] = summary
        print(json.dumps(payload, indent=2))
        return
    print(f"{args.file}:{info.start_line}-{info.end_line} {info.kind} ({info.format})")
    print(f"summary: {summary}")


def _run_serve(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    from .service import run_service

    try:
        run_service(host=args.host, port=args.port)
    except RuntimeError as exc:
        parser.exit(EXIT_TOOLING_ERROR, f"waymark: {exc}\n")


def _resolve(
    parser: argparse.ArgumentParser, config: WaymarkConfig, parse: Optional[ParseFn]
) -> ParseFn:
    try:
        return resolve_parser(parse, reference=config.parser)
    except ParserResolutionError as exc:
        parser.exit(EXIT_TOOLING_ERROR, f"waymark: {exc}\n")


def _language_for(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: WaymarkConfig
) -> str:
    language = args.language or language_for_path(args.file, config.languages.extensions)
    if not language:
        parser.exit(
            EXIT_TOOLING_ERROR,
            f"waymark: cannot determine the language of {args.file}; pass --language\n",
        )
    return language


def _read_source(parser: argparse.ArgumentParser, file: str) -> str:
    try:
        return Path(file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        parser.exit(EXIT_TOOLING_ERROR, f"waymark: cannot read {file}: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
