"""CLI entry point: python -m webclean [--cli --url URL [options]]

Without ``--cli`` the process runs the line-delimited JSON-RPC server on
stdin/stdout.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from webclean import settings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webfetch-clean",
        description=(
            "Fetch a web page, strip ads, navigation and clutter, and print it\n"
            "as cleaned HTML or Markdown.  Runs a JSON-RPC server on stdio unless\n"
            "--cli is given."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--cli", action="store_true", default=False,
                        help="Run in CLI mode (default: JSON-RPC server mode)")
    parser.add_argument("--url", default="", metavar="URL",
                        help="URL to fetch (required in CLI mode)")
    parser.add_argument("--format", default=settings.DEFAULT_FORMAT,
                        choices=list(settings.OUTPUT_FORMATS),
                        help=f"Output format (default: {settings.DEFAULT_FORMAT})")
    parser.add_argument("--preserve-main", action="store_true", default=False,
                        help="Only preserve <main>/<article> content")
    parser.add_argument("--remove-images", action="store_true", default=False,
                        help="Remove all images")
    parser.add_argument("--timeout", type=int, default=settings.DEFAULT_TIMEOUT, metavar="N",
                        help=f"HTTP timeout in seconds (default: {settings.DEFAULT_TIMEOUT})")
    parser.add_argument("--output", default="", metavar="FILE",
                        help="Write output to FILE (default: stdout)")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=list(settings.LOG_LEVELS),
                        metavar="{" + ",".join(settings.LOG_LEVELS) + "}",
                        help=f"Logging level (default: {settings.LOG_LEVEL})")
    return parser


def _configure_logging(level: str) -> None:
    # stdout carries content / JSON-RPC responses
    logging.basicConfig(level=level, format=settings.LOG_FORMAT, stream=sys.stderr)


def _print_summary(url: str, fmt: str, out_path: Path, chars: int, title: str | None) -> None:
    from rich.console import Console
    from rich.panel import Panel

    console = Console(stderr=True)
    console.print(
        Panel.fit(
            f"[bold cyan]webfetch-clean[/bold cyan]\n"
            f"URL:     [green]{url}[/green]\n"
            f"Title:   {title or '-'}\n"
            f"Format:  {fmt}\n"
            f"Chars:   {chars:,}\n"
            f"Output:  [yellow]{out_path}[/yellow]",
            border_style="cyan",
            title="[bold]Saved[/bold]",
        ),
    )


def _run_cli(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    from webclean.items import CleanOptions
    from webclean.query import process

    if not args.url:
        print("Error: --url is required", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    result = process(
        args.url,
        output_format=args.format,
        options=CleanOptions(
            preserve_main_only=args.preserve_main,
            remove_images=args.remove_images,
        ),
        timeout=args.timeout,
    )
    if result.error:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    if not args.output:
        sys.stdout.write(result.content + "\n")
        return 0

    out_path = Path(args.output)
    try:
        out_path.write_text(result.content, encoding="utf-8")
    except OSError as exc:
        print(f"Error writing to file: {exc}", file=sys.stderr)
        return 1

    _print_summary(args.url, args.format, out_path.resolve(), len(result.content), result.title)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    if args.cli:
        return _run_cli(args, parser)

    from webclean.server import serve

    return serve()


if __name__ == "__main__":
    sys.exit(main())
