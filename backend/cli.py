"""Focus Board CLI — outline, chunk, and dev server.

Usage:
    python cli.py outline FILE [-o OUT]                 Build a Markdown ruleset
    python cli.py chunks FILE [--max-chars N]
                              [--format json|jsonl] [-o OUT]
                                                        Build compendium chunks
    python cli.py dev                                   Start uvicorn with hot-reload
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger("focus-cli")


def _read_source(path_arg: str) -> str:
    """Read FILE as UTF-8, or stdin when FILE is ``-``."""
    if path_arg == "-":
        return sys.stdin.read()
    path = Path(path_arg)
    if not path.is_file():
        logger.error(f"File not found: {path}")
        sys.exit(1)
    return path.read_text(encoding="utf-8")


def _write_output(out: str | None, default_name: str, content: str) -> None:
    """Print *content*, or write it to *out* (a directory gets *default_name*)."""
    if not out:
        print(content)
        return

    target = Path(out)
    if target.is_dir():
        target = target / default_name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    logger.info(f"Wrote {target}")


def cmd_outline(args):
    """Convert loose notes into a Markdown outline."""
    from exporters import OUTLINE_FILENAME
    from outline import structure

    markdown = structure(_read_source(args.file))
    if not markdown:
        logger.error("Nothing to export — input is empty")
        sys.exit(1)
    _write_output(args.output, OUTLINE_FILENAME, markdown)


def cmd_chunks(args):
    """Split a corpus into annotated chunks and serialize them."""
    from chunker import InvalidChunkSizeError, segment
    from exporters import UnsupportedFormatError, export_chunks
    from settings import settings

    max_chars = args.max_chars if args.max_chars is not None else settings.KCS_MAX_CHUNK_CHARS
    fmt = args.format or settings.KCS_EXPORT_FORMAT
    try:
        chunks = segment(_read_source(args.file), max_chars)
    except InvalidChunkSizeError as e:
        logger.error(str(e))
        sys.exit(1)
    if not chunks:
        logger.error("Nothing to export — input is empty")
        sys.exit(1)

    try:
        filename, body = export_chunks(chunks, fmt)
    except UnsupportedFormatError as e:
        logger.error(str(e))
        sys.exit(1)
    logger.info(f"{len(chunks)} chunk(s), max {max_chars} chars")
    _write_output(args.output, filename, body)


def cmd_dev(args):
    """Start uvicorn development server with hot-reload."""
    import subprocess

    from settings import settings

    host = args.host or settings.HOST
    port = args.port or settings.PORT

    backend_dir = Path(__file__).resolve().parent
    logger.info(f"Starting dev server at http://{host}:{port}")
    subprocess.run(
        [
            sys.executable, "-m", "uvicorn",
            "main:app",
            "--host", host,
            "--port", str(port),
            "--reload",
        ],
        cwd=str(backend_dir),
        check=False,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="focus",
        description="Eisenhower focus board — ruleset and compendium tools",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands")

    # outline
    p_outline = sub.add_parser("outline", help="Structure notes into a Markdown ruleset")
    p_outline.add_argument("file", help="Source text file ('-' for stdin)")
    p_outline.add_argument("-o", "--output", help="Output file or directory (default: stdout)")

    # chunks
    p_chunks = sub.add_parser("chunks", help="Split text into knowledge compendium chunks")
    p_chunks.add_argument("file", help="Source text file ('-' for stdin)")
    p_chunks.add_argument("--max-chars", type=int, help="Character budget per chunk (default: 700)")
    p_chunks.add_argument("--format", choices=["json", "jsonl"], help="Export format (default: json)")
    p_chunks.add_argument("-o", "--output", help="Output file or directory (default: stdout)")

    # dev
    p_dev = sub.add_parser("dev", help="Start development server")
    p_dev.add_argument("--host", help="Bind host")
    p_dev.add_argument("--port", type=int, help="Bind port")

    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "outline":
        cmd_outline(args)
    elif args.command == "chunks":
        cmd_chunks(args)
    elif args.command == "dev":
        cmd_dev(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
