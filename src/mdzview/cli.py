"""CLI entry point for mdzview.

Responsibilities (and nothing more):
- Configure structlog
- Build an AppState over the local filesystem
- Dispatch the subcommand
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import structlog

from mdzview import __version__
from mdzview.codec import decompress
from mdzview.config import Settings
from mdzview.controller import OutlineController
from mdzview.errors import ErrorCode, MdzError
from mdzview.local import create_local_state
from mdzview.models.files import FileRef
from mdzview.parser import extract_headings, format_headings

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # stdout carries command output
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _split(path: Path) -> tuple[Path, FileRef]:
    """Use the file's directory as the vault root."""
    resolved = path.resolve()
    return resolved.parent, FileRef(resolved.name)


async def _compress(settings: Settings, path: Path) -> int:
    root, file = _split(path)
    state = create_local_state(root, settings)
    result = await OutlineController(state).compress_file(file)
    if result is None:
        return 1
    print(f"Wrote {root / result.target}")
    return 0


async def _compress_all(settings: Settings, folder: Path) -> int:
    root = folder.resolve()
    state = create_local_state(root, settings)
    results = await OutlineController(state).bulk_compress("")
    for result in results:
        print(f"Wrote {root / result.target}")
    return 0


async def _cat(path: Path) -> int:
    if not path.is_file():
        raise MdzError(
            code=ErrorCode.FILE_NOT_FOUND,
            message=f"File not found: {path}",
            suggestion="Check the path.",
        )
    try:
        data = await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        raise MdzError(
            code=ErrorCode.FILE_UNREADABLE,
            message=f"Cannot read file: {path}",
            suggestion=f"Check the file permissions ({exc.strerror}).",
        ) from exc
    text = decompress(data)
    sys.stdout.write(text)
    return 0


async def _outline(settings: Settings, args: argparse.Namespace) -> int:
    root, file = _split(args.input)
    state = create_local_state(root, settings)
    controller = OutlineController(state)

    if not controller.is_compressed(file):
        raise MdzError(
            code=ErrorCode.NOT_COMPRESSED,
            message=f"Not a .{settings.compression.extension} document: {args.input}",
            suggestion=f"Run 'mdzview compress {args.input}' first.",
        )
    if not state.vault.exists(file):
        raise MdzError(
            code=ErrorCode.FILE_NOT_FOUND,
            message=f"File not found: {args.input}",
            suggestion="Check the path.",
        )

    controller.attach()
    try:
        view = await state.workspace.open_file(file, controller)
        if state.metadata.get(file) is None:
            return 1

        if args.headings:
            print(format_headings(extract_headings(view.text)))
            return 0

        # The panel may be hidden when auto_show is off
        panel = controller.ensure_outline_visible()
        controller.update_outline()
        if args.collapse_all:
            panel.click_collapse_all()
        if args.search:
            panel.input_search(args.search)
        print(panel.render_text())
        return 0
    finally:
        controller.detach()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdzview",
        description="Compress markdown to .mdz and browse the outline of compressed documents.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", action="store_true",
        help="Log debug details to stderr",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_compress = sub.add_parser("compress", help="Compress one markdown file")
    p_compress.add_argument("input", type=Path, help="Markdown file (.md)")

    p_all = sub.add_parser("compress-all", help="Compress every markdown file in a folder")
    p_all.add_argument("folder", type=Path, help="Folder containing .md files")

    p_cat = sub.add_parser("cat", help="Print the decompressed text of a document")
    p_cat.add_argument("input", type=Path, help="Compressed document")

    p_outline = sub.add_parser("outline", help="Print the outline of a compressed document")
    p_outline.add_argument("input", type=Path, help="Compressed document")
    p_outline.add_argument("--search", default="", help="Only show headings containing this text")
    p_outline.add_argument(
        "--collapse-all", action="store_true",
        help="Collapse every heading below level 1",
    )
    p_outline.add_argument(
        "--headings", action="store_true",
        help="Print the plain heading map (line: heading) instead of the tree",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)

    settings = Settings()
    if args.verbose:
        settings.logging.level = "DEBUG"
    _setup_logging(settings)

    try:
        if args.command == "compress":
            code = asyncio.run(_compress(settings, args.input))
        elif args.command == "compress-all":
            code = asyncio.run(_compress_all(settings, args.folder))
        elif args.command == "cat":
            code = asyncio.run(_cat(args.input))
        else:
            code = asyncio.run(_outline(settings, args))
    except MdzError as exc:
        log.debug("command_failed", command=args.command, code=exc.code)
        if settings.logging.format == "json":
            # Keep stderr machine-readable when logs are JSON
            print(json.dumps(exc.to_dict()), file=sys.stderr)
        else:
            print(f"Error: {exc.message}", file=sys.stderr)
            print(exc.suggestion, file=sys.stderr)
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
