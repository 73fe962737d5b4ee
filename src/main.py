# src/main.py - v1
"""CLI entry point: serve, search, index, reindex and init-db commands.

Usage:
    meshsearch serve [--host HOST] [--port PORT]
    meshsearch search "<query>" [--workspace ID]
    meshsearch index <profile_id> --file answers.txt [--name NAME] [--workspace ID]
    meshsearch reindex <profile_id>
    meshsearch init-db
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from meshsearch.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from meshsearch.config.settings import ConfigurationError, load_settings
    from meshsearch.logging.logger import setup_logging_from_settings

    try:
        settings = load_settings(**({"log_level": "DEBUG"} if args.verbose else {}))
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    setup_logging_from_settings(settings)
    args.settings = settings

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="meshsearch",
        description=f"meshsearch v{__version__} - community people search",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- serve ---
    p_serve = subparsers.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=None, help="Bind address (default: API_HOST)")
    p_serve.add_argument("--port", type=int, default=None, help="Port (default: API_PORT)")
    p_serve.set_defaults(func=_cmd_serve)

    # --- search ---
    p_search = subparsers.add_parser("search", help="Run one search and print JSON")
    p_search.add_argument("query", help="Free-text query, e.g. \"quien juega al ajedrez\"")
    p_search.add_argument(
        "-w", "--workspace", default=None,
        help="Workspace id (default: every workspace)",
    )
    p_search.set_defaults(func=_cmd_search)

    # --- index ---
    p_index = subparsers.add_parser("index", help="Create or replace a profile and its chunks")
    p_index.add_argument("profile_id", help="Profile id")
    source = p_index.add_mutually_exclusive_group(required=True)
    source.add_argument("--content", default=None, help="Profile content text")
    source.add_argument("--file", type=Path, default=None, help="Read content from file")
    p_index.add_argument("--name", default=None, help="Display name")
    p_index.add_argument(
        "-w", "--workspace", action="append", default=[],
        help="Workspace to join as active member (repeatable)",
    )
    p_index.set_defaults(func=_cmd_index)

    # --- reindex ---
    p_reindex = subparsers.add_parser(
        "reindex", help="Rebuild a profile's chunks from its stored content",
    )
    p_reindex.add_argument("profile_id", help="Profile id")
    p_reindex.set_defaults(func=_cmd_reindex)

    # --- init-db ---
    p_init = subparsers.add_parser("init-db", help="Create tables and indexes")
    p_init.set_defaults(func=_cmd_init_db)

    return parser


async def _cmd_serve(args: argparse.Namespace) -> int:
    """Serve the HTTP API until interrupted."""
    import uvicorn

    from meshsearch.api.server import create_app

    settings = args.settings
    config = uvicorn.Config(
        create_app(settings),
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        log_config=None,
    )
    await uvicorn.Server(config).serve()
    return 0


async def _cmd_search(args: argparse.Namespace) -> int:
    """Execute one search and print the matches."""
    from meshsearch.api.facade import build_runtime
    from meshsearch.api.models import MatchBody
    from meshsearch.core.errors import SearchPipelineFailure
    from meshsearch.core.models import SearchQuery

    query = SearchQuery(text=args.query, workspace_id=args.workspace)
    async with build_runtime(args.settings) as runtime:
        try:
            response = await runtime.search.search(query)
        except SearchPipelineFailure as exc:
            logger.error("Search failed at %s: %s", exc.stage, exc)
            return 1

    matches = [MatchBody.from_match(m).model_dump(by_alias=True) for m in response.matches]
    print(json.dumps({"matches": matches}, ensure_ascii=False, indent=2))
    return 0


async def _cmd_index(args: argparse.Namespace) -> int:
    """Index one profile from text or a file."""
    from meshsearch.api.facade import build_runtime
    from meshsearch.core.models import Profile, WorkspaceMembership

    if args.file is not None:
        if not args.file.is_file():
            logger.error("File not found: %s", args.file)
            return 1
        content = args.file.read_text(encoding="utf-8")
    else:
        content = args.content

    profile = Profile(
        id=args.profile_id,
        display_name=args.name,
        raw_content=content.strip(),
        memberships=[WorkspaceMembership(workspace_id=w) for w in args.workspace],
    )
    async with build_runtime(args.settings) as runtime:
        result = await runtime.indexer.index_profile(profile)

    print(f"Indexed {result.profile_id}: {result.chunks_indexed} chunks")
    return 0


async def _cmd_reindex(args: argparse.Namespace) -> int:
    """Re-embed one stored profile (e.g. after an embedding model change)."""
    from meshsearch.api.facade import build_runtime
    from meshsearch.core.errors import ProfileNotFoundError

    async with build_runtime(args.settings) as runtime:
        try:
            result = await runtime.indexer.reindex(args.profile_id)
        except ProfileNotFoundError:
            logger.error("Profile not found: %s", args.profile_id)
            return 1

    print(f"Reindexed {result.profile_id}: {result.chunks_indexed} chunks")
    return 0


async def _cmd_init_db(args: argparse.Namespace) -> int:
    """Create the database schema."""
    from meshsearch.api.facade import build_runtime

    async with build_runtime(args.settings, init_schema=True) as runtime:
        logger.info("Schema ready on %s", runtime.database.backend_name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
