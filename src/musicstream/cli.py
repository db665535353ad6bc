"""
musicstream CLI - Entry point for serving the web API and maintenance tasks
"""

import argparse
import sys
from typing import Optional

from musicstream import __version__


def run_serve(host: Optional[str], port: Optional[int], reload: bool) -> int:
    """Run the FastAPI backend under uvicorn.

    Args:
        host: Bind address, defaults to the configured server host
        port: Bind port, defaults to the configured server port
        reload: Restart on source changes

    Returns:
        Exit code
    """
    import uvicorn

    from musicstream.core.config import load_config

    config = load_config()
    uvicorn.run(
        "web.backend.main:app",
        host=host or config.server.host,
        port=port or config.server.port,
        reload=reload or config.server.auto_reload,
    )
    return 0


def run_init_db() -> int:
    """Create or migrate the database at the configured path."""
    from musicstream.core.config import load_config
    from musicstream.core.database import (
        get_database_path,
        init_database,
        set_database_path,
    )

    config = load_config()
    set_database_path(config.database.path)
    init_database()
    print(f"Database ready at {get_database_path()}")
    return 0


def run_search(query: str) -> int:
    """Print YouTube search results, one track per line."""
    from musicstream.core.config import load_config
    from musicstream.domain.search import SearchError, search

    config = load_config()
    try:
        tracks = search(query, config.youtube)
    except SearchError as e:
        print(f"Search failed: {e}", file=sys.stderr)
        return 1

    if not tracks:
        print("No results")
        return 0

    for track in tracks:
        minutes, seconds = divmod(track.duration, 60)
        print(f"{track.id}  {minutes}:{seconds:02d}  {track.artist} - {track.title}")
    return 0


def main() -> None:
    """Main entry point for the musicstream command."""
    parser = argparse.ArgumentParser(
        description="musicstream - YouTube-backed music streaming service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"musicstream {__version__}"
    )

    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the web API")
    serve_parser.add_argument("--host", help="Bind address (default: from config)")
    serve_parser.add_argument(
        "--port", type=int, help="Bind port (default: from config)"
    )
    serve_parser.add_argument(
        "--reload", action="store_true", help="Reload on code changes"
    )

    subparsers.add_parser("init-db", help="Create or migrate the database")

    search_parser = subparsers.add_parser("search", help="Search YouTube for tracks")
    search_parser.add_argument("query", nargs="+", help="Search terms")

    args = parser.parse_args()

    if args.subcommand == "serve":
        sys.exit(run_serve(args.host, args.port, args.reload))
    elif args.subcommand == "init-db":
        sys.exit(run_init_db())
    elif args.subcommand == "search":
        sys.exit(run_search(" ".join(args.query)))

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
