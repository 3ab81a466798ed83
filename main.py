#!/usr/bin/env python
"""CLI for WikiVoice search."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from wikivoice.config import (
    WikiVoiceConfig,
    create_from_config,
    create_history_store,
    get_default_config_path,
    load_config,
)
from wikivoice.errors import WikiVoiceError

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    command: str
    config: Path
    query: str | None = None
    user: str | None = None
    limit: int = Field(default=20, ge=1)
    top: int = Field(default=10, ge=1)
    log: bool = False
    log_dir: str = "logs"
    host: str | None = None
    port: int | None = None

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v


async def run_search(args: CLIArgs, config: WikiVoiceConfig) -> None:
    """Run one search, print its results and record it."""
    orchestrator, store, run_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )
    async with store:
        try:
            outcome = await orchestrator.search(args.query, args.user)
        finally:
            await orchestrator.aclose()

    print(f"\nFound {len(outcome.results)} results for {outcome.query!r}:\n")
    for i, record in enumerate(outcome.results, 1):
        print(f"{i}. {record.title}")
        print(f"   {record.summary}")
        print(f"   {record.link}")

    if outcome.persistence_degraded:
        logger.warning("Search was not recorded in history")
    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")


async def run_history(args: CLIArgs, config: WikiVoiceConfig) -> None:
    """Print a user's recent searches."""
    store = create_history_store(config.history)
    async with store:
        events = await store.list_by_identity(args.user or "", limit=args.limit)

    print(f"\n{len(events)} searches by {args.user}:\n")
    for event in events:
        created = event.created_at.isoformat() if event.created_at else "?"
        print(f"{created}  {event.query}  ({len(event.results)} results)")


async def run_clear_history(args: CLIArgs, config: WikiVoiceConfig) -> None:
    """Delete a user's search history."""
    store = create_history_store(config.history)
    async with store:
        deleted = await store.delete_by_identity(args.user or "")
    print(f"Deleted {deleted} searches by {args.user}")


async def run_stats(args: CLIArgs, config: WikiVoiceConfig) -> None:
    """Print total searches and the most frequent queries."""
    store = create_history_store(config.history)
    async with store:
        total = await store.count_all()
        top_queries = await store.top_queries(args.top)

    print(f"\nTotal searches: {total}\n")
    for item in top_queries:
        print(f"{item.count:>6}  {item.query}")


def run_server(args: CLIArgs, config: WikiVoiceConfig) -> None:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    from wikivoice.api import app_from_config

    app = app_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )
    host = args.host or config.server.host
    port = args.port or config.server.port
    logger.info(f"Serving on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=config.logging.level.lower())


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Search Wikipedia and keep per-user history.")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Run one search")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument("--user", "-u", default=None, help="Username (default: Guest)")
    search_parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Write a JSON run log for this search",
    )
    search_parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )

    history_parser = subparsers.add_parser("history", help="Show a user's searches")
    history_parser.add_argument("user", help="Username")
    history_parser.add_argument("--limit", "-n", type=int, default=20)

    clear_parser = subparsers.add_parser("clear-history", help="Delete a user's searches")
    clear_parser.add_argument("user", help="Username")

    stats_parser = subparsers.add_parser("stats", help="Show search statistics")
    stats_parser.add_argument("--top", type=int, default=10)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--log", action="store_true", default=False)
    serve_parser.add_argument("--log-dir", type=str, default="logs")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            command=ns.command,
            config=config_path,
            query=getattr(ns, "query", None),
            user=getattr(ns, "user", None),
            limit=getattr(ns, "limit", 20),
            top=getattr(ns, "top", 10),
            log=getattr(ns, "log", False),
            log_dir=getattr(ns, "log_dir", "logs"),
            host=getattr(ns, "host", None),
            port=getattr(ns, "port", None),
        )
        config = load_config(args.config)
    except Exception as e:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
        logger.error(str(e))
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, config.logging.level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    commands = {
        "search": run_search,
        "history": run_history,
        "clear-history": run_clear_history,
        "stats": run_stats,
    }

    try:
        if args.command == "serve":
            run_server(args, config)
        else:
            asyncio.run(commands[args.command](args, config))
    except WikiVoiceError as e:
        logger.error(f"{e.code}: {e.message}")
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
