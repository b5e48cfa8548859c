from __future__ import annotations

import argparse
import asyncio
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn
import yaml
from pydantic import ValidationError

from godseye.application.coordinator import QueryCoordinator
from godseye.application.suggestions import SuggestionCoordinator
from godseye.application.use_cases.theme import ThemeService
from godseye.application.use_cases.watch import WatchUseCase
from godseye.domain.entities.media import Catalog, MediaKind
from godseye.domain.entities.preferences import Theme
from godseye.domain.exceptions import ConfigError, GodseyeError
from godseye.infrastructure.composition import (
    create_asset_urls,
    create_theme_store,
    open_tmdb_client,
)
from godseye.infrastructure.config import AppConfig, load_config
from godseye.infrastructure.logging.setup import configure_logging
from godseye.interfaces.cli.render import render_view, render_watch
from godseye.interfaces.cli.shell import Shell
from godseye.interfaces.main import build_app

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="godseye")

    # Config wiring flags (no business logic)
    parser.add_argument("--config", default=None, help="Path to YAML config file.")
    parser.add_argument("--dotenv", default=None, help="Path to .env file.")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default=None, help="Bind host (overrides HOST env).")
    serve.add_argument(
        "--port", default=None, type=int, help="Bind port (overrides PORT env)."
    )

    catalogs = [c.value for c in Catalog]

    search = sub.add_parser("search", help="Search titles.")
    search.add_argument("query", help="Search text; blank lists the catalog.")
    search.add_argument("--page", type=int, default=1)
    search.add_argument("--catalog", choices=catalogs, default=None)

    browse = sub.add_parser("browse", help="List trending or popular titles.")
    browse.add_argument("--page", type=int, default=1)
    browse.add_argument("--catalog", choices=catalogs, default=None)

    details = sub.add_parser("details", help="Show a title and its player URL.")
    details.add_argument("kind", choices=[k.value for k in MediaKind])
    details.add_argument("media_id", type=int)

    theme = sub.add_parser("theme", help="Show or change the stored theme.")
    theme.add_argument(
        "action",
        nargs="?",
        default="show",
        choices=["show", "toggle", *[t.value for t in Theme]],
    )

    shell = sub.add_parser("shell", help="Interactive search view.")
    shell.add_argument("--catalog", choices=catalogs, default=None)

    sub.add_parser("config", help="Print the effective configuration.")

    return parser.parse_args(argv)


def _catalog(args: argparse.Namespace, config: AppConfig) -> Catalog:
    if getattr(args, "catalog", None):
        return Catalog(args.catalog)
    return config.search.default_catalog


def _coordinator(provider, catalog: Catalog, config: AppConfig) -> QueryCoordinator:
    return QueryCoordinator(
        provider,
        catalog=catalog,
        debounce_seconds=config.search.debounce_seconds,
        page_ceiling=config.search.page_ceiling,
    )


async def _listing(
    config: AppConfig, catalog: Catalog, page: int, query: str | None
) -> int:
    async with open_tmdb_client(config) as provider:
        coordinator = _coordinator(provider, catalog, config)
        try:
            if query is None:
                coordinator.mount()
            else:
                coordinator.submit(query)
            await coordinator.wait_idle()
            if page > 1:
                coordinator.load_page(page)
                await coordinator.wait_idle()
            view = coordinator.view()
        finally:
            coordinator.close()

    print(render_view(view))
    return 1 if view.error else 0


async def _details(config: AppConfig, kind: MediaKind, media_id: int) -> int:
    async with open_tmdb_client(config) as provider:
        watch_uc = WatchUseCase(provider, create_asset_urls(config))
        watch = await watch_uc.watch(kind, media_id)
    print(render_watch(watch))
    return 0


async def _theme(config: AppConfig, action: str) -> int:
    async with create_theme_store(config) as store:
        service = ThemeService(store)
        theme = await service.load()
        if action == "toggle":
            theme = await service.toggle()
        elif action != "show":
            theme = await service.set(Theme(action))
    print(theme.value)
    return 0


async def _shell(config: AppConfig, catalog: Catalog) -> int:
    async with open_tmdb_client(config) as provider:
        coordinator = _coordinator(provider, catalog, config)
        suggestions = SuggestionCoordinator(
            provider,
            debounce_seconds=config.search.debounce_seconds,
            limit=config.search.suggestion_limit,
            min_length=config.search.suggestion_min_length,
        )
        await Shell(coordinator, suggestions).run()
    return 0


def _serve(args: argparse.Namespace, config: AppConfig, log_config: dict) -> int:
    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "7979"))

    # Fail at startup rather than on the first request.
    config.require_tmdb_api_key()

    uvicorn.run(
        build_app(config),
        host=host,
        port=port,
        log_config=log_config,
    )
    return 0


def _dispatch(args: argparse.Namespace, config: AppConfig, log_config: dict) -> int:
    command = args.command or "serve"
    if command == "serve":
        return _serve(args, config, log_config)
    if command == "search":
        return asyncio.run(
            _listing(config, _catalog(args, config), args.page, args.query)
        )
    if command == "browse":
        return asyncio.run(_listing(config, _catalog(args, config), args.page, None))
    if command == "details":
        return asyncio.run(_details(config, MediaKind(args.kind), args.media_id))
    if command == "theme":
        return asyncio.run(_theme(config, args.action))
    if command == "shell":
        return asyncio.run(_shell(config, _catalog(args, config)))
    if command == "config":
        print(yaml.safe_dump(config.to_sectioned_dict(), sort_keys=False), end="")
        return 0
    raise ValueError(f"unknown command: {command}")


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, configures logging, then runs the chosen
    command. Returns the process exit code.
    """

    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config_path = Path(args.config) if args.config else None
    dotenv_path = Path(args.dotenv) if args.dotenv else None

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    try:
        config = load_config(
            config_path=config_path,
            dotenv_path=dotenv_path,
            cli_overrides=cli_overrides,
        )
    except FileNotFoundError as e:
        print(f"godseye: file not found: {e}", file=sys.stderr)
        return 2
    except (ValidationError, ValueError) as e:
        print(f"godseye: invalid configuration: {e}", file=sys.stderr)
        return 2

    log_config = configure_logging(config)

    try:
        return _dispatch(args, config, log_config)
    except ConfigError as e:
        print(f"godseye: {e}", file=sys.stderr)
        return 2
    except GodseyeError as e:
        log.error("command_failed", command=args.command, error=str(e))
        print(f"godseye: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(start())
