#!/usr/bin/env python3
"""Main entry point for vly-player.

Without a UI attached the player runs headless: the given files are queued
into a playlist and played through the simulated engine until the playlist
is exhausted.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import locale
import logging
import logging.config
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from vly_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from vly_player.config.container import Container
    from vly_player.domain.playlist.entities import MediaItem

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_POLL_INTERVAL = 0.5
_DEFAULT_PLAYLIST = "Default"


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.warning(
            "Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH
        )
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger().setLevel(resolved_level)


def setup_locale() -> None:
    """Collate titles in the user's locale; stay on the C locale when it is unavailable."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logging.getLogger(__name__).warning(LogTemplates.LOCALE_UNAVAILABLE, e)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vly-player",
        description="Play media files through a playlist without a UI.",
    )
    parser.add_argument("files", nargs="*", help="media files or stream URLs to queue")
    parser.add_argument(
        "--playlist",
        "-p",
        default=None,
        help="playlist to queue into (created when missing, default: the current playlist)",
    )
    parser.add_argument(
        "--repeat",
        choices=["off", "one", "all"],
        default=None,
        help="repeat mode for the playlist",
    )
    parser.add_argument("--shuffle", action="store_true", help="shuffle the playlist")
    return parser


def media_items_from_paths(paths: Sequence[str]) -> list[MediaItem]:
    """Build media items titled after each file's stem."""
    from vly_player.domain.playlist.entities import MediaItem

    items: list[MediaItem] = []
    for raw in paths:
        path = Path(raw)
        items.append(
            MediaItem(
                title=path.stem or raw,
                locator=raw,
                format=path.suffix.lstrip(".").lower(),
            )
        )
    return items


async def run_headless(container: Container, args: argparse.Namespace) -> int:
    from vly_player.domain.playlist.value_objects import RepeatMode

    logger = logging.getLogger(__name__)
    await container.initialize()
    try:
        playlists = container.playlist_service
        orchestrator = container.orchestrator
        session = container.session_service

        if args.playlist is None:
            playlist = playlists.current
        else:
            playlist = next((p for p in playlists.playlists if p.name == args.playlist), None)
        if playlist is None:
            playlist = await playlists.create_playlist(args.playlist or _DEFAULT_PLAYLIST)

        known = {item.locator for item in playlist.items}
        new_items = [item for item in media_items_from_paths(args.files) if item.locator not in known]
        if new_items:
            result = await playlists.add_items(playlist.id, new_items)
            logger.info(LogTemplates.HEADLESS_QUEUED, result.added_count, playlist.name)

        if args.repeat is not None:
            await playlists.set_repeat_mode(playlist.id, RepeatMode(args.repeat))
        if args.shuffle:
            await playlists.set_shuffle(playlist.id, True)
        await playlists.set_current(playlist.id)

        if not await orchestrator.play_playlist(playlist.id):
            logger.warning(LogTemplates.ORCHESTRATOR_NO_PLAYLIST)
            return 1

        # Finished handlers run inside the event pump, so a drained pump with a
        # terminal session means nothing else was queued.
        while True:
            await asyncio.sleep(_POLL_INTERVAL)
            await session.drain()
            if session.state.is_terminal:
                break

        logger.info(LogTemplates.HEADLESS_DONE)
        return 0
    finally:
        await container.shutdown()


def main(argv: Sequence[str] | None = None) -> int:
    from vly_player.config.settings import get_settings

    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)
    setup_locale()

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.APP_STARTING, settings.environment)

    from vly_player.config.container import create_container

    container = create_container(settings)

    try:
        code = asyncio.run(run_headless(container, args))
        logger.info(LogTemplates.APP_STOPPED)
        return code
    except KeyboardInterrupt:
        logger.info(LogTemplates.APP_INTERRUPTED)
        return 0
    except Exception as e:
        logger.exception("Fatal error: %s", e)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
