"""
Tests for main.py - Main Entry Point

Tests for the main entry point including:
- Logging configuration
- Command-line parsing and media item construction
- Headless playback through a container
- Error handling
"""

import json
import locale
import logging
from unittest.mock import MagicMock, mock_open, patch

import pytest

from vly_player.config.container import create_container
from vly_player.config.settings import Settings
from vly_player.domain.playback.value_objects import SessionState
from vly_player.main import (
    build_parser,
    main,
    media_items_from_paths,
    run_headless,
    setup_locale,
    setup_logging,
)


class TestLoggingSetup:
    """Tests for logging configuration."""

    def _make_valid_config(self) -> dict:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "handlers": {},
            "loggers": {"aiosqlite": {"level": "WARNING"}},
            "root": {"level": "INFO", "handlers": []},
        }

    def test_dictconfig_called_when_json_exists(self):
        """Should call dictConfig when logging_config.json exists."""
        config = self._make_valid_config()
        m = mock_open(read_data=json.dumps(config))
        with (
            patch("builtins.open", m),
            patch("logging.config.dictConfig") as mock_dc,
        ):
            setup_logging()

            mock_dc.assert_called_once_with(config)

    def test_fallback_to_basicconfig_when_json_missing(self):
        with (
            patch("builtins.open", side_effect=FileNotFoundError),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging("debug")

            mock_bc.assert_called_once()
            assert mock_bc.call_args[1]["level"] == logging.DEBUG

    def test_fallback_to_basicconfig_when_json_malformed(self):
        m = mock_open(read_data="{invalid json")
        with (
            patch("builtins.open", m),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging()

            mock_bc.assert_called_once()

    def test_root_level_applied(self):
        with patch("logging.config.dictConfig"), patch("builtins.open", mock_open(read_data="{}")):
            setup_logging("WARNING")

        assert logging.getLogger().level == logging.WARNING
        logging.getLogger().setLevel(logging.INFO)


class TestLocaleSetup:
    """Tests for collation locale setup."""

    def test_collation_taken_from_environment(self):
        with patch("vly_player.main.locale.setlocale") as mock_set:
            setup_locale()

        mock_set.assert_called_once_with(locale.LC_COLLATE, "")

    def test_unsupported_locale_is_logged(self, caplog):
        with (
            patch("vly_player.main.locale.setlocale", side_effect=locale.Error("unsupported locale setting")),
            caplog.at_level(logging.WARNING, logger="vly_player.main"),
        ):
            setup_locale()

        assert "unsupported locale setting" in caplog.text

    def test_main_sets_locale(self):
        with (
            patch("vly_player.main.setup_logging"),
            patch("vly_player.main.setup_locale") as mock_locale,
            patch("vly_player.config.container.create_container", return_value=MagicMock()),
            patch("vly_player.main.run_headless", new=MagicMock(return_value=None)),
            patch("vly_player.main.asyncio.run", return_value=0),
        ):
            main([])

        mock_locale.assert_called_once_with()


class TestCommandLine:
    """Tests for argument parsing and item construction."""

    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.files == []
        assert args.playlist is None
        assert args.repeat is None
        assert args.shuffle is False

    def test_options(self):
        args = build_parser().parse_args(["a.mp4", "b.mkv", "-p", "Movies", "--repeat", "all", "--shuffle"])

        assert args.files == ["a.mp4", "b.mkv"]
        assert args.playlist == "Movies"
        assert args.repeat == "all"
        assert args.shuffle is True

    def test_invalid_repeat_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--repeat", "twice"])

    def test_media_items_from_paths(self):
        items = media_items_from_paths(["/videos/Holiday Trip.MP4", "https://example.com/live"])

        assert items[0].title == "Holiday Trip"
        assert items[0].locator == "/videos/Holiday Trip.MP4"
        assert items[0].format == "mp4"
        assert items[1].title == "live"
        assert items[1].format == ""
        assert items[0].id != items[1].id


class TestHeadlessRun:
    """Runs the headless loop against the simulated engine."""

    @pytest.fixture
    def fast_settings(self):
        return Settings(
            database={"url": "sqlite:///:memory:"},
            engine={
                "tick_interval_seconds": 0.01,
                "default_duration_seconds": 1.0,
                "time_scale": 100.0,
                "check_files": False,
            },
        )

    @pytest.mark.asyncio
    async def test_plays_queued_files_in_order(self, fast_settings):
        container = create_container(fast_settings)
        args = build_parser().parse_args(["/media/one.mp4", "/media/two.mp4", "-p", "Queue"])

        with patch("vly_player.main._POLL_INTERVAL", 0.01):
            code = await run_headless(container, args)

        assert code == 0
        assert container.session_service.state == SessionState.IDLE
        watched = [entry.title for entry in reversed(container.history_service.entries)]
        assert watched[:2] == ["one", "two"]
        playlist = container.playlist_service.current
        assert playlist.name == "Queue"
        assert [item.title for item in playlist.items] == ["one", "two"]

    @pytest.mark.asyncio
    async def test_empty_playlist_fails(self, fast_settings):
        container = create_container(fast_settings)
        args = build_parser().parse_args([])

        assert await run_headless(container, args) == 1


class TestMain:
    """Tests for the synchronous main()."""

    def test_returns_headless_exit_code(self):
        with (
            patch("vly_player.main.setup_logging"),
            patch("vly_player.config.settings.get_settings", return_value=Settings()),
            patch("vly_player.config.container.create_container", return_value=MagicMock()),
            patch("vly_player.main.run_headless", new=MagicMock(return_value=None)),
            patch("vly_player.main.asyncio.run", return_value=0) as mock_run,
        ):
            assert main(["a.mp4"]) == 0

        mock_run.assert_called_once()

    def test_keyboard_interrupt_is_clean_exit(self):
        with (
            patch("vly_player.main.setup_logging"),
            patch("vly_player.config.container.create_container", return_value=MagicMock()),
            patch("vly_player.main.run_headless", new=MagicMock(return_value=None)),
            patch("vly_player.main.asyncio.run", side_effect=KeyboardInterrupt),
        ):
            assert main([]) == 0

    def test_fatal_error_returns_one(self):
        with (
            patch("vly_player.main.setup_logging"),
            patch("vly_player.config.container.create_container", return_value=MagicMock()),
            patch("vly_player.main.run_headless", new=MagicMock(return_value=None)),
            patch("vly_player.main.asyncio.run", side_effect=RuntimeError("boom")),
        ):
            assert main([]) == 1
