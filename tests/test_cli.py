"""
Tests for the command-line dispatcher (debup/cli.py).
"""

from unittest.mock import MagicMock, patch

import pytest

from debup.cli import Command, InvalidCommand, full_update, main, parse_command, run
from debup.detection import SystemReport
from debup.upgrade import UpdateResult


REPORT = SystemReport(system_name="Debian GNU/Linux 12 (bookworm)", apt_version="2.6.1", system_updates=0)


class TestParseCommand:
    """Tests for token to command mapping."""

    @pytest.mark.parametrize("token,expected", [
        ("-h", Command.HELP),
        ("--help", Command.HELP),
        ("-c", Command.CHECK),
        ("--check-updates", Command.CHECK),
        ("-s", Command.SYSTEM),
        ("--system", Command.SYSTEM),
        ("-t", Command.TOOLCHAIN),
        ("--toolchain", Command.TOOLCHAIN),
        ("-u", Command.UNIVERSAL),
        ("--universal", Command.UNIVERSAL),
        ("-f", Command.FULL),
        ("--full", Command.FULL),
        ("", Command.FULL),
    ])
    def test_known_tokens(self, token, expected):
        assert parse_command([token]) is expected

    def test_no_token_is_full(self):
        assert parse_command([]) is Command.FULL

    def test_only_first_token_counts(self):
        assert parse_command(["-s", "--bogus"]) is Command.SYSTEM

    @pytest.mark.parametrize("token", [
        "--bogus", "system", "-x", "--check", "--sys", "-cs", "--help=yes", "--",
        "-cc", "-ss", "-ff", "-hh",
    ])
    def test_invalid_tokens(self, token):
        """Unknown tokens, abbreviations and combined flags are rejected."""
        with pytest.raises(InvalidCommand) as exc_info:
            parse_command([token])
        assert exc_info.value.token == token


class TestMain:
    """Tests for the entry point."""

    def test_invalid_flag_exits_zero(self, capsys):
        """An invalid flag is reported on stderr but is not a failure."""
        assert main(["--bogus"]) == 0

        captured = capsys.readouterr()
        assert "Invalid command: --bogus" in captured.err
        assert "debup --help" in captured.err
        assert "Invalid command" not in captured.out

    @patch("debup.cli.load_config")
    def test_help(self, mock_load, capsys):
        assert main(["--help"]) == 0
        out = capsys.readouterr().out
        assert "Usage: debup [OPTION]" in out
        assert "--check-updates" in out
        mock_load.assert_not_called()

    @patch("debup.cli.get_updates", return_value=REPORT)
    def test_check_updates_prints_report(self, mock_updates, capsys):
        with patch("debup.config.CONFIG_LOCATIONS", []):
            assert main(["-c"]) == 0

        out = capsys.readouterr().out
        assert "          System Debian GNU/Linux 12 (bookworm)" in out
        assert "   Other Updates --" in out

    @patch("debup.cli.update_system_packages", return_value=UpdateResult("system", success=False))
    def test_exit_code_follows_applier(self, mock_system):
        with patch("debup.config.CONFIG_LOCATIONS", []):
            assert main(["--system"]) == 1

    def test_bad_config_path(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("DEBUP_CONFIG", str(tmp_path / "missing.yml"))
        assert main(["-c"]) == 1
        assert "Could not load config" in capsys.readouterr().err

    @patch("debup.cli.get_updates")
    def test_malformed_config_section(self, mock_updates, monkeypatch, tmp_path, capsys):
        """A non-mapping section is reported like any unreadable config."""
        path = tmp_path / "config.yml"
        path.write_text("preferences: [1, 2]\n")
        monkeypatch.setenv("DEBUP_CONFIG", str(path))

        assert main(["--check-updates"]) == 1
        assert "Could not load config" in capsys.readouterr().err
        mock_updates.assert_not_called()


class TestRun:
    """Tests for command dispatch."""

    @pytest.mark.parametrize("command,target", [
        (Command.SYSTEM, "update_system_packages"),
        (Command.UNIVERSAL, "update_universal_packages"),
        (Command.TOOLCHAIN, "update_toolchain_packages"),
    ])
    def test_single_category(self, command, target, config):
        with patch(f"debup.cli.{target}", return_value=UpdateResult("x")) as mock_applier:
            assert run(command, config) == 0
        mock_applier.assert_called_once_with(config)

    @patch("debup.cli.full_update", return_value=0)
    def test_full(self, mock_full, config):
        assert run(Command.FULL, config) == 0
        mock_full.assert_called_once_with(config)


class TestFullUpdate:
    """Tests for the full update sequence."""

    def _patch_stages(self, system, universal, toolchain):
        manager = MagicMock()
        manager.get_updates.return_value = REPORT
        manager.system.return_value = system
        manager.universal.return_value = universal
        manager.toolchain.return_value = toolchain
        patches = [
            patch("debup.cli.get_updates", manager.get_updates),
            patch("debup.cli.update_system_packages", manager.system),
            patch("debup.cli.update_universal_packages", manager.universal),
            patch("debup.cli.update_toolchain_packages", manager.toolchain),
        ]
        return manager, patches

    def _run(self, config, *results):
        manager, patches = self._patch_stages(*results)
        for p in patches:
            p.start()
        try:
            status = full_update(config)
        finally:
            for p in patches:
                p.stop()
        return status, manager

    def test_order(self, config):
        status, manager = self._run(
            config, UpdateResult("system"), UpdateResult("universal"), UpdateResult("toolchain"),
        )
        assert status == 0
        assert [c[0] for c in manager.mock_calls if not c[0].startswith("get_updates().")] == [
            "get_updates", "system", "universal", "toolchain",
        ]

    def test_stops_after_failed_system_stage(self, config):
        """A failing system stage keeps universal and toolchain from running."""
        status, manager = self._run(
            config,
            UpdateResult("system", success=False),
            UpdateResult("universal"),
            UpdateResult("toolchain"),
        )
        assert status == 1
        manager.universal.assert_not_called()
        manager.toolchain.assert_not_called()

    def test_stops_after_failed_universal_stage(self, config):
        status, manager = self._run(
            config,
            UpdateResult("system"),
            UpdateResult("universal", success=False),
            UpdateResult("toolchain"),
        )
        assert status == 1
        manager.toolchain.assert_not_called()

    def test_toolchain_failure_is_reported(self, config):
        status, _ = self._run(
            config,
            UpdateResult("system"),
            UpdateResult("universal"),
            UpdateResult("toolchain", success=False),
        )
        assert status == 1
