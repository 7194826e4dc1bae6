"""Unit tests for CLI parsing and exit statuses."""

from __future__ import annotations

from argparse import Namespace

import pytest

from xin import cli
from xin.common.errors import SessionError


class TestArgumentsParse:
    """Flag handling."""

    def test_default_is_xtest(self) -> None:
        args = cli.arguments_parse([])
        assert args.sendevent is False
        assert not hasattr(args, "log_level")

    def test_s_selects_sendevent(self) -> None:
        assert cli.arguments_parse(["-s"]).sendevent is True

    def test_unknown_flag_exits_1(self, capsys) -> None:
        """Any other flag prints usage to stderr and exits 1."""
        with pytest.raises(SystemExit) as excinfo:
            cli.arguments_parse(["-x"])
        assert excinfo.value.code == 1
        assert "usage: xin" in capsys.readouterr().err

    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help_flag_is_usage_error(self, flag: str, capsys) -> None:
        """There is no help flag; it is rejected like any other."""
        with pytest.raises(SystemExit) as excinfo:
            cli.arguments_parse([flag])
        assert excinfo.value.code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "usage: xin" in captured.err

    def test_positional_rejected(self) -> None:
        with pytest.raises(SystemExit) as excinfo:
            cli.arguments_parse(["extra"])
        assert excinfo.value.code == 1

    def test_log_level_flag_applied(self) -> None:
        assert cli.arguments_parse(["--debug"]).log_level == "DEBUG"


class TestLogLevelOverride:
    """Tests for CLI log-level precedence."""

    def test_warning_overrides_debug(self) -> None:
        args = Namespace(debug=True, info=False, warning=True, error=False)
        assert cli.logLevelOverride_get(args) == "WARNING"

    def test_none_when_unset(self) -> None:
        args = Namespace(debug=False, info=False, warning=False, error=False)
        assert cli.logLevelOverride_get(args) is None


class TestMain:
    """Exit statuses from main."""

    def test_clean_run_exits_0(self, monkeypatch) -> None:
        monkeypatch.setattr("xin.receiver.main.receiver_run", lambda args: 0)
        with pytest.raises(SystemExit) as excinfo:
            cli.main([])
        assert excinfo.value.code == 0

    def test_read_error_exits_1(self, monkeypatch) -> None:
        monkeypatch.setattr("xin.receiver.main.receiver_run", lambda args: 1)
        with pytest.raises(SystemExit) as excinfo:
            cli.main([])
        assert excinfo.value.code == 1

    def test_fatal_error_exits_1(self, monkeypatch, capsys) -> None:
        def _fail(args):
            raise SessionError("XTEST not available; try xin -s")

        monkeypatch.setattr("xin.receiver.main.receiver_run", _fail)
        with pytest.raises(SystemExit) as excinfo:
            cli.main([])
        assert excinfo.value.code == 1
        assert "XTEST not available" in capsys.readouterr().err
