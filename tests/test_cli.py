"""Tests for charon.cli — ``charon routes`` and ``charon run``."""

import sys
import types
from unittest.mock import MagicMock, patch

import pytest

from charon.app import Dispatcher
from charon.cli import main
from charon.cli._resolve import resolve_dispatcher
from charon.config import DispatcherConfig


class CreateWidget:
    def is_authenticated(self, state, headers):
        return None

    def is_valid_input(self, details):
        return None

    def handle_call(self, context):
        return b"{}"


class ListWidgets(CreateWidget):
    pass


@pytest.fixture
def fake_dispatcher(monkeypatch: pytest.MonkeyPatch) -> Dispatcher:
    """Register a fake module holding a charon Dispatcher."""
    dispatcher = Dispatcher(
        {("POST", "/widgets"): CreateWidget(), ("GET", "/widgets"): ListWidgets()},
        config=DispatcherConfig(host="127.0.0.1", port=8000),
    )
    mod = types.ModuleType("_cli_test_app")
    mod.dispatcher = dispatcher  # type: ignore[attr-defined]
    mod.make_dispatcher = lambda: dispatcher  # type: ignore[attr-defined]
    mod.not_a_dispatcher = 42  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_cli_test_app", mod)
    return dispatcher


class TestResolve:
    def test_explicit_attribute(self, fake_dispatcher: Dispatcher) -> None:
        assert resolve_dispatcher("_cli_test_app:dispatcher") is fake_dispatcher

    def test_default_attribute(self, fake_dispatcher: Dispatcher) -> None:
        assert resolve_dispatcher("_cli_test_app") is fake_dispatcher

    def test_factory_called(self, fake_dispatcher: Dispatcher) -> None:
        assert resolve_dispatcher("_cli_test_app:make_dispatcher") is fake_dispatcher

    def test_wrong_type(self, fake_dispatcher: Dispatcher) -> None:
        with pytest.raises(TypeError, match="not a charon.Dispatcher"):
            resolve_dispatcher("_cli_test_app:not_a_dispatcher")

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_dispatcher("_no_such_module_xyz:dispatcher")

    def test_empty_module_name(self) -> None:
        with pytest.raises(ModuleNotFoundError, match="No module given"):
            resolve_dispatcher(":dispatcher")

    def test_missing_attribute_names_module(self, fake_dispatcher: Dispatcher) -> None:
        with pytest.raises(AttributeError, match="'_cli_test_app' has no attribute 'nope'"):
            resolve_dispatcher("_cli_test_app:nope")

    def test_builder_returning_wrong_type(
        self, monkeypatch: pytest.MonkeyPatch, fake_dispatcher: Dispatcher
    ) -> None:
        monkeypatch.setattr(sys.modules["_cli_test_app"], "make_other", lambda: "x", raising=False)
        with pytest.raises(TypeError, match="returned a str, not a charon.Dispatcher"):
            resolve_dispatcher("_cli_test_app:make_other")

    def test_failing_builder(
        self, monkeypatch: pytest.MonkeyPatch, fake_dispatcher: Dispatcher
    ) -> None:
        def broken() -> Dispatcher:
            raise RuntimeError("no config")

        monkeypatch.setattr(sys.modules["_cli_test_app"], "broken", broken, raising=False)
        with pytest.raises(TypeError, match="failed: no config"):
            resolve_dispatcher("_cli_test_app:broken")


class TestRoutesCommand:
    def test_lists_routes_sorted(
        self, fake_dispatcher: Dispatcher, capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["routes", "_cli_test_app:dispatcher"])

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["METHOD", "PATH", "HANDLER"]
        assert lines[2].split() == ["GET", "/widgets", "ListWidgets"]
        assert lines[3].split() == ["POST", "/widgets", "CreateWidget"]

    def test_empty(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        mod = types.ModuleType("_cli_empty_app")
        mod.dispatcher = Dispatcher({})  # type: ignore[attr-defined]
        monkeypatch.setitem(sys.modules, "_cli_empty_app", mod)

        main(["routes", "_cli_empty_app"])
        assert "No routes registered." in capsys.readouterr().out

    def test_bad_import_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as info:
            main(["routes", "_no_such_module_xyz:dispatcher"])

        assert info.value.code == 1
        assert capsys.readouterr().err.startswith("Error:")


class TestRunCommand:
    @patch("charon.server.serve.run_server")
    def test_default_host_and_port(
        self, mock_server: MagicMock, fake_dispatcher: Dispatcher
    ) -> None:
        main(["run", "_cli_test_app:dispatcher"])

        mock_server.assert_called_once()
        args = mock_server.call_args[0]
        assert args[0] is fake_dispatcher
        assert args[1] == "127.0.0.1"
        assert args[2] == 8000

    @patch("charon.server.serve.run_server")
    def test_overrides(self, mock_server: MagicMock, fake_dispatcher: Dispatcher) -> None:
        main(
            [
                "run",
                "_cli_test_app:dispatcher",
                "--host",
                "0.0.0.0",
                "--port",
                "3000",
                "--workers",
                "3",
            ]
        )

        args, kwargs = mock_server.call_args
        assert args[1:] == ("0.0.0.0", 3000)
        assert kwargs["workers"] == 3

    @patch("charon.server.serve.run_server")
    def test_app_path_forwarded(self, mock_server: MagicMock, fake_dispatcher: Dispatcher) -> None:
        main(["run", "_cli_test_app:dispatcher"])
        assert mock_server.call_args[1]["app_path"] == "_cli_test_app:dispatcher"

    def test_bad_import_exits(self) -> None:
        with pytest.raises(SystemExit) as info:
            main(["run", "_no_such_module_xyz"])
        assert info.value.code == 1


class TestMain:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as info:
            main([])

        assert info.value.code == 0
        assert "usage: charon" in capsys.readouterr().out
