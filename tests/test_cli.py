"""Tests for wren.cli — argument parsing, app resolution, commands."""

import argparse
import logging
import sys
import types
from pathlib import Path

import pytest

import wren.app as app_module
import wren.cli._run as run_module
import wren.cli._serve as serve_module
from wren.app import App
from wren.cli import main
from wren.cli._resolve import is_template_directory, resolve_app
from wren.cli._serve import build_config
from wren.config import AppConfig
from wren.logging import CLIHandler, configure_logging


class TestHelp:
    @pytest.mark.parametrize("argv", [["--help"], ["serve", "--help"], ["run", "--help"]])
    def test_help_exits_zero(self, argv: list[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 0

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "wren" in capsys.readouterr().out

    def test_run_missing_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run"])
        assert exc_info.value.code == 2


@pytest.fixture
def _fake_app_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with a wren App on sys.modules."""
    mod = types.ModuleType("_fake_wren_app")
    mod.app = App()  # type: ignore[attr-defined]
    mod.create_app = lambda: App()  # type: ignore[attr-defined]
    mod.not_an_app = "just a string"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_wren_app", mod)


@pytest.mark.usefixtures("_fake_app_module")
class TestResolveApp:
    def test_explicit_attribute(self) -> None:
        assert isinstance(resolve_app("_fake_wren_app:app"), App)

    def test_default_attribute(self) -> None:
        assert isinstance(resolve_app("_fake_wren_app"), App)

    def test_factory(self) -> None:
        assert isinstance(resolve_app("_fake_wren_app:create_app"), App)

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_app("nonexistent_module_xyz:app")

    def test_wrong_type(self) -> None:
        with pytest.raises(TypeError, match=r"not a wren\.App instance"):
            resolve_app("_fake_wren_app:not_an_app")

    def test_template_directory(self, template_dir: Path) -> None:
        app = resolve_app(str(template_dir))
        assert app.config.template_dir == str(template_dir)
        assert is_template_directory(str(template_dir))

    def test_package_directory_is_imported(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        package = tmp_path / "_fake_wren_pkg"
        package.mkdir()
        (package / "__init__.py").write_text("from wren.app import App\napp = App()\n")
        monkeypatch.chdir(tmp_path)
        monkeypatch.syspath_prepend(str(tmp_path))
        assert not is_template_directory("_fake_wren_pkg")
        assert isinstance(resolve_app("_fake_wren_pkg"), App)

    def test_run_template_directory(
        self, site_config: AppConfig, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        served: list[tuple[App, str | None]] = []
        monkeypatch.setattr(
            run_module, "serve", lambda app, **kwargs: served.append((app, kwargs["app_path"]))
        )
        main(["run", str(site_config.template_dir)])
        ((app, app_path),) = served
        assert app_path is None
        assert "about" in app.registry

    def test_run_import_string_keeps_app_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        served: list[str | None] = []
        monkeypatch.setattr(app_module.App, "_ensure_frozen", lambda self: None)
        monkeypatch.setattr(
            run_module, "serve", lambda app, **kwargs: served.append(kwargs["app_path"])
        )
        main(["run", "_fake_wren_app:app", "--workers", "3"])
        assert served == ["_fake_wren_app:app"]

    def test_run_reports_bad_import(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "_fake_wren_app:not_an_app"])
        assert exc_info.value.code == 1
        assert capsys.readouterr().err.startswith("Error:")


@pytest.fixture
def serve_args(monkeypatch: pytest.MonkeyPatch):
    """Parse ``wren serve`` flags without running the command."""

    def _parse(argv: list[str]) -> argparse.Namespace:
        captured: list[argparse.Namespace] = []
        monkeypatch.setattr(serve_module, "run_serve", captured.append)
        main(["serve", *argv])
        return captured[0]

    return _parse


class TestServe:
    def test_flags_override_environment(
        self, monkeypatch: pytest.MonkeyPatch, serve_args
    ) -> None:
        monkeypatch.setenv("WREN_TEMPLATE_DIR", "from-env")
        monkeypatch.setenv("WREN_PORT", "9000")
        args = serve_args(["--templates", "site", "--index-files", "--sub-root", "pages"])
        config = build_config(args)
        assert config.template_dir == "site"
        assert config.use_index_files is True
        assert config.template_page_root == "pages"
        assert config.port == 9000

    def test_unset_flags_keep_defaults(
        self, monkeypatch: pytest.MonkeyPatch, serve_args
    ) -> None:
        for name in ("WREN_DEBUG", "WREN_USE_INDEX_FILES", "WREN_TEMPLATE_DIR"):
            monkeypatch.delenv(name, raising=False)
        config = build_config(serve_args([]))
        assert config.debug is False
        assert config.use_index_files is False
        assert config.template_dir == AppConfig().template_dir

    def test_missing_template_dir_exits_1(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["serve", "--templates", str(tmp_path / "nope")])
        assert exc_info.value.code == 1
        assert "Template directory not found" in capsys.readouterr().err

    def test_starts_server(
        self, site_config: AppConfig, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        started: list[App] = []
        monkeypatch.setattr(App, "run", lambda self: started.append(self))
        main(
            [
                "serve",
                "--templates",
                str(site_config.template_dir),
                "--public",
                str(site_config.public_dir),
                "--port",
                "8123",
            ]
        )
        assert len(started) == 1
        assert started[0].config.port == 8123
        assert "about" in started[0].registry


class TestTemplatesCommand:
    def test_lists_templates(
        self, template_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["templates", str(template_dir)])
        out = capsys.readouterr().out
        assert "IDENTIFIER" in out
        assert "blog/first-post" in out
        assert "about.html.hbs" in out

    def test_empty_directory(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["templates", str(tmp_path)])
        assert "No templates found" in capsys.readouterr().out

    def test_reports_conflicts(self, make_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = make_tree("t", {"about.html": "", "about.md": ""})
        main(["templates", str(root)])
        assert "shadows" in capsys.readouterr().err

    def test_missing_directory(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["templates", str(tmp_path / "nope")])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err


class TestConfigureLogging:
    def test_sets_level_once(self) -> None:
        logger = configure_logging("debug")
        configure_logging("warning")
        installed = [h for h in logger.handlers if isinstance(h, CLIHandler)]
        assert len(installed) == 1
        assert logger.level == logging.WARNING

    def test_stdlib_level_names(self) -> None:
        assert configure_logging("Warn").level == logging.WARNING
        assert configure_logging("CRITICAL").level == logging.CRITICAL

    def test_unknown_level(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("loud")

