"""Tests for contact_store.cli.app module."""

import re
from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect
from typer.testing import CliRunner

import contact_store.cli as cli
from contact_store.cli.app import app


class TestMainCallback:
    def test_config_path_set_from_option(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """--config-path option sets cli.CONFIG_PATH."""
        config_dir = tmp_path / "my_configs"
        config_dir.mkdir()

        cli_runner.invoke(app, ["--config-path", str(config_dir), "show", "entities"])

        assert config_dir.resolve() == cli.CONFIG_PATH

    def test_config_path_from_env_var(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """CONTACT_STORE_CONFIG_PATH env var sets config path."""
        config_dir = tmp_path / "env_configs"
        config_dir.mkdir()

        monkeypatch.setenv("CONTACT_STORE_CONFIG_PATH", str(config_dir))
        cli_runner.invoke(app, ["show", "entities"])

        assert config_dir.resolve() == cli.CONFIG_PATH

    def test_default_config_path(self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CONTACT_STORE_CONFIG_PATH", raising=False)
        monkeypatch.chdir(tmp_path)

        cli_runner.invoke(app, ["show", "entities"])

        assert (tmp_path / "configs").resolve() == cli.CONFIG_PATH

    def test_help_describes_data_source(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "db.yaml" in result.output

    def test_no_args_shows_usage(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, [])

        assert "Usage" in result.output


class TestVersionFlag:
    def test_version_flag(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "contact-store" in result.stdout
        assert re.search(r"\d+\.\d+\.\d+", result.stdout)


class TestShowCommand:
    def test_show_entities(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["show", "entities"])

        assert result.exit_code == 0
        assert "Organisation" in result.stdout
        assert "ORGANISATION" in result.stdout
        assert "(abstract)" in result.stdout

    def test_show_schema(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["show", "schema", "--platform", "sqlite"])

        assert result.exit_code == 0
        assert "CREATE TABLE contact" in result.stdout

    def test_show_schema_unknown_platform(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["show", "schema", "--platform", "not-a-database"])

        assert result.exit_code == 1

    def test_show_metamodel(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["show", "metamodel"])

        assert result.exit_code == 0
        assert "QOrganisation (extends QContact)" in result.stdout
        assert "organisation_name" in result.stdout


class TestInitCommand:
    def test_init_with_url(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        db_file = tmp_path / "contacts.db"

        result = cli_runner.invoke(app, ["init", "--url", f"sqlite:///{db_file}"])

        assert result.exit_code == 0
        assert "Schema ready" in result.stdout
        engine = create_engine(f"sqlite:///{db_file}")
        try:
            assert inspect(engine).has_table("contact")
        finally:
            engine.dispose()

    def test_init_from_db_yaml(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        db_file = tmp_path / "from_yaml.db"
        (tmp_path / "db.yaml").write_text(f"url: sqlite:///{db_file}\nplatform: sqlite\n")

        result = cli_runner.invoke(app, ["--config-path", str(tmp_path), "init"])

        assert result.exit_code == 0
        assert db_file.exists()

    def test_init_platform_mismatch(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "db.yaml").write_text(f"url: sqlite:///{tmp_path / 'x.db'}\nplatform: postgresql\n")

        result = cli_runner.invoke(app, ["--config-path", str(tmp_path), "init"])

        assert result.exit_code == 1
        assert "Initialization failed" in result.output

    def test_init_without_data_source(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        for var in ("CONTACT_STORE_DATABASE_URL", "POSTGRES_USER", "POSTGRES_PASSWORD"):
            monkeypatch.delenv(var, raising=False)

        result = cli_runner.invoke(app, ["--config-path", str(tmp_path), "init"])

        assert result.exit_code == 1
        assert "No data source configured" in result.output
