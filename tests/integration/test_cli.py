from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from device_registry import __version__
from device_registry.cli import cli
from device_registry.infrastructure.auth import jwt_service


def test_issue_token():
    runner = CliRunner()

    result = runner.invoke(cli, ["issue-token", "--namespace", "acme", "--scope", "devices.read"])

    assert result.exit_code == 0
    payload = jwt_service.validate_access_token(result.output.strip())
    assert payload["namespace"] == "acme"
    assert payload["sub"] == "cli"
    assert payload["scope"] == "devices.read"


def test_issue_token_requires_namespace():
    result = CliRunner().invoke(cli, ["issue-token"])

    assert result.exit_code != 0
    assert "--namespace" in result.output


def test_info_shows_configuration():
    result = CliRunner().invoke(cli, ["info"])

    assert result.exit_code == 0
    assert "Auth:         jwt" in result.output
    assert "in-memory" in result.output


def test_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_serve_starts_uvicorn():
    runner = CliRunner()

    with patch("device_registry.cli.get_settings") as mock_get_settings, \
         patch("device_registry.cli.configure_logging"), \
         patch("uvicorn.run") as mock_run:
        mock_settings = MagicMock()
        mock_settings.host = "0.0.0.0"
        mock_settings.port = 8000
        mock_settings.workers = 1
        mock_settings.log_level = "INFO"
        mock_settings.environment = "development"
        mock_get_settings.return_value = mock_settings

        result = runner.invoke(cli, ["serve", "--port", "9000"])

    assert result.exit_code == 0
    args, kwargs = mock_run.call_args
    assert args[0] == "device_registry.infrastructure.api.app:app"
    assert kwargs["port"] == 9000


def test_init_db_refuses_production_without_force():
    with patch("device_registry.cli.get_settings") as mock_get_settings, \
         patch("device_registry.cli.configure_logging"):
        mock_get_settings.return_value = MagicMock(is_production=True)

        result = CliRunner().invoke(cli, ["init-db"])

    assert result.exit_code == 1
    assert "Use migrations" in result.output
