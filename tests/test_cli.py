"""
CLI Tests
"""

import json
from unittest.mock import MagicMock

import pytest

from guardrail_console import cli
from guardrail_console.console import GuardrailConsole

API_URL = "http://guardrail.test"


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """No real env vars, no ./.env file, no logging handlers."""
    for name in ("GUARDRAIL_API_URL", "NEXT_PUBLIC_API_URL", "GUARDRAIL_CONFIG_PATH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "initialize_logging", MagicMock())


@pytest.fixture
def use_backend(monkeypatch):
    """Route the CLI's console through a FakeBackend."""
    def install(backend):
        monkeypatch.setattr(
            cli,
            "GuardrailConsole",
            lambda config: GuardrailConsole(config, http_transport=backend.transport),
        )
        return backend
    return install


class TestParser:
    """Tests for argument parsing."""

    def test_scan_prompt(self):
        """Test the scan subcommand takes a prompt."""
        args = cli.build_parser().parse_args(["--api-url", API_URL, "scan", "hello"])
        assert args.command == "scan"
        assert args.prompt == "hello"
        assert args.api_url == API_URL
        assert args.json is False

    def test_wake_then(self):
        """Test wake accepts --then dashboard."""
        args = cli.build_parser().parse_args(["wake", "--then", "dashboard"])
        assert args.then == "dashboard"

    def test_command_required(self):
        """Test a subcommand is required."""
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_every_command_has_handler(self):
        """Test each subcommand maps to a handler."""
        assert set(cli.COMMANDS) == {"dashboard", "scan", "chat", "wake"}


class TestCommands:
    """Tests for running subcommands against a fake backend."""

    def test_dashboard(self, backend, use_backend, capsys):
        """Test the dashboard prints KPIs and incidents."""
        use_backend(backend)

        code = cli.main(["--api-url", API_URL, "dashboard"])

        out = capsys.readouterr().out
        assert code == cli.EXIT_OK
        assert "Total Requests" in out
        assert "25.0%" in out
        assert "openai" in out
        assert "email, phone" in out

    def test_dashboard_json(self, backend, use_backend, capsys):
        """Test --json prints the snapshot."""
        use_backend(backend)

        code = cli.main(["--api-url", API_URL, "--json", "dashboard"])

        data = json.loads(capsys.readouterr().out)
        assert code == cli.EXIT_OK
        assert data["metrics"]["flagged_count"] == 5
        assert [incident["id"] for incident in data["incidents"]] == [2, 1]

    def test_unconfigured(self, capsys):
        """Test an unconfigured console exits 2 with a warning."""
        code = cli.main(["dashboard"])

        captured = capsys.readouterr()
        assert code == cli.EXIT_UNCONFIGURED
        assert "GUARDRAIL_API_URL" in captured.err
        assert "Total Requests" in captured.out

    def test_scan(self, backend, use_backend, capsys):
        """Test scan prints both panels."""
        use_backend(backend)

        code = cli.main(["--api-url", API_URL, "scan", "Mail j.smith@company.com"])

        out = capsys.readouterr().out
        assert code == cli.EXIT_OK
        assert "Raw Output" in out
        assert "Redacted Output • Flagged" in out
        assert "Mail [EMAIL]" in out
        assert "Redactions: email" in out

    def test_scan_blank_prompt(self, backend, use_backend, capsys):
        """Test a blank prompt is rejected without a request."""
        use_backend(backend)

        code = cli.main(["--api-url", API_URL, "scan", "   "])

        assert code == cli.EXIT_FAILED
        assert "Nothing to scan" in capsys.readouterr().err
        assert backend.requests == []

    def test_scan_backend_failure(self, make_backend, use_backend, capsys):
        """Test a failing scan prints the placeholder and exits 1."""
        use_backend(make_backend({("POST", "/scan"): (500, "boom")}))

        code = cli.main(["--api-url", API_URL, "scan", "hello"])

        assert code == cli.EXIT_FAILED
        assert "HTTP 500" in capsys.readouterr().out

    def test_chat(self, backend, use_backend, capsys):
        """Test chat prints the answer and footer."""
        use_backend(backend)

        code = cli.main(["--api-url", API_URL, "chat", "hi"])

        out = capsys.readouterr().out
        assert code == cli.EXIT_OK
        assert "hi there" in out
        assert "Not flagged • no redactions" in out

    def test_wake_then_dashboard(self, backend, use_backend, capsys):
        """Test wake probes then prints the refreshed dashboard."""
        use_backend(backend)

        code = cli.main(["--api-url", API_URL, "wake", "--then", "dashboard"])

        out = capsys.readouterr().out
        assert code == cli.EXIT_OK
        assert "Wake succeeded after 1 probe(s)" in out
        assert "Flagged Outputs" in out
        assert backend.paths()[0] == "/"

    def test_wake_unconfigured(self, capsys):
        """Test wake refuses to run without a backend URL."""
        assert cli.main(["wake"]) == cli.EXIT_UNCONFIGURED
