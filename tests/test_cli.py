"""Tests for the MT5Metrics CLI.

**Feature: mt5-metrics**
"""

import json

import httpx
import pytest
from click.testing import CliRunner

from mt5metrics.cli import cli
from mt5metrics.ingest import logs
from mt5metrics.models import AccountsData, Trade

LOG = [
    {"date": "2024.01.01 09:00:00", "type": "deposit", "profit": 1000},
    {"date": "2024.01.01 10:00:00", "type": "buy", "profit": 50, "symbol": "EURUSD", "volume": 0.1},
    {"date": "2024.01.02 10:00:00", "type": "sell", "profit": -20, "symbol": "EURUSD", "volume": 0.1},
    {"date": "2024.01.02 11:00:00", "type": "buy", "profit": 15, "symbol": "XAUUSD", "volume": 0.2},
]


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point the config directory at a temporary home."""
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "123456.json"
    path.write_text(json.dumps(LOG))
    return path


def write_config(home, text: str) -> None:
    config_dir = home / ".config" / "mt5metrics"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.toml").write_text(text)


class TestCommandDiscovery:
    def test_help_lists_lazy_commands(self, runner, home):
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in ("account", "import", "sync", "metrics", "symbols", "days", "export", "dashboard"):
            assert name in result.output


class TestAccountCommands:
    def test_add_list_remove(self, runner, home):
        result = runner.invoke(cli, ["account", "add", "123456", "--label", "Main"])
        assert result.exit_code == 0
        assert "Registered" in result.output

        result = runner.invoke(cli, ["account", "add", "123456"])
        assert "already registered" in result.output

        result = runner.invoke(cli, ["account", "list"])
        assert "123456" in result.output
        assert "Main" in result.output

        result = runner.invoke(cli, ["account", "remove", "123456"])
        assert "Removed" in result.output

        result = runner.invoke(cli, ["account", "list"])
        assert "No accounts registered" in result.output

    def test_invalid_account_number(self, runner, home):
        result = runner.invoke(cli, ["account", "add", "abc"])

        assert result.exit_code == 1


class TestImportAndReports:
    def test_import_then_metrics(self, runner, home, log_file):
        result = runner.invoke(cli, ["import", "123456", str(log_file)])
        assert result.exit_code == 0
        assert "Imported" in result.output

        result = runner.invoke(cli, ["metrics", "--account", "123456"])
        assert result.exit_code == 0
        assert "Profit Factor" in result.output
        assert "Sharpe Ratio" in result.output

        result = runner.invoke(cli, ["symbols"])
        assert result.exit_code == 0
        assert "EURUSD" in result.output
        assert "XAUUSD" in result.output

        result = runner.invoke(cli, ["days", "--limit", "1"])
        assert result.exit_code == 0
        assert "2024-01-01" in result.output
        assert "2024-01-02" in result.output

    def test_export_stdout(self, runner, home, log_file):
        runner.invoke(cli, ["import", "123456", str(log_file)])

        result = runner.invoke(cli, ["export", "-a", "123456"])

        assert result.exit_code == 0
        summary = json.loads(result.output)
        assert summary["account"]["id"] == "123456"
        assert summary["account"]["deposits"] == 1000
        assert summary["metrics"]["trades"] == 3
        assert summary["metrics"]["profitFactor"] == 3.25

    def test_export_file(self, runner, home, log_file, tmp_path):
        runner.invoke(cli, ["import", "123456", str(log_file)])
        output = tmp_path / "out.json"

        result = runner.invoke(cli, ["export", "-o", str(output)])

        assert result.exit_code == 0
        assert json.loads(output.read_text())["metrics"]["trades"] == 3

    def test_reports_without_data(self, runner, home):
        result = runner.invoke(cli, ["metrics"])
        assert result.exit_code == 0
        assert "No records stored" in result.output

        result = runner.invoke(cli, ["export"])
        assert result.exit_code == 1

    def test_import_rejects_non_array(self, runner, home, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"trades": []}')

        result = runner.invoke(cli, ["import", "1", str(path)])

        assert result.exit_code == 1
        assert "Could not read trade log" in result.output

    def test_import_rejects_non_utf8(self, runner, home, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b"[\xff]")

        result = runner.invoke(cli, ["import", "1", str(path)])

        assert result.exit_code == 1
        assert "Could not read trade log" in result.output

    def test_symbols_limit_zero_shows_no_rows(self, runner, home, log_file):
        runner.invoke(cli, ["import", "123456", str(log_file)])

        result = runner.invoke(cli, ["symbols", "--limit", "0"])

        assert result.exit_code == 0
        assert "Results by Symbol" in result.output
        assert "EURUSD" not in result.output
        assert "XAUUSD" not in result.output

    def test_all_accounts_metrics_follow_the_calendar(self, runner, home, tmp_path):
        first = tmp_path / "1.json"
        first.write_text(json.dumps([{"date": "2024-03-01", "type": "buy", "profit": 100}]))
        second = tmp_path / "2.json"
        second.write_text(json.dumps([{"date": "2024-01-01", "type": "sell", "profit": -100}]))
        runner.invoke(cli, ["import", "1", str(first)])
        runner.invoke(cli, ["import", "2", str(second)])

        result = runner.invoke(cli, ["export"])

        assert result.exit_code == 0
        assert json.loads(result.output)["metrics"]["maxDrawdown"] == 0


class TestSync:
    def test_requires_logs_url(self, runner, home):
        result = runner.invoke(cli, ["sync", "1"])

        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_sync_stores_fetched_ledgers(self, runner, home, monkeypatch):
        write_config(home, '[storage]\nlogs_url = "https://storage.example.test/logs"\n\n[fetch]\nmax_workers = 2\n')
        calls = {}

        def fake_fetch(numbers, base_url, max_workers, timeout):
            calls.update(numbers=numbers, base_url=base_url, max_workers=max_workers)
            trade = Trade(id="5-x-0", date="2024-01-01T00:00:00.000Z", type="buy", profit=7, account_id="5")
            return AccountsData(trades=(trade,))

        monkeypatch.setattr("mt5metrics.ingest.fetch_accounts_trades", fake_fetch)

        result = runner.invoke(cli, ["sync", "5", "6"])

        assert result.exit_code == 0
        assert calls == {
            "numbers": ["5", "6"],
            "base_url": "https://storage.example.test/logs",
            "max_workers": 2,
        }

        result = runner.invoke(cli, ["account", "list"])
        assert "5" in result.output
        assert "6" in result.output

        result = runner.invoke(cli, ["export", "-a", "5"])
        assert json.loads(result.output)["metrics"]["trades"] == 1

    def test_failed_fetch_keeps_stored_ledger(self, runner, home, log_file, monkeypatch):
        runner.invoke(cli, ["import", "123456", str(log_file)])
        write_config(home, '[storage]\nlogs_url = "https://storage.example.test/logs"\n')
        unavailable = httpx.MockTransport(lambda request: httpx.Response(503))

        def fetch_unavailable(*args, **kwargs):
            return logs.fetch_accounts_trades(*args, transport=unavailable, **kwargs)

        monkeypatch.setattr("mt5metrics.ingest.fetch_accounts_trades", fetch_unavailable)

        result = runner.invoke(cli, ["sync"])

        assert result.exit_code == 0
        assert "failed" in result.output
        assert "could not be fetched" in result.output

        result = runner.invoke(cli, ["export", "-a", "123456"])
        assert json.loads(result.output)["metrics"]["trades"] == 3


class TestDashboard:
    def test_dashboard_without_data(self, runner, home):
        result = runner.invoke(cli, ["dashboard"])

        assert result.exit_code == 0
        assert "No records stored" in result.output

    def test_dashboard_month_and_day(self, runner, home, log_file):
        runner.invoke(cli, ["import", "123456", str(log_file)])

        result = runner.invoke(cli, ["dashboard", "--month", "2024-01", "--day", "2024-01-02"])

        assert result.exit_code == 0
        assert "$1,045.00" in result.output
        assert "January 2024" in result.output
        assert "Records on 2024-01-02" in result.output
        assert "XAUUSD" in result.output

    def test_dashboard_rejects_bad_month(self, runner, home):
        result = runner.invoke(cli, ["dashboard", "--month", "January"])

        assert result.exit_code == 2
