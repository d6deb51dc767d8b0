"""Tests for the command line interface."""

# pylint: disable=redefined-outer-name

from pathlib import Path

import pytest
from click.testing import CliRunner

from smbwatch import cli as cli_module
from smbwatch.cli import cli
from smbwatch.database import CrawlStore, Database, ShareState
from smbwatch.discovery import DiscoveryError


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def fake_network(monkeypatch, connector, make_share):
    connector.add_server(
        "S1",
        shares={
            "public": make_share({"docs": {"a.txt": 10}, "bin": {"b.exe": 20}}),
            "admin": make_share({"secret.txt": 1}),
        },
    )
    connector.add_server("S2", unreachable=True)
    credentials = []

    def build_connector(user, password, domain):
        credentials.append((user, password, domain))
        return connector

    monkeypatch.setattr(cli_module, "SmbConnector", build_connector)
    return credentials


class TestCrawlCommand:
    """Tests for the crawl command."""

    def test_requires_a_server_source(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(cli, ["crawl", "--pass", "x", "--database", str(tmp_path / "t.db")])

        assert result.exit_code == 1
        assert "--server" in result.output

    def test_crawls_servers(self, runner: CliRunner, tmp_path: Path, fake_network):
        db_path = tmp_path / "t.db"
        result = runner.invoke(
            cli,
            [
                "crawl",
                "--server", "S1,S2",
                "--user", "alice",
                "--pass", "secret",
                "--database", str(db_path),
                "--exclude-shares", "admin",
                "--exclude-extensions", "exe",
                "--stats-interval", "0",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "1 of 2 servers finished" in result.output
        assert fake_network == [("alice", "secret", "")]

        with Database(db_path) as db:
            store = CrawlStore(db)
            assert store.get_share("S1", "public").state == ShareState.FINISHED
            assert store.get_share("S1", "admin") is None
            assert [r.name for r in store.list_files()] == ["a.txt"]

    def test_prompts_for_password(self, runner: CliRunner, tmp_path: Path, fake_network):
        result = runner.invoke(
            cli,
            ["crawl", "--server", "S1", "--database", str(tmp_path / "t.db"),
             "--stats-interval", "0"],
            input="hunter2\n",
        )

        assert result.exit_code == 0, result.output
        assert fake_network == [("", "hunter2", "")]

    def test_adds_ldap_servers(self, runner: CliRunner, tmp_path: Path, fake_network, monkeypatch):
        calls = []

        def discover(url, bind_dn, password, base_dn, search_filter):
            calls.append((url, bind_dn, base_dn, search_filter))
            return ["S1"]

        monkeypatch.setattr(cli_module, "discover_servers", discover)
        result = runner.invoke(
            cli,
            [
                "crawl",
                "--pass", "pw",
                "--ldap-server", "ldaps://dc01",
                "--ldap-dn", "CN=svc,DC=corp,DC=local",
                "--database", str(tmp_path / "t.db"),
                "--stats-interval", "0",
            ],
        )

        assert result.exit_code == 0, result.output
        assert calls == [
            ("ldaps://dc01", "CN=svc,DC=corp,DC=local", "DC=corp,DC=local",
             "(OperatingSystem=*server*)")
        ]
        assert "1 of 1 servers finished" in result.output

    def test_discovery_failure_exits(self, runner: CliRunner, tmp_path: Path, monkeypatch):
        def discover(*args):
            raise DiscoveryError("bind failed")

        monkeypatch.setattr(cli_module, "discover_servers", discover)
        result = runner.invoke(
            cli,
            ["crawl", "--pass", "pw", "--ldap-server", "ldap://dc01",
             "--ldap-dn", "CN=svc,DC=corp", "--database", str(tmp_path / "t.db")],
        )

        assert result.exit_code == 1
        assert "bind failed" in result.output


class TestStatusCommand:
    """Tests for the status command."""

    def test_no_database(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(cli, ["status", "--database", str(tmp_path / "missing.db")])

        assert result.exit_code == 0
        assert "No database found" in result.output

    def test_lists_shares(self, runner: CliRunner, tmp_path: Path):
        db_path = tmp_path / "t.db"
        with Database(db_path) as db:
            store = CrawlStore(db)
            store.insert_share_started("fs01", "public")
            store.update_share_state("fs01", "public", ShareState.FINISHED)

        result = runner.invoke(cli, ["status", "--database", str(db_path)])

        assert result.exit_code == 0
        assert "fs01" in result.output
        assert "finished" in result.output
        assert "Files: 0" in result.output


class TestClearFailedCommand:
    """Tests for the clear-failed command."""

    def test_clears_failed_shares(self, runner: CliRunner, tmp_path: Path):
        db_path = tmp_path / "t.db"
        with Database(db_path) as db:
            store = CrawlStore(db)
            store.insert_share_started("fs01", "locked")
            store.update_share_state("fs01", "locked", ShareState.FAILED)
            store.insert_share_started("fs01", "public")

        result = runner.invoke(cli, ["clear-failed", "--database", str(db_path)])

        assert result.exit_code == 0
        assert "Cleared 1 failed shares" in result.output
        with Database(db_path) as db:
            store = CrawlStore(db)
            assert not store.share_exists("fs01", "locked")
            assert store.share_exists("fs01", "public")
