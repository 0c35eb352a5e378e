"""
Entry Point Tests

End-to-end runs through the DI container with the network replaced by canned
lists and real child processes.
"""

import asyncio
import logging
import sys
from pathlib import Path

import pytest
from dependency_injector import providers

from blocklist_refresher.__main__ import (
    build_parser,
    command_argv,
    resolve_install_dir,
    run_application,
)
from blocklist_refresher.application.domain import Fetcher, ResourceKind
from blocklist_refresher.application.exceptions import ConfigurationError
from blocklist_refresher.infrastructure.containers import Container
from blocklist_refresher.infrastructure.settings_models import (
    RefreshSettings,
    SupervisorSettings,
    load_section,
)
from blocklist_refresher.settings import load_settings

DOMAINS = "address=/ads.example.com/0.0.0.0"
HOSTNAMES = "0.0.0.0 ads.example.com"


class CannedFetcher(Fetcher):

    def __init__(self, bodies):
        self.bodies = bodies

    def url_for(self, kind):
        return f"https://lists.example.test/{kind.path_segment}.txt"

    async def fetch(self, kind):
        return self.bodies[kind]


def make_container(domains=DOMAINS, hostnames=HOSTNAMES):
    container = Container()
    container.fetcher.override(providers.Object(CannedFetcher({
        ResourceKind.DOMAINS: domains,
        ResourceKind.HOSTNAMES: hostnames,
    })))
    return container


def run_main(argv, container):
    args = build_parser().parse_args(argv)
    asyncio.run(run_application(args, container))


# =============================================================================
# COMMAND LINE
# =============================================================================

class TestCommandLine:

    def test_directory_and_trailing_command(self):
        args = build_parser().parse_args(["-d", "/srv/lists", "unbound", "-d", "-v"])

        assert args.directory == "/srv/lists"
        assert command_argv(args.command) == ["unbound", "-d", "-v"]

    def test_no_command(self):
        args = build_parser().parse_args([])

        assert args.directory is None
        assert command_argv(args.command) == []

    def test_separator_before_command_is_dropped(self):
        assert command_argv(["--", "dnsmasq", "-k"]) == ["dnsmasq", "-k"]

    def test_install_dir_resolution(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert resolve_install_dir("/srv/lists", "/etc/lists") == Path("/srv/lists")
        assert resolve_install_dir(None, "/etc/lists") == Path("/etc/lists")
        assert resolve_install_dir(None, "") == Path.cwd()


# =============================================================================
# CONFIGURATION
# =============================================================================

class TestSettings:

    def test_packaged_defaults(self):
        refresh = load_section(load_settings(), "refresh", RefreshSettings)
        supervisor = load_section(load_settings(), "supervisor", SupervisorSettings)

        assert refresh.base_url.startswith("https://")
        assert not refresh.base_url.endswith("/")
        assert refresh.timeout_seconds > 0
        assert supervisor.stream_limit_bytes >= 1024

    def test_environment_overrides_packaged_defaults(self, monkeypatch):
        monkeypatch.setenv("BLOCKLIST_REFRESHER_REFRESH__BASE_URL", "https://mirror.example.test/lists")
        monkeypatch.setenv("BLOCKLIST_REFRESHER_SUPERVISOR__STREAM_LIMIT_BYTES", "4096")

        settings = load_settings()
        refresh = load_section(settings, "refresh", RefreshSettings)
        supervisor = load_section(settings, "supervisor", SupervisorSettings)

        assert refresh.base_url == "https://mirror.example.test/lists"
        assert refresh.timeout_seconds > 0
        assert supervisor.stream_limit_bytes == 4096

    def test_invalid_section_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError) as excinfo:
            load_section({"refresh": {"base_url": "ftp://lists"}}, "refresh", RefreshSettings)

        assert "[refresh]" in str(excinfo.value)

    def test_missing_required_value_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            load_section({}, "refresh", RefreshSettings)


# =============================================================================
# END TO END
# =============================================================================

class TestRunApplication:

    def test_refresh_and_echo(self, tmp_path, caplog):
        caplog.set_level(logging.INFO)

        run_main(["-d", str(tmp_path), sys.executable, "-c", "print('hello')"], make_container())

        assert (tmp_path / "domains.txt").read_text() == DOMAINS
        assert (tmp_path / "hostnames.txt").read_text() == HOSTNAMES
        assert not (tmp_path / "domains.tmp").exists()
        assert not (tmp_path / "hostnames.tmp").exists()
        forwarded = [r.getMessage() for r in caplog.records if r.name == "ProcessSupervisor"]
        assert "O| hello" in forwarded

    def test_refresh_without_command(self, tmp_path):
        run_main(["-d", str(tmp_path)], make_container())

        assert (tmp_path / "domains.txt").read_text() == DOMAINS

    def test_failing_command_exits_non_zero(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            run_main(
                ["-d", str(tmp_path), sys.executable, "-c", "import sys; sys.exit(3)"],
                make_container(),
            )

        assert excinfo.value.code == 1

    def test_invalid_list_exits_non_zero_and_skips_command(self, tmp_path, caplog):
        caplog.set_level(logging.INFO)
        (tmp_path / "domains.txt").write_text("address=/old.example.com/::\n")

        with pytest.raises(SystemExit) as excinfo:
            run_main(
                ["-d", str(tmp_path), sys.executable, "-c", "print('never')"],
                make_container(domains="address=/ads.example.com/1.2.3.4"),
            )

        assert excinfo.value.code == 1
        assert (tmp_path / "domains.txt").read_text() == "address=/old.example.com/::\n"
        assert not (tmp_path / "hostnames.txt").exists()
        assert "O| never" not in [r.getMessage() for r in caplog.records]
        assert any("invalid domain line" in r.getMessage() for r in caplog.records)

    def test_unreadable_child_output_exits_with_100(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            run_main(
                ["-d", str(tmp_path), sys.executable, "-c",
                 "import sys; sys.stdout.buffer.write(b'\\xff\\n')"],
                make_container(),
            )

        assert excinfo.value.code == 100
