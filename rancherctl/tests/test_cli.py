import pytest
from typer.testing import CliRunner

from rancherctl.cli import app, main
from rancherctl.config import Config
from rancherctl.models import RunState
from conftest import FakeHost

runner = CliRunner()


@pytest.fixture
def state_paths(tmp_path, monkeypatch):
    marker = tmp_path / "setup.meta"
    audit = tmp_path / "log" / "setup.log"
    monkeypatch.setattr(Config, "MARKER_PATH", marker)
    monkeypatch.setattr(Config, "AUDIT_LOG", audit)
    return marker, audit


@pytest.fixture
def install_calls(monkeypatch):
    calls = []

    def fake_install(options):
        calls.append(options)
        return RunState(rancher=True)

    monkeypatch.setattr("rancherctl.commands.install.install", fake_install)
    return calls


def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("install", "uninstall", "status", "manifest"):
        assert command in result.stdout


def test_install_help_lists_options():
    result = runner.invoke(app, ["install", "--help"])
    assert "--ingress-mode" in result.stdout
    assert "--capi-provider" in result.stdout


def test_main_help_exits_zero():
    assert main(["--help"]) == 0


def test_unknown_flag_exits_one(state_paths, install_calls):
    _, audit = state_paths
    assert main(["install", "--no-such-flag"]) == 1
    assert install_calls == []
    assert "[ERROR] Invalid arguments: install --no-such-flag" in audit.read_text(encoding="utf-8")


def test_invalid_ingress_mode_exits_one(state_paths, install_calls):
    _, audit = state_paths
    assert main(["install", "--ingress-mode=bogus"]) == 1
    assert install_calls == []
    assert "[ERROR] Invalid arguments: install --ingress-mode=bogus" in audit.read_text(encoding="utf-8")


def test_install_options_forwarded(state_paths, install_calls):
    code = main([
        "install", "--hostname", "rancher.example.com", "--cert-type", "letsencrypt",
        "--email", "ops@example.com", "--ingress-mode", "nodeport",
        "--capi-provider", "vcluster", "--bootstrap-password", "s3cret",
    ])

    assert code == 0
    options = install_calls[0]
    assert options.hostname == "rancher.example.com"
    assert options.tls_source == "letsEncrypt"
    assert options.ingress_mode.value == "nodeport"
    assert options.capi_provider.value == "vcluster"
    assert options.bootstrap_password == "s3cret"
    assert options.force is False


def test_generated_password_only_on_console(state_paths, install_calls):
    _, audit = state_paths

    result = runner.invoke(app, ["install"])

    assert result.exit_code == 0
    password = install_calls[0].bootstrap_password
    assert password.startswith("CHANGEME-")
    assert f"Rancher bootstrap password: {password}" in result.stdout
    assert password not in audit.read_text(encoding="utf-8")
    assert "Setup complete" in audit.read_text(encoding="utf-8")


def test_blank_hostname_is_a_configuration_error(state_paths, install_calls):
    _, audit = state_paths
    assert main(["install", "--hostname", " "]) == 1
    assert install_calls == []
    assert "[ERROR] Invalid option" in audit.read_text(encoding="utf-8")


def test_install_with_marker_exits_zero(state_paths):
    marker, audit = state_paths
    marker.write_text("installed_by=rancherctl\n")

    assert main(["install"]) == 0
    assert "Marker file found" in audit.read_text(encoding="utf-8")


def test_uninstall_without_marker_exits_one(state_paths, monkeypatch):
    _, audit = state_paths
    monkeypatch.setattr("rancherctl.commands.uninstall.Host", FakeHost)

    assert main(["uninstall"]) == 1
    assert "[ERROR] Install marker not found" in audit.read_text(encoding="utf-8")


def test_unwritable_audit_log_exits_one(state_paths, tmp_path, monkeypatch):
    blocker = tmp_path / "file"
    blocker.write_text("")
    monkeypatch.setattr(Config, "AUDIT_LOG", blocker / "setup.log")
    assert main(["install"]) == 1
