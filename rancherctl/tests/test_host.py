import logging

import pytest

from rancherctl.errors import CommandError, UnsupportedEnvironmentError
from rancherctl.modules import host as host_module
from rancherctl.modules.host import Host, detect_sudo
from rancherctl.utils import redact_command, run_command


def test_redact_command():
    cmd = ["helm", "upgrade", "--set", "bootstrapPassword=s3cret", "--set", "hostname=x"]
    rendered = redact_command(cmd)
    assert "s3cret" not in rendered
    assert "bootstrapPassword=[REDACTED]" in rendered
    assert "hostname=x" in rendered


def test_run_command_failure():
    with pytest.raises(CommandError) as exc:
        run_command(["false"])
    assert exc.value.returncode == 1


def test_run_command_missing_binary():
    with pytest.raises(CommandError) as exc:
        run_command(["rancherctl-no-such-binary"])
    assert exc.value.returncode == 127


def test_run_command_unchecked():
    assert run_command(["false"], check=False).returncode == 1


def test_detect_sudo_as_root(monkeypatch):
    monkeypatch.setattr(host_module.os, "geteuid", lambda: 0)
    assert detect_sudo() == []


def test_detect_sudo_without_sudo(monkeypatch):
    monkeypatch.setattr(host_module.os, "geteuid", lambda: 1000)
    monkeypatch.setattr(host_module.shutil, "which", lambda name: None)
    with pytest.raises(UnsupportedEnvironmentError, match="root or sudo"):
        detect_sudo()


def test_privileged_commands_get_sudo(monkeypatch):
    calls = []
    monkeypatch.setattr(host_module, "run_command", lambda cmd, **kwargs: calls.append(cmd))

    host = Host(sudo=["sudo"])
    host.run(["systemctl", "start", "rke2-server"], privileged=True)
    host.run(["helm", "repo", "update"])

    assert calls == [["sudo", "systemctl", "start", "rke2-server"], ["helm", "repo", "update"]]


def test_dry_run_runs_nothing(monkeypatch, tmp_path, caplog):
    caplog.set_level(logging.INFO, logger="rancherctl")

    def refuse(*args, **kwargs):
        raise AssertionError("executed")

    monkeypatch.setattr(host_module, "run_command", refuse)
    host = Host(dry_run=True, sudo=[])

    result = host.run(["rm", "-rf", "/var/lib/rancher"], privileged=True)
    host.write_file(tmp_path / "config.yaml", "disable: []\n")
    host.download("https://example.invalid/helm.tar.gz", tmp_path / "helm.tar.gz")

    assert result.returncode == 0
    assert list(tmp_path.iterdir()) == []
    assert "[dry-run] would run: rm -rf /var/lib/rancher" in caplog.text


def test_write_file_without_sudo(tmp_path):
    path = tmp_path / "etc" / "config.yaml"
    Host(sudo=[]).write_file(path, "disable: []\n", mode=0o600)
    assert path.read_text() == "disable: []\n"
    assert path.stat().st_mode & 0o777 == 0o600
