import logging
import subprocess
from pathlib import Path

import pytest

from rancherctl.errors import CommandError
from rancherctl.modules.host import Host


class FakeHost(Host):
    """Host that records commands instead of running them."""

    def __init__(self, dry_run=False, tools=(), fail_on=()):
        super().__init__(dry_run=dry_run, sudo=[])
        self.tools = set(tools)
        self.fail_on = [list(prefix) for prefix in fail_on]
        self.commands = []
        self.files = {}
        self.downloads = []

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.tools else None

    def run(self, cmd, *, privileged=False, check=True, capture_output=False, input=None, env=None):
        if self.dry_run:
            return super().run(cmd, privileged=privileged, check=check,
                               capture_output=capture_output, input=input, env=env)
        cmd = [str(c) for c in cmd]
        self.commands.append(cmd)
        if check and any(cmd[:len(prefix)] == prefix for prefix in self.fail_on):
            raise CommandError(" ".join(cmd), 1, "boom")
        return subprocess.CompletedProcess(cmd, 0, "", "")

    def write_file(self, path, content, mode=0o644):
        if self.dry_run:
            return super().write_file(path, content, mode)
        self.files[Path(path)] = content

    def download(self, url, dest):
        if self.dry_run:
            return super().download(url, dest)
        self.downloads.append(url)
        Path(dest).write_bytes(b"")
        return dest

    def fetch_text(self, url):
        self.downloads.append(url)
        return "#!/bin/sh\necho rke2\n"

    def ran(self, *prefix):
        """True if any recorded command starts with ``prefix``."""
        prefix = list(prefix)
        return any(cmd[:len(prefix)] == prefix for cmd in self.commands)


class FakeProbe:
    """Stand-in for KubeProbe backed by plain sets and dicts."""

    def __init__(self, kubeconfig, api=True, namespaces=(), replicas=None, running=()):
        self.kubeconfig = Path(kubeconfig)
        self.api = api
        self.namespaces = set(namespaces)
        self.replicas = dict(replicas or {})
        self.running = set(running)

    def kubeconfig_exists(self):
        return True

    def api_ready(self):
        return self.api() if callable(self.api) else self.api

    def namespace_exists(self, name):
        return name in self.namespaces

    def deployment_available_replicas(self, namespace, name):
        return self.replicas.get((namespace, name))

    def pods_running(self, namespace, label_selector):
        return namespace in self.running


@pytest.fixture
def os_release(tmp_path):
    path = tmp_path / "os-release"
    path.write_text('NAME="Ubuntu"\nID=ubuntu\nVERSION_ID="22.04"\n')
    return path


@pytest.fixture
def kubeconfig(tmp_path, monkeypatch):
    monkeypatch.delenv("KUBECONFIG", raising=False)
    return tmp_path / "kube" / "config"


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("rancherctl")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
