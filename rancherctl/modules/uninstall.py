"""Management cluster teardown.

Reads the install marker (the one fatal precondition) and removes
components in reverse install order. In-cluster releases are removed
whenever their namespace exists; host binaries only when the marker says
this tool installed them. Every removal is best-effort.
"""
import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from ..config import Config
from ..errors import CommandError, SetupError
from ..logging import close_audit_log
from ..marker import read_marker
from ..models import InstallRecord
from .rke2 import uninstall_rke2

logger = logging.getLogger("rancherctl.uninstall")

# (label, helm release, namespace), reverse of install order
CLUSTER_RELEASES = [
    ("k3k", "k3k", "k3k-system"),
    ("CAPI", "rancher-turtles", "rancher-turtles-system"),
    ("Rancher", "rancher", "cattle-system"),
    ("NGINX", "nginx", "ingress-nginx"),
    ("cert-manager", "cert-manager", "cert-manager"),
]

KUBECONFIG_EXPORT = f"KUBECONFIG={Config.RKE2_KUBECONFIG}"


class Uninstaller:

    def __init__(
        self,
        host,
        probe,
        marker_path: Optional[Path] = None,
        audit_log: Optional[Path] = None,
        bashrc: Optional[Path] = None,
    ):
        self.host = host
        self.probe = probe
        self.marker_path = Path(marker_path or Config.MARKER_PATH)
        self.audit_log = Path(audit_log or Config.AUDIT_LOG)
        self.bashrc = Path(bashrc or Path.home() / ".bashrc")
        self.failures: List[str] = []

    def _best_effort(self, name: str, func: Callable, *args) -> None:
        try:
            func(*args)
        except (SetupError, OSError, ValueError, subprocess.CalledProcessError) as e:
            logger.warning(f"Failed to remove {name}: {e}. Continuing.")
            self.failures.append(name)

    def remove_release(self, label: str, release: str, namespace: str) -> None:
        if not self.probe.namespace_exists(namespace):
            return
        logger.info(f"Removing {label}...")
        self.host.run(
            ["helm", "uninstall", release, "-n", namespace, "--timeout", Config.UNINSTALL_TIMEOUT],
            check=False,
        )
        try:
            self.host.run([
                "kubectl", "delete", "ns", namespace,
                f"--timeout={Config.UNINSTALL_TIMEOUT}", "--wait=true",
            ])
        except CommandError:
            logger.warning(f"Timeout deleting {namespace}. May require manual cleanup.")

    def remove_binary(self, name: str, installed: bool) -> None:
        if not installed:
            logger.info(f"{name} was not installed by this tool. Skipping.")
            return
        logger.info(f"Removing {name}...")
        self.host.remove(Config.BIN_DIR / name.lower())

    def remove_kubectl_symlink(self) -> None:
        link = Config.BIN_DIR / "kubectl"
        if link.is_symlink() and link.resolve() == Config.RKE2_KUBECTL.resolve():
            logger.info("Removing kubectl symlink...")
            self.host.remove(link)

    def remove_rke2(self, installed: bool) -> None:
        if not installed:
            logger.info("RKE2 was not installed by this tool. Skipping.")
            return
        uninstall_rke2(self.host)

    def clean_bashrc(self) -> None:
        if not self.bashrc.is_file():
            return
        # compared as bytes; a .bashrc need not be valid UTF-8
        if KUBECONFIG_EXPORT.encode() not in self.bashrc.read_bytes():
            return
        logger.info(f"Removing KUBECONFIG from {self.bashrc}")
        self.host.run(["sed", "-i", f"\\|{KUBECONFIG_EXPORT}|d", str(self.bashrc)])

    def clean_marker_and_log(self) -> None:
        logger.info("Removing audit log and marker file...")
        if not self.host.dry_run:
            close_audit_log(self.audit_log)
        self.host.remove(self.marker_path, self.audit_log)

    def run(self) -> InstallRecord:
        record = read_marker(self.marker_path)

        for label, release, namespace in CLUSTER_RELEASES:
            self._best_effort(label, self.remove_release, label, release, namespace)
        self._best_effort("Helm", self.remove_binary, "Helm", record.helm)
        self._best_effort("clusterctl", self.remove_binary, "clusterctl", record.clusterctl)
        self._best_effort("kubectl symlink", self.remove_kubectl_symlink)
        self._best_effort("RKE2", self.remove_rke2, record.rke2)
        self._best_effort("bashrc", self.clean_bashrc)
        self._best_effort("marker", self.clean_marker_and_log)

        if self.failures:
            logger.warning(f"Some steps need manual cleanup: {', '.join(self.failures)}")
        return record
