"""RKE2 service management.

Installs RKE2 through the upstream installer script and removes it again.
"""
import logging
import os
from pathlib import Path

import yaml

from ...config import Config

logger = logging.getLogger("rancherctl.rke2.service")

SERVICE = "rke2-server"

# The ingress controller is installed separately through Helm.
SERVER_CONFIG = {"disable": ["rke2-ingress-nginx"]}

RKE2_DATA_DIRS = ("/etc/rancher", "/var/lib/rancher", "/var/lib/etcd")
RKE2_BINARIES = ("rke2", "rke2-killall.sh", "rke2-uninstall.sh")


def install_rke2(host, kubeconfig: Path = Config.KUBECONFIG) -> None:
    """Install and start rke2-server, then copy its kubeconfig for the user."""
    script = host.fetch_text(Config.RKE2_INSTALL_URL)
    host.run(["sh", "-"], privileged=True, input=script)

    logger.info("Disabling RKE2 bundled ingress-nginx...")
    host.write_file(
        Config.RKE2_CONFIG_DIR / "config.yaml",
        yaml.safe_dump(SERVER_CONFIG, default_flow_style=False),
        mode=0o600,
    )

    host.run(["systemctl", "enable", SERVICE], privileged=True)
    host.run(["systemctl", "start", SERVICE], privileged=True)

    kubeconfig = Path(kubeconfig)
    kubeconfig.parent.mkdir(parents=True, exist_ok=True)
    host.run(["cp", str(Config.RKE2_KUBECONFIG), str(kubeconfig)], privileged=True)
    host.run(["chown", f"{os.getuid()}:{os.getgid()}", str(kubeconfig)], privileged=True)
    os.environ["KUBECONFIG"] = str(kubeconfig)


def uninstall_rke2(host) -> None:
    logger.info("Uninstalling RKE2...")
    host.run(["systemctl", "stop", SERVICE], privileged=True, check=False)
    host.run(["systemctl", "disable", SERVICE], privileged=True, check=False)
    host.remove(*RKE2_DATA_DIRS, recursive=True)
    host.remove(*(Config.BIN_DIR / name for name in RKE2_BINARIES))
