"""Host tool installation.

Each ``ensure_*`` function returns True only when this run installed the
tool. That flag decides whether uninstall may remove it later.
"""
import logging
import tarfile
import tempfile
from pathlib import Path

from ..config import Config
from ..errors import DependencyError
from .environment import PackageManager

logger = logging.getLogger("rancherctl.dependencies")


def ensure_curl(host, package_manager: PackageManager) -> bool:
    if host.which("curl"):
        logger.debug("curl already installed.")
        return False
    logger.info("Installing curl...")
    if host.dry_run:
        return False
    host.run(package_manager.update, privileged=True)
    host.run(package_manager.install + ["curl"], privileged=True)
    return True


def ensure_helm(host, arch: str, version: str = Config.HELM_VERSION) -> bool:
    if host.which("helm"):
        logger.info("Helm already installed.")
        return False
    logger.info(f"Installing Helm {version} for {arch}")
    if host.dry_run:
        return False

    url = Config.HELM_URL.format(version=version, arch=arch)
    with tempfile.TemporaryDirectory() as tmp:
        archive = host.download(url, Path(tmp) / "helm.tar.gz")
        member = f"linux-{arch}/helm"
        try:
            with tarfile.open(archive, "r:gz") as tar:
                tar.extract(member, path=tmp)
        except (tarfile.TarError, KeyError) as e:
            raise DependencyError(f"Unexpected Helm archive from {url}: {e}") from e
        host.install_binary(Path(tmp) / member, Config.BIN_DIR / "helm")
    return True


def ensure_clusterctl(host, arch: str) -> bool:
    if host.which("clusterctl"):
        logger.info("clusterctl already installed.")
        return False
    logger.info(f"Installing the latest version of clusterctl for {arch}")
    if host.dry_run:
        return False

    url = Config.CLUSTERCTL_URL.format(arch=arch)
    with tempfile.TemporaryDirectory() as tmp:
        binary = host.download(url, Path(tmp) / "clusterctl")
        host.install_binary(binary, Config.BIN_DIR / "clusterctl")
    return True


def ensure_kubectl(host) -> bool:
    """Link the kubectl bundled with RKE2 onto the PATH if none is present."""
    if host.which("kubectl"):
        return False
    if not Config.RKE2_KUBECTL.is_file():
        if host.dry_run:
            logger.info("kubectl not found; it will be linked once RKE2 is installed.")
            return False
        raise DependencyError("kubectl not found.")
    logger.info("Linking kubectl...")
    host.run(["ln", "-sf", str(Config.RKE2_KUBECTL), str(Config.BIN_DIR / "kubectl")], privileged=True)
    return True
