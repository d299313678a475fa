"""Configuration management for the rancherctl application."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Application configuration with sensible defaults."""

    INSTALLED_BY: str = "rancherctl"

    # Persisted state
    MARKER_PATH: Path = Path(os.getenv(
        "RANCHERCTL_MARKER_PATH", "/usr/local/share/setup-rke2-cluster.meta"
    ))
    AUDIT_LOG: Path = Path(os.getenv(
        "RANCHERCTL_AUDIT_LOG", "/var/log/setup-rke2-cluster.log"
    ))

    # RKE2 API readiness poll (in seconds)
    WAIT_INTERVAL: int = int(os.getenv("RANCHERCTL_WAIT_INTERVAL", "3"))
    MAX_WAIT: int = int(os.getenv("RANCHERCTL_MAX_WAIT", "300"))

    # Rollout timeouts passed to kubectl
    ROLLOUT_TIMEOUT: str = os.getenv("RANCHERCTL_ROLLOUT_TIMEOUT", "3m")
    RANCHER_ROLLOUT_TIMEOUT: str = os.getenv("RANCHERCTL_RANCHER_ROLLOUT_TIMEOUT", "10m")
    UNINSTALL_TIMEOUT: str = os.getenv("RANCHERCTL_UNINSTALL_TIMEOUT", "60s")

    # Pinned versions
    HELM_VERSION: str = os.getenv("RANCHERCTL_HELM_VERSION", "v3.14.0")
    CERT_MANAGER_VERSION: str = os.getenv("RANCHERCTL_CERT_MANAGER_VERSION", "v1.14.4")
    TURTLES_VERSION: str = os.getenv("RANCHERCTL_TURTLES_VERSION", "v0.16.0")

    # Download locations
    RKE2_INSTALL_URL: str = "https://get.rke2.io"
    HELM_URL: str = "https://get.helm.sh/helm-{version}-linux-{arch}.tar.gz"
    CLUSTERCTL_URL: str = (
        "https://github.com/kubernetes-sigs/cluster-api/releases/latest/download/clusterctl-linux-{arch}"
    )
    DOWNLOAD_TIMEOUT: int = int(os.getenv("RANCHERCTL_DOWNLOAD_TIMEOUT", "120"))

    # Host paths
    BIN_DIR: Path = Path("/usr/local/bin")
    RKE2_CONFIG_DIR: Path = Path("/etc/rancher/rke2")
    RKE2_KUBECONFIG: Path = Path("/etc/rancher/rke2/rke2.yaml")
    RKE2_KUBECTL: Path = Path("/var/lib/rancher/rke2/bin/kubectl")
    KUBECONFIG: Path = Path(os.path.expanduser(os.getenv("KUBECONFIG", "~/.kube/config")))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "[%(levelname)s] %(message)s")

    # Security
    REDACT_KEYS: tuple = ("password", "secret", "token")
