"""
RKE2 bootstrap for the management cluster.

The bootstrapper moves through not-installed -> installing ->
waiting-for-api -> ready, and skips straight to ready when a working
cluster already answers.
"""
import logging
import time
from typing import Callable

from ...config import Config
from ...models import ClusterState, RunState
from ..dependencies import ensure_kubectl
from .health import wait_for_api
from .service import install_rke2, uninstall_rke2

logger = logging.getLogger("rancherctl.rke2")

__all__ = [
    'ClusterBootstrapper',
    'install_rke2',
    'uninstall_rke2',
    'wait_for_api',
]


class ClusterBootstrapper:
    """Ensures a single-node RKE2 server is installed and answering."""

    def __init__(
        self,
        host,
        probe,
        force: bool = False,
        interval: int = Config.WAIT_INTERVAL,
        max_wait: int = Config.MAX_WAIT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.host = host
        self.probe = probe
        self.force = force
        self.interval = interval
        self.max_wait = max_wait
        self.sleep = sleep
        self.state = ClusterState.NOT_INSTALLED

    def cluster_ready(self) -> bool:
        return bool(self.host.which("kubectl")) and self.probe.api_ready()

    def ensure(self, state: RunState) -> ClusterState:
        if not self.force and not self.host.dry_run and self.cluster_ready():
            logger.info("Cluster already running. Skipping RKE2 install.")
            self.state = ClusterState.READY
            return self.state

        self.state = ClusterState.INSTALLING
        logger.info("Installing RKE2...")
        if not self.host.dry_run:
            install_rke2(self.host, self.probe.kubeconfig)
            state.rke2 = True

        self.state = ClusterState.WAITING_FOR_API
        ensure_kubectl(self.host)
        if self.host.dry_run:
            logger.info("[dry-run] skipping wait for the RKE2 API")
        else:
            wait_for_api(self.probe, self.interval, self.max_wait, self.sleep)

        self.state = ClusterState.READY
        return self.state
