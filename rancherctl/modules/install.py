"""Management cluster installation.

Order: marker check, environment probe, curl, RKE2 (+ kubectl),
clusterctl, helm, in-cluster components, marker.
"""
import logging
import platform
import time
from pathlib import Path
from typing import Callable, Optional

from .. import __version__
from ..config import Config
from ..marker import marker_exists, write_marker
from ..models import InstallOptions, RunState
from ..utils.kube import KubeProbe
from .components import ComponentInstaller
from .dependencies import ensure_clusterctl, ensure_curl, ensure_helm
from .environment import OS_RELEASE, detect_arch, detect_os, disable_conflicting_services
from .host import Host
from .rke2 import ClusterBootstrapper
from .steps import StepRunner

logger = logging.getLogger("rancherctl.install")


def install(
    options: InstallOptions,
    host: Optional[Host] = None,
    probe: Optional[KubeProbe] = None,
    marker_path: Optional[Path] = None,
    os_release: Path = OS_RELEASE,
    machine: Optional[str] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Optional[RunState]:
    """Install the management cluster.

    Returns:
        RunState of this run, or None when an existing marker made the run a
        no-op.
    """
    marker_path = Path(marker_path or Config.MARKER_PATH)
    if marker_exists(marker_path) and not options.force and not options.dry_run:
        logger.info("Marker file found. Cluster appears to be set up. Use --force to reinstall.")
        return None

    host = host or Host(dry_run=options.dry_run)
    probe = probe or KubeProbe()
    state = RunState()

    os_info = detect_os(os_release)
    machine = machine or platform.machine()
    arch = detect_arch(machine)
    components = ComponentInstaller(host, probe, options, state)

    disable_conflicting_services(host, os_info)
    ensure_curl(host, os_info.package_manager)

    ClusterBootstrapper(host, probe, force=options.force, sleep=sleep).ensure(state)

    state.clusterctl = ensure_clusterctl(host, arch)
    state.helm = ensure_helm(host, arch)

    StepRunner(host).run(components.steps())

    record = state.to_record(Config.INSTALLED_BY, __version__, machine)
    write_marker(host, record, marker_path)
    return state
