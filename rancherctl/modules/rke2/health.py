"""RKE2 API readiness polling."""
import logging
import time
from typing import Callable

from ...config import Config
from ...errors import ReadinessTimeoutError

logger = logging.getLogger("rancherctl.rke2.health")

TIMEOUT_HINT = "Check RKE2 logs (journalctl -u rke2-server) and KUBECONFIG permissions."


def wait_for_api(
    probe,
    interval: int = Config.WAIT_INTERVAL,
    max_wait: int = Config.MAX_WAIT,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Poll until the kubeconfig exists and the API lists nodes.

    Checks run at 0, interval, 2*interval, ... and once more at max_wait when
    interval does not divide it. Elapsed time is counted from the sleeps
    rather than wall-clock time.

    Args:
        probe: KubeProbe-like object
        interval: Seconds between checks
        max_wait: Ceiling in seconds

    Returns:
        int: Seconds elapsed when the API became ready

    Raises:
        ReadinessTimeoutError: If the check at max_wait still fails
    """
    logger.info("Waiting for RKE2 to become ready...")
    elapsed = 0
    while True:
        if not probe.kubeconfig_exists():
            logger.info(f"Kubeconfig not found at {probe.kubeconfig} yet...")
        elif not probe.api_ready():
            logger.info("kubectl not ready yet, retrying...")
        else:
            logger.info("Kubeconfig is present and kubectl is working.")
            return elapsed

        if elapsed >= max_wait:
            raise ReadinessTimeoutError(
                f"Timed out after {max_wait}s waiting for RKE2/kubectl to become ready.",
                hint=TIMEOUT_HINT,
            )

        # the last wait is shortened so the final check lands on max_wait
        step = min(interval, max_wait - elapsed)
        sleep(step)
        elapsed += step
