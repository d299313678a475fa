import logging
import os
from pathlib import Path
from typing import Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from ..config import Config

logger = logging.getLogger("rancherctl.kube")


def resolve_kubeconfig(path: Optional[str] = None) -> Path:
    """
    Resolve the kubeconfig to use: an explicit path, then $KUBECONFIG,
    then the configured default.
    """
    if path:
        return Path(os.path.expanduser(path))
    if os.environ.get("KUBECONFIG"):
        return Path(os.path.expanduser(os.environ["KUBECONFIG"]))
    return Config.KUBECONFIG


class KubeProbe:
    """Read-only readiness queries against the live cluster.

    Every query builds a fresh API client from the kubeconfig on disk, so a
    result is never reused across checks. Any failure to reach the API
    counts as "not ready".
    """

    def __init__(self, kubeconfig: Optional[str] = None, request_timeout: int = 5):
        self._kubeconfig = kubeconfig
        self.request_timeout = request_timeout

    @property
    def kubeconfig(self) -> Path:
        return resolve_kubeconfig(self._kubeconfig)

    def _client(self) -> client.ApiClient:
        return config.new_client_from_config(config_file=str(self.kubeconfig))

    def kubeconfig_exists(self) -> bool:
        return self.kubeconfig.is_file()

    def api_ready(self) -> bool:
        if not self.kubeconfig_exists():
            return False
        try:
            with self._client() as api:
                client.CoreV1Api(api).list_node(_request_timeout=self.request_timeout)
            return True
        except Exception as e:
            logger.debug(f"API not ready: {e}")
            return False

    def namespace_exists(self, name: str) -> bool:
        try:
            with self._client() as api:
                client.CoreV1Api(api).read_namespace(name, _request_timeout=self.request_timeout)
            return True
        except ApiException as e:
            if e.status != 404:
                logger.debug(f"Namespace lookup for {name} failed: {e.reason}")
            return False
        except Exception as e:
            logger.debug(f"Namespace lookup for {name} failed: {e}")
            return False

    def deployment_available_replicas(self, namespace: str, name: str) -> Optional[int]:
        """Return availableReplicas, or None if the deployment does not exist."""
        try:
            with self._client() as api:
                deployment = client.AppsV1Api(api).read_namespaced_deployment(
                    name, namespace, _request_timeout=self.request_timeout
                )
        except ApiException as e:
            if e.status != 404:
                logger.debug(f"Deployment lookup for {namespace}/{name} failed: {e.reason}")
            return None
        except Exception as e:
            logger.debug(f"Deployment lookup for {namespace}/{name} failed: {e}")
            return None
        return (deployment.status.available_replicas or 0) if deployment.status else 0

    def pods_running(self, namespace: str, label_selector: str) -> bool:
        """True if any pod matching the selector is in phase Running."""
        try:
            with self._client() as api:
                pods = client.CoreV1Api(api).list_namespaced_pod(
                    namespace,
                    label_selector=label_selector,
                    _request_timeout=self.request_timeout,
                )
        except Exception as e:
            logger.debug(f"Pod lookup in {namespace} failed: {e}")
            return False
        return any(pod.status and pod.status.phase == "Running" for pod in pods.items)
