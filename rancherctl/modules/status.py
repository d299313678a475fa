from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import MarkerFormatError, MarkerNotFoundError
from ..marker import read_marker
from .components import RANCHER_READY_REPLICAS


def check_status(probe, marker_path: Optional[Path] = None) -> Dict[str, Any]:
    try:
        record = read_marker(marker_path).model_dump()
    except MarkerNotFoundError:
        record = None
    except MarkerFormatError as e:
        record = {"error": str(e)}

    api_ready = probe.api_ready()
    components = {}
    if api_ready:
        replicas = probe.deployment_available_replicas("cattle-system", "rancher")
        components = {
            "cert-manager": probe.namespace_exists("cert-manager"),
            "ingress-nginx": probe.pods_running("ingress-nginx", "app.kubernetes.io/name=ingress-nginx"),
            "rancher": replicas is not None and replicas >= RANCHER_READY_REPLICAS,
            "capi": probe.namespace_exists("rancher-turtles-system"),
            "k3k": probe.namespace_exists("k3k-system"),
        }
    return {
        "marker": record,
        "api_ready": api_ready,
        "components": components,
    }
