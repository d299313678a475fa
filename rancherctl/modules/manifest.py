"""Workload cluster manifests.

Renders the bundled CAPI ``Cluster`` + ``VCluster`` template for a given
cluster name and control-plane endpoint. The output is applied with
``kubectl apply -f`` once the vcluster provider is installed.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger("rancherctl.manifest")

TEMPLATE = Path(__file__).resolve().parent.parent / "manifests" / "vcluster-cluster.yaml"


def load_template(path: Path = TEMPLATE) -> List[Dict[str, Any]]:
    with open(path) as f:
        return [doc for doc in yaml.safe_load_all(f) if doc]


def render_vcluster_cluster(
    name: str,
    endpoint_host: Optional[str] = None,
    port: int = 443,
    vcluster_version: Optional[str] = None,
    template: Path = TEMPLATE,
) -> List[Dict[str, Any]]:
    """Return the Cluster and VCluster documents for ``name``.

    endpoint_host defaults to ``<name>.default.svc``.
    """
    endpoint_host = endpoint_host or f"{name}.default.svc"
    docs = load_template(template)

    for doc in docs:
        doc["metadata"]["name"] = name
        spec = doc["spec"]
        if doc["kind"] == "Cluster":
            spec["controlPlaneRef"]["name"] = name
            spec["infrastructureRef"]["name"] = name
        elif doc["kind"] == "VCluster":
            spec["controlPlaneEndpoint"] = {"host": endpoint_host, "port": port}
            release = spec["helmRelease"]
            if vcluster_version:
                release["chart"]["version"] = vcluster_version
            # chart values are an embedded YAML string
            values = yaml.safe_load(release.get("values") or "") or {}
            proxy = values.setdefault("controlPlane", {}).setdefault("proxy", {})
            proxy["extraSANs"] = [endpoint_host]
            release["values"] = yaml.safe_dump(values, default_flow_style=False, sort_keys=False).rstrip("\n")
    return docs


def dump_manifest(docs: List[Dict[str, Any]]) -> str:
    return yaml.safe_dump_all(docs, default_flow_style=False, sort_keys=False)
